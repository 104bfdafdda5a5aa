"""Provider dispatcher that routes a resolved provider selection to its
endpoint spec and performs the completion call.
"""
from typing import Any, Dict, Optional

from loguru import logger


def _config_section(config: Optional[Any], name: str) -> Optional[Any]:
    if config is None:
        return None
    section = getattr(config, name, None)
    if section is None and hasattr(config, 'get'):
        section = config.get(name)
    return section


def _config_value(section: Optional[Any], name: str) -> Optional[Any]:
    if section is None:
        return None
    if isinstance(section, dict):
        return section.get(name)
    return getattr(section, name, None)


def provider_specs() -> Dict[str, Any]:
    # Local import to avoid circular imports at module import time
    from providers import github_models, openai_client

    return {
        github_models.SPEC.name: github_models.SPEC,
        openai_client.SPEC.name: openai_client.SPEC,
    }


def get_provider_spec(provider: str, config: Optional[Any] = None):
    """Return the ProviderSpec for ``provider``.

    Precedence: config.providers.<provider>.url / config.providers.model > built-in default
    """
    specs = provider_specs()
    if provider not in specs:
        raise ValueError(f'Unknown provider: {provider}')
    spec = specs[provider]

    providers_cfg = _config_section(config, 'providers')
    if providers_cfg is None:
        return spec
    provider_cfg = _config_value(providers_cfg, provider)
    return spec.with_overrides(url=_config_value(provider_cfg, 'url'),
                               model=_config_value(providers_cfg, 'model'),
                               user_agent=_config_value(providers_cfg, 'user_agent'))


def call_provider(selection, prompt: str, timeout: float = 30, config: Optional[Any] = None):
    """Send ``prompt`` to the provider named by ``selection``.

    Returns a CompletionResponse; raises NetworkError or an HttpError subclass.
    """
    from provider_client import post_completion

    spec = get_provider_spec(selection.provider, config)
    logger.debug('Calling provider', provider=spec.name, url=spec.url, model=spec.model)
    return post_completion(spec, prompt, selection.credential, timeout=timeout)
