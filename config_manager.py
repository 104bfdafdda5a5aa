#!/usr/bin/env python3
"""
Configuration loading for the Coffee Extractor web app.

Composes a profile from ``config/`` (``default`` or ``development``) with
Hydra, checks it against the dataclass schema in ``config.schema`` and adds
the provider checks that need more than one field. The CLI gets its config
from ``@hydra.main`` directly; the server goes through ``ConfigManager``.
"""

from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from config.schema import CoffeeExtractorConfig, validate_config as validate_schema


LOCAL_HOSTS = ("localhost", "127.0.0.1")


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""
    pass


class ConfigManager:
    """Loads and validates a named configuration profile.

    Example:
        config = ConfigManager().load_config("development", ["server.port=8080"])
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)
        self.config: Optional[DictConfig] = None
        self.schema_class = CoffeeExtractorConfig

    def load_config(self,
                    config_name: str = "default",
                    overrides: Optional[List[str]] = None) -> DictConfig:
        """Compose ``config_name`` from the config directory.

        Args:
            config_name (str): Profile file name without ``.yaml``
            overrides (List[str], optional): Hydra overrides such as
                                           ``"providers.timeout=60"``

        Returns:
            DictConfig: The composed configuration, already validated

        Raises:
            ConfigurationError: If the profile is missing or fails validation
        """
        # compose() refuses to run inside another initialized Hydra context
        if GlobalHydra().is_initialized():
            GlobalHydra.instance().clear()

        try:
            with initialize_config_dir(config_dir=str(self.config_dir.resolve()), version_base=None):
                self.config = compose(config_name=config_name, overrides=overrides or [])
                self.validate_config(self.config)
                return self.config
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration '{config_name}': {e}")

    def validate_config(self, config: DictConfig) -> CoffeeExtractorConfig:
        """Type-check ``config`` against the schema and return the dataclass tree.

        Raises:
            ConfigurationError: If configuration validation fails
        """
        try:
            merged = OmegaConf.merge(OmegaConf.structured(self.schema_class), config)
            typed = validate_schema(OmegaConf.to_container(merged, resolve=True))
        except (OmegaConfBaseException, ValueError) as e:
            raise ConfigurationError(f"Configuration validation failed: {e}")

        self._validate_provider_settings(typed)
        return typed

    def _validate_provider_settings(self, config: CoffeeExtractorConfig) -> None:
        if config.providers.timeout > 300:
            import warnings
            warnings.warn(f"High provider timeout: {config.providers.timeout}s may stall request workers")

        # Bearer tokens must not travel over plain http except to a local stub
        for name in ("github", "openai"):
            url = getattr(config.providers, name).url
            if url and url.startswith("http://"):
                host = urlsplit(url).hostname or ""
                if host not in LOCAL_HOSTS:
                    raise ConfigurationError(f"Provider '{name}' url must use https: {url}")
