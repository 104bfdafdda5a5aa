"""Resolve which provider serves a request and which credential it uses.

Credentials arrive from two configuration slots (github and openai). A key
pasted into the wrong slot is common, so an OpenAI-shaped key found in the
github slot switches the request to the openai provider with a warning.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from errors import CredentialMismatch, MissingCredential


PROVIDER_GITHUB = "github"
PROVIDER_OPENAI = "openai"
KNOWN_PROVIDERS = (PROVIDER_GITHUB, PROVIDER_OPENAI)

OPENAI_KEY_PATTERN = re.compile(r"^sk-")
_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)
_QUOTES = "'\""


@dataclass(frozen=True)
class ProviderSelection:
    provider: str
    credential: str = field(repr=False)
    inferred: bool = False

    @property
    def masked_credential(self) -> str:
        return mask_credential(self.credential)


def normalize_credential(raw: Optional[str]) -> str:
    """Strip surrounding quotes, a leading ``Bearer `` prefix and whitespace.

    Layers are removed until nothing changes, so the result is stable under
    repeated normalization. Nested wrappers are all removed:
    ``Bearer Bearer x`` and ``'"x"'`` both become ``x``.
    """
    value = (raw or "").strip()
    while True:
        stripped = value
        if stripped[:1] and stripped[:1] in _QUOTES:
            stripped = stripped[1:]
        if stripped[-1:] and stripped[-1:] in _QUOTES:
            stripped = stripped[:-1]
        stripped = _BEARER_PREFIX.sub("", stripped.strip()).strip()
        if stripped == value:
            return value
        value = stripped


def looks_like_openai_key(credential: Optional[str]) -> bool:
    return bool(OPENAI_KEY_PATTERN.match(normalize_credential(credential)))


def mask_credential(credential: Optional[str]) -> str:
    if not credential:
        return ""
    if len(credential) <= 8:
        return "*" * len(credential)
    return f"{credential[:4]}...{credential[-4:]}"


def resolve_provider(explicit_choice: Optional[str],
                     github_credential: Optional[str],
                     openai_credential: Optional[str],
                     log: Any = None) -> ProviderSelection:
    """Pick the provider and its credential for one request.

    Precedence: explicit choice > OpenAI-shaped key in the github slot > github.

    Raises:
        MissingCredential: the selected provider has no usable credential
        CredentialMismatch: github was selected but holds an OpenAI-shaped key
    """
    log = log or logger
    gh_token = normalize_credential(github_credential)
    oa_key = normalize_credential(openai_credential)
    gh_is_openai = bool(OPENAI_KEY_PATTERN.match(gh_token))

    choice = (explicit_choice or "").strip().lower()
    inferred = False
    if choice and choice not in KNOWN_PROVIDERS:
        log.warning("Ignoring unknown provider choice", provider=choice, known=list(KNOWN_PROVIDERS))
        choice = ""

    if not choice:
        inferred = True
        if gh_is_openai:
            choice = PROVIDER_OPENAI
            log.warning("Detected an OpenAI-style key in the github credential slot; using the openai provider. "
                        "Consider moving it to OPENAI_API_KEY and setting PROVIDER=openai.")
        else:
            choice = PROVIDER_GITHUB

    if choice == PROVIDER_OPENAI:
        key = oa_key or (gh_token if gh_is_openai else "")
        if not key:
            raise MissingCredential(PROVIDER_OPENAI, "Missing OPENAI_API_KEY for provider 'openai'")
        return ProviderSelection(PROVIDER_OPENAI, key, inferred)

    if not gh_token:
        raise MissingCredential(PROVIDER_GITHUB, "Missing GITHUB_TOKEN for provider 'github'")
    if gh_is_openai:
        raise CredentialMismatch("GITHUB_TOKEN looks like an OpenAI API key (sk-...). "
                                 "Set PROVIDER=openai and use OPENAI_API_KEY instead.")
    return ProviderSelection(PROVIDER_GITHUB, gh_token, inferred)
