"""
Configuration schema validation for the Coffee Extractor.

This module defines dataclasses that provide type safety and validation
for configuration files. Used with Hydra and OmegaConf for robust
configuration management.

Credentials are deliberately absent from the YAML-backed schema. They are
read per call into ``ExtractionSettings`` so a running process picks up
changed credentials without a restart.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Mapping
import os


@dataclass
class ProviderEndpointConfig:
    """Endpoint override for a single provider."""
    url: Optional[str] = None

    def __post_init__(self):
        if self.url and not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Provider url must be an http(s) URL: {self.url}")


@dataclass
class ProvidersConfig:
    """Remote text-generation provider settings."""
    model: str = "gpt-4o-mini"
    timeout: float = 30
    user_agent: str = "coffee-extractor-script"
    github: ProviderEndpointConfig = field(default_factory=ProviderEndpointConfig)
    openai: ProviderEndpointConfig = field(default_factory=ProviderEndpointConfig)

    def __post_init__(self):
        """Validate provider configuration values."""
        if self.timeout <= 0:
            raise ValueError("Provider timeout must be positive")
        if not self.model:
            raise ValueError("Provider model must not be empty")


@dataclass
class PromptConfig:
    """Prompt template settings."""
    template: Optional[str] = None


@dataclass
class ScraperConfig:
    """Product page fetching settings."""
    user_agent: str = "Mozilla/5.0"
    timeout: float = 15

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError("Scraper timeout must be positive")


@dataclass
class ServerConfig:
    """HTTP front door settings."""
    host: str = "0.0.0.0"
    port: int = 3033
    default_url: str = "https://thebarn.de/de/products/elida-gesha"

    def __post_init__(self):
        if not (0 < self.port < 65536):
            raise ValueError("Server port must be between 1 and 65535")


@dataclass
class ExportConfig:
    """Spreadsheet export settings."""
    sheet_name: str = "Coffee"
    filename: str = "coffee-data.xlsx"

    def __post_init__(self):
        if not self.filename.endswith(".xlsx"):
            raise ValueError("Export filename must end with .xlsx")
        if len(self.sheet_name) > 31:
            raise ValueError("Sheet name must be 31 characters or less")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    format: str = "detailed"  # simple, detailed, json
    console: bool = True
    file: Optional[str] = None
    rotation: str = "100 MB"
    retention: str = "30 days"
    colorize: bool = True

    def __post_init__(self):
        """Validate logging configuration values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        self.level = self.level.upper()

        valid_formats = ["simple", "detailed", "json"]
        if self.format not in valid_formats:
            raise ValueError(f"Invalid log format. Must be one of: {valid_formats}")


@dataclass
class CoffeeExtractorConfig:
    """Complete configuration for the Coffee Extractor."""
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    url: Optional[str] = None
    output: Optional[str] = None


@dataclass(frozen=True)
class ExtractionSettings:
    """Per-call provider choice and credentials.

    Attributes:
        provider: explicit provider choice (``github`` or ``openai``), empty to infer
        github_token: credential for the default provider
        openai_api_key: credential for the alternate provider
        prompt_template: optional template used when the caller passes no override
    """
    provider: Optional[str] = None
    github_token: Optional[str] = field(default=None, repr=False)
    openai_api_key: Optional[str] = field(default=None, repr=False)
    prompt_template: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExtractionSettings":
        """Read settings from the environment at call time."""
        env = os.environ if environ is None else environ
        return cls(
            provider=env.get("PROVIDER"),
            github_token=env.get("GITHUB_TOKEN"),
            openai_api_key=env.get("OPENAI_API_KEY"),
            prompt_template=env.get("PROMPT_TEMPLATE"),
        )


def validate_config(config: Dict[str, Any]) -> CoffeeExtractorConfig:
    """
    Validate configuration dictionary and return typed config object.

    Args:
        config: Configuration dictionary from Hydra/OmegaConf

    Returns:
        CoffeeExtractorConfig: Validated configuration object

    Raises:
        ValueError: If configuration validation fails
    """
    sections = {
        "providers": ProvidersConfig,
        "prompt": PromptConfig,
        "scraper": ScraperConfig,
        "server": ServerConfig,
        "export": ExportConfig,
        "logging": LoggingConfig,
    }
    try:
        kwargs: Dict[str, Any] = {}
        for key, value in config.items():
            section_cls = sections.get(key)
            if section_cls is ProvidersConfig and isinstance(value, dict):
                value = dict(value)
                for name in ("github", "openai"):
                    if isinstance(value.get(name), dict):
                        value[name] = ProviderEndpointConfig(**value[name])
                kwargs[key] = ProvidersConfig(**value)
            elif section_cls is not None and isinstance(value, dict):
                kwargs[key] = section_cls(**value)
            else:
                kwargs[key] = value
        return CoffeeExtractorConfig(**kwargs)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")
