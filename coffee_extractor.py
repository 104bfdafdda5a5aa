#!/usr/bin/env python3
"""
Coffee Extractor

Turns the free text of a coffee product page into a structured record
(price, weight, flavor, processing, farmer) with one call to a remote
text-generation provider.

Features:
- Two interchangeable providers (GitHub Models, OpenAI) behind one client
- Detection of an OpenAI key placed in the GitHub credential slot
- Deterministic prompt with an optional caller-supplied template
- JSON recovery from fenced, inline or prose-wrapped model replies
- Typed failures instead of null results

Example Usage:
    # Extract a product page
    python3 coffee_extractor.py url=https://thebarn.de/products/nativo-nogales

    # Export the record to a spreadsheet
    python3 coffee_extractor.py url=https://... output=coffee.xlsx

    # Debug logging with a custom prompt
    python3 coffee_extractor.py logging.level=DEBUG prompt.template="Extract just price" url=https://...
"""

import json
import sys
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import hydra
from dotenv import load_dotenv
from loguru import logger
from omegaconf import DictConfig

from coffee_record import CoffeeRecord
from config.schema import ExtractionSettings
from errors import ExtractionCancelled, ExtractionError, HttpError
from logging_manager import get_logging_manager, setup_logging
from page_fetcher import PageFetchError, fetch_page_text
from providers import call_provider
from record_exporter import export_record
from utils.prompt_builder import build_prompt
from utils.provider_resolver import resolve_provider
from utils.response_parser import extract_json


DEFAULT_TIMEOUT = 30


@dataclass
class ExtractionResult:
    """Outcome of one extraction: a record or a typed error, never both."""
    record: Optional[CoffeeRecord] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> CoffeeRecord:
        if self.error is not None:
            raise self.error
        return self.record

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"ok": False, "error": self.error.to_dict()}
        return {"ok": True, "data": self.record.to_dict()}


class CoffeeExtractor:
    """
    Sequences credential resolution, prompt building, the provider round trip
    and reply parsing for one product description.

    Holds no per-request state: settings are passed to (or read by) each
    ``extract`` call, so one instance can serve concurrent requests.

    Attributes:
        config (DictConfig): Hydra configuration (providers, prompt sections)
        log: loguru-compatible logger receiving diagnostics

    Example:
        extractor = CoffeeExtractor(config=cfg)
        result = extractor.extract(page_text, settings=ExtractionSettings(github_token="ghp_..."))
        if result.ok:
            print(result.record.price)
    """

    def __init__(self, config: Optional[DictConfig] = None, log: Any = None):
        self.config = config
        self.log = log or logger.bind(component="coffee_extractor")

    def _timeout(self) -> float:
        try:
            return float(self.config.providers.timeout)
        except (AttributeError, TypeError, ValueError):
            return DEFAULT_TIMEOUT

    def _config_template(self) -> Optional[str]:
        try:
            return self.config.prompt.template
        except AttributeError:
            return None

    def run(self, raw_text: str, template_override: Optional[str] = None,
            settings: Optional[ExtractionSettings] = None,
            cancel_event: Optional[threading.Event] = None) -> CoffeeRecord:
        """Run every stage and return the record, raising the first ExtractionError."""
        settings = settings if settings is not None else ExtractionSettings.from_env()

        selection = resolve_provider(settings.provider, settings.github_token, settings.openai_api_key, log=self.log)
        self.log.info("Using provider", provider=selection.provider, inferred=selection.inferred)

        template = template_override
        if template is None or not str(template).strip():
            template = settings.prompt_template or self._config_template()
        prompt = build_prompt(raw_text, template)
        self.log.debug("Prompt built", chars=len(prompt))

        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelled()

        completion = call_provider(selection, prompt, timeout=self._timeout(), config=self.config)

        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelled("Extraction cancelled while waiting for the provider")

        record = CoffeeRecord.from_parsed(extract_json(completion.text))
        self.log.info("Extracted coffee data", provider=selection.provider,
                      fields=sorted(k for k, v in record.known_fields().items() if v is not None))
        return record

    def extract(self, raw_text: str, template_override: Optional[str] = None,
                settings: Optional[ExtractionSettings] = None,
                cancel_event: Optional[threading.Event] = None) -> ExtractionResult:
        """Extract a CoffeeRecord from ``raw_text``.

        Args:
            raw_text (str): Visible text of the product page
            template_override (str, optional): Instruction template; blank falls back
                to the configured or default template
            settings (ExtractionSettings, optional): Provider choice and credentials.
                Read from the environment at call time when omitted.
            cancel_event (threading.Event, optional): Set by the caller to abandon the call

        Returns:
            ExtractionResult: the record, or the ExtractionError that stopped the pipeline
        """
        settings = settings if settings is not None else ExtractionSettings.from_env()
        try:
            record = self.run(raw_text, template_override, settings, cancel_event)
        except HttpError as e:
            self.log.error("Provider API error", kind=e.kind, status=e.status, hint=e.hint, body=e.body_excerpt)
            return ExtractionResult(error=e)
        except ExtractionError as e:
            self.log.error("Extraction failed", kind=e.kind, error=e.message)
            return ExtractionResult(error=e)
        return ExtractionResult(record=record)


def extract_coffee_data(raw_text: str, template_override: Optional[str] = None,
                        settings: Optional[ExtractionSettings] = None,
                        config: Optional[DictConfig] = None) -> ExtractionResult:
    """Convenience wrapper around a throwaway CoffeeExtractor."""
    return CoffeeExtractor(config=config).extract(raw_text, template_override, settings)


@hydra.main(version_base=None, config_path="config", config_name="default")
def main(cfg: DictConfig) -> None:
    """Main entry point with Hydra configuration management.

    Args:
        cfg: Hydra configuration loaded from config files

    Example usage:
        python3 coffee_extractor.py url=https://thebarn.de/products/nativo-nogales
        python3 coffee_extractor.py --config-name=development url=https://...
    """
    load_dotenv()
    setup_logging(cfg)
    log_manager = get_logging_manager()

    url = cfg.url or cfg.server.default_url
    logger.info("Scraping page", url=url)
    try:
        raw_text = fetch_page_text(url, user_agent=cfg.scraper.user_agent, timeout=cfg.scraper.timeout)
    except PageFetchError as e:
        log_manager.log_error("Error scraping page", url=url, error=str(e))
        sys.exit(1)

    logger.info("Sending to provider for extraction")
    result = CoffeeExtractor(config=cfg).extract(raw_text)
    if not result.ok:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        sys.exit(1)

    log_manager.log_success("Extracted coffee data", url=url)
    print(json.dumps(result.record.to_dict(), indent=2, ensure_ascii=False))

    if cfg.output:
        path = export_record(result.record, cfg.output, url=url, sheet_name=cfg.export.sheet_name)
        log_manager.log_success("Record exported", path=str(path))


if __name__ == "__main__":
    main()
