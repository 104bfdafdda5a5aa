#!/usr/bin/env python3
"""CLI helper: print the provider the current environment resolves to.

Reads PROVIDER, GITHUB_TOKEN and OPENAI_API_KEY (and a .env file if present).
Credentials are masked.

Usage: python scripts/print_provider_selection.py
"""
import sys

from dotenv import load_dotenv

from config.schema import ExtractionSettings
from errors import ExtractionError
from providers import get_provider_spec
from utils.provider_resolver import resolve_provider


def main(argv):
    load_dotenv()
    settings = ExtractionSettings.from_env()
    try:
        selection = resolve_provider(settings.provider, settings.github_token, settings.openai_api_key)
    except ExtractionError as e:
        print(f"error: {e.kind}: {e.message}", file=sys.stderr)
        return 2
    spec = get_provider_spec(selection.provider)
    how = "inferred" if selection.inferred else "explicit"
    print(f"provider: {selection.provider} ({how})")
    print(f"endpoint: {spec.url}")
    print(f"credential: {selection.masked_credential}")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
