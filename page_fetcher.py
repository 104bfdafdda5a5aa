"""Fetch a product page and reduce it to its visible text.

The text is handed to the extractor as-is, so whitespace runs are collapsed
and script/style content is dropped to keep the prompt small.
"""
import re

import requests
from bs4 import BeautifulSoup

from logging_manager import get_logging_manager


BROWSER_USER_AGENT = "Mozilla/5.0"
_WHITESPACE = re.compile(r"\s+")


class PageFetchError(Exception):
    """Raised when a page cannot be fetched or holds no visible text."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message}: {url}")
        self.url = url


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    root = soup.body or soup
    return _WHITESPACE.sub(" ", root.get_text(" ")).strip()


def fetch_page_text(url: str, user_agent: str = BROWSER_USER_AGENT, timeout: float = 15) -> str:
    """GET ``url`` and return its normalized visible text.

    Raises PageFetchError on transport failure, non-2xx status, or an empty page.
    """
    try:
        resp = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    except requests.RequestException as exc:
        raise PageFetchError(url, f"Error fetching page ({exc})") from exc

    if not 200 <= resp.status_code < 300:
        raise PageFetchError(url, f"Page responded with HTTP {resp.status_code}")

    text = html_to_text(resp.text)
    if not text:
        raise PageFetchError(url, "Page has no visible text")

    get_logging_manager().log_page_operation("Fetched product page", url=url, chars=len(text))
    return text
