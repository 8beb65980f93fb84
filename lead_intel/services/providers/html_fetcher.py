"""
Direct page fetcher - plain HTTP GET plus visible-text extraction.

Used when no reader key is configured. Script, style and navigation chrome is
dropped before the text is collapsed to one line per block.
"""

import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from .base import BaseContentFetcher

STRIP_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "form", "svg", "iframe"]

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; lead-intel/1.0)",
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
}


def extract_visible_text(html_content: str) -> str:
    """
    Extract the readable text from an HTML document.

    Args:
        html_content: Raw HTML string

    Returns:
        Title plus body text, blank lines collapsed
    """
    if not html_content:
        return ""

    soup = BeautifulSoup(html_content, "lxml")

    for tag in soup(STRIP_TAGS):
        tag.decompose()

    title = soup.title.get_text(strip=True) if soup.title else ""
    body = soup.body or soup
    text = body.get_text(separator="\n", strip=True)

    # Collapse runs of whitespace inside lines and drop empty lines
    lines = [re.sub(r"[ \t\xa0]+", " ", line).strip() for line in text.splitlines()]
    text = "\n".join(line for line in lines if line)

    if title and not text.startswith(title):
        return f"{title}\n{text}"
    return text


class DirectPageFetcher(BaseContentFetcher):
    """Fetch pages directly and strip them down to text."""

    def __init__(self, timeout: float = 20.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "direct"

    async def fetch_content(self, url: str) -> str:
        if not url:
            return ""

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=DEFAULT_HEADERS,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()

            content_type = response.headers.get("content-type", "")
            if "html" not in content_type and "text" not in content_type:
                print(f"[Fetcher] Skipping non-text content at {url} ({content_type})", flush=True)
                return ""

            text = extract_visible_text(response.text)
            print(f"[Fetcher] Read {len(text)} characters from {url}", flush=True)
            return text

        except httpx.HTTPStatusError as e:
            print(f"[Fetcher] HTTP error for {url}: {e.response.status_code}", flush=True)
            return ""
        except httpx.HTTPError as e:
            print(f"[Fetcher] Error fetching {url}: {e}", flush=True)
            return ""
