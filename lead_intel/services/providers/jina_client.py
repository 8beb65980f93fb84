"""
Jina clients - web search (s.jina.ai) and page reading (r.jina.ai).

Both fail softly: HTTP and transport errors are logged and turned into an
empty result so one bad query never stops a batch.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..config import get_settings
from ..models import SearchResult
from .base import BaseContentFetcher, BaseSearchProvider


def _require_key(api_key: Optional[str]) -> str:
    key = api_key if api_key is not None else get_settings().jina_api_key
    if not key:
        raise ValueError("Missing JINA_API_KEY environment variable")
    return key


def parse_search_payload(payload: Any, limit: int) -> List[SearchResult]:
    """Turn a Jina search response body into SearchResults."""
    if isinstance(payload, dict):
        items = payload.get("data") or []
    elif isinstance(payload, list):
        items = payload
    else:
        items = []

    results: List[SearchResult] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("url"):
            continue
        results.append(SearchResult(
            url=item["url"],
            title=item.get("title") or "",
            description=item.get("description") or item.get("snippet") or "",
        ))
        if len(results) >= limit:
            break
    return results


class JinaSearchClient(BaseSearchProvider):
    """Jina AI search implementation."""

    API_URL = "https://s.jina.ai/"

    def __init__(self, api_key: Optional[str] = None, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = _require_key(api_key)
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "jina"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "X-Respond-With": "no-content",
        }

    async def search(self, query: str, limit: int = 8) -> List[SearchResult]:
        if not query or not query.strip():
            return []

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.API_URL, params={"q": query}, headers=self._headers())
                response.raise_for_status()
                results = parse_search_payload(response.json(), limit)

            print(f"[Jina] Search \"{query}\" -> {len(results)} results", flush=True)
            return results

        except httpx.HTTPStatusError as e:
            print(f"[Jina] Search HTTP error: {e.response.status_code} - {e.response.text[:200]}", flush=True)
            return []
        except (httpx.HTTPError, ValueError) as e:
            print(f"[Jina] Search error for \"{query}\": {e}", flush=True)
            return []


class JinaReaderClient(BaseContentFetcher):
    """Jina AI reader - returns a page as plain text."""

    API_URL = "https://r.jina.ai/"

    def __init__(self, api_key: Optional[str] = None, timeout: float = 60.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = _require_key(api_key)
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "jina_reader"

    async def fetch_content(self, url: str) -> str:
        if not url:
            return ""

        reader_url = f"{self.API_URL}{quote(url, safe='')}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(reader_url, headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "text/plain",
                })
                response.raise_for_status()
                content = response.text or ""

            print(f"[Jina] Read {len(content)} characters from {url}", flush=True)
            return content

        except httpx.HTTPStatusError as e:
            print(f"[Jina] Reader HTTP error for {url}: {e.response.status_code}", flush=True)
            return ""
        except httpx.HTTPError as e:
            print(f"[Jina] Reader error for {url}: {e}", flush=True)
            return ""
