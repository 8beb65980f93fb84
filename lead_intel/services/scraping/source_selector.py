"""
Source Selector - find and scrape web pages about a person.

Flow:
1. Search with widening query variants until one returns results
2. Split results into reference-only profiles (kept for attribution, never
   scraped) and scrapeable pages (auth/login pages excluded)
3. Fetch the top candidates, keeping pages above the substantiality floor
4. If too few pages were usable, try the next slice of candidates

Fetch failures are logged and skipped. When nothing usable is found the
caller gets an empty CollectedSources (`no_content` is True), not an error.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from ..config import EnrichmentSettings, get_settings
from ..models import SOURCE_REFERENCE, SOURCE_SCRAPED, SearchResult, Source
from ..providers.base import BaseContentFetcher, BaseSearchProvider
from ..rate_limiter import RateLimiter

# Hosts that block scraping; one result is kept as a reference link
REFERENCE_DOMAINS = ["linkedin.com"]

AUTH_PATH_RE = re.compile(r"/(login|log-in|signin|sign-in|signup|sign-up|register|auth|oauth2?)\b", re.IGNORECASE)

CONTENT_TRUNCATION_SUFFIX = "...[truncated]"


@dataclass
class CollectedSources:
    """Everything gathered for one person."""
    sources: List[Source] = field(default_factory=list)
    contents: List[str] = field(default_factory=list)
    search_results: List[SearchResult] = field(default_factory=list)
    query: Optional[str] = None
    reference_found: int = 0
    attempted: int = 0

    @property
    def no_content(self) -> bool:
        return not self.contents


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def is_reference_url(url: str, domains: Optional[List[str]] = None) -> bool:
    host = _host(url)
    for domain in (domains if domains is not None else REFERENCE_DOMAINS):
        if host == domain or host.endswith("." + domain):
            return True
    return False


def is_auth_url(url: str) -> bool:
    return AUTH_PATH_RE.search(urlparse(url).path or "") is not None


def build_search_queries(name: str, company: Optional[str] = None) -> List[str]:
    """Query variants from most to least specific."""
    name = (name or "").strip()
    company = (company or "").strip()
    if not name:
        return []

    variants = []
    if company:
        variants.append(f"{name} {company}")
    variants.append(f"{name} LinkedIn")
    if company:
        variants.append(f'"{name}" {company}')
    variants.append(name)

    seen = set()
    return [q for q in variants if not (q in seen or seen.add(q))]


def format_content_entry(result: SearchResult, content: str, max_chars: int) -> str:
    if len(content) > max_chars:
        content = content[:max_chars] + CONTENT_TRUNCATION_SUFFIX
    return f"Source: {result.url}\nTitle: {result.title or 'N/A'}\nContent: {content}"


class SourceCollector:
    """Search + scrape for a single person at a time."""

    def __init__(
        self,
        search: BaseSearchProvider,
        fetcher: BaseContentFetcher,
        settings: Optional[EnrichmentSettings] = None,
        search_limiter: Optional[RateLimiter] = None,
        fetch_limiter: Optional[RateLimiter] = None,
        reference_domains: Optional[List[str]] = None,
    ):
        self.search = search
        self.fetcher = fetcher
        self.settings = settings or get_settings()
        self.search_limiter = search_limiter or RateLimiter(self.settings.search_delay, name="search")
        self.fetch_limiter = fetch_limiter or RateLimiter(self.settings.fetch_delay, name="fetch")
        self.reference_domains = reference_domains if reference_domains is not None else REFERENCE_DOMAINS

    async def search_person(self, name: str, company: Optional[str] = None) -> Tuple[List[SearchResult], Optional[str]]:
        """
        Try each query variant until one returns usable http(s) results.

        Returns:
            (results, query that produced them)
        """
        for query in build_search_queries(name, company):
            await self.search_limiter.wait()
            print(f"[Sources] Trying search: \"{query}\"", flush=True)
            try:
                results = await self.search.search(query, self.settings.search_result_limit)
            except Exception as e:
                print(f"[Sources] Search \"{query}\" failed: {e}", flush=True)
                continue
            results = [r for r in results if r.url and r.url.startswith("http")]
            if results:
                print(f"[Sources] Found {len(results)} results with \"{query}\"", flush=True)
                return results, query

        print(f"[Sources] No results for {name} after trying all query variants", flush=True)
        return [], None

    def partition_results(self, results: List[SearchResult]) -> Tuple[List[SearchResult], List[SearchResult]]:
        """Split into (reference-only, scrapeable), preserving rank order."""
        reference, scrapeable = [], []
        for result in results:
            if is_reference_url(result.url, self.reference_domains):
                reference.append(result)
            elif not is_auth_url(result.url):
                scrapeable.append(result)
        return reference, scrapeable

    async def _scrape(self, candidates: List[SearchResult], collected: CollectedSources,
                      stop_at: Optional[int] = None) -> None:
        for result in candidates:
            if stop_at is not None and len(collected.contents) >= stop_at:
                break

            await self.fetch_limiter.wait()
            collected.attempted += 1
            print(f"[Sources] Scraping {result.url}", flush=True)
            try:
                content = await self.fetcher.fetch_content(result.url) or ""
            except Exception as e:
                print(f"[Sources]   Failed to scrape {result.url}: {e}", flush=True)
                content = ""

            usable = len(content) > self.settings.min_content_chars
            if usable:
                collected.contents.append(format_content_entry(result, content, self.settings.max_source_chars))
                print(f"[Sources]   Scraped {len(content)} characters", flush=True)
            else:
                print(f"[Sources]   Insufficient content ({len(content)} characters)", flush=True)

            collected.sources.append(Source(
                url=result.url,
                title=result.title,
                scraped_successfully=usable,
                kind=SOURCE_SCRAPED,
                content_chars=len(content),
            ))

    async def collect_sources(self, person: Dict[str, Any]) -> CollectedSources:
        """
        Gather scraped content about a lead.

        Args:
            person: Lead dict with at least `name` (and ideally `company`)

        Returns:
            CollectedSources; `no_content` is True when nothing usable was found
        """
        name = person.get("name") or ""
        results, query = await self.search_person(name, person.get("company"))
        collected = CollectedSources(search_results=results, query=query)
        if not results:
            return collected

        reference, scrapeable = self.partition_results(results)
        collected.reference_found = len(reference)
        for result in reference[:1]:
            collected.sources.append(Source(
                url=result.url,
                title=result.title,
                scraped_successfully=False,
                kind=SOURCE_REFERENCE,
            ))

        top_n = self.settings.max_scrape_sources
        print(
            f"[Sources] {len(reference)} reference-only, {len(scrapeable)} scrapeable; "
            f"scraping top {min(top_n, len(scrapeable))}",
            flush=True,
        )
        await self._scrape(scrapeable[:top_n], collected)

        extra = scrapeable[top_n:top_n + self.settings.extra_scrape_sources]
        if len(collected.contents) < self.settings.min_usable_sources and extra:
            print(f"[Sources] Only {len(collected.contents)} usable sources, trying {len(extra)} more", flush=True)
            await self._scrape(extra, collected, stop_at=self.settings.min_usable_sources)

        if collected.no_content:
            print(f"[Sources] No substantial content found for {name}", flush=True)
        return collected
