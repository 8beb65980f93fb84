"""Tests for source selection and scraping."""

import pytest

from lead_intel.services.models import SOURCE_REFERENCE, SOURCE_SCRAPED
from lead_intel.services.scraping.source_selector import (
    SourceCollector,
    build_search_queries,
    is_auth_url,
    is_reference_url,
)

from conftest import FakeFetcher, FakeSearch, result

LONG_PAGE = "Jane Doe leads the payments modernisation programme. " * 100


def _collector(search, fetcher, settings, no_wait):
    return SourceCollector(search, fetcher, settings, search_limiter=no_wait, fetch_limiter=no_wait)


class TestHelpers:

    def test_query_variants_order(self):
        assert build_search_queries("Jane Doe", "Acme") == [
            "Jane Doe Acme",
            "Jane Doe LinkedIn",
            '"Jane Doe" Acme',
            "Jane Doe",
        ]

    def test_query_variants_without_company(self):
        assert build_search_queries("Jane Doe", None) == ["Jane Doe LinkedIn", "Jane Doe"]

    def test_no_name_no_queries(self):
        assert build_search_queries("", "Acme") == []

    def test_reference_and_auth_urls(self):
        assert is_reference_url("https://fr.linkedin.com/in/janedoe")
        assert not is_reference_url("https://notlinkedin.com/in/janedoe")
        assert is_auth_url("https://example.com/login?next=/")
        assert is_auth_url("https://example.com/account/sign-in")
        assert not is_auth_url("https://example.com/authors/jane")


class TestCollectSources:

    @pytest.mark.asyncio
    async def test_short_page_below_floor_is_discarded(self, settings, no_wait):
        search = FakeSearch(default=[
            result("https://short.example.com", "Short"),
            result("https://long.example.com", "Long"),
        ])
        fetcher = FakeFetcher({
            "https://short.example.com": "x" * 40,
            "https://long.example.com": "y" * 5000,
        })

        collected = await _collector(search, fetcher, settings, no_wait).collect_sources(
            {"name": "Jane Doe", "company": "Acme"}
        )

        assert len(collected.contents) == 1
        assert collected.contents[0].startswith("Source: https://long.example.com\nTitle: Long\nContent: ")
        flags = {s.url: s.scraped_successfully for s in collected.sources}
        assert flags == {"https://short.example.com": False, "https://long.example.com": True}

    @pytest.mark.asyncio
    async def test_falls_back_through_query_variants(self, settings, no_wait):
        search = FakeSearch(responses={
            "Jane Doe Acme": [],
            "Jane Doe LinkedIn": [result("https://blog.example.com/jane", "Jane's blog")],
        })
        fetcher = FakeFetcher({"https://blog.example.com/jane": LONG_PAGE})

        collected = await _collector(search, fetcher, settings, no_wait).collect_sources(
            {"name": "Jane Doe", "company": "Acme"}
        )

        assert [q for q, _ in search.calls] == ["Jane Doe Acme", "Jane Doe LinkedIn"]
        assert search.calls[0][1] == 8
        assert collected.query == "Jane Doe LinkedIn"
        assert len(collected.contents) == 1

    @pytest.mark.asyncio
    async def test_reference_profiles_kept_but_not_scraped(self, settings, no_wait):
        search = FakeSearch(default=[
            result("https://www.linkedin.com/in/janedoe", "Jane Doe - CTO"),
            result("https://linkedin.com/in/janedoe-2", "Jane Doe"),
            result("https://example.com/login", "Login"),
            result("https://news.example.com/jane", "News"),
        ])
        fetcher = FakeFetcher({"https://news.example.com/jane": LONG_PAGE})

        collected = await _collector(search, fetcher, settings, no_wait).collect_sources({"name": "Jane Doe"})

        assert fetcher.calls == ["https://news.example.com/jane"]
        references = [s for s in collected.sources if s.kind == SOURCE_REFERENCE]
        assert len(references) == 1
        assert references[0].url == "https://www.linkedin.com/in/janedoe"
        assert references[0].scraped_successfully is False
        assert collected.reference_found == 2

    @pytest.mark.asyncio
    async def test_widens_pool_when_too_few_usable(self, settings, no_wait):
        urls = [f"https://site{i}.example.com" for i in range(7)]
        search = FakeSearch(default=[result(u, f"Site {i}") for i, u in enumerate(urls)])
        pages = {urls[0]: LONG_PAGE, urls[3]: LONG_PAGE, urls[4]: LONG_PAGE}
        fetcher = FakeFetcher(pages)

        collected = await _collector(search, fetcher, settings, no_wait).collect_sources({"name": "Jane Doe"})

        # Top 3 yield one usable page, the next one reaches the minimum of 2
        assert fetcher.calls == urls[:4]
        assert len(collected.contents) == 2
        assert all(s.kind == SOURCE_SCRAPED for s in collected.sources)

    @pytest.mark.asyncio
    async def test_fetch_errors_skipped(self, settings, no_wait):
        search = FakeSearch(default=[result("https://a.example.com"), result("https://b.example.com")])
        fetcher = FakeFetcher({"https://a.example.com": RuntimeError("timeout"), "https://b.example.com": LONG_PAGE})

        collected = await _collector(search, fetcher, settings, no_wait).collect_sources({"name": "Jane Doe"})

        assert len(collected.contents) == 1
        assert collected.contents[0].splitlines()[1] == "Title: N/A"

    @pytest.mark.asyncio
    async def test_content_truncated_per_source(self, settings, no_wait):
        settings.max_source_chars = 200
        search = FakeSearch(default=[result("https://a.example.com", "A")])
        fetcher = FakeFetcher({"https://a.example.com": "z" * 1000})

        collected = await _collector(search, fetcher, settings, no_wait).collect_sources({"name": "Jane Doe"})

        assert collected.contents[0].endswith("z" * 200 + "...[truncated]")

    @pytest.mark.asyncio
    async def test_no_results_signals_no_content(self, settings, no_wait):
        search = FakeSearch()
        collected = await _collector(search, FakeFetcher(), settings, no_wait).collect_sources(
            {"name": "Jane Doe", "company": "Acme"}
        )

        assert collected.no_content is True
        assert collected.sources == []
        assert len(search.calls) == 4
