import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lead_intel.services.config import EnrichmentSettings
from lead_intel.services.models import SearchResult
from lead_intel.services.providers.base import BaseContentFetcher, BaseLLMProvider, BaseSearchProvider
from lead_intel.services.rate_limiter import RateLimiter


class FakeSearch(BaseSearchProvider):
    """Search provider returning canned results per query."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default or []
        self.calls = []

    @property
    def name(self):
        return "fake"

    async def search(self, query, limit=8):
        self.calls.append((query, limit))
        result = self.responses.get(query, self.default)
        if isinstance(result, Exception):
            raise result
        return list(result)[:limit]


class FakeFetcher(BaseContentFetcher):
    """Content fetcher returning canned page text per URL."""

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []

    @property
    def name(self):
        return "fake"

    async def fetch_content(self, url):
        self.calls.append(url)
        page = self.pages.get(url, "")
        if isinstance(page, Exception):
            raise page
        return page


class FakeLLM(BaseLLMProvider):
    """LLM returning queued responses; queued exceptions are raised."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    @property
    def name(self):
        return "fake"

    async def complete(self, prompt, json_mode=False, system=None, temperature=0.1, max_tokens=None):
        self.calls.append({
            "prompt": prompt,
            "json_mode": json_mode,
            "system": system,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if not self.responses:
            raise RuntimeError("FakeLLM has no queued response")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def result(url, title="", description=""):
    return SearchResult(url=url, title=title, description=description)


@pytest.fixture
def settings():
    """Settings with every delay at zero and fixed limits."""
    return EnrichmentSettings(
        jina_api_key="test-jina",
        openai_api_key="test-openai",
        openai_model="gpt-4o",
        search_result_limit=8,
        max_scrape_sources=3,
        extra_scrape_sources=2,
        min_usable_sources=2,
        min_content_chars=100,
        max_source_chars=50000,
        max_context_chars=90000,
        validation_batch_size=10,
        max_leads_per_run=10,
        leads_per_persona=10,
        max_retries=3,
        confidence_boost=0.1,
        fetch_delay=0.0,
        search_delay=0.0,
        validation_delay=0.0,
        lead_delay=0.0,
        upgrade_delay=0.0,
        persona_delay=0.0,
    )


@pytest.fixture
def no_wait():
    return RateLimiter(0)


@pytest.fixture
def make_lead():
    def _make(name="Jane Doe", **fields):
        lead = {
            "id": f"lead_{name.lower().replace(' ', '_')}",
            "name": name,
            "title": "Chief Technology Officer",
            "company": "Acme Bank",
            "email": None,
            "linkedin_url": None,
            "location": "Paris",
            "confidence_score": 0.5,
        }
        lead.update(fields)
        return lead
    return _make
