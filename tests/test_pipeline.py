"""Tests for the end-to-end pipeline."""

import json

import pytest

from lead_intel.services.pipeline import build_services, run_pipeline

from conftest import FakeFetcher, FakeLLM, FakeSearch, result

PAGE = "Jane Doe is modernising payments at Acme Bank. " * 20

INTEL = json.dumps({"summary": "Payments lead", "intelligence_quality": "high"})


def _verdict(is_valid):
    return json.dumps({"validations": [{"index": 0, "is_valid_person": is_valid, "reason": "checked"}]})


@pytest.fixture
def services(settings):
    search = FakeSearch(default=[result("https://news.example.com/jane", "Jane Doe interview")])
    fetcher = FakeFetcher({"https://news.example.com/jane": PAGE})
    return build_services(settings, search=search, fetcher=fetcher, llm=FakeLLM([]))


class TestRunPipeline:

    @pytest.mark.asyncio
    async def test_resubmitted_batch_keeps_enriched_lead(self, services, make_lead):
        services.llm.responses.extend([_verdict(True), INTEL])
        leads = [make_lead()]

        first = await run_pipeline(leads, services, upgrade=False)
        assert first[0]["enrichment_state"] == "done"
        calls = len(services.llm.calls)

        # A different verdict is queued but must not be asked for
        services.llm.responses.append(_verdict(False))
        second = await run_pipeline(first, services, upgrade=False)

        assert len(services.llm.calls) == calls
        assert len(second) == 1
        assert second[0]["is_valid_person"] is True
        assert second[0]["enrichment_state"] == "done"

    @pytest.mark.asyncio
    async def test_only_new_leads_validated(self, services, make_lead):
        checked = make_lead("John Roe", is_valid_person=True, enrichment_state="done",
                            intelligence={"quality": "high", "error": None})
        services.llm.responses.append(_verdict(False))

        kept = await run_pipeline([checked, make_lead("Acme Holdings")], services, upgrade=False, enrich=False)

        assert [lead["name"] for lead in kept] == ["John Roe"]
        assert len(services.llm.calls) == 1
        assert "Acme Holdings" in services.llm.calls[0]["prompt"]
        assert "John Roe" not in services.llm.calls[0]["prompt"]
