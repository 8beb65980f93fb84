"""Tests for contact field upgrades."""

import json

import pytest

from lead_intel.services.contact_upgrade import (
    ContactUpgrader,
    has_useful_contact_info,
    is_profile_url,
    needs_update,
)

from conftest import FakeFetcher, FakeLLM, FakeSearch, result

PROFILE_URL = "https://rocketreach.co/jane-doe-email_123"
PROFILE_PAGE = "Jane Doe, Chief Technology Officer at Acme Bank. Email: jane.doe@acmebank.fr " * 10

EXTRACTED = json.dumps({
    "email": "jane.doe@acmebank.fr",
    "linkedin_url": "https://www.linkedin.com/in/janedoe",
    "company": "Acme Bank",
    "title": "CTO",
    "location": None,
})


@pytest.fixture
def placeholder_lead(make_lead):
    return make_lead(
        email="jane.doe@financialservic.com.fr",
        linkedin_url="https://www.linkedin.com/company/acme",
    )


def _upgrader(search, fetcher, llm, settings, no_wait):
    return ContactUpgrader(search, fetcher, llm, settings, limiter=no_wait)


class TestHelpers:

    def test_needs_update(self, make_lead, placeholder_lead):
        good = make_lead(email="jane@acmebank.fr", linkedin_url="https://linkedin.com/in/janedoe")
        assert needs_update(placeholder_lead) is True
        assert needs_update(good) is False
        assert needs_update(dict(placeholder_lead, contact_upgrade_attempted=True)) is False
        assert needs_update(dict(placeholder_lead, contact_upgraded=True)) is False

    def test_profile_url(self):
        assert is_profile_url(PROFILE_URL)
        assert is_profile_url("https://www.rocketreach.co/x")
        assert not is_profile_url("https://notrocketreach.co/x")

    def test_useful_info(self):
        assert not has_useful_contact_info({"company": "Unknown", "title": "Professional"})
        assert has_useful_contact_info({"title": "Head of Data"})


class TestUpgradeLead:

    @pytest.mark.asyncio
    async def test_placeholder_email_replaced(self, placeholder_lead, settings, no_wait):
        search = FakeSearch(default=[result("https://example.com/jane"), result(PROFILE_URL, "Jane Doe Email")])
        fetcher = FakeFetcher({PROFILE_URL: PROFILE_PAGE})
        llm = FakeLLM([EXTRACTED])

        outcome = await _upgrader(search, fetcher, llm, settings, no_wait).upgrade_lead(placeholder_lead)

        assert outcome["status"] == "upgraded"
        assert search.calls == [("Jane Doe rocket reach", 3)]
        assert placeholder_lead["email"] == "jane.doe@acmebank.fr"
        assert placeholder_lead["linkedin_url"] == "https://www.linkedin.com/in/janedoe"
        # Good existing values are kept
        assert placeholder_lead["title"] == "Chief Technology Officer"
        assert placeholder_lead["location"] == "Paris"
        assert placeholder_lead["contact_upgraded"] is True
        assert placeholder_lead["contact_profile_url"] == PROFILE_URL
        assert placeholder_lead["contact_updates"] == [
            "email: jane.doe@financialservic.com.fr → jane.doe@acmebank.fr",
            "linkedin_url: https://www.linkedin.com/company/acme → https://www.linkedin.com/in/janedoe",
        ]
        assert llm.calls[0]["json_mode"] is True

    @pytest.mark.asyncio
    async def test_no_profile_found(self, placeholder_lead, settings, no_wait):
        search = FakeSearch(default=[result("https://example.com/jane")])
        llm = FakeLLM([])

        outcome = await _upgrader(search, FakeFetcher(), llm, settings, no_wait).upgrade_lead(placeholder_lead)

        assert outcome["status"] == "no_profile"
        assert placeholder_lead["contact_upgrade_attempted"] is True
        assert "contact_upgraded" not in placeholder_lead
        assert placeholder_lead["email"] == "jane.doe@financialservic.com.fr"
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_short_profile_page_skips_extraction(self, placeholder_lead, settings, no_wait):
        search = FakeSearch(default=[result(PROFILE_URL)])
        fetcher = FakeFetcher({PROFILE_URL: "Sign in to view Jane Doe's contact info"})
        llm = FakeLLM([])

        outcome = await _upgrader(search, fetcher, llm, settings, no_wait).upgrade_lead(placeholder_lead)

        assert outcome["status"] == "no_info"
        assert placeholder_lead["contact_profile_url"] == PROFILE_URL
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_nothing_better(self, make_lead, settings, no_wait):
        lead = make_lead(email="jane@acmebank.fr", linkedin_url="https://linkedin.com/in/janedoe")
        search = FakeSearch(default=[result(PROFILE_URL)])
        fetcher = FakeFetcher({PROFILE_URL: PROFILE_PAGE})
        llm = FakeLLM([json.dumps({"email": "JANE@acmebank.fr", "company": "Acme Bank", "title": "CTO"})])

        outcome = await _upgrader(search, fetcher, llm, settings, no_wait).upgrade_lead(lead)

        assert outcome["status"] == "unchanged"
        assert lead["email"] == "jane@acmebank.fr"
        assert "contact_updates" not in lead

    @pytest.mark.asyncio
    async def test_llm_failure_contained(self, placeholder_lead, settings, no_wait):
        search = FakeSearch(default=[result(PROFILE_URL)])
        fetcher = FakeFetcher({PROFILE_URL: PROFILE_PAGE})
        llm = FakeLLM([RuntimeError("timeout")])

        outcome = await _upgrader(search, fetcher, llm, settings, no_wait).upgrade_lead(placeholder_lead)

        assert outcome["status"] == "no_info"
        assert placeholder_lead["contact_upgrade_attempted"] is True


class TestUpgradeLeads:

    @pytest.mark.asyncio
    async def test_second_pass_does_nothing(self, placeholder_lead, make_lead, settings, no_wait):
        good = make_lead("John Roe", email="john@acmebank.fr", linkedin_url="https://linkedin.com/in/johnroe")
        search = FakeSearch(default=[result(PROFILE_URL)])
        fetcher = FakeFetcher({PROFILE_URL: PROFILE_PAGE})
        llm = FakeLLM([EXTRACTED])
        upgrader = _upgrader(search, fetcher, llm, settings, no_wait)
        visited = []

        await upgrader.upgrade_leads([placeholder_lead, good], on_lead_complete=lambda l: visited.append(l["name"]))
        await upgrader.upgrade_leads([placeholder_lead, good])

        assert visited == ["Jane Doe"]
        assert len(search.calls) == 1
        assert len(llm.calls) == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_recorded(self, placeholder_lead, settings, no_wait, monkeypatch):
        upgrader = _upgrader(FakeSearch(), FakeFetcher(), FakeLLM([]), settings, no_wait)

        async def explode(lead):
            raise RuntimeError("boom")

        monkeypatch.setattr(upgrader, "upgrade_lead", explode)

        await upgrader.upgrade_leads([placeholder_lead])

        assert placeholder_lead["contact_upgrade_error"] == "boom"
        assert placeholder_lead["contact_upgrade_attempted"] is True
