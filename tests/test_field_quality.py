"""Tests for contact field quality predicates."""

import pytest

from lead_intel.services.quality.field_quality import (
    identify_contact_issues,
    is_low_quality,
    is_low_quality_company,
    is_low_quality_email,
    is_low_quality_linkedin,
    is_low_quality_location,
    is_low_quality_title,
)


class TestEmailQuality:

    @pytest.mark.parametrize("value", [
        None,
        "",
        "   ",
        "jane@financialservic.com.fr",
        "someone@example.com",
        "noreply@acme.com",
        "info@acme.com",
        "SUPPORT@ACME.COM",
        "not-an-email",
    ])
    def test_low_quality(self, value):
        assert is_low_quality_email(value) is True

    def test_real_address(self):
        assert is_low_quality_email("jane.doe@acme.com") is False

    def test_custom_patterns(self):
        assert is_low_quality_email("jane@acme.com", patterns=["@acme.com"]) is True

    def test_non_string_is_low_quality(self):
        assert is_low_quality_email(42) is True


class TestLinkedInQuality:

    @pytest.mark.parametrize("value", [
        "https://linkedin.com/in/janedoe",
        "https://www.linkedin.com/in/jane-doe-123/",
        "http://fr.linkedin.com/in/janedoe",
    ])
    def test_profile_urls(self, value):
        assert is_low_quality_linkedin(value) is False

    @pytest.mark.parametrize("value", [
        None,
        "",
        "https://news.example.com/article",
        "https://www.linkedin.com/company/acme",
        "https://linkedin.com/in/",
        "linkedin.com/in/janedoe",
    ])
    def test_non_profile_urls(self, value):
        assert is_low_quality_linkedin(value) is True


class TestCompanyTitleLocation:

    def test_generic_company_is_case_sensitive(self):
        assert is_low_quality_company("Unknown Company") is True
        assert is_low_quality_company("unknown company") is False

    def test_missing_company(self):
        assert is_low_quality_company(None) is True

    def test_real_company(self):
        assert is_low_quality_company("Acme Bank") is False

    def test_title(self):
        assert is_low_quality_title("Professional") is True
        assert is_low_quality_title("Technology Executive") is True
        assert is_low_quality_title("Head of Payments") is False

    def test_location(self):
        assert is_low_quality_location("Unknown") is True
        assert is_low_quality_location(None) is True
        assert is_low_quality_location("Lyon") is False

    def test_unknown_field_raises(self):
        with pytest.raises(ValueError):
            is_low_quality("phone", "123")


class TestContactIssues:

    def test_lists_each_problem(self):
        lead = {
            "email": "info@acme.com",
            "linkedin_url": None,
            "company": "Company",
            "title": "CTO",
            "location": "Unknown",
        }
        issues = identify_contact_issues(lead)
        assert issues == ["placeholder email", "missing LinkedIn", "generic company", "unknown location"]

    def test_clean_lead_has_no_issues(self):
        lead = {
            "email": "jane.doe@acme.com",
            "linkedin_url": "https://linkedin.com/in/janedoe",
            "company": "Acme",
            "title": "CTO",
            "location": "Paris",
        }
        assert identify_contact_issues(lead) == []
