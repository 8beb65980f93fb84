"""
Field Quality - Pattern rules for spotting placeholder contact data.

Every predicate is total: None, non-strings and blank strings count as
low quality, nothing here raises.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

# Substrings that mark an email as synthetic or role-based
LOW_QUALITY_EMAIL_PATTERNS = [
    "@financialservic.com.fr",
    "@example.com",
    "@test.com",
    "@placeholder.com",
    "noreply@",
    "support@",
    "info@",
]

# Exact (case-sensitive) company names produced by scrapers when nothing better was found
GENERIC_COMPANIES = [
    "Financial Services Company",
    "Services Financiers Européens",
    "Group Financial Services",
    "Unknown Company",
    "Company",
    "Corporation",
]

GENERIC_TITLES = [
    "Professional",
    "Technology Executive",
]

UNKNOWN_LOCATIONS = [
    "Unknown",
]

LINKEDIN_PROFILE_RE = re.compile(r"^https?://([a-z0-9-]+\.)?linkedin\.com/in/[^/?#\s]+", re.IGNORECASE)
EMAIL_SHAPE_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean(value: Any) -> Optional[str]:
    """Return the stripped string, or None for anything absent or non-string."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def is_low_quality_email(value: Any, patterns: Optional[Iterable[str]] = None) -> bool:
    email = _clean(value)
    if email is None:
        return True
    if not EMAIL_SHAPE_RE.match(email):
        return True

    lowered = email.lower()
    for pattern in (patterns if patterns is not None else LOW_QUALITY_EMAIL_PATTERNS):
        if pattern.lower() in lowered:
            return True
    return False


def is_low_quality_linkedin(value: Any) -> bool:
    """Anything that is not a personal profile URL is low quality."""
    url = _clean(value)
    if url is None:
        return True
    return LINKEDIN_PROFILE_RE.match(url) is None


def is_low_quality_company(value: Any, generic: Optional[Iterable[str]] = None) -> bool:
    company = _clean(value)
    if company is None:
        return True
    return company in (generic if generic is not None else GENERIC_COMPANIES)


def is_low_quality_title(value: Any, generic: Optional[Iterable[str]] = None) -> bool:
    title = _clean(value)
    if title is None:
        return True
    return title in (generic if generic is not None else GENERIC_TITLES)


def is_low_quality_location(value: Any) -> bool:
    location = _clean(value)
    if location is None:
        return True
    return location in UNKNOWN_LOCATIONS


# Field name -> predicate, for the fields the upgrader tracks
FIELD_CHECKS = {
    "email": is_low_quality_email,
    "linkedin_url": is_low_quality_linkedin,
    "company": is_low_quality_company,
    "title": is_low_quality_title,
    "location": is_low_quality_location,
}


def is_low_quality(field: str, value: Any) -> bool:
    if field not in FIELD_CHECKS:
        raise ValueError(f"Unknown contact field: {field}. Available: {list(FIELD_CHECKS.keys())}")
    return FIELD_CHECKS[field](value)


def identify_contact_issues(lead: Dict[str, Any]) -> List[str]:
    """
    List the contact problems on a lead, for logging.

    Returns:
        Human-readable labels, empty when every tracked field looks real
    """
    issues = []
    if is_low_quality_email(lead.get("email")):
        issues.append("placeholder email" if lead.get("email") else "missing email")
    if is_low_quality_linkedin(lead.get("linkedin_url")):
        issues.append("non-profile LinkedIn URL" if lead.get("linkedin_url") else "missing LinkedIn")
    if is_low_quality_company(lead.get("company")):
        issues.append("generic company" if lead.get("company") else "missing company")
    if is_low_quality_title(lead.get("title")):
        issues.append("generic title" if lead.get("title") else "missing title")
    if is_low_quality_location(lead.get("location")):
        issues.append("unknown location")
    return issues
