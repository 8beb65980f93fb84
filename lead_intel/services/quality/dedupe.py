"""
Lead deduplication on the (email, linkedin_url) pair.

First occurrence wins and survivors keep their relative order. A missing
component is a stable sentinel, so two leads that both lack an email still
collide only when their LinkedIn URLs match too. Leads with neither
identifier fall back to name and company.
"""

from typing import Any, Dict, List, Tuple

MISSING = "<missing>"


def _normalize(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        return MISSING
    return value.strip().lower().rstrip("/")


def dedupe_key(lead: Dict[str, Any]) -> Tuple[str, ...]:
    key = (_normalize(lead.get("email")), _normalize(lead.get("linkedin_url")))
    if key == (MISSING, MISSING):
        # No identifiers at all: only the same person at the same company collides
        return key + (_normalize(lead.get("name")), _normalize(lead.get("company")))
    return key


def dedupe_leads(leads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Collapse a lead list to unique leads.

    Args:
        leads: Candidate leads in priority order

    Returns:
        New list with later duplicates dropped
    """
    if not isinstance(leads, list):
        raise TypeError(f"leads must be a list, got {type(leads).__name__}")

    seen = set()
    unique = []
    for lead in leads:
        key = dedupe_key(lead)
        if key in seen:
            continue
        seen.add(key)
        unique.append(lead)

    dropped = len(leads) - len(unique)
    if dropped:
        print(f"[Dedupe] Removed {dropped} duplicate leads ({len(unique)} unique)", flush=True)
    return unique
