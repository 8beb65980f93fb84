"""
Field Upgrade - decide whether a newly found value should replace a stored one.

The rule is one-directional: placeholders are replaced aggressively, real
values are never swapped for noise or for a merely different value. Title is
the only field with a specificity heuristic (a longer, unrelated title wins).
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from .field_quality import FIELD_CHECKS, is_low_quality

UPGRADABLE_FIELDS = ("email", "linkedin_url", "company", "title", "location")

# Fields compared without regard to case
CASE_INSENSITIVE_FIELDS = ("email", "linkedin_url")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _same(field: str, a: str, b: str) -> bool:
    if field in CASE_INSENSITIVE_FIELDS:
        return a.lower().rstrip("/") == b.lower().rstrip("/")
    return a == b


def is_better(field: str, candidate: Any, current: Any) -> bool:
    """
    Should `candidate` overwrite `current` for this field?

    Args:
        field: One of UPGRADABLE_FIELDS
        candidate: Newly found value
        current: Value stored on the lead

    Returns:
        True only for a strict improvement
    """
    if field not in FIELD_CHECKS:
        raise ValueError(f"Unknown contact field: {field}. Available: {list(FIELD_CHECKS.keys())}")

    new = _text(candidate)
    old = _text(current)

    if not new:
        return False
    if not old:
        return True
    if _same(field, new, old):
        return False

    candidate_low = is_low_quality(field, new)
    current_low = is_low_quality(field, old)

    if current_low and not candidate_low:
        return True
    if candidate_low:
        return False

    if field == "title":
        # More specific: longer and not just a re-wording that contains the other
        if len(new) > len(old) and old.lower() not in new.lower() and new.lower() not in old.lower():
            return True

    return False


def plan_field_upgrades(
    lead: Dict[str, Any],
    found: Dict[str, Any],
    fields: Iterable[str] = UPGRADABLE_FIELDS,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Compare extracted contact fields against a lead.

    Does not touch the lead; the caller applies the returned updates in one step.

    Returns:
        (updates, changes) - field -> new value, plus "field: old → new" diff lines
    """
    updates: Dict[str, Any] = {}
    changes: List[str] = []

    for field in fields:
        candidate: Optional[Any] = found.get(field)
        current = lead.get(field)
        if is_better(field, candidate, current):
            new_value = _text(candidate)
            updates[field] = new_value
            changes.append(f"{field}: {_text(current) or 'none'} → {new_value}")

    return updates, changes
