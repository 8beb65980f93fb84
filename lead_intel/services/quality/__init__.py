# Contact-field quality rules, upgrade decisions and deduplication
from .field_quality import (
    LOW_QUALITY_EMAIL_PATTERNS,
    GENERIC_COMPANIES,
    GENERIC_TITLES,
    is_low_quality_email,
    is_low_quality_linkedin,
    is_low_quality_company,
    is_low_quality_title,
    is_low_quality_location,
    is_low_quality,
    identify_contact_issues,
)
from .field_upgrade import UPGRADABLE_FIELDS, is_better, plan_field_upgrades
from .dedupe import dedupe_key, dedupe_leads

__all__ = [
    "LOW_QUALITY_EMAIL_PATTERNS",
    "GENERIC_COMPANIES",
    "GENERIC_TITLES",
    "is_low_quality_email",
    "is_low_quality_linkedin",
    "is_low_quality_company",
    "is_low_quality_title",
    "is_low_quality_location",
    "is_low_quality",
    "identify_contact_issues",
    "UPGRADABLE_FIELDS",
    "is_better",
    "plan_field_upgrades",
    "dedupe_key",
    "dedupe_leads",
]
