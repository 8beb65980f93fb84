"""
Settings - Environment-driven knobs for the enrichment services.

Loaded once at process start. Every numeric knob falls back to its default
when the variable is missing or malformed, so a bad .env never stops a run.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv(".env.local")
load_dotenv()


def _env_int(name: str, default: int) -> int:
    v = os.environ.get(name)
    if v is None or str(v).strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.environ.get(name)
    if v is None or str(v).strip() == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    return v.strip()


@dataclass
class EnrichmentSettings:
    # Provider credentials
    jina_api_key: Optional[str] = field(default_factory=lambda: _env_str("JINA_API_KEY"))
    openai_api_key: Optional[str] = field(default_factory=lambda: _env_str("OPENAI_API_KEY"))
    openai_model: str = field(default_factory=lambda: _env_str("OPENAI_MODEL", "gpt-4o"))

    # Search / scraping
    search_result_limit: int = field(default_factory=lambda: _env_int("SEARCH_RESULT_LIMIT", 8))
    max_scrape_sources: int = field(default_factory=lambda: _env_int("MAX_SCRAPE_SOURCES", 3))
    extra_scrape_sources: int = field(default_factory=lambda: _env_int("EXTRA_SCRAPE_SOURCES", 2))
    min_usable_sources: int = field(default_factory=lambda: _env_int("MIN_USABLE_SOURCES", 2))
    min_content_chars: int = field(default_factory=lambda: _env_int("MIN_CONTENT_CHARS", 100))
    max_source_chars: int = field(default_factory=lambda: _env_int("MAX_SOURCE_CHARS", 50000))

    # Summarization
    max_context_chars: int = field(default_factory=lambda: _env_int("MAX_CONTEXT_CHARS", 90000))

    # Batching
    validation_batch_size: int = field(default_factory=lambda: _env_int("VALIDATION_BATCH_SIZE", 10))
    max_leads_per_run: int = field(default_factory=lambda: _env_int("MAX_LEADS_PER_RUN", 10))
    leads_per_persona: int = field(default_factory=lambda: _env_int("LEADS_PER_PERSONA", 10))
    max_retries: int = field(default_factory=lambda: _env_int("MAX_RETRIES", 3))
    confidence_boost: float = field(default_factory=lambda: _env_float("CONFIDENCE_BOOST", 0.1))

    # Delays (seconds) between provider calls
    fetch_delay: float = field(default_factory=lambda: _env_float("FETCH_DELAY_SECONDS", 2.0))
    search_delay: float = field(default_factory=lambda: _env_float("SEARCH_DELAY_SECONDS", 1.0))
    validation_delay: float = field(default_factory=lambda: _env_float("VALIDATION_DELAY_SECONDS", 1.0))
    lead_delay: float = field(default_factory=lambda: _env_float("LEAD_DELAY_SECONDS", 10.0))
    upgrade_delay: float = field(default_factory=lambda: _env_float("UPGRADE_DELAY_SECONDS", 2.0))
    persona_delay: float = field(default_factory=lambda: _env_float("PERSONA_DELAY_SECONDS", 3.0))

    @property
    def has_jina(self) -> bool:
        return bool(self.jina_api_key and self.jina_api_key != "your_jina_api_key_here")

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key != "your_openai_api_key_here")


def get_settings() -> EnrichmentSettings:
    """Build settings from the current environment."""
    return EnrichmentSettings()
