"""
Core records shared by the enrichment services.

Leads themselves stay plain dicts (they round-trip through JSON state files and
HTTP bodies untouched). The pieces the services produce - sources, search
results, intelligence - are small dataclasses with a to_dict() for storage.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Lead state
# =============================================================================

class LeadState(str, Enum):
    """Where a lead sits in the enrichment pipeline."""
    NOT_STARTED = "not_started"
    SCRAPED = "scraped"
    SUMMARIZED = "summarized"
    DONE = "done"
    FAILED = "failed"


def get_lead_state(lead: Dict[str, Any]) -> LeadState:
    """
    Read the enrichment state stored on a lead.

    Records written before the state key existed are classified from their
    fields: successful intelligence means done, stored content means scraped,
    an errored intelligence with nothing to reuse means failed.
    """
    raw = lead.get("enrichment_state")
    if raw:
        try:
            return LeadState(raw)
        except ValueError:
            pass

    intelligence = lead.get("intelligence")
    if intelligence and not intelligence.get("error"):
        return LeadState.DONE
    if lead.get("scraped_content"):
        return LeadState.SCRAPED
    if intelligence and intelligence.get("error"):
        return LeadState.FAILED
    return LeadState.NOT_STARTED


# =============================================================================
# Search results and sources
# =============================================================================

@dataclass
class SearchResult:
    """A single ranked hit from the search provider."""
    url: str
    title: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "title": self.title, "description": self.description}


SOURCE_REFERENCE = "reference"
SOURCE_SCRAPED = "scraped"


@dataclass
class Source:
    """A URL examined while enriching a lead."""
    url: str
    title: str
    scraped_successfully: bool
    kind: str                      # SOURCE_REFERENCE or SOURCE_SCRAPED
    content_chars: int = 0
    timestamp: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "scraped_successfully": self.scraped_successfully,
            "kind": self.kind,
            "content_chars": self.content_chars,
            "timestamp": self.timestamp,
        }


# =============================================================================
# Intelligence
# =============================================================================

# Category -> placeholder used when the model says nothing about it
INTELLIGENCE_CATEGORIES: Dict[str, str] = {
    "current_projects": "No specific current projects identified",
    "recent_developments": "No recent developments found",
    "strategic_priorities": "No specific strategic priorities identified",
    "industry_involvement": "No recent industry involvement found",
    "company_context": "No specific company context available",
    "competitive_intelligence": "Limited competitive intelligence available",
    "outreach_angles": "Standard industry discussion topics",
    "recent_quotes_or_statements": "No recent quotes or statements found",
}

DEFAULT_SUMMARY = "Professional with limited recent public information available"

QUALITY_LEVELS = ("high", "medium", "low")


@dataclass
class Intelligence:
    """Structured extraction produced by the summarizer."""
    categories: Dict[str, List[str]]
    summary: str = DEFAULT_SUMMARY
    quality: str = "low"
    error: Optional[str] = None
    raw_response: Optional[str] = None
    content_sources: int = 0
    truncated: bool = False
    analysis_method: str = "competitive_intelligence_extraction"
    generated_at: str = field(default_factory=utc_now)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {key: list(values) for key, values in self.categories.items()}
        data.update({
            "summary": self.summary,
            "quality": self.quality,
            "error": self.error,
            "content_sources": self.content_sources,
            "truncated": self.truncated,
            "analysis_method": self.analysis_method,
            "generated_at": self.generated_at,
        })
        if self.raw_response is not None:
            data["raw_response"] = self.raw_response
        return data
