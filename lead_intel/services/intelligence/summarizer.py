"""
Intelligence Summarizer - turn scraped pages into structured outreach intel.

Combines source contents under a character limit, asks the LLM for a fixed
JSON schema, and normalizes whatever comes back so every category key is
present. Unparseable output and provider errors produce a degraded
Intelligence with `error` set instead of raising.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..config import EnrichmentSettings, get_settings
from ..models import (
    DEFAULT_SUMMARY,
    INTELLIGENCE_CATEGORIES,
    QUALITY_LEVELS,
    Intelligence,
)
from ..providers.base import BaseLLMProvider
from .json_parsing import ParseFailure, parse_json_response

CONTENT_SEPARATOR = "\n\n---\n\n"
TRUNCATION_MARKER = "\n\n...[Content truncated to fit context limits]"

PARSE_ERROR_PLACEHOLDER = "Analysis parsing error - unable to extract information"
PARSE_ERROR_OUTREACH = "Standard professional outreach recommended"
PARSE_ERROR_SUMMARY = "Competitive intelligence analysis could not be completed due to technical error"
PROVIDER_ERROR_SUMMARY = "Unable to extract competitive intelligence due to processing error"

SYSTEM_PROMPT = (
    "You are a competitive intelligence analyst who extracts specific, actionable business "
    "insights from web content. Focus on recent, concrete, and factual information. You must "
    "respond with ONLY valid JSON - no markdown, no explanations, no code blocks. Avoid generic "
    "traits and focus on what the person is actually doing, saying, or working on right now."
)

EXTRACTION_PROMPT = """Extract competitive intelligence and actionable insights about {name} from the web content below. Focus on SPECIFIC, RECENT, and ACTIONABLE information that would give someone an edge in business outreach. Return ONLY a JSON object:

{{
  "current_projects": ["specific current initiatives they're leading or involved in"],
  "recent_developments": ["recent appointments, achievements, company changes, or news about them"],
  "strategic_priorities": ["current business priorities or challenges they've mentioned publicly"],
  "industry_involvement": ["recent speaking engagements, publications, interviews, or public statements"],
  "company_context": ["recent company performance, changes, or initiatives they're driving"],
  "competitive_intelligence": ["specific insights about their role, responsibilities, or current focus areas"],
  "outreach_angles": ["specific conversation starters or topics that would resonate based on recent activities"],
  "recent_quotes_or_statements": ["any specific quotes, opinions, or positions they've taken recently"],
  "summary": "2-3 sentences focusing on their current role, recent activities, and what they're focused on right now",
  "intelligence_quality": "high/medium/low based on how specific and recent the information is"
}}

Extract ONLY specific, factual information from the content. Avoid generic traits like "strategic" or "innovative". Focus on what they're actually doing, saying, or working on right now.

Web content about {name}:
{content}"""


def build_context(contents: List[str], limit: int) -> Tuple[str, bool]:
    """
    Join source contents and cut them to the context limit.

    Returns:
        (combined text, truncated flag). Length is at most limit + len(TRUNCATION_MARKER).
    """
    combined = CONTENT_SEPARATOR.join(c for c in contents if c)
    if len(combined) <= limit:
        return combined, False
    return combined[:limit] + TRUNCATION_MARKER, True


def _as_string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if item is None:
            continue
        text = item.strip() if isinstance(item, str) else str(item)
        if text:
            items.append(text)
    return items


def _normalize_quality(data: Dict[str, Any]) -> str:
    raw = data.get("intelligence_quality") or data.get("confidence_level") or data.get("quality")
    if isinstance(raw, str):
        raw = raw.strip().lower()
        if raw in QUALITY_LEVELS:
            return raw
    return "low"


def normalize_intelligence(data: Dict[str, Any]) -> Tuple[Dict[str, List[str]], str, str]:
    """Back-fill every category with its placeholder. Returns (categories, summary, quality)."""
    categories = {}
    for key, placeholder in INTELLIGENCE_CATEGORIES.items():
        items = _as_string_list(data.get(key))
        categories[key] = items or [placeholder]

    summary = data.get("summary")
    summary = summary.strip() if isinstance(summary, str) and summary.strip() else DEFAULT_SUMMARY
    return categories, summary, _normalize_quality(data)


def parse_error_intelligence(raw: str, content_sources: int, truncated: bool) -> Intelligence:
    categories = {key: [PARSE_ERROR_PLACEHOLDER] for key in INTELLIGENCE_CATEGORIES}
    categories["outreach_angles"] = [PARSE_ERROR_OUTREACH]
    return Intelligence(
        categories=categories,
        summary=PARSE_ERROR_SUMMARY,
        quality="low",
        error="JSON parsing failed",
        raw_response=(raw or "")[:500],
        content_sources=content_sources,
        truncated=truncated,
        analysis_method="fallback_error",
    )


def provider_error_intelligence(error: str, content_sources: int, truncated: bool) -> Intelligence:
    return Intelligence(
        categories={key: [placeholder] for key, placeholder in INTELLIGENCE_CATEGORIES.items()},
        summary=PROVIDER_ERROR_SUMMARY,
        quality="low",
        error=error,
        content_sources=content_sources,
        truncated=truncated,
        analysis_method="fallback_error",
    )


class IntelligenceSummarizer:
    """Structured extraction over a lead's scraped content."""

    def __init__(self, llm: BaseLLMProvider, settings: Optional[EnrichmentSettings] = None):
        self.llm = llm
        self.settings = settings or get_settings()

    def build_prompt(self, person_name: str, contents: List[str]) -> Tuple[str, bool]:
        context, truncated = build_context(contents, self.settings.max_context_chars)
        return EXTRACTION_PROMPT.format(name=person_name, content=context), truncated

    async def summarize(self, person_name: str, contents: List[str]) -> Intelligence:
        """
        Extract intelligence about a person.

        Args:
            person_name: Name used in the prompt
            contents: Scraped source texts

        Returns:
            Intelligence with every category filled. `error` is set on failure.
        """
        usable = [c for c in (contents or []) if c]
        if not usable:
            return provider_error_intelligence("No content to summarize", 0, False)

        prompt, truncated = self.build_prompt(person_name, usable)
        if truncated:
            full_length = len(CONTENT_SEPARATOR.join(usable))
            print(f"[Summarizer] Content truncated from {full_length} to {self.settings.max_context_chars} characters", flush=True)

        print(f"[Summarizer] Extracting intelligence for {person_name} from {len(usable)} sources...", flush=True)
        try:
            raw = await self.llm.complete(
                prompt,
                json_mode=True,
                system=SYSTEM_PROMPT,
                temperature=0.1,
                max_tokens=1500,
            )
        except Exception as e:
            print(f"[Summarizer] Error extracting intelligence for {person_name}: {e}", flush=True)
            return provider_error_intelligence(str(e), len(usable), truncated)

        parsed = parse_json_response(raw, expect=dict)
        if isinstance(parsed, ParseFailure):
            print(f"[Summarizer] JSON parsing failed ({parsed.reason}); raw: {(raw or '')[:200]}...", flush=True)
            return parse_error_intelligence(raw, len(usable), truncated)

        categories, summary, quality = normalize_intelligence(parsed.value)
        print(f"[Summarizer] Extracted intelligence for {person_name} (quality: {quality})", flush=True)
        return Intelligence(
            categories=categories,
            summary=summary,
            quality=quality,
            content_sources=len(usable),
            truncated=truncated,
        )
