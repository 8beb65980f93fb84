"""
Lead Discovery - turn target personas into candidate leads via web search.

For each persona: get a handful of short search queries (LLM, or
deterministic fallbacks), run them through the search provider, and parse
person name / job title / company out of each result. No contact data is
invented: email stays empty until an upgrade pass finds a real one.
"""

import re
import uuid
from typing import Any, Dict, List, Optional

from .config import EnrichmentSettings, get_settings
from .intelligence.json_parsing import ParseFailure, parse_json_response
from .models import SearchResult, utc_now
from .providers.base import BaseLLMProvider, BaseSearchProvider
from .quality.dedupe import dedupe_leads
from .rate_limiter import RateLimiter

QUERY_COUNT = 5
RESULTS_PER_QUERY = 5

FALLBACK_TITLE = "Professional"
FALLBACK_COMPANY = "Unknown Company"

NAME_RE = re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+(?:\s[A-Z][a-z]+)*)\s*-")
TITLE_PATTERNS = [
    re.compile(r"- (Chief [A-Za-z ]+Officer|C[A-Z]O|IT Director|Director|Manager|Head of [^-|]+)[^-|]*", re.IGNORECASE),
    re.compile(r"- ([^-|]+(?:Officer|Director|Manager|Head|President|Lead|Partner)[^-|]*)", re.IGNORECASE),
]
COMPANY_RE = re.compile(r"\b(?:at|chez)\s+([A-Z][\w&'.-]*(?:\s+(?:&\s+)?[A-Z][\w&'.-]*)*)")
SENIORITY_RE = re.compile(r"\b(Chief|C[A-Z]O|Director|Head|VP|Vice President|President|Partner)\b")

QUERY_PROMPT = """Generate {count} simple, lightweight search queries to find professional profiles matching this persona.

PERSONA DETAILS:
Title: {title}
Company Type: {company}
Industry: {industry}
Location: {location}

Create SIMPLE queries that are likely to return results:
- Keep queries short and focused
- Avoid complex operators like site: or multiple quotes
- Focus on job title + location + industry
- Make queries broad enough to find results
- Use natural language, not search operators

Respond with ONLY a JSON object:
{{
  "queries": ["query 1", "query 2", "query 3", "query 4", "query 5"]
}}"""


def fallback_queries(persona: Dict[str, Any]) -> List[str]:
    title = persona.get("title") or persona.get("name") or "Director"
    location = persona.get("location") or ""
    industry = persona.get("industry") or persona.get("company") or ""

    queries = [
        f"{title} {location} LinkedIn",
        f"{title} {location} {industry}",
        f"{title} {industry}",
        f"{title} LinkedIn",
        f"{industry} {title} {location}",
    ]
    cleaned = []
    for query in queries:
        query = " ".join(query.split())
        if query and query not in cleaned:
            cleaned.append(query)
    return cleaned


def extract_name(title: str) -> Optional[str]:
    """Person name from a result title like "Jane Doe - CTO at Acme | LinkedIn"."""
    if not title:
        return None
    match = NAME_RE.match(title)
    if match:
        return match.group(1).strip()

    words = title.split()
    if len(words) >= 2 and words[0][:1].isupper() and words[1][:1].isupper():
        first, second = words[0].strip(",|-"), words[1].strip(",|-")
        if first.isalpha() and second.isalpha():
            return f"{first} {second}"
    return None


def extract_job_title(title: str) -> str:
    for pattern in TITLE_PATTERNS:
        match = pattern.search(title or "")
        if match:
            return match.group(1).strip()
    return FALLBACK_TITLE


def extract_company(*texts: str) -> str:
    for text in texts:
        match = COMPANY_RE.search(text or "")
        if match:
            return match.group(1).strip(" .,")
    return FALLBACK_COMPANY


def score_result(result: SearchResult, persona: Dict[str, Any]) -> float:
    score = 0.5
    if "linkedin.com" in result.url:
        score += 0.2
    if len(result.description or "") > 50:
        score += 0.1
    if SENIORITY_RE.search(result.title or ""):
        score += 0.1
    persona_title = (persona.get("title") or "").lower()
    if persona_title and persona_title in (result.title or "").lower():
        score += 0.1
    return min(1.0, round(score, 2))


def result_to_lead(result: SearchResult, persona: Dict[str, Any], query: str) -> Optional[Dict[str, Any]]:
    """Build a lead from one search hit, or None when no person name is found."""
    name = extract_name(result.title)
    if not name:
        return None

    persona_id = persona.get("id") or persona.get("name") or persona.get("title")
    is_linkedin = "linkedin.com/in/" in result.url.lower()
    return {
        "id": f"lead_{uuid.uuid4().hex[:12]}",
        "name": name,
        "title": extract_job_title(result.title),
        "company": extract_company(result.title, result.description),
        "email": None,
        "linkedin_url": result.url if is_linkedin else None,
        "source_url": result.url,
        "location": persona.get("location"),
        "confidence_score": score_result(result, persona),
        "persona_id": persona_id,
        "persona_match_reasons": [
            f"Found via targeted search for {persona.get('title') or persona_id}",
            f"Query match: \"{query}\"",
        ],
        "search_query": query,
        "source": "web_search",
        "raw_data": (result.description or "")[:300],
        "found_at": utc_now(),
    }


class LeadDiscovery:
    """Persona-driven lead search."""

    def __init__(
        self,
        search: BaseSearchProvider,
        llm: Optional[BaseLLMProvider] = None,
        settings: Optional[EnrichmentSettings] = None,
        query_limiter: Optional[RateLimiter] = None,
        persona_limiter: Optional[RateLimiter] = None,
    ):
        self.search = search
        self.llm = llm
        self.settings = settings or get_settings()
        self.query_limiter = query_limiter or RateLimiter(self.settings.search_delay, name="discovery-query")
        self.persona_limiter = persona_limiter or RateLimiter(self.settings.persona_delay, name="discovery-persona")

    async def generate_search_queries(self, persona: Dict[str, Any]) -> List[str]:
        """Ask the LLM for search queries; fall back to title-based ones on any failure."""
        if self.llm is None:
            return fallback_queries(persona)

        prompt = QUERY_PROMPT.format(
            count=QUERY_COUNT,
            title=persona.get("title") or "Unknown",
            company=persona.get("company") or "Any",
            industry=persona.get("industry") or "Any",
            location=persona.get("location") or "Any",
        )
        try:
            raw = await self.llm.complete(prompt, json_mode=True, temperature=0.3, max_tokens=600)
        except Exception as e:
            print(f"[Discovery] LLM query generation error: {e}", flush=True)
            return fallback_queries(persona)

        parsed = parse_json_response(raw, expect=dict)
        queries = None if isinstance(parsed, ParseFailure) else parsed.value.get("queries")
        if not isinstance(queries, list):
            print("[Discovery] Invalid queries response, using fallback queries", flush=True)
            return fallback_queries(persona)

        cleaned = [q.strip() for q in queries if isinstance(q, str) and q.strip()]
        return cleaned[:QUERY_COUNT] or fallback_queries(persona)

    async def search_persona(self, persona: Dict[str, Any], queries: List[str]) -> List[Dict[str, Any]]:
        target = self.settings.leads_per_persona
        found: List[Dict[str, Any]] = []

        for i, query in enumerate(queries, 1):
            if len(found) >= target:
                break
            await self.query_limiter.wait()
            print(f"[Discovery]   Query {i}/{len(queries)}: \"{query}\"", flush=True)
            try:
                results = await self.search.search(query, RESULTS_PER_QUERY)
            except Exception as e:
                print(f"[Discovery]   Query failed: {e}", flush=True)
                continue

            leads = [lead for lead in (result_to_lead(r, persona, query) for r in results) if lead]
            print(f"[Discovery]   {len(leads)} candidate leads from {len(results)} results", flush=True)
            found.extend(leads)

        return dedupe_leads(found)[:target]

    async def discover_leads(self, personas: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Find candidate leads for each persona.

        Args:
            personas: Dicts with title (and optionally name/id, company, industry, location)

        Returns:
            Deduplicated leads, at most leads_per_persona per persona
        """
        if not isinstance(personas, list):
            raise TypeError(f"personas must be a list, got {type(personas).__name__}")

        all_leads: List[Dict[str, Any]] = []
        for i, persona in enumerate(personas, 1):
            await self.persona_limiter.wait()
            label = persona.get("name") or persona.get("title") or f"persona {i}"
            print(f"\n[Discovery] Persona {i}/{len(personas)}: {label}", flush=True)

            queries = await self.generate_search_queries(persona)
            print(f"[Discovery] Generated {len(queries)} search queries", flush=True)
            leads = await self.search_persona(persona, queries)
            print(f"[Discovery] Found {len(leads)} leads for {label}", flush=True)
            all_leads.extend(leads)

        unique = dedupe_leads(all_leads)
        print(f"\n[Discovery] Total leads collected: {len(unique)}", flush=True)
        return unique
