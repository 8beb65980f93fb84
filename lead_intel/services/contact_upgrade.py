"""
Contact Upgrade Service - replace placeholder contact fields with real ones.

For each stored lead with a low-quality field, search for a contact-profile
page about the person, read it, ask the LLM to extract contact fields, and
apply the field upgrade rules one field at a time. Every applied change is
recorded as a "field: old → new" line in `contact_updates`.

A lead is visited at most once: `contact_upgraded` or `contact_upgrade_attempted`
is set whatever the outcome, and neither path removes existing data.
"""

import inspect
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from .config import EnrichmentSettings, get_settings
from .intelligence.json_parsing import ParseFailure, parse_json_response
from .models import SearchResult, utc_now
from .providers.base import BaseContentFetcher, BaseLLMProvider, BaseSearchProvider
from .quality.field_quality import FIELD_CHECKS, identify_contact_issues
from .quality.field_upgrade import plan_field_upgrades
from .rate_limiter import RateLimiter

# Sites that publish per-person contact profiles
PROFILE_DOMAINS = ["rocketreach.co"]
PROFILE_QUERY_TEMPLATE = "{name} rocket reach"
PROFILE_SEARCH_LIMIT = 3

EXTRACTION_PROMPT = """Extract contact information for "{name}" from this contact profile page content.

CONTENT:
{content}

Extract the following information and respond with ONLY a JSON object:
{{
  "email": "actual email address if found, or null if not shown/requires subscription",
  "linkedin_url": "full LinkedIn profile URL if found, or null",
  "company": "current company name (clean, without extra text)",
  "title": "current job title/position",
  "location": "current location/city"
}}

IMPORTANT:
- If the page only says the person "has emails" but shows no actual address, return null for email
- Extract the CURRENT company and title, not previous positions
- Clean company names (e.g., "Heidelberg Materials France" not "at Heidelberg Materials France")
- Return null for any field not clearly found
- Be precise and extract only factual information from the content"""


def needs_update(lead: Dict[str, Any]) -> bool:
    """True when the lead hasn't been visited and any tracked field is low quality."""
    if lead.get("contact_upgraded") or lead.get("contact_upgrade_attempted"):
        return False
    return any(check(lead.get(field)) for field, check in FIELD_CHECKS.items())


def has_useful_contact_info(info: Dict[str, Any]) -> bool:
    company = info.get("company")
    title = info.get("title")
    return bool(
        info.get("email")
        or info.get("linkedin_url")
        or (company and company != "Unknown")
        or (title and title != "Professional")
    )


def is_profile_url(url: str, domains: Optional[List[str]] = None) -> bool:
    host = (urlparse(url).hostname or "").lower()
    for domain in (domains if domains is not None else PROFILE_DOMAINS):
        if host == domain or host.endswith("." + domain):
            return True
    return False


class ContactUpgrader:
    """Finds better contact data for stored leads."""

    def __init__(
        self,
        search: BaseSearchProvider,
        fetcher: BaseContentFetcher,
        llm: BaseLLMProvider,
        settings: Optional[EnrichmentSettings] = None,
        limiter: Optional[RateLimiter] = None,
        profile_domains: Optional[List[str]] = None,
    ):
        self.search = search
        self.fetcher = fetcher
        self.llm = llm
        self.settings = settings or get_settings()
        self.limiter = limiter or RateLimiter(self.settings.upgrade_delay, name="upgrade")
        self.profile_domains = profile_domains if profile_domains is not None else PROFILE_DOMAINS

    async def find_profile(self, name: str) -> Optional[SearchResult]:
        query = PROFILE_QUERY_TEMPLATE.format(name=name)
        try:
            results = await self.search.search(query, PROFILE_SEARCH_LIMIT)
        except Exception as e:
            print(f"[Upgrade]   Search failed for {name}: {e}", flush=True)
            return None
        for result in results:
            if result.url and is_profile_url(result.url, self.profile_domains):
                return result
        return None

    async def extract_contact_info(self, url: str, name: str) -> Optional[Dict[str, Any]]:
        """
        Read a profile page and pull structured contact fields from it.

        Returns:
            Dict of extracted fields, or None if the page or the model gave nothing useful
        """
        try:
            content = await self.fetcher.fetch_content(url) or ""
        except Exception as e:
            print(f"[Upgrade]   Failed to read {url}: {e}", flush=True)
            return None

        if len(content) < self.settings.min_content_chars:
            print(f"[Upgrade]   Profile page content too short ({len(content)} characters)", flush=True)
            return None

        prompt = EXTRACTION_PROMPT.format(name=name, content=content[:self.settings.max_source_chars])
        try:
            raw = await self.llm.complete(prompt, json_mode=True, temperature=0.1, max_tokens=400)
        except Exception as e:
            print(f"[Upgrade]   LLM extraction error: {e}", flush=True)
            return None

        parsed = parse_json_response(raw, expect=dict)
        if isinstance(parsed, ParseFailure):
            print(f"[Upgrade]   Could not parse extraction: {parsed.reason}", flush=True)
            return None

        info = {k: v for k, v in parsed.value.items() if isinstance(v, str) and v.strip()}
        if not has_useful_contact_info(info):
            print("[Upgrade]   No useful contact info on profile page", flush=True)
            return None
        return info

    async def upgrade_lead(self, lead: Dict[str, Any]) -> Dict[str, Any]:
        """
        Try to upgrade one lead's contact fields.

        Returns:
            Dict with status: "upgraded", "unchanged", "no_profile", "no_info" or "skipped"
        """
        name = lead.get("name") or ""
        if lead.get("contact_upgraded"):
            return {"name": name, "status": "skipped"}

        updates: Dict[str, Any] = {
            "contact_upgrade_attempted": True,
            "contact_upgrade_attempted_at": utc_now(),
        }

        profile = await self.find_profile(name) if name else None
        if profile is None:
            print("[Upgrade]   No contact profile found", flush=True)
            lead.update(updates)
            return {"name": name, "status": "no_profile"}

        print(f"[Upgrade]   Found contact profile: {profile.url}", flush=True)
        updates["contact_profile_url"] = profile.url

        info = await self.extract_contact_info(profile.url, name)
        if info is None:
            lead.update(updates)
            return {"name": name, "status": "no_info"}

        field_updates, changes = plan_field_upgrades(lead, info)
        if not changes:
            print("[Upgrade]   Profile found but no better data available", flush=True)
            lead.update(updates)
            return {"name": name, "status": "unchanged"}

        updates.update(field_updates)
        updates.update({
            "contact_upgraded": True,
            "contact_upgraded_at": utc_now(),
            "contact_updates": list(lead.get("contact_updates") or []) + changes,
        })
        lead.update(updates)

        print(f"[Upgrade]   Updated {len(changes)} fields:", flush=True)
        for change in changes:
            print(f"[Upgrade]     {change}", flush=True)
        return {"name": name, "status": "upgraded", "changes": changes}

    async def upgrade_leads(
        self,
        leads: List[Dict[str, Any]],
        on_lead_complete: Optional[Callable[[Dict[str, Any]], Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Upgrade every lead that needs it, one at a time.

        Args:
            leads: Stored leads (mutated in place)
            on_lead_complete: Called with each visited lead after its updates are applied

        Returns:
            The same list
        """
        if not isinstance(leads, list):
            raise TypeError(f"leads must be a list, got {type(leads).__name__}")

        to_update = [lead for lead in leads if needs_update(lead)]
        if not to_update:
            print("[Upgrade] All leads already have good contact information", flush=True)
            return leads

        print(f"\n{'='*60}", flush=True)
        print(f"[Upgrade] {len(to_update)} leads need contact upgrades:", flush=True)
        for i, lead in enumerate(to_update, 1):
            print(f"  {i}. {lead.get('name')} - Issues: {', '.join(identify_contact_issues(lead))}", flush=True)
        print(f"{'='*60}\n", flush=True)

        upgraded = unchanged = failed = 0
        for i, lead in enumerate(to_update, 1):
            await self.limiter.wait()
            print(f"[Upgrade] ({i}/{len(to_update)}) {lead.get('name')}", flush=True)
            try:
                outcome = await self.upgrade_lead(lead)
            except Exception as e:
                print(f"[Upgrade]   Upgrade failed for {lead.get('name')}: {e}", flush=True)
                lead.update({"contact_upgrade_attempted": True, "contact_upgrade_error": str(e)})
                outcome = {"status": "error"}

            if outcome["status"] == "upgraded":
                upgraded += 1
            elif outcome["status"] == "unchanged":
                unchanged += 1
            else:
                failed += 1

            result = on_lead_complete(lead) if on_lead_complete else None
            if inspect.isawaitable(result):
                await result

        print(f"\n[Upgrade] COMPLETE: {upgraded} upgraded, {unchanged} unchanged, {failed} not found", flush=True)
        return leads
