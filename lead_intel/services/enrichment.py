"""
Enrichment Service - scrape the web about each lead and extract intelligence.

Per-lead state machine (stored on the lead as `enrichment_state`):

    not_started -> scraped -> summarized -> done
         +-> failed (no substantial content / unexpected error)

`done` and `failed` are terminal for enrich_leads(); retry_failed_leads()
moves eligible leads back. Leads are processed one at a time with a delay
between them, and every lead's updates are applied in a single dict update.
"""

import inspect
from collections import Counter
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from .config import EnrichmentSettings, get_settings
from .intelligence.summarizer import IntelligenceSummarizer
from .models import LeadState, get_lead_state, utc_now
from .rate_limiter import RateLimiter
from .scraping.source_selector import SourceCollector

NO_CONTENT_ERROR = "No substantial content found"

PENDING_STATES = (LeadState.NOT_STARTED, LeadState.SCRAPED, LeadState.SUMMARIZED)

LeadCallback = Callable[[Dict[str, Any]], Any]


def _merge_sources(existing: Optional[List[Dict[str, Any]]], new: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Append new sources, skipping ones already recorded (same url and kind).

    A successful scrape of a URL whose earlier records all failed is still
    appended, so the lead's evidence shows the page that was actually used.
    """
    merged = list(existing or [])
    scraped: Dict[tuple, bool] = {}
    for s in merged:
        key = (s.get("url"), s.get("kind"))
        scraped[key] = scraped.get(key, False) or bool(s.get("scraped_successfully"))

    for source in new:
        key = (source.get("url"), source.get("kind"))
        succeeded = bool(source.get("scraped_successfully"))
        if key not in scraped or (succeeded and not scraped[key]):
            merged.append(source)
            scraped[key] = scraped.get(key, False) or succeeded
    return merged


def _confidence(lead: Dict[str, Any]) -> float:
    try:
        return float(lead.get("confidence_score") or 0.0)
    except (TypeError, ValueError):
        return 0.0


def is_ready_for_outreach(intelligence: Optional[Dict[str, Any]]) -> bool:
    if not intelligence or intelligence.get("error"):
        return False
    return intelligence.get("quality", "low") != "low"


async def _notify(callback: Optional[LeadCallback], lead: Dict[str, Any]) -> None:
    if callback is None:
        return
    result = callback(lead)
    if inspect.isawaitable(result):
        await result


class EnrichmentOrchestrator:
    """Drives source collection and summarization for a batch of leads."""

    def __init__(
        self,
        collector: SourceCollector,
        summarizer: IntelligenceSummarizer,
        settings: Optional[EnrichmentSettings] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        self.collector = collector
        self.summarizer = summarizer
        self.settings = settings or get_settings()
        self.limiter = limiter or RateLimiter(self.settings.lead_delay, name="enrichment")

    def _finish(self, lead: Dict[str, Any], intelligence: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
        """Build the terminal `done` updates from an intelligence dict."""
        ok = not intelligence.get("error")
        updates.update({
            "intelligence": intelligence,
            "enriched": ok,
            "enrichment_attempted": True,
            "enrichment_state": LeadState.DONE.value,
            "ready_for_outreach": is_ready_for_outreach(intelligence),
            "enrichment_error": intelligence.get("error"),
            "enriched_at": utc_now(),
        })
        if ok:
            current = _confidence(lead)
            updates["confidence_score"] = max(current, min(1.0, round(current + self.settings.confidence_boost, 4)))
        return updates

    async def enrich_lead(self, lead: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run one lead through the state machine.

        Args:
            lead: Lead record (mutated in place)

        Returns:
            Dict with the outcome: status is "skipped", "done" or "failed"
        """
        name = lead.get("name") or "Unknown"
        state = get_lead_state(lead)

        if state in (LeadState.DONE, LeadState.FAILED):
            print(f"[Enrichment] {name} already {state.value} - skipping", flush=True)
            return {"name": name, "status": "skipped", "state": state.value}

        updates: Dict[str, Any] = {"last_enrichment_attempt": utc_now()}

        if state == LeadState.SUMMARIZED and lead.get("intelligence"):
            lead.update(self._finish(lead, lead["intelligence"], updates))
            return {"name": name, "status": "done", "state": LeadState.DONE.value, "reused": "intelligence"}

        contents = lead.get("scraped_content") if state == LeadState.SCRAPED else None
        reused = bool(contents)

        try:
            if reused:
                print(f"[Enrichment] {name}: reusing {len(contents)} previously scraped sources", flush=True)
            else:
                collected = await self.collector.collect_sources(lead)
                updates["sources"] = _merge_sources(lead.get("sources"), [s.to_dict() for s in collected.sources])
                updates["search_query"] = collected.query

                if collected.no_content:
                    updates.update({
                        "enriched": False,
                        "enrichment_attempted": True,
                        "enrichment_state": LeadState.FAILED.value,
                        "enrichment_error": NO_CONTENT_ERROR,
                        "ready_for_outreach": False,
                    })
                    lead.update(updates)
                    print(f"[Enrichment] {name}: {NO_CONTENT_ERROR}", flush=True)
                    return {"name": name, "status": "failed", "state": LeadState.FAILED.value, "error": NO_CONTENT_ERROR}

                contents = collected.contents
                updates["scraped_content"] = contents
                updates["enrichment_state"] = LeadState.SCRAPED.value

            intelligence = await self.summarizer.summarize(name, contents)
            lead.update(self._finish(lead, intelligence.to_dict(), updates))

        except Exception as e:
            print(f"[Enrichment] Error enriching {name}: {e}", flush=True)
            updates.update({
                "enriched": False,
                "enrichment_attempted": True,
                "enrichment_state": LeadState.FAILED.value,
                "enrichment_error": str(e),
                "ready_for_outreach": False,
            })
            lead.update(updates)
            return {"name": name, "status": "failed", "state": LeadState.FAILED.value, "error": str(e)}

        return {
            "name": name,
            "status": "done",
            "state": LeadState.DONE.value,
            "reused": "content" if reused else None,
            "error": lead["intelligence"].get("error"),
        }

    def select_pending(self, leads: List[Dict[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Pending leads, highest confidence first, capped at `limit`."""
        limit = self.settings.max_leads_per_run if limit is None else limit
        pending = [lead for lead in leads if get_lead_state(lead) in PENDING_STATES]
        pending.sort(key=_confidence, reverse=True)
        return pending[:limit] if limit and limit > 0 else pending

    async def enrich_leads(
        self,
        leads: List[Dict[str, Any]],
        limit: Optional[int] = None,
        on_lead_complete: Optional[LeadCallback] = None,
    ) -> List[Dict[str, Any]]:
        """
        Enrich the top pending leads of a batch.

        Args:
            leads: Lead records (mutated in place)
            limit: Max leads to process (default: settings.max_leads_per_run)
            on_lead_complete: Called with each lead after its updates are applied

        Returns:
            The same list
        """
        if not isinstance(leads, list):
            raise TypeError(f"leads must be a list, got {type(leads).__name__}")

        selected = self.select_pending(leads, limit)
        skipped = len(leads) - len(selected)

        print(f"\n{'='*60}", flush=True)
        print(f"[Enrichment] Starting: {len(selected)} leads to enrich ({skipped} skipped or over limit)", flush=True)
        print(f"{'='*60}\n", flush=True)

        done = failed = 0
        for i, lead in enumerate(selected, 1):
            await self.limiter.wait()
            print(f"[Enrichment] ({i}/{len(selected)}) {lead.get('name')}", flush=True)
            outcome = await self.enrich_lead(lead)
            if outcome["status"] == "done" and not outcome.get("error"):
                done += 1
            elif outcome["status"] != "skipped":
                failed += 1
            await _notify(on_lead_complete, lead)

        print(f"\n{'='*60}", flush=True)
        print(f"[Enrichment] COMPLETE", flush=True)
        print(f"  - Enriched: {done}", flush=True)
        print(f"  - Failed: {failed}", flush=True)
        print(f"  - Not processed: {skipped}", flush=True)
        print(f"{'='*60}\n", flush=True)

        return leads

    async def retry_failed_leads(
        self,
        leads: List[Dict[str, Any]],
        max_retries: Optional[int] = None,
        on_lead_complete: Optional[LeadCallback] = None,
    ) -> List[Dict[str, Any]]:
        """
        Retry enrichment for failed leads that haven't exceeded the retry limit.

        Failed leads, and done leads whose intelligence carries an error, go back
        to `scraped` when their content is stored, otherwise to `not_started`.

        Returns:
            The same list
        """
        if not isinstance(leads, list):
            raise TypeError(f"leads must be a list, got {type(leads).__name__}")
        max_retries = self.settings.max_retries if max_retries is None else max_retries

        reset = []
        for lead in leads:
            state = get_lead_state(lead)
            errored = state == LeadState.FAILED or (
                state == LeadState.DONE and (lead.get("intelligence") or {}).get("error")
            )
            if not errored or int(lead.get("retry_count") or 0) >= max_retries:
                continue

            next_state = LeadState.SCRAPED if lead.get("scraped_content") else LeadState.NOT_STARTED
            lead.update({
                "enrichment_state": next_state.value,
                "retry_count": int(lead.get("retry_count") or 0) + 1,
            })
            reset.append(lead)

        print(f"[Enrichment] Retrying {len(reset)} failed leads", flush=True)
        if not reset:
            return leads

        await self.enrich_leads(reset, limit=len(reset), on_lead_complete=on_lead_complete)
        return leads


def summarize_enrichment(leads: List[Dict[str, Any]], top_domains: int = 10) -> Dict[str, Any]:
    """
    Count outcomes across a batch.

    Returns:
        Dict with total/enriched/failed/pending/ready counts, quality
        distribution, and the most used source domains
    """
    states = Counter(get_lead_state(lead).value for lead in leads)
    quality = Counter()
    domains = Counter()
    errored_done = 0

    for lead in leads:
        intelligence = lead.get("intelligence") or {}
        if get_lead_state(lead) == LeadState.DONE:
            if intelligence.get("error"):
                errored_done += 1
            else:
                quality[intelligence.get("quality", "low")] += 1
        for source in lead.get("sources") or []:
            if source.get("scraped_successfully"):
                host = urlparse(source.get("url") or "").hostname
                if host:
                    domains[host.removeprefix("www.")] += 1

    return {
        "total": len(leads),
        "enriched": states[LeadState.DONE.value] - errored_done,
        "failed": states[LeadState.FAILED.value] + errored_done,
        "pending": sum(states[s.value] for s in PENDING_STATES),
        "ready_for_outreach": sum(1 for lead in leads if lead.get("ready_for_outreach")),
        "quality": {level: quality[level] for level in ("high", "medium", "low")},
        "source_domains": dict(domains.most_common(top_domains)),
    }


def print_enrichment_summary(summary: Dict[str, Any]) -> None:
    print(f"\n{'='*60}", flush=True)
    print("[Enrichment] Run summary", flush=True)
    print(f"  - Total leads: {summary['total']}", flush=True)
    print(f"  - Enriched: {summary['enriched']}", flush=True)
    print(f"  - Failed: {summary['failed']}", flush=True)
    print(f"  - Pending: {summary['pending']}", flush=True)
    print(f"  - Ready for outreach: {summary['ready_for_outreach']}", flush=True)
    q = summary["quality"]
    print(f"  - Quality: high={q['high']} medium={q['medium']} low={q['low']}", flush=True)
    if summary["source_domains"]:
        print("  - Top sources: " + ", ".join(f"{d} ({n})" for d, n in summary["source_domains"].items()), flush=True)
    print(f"{'='*60}\n", flush=True)
