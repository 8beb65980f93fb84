"""
Resume enrichment from a saved run state file.

Leads that already have intelligence are skipped; leads with stored content
are summarized without re-scraping. State is saved after every lead, so the
script can be interrupted and re-run at any point.

Usage:
    python scripts/resume_enrich.py profiles/run_123/state.json
    python scripts/resume_enrich.py profiles/run_123/state.json --retry --limit 5
"""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import asyncio

from lead_intel.services.db.state_store import LeadStateStore
from lead_intel.services.enrichment import print_enrichment_summary, summarize_enrichment
from lead_intel.services.pipeline import build_services


async def resume(state_path: str, limit: int = None, retry: bool = False, upgrade: bool = False):
    print("=" * 60)
    print("RESUMING ENRICHMENT")
    print("=" * 60)

    store = LeadStateStore(state_path)
    state = store.load()
    leads = state["leads"]
    if not leads:
        print(f"\nNo leads found in {state_path}. Run discovery first.")
        return

    print(f"\nLoaded run: {state['run_id']} ({len(leads)} leads)")
    print_enrichment_summary(summarize_enrichment(leads))

    services = build_services()

    def persist(_lead):
        store.save_leads(leads, run_id=state["run_id"])

    if upgrade:
        await services.upgrader.upgrade_leads(leads, on_lead_complete=persist)

    if retry:
        await services.enricher.retry_failed_leads(leads, on_lead_complete=persist)

    await services.enricher.enrich_leads(leads, limit=limit, on_lead_complete=persist)

    store.save_leads(leads, run_id=state["run_id"])
    print_enrichment_summary(summarize_enrichment(leads))
    print(f"State saved to {state_path}")


def main():
    parser = argparse.ArgumentParser(description="Resume lead enrichment from a state file")
    parser.add_argument("state", help="Path to the run's state.json")
    parser.add_argument("--limit", type=int, help="Max leads to enrich this run")
    parser.add_argument("--retry", action="store_true", help="Retry failed leads first")
    parser.add_argument("--upgrade", action="store_true", help="Run contact upgrades before enrichment")

    args = parser.parse_args()

    if not os.path.exists(args.state):
        print(f"State file not found: {args.state}")
        sys.exit(1)

    asyncio.run(resume(args.state, limit=args.limit, retry=args.retry, upgrade=args.upgrade))


if __name__ == "__main__":
    main()
