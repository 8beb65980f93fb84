"""
Discover leads for a set of personas and start a new run state file.

Personas file: JSON list of {"name", "title", "company", "industry", "location"}.

Usage:
    python scripts/discover_leads.py personas.json profiles/run_123/state.json
"""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import asyncio
import json

from lead_intel.services.db.state_store import LeadStateStore
from lead_intel.services.pipeline import build_services


async def discover(personas_path: str, state_path: str, validate: bool = True):
    with open(personas_path, "r", encoding="utf-8") as f:
        personas = json.load(f)

    print("=" * 60)
    print(f"DISCOVERING LEADS FOR {len(personas)} PERSONAS")
    print("=" * 60)

    services = build_services()
    leads = await services.discovery.discover_leads(personas)

    if validate and leads:
        await services.validator.validate_leads(leads)
        invalid = [lead for lead in leads if lead.get("is_valid_person") is False]
        leads = [lead for lead in leads if lead.get("is_valid_person") is not False]
        print(f"\nFiltered out {len(invalid)} invalid leads, {len(leads)} remaining")

    store = LeadStateStore(state_path)
    existing = store.load_leads() if store.exists() else []
    store.save_leads(existing + leads, personas=personas)

    print(f"\nSaved {len(leads)} new leads to {state_path}")
    for lead in leads:
        print(f"  {lead['name']}: {lead['title']} @ {lead['company']} ({lead['confidence_score']:.2f})")


def main():
    parser = argparse.ArgumentParser(description="Discover leads for personas")
    parser.add_argument("personas", help="JSON file with a list of personas")
    parser.add_argument("state", help="Run state file to create or extend")
    parser.add_argument("--no-validate", action="store_true", help="Keep leads without the LLM person check")

    args = parser.parse_args()
    asyncio.run(discover(args.personas, args.state, validate=not args.no_validate))


if __name__ == "__main__":
    main()
