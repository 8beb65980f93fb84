"""Show enrichment results from a run state file."""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lead_intel.services.db.state_store import LeadStateStore
from lead_intel.services.enrichment import print_enrichment_summary, summarize_enrichment
from lead_intel.services.quality.field_quality import identify_contact_issues

if len(sys.argv) < 2:
    print("Usage: python scripts/show_results.py <state.json>")
    sys.exit(1)

leads = LeadStateStore(sys.argv[1]).load_leads()
print_enrichment_summary(summarize_enrichment(leads))

for lead in sorted(leads, key=lambda l: l.get("confidence_score") or 0, reverse=True):
    intelligence = lead.get("intelligence") or {}
    state = lead.get("enrichment_state", "not_started")
    print(f"\n{lead.get('name')} | {lead.get('title')} @ {lead.get('company')} [{state}]")
    print(f"  Confidence: {lead.get('confidence_score', 0):.2f} | Ready: {lead.get('ready_for_outreach', False)}")

    issues = identify_contact_issues(lead)
    if issues:
        print(f"  Contact issues: {', '.join(issues)}")
    for change in lead.get("contact_updates") or []:
        print(f"  Upgraded {change}")

    if intelligence.get("error"):
        print(f"  Error: {intelligence['error']}")
    elif intelligence:
        print(f"  Quality: {intelligence.get('quality')}")
        print(f"  Summary: {intelligence.get('summary')}")
        for angle in (intelligence.get("outreach_angles") or [])[:3]:
            print(f"    - {angle}")
