"""
Service wiring and the end-to-end lead pipeline.

build_services() constructs every provider once and hands the same instances
to each component. run_pipeline() chains the stages for a batch:
dedupe -> validate -> (drop invalid) -> contact upgrade -> enrichment.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .config import EnrichmentSettings, get_settings
from .contact_upgrade import ContactUpgrader
from .discovery import LeadDiscovery
from .enrichment import EnrichmentOrchestrator
from .intelligence.summarizer import IntelligenceSummarizer
from .intelligence.validator import LeadValidator
from .providers.base import BaseContentFetcher, BaseLLMProvider, BaseSearchProvider
from .providers.factory import get_content_fetcher, get_llm_provider, get_search_provider
from .quality.dedupe import dedupe_leads
from .scraping.source_selector import SourceCollector


@dataclass
class LeadServices:
    settings: EnrichmentSettings
    search: BaseSearchProvider
    fetcher: BaseContentFetcher
    llm: BaseLLMProvider
    validator: LeadValidator
    enricher: EnrichmentOrchestrator
    upgrader: ContactUpgrader
    discovery: LeadDiscovery


def build_services(
    settings: Optional[EnrichmentSettings] = None,
    search: Optional[BaseSearchProvider] = None,
    fetcher: Optional[BaseContentFetcher] = None,
    llm: Optional[BaseLLMProvider] = None,
) -> LeadServices:
    """
    Construct all services around one set of providers.

    Args:
        settings: Settings (default: read from environment)
        search / fetcher / llm: Provider overrides; defaults come from the factories

    Raises:
        ValueError: if a required provider key is missing
    """
    settings = settings or get_settings()
    search = search or get_search_provider()
    fetcher = fetcher or get_content_fetcher()
    llm = llm or get_llm_provider()

    collector = SourceCollector(search, fetcher, settings)
    return LeadServices(
        settings=settings,
        search=search,
        fetcher=fetcher,
        llm=llm,
        validator=LeadValidator(llm, settings),
        enricher=EnrichmentOrchestrator(collector, IntelligenceSummarizer(llm, settings), settings),
        upgrader=ContactUpgrader(search, fetcher, llm, settings),
        discovery=LeadDiscovery(search, llm, settings),
    )


async def run_pipeline(
    leads: List[Dict[str, Any]],
    services: LeadServices,
    upgrade: bool = True,
    enrich: bool = True,
    limit: Optional[int] = None,
    on_lead_complete: Optional[Callable[[Dict[str, Any]], Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Run a batch through every stage.

    Returns:
        The deduplicated, validated leads (invalid ones dropped)
    """
    leads = dedupe_leads(leads)

    # Leads validated on an earlier run keep their verdict
    unchecked = [lead for lead in leads if "is_valid_person" not in lead]
    if unchecked:
        await services.validator.validate_leads(unchecked)

    valid = [lead for lead in leads if lead.get("is_valid_person") is not False]
    if len(valid) < len(leads):
        print(f"[Pipeline] Dropped {len(leads) - len(valid)} leads that are not real people", flush=True)

    if upgrade:
        await services.upgrader.upgrade_leads(valid, on_lead_complete=on_lead_complete)
    if enrich:
        await services.enricher.enrich_leads(valid, limit=limit, on_lead_complete=on_lead_complete)
    return valid
