"""
Leads Router - batch operations over lead records

Endpoints:
- POST /leads/dedupe - Collapse duplicate leads
- POST /leads/validate - Flag leads that are not real people
- POST /leads/enrich - Scrape + summarize the top pending leads
- POST /leads/enrich/retry - Retry failed enrichments
- POST /leads/upgrade - Replace placeholder contact fields
- POST /leads/discover - Find new leads for personas
- POST /leads/pipeline - Dedupe, validate, upgrade and enrich in one call

Each call takes the batch in the body and returns the updated batch; the
caller owns storage.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..services.enrichment import summarize_enrichment
from ..services.pipeline import LeadServices, build_services, run_pipeline
from ..services.quality.dedupe import dedupe_leads

router = APIRouter()

_services: Optional[LeadServices] = None


def get_services() -> LeadServices:
    """Build the provider-backed services once per process."""
    global _services
    if _services is None:
        try:
            _services = build_services()
        except ValueError as e:
            raise HTTPException(status_code=503, detail=f"Service not configured: {e}")
    return _services


# ============================================
# Pydantic Models
# ============================================

class LeadBatch(BaseModel):
    leads: List[Dict[str, Any]]


class EnrichRequest(LeadBatch):
    limit: Optional[int] = None


class RetryRequest(LeadBatch):
    max_retries: Optional[int] = None


class PipelineRequest(LeadBatch):
    upgrade: bool = True
    enrich: bool = True
    limit: Optional[int] = None


class DiscoverRequest(BaseModel):
    personas: List[Dict[str, Any]]


class LeadBatchResponse(BaseModel):
    leads: List[Dict[str, Any]]
    summary: Dict[str, Any]


# ============================================
# Endpoints
# ============================================

@router.post("/dedupe", response_model=LeadBatchResponse)
async def dedupe(batch: LeadBatch):
    """Drop later duplicates by (email, linkedin_url)."""
    unique = dedupe_leads(batch.leads)
    return LeadBatchResponse(
        leads=unique,
        summary={"received": len(batch.leads), "unique": len(unique), "removed": len(batch.leads) - len(unique)},
    )


@router.post("/validate", response_model=LeadBatchResponse)
async def validate(batch: LeadBatch, services: LeadServices = Depends(get_services)):
    """Set is_valid_person / validation_reason on every lead. Nothing is removed."""
    try:
        leads = await services.validator.validate_leads(batch.leads)
        valid = sum(1 for lead in leads if lead.get("is_valid_person") is not False)
        return LeadBatchResponse(leads=leads, summary={"total": len(leads), "valid": valid, "invalid": len(leads) - valid})
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/enrich", response_model=LeadBatchResponse)
async def enrich(request: EnrichRequest, services: LeadServices = Depends(get_services)):
    """Enrich pending leads, highest confidence first."""
    try:
        leads = await services.enricher.enrich_leads(request.leads, limit=request.limit)
        return LeadBatchResponse(leads=leads, summary=summarize_enrichment(leads))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/enrich/retry", response_model=LeadBatchResponse)
async def retry_enrichment(request: RetryRequest, services: LeadServices = Depends(get_services)):
    """Retry failed leads under the retry limit."""
    try:
        leads = await services.enricher.retry_failed_leads(request.leads, max_retries=request.max_retries)
        return LeadBatchResponse(leads=leads, summary=summarize_enrichment(leads))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/upgrade", response_model=LeadBatchResponse)
async def upgrade(batch: LeadBatch, services: LeadServices = Depends(get_services)):
    """Look for better contact data on leads with placeholder fields."""
    try:
        leads = await services.upgrader.upgrade_leads(batch.leads)
        upgraded = sum(1 for lead in leads if lead.get("contact_upgraded"))
        attempted = sum(1 for lead in leads if lead.get("contact_upgrade_attempted"))
        return LeadBatchResponse(leads=leads, summary={"total": len(leads), "upgraded": upgraded, "attempted": attempted})
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/discover", response_model=LeadBatchResponse)
async def discover(request: DiscoverRequest, services: LeadServices = Depends(get_services)):
    """Search for candidate leads matching each persona."""
    if not request.personas:
        raise HTTPException(status_code=400, detail="No personas provided")
    try:
        leads = await services.discovery.discover_leads(request.personas)
        return LeadBatchResponse(leads=leads, summary={"personas": len(request.personas), "found": len(leads)})
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/pipeline", response_model=LeadBatchResponse)
async def pipeline(request: PipelineRequest, services: LeadServices = Depends(get_services)):
    """Run every stage over one batch. Invalid leads are dropped from the response."""
    try:
        leads = await run_pipeline(
            request.leads,
            services,
            upgrade=request.upgrade,
            enrich=request.enrich,
            limit=request.limit,
        )
        return LeadBatchResponse(leads=leads, summary=summarize_enrichment(leads))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
