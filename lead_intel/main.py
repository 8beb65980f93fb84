"""
Lead Intel - FastAPI Application

Headless API for deduplicating, validating, upgrading and enriching sales leads.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .routers import leads
from .services.config import get_settings

app = FastAPI(
    title="Lead Intel API",
    description="Validate, upgrade and enrich sales leads with web intelligence",
    version=__version__
)

# CORS middleware (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Lead Intel API",
        "version": __version__
    }


@app.get("/health")
async def health_check():
    """Health check with provider configuration."""
    settings = get_settings()

    return {
        "status": "healthy" if settings.has_openai else "degraded",
        "search": "jina" if settings.has_jina else "disabled",
        "fetcher": "jina" if settings.has_jina else "direct",
        "llm": settings.openai_model if settings.has_openai else "not configured"
    }


# Include routers
app.include_router(leads.router, prefix="/leads", tags=["Leads"])
