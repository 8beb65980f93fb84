# Scraping services
from .source_selector import (
    SourceCollector,
    CollectedSources,
    build_search_queries,
    is_reference_url,
    is_auth_url,
    REFERENCE_DOMAINS,
)

__all__ = [
    "SourceCollector",
    "CollectedSources",
    "build_search_queries",
    "is_reference_url",
    "is_auth_url",
    "REFERENCE_DOMAINS",
]
