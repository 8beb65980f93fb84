# External providers: search, page content, LLM
from .base import (
    BaseSearchProvider,
    BaseContentFetcher,
    BaseLLMProvider,
    NoOpSearchProvider,
    NoOpContentFetcher,
)
from .jina_client import JinaSearchClient, JinaReaderClient
from .html_fetcher import DirectPageFetcher, extract_visible_text
from .openai_client import OpenAIChatProvider
from .factory import get_search_provider, get_content_fetcher, get_llm_provider

__all__ = [
    "BaseSearchProvider",
    "BaseContentFetcher",
    "BaseLLMProvider",
    "NoOpSearchProvider",
    "NoOpContentFetcher",
    "JinaSearchClient",
    "JinaReaderClient",
    "DirectPageFetcher",
    "extract_visible_text",
    "OpenAIChatProvider",
    "get_search_provider",
    "get_content_fetcher",
    "get_llm_provider",
]
