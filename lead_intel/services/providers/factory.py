"""
Provider factories - pick an implementation by name.

"auto" chooses the Jina clients when a key is configured and falls back to
the key-less implementations otherwise.
"""

from ..config import get_settings
from .base import (
    BaseContentFetcher,
    BaseLLMProvider,
    BaseSearchProvider,
    NoOpContentFetcher,
    NoOpSearchProvider,
)
from .html_fetcher import DirectPageFetcher
from .jina_client import JinaReaderClient, JinaSearchClient
from .openai_client import OpenAIChatProvider


def get_search_provider(name: str = "auto") -> BaseSearchProvider:
    """
    Factory function to get a search provider by name.

    Args:
        name: "jina", "noop" or "auto"

    Returns:
        Search provider instance
    """
    if name == "auto":
        name = "jina" if get_settings().has_jina else "noop"

    providers = {
        "jina": JinaSearchClient,
        "noop": NoOpSearchProvider,
    }

    if name not in providers:
        raise ValueError(f"Unknown search provider: {name}. Available: {list(providers.keys())}")

    return providers[name]()


def get_content_fetcher(name: str = "auto") -> BaseContentFetcher:
    """
    Factory function to get a content fetcher by name.

    Args:
        name: "jina", "direct", "noop" or "auto"
    """
    if name == "auto":
        name = "jina" if get_settings().has_jina else "direct"

    fetchers = {
        "jina": JinaReaderClient,
        "direct": DirectPageFetcher,
        "noop": NoOpContentFetcher,
    }

    if name not in fetchers:
        raise ValueError(f"Unknown content fetcher: {name}. Available: {list(fetchers.keys())}")

    return fetchers[name]()


def get_llm_provider(name: str = "openai") -> BaseLLMProvider:
    """Factory function to get an LLM provider by name."""
    providers = {
        "openai": OpenAIChatProvider,
    }

    if name not in providers:
        raise ValueError(f"Unknown LLM provider: {name}. Available: {list(providers.keys())}")

    return providers[name]()
