"""
Provider interfaces - the three external collaborators the core talks to.

Search and fetch never raise to the caller: they log and return an empty
result. The LLM provider raises; every caller contains the failure itself.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import SearchResult


class BaseSearchProvider(ABC):
    """Abstract base class for web search providers."""

    @abstractmethod
    async def search(self, query: str, limit: int = 8) -> List[SearchResult]:
        """
        Run a web search.

        Args:
            query: Free-text search query
            limit: Max results to return

        Returns:
            Ranked results, empty list on any provider error
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this provider for logging."""
        pass


class BaseContentFetcher(ABC):
    """Abstract base class for page content fetchers."""

    @abstractmethod
    async def fetch_content(self, url: str) -> str:
        """
        Fetch the visible text of a page.

        Returns:
            Page text, or "" on failure
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


class BaseLLMProvider(ABC):
    """Abstract base class for chat-completion providers."""

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        json_mode: bool = False,
        system: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Send one prompt and return the raw model text.

        Args:
            prompt: User message
            json_mode: Ask the provider for a JSON object response
            system: Optional system message
            temperature: Sampling temperature
            max_tokens: Response cap (None = provider default)

        Returns:
            Raw response text. Parsing is the caller's job.

        Raises:
            Any provider error. Callers decide how to degrade.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


class NoOpSearchProvider(BaseSearchProvider):
    """Returns no results. Used when no search key is configured."""

    @property
    def name(self) -> str:
        return "noop"

    async def search(self, query: str, limit: int = 8) -> List[SearchResult]:
        return []


class NoOpContentFetcher(BaseContentFetcher):
    """Returns empty content for every URL."""

    @property
    def name(self) -> str:
        return "noop"

    async def fetch_content(self, url: str) -> str:
        return ""
