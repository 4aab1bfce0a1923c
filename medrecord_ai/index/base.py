from abc import ABC, abstractmethod
from typing import Generic, TypeVar

R = TypeVar("R")


class EmbeddingIndex(ABC, Generic[R]):
    """Contract for similarity indexes mapping document text to records."""

    @abstractmethod
    async def index(self, text: str, record: R) -> None:
        """Embed *text* and store it alongside *record*.

        Raises:
            EmbeddingError: if the embedding call fails.
        """

    @abstractmethod
    async def search(self, query: str, limit: int = 5) -> list[R]:
        """Return up to *limit* records, most similar first.

        An empty index yields an empty list.

        Raises:
            EmbeddingError: if the query embedding call fails.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Drop every indexed document."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of indexed documents."""
