"""Process-lifetime, in-memory similarity index.

Nothing is persisted: the index starts empty and only knows what has been
passed to ``index`` since the process started. Whoever owns durable storage
re-indexes records it wants searchable after a restart.
"""

import asyncio
from dataclasses import dataclass
from typing import Generic

import numpy as np

from medrecord_ai.index.base import EmbeddingIndex, R
from medrecord_ai.index.exceptions import EmbeddingError
from medrecord_ai.llm.client_base import BaseEmbeddingClient
from medrecord_ai.llm.exceptions import LlmError
from medrecord_ai.logging.logger import Log


@dataclass(frozen=True)
class IndexedDocument(Generic[R]):
    """Text, its unit-normalized embedding, and the record it stands for."""

    text: str
    embedding: np.ndarray
    record: R


class InMemoryEmbeddingIndex(EmbeddingIndex[R]):
    """Cosine-similarity search over embeddings held in a list.

    Insertion and snapshotting share one asyncio lock; scoring runs on a
    snapshot, so a search racing an insert may or may not see the new entry.
    """

    def __init__(self, *, client: BaseEmbeddingClient, model: str) -> None:
        self._client = client
        self._model = model
        self._documents: list[IndexedDocument[R]] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._documents)

    async def index(self, text: str, record: R) -> None:
        if not text or not text.strip():
            raise ValueError("Cannot index a document without text")
        embedding = await self._embed(text)
        async with self._lock:
            self._documents.append(IndexedDocument(text=text, embedding=embedding, record=record))
            size = len(self._documents)
        Log.info(f"Indexed document ({len(text)} chars)", index_size=size)

    async def search(self, query: str, limit: int = 5) -> list[R]:
        async with self._lock:
            snapshot = list(self._documents)
        if not snapshot or limit <= 0:
            return []

        query_embedding = await self._embed(query)
        matrix = np.vstack([doc.embedding for doc in snapshot])
        if matrix.shape[1] != query_embedding.shape[0]:
            raise EmbeddingError(
                f"Query embedding has {query_embedding.shape[0]} dimensions, "
                f"index holds {matrix.shape[1]}"
            )
        scores = matrix @ query_embedding
        # Stable sort keeps insertion order among equal scores.
        order = np.argsort(-scores, kind="stable")

        results: list[R] = []
        seen: set[int] = set()
        for position in order:
            record = snapshot[int(position)].record
            if id(record) in seen:
                continue
            seen.add(id(record))
            results.append(record)
            if len(results) >= limit:
                break
        Log.debug(f"Search returned {len(results)} of {len(snapshot)} documents")
        return results

    async def clear(self) -> None:
        async with self._lock:
            self._documents.clear()
        Log.info("Similarity index cleared")

    async def _embed(self, text: str) -> np.ndarray:
        try:
            raw = await self._client.embed(model=self._model, text=text)
        except LlmError as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc
        vector = np.asarray(raw, dtype=np.float32)
        if vector.ndim != 1 or vector.size == 0:
            raise EmbeddingError(f"Embedding has unexpected shape {vector.shape}")
        norm = float(np.linalg.norm(vector))
        # A zero vector has no direction; it scores 0 against everything.
        return vector / norm if norm > 0 else vector
