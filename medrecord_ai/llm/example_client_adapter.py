"""Offline client adapter.

Use this module for local development and tests, and as a reference when
implementing new provider adapters: implement BaseCompletionClient and
BaseEmbeddingClient and register the provider in LlmClientFactory.
"""

import hashlib
import json
import re
from typing import ClassVar

import numpy as np

from medrecord_ai.llm.client_base import BaseCompletionClient, BaseEmbeddingClient


class ExampleClientAdapter(BaseCompletionClient, BaseEmbeddingClient):
    """Answers without network calls.

    Completions are canned: the extraction prompt gets an empty record, the
    classification prompt gets ``other``, anything else gets a fixed summary.
    Embeddings are hashed bag-of-words vectors, so texts sharing words are
    similar and identical texts have cosine similarity 1.
    """

    DEFAULT_RECORD: ClassVar[dict[str, object]] = {
        "patientName": "",
        "date": "",
        "doctorName": "",
        "diagnosis": "",
        "prescription": [],
        "recordType": "other",
        "notes": "",
    }
    DEFAULT_LABEL: ClassVar[str] = "other"
    DEFAULT_SUMMARY: ClassVar[str] = "Medical document processed offline; no summary available."

    _TOKEN_RE: ClassVar[re.Pattern[str]] = re.compile(r"[a-z0-9]+")

    def __init__(self, dimensions: int = 256) -> None:
        self._dimensions = dimensions

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        user_prompt: str,
        system_prompt: str = "",
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt
        if "JSON object" in user_prompt:
            return json.dumps(self.DEFAULT_RECORD)
        if "Classify" in user_prompt:
            return self.DEFAULT_LABEL
        return self.DEFAULT_SUMMARY

    async def embed(self, *, model: str, text: str) -> list[float]:
        _ = model
        vector = np.zeros(self._dimensions, dtype=np.float32)
        for token in self._TOKEN_RE.findall(text.lower()):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            vector[int.from_bytes(digest[:4], "big") % self._dimensions] += 1.0
        return vector.tolist()
