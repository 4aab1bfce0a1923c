from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        user_prompt: str,
        system_prompt: str = "",
    ) -> str:
        """Return provider response as plain text ("" when the model sent nothing)."""


class BaseEmbeddingClient(ABC):
    """Contract for provider-specific text embedding clients."""

    @abstractmethod
    async def embed(self, *, model: str, text: str) -> list[float]:
        """Return the embedding vector for a single text."""
