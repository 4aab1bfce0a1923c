import httpx
import openai
from openai.types.chat import ChatCompletionMessageParam

from medrecord_ai.llm.client_base import BaseCompletionClient, BaseEmbeddingClient
from medrecord_ai.llm.exceptions import LlmError, LlmNetworkError, LlmTimeoutError


class OpenAIClientAdapter(BaseCompletionClient, BaseEmbeddingClient):
    """Completion and embedding client built on the OpenAI-compatible async API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        user_prompt: str,
        system_prompt: str = "",
    ) -> str:
        messages: list[ChatCompletionMessageParam] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=messages,
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise LlmTimeoutError(f"AI provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise LlmNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise LlmNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise LlmError("AI returned no choices")
        return response.choices[0].message.content or ""

    async def embed(self, *, model: str, text: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(model=model, input=text)
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise LlmTimeoutError(f"Embedding provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise LlmNetworkError(f"Embedding provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise LlmNetworkError(f"Embedding provider API error: {exc}") from exc

        if not response.data:
            raise LlmError("Embedding provider returned no vectors")
        return list(response.data[0].embedding)
