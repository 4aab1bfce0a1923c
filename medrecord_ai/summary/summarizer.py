from medrecord_ai.llm.client_base import BaseCompletionClient
from medrecord_ai.llm.exceptions import LlmError
from medrecord_ai.logging.logger import Log
from medrecord_ai.summary.exceptions import SummaryError

_PROMPT_TEMPLATE = """Summarize this medical document in a concise way:
{text}"""


class SummaryGenerator:
    """Produces a short natural-language summary of a document."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 150,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def summarize(self, text: str) -> str:
        """Raises SummaryError if the completion call fails."""
        try:
            summary = await self._client.create_chat_completion(
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                user_prompt=_PROMPT_TEMPLATE.format(text=text),
            )
        except LlmError as exc:
            raise SummaryError(f"Summary generation failed: {exc}") from exc
        summary = summary.strip()
        Log.info(f"Generated summary of {len(summary)} chars")
        return summary
