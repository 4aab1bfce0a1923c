from medrecord_ai.classification.exceptions import ClassificationError
from medrecord_ai.classification.models import DocumentType
from medrecord_ai.llm.client_base import BaseCompletionClient
from medrecord_ai.llm.exceptions import LlmError
from medrecord_ai.logging.logger import Log

_PROMPT_TEMPLATE = """Classify this medical document as one of these categories: {labels}.
Return ONLY the category name, nothing else.

Document text:
{text}
Category:
"""


class DocumentClassifier:
    """Asks the language model for a single document-type label."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 50,
        strict_labels: bool = True,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._strict_labels = strict_labels

    async def classify(self, text: str) -> str:
        """Return the document-type label for *text*.

        With strict labels, anything outside DocumentType becomes ``other``;
        otherwise the model's label is returned verbatim (lower-cased).

        Raises:
            ClassificationError: if the completion call fails.
        """
        prompt = _PROMPT_TEMPLATE.format(labels=", ".join(DocumentType.values()), text=text)
        try:
            raw = await self._client.create_chat_completion(
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                user_prompt=prompt,
            )
        except LlmError as exc:
            raise ClassificationError(f"Document classification failed: {exc}") from exc

        label = self._clean(raw)
        Log.debug(f"Classifier raw response: {raw!r}")
        if not label:
            return DocumentType.OTHER.value
        if self._strict_labels and not DocumentType.is_valid(label):
            Log.warning(f"Classifier returned unknown label '{label}', using 'other'")
            return DocumentType.OTHER.value
        return label

    @staticmethod
    def _clean(raw: str) -> str:
        return raw.strip().strip("\"'`.").strip().lower()
