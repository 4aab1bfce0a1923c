"""LLM-powered structured field extraction for medical documents."""

import dataclasses
import json
import re
from pathlib import Path
from typing import Any

from medrecord_ai.classification.classifier import DocumentClassifier
from medrecord_ai.classification.exceptions import ClassificationError
from medrecord_ai.classification.models import DocumentType
from medrecord_ai.extraction.exceptions import (
    MalformedExtractionError,
    StructuredExtractionError,
)
from medrecord_ai.extraction.models import StructuredRecord
from medrecord_ai.extraction.prompt_loader import load_prompt_template
from medrecord_ai.extraction.validator import validate_and_build
from medrecord_ai.llm.client_base import BaseCompletionClient
from medrecord_ai.llm.exceptions import LlmError
from medrecord_ai.logging.logger import Log
from medrecord_ai.summary.exceptions import SummaryError
from medrecord_ai.summary.summarizer import SummaryGenerator

SYSTEM_PROMPT = (
    "You are a precise medical document analyzer. Extract information exactly as "
    "it appears, without modification. Return only raw JSON without any markdown "
    "formatting or code block markers."
)

# Opening ``` / ```json fence or closing ``` fence, despite the prompt forbidding them.
_CODE_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


class StructuredExtractor:
    """Turns free document text into a fully-defaulted StructuredRecord."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        summarizer: SummaryGenerator | None = None,
        classifier: DocumentClassifier | None = None,
        classification_fallback_label: str | None = DocumentType.OTHER.value,
        max_tokens: int = 1500,
        max_attempts: int = 1,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._summarizer = summarizer
        self._classifier = classifier
        self._classification_fallback_label = classification_fallback_label
        self._max_tokens = max_tokens
        self._max_attempts = max(1, max_attempts)
        self._prompt_template = load_prompt_template(prompt_template_path)

    async def extract_structured(self, text: str) -> StructuredRecord:
        """Extract patient, doctor, diagnosis and prescription fields from *text*.

        The record type is resolved through the classifier when the model
        answers with a label outside DocumentType. A summary is attached only
        when the record holds a patient name, a diagnosis or medications.

        Raises:
            StructuredExtractionError: if the completion call fails.
            MalformedExtractionError: if the answer is not a valid JSON record.
            ClassificationError: if classification fails and no fallback label is set.
        """
        record = await self._extract_with_retry(text)
        record = await self._resolve_record_type(record, text)
        if record.has_meaningful_data:
            record = dataclasses.replace(record, summary=await self._summarize(text))
        else:
            Log.info("Extraction found no patient, diagnosis or medication; skipping summary")

        Log.info(
            f"Extraction complete: {len(record.prescription)} medications",
            record_type=record.record_type,
        )
        return record

    async def _extract_with_retry(self, text: str) -> StructuredRecord:
        prompt = self._build_prompt(text)
        Log.debug(f"Extraction prompt:\n{prompt}")
        attempt = 1
        while True:
            raw_response = await self._call_ai(prompt)
            Log.debug(f"AI raw response:\n{raw_response}")
            try:
                return validate_and_build(self._parse_json(raw_response))
            except MalformedExtractionError as exc:
                if attempt >= self._max_attempts:
                    raise
                Log.warning(f"Malformed extraction on attempt {attempt}, retrying: {exc}")
                attempt += 1

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.format(
            document_text=text,
            record_types=", ".join(f"'{label}'" for label in DocumentType.values()),
        )

    async def _call_ai(self, prompt: str) -> str:
        try:
            return await self._client.create_chat_completion(
                model=self._model,
                temperature=0.0,
                max_tokens=self._max_tokens,
                system_prompt=SYSTEM_PROMPT,
                user_prompt=prompt,
            )
        except LlmError as exc:
            raise StructuredExtractionError(f"Extraction request failed: {exc}") from exc

    async def _resolve_record_type(
        self, record: StructuredRecord, text: str
    ) -> StructuredRecord:
        if DocumentType.is_valid(record.record_type):
            return record
        Log.warning(f"Model returned unknown record type '{record.record_type}'")
        label = await self._classify(text)
        return dataclasses.replace(record, record_type=label, document_type=label)

    async def _classify(self, text: str) -> str:
        fallback = self._classification_fallback_label
        if self._classifier is None:
            return fallback or DocumentType.OTHER.value
        try:
            return await self._classifier.classify(text)
        except ClassificationError as exc:
            if fallback is None:
                raise
            Log.warning(f"Classification failed, using '{fallback}': {exc}")
            return fallback

    async def _summarize(self, text: str) -> str:
        if self._summarizer is None:
            return ""
        try:
            return await self._summarizer.summarize(text)
        except SummaryError as exc:
            Log.warning(f"Summary unavailable, continuing without it: {exc}")
            return ""

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        cleaned = _CODE_FENCE_RE.sub("", raw.strip())
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise MalformedExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise MalformedExtractionError("JSON response must be an object")
        return parsed
