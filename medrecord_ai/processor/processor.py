import asyncio
from enum import Enum
from typing import Any

from medrecord_ai.classification.classifier import DocumentClassifier
from medrecord_ai.config.settings import Settings
from medrecord_ai.documents.models import UploadedFile
from medrecord_ai.extraction.extractor import StructuredExtractor
from medrecord_ai.extraction.models import StructuredRecord
from medrecord_ai.index.base import EmbeddingIndex
from medrecord_ai.index.memory_index import InMemoryEmbeddingIndex
from medrecord_ai.llm.client_base import BaseCompletionClient
from medrecord_ai.llm.exceptions import LlmError
from medrecord_ai.llm.factory import LlmClientFactory
from medrecord_ai.logging.logger import Log
from medrecord_ai.processor.exceptions import ProcessorUnavailableError
from medrecord_ai.processor.pipeline import PipelineContext, PipelineStep
from medrecord_ai.processor.steps import AttachSourceStep, ExtractFieldsStep, ExtractTextStep
from medrecord_ai.summary.summarizer import SummaryGenerator
from medrecord_ai.text.extractor import build_text_extractor


class ProcessorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


class DocumentProcessor:
    """Single entry point for document processing and similarity search.

    Pipeline: extract text -> extract fields (classify, summarize) -> attach source.

    One instance is built at process start and shared. The provider smoke
    test runs in ``initialize()``, either explicitly or on first use; after a
    failed smoke test every call raises ProcessorUnavailableError.
    """

    def __init__(
        self,
        *,
        steps: list[PipelineStep],
        index: EmbeddingIndex[Any],
        client: BaseCompletionClient,
        model: str,
        default_search_limit: int = 5,
    ) -> None:
        self._steps = steps
        self._index = index
        self._client = client
        self._model = model
        self._default_search_limit = default_search_limit
        self._state = ProcessorState.UNINITIALIZED
        self._failure_reason = ""
        self._init_lock = asyncio.Lock()

    @property
    def state(self) -> ProcessorState:
        return self._state

    async def initialize(self) -> None:
        """Run the provider smoke test once.

        Raises:
            ProcessorUnavailableError: if the smoke test fails now or failed before.
        """
        async with self._init_lock:
            if self._state is ProcessorState.READY:
                return
            if self._state is ProcessorState.FAILED:
                raise self._unavailable()
            try:
                await self._client.create_chat_completion(
                    model=self._model,
                    temperature=0.0,
                    max_tokens=5,
                    user_prompt="Test connection",
                )
            except LlmError as exc:
                self._fail(f"Language model connection failed: {exc}", exc)
                raise self._unavailable() from exc
            except Exception as exc:
                self._fail(f"Processor initialization failed: {exc!r}", exc)
                raise self._unavailable() from exc
            self._state = ProcessorState.READY
            Log.info("Language model connection successful", model=self._model)

    async def process_document(self, file: UploadedFile) -> StructuredRecord:
        """Extract a fully-defaulted StructuredRecord from an uploaded file.

        Any step failure aborts the call and propagates unchanged; the
        document is not indexed.
        """
        await self._ensure_ready()
        Log.info("Processing document", document=file.original_name, mime_type=file.mime_type)
        context = PipelineContext(file=file)
        try:
            for step in self._steps:
                context = await step.run(context)
        except Exception as exc:
            Log.error(f"Processing failed for {file.original_name}: {exc}")
            raise
        if context.record is None:
            raise ValueError("Pipeline finished without producing a record")
        Log.info("Processed document", document=file.original_name)
        return context.record

    async def search_similar_documents(self, query: str, limit: int | None = None) -> list[Any]:
        """Return indexed records most similar to *query*, best match first."""
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")
        await self._ensure_ready()
        return await self._index.search(query, self._default_search_limit if limit is None else limit)

    async def index_document(self, text: str, record: Any) -> None:
        """Make *record* searchable under *text* (typically its original text)."""
        await self._ensure_ready()
        await self._index.index(text, record)

    async def _ensure_ready(self) -> None:
        if self._state is ProcessorState.READY:
            return
        if self._state is ProcessorState.FAILED:
            raise self._unavailable()
        await self.initialize()

    def _fail(self, message: str, exc: Exception) -> None:
        self._state = ProcessorState.FAILED
        self._failure_reason = str(exc) or type(exc).__name__
        Log.error(message)

    def _unavailable(self) -> ProcessorUnavailableError:
        return ProcessorUnavailableError(
            f"Document processor unavailable: {self._failure_reason}"
        )


def build_processor(settings: Settings) -> DocumentProcessor:
    """Build a DocumentProcessor with all required adapters."""
    client = LlmClientFactory.create(settings)
    model = settings.llm_model_name
    summarizer = SummaryGenerator(
        client=client,
        model=model,
        temperature=settings.summary_temperature,
        max_tokens=settings.summary_max_tokens,
    )
    classifier = DocumentClassifier(
        client=client,
        model=model,
        strict_labels=settings.classification_strict_labels,
    )
    structured_extractor = StructuredExtractor(
        client=client,
        model=model,
        summarizer=summarizer,
        classifier=classifier,
        classification_fallback_label=settings.classification_fallback_label,
        max_tokens=settings.extraction_max_tokens,
        max_attempts=settings.extraction_max_attempts,
    )
    steps: list[PipelineStep] = [
        ExtractTextStep(build_text_extractor(settings)),
        ExtractFieldsStep(structured_extractor),
        AttachSourceStep(),
    ]
    index: InMemoryEmbeddingIndex[Any] = InMemoryEmbeddingIndex(
        client=client, model=settings.embedding_model_name
    )
    return DocumentProcessor(
        steps=steps,
        index=index,
        client=client,
        model=model,
        default_search_limit=settings.search_default_limit,
    )
