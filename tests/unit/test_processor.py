"""Tests for DocumentProcessor (facade lifecycle, pipeline orchestration, search)."""

import asyncio
import dataclasses
from unittest.mock import AsyncMock, MagicMock

import pytest

from medrecord_ai.config.settings import Settings
from medrecord_ai.documents.exceptions import ExtractionError
from medrecord_ai.documents.models import UploadedFile
from medrecord_ai.extraction.models import StructuredRecord
from medrecord_ai.index.base import EmbeddingIndex
from medrecord_ai.index.memory_index import InMemoryEmbeddingIndex
from medrecord_ai.llm.exceptions import LlmNetworkError
from medrecord_ai.processor.exceptions import ProcessorUnavailableError
from medrecord_ai.processor.pipeline import PipelineContext, PipelineStep
from medrecord_ai.processor.processor import DocumentProcessor, ProcessorState, build_processor
from medrecord_ai.processor.steps import AttachSourceStep, ExtractFieldsStep, ExtractTextStep


class _SetRecordStep(PipelineStep):
    def __init__(self, record: StructuredRecord) -> None:
        self.record = record

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.extracted_text = "text"
        context.record = self.record
        return context


def _uploaded() -> UploadedFile:
    return UploadedFile(mime_type="application/pdf", original_name="rx.pdf", content=b"%PDF")


def _make_processor(
    *,
    steps: list[PipelineStep] | None = None,
    smoke_error: Exception | None = None,
) -> tuple[DocumentProcessor, AsyncMock, MagicMock]:
    client = AsyncMock()
    if smoke_error is not None:
        client.create_chat_completion.side_effect = smoke_error
    else:
        client.create_chat_completion.return_value = "OK"
    index = MagicMock(spec=EmbeddingIndex)
    index.search = AsyncMock(return_value=["match"])
    index.index = AsyncMock()
    processor = DocumentProcessor(
        steps=steps if steps is not None else [_SetRecordStep(StructuredRecord(patient_name="Jane"))],
        index=index,
        client=client,
        model="test-model",
        default_search_limit=5,
    )
    return processor, client, index


class TestInitialize:
    @pytest.mark.asyncio
    async def test_starts_uninitialized(self) -> None:
        processor, client, _index = _make_processor()
        assert processor.state is ProcessorState.UNINITIALIZED
        client.create_chat_completion.assert_not_called()

    @pytest.mark.asyncio
    async def test_smoke_test_marks_ready(self) -> None:
        processor, client, _index = _make_processor()
        await processor.initialize()
        assert processor.state is ProcessorState.READY
        kwargs = client.create_chat_completion.call_args.kwargs
        assert kwargs["user_prompt"] == "Test connection"
        assert kwargs["max_tokens"] == 5
        assert kwargs["model"] == "test-model"

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self) -> None:
        processor, client, _index = _make_processor()
        await processor.initialize()
        await processor.initialize()
        assert client.create_chat_completion.await_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_initialize_runs_smoke_test_once(self) -> None:
        processor, client, _index = _make_processor()
        await asyncio.gather(processor.initialize(), processor.initialize(), processor.initialize())
        assert client.create_chat_completion.await_count == 1

    @pytest.mark.asyncio
    async def test_smoke_failure_marks_failed(self) -> None:
        processor, _client, _index = _make_processor(smoke_error=LlmNetworkError("bad key"))
        with pytest.raises(ProcessorUnavailableError, match="bad key"):
            await processor.initialize()
        assert processor.state is ProcessorState.FAILED

    @pytest.mark.asyncio
    async def test_unexpected_smoke_error_marks_failed(self) -> None:
        processor, client, _index = _make_processor(smoke_error=RuntimeError("client misconfigured"))
        with pytest.raises(ProcessorUnavailableError, match="client misconfigured"):
            await processor.initialize()
        assert processor.state is ProcessorState.FAILED

        with pytest.raises(ProcessorUnavailableError):
            await processor.process_document(_uploaded())
        assert client.create_chat_completion.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_processor_rejects_every_operation(self) -> None:
        processor, client, index = _make_processor(smoke_error=LlmNetworkError("bad key"))
        with pytest.raises(ProcessorUnavailableError):
            await processor.initialize()

        with pytest.raises(ProcessorUnavailableError):
            await processor.initialize()
        with pytest.raises(ProcessorUnavailableError):
            await processor.process_document(_uploaded())
        with pytest.raises(ProcessorUnavailableError):
            await processor.search_similar_documents("amoxicillin")
        with pytest.raises(ProcessorUnavailableError):
            await processor.index_document("text", StructuredRecord())
        assert client.create_chat_completion.await_count == 1
        index.search.assert_not_called()


class TestProcessDocument:
    @pytest.mark.asyncio
    async def test_initializes_lazily(self) -> None:
        processor, client, _index = _make_processor()
        record = await processor.process_document(_uploaded())
        assert record.patient_name == "Jane"
        assert processor.state is ProcessorState.READY
        client.create_chat_completion.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self) -> None:
        calls: list[str] = []

        def make_step(name: str) -> MagicMock:
            step = MagicMock(spec=PipelineStep)

            async def run(context: PipelineContext) -> PipelineContext:
                calls.append(name)
                if name == "last":
                    context.record = StructuredRecord()
                return context

            step.run = AsyncMock(side_effect=run)
            return step

        processor, _client, _index = _make_processor(
            steps=[make_step("first"), make_step("middle"), make_step("last")]
        )
        await processor.process_document(_uploaded())
        assert calls == ["first", "middle", "last"]

    @pytest.mark.asyncio
    async def test_step_error_propagates_and_nothing_is_indexed(self) -> None:
        failing = MagicMock(spec=PipelineStep)
        failing.run = AsyncMock(side_effect=ExtractionError("no text"))
        processor, _client, index = _make_processor(steps=[failing])
        with pytest.raises(ExtractionError, match="no text"):
            await processor.process_document(_uploaded())
        index.index.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_record_raises(self) -> None:
        noop = MagicMock(spec=PipelineStep)
        noop.run = AsyncMock(side_effect=lambda context: context)
        processor, _client, _index = _make_processor(steps=[noop])
        with pytest.raises(ValueError, match="without producing a record"):
            await processor.process_document(_uploaded())


class TestSearch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_blank_query_rejected(self, query: str) -> None:
        processor, _client, index = _make_processor()
        with pytest.raises(ValueError, match="must not be empty"):
            await processor.search_similar_documents(query)
        index.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_uses_default_limit(self) -> None:
        processor, _client, index = _make_processor()
        assert await processor.search_similar_documents("amoxicillin") == ["match"]
        index.search.assert_awaited_once_with("amoxicillin", 5)

    @pytest.mark.asyncio
    async def test_explicit_limit_is_passed_through(self) -> None:
        processor, _client, index = _make_processor()
        await processor.search_similar_documents("amoxicillin", 2)
        index.search.assert_awaited_once_with("amoxicillin", 2)

    @pytest.mark.asyncio
    async def test_index_document_delegates(self) -> None:
        processor, _client, index = _make_processor()
        record = StructuredRecord(patient_name="Jane")
        await processor.index_document("Jane's prescription", record)
        index.index.assert_awaited_once_with("Jane's prescription", record)

    @pytest.mark.asyncio
    async def test_round_trip_through_real_index(self) -> None:
        client = AsyncMock()
        client.create_chat_completion.return_value = "OK"
        vectors = {"first": [1.0, 0.0], "second": [0.0, 1.0], "query": [0.1, 0.9]}

        async def embed(*, model: str, text: str) -> list[float]:
            return vectors[text]

        client.embed.side_effect = embed
        processor = DocumentProcessor(
            steps=[],
            index=InMemoryEmbeddingIndex(client=client, model="embed"),
            client=client,
            model="m",
        )
        first = StructuredRecord(patient_name="A")
        second = StructuredRecord(patient_name="B")
        await processor.index_document("first", first)
        await processor.index_document("second", second)
        results = await processor.search_similar_documents("query", 1)
        assert len(results) == 1
        assert results[0] is second


class TestBuildProcessor:
    def test_wires_pipeline_steps(self) -> None:
        settings = Settings(llm_provider="example", _env_file=None)  # type: ignore[call-arg]
        processor = build_processor(settings)
        steps = processor._steps
        assert [type(step) for step in steps] == [ExtractTextStep, ExtractFieldsStep, AttachSourceStep]
        assert isinstance(processor._index, InMemoryEmbeddingIndex)
        assert processor.state is ProcessorState.UNINITIALIZED

    @pytest.mark.asyncio
    async def test_example_provider_processes_pdf(self, sample_pdf_bytes: bytes) -> None:
        settings = Settings(llm_provider="example", _env_file=None)  # type: ignore[call-arg]
        processor = build_processor(settings)
        record = await processor.process_document(
            UploadedFile(mime_type="application/pdf", original_name="hello.pdf", content=sample_pdf_bytes)
        )
        assert record.original_text == "Hello PDF World"
        assert record.record_type == "other"
        assert record.summary == ""
        assert record.date != ""
        assert dataclasses.asdict(record)["file_path"] == "hello.pdf"
