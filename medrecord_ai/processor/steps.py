import dataclasses
from collections.abc import Callable
from datetime import date

from medrecord_ai.extraction.extractor import StructuredExtractor
from medrecord_ai.logging.logger import Log
from medrecord_ai.processor.pipeline import PipelineContext, PipelineStep
from medrecord_ai.text.extractor import TextExtractor


class ExtractTextStep(PipelineStep):
    def __init__(self, text_extractor: TextExtractor) -> None:
        self._text_extractor = text_extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.extracted_text = await self._text_extractor.extract(context.file)
        return context


class ExtractFieldsStep(PipelineStep):
    def __init__(self, structured_extractor: StructuredExtractor) -> None:
        self._structured_extractor = structured_extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        if not context.extracted_text:
            raise ValueError("PipelineContext.extracted_text must be set before field extraction")
        context.record = await self._structured_extractor.extract_structured(
            context.extracted_text
        )
        return context


class AttachSourceStep(PipelineStep):
    """Records where the fields came from; an undated record gets today's date."""

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.record is None:
            raise ValueError("PipelineContext.record must be set before attaching the source")
        record = context.record
        record_date = record.date
        if not record_date:
            record_date = self._today().isoformat()
            Log.debug(f"No date extracted, defaulting to {record_date}")
        context.record = dataclasses.replace(
            record,
            date=record_date,
            document_type=record.record_type,
            original_text=context.extracted_text,
            file_path=context.file.storage_reference,
        )
        return context
