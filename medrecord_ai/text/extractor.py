"""Text extraction: PDF text layer or OCR, chosen by MIME type."""

import asyncio
from collections.abc import Callable

from medrecord_ai.config.settings import Settings
from medrecord_ai.documents.exceptions import ExtractionError, UnsupportedFormatError
from medrecord_ai.documents.file_loader import FileLoader
from medrecord_ai.documents.models import UploadedFile
from medrecord_ai.logging.logger import Log
from medrecord_ai.ocr.base import BaseOcrEngine
from medrecord_ai.ocr.tesseract_adapter import TesseractAdapter
from medrecord_ai.pdf.base import BasePdfExtractor
from medrecord_ai.pdf.factory import PdfExtractorFactory


class TextExtractor:
    """Converts an uploaded PDF or image into plain text."""

    def __init__(
        self,
        *,
        file_loader: FileLoader,
        pdf_extractor: BasePdfExtractor,
        ocr_engine: BaseOcrEngine,
        timeout_seconds: float | None = None,
    ) -> None:
        self._file_loader = file_loader
        self._pdf_extractor = pdf_extractor
        self._ocr_engine = ocr_engine
        self._timeout_seconds = timeout_seconds

    async def extract(self, document: UploadedFile) -> str:
        """Return the document text.

        Reading the file and parsing or OCR both run in a worker thread and
        share one ``timeout_seconds`` budget.

        Raises:
            UnsupportedFormatError: if the MIME type is not a PDF or image.
            ExtractionError: if reading, parsing or OCR fails, or the text is blank.
        """
        if not (document.is_pdf or document.is_image):
            raise UnsupportedFormatError(
                f"Unsupported MIME type '{document.mime_type}' for {document.original_name}"
            )

        operation = "PDF parse" if document.is_pdf else "OCR"
        text = await self._run_blocking(self._read_and_extract, document, operation)

        if not text or not text.strip():
            raise ExtractionError(
                f"No text could be extracted from {document.original_name}"
            )
        Log.info(f"Extracted {len(text)} chars", document=document.original_name)
        return text

    def _read_and_extract(self, document: UploadedFile) -> str:
        raw_bytes = self._file_loader.load(document)
        Log.info(
            f"Loaded {len(raw_bytes)} bytes",
            document=document.original_name,
            mime_type=document.mime_type,
        )
        if document.is_pdf:
            return self._pdf_extractor.extract(raw_bytes)
        return self._ocr_engine.recognize(raw_bytes)

    async def _run_blocking(
        self,
        func: Callable[[UploadedFile], str],
        document: UploadedFile,
        operation: str,
    ) -> str:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, document),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ExtractionError(
                f"{operation} timed out after {self._timeout_seconds}s"
            ) from exc


def build_text_extractor(settings: Settings) -> TextExtractor:
    """Build a TextExtractor with the configured PDF and OCR adapters."""
    return TextExtractor(
        file_loader=FileLoader(),
        pdf_extractor=PdfExtractorFactory.create(settings),
        ocr_engine=TesseractAdapter(
            language=settings.ocr_language,
            tesseract_cmd=settings.tesseract_cmd,
        ),
        timeout_seconds=settings.extraction_timeout_seconds,
    )
