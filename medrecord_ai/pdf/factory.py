from medrecord_ai.config.settings import Settings
from medrecord_ai.logging.logger import Log
from medrecord_ai.pdf.base import BasePdfExtractor
from medrecord_ai.pdf.pdfplumber_adapter import PdfPlumberAdapter
from medrecord_ai.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Maps the ``pdf_engine`` setting to a text-layer reader."""

    ENGINES: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
        "fitz": PyMuPdfAdapter,
    }

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls.ENGINES)

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        name = settings.pdf_engine.strip().lower()
        try:
            extractor_cls = cls.ENGINES[name]
        except KeyError:
            raise ValueError(
                f"Unknown PDF engine '{settings.pdf_engine}'; "
                f"supported engines: {', '.join(cls.available())}"
            ) from None
        Log.debug(f"Using {extractor_cls.__name__} for PDF text", engine=name)
        return extractor_cls()
