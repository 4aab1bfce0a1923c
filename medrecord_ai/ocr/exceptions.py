from medrecord_ai.documents.exceptions import ExtractionError


class OcrError(ExtractionError):
    """Raised when OCR cannot read an image."""
