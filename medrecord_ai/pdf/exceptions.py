from medrecord_ai.documents.exceptions import ExtractionError


class PdfExtractionError(ExtractionError):
    """Raised when the PDF text layer cannot be read."""
