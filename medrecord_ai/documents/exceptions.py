from medrecord_ai.errors import PipelineError


class UnsupportedFormatError(PipelineError):
    """Raised when a document's MIME type is neither PDF nor an image."""


class ExtractionError(PipelineError):
    """Raised when no usable text can be extracted from a document."""


class FileReadError(ExtractionError):
    """Raised when a file cannot be read from disk."""
