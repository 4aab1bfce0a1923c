from medrecord_ai.errors import PipelineError


class StructuredExtractionError(PipelineError):
    """Raised when structured field extraction fails."""


class MalformedExtractionError(StructuredExtractionError):
    """Raised when the model's answer is not JSON or violates the record schema."""
