from medrecord_ai.errors import PipelineError


class ClassificationError(PipelineError):
    """Raised when the document type cannot be obtained from the model."""
