from medrecord_ai.errors import PipelineError


class EmbeddingError(PipelineError):
    """Raised when an embedding cannot be computed for indexing or search."""
