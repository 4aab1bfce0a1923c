from medrecord_ai.errors import PipelineError


class ProcessorUnavailableError(PipelineError):
    """Raised when the processor failed to initialize and cannot take work."""
