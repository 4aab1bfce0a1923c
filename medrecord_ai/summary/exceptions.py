from medrecord_ai.errors import PipelineError


class SummaryError(PipelineError):
    """Raised when the summary completion fails."""
