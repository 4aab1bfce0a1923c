class PipelineError(Exception):
    """Base exception for every document pipeline failure."""
