class LlmError(Exception):
    """Raised when the language-model provider returns no usable answer."""


class LlmNetworkError(LlmError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class LlmTimeoutError(LlmNetworkError):
    """Raised when the provider does not answer within the configured timeout."""
