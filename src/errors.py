"""Exception hierarchy for the Web Page Q&A pipeline."""


class RagError(Exception):
    """Base exception for all pipeline errors."""


class ValidationError(RagError):
    """Raised when user input (a URL or a message) is missing or malformed."""


class ConfigurationError(RagError):
    """Raised when required configuration is missing."""


class FetchError(RagError):
    """Raised when a web page cannot be fetched or has no usable content."""


class EmbeddingError(RagError):
    """Raised when an embedding cannot be generated."""


class CompletionError(RagError):
    """Raised when the chat model returns no answer."""


class StoreError(RagError):
    """Raised when a vector store operation fails."""
