"""
Chat Relay — Error Taxonomy

Only ValidationError and CompletionError ever reach the HTTP caller.
Embedding and store failures are absorbed at the adapter / orchestrator
boundary and logged.
"""


class ChatRelayError(Exception):
    """Base class for every error raised by the relay."""
    pass


class ConfigError(ChatRelayError):
    """Raised at startup when configuration is missing or invalid."""
    pass


class ValidationError(ChatRelayError):
    """Raised when the caller sent an unusable chat request (HTTP 400)."""
    pass


class EmbeddingError(ChatRelayError):
    """Raised when text cannot be turned into an embedding vector."""
    pass


class StoreError(ChatRelayError):
    """Raised when a record cannot be written to the vector store."""
    pass


class CompletionError(ChatRelayError):
    """Raised when the completion provider fails to produce a reply (HTTP 500)."""
    pass
