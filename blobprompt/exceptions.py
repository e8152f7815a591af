"""
Exceptions for the blobprompt package.

Every error carries the process exit code the CLI maps it to.
"""
from typing import Optional


class BlobPromptError(Exception):
    """Base exception for all blobprompt errors."""
    exit_code = 1


class ArgumentError(BlobPromptError):
    """Raised when the command line arguments are wrong."""
    exit_code = 2


class ConfigurationError(BlobPromptError):
    """Raised when an environment setting is invalid."""
    exit_code = 2


class MissingCredentialError(ConfigurationError):
    """Raised when the completion-service API key is not set."""
    exit_code = 3


class NamespaceError(BlobPromptError):
    """Base exception for malformed namespace input."""
    exit_code = 4

    def __init__(self, message: str, value: Optional[str] = None):
        self.value = value
        super().__init__(message)


class DecodeError(NamespaceError):
    """Raised when a namespace string is not valid hex."""
    pass


class NamespaceFormatError(NamespaceError):
    """Raised when decoded namespace bytes violate the network's namespace rules."""
    pass


class NodeConnectionError(BlobPromptError):
    """Raised when a node client cannot be constructed for the given endpoint."""
    exit_code = 5


class BlobError(BlobPromptError):
    """Base exception for blob RPC failures."""
    exit_code = 6

    def __init__(self, message: str, rpc_code: Optional[int] = None):
        self.rpc_code = rpc_code
        super().__init__(message)


class SubmissionError(BlobError):
    """Raised when the node rejects a blob or the submit round trip fails."""
    pass


class FetchError(BlobError):
    """Raised when a blob cannot be retrieved from the node."""
    exit_code = 7


class BlobMismatchError(FetchError):
    """Raised when the fetched blob differs from the one that was submitted."""
    pass


class CompletionError(BlobPromptError):
    """Raised when the completion service fails or returns no usable answer."""
    exit_code = 8
