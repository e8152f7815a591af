"""
blobprompt - post a prompt to a data-availability network, read it back,
and hand it to a chat-completion model.
"""
from .client import BlobClient
from .completion import CompletionClient
from .config import Settings
from .exceptions import (
    ArgumentError,
    BlobError,
    BlobMismatchError,
    BlobPromptError,
    CompletionError,
    ConfigurationError,
    DecodeError,
    FetchError,
    MissingCredentialError,
    NamespaceError,
    NamespaceFormatError,
    NodeConnectionError,
    SubmissionError,
)
from .models import Blob, Namespace, PipelineResult
from .namespace import parse_namespace
from .pipeline import PromptPipeline, Stage
from .version import __version__

__all__ = [
    "ArgumentError",
    "Blob",
    "BlobClient",
    "BlobError",
    "BlobMismatchError",
    "BlobPromptError",
    "CompletionClient",
    "CompletionError",
    "ConfigurationError",
    "DecodeError",
    "FetchError",
    "MissingCredentialError",
    "Namespace",
    "NamespaceError",
    "NamespaceFormatError",
    "NodeConnectionError",
    "PipelineResult",
    "PromptPipeline",
    "Settings",
    "Stage",
    "SubmissionError",
    "__version__",
    "parse_namespace",
]
