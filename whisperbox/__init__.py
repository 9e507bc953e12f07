"""whisperbox - message retrieval engine for Whisper nodes over JSON-RPC."""

__version__ = "0.1.0"
__logo__ = "🤫"

from whisperbox.client import WhisperClient
from whisperbox.reader import DedupCache, ReadExit, ReaderState, WhisperReader
from whisperbox.rpc import Method, WhisperResult, WhisperTransport

__all__ = [
    "__version__",
    "WhisperClient",
    "WhisperReader",
    "WhisperTransport",
    "WhisperResult",
    "DedupCache",
    "Method",
    "ReadExit",
    "ReaderState",
]
