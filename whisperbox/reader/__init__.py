"""Retrieval engine: filters, dedup cache and the poll loop."""

from whisperbox.reader.dedup import DedupCache, purge_and_filter
from whisperbox.reader.filters import Filter, FilterManager, fetch_messages
from whisperbox.reader.poller import NO_TIMEOUT, ReadExit, ReaderState, WhisperReader

__all__ = [
    "DedupCache",
    "purge_and_filter",
    "Filter",
    "FilterManager",
    "fetch_messages",
    "NO_TIMEOUT",
    "ReadExit",
    "ReaderState",
    "WhisperReader",
]
