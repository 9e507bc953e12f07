"""Facade over the Whisper node RPC methods."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from loguru import logger

from whisperbox.reader.dedup import DedupCache
from whisperbox.reader.filters import Filter, FilterManager
from whisperbox.reader.poller import WhisperReader
from whisperbox.rpc.params import wrap_param
from whisperbox.rpc.protocol import Method, ResponseKind, SingleBoolResponse, SingleStringResponse
from whisperbox.rpc.transport import DEFAULT_REQUEST_TIMEOUT_SECONDS, WhisperTransport
from whisperbox.utils.exceptions import ClassificationError


class WhisperClient:
    def __init__(self, transport: WhisperTransport):
        self.transport = transport

    @classmethod
    def from_url(cls, url: str, request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> WhisperClient:
        return cls(WhisperTransport(url, request_timeout=request_timeout))

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> WhisperClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def has_identity(self, identity: str) -> bool:
        """Ask the node whether it holds the keys for ``identity``."""
        returned = self.transport.send(Method.CHECK_IDENTITY, wrap_param(identity))
        if not isinstance(returned, SingleBoolResponse):
            raise ClassificationError(
                method=Method.CHECK_IDENTITY.value,
                expected=ResponseKind.BOOL.value,
                actual=returned.kind.value,
                body=returned.model_dump(),
            )
        logger.debug(f"Returned message from whisper identity check: {returned.result}")
        return returned.result

    def new_identity(self) -> str:
        returned = self.transport.send(Method.NEW_IDENTITY, [])
        if not isinstance(returned, SingleStringResponse) or not returned.result:
            raise ClassificationError(
                method=Method.NEW_IDENTITY.value,
                expected="non-empty " + ResponseKind.STRING.value,
                actual=returned.kind.value,
                body=returned.model_dump(),
            )
        logger.info("Generated new whisper identity")
        return returned.result

    def ensure_identity(self, load: Callable[[], str]) -> str:
        """
        Return the identity from ``load`` if the node knows it, else a new one.

        Storing a newly generated identity is left to the caller.
        """
        identity = (load() or "").strip()
        if identity and self.has_identity(identity):
            return identity
        logger.info("Node does not know the stored identity, generating own")
        return self.new_identity()

    def post(self, params: Sequence[Any]) -> None:
        """Publish a message. ``params`` must already be encoded for ``shh_post``."""
        self.transport.send(Method.POST, params)

    def new_filter(self, topics: Sequence[Any]) -> Filter:
        return FilterManager(self.transport).create_filter(topics)

    def reader(self, topics: Sequence[Any], cache: DedupCache | None = None) -> WhisperReader:
        return WhisperReader(self.transport, topics, cache=cache)
