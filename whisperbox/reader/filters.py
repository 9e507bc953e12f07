"""Server-side filters: creation and polling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from loguru import logger

from whisperbox.rpc.protocol import (
    GenericResponse,
    Method,
    MultiResultResponse,
    ResponseKind,
    SingleStringResponse,
    WhisperResult,
)
from whisperbox.rpc.transport import WhisperTransport
from whisperbox.utils.exceptions import ClassificationError, FilterExpired, ValidationError


@dataclass(frozen=True)
class Filter:
    """Opaque subscription handle. Two filters on the same topics may have different ids."""
    id: str
    topics: tuple[Any, ...]


class FilterManager:
    """Creates a fresh filter on every call; reuse is the reader's decision."""

    def __init__(self, transport: WhisperTransport):
        self.transport = transport

    def create_filter(self, topics: Sequence[Any]) -> Filter:
        topics = tuple(topics)
        if not topics:
            raise ValidationError("at least one topic is required to create a filter", field="topics")

        returned = self.transport.send(Method.NEW_FILTER, [{"topics": list(topics)}])
        if not isinstance(returned, SingleStringResponse):
            raise ClassificationError(
                method=Method.NEW_FILTER.value,
                expected=ResponseKind.STRING.value,
                actual=returned.kind.value,
                body=returned.model_dump(),
            )

        logger.info(f"Created whisper filter {returned.result} for {len(topics)} topic(s)")
        return Filter(id=returned.result, topics=topics)


def fetch_messages(transport: WhisperTransport, filt: Filter) -> list[WhisperResult]:
    """
    Poll a filter once.

    A null (or missing) result is how the node says the filter no longer
    exists; that surfaces as ``FilterExpired`` so the caller can recreate it.
    """
    returned = transport.send(Method.GET_MESSAGES, [filt.id])
    if isinstance(returned, GenericResponse) and returned.result is None:
        raise FilterExpired(filt.id)
    if not isinstance(returned, MultiResultResponse):
        raise ClassificationError(
            method=Method.GET_MESSAGES.value,
            expected=ResponseKind.MULTI.value,
            actual=returned.kind.value,
            body=returned.model_dump(),
        )
    return list(returned.result)
