"""
Blocking poll loop that turns a topic set into deduplicated message batches.

State machine:
- NO_FILTER: no filter on the node; one is created on the next step.
- AWAITING_FILTER: filter-create in flight. Errors end the read.
- POLLING: cancellation and timeout are checked, then the filter is polled.
  An expired filter sends the loop back to NO_FILTER. An empty batch after
  dedup sleeps ``poll_interval`` and polls again.
- TIMED_OUT / CANCELLED: the read ends with an empty batch, no error.
- DONE: terminal.

Three things can mean "nothing to return yet": no new messages, an expired
filter, and the caller's timeout. None of them is an error.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Any, Callable, Sequence

from loguru import logger

from whisperbox.reader.dedup import DedupCache
from whisperbox.reader.filters import Filter, FilterManager, fetch_messages
from whisperbox.rpc.protocol import WhisperResult
from whisperbox.rpc.transport import WhisperTransport
from whisperbox.utils.exceptions import FilterExpired, ValidationError

NO_TIMEOUT = -1


class ReaderState(str, Enum):
    NO_FILTER = "no_filter"
    AWAITING_FILTER = "awaiting_filter"
    POLLING = "polling"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    DONE = "done"


class ReadExit(str, Enum):
    """Why the last ``read()`` returned."""
    MESSAGES = "messages"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    FAILED = "failed"


class WhisperReader:
    """
    Polls one topic set. Not shared between threads; run one reader per topic set.

    ``clock`` and ``sleep`` are injectable so tests never depend on wall time.
    An injected ``sleep`` is used for every pause, with or without ``cancel``;
    without one, a read given ``cancel`` waits on the event so setting it wakes
    the loop early.
    """

    def __init__(
        self,
        transport: WhisperTransport,
        topics: Sequence[Any],
        *,
        cache: DedupCache | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] | None = None,
    ):
        self.transport = transport
        self.topics = tuple(topics)
        self.cache = cache if cache is not None else DedupCache()
        self.filters = FilterManager(transport)
        self.state = ReaderState.NO_FILTER
        self.filter: Filter | None = None
        self.last_exit: ReadExit | None = None
        self._clock = clock
        self._sleep = sleep

    def _pause(self, seconds: float, cancel: threading.Event | None) -> None:
        if self._sleep is not None:
            self._sleep(seconds)
        elif cancel is not None:
            cancel.wait(seconds)
        else:
            time.sleep(seconds)

    def _finish(self, exit_reason: ReadExit) -> None:
        self.last_exit = exit_reason
        self.state = ReaderState.DONE

    def read(
        self,
        poll_interval: float,
        read_timeout_seconds: float = NO_TIMEOUT,
        cancel: threading.Event | None = None,
    ) -> list[WhisperResult]:
        """
        Block until new messages arrive, the timeout passes, or ``cancel`` is set.

        Args:
            poll_interval: Seconds to sleep between empty polls
            read_timeout_seconds: Overall budget; -1 blocks until messages arrive
            cancel: Optional event; setting it ends the read early with no error

        Returns:
            Deduplicated messages in transport order, or [] on timeout/cancel
        """
        if read_timeout_seconds != NO_TIMEOUT and read_timeout_seconds < 0:
            raise ValidationError("read timeout must be -1 or non-negative", field="read_timeout_seconds")
        if poll_interval < 0:
            raise ValidationError("poll interval must be non-negative", field="poll_interval")

        self.state = ReaderState.NO_FILTER
        self.filter = None
        self.last_exit = None
        start = self._clock()
        logger.info(
            f"Polling for incoming whisper messages at interval {poll_interval}s. "
            f"Read timeout set to: {read_timeout_seconds}"
        )

        while True:
            if cancel is not None and cancel.is_set():
                self.state = ReaderState.CANCELLED
                logger.info("Read cancelled, ending whisper poll loop")
                self._finish(ReadExit.CANCELLED)
                return []

            if read_timeout_seconds != NO_TIMEOUT and self._clock() - start > read_timeout_seconds:
                self.state = ReaderState.TIMED_OUT
                logger.info("Read timeout exceeded, ending whisper poll loop")
                self._finish(ReadExit.TIMED_OUT)
                return []

            try:
                if self.filter is None:
                    self.state = ReaderState.AWAITING_FILTER
                    self.filter = self.filters.create_filter(self.topics)
                    self.state = ReaderState.POLLING

                batch = fetch_messages(self.transport, self.filter)
            except FilterExpired as exc:
                logger.info(f"{exc.message}; recreating it")
                self.filter = None
                self.state = ReaderState.NO_FILTER
            except Exception:
                self._finish(ReadExit.FAILED)
                raise
            else:
                retained = self.cache.purge_and_filter(batch, int(self._clock()))
                if retained:
                    self._finish(ReadExit.MESSAGES)
                    return retained

            logger.trace(f"Yielding and sleeping for specified poll interval {poll_interval}s")
            self._pause(poll_interval, cancel)
