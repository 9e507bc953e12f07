"""
Time-bounded duplicate suppression for polled messages.

The node may hand back a message on more than one poll. Each retained hash is
remembered until ``sent + 2 * ttl``; past that the node has dropped the message
itself, so the hash can be forgotten.

Each cycle is purge-then-filter:
- purge: drop entries with ``expires_at < now``
- filter: walk the batch in order, drop known hashes, remember new ones
"""

from __future__ import annotations

from typing import Iterable, Mapping

from loguru import logger

from whisperbox.rpc.protocol import WhisperResult


def purge(state: Mapping[str, int], now: int) -> dict[str, int]:
    return {h: expires_at for h, expires_at in state.items() if expires_at >= now}


def purge_and_filter(
    state: Mapping[str, int],
    batch: Iterable[WhisperResult],
    now: int,
) -> tuple[dict[str, int], list[WhisperResult]]:
    """Pure form of one dedup cycle. ``state`` is not modified."""
    next_state = purge(state, now)
    retained: list[WhisperResult] = []
    for result in batch:
        if result.hash in next_state:
            logger.trace(f"Message w/ hash {result.hash} filtered b/c it matches a known hash")
            continue
        next_state[result.hash] = result.expires_at
        retained.append(result)
    return next_state, retained


class DedupCache:
    """Mutable holder for the dedup state of a single reader."""

    def __init__(self, entries: Mapping[str, int] | None = None):
        self._entries: dict[str, int] = dict(entries or {})

    def __contains__(self, hash_: object) -> bool:
        return hash_ in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def expires_at(self, hash_: str) -> int | None:
        return self._entries.get(hash_)

    def snapshot(self) -> dict[str, int]:
        return dict(self._entries)

    def purge(self, now: int) -> None:
        self._entries = purge(self._entries, now)

    def purge_and_filter(self, batch: Iterable[WhisperResult], now: int) -> list[WhisperResult]:
        batch = list(batch)
        self._entries, retained = purge_and_filter(self._entries, batch, now)
        logger.debug(
            f"Dedup kept {len(retained)} of {len(batch)} message(s); {len(self._entries)} hash(es) tracked"
        )
        return retained
