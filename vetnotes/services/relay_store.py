import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from vetnotes.config import RELAY_TTL_SECONDS
from vetnotes.errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass
class RelayEntry:
    key: str
    payload: Any
    created_at: float


def _is_empty(payload: Any) -> bool:
    if payload is None:
        return True
    if isinstance(payload, (str, dict, list)):
        return len(payload) == 0
    return False


class RelayStore:
    """Short-lived key -> payload handoff between two client sessions.

    Each payload can be received at most once. Entries older than
    ``ttl_seconds`` are pruned on every ``send`` and refused by ``receive``;
    there is no background timer.
    """

    def __init__(
        self,
        ttl_seconds: float = RELAY_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, RelayEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, entry: RelayEntry, now: float) -> bool:
        return now - entry.created_at > self._ttl

    def send(self, key: str | None, payload: Any) -> None:
        """Store ``payload`` under ``key``, replacing any previous entry."""
        if not key or not key.strip():
            raise InvalidArgument("relayId", "is required")
        if _is_empty(payload):
            raise InvalidArgument("payload", "is required")

        with self._lock:
            now = self._clock()
            self._entries[key] = RelayEntry(key=key, payload=payload, created_at=now)
            stale = [k for k, entry in self._entries.items() if self._expired(entry, now)]
            for k in stale:
                del self._entries[k]

        if stale:
            logger.debug("Pruned %d expired relay entries", len(stale))

    def receive(self, key: str | None) -> Any:
        """Pop and return the payload for ``key``; ``None`` if absent or expired."""
        if not key:
            return None

        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                logger.debug("Relay entry %s expired before receipt", key)
                return None
            return entry.payload
