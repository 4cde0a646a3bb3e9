"""
In-memory TTL cache shared by every guide operation.

Entries expire lazily: a read of a stale key deletes it and reports a miss.
There is no size cap and no sweeper; entries are small text payloads and the
cache lives only as long as the process.

The cache is used from a single asyncio event loop, where no two get/set
sequences can interleave, so it carries no lock. Sharing one instance across
threads would need one around the get-check-expire/set sequence.
"""

import time
from typing import Any, Callable, Dict, Optional, Tuple

# Guide-shaped data is kept for a week.
GUIDE_CACHE_TTL = 7 * 24 * 60 * 60


def make_cache_key(operation: str, *args: Any) -> str:
    """Build a deterministic key from an operation name and its arguments.

    String arguments are stripped and lowercased so "Lisboa " and "lisboa"
    share an entry.
    """
    parts = [operation]
    for arg in args:
        if isinstance(arg, str):
            parts.append(arg.strip().lower())
        else:
            parts.append(str(arg))
    return ":".join(parts)


class TTLCache:
    """Associative store with a fixed time-to-live."""

    def __init__(self, ttl: float = GUIDE_CACHE_TTL, clock: Callable[[], float] = time.time):
        if ttl <= 0:
            raise ValueError(f"Invalid cache ttl: {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        timestamp, payload = entry
        if self._clock() - timestamp > self.ttl:
            del self._entries[key]
            return None
        return payload

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
