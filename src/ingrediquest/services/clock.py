"""Timestamp-based identifiers."""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime

Clock = Callable[[], int]


def current_timestamp_ms() -> int:
    """Return the current Unix time in milliseconds."""
    return int(datetime.now(tz=UTC).timestamp() * 1000)


def unique_timestamp_id(clock: Clock, taken: Iterable[int]) -> int:
    """Return a timestamp id not present in ``taken``.

    Two creations within the same millisecond get consecutive ids.
    """
    used = set(taken)
    candidate = clock()
    while candidate in used:
        candidate += 1
    return candidate
