"""In-flight latches keyed by (store_id, path).

A latch suppresses duplicate concurrent loads: a second caller holding the
same key while the first is still in flight gets ``False`` and must treat the
call as a no-op. It is an idempotency guard, not a lock; nobody waits.
"""

from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class InflightLatch:
    def __init__(self) -> None:
        self._inflight: set[Hashable] = set()

    def is_held(self, key: Hashable) -> bool:
        return key in self._inflight

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[bool]:
        if key in self._inflight:
            yield False
            return
        self._inflight.add(key)
        try:
            yield True
        finally:
            self._inflight.discard(key)
