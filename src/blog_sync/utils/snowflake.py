"""Snowflake-style identifier generation.

Layout (63 bits): 41 bits of milliseconds since ``EPOCH_MS``, 10 bits of
worker id, 12 bits of per-millisecond sequence.
"""

import threading
import time

EPOCH_MS = 1_577_836_800_000  # 2020-01-01T00:00:00Z

WORKER_BITS = 10
SEQUENCE_BITS = 12
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1


class SnowflakeGenerator:
    """Thread-safe generator of unique, time-ordered integer ids."""

    def __init__(self, worker_id: int = 1) -> None:
        if not 0 <= worker_id < (1 << WORKER_BITS):
            raise ValueError(f"worker_id out of range: {worker_id}")
        self._worker_id = worker_id
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    def next_id(self) -> int:
        with self._lock:
            now = self._now_ms()
            if now < self._last_ms:
                # clock went backwards; keep ids monotonic
                now = self._last_ms
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    while now <= self._last_ms:
                        now = self._now_ms()
            else:
                self._sequence = 0
            self._last_ms = now
            return (
                ((now - EPOCH_MS) << (WORKER_BITS + SEQUENCE_BITS))
                | (self._worker_id << SEQUENCE_BITS)
                | self._sequence
            )

    @staticmethod
    def _now_ms() -> int:
        return time.time_ns() // 1_000_000


_default_generator = SnowflakeGenerator()


def generate_id() -> int:
    """Generate an id from the process-wide generator."""
    return _default_generator.next_id()
