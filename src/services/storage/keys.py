"""
Record Key Generation

Keys are 20-character push ids: 8 characters of millisecond timestamp
followed by 12 random characters, drawn from an alphabet whose ASCII
order matches its numeric order. Keys therefore sort by creation time.

When two keys are generated in the same millisecond the random part
of the previous key is incremented, so ordering still holds.
"""

import secrets
import threading
import time
from typing import Callable, Optional


PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class PushIdGenerator:
    """Time-ordered unique key generator."""

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._lock = threading.Lock()
        self._last_timestamp = -1
        self._last_random = [0] * 12

    def __call__(self) -> str:
        with self._lock:
            now = self._clock()
            if now == self._last_timestamp:
                self._increment_random()
            else:
                self._last_random = [secrets.randbelow(64) for _ in range(12)]
            self._last_timestamp = now

            timestamp_chars = []
            for _ in range(8):
                timestamp_chars.append(PUSH_CHARS[now % 64])
                now //= 64
            if now != 0:
                raise ValueError("Timestamp does not fit in a push id")

            return "".join(reversed(timestamp_chars)) + "".join(
                PUSH_CHARS[i] for i in self._last_random
            )

    def _increment_random(self) -> None:
        i = 11
        while i >= 0 and self._last_random[i] == 63:
            self._last_random[i] = 0
            i -= 1
        if i < 0:
            raise ValueError("Exhausted push ids for this millisecond")
        self._last_random[i] += 1


generate_push_id = PushIdGenerator()
