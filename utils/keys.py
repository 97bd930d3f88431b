"""
utils/keys.py
-------------
Chronologically sortable document keys.

A key is 20 characters: 8 characters of millisecond timestamp followed by
12 random characters, both drawn from an alphabet whose byte order matches
its digit order. Keys generated within the same millisecond reuse the
previous random part incremented by one, so byte-wise sorting of keys
always reproduces generation order within a process.
"""

import secrets
import threading
import time
from typing import Callable

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
KEY_LENGTH = 20

_TIME_CHARS = 8
_RANDOM_CHARS = 12
_BASE = len(PUSH_CHARS)


def _now_ms() -> int:
    return int(time.time() * 1000)


class PushKeyGenerator:
    """Thread-safe generator of sortable keys."""

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._lock = threading.Lock()
        self._last_time = -1
        self._last_random: list[int] = []

    def __call__(self) -> str:
        with self._lock:
            now = self._clock()
            if now == self._last_time:
                self._increment_random()
            else:
                self._last_time = now
                self._last_random = [secrets.randbelow(_BASE) for _ in range(_RANDOM_CHARS)]
            random_part = list(self._last_random)

        time_chars = []
        for _ in range(_TIME_CHARS):
            time_chars.append(PUSH_CHARS[now % _BASE])
            now //= _BASE
        if now:
            raise ValueError("timestamp does not fit in a push key")

        return "".join(reversed(time_chars)) + "".join(PUSH_CHARS[i] for i in random_part)

    def _increment_random(self) -> None:
        digits = self._last_random
        i = _RANDOM_CHARS - 1
        while i >= 0 and digits[i] == _BASE - 1:
            digits[i] = 0
            i -= 1
        # 64**12 keys in one millisecond; never reached in practice.
        if i >= 0:
            digits[i] += 1


generate_key = PushKeyGenerator()

