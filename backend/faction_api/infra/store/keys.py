"""Time-ordered, collision-resistant record keys ("push keys")."""

from __future__ import annotations

import secrets
import threading
import time

# Alphabet ordered by ASCII so lexical order equals chronological order
PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
TIME_CHARS = 8
RANDOM_CHARS = 12


class PushKeyGenerator:
    """
    Generate 20-character keys: 8 timestamp characters then 12 random ones.

    Keys generated within the same millisecond reuse the previous random
    suffix incremented by one, so they stay strictly increasing per process.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_rand = [0] * RANDOM_CHARS

    def __call__(self) -> str:
        now_ms = int(time.time() * 1000)
        with self._lock:
            if now_ms == self._last_ms:
                self._increment()
            else:
                self._last_ms = now_ms
                self._last_rand = [secrets.randbelow(64) for _ in range(RANDOM_CHARS)]
            rand = list(self._last_rand)

        time_part = []
        ts = now_ms
        for _ in range(TIME_CHARS):
            time_part.append(PUSH_CHARS[ts % 64])
            ts //= 64
        return "".join(reversed(time_part)) + "".join(PUSH_CHARS[i] for i in rand)

    def _increment(self) -> None:
        i = RANDOM_CHARS - 1
        while i >= 0 and self._last_rand[i] == 63:
            self._last_rand[i] = 0
            i -= 1
        if i >= 0:
            self._last_rand[i] += 1


__all__ = ["PushKeyGenerator", "PUSH_CHARS"]
