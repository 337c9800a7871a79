"""
Identifier generation for decks and cards.

Format: "<epoch ms>-<counter>-<9 base36 chars>". The per-generator
counter keeps IDs distinct when several are issued in the same
millisecond; the random suffix keeps them distinct across runs.
"""

import itertools
import random
import string
import time
from typing import Callable, Container, Optional

SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 9


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdGenerator:
    """Issues opaque string IDs that never repeat within a generator."""

    def __init__(
        self,
        clock: Callable[[], int] = _now_ms,
        rng: Optional[random.Random] = None,
    ):
        self._clock = clock
        self._rng = rng or random.Random()
        self._counter = itertools.count()

    def next_id(self, taken: Container[str] = ()) -> str:
        """
        Return a fresh ID.

        Args:
            taken: IDs already in use; a colliding candidate is skipped
        """
        while True:
            candidate = f"{self._clock()}-{next(self._counter)}-{self._suffix()}"
            if candidate not in taken:
                return candidate

    def _suffix(self) -> str:
        return "".join(self._rng.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
