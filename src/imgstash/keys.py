"""Key generation — random alphanumeric identifiers for stored images."""

from __future__ import annotations

import random

KEY_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"
DEFAULT_KEY_LENGTH = 50

_shared_rng = random.Random()


class KeyGenerator:
    """Draws keys uniformly, with replacement, from a 62-symbol alphabet.

    Not cryptographically secure. At 50 characters the key space is about
    2.98e89, so collisions are treated as impossible and never checked.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or _shared_rng

    def generate(self, length: int = DEFAULT_KEY_LENGTH) -> str:
        if length < 0:
            raise ValueError(f"Key length cannot be negative, got {length}")
        return "".join(self._rng.choices(KEY_ALPHABET, k=length))
