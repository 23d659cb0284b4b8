"""Password generation.

Two modes:

* symbols: every character is drawn uniformly from the 52 ASCII letters plus
  a symbol set.
* delimited: letters only, split by 1-3 ``-`` delimiters at near-even
  positions so the result is easy to type by hand.

The output is always exactly ``clamp(length, MIN_LENGTH, MAX_LENGTH)``
characters long.
"""

from __future__ import annotations

import secrets
import string
from typing import Optional, Protocol, Sequence

LETTERS = string.ascii_uppercase + string.ascii_lowercase
DEFAULT_SYMBOLS = r"+-/\|=_()[]{}!?@$#^%:*"
DELIMITER = "-"

DEFAULT_LENGTH = 14
MIN_LENGTH = 6
MAX_LENGTH = 30

# Length tiers: below 14 one delimiter, below 20 two, otherwise three.
_ONE_DELIMITER_BELOW = 14
_TWO_DELIMITERS_BELOW = 20


class RandomChoice(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


_system_random = secrets.SystemRandom()


def clamp_length(length: int) -> int:
    return max(MIN_LENGTH, min(length, MAX_LENGTH))


def delimiter_positions(length: int) -> tuple[int, ...]:
    """Indices at which ``-`` is placed for a password of *length*."""
    if length < _ONE_DELIMITER_BELOW:
        return (length // 2,)
    if length < _TWO_DELIMITERS_BELOW:
        step = length // 3
        return (step, step * 2)
    step = length // 4
    return (step, step * 2, step * 3)


def _with_symbols(length: int, symbols: str, rng: RandomChoice) -> str:
    alphabet = LETTERS + symbols
    return "".join(rng.choice(alphabet) for _ in range(length))


def _with_delimiters(length: int, rng: RandomChoice) -> str:
    positions = set(delimiter_positions(length))
    # filled through index `length` inclusive, then cut back below
    chars = [
        DELIMITER if i in positions else rng.choice(LETTERS)
        for i in range(length + 1)
    ]
    return "".join(chars[:length])


def generate(
    length: int = DEFAULT_LENGTH,
    symbols: Optional[str] = DEFAULT_SYMBOLS,
    use_symbols: bool = False,
    rng: Optional[RandomChoice] = None,
) -> str:
    """Generate a password.

    Args:
        length:      Requested length; silently clamped into [6, 30].
        symbols:     Symbol set mixed into the alphabet when *use_symbols* is
                     set. ``None`` falls back to :data:`DEFAULT_SYMBOLS`.
        use_symbols: Draw from letters + symbols instead of the delimited
                     letters-only layout.
        rng:         Source of randomness exposing ``choice``. Defaults to the
                     OS CSPRNG; tests may pass a seeded ``random.Random``.
    """
    length = clamp_length(length)
    rng = rng or _system_random
    if use_symbols:
        return _with_symbols(length, symbols if symbols is not None else DEFAULT_SYMBOLS, rng)
    return _with_delimiters(length, rng)


generate_password = generate
