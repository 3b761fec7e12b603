"""Fractional index for ordering sibling content blocks.

An index is a string over the 94 visible ASCII characters ``!`` .. ``~``,
read as the digits of a base-94 fraction. Keys of different lengths compare
as if the shorter one were right-padded with ``!`` (the zero digit), which
makes the order dense: there is always room for a new key between two
distinct keys.
"""

from functools import total_ordering
from typing import List, Optional

from ....config.constants import FractionalIndexAlphabet
from ....core.exceptions import (
    FractionalIndexError,
    IdenticalIndicesError,
    InvalidCharacterError,
)

_MIN = ord(FractionalIndexAlphabet.MIN_CHAR)
_MAX = ord(FractionalIndexAlphabet.MAX_CHAR)
_BASE = FractionalIndexAlphabet.BASE


def _to_digits(value: str, length: int) -> List[int]:
    digits = [ord(c) - _MIN for c in value]
    digits.extend([0] * (length - len(digits)))
    return digits


def _to_int(digits: List[int]) -> int:
    number = 0
    for digit in digits:
        number = number * _BASE + digit
    return number


def _to_string(number: int, length: int) -> str:
    chars = []
    for _ in range(length):
        number, digit = divmod(number, _BASE)
        chars.append(chr(digit + _MIN))
    return "".join(reversed(chars))


@total_ordering
class FractionalIndex:
    """Immutable order key.

    Equality and hashing follow the padded order, so ``"P"`` and ``"P!"``
    are the same position.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        if not isinstance(value, str) or not value:
            raise FractionalIndexError("Fractional index must be a non-empty string")
        for c in value:
            if not _MIN <= ord(c) <= _MAX:
                raise InvalidCharacterError(c, value)
        self._value = value

    @classmethod
    def parse(cls, value: str) -> 'FractionalIndex':
        """Validate and wrap a stored index string."""
        return cls(value)

    @classmethod
    def start(cls) -> 'FractionalIndex':
        """The minimum sentinel."""
        return cls(FractionalIndexAlphabet.MIN_CHAR)

    @classmethod
    def end(cls) -> 'FractionalIndex':
        """The maximum single-symbol sentinel."""
        return cls(FractionalIndexAlphabet.MAX_CHAR)

    @classmethod
    def between(cls, before: 'FractionalIndex', after: 'FractionalIndex') -> 'FractionalIndex':
        """Return the midpoint of two distinct indices.

        Both operands are padded to the same length and averaged as base-94
        numbers. When their sum is odd the half unit spills into one extra
        digit, so the result is at most one symbol longer than the longer
        input and lies strictly between the two.

        Raises:
            IdenticalIndicesError: if the operands denote the same position
        """
        if before == after:
            raise IdenticalIndicesError(before.value)

        length = max(len(before.value), len(after.value))
        total = (
            _to_int(_to_digits(before.value, length))
            + _to_int(_to_digits(after.value, length))
        )

        if total % 2 == 0:
            return cls(_to_string(total // 2, length))

        # Odd sum: the remainder becomes half a base in the next digit
        return cls(_to_string(total * (_BASE // 2), length + 1))

    @classmethod
    def after(cls, predecessor: Optional['FractionalIndex'] = None) -> 'FractionalIndex':
        """Index for appending after ``predecessor`` (or into an empty list).

        A predecessor at or past the ``end()`` sentinel leaves no room below
        it, so the result extends the predecessor by one maximum symbol.
        """
        if predecessor is None:
            return cls.between(cls.start(), cls.end())
        if predecessor >= cls.end():
            return cls(predecessor.value + FractionalIndexAlphabet.MAX_CHAR)
        return cls.between(predecessor, cls.end())

    @property
    def value(self) -> str:
        return self._value

    def _padded(self, length: int) -> str:
        return self._value.ljust(length, FractionalIndexAlphabet.MIN_CHAR)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FractionalIndex):
            return NotImplemented
        length = max(len(self._value), len(other._value))
        return self._padded(length) == other._padded(length)

    def __lt__(self, other: 'FractionalIndex') -> bool:
        if not isinstance(other, FractionalIndex):
            return NotImplemented
        length = max(len(self._value), len(other._value))
        return self._padded(length) < other._padded(length)

    def __hash__(self) -> int:
        return hash(self._value.rstrip(FractionalIndexAlphabet.MIN_CHAR))

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"FractionalIndex({self._value!r})"
