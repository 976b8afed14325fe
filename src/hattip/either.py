"""Either type: the result of an operation that failed (``Left``) or succeeded (``Right``).

Errors travel as values. ``fold`` is the way to consume an Either; there is no
unchecked getter for either side.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar, cast

from hattip.option import Nothing, Option, Some

L = TypeVar("L")  # Failure type
R = TypeVar("R")  # Success type
U = TypeVar("U")
M = TypeVar("M")


class Either(Generic[L, R]):
    """Discriminated union holding exactly one of a Left or a Right value.

    Example:
        >>> Right(2).map(lambda x: x * 2).fold(str, lambda v: v + 1)
        5
        >>> Left("boom").fold(lambda e: f"failed: {e}", str)
        'failed: boom'
    """

    __slots__ = ("_value", "_is_right")
    __match_args__ = ("_value",)

    def __init__(self, value: L | R, is_right: bool) -> None:
        """Private constructor. Use Left() or Right() instead."""
        self._value = value
        self._is_right = is_right

    def is_left(self) -> bool:
        return not self._is_right

    def is_right(self) -> bool:
        return self._is_right

    def fold(self, on_left: Callable[[L], U], on_right: Callable[[R], U]) -> U:
        """Apply ``on_left`` to a Left value or ``on_right`` to a Right value."""
        if self._is_right:
            return on_right(cast(R, self._value))
        return on_left(cast(L, self._value))

    def map(self, f: Callable[[R], U]) -> Either[L, U]:
        if self._is_right:
            return Right(f(cast(R, self._value)))
        return Left(cast(L, self._value))

    def map_left(self, f: Callable[[L], M]) -> Either[M, R]:
        if self._is_right:
            return Right(cast(R, self._value))
        return Left(f(cast(L, self._value)))

    def flat_map(self, f: Callable[[R], Either[L, U]]) -> Either[L, U]:
        if self._is_right:
            return f(cast(R, self._value))
        return Left(cast(L, self._value))

    @property
    def left(self) -> Option[L]:
        """Left projection: ``Some`` of the Left value, otherwise ``Nothing``."""
        return Nothing if self._is_right else Some(cast(L, self._value))

    @property
    def right(self) -> Option[R]:
        """Right projection: ``Some`` of the Right value, otherwise ``Nothing``."""
        return Some(cast(R, self._value)) if self._is_right else Nothing

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Either):
            return NotImplemented
        return self._is_right == other._is_right and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._is_right, self._value))

    def __repr__(self) -> str:
        variant = "Right" if self._is_right else "Left"
        return f"{variant}({self._value!r})"


def Left(value: L) -> Either[L, R]:  # noqa: N802
    """Construct the failure variant."""
    return Either(value, is_right=False)


def Right(value: R) -> Either[L, R]:  # noqa: N802
    """Construct the success variant."""
    return Either(value, is_right=True)
