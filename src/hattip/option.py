"""Option type: a value that is either present (``Some``) or absent (``Nothing``)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")
U = TypeVar("U")


class Option(Generic[T]):
    """Two-case container used instead of nullable values.

    Construct with :func:`Some` or use the :data:`Nothing` singleton. ``Option.of``
    lifts a plain Python value, mapping ``None`` to ``Nothing``.

    Example:
        >>> Some(3).map(lambda x: x + 1)
        Some(4)
        >>> Option.of(None).fold(lambda: "fallback", str)
        'fallback'
    """

    __slots__ = ("_value", "_present")

    def __init__(self, value: Optional[T], present: bool) -> None:
        """Private constructor. Use Some() or Nothing instead."""
        self._value = value
        self._present = present

    @staticmethod
    def of(value: Optional[T]) -> Option[T]:
        if value is None:
            return Nothing
        return Some(value)

    def is_some(self) -> bool:
        return self._present

    def is_none(self) -> bool:
        return not self._present

    def map(self, f: Callable[[T], U]) -> Option[U]:
        if self._present:
            return Some(f(self._value))
        return Nothing

    def flat_map(self, f: Callable[[T], Option[U]]) -> Option[U]:
        if self._present:
            return f(self._value)
        return Nothing

    def fold(self, if_none: Callable[[], U], if_some: Callable[[T], U]) -> U:
        """Exhaustive case analysis: call ``if_some`` with the value, or ``if_none``."""
        if self._present:
            return if_some(self._value)
        return if_none()

    def __iter__(self) -> Iterator[T]:
        if self._present:
            yield self._value

    def __bool__(self) -> bool:
        raise TypeError("Option has no truth value, use is_some() or fold()")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return self._present == other._present and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._present, self._value))

    def __repr__(self) -> str:
        return f"Some({self._value!r})" if self._present else "Nothing"


def Some(value: T) -> Option[T]:  # noqa: N802
    """Construct the present variant. ``None`` is not a valid payload."""
    if value is None:
        raise ValueError("Some() requires a value, use Nothing for absence")
    return Option(value, present=True)


Nothing: Option[Any] = Option(None, present=False)
