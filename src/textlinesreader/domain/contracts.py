from __future__ import annotations

"""
Record Construction Contract.

A record type takes part in decoding by being buildable from one line of
text. Callers either hand over a factory callable or a type that exposes a
``from_line`` class method. The resolution rule lives here so the decoder
never inspects record types itself.
"""

from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

LineBuilder = Callable[[str], T]


@runtime_checkable
class FromLine(Protocol[T_co]):
    """Types that know how to build one instance from one decoded line."""

    @classmethod
    def from_line(cls, line: str) -> T_co:
        ...


def resolve_builder(build: Any) -> LineBuilder[Any]:
    """
    Turn a record type or factory into a single-argument builder.

    Resolution order:
    1. An object exposing a callable ``from_line`` attribute.
    2. Any other callable, invoked with the line as its only argument.

    Args:
        build: Record type, class with ``from_line``, or factory callable.

    Returns:
        LineBuilder: Callable mapping one line to one record.

    Raises:
        TypeError: If ``build`` offers no single-text-argument construction path.
    """
    from_line = getattr(build, "from_line", None)
    if callable(from_line):
        return from_line
    if callable(build):
        return build
    raise TypeError(
        f"Cannot build records from lines with {build!r}: expected a callable "
        f"taking one str or a type with a 'from_line' class method."
    )
