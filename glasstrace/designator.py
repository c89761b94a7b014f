"""
Designator Algebra — addressing sub-parts of structured values.

A designator (Part) names which piece of a value is being discussed:
the whole value, a character range of a string, an element of a
sequence, or an input/output port of a function.

Parts compose into chains. A chain is read head first: the head is the
outermost part (usually the function port), each following part narrows
the address one step further.

    compose(NthOutput(0), NthElement(1), Range(2, 4))
        -> "chars 2-4 of element 1 of output 0"

All parts are immutable and hashable, so they can key node interning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union


class InvalidRangeError(IndexError, ValueError):
    """Raised when a Range is built with an end smaller than its start."""
    pass


# =============================================================================
# BASE PART
# =============================================================================

class Part:
    """
    Base class of every designator.

    A simple part is a chain of length one: its head is itself and
    it has no tail.
    """

    def applies_to(self, value: Any) -> bool:
        """Whether this part is meaningful for the given value."""
        return False

    @property
    def head(self) -> Part:
        return self

    @property
    def tail(self) -> Optional[Part]:
        return None

    @property
    def parts(self) -> tuple[Part, ...]:
        """The chain of simple parts, head first."""
        return (self,)


@dataclass(frozen=True)
class Identity(Part):
    """The whole value. Composing with it is a no-op."""

    def applies_to(self, value: Any) -> bool:
        return True

    def __str__(self) -> str:
        return "id"


IDENTITY = Identity()


# =============================================================================
# STRING RANGE
# =============================================================================

@dataclass(frozen=True, order=True)
class Range(Part):
    """
    Contiguous sequence of characters in a string.

    Bounds are inclusive: Range(2, 4) covers positions 2, 3 and 4.
    Ranges order by (start, end).

    Raises:
        InvalidRangeError: If end < start
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidRangeError(
                f"End index smaller than start index: [{self.start}, {self.end}]"
            )

    def length(self) -> int:
        return self.end - self.start + 1

    def shift(self, offset: int) -> Range:
        """New range with both bounds moved by offset (may be negative)."""
        return Range(self.start + offset, self.end + offset)

    def overlaps(self, other: Range) -> bool:
        return not (other.end < self.start or self.end < other.start)

    def intersect(self, other: Optional[Range]) -> Optional[Range]:
        """
        Intersection with another range.

        Returns None if the ranges are disjoint or other is None.
        """
        if other is None or not self.overlaps(other):
            return None
        return Range(max(self.start, other.start), min(self.end, other.end))

    def applies_to(self, value: Any) -> bool:
        return isinstance(value, str)

    def __str__(self) -> str:
        if self.start < self.end:
            return f"I{self.start}-{self.end}"
        return f"I{self.start}"


# =============================================================================
# COLLECTION AND PORT PARTS
# =============================================================================

@dataclass(frozen=True)
class NthElement(Part):
    """Element at a given position of a sequence."""
    index: int

    def applies_to(self, value: Any) -> bool:
        return isinstance(value, (list, tuple))

    def __str__(self) -> str:
        return f"@{self.index}"


@dataclass(frozen=True)
class NthInput(Part):
    """Input port of a function."""
    index: int

    def applies_to(self, value: Any) -> bool:
        from .function import Function
        return isinstance(value, Function)

    def __str__(self) -> str:
        return f"!{self.index}"


@dataclass(frozen=True)
class NthOutput(Part):
    """Output port of a function."""
    index: int

    def applies_to(self, value: Any) -> bool:
        from .function import Function
        return isinstance(value, Function)

    def __str__(self) -> str:
        return f"#{self.index}"


# =============================================================================
# COMPOSED DESIGNATORS
# =============================================================================

@dataclass(frozen=True)
class ComposedPart(Part):
    """
    Ordered chain of at least two simple parts, head first.

    Build instances with compose(), which flattens nested chains and
    collapses trivial ones.
    """
    elements: tuple[Part, ...]

    def applies_to(self, value: Any) -> bool:
        return self.elements[0].applies_to(value)

    @property
    def head(self) -> Part:
        return self.elements[0]

    @property
    def tail(self) -> Optional[Part]:
        return compose(self.elements[1:])

    @property
    def parts(self) -> tuple[Part, ...]:
        return self.elements

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return "/".join(str(p) for p in self.elements)


def compose(*parts: Union[Part, Iterable[Optional[Part]], None]) -> Part:
    """
    Build a designator from parts, head first.

    Accepts parts as positional arguments or as a single iterable.
    Nested chains are flattened, None and Identity parts are dropped.
    An empty result is IDENTITY; a single part is returned as is.
    """
    if len(parts) == 1 and not isinstance(parts[0], Part) and parts[0] is not None:
        parts = tuple(parts[0])

    flat: list[Part] = []
    for part in parts:
        if part is None or isinstance(part, Identity):
            continue
        flat.extend(part.parts)

    if not flat:
        return IDENTITY
    if len(flat) == 1:
        return flat[0]
    return ComposedPart(tuple(flat))


# =============================================================================
# RANGE HELPERS
# =============================================================================
# Scan directions differ between the three helpers:
#   mentioned_range   -> head-most Range
#   remove_range      -> removes the tail-most Range
#   replace_range_by  -> replaces the head-most Range

def mentioned_range(designator: Part) -> Optional[Range]:
    """
    Range mentioned in a designator.

    If several Ranges are present, the one closest to the head (the
    part mentioning the function's port) is kept.
    """
    found = None
    for part in reversed(designator.parts):
        if isinstance(part, Range):
            found = part
    return found


def remove_range(designator: Part) -> Part:
    """Remove the tail-most Range of a designator, keeping the other parts in order."""
    kept: list[Part] = []
    removed = False
    for part in reversed(designator.parts):
        if isinstance(part, Range) and not removed:
            removed = True
        else:
            kept.insert(0, part)
    return compose(kept)


def replace_range_by(designator: Part, to: Part) -> Part:
    """
    Replace the head-most Range of a designator by another part.

    Returns the very same designator object if it contains no Range.
    """
    if isinstance(designator, Range):
        return to
    if not isinstance(designator, ComposedPart):
        return designator

    replaced = False
    new_parts: list[Part] = []
    for part in designator.parts:
        if isinstance(part, Range) and not replaced:
            new_parts.append(to)
            replaced = True
        else:
            new_parts.append(part)

    if not replaced:
        return designator
    return compose(new_parts)
