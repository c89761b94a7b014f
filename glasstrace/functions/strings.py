"""
Regex Range Mapping.

RegexFind extracts the first match of a pattern from a string. Its
witness remembers where the match was, so a question about a range of
the output maps back to a range of the input.

The mapping is positional, and a regex match does not uniquely
determine which input characters caused which output characters, so
every mapped edge is tagged OVER.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from ..designator import Identity, NthInput, Part, Range, compose
from ..function import Queryable, ReadError, UnaryFunction
from ..tracing import NodeFactory, ObjectNode, Quality, TraceabilityQuery

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

REGEX_MAPPING_QUALITY = Quality.OVER


# =============================================================================
# WITNESSES
# =============================================================================

@dataclass(frozen=True, eq=False)
class RegexFoundQueryable(Queryable):
    """
    Witness of an evaluation where the pattern matched.

    start and end are the inclusive bounds of the match in the input;
    length is the input string's total length. Mapped positions are
    clamped to length, in case the string seen at trace time is shorter
    than expected.
    """
    start: int
    end: int
    length: int

    def query_output(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
    ) -> list[ObjectNode]:
        head = designator.head
        if isinstance(head, Range):
            offset = min(self.start, self.length)
            span = min(head.length(), self.length)
            start = head.start + offset
            end = max(offset + span, start)
        elif isinstance(head, Identity):
            start = min(self.start, self.length)
            end = min(self.end, self.length)
        else:
            return self.answer_default(query, output_index, designator, root, factory)

        child = factory.get_object_node(
            compose(NthInput(0), Range(start, end), designator.tail), self
        )
        root.add_child(child, REGEX_MAPPING_QUALITY)
        return [child]


@dataclass(frozen=True, eq=False)
class RegexNotFoundQueryable(Queryable):
    """No match: no specific range can be attributed, default answer only."""
    pass


# =============================================================================
# FUNCTION
# =============================================================================

class RegexFind(UnaryFunction):
    """
    Extracts the first match of a regular expression.

    Outputs the matched substring, or "" if the pattern does not match.
    An empty match carries no range and is traced like no match.
    """

    def __init__(self, pattern: str):
        super().__init__()
        self.pattern = re.compile(pattern)

    def compute(self, inputs: list[Any]) -> tuple[list[Any], Queryable]:
        s = str(inputs[0])
        match = self.pattern.search(s)

        if match is None or match.end() == match.start():
            logger.debug("%s found nothing in %r", self, s)
            return [""], RegexNotFoundQueryable(str(self), 1, 1)

        witness = RegexFoundQueryable(
            str(self), 1, 1,
            start=match.start(),
            end=match.end() - 1,
            length=len(s),
        )
        return [match.group()], witness

    def print_config(self) -> Any:
        return self.pattern.pattern

    @classmethod
    def read_config(cls, config: Any) -> RegexFind:
        if not isinstance(config, str):
            raise ReadError(f"RegexFind expects a pattern string, got {config!r}")
        try:
            return cls(config)
        except re.error as e:
            raise ReadError(f"Invalid pattern {config!r}: {e}") from e

    def __str__(self) -> str:
        return f"Find /{self.pattern.pattern}/"
