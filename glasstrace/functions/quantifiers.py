"""
Boolean-Sequence Quantifiers.

A quantifier folds an ordered sequence of booleans into one value:

    ForAll: start True,  update AND
    Exists: start False, update OR

While folding, it records every "offending" position: an element equal
to the negation of the start value (a False for ForAll, a True for
Exists). Any single offending element is enough to force the result,
which is what a causality query wants to know.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..designator import NthElement, NthInput, Part, compose
from ..function import FunctionError, Queryable, UnaryFunction
from ..tracing import NodeFactory, ObjectNode, Quality, TraceabilityQuery


@dataclass(frozen=True, eq=False)
class QuantifierQueryable(Queryable):
    """
    Witness of one quantifier evaluation.

    Records the input sequence length and the offending positions.
    """
    input_length: int
    positions: tuple[int, ...]

    def query_output(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
    ) -> list[ObjectNode]:
        if query is not TraceabilityQuery.CAUSALITY or not self.positions:
            return self.answer_all_positions(designator, root, factory)

        or_node = factory.get_or_node()
        leaves = []
        for position in self.positions:
            child = factory.get_object_node(self._element(designator, position), self)
            or_node.add_child(child, Quality.EXACT)
            leaves.append(child)
        root.add_child(or_node, Quality.EXACT)
        return leaves

    def answer_all_positions(
        self,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
        quality: Quality = Quality.EXACT,
    ) -> list[ObjectNode]:
        """Every element of the sequence equally supports the result."""
        and_node = factory.get_and_node()
        leaves = []
        for position in range(self.input_length):
            child = factory.get_object_node(self._element(designator, position), self)
            and_node.add_child(child, quality)
            leaves.append(child)
        root.add_child(and_node, quality)
        return leaves

    @staticmethod
    def _element(designator: Part, position: int) -> Part:
        return compose(NthInput(0), NthElement(position), designator)


class Quantifier(UnaryFunction):
    """
    Fold over a sequence of booleans.

    Non-boolean elements are read as False.
    """
    start_value: bool = True

    def compute(self, inputs: list[Any]) -> tuple[list[Any], Queryable]:
        sequence = inputs[0]
        if not isinstance(sequence, (list, tuple)):
            raise FunctionError(f"{self} expects a sequence, got {type(sequence).__name__}")

        value = self.start_value
        positions = []
        for position, element in enumerate(sequence):
            b = element if isinstance(element, bool) else False
            if b == (not self.start_value):
                positions.append(position)
            value = self.update(value, b)

        witness = QuantifierQueryable(str(self), 1, 1, len(sequence), tuple(positions))
        return [value], witness

    def update(self, current: bool, element: bool) -> bool:
        """Fold one element into the running value. Subclasses must override."""
        raise NotImplementedError


class ForAll(Quantifier):
    start_value = True

    def update(self, current: bool, element: bool) -> bool:
        return current and element

    def __str__(self) -> str:
        return "forall"


class Exists(Quantifier):
    start_value = False

    def update(self, current: bool, element: bool) -> bool:
        return current or element

    def __str__(self) -> str:
        return "exists"
