"""
Element-wise application of a function template.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..designator import IDENTITY, NthElement, NthInput, NthOutput, Part, compose
from ..function import (
    Function,
    FunctionError,
    InvalidNumberOfArgumentsError,
    Queryable,
    ReadError,
    UnaryFunction,
)
from ..tracing import NodeFactory, ObjectNode, Quality, TraceabilityQuery


@dataclass(frozen=True, eq=False)
class ApplyToAllQueryable(Queryable):
    """
    Witness of one ApplyToAll evaluation.

    Holds the witness of each per-element evaluation, in order.
    """
    element_witnesses: tuple[Queryable, ...]

    def query_output(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
    ) -> list[ObjectNode]:
        head = designator.head
        if not isinstance(head, NthElement) or not 0 <= head.index < len(self.element_witnesses):
            return self.answer_default(query, output_index, designator, root, factory)

        position = head.index
        inner = self.element_witnesses[position]
        inner_root = factory.get_object_node(compose(NthOutput(0), designator.tail), inner)
        root.add_child(inner_root, Quality.EXACT)

        # Input 0 of the element function is element `position` of our input 0
        leaves = []
        for inner_leaf in inner.answer(query, 0, designator.tail or IDENTITY, inner_root, factory):
            child = factory.get_object_node(
                compose(NthInput(0), NthElement(position), inner_leaf.designator.tail), self
            )
            inner_leaf.add_child(child, Quality.EXACT)
            leaves.append(child)
        return leaves


class ApplyToAll(UnaryFunction):
    """
    Applies a unary function to every element of a sequence.

    Each element is evaluated by its own stateless duplicate of the
    template, so per-element witnesses never overwrite each other.
    """

    def __init__(self, function: Function):
        super().__init__()
        if function.in_arity != 1 or function.out_arity != 1:
            raise InvalidNumberOfArgumentsError(
                f"ApplyToAll needs a unary function, got {function} "
                f"({function.in_arity} in, {function.out_arity} out)"
            )
        self.function = function

    def compute(self, inputs: list[Any]) -> tuple[list[Any], Queryable]:
        sequence = inputs[0]
        if not isinstance(sequence, (list, tuple)):
            raise FunctionError(f"{self} expects a sequence, got {type(sequence).__name__}")

        results = []
        witnesses = []
        for element in sequence:
            instance = self.function.duplicate(preserve_state=False)
            outputs, witness = instance.evaluate([element])
            results.append(outputs[0])
            witnesses.append(witness)

        return [results], ApplyToAllQueryable(str(self), 1, 1, tuple(witnesses))

    def duplicate(self, preserve_state: bool = False) -> ApplyToAll:
        duplicate = super().duplicate(preserve_state)
        duplicate.function = self.function.duplicate(preserve_state=False)
        return duplicate

    def print_config(self) -> Any:
        from ..serialization import print_function
        return print_function(self.function)

    @classmethod
    def read_config(cls, config: Any) -> ApplyToAll:
        from ..serialization import read_function
        if config is None:
            raise ReadError("ApplyToAll expects a function configuration")
        return cls(read_function(config))

    def __str__(self) -> str:
        return f"Apply {self.function} to all"
