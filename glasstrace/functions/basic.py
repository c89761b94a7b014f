"""
Basic circuit functions: n-ary sum and fan-out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..designator import NthInput, Part, compose
from ..function import Function, NaryFunction, Queryable, ReadError
from ..tracing import NodeFactory, ObjectNode, Quality, TraceabilityQuery


def _read_arity(cls: type, config: Any) -> int:
    if isinstance(config, bool) or not isinstance(config, int) or config < 1:
        raise ReadError(f"{cls.__name__} expects a positive arity, got {config!r}")
    return config


# =============================================================================
# ADD
# =============================================================================

class Add(NaryFunction):
    """Sum of its inputs. Uses the default n-ary linking."""

    def __init__(self, arity: int = 2):
        super().__init__(arity)

    def apply(self, inputs: list[Any]) -> Any:
        return sum(inputs)

    def print_config(self) -> Any:
        return self.in_arity

    @classmethod
    def read_config(cls, config: Any) -> Add:
        return cls(_read_arity(cls, config))

    def __str__(self) -> str:
        return "+"


# =============================================================================
# FORK
# =============================================================================

@dataclass(frozen=True, eq=False)
class ForkQueryable(Queryable):
    """Every output is an exact copy of input 0."""

    def query_output(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
    ) -> list[ObjectNode]:
        child = factory.get_object_node(compose(NthInput(0), designator), self)
        root.add_child(child, Quality.EXACT)
        return [child]


class Fork(Function):
    """Copies its single input to each of its outputs."""

    def __init__(self, out_arity: int = 2):
        super().__init__(1, out_arity)

    def compute(self, inputs: list[Any]) -> tuple[list[Any], Queryable]:
        return [inputs[0]] * self.out_arity, ForkQueryable(str(self), 1, self.out_arity)

    def print_config(self) -> Any:
        return self.out_arity

    @classmethod
    def read_config(cls, config: Any) -> Fork:
        return cls(_read_arity(cls, config))

    def __str__(self) -> str:
        return "Fork"
