"""
Function / Witness Contract.

A Function wraps domain logic. Every call to evaluate() returns the
output values together with a Queryable: the causal witness of exactly
that call. Witnesses are immutable snapshots; later trace queries read
them, possibly many times, and never modify them.

Configuration (e.g. a compiled pattern) lives on the Function and is
shared read-only. Per-call data (e.g. a match span) lives only in the
witness.

Duplication:
    duplicate(preserve_state=True)   copy that keeps the last witness,
                                     to replay one evaluation's trace
    duplicate(preserve_state=False)  fresh instance with no witness, for
                                     applying one template at many places
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from .designator import NthInput, Part
from .tracing import NodeFactory, ObjectNode, Quality, TraceabilityQuery

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

# Quality of the conservative "linked to all inputs" explanation
DEFAULT_LINK_QUALITY = Quality.EXACT


# =============================================================================
# ERRORS
# =============================================================================

class FunctionError(Exception):
    """Base class for structural errors raised by functions."""
    pass


class InvalidNumberOfArgumentsError(FunctionError):
    """Raised when a function is called with the wrong number of inputs or outputs."""

    def __init__(self, message: str = "Invalid number of arguments"):
        super().__init__(message)


class ReadError(Exception):
    """Raised when a function cannot be rebuilt from its printed configuration."""
    pass


# =============================================================================
# WITNESS
# =============================================================================

@dataclass(frozen=True, eq=False)
class Queryable:
    """
    Causal witness of one function evaluation.

    The base class knows nothing about the evaluation beyond the
    function's arity, so it links any output to all inputs jointly.
    Subclasses override query_output() with finer knowledge and fall
    back to answer_default() for shapes they do not recognize.

    Witnesses compare by identity: two evaluations never share a node
    in an explanation tree just because they recorded equal data.
    """
    reference: str
    in_arity: int
    out_arity: int

    def answer(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
    ) -> list[ObjectNode]:
        """
        Explain part of one output in terms of this function's inputs.

        Attaches a subtree to root and returns its new, unexpanded leaves.

        Args:
            query: Kind of question asked
            output_index: Output port the designator is about
            designator: Part of that output, relative to the output value
            root: Node to attach the explanation to
            factory: Node arena of the current tree build

        Raises:
            InvalidNumberOfArgumentsError: If output_index is not an output
        """
        if not 0 <= output_index < self.out_arity:
            raise InvalidNumberOfArgumentsError(
                f"{self.reference} has {self.out_arity} output(s), "
                f"cannot answer about output {output_index}"
            )
        return self.query_output(query, output_index, designator, root, factory)

    def query_output(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
    ) -> list[ObjectNode]:
        return self.answer_default(query, output_index, designator, root, factory)

    def answer_default(
        self,
        query: TraceabilityQuery,
        output_index: int,
        designator: Part,
        root: ObjectNode,
        factory: NodeFactory,
        quality: Quality = DEFAULT_LINK_QUALITY,
    ) -> list[ObjectNode]:
        """Link the output to an AND of every input of the function."""
        and_node = factory.get_and_node()
        leaves = []
        for i in range(self.in_arity):
            child = factory.get_object_node(NthInput(i), self)
            and_node.add_child(child, quality)
            leaves.append(child)
        root.add_child(and_node, quality)
        return leaves

    def duplicate(self, preserve_state: bool = False) -> Queryable:
        return replace(self)


# =============================================================================
# FUNCTIONS
# =============================================================================

class Function:
    """
    Base class of all traceable functions.

    Subclasses implement compute(), and print_config()/read_config()
    when they carry configuration that should survive serialization.
    Duplication does not go through the printed configuration.
    """

    def __init__(self, in_arity: int, out_arity: int):
        self.in_arity = in_arity
        self.out_arity = out_arity
        self._witness: Optional[Queryable] = None

    def evaluate(self, inputs: Sequence[Any]) -> tuple[list[Any], Queryable]:
        """
        Compute the outputs for the given inputs.

        Returns:
            (outputs, witness) where witness records this call only

        Raises:
            InvalidNumberOfArgumentsError: On a wrong number of inputs or outputs
        """
        inputs = list(inputs)
        if len(inputs) != self.in_arity:
            raise InvalidNumberOfArgumentsError(
                f"{self} expects {self.in_arity} input(s), got {len(inputs)}"
            )

        outputs, witness = self.compute(inputs)
        if len(outputs) != self.out_arity:
            raise InvalidNumberOfArgumentsError(
                f"{self} must produce {self.out_arity} output(s), produced {len(outputs)}"
            )

        self._witness = witness
        logger.debug("Evaluated %s -> %r", self, outputs)
        return outputs, witness

    def compute(self, inputs: list[Any]) -> tuple[list[Any], Queryable]:
        """Produce (outputs, witness) for one call. Subclasses must override."""
        raise NotImplementedError

    @property
    def witness(self) -> Optional[Queryable]:
        """Witness of the last evaluation, or None."""
        return self._witness

    def duplicate(self, preserve_state: bool = False) -> Function:
        """
        Copy this function.

        A shallow copy: configuration is shared read-only, the witness
        is dropped unless preserve_state is set. Functions holding other
        functions override this to duplicate them too.
        """
        duplicate = copy.copy(self)
        if not preserve_state:
            duplicate._witness = None
        return duplicate

    def print_config(self) -> Any:
        """JSON-compatible form of this function's configuration."""
        return None

    @classmethod
    def read_config(cls, config: Any) -> Function:
        if config is not None:
            raise ReadError(f"{cls.__name__} takes no configuration, got {config!r}")
        return cls()

    def __str__(self) -> str:
        return type(self).__name__


class UnaryFunction(Function):
    """Function with one input and one output."""

    def __init__(self):
        super().__init__(1, 1)


class NaryFunction(Function):
    """
    Function with several inputs and one output.

    Without finer causal knowledge, its output is linked to all of its
    inputs jointly (default witness).
    """

    def __init__(self, in_arity: int):
        super().__init__(in_arity, 1)

    def compute(self, inputs: list[Any]) -> tuple[list[Any], Queryable]:
        return [self.apply(inputs)], Queryable(str(self), self.in_arity, 1)

    def apply(self, inputs: list[Any]) -> Any:
        """Output value for the given inputs. Subclasses must override."""
        raise NotImplementedError
