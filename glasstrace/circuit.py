"""
Minimal in-memory circuit: connects functions and evaluates them.

This is the reference implementation of the Wiring contract used by
the Tracer. It knows which output feeds which input, evaluates a graph
by pulling values from a sink, and remembers the witness each function
produced during the last evaluation.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .function import Function, Queryable

logger = logging.getLogger(__name__)


class CircuitError(Exception):
    """Raised on structural wiring problems."""
    pass


class Circuit:
    """
    A graph of functions wired output-to-input.

    Input ports left unconnected are inputs of the whole graph; their
    values are supplied to evaluate().
    """

    def __init__(self):
        self._links: dict[tuple[Function, int], tuple[Function, int]] = {}
        self._witnesses: dict[Function, Queryable] = {}

    def connect(
        self,
        source: Function,
        source_port: int,
        destination: Function,
        destination_port: int,
    ) -> Circuit:
        """
        Feed an output of source into an input of destination.

        Raises:
            CircuitError: If a port does not exist or is already fed
        """
        if not 0 <= source_port < source.out_arity:
            raise CircuitError(f"{source} has no output {source_port}")
        if not 0 <= destination_port < destination.in_arity:
            raise CircuitError(f"{destination} has no input {destination_port}")
        if (destination, destination_port) in self._links:
            raise CircuitError(f"Input {destination_port} of {destination} is already connected")

        self._links[(destination, destination_port)] = (source, source_port)
        return self

    def upstream(self, function: Function, port: int) -> Optional[tuple[Function, int]]:
        return self._links.get((function, port))

    def witness_of(self, function: Function) -> Queryable:
        witness = self._witnesses.get(function)
        if witness is None:
            raise CircuitError(f"{function} has not been evaluated in this circuit")
        return witness

    def evaluate(
        self,
        sink: Function,
        inputs: Optional[dict[tuple[Function, int], Any]] = None,
    ) -> list[Any]:
        """
        Evaluate the graph feeding sink and return sink's outputs.

        Args:
            sink: Function whose outputs are wanted
            inputs: Values of graph inputs, keyed by (function, input port)

        Raises:
            CircuitError: If a graph input has no value or the graph has a cycle
        """
        inputs = inputs or {}
        self._witnesses.clear()
        results: dict[Function, list[Any]] = {}
        return self._pull(sink, inputs, results, set())

    def _pull(
        self,
        function: Function,
        inputs: dict[tuple[Function, int], Any],
        results: dict[Function, list[Any]],
        visiting: set[Function],
    ) -> list[Any]:
        if function in results:
            return results[function]
        if function in visiting:
            raise CircuitError(f"Cycle detected at {function}")

        visiting.add(function)
        values = []
        for port in range(function.in_arity):
            link = self._links.get((function, port))
            if link is not None:
                source, source_port = link
                values.append(self._pull(source, inputs, results, visiting)[source_port])
            elif (function, port) in inputs:
                values.append(inputs[(function, port)])
            else:
                raise CircuitError(f"No value for input {port} of {function}")
        visiting.discard(function)

        outputs, witness = function.evaluate(values)
        self._witnesses[function] = witness
        results[function] = outputs
        logger.debug("Circuit evaluated %s", function)
        return outputs
