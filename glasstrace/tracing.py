"""
Explanation Trees — AND/OR trees answering "why/where" questions.

A tree is built fresh for each query. Its nodes are:
    ObjectNode  — "this part of this object" (designator + witness)
    AndNode     — all children are jointly necessary
    OrNode      — any single child is sufficient

Edges carry a Quality tag:
    EXACT — precise backward mapping
    OVER  — conservative superset of the true dependency
    UNDER — conservative subset (reserved)

The Tracer drives the recursion: it asks each function's witness to
explain a designated output in terms of the function's inputs, then
follows the wiring upstream until it reaches inputs of the whole graph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Protocol

from .designator import IDENTITY, NthInput, NthOutput, Part, compose

logger = logging.getLogger(__name__)


# =============================================================================
# QUALITY & QUERIES
# =============================================================================

class Quality(Enum):
    """Confidence tag on a causal edge."""
    EXACT = "exact"
    OVER = "over"
    UNDER = "under"

    def compose(self, other: Quality) -> Quality:
        """
        Quality of two edges followed in sequence (weakest link).

        EXACT is neutral. OVER followed by UNDER (or the reverse) gives
        no containment guarantee either way and is reported as OVER.
        """
        if self is other:
            return self
        if self is Quality.EXACT:
            return other
        if other is Quality.EXACT:
            return self
        return Quality.OVER


def path_quality(qualities: Iterable[Quality]) -> Quality:
    """Compose the qualities of a sequence of edges. An empty path is EXACT."""
    result = Quality.EXACT
    for quality in qualities:
        result = result.compose(quality)
    return result


class TraceabilityQuery(Enum):
    """
    Kinds of questions a witness can answer.

    PROVENANCE: what inputs produced this output
    CAUSALITY:  what inputs, if different, would change this output
    """
    PROVENANCE = "provenance"
    CAUSALITY = "causality"


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

# Quality of the edge between an input port and the upstream output feeding it
WIRING_LINK_QUALITY = Quality.EXACT


# =============================================================================
# TREE NODES
# =============================================================================

@dataclass(frozen=True)
class LabeledEdge:
    """Edge from a parent node to a child, tagged with its quality."""
    node: TraceabilityNode
    quality: Quality


@dataclass(eq=False)
class TraceabilityNode:
    """
    Base node of an explanation tree.

    node_id is the node's index in the arena of the NodeFactory that
    created it; it is unique within one tree build.
    """
    node_id: int
    children: list[LabeledEdge] = field(default_factory=list, init=False, repr=False)

    def add_child(self, node: TraceabilityNode, quality: Quality) -> None:
        self.children.append(LabeledEdge(node, quality))

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(eq=False)
class ObjectNode(TraceabilityNode):
    """Atomic node: a designator about the object a witness speaks for."""
    designator: Part = IDENTITY
    witness: Any = None

    def __str__(self) -> str:
        reference = getattr(self.witness, "reference", None)
        return f"{self.designator} of {reference}"


@dataclass(eq=False)
class AndNode(TraceabilityNode):
    """All children are jointly necessary."""

    def __str__(self) -> str:
        return "AND"


@dataclass(eq=False)
class OrNode(TraceabilityNode):
    """Any one child is sufficient."""

    def __str__(self) -> str:
        return "OR"


class NodeFactory:
    """
    Arena of nodes for one tree build.

    Object nodes are interned: asking twice for the same designator
    about the same witness returns the same node. Witnesses are keyed
    by identity, never by value, so two evaluations that happened to
    record equal data still get distinct nodes.
    """

    def __init__(self):
        self._nodes: list[TraceabilityNode] = []
        self._objects: dict[tuple[Part, int], ObjectNode] = {}

    def get_object_node(self, designator: Part, witness: Any) -> ObjectNode:
        key = (designator, id(witness))
        node = self._objects.get(key)
        if node is None:
            node = ObjectNode(len(self._nodes), designator=designator, witness=witness)
            self._nodes.append(node)
            self._objects[key] = node
        return node

    def get_and_node(self) -> AndNode:
        node = AndNode(len(self._nodes))
        self._nodes.append(node)
        return node

    def get_or_node(self) -> OrNode:
        node = OrNode(len(self._nodes))
        self._nodes.append(node)
        return node

    @property
    def nodes(self) -> list[TraceabilityNode]:
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


# =============================================================================
# WIRING CONTRACT
# =============================================================================

class Wiring(Protocol):
    """
    What the tree builder needs from the layer assembling function graphs.

    upstream(function, port) returns the (function, output port) feeding
    the given input port, or None if the port is an input of the whole
    graph. witness_of(function) returns the witness of the function's
    last evaluation.
    """

    def upstream(self, function: Any, port: int) -> Optional[tuple[Any, int]]:
        ...

    def witness_of(self, function: Any) -> Any:
        ...


# =============================================================================
# TREE BUILDER
# =============================================================================

@dataclass
class _TreeBuild:
    """State of a single get_tree call. Never shared between calls."""
    query: TraceabilityQuery
    factory: NodeFactory = field(default_factory=NodeFactory)
    owners: dict[int, Any] = field(default_factory=dict)
    expanded: set[int] = field(default_factory=set)
    path: set[int] = field(default_factory=set)


class Tracer:
    """
    Builds explanation trees over a wired graph of functions.

    A Tracer holds no per-query state: each get_tree call starts a new
    interning scope, so one Tracer can serve several builds.
    """

    def __init__(self, wiring: Wiring):
        self.wiring = wiring

    def get_tree(
        self,
        query: TraceabilityQuery,
        designator: Part,
        function: Any,
    ) -> ObjectNode:
        """
        Explain the designated part of a function's output.

        Args:
            query: Kind of question asked
            designator: Part of the function's output; a designator not
                headed by NthOutput is read as being about output 0
            function: Function whose last evaluation is explained

        Returns:
            Root ObjectNode of the explanation tree
        """
        if not isinstance(designator.head, NthOutput):
            designator = compose(NthOutput(0), designator)

        build = _TreeBuild(query=query)
        witness = self.wiring.witness_of(function)
        build.owners[id(witness)] = function
        root = build.factory.get_object_node(designator, witness)

        logger.debug("Building %s tree for %s", query.value, root)
        self._expand(build, root)
        logger.debug("Tree built with %d nodes", len(build.factory))
        return root

    def _expand(self, build: _TreeBuild, node: ObjectNode) -> None:
        if node.node_id in build.path:
            logger.debug("Cycle guard: not re-expanding %s", node)
            return
        if node.node_id in build.expanded:
            return

        build.expanded.add(node.node_id)
        build.path.add(node.node_id)
        try:
            head = node.designator.head
            if isinstance(head, NthOutput):
                self._expand_output(build, node, head.index)
            elif isinstance(head, NthInput):
                self._expand_input(build, node, head.index)
        finally:
            build.path.discard(node.node_id)

    def _expand_output(self, build: _TreeBuild, node: ObjectNode, output_index: int) -> None:
        residual = node.designator.tail or IDENTITY
        leaves = node.witness.answer(
            build.query, output_index, residual, node, build.factory
        )
        for leaf in leaves:
            self._expand(build, leaf)

    def _expand_input(self, build: _TreeBuild, node: ObjectNode, input_index: int) -> None:
        function = build.owners.get(id(node.witness))
        if function is None:
            # Witness internal to another witness (e.g. a per-element
            # evaluation); the wiring does not know about it.
            return

        upstream = self.wiring.upstream(function, input_index)
        if upstream is None:
            logger.debug("Reached graph input: %s", node)
            return

        up_function, up_port = upstream
        up_witness = self.wiring.witness_of(up_function)
        build.owners[id(up_witness)] = up_function
        child = build.factory.get_object_node(
            compose(NthOutput(up_port), node.designator.tail), up_witness
        )
        node.add_child(child, WIRING_LINK_QUALITY)
        self._expand(build, child)


# =============================================================================
# TREE TRAVERSAL
# =============================================================================

@dataclass(frozen=True)
class TracePath:
    """A root-to-leaf path with the composed quality of its edges."""
    nodes: tuple[TraceabilityNode, ...]
    quality: Quality

    @property
    def leaf(self) -> TraceabilityNode:
        return self.nodes[-1]


def trace_paths(root: TraceabilityNode) -> list[TracePath]:
    """
    Every path from the root to a terminal leaf, depth first.

    A child already on the current path (a cycle back to an ancestor)
    ends the path at the node pointing to it.
    """
    paths: list[TracePath] = []

    def walk(node: TraceabilityNode, nodes: tuple, qualities: tuple) -> None:
        nodes = nodes + (node,)
        forward = [e for e in node.children if e.node not in nodes]
        if not forward:
            if isinstance(node, ObjectNode):
                paths.append(TracePath(nodes, path_quality(qualities)))
            return
        for edge in forward:
            walk(edge.node, nodes, qualities + (edge.quality,))

    walk(root, (), ())
    return paths
