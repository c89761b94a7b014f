# GlassTrace Explanation Engine
# Designators, causal witnesses and explanation trees

"""
Core question: given a piece of output data, which pieces of input
produced it, and with what confidence (exact, over- or under-approximate)?

Every function evaluation leaves behind a witness. Explanation trees are
built by asking witnesses, one function at a time, to map a designated
part of an output back onto the function's inputs.
"""

from .circuit import Circuit, CircuitError
from .designator import (
    IDENTITY,
    ComposedPart,
    Identity,
    InvalidRangeError,
    NthElement,
    NthInput,
    NthOutput,
    Part,
    Range,
    compose,
    mentioned_range,
    remove_range,
    replace_range_by,
)
from .function import (
    Function,
    FunctionError,
    InvalidNumberOfArgumentsError,
    NaryFunction,
    Queryable,
    ReadError,
    UnaryFunction,
)
from .tracing import (
    AndNode,
    NodeFactory,
    ObjectNode,
    OrNode,
    Quality,
    TraceabilityQuery,
    Tracer,
    trace_paths,
)
