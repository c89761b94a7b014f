"""
Tests for the in-memory circuit and function serialization.

These tests verify:
1. Structural wiring errors are raised, never patched over
2. Evaluation pulls values through connected functions
3. Printed functions read back into equivalent functions
4. Read failures are reported as ReadError
"""

import pytest

from glasstrace.circuit import Circuit, CircuitError
from glasstrace.function import Function, ReadError
from glasstrace.functions import Add, ApplyToAll, Exists, ForAll, Fork, RegexFind
from glasstrace.serialization import dumps, loads, print_function, read_function


# =============================================================================
# CIRCUIT TESTS
# =============================================================================

class TestCircuit:
    """Test wiring and evaluation."""

    def test_chain_evaluation(self):
        first = Add(2)
        second = Add(2)
        circuit = Circuit().connect(first, 0, second, 0)
        outputs = circuit.evaluate(second, {(first, 0): 1, (first, 1): 2, (second, 1): 10})
        assert outputs == [13]

    def test_upstream_lookup(self):
        fork = Fork(2)
        add = Add(2)
        circuit = Circuit().connect(fork, 1, add, 0)
        assert circuit.upstream(add, 0) == (fork, 1)
        assert circuit.upstream(add, 1) is None
        assert circuit.upstream(fork, 0) is None

    def test_witnesses_recorded(self):
        find = RegexFind("b+")
        circuit = Circuit()
        circuit.evaluate(find, {(find, 0): "abc"})
        assert circuit.witness_of(find) is find.witness

    def test_missing_graph_input(self):
        add = Add(2)
        with pytest.raises(CircuitError, match="No value for input 1"):
            Circuit().evaluate(add, {(add, 0): 1})

    def test_invalid_ports(self):
        fork = Fork(2)
        add = Add(2)
        with pytest.raises(CircuitError, match="has no output 2"):
            Circuit().connect(fork, 2, add, 0)
        with pytest.raises(CircuitError, match="has no input 5"):
            Circuit().connect(fork, 0, add, 5)

    def test_input_fed_twice(self):
        fork = Fork(2)
        add = Add(2)
        circuit = Circuit().connect(fork, 0, add, 0)
        with pytest.raises(CircuitError, match="already connected"):
            circuit.connect(fork, 1, add, 0)

    def test_cycle_is_rejected_at_evaluation(self):
        f = Fork(1)
        g = Fork(1)
        circuit = Circuit().connect(f, 0, g, 0).connect(g, 0, f, 0)
        with pytest.raises(CircuitError, match="Cycle detected"):
            circuit.evaluate(g)


# =============================================================================
# SERIALIZATION TESTS
# =============================================================================

class TestSerialization:
    """Test printing and reading function configurations."""

    def test_print_regex(self):
        assert print_function(RegexFind("b+")) == {"type": "RegexFind", "config": "b+"}

    def test_print_nested(self):
        printed = print_function(ApplyToAll(RegexFind("b+")))
        assert printed == {
            "type": "ApplyToAll",
            "config": {"type": "RegexFind", "config": "b+"},
        }

    @pytest.mark.parametrize("function", [
        RegexFind("[a-z]+"),
        Add(3),
        Fork(4),
        ForAll(),
        Exists(),
        ApplyToAll(ForAll()),
    ])
    def test_read_back(self, function):
        """A read-back function prints the same and has the same arity."""
        copy = loads(dumps(function))
        assert type(copy) is type(function)
        assert print_function(copy) == print_function(function)
        assert (copy.in_arity, copy.out_arity) == (function.in_arity, function.out_arity)

    def test_read_back_function_works(self):
        find = loads('{"type": "RegexFind", "config": "b+"}')
        assert find.evaluate(["aabbbcc"])[0] == ["bbb"]

    @pytest.mark.parametrize("obj,message", [
        ("RegexFind", "Unexpected object format"),
        ({"config": "b+"}, "Unexpected object format"),
        ({"type": "Nope"}, "Unknown function type"),
        ({"type": "RegexFind", "config": 5}, "expects a pattern string"),
        ({"type": "RegexFind", "config": "("}, "Invalid pattern"),
        ({"type": "Add", "config": 0}, "positive arity"),
        ({"type": "Fork", "config": True}, "positive arity"),
        ({"type": "ForAll", "config": "x"}, "takes no configuration"),
        ({"type": "ApplyToAll"}, "expects a function configuration"),
    ])
    def test_read_failures(self, obj, message):
        with pytest.raises(ReadError, match=message):
            read_function(obj)

    def test_invalid_json(self):
        with pytest.raises(ReadError, match="Invalid JSON"):
            loads("{not json")

    def test_unregistered_type_cannot_be_printed(self):
        class Custom(Function):
            pass

        with pytest.raises(ValueError, match="not serializable"):
            print_function(Custom(1, 1))
