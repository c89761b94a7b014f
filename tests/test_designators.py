"""
Tests for the designator algebra.

These tests verify:
1. Range construction, arithmetic and ordering
2. Composition, flattening and head/tail decomposition
3. Scan directions of the range helpers
"""

import pytest

from glasstrace.designator import (
    IDENTITY,
    ComposedPart,
    Identity,
    InvalidRangeError,
    NthElement,
    NthInput,
    NthOutput,
    Range,
    compose,
    mentioned_range,
    remove_range,
    replace_range_by,
)
from glasstrace.functions import ForAll


# =============================================================================
# RANGE TESTS
# =============================================================================

class TestRange:
    """Test inclusive character ranges."""

    @pytest.mark.parametrize("start,end", [(0, 0), (2, 4), (-3, 5), (10, 100)])
    def test_length(self, start, end):
        """Length counts both bounds."""
        assert Range(start, end).length() == end - start + 1

    def test_inverted_range_fails(self):
        """end < start must fail at construction, never be swapped."""
        with pytest.raises(InvalidRangeError, match="End index smaller than start index"):
            Range(5, 2)

    def test_inverted_range_is_value_and_index_error(self):
        """InvalidRangeError can be caught as either builtin."""
        with pytest.raises(ValueError):
            Range(1, 0)
        with pytest.raises(IndexError):
            Range(1, 0)

    @pytest.mark.parametrize("offset", [-7, -1, 0, 1, 42])
    def test_shift_round_trip(self, offset):
        """Shifting forth and back gives the same range."""
        r = Range(3, 8)
        assert r.shift(offset).shift(-offset) == r

    def test_shift_moves_both_bounds(self):
        assert Range(2, 4).shift(3) == Range(5, 7)

    @pytest.mark.parametrize("a,b", [
        (Range(0, 3), Range(2, 5)),
        (Range(0, 3), Range(4, 5)),
        (Range(2, 2), Range(2, 2)),
        (Range(0, 10), Range(3, 4)),
        (Range(5, 6), Range(0, 4)),
    ])
    def test_overlaps_iff_intersection(self, a, b):
        """overlaps() agrees with intersect(), which is commutative."""
        assert a.overlaps(b) == (a.intersect(b) is not None)
        assert a.intersect(b) == b.intersect(a)

    def test_intersection_bounds(self):
        assert Range(0, 3).intersect(Range(2, 5)) == Range(2, 3)

    def test_intersect_with_none(self):
        assert Range(0, 3).intersect(None) is None

    def test_ordering(self):
        """Ranges order by (start, end)."""
        ranges = [Range(3, 3), Range(2, 5), Range(2, 4)]
        assert sorted(ranges) == [Range(2, 4), Range(2, 5), Range(3, 3)]

    def test_string_form(self):
        assert str(Range(2, 4)) == "I2-4"
        assert str(Range(3, 3)) == "I3"

    def test_is_hashable(self):
        assert len({Range(1, 2), Range(1, 2), Range(1, 3)}) == 2


# =============================================================================
# APPLIES-TO TESTS
# =============================================================================

class TestAppliesTo:
    """Test which parts are meaningful for which values."""

    def test_identity_applies_to_anything(self):
        assert IDENTITY.applies_to("text")
        assert IDENTITY.applies_to(42)

    def test_range_applies_to_strings_only(self):
        assert Range(0, 1).applies_to("abc")
        assert not Range(0, 1).applies_to(["a", "b"])

    def test_element_applies_to_sequences(self):
        assert NthElement(0).applies_to([1, 2])
        assert NthElement(0).applies_to((1, 2))
        assert not NthElement(0).applies_to("ab")

    def test_ports_apply_to_functions(self):
        assert NthInput(0).applies_to(ForAll())
        assert NthOutput(0).applies_to(ForAll())
        assert not NthInput(0).applies_to("ab")

    def test_composed_applies_like_its_head(self):
        d = compose(NthElement(1), Range(0, 2))
        assert d.applies_to([1, 2])
        assert not d.applies_to("abc")


# =============================================================================
# COMPOSITION TESTS
# =============================================================================

class TestCompose:
    """Test composed designators."""

    def test_empty_composition_is_identity(self):
        assert compose() is IDENTITY
        assert compose([]) is IDENTITY

    def test_single_part_is_returned_as_is(self):
        part = NthOutput(0)
        assert compose(part) is part
        assert compose([part]) is part

    def test_identity_and_none_are_dropped(self):
        assert compose(IDENTITY, NthOutput(1), None) == NthOutput(1)
        assert compose(IDENTITY, IDENTITY) is IDENTITY

    def test_nested_chains_are_flattened(self):
        d = compose(NthOutput(0), compose(NthElement(1), Range(2, 4)))
        assert isinstance(d, ComposedPart)
        assert d.parts == (NthOutput(0), NthElement(1), Range(2, 4))

    def test_head_and_tail(self):
        d = compose(NthOutput(0), NthElement(1), Range(2, 4))
        assert d.head == NthOutput(0)
        assert d.tail == compose(NthElement(1), Range(2, 4))
        assert d.tail.tail == Range(2, 4)
        assert d.tail.tail.tail is None

    def test_simple_part_head_and_tail(self):
        r = Range(1, 2)
        assert r.head is r
        assert r.tail is None
        assert isinstance(IDENTITY.head, Identity)

    def test_equal_chains_are_equal(self):
        a = compose(NthInput(0), NthElement(3))
        b = compose([NthInput(0), NthElement(3)])
        assert a == b
        assert hash(a) == hash(b)

    def test_string_form(self):
        d = compose(NthOutput(0), NthElement(1), Range(2, 4))
        assert str(d) == "#0/@1/I2-4"
        assert str(IDENTITY) == "id"
        assert str(NthInput(2)) == "!2"


# =============================================================================
# RANGE HELPER TESTS
# =============================================================================

class TestRangeHelpers:
    """Test mentioned_range, remove_range and replace_range_by."""

    def setup_method(self):
        self.two_ranges = compose(NthOutput(0), Range(1, 2), NthElement(0), Range(5, 6))
        self.no_range = compose(NthOutput(0), NthElement(3))

    def test_mentioned_range_is_head_most(self):
        """With several ranges, the one closest to the head is kept."""
        assert mentioned_range(self.two_ranges) == Range(1, 2)

    def test_mentioned_range_absent(self):
        assert mentioned_range(self.no_range) is None
        assert mentioned_range(IDENTITY) is None

    def test_mentioned_range_of_bare_range(self):
        assert mentioned_range(Range(3, 4)) == Range(3, 4)

    def test_remove_range_removes_tail_most(self):
        """remove_range drops the range closest to the tail."""
        assert remove_range(self.two_ranges) == compose(NthOutput(0), Range(1, 2), NthElement(0))

    def test_remove_range_without_range(self):
        assert remove_range(self.no_range) == self.no_range

    def test_remove_bare_range(self):
        assert remove_range(Range(0, 1)) is IDENTITY

    def test_replace_returns_same_reference_without_range(self):
        """No range means no new designator at all."""
        assert replace_range_by(self.no_range, Range(0, 0)) is self.no_range
        part = NthElement(2)
        assert replace_range_by(part, Range(0, 0)) is part

    def test_replace_replaces_head_most_only(self):
        result = replace_range_by(self.two_ranges, NthElement(9))
        assert result == compose(NthOutput(0), NthElement(9), NthElement(0), Range(5, 6))

    def test_replace_bare_range(self):
        assert replace_range_by(Range(1, 1), NthElement(0)) == NthElement(0)

    def test_replace_by_identity_drops_the_range(self):
        d = compose(NthOutput(0), Range(1, 2))
        assert replace_range_by(d, IDENTITY) == NthOutput(0)
