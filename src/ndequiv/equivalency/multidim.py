"""
Equivalency of multi-dimensional (rank >= 2) numpy arrays.

Two arrays are equivalent when they have the same shape and every pair of elements at the same index is equivalent.
Elements are handed back to the validator one at a time, so object arrays holding lists, dicts or further arrays are
compared recursively, and each element failure is labelled with its index, eg: 'item[1,2]'.

The number of dimensions is only known at runtime, so indices are generated with a :class:`Digit` chain: a mixed-radix
counter with one digit per dimension. The last dimension varies fastest (row-major / C order), which is the order
``numpy.ndindex`` would give.
"""

import logging
from typing import TYPE_CHECKING
from .steps import Comparands, EquivalencyResult, EquivalencyStep
from .pytypes import ValueKind, is_array, is_multidimensional_array, kind_of, rank_of, shape_of


if TYPE_CHECKING:
    import numpy as np
    from typing import Any, Iterator, List, Optional, Sequence, Tuple
    from .context import ValidationContext
    from .equality import EquivalencyValidator


_log = logging.getLogger(__name__)


class MultiDimensionalArrayEquivalencyStep(EquivalencyStep):
    """
    Compares two numpy arrays of rank >= 2 using strict order for the items themselves. Rank-1 arrays and anything that
        is not an array are left for the next step.
    """

    def handle(self, comparands: 'Comparands', context: 'ValidationContext',
        validator: 'EquivalencyValidator') -> 'EquivalencyResult':
        expected = comparands.expected
        if not is_multidimensional_array(expected):
            return EquivalencyResult.CONTINUE_WITH_NEXT

        actual = comparands.actual
        if not are_comparable(actual, expected, context):
            _log.debug("Arrays at %s are not comparable, skipping element checks", repr(context.path))
            return EquivalencyResult.ASSERTION_COMPLETED

        if expected.size == 0:
            return EquivalencyResult.ASSERTION_COMPLETED

        _log.debug("Comparing %d element(s) of arrays with shape %s at %s", expected.size, expected.shape, repr(context.path))

        digit = build_digits(shape_of(expected))
        while True:
            indices = digit.indices()
            item_context = context.as_collection_item(','.join(str(i) for i in indices))
            validator.recursively_assert_equality(Comparands(actual[indices], expected[indices]), item_context)

            if not digit.increment():
                break

        return EquivalencyResult.ASSERTION_COMPLETED


def are_comparable(actual: 'Any', expected: 'np.ndarray', context: 'ValidationContext') -> 'bool':
    """
    Checks that `actual` is an array with the same shape as `expected`, reporting a failure for each problem found.

    Every dimension is checked, so an array differing in several dimensions gets one failure per dimension. If `actual`
        is not an array, or its rank differs, then the dimensions are not checked at all.
    """
    return _is_array(actual, context) and _have_same_rank(actual, expected, context) \
        and _have_same_dimensions(actual, expected, context)


def _is_array(actual: 'Any', context: 'ValidationContext') -> 'bool':
    return bool(context.for_condition(kind_of(actual) is not ValueKind.ABSENT)
        .fail_with("Cannot compare a multi-dimensional array to None.")
        .then.for_condition(is_array(actual))
        .fail_with("Cannot compare a multi-dimensional array to something else."))


def _have_same_rank(actual: 'np.ndarray', expected: 'np.ndarray', context: 'ValidationContext') -> 'bool':
    return bool(context.for_condition(rank_of(actual) == rank_of(expected))
        .fail_with("Expected {context:array} to have {0} dimension(s), but it has {1}.", rank_of(expected), rank_of(actual)))


def _have_same_dimensions(actual: 'np.ndarray', expected: 'np.ndarray', context: 'ValidationContext') -> 'bool':
    same_dimensions = True

    for dimension, (expected_length, actual_length) in enumerate(zip(shape_of(expected), shape_of(actual))):
        same_dimensions &= bool(context.for_condition(expected_length == actual_length)
            .fail_with("Expected dimension {0} to contain {1} item(s), but found {2}.", dimension, expected_length, actual_length))

    return same_dimensions


class Digit:
    """
    One digit of a mixed-radix counter, counting through [0, length) for a single dimension.

    Digits are chained from the first (most significant) dimension to the last, and the first digit is used to drive
        the whole chain. Incrementing carries from the last dimension towards the first.
    """

    def __init__(self, length: 'int', next_digit: 'Optional[Digit]' = None) -> None:
        if length < 1:
            raise ValueError("Digit length must be at least 1, got %d" % length)
        self.length = length
        self.next_digit = next_digit
        self.index = 0

    def indices(self) -> 'Tuple[int, ...]':
        """The current index of this digit and all less significant ones, outermost first"""
        ret: 'List[int]' = []

        digit = self
        while digit is not None:
            ret.append(digit.index)
            digit = digit.next_digit

        return tuple(ret)

    def increment(self) -> 'bool':
        """
        Advances the counter by one. Returns False once the digit wraps back around to 0, which means the carry has to
            go to the next more significant digit. For the first digit of the chain that means every index has been seen.
        """
        chain: 'List[Digit]' = []
        digit = self
        while digit is not None:
            chain.append(digit)
            digit = digit.next_digit

        # Carry from the least significant digit back up to this one
        for digit in reversed(chain):
            if digit.index < digit.length - 1:
                digit.index += 1
                return True
            digit.index = 0

        return False

    def __repr__(self) -> 'str':
        return "%s(indices=%s)" % (self.__class__.__name__, self.indices())


def build_digits(shape: 'Sequence[int]') -> 'Digit':
    """Builds the digit chain for the given shape (outermost dimension first), returning the most significant digit"""
    if len(shape) == 0:
        raise ValueError("Cannot build digits for a shape with no dimensions")

    digit = None
    for length in reversed(shape):
        digit = Digit(length, digit)
    return digit


def iter_indices(shape: 'Sequence[int]') -> 'Iterator[Tuple[int, ...]]':
    """Yields every index tuple for the given shape in row-major order. Yields nothing if any dimension is empty."""
    if len(shape) == 0 or any(length == 0 for length in shape):
        return

    digit = build_digits(shape)
    yield digit.indices()
    while digit.increment():
        yield digit.indices()
