"""
The equivalency pipeline.

Each step is asked, in order, to handle a pair of comparands. A step either declines (``CONTINUE_WITH_NEXT``) and lets
the next step have a go, or takes ownership (``ASSERTION_COMPLETED``), reporting any failures into the context's scope
and handing nested values back to the validator.

Default order:
    - ReferenceEqualityStep                 a is b
    - StrictTypeStep                        types must match exactly when `strict_types=True`
    - MultiDimensionalArrayEquivalencyStep  numpy arrays of rank >= 2 (see :mod:`.multidim`)
    - SequenceEquivalencyStep               list, tuple, rank-1 numpy arrays
    - DictionaryEquivalencyStep             dict
    - SimpleEqualityStep                    everything else, using '=='
"""

import numpy as np
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple
from .pytypes import ValueKind, kind_of


if TYPE_CHECKING:
    from typing import Any, List
    from .context import ValidationContext
    from .equality import EquivalencyValidator


_BOOL_TYPES = (bool, np.bool_)
_COMPLEX_TYPES = (complex, np.complexfloating)
_NAT_TYPES = (np.datetime64, np.timedelta64)


class EquivalencyResult(Enum):
    CONTINUE_WITH_NEXT = 'continue_with_next'
    ASSERTION_COMPLETED = 'assertion_completed'


class Comparands(NamedTuple):
    """The pair of values being compared at some point in the object graph. `actual` is the value under test."""
    actual: 'Any'
    expected: 'Any'
    static_type: type = object


class EquivalencyStep:
    """Base class for all steps in the pipeline"""

    def handle(self, comparands: 'Comparands', context: 'ValidationContext',
        validator: 'EquivalencyValidator') -> 'EquivalencyResult':
        raise NotImplementedError

    def __repr__(self) -> 'str':
        return "%s()" % self.__class__.__name__


class ReferenceEqualityStep(EquivalencyStep):
    """The same object is always equivalent to itself"""

    def handle(self, comparands, context, validator):
        if comparands.actual is comparands.expected:
            return EquivalencyResult.ASSERTION_COMPLETED
        return EquivalencyResult.CONTINUE_WITH_NEXT


class StrictTypeStep(EquivalencyStep):
    def handle(self, comparands, context, validator):
        if not context.options.strict_types or type(comparands.actual) is type(comparands.expected):
            return EquivalencyResult.CONTINUE_WITH_NEXT

        context.fail_with("Expected {context:value} to be of type {0}, but found {1}.",
            type(comparands.expected).__name__, type(comparands.actual).__name__)
        return EquivalencyResult.ASSERTION_COMPLETED


class SequenceEquivalencyStep(EquivalencyStep):
    """
    Compares rank-1 sequences item by item in strict order. Lists, tuples and rank-1 numpy arrays are interchangeable.

    Every item is compared even after a mismatch so all differences are reported at once.
    """

    def handle(self, comparands, context, validator):
        actual, expected = comparands.actual, comparands.expected
        if kind_of(expected) is not ValueKind.SEQUENCE:
            return EquivalencyResult.CONTINUE_WITH_NEXT

        if not context.for_condition(actual is not None) \
                .fail_with("Expected {context:value} to be a sequence, but found None.") \
                .then.for_condition(kind_of(actual) is ValueKind.SEQUENCE) \
                .fail_with("Expected {context:value} to be a sequence, but found {0}.", actual):
            return EquivalencyResult.ASSERTION_COMPLETED

        if not context.for_condition(len(actual) == len(expected)) \
                .fail_with("Expected {context:sequence} to contain {0} item(s), but found {1}.", len(expected), len(actual)):
            return EquivalencyResult.ASSERTION_COMPLETED

        for i, (actual_item, expected_item) in enumerate(zip(actual, expected)):
            validator.recursively_assert_equality(Comparands(actual_item, expected_item), context.as_collection_item(str(i)))

        return EquivalencyResult.ASSERTION_COMPLETED


class DictionaryEquivalencyStep(EquivalencyStep):
    """Dictionaries must have the same keys, and equivalent values at each key"""

    def handle(self, comparands, context, validator):
        actual, expected = comparands.actual, comparands.expected
        if kind_of(expected) is not ValueKind.MAPPING:
            return EquivalencyResult.CONTINUE_WITH_NEXT

        if not context.for_condition(isinstance(actual, dict)) \
                .fail_with("Expected {context:value} to be a dictionary, but found {0}.", actual):
            return EquivalencyResult.ASSERTION_COMPLETED

        # Report both missing and unexpected keys before giving up
        missing = [k for k in expected if k not in actual]
        extra = [k for k in actual if k not in expected]
        no_missing = bool(context.for_condition(not missing)
            .fail_with("Expected {context:dictionary} to contain key(s) {0}, but they are missing.", missing))
        no_extra = bool(context.for_condition(not extra)
            .fail_with("Expected {context:dictionary} to not contain key(s) {0}.", extra))

        if no_missing and no_extra:
            for k in expected:
                validator.recursively_assert_equality(Comparands(actual[k], expected[k]), context.as_dictionary_item(k))

        return EquivalencyResult.ASSERTION_COMPLETED


class SimpleEqualityStep(EquivalencyStep):
    """
    Last step in the pipeline, compares using '=='.

    Bools are only ever equal to other bools, never to the ints 0/1. Two NaN's (float or complex) or two NaT's are considered
        equal, the same way numpy.testing.assert_equal() treats them. An array is never equal to something that is not an array.
    """

    def handle(self, comparands, context, validator):
        actual, expected = comparands.actual, comparands.expected

        if isinstance(actual, _BOOL_TYPES) or isinstance(expected, _BOOL_TYPES):
            equal = isinstance(actual, _BOOL_TYPES) and isinstance(expected, _BOOL_TYPES) and bool(actual) == bool(expected)
        elif _both_missing(actual, expected):
            equal = True
        elif isinstance(actual, np.ndarray) and actual.ndim > 0:
            # Arrays expected as arrays never make it this far, and '==' against anything else broadcasts or raises
            equal = False
        else:
            equal = _eq_result(actual == expected)

        context.for_condition(equal).fail_with("Expected {context:value} to be {0}, but found {1}.", expected, actual)
        return EquivalencyResult.ASSERTION_COMPLETED


def default_steps() -> 'List[EquivalencyStep]':
    """Returns new instances of the default pipeline, in the order they should run"""
    from .multidim import MultiDimensionalArrayEquivalencyStep

    return [
        ReferenceEqualityStep(),
        StrictTypeStep(),
        MultiDimensionalArrayEquivalencyStep(),
        SequenceEquivalencyStep(),
        DictionaryEquivalencyStep(),
        SimpleEqualityStep(),
    ]


def _is_float_nan(x: 'Any') -> 'bool':
    return isinstance(x, (float, np.floating)) and bool(np.isnan(x))


def _part_equal(a: 'Any', b: 'Any') -> 'bool':
    return (_is_float_nan(a) and _is_float_nan(b)) or bool(a == b)


def _both_missing(a: 'Any', b: 'Any') -> 'bool':
    """
    True if `a` and `b` are both NaN or both NaT, which '==' never considers equal. Complex values count if they have
        NaN's in the same parts and the other parts are equal, like numpy.testing.assert_equal().
    """
    for nat_type in _NAT_TYPES:
        if isinstance(a, nat_type) and isinstance(b, nat_type):
            return bool(np.isnat(a)) and bool(np.isnat(b))

    if isinstance(a, _COMPLEX_TYPES) and isinstance(b, _COMPLEX_TYPES):
        return bool(np.isnan(a)) and bool(np.isnan(b)) and _part_equal(a.real, b.real) and _part_equal(a.imag, b.imag)

    return _is_float_nan(a) and _is_float_nan(b)


def _eq_result(result: 'Any') -> 'bool':
    """Converts the output of '==' to a bool. Comparing an array to a scalar gives an array, which only counts if 0-d."""
    if isinstance(result, np.ndarray):
        return result.shape == () and bool(result)
    return bool(result)
