"""
Utils for determining equivalency of objects

Handled types:
    - singleton objects (None, Ellipsis, NotImplemented, etc.)
    - bool (never equal to int's)
    - int, float, np.number, complex, str, bytes, etc. using '=='
    - list, tuple, rank-1 numpy ndarray (interchangeable, compared in order)
    - numpy ndarray of rank >= 2 (same shape, then compared element by element)
    - dict
    - falls back on built-in __eq__

Unlike a plain '==', a failed check reports *every* difference found along with the path to it, eg::

    Expected item[1,2] to be 5, but found 6.
    Expected dimension 1 to contain 3 item(s), but found 4.
"""

import logging
from typing import TYPE_CHECKING
from .context import EquivalencyOptions, ValidationContext, DEFAULT_MAX_RECURSION_DEPTH
from .scope import AssertionScope, limit_str
from .steps import Comparands, EquivalencyResult


if TYPE_CHECKING:
    from typing import Any, List, Optional
    from .scope import Failure


_log = logging.getLogger(__name__)


class EquivalencyValidator:
    """Runs the equivalency pipeline on a pair of comparands, and is handed back nested values to check by the steps"""

    def __init__(self, options: 'Optional[EquivalencyOptions]' = None) -> None:
        self.options = EquivalencyOptions() if options is None else options

    def assert_equality(self, actual: 'Any', expected: 'Any', scope: 'Optional[AssertionScope]' = None,
        root_name: 'Optional[str]' = None) -> 'AssertionScope':
        """Checks `actual` against `expected`, returning the scope holding all failures found"""
        scope = AssertionScope() if scope is None else scope
        context = ValidationContext(scope, self.options, root_name=root_name)
        self.recursively_assert_equality(Comparands(actual, expected), context)
        return scope

    def recursively_assert_equality(self, comparands: 'Comparands', context: 'ValidationContext') -> 'None':
        if context.depth >= self.options.max_recursion_depth:
            _log.debug("Maximum recursion depth reached at %s", repr(context.path))
            context.fail_with("The maximum recursion depth of {0} was reached.", self.options.max_recursion_depth)
            return

        # Wrap everything in a try/catch in case there is an error, so it will be easier to spot
        for step in self.options.steps:
            try:
                result = step.handle(comparands, context, self)
            except EqualityCheckingError:
                raise
            except Exception as e:
                raise EqualityCheckingError("Could not determine equality between objects at %s using %s: %s\na: %s\nb: %s" %
                    (repr(context.describe('root')), type(step).__name__, e, limit_str(comparands.actual),
                    limit_str(comparands.expected))) from e

            if result is EquivalencyResult.ASSERTION_COMPLETED:
                return

        raise EqualityCheckingError("No equivalency step was able to handle objects at %s\na: %s\nb: %s" %
            (repr(context.describe('root')), limit_str(comparands.actual), limit_str(comparands.expected)))


def assert_equivalent(actual: 'Any', expected: 'Any', strict_types: 'bool' = False,
    max_recursion_depth: 'int' = DEFAULT_MAX_RECURSION_DEPTH, options: 'Optional[EquivalencyOptions]' = None) -> 'AssertionScope':
    """
    Asserts that `actual` is equivalent to `expected`, raising an
        :class:`~ndequiv.equivalency.scope.AssertionFailedError` listing every difference if not. Returns the (empty)
        scope otherwise.

    Args:
        actual (Any): the value under test
        expected (Any): the expected value
        strict_types (bool): if True, then the types of both objects must exactly match. Defaults to False.
        max_recursion_depth (int): maximum depth of nested objects to check. Defaults to 10.
        options (Optional[EquivalencyOptions]): if passed, these options are used instead of `strict_types` and
            `max_recursion_depth`
    """
    if options is None:
        options = EquivalencyOptions(strict_types=strict_types, max_recursion_depth=max_recursion_depth)
    scope = EquivalencyValidator(options).assert_equality(actual, expected)
    scope.raise_if_failed()
    return scope


def equal(a: 'Any', b: 'Any', strict_types: 'bool' = False, raise_err: 'bool' = False,
    max_recursion_depth: 'int' = DEFAULT_MAX_RECURSION_DEPTH) -> 'bool':
    """
    Determines whether `a` is equivalent to `b`, generalizing for more objects and capabilities than default __eq__().
    `b` is treated as the expected value and `a` as the actual one, which only matters for the wording of failures.

    NOTE: This method is not meant to be very fast. Arrays in particular are compared element by element so that every
    differing element can be reported.

    Args:
        a (Any): object to check equality
        b (Any): object to check equality
        strict_types (bool): if True, then the types of both objects must exactly match. Otherwise objects which are
            equal but of different types will be considered equal. Defaults to False.
        raise_err (bool): if True, then an ``EqualityError`` will be raised whenever `a` and `b` are unequal, listing
            every difference found. Defaults to False.
        max_recursion_depth (int): maximum depth of nested objects to check. Defaults to 10.
    """
    options = EquivalencyOptions(strict_types=strict_types, max_recursion_depth=max_recursion_depth)
    scope = EquivalencyValidator(options).assert_equality(a, b)

    if scope.succeeded:
        return True
    if raise_err:
        raise EqualityError(a, b, failures=scope.failures)
    return False


class EqualityError(Exception):
    """Error raised whenever an :func:`~ndequiv.equivalency.equality.equal` check returns false and `raise_err=True`"""

    def __init__(self, a, b, message=None, failures: 'Optional[List[Failure]]' = None):
        self.failures = [] if failures is None else list(failures)
        if message is None:
            message = '\n'.join(f.message for f in self.failures) if self.failures else "Values are not equal"
        super().__init__("Object a (%s) is not equal to object b (%s)\na: %s\nb: %s\nMessage: %s" % \
            (repr(type(a).__name__), repr(type(b).__name__), limit_str(a), limit_str(b), message))


class EqualityCheckingError(Exception):
    """Error raised whenever there is an unexpected problem attempting to check equality between two objects"""
