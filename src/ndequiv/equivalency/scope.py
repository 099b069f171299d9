"""
Collects the failures found while checking two objects for equivalency.

An :class:`AssertionScope` is created once per top-level comparison and handed down to every nested comparison through
the validation context, so failures from all levels end up in one place. Nothing is raised while comparing: conditions
are checked with::

    scope.for_condition(a == b).fail_with("Expected {context:value} to be {0}, but found {1}.", b, a)

and chained with ``.then`` so that later conditions are only checked while the earlier ones held.
"""

import re
from typing import TYPE_CHECKING, NamedTuple


if TYPE_CHECKING:
    from typing import Any, List, Optional
    from typing_extensions import Self
    from .context import ValidationContext


_MAX_STR_LEN = 1000

# Either '{0}' (group 1) or '{context:fallback}' (group 2)
_PLACEHOLDER_RE = re.compile(r'\{(?:(\d+)|context:([^}]*))\}')


class AssertionFailedError(AssertionError):
    """Raised when an assertion scope is closed while holding failures"""

    def __init__(self, failures: 'List[Failure]'):
        self.failures = list(failures)
        super().__init__("Found %d difference(s):\n%s" % (len(self.failures), _join_failures(self.failures)))


class Failure(NamedTuple):
    """One reported difference, along with the path (eg: '[1,2]') to where it was found"""
    path: str
    message: str


class AssertionScope:
    """Accumulates :class:`Failure`'s. Can be used as a context manager that raises on exit if anything failed."""

    def __init__(self) -> None:
        self.failures: 'List[Failure]' = []

    @property
    def succeeded(self) -> 'bool':
        return not self.failures

    def for_condition(self, condition: 'bool', context: 'Optional[ValidationContext]' = None) -> 'Condition':
        """Starts a chain by checking `condition`. Nothing is reported until :meth:`Condition.fail_with` is called."""
        return Condition(self, bool(condition), context, enabled=True)

    def fail_with(self, template: 'str', *args: 'Any', context: 'Optional[ValidationContext]' = None) -> 'None':
        """Unconditionally reports a failure"""
        path = context.path if context is not None else ''
        self.failures.append(Failure(path, format_message(template, args, context)))

    def format_failures(self) -> 'str':
        return _join_failures(self.failures)

    def discard(self) -> 'List[Failure]':
        """Removes and returns all failures found so far"""
        failures, self.failures = self.failures, []
        return failures

    def raise_if_failed(self) -> 'None':
        if self.failures:
            raise AssertionFailedError(self.failures)

    def __enter__(self) -> 'Self':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> 'None':
        # Don't hide an exception that is already on its way out
        if exc_type is None:
            self.raise_if_failed()


class Condition:
    """A single checked condition waiting for the message to report if it does not hold"""

    def __init__(self, scope: 'AssertionScope', condition: 'bool', context: 'Optional[ValidationContext]', enabled: 'bool'):
        self._scope = scope
        self._condition = condition
        self._context = context
        self._enabled = enabled

    def fail_with(self, template: 'str', *args: 'Any') -> 'Continuation':
        # A disabled condition follows an earlier failure in the chain, which has already been reported
        if not self._enabled:
            return Continuation(self._scope, False, self._context)

        if not self._condition:
            self._scope.fail_with(template, *args, context=self._context)
        return Continuation(self._scope, self._condition, self._context)


class Continuation:
    """Result of :meth:`Condition.fail_with`. Truthy if every condition in the chain so far held."""

    def __init__(self, scope: 'AssertionScope', succeeded: 'bool', context: 'Optional[ValidationContext]'):
        self._scope = scope
        self._succeeded = succeeded
        self._context = context

    @property
    def then(self) -> 'Chain':
        return Chain(self._scope, self._succeeded, self._context)

    def __bool__(self) -> 'bool':
        return self._succeeded


class Chain:
    def __init__(self, scope: 'AssertionScope', enabled: 'bool', context: 'Optional[ValidationContext]'):
        self._scope = scope
        self._enabled = enabled
        self._context = context

    def for_condition(self, condition: 'bool') -> 'Condition':
        return Condition(self._scope, bool(condition), self._context, enabled=self._enabled)


def format_message(template: 'str', args: 'tuple', context: 'Optional[ValidationContext]' = None) -> 'str':
    """
    Fills in a failure message template.

    `{0}`, `{1}`, ... are replaced with the repr() of the positional args (limited to _MAX_STR_LEN characters), and
    `{context:fallback}` with the description of the context path, or `fallback` if at the root of the comparison.
    Substitution happens in one pass so braces inside the arguments are left alone.
    """
    def _sub(match):
        if match.group(1) is None:
            fallback = match.group(2)
            return context.describe(fallback) if context is not None else fallback

        idx = int(match.group(1))
        if idx >= len(args):
            raise ValueError("Message template %s refers to argument %d, but only %d were given" % (repr(template), idx, len(args)))
        return limit_str(args[idx])

    return _PLACEHOLDER_RE.sub(_sub, template)


def limit_str(a: 'Any', limit: 'int' = _MAX_STR_LEN) -> 'str':
    a_str = repr(a)
    return a_str if len(a_str) < limit else (a_str[:limit] + '...')


def _join_failures(failures: 'List[Failure]') -> 'str':
    return '\n'.join(f.message for f in failures)
