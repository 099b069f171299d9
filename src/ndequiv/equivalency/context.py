"""
Options for an equivalency check, and the context that follows each comparison down through nested objects.
"""

import copy
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, List, Optional
    from typing_extensions import Self
    from .scope import AssertionScope, Condition
    from .steps import EquivalencyStep


DEFAULT_MAX_RECURSION_DEPTH = 10


class EquivalencyOptions:
    """
    Settings for a single equivalency check. These used to be module-level kwargs that every nested call had to restore
        afterwards; now they ride along on the :class:`ValidationContext` and nothing is shared between checks.

    Args:
        strict_types (bool): if True, then the types of both objects must exactly match. Otherwise objects which are
            equal but of different types will be considered equal. Defaults to False.
        max_recursion_depth (int): how many levels of nested objects to descend into before giving up and reporting a
            failure. Defaults to 10.
        steps (Optional[List[EquivalencyStep]]): the equivalency pipeline to run, in order. Defaults to
            :func:`~ndequiv.equivalency.steps.default_steps`.
    """

    def __init__(self, strict_types: 'bool' = False, max_recursion_depth: 'int' = DEFAULT_MAX_RECURSION_DEPTH,
        steps: 'Optional[List[EquivalencyStep]]' = None) -> None:
        if not isinstance(max_recursion_depth, int) or isinstance(max_recursion_depth, bool):
            raise TypeError("`max_recursion_depth` must be an int, not %s" % repr(type(max_recursion_depth).__name__))
        if max_recursion_depth < 1:
            raise ValueError("`max_recursion_depth` must be at least 1, got %d" % max_recursion_depth)

        if steps is None:
            from .steps import default_steps
            steps = default_steps()

        self.strict_types = bool(strict_types)
        self.max_recursion_depth = max_recursion_depth
        self.steps = list(steps)

    def with_step(self, step: 'EquivalencyStep') -> 'Self':
        """Returns a copy of these options with `step` run before all of the current steps"""
        ret = copy.copy(self)
        ret.steps = [step] + self.steps
        return ret

    def __repr__(self) -> 'str':
        return "%s(strict_types=%s, max_recursion_depth=%d, steps=[%s])" % (self.__class__.__name__, self.strict_types,
            self.max_recursion_depth, ', '.join(type(s).__name__ for s in self.steps))


class ValidationContext:
    """
    Where a comparison is happening: the path from the root objects (eg: '[1,2]' or "['a'][0]"), how deep we are, and
        the scope to report failures into.
    """

    def __init__(self, scope: 'AssertionScope', options: 'EquivalencyOptions', path: 'str' = '', depth: 'int' = 0,
        root_name: 'Optional[str]' = None) -> None:
        self.scope = scope
        self.options = options
        self.path = path
        self.depth = depth
        self.root_name = root_name

    def as_collection_item(self, label: 'str') -> 'ValidationContext':
        """Child context for the item of a collection at `label` (an index, or comma-joined indices for arrays)"""
        return self._child('[%s]' % label)

    def as_dictionary_item(self, key: 'Any') -> 'ValidationContext':
        return self._child('[%s]' % repr(key))

    def describe(self, fallback: 'str') -> 'str':
        """Human-readable name of what is being compared, eg: 'item[1,2]', or `fallback` at the (unnamed) root"""
        if self.root_name is not None:
            return self.root_name + self.path
        return ('item' + self.path) if self.path else fallback

    def for_condition(self, condition: 'bool') -> 'Condition':
        return self.scope.for_condition(condition, context=self)

    def fail_with(self, template: 'str', *args: 'Any') -> 'None':
        self.scope.fail_with(template, *args, context=self)

    def _child(self, suffix: 'str') -> 'ValidationContext':
        return self.__class__(self.scope, self.options, path=self.path + suffix, depth=self.depth + 1,
            root_name=self.root_name)

    def __repr__(self) -> 'str':
        return "%s(path=%s, depth=%d)" % (self.__class__.__name__, repr(self.path), self.depth)
