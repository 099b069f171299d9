"""
Tests for the ndequiv.equivalency.steps and ndequiv.equivalency.pytypes files.
"""

import numpy as np
from ndequiv.equivalency import (AssertionScope, Comparands, EquivalencyOptions, EquivalencyResult, EquivalencyStep,
    EquivalencyValidator, ValidationContext)
from ndequiv.equivalency.pytypes import ValueKind, kind_of, rank_of, shape_of, is_array, is_multidimensional_array
from ndequiv.equivalency.steps import (DictionaryEquivalencyStep, SequenceEquivalencyStep, SimpleEqualityStep,
    StrictTypeStep)


class _RecordingValidator:
    def __init__(self):
        self.paths = []

    def recursively_assert_equality(self, comparands, context):
        self.paths.append(context.path)


def _run(step, actual, expected, **options):
    context = ValidationContext(AssertionScope(), EquivalencyOptions(**options))
    validator = _RecordingValidator()
    result = step.handle(Comparands(actual, expected), context, validator)
    return result, [f.message for f in context.scope.failures], validator.paths


def test_kind_of():
    assert kind_of(None) is ValueKind.ABSENT
    assert kind_of(1) is kind_of('abc') is kind_of(np.float32(2)) is kind_of(np.array(3)) is ValueKind.SCALAR
    assert kind_of([1]) is kind_of((1,)) is kind_of(np.arange(3)) is ValueKind.SEQUENCE
    assert kind_of(np.zeros((2, 2))) is kind_of(np.zeros((0, 1, 2))) is ValueKind.ARRAY
    assert kind_of(Ellipsis) is kind_of(NotImplemented) is ValueKind.SCALAR
    assert kind_of({}) is ValueKind.MAPPING
    assert kind_of(set()) is kind_of(object()) is kind_of(x for x in []) is ValueKind.OTHER

    assert rank_of(np.zeros((2, 3, 4))) == 3 and rank_of([[1]]) == 0
    assert shape_of(np.zeros((2, 3))) == (2, 3) and shape_of(5) == ()
    assert is_array(np.array(3)) and is_array(np.arange(2)) and not is_array([1, 2])
    assert is_multidimensional_array(np.zeros((1, 1)))
    assert not is_multidimensional_array(np.zeros(4)) and not is_multidimensional_array([[1, 2]])


def test_sequence_step():
    result, failures, paths = _run(SequenceEquivalencyStep(), [1, 2, 3], (4, 5, 6))
    assert result is EquivalencyResult.ASSERTION_COMPLETED
    assert failures == [] and paths == ['[0]', '[1]', '[2]']

    assert _run(SequenceEquivalencyStep(), None, [1]) == (EquivalencyResult.ASSERTION_COMPLETED,
        ["Expected value to be a sequence, but found None."], [])
    assert _run(SequenceEquivalencyStep(), [1, 2], [1])[1] == ["Expected sequence to contain 1 item(s), but found 2."]
    assert _run(SequenceEquivalencyStep(), {'a': 1}, [1])[1] == ["Expected value to be a sequence, but found {'a': 1}."]
    assert _run(SequenceEquivalencyStep(), [1], 'a')[0] is EquivalencyResult.CONTINUE_WITH_NEXT


def test_dictionary_step():
    result, failures, paths = _run(DictionaryEquivalencyStep(), {'a': 1, 'c': 3}, {'a': 1, 'b': 2})
    assert result is EquivalencyResult.ASSERTION_COMPLETED
    assert failures == ["Expected dictionary to contain key(s) ['b'], but they are missing.",
        "Expected dictionary to not contain key(s) ['c']."]
    assert paths == []

    assert _run(DictionaryEquivalencyStep(), {'a': 1, 'b': 2}, {'b': 2, 'a': 1})[2] == ["['b']", "['a']"]
    assert _run(DictionaryEquivalencyStep(), [], {})[1] == ["Expected value to be a dictionary, but found []."]
    assert _run(DictionaryEquivalencyStep(), {}, [])[0] is EquivalencyResult.CONTINUE_WITH_NEXT


def test_simple_step():
    assert _run(SimpleEqualityStep(), 1, 1.0)[1] == []
    assert _run(SimpleEqualityStep(), 1, 2)[1] == ["Expected value to be 2, but found 1."]
    assert _run(SimpleEqualityStep(), 1, True)[1] == ["Expected value to be True, but found 1."]
    assert _run(SimpleEqualityStep(), np.arange(2), 1)[1] != []


def test_strict_type_step():
    assert _run(StrictTypeStep(), 1, 1.0)[0] is EquivalencyResult.CONTINUE_WITH_NEXT
    assert _run(StrictTypeStep(), 1, 1, strict_types=True)[0] is EquivalencyResult.CONTINUE_WITH_NEXT
    assert _run(StrictTypeStep(), 1, 1.0, strict_types=True)[1] == ["Expected value to be of type 'float', but found 'int'."]


def test_user_step_runs_first():
    """A user step can take over comparisons before the default pipeline sees them"""
    class _ApproxFloatStep(EquivalencyStep):
        def handle(self, comparands, context, validator):
            if not isinstance(comparands.expected, (float, np.floating)):
                return EquivalencyResult.CONTINUE_WITH_NEXT
            context.for_condition(abs(comparands.actual - comparands.expected) < 1e-6) \
                .fail_with("Expected {context:value} to be approximately {0}, but found {1}.", comparands.expected,
                    comparands.actual)
            return EquivalencyResult.ASSERTION_COMPLETED

    actual = np.array([[0.1 + 0.2, 1.0], [2.0, 3.5]])
    expected = np.array([[0.3, 1.0], [2.0, 3.0]])
    assert len(EquivalencyValidator().assert_equality(actual, expected).failures) == 2

    options = EquivalencyOptions().with_step(_ApproxFloatStep())
    scope = EquivalencyValidator(options).assert_equality(actual, expected)
    assert [f.path for f in scope.failures] == ['[1,1]']
    assert scope.failures[0].message.startswith("Expected item[1,1] to be approximately ")
