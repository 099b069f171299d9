from .equality import EquivalencyValidator, EqualityError, EqualityCheckingError, assert_equivalent, equal
from .context import EquivalencyOptions, ValidationContext
from .scope import AssertionFailedError, AssertionScope, Failure
from .steps import Comparands, EquivalencyResult, EquivalencyStep, default_steps
from .multidim import MultiDimensionalArrayEquivalencyStep, Digit, build_digits, iter_indices

__all__ = ['EquivalencyValidator', 'EqualityError', 'EqualityCheckingError', 'assert_equivalent', 'equal',
    'EquivalencyOptions', 'ValidationContext', 'AssertionFailedError', 'AssertionScope', 'Failure', 'Comparands',
    'EquivalencyResult', 'EquivalencyStep', 'default_steps', 'MultiDimensionalArrayEquivalencyStep', 'Digit',
    'build_digits', 'iter_indices']
