"""
Python types that don't have a nice importable name, and the runtime 'kind' of values being compared.

Every value handed to the equivalency pipeline is tagged with a :class:`ValueKind`:

    - ABSENT    None
    - SCALAR    anything that is not a container, including rank-0 numpy arrays
    - SEQUENCE  list, tuple, rank-1 numpy array
    - ARRAY     numpy array of rank >= 2
    - MAPPING   dict
    - OTHER     generators, sets, dict views, custom objects
"""

import numpy as np
from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Tuple


GeneratorType = type(_ for _ in [])
DictKeysType = type({}.keys())
DictValuesType = type({}.values())
SingletonObjects = (None, Ellipsis, NotImplemented)


class ValueKind(Enum):
    ABSENT = 'absent'
    SCALAR = 'scalar'
    SEQUENCE = 'sequence'
    ARRAY = 'array'
    MAPPING = 'mapping'
    OTHER = 'other'


def kind_of(value: 'Any') -> 'ValueKind':
    """Returns the :class:`ValueKind` tag for the given value"""
    if value is None:
        return ValueKind.ABSENT
    if any(value is x for x in SingletonObjects):
        return ValueKind.SCALAR

    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return ValueKind.SCALAR
        return ValueKind.SEQUENCE if value.ndim == 1 else ValueKind.ARRAY

    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    if isinstance(value, (GeneratorType, DictKeysType, DictValuesType, set, frozenset)):
        return ValueKind.OTHER

    # Strings and bytes are sequences to python, but they are compared as a whole
    if isinstance(value, (bool, int, float, complex, np.generic, str, bytes, bytearray, memoryview, range, type, Enum)):
        return ValueKind.SCALAR
    return ValueKind.OTHER


def is_array(value: 'Any') -> 'bool':
    """True if `value` is a numpy array of any rank, even one that would be tagged as a scalar or sequence"""
    return isinstance(value, np.ndarray)


def rank_of(value: 'Any') -> 'int':
    """Returns the number of dimensions of `value`, or 0 if it is not a numpy array"""
    return value.ndim if isinstance(value, np.ndarray) else 0


def shape_of(value: 'Any') -> 'Tuple[int, ...]':
    """Returns the length along each dimension of `value`, outermost first, or an empty tuple if it is not an array"""
    return tuple(int(length) for length in value.shape) if isinstance(value, np.ndarray) else ()


def is_multidimensional_array(value: 'Any') -> 'bool':
    """True if `value` is an array of rank 2 or more"""
    return kind_of(value) is ValueKind.ARRAY
