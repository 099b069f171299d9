"""Equivalency assertions for nested python objects and multi-dimensional numpy arrays."""

import logging
from .equivalency import *
from .equivalency import __all__

logging.getLogger(__name__).addHandler(logging.NullHandler())
