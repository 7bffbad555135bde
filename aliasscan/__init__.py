"""alias-scan - Find aliased and cyclic references in Python object graphs."""

__version__ = "0.1.0"

import logging

from .config import ScanConfig
from .core.errors import AliasScanError, UnaddressableValueError
from .core.identity import Address, IdentityKey, Ref
from .core.introspect import typed_pointer_of
from .core.walker import DuplicateFinder, find_duplicate_pointers, scan_for_duplicates

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Address",
    "AliasScanError",
    "DuplicateFinder",
    "IdentityKey",
    "Ref",
    "ScanConfig",
    "UnaddressableValueError",
    "find_duplicate_pointers",
    "scan_for_duplicates",
    "typed_pointer_of",
    "__version__",
]
