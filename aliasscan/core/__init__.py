"""Core traversal and identity tracking."""

from .errors import (
    AliasScanError,
    ScanLimitError,
    TargetResolutionError,
    UnaddressableValueError,
)
from .identity import Address, IdentityKey, Ref
from .introspect import Shape, ShapeClassifier, classify, is_searchable, iter_fields, typed_pointer_of
from .registry import VisitationRegistry
from .walker import DuplicateFinder, find_duplicate_pointers, scan_for_duplicates

__all__ = [
    "AliasScanError",
    "ScanLimitError",
    "TargetResolutionError",
    "UnaddressableValueError",
    "Address",
    "IdentityKey",
    "Ref",
    "Shape",
    "ShapeClassifier",
    "classify",
    "is_searchable",
    "iter_fields",
    "typed_pointer_of",
    "VisitationRegistry",
    "DuplicateFinder",
    "find_duplicate_pointers",
    "scan_for_duplicates",
]
