"""
Graph walker: finds every storage location reachable through more than one path.

The walk is depth-first. Each value is dispatched on its shape to a
``_visit_<shape>`` method which returns the children still to be walked.
Reference-bearing shapes consult the registry first and return nothing on
a repeat visit, which is what cuts cycles. Children are kept on an
explicit stack so long chains do not run into the interpreter's recursion
limit; the visiting order is the same as a recursive walk.
"""

from __future__ import annotations

import logging
import time
import weakref
from typing import Any, Dict, List, Optional

import numpy as np

from ..config import ScanConfig
from ..utils.logging_setup import get_logger
from .errors import ScanLimitError
from .identity import IdentityKey, Ref
from .introspect import SCALAR_SEQUENCE_TYPES, ShapeClassifier, iter_fields, typed_pointer_of
from .registry import VisitationRegistry

logger = get_logger(__name__)


def find_duplicate_pointers(value: Any, config: Optional[ScanConfig] = None) -> Dict[IdentityKey, bool]:
    """
    Walk ``value`` and report identities reached more than once.

    Lists, dicts, sets, numpy buffers, object references and attribute
    slots (private ones included) are all tracked.

    Args:
        value: Root of the object graph
        config: Optional scan configuration

    Returns:
        Mapping that holds ``True`` for every duplicate identity. Other
        identities map to ``False`` or are absent, so ``result.get(key)``
        is truthy iff ``key`` is a duplicate.
    """
    finder = DuplicateFinder(config)
    finder.scan_object(value)
    return finder.duplicate_pointers


scan_for_duplicates = find_duplicate_pointers


class DuplicateFinder:
    """
    Scans objects and remembers every identity it passes through.

    ``scan_object`` may be called with several roots; aliasing between
    them is reported as well. A finder is not thread-safe.

    Args:
        config: Optional scan configuration
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self.classifier = ShapeClassifier(self.config)
        self.registry = VisitationRegistry()

    @property
    def duplicate_pointers(self) -> Dict[IdentityKey, bool]:
        """Snapshot of the key -> is-duplicate mapping."""
        return self.registry.snapshot()

    def duplicates(self) -> List[IdentityKey]:
        return self.registry.duplicates()

    def reset(self) -> None:
        """Forget everything seen so far."""
        self.registry.clear()

    def check_ptr_already_found(self, pointer: Any) -> bool:
        """
        Record a reference-bearing value, returning True if it was recorded before.

        Raises:
            UnaddressableValueError: If ``pointer`` has no stable storage
            ScanLimitError: If the registry grows past ``max_objects``
        """
        key = typed_pointer_of(pointer, self.classifier)
        already_found = self.registry.register_and_check(key)
        limit = self.config.max_objects
        if limit and len(self.registry) > limit:
            raise ScanLimitError(
                f"Scan registered more than {limit} identities",
                limit=limit,
                registered=len(self.registry),
            )
        return already_found

    def scan_object(self, obj: Any) -> None:
        """Walk ``obj`` and everything reachable from it."""
        started = time.perf_counter()
        before = len(self.registry)

        stack = [obj]
        while stack:
            value = stack.pop()
            visit = getattr(self, f"_visit_{self.classifier.classify(value).value}")
            children = visit(value)
            if children:
                stack.extend(reversed(children))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Scanned {type(obj).__qualname__}: {len(self.registry) - before} new identities, "
                f"{len(self.registry.duplicates())} duplicates in {time.perf_counter() - started:.4f}s"
            )

    # --- Shape rules ---

    def _searchable(self, values) -> List[Any]:
        is_searchable = self.classifier.is_searchable
        return [v for v in values if is_searchable(v)]

    def _field_refs(self, value: Any) -> List[Ref]:
        # Fields of a referenced record are addressable: walk pointers to them.
        return [Ref(value, name) for name, _ in iter_fields(value)]

    def _subclass_field_refs(self, value: Any) -> List[Ref]:
        """Attribute slots of a container subclass instance, walked after its items."""
        if not self.classifier.has_fields(value):
            return []
        return self._field_refs(value)

    def _visit_dynamic(self, value: weakref.ref) -> List[Any]:
        target = value()
        if target is None or not self.classifier.is_searchable(target):
            return []
        return [target]

    def _visit_reference(self, value: Any) -> List[Any]:
        if self.check_ptr_already_found(value):
            return []
        if isinstance(value, Ref):
            return self._searchable([value.get(None)])
        if isinstance(value, set):
            return self._subclass_field_refs(value)
        return self._field_refs(value)

    def _visit_mapping(self, value: Any) -> List[Any]:
        if self.check_ptr_already_found(value):
            return []
        return self._searchable(value.values()) + self._subclass_field_refs(value)

    def _visit_sequence(self, value: Any) -> List[Any]:
        if isinstance(value, np.ndarray):
            if value.size == 0:
                return []
            if self.check_ptr_already_found(value):
                return []
            if value.dtype.kind != "O":
                return []
            return self._searchable(value.flat)

        if self.check_ptr_already_found(value):
            return []
        field_refs = self._subclass_field_refs(value)
        if isinstance(value, SCALAR_SEQUENCE_TYPES):
            return field_refs
        return self._searchable(value) + field_refs

    def _visit_fixed(self, value: tuple) -> List[Any]:
        return self._searchable(value)

    def _visit_record(self, value: Any) -> List[Any]:
        # Bare records are not addressable: walk field values directly.
        return self._searchable(field_value for _, field_value in iter_fields(value))

    def _visit_leaf(self, value: Any) -> List[Any]:
        return []
