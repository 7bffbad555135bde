"""
Runtime introspection used by the walker.

Classifies any Python value into exactly one ``Shape``, enumerates the
fields of records (public, private, name-mangled and ``__slots__``), and
derives identity keys for reference-bearing values.
"""

from __future__ import annotations

import array
import collections
import datetime
import io
import numbers
import pathlib
import re
import threading
import types
import uuid
import weakref
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Optional, Tuple

import numpy as np

from ..config import ScanConfig
from .errors import UnaddressableValueError
from .identity import Address, IdentityKey, Ref

__all__ = [
    "Shape",
    "ShapeClassifier",
    "classify",
    "is_searchable",
    "iter_fields",
    "typed_pointer_of",
]


class Shape(Enum):
    """Dynamic shape of a value, as far as aliasing is concerned."""
    DYNAMIC = "dynamic"      # weakref.ref: unwrap, no key of its own
    REFERENCE = "reference"  # object reference, Ref, set
    MAPPING = "mapping"      # dict-like, values are followed
    SEQUENCE = "sequence"    # list-like, may share backing storage
    FIXED = "fixed"          # tuple, inline in whatever holds it
    RECORD = "record"        # namedtuple, fields not addressable
    LEAF = "leaf"            # never produces a key


# Shapes that consult the registry.
REFERENCE_BEARING: FrozenSet[Shape] = frozenset({Shape.REFERENCE, Shape.MAPPING, Shape.SEQUENCE})

_LEAF_TYPES: Tuple[type, ...] = (
    type(None),
    type(Ellipsis),
    type(NotImplemented),
    numbers.Number,
    str,
    bytes,
    range,
    slice,
    memoryview,
    frozenset,
    Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    pathlib.PurePath,
    re.Pattern,
    np.generic,
    np.dtype,
)

_OPAQUE_TYPES: Tuple[type, ...] = (
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    types.GetSetDescriptorType,
    types.MemberDescriptorType,
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    types.CodeType,
    types.FrameType,
    types.TracebackType,
    types.CellType,
    property,
    staticmethod,
    classmethod,
    io.IOBase,
    type(threading.Lock()),
    type(threading.RLock()),
)

_MAPPING_TYPES: Tuple[type, ...] = (dict, types.MappingProxyType)
_SEQUENCE_TYPES: Tuple[type, ...] = (list, collections.deque, bytearray, array.array)
# Elements of these are always scalars; they are registered but never iterated.
SCALAR_SEQUENCE_TYPES: Tuple[type, ...] = (bytearray, array.array)


def _dotted_names(cls: type) -> List[str]:
    return [f"{klass.__module__}.{klass.__qualname__}" for klass in cls.__mro__]


_slot_cache: "weakref.WeakKeyDictionary[type, Tuple[str, ...]]" = weakref.WeakKeyDictionary()


def _slot_names(cls: type) -> Tuple[str, ...]:
    """Storage names of every ``__slots__`` entry, base classes first."""
    cached = _slot_cache.get(cls)
    if cached is not None:
        return cached

    names: List[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            if slot not in names:
                names.append(slot)
    _slot_cache[cls] = tuple(names)
    return _slot_cache[cls]


def _has_fields(cls: type) -> bool:
    return bool(getattr(cls, "__dictoffset__", 0)) or bool(_slot_names(cls))


class ShapeClassifier:
    """
    Decides the shape of a value from its type.

    Classification depends only on ``type(value)`` and the scan
    configuration, so results are cached per type.

    Args:
        config: Scan configuration (weakref/numpy switches, forced leaf types)
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self._leaf_names = frozenset(self.config.leaf_types)
        self._cache: "weakref.WeakKeyDictionary[type, Shape]" = weakref.WeakKeyDictionary()
        self._fields_cache: "weakref.WeakKeyDictionary[type, bool]" = weakref.WeakKeyDictionary()

    def classify(self, value: Any) -> Shape:
        cls = type(value)
        shape = self._cache.get(cls)
        if shape is None:
            shape = self._classify_type(cls)
            self._cache[cls] = shape
        return shape

    def is_searchable(self, value: Any) -> bool:
        """True if the walker has anything to do with ``value``."""
        return self.classify(value) is not Shape.LEAF

    def has_fields(self, value: Any) -> bool:
        """True if instances of ``type(value)`` carry their own attribute storage."""
        cls = type(value)
        result = self._fields_cache.get(cls)
        if result is None:
            result = self._fields_cache[cls] = _has_fields(cls)
        return result

    def _classify_type(self, cls: type) -> Shape:
        if self._leaf_names and not self._leaf_names.isdisjoint(_dotted_names(cls)):
            return Shape.LEAF
        if issubclass(cls, Ref):
            return Shape.REFERENCE
        if issubclass(cls, weakref.ref):
            return Shape.DYNAMIC if self.config.follow_weakrefs else Shape.LEAF
        if issubclass(cls, _LEAF_TYPES) or issubclass(cls, _OPAQUE_TYPES):
            return Shape.LEAF
        if issubclass(cls, np.ndarray):
            return Shape.SEQUENCE if self.config.scan_numpy else Shape.LEAF
        if issubclass(cls, tuple):
            return Shape.RECORD if hasattr(cls, "_fields") else Shape.FIXED
        if issubclass(cls, _MAPPING_TYPES):
            return Shape.MAPPING
        if issubclass(cls, _SEQUENCE_TYPES):
            return Shape.SEQUENCE
        if issubclass(cls, set):
            return Shape.REFERENCE
        if _has_fields(cls):
            return Shape.REFERENCE
        return Shape.LEAF


_default_classifier = ShapeClassifier()


def classify(value: Any) -> Shape:
    """Classify ``value`` with the default configuration."""
    return _default_classifier.classify(value)


def is_searchable(value: Any) -> bool:
    """True if ``value`` is anything other than a leaf."""
    return _default_classifier.is_searchable(value)


def iter_fields(value: Any) -> Iterable[Tuple[str, Any]]:
    """
    Yield ``(storage name, value)`` for every field of a record.

    Covers namedtuple fields, ``__slots__`` (unset slots are skipped) and
    the instance ``__dict__``, in that order. Private and name-mangled
    fields are included.

    Args:
        value: Record instance or namedtuple

    Yields:
        Field name and current value pairs
    """
    cls = type(value)
    if isinstance(value, tuple) and hasattr(cls, "_fields"):
        yield from zip(cls._fields, value)
        return

    seen = set()
    for name in _slot_names(cls):
        try:
            field_value = object.__getattribute__(value, name)
        except AttributeError:
            continue
        seen.add(name)
        yield name, field_value

    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        for name, field_value in list(instance_dict.items()):
            if name not in seen:
                yield name, field_value


def typed_pointer_of(value: Any, classifier: Optional[ShapeClassifier] = None) -> IdentityKey:
    """
    Identity key of a reference-bearing value.

    Args:
        value: Object reference, ``Ref``, mapping, list-like or numpy array
        classifier: Classifier to use; the default one when omitted

    Returns:
        The value's identity key

    Raises:
        UnaddressableValueError: If ``value`` has no stable storage
    """
    classifier = classifier or _default_classifier
    shape = classifier.classify(value)
    if shape not in REFERENCE_BEARING:
        raise UnaddressableValueError(
            f"Cannot take the address of a {shape.value} value of type {type(value).__qualname__}",
            value_type=type(value),
        )

    if isinstance(value, Ref):
        return value.key()
    if isinstance(value, np.ndarray):
        if value.size == 0:
            raise UnaddressableValueError(
                "Cannot take the address of an empty array",
                value_type=type(value),
            )
        return IdentityKey(value.dtype, Address(value.__array_interface__["data"][0]))
    return IdentityKey(type(value), Address(id(value)))
