"""Identity keys: (element type, address) pairs naming a storage location.

An address is the ``id()`` of an object, the data pointer of a numpy
buffer, or an attribute slot of an object. A record and each of its
attribute slots share the same numeric base; the member name and the
element type keep them apart, as do the dtypes of a structured array and
the view of its first field, which share a data pointer.
"""

from __future__ import annotations

import inspect
import typing
import weakref
from dataclasses import dataclass
from typing import Any, Dict, Hashable, NamedTuple, Optional

__all__ = ["Address", "IdentityKey", "Ref", "slot_type", "read_slot", "describe_type"]

_MISSING = object()


class Address(NamedTuple):
    """Opaque, hashable storage handle."""

    base: int
    member: Optional[str] = None

    def __str__(self) -> str:
        if self.member is None:
            return f"0x{self.base:x}"
        return f"0x{self.base:x}:{self.member}"


@dataclass(frozen=True)
class IdentityKey:
    """
    A storage address together with the static type of what lives there.

    Two keys are equal iff both attributes are equal, so "a ``str`` slot at
    A" and "an ``S`` object at A" are different identities.

    Attributes:
        element_type: Declared or dynamic type of the referenced storage
        address: Where that storage lives
    """

    element_type: Hashable
    address: Address

    def describe(self) -> str:
        """Human-readable label, e.g. ``list @ 0x7f3a...``."""
        return f"{describe_type(self.element_type)} @ {self.address}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": describe_type(self.element_type),
            "address": f"0x{self.address.base:x}",
            "member": self.address.member,
        }


def describe_type(element_type: Any) -> str:
    """Render a type, dtype or annotation as a short name."""
    if isinstance(element_type, type):
        if element_type.__module__ == "builtins":
            return element_type.__qualname__
        return f"{element_type.__module__}.{element_type.__qualname__}"
    if type(element_type).__module__.startswith("numpy"):
        return f"ndarray[{element_type}]"
    return repr(element_type).replace("typing.", "")


# Weak keys so classes created at runtime can still be collected.
_declared_cache: "weakref.WeakKeyDictionary[type, Dict[str, Any]]" = weakref.WeakKeyDictionary()


def _declared_types(cls: type) -> Dict[str, Any]:
    """Resolved field annotations for ``cls``, falling back to raw ones."""
    declared = _declared_cache.get(cls)
    if declared is None:
        declared = _resolve_annotations(cls)
        _declared_cache[cls] = declared
    return declared


def _resolve_annotations(cls: type) -> Dict[str, Any]:
    # Evaluating string annotations runs arbitrary expressions; any failure
    # means the raw annotations are used instead.
    try:
        return dict(typing.get_type_hints(cls))
    except Exception:
        pass

    merged: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        try:
            merged.update(inspect.get_annotations(klass))
        except (TypeError, ValueError):
            continue
    return merged


def slot_type(owner: Any, name: str, value: Any = _MISSING) -> Hashable:
    """
    Static type of the attribute slot ``owner.name``.

    Uses the class annotation when there is one and the type of the slot's
    current value otherwise.

    Args:
        owner: Object holding the slot
        name: Attribute name as stored (mangled for private names)
        value: Current slot value, read from ``owner`` when omitted

    Returns:
        A hashable type descriptor
    """
    declared = _declared_types(type(owner)).get(name, _MISSING)
    if declared is _MISSING:
        if value is _MISSING:
            value = read_slot(owner, name, None)
        return type(value)
    try:
        hash(declared)
    except TypeError:
        return repr(declared)
    return declared


def read_slot(owner: Any, name: str, default: Any = _MISSING) -> Any:
    """Read ``owner.name`` from storage, bypassing class-level descriptors."""
    instance_dict = getattr(owner, "__dict__", None)
    if isinstance(instance_dict, dict) and name in instance_dict:
        return instance_dict[name]
    try:
        return getattr(owner, name)
    except AttributeError:
        if default is _MISSING:
            raise
        return default


class Ref:
    """
    A pointer to one attribute slot of an object.

    ``Ref(s, "name")`` plays the role ``&s.name`` plays in languages with
    addressable fields. Two refs to the same slot compare equal and share
    an identity key; the identity of the ``Ref`` object itself never counts.

    Args:
        owner: Object holding the slot
        name: Attribute name as stored
    """

    __slots__ = ("owner", "name")

    def __init__(self, owner: Any, name: str):
        self.owner = owner
        self.name = name

    def get(self, default: Any = _MISSING) -> Any:
        """Dereference the pointer."""
        return read_slot(self.owner, self.name, default)

    def set(self, value: Any) -> None:
        """Write through the pointer."""
        setattr(self.owner, self.name, value)

    @property
    def address(self) -> Address:
        return Address(id(self.owner), self.name)

    def key(self) -> IdentityKey:
        """Identity key of the referenced slot."""
        return IdentityKey(slot_type(self.owner, self.name), self.address)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.owner is other.owner and self.name == other.name

    def __hash__(self) -> int:
        return hash((id(self.owner), self.name))

    def __repr__(self) -> str:
        return f"Ref({type(self.owner).__qualname__}@0x{id(self.owner):x}.{self.name})"
