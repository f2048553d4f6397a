"""
Value classification for the structural renderer.

Decides which rendering strategy applies to any Python value. The order of the
checks is fixed: custom text conversion wins over structure, structure wins
over primitive kinds, and anything left over is opaque.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import numbers
from dataclasses import is_dataclass
from enum import Enum, unique
from typing import Any, Protocol, runtime_checkable

# Local ----------------------------------------------------------------------------------------------------------------
from .options import ScribeOptions
from .utils import class_name, is_textual

# Constants ------------------------------------------------------------------------------------------------------------

NATIVE_TYPES = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    list,
    tuple,
    dict,
    set,
    frozenset,
)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class ValueKind(str, Enum):
    """Rendering strategy for a value."""
    NIL = "nil"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEXT = "text"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    CUSTOM = "custom"
    OPAQUE = "opaque"

    @property
    def is_composite(self) -> bool:
        return self in (ValueKind.SEQUENCE, ValueKind.MAPPING)

    @property
    def is_scalar(self) -> bool:
        return self in (ValueKind.NIL, ValueKind.BOOLEAN, ValueKind.NUMBER, ValueKind.TEXT)


@runtime_checkable
class SupportsScribe(Protocol):
    """Protocol for values that provide their own display text."""

    def __scribe__(self) -> str: ...


# Methods --------------------------------------------------------------------------------------------------------------


def classify(obj: Any, opts: ScribeOptions | None = None) -> ValueKind:
    """
    Classify a value for rendering.

    Args:
        obj: Any Python object.
        opts: Options; `use_custom` and `index_base` affect the result.

    Returns:
        The ValueKind that selects how `obj` is rendered.

    Dispatch Logic:
        - `__scribe__()` or overridden `__str__` (user classes) → CUSTOM
        - dataclass instance, namedtuple → MAPPING
        - Mapping with int keys index_base .. index_base+n-1 → SEQUENCE
        - other Mapping → MAPPING
        - non-text Sequence, Set → SEQUENCE
        - None, bool, numbers, text → NIL, BOOLEAN, NUMBER, TEXT
        - everything else → OPAQUE

    Examples:
        >>> classify([1, 2])
        <ValueKind.SEQUENCE: 'sequence'>
        >>> classify({1: "a", 2: "b"}, ScribeOptions(index_base=1))
        <ValueKind.SEQUENCE: 'sequence'>
        >>> classify({"a": 1})
        <ValueKind.MAPPING: 'mapping'>
        >>> classify(len)
        <ValueKind.OPAQUE: 'opaque'>
    """
    opts = opts if opts is not None else ScribeOptions()

    # Priority 1: Own text conversion
    if opts.use_custom and has_custom_text(obj):
        return ValueKind.CUSTOM

    # Priority 2: Composites
    if _is_record(obj):
        return ValueKind.MAPPING
    if isinstance(obj, abc.Mapping):
        return ValueKind.SEQUENCE if is_dense(obj, opts.index_base) else ValueKind.MAPPING
    if isinstance(obj, (abc.Sequence, abc.Set)) and not is_textual(obj):
        return ValueKind.SEQUENCE

    # Priority 3: Primitives, bool is an int subclass so it goes first
    if obj is None:
        return ValueKind.NIL
    if isinstance(obj, bool):
        return ValueKind.BOOLEAN
    if isinstance(obj, numbers.Number):
        return ValueKind.NUMBER
    if is_textual(obj):
        return ValueKind.TEXT

    return ValueKind.OPAQUE


def has_custom_text(obj: Any) -> bool:
    """
    True if `obj` converts itself to display text.

    Either it implements `__scribe__()`, or its class is not a native builtin
    and overrides the `__str__` of its nearest native base (enum members,
    exceptions, dates, paths...). Classes themselves never qualify.
    """
    if isinstance(obj, type):
        return False
    if isinstance(obj, SupportsScribe):
        return True
    cls = type(obj)
    if cls in NATIVE_TYPES:
        return False
    base = next((t for t in cls.__mro__ if t in NATIVE_TYPES), object)
    return cls.__str__ is not base.__str__


def is_dense(mp: abc.Mapping, base: int = 0) -> bool:
    """
    True if the mapping keys are exactly the ints base .. base+len-1.

    Empty mappings and bool keys never qualify.
    """
    n = len(mp)
    if n == 0:
        return False
    for k in mp:
        if isinstance(k, bool) or not isinstance(k, int):
            return False
        if not base <= k < base + n:
            return False
    return True


def is_namedtuple(obj: Any) -> bool:
    return isinstance(obj, tuple) and isinstance(getattr(type(obj), "_fields", None), tuple)


def tag_of(obj: Any) -> str | None:
    """
    Return the display tag attached to a value, or None.

    A non-empty `__scribe_tag__` string wins; dataclass instances and
    namedtuples are tagged with their class name.

    Examples:
        >>> class Suit(list):
        ...     __scribe_tag__ = "Suit"
        >>> tag_of(Suit())
        'Suit'
        >>> tag_of([]) is None
        True
    """
    try:
        tag = getattr(obj, "__scribe_tag__", None)
    except Exception:
        # Broken __getattr__ or property, treat as untagged
        tag = None
    if isinstance(tag, str) and tag:
        return tag
    if _is_record(obj):
        return class_name(obj)
    return None


# Private Methods ------------------------------------------------------------------------------------------------------


def _is_record(obj: Any) -> bool:
    """Dataclass instances and namedtuples, shown as tagged field mappings."""
    return (is_dataclass(obj) and not isinstance(obj, type)) or is_namedtuple(obj)
