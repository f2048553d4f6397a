"""
Scribe utilities shared across the package.

Small helpers used by the classifier, the renderer and the format engine.
Kept here to avoid circular imports between those modules.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import json
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an instance or of a class itself.

    Builtin classes are never qualified, so both `class_name(10)` and
    `class_name(int, fully_qualified=True)` return 'int'.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, prefix user classes with their module name.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> class Card: ...
        >>> class_name(Card())
        'Card'
        >>> class_name(int, fully_qualified=True)
        'int'
    """
    cls = obj if isinstance(obj, type) else type(obj)
    if fully_qualified and cls.__module__ != "builtins":
        return f"{cls.__module__}.{cls.__qualname__}"
    return cls.__name__


def is_textual(obj: Any) -> bool:
    """Text-like values are scalars, never decomposed into characters."""
    return isinstance(obj, (str, bytes, bytearray))


def quote_text(s: str) -> str:
    """
    Quote and escape a string for display inside a composite.

    Uses double quotes with JSON escapes for quotes, backslashes and control
    characters. Non-ASCII characters are kept as they are.

    Examples:
        >>> quote_text('say "hi"')
        '"say \\\\"hi\\\\""'
        >>> quote_text("♣")
        '"♣"'
    """
    return json.dumps(s, ensure_ascii=False)
