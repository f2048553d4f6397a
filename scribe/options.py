"""
Scribe rendering and formatting options.

All configuration is passed explicitly to each render or format call. There is
no module-level default that calls could share or mutate.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, replace
from typing import Literal, Self, get_args

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name

# Classes --------------------------------------------------------------------------------------------------------------

Layout = Literal["pretty", "inline", "classic", "alt", "json", "inline_json"]

LAYOUTS: tuple[str, ...] = get_args(Layout)


@dataclass(frozen=True)
class ScribeOptions:
    """
    Immutable configuration for `render()` and the `fmt()` family.

    Attributes:
        layout: "pretty" for an indented multi-line tree, "inline" for a single line,
                "classic", "alt", "json" and "inline_json" for the other layouts.
                Unknown layouts fall back to "pretty".
        indent: Number of spaces per nesting level in the pretty layout.
        index_base: Index printed for the first sequence element. Mappings whose keys
                    are exactly index_base .. index_base+n-1 are shown as sequences.
        quote_text: Quote top-level text. Nested text is always quoted.
        annotate_all: Show the ordinal of every composite, not only of shared ones.
        use_custom: Honour `__scribe__()` and overridden `__str__` on user classes.
        strict: Treat surplus format arguments as an error instead of a warning.

    Examples:
        >>> opts = ScribeOptions(indent=2)
        >>> opts.merge(layout="inline").layout
        'inline'

        >>> ScribeOptions(layout="yaml").layout
        'pretty'
    """

    layout: Layout = "pretty"
    indent: int = 4
    index_base: int = 0
    quote_text: bool = False
    annotate_all: bool = False
    use_custom: bool = True
    strict: bool = False

    def __post_init__(self) -> None:
        """Validate int fields, cast flags to bool and fall back from unknown layouts."""
        for name in ("indent", "index_base"):
            val = getattr(self, name)
            if isinstance(val, bool) or not isinstance(val, int):
                raise TypeError(f"ScribeOptions.{name} must be an int, got {class_name(val)}")
        if self.indent < 0:
            raise ValueError(f"ScribeOptions.indent must be >=0, but got {self.indent}")

        # Frozen dataclass, so bypass __setattr__
        for name in ("quote_text", "annotate_all", "use_custom", "strict"):
            object.__setattr__(self, name, bool(getattr(self, name)))
        if self.layout not in LAYOUTS:
            object.__setattr__(self, "layout", "pretty")

    # Class Methods ------------------------------------

    @classmethod
    def pretty(cls) -> Self:
        """Indented multi-line tree, the default."""
        return cls(layout="pretty")

    @classmethod
    def inline(cls) -> Self:
        """Everything on one line, for log lines and messages."""
        return cls(layout="inline")

    @classmethod
    def classic(cls) -> Self:
        """Indented tree with braces for every composite and `[i] = ` item prefixes."""
        return cls(layout="classic")

    @classmethod
    def alt(cls) -> Self:
        """Indented tree with `key: value` entries and no sequence indices."""
        return cls(layout="alt")

    @classmethod
    def json(cls) -> Self:
        """Indented JSON-style punctuation."""
        return cls(layout="json")

    @classmethod
    def inline_json(cls) -> Self:
        return cls(layout="inline_json")

    @classmethod
    def debug(cls) -> Self:
        """
        Pretty layout that shows every ordinal and quotes top-level text.

        Strict argument checking is on, so surplus format arguments raise.
        """
        return cls(layout="pretty", quote_text=True, annotate_all=True, strict=True)

    # Methods ------------------------------------------

    def merge(self, **kwargs) -> Self:
        """
        Return a copy with the given fields replaced.

        Raises:
            TypeError: If a keyword is not a ScribeOptions field.
        """
        return replace(self, **kwargs)
