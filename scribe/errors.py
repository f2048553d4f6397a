"""
Format-string engine errors.

Rendering itself never raises; only template interpretation does. All errors
derive from ValueError, so callers that only care about "bad input" can catch
that.
"""


class FormatError(ValueError):
    """
    Base class for template formatting errors.

    Attributes:
        position: 1-based index of the offending directive, if known.
        specifier: Text of the offending directive such as "%5d", if known.
    """

    def __init__(self, message: str, *, position: int | None = None, specifier: str | None = None):
        super().__init__(message)
        self.position = position
        self.specifier = specifier


class FormatArityError(FormatError):
    """
    Argument count does not match the directives in the template.

    Raised when arguments run out, and for surplus arguments in strict mode.

    Attributes:
        expected: Number of argument-consuming directives.
        supplied: Number of arguments given.
    """

    def __init__(self, message: str, *, expected: int, supplied: int, position: int | None = None,
                 specifier: str | None = None):
        super().__init__(message, position=position, specifier=specifier)
        self.expected = expected
        self.supplied = supplied


class FormatTypeError(FormatError, TypeError):
    """An argument's kind is incompatible with its directive, e.g. text for `%d`."""


class FormatSpecifierError(FormatError):
    """Unknown conversion character or incomplete directive at the end of a template."""
