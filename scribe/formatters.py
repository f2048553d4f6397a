"""
Printf-style format-string engine.

Interprets `%` directives in a template and converts the matching arguments.
Scalar directives use Python's own printf conversions; structural directives
hand the argument to the renderer.

Directives: `%[flags][width][.precision]conv` with flags from `-+ #0`.

    %%            literal percent sign
    %d %i         integer (bools rejected, integral floats accepted)
    %x %X %o      integer in hex/octal
    %c            code point or single character
    %e %E %f %F   real number
    %g %G         real number
    %s            text as is, any other value rendered inline
    %q            text quoted, any other value rendered inline with quoted text
    %t            inline structural rendering
    %T            pretty structural rendering, using the value's tag

Examples:
    >>> fmt("2*%d = %d", 42, 84)
    '2*42 = 84'
    >>> fmt("%s has %t", "cfg", {"debug": True, "level": 3})
    'cfg has { debug = True, level = 3 }'
"""

# Standard library -----------------------------------------------------------------------------------------------------
import numbers
import re
import sys
import warnings
from dataclasses import dataclass
from decimal import Decimal
from typing import IO, Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import FormatArityError, FormatSpecifierError, FormatTypeError
from .options import ScribeOptions
from .render import inline, pretty
from .utils import class_name, quote_text

# Constants ------------------------------------------------------------------------------------------------------------

_DIRECTIVE = re.compile(
    r"%(?P<flags>[-+ #0]*)(?P<width>\d*)(?:\.(?P<precision>\d*))?(?P<conv>.?)",
    re.DOTALL,
)

_MAX_CODE_POINT = 0x10FFFF


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Directive:
    """
    A parsed `%` directive.

    Attributes:
        conv: Conversion character, e.g. "d" or "T".
        flags: printf flags from "-+ #0".
        width: Minimum field width digits, "" if absent.
        precision: Precision digits, None if absent.
        position: 1-based index among the argument-consuming directives.
        offset: Character offset of the `%` in the template.
    """
    conv: str
    flags: str = ""
    width: str = ""
    precision: str | None = None
    position: int = 0
    offset: int = 0

    @property
    def spec(self) -> str:
        """Directive text as written, e.g. "%-8.3f"."""
        prec = "" if self.precision is None else f".{self.precision}"
        return f"%{self.flags}{self.width}{prec}{self.conv}"


# Methods --------------------------------------------------------------------------------------------------------------


def fmt(template: str, *args: Any, opts: ScribeOptions | None = None) -> str:
    """
    Format a template with printf-style directives.

    Args:
        template: Text with `%` directives.
        *args: One argument per directive, in order.
        opts: Options for structural directives and arity checking.

    Returns:
        The assembled string.

    Raises:
        TypeError: If template is not a str.
        FormatSpecifierError: Unknown conversion or incomplete directive.
        FormatArityError: Too few arguments, or too many in strict mode.
        FormatTypeError: Argument incompatible with its scalar directive.

    Warns:
        RuntimeWarning: Surplus arguments outside strict mode. They are ignored.

    Examples:
        >>> fmt("%-6s|%5.2f|%03d", "ab", 3.14159, 7)
        'ab    | 3.14|007'
        >>> fmt("100%% of %q", "it")
        '100% of "it"'
    """
    if not isinstance(template, str):
        raise TypeError(f"template must be a str, got {class_name(template)}")
    opts = opts if opts is not None else ScribeOptions()

    parts = parse_template(template)
    directives = [p for p in parts if isinstance(p, Directive)]
    expected, supplied = len(directives), len(args)
    if supplied < expected:
        d = directives[supplied]
        raise FormatArityError(
            f"template needs {expected} argument(s) but {supplied} supplied, "
            f"no argument for {d.spec} (directive {d.position})",
            expected=expected, supplied=supplied, position=d.position, specifier=d.spec,
        )
    if supplied > expected:
        msg = f"template needs {expected} argument(s) but {supplied} supplied"
        if opts.strict:
            raise FormatArityError(msg, expected=expected, supplied=supplied)
        warnings.warn(f"{msg}, surplus ignored", RuntimeWarning, stacklevel=2)

    arg_iter = iter(args)
    return "".join(
        p if isinstance(p, str) else _CONVERTERS[p.conv](p, next(arg_iter), opts)
        for p in parts
    )


def write(template: str, *args: Any, file: IO[str] | None = None, opts: ScribeOptions | None = None) -> None:
    """
    Format a template and write it to a stream, then flush.

    The text is fully formatted before anything is written, so a formatting
    error leaves the stream untouched. Stream errors propagate as they are.

    Args:
        file: Output stream, `sys.stdout` if None.
    """
    _emit(fmt(template, *args, opts=opts), file)


def write_line(template: str, *args: Any, file: IO[str] | None = None,
               opts: ScribeOptions | None = None) -> None:
    """
    Format a template, append a newline, write it to a stream and flush.

    Examples:
        >>> write_line("x = %d", 42)
        x = 42
    """
    _emit(fmt(template, *args, opts=opts) + "\n", file)


def parse_template(template: str) -> list[str | Directive]:
    """
    Split a template into literal text and directives.

    `%%` becomes part of the literal text. Adjacent literal pieces are merged.

    Raises:
        FormatSpecifierError: Unknown conversion character or incomplete directive.

    Examples:
        >>> parse_template("x=%5d%%")
        ['x=', Directive(conv='d', flags='', width='5', precision=None, position=1, offset=2), '%']
    """
    parts: list[str | Directive] = []
    literal: list[str] = []
    start = 0
    position = 0

    def flush_literal() -> None:
        text = "".join(literal)
        literal.clear()
        if text:
            parts.append(text)

    for m in _DIRECTIVE.finditer(template):
        literal.append(template[start:m.start()])
        start = m.end()
        if m.group(0) == "%%":
            literal.append("%")
            continue

        conv = m["conv"]
        if conv not in _CONVERTERS:
            problem = "incomplete directive" if not conv else f"unknown conversion {conv!r}"
            raise FormatSpecifierError(
                f"{problem} in {m.group(0)!r} at offset {m.start()}",
                position=position + 1, specifier=m.group(0),
            )
        position += 1
        flush_literal()
        parts.append(Directive(
            conv=conv,
            flags=m["flags"],
            width=m["width"],
            precision=m["precision"],
            position=position,
            offset=m.start(),
        ))

    literal.append(template[start:])
    flush_literal()
    return parts


# Private Methods ------------------------------------------------------------------------------------------------------


def _emit(text: str, file: IO[str] | None) -> None:
    """Write in one call, then flush. `sys.stdout` is looked up at call time."""
    stream = sys.stdout if file is None else file
    stream.write(text)
    stream.flush()


def _as_integer(arg: Any) -> int | None:
    """Integer value of arg, or None if it has no exact integer representation."""
    if isinstance(arg, bool):
        return None
    if isinstance(arg, numbers.Integral):
        return int(arg)
    if isinstance(arg, (numbers.Real, Decimal)):
        try:
            whole = int(arg)
        except (OverflowError, ValueError):
            return None
        return whole if whole == arg else None
    return None


def _printf(d: Directive, value: Any, conv: str | None = None) -> str:
    prec = "" if d.precision is None else f".{d.precision}"
    return f"%{d.flags}{d.width}{prec}{conv or d.conv}" % (value,)


def _type_error(d: Directive, expected: str, arg: Any) -> FormatTypeError:
    return FormatTypeError(
        f"{d.spec} (directive {d.position}) expects {expected}, got {class_name(arg)}",
        position=d.position, specifier=d.spec,
    )


def _conv_integer(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    value = _as_integer(arg)
    if value is None:
        raise _type_error(d, "an integer", arg)
    return _printf(d, value)


def _conv_char(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    if isinstance(arg, str) and len(arg) == 1:
        return _printf(d, arg)
    value = _as_integer(arg)
    if value is None or not 0 <= value <= _MAX_CODE_POINT:
        raise _type_error(d, "a code point or a single character", arg)
    return _printf(d, value)


def _conv_real(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    if isinstance(arg, bool) or not isinstance(arg, (numbers.Real, Decimal)):
        raise _type_error(d, "a real number", arg)
    try:
        value = float(arg)
    except OverflowError:
        raise _type_error(d, "a real number in float range", arg) from None
    return _printf(d, value)


def _conv_text(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    text = arg if isinstance(arg, str) else inline(arg, opts=opts)
    return _printf(d, text, "s")


def _conv_quoted(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    if isinstance(arg, str):
        text = quote_text(arg)
    else:
        text = inline(arg, opts=opts.merge(quote_text=True))
    return _printf(d, text, "s")


def _conv_inline(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    return _printf(d, inline(arg, opts=opts), "s")


def _conv_pretty(d: Directive, arg: Any, opts: ScribeOptions) -> str:
    return _printf(d, pretty(arg, opts=opts), "s")


_CONVERTERS: dict[str, Callable[[Directive, Any, ScribeOptions], str]] = {
    "d": _conv_integer,
    "i": _conv_integer,
    "x": _conv_integer,
    "X": _conv_integer,
    "o": _conv_integer,
    "c": _conv_char,
    "e": _conv_real,
    "E": _conv_real,
    "f": _conv_real,
    "F": _conv_real,
    "g": _conv_real,
    "G": _conv_real,
    "s": _conv_text,
    "q": _conv_quoted,
    "t": _conv_inline,
    "T": _conv_pretty,
}
