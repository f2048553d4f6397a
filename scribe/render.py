"""
Structural renderer.

Walks a value graph depth-first and produces an indented text tree (or a single
line). Composites are tracked by identity: a composite met again while it is
still open (a cycle) or after it was finished through another path (an alias)
is printed as a `<ref:#N>` back-reference instead of being expanded again. Each
composite is therefore expanded at most once per call, which keeps both time
and output size linear in the number of distinct composites.

Ordinals are printed only where a back-reference points to them:

    #1 {
        name = "root",
        self = <ref:#1>
    }

The walk keeps its own stack, so nesting depth is not limited by the
interpreter's recursion limit.

Layouts:

    pretty        indented tree, `[i]` before sequence items
    inline        one line
    classic       indented tree, braces for sequences and `[i] = ` before items
    alt           indented tree, `key: value`, no sequence indices
    json          indented JSON-style punctuation, quoted keys, no tags or ordinals
    inline_json   one-line JSON-style punctuation
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import inspect
import numbers
import types
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Iterable, NamedTuple

# Local ----------------------------------------------------------------------------------------------------------------
from .classify import SupportsScribe, ValueKind, classify, is_namedtuple, tag_of
from .options import ScribeOptions
from .tracker import IdentityTracker
from .utils import class_name, quote_text


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class _Style:
    """Punctuation and line structure of a layout."""
    multiline: bool
    key_sep: str = " = "
    seq_index: str | None = "[{}] "
    seq_brackets: tuple[str, str] = ("[", "]")
    pad_brackets: bool = True
    json: bool = False


_STYLES: dict[str, _Style] = {
    "pretty": _Style(multiline=True),
    "inline": _Style(multiline=False, seq_index=None),
    "classic": _Style(multiline=True, seq_index="[{}] = ", seq_brackets=("{", "}")),
    "alt": _Style(multiline=True, key_sep=": ", seq_index=None),
    "json": _Style(multiline=True, key_sep=": ", seq_index=None, json=True),
    "inline_json": _Style(multiline=False, key_sep=": ", seq_index=None, pad_brackets=False, json=True),
}


class _Task(NamedTuple):
    """Pending value to render."""
    obj: Any
    depth: int
    style: _Style
    tag: str | None = None


class _Leave(NamedTuple):
    """Marks the end of a composite's output."""
    obj: Any


class _Shared:
    """
    Caches shared by a render pass and the key-ordering passes it starts.

    Entries and key texts depend only on `use_custom` and `index_base`, which
    all passes of one call have in common.
    """

    def __init__(self) -> None:
        self.entries: dict[int, list[tuple[Any, Any]]] = {}
        self.key_texts: dict[int, str] = {}
        self.pinned: list[Any] = []  # keeps cached objects alive so ids stay unique


# Methods --------------------------------------------------------------------------------------------------------------


def render(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """
    Render any value as deterministic, human-readable text.

    Each call owns a fresh identity table, so calls never share state and the
    same input always renders the same way.

    Args:
        obj: Any Python object, possibly self-referential.
        tag: Display name for the root composite. Overrides an attached tag.
        opts: Rendering options. Defaults to `ScribeOptions()`.

    Returns:
        The rendered text. Rendering has no failure mode: unknown kinds become
        placeholders such as `<function>`.

    Examples:
        >>> print(render({"b": [1, 2], "a": 1}))
        {
            a = 1,
            b = [
                [0] 1,
                [1] 2
            ]
        }

        >>> render([1, 2, 3], "Row", opts=ScribeOptions.inline())
        'Row: [ 1, 2, 3 ]'

        >>> d = {"name": "root"}
        >>> d["self"] = d
        >>> render(d, opts=ScribeOptions.inline())
        '#1 { name = "root", self = <ref:#1> }'
    """
    opts = opts if opts is not None else ScribeOptions()
    return _RenderPass(opts).run(obj, tag)


def pretty(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """Render in the indented multi-line layout, whatever `opts.layout` says."""
    return _render_as("pretty", obj, tag, opts)


def inline(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """Render on a single line, whatever `opts.layout` says."""
    return _render_as("inline", obj, tag, opts)


def classic(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """
    Render in the classic layout: braces for every composite, `[i] = ` before sequence items.

    Examples:
        >>> print(classic({"xs": [1, 2]}))
        {
            xs = {
                [0] = 1,
                [1] = 2
            }
        }
    """
    return _render_as("classic", obj, tag, opts)


def alt(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """
    Render in the alternate multi-line layout: `key: value`, no sequence indices.

    Examples:
        >>> print(alt({"xs": [1, 2]}))
        {
            xs: [
                1,
                2
            ]
        }
    """
    return _render_as("alt", obj, tag, opts)


def json(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """
    Render with indented JSON-style punctuation.

    Keys and text are quoted, None and bools use JSON literals, tags and ordinals
    are left out. Back-references and placeholders appear as quoted strings. The
    result is meant for reading and is not guaranteed to parse as JSON.
    """
    return _render_as("json", obj, tag, opts)


def inline_json(obj: Any, tag: str | None = None, *, opts: ScribeOptions | None = None) -> str:
    """
    Render on a single line with JSON-style punctuation.

    Examples:
        >>> inline_json({"a": [1, None], "b": True})
        '{"a": [1, null], "b": true}'
    """
    return _render_as("inline_json", obj, tag, opts)


def key_text(key: Any, opts: ScribeOptions | None = None) -> str:
    """
    Return the text a mapping key is displayed with.

    Identifier-like strings are shown bare, everything else as a nested value
    (quoted text, inline composites). Stateless, so it is safe to use as a sort key.

    Examples:
        >>> key_text("name")
        'name'
        >>> key_text("first name")
        '"first name"'
        >>> key_text((1, 2))
        '[ 1, 2 ]'
    """
    opts = opts if opts is not None else ScribeOptions()
    return _RenderPass(_key_opts(opts)).key_text(key)


def ordered_keys(keys: Iterable[Any], opts: ScribeOptions | None = None) -> list[Any]:
    """
    Order mapping keys deterministically.

    Numeric keys (reals, not bools) come first in ascending numeric order,
    then all other keys ordered by their `key_text()`. Ties keep their input order.

    Examples:
        >>> ordered_keys(["b", 10, "a", 2.5, True])
        [2.5, 10, True, 'a', 'b']
    """
    opts = opts if opts is not None else ScribeOptions()
    return _RenderPass(_key_opts(opts)).ordered(keys)


def _render_as(layout: str, obj: Any, tag: str | None, opts: ScribeOptions | None) -> str:
    opts = opts if opts is not None else ScribeOptions()
    return render(obj, tag, opts=opts.merge(layout=layout))


def _key_opts(opts: ScribeOptions) -> ScribeOptions:
    return opts.merge(layout="inline", quote_text=True, annotate_all=False)


# Render Pass ----------------------------------------------------------------------------------------------------------


class _RenderPass:
    """State of a single top-level render call."""

    def __init__(self, opts: ScribeOptions, shared: _Shared | None = None) -> None:
        self.opts = opts
        self.style = _STYLES[opts.layout]
        self.tracker = IdentityTracker()
        self.refs: dict[int, int] = {}
        self.shared = shared if shared is not None else _Shared()
        self._pad = " " * opts.indent

    def run(self, obj: Any, tag: str | None = None) -> str:
        self._count(obj)
        out: list[str] = []
        stack: list[str | _Task | _Leave] = [_Task(obj, 0, self.style, tag)]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(item)
            elif isinstance(item, _Task):
                self._visit(item, out, stack)
            else:
                self.tracker.end(item.obj)
        return "".join(out)

    def key_text(self, key: Any) -> str:
        """Display text of a key, cached by identity for composite keys."""
        if isinstance(key, str) and key.isidentifier():
            return key
        key_opts = _key_opts(self.opts)
        if not classify(key, self.opts).is_composite:
            return _RenderPass(key_opts, self.shared).run(key)

        texts = self.shared.key_texts
        text = texts.get(id(key))
        if text is None:
            # Placeholder while in progress, a key that reaches itself must not recurse forever
            texts[id(key)] = f"<{class_name(key)}>"
            self.shared.pinned.append(key)
            text = _RenderPass(key_opts, self.shared).run(key)
            texts[id(key)] = text
        return text

    def ordered(self, keys: Iterable[Any]) -> list[Any]:
        numeric, other = [], []
        for k in keys:
            (numeric if _is_numeric_key(k) else other).append(k)
        numeric.sort()
        other.sort(key=self.key_text)
        return numeric + other

    def _count(self, obj: Any) -> None:
        """Pre-pass: count how many times each composite is reached."""
        stack = [obj]
        while stack:
            node = stack.pop()
            kind = classify(node, self.opts)
            if not kind.is_composite:
                continue
            n = self.refs.get(id(node), 0) + 1
            self.refs[id(node)] = n
            if n > 1:
                continue
            for k, v in self._entries(node, kind):
                stack.append(v)
                if kind is ValueKind.MAPPING:
                    stack.append(k)

    def _visit(self, task: _Task, out: list[str], stack: list) -> None:
        obj, depth, style, tag = task
        kind = classify(obj, self.opts)
        if not kind.is_composite:
            out.append(self._leaf(obj, kind, depth, style))
            return

        visit = self.tracker.begin(obj)
        if not visit.is_fresh:
            ref = f"<ref:#{visit.ordinal}>"
            out.append(quote_text(ref) if style.json else ref)
            return
        stack.append(_Leave(obj))
        parts = self._composite(obj, kind, visit.ordinal, depth, style, tag or tag_of(obj))
        stack.extend(reversed(parts))

    def _composite(self, obj: Any, kind: ValueKind, ordinal: int, depth: int, style: _Style,
                   tag: str | None) -> list[str | _Task]:
        """Output of one composite as text pieces and child tasks, in order."""
        tag = None if style.json else tag
        annotate = not style.json and (self.opts.annotate_all or self.refs.get(id(obj), 0) > 1)
        if tag:
            head = f"{tag}#{ordinal}:" if annotate else f"{tag}:"
        else:
            head = f"#{ordinal} " if annotate else ""
        open_, close = style.seq_brackets if kind is ValueKind.SEQUENCE else ("{", "}")
        sep = " " if tag else ""

        entries = self._entries(obj, kind)
        if not entries:
            return [f"{head}{sep}{open_}{close}"]

        items = [self._item(k, v, kind, depth + 1, style) for k, v in entries]
        parts: list[str | _Task] = []
        if not style.multiline:
            inner = " " if style.pad_brackets else ""
            parts.append(f"{head}{sep}{open_}{inner}")
            for i, item in enumerate(items):
                if i:
                    parts.append(", ")
                parts.extend(item)
            parts.append(f"{inner}{close}")
            return parts

        pad = self._pad * (depth + 1)
        parts.append(f"{head}\n" if tag else f"{head}{open_}\n")
        for i, item in enumerate(items):
            parts.append(f",\n{pad}" if i else pad)
            parts.extend(item)
        if not tag:
            parts.append(f"\n{self._pad * depth}{close}")
        return parts

    def _item(self, k: Any, v: Any, kind: ValueKind, depth: int, style: _Style) -> list[str | _Task]:
        value = _Task(v, depth, style)
        if kind is ValueKind.SEQUENCE:
            if style.multiline and style.seq_index:
                return [style.seq_index.format(k), value]
            return [value]
        if style.json:
            key = quote_text(k) if isinstance(k, str) else quote_text(self.key_text(k))
            return [key + style.key_sep, value]
        if isinstance(k, str) and k.isidentifier():
            return [k + style.key_sep, value]
        # Key before value, ordinals follow pre-order
        return [_Task(k, depth, _STYLES["inline"]), style.key_sep, value]

    def _entries(self, obj: Any, kind: ValueKind) -> list[tuple[Any, Any]]:
        """Children as (key, value) pairs in display order; keys of sequences are indices."""
        cached = self.shared.entries.get(id(obj))
        if cached is None:
            cached = self._collect(obj, kind)
            self.shared.entries[id(obj)] = cached
            self.shared.pinned.append(obj)
        return cached

    def _collect(self, obj: Any, kind: ValueKind) -> list[tuple[Any, Any]]:
        base = self.opts.index_base
        if kind is ValueKind.SEQUENCE:
            if isinstance(obj, abc.Mapping):
                return sorted(obj.items(), key=lambda kv: kv[0])
            if isinstance(obj, abc.Set):
                return list(enumerate(self.ordered(obj), start=base))
            return list(enumerate(obj, start=base))

        if is_dataclass(obj):
            pairs = {f.name: getattr(obj, f.name) for f in fields(obj)}
        elif is_namedtuple(obj):
            pairs = dict(zip(obj._fields, obj))
        else:
            pairs = dict(obj.items())
        return [(k, pairs[k]) for k in self.ordered(pairs)]

    def _leaf(self, obj: Any, kind: ValueKind, depth: int, style: _Style) -> str:
        if kind is ValueKind.CUSTOM:
            text = custom_text(obj)
        elif kind is ValueKind.OPAQUE:
            text = opaque_token(obj)
        else:
            return self._scalar(obj, kind, depth > 0 or self.opts.quote_text, style)
        return quote_text(text) if style.json else text

    def _scalar(self, obj: Any, kind: ValueKind, quoted: bool, style: _Style) -> str:
        if kind is ValueKind.NIL:
            return "null" if style.json else "None"
        if kind is ValueKind.BOOLEAN:
            if style.json:
                return "true" if obj else "false"
            return "True" if obj else "False"
        if kind is ValueKind.NUMBER:
            # Shortest round-trip repr, never locale dependent
            return float.__repr__(obj) if isinstance(obj, float) else str(obj)
        if isinstance(obj, str):
            return quote_text(obj) if quoted or style.json else obj
        return quote_text(repr(obj)) if style.json else repr(obj)


# Helper Functions -----------------------------------------------------------------------------------------------------


def custom_text(obj: Any) -> str:
    """
    Return the display text a value provides for itself.

    Uses `__scribe__()` if present, else `str()`. A broken conversion is
    replaced by a placeholder, rendering never raises.
    """
    try:
        text = obj.__scribe__() if isinstance(obj, SupportsScribe) else str(obj)
        return text if isinstance(text, str) else str(text)
    except Exception as e:
        return f"<{class_name(obj)} object (str failed: {class_name(e)})>"


def opaque_token(obj: Any) -> str:
    """Placeholder naming the kind of a value that has no structural rendering."""
    if inspect.isroutine(obj) or isinstance(obj, types.MethodType):
        return "<function>"
    if isinstance(obj, type):
        return "<class>"
    if isinstance(obj, types.ModuleType):
        return "<module>"
    if inspect.isgenerator(obj) or inspect.iscoroutine(obj):
        return "<generator>"
    return f"<{class_name(obj)}>"


def _is_numeric_key(k: Any) -> bool:
    return isinstance(k, numbers.Real) and not isinstance(k, bool)
