r"""
Commandeer arguments: the spans the tokenizer cuts out of the typed line.

Overview
- Argument
  • text: unescaped content of the token.
  • start/end: absolute offsets into the typed line (end exclusive). Quote
    characters are inside the span, surrounding whitespace is not.
  • prefix/suffix: the whitespace and quote characters consumed around it.
  • str(argument) reproduces the typed substring exactly: tokens remember
    their raw (still escaped) spelling, and only an argument whose text was
    replaced through retext() is re-escaped.

- AT_CURSOR
  • Offset sentinel (-1) for arguments that were never typed but are
    conceptually "where the user is now" (missing parameters, defaults).

- merge(arguments, start=0, end=None)
  • Fold a run of arguments into one. Texts are joined with the whitespace
    and quotes that separated them (first.suffix + second.prefix); the span
    covers both. Used for multi-word command names, free-text parameters and
    leftover input.

- escape(text, quote=None)
  • Inverse of the tokenizer's escape handling for one quoting context.

Quick example
    >>> argument = Argument("a b", 4, 9, " '", "'")
    >>> str(argument)
    " 'a b'"
    >>> str(merge([Argument("git", 0, 3, "", " "), Argument("commit", 4, 10)]))
    'git commit'
"""
import functools

from .faults import IllegalArgumentError
from .utils import *

AT_CURSOR = -1
"""
Offset of arguments that have no position in the typed line.
"""

_QUOTES = ("'", '"')

_ESCAPES = {
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def escape(text, /, quote=None):
    r"""
    Escape text so the tokenizer reads it back unchanged.

    Outside quotes spaces and both quote characters are escaped; inside a
    quoted span only the closing quote is.

    Examples
    - escape("a b")        -> 'a\\ b'
    - escape("it's", "'")  -> "it\\'s"
    """
    specials = dict(_ESCAPES)
    if quote in _QUOTES:
        specials[quote] = "\\" + quote
    else:
        specials.update({" ": "\\ ", "'": "\\'", '"': '\\"'})
    return "".join(specials.get(character, character) for character in text)


def _quote_of(prefix):
    return prefix[-1] if prefix[-1:] in _QUOTES else None


class Argument:
    """
    Immutable span of typed input.

    Arguments created by hand (no raw spelling given) spell themselves as the
    escaped text for their quoting context.
    """
    __slots__ = ("_text", "_start", "_end", "_prefix", "_suffix", "_raw")

    def __init__(self, text="", start=AT_CURSOR, end=AT_CURSOR, prefix="", suffix="", *, raw=Unset):
        if text is None:
            raise IllegalArgumentError(
                "argument text cannot be None",
                hint="use an empty string for arguments that were not typed yet",
            )
        if not isinstance(text, str):
            raise IllegalArgumentError("argument text must be a string, not %s" % type(text).__name__)
        self._text = text
        self._start = start
        self._end = end
        self._prefix = prefix
        self._suffix = suffix
        self._raw = coalesce(raw, escape(text, _quote_of(prefix)))

    text = mirror("text")
    start = mirror("start")
    end = mirror("end")
    prefix = mirror("prefix")
    suffix = mirror("suffix")
    raw = mirror("raw")

    @property
    def at_cursor(self):
        return self._start == AT_CURSOR

    def merge(self, following, /):
        """
        join this argument with the one that follows it in the typed line.
        """
        separator = self._suffix + following._prefix
        return Argument(
            self._text + separator + following._text,
            self._start,
            following._end,
            self._prefix,
            following._suffix,
            raw=self._raw + separator + following._raw,
        )

    def retext(self, text, /):
        """
        return a copy holding new text at the same place, escaped for its quoting context.
        """
        return Argument(text, self._start, self._end, self._prefix, self._suffix)

    def __str__(self):
        return self._prefix + self._raw + self._suffix

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return (
            self._text == other._text
            and self._start == other._start
            and self._end == other._end
            and self._prefix == other._prefix
            and self._suffix == other._suffix
            and self._raw == other._raw
        )

    def __hash__(self):
        return hash((self._text, self._start, self._end, self._prefix, self._suffix, self._raw))

    def __rich_repr__(self):
        yield self._text
        yield "start", self._start
        yield "end", self._end
        yield "prefix", self._prefix, ""
        yield "suffix", self._suffix, ""

    def __repr__(self):
        fields = [repr(self._text), "start=%d" % self._start, "end=%d" % self._end]
        if self._prefix:
            fields.append("prefix=%r" % self._prefix)
        if self._suffix:
            fields.append("suffix=%r" % self._suffix)
        return "Argument(%s)" % ", ".join(fields)


def merge(arguments, /, start=0, end=None):
    """
    Merge arguments[start:end] into a single argument (None for an empty run).
    """
    run = list(arguments)[start:end]
    if not run:
        return None
    return functools.reduce(Argument.merge, run)


__all__ = (
    "AT_CURSOR",
    "Argument",
    "merge",
    "escape",
)
