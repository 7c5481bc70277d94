r"""
Commandeer tokenizer: typed line -> list of Arguments.

Rules
- Whitespace (str.isspace) separates tokens outside quotes. Whitespace before a
  token is its prefix; whitespace after the last token is its suffix.
- A single or double quote that starts a token opens a quoted span that runs
  to the matching quote (or to the end of input when unterminated). The quote
  characters belong to the prefix/suffix, never to the text. A quote inside a
  bare token is an ordinary character.
- Escapes are decoded while scanning, so offsets always refer to the typed line:
  \\ \b \f \n \r \t \v become the control characters, "\ ", \' and \" become
  the literal space and quotes. Unknown escapes and a trailing lone backslash
  are kept as typed.
- The result is never empty: "" (or None) yields one empty argument at 0.

Guarantee
- "".join(map(str, tokenize(typed))) == typed for every input.
"""
import enum
import logging

from .arguments import Argument

_logger = logging.getLogger(__name__)

_DECODED = {
    "\\": "\\",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    " ": " ",
    "'": "'",
    '"': '"',
}


class _State(enum.Enum):
    OUTSIDE = enum.auto()
    IN_TOKEN = enum.auto()
    IN_SINGLE_QUOTE = enum.auto()
    IN_DOUBLE_QUOTE = enum.auto()


_OPENERS = {"'": _State.IN_SINGLE_QUOTE, '"': _State.IN_DOUBLE_QUOTE}
_CLOSERS = {_State.IN_SINGLE_QUOTE: "'", _State.IN_DOUBLE_QUOTE: '"'}


def tokenize(typed, /):
    """
    Split typed input into Arguments.

    Examples
    - tokenize("")         -> [Argument('', start=0, end=0)]
    - tokenize("a 'b c'")  -> [Argument('a', start=0, end=1), Argument('b c', start=2, end=7, prefix=" '", suffix="'")]
    - tokenize("a ")       -> [Argument('a', start=0, end=1, suffix=' ')]
    """
    typed = typed or ""
    if not typed:
        return [Argument("", 0, 0, "", "")]

    arguments = []
    state = _State.OUTSIDE
    prefix = ""
    text = []
    start = raw = 0
    index = 0

    def emit(end, suffix=""):
        arguments.append(Argument("".join(text), start, end, prefix, suffix, raw=typed[raw:index]))

    while index < len(typed):
        character = typed[index]
        match state:
            case _State.OUTSIDE:
                if character.isspace():
                    prefix += character
                    index += 1
                    continue
                start = index
                text = []
                if character in _OPENERS:
                    state = _OPENERS[character]
                    prefix += character
                    index += 1
                else:
                    state = _State.IN_TOKEN
                raw = index
            case _State.IN_TOKEN if character.isspace():
                emit(index)
                prefix = ""
                state = _State.OUTSIDE
            case _State.IN_SINGLE_QUOTE | _State.IN_DOUBLE_QUOTE if character == _CLOSERS[state]:
                emit(index + 1, character)
                prefix = ""
                state = _State.OUTSIDE
                index += 1
            case _ if character == "\\":
                following = typed[index + 1:index + 2]
                if following and following in _DECODED:
                    text.append(_DECODED[following])
                    index += 2
                else:
                    text.append(character)
                    index += 1
            case _:
                text.append(character)
                index += 1

    if state is not _State.OUTSIDE:
        # unterminated quotes run to the end of input without a closing suffix
        emit(len(typed))
    elif prefix and arguments:
        last = arguments.pop()
        arguments.append(Argument(last.text, last.start, last.end, last.prefix, last.suffix + prefix, raw=last.raw))
    elif prefix:
        arguments.append(Argument("", len(typed), len(typed), prefix, ""))

    _logger.debug("tokenized %r into %d argument(s)", typed, len(arguments))
    return arguments


__all__ = (
    "tokenize",
)
