"""
Commandeer faults and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for programmer-facing faults.
  Codes are grouped by domain so logs and searches stay predictable.
- CommandException: base type that carries a message plus options (title, code,
  hint, ...) and knows how to render itself through rich.

What is (and is not) a fault
- Malformed user input is never a fault. Type plugins report it as an ERROR
  conversion and the requisition surfaces it as a hint.
- Faults signal caller bugs: a None argument text, an unsupported hint order,
  an unknown type name, a clashing command registration, executing a
  requisition that holds no executable command.

Integration
- Hosts may print a fault directly with a rich console (console.print(fault)).
- Hosts can remap numeric codes through a __codes__ mapping and restyle the
  rendering through a __styles__ mapping, both looked up on __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - arguments (2110x): ILLEGAL_ARGUMENT
    - hints (2120x): UNSUPPORTED_SORT_ORDER
    - types (2130x): UNKNOWN_TYPE
    - canon (2140x): DUPLICATE_COMMAND, UNKNOWN_COMMAND, UNEXECUTABLE_COMMAND
    """
    # --- argument errors ---
    ILLEGAL_ARGUMENT            = 21101

    # --- hint errors ---
    UNSUPPORTED_SORT_ORDER      = 21201

    # --- type errors ---
    UNKNOWN_TYPE                = 21301

    # --- canon errors ---
    DUPLICATE_COMMAND           = 21401
    UNKNOWN_COMMAND             = 21402
    UNEXECUTABLE_COMMAND        = 21403

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault carrying a message and free-form rendering options.

    recognized options
    - code: FaultCode shown in the header.
    - title: short, lowercased title.
    - hint: one actionable sentence.
    - colorful: bool (default True) toggling styles.
    - fancy: bool (default False) wrapping the fault in a panel.
    """
    code = Unset
    title = "fault"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).code,
            "title": type(self).title,
            "colorful": True,
            "fancy": False,
        } | options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.options["colorful"]:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        code = self.options["code"]
        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "commandeer"), "prog-name"),
            " | ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        body = [text(self, "error-message")]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" -> ", "hint-arrow"), text(hint, "hint")))

        if self.options["fancy"]:
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class IllegalArgumentError(CommandException, TypeError):
    code = FaultCode.ILLEGAL_ARGUMENT
    title = "illegal argument text"


class UnsupportedSortOrderError(CommandException, ValueError):
    code = FaultCode.UNSUPPORTED_SORT_ORDER
    title = "unsupported sort order"


class UnknownTypeError(CommandException, LookupError):
    code = FaultCode.UNKNOWN_TYPE
    title = "unknown type"


class DuplicateCommandError(CommandException, ValueError):
    code = FaultCode.DUPLICATE_COMMAND
    title = "duplicate command"


class UnknownCommandError(CommandException, LookupError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"


class UnexecutableCommandError(CommandException, RuntimeError):
    code = FaultCode.UNEXECUTABLE_COMMAND
    title = "unexecutable command"


def getdoc(code, /):
    """
    optional documentation lookup for a fault code.

    the host may expose a __docs__ mapping in __main__ keyed by FaultCode;
    None is returned when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "IllegalArgumentError",
    "UnsupportedSortOrderError",
    "UnknownTypeError",
    "DuplicateCommandError",
    "UnknownCommandError",
    "UnexecutableCommandError",
    "getdoc",
)
