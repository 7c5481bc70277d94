"""
Commandeer assignments: one parameter's binding inside a requisition.

Overview
- Assignment
  • Couples a Parameter with the Argument it was bound to, the Conversion of
    that argument's text and the resulting value.
  • Value and argument are kept consistent by whichever setter fired last:
    set_argument() parses text into a value, set_value() stringifies a value
    back into the argument's text.
  • Listeners are called synchronously with the assignment whenever its value
    changes.

- AssignmentState
  • UNSET: no value and no default (a required parameter nobody filled in).
  • DEFAULT: holding the parameter's default.
  • EXPLICIT: holding a value that was typed or set.

Named (flag) bindings
- "--name value" records the "--name" token as the assignment's flag and binds
  the following token as its argument.
- A boolean "--name" has only a flag: the value is True and there is no argument.
"""
import enum
import logging

from rich.text import Text

from .arguments import AT_CURSOR, Argument
from .faults import IllegalArgumentError
from .hints import Hint
from .types import Conversion, Status
from .utils import *

_logger = logging.getLogger(__name__)


class AssignmentState(enum.Enum):
    UNSET = "unset"
    DEFAULT = "default"
    EXPLICIT = "explicit"


def _same(value, other):
    return value is other or (type(value) is type(other) and value == other)


class Assignment:
    """
    Binding of one parameter (see module docstring).

    Parameters
    - param: the Parameter being bound.
    - param_index: position used to rank hints (0 is the command slot).
    """

    def __init__(self, param, param_index, /):
        self._param = param
        self._param_index = param_index
        self._arg = None
        self._flag = None
        self._listeners = []
        self._reset()

    param = mirror("param")
    param_index = mirror("param_index")
    value = mirror("value")
    arg = mirror("arg")
    flag = mirror("flag")
    conversion = mirror("conversion")
    state = mirror("state")

    @property
    def message(self):
        return self._conversion.message

    @property
    def predictions(self):
        return self._conversion.predictions

    @property
    def status(self):
        return self._conversion.status

    def _reset(self):
        self._value = self._param.default
        self._conversion = self._param.get_default()
        self._state = AssignmentState.UNSET if self._param.default is Unset else AssignmentState.DEFAULT

    def set_value(self, value, /):
        """
        Store a value, keeping the argument's text in sync with it.

        Unset reverts to the parameter's default and drops the argument.
        Listeners are called only when the value actually changed.
        """
        if _same(value, self._value):
            return
        if value is Unset:
            self._arg = None
            self._flag = None
            self._reset()
        else:
            self._value = value
            self._conversion = Conversion(value)
            self._state = AssignmentState.EXPLICIT
            text = self._param.type.stringify(value)
            # a bare flag only spells True
            if self._arg is None and self._flag is not None and value is not True:
                self._flag = None
            if self._arg is not None and not self._arg.at_cursor:
                self._arg = self._arg.retext(text)
            elif self._arg is not None or self._flag is None:
                self._arg = Argument(text, prefix=" ")
        self._dispatch()

    def set_argument(self, arg, /, flag=None):
        """
        Bind an argument and derive the value from its text.

        Empty text stands for "not typed": parameters with a default take it,
        the others are converted as they are (usually INCOMPLETE, no value).
        """
        if arg is self._arg and flag is self._flag:
            return
        self._arg = arg
        self._flag = flag
        if not arg.text and self._param.default is not Unset:
            conversion = self._param.get_default()
            self._state = AssignmentState.DEFAULT
        else:
            conversion = self._param.type.parse(arg.text)
            self._state = AssignmentState.UNSET if conversion.value is Unset else AssignmentState.EXPLICIT
        self._conversion = conversion
        if _same(conversion.value, self._value):
            return
        self._value = conversion.value
        self._dispatch()

    def set_flag(self, flag, /):
        """
        Bind a value-less boolean flag token: the value becomes True.
        """
        self._arg = None
        self._flag = flag
        self._conversion = Conversion(True)
        self._state = AssignmentState.EXPLICIT
        if _same(True, self._value):
            return
        self._value = True
        self._dispatch()

    def set_text(self, text, /):
        """
        Replace the text of the current argument (creating one if needed) and reparse it.
        """
        if text is None:
            raise IllegalArgumentError("assignment text cannot be None", hint="use an empty string to clear it")
        arg = self._arg if self._arg is not None else Argument()
        self.set_argument(arg.retext(text), self._flag)

    def increment(self):
        replacement = self._param.type.increment(self._value)
        if replacement is not None:
            self.set_value(replacement)

    def decrement(self):
        replacement = self._param.type.decrement(self._value)
        if replacement is not None:
            self.set_value(replacement)

    def complete(self):
        """
        Take the first prediction, if any.
        """
        if self._conversion.predictions:
            self.set_value(self._conversion.predictions[0])

    def is_captured(self, cursor, /, end_is_prev=False):
        """
        Whether the cursor offset still belongs to this assignment.

        An argument at AT_CURSOR always captures. Otherwise the cursor must
        lie strictly before the end of the span; at the very end it captures
        only when end_is_prev is set, when the conversion is not VALID
        or when predictions remain (the user may still be completing the word).
        """
        span = self._arg if self._arg is not None else self._flag
        if span is None:
            return False
        if span.start == AT_CURSOR:
            return True
        if cursor < span.end:
            return True
        if cursor == span.end:
            return end_is_prev or self._conversion.status != Status.VALID or bool(self._conversion.predictions)
        return False

    def get_hint(self):
        """
        Build the hint describing this assignment's current state.
        """
        param = self._param
        span = self._arg if self._arg is not None else self._flag
        if param.custom_hint is not None and self._value is not Unset and self._value is not None and self._arg is not None:
            hint = param.custom_hint(self._value, self._arg)
            if hint is not None and not hint.predictions and self._conversion.predictions:
                return hint.replace(predictions=self._conversion.predictions)
            if hint is not None:
                return hint

        label = param.description.strip().removesuffix(".") if param.description else ""
        parts = ["%s:" % (label or param.name)]
        status = self._conversion.status
        typed = self._arg is not None and bool(self._arg.text)
        # the command slot (index 0) reports its own conversion status
        if param.default is Unset and self._value is Unset and not typed and self._param_index != 0:
            parts.append("(Required)")
            status = Status.ERROR
        if self._conversion.message:
            parts.append(self._conversion.message)
        return Hint.for_argument(status, " ".join(parts), self._param_index, span, self._conversion.predictions)

    def listen(self, callback, /):
        if not callable(callback):
            raise TypeError("listen() argument must be callable")
        self._listeners.append(callback)
        return callback

    def unlisten(self, callback, /):
        try:
            self._listeners.remove(callback)
        except ValueError:
            raise LookupError("callback is not listening to this assignment") from None

    def _dispatch(self):
        _logger.debug("assignment %r changed to %r", self._param.name, self._value)
        for callback in tuple(self._listeners):
            callback(self)

    def __str__(self):
        if self._arg is None:
            return "" if self._value is Unset else self._param.type.stringify(self._value)
        return self._arg.text

    def __rich__(self):
        styles = ("green", "yellow", "bold red")
        return Text.assemble(
            (self._param.name, "bold"),
            "=",
            (repr(self._value), styles[self.status]),
        )

    def __rich_repr__(self):
        yield self._param.name
        yield "value", self._value
        yield "state", self._state
        yield "arg", self._arg, None
        yield "flag", self._flag, None

    def __repr__(self):
        return "Assignment(%r, value=%r, state=%s)" % (self._param.name, self._value, self._state.name)


__all__ = (
    "AssignmentState",
    "Assignment",
)
