"""
Commandeer types: statuses, conversions and the type plugins.

Overview
- Status
  • Three-level verdict ordered by severity: VALID < INCOMPLETE < ERROR.
  • INCOMPLETE means "well-formed so far, more typing could complete it".

- Conversion
  • Immutable verdict of a type plugin on some text: status, value, message and
    predictions (ordered candidate values, not strings).
  • Malformed user text never raises; it converts to an ERROR conversion.

- Type (plugin protocol)
  • name: registry key; "text" and "boolean" are special-cased by the binder.
  • parse(text) -> Conversion
  • stringify(value) -> str
  • get_default() -> Conversion (what an assignment holds before any input)
  • increment(value) / decrement(value) -> adjacent value or None

- Built-ins
  • TextType ("text"): unconstrained free text, may absorb whitespace.
  • StringType ("string"): plain text bound like any other parameter.
  • BooleanType ("boolean"): true/false (also 1/0, yes/no, on/off).
  • NumberType ("number"): integers with optional min/max bounds and a step.
  • SelectionType ("selection"): one of a fixed (or lazily computed) set of names.

- Registry
  • register_type(type), deregister_type(name), get_type(name_or_type).
  • text, string, boolean and number are registered at import time.

Empty text
- Every built-in type converts "" to an INCOMPLETE conversion without a value:
  nothing has been typed yet. Parameters with a default never reach parse("")
  because the assignment substitutes the default first.
"""
from enum import IntEnum

from rich.text import Text

from .faults import UnknownTypeError
from .utils import *


class Status(IntEnum):
    """
    severity of a conversion or hint (ascending).
    """
    VALID = 0
    INCOMPLETE = 1
    ERROR = 2

    @classmethod
    def combine(cls, *statuses):
        """
        return the most severe of the given statuses (VALID when none are given).
        """
        return max(statuses, default=cls.VALID)

    def __rich__(self):
        styles = ("green", "yellow", "bold red")
        return Text(self.name.lower(), styles[self])


class Conversion:
    """
    Result of converting text into a typed value.

    Fields (read-only)
    - value: the converted value, or Unset when there is none.
    - status: Status of the conversion.
    - message: human-readable explanation ("" when there is nothing to say).
    - predictions: ordered candidate values the text could complete to.
    """
    __slots__ = ("_value", "_status", "_message", "_predictions")

    def __init__(self, value=Unset, status=Status.VALID, message="", predictions=()):
        self._value = value
        self._status = Status(status)
        self._message = message
        self._predictions = tuple(predictions)

    value = mirror("value")
    status = mirror("status")
    message = mirror("message")
    predictions = mirror("predictions")

    def __eq__(self, other):
        if not isinstance(other, Conversion):
            return NotImplemented
        return (
            self._status == other._status
            and self._message == other._message
            and self._predictions == other._predictions
            and (self._value is other._value or self._value == other._value)
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "value", self._value
        yield "status", self._status
        yield "message", self._message, ""
        yield "predictions", self._predictions, ()

    def __repr__(self):
        return "conversion(%s)" % ", ".join("%s=%r" % (name, object) for name, object, *_ in self.__rich_repr__())


class Type:
    """
    Base class for type plugins.

    Subclasses set `name` and override parse(); the remaining hooks have
    sensible defaults (str() stringification, no default value, no adjacent
    values).
    """
    name = Unset

    def parse(self, text, /):
        raise NotImplementedError("%s must implement parse()" % type(self).__name__)

    def stringify(self, value, /):
        if value is None or value is Unset:
            return ""
        return str(value)

    def get_default(self):
        return Conversion(Unset, Status.INCOMPLETE)

    def increment(self, value, /):
        return None

    def decrement(self, value, /):
        return None

    def __repr__(self):
        return "%s(name=%r)" % (type(self).__name__, self.name)


class TextType(Type):
    """
    Unconstrained free text. A command whose only parameter is of this type
    receives all remaining input, spaces and quoted sections included.
    """
    name = "text"

    def parse(self, text, /):
        if not text:
            return Conversion(Unset, Status.INCOMPLETE)
        return Conversion(text)


class StringType(TextType):
    """
    Single-word text. Unlike "text" it never absorbs the rest of the input.
    """
    name = "string"


class BooleanType(Type):
    """
    Truth values. Named boolean parameters are value-less flags (--name).
    """
    name = "boolean"

    _truthy = ("true", "1", "yes", "on")
    _falsy = ("false", "0", "no", "off")

    def parse(self, text, /):
        if not text:
            return Conversion(Unset, Status.INCOMPLETE)
        lowered = text.casefold()
        if lowered in self._truthy:
            return Conversion(True)
        if lowered in self._falsy:
            return Conversion(False)
        predictions = [value for value, name in ((True, "true"), (False, "false")) if name.startswith(lowered)]
        if predictions:
            return Conversion(Unset, Status.INCOMPLETE, predictions=predictions)
        return Conversion(Unset, Status.ERROR, "expected true or false", (True, False))

    def stringify(self, value, /):
        if value is None or value is Unset:
            return ""
        return "true" if value else "false"

    def get_default(self):
        return Conversion(False)

    def increment(self, value, /):
        return not value

    def decrement(self, value, /):
        return not value


class NumberType(Type):
    """
    Whole numbers with optional inclusive bounds.

    Options
    - min / max: inclusive bounds (None for unbounded).
    - step: distance used by increment()/decrement() (default 1).
    """
    name = "number"

    def __init__(self, *, min=None, max=None, step=1):
        if min is not None and max is not None and min > max:
            raise ValueError("number 'min' cannot be greater than 'max'")
        if step <= 0:
            raise ValueError("number 'step' must be a positive integer")
        self.min = min
        self.max = max
        self.step = step

    def parse(self, text, /):
        if not text or text in ("-", "+"):
            return Conversion(Unset, Status.INCOMPLETE)
        try:
            value = int(text)
        except ValueError:
            return Conversion(Unset, Status.ERROR, "can't convert %r to a number" % text)
        if self.min is not None and value < self.min:
            return Conversion(Unset, Status.ERROR, "%d is smaller than the minimum of %d" % (value, self.min))
        if self.max is not None and value > self.max:
            return Conversion(Unset, Status.ERROR, "%d is greater than the maximum of %d" % (value, self.max))
        return Conversion(value)

    def increment(self, value, /):
        if not isinstance(value, int):
            return self.min if self.min is not None else 0
        replacement = value + self.step
        if self.max is not None and replacement > self.max:
            return None
        return replacement

    def decrement(self, value, /):
        if not isinstance(value, int):
            return self.max if self.max is not None else 0
        replacement = value - self.step
        if self.min is not None and replacement < self.min:
            return None
        return replacement

    def __repr__(self):
        return "NumberType(min=%r, max=%r, step=%r)" % (self.min, self.max, self.step)


class SelectionType(Type):
    """
    One name out of a set of choices.

    The choices are given as an iterable of strings or as a zero-argument
    callable returning one, evaluated on every parse so that the set can
    follow the host's state.

    Conversions
    - exact match: VALID; other choices starting with the same text are kept
      as predictions so the caller knows the answer is still ambiguous.
    - prefix of one or more choices: INCOMPLETE with those choices predicted.
    - anything else: ERROR.
    """
    name = "selection"

    def __init__(self, choices, /):
        if not callable(choices):
            choices = tuple(choices)
            if any(not isinstance(choice, str) for choice in choices):
                raise TypeError("selection choices must be strings")
        self._choices = choices

    @property
    def choices(self):
        return tuple(self._choices() if callable(self._choices) else self._choices)

    def parse(self, text, /):
        choices = self.choices
        if not text:
            return Conversion(Unset, Status.INCOMPLETE, predictions=choices)
        predictions = [choice for choice in choices if choice.startswith(text) and choice != text]
        if text in choices:
            return Conversion(text, predictions=predictions)
        if predictions:
            return Conversion(Unset, Status.INCOMPLETE, predictions=predictions)
        return Conversion(Unset, Status.ERROR, "can't use %r" % text)

    def increment(self, value, /):
        return self._adjacent(value, 1)

    def decrement(self, value, /):
        return self._adjacent(value, -1)

    def _adjacent(self, value, offset):
        choices = self.choices
        if not choices:
            return None
        try:
            index = choices.index(value) + offset
        except ValueError:
            return choices[0 if offset > 0 else -1]
        return choices[index % len(choices)]


_registry = {}


def register_type(type, /):
    """
    Make a type plugin available by name (replacing a previous registration).
    """
    if not isinstance(type, Type):
        raise TypeError("register_type() argument must be a Type instance")
    if not isinstance(type.name, str):
        raise TypeError("register_type() argument must have a string name")
    _registry[type.name] = type
    return type


def deregister_type(name, /):
    """
    Remove a type plugin from the registry (no-op when absent).
    """
    _registry.pop(name, None)


def get_type(type, /):
    """
    Resolve a type name (or pass a Type instance through).

    Raises
    - UnknownTypeError: when no plugin is registered under the given name.
    """
    if isinstance(type, Type):
        return type
    try:
        return _registry[type]
    except (KeyError, TypeError):
        raise UnknownTypeError(
            "no type registered as %r" % (type,),
            hint="register it with register_type() or pass a Type instance",
        ) from None


register_type(TextType())
register_type(StringType())
register_type(BooleanType())
register_type(NumberType())


__all__ = (
    "Status",
    "Conversion",
    "Type",
    "TextType",
    "StringType",
    "BooleanType",
    "NumberType",
    "SelectionType",
    "register_type",
    "deregister_type",
    "get_type",
)
