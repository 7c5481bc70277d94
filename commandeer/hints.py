"""
Commandeer hints: what the command bar tells the user while they type.

Overview
- Hint
  • status, message, param_index (-1 when not tied to a parameter), start/end
    span (AT_CURSOR for "here") and predictions.
  • Immutable; use hint.replace(status=...) (or copy.replace) to derive one.

- sort(hints, order=Order.STATUS_PARAM_DISTANCE, cursor=None)
  • Most severe first, then declaration order of the parameter, then
    closeness to the cursor (only when a cursor offset is given).
  • Stable: equal hints keep their input order.

- escalate(hints, cursor)
  • INCOMPLETE hints the user has moved away from become ERROR. A hint is
    left alone when the cursor selection touches its span or when it starts at
    offset 0 (the command itself is still being typed).

- leftover(unassigned, command)
  • ERROR hint for input no parameter could take.
"""
import enum
import functools

from rich.text import Text

from .arguments import AT_CURSOR
from .faults import UnsupportedSortOrderError
from .types import Status


class Order(enum.IntEnum):
    """
    hint orderings; only STATUS_PARAM_DISTANCE is implemented.
    """
    STATUS_PARAM_DISTANCE = 1
    STATUS_DISTANCE_PARAM = 2
    PARAM_STATUS_DISTANCE = 3
    PARAM_DISTANCE_STATUS = 4
    DISTANCE_STATUS_PARAM = 5
    DISTANCE_PARAM_STATUS = 6


class Hint:
    __slots__ = ("_status", "_message", "_param_index", "_start", "_end", "_predictions")

    def __init__(self, status=Status.VALID, message="", param_index=-1, start=AT_CURSOR, end=AT_CURSOR, predictions=()):
        self._status = Status(status)
        self._message = message
        self._param_index = param_index
        self._start = start
        self._end = end
        self._predictions = tuple(predictions)

    @classmethod
    def for_argument(cls, status, message, param_index, argument, /, predictions=()):
        """
        hint spanning the given argument (AT_CURSOR when there is none).
        """
        if argument is None:
            return cls(status, message, param_index, predictions=predictions)
        return cls(status, message, param_index, argument.start, argument.end, predictions)

    @property
    def status(self):
        return self._status

    @property
    def message(self):
        return self._message

    @property
    def param_index(self):
        return self._param_index

    @property
    def start(self):
        return self._start

    @property
    def end(self):
        return self._end

    @property
    def predictions(self):
        return self._predictions

    def distance(self, cursor, /):
        """
        characters between the cursor offset and this hint's span (0 inside it or at the cursor).
        """
        if self._start == AT_CURSOR:
            return 0
        if cursor < self._start:
            return self._start - cursor
        if cursor > self._end:
            return cursor - self._end
        return 0

    def touches(self, selection, /):
        start, end = selection
        return start <= self._end and end >= self._start

    def replace(self, **changes):
        fields = {
            "status": self._status,
            "message": self._message,
            "param_index": self._param_index,
            "start": self._start,
            "end": self._end,
            "predictions": self._predictions,
        }
        unknown = changes.keys() - fields.keys()
        if unknown:
            raise TypeError("replace() got unexpected field(s): %s" % ", ".join(sorted(unknown)))
        return Hint(**(fields | changes))

    __replace__ = replace

    def __eq__(self, other):
        if not isinstance(other, Hint):
            return NotImplemented
        return (
            self._status == other._status
            and self._message == other._message
            and self._param_index == other._param_index
            and self._start == other._start
            and self._end == other._end
            and self._predictions == other._predictions
        )

    __hash__ = None

    def __rich__(self):
        styles = ("green", "yellow", "bold red")
        return Text(self._message or self._status.name.lower(), styles[self._status])

    def __rich_repr__(self):
        yield self._status
        yield "message", self._message, ""
        yield "param_index", self._param_index, -1
        yield "start", self._start
        yield "end", self._end
        yield "predictions", self._predictions, ()

    def __repr__(self):
        return "Hint(%s, %r, param_index=%d, start=%d, end=%d)" % (
            self._status.name, self._message, self._param_index, self._start, self._end
        )


def _compare(cursor):
    def compare(first, second):
        if first.status != second.status:
            return second.status - first.status
        if first.param_index >= 0 and second.param_index >= 0 and first.param_index != second.param_index:
            return first.param_index - second.param_index
        if cursor is not None:
            return first.distance(cursor) - second.distance(cursor)
        return 0

    return compare


def sort(hints, /, order=Order.STATUS_PARAM_DISTANCE, cursor=None):
    """
    Return the hints ranked for display (see module docstring).

    Raises
    - UnsupportedSortOrderError: for any order but STATUS_PARAM_DISTANCE.
    """
    if order != Order.STATUS_PARAM_DISTANCE:
        raise UnsupportedSortOrderError(
            "hint order %s is not supported" % getattr(order, "name", repr(order)),
            hint="use Order.STATUS_PARAM_DISTANCE",
        )
    return sorted(hints, key=functools.cmp_to_key(_compare(cursor)))


def escalate(hints, /, cursor):
    """
    Return new hints where INCOMPLETE hints away from the cursor become ERROR.

    The cursor is a (start, end) selection.
    """
    return [
        hint.replace(status=Status.ERROR)
        if hint.status == Status.INCOMPLETE and hint.start != 0 and not hint.touches(cursor)
        else hint
        for hint in hints
    ]


def leftover(unassigned, /, command=None):
    """
    ERROR hint covering input that no parameter took.
    """
    if command is None or unassigned.start == 0:
        message = "input '%s' makes no sense" % unassigned.text
    else:
        message = "'%s' does not take any parameters" % command.name
    return Hint.for_argument(Status.ERROR, message, -1, unassigned)


__all__ = (
    "Order",
    "Hint",
    "sort",
    "escalate",
    "leftover",
)
