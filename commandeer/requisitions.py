"""
Commandeer requisitions: the live command-bar engine.

Overview
- Requisition.update(typed, cursor) recomputes everything from the typed line:
  1. tokenize the line into Arguments;
  2. resolve the command from the head tokens (growing multi-word names);
  3. bind the remaining tokens to the command's parameters;
  4. collect one hint per assignment and, in cli mode, add a hint for
     leftover input and escalate INCOMPLETE hints away from the cursor;
  5. rank the hints.

Binding rules (after the command)
- no command: every token is leftover.
- no tokens: every parameter gets its default (an empty argument at the cursor).
- no parameters: every token is leftover.
- a single "text" parameter: it takes all tokens, merged.
- otherwise: "--name" tokens bind named parameters (boolean ones need no
  value), then the remaining parameters take the remaining tokens in order,
  and whatever is still left over is reported. Only the first "--name" of a
  parameter binds; repeats are left over.

Views
- status: most severe conversion status among the parameters.
- args: parameter values by name (None where nothing is set).
- str(requisition): the typed line, rebuilt from the bound arguments.
- to_canonical_string(): command name plus the values that differ from defaults.
- get_input_status_markup(): one Status per character of str(requisition).
- get_assignment_at(offset): the assignment the cursor is in.

Configuration
- cli (default True): enables the cursor-aware leftover hint and escalation.
- order: hint ranking, see commandeer.hints.Order.
"""
import collections
import logging

from rich.console import Group
from rich.text import Text

from .arguments import AT_CURSOR, Argument, escape, merge
from .assignments import Assignment
from .canon import command_parameter, default_canon
from .faults import UnexecutableCommandError
from .hints import Order, escalate, leftover, sort
from .tokenizer import tokenize
from .types import Status
from .utils import *

_logger = logging.getLogger(__name__)

Cursor = collections.namedtuple("Cursor", ("start", "end"))
Cursor.__doc__ = "Selection in the typed line (start == end for a caret)."


def _cursor(cursor, typed):
    match cursor:
        case None:
            return Cursor(len(typed), len(typed))
        case int():
            return Cursor(cursor, cursor)
        case (start, end):
            return Cursor(start, end)
        case _:
            raise TypeError("cursor must be an offset or a (start, end) pair, not %s" % type(cursor).__name__)


def _position(assignment):
    span = assignment.flag if assignment.flag is not None else assignment.arg
    if span is None or span.at_cursor:
        return (1, 0)
    return (0, span.start)


class Requisition:
    """
    Incrementally interpreted command line (see module docstring).

    Parameters
    - canon: command registry (default_canon when None).
    - env: opaque environment handed to commands on exec().
    - cli: enable cursor-aware hint decoration.
    - order: hint ranking order.
    """

    def __init__(self, canon=None, env=None, *, cli=True, order=Order.STATUS_PARAM_DISTANCE):
        self._canon = canon if canon is not None else default_canon
        self._env = env
        self._cli = cli
        self._order = order
        self._typed = ""
        self._cursor = Cursor(0, 0)
        self._assignments = []
        self._hints = ()
        self._unassigned = None
        self._leftovers = []
        self._listeners = []
        self._command_assignment = Assignment(command_parameter(self._canon), 0)
        self._command_assignment.listen(self._command_assignment_changed)

    canon = mirror("canon")
    cli = mirror("cli")
    order = mirror("order")
    typed = mirror("typed")
    unassigned = mirror("unassigned")
    hints = mirror("hints")
    command_assignment = mirror("command_assignment")

    @property
    def env(self):
        return self._env

    @property
    def cursor(self):
        return self._cursor

    @property
    def command(self):
        """
        the resolved Command, or None.
        """
        return coalesce(self._command_assignment.value)

    # --- update pass ---

    def update(self, typed, /, cursor=None):
        """
        Reinterpret the typed line; cursor defaults to the end of the input.
        """
        self._typed = typed or ""
        self._cursor = _cursor(cursor, self._typed)
        arguments = tokenize(self._typed)
        self._split(arguments)
        self._assign(arguments)
        self._update_hints()
        _logger.debug("updated %r: command=%r status=%s", self._typed, self.command, self.status.name)

    def _split(self, arguments):
        parse = self._command_assignment.param.type.parse
        used = 0
        argument = None
        while used < len(arguments):
            candidate = merge(arguments, 0, used + 1)
            conversion = parse(candidate.text)
            # nothing at all (no value, no prediction): keep the previous candidate
            if conversion.value is Unset and not conversion.predictions and argument is not None:
                break
            argument, used = candidate, used + 1
            if conversion.value is Unset or conversion.value.executable:
                break
        self._command_assignment.set_argument(argument)
        del arguments[:used]

    def _assign(self, arguments):
        self._unassigned = None
        self._leftovers = []

        if self.command is None:
            self._set_unassigned(arguments)
            return
        if not arguments:
            self.set_default_values()
            return
        if not self._assignments:
            self._set_unassigned(arguments)
            return
        if len(self._assignments) == 1:
            assignment = self._assignments[0][1]
            if assignment.param.type.name == "text":
                assignment.set_argument(merge(arguments))
                return

        positional = []
        repeated = []
        for _, assignment in self._assignments:
            flag = "--" + assignment.param.name
            boolean = assignment.param.type.name == "boolean"
            named = False
            while (index := next((index for index, argument in enumerate(arguments) if argument.text == flag), None)) is not None:
                token = arguments.pop(index)
                value = arguments.pop(index) if not boolean and index < len(arguments) else None
                # only the first occurrence binds, the others are leftovers
                if named:
                    repeated.extend(argument for argument in (token, value) if argument is not None)
                    continue
                named = True
                if boolean:
                    assignment.set_flag(token)
                else:
                    assignment.set_argument(value if value is not None else Argument(), token)
            if not named:
                positional.append(assignment)

        for assignment in positional:
            assignment.set_argument(arguments.pop(0) if arguments else Argument())

        self._set_unassigned(sorted(repeated + arguments, key=lambda argument: argument.start))

    def _set_unassigned(self, arguments):
        self._leftovers = list(arguments)
        self._unassigned = merge(arguments) if arguments else None
        if self._unassigned is not None:
            _logger.debug("unassigned input %r", self._unassigned.text)

    def _update_hints(self):
        hints = [assignment.get_hint() for assignment in self.get_assignments(True)]
        if self._cli:
            if self._unassigned is not None:
                hints.append(leftover(self._unassigned, self.command))
            hints = escalate(hints, self._cursor)
            self._hints = tuple(sort(hints, self._order, self._cursor.start))
        else:
            self._hints = tuple(sort(hints, self._order))

    def _command_assignment_changed(self, assignment, /):
        command = coalesce(assignment.value)
        params = command.params if command is not None else ()
        self._assignments = [(param.name, Assignment(param, index)) for index, param in enumerate(params, 1)]
        _logger.debug("command changed to %r", command)
        for callback in tuple(self._listeners):
            callback(command)

    # --- views ---

    @property
    def hint(self):
        """
        the highest ranked hint, or None.
        """
        return self._hints[0] if self._hints else None

    @property
    def status(self):
        return Status.combine(*(assignment.status for _, assignment in self._assignments))

    @property
    def args(self):
        return {name: coalesce(assignment.value) for name, assignment in self._assignments}

    @property
    def parameter_names(self):
        return [name for name, _ in self._assignments]

    @property
    def assignment_count(self):
        return len(self._assignments)

    def get_assignment(self, key, /):
        """
        assignment by parameter name or by declaration index (None when absent).
        """
        if isinstance(key, int):
            return self._assignments[key][1] if -len(self._assignments) <= key < len(self._assignments) else None
        return dict(self._assignments).get(key)

    def get_assignments(self, include_command=False):
        assignments = [assignment for _, assignment in self._assignments]
        if include_command:
            assignments.insert(0, self._command_assignment)
        return assignments

    def get_assignment_at(self, cursor, /, end_is_prev=False):
        """
        The assignment in focus at a cursor offset.

        Assignments are visited in the order they appear in the line (flag
        first, untyped ones last) and the first that captures the cursor wins;
        past every argument the last one visited is in focus.
        """
        assignments = sorted(self.get_assignments(True), key=_position)
        for assignment in assignments:
            if assignment.is_captured(cursor, end_is_prev):
                return assignment
        return assignments[-1]

    def set_default_values(self):
        """
        Reset every parameter to its default (empty argument at the cursor).
        """
        for _, assignment in self._assignments:
            assignment.set_argument(Argument())

    def _pieces(self):
        pieces = [self._command_assignment.arg]
        for _, assignment in self._assignments:
            pieces.extend((assignment.flag, assignment.arg))
        pieces.extend(self._leftovers)
        pieces = [piece for piece in pieces if piece is not None]
        typed = sorted((piece for piece in pieces if piece.start != AT_CURSOR), key=lambda piece: piece.start)
        return typed + [piece for piece in pieces if piece.start == AT_CURSOR]

    def __str__(self):
        return "".join(map(str, self._pieces()))

    def to_canonical_string(self):
        """
        Command name followed by every value that differs from its default.
        """
        command = self.command
        if command is None:
            return ""
        line = command.name
        for _, assignment in self._assignments:
            param = assignment.param
            value = assignment.value
            if value is param.default or value == param.default and type(value) is type(param.default):
                continue
            line += " " + escape(param.type.stringify(value))
        return line

    def get_input_status_markup(self):
        """
        One Status per character of str(self), the worst hint covering it.
        """
        markup = [Status.VALID] * len(str(self))
        for hint in self._hints:
            for index in range(max(hint.start, 0), min(hint.end, len(markup))):
                markup[index] = max(markup[index], hint.status)
        return markup

    def exec(self):
        """
        Execute the resolved command with the current arguments.

        Raises
        - UnexecutableCommandError: when no executable command is resolved.
        """
        command = self.command
        if command is None or not command.executable:
            raise UnexecutableCommandError(
                "nothing to execute for %r" % self._typed,
                hint="type the full name of an executable command",
            )
        return self._canon.exec(command, self._env, self.args, self.to_canonical_string())

    # --- events ---

    def listen(self, callback, /):
        """
        Call callback(command) whenever the resolved command changes.
        """
        if not callable(callback):
            raise TypeError("listen() argument must be callable")
        self._listeners.append(callback)
        return callback

    def unlisten(self, callback, /):
        try:
            self._listeners.remove(callback)
        except ValueError:
            raise LookupError("callback is not listening to this requisition") from None

    # --- representation ---

    def __rich__(self):
        styles = ("green", "yellow", "bold red")
        line = Text()
        for character, status in zip(str(self), self.get_input_status_markup()):
            line.append(character, styles[status])
        return Group(line, *self._hints)

    def __rich_repr__(self):
        yield self._typed
        yield "command", self.command
        yield "args", self.args
        yield "status", self.status

    def __repr__(self):
        return "Requisition(%r, command=%r, status=%s)" % (self._typed, self.command, self.status.name)


__all__ = (
    "Cursor",
    "Requisition",
)
