"""
Commandeer canon: the command registry.

Overview
- Parameter
  • name, type (a Type or a registered type name), description, default
    (Unset for required parameters) and an optional custom_hint(value, arg)
    hook that may replace the assignment's generated hint.
  • Boolean parameters default to False unless told otherwise.

- Command
  • A (possibly multi-word) name such as "git commit", its parameters in
    declaration order, a description and the exec(env, args) callable.
  • Commands without exec are parents: they exist so their sub-commands can
    be resolved word by word and they are never executable themselves.

- Canon
  • Ordered registry of commands. Adding "git commit" creates the missing
    "git" parent on the fly.
  • @canon.command(...) registers a function as a command's exec.
  • exec(command, env, args, typed) runs a command and logs the canonical line.

- CommandType ("command")
  • Type plugin resolving typed words to commands of one canon. Predictions
    are Command objects at the same depth as the typed words.

Quick example
    >>> canon = Canon()
    >>> @canon.command("echo", params=[Parameter("message", "text")])
    ... def echo(env, args):
    ...     return args["message"]
"""
import logging

from rich.console import Group
from rich.text import Text

from .faults import DuplicateCommandError, UnexecutableCommandError, UnknownCommandError
from .hints import Hint
from .types import Conversion, Status, Type, get_type
from .utils import *

_logger = logging.getLogger(__name__)


class Parameter:
    __slots__ = ("_name", "_type", "_description", "_default", "_custom_hint")

    def __init__(self, name, /, type="text", description=Unset, default=Unset, *, custom_hint=None):
        if not isinstance(name, str) or not name or any(character.isspace() for character in name):
            raise ValueError("parameter name must be a non-empty string without whitespace, got %r" % (name,))
        if custom_hint is not None and not callable(custom_hint):
            raise TypeError("parameter 'custom_hint' must be callable")
        self._name = name
        self._type = get_type(type)
        self._description = description
        if default is Unset and self._type.name == "boolean":
            default = False
        self._default = default
        self._custom_hint = custom_hint

    name = mirror("name")
    type = mirror("type")
    description = mirror("description")
    default = mirror("default")
    custom_hint = mirror("custom_hint")

    @property
    def required(self):
        return self._default is Unset

    def get_default(self):
        """
        conversion an assignment holds before anything is typed.
        """
        if self._default is Unset:
            return self._type.get_default()
        return Conversion(self._default)

    def __rich_repr__(self):
        yield self._name
        yield "type", self._type.name
        yield "description", self._description, Unset
        yield "default", self._default, Unset

    def __repr__(self):
        return "Parameter(%r, type=%r, default=%r)" % (self._name, self._type.name, self._default)


class Command:
    """
    A named command.

    Parameters
    - name: words separated by single spaces ("git commit").
    - params: iterable of Parameter, in declaration order.
    - description: one-line summary.
    - exec: callable(env, args) -> result; Unset for parent commands.
    """

    def __init__(self, name, /, params=(), description=Unset, exec=Unset):
        if not isinstance(name, str) or not name.split():
            raise ValueError("command name must be a non-empty string")
        if exec is not Unset and not callable(exec):
            raise TypeError("command 'exec' must be callable")
        self._name = " ".join(name.split())
        self._params = tuple(params)
        names = [param.name for param in self._params]
        if len(names) != len(set(names)):
            raise ValueError("command %r declares duplicate parameter names" % self._name)
        self._description = description
        self._exec = exec

    name = mirror("name")
    params = mirror("params")
    description = mirror("description")
    exec = mirror("exec")

    @property
    def executable(self):
        return self._exec is not Unset

    @property
    def depth(self):
        return self._name.count(" ") + 1

    def __str__(self):
        return self._name

    def __rich__(self):
        lines = [Text.assemble(("> ", "dim"), (self._name, "bold"), *((" <%s>" % param.name, "cyan") for param in self._params))]
        if self._description:
            lines.append(Text(self._description))
        for param in self._params:
            suffix = " (required)" if param.required else " (default: %s)" % param.type.stringify(param.default)
            lines.append(Text.assemble("  ", (param.name, "cyan"), ": ", param.description or "", (suffix, "dim")))
        return Group(*lines)

    def __rich_repr__(self):
        yield self._name
        yield "params", self._params, ()
        yield "description", self._description, Unset
        yield "executable", self.executable

    def __repr__(self):
        return "Command(%r, executable=%r)" % (self._name, self.executable)


class Canon:
    """
    Ordered command registry.
    """

    def __init__(self, commands=()):
        self._commands = {}
        self._implicit = set()
        for command in commands:
            self.add_command(command)

    def add_command(self, command, /):
        """
        Register a command (creating missing parents).

        Raises
        - DuplicateCommandError: when the name is already taken. A parent that
          was created on the fly may be replaced by a real command once.
        """
        if not isinstance(command, Command):
            raise TypeError("add_command() argument must be a Command")
        current = self._commands.get(command.name)
        if current is not None and command.name not in self._implicit:
            raise DuplicateCommandError(
                "command %r is already registered" % command.name,
                hint="remove the existing command first",
            )
        words = command.name.split(" ")
        for depth in range(1, len(words)):
            parent = " ".join(words[:depth])
            if parent not in self._commands:
                self._commands[parent] = Command(parent)
                self._implicit.add(parent)
                _logger.debug("created parent command %r", parent)
        self._implicit.discard(command.name)
        self._commands[command.name] = command
        _logger.debug("registered command %r", command.name)
        return command

    def command(self, name, /, params=(), description=Unset):
        """
        Decorator registering a function as the exec of a new command.
        """
        def wrapper(callback, /):
            summary = description
            if summary is Unset and callback.__doc__:
                summary = callback.__doc__.strip().splitlines()[0]
            self.add_command(Command(name, params, summary, callback))
            return callback

        return wrapper

    def remove_command(self, name, /):
        """
        Unregister a command and its sub-commands.

        Raises
        - UnknownCommandError: when no such command exists.
        """
        name = " ".join(str(name).split())
        if name not in self._commands:
            raise UnknownCommandError("no command named %r" % name)
        for registered in list(self._commands):
            if registered == name or registered.startswith(name + " "):
                del self._commands[registered]
                self._implicit.discard(registered)
        _logger.debug("removed command %r", name)

    def get_command(self, name, /):
        return self._commands.get(" ".join(str(name).split()))

    def get_command_names(self):
        return list(self._commands)

    def get_sub_commands(self, name, /):
        prefix = name + " "
        depth = name.count(" ") + 2
        return [command for command in self._commands.values() if command.name.startswith(prefix) and command.depth == depth]

    def exec(self, command, /, env=None, args=None, typed=""):
        """
        Run a command's exec with the given environment and arguments.

        Raises
        - UnexecutableCommandError: for parent commands.
        """
        if not command.executable:
            raise UnexecutableCommandError(
                "command %r cannot be executed" % command.name,
                hint="pick one of its sub-commands",
            )
        _logger.debug("executing %r", typed or command.name)
        return command.exec(env, dict(args or {}))

    def __contains__(self, name):
        return self.get_command(name) is not None

    def __iter__(self):
        return iter(tuple(self._commands.values()))

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return "Canon(%s)" % ", ".join(map(repr, self._commands))


class CommandType(Type):
    """
    Resolve typed words to a command of the given canon.

    Conversions
    - "": INCOMPLETE, predicting every top-level command.
    - exact name of an executable command: VALID; longer names at the same
      depth sharing the prefix stay predicted ("set" vs "settings").
    - exact name of a parent: INCOMPLETE with the value set, predicting its
      direct sub-commands.
    - prefix of names at the same depth: INCOMPLETE without a value.
    - anything else: ERROR without a value or predictions.
    """
    name = "command"

    def __init__(self, canon, /):
        self.canon = canon

    def parse(self, text, /):
        words = text.split()
        if not words:
            return Conversion(Unset, Status.INCOMPLETE, predictions=[command for command in self.canon if command.depth == 1])
        name = " ".join(words)
        similar = [command for command in self.canon if command.depth == len(words) and command.name.startswith(name) and command.name != name]
        command = self.canon.get_command(name)
        if command is not None and command.executable:
            return Conversion(command, Status.VALID, predictions=similar)
        if command is not None:
            return Conversion(command, Status.INCOMPLETE, predictions=self.canon.get_sub_commands(name))
        if similar:
            return Conversion(Unset, Status.INCOMPLETE, predictions=similar)
        return Conversion(Unset, Status.ERROR, "can't use '%s'" % name)

    def stringify(self, command, /):
        if command is None or command is Unset:
            return ""
        return command.name


def command_hint(command, arg, /):
    """
    Documentation hint for the command slot once a command is resolved.
    """
    lines = ["> " + " ".join([command.name, *("<%s>" % param.name for param in command.params)])]
    if command.description:
        lines.append(command.description)
    for param in command.params:
        if param.required:
            lines.append("  %s: %s (required)" % (param.name, param.description or param.type.name))
        else:
            lines.append("  %s: %s (default: %s)" % (param.name, param.description or param.type.name, param.type.stringify(param.default)))
    status = Status.VALID if command.executable else Status.INCOMPLETE
    return Hint.for_argument(status, "\n".join(lines), 0, arg)


def command_parameter(canon, /):
    """
    The synthetic parameter behind a requisition's command slot.
    """
    return Parameter("__command", CommandType(canon), "The command to execute", custom_hint=command_hint)


default_canon = Canon()
"""
Process-wide registry used by requisitions created without a canon.
"""


__all__ = (
    "Parameter",
    "Command",
    "Canon",
    "CommandType",
    "command_hint",
    "command_parameter",
    "default_canon",
)
