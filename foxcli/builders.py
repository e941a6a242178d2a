r"""
foxcli builders: fluent, explicit assembly of a grammar.

Overview
- program(name) → ProgramBuilder, the root of a builder chain.
- CommandBuilder.option / .argument / .subcommand open a child builder; the
  child's build() freezes its descriptor, registers it into the parent's
  prototype and hands the parent back, so a whole tree reads as one chain:

    >>> grammar = (
    ...     program("deployer")
    ...         .option("verbose", "v", type=bool).build()
    ...         .subcommand("deploy")
    ...             .option("target", "t").required().build()
    ...             .argument("environment").build()
    ...         .build()
    ...     .build()
    ... )
    >>> str(grammar.subcommand("deploy"))
    'deploy < target | t : str> = (null) [ environment : str = (null)]'

Contract
- Names are validated as soon as a builder is opened (InvalidNameError).
- Uniqueness is checked when a child registers (ConflictError naming the
  offending name and the owning command).
- Metadata is validated when the descriptor is built (TypeError/ValueError).
- A builder builds exactly once; a second build() raises TypeError.
"""
import os
import sys

from .descriptors import *
from .utils import *


class Builder:
    """
    Base of all builders: one-shot build() bookkeeping.
    """

    def __init__(self, name, /, parent=Unset):
        self._name = name
        self._parent = coalesce(parent)
        self._built = False

    def _consume(self):
        if self._built:
            raise TypeError(f"{type(self).__name__} for {self._name!r} was already built")
        self._built = True

    @property
    def name(self):
        return self._name


class ParameterBuilder(Builder):
    """
    Shared fluent metadata setters of option and argument builders.

    Every setter returns the builder itself; build() registers the descriptor
    into the owning command builder and returns that command builder.
    """

    def __init__(self, name, /, parent, type=str):
        super().__init__(name, parent)
        self._metadata = {"type": type}

    def _set(self, name, value):
        self._metadata[name] = value
        return self

    def description(self, text, /):
        return self._set("description", text)

    def property(self, key, /):
        """
        Read the value from the host property table when it is absent.
        """
        return self._set("property", key)

    def variable(self, key, /):
        """
        Read the value from an environment variable when it is absent.
        """
        return self._set("variable", key)

    def prompt(self, message, /):
        """
        Ask the user interactively when the value is absent and required.
        """
        return self._set("prompt", message)

    def password(self, flag=True, /):
        return self._set("password", flag)

    def required(self, flag=True, /):
        return self._set("required", flag)

    def optional(self):
        return self._set("required", False)

    def hidden(self, flag=True, /):
        return self._set("hidden", flag)

    def converter(self, function, /):
        return self._set("converter", function)

    def constraint(self, function, /):
        return self._set("constraint", function)

    def getter(self, function, /):
        return self._set("getter", function)

    def setter(self, function, /):
        return self._set("setter", function)

    def field(self, attribute, /):
        """
        Bind the parameter to one attribute of the handler (getter and setter).

        The getter reports the handler's current value of the attribute; the
        setter assigns the converted value to it.
        """
        if not isinstance(attribute, str):
            raise TypeError("field() argument must be a string")
        if not attribute.isidentifier():
            raise ValueError("field() argument must be an identifier, got %r" % attribute)

        @rename("get_" + attribute)
        def getter(handler):
            return getattr(handler, attribute)

        @rename("set_" + attribute)
        def setter(handler, value):
            setattr(handler, attribute, value)

        self._set("getter", getter)
        return self._set("setter", setter)


class OptionBuilder(ParameterBuilder):

    def __init__(self, name, /, parent, aliases=(), type=str):
        super().__init__(check_name("option", name, parent.name), parent, type)
        self._aliases = tuple(check_name("option alias", alias, parent.name) for alias in aliases)

    def build(self):
        self._consume()
        option = Option(self._name, *self._aliases, **self._metadata)
        register_option(self._parent._options, option, self._parent.name, self._parent._arguments)
        return self._parent


class ArgumentBuilder(ParameterBuilder):

    def __init__(self, name, /, parent, type=str, index=Unset):
        super().__init__(check_name("argument", name, parent.name), parent, type)
        self._index = index

    def build(self):
        """
        Register the argument; without an explicit index it takes the next free one.
        """
        self._consume()
        index = self._index
        if index is Unset:
            index = max((argument.index for argument in self._parent._arguments.values()), default=0) + 1
        argument = Argument(self._name, index, **self._metadata)
        register_argument(self._parent._arguments, argument, self._parent.name, self._parent._options.values())
        return self._parent


class CommandBuilder(Builder):
    """
    Prototype of a command: collects options, arguments and subcommands.

    build() on a subcommand builder freezes the command, registers it into the
    parent and returns the parent builder.
    """

    def __init__(self, name, /, parent=Unset):
        super().__init__(
            check_name("command", name, Unset if parent is Unset else parent.name),
            parent
        )
        self._options = {}
        self._arguments = {}
        self._subcommands = {}
        self._description = Unset
        self._provider = Unset
        self._invocable = False

    def description(self, text, /):
        self._description = text
        return self

    def provider(self, factory, /, *, invocable=False):
        """
        Register the handler factory; invocable decides the handler kind.

        - invocable=True: handlers are meant to be called (the command is runnable).
        - invocable=False: handlers only hold parameter values.
        """
        if not callable(factory):
            raise TypeError(f"provider of command {self._name!r} must be callable")
        self._provider = factory
        self._invocable = bool(invocable)
        return self

    def option(self, name, /, *aliases, type=str):
        return OptionBuilder(name, self, aliases, type)

    def argument(self, name, /, type=str, index=Unset):
        return ArgumentBuilder(name, self, type, index)

    def subcommand(self, name, /):
        return CommandBuilder(name, self)

    def _descriptor(self, factory, **options):
        return factory(
            self._name,
            description=self._description,
            options=self._options.values(),
            arguments=self._arguments.values(),
            subcommands=self._subcommands.values(),
            provider=self._provider,
            invocable=self._invocable,
            **options
        )

    def build(self):
        self._consume()
        command = self._descriptor(Command)
        register_subcommand(self._parent._subcommands, command, self._parent.name)
        return self._parent


class ProgramBuilder(CommandBuilder):
    """
    Root builder; build() returns the Program itself.
    """

    def __init__(self, name, /):
        super().__init__(name)
        self._flags = {"shell": False, "fancy": False, "colorful": False}

    def shell(self, flag=True, /):
        """
        Render faults to stderr and exit with status 1 instead of raising.
        """
        self._flags["shell"] = bool(flag)
        return self

    def fancy(self, flag=True, /):
        self._flags["fancy"] = bool(flag)
        return self

    def colorful(self, flag=True, /):
        self._flags["colorful"] = bool(flag)
        return self

    def build(self):
        self._consume()
        return self._descriptor(Program, **self._flags)


def program(name=Unset, /):
    """
    Open a program builder.

    Without a name, the basename of sys.argv[0] (extension removed) is used,
    falling back to "foxcli" when that is not a valid grammar name.
    """
    if name is Unset:
        name = os.path.splitext(os.path.basename(sys.argv[0] if sys.argv else ""))[0]
        try:
            validate_name(name)
        except ValueError:
            name = "foxcli"
    return ProgramBuilder(name)


__all__ = (
    "ParameterBuilder",
    "OptionBuilder",
    "ArgumentBuilder",
    "CommandBuilder",
    "ProgramBuilder",
    "program",
)
