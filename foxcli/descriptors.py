r"""
foxcli descriptor model: the immutable representation of a grammar.

Overview
- Descriptors
  • Parameter: shared metadata of named options and positional arguments (type,
    name, description, default sources, converter, constraint, getter/setter).
  • Option: a named parameter with aliases (matched as --name, -n).
  • Argument: a positional parameter with a 1-based sequence index.
  • Command: options, arguments and subcommands plus a handler provider.
  • Program: the root command, carrying the runtime rendering flags.

- Registration helpers
  • check_name(kind, name, command): validate a grammar name (InvalidNameError).
  • register_option / register_argument / register_subcommand: insert into an
    ordered scope mapping, failing fast with ConflictError.
  • check_sequence(arguments, command): index rules (SequenceError).

Immutability
- DescriptorType exposes every field listed in __introspectable__ as a
  read-only property over a private "_field" backing attribute.
- Collections are frozen on construction (tuple / MappingProxyType).
- Once __init__ completes, setting or deleting any attribute raises AttributeError.

Structural rendering (str())
- option:   <RW name | alias : type> = (#{property} | ${VARIABLE} | ?)
- argument: [RW name : type = (null)]
- command:  name [OPTIONS] [(sub1 | sub2)?] [ARGUMENTS]
"""
import builtins
import enum
import functools
import operator
import re
import typing

from .converters import default_converter, identity, is_container, typename
from .faults import InvalidNameError, ConflictError, SequenceError
from .utils import *


class HandlerKind(enum.Enum):
    """
    Tagged variant of a command handler, decided when its provider is registered.

    - INVOCABLE: the handler produced by the provider is meant to be called.
    - PARAMETER_HOLDER: the handler only holds parameter values; subcommands
      carry the executable behavior.
    """
    INVOCABLE = "invocable"
    PARAMETER_HOLDER = "parameter-holder"


class DescriptorType(type):
    """
    Metaclass that turns descriptor classes into read-only, introspectable types.

    Responsibilities
    - Expose the fields listed in __introspectable__ as read-only properties.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(name='target', aliases=('t',), ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Descriptor(metaclass=DescriptorType):
    """
    Base of all descriptors: sealed against mutation once constructed.
    """

    def _seal(self):
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name, value, /):
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{type(self).__typename__} descriptors are read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{type(self).__typename__} descriptors are read-only")
        object.__delattr__(self, name)


def check_name(kind, name, /, command=Unset):
    """
    Validate a grammar name for a descriptor kind, naming the owning command on failure.

    Parameters
    - kind: str, used in messages ("option", "argument", "command", ...).
    - name: the name to validate.
    - command: optional owning command name.

    Returns
    - str: the validated name.

    Raises
    - InvalidNameError: when name is not a string or does not match NAME_PATTERN.
    """
    where = "" if command is Unset else " in command %r" % command
    if not isinstance(name, str):
        raise InvalidNameError("%s name %r%s must be a string" % (kind, name, where), name=name, command=command)
    try:
        return validate_name(name)
    except ValueError:
        raise InvalidNameError(
            "%s name %r%s must match %r" % (kind, name, where, NAME_PATTERN),
            name=name,
            command=command
        ) from None


def _sanitize_text(cls, metadata, *names):
    for name in names:
        if not isinstance(text := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(text, str) and not (text := text.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be blank")
        metadata[name] = coalesce(text)


def _sanitize_key(cls, metadata, *names):
    for name in names:
        if not isinstance(key := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(key, str) and (not key or re.search(r"\s", key)):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty or contain whitespace")
        metadata[name] = coalesce(key)


def _sanitize_callable(cls, metadata, *names):
    for name in names:
        if not (metadata[name] is Unset or callable(metadata[name])):
            raise TypeError(f"{cls.__typename__} {name!r} must be callable")
        metadata[name] = coalesce(metadata[name])


def _sanitize_parameter_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the metadata shared by options and arguments.

    Responsibilities
    - name: validated against NAME_PATTERN (InvalidNameError).
    - type: a class or a parameterized alias (list[int]); TypeError otherwise.
    - description/prompt: trimmed non-blank strings or None.
    - property/variable: non-empty keys without whitespace or None.
    - converter: callable, defaults to default_converter(type).
    - constraint: callable, defaults to identity.
    - getter/setter: callables or None.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    check_name(cls.__typename__, metadata["name"])

    type = metadata["type"]
    if not (isinstance(type, builtins.type) or typing.get_origin(type) is not None):
        raise TypeError(f"{cls.__typename__} 'type' must be a type")

    _sanitize_text(cls, metadata, "description", "prompt")
    _sanitize_key(cls, metadata, "property", "variable")
    _sanitize_callable(cls, metadata, "converter", "constraint", "getter", "setter")

    if metadata["converter"] is None:
        metadata["converter"] = default_converter(type)
    if metadata["constraint"] is None:
        metadata["constraint"] = identity


class Parameter(Descriptor):
    """
    Shared metadata of options and arguments.

    Fields
    - type: target type (class or container alias such as list[int]).
    - name: grammar name.
    - description: optional help text.
    - property / variable: default-source keys (system property, environment variable).
    - prompt / password: interactive fallback message and echo suppression.
    - required / hidden: requirement and usage visibility.
    - converter / constraint: value pipeline callables.
    - getter / setter: explicit binding to a field of the handler object.
    """

    __introspectable__ = (
        "type",
        "name",
        "description",
        "property",
        "variable",
        "prompt",
        "password",
        "required",
        "hidden",
        "converter",
        "constraint",
        "getter",
        "setter",
    )

    __displayable__ = (
        "name",
        "type",
        "required",
        "hidden",
        "property",
        "variable",
    )

    def __init__(
            self,
            name,
            /,
            type=str,
            description=Unset,
            property=Unset,
            variable=Unset,
            prompt=Unset,
            converter=Unset,
            constraint=Unset,
            getter=Unset,
            setter=Unset,
            *,
            password=False,
            required=False,
            hidden=False
    ):
        if builtins.type(self) is Parameter:
            raise TypeError("type 'Parameter' cannot be instantiated directly")

        metadata = {
            "type": type,
            "name": name,
            "description": description,
            "property": property,
            "variable": variable,
            "prompt": prompt,
            "password": bool(password),
            "required": bool(required),
            "hidden": bool(hidden),
            "converter": converter,
            "constraint": constraint,
            "getter": getter,
            "setter": setter,
        }
        _sanitize_parameter_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @builtins.property
    def multiple(self):
        """
        True when the parameter holds a container and accumulates values.
        """
        return is_container(self.type)

    @builtins.property
    def flag(self):
        """
        True for boolean parameters: their presence alone means true.
        """
        return self.type is bool

    @builtins.property
    def typename(self):
        return typename(self.type)

    def _attributes(self):
        # R readable, W writable, H hidden
        return "".join((
            "R" if self.getter else "",
            "W" if self.setter else "",
            "H" if self.hidden else "",
        ))

    def _defaults(self):
        # sources in priority order; "null" when there is none
        sources = []
        if self.property:
            sources.append("#{%s}" % self.property)
        if self.variable:
            sources.append("${%s}" % self.variable)
        if self.prompt:
            sources.append("***" if self.password else "?")
        return " | ".join(sources) or "null"


class Option(Parameter):
    """
    Named parameter matched as --name or -n.

    Aliases are alternate names: deduplicated, ordered as declared, and never
    including the primary name. Matching is case-sensitive.
    """

    __introspectable__ = Parameter.__introspectable__ + ("aliases",)

    __displayable__ = ("name", "aliases") + Parameter.__displayable__[1:]

    def __init__(self, name, /, *aliases, **metadata):
        super().__init__(name, **metadata)

        sanitized = []
        for alias in aliases:
            check_name("option alias", alias)
            if alias != name and alias not in sanitized:
                sanitized.append(alias)
        self._aliases = tuple(sanitized)
        self._seal()

    @builtins.property
    def names(self):
        """
        The primary name followed by the aliases.
        """
        return (self.name,) + self.aliases

    def __str__(self):
        return "%s%s %s%s : %s%s = (%s)" % (
            "<" if self.required else "[",
            self._attributes(),
            self.name,
            "".join(" | " + alias for alias in self.aliases),
            self.typename,
            ">" if self.required else "]",
            self._defaults(),
        )


class Argument(Parameter):
    """
    Positional parameter placed by its 1-based sequence index.

    Required arguments must form a prefix of the index sequence and a
    container-typed argument must be the last one; both rules are checked by
    the owning command (see check_sequence).
    """

    __introspectable__ = Parameter.__introspectable__ + ("index",)

    __displayable__ = ("name", "index") + Parameter.__displayable__[1:]

    def __init__(self, name, /, index=1, **metadata):
        super().__init__(name, **metadata)

        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"{type(self).__typename__} 'index' must be an integer")
        if index < 1:
            raise ValueError(f"{type(self).__typename__} 'index' must be a positive integer")
        self._index = index
        self._seal()

    def __str__(self):
        return "%s%s %s : %s = (%s)%s" % (
            "<" if self.required else "[",
            self._attributes(),
            self.name,
            self.typename,
            self._defaults(),
            ">" if self.required else "]",
        )


def register_option(scope, option, /, command=Unset, arguments=()):
    """
    Insert an option into an ordered scope, rejecting any name or alias clash.

    Options and arguments of one command share a namespace: `arguments` holds
    the argument names already declared next to the scope.

    Raises
    - ConflictError: naming the clashing name and the owning command.
    """
    taken = {name: owner for owner in scope.values() for name in owner.names}
    for name in option.names:
        if name in taken:
            raise ConflictError(
                "option name %r is already in use by option %r in command %r" % (name, taken[name].name, command),
                name=name,
                command=command
            )
        if name in arguments:
            raise ConflictError(
                "option name %r is already in use by an argument in command %r" % (name, command),
                name=name,
                command=command
            )
    scope[option.name] = option


def register_argument(scope, argument, /, command=Unset, options=()):
    """
    Insert an argument into an ordered scope, rejecting duplicated names or indexes.

    `options` holds the options already declared next to the scope; an argument
    may not reuse any of their names or aliases.
    """
    if argument.name in scope:
        raise ConflictError(
            "argument name %r is already in use in command %r" % (argument.name, command),
            name=argument.name,
            command=command
        )
    for owner in options:
        if argument.name in owner.names:
            raise ConflictError(
                "argument name %r is already in use by option %r in command %r" % (argument.name, owner.name, command),
                name=argument.name,
                command=command
            )
    for owner in scope.values():
        if owner.index == argument.index:
            raise ConflictError(
                "argument index %d of %r is already in use by argument %r in command %r" % (
                    argument.index, argument.name, owner.name, command
                ),
                name=argument.name,
                command=command
            )
    scope[argument.name] = argument


def register_subcommand(scope, subcommand, /, command=Unset):
    """
    Insert a subcommand into an ordered scope; names clash case-insensitively.
    """
    key = normalize_name(subcommand.name)
    for name in scope:
        if normalize_name(name) == key:
            raise ConflictError(
                "subcommand name %r is already in use in command %r" % (subcommand.name, command),
                name=subcommand.name,
                command=command
            )
    scope[subcommand.name] = subcommand


def check_sequence(arguments, /, command=Unset):
    """
    Check the index rules of a command's arguments.

    rules
    - indexes are contiguous from 1 (no gaps).
    - required arguments form a prefix of the sequence.
    - a container-typed argument occupies the last index.

    Raises
    - SequenceError: naming the offending argument and the owning command.
    """
    sequence = sorted(arguments, key=operator.attrgetter("index"))
    optional = None
    for position, argument in enumerate(sequence, 1):
        if argument.index != position:
            raise SequenceError(
                "argument %r of command %r has index %d but index %d is missing" % (
                    argument.name, command, argument.index, position
                ),
                name=argument.name,
                command=command
            )
        if argument.required and optional:
            raise SequenceError(
                "required argument %r of command %r cannot follow optional argument %r" % (
                    argument.name, command, optional.name
                ),
                name=argument.name,
                command=command
            )
        if not argument.required:
            optional = argument
        if argument.multiple and position != len(sequence):
            raise SequenceError(
                "container argument %r of command %r must be the last argument" % (argument.name, command),
                name=argument.name,
                command=command
            )
    return tuple(sequence)


class Command(Descriptor):
    """
    A command: its options, arguments, subcommands and handler provider.

    Fields
    - name: unique within the parent scope (case-insensitive).
    - description: optional help text.
    - options / arguments / subcommands: read-only ordered mappings (declaration order).
    - provider: factory returning a fresh handler per parse, or None.
    - kind: HandlerKind, decided when the provider is registered.

    Derived
    - runnable: the handler is invocable (renders the "?" usage marker).
    - sequence: arguments ordered by index.
    """

    __introspectable__ = (
        "name",
        "description",
        "options",
        "arguments",
        "subcommands",
        "provider",
        "kind",
    )

    def __init__(
            self,
            name,
            /,
            description=Unset,
            options=(),
            arguments=(),
            subcommands=(),
            provider=Unset,
            *,
            invocable=False
    ):
        check_name(type(self).__typename__, name)
        metadata = {"description": description}
        _sanitize_text(type(self), metadata, "description")

        if provider is not Unset and not callable(provider):
            raise TypeError(f"{type(self).__typename__} 'provider' must be callable")
        if invocable and provider is Unset:
            raise TypeError(f"invocable {type(self).__typename__} {name!r} requires a provider")

        scopes = ({}, {}, {})
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"{type(self).__typename__} 'options' must contain options")
            register_option(scopes[0], option, name)
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError(f"{type(self).__typename__} 'arguments' must contain arguments")
            register_argument(scopes[1], argument, name, scopes[0].values())
        for subcommand in subcommands:
            if not isinstance(subcommand, Command) or isinstance(subcommand, Program):
                raise TypeError(f"{type(self).__typename__} 'subcommands' must contain commands")
            register_subcommand(scopes[2], subcommand, name)

        sequence = check_sequence(scopes[1].values(), name)

        if provider is Unset:
            for parameter in (*scopes[0].values(), *scopes[1].values()):
                if parameter.getter or parameter.setter:
                    raise ValueError(
                        f"{type(self).__typename__} {name!r} binds parameter {parameter.name!r} but has no provider"
                    )

        self._name = name
        self._description = metadata["description"]
        self._options = freeze(scopes[0])
        self._arguments = freeze(scopes[1])
        self._subcommands = freeze(scopes[2])
        self._provider = coalesce(provider)
        self._kind = HandlerKind.INVOCABLE if invocable else HandlerKind.PARAMETER_HOLDER
        self._sequence = sequence
        self._lookup = freeze({name: option for option in scopes[0].values() for name in option.names})
        self._routes = freeze({normalize_name(name): command for name, command in scopes[2].items()})
        if type(self) is Command:
            self._seal()

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if cls.__name__ != "Program":
            raise TypeError(f"type {cls.__name__!r} is not an acceptable base type")

    @property
    def runnable(self):
        return self._kind is HandlerKind.INVOCABLE

    @property
    def sequence(self):
        return self._sequence

    def option(self, name, /):
        """
        Return the option declared under a name or alias (case-sensitive), or None.
        """
        return self._lookup.get(name)

    def subcommand(self, name, /):
        """
        Return the subcommand declared under a name (case-insensitive), or None.

        The name is matched as given; surrounding whitespace never matches.
        """
        try:
            return self._routes.get(validate_name(name).casefold())
        except (TypeError, ValueError):
            return None

    def _render(self, hidden):
        # <NAME> [OPTIONS] [(SUB1 | SUB2)[?]] [ARGUMENTS]
        parts = [self.name]
        parts.extend(str(option) for option in self.options.values() if hidden or not option.hidden)
        if self.subcommands:
            parts.append("(%s)%s" % (" | ".join(self.subcommands), "?" if self.runnable else ""))
        parts.extend(str(argument) for argument in self.arguments.values() if hidden or not argument.hidden)
        return " ".join(parts)

    @property
    def usage(self):
        """
        Structural usage line without hidden parameters.
        """
        return self._render(hidden=False)

    def __str__(self):
        return self._render(hidden=True)


class Program(Command):
    """
    The root command of a grammar.

    Besides the command fields it carries the runtime rendering flags used when
    faults are surfaced:
    - shell: render faults to stderr and exit instead of raising.
    - fancy: wrap rendered faults in a panel.
    - colorful: style rendered faults.
    """

    __introspectable__ = Command.__introspectable__ + (
        "shell",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "name",
        "description",
        "options",
        "arguments",
        "subcommands",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(self, name, /, *args, shell=False, fancy=False, colorful=False, **kwargs):
        super().__init__(name, *args, **kwargs)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._seal()

    def __init_subclass__(cls, **options):
        raise TypeError(f"type {cls.__name__!r} is not an acceptable base type")

    def parse(self, source=Unset, /, **options):
        """
        Parse an argument vector or a raw line against this grammar.

        See foxcli.resolver.parse for the accepted options.
        """
        from .resolver import parse
        return parse(self, source, **options)


__all__ = (
    "HandlerKind",
    "Parameter",
    "Option",
    "Argument",
    "Command",
    "Program",
    "check_name",
    "register_option",
    "register_argument",
    "register_subcommand",
    "check_sequence",
)
