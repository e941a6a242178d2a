r"""
foxcli value pipeline: default sources, conversion, validation and assignment.

Pipeline (per parameter of a scope)
- raw values from the token stream, or else the default sources in strict
  order: host property, environment variable, interactive prompt (required
  parameters with a prompt only);
- convert every raw value (ConversionError; ValueError/TypeError of plain
  callables such as int are wrapped);
- collect containers for multi-value parameters;
- validate with the constraint (ConstraintViolationError; ValueError wrapped);
- assign through the setter, when the parameter is bound.

Absent parameters
- required → MissingRequiredParameterError naming the parameter and command path;
- optional → the handler stays untouched and the getter (if any) reports the
  handler's own default into the scope values.
"""
import copy
import logging
import os
from types import MappingProxyType

from rich.console import Console
from rich.prompt import Prompt

from .converters import collect
from .faults import ConversionError, ConstraintViolationError, MissingRequiredParameterError
from .utils import Unset, coalesce

logger: logging.Logger = logging.getLogger("foxcli.values")


def _ask(message, password):
    return Prompt.ask(message, console=Console(stderr=True), password=password)


class Sources:
    """
    Default sources consulted for absent parameters.

    Parameters
    - properties: Mapping[str, str], the host property table.
      Defaults to __main__.__properties__ (read on every lookup), else empty.
    - variables: Mapping[str, str], defaults to os.environ (read on every lookup).
    - prompter: Callable[[str, bool], str | None] asking the user for a value;
      the bool requests echo suppression. Defaults to rich.prompt.Prompt.ask
      on a stderr console.

    A prompter that hits end of input (EOFError) or returns an empty answer
    yields no value.
    """

    def __init__(self, properties=Unset, variables=Unset, prompter=Unset):
        if prompter is not Unset and not callable(prompter):
            raise TypeError("Sources() 'prompter' must be callable")
        self._properties = properties
        self._variables = variables
        self._prompter = coalesce(prompter, _ask)

    @property
    def properties(self):
        if self._properties is Unset:
            return getattr(__import__("__main__"), "__properties__", {})
        return self._properties

    @property
    def variables(self):
        return coalesce(self._variables, os.environ)

    def property(self, key, /):
        return self.properties.get(key)

    def variable(self, key, /):
        return self.variables.get(key)

    def prompt(self, message, /, password=False):
        try:
            answer = self._prompter(message, password)
        except EOFError:
            return None
        return answer or None


def split(value, /):
    """
    Split a default-source value of a container parameter.

    The separator is the first one present among os.pathsep, ":" and ",".
    """
    return value.split(os.pathsep if os.pathsep in value else ":" if ":" in value else ",")


def lookup(parameter, sources, /):
    """
    Consult the default sources of an absent parameter.

    Returns
    - (list[str], origin) when a source supplied a value, origin being
      "property", "variable" or "prompt";
    - (None, None) otherwise.
    """
    value = origin = None
    if parameter.property and (value := sources.property(parameter.property)) is not None:
        origin = "property"
    elif parameter.variable and (value := sources.variable(parameter.variable)) is not None:
        origin = "variable"
    elif parameter.prompt and parameter.required:
        if (value := sources.prompt(parameter.prompt, parameter.password)) is not None:
            origin = "prompt"

    if origin is None:
        return None, None
    return (split(value) if parameter.multiple else [value]), origin


def convert(parameter, inputs, /, path=()):
    """
    Convert raw inputs and validate the result with the parameter's constraint.

    Multi-value parameters collect every converted input into their container;
    single-value parameters convert their last input.
    """
    values = []
    for input in inputs if parameter.multiple else inputs[-1:]:
        try:
            values.append(parameter.converter(input))
        except ConversionError as error:
            raise copy.replace(
                error,
                path=path,
                input=input,
                parameter=parameter.name,
                type=error.options.get("type", parameter.type)
            )
        except (ValueError, TypeError) as error:
            raise ConversionError(
                "cannot convert %r to %s for %s %r (%s)" % (
                    input, parameter.typename, type(parameter).__typename__, parameter.name, error
                ),
                path=path,
                input=input,
                parameter=parameter.name,
                type=parameter.type
            ) from error

    value = collect(parameter.type, values) if parameter.multiple else values[0]

    try:
        return parameter.constraint(value)
    except ConstraintViolationError as error:
        raise copy.replace(error, path=path, parameter=parameter.name, value=error.options.get("value", value))
    except ValueError as error:
        raise ConstraintViolationError(
            "invalid value for %s %r: %s" % (type(parameter).__typename__, parameter.name, error),
            path=path,
            parameter=parameter.name,
            value=value
        ) from error


def assign(parameter, handler, value, /):
    """
    Hand a converted value to the handler through the parameter's setter.

    Unbound parameters (no setter) and scopes without a handler are left alone.
    """
    if parameter.setter and handler is not None:
        parameter.setter(handler, value)


def resolve(command, handler, raw, /, sources, path=()):
    """
    Run the pipeline for every parameter of one scope, options then arguments.

    Parameters
    - command: the scope's Command.
    - handler: the scope's handler object (None without a provider).
    - raw: Mapping[Parameter, list[str]] collected from the token stream.
    - sources: Sources consulted for absent parameters.
    - path: tuple of command names, for fault reporting.

    Returns
    - MappingProxyType[str, object]: converted values by parameter name.
    """
    values = {}
    route = " ".join(path)
    for parameter in (*command.options.values(), *command.sequence):
        inputs = raw.get(parameter)
        if inputs is None:
            inputs, origin = lookup(parameter, sources)
            if origin is not None:
                logger.debug("%s %r of %r supplied by %s", type(parameter).__typename__, parameter.name, route, origin)

        if inputs is None:
            if parameter.required:
                raise MissingRequiredParameterError(
                    "missing required %s %r for %r" % (type(parameter).__typename__, parameter.name, route),
                    path=path,
                    parameter=parameter.name,
                    hint="provide %s" % (
                        "--" + parameter.name if type(parameter).__typename__ == "option" else "a value for " + parameter.name
                    )
                )
            if parameter.getter and handler is not None:
                values[parameter.name] = parameter.getter(handler)
            continue

        values[parameter.name] = value = convert(parameter, inputs, path)
        assign(parameter, handler, value)

    return MappingProxyType(values)


__all__ = (
    "Sources",
    "split",
    "lookup",
    "convert",
    "assign",
    "resolve",
)
