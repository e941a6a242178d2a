"""
Stock converters and constraints for parameter values.

A converter turns one raw string into one value and fails with ConversionError;
a constraint receives the converted value, returns it (possibly transformed) and
fails with ConstraintViolationError. Plain callables such as int or float are
valid converters: the value pipeline wraps their ValueError/TypeError.

Container types (list, tuple, set, frozenset, and their parameterized aliases
like list[int] or tuple[str, ...]) mark multi-value parameters; the converter
then applies to every element and collect() builds the container.
"""
import builtins
import enum
import re
import typing

from .faults import ConversionError, ConstraintViolationError
from .utils import Unset, rename

CONTAINERS = (list, tuple, set, frozenset)

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


def is_container(type, /):
    """
    Return True when the type is a multi-value container (bare or parameterized).
    """
    return (typing.get_origin(type) or type) in CONTAINERS


def element_type(type, /):
    """
    Return the element type of a container type (str for bare containers).

    For any non-container type the type itself is returned.
    """
    if not is_container(type):
        return type
    arguments = [argument for argument in typing.get_args(type) if argument is not Ellipsis]
    return arguments[0] if arguments else str


def typename(type, /):
    """
    Render a type for usage strings: "str", "int", "list[int]".
    """
    if typing.get_origin(type) is not None:
        return str(type).removeprefix("typing.")
    return getattr(type, "__name__", str(type))


def collect(type, values, /):
    """
    Build the container described by a container type from converted values.
    """
    return (typing.get_origin(type) or type)(values)


@rename("bool")
def boolean(input, /):
    if (folded := input.strip().casefold()) in _TRUE:
        return True
    if folded in _FALSE:
        return False
    raise ConversionError("%r is not a boolean (use true/false, yes/no, on/off or 1/0)" % input, type=bool)


def _enumeration(type):
    @rename(type.__name__)
    def converter(input, /):
        for member in type:
            if member.name.casefold() == input.casefold():
                return member
        try:
            return type(input)
        except ValueError:
            raise ConversionError(
                "%r is not one of %s" % (input, ", ".join(member.name.lower() for member in type)),
                type=type
            ) from None
    return converter


def default_converter(type, /):
    """
    Choose the converter of a declared parameter type.

    rules
    - containers convert their element type.
    - str is the identity.
    - bool accepts true/false, yes/no, on/off and 1/0 (case-insensitive).
    - Enum subclasses match a member name (case-insensitive) or value.
    - any other callable type is called with the raw string.
    """
    type = element_type(type)
    if type is str:
        return str
    if type is bool:
        return boolean
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return _enumeration(type)
    if callable(type):
        return type
    raise TypeError("no default converter for %r" % (type,))


@rename("identity")
def identity(value, /):
    return value


def choices(*values):
    """
    Constraint accepting only the given values (compared after conversion).
    """
    if not values:
        raise TypeError("choices() requires at least one value")

    @rename("choices")
    def constraint(value, /):
        if value not in values:
            raise ConstraintViolationError(
                "%r is not a valid choice (choose from %s)" % (value, ", ".join(map(repr, values))),
                value=value
            )
        return value
    return constraint


def between(minimum=Unset, maximum=Unset):
    """
    Constraint accepting values within the inclusive [minimum, maximum] range.

    Either bound may be omitted; for containers, use it on the elements yourself.
    """
    if minimum is Unset and maximum is Unset:
        raise TypeError("between() requires a minimum, a maximum, or both")

    @rename("between")
    def constraint(value, /):
        if minimum is not Unset and value < minimum:
            raise ConstraintViolationError("%r is lower than %r" % (value, minimum), value=value)
        if maximum is not Unset and value > maximum:
            raise ConstraintViolationError("%r is greater than %r" % (value, maximum), value=value)
        return value
    return constraint


def matches(pattern, /, flags=0):
    """
    Constraint accepting strings that fully match a regular expression.
    """
    compiled = re.compile(pattern, flags)

    @rename("matches")
    def constraint(value, /):
        if not compiled.fullmatch(str(value)):
            raise ConstraintViolationError("%r does not match %r" % (value, compiled.pattern), value=value)
        return value
    return constraint


__all__ = (
    "is_container",
    "element_type",
    "typename",
    "collect",
    "boolean",
    "default_converter",
    "identity",
    "choices",
    "between",
    "matches",
)
