"""
foxcli utilities (internal helpers, carefully exposed)

Scope
- Core building blocks used across the package for consistent semantics.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the descriptor, builder and resolver layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) as an
    immutable view (tuple, MappingProxyType or frozenset for containers).

- validate_name(name) / normalize_name(raw)
  • Pure grammar-name checks, parameterized by the pattern; no shared state.

- ordinal(number)
  • Human-friendly ordinal labels ("first", "second", "11th") for position-first messages.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> validate_name("dry-run")
    'dry-run'
    >>> normalize_name(" Deploy ")
    'deploy'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final

NAME_PATTERN = r"[a-z]([a-z0-9_\-.]*[a-z0-9])?"
"""
grammar name pattern shared by commands, options and arguments (matched case-insensitively).
"""


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError: on a non-callable target, a non-string name, or a wrong arity.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def freeze(object, /):
    """
    Return a shallow read-only snapshot of a container.

    Freezing rules
    - Sequence (non-string) → tuple(seq)
    - Mapping → MappingProxyType(dict(mapping)), insertion order preserved
    - Set → frozenset(setlike)
    - Other types → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads from an attribute named "_{name}" on the
    instance. Containers are stored frozen by the descriptors, so the property
    hands out the stored view directly.

    Example
    - Given self._aliases, declare aliases = mirror("aliases") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    return property(getter)


def validate_name(name, /, pattern=NAME_PATTERN, flags=re.IGNORECASE):
    """
    Check a grammar name against a pattern and return it unchanged.

    This is a pure function: the pattern and flags are parameters, so every
    construction site can call it without sharing compiled state.

    Parameters
    - name: str
      The name to check (no leading dashes for options).
    - pattern: str
      Regular expression the whole name must match. Defaults to NAME_PATTERN.
    - flags: re flags
      Defaults to re.IGNORECASE (names are validated case-insensitively).

    Returns
    - str: the name, when valid.

    Raises
    - TypeError: when name is not a string.
    - ValueError: when name does not match (callers wrap this into InvalidNameError).
    """
    if not isinstance(name, str):
        raise TypeError("validate_name() argument must be a string")
    if not re.fullmatch(pattern, name, flags):
        raise ValueError("name %r must match %r" % (name, pattern))
    return name


def normalize_name(raw, /, pattern=NAME_PATTERN):
    """
    Normalize an explicit raw command name into its lookup key.

    The raw name is trimmed, validated, and casefolded (command names are
    case-insensitive). No name is ever inferred from a type identifier.
    """
    if not isinstance(raw, str):
        raise TypeError("normalize_name() argument must be a string")
    return validate_name(raw.strip(), pattern).casefold()


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


__all__ = (
    "NAME_PATTERN",
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "freeze",
    "mirror",
    "validate_name",
    "normalize_name",
    "ordinal",
)
