"""
foxcli faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all parse-time issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- DeclarationError and subclasses: build-time faults raised while a grammar is
  assembled. They indicate a programming error and are never rendered nor
  recovered from.
- CommandException / CommandWarning: parse-time base types that carry message +
  options (command path, offending input, parameter) and know how to render
  themselves with rich.
- trigger(): central entry point to surface any parse-time fault (respecting
  shell/fancy/colorful).

Integration
- The resolver raises parse-time faults enriched with the active command path.
- parse() routes them through trigger(fault, **runtime flags): in non-shell mode
  the exception is raised, in shell mode it is rendered to stderr and the
  process exits with status 1.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - tokens (1110x)
      • UNTERMINATED_QUOTE
    - routing (1111x)
      • UNKNOWN_COMMAND, MISSING_COMMAND
    - options (1112x)
      • UNKNOWN_OPTION, MISSING_OPTION_VALUE
    - arguments (1113x)
      • TOO_MANY_ARGUMENTS
    - values (1114x)
      • MISSING_PARAMETER, CONVERSION_FAILED, CONSTRAINT_VIOLATION
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE
    """
    # --- token errors ---
    UNTERMINATED_QUOTE          = 11101

    # --- routing errors ---
    UNKNOWN_COMMAND             = 11111
    MISSING_COMMAND             = 11112

    # --- option errors ---
    UNKNOWN_OPTION              = 11121
    MISSING_OPTION_VALUE        = 11122

    # --- argument errors ---
    TOO_MANY_ARGUMENTS          = 11131

    # --- value errors ---
    MISSING_PARAMETER           = 11141
    CONVERSION_FAILED           = 11142
    CONSTRAINT_VIOLATION        = 11143

    # --- warnings ---
    EMPTY_INLINE_VALUE          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class DeclarationError(ValueError):
    """
    base of build-time faults (bad grammar declarations).

    attributes
    - name: the offending name (or None).
    - command: the name of the owning command (or None).
    """

    def __init__(self, message, /, name=Unset, command=Unset):
        super().__init__(message)
        self.name = coalesce(name)
        self.command = coalesce(command)


class InvalidNameError(DeclarationError): ...
class ConflictError(DeclarationError): ...
class SequenceError(DeclarationError): ...


def _renderable(fault, palette, title):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: [ prog — code | title ]
    - body: message, then “ → hint” when a hint is present.
    - fancy: wraps both in a left-titled panel.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    prog = text(getattr(main, "__prog__", options.get("program", "foxcli")), "prog-name")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(options.get("title", type(fault).title).title(), title),
        " ]"
    )
    message = text(fault.message, "message")
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")

    return Group(header, *renders)


class CommandException(Exception):
    """
    base of parse-time faults.

    options (all optional, merged by the resolver and by trigger())
    - path: tuple of command names from the program to the active command.
    - input: the offending raw token.
    - parameter: the offending parameter name.
    - index: 1-based token position.
    - title, code, hint: rendering overrides.
    - program, shell, fancy, colorful: runtime flags.
    """
    title = "command error"
    faultcode = FaultCode.UNKNOWN_COMMAND

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, type(self).title)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def path(self):
        return tuple(self.options.get("path", ()))

    @property
    def input(self):
        return self.options.get("input")

    @property
    def parameter(self):
        return self.options.get("parameter")

    @property
    def code(self):
        return self.options.get("code", type(self).faultcode)

    def __rich__(self):
        return _renderable(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class UnterminatedQuoteError(CommandException):
    title = "unterminated quote"
    faultcode = FaultCode.UNTERMINATED_QUOTE


class UnknownCommandError(CommandException):
    title = "unknown command"
    faultcode = FaultCode.UNKNOWN_COMMAND


class MissingCommandError(CommandException):
    title = "missing command"
    faultcode = FaultCode.MISSING_COMMAND


class UnknownOptionError(CommandException):
    title = "unknown option"
    faultcode = FaultCode.UNKNOWN_OPTION


class MissingOptionValueError(CommandException):
    title = "missing option value"
    faultcode = FaultCode.MISSING_OPTION_VALUE


class TooManyArgumentsError(CommandException):
    title = "too many arguments"
    faultcode = FaultCode.TOO_MANY_ARGUMENTS


class MissingRequiredParameterError(CommandException):
    title = "missing required parameter"
    faultcode = FaultCode.MISSING_PARAMETER


class ConversionError(CommandException):
    """
    raised by converters (or wrapped around their ValueError/TypeError).

    extra options
    - type: the target type of the conversion.
    """
    title = "conversion failed"
    faultcode = FaultCode.CONVERSION_FAILED

    @property
    def type(self):
        return self.options.get("type")


class ConstraintViolationError(CommandException):
    """
    raised by constraints (or wrapped around their ValueError).

    extra options
    - value: the converted value that was rejected.
    """
    title = "constraint violation"
    faultcode = FaultCode.CONSTRAINT_VIOLATION

    @property
    def value(self):
        return self.options.get("value")


class CommandWarning(Warning):
    """
    base of parse-time warnings; rendered like exceptions, never fatal.
    """
    title = "command warning"
    faultcode = FaultCode.EMPTY_INLINE_VALUE

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, type(self).title)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def code(self):
        return self.options.get("code", type(self).faultcode)

    def __rich__(self):
        return _renderable(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(CommandWarning):
    title = "empty inline value"
    faultcode = FaultCode.EMPTY_INLINE_VALUE


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, exceptions
      are raised and warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "DeclarationError",
    "InvalidNameError",
    "ConflictError",
    "SequenceError",
    "CommandException",
    "UnterminatedQuoteError",
    "UnknownCommandError",
    "MissingCommandError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "TooManyArgumentsError",
    "MissingRequiredParameterError",
    "ConversionError",
    "ConstraintViolationError",
    "CommandWarning",
    "EmptyInlineValueWarning",
    "trigger",
)
