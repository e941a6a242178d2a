r"""
foxcli resolver: the per-invocation state machine and the parse() entry point.

States
- SEEK_COMMAND_OR_OPTION: a word may select a subcommand, options may follow.
- IN_OPTIONS: at least one option of the active scope was consumed.
- IN_ARGUMENTS: every further token is positional (raw text), by ascending index.
- DONE / FAILED: absorbing; feeding again raises RuntimeError.

Flow
- Entering a scope (the program, or a selected subcommand) obtains a fresh
  handler from the command's provider.
- Quoted words of a raw line never select a subcommand.
- Options resolve by exact, case-sensitive name or alias. Short clusters use
  one-letter names: -abc is -a -b -c, and the first value-taking option takes
  the rest of the cluster (-ofile) or the next token (-o file).
- Repeated options: last occurrence wins, containers accumulate.
- finish() checks the selected command, then runs the value pipeline for every
  scope of the path, root first, and returns the Invocation.

Faults are raised on the first failure, enriched with the command path and a
position-first message ("unknown option '--x' at third position").
"""
import difflib
import enum
import logging
import sys
from typing import NamedTuple

from .descriptors import Program
from .faults import *
from .tokens import TokenKind, tokenize
from .utils import Unset, coalesce, ordinal
from .values import Sources, resolve

logger: logging.Logger = logging.getLogger("foxcli.resolver")


class State(enum.Enum):
    SEEK_COMMAND_OR_OPTION = "seek-command-or-option"
    IN_OPTIONS = "in-options"
    IN_ARGUMENTS = "in-arguments"
    DONE = "done"
    FAILED = "failed"


class Scope(NamedTuple):
    """
    One level of the selected command path: the command, its fresh handler
    (None without a provider) and its converted values by parameter name.
    """
    command: object
    handler: object
    values: object


class Invocation(NamedTuple):
    """
    Result of one parse: the program and one Scope per level of the path.
    """
    program: object
    scopes: tuple

    @property
    def path(self):
        return tuple(scope.command for scope in self.scopes)

    @property
    def command(self):
        return self.scopes[-1].command

    @property
    def handler(self):
        return self.scopes[-1].handler

    @property
    def values(self):
        return self.scopes[-1].values

    @property
    def runnable(self):
        return self.command.runnable

    @property
    def route(self):
        return " ".join(command.name for command in self.path)


class Resolver:
    """
    Per-invocation state machine; never shared between parses.

    Parameters
    - program: Program, the grammar to resolve against.
    - sources: Sources for absent parameters (default: Sources()).
    - shell / fancy / colorful: runtime flags used when warnings are surfaced
      (default: the program's own flags).
    """

    def __init__(self, program, sources=Unset, *, shell=Unset, fancy=Unset, colorful=Unset):
        if not isinstance(program, Program):
            raise TypeError("Resolver() argument must be a program")
        if not isinstance(sources, Sources | Unset):
            raise TypeError("Resolver() 'sources' must be a Sources instance")

        self._program = program
        self._sources = Sources() if sources is Unset else sources
        self._flags = {
            "program": program.name,
            "shell": coalesce(shell, program.shell),
            "fancy": coalesce(fancy, program.fancy),
            "colorful": coalesce(colorful, program.colorful),
        }
        self._state = State.SEEK_COMMAND_OR_OPTION
        self._scopes = []
        self._pending = None
        self._position = 0
        self._enter(program)

    @property
    def state(self):
        return self._state

    @property
    def flags(self):
        """
        Runtime flags merged into every surfaced fault.
        """
        return dict(self._flags)

    @property
    def path(self):
        return tuple(command.name for command, _, _ in self._scopes)

    @property
    def command(self):
        return self._scopes[-1][0]

    def _enter(self, command):
        handler = command.provider() if command.provider else None
        self._scopes.append((command, handler, {}))
        self._position = 0
        logger.debug("entered scope %r (%s)", " ".join(self.path), command.kind.value)

    def _move(self, state):
        if state is not self._state:
            logger.debug("%s -> %s", self._state.name, state.name)
            self._state = state

    def _store(self, parameter, text):
        raw = self._scopes[-1][2]
        if parameter.multiple:
            raw.setdefault(parameter, []).append(text)
        else:
            raw[parameter] = [text]

    def _hint(self, input, candidates, kind):
        route = " ".join(self.path)
        if suggestions := difflib.get_close_matches(input, candidates, 5):
            return "did you mean %r? run '%s --help' to see the available %s" % (suggestions[0], route, kind)
        return "run '%s --help' to see the available %s" % (route, kind)

    def _option(self, name, token, spelling):
        if (option := self.command.option(name)) is None:
            candidates = [
                ("--" if len(alias) > 1 else "-") + alias
                for option in self.command.options.values()
                for alias in option.names
            ]
            raise UnknownOptionError(
                "unknown option %r at %s position" % (spelling, ordinal(token.index)),
                path=self.path,
                input=spelling,
                index=token.index,
                hint=self._hint(spelling, candidates, "options")
            )
        return option

    def feed(self, token):
        """
        Advance the machine by one token.

        Raises
        - RuntimeError: when the machine is DONE or FAILED.
        - CommandException: on the first fault (the machine moves to FAILED).
        """
        if self._state in (State.DONE, State.FAILED):
            raise RuntimeError("cannot feed a resolver in %s state" % self._state.name)
        try:
            self._feed(token)
        except Exception:
            self._move(State.FAILED)
            raise

    def _feed(self, token):
        if self._pending is not None:
            option, spelling = self._pending
            if token.kind is not TokenKind.WORD:
                raise MissingOptionValueError(
                    "option %r expects a value but got %r at %s position" % (spelling, token.text, ordinal(token.index)),
                    path=self.path,
                    input=spelling,
                    parameter=option.name,
                    index=token.index,
                    hint="pass a value after %s (for example: %s <value>)" % (spelling, spelling)
                )
            self._pending = None
            return self._store(option, token.text)

        if self._state is State.IN_ARGUMENTS:
            return self._positional(token)

        match token.kind:
            case TokenKind.TERMINATOR:
                self._move(State.IN_ARGUMENTS)
            case TokenKind.LONG:
                self._long(token)
            case TokenKind.SHORT:
                self._short(token)
            case TokenKind.WORD:
                self._word(token)

    def _long(self, token):
        spelling = "--" + token.name
        option = self._option(token.name, token, spelling)
        self._move(State.IN_OPTIONS)

        if token.value is None:
            if option.flag:
                return self._store(option, "true")
            self._pending = option, spelling
            return

        if not token.value:
            trigger(EmptyInlineValueWarning(
                "empty inline value for option %r at %s position" % (spelling, ordinal(token.index)),
                path=self.path,
                input=spelling,
                index=token.index,
                hint="add a value after the separator (for example: %s=<value>)" % spelling
            ), **self._flags)
        self._store(option, token.value)

    def _short(self, token):
        cluster = token.name
        for offset, letter in enumerate(cluster):
            option = self._option(letter, token, "-" + letter)
            self._move(State.IN_OPTIONS)
            if option.flag:
                self._store(option, "true")
                continue
            if rest := cluster[offset + 1:]:
                self._store(option, rest)
            else:
                self._pending = option, "-" + letter
            break

    def _word(self, token):
        command = self.command
        if not token.quoted and (subcommand := command.subcommand(token.text)) is not None:
            self._enter(subcommand)
            self._move(State.SEEK_COMMAND_OR_OPTION)
            return

        if command.arguments:
            self._move(State.IN_ARGUMENTS)
            return self._positional(token)

        if command.subcommands:
            raise UnknownCommandError(
                "unknown command %r at %s position" % (token.text, ordinal(token.index)),
                path=self.path,
                input=token.text,
                index=token.index,
                hint=self._hint(token.text, list(command.subcommands), "commands")
            )

        raise TooManyArgumentsError(
            "unexpected argument %r at %s position" % (token.text, ordinal(token.index)),
            path=self.path,
            input=token.text,
            index=token.index,
            hint="%r takes no arguments" % " ".join(self.path)
        )

    def _positional(self, token):
        sequence = self.command.sequence
        if self._position >= len(sequence):
            raise TooManyArgumentsError(
                "unexpected argument %r at %s position" % (token.text, ordinal(token.index)),
                path=self.path,
                input=token.text,
                index=token.index,
                hint="%r takes at most %d argument%s" % (
                    " ".join(self.path), len(sequence), "s" * (len(sequence) != 1)
                )
            )
        argument = sequence[self._position]
        self._store(argument, token.text)
        if not argument.multiple:
            self._position += 1

    def finish(self):
        """
        Check the selected command, run the value pipeline and return the Invocation.

        Raises
        - RuntimeError: when the machine is DONE or FAILED.
        - CommandException: on the first fault (the machine moves to FAILED).
        """
        if self._state in (State.DONE, State.FAILED):
            raise RuntimeError("cannot finish a resolver in %s state" % self._state.name)
        try:
            invocation = self._finish()
        except Exception:
            self._move(State.FAILED)
            raise
        self._move(State.DONE)
        return invocation

    def _finish(self):
        if self._pending is not None:
            option, spelling = self._pending
            raise MissingOptionValueError(
                "option %r expects a value" % spelling,
                path=self.path,
                input=spelling,
                parameter=option.name,
                hint="pass a value after %s (for example: %s <value>)" % (spelling, spelling)
            )

        command = self.command
        if not command.runnable and command.subcommands:
            raise MissingCommandError(
                "%r expects a command" % " ".join(self.path),
                path=self.path,
                hint="choose one of: %s" % ", ".join(command.subcommands)
            )

        path = self.path
        scopes = []
        for depth, (command, handler, raw) in enumerate(self._scopes, 1):
            values = resolve(command, handler, raw, self._sources, path[:depth])
            scopes.append(Scope(command, handler, values))
        return Invocation(self._program, tuple(scopes))


def parse(program, source=Unset, /, *, sources=Unset, shell=Unset, fancy=Unset, colorful=Unset):
    """
    Parse an argument vector or a raw line against a program.

    Parameters
    - program: Program.
    - source: str (raw line), Iterable[str] (pre-split vector) or Unset for sys.argv[1:].
    - sources: Sources for absent parameters.
    - shell / fancy / colorful: override the program's runtime flags for this call.

    Returns
    - Invocation.

    Faults
    - every CommandException goes through trigger() with the runtime flags:
      raised when not in shell mode, otherwise rendered to stderr before exiting
      with status 1.
    """
    resolver = Resolver(program, sources, shell=shell, fancy=fancy, colorful=colorful)
    try:
        for token in tokenize(coalesce(source, sys.argv[1:])):
            resolver.feed(token)
        return resolver.finish()
    except CommandException as fault:
        trigger(fault, **resolver.flags)


__all__ = (
    "State",
    "Scope",
    "Invocation",
    "Resolver",
    "parse",
)
