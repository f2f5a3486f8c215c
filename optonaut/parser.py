r"""
Optonaut parser: option registration front-end and argument tokenizer.

Overview
- Parser: owns an OptionRegistry and a HelpFormatter, holds the program
  metadata (prog, usage, description, epilog, version) and turns an argument
  vector into Values.
- ParseState: the accumulator of a single parse call (result mapping,
  positional arguments, remaining tokens). Callbacks receive it.
- Values: immutable parse result, options by dest plus positional arguments.

Tokenizer
The first element of the argument vector is the program name and is dropped.
Each remaining token is classified while SCANNING:
- "-" alone, or anything not starting with "-": positional.
- "--": every remaining token is positional; the parse ends (POSITIONAL_ONLY).
- "--name" / "--name=value": long option. An inline value is put back in
  front of the remaining tokens and becomes the first value, which is only
  allowed for options taking values.
- "-abc": short options, one per character. The first option that takes
  values gets the rest of the token ("-ofile" -> "-o" "file") and ends the
  group.

An option taking N values consumes exactly the next N tokens, dashes or not.
One value is handed over as a scalar, more as a list, none as the option
default. With greedy=True, a single-value option also swallows the following
tokens up to the next one starting with "-" and joins them with spaces, so
`--title Hello World -v` reads "Hello World". It is off by default because it
breaks ordinary positional arguments after an option value.

Failures
- unknown option string: UnknownOptionError (exit status 1)
- too few values, or a value for an option taking none:
  WrongValueCountError (exit status 2)
- rejected value (choice, type or callback): InvalidOptionValueError
  (exit status 3)
- help/version: ParserExit (exit status 0)
In shell mode these are printed (usage plus "<prog>: error: <message>" for
errors) and the process exits; otherwise they are raised.

Quick example:
    >>> parser = Parser(prog="tool")
    >>> _ = parser.add_option("-n", "--name")
    >>> _ = parser.add_option("-c", action="count")
    >>> values = parser.parse(["tool", "-c", "-c", "--name=foo", "pos1"])
    >>> values.name, values.c, values.positional
    ('foo', 2, ('pos1',))
"""
import shlex
import sys
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from rich.console import Console
from rich.text import Text

from .actions import take_action
from .coercion import convert_value
from .faults import *
from .faults import output
from .formatter import HelpFormatter
from .options import SETTINGS, Option
from .registry import OptionRegistry
from .utils import *
from .utils import _duplicate


class Phase(Enum):
    SCANNING = "scanning"
    POSITIONAL_ONLY = "positional-only"
    DONE = "done"


@dataclass
class ParseState:
    """
    Mutable accumulator owned by one parse call.

    - parser: the Parser running the parse.
    - values: dest -> value mapping, seeded with defaults and overrides.
    - positional: positional arguments in the order they were met.
    - rargs: tokens not consumed yet.
    - phase: where the tokenizer stands.
    """
    parser: Any
    values: dict
    positional: list = field(default_factory=list)
    rargs: deque = field(default_factory=deque)
    phase: Phase = Phase.SCANNING


class Values(metaclass=IntrospectableType):
    """
    Immutable parse result.

    - options: dest -> value for every option with a destination.
    - positional: positional arguments, in order.

    Option values are also reachable as values["dest"] and values.dest.
    A dest named "options" or "positional" is shadowed by the properties
    above and is only reachable as values["options"] / values["positional"].
    """

    __introspectable__ = (
        "options",
        "positional",
    )

    def __init__(self, options, positional):
        self._options = MappingProxyType(dict(options))
        self._positional = tuple(positional)

    def __getitem__(self, dest):
        return self._options[dest]

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__typename__!r} object has no attribute {name!r}") from None

    def __contains__(self, dest):
        return dest in self._options

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __eq__(self, other):
        if not isinstance(other, Values):
            return NotImplemented
        return self._options == other._options and self._positional == other._positional

    __hash__ = None


def _sanitize_parser_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the parser constructor settings.

    - prog: Unset (resolved lazily through progname()) or a string.
    - usage: Unset -> "%prog [options]"; None or "" hides the usage line.
    - description/epilog/version: strings ("" means absent).
    - formatter: Unset -> HelpFormatter(); otherwise anything exposing
      render_usage/render_help/render_version.
    - flags are coerced to bool.
    """
    if not isinstance(metadata["prog"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'prog' must be a string")

    metadata["usage"] = _sanitize_usage(cls, metadata["usage"])

    for name in ("description", "epilog", "version"):
        if not isinstance(metadata[name], str):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")

    if (formatter := metadata["formatter"]) is Unset:
        metadata["formatter"] = HelpFormatter()
    elif not all(callable(getattr(formatter, name, None)) for name in ("render_usage", "render_help", "render_version")):
        raise TypeError(f"{cls.__typename__} 'formatter' must provide render_usage, render_help and render_version")

    for name in ("add_help", "greedy", "shell", "colorful"):
        metadata[name] = bool(metadata[name])


def _sanitize_usage(cls, usage, /):
    if usage is Unset:
        return "%prog [options]"
    if usage is None:
        return ""
    if not isinstance(usage, str):
        raise TypeError(f"{cls.__typename__} 'usage' must be a string")
    return usage


class Parser(metaclass=IntrospectableType):
    """
    Command-line option parser.

    Properties
    - prog: program name used for %prog and in error lines.
    - usage, description, epilog, version: help and version texts.
    - conflict: "error" or "resolve" (see optonaut.registry).
    - options: registered options, in registration order.
    - formatter, greedy, shell, colorful: rendering and tokenizer settings.
    """

    __introspectable__ = (
        "usage",
        "description",
        "epilog",
        "version",
        "formatter",
        "greedy",
        "shell",
        "colorful",
    )
    __displayable__ = (
        "prog",
        "usage",
        "conflict",
        "options",
    )

    def __init__(
            self,
            prog=Unset,
            usage=Unset,
            description="",
            epilog="",
            version="",
            conflict="error",
            add_help=True,
            formatter=Unset,
            greedy=False,
            *,
            shell=False,
            colorful=False,
    ):
        """
        Create a parser.

        Parameters
        - prog: program name; defaults to __main__.__prog__ or the base name
          of sys.argv[0], looked up when needed.
        - usage: usage template ("%prog [options]" by default, None to hide).
        - description, epilog: texts around the option listing in help.
        - version: version text; when set a --version option is added.
        - conflict: "error" (default) or "resolve".
        - add_help: add -h/--help (default True).
        - formatter: help formatter (HelpFormatter() by default).
        - greedy: let single-value options absorb following words.
        - shell: print faults and exit instead of raising them.
        - colorful: style rendered faults.

        Raises
        - TypeError: a setting has the wrong type.
        - InvalidConfigurationError: unknown conflict policy.
        """
        metadata = {
            "prog": prog,
            "usage": usage,
            "description": description,
            "epilog": epilog,
            "version": version,
            "formatter": formatter,
            "add_help": add_help,
            "greedy": greedy,
            "shell": shell,
            "colorful": colorful,
        }
        _sanitize_parser_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._registry = OptionRegistry(conflict)

        if self._add_help:
            self.add_option("-h", "--help", action="help", help="show this help message and exit")
        if self._version:
            self.add_option("--version", action="version", help="show program's version number and exit")

    @property
    def prog(self):
        return coalesce(self._prog, progname())

    @property
    def conflict(self):
        return self._registry.conflict

    @property
    def options(self):
        return tuple(self._registry)

    # ── registration ──────────────────────────────────────────────────────

    def add_option(self, *strings, **settings):
        """
        Register an option, given either as an Option or as option strings
        plus settings.

        Returns
        - the registered Option.

        Raises
        - InvalidConfigurationError: unknown setting keys or invalid settings.
        - OptionConflictError: an option string is taken and the policy is "error".
        """
        if len(strings) == 1 and isinstance(strings[0], Option):
            if settings:
                raise InvalidConfigurationError("settings cannot be combined with an Option instance")
            option = strings[0]
        else:
            if unknown := sorted(set(settings) - set(SETTINGS)):
                raise InvalidConfigurationError("unknown settings: " + ", ".join(unknown))
            option = Option(*strings, **settings)
        return self._registry.add(option)

    def get_option(self, alias, /):
        return self._registry.find(alias)

    def has_option(self, alias, /):
        return self._registry.has(alias)

    def remove_option(self, alias, /):
        """
        Remove the option owning alias; strings it shadowed come back.

        Raises
        - OutOfBoundsError: no option owns alias.
        """
        return self._registry.remove(alias)

    def set_conflict_handler(self, policy, /):
        self._registry.set_conflict_handler(policy)

    def get_default_values(self):
        return {dest: _duplicate(value) for dest, value in self._registry.defaults.items()}

    def set_default(self, dest, value, /):
        self._registry.set_default(dest, value)

    def set_defaults(self, values=(), /, **kwargs):
        self._registry.set_defaults(values, **kwargs)

    # ── help and version ──────────────────────────────────────────────────

    def set_usage(self, usage, /):
        self._usage = _sanitize_usage(type(self), usage)

    def get_usage(self):
        return self._formatter.render_usage(self)

    def get_prog_name(self):
        return self.prog

    def get_description(self):
        return self._description

    def get_version(self):
        return self._version

    def format_help(self):
        return self._formatter.render_help(self)

    def format_version(self):
        return self._formatter.render_version(self)

    @staticmethod
    def _emit(text, file, /):
        console = output if file is Unset else Console(file=file, highlight=False)
        console.print(Text(text), end="", soft_wrap=True)

    def print_usage(self, file=Unset):
        self._emit(self.get_usage(), file)

    def print_help(self, file=Unset):
        self._emit(self.format_help(), file)

    def print_version(self, file=Unset):
        self._emit(self.format_version(), file)

    # ── faults ────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's context (prog, usage, shell, colorful).
        """
        trigger(fault, **options, prog=self.prog, usage=self.get_usage(), shell=self._shell, colorful=self._colorful)

    def error(self, message, code=ExitCode.NO_SUCH_OPTION):
        """
        Report message as a parse error: print usage and
        "<prog>: error: <message>" then exit with code in shell mode,
        raise OptionException otherwise.
        """
        self.trigger(OptionException(message, code=code))

    # ── parsing ───────────────────────────────────────────────────────────

    def parse(self, argv=Unset, overrides=None):
        """
        Parse an argument vector.

        Parameters
        - argv:
          • Unset: sys.argv.
          • str: split shell-style with shlex.split.
          • Iterable[str]: used as is.
          In every form the first element is the program name and is dropped.
        - overrides: mapping merged over the registry defaults before parsing.

        Returns
        - Values with the final option values and positional arguments.

        Raises (non-shell mode)
        - UnknownOptionError, WrongValueCountError, InvalidOptionValueError.
        - ParserExit for help/version.
        - TypeError for malformed argv or overrides.
        """
        match argv:
            case UnsetType():
                tokens = list(sys.argv)
            case str():
                tokens = shlex.split(argv)
            case Iterable():
                tokens = list(argv)
                if not all(isinstance(token, str) for token in tokens):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
            case _:
                raise TypeError("parse() argument must be a string or an iterable of strings")

        if overrides is not None and not isinstance(overrides, Mapping):
            raise TypeError("parse() overrides must be a mapping")

        state = ParseState(
            self,
            self.get_default_values() | dict(overrides or {}),
            rargs=deque(tokens[1:]),
        )
        try:
            self._parseargs(state)
        except ParserExit as exit:
            trigger(exit, shell=self._shell, colorful=self._colorful)

        return Values(state.values, state.positional)

    def _parseargs(self, state):
        while state.rargs:
            token = state.rargs.popleft()

            if token == "--":
                state.phase = Phase.POSITIONAL_ONLY
                state.positional.extend(state.rargs)
                state.rargs.clear()
                break

            if token == "-" or not token.startswith("-"):
                state.positional.append(token)
            elif token.startswith("--"):
                self._process_long_option(token, state)
            else:
                self._process_short_options(token, state)

        state.phase = Phase.DONE

    def _known_option(self, alias, /):
        if (option := self._registry.find(alias)) is None:
            self.trigger(UnknownOptionError("no such option: %s" % alias, alias=alias))
        return option

    def _process_long_option(self, token, state):
        alias, separator, value = token.partition("=")
        option = self._known_option(alias)

        if separator:
            if option.nargs < 1:
                self.trigger(WrongValueCountError(
                    "%s option does not take a value" % alias, alias=alias, option=option
                ))
            if not value:
                self.trigger(EmptyInlineValueWarning(
                    "empty inline value for option %s" % alias, alias=alias, option=option
                ))
            state.rargs.appendleft(value)

        self._process_option(option, alias, state)

    def _process_short_options(self, token, state):
        for index, character in enumerate(token[1:], start=2):
            alias = "-" + character
            option = self._known_option(alias)

            if option.nargs >= 1:
                # the rest of the token is the first value
                if remainder := token[index:]:
                    state.rargs.appendleft(remainder)
                self._process_option(option, alias, state)
                break

            self._process_option(option, alias, state)

    def _process_option(self, option, alias, state):
        nargs = option.nargs

        if len(state.rargs) < nargs:
            what = "an argument" if nargs == 1 else "%d arguments" % nargs
            self.trigger(WrongValueCountError(
                "%s option takes %s" % (alias, what), alias=alias, option=option
            ))

        if nargs == 0:
            value = coalesce(option.default)
        elif nargs == 1:
            value = state.rargs.popleft()
            if self._greedy:
                while state.rargs and not state.rargs[0].startswith("-"):
                    value += " " + state.rargs.popleft()
        else:
            value = [state.rargs.popleft() for _ in range(nargs)]

        try:
            take_action(option, alias, convert_value(option, alias, value), state)
        except OptionValueError as error:
            self.trigger(InvalidOptionValueError(str(error), alias=alias, option=option, value=value))


__all__ = (
    "Parser",
    "ParseState",
    "Values",
    "Phase",
)
