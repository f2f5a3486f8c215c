"""
Optonaut faults (errors, warnings and early exits) and rendering.

Scope
- ExitCode: the process status for every way a parse can end.
- Setup errors: InvalidConfigurationError, OptionConflictError and
  OutOfBoundsError. They are plain exceptions raised at the call that caused
  them and are never rendered or turned into an exit.
- OptionValueError: raised by value checks and by user callbacks to reject a
  value; the parser turns it into an InvalidOptionValueError.
- OptionException / OptionWarning / ParserExit: parse-time outcomes that carry
  a message plus options and know how to show themselves.
- trigger(): single entry point to surface a parse-time outcome.

Rendering
- Errors print the usage string followed by "<prog>: error: <message>" on
  stderr, then exit with the fault's code.
- Warnings print "<prog>: warning: <message>" on stderr and never stop a parse.
- ParserExit prints its text (help or version) on stdout and exits with 0.
- Styling is only applied when colorful=True; the palette can be overridden
  through a __styles__ mapping in __main__.

Integration
- The parser builds a fault and calls trigger(fault, **ctx). In shell mode the
  fault is rendered through rich and the process exits; otherwise the fault is
  raised (warnings go through the warnings module) so callers and tests can
  handle it.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset, progname

console = Console(stderr=True)
output = Console(highlight=False)


class ExitCode(IntEnum):
    """
    process status codes used when a parse ends early.

    - SUCCESS: help or version text was requested and shown.
    - NO_SUCH_OPTION: a token named an option nobody registered.
    - WRONG_VALUE_COUNT: too few values remained, or a value was attached to
      an option that takes none.
    - OPTION_VALUE: a value failed its choice or type check, or a callback
      rejected it.
    """
    SUCCESS           = 0
    NO_SUCH_OPTION    = 1
    WRONG_VALUE_COUNT = 2
    OPTION_VALUE      = 3


class InvalidConfigurationError(ValueError):
    """Inconsistent option or parser settings, reported when they are given."""


class OptionConflictError(ValueError):
    """An option string is already owned while the conflict policy is "error"."""

    def __init__(self, alias, /):
        super().__init__(f"duplicate definition of option {alias!r}")
        self.alias = alias


class OutOfBoundsError(LookupError):
    """No registered option owns the given option string."""

    def __init__(self, alias, /):
        super().__init__(f"option {alias!r} does not exist")
        self.alias = alias


class OptionValueError(Exception):
    """A value was rejected by a choice/type check or by a callback."""


def _palette(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class OptionException(Exception):
    """
    base type for parse-time errors.

    options
    - prog: program name shown before "error:".
    - usage: usage text printed above the message (may be empty).
    - shell: render and exit instead of raising.
    - colorful: apply the palette when rendering.
    - code: overrides the class-level exit code.
    - any extra context (alias, option, value) is kept for handlers.
    """
    code = ExitCode.NO_SUCH_OPTION

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)
        self.code = options.get("code", type(self).code)

    def __rich__(self):
        styles = _palette({
            "usage": "#9CA3AF",  # muted gray usage line
            "prog-name": "bold #E6E6F0",  # near-white program name
            "error-label": "bold #FF4DA6",  # pinky "error" label
            "error-message": "#C8C8D0",  # soft light gray message
        })

        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""

        lines = []
        if usage := self.options.get("usage"):
            lines.append(Text(usage.rstrip("\n"), styler("usage")))
        lines.append(Text.assemble(
            (self.options.get("prog") or progname(), styler("prog-name")),
            ": ",
            ("error", styler("error-label")),
            ": ",
            (str(self), styler("error-message")),
        ))
        return Group(*lines)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(self.code)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(OptionException):
    code = ExitCode.NO_SUCH_OPTION


class WrongValueCountError(OptionException):
    code = ExitCode.WRONG_VALUE_COUNT


class InvalidOptionValueError(OptionException):
    code = ExitCode.OPTION_VALUE


class OptionWarning(Warning):
    """
    base type for parse-time warnings; same options as OptionException.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _palette({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "warning-label": "bold #FFB400",  # amber "warning" label
            "warning-message": "#D6D6DE",  # slightly lighter gray body
        })

        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""

        return Text.assemble(
            (self.options.get("prog") or progname(), styler("prog-name")),
            ": ",
            ("warning", styler("warning-label")),
            ": ",
            (str(self), styler("warning-message")),
        )

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(OptionWarning): ...


class ParserExit(Exception):
    """
    early, successful end of a parse (help or version requested).

    the text to show travels with the exception; in shell mode it is written
    to stdout and the process exits with the code, otherwise it is raised.
    """

    def __init__(self, code=ExitCode.SUCCESS, message="", /, **options):
        super().__init__(code, message)
        self.code = code
        self.message = message
        self.options = MappingProxyType(options)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        if self.message:
            output.print(Text(self.message), end="", soft_wrap=True)
        sys.exit(self.code)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.code, self.message, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into a copy of the fault via copy.replace() before
      it is triggered; the original fault is left untouched.

    typical options
    - prog, usage, shell, colorful, plus any context the handler may want
      (alias, option, value).
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
    "ExitCode",
    "InvalidConfigurationError",
    "OptionConflictError",
    "OutOfBoundsError",
    "OptionValueError",
    "OptionException",
    "UnknownOptionError",
    "WrongValueCountError",
    "InvalidOptionValueError",
    "OptionWarning",
    "EmptyInlineValueWarning",
    "ParserExit",
    "trigger",
)
