r"""
Optonaut option specifications.

Overview
- Option: validated description of one command-line option: its option
  strings (aliases), action, value type, number of values (nargs),
  destination, default, const, choices, callback and help metadata.
- ValueType: the value types an option can convert to.
- option(): functional shorthand for Option(...).

Construction pipeline (runs once, in this order)
1. Option strings are collected and checked: at least one, each shaped like
   "-x" or "--name", no duplicates.
2. The action name is checked against the closed action set.
3. Derived settings are filled in:
   • dest: longest option name, compared with the leading dashes stripped
     ("-x", "--y" gives "x"; first one wins a tie); cleared for callback,
     help and version.
   • default by action: store_true -> False, store_false -> True,
     append/append_const -> [], count -> 0.
   • nargs: 1 for store, append and callback; 0 for every other action.
   • type: store/append without a type become "choice" when choices are
     given and "string" otherwise.
   • explicit settings then override the derived ones; metavar falls back to
     the upper-cased dest.
4. Cross-field rules are enforced by the ordered CHECKS list. The first
   broken rule raises InvalidConfigurationError; nothing is silently fixed.

After construction an option only changes through its registry, which may
disable and re-enable option strings during conflict resolution.

Quick example:
    >>> verbose = Option("-v", "--verbose", action="count")
    >>> verbose.dest, verbose.default, verbose.nargs
    ('verbose', 0, 0)
    >>> Option("-o", "--output").metavar
    'OUTPUT'
"""
import builtins
import re
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum

from . import actions
from .faults import InvalidConfigurationError
from .utils import *

SUPPRESS_HELP = "~~~SUPPRESS~HELP~~~"
"""Help text that hides an option from the generated help listing."""


class ValueType(StrEnum):
    STRING = "string"
    INT    = "int"
    LONG   = "long"
    FLOAT  = "float"
    CHOICE = "choice"


def _sanitize_strings(cls, metadata, /):
    """
    Internal: validate the option strings.

    Accepted shapes are a single dash followed by one character ("-x") and a
    double dash followed by at least one character ("--name"). "--name=..."
    is refused since '=' separates inline values on the command line.
    """
    if not (strings := metadata["strings"]):
        raise InvalidConfigurationError(f"{cls.__typename__} must have at least one option string")

    sanitized = []
    for string in strings:
        if not isinstance(string, str):
            raise InvalidConfigurationError(f"{cls.__typename__} strings must be strings, not {type(string).__name__}")
        elif not re.fullmatch(r"-[^-\s]|--[^=\s]+", string):
            raise InvalidConfigurationError(
                f"invalid option string {string!r}: must be '-' followed by one character "
                f"or '--' followed by a name"
            )
        elif string in sanitized:
            raise InvalidConfigurationError(f"{cls.__typename__} strings cannot contain duplicates ({string!r})")
        sanitized.append(string)

    metadata["strings"] = tuple(sanitized)


def _sanitize_action(cls, metadata, /):
    if not isinstance(action := metadata["action"], str) or action not in actions.ACTIONS:
        raise InvalidConfigurationError(f"invalid action: {action!r}")


def _derive_settings(cls, metadata, /):
    """
    Internal: fill in dest, default, nargs, type and metavar.

    Derivation happens before validation so that checks see the final
    values. Settings given explicitly (anything but Unset) always win.
    """
    variant = actions.ACTIONS[action := metadata["action"]]

    dest = max((string.lstrip("-") for string in metadata["strings"]), key=len)
    default = Unset
    match action:
        case "store_true":
            default = False
        case "store_false":
            default = True
        case "append" | "append_const":
            default = []
        case "count":
            default = 0
        case "callback" | "help" | "version":
            dest = None

    if metadata["type"] is Unset and variant.always_typed:
        metadata["type"] = ValueType.CHOICE if metadata["choices"] is not Unset else ValueType.STRING

    metadata["dest"] = coalesce(metadata["dest"], dest)
    metadata["default"] = coalesce(metadata["default"], default)
    metadata["nargs"] = coalesce(metadata["nargs"], 1 if variant.typed else 0)
    metadata["help"] = coalesce(metadata["help"], "")
    if isinstance(dest := metadata["dest"], str):
        metadata["metavar"] = coalesce(metadata["metavar"], dest.upper())
    else:
        metadata["metavar"] = coalesce(metadata["metavar"], "")


def _check_const(cls, metadata, /):
    if metadata["const"] is not Unset and not actions.ACTIONS[metadata["action"]].constant:
        raise InvalidConfigurationError(f"'const' must not be supplied for action {metadata['action']!r}")


def _check_type(cls, metadata, /):
    if (type := metadata["type"]) is Unset:
        metadata["type"] = None
        return
    try:
        metadata["type"] = ValueType(type)
    except ValueError:
        raise InvalidConfigurationError(f"invalid option type: {type!r}") from None
    if not actions.ACTIONS[metadata["action"]].typed:
        raise InvalidConfigurationError(f"must not supply a type for action {metadata['action']!r}")


def _check_choices(cls, metadata, /):
    choices = metadata["choices"]
    if metadata["type"] == ValueType.CHOICE:
        if choices is Unset:
            raise InvalidConfigurationError("must supply a list of choices for type 'choice'")
        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise InvalidConfigurationError(
                f"choices must be a list of strings ({type(choices).__name__!r} supplied)"
            )
        choices = tuple(choices)
        if not all(isinstance(choice, str) for choice in choices):
            raise InvalidConfigurationError("choices must be a list of strings")
        metadata["choices"] = choices
    elif choices is not Unset:
        raise InvalidConfigurationError(f"must not supply choices for type '{metadata['type']}'")
    else:
        metadata["choices"] = None


def _check_nargs(cls, metadata, /):
    if not isinstance(nargs := metadata["nargs"], int) or isinstance(nargs, bool):
        raise InvalidConfigurationError(f"{cls.__typename__} 'nargs' must be an integer")
    if nargs < 0:
        raise InvalidConfigurationError(f"{cls.__typename__} 'nargs' cannot be negative")


def _check_callback(cls, metadata, /):
    callback, args, kwargs = metadata["callback"], metadata["callback_args"], metadata["callback_kwargs"]
    if metadata["action"] == "callback":
        if callback is Unset:
            raise InvalidConfigurationError("'callback' must be supplied for action 'callback'")
        if not callable(callback):
            raise InvalidConfigurationError(f"callback not callable: {callback!r}")
        if args is not Unset and (isinstance(args, str) or not isinstance(args, Sequence)):
            raise InvalidConfigurationError(f"'callback_args', if supplied, must be a sequence, not {args!r}")
        if kwargs is not Unset and not isinstance(kwargs, Mapping):
            raise InvalidConfigurationError(f"'callback_kwargs', if supplied, must be a mapping, not {kwargs!r}")
        metadata["callback_args"] = tuple(coalesce(args, ()))
        metadata["callback_kwargs"] = dict(coalesce(kwargs, {}))
        return

    if callback is not Unset:
        raise InvalidConfigurationError(f"'callback' supplied ({callback!r}) for non-callback action")
    if args is not Unset:
        raise InvalidConfigurationError("'callback_args' supplied for non-callback action")
    if kwargs is not Unset:
        raise InvalidConfigurationError("'callback_kwargs' supplied for non-callback action")
    metadata["callback"] = None
    metadata["callback_args"] = None
    metadata["callback_kwargs"] = None


def _check_dest(cls, metadata, /):
    if (dest := metadata["dest"]) is not None and not isinstance(dest, str):
        raise InvalidConfigurationError(f"{cls.__typename__} 'dest' must be a string")
    if actions.ACTIONS[metadata["action"]].stores and not dest:
        raise InvalidConfigurationError(f"action {metadata['action']!r} requires a destination")


def _check_text(cls, metadata, /):
    for name in ("help", "metavar"):
        if not isinstance(metadata[name], str):
            raise InvalidConfigurationError(f"{cls.__typename__} {name!r} must be a string")


CHECKS = (
    _check_const,
    _check_type,
    _check_choices,
    _check_nargs,
    _check_callback,
    _check_dest,
    _check_text,
)
"""Cross-field rules, applied in order after the derived settings are known."""

SETTINGS = (
    "action",
    "type",
    "dest",
    "default",
    "const",
    "choices",
    "nargs",
    "help",
    "callback",
    "callback_args",
    "callback_kwargs",
    "metavar",
)
"""Keyword settings an Option accepts, besides its option strings."""


class Option(metaclass=IntrospectableType):
    """
    A validated command-line option.

    Properties
    - strings: active option strings, in declaration order.
    - disabled: option strings taken away by conflict resolution.
    - action: the action variant (see optonaut.actions); action.name is one
      of store, store_const, store_true, store_false, append, append_const,
      count, callback, help or version.
    - type: ValueType or None; nargs: number of values consumed.
    - dest: key in the parse result (None for callback/help/version unless
      given); default: initial value, Unset when the option has none.
    - const, choices, callback, callback_args, callback_kwargs: set only for
      the actions/types that use them, None otherwise (const stays Unset).
    - help, metavar: help listing metadata.
    """

    __introspectable__ = (
        "strings",
        "disabled",
        "action",
        "type",
        "nargs",
        "dest",
        "default",
        "const",
        "choices",
        "help",
        "metavar",
        "callback",
        "callback_args",
        "callback_kwargs",
    )
    __displayable__ = (
        "strings",
        "action",
        "type",
        "nargs",
        "dest",
        "default",
    )

    def __init__(
            self,
            *strings,
            action="store",
            type=Unset,
            dest=Unset,
            default=Unset,
            const=Unset,
            choices=Unset,
            nargs=Unset,
            help=Unset,
            callback=Unset,
            callback_args=Unset,
            callback_kwargs=Unset,
            metavar=Unset,
    ):
        """
        Build and validate an option.

        Parameters
        - strings: one or more option strings, e.g. "-o", "--output".
        - action: action name (default "store").
        - type: "string", "int", "long", "float" or "choice" (or a ValueType).
          Only store, append and callback accept a type.
        - dest: result key; derived from the longest option string.
        - default: initial value; some actions imply one (see module notes).
        - const: value stored by store_const/append_const.
        - choices: allowed strings; implies type "choice" for store/append.
        - nargs: number of values consumed (>= 0).
        - help: help text, or SUPPRESS_HELP to hide the option.
        - callback: callable for action "callback", called as
          callback(option, alias, value, state, *callback_args, **callback_kwargs).
        - callback_args / callback_kwargs: extra callback arguments.
        - metavar: value placeholder in help (default: upper-cased dest).

        Raises
        - InvalidConfigurationError: for any inconsistent combination.
        """
        metadata = {
            "strings": strings,
            "action": action,
            "type": type,
            "dest": dest,
            "default": default,
            "const": const,
            "choices": choices,
            "nargs": nargs,
            "help": help,
            "callback": callback,
            "callback_args": callback_args,
            "callback_kwargs": callback_kwargs,
            "metavar": metavar,
        }
        _sanitize_strings(builtins.type(self), metadata)
        _sanitize_action(builtins.type(self), metadata)
        _derive_settings(builtins.type(self), metadata)
        for check in CHECKS:
            check(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._disabled = ()
        self._action = actions.build(
            action,
            const=coalesce(const),
            function=metadata["callback"],
            args=metadata["callback_args"] or (),
            kwargs=metadata["callback_kwargs"],
        )

    def _disable(self, string, /):
        """
        Registry-only: move an active option string to the disabled ones.
        """
        if string not in self._strings:
            raise ValueError(f"string {string!r} is not part of the option")
        self._strings = tuple(active for active in self._strings if active != string)
        self._disabled += (string,)

    def _enable(self, string, /):
        """
        Registry-only: bring a disabled option string back.
        """
        if string not in self._disabled:
            raise ValueError(f"string {string!r} is not disabled on the option")
        self._disabled = tuple(disabled for disabled in self._disabled if disabled != string)
        self._strings += (string,)

    def __str__(self):
        return "/".join(self._strings)


def option(*strings, **settings):
    """
    Shorthand for Option(*strings, **settings) that also accepts an existing
    Option (returned as-is) so call sites can take either form.
    """
    if len(strings) == 1 and isinstance(strings[0], Option) and not settings:
        return strings[0]
    return Option(*strings, **settings)


__all__ = (
    "Option",
    "ValueType",
    "SUPPRESS_HELP",
    "SETTINGS",
    "option",
)
