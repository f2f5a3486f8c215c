"""
Optonaut actions: what happens when an option is seen.

Overview
- Every action is a small frozen dataclass; the set is closed and known up
  front (Store, StoreConst, StoreTrue, StoreFalse, Append, AppendConst, Count,
  Callback, Help, Version). A variant only carries the fields it needs, e.g.
  StoreConst carries its const and Callback carries its function and extra
  arguments.
- Class-level traits describe how an option built on the action behaves:
  • typed: the action may consume values and accept a type.
  • always_typed: a type is inferred when none is given ("string", or
    "choice" when choices are given).
  • stores: the action writes into a destination.
- take_action() applies a variant to the per-parse state with an exhaustive
  match and returns the effective value.

Notes
- append/append_const rebuild the list on every call; a default list shared
  through the registry is never mutated in place.
- help/version do not print anything themselves: they raise ParserExit with
  the rendered text, and the parser decides whether to print and exit.
"""
from dataclasses import dataclass, field
from typing import Any, ClassVar, Callable
from types import MappingProxyType

from .faults import ExitCode, ParserExit, InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class Action:
    name: ClassVar[str] = ""
    typed: ClassVar[bool] = False
    always_typed: ClassVar[bool] = False
    stores: ClassVar[bool] = False
    constant: ClassVar[bool] = False

    def __str__(self):
        return self.name


@dataclass(frozen=True, slots=True)
class Store(Action):
    name = "store"
    typed = True
    always_typed = True
    stores = True


@dataclass(frozen=True, slots=True)
class StoreConst(Action):
    name = "store_const"
    stores = True
    constant = True

    const: Any = None


@dataclass(frozen=True, slots=True)
class StoreTrue(Action):
    name = "store_true"
    stores = True


@dataclass(frozen=True, slots=True)
class StoreFalse(Action):
    name = "store_false"
    stores = True


@dataclass(frozen=True, slots=True)
class Append(Action):
    name = "append"
    typed = True
    always_typed = True
    stores = True


@dataclass(frozen=True, slots=True)
class AppendConst(Action):
    name = "append_const"
    stores = True
    constant = True

    const: Any = None


@dataclass(frozen=True, slots=True)
class Count(Action):
    name = "count"
    stores = True


@dataclass(frozen=True, slots=True)
class Callback(Action):
    name = "callback"
    typed = True

    function: Callable = None
    args: tuple = ()
    kwargs: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class Help(Action):
    name = "help"


@dataclass(frozen=True, slots=True)
class Version(Action):
    name = "version"


ACTIONS = MappingProxyType({
    variant.name: variant for variant in (
        Store,
        StoreConst,
        StoreTrue,
        StoreFalse,
        Append,
        AppendConst,
        Count,
        Callback,
        Help,
        Version,
    )
})
"""Action name -> variant class, in declaration order."""


def build(name, /, *, const=None, function=None, args=(), kwargs=None):
    """
    Turn a (validated) action name and its settings into a variant.

    Only the settings the variant declares are used; the option layer has
    already rejected settings that do not belong to the action.

    Raises
    - InvalidConfigurationError: when name is not a known action.
    """
    match ACTIONS.get(name):
        case None:
            raise InvalidConfigurationError(f"invalid action: {name!r}")
        case variant if variant.constant:
            return variant(const)
        case variant if variant is Callback:
            return Callback(function, tuple(args), MappingProxyType(dict(kwargs or {})))
        case variant:
            return variant()


def _extend(existing, value):
    return [*(existing if isinstance(existing, list | tuple) else ()), value]


def take_action(option, alias, value, state, /):
    """
    Apply option.action for one occurrence of the option.

    Parameters
    - option: the Option that was matched.
    - alias: the option string as it appeared on the command line.
    - value: the coerced value (scalar for nargs == 1, list for nargs > 1,
      the option default for nargs == 0).
    - state: the per-parse accumulator; state.values is the result mapping
      and state.parser the owning parser.

    Returns
    - The effective value. For callbacks this is whatever the callback
      returned; nothing is stored on their behalf.

    Raises
    - ParserExit: for help and version, carrying the text to show.
    - RuntimeError: for an action outside the known set.
    """
    values = state.values

    match option.action:
        case Store():
            values[option.dest] = value
        case StoreConst(const=const):
            values[option.dest] = const
        case StoreTrue():
            values[option.dest] = True
        case StoreFalse():
            values[option.dest] = False
        case Append():
            values[option.dest] = _extend(values.get(option.dest), value)
        case AppendConst(const=const):
            values[option.dest] = _extend(values.get(option.dest), const)
        case Count():
            current = values.get(option.dest)
            if not isinstance(current, int) or isinstance(current, bool):
                current = 0
            values[option.dest] = current + 1
        case Callback(function=function, args=args, kwargs=kwargs):
            return function(option, alias, value, state, *args, **kwargs)
        case Help():
            raise ParserExit(ExitCode.SUCCESS, state.parser.format_help())
        case Version():
            raise ParserExit(ExitCode.SUCCESS, state.parser.format_version())
        case action:
            raise RuntimeError(f"unknown action {action!r}")

    return value


__all__ = (
    "Action",
    "Store",
    "StoreConst",
    "StoreTrue",
    "StoreFalse",
    "Append",
    "AppendConst",
    "Count",
    "Callback",
    "Help",
    "Version",
    "ACTIONS",
    "take_action",
)
