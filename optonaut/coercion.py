"""
Optonaut value coercion.

Pure checks that turn raw strings into typed values. Each check receives the
option, the option string that was used and one raw value, and either returns
the (possibly converted) value or raises OptionValueError. Checks run in the
order of CHECKS: choice membership first, then the builtin type.
"""
import re

from .faults import OptionValueError

_FLOAT = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def check_choice(option, alias, value, /):
    """
    Reject a value that is not exactly one of option.choices.

    Options without choices accept anything.
    """
    if option.choices is not None and value not in option.choices:
        raise OptionValueError("option %s: invalid choice: %s (choose from %s)" % (
            alias, value, ", ".join(option.choices)
        ))
    return value


def check_builtin(option, alias, value, /):
    """
    Convert a value according to option.type.

    - int/long: the trimmed text must be the canonical form of an integer
      ("42", "-7"); "42.5", "0x1f" or "abc" are rejected.
    - float: the trimmed text must be a plain decimal or scientific literal.
    - string, choice or no type: the value is returned unchanged.
    """
    match option.type:
        case "int" | "long":
            text = value.strip()
            try:
                result = int(text)
            except ValueError:
                result = None
            if result is None or str(result) != text:
                raise OptionValueError("option %s: invalid %s value: %s" % (alias, option.type, value))
            return result
        case "float":
            text = value.strip()
            if not _FLOAT.fullmatch(text):
                raise OptionValueError("option %s: invalid %s value: %s" % (alias, option.type, value))
            return float(text)
        case _:
            return value


CHECKS = (check_choice, check_builtin)


def convert_value(option, alias, value, /):
    """
    Run every check in CHECKS over a value, or over each item of a list.

    Options that take no values (nargs == 0) are passed through untouched,
    since their value is the option default rather than user input.
    """
    if option.nargs == 0:
        return value

    def convert(item):
        for check in CHECKS:
            item = check(option, alias, item)
        return item

    if isinstance(value, list):
        return list(map(convert, value))
    return convert(value)


__all__ = (
    "check_choice",
    "check_builtin",
    "convert_value",
)
