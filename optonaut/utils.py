"""
Optonaut utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the option, registry and parser layers.
- Stable enough for consumers, but written first for the package itself.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “no value was given”, kept apart from None.
  • Falsey, printable as "Unset", and sealed against subclassing.

- coalesce(value, default=None)
  • Swap Unset for a concrete default; None/0/""/[] are kept as they are.

- rename(callable, name) / @rename("name")
  • Give generated callables a readable __name__/__qualname__.

- mirror("attr")
  • Read-only property over a private field (self._attr). Containers are
    handed out as fresh copies so callers cannot reach the internal state.

- IntrospectableType
  • Metaclass adding __typename__, mirrored properties for every name in
    __introspectable__, and stable __repr__/__rich_repr__ implementations.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> class Box(metaclass=IntrospectableType):
    ...     __introspectable__ = ("items",)
    ...     def __init__(self):
    ...         self._items = [1, 2]
    >>> Box()
    box(items=[1, 2])
"""
import builtins
import functools
import operator
import os
import re
import sys
from collections.abc import Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for “not provided”.

    An option may legitimately default to None, so the package needs a marker
    that is not None to tell “no default” apart from “default is None”. The one
    instance, Unset, is what option and parser signatures use.

    Characteristics
    - bool(Unset) is False, yet Unset is neither None nor 0.
    - repr(Unset) -> "Unset".
    - UnsetType() always returns the same object.
    - Cannot be subclassed.
    """

    def __or__(self, other, /):
        """
        Allow `UnsetType | T` in annotations.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Allow `T | UnsetType` in annotations.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
The “not provided” sentinel.

Use it as a default wherever None is a meaningful user value, and materialize
it with coalesce() at the point a concrete value is needed.
"""


def coalesce(object, default=None, /):
    """
    Replace the Unset sentinel with a default.

    Parameters
    - object: any value, possibly Unset.
    - default: returned only when object is Unset (None when omitted).

    Returns
    - object when it is not Unset, default otherwise. Falsey values such as
      None, 0, "" or [] are returned unchanged.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator that does.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError: on a wrong arity, a non-callable target, a non-string name,
      or a callable whose names cannot be updated (e.g. a builtin).
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


def progname():
    """
    Name of the running program as shown in usage and error lines.

    A __prog__ attribute on __main__ wins; otherwise the base name of
    sys.argv[0] is used (empty when the interpreter has no argv).
    """
    main = __import__("__main__")
    try:
        return getattr(main, "__prog__")
    except AttributeError:
        return os.path.basename(sys.argv[0]) if sys.argv else ""


def _duplicate(object):
    """
    Copy plain containers recursively, leave everything else untouched.

    Lists, tuples, dicts/mappings and sets come back as new containers of the
    same family (mappings as dict, sets as set). Strings and any other object
    are returned as-is.
    """
    if isinstance(object, list):
        return list(map(_duplicate, object))
    elif isinstance(object, tuple) and type(object) is tuple:
        return tuple(map(_duplicate, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_duplicate, object.values())))
    elif isinstance(object, Set):
        return set(map(_duplicate, object))
    return object


def mirror(name, /):
    """
    Build a read-only property that exposes self._{name}.

    Containers are duplicated on every access, so mutating what the property
    returned never changes the instance.

    Example
    - With self._strings set, `strings = mirror("strings")` publishes it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _duplicate(getattr(self, "_" + name))

    return property(getter)


class IntrospectableType(type):
    """
    Metaclass for the package's descriptive objects (options, parsers, results).

    Responsibilities
    - Derive __typename__ from the class name (CamelCase -> kebab-case); it is
      used in diagnostics such as "option 'nargs' cannot be negative".
    - Publish every name in __introspectable__ as a read-only mirror() property
      backed by the matching private field.
    - Provide __repr__ and __rich_repr__ listing __displayable__ (or, when
      unset, __introspectable__) so rich.pretty and plain repr agree.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "progname",

    # Types
    "UnsetType",
    "IntrospectableType",

    # Constants
    "Unset",
)
