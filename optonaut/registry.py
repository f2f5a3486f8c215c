"""
Optonaut option registry.

The registry owns the options a parser knows about:
- the options themselves, in registration order;
- an index from every active option string to its owning option;
- a shadow history per option string, i.e. which options lost that string to
  a later registration (most recent last);
- the defaults mapping, seeded from each option's dest/default.

Conflict policy
- "error" (default): registering an option whose string is already owned
  raises OptionConflictError and leaves the registry untouched.
- "resolve": the newcomer wins. An owner left with only the contested string
  is removed entirely; otherwise only that string is disabled on the owner,
  which is remembered in the string's shadow history.

Removing an option hands each of its strings back to the most recent, still
registered option that lost it, so resolve-then-remove restores what was
shadowed.
"""
from collections import defaultdict
from types import MappingProxyType

from .faults import InvalidConfigurationError, OptionConflictError, OutOfBoundsError
from .utils import Unset

POLICIES = ("error", "resolve")


def _sanitize_policy(policy, /):
    if policy not in POLICIES:
        raise InvalidConfigurationError("the conflict handler must be one of 'error' or 'resolve'")
    return policy


class OptionRegistry:
    """
    Ordered collection of options with alias lookup and conflict handling.

    Iterating yields the registered options in registration order.
    """

    def __init__(self, conflict="error"):
        self._conflict = _sanitize_policy(conflict)
        self._options = []
        self._index = {}
        self._shadows = defaultdict(list)
        self._defaults = {}

    @property
    def conflict(self):
        return self._conflict

    @property
    def defaults(self):
        """Read-only view of the dest -> default mapping."""
        return MappingProxyType(self._defaults)

    def set_conflict_handler(self, policy, /):
        self._conflict = _sanitize_policy(policy)

    def __iter__(self):
        return iter(tuple(self._options))

    def __len__(self):
        return len(self._options)

    def __contains__(self, alias):
        return alias in self._index

    def find(self, alias, /):
        """Return the option owning alias, or None."""
        return self._index.get(alias)

    def has(self, alias, /):
        return alias in self._index

    def add(self, option, /):
        """
        Register an option, applying the conflict policy to each of its strings.

        Returns
        - the option that was added.

        Raises
        - OptionConflictError: a string is already owned and the policy is "error".
        - InvalidConfigurationError: the same option object is already registered.
        """
        if any(registered is option for registered in self._options):
            raise InvalidConfigurationError(f"option {option} is already registered")

        if self._conflict == "error":
            for alias in option.strings:
                if alias in self._index:
                    raise OptionConflictError(alias)
        else:
            for alias in option.strings:
                if (owner := self._index.get(alias)) is None:
                    continue
                if len(owner.strings) == 1:
                    self._discard(owner)
                else:
                    owner._disable(alias)
                    del self._index[alias]
                    self._shadows[alias].append(owner)

        self._options.append(option)
        for alias in option.strings:
            self._index[alias] = option

        if option.dest is not None:
            if option.default is not Unset:
                self._defaults[option.dest] = option.default
            else:
                self._defaults.setdefault(option.dest, None)

        return option

    def remove(self, alias, /):
        """
        Remove the option owning alias and re-enable its strings on the
        options that lost them earlier.

        The option's seeded default stays in the defaults mapping.

        Raises
        - OutOfBoundsError: no option owns alias.
        """
        if (owner := self._index.get(alias)) is None:
            raise OutOfBoundsError(alias)

        strings = owner.strings
        self._discard(owner)

        for string in strings:
            history = self._shadows.get(string, [])
            while history:
                candidate = history.pop()
                if any(registered is candidate for registered in self._options) and string in candidate.disabled:
                    candidate._enable(string)
                    self._index[string] = candidate
                    break
            if not history:
                self._shadows.pop(string, None)

        return owner

    def _discard(self, option, /):
        self._options = [registered for registered in self._options if registered is not option]
        for alias in option.strings:
            if self._index.get(alias) is option:
                del self._index[alias]

    def set_default(self, dest, value, /):
        self._defaults[dest] = value

    def set_defaults(self, values=(), /, **kwargs):
        self._defaults.update(values, **kwargs)


__all__ = (
    "OptionRegistry",
    "POLICIES",
)
