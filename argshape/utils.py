import functools
import logging
from collections.abc import Sequence, Mapping, Set
from contextlib import contextmanager
from types import MappingProxyType
from typing import final

# Library logger; the host application decides on handlers and levels.
logger = logging.getLogger("argshape")


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    intent
    - used by the internal API to distinguish "not provided" from a user‑supplied
      value (including None or other falsy values).
    - although this class is importable, it is intended for internal use only.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process‑wide singleton (see __new__).
    - display: repr(Unset) -> "Unset" (human‑friendly).
    - final: subclassing is forbidden to preserve semantics (see __init_subclass__).
    """

    def __or__(self, other, /):
        """
        support UnsetType | T in annotations and isinstance() checks.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        support T | UnsetType in annotations and isinstance() checks.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        return the singleton instance (process‑wide).
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls):
        """
        disallow subclassing to keep sentinel semantics stable.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
internal singleton instance of UnsetType.
"""


def nullify(object, default=None, /):
    """
    return `default` when `object` is Unset; otherwise return `object`.

    normalizes sentinel values at the API boundary so downstream code can treat
    parameters uniformly without branching on Unset. no copy is made.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    set a stable __name__/__qualname__ on a callable, or return a curried renamer.

    parameters
    - x: callable | str
      • callable → rename in place.
      • str      → desired name; returns a callable that will rename a future function.
    - name: str | None
      target name to assign.

    errors
    - TypeError if a callable is given and the name is not a string.
    """
    if isinstance(x, str):
        return functools.partial(rename, name=x)
    if not isinstance(name, str):
        raise TypeError("callable name must be a string")
    x.__qualname__ = name
    x.__name__ = name
    return x


def freeze(value, /):
    """
    return a shallow read-only view of a container.

    - Sequence (non-str, non-range) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """
    if isinstance(value, Sequence) and not isinstance(value, str | range):
        return tuple(value)
    if isinstance(value, Mapping):
        return MappingProxyType(value)
    if isinstance(value, Set):
        return frozenset(value)
    return value


class StorageGuard:
    """
    internal mixin to protect backing storage and control mutation.

    rules
    - any attribute whose name starts with '-' is considered internal backing and:
      • cannot be read (AttributeError),
      • cannot be written outside the guarded build phase.

    build phase
    - this class provides a context-managed __new__ so subclasses can write
      backing fields safely:
        with super().__new__(cls) as self:
            setattr(self, "-field", value)
        # after the 'with' block, backing fields are locked (read-only).
    """
    __slots__ = ("__building",)

    @contextmanager
    def __new__(cls):
        self = super().__new__(cls)
        self.__building = True
        try:
            yield self
        finally:
            self.__building = False

    def __getattribute__(self, name, /):
        if isinstance(name, str) and name.startswith("-"):
            raise AttributeError("internal storage is not accessible")
        return object.__getattribute__(self, name)

    def __setattr__(self, name, value, /):
        if isinstance(name, str) and name.startswith("-") and not self.__building:
            raise AttributeError("internal storage is read-only")
        return object.__setattr__(self, name, value)


def view(name):
    """
    build a read-only property over the '-<name>' backing field of a StorageGuard.

    the property returns freeze(value), so containers handed out are views
    that cannot be used to mutate the guarded object.
    """

    @rename(name)
    def getter(self):
        return freeze(object.__getattribute__(self, "-" + name))

    return property(getter)


@functools.cache
def ordinal(number):
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
    "UnsetType",
    "Unset",
    "nullify",
    "rename",
    "freeze",
    "StorageGuard",
    "view",
    "ordinal",
    "logger",
)
