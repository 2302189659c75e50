"""
argshape record shapes: the declarative description a registry is built from.

What this module provides
- Field: one tagged entry of a shape (name, kind, spec, annotation, synthetic).
- discover(record): read the spec objects (Option, Flag, Subcommand,
  PlainArgs, Ignore) assigned on a class and its bases, in definition order.
- shape: class decorator that stores the discovered fields in __shape__ and
  gives the class an __init__ that puts every field in its initial state.

A registry only consumes record.__shape__; it never looks at the class body
itself. Hand-written shapes are possible by assigning a tuple of Field
entries to __shape__ directly.

Example
    @shape
    class Build:
        target: str = Option("-t", "--target", mandatory=True)
        jobs: int = Option(type=int, default=1)

    @shape
    class Tool:
        verbose: bool = Flag()
        build: Build = Subcommand()
        rest: list[str] = PlainArgs()

    Tool()  # Tool(verbose=False, build=None, rest=[])
"""
import functools
import inspect
import operator
import typing
from collections.abc import MutableSequence, MutableSet
from typing import NamedTuple

from .arguments import FieldKind, Flag
from .faults import ConfigurationError
from .utils import *


class Field(NamedTuple):
    name: str
    kind: FieldKind
    spec: object
    annotation: object = Unset
    synthetic: bool = False


def collection(annotation, /):
    """
    Return the concrete collection type for a plain-args annotation.

    Accepted annotations are parametrized mutable sequences or sets of str
    (list[str], set[str], collections.abc.MutableSequence[str], ...). Abstract
    origins resolve to list or set. An absent annotation means list[str].
    Anything else returns None.
    """
    if annotation is Unset:
        return list
    if typing.get_args(annotation) != (str,):
        return None
    if not isinstance(origin := typing.get_origin(annotation), type):
        return None
    if issubclass(origin, MutableSequence):
        return list if inspect.isabstract(origin) else origin
    if issubclass(origin, MutableSet):
        return set if inspect.isabstract(origin) else origin
    return None


def discover(record, /):
    """
    Collect the tagged fields of a record class.

    Behavior
    - Walks the MRO from the most basic class, so subclasses extend (and may
      override by name) the fields of their bases. Position follows the first
      definition, like dataclasses.
    - Any class attribute carrying a FieldKind in __kind__ is a field.
    - Names starting with an underscore are flagged synthetic; registries skip them.

    Raises
    - TypeError when record is not a class.
    - ConfigurationError when annotations cannot be resolved.
    """
    if not isinstance(record, type):
        raise TypeError("discover() argument must be a class")

    fields = {}
    for klass in reversed(record.__mro__):
        try:
            annotations = inspect.get_annotations(klass, eval_str=True)
        except NameError as error:
            raise ConfigurationError(f"cannot resolve annotations of {klass.__qualname__!r}: {error}") from None

        for name, value in vars(klass).items():
            if not isinstance(kind := getattr(value, "__kind__", None), FieldKind):
                continue
            fields[name] = Field(
                name,
                kind,
                value,
                annotations.get(name, Unset),
                name.startswith("_"),
            )

    return tuple(fields.values())


def initial(field, /):
    """
    Return the value a field holds on a freshly constructed record.
    """
    match field.kind:
        case FieldKind.IGNORED:
            return field.spec.initial()
        case FieldKind.SUBCOMMAND:
            return None
        case FieldKind.PLAIN_ARGS:
            return (collection(field.annotation) or list)()
        case FieldKind.OPTION if isinstance(field.spec, Flag):
            return False
        case FieldKind.OPTION if field.spec.append:
            return list(field.spec.default or ())
        case FieldKind.OPTION:
            return field.spec.default
    raise RuntimeError("unreachable")


def _init(self, /, **values):
    """
    Put every shape field in its initial state; keyword arguments override.
    """
    for field in type(self).__shape__:
        try:
            setattr(self, field.name, values.pop(field.name))
        except KeyError:
            setattr(self, field.name, initial(field))
    if values:
        raise TypeError(f"{type(self).__name__}() got unexpected field(s): {", ".join(map(repr, values))}")


def _rich_repr(self):
    for field in type(self).__shape__:
        yield field.name, getattr(self, field.name)


def _repr(self):
    return f"{type(self).__name__}({
        ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
    })"


def shape(record=Unset, /):
    """
    Turn a class into a record shape.

    Usage
        @shape
        class Options: ...

        @shape()
        class Options: ...

    Behavior
    - Stores discover(record) in record.__shape__.
    - Adds __init__ (unless the class defines its own), __repr__ and
      __rich_repr__ (unless defined) that follow the shape fields.
    - Returns the same class.
    """
    @rename("shape")
    def wrapper(record, /):
        if not isinstance(record, type):
            raise TypeError("@shape() must be applied to a class")
        record.__shape__ = discover(record)
        for name, method in (
                ("__init__", _init),
                ("__repr__", _repr),
                ("__rich_repr__", _rich_repr),
        ):
            if name not in vars(record):
                setattr(record, name, method)
        return record

    return wrapper(record) if record is not Unset else wrapper


__all__ = (
    "Field",
    "collection",
    "discover",
    "initial",
    "shape",
)
