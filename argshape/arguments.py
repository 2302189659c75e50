r"""
argshape field specifications.

Overview
- Specs (assigned as class attributes of a @shape record)
  • Option[_T]: named, value-bearing option (e.g., -o/--output).
  • Flag: named, presence-only switch (e.g., -v/--verbose).
  • Subcommand: a nested record reached through a subcommand token.
  • PlainArgs: the sink collecting positional (plain) arguments.
  • Ignore: a record field that is not part of the command line.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ as read-only properties.
  • Each spec class carries a FieldKind in __kind__ so shape discovery can tag
    record fields without isinstance() chains.

Metadata (sanitized on construction)
- Shared
  • descr: Unset | str | Text (short help), non-empty when provided.
- Option/Flag
  • names: Iterable[str]; "-x" (short, one letter) or "--long-name" (long).
    No names means the registry derives a default short and long name from
    the field name.
  • mandatory: bool, the option must appear at least once.
- Option only
  • metavar: Unset | str (label in help).
  • type: Callable (converter applied to the raw token).
  • choices: Iterable (duplicates rejected unless a Set; ranges kept as-is).
  • append: bool (accumulate every occurrence into a list).

Validation highlights
- Short names must match r"-[^\W\d_]", long names r"--[^\W\d_](-?[^\W_]+)*".
- Names are unique within a spec.
- Option cannot combine metavar and choices simultaneously.

Quick example:
    >>> from argshape import shape, Option, Flag, PlainArgs
    >>> @shape
    ... class Options:
    ...     size: int = Option("-s", "--size", type=int, choices=range(1, 101))
    ...     verbose: bool = Flag(descr="be verbose")
    ...     files: list[str] = PlainArgs()
"""
import functools
import operator
import re
from collections.abc import Iterable, Set
from enum import StrEnum

from rich.text import Text

from .utils import *


class FieldKind(StrEnum):
    """
    tag attached to every record field by shape discovery.
    """
    OPTION = "option"
    SUBCOMMAND = "subcommand"
    PLAIN_ARGS = "plain-args"
    IGNORED = "ignored"


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using view() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(names=('-v', '--verbose'), descr=None, mandatory=False)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the 'descr' metadata shared by every spec.

    Raises
    - TypeError: if 'descr' is not a string, a rich Text or Unset.
    - ValueError: if 'descr' is a string but empty after trimming.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

    metadata["descr"] = nullify(descr)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate and normalize metadata for named (option-like) specs.

    Responsibilities
    - names: optional. Each name must be a non-empty string in one of the forms
        - short: "-x"          (exactly one letter)
        - long:  "--long-name" (letters/digits, single hyphens between segments)
      Unicode letters are allowed. Duplicates are rejected. The order given by
      the author is kept for help output.
    - mandatory: coerced to bool.

    Raises
    - TypeError: when names contain non-string entries.
    - ValueError: when a name is empty after trimming, fails validation, or duplicates appear.
    """
    names = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not (re.fullmatch(r"-[^\W\d_]", name) or re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name)):
            raise ValueError(
                f"{cls.__typename__} name {name!r} must be a short name ('-x') or a long name ('--name')"
            )
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)
    metadata["mandatory"] = bool(metadata["mandatory"])


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata for value-bearing options.

    Responsibilities
    - metavar: must be Unset or a non-empty string after trimming.
    - type: must be callable (converter/validator). No further contract enforced.
    - choices: must be iterable. Sets and ranges are kept as they are; any other
      collection has duplicates rejected and is normalized to a tuple.
    - append: coerced to bool.

    Explicitly not responsible for
    - default: not validated here; it may be any value (including None).
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = nullify(metavar)

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be a collection")
    if not isinstance(choices, Set | range):
        # Enforce no duplicates and stabilize ordering into a tuple.
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)
        choices = tuple(sanitized)
    metadata["choices"] = choices

    metadata["append"] = bool(metadata["append"])


class Option[_T](StorageGuard, metaclass=ArgumentType):
    """
    Named, value-bearing option specification.

    Option[_T] declares how a named option (e.g., -o/--output) is matched,
    converted, validated, and rendered in help. The value comes either from
    the next token (short form, '-o VALUE') or from the inline part of a long
    form ('--output=VALUE').

    Highlights
    - Generic over the payload type _T (converter provided via 'type').
    - Single-valued by default (last occurrence wins); append=True collects
      every occurrence in a list.
    - choices restrict the converted value; a range renders as 'lo..hi' in help.
    """
    __kind__ = FieldKind.OPTION
    __introspectable__ = (
        "names",
        "metavar",
        "type",
        "default",
        "choices",
        "descr",
        "mandatory",
        "append",
    )

    def __new__(
            cls,
            *names,
            type=str,
            default=None,
            choices=(),
            metavar=Unset,
            descr=Unset,
            mandatory=False,
            append=False
    ):
        """
        Construct an Option spec with the provided metadata.

        Parameters
        - names: zero or more str
          Aliases for the option ("-o", "--output"). When omitted, the registry
          derives '-<first letter>' and '--<field-name>' from the record field.
        - type: Callable
          Converter applied to the raw token. Only callability is enforced here.
        - default: Any
          Initial field value on a fresh record (a list of it when append=True).
        - choices: Iterable
          Allowed converted values.
        - metavar: Unset | str
          Display name for the value in help.
        - descr: Unset | str
          Short description for help. If Unset, becomes None.
        - mandatory: bool
          The option must appear at least once for a parse to succeed.
        - append: bool
          Accumulate all occurrences instead of keeping the last one.
        """
        metadata = {
            "names": names,
            "metavar": metavar,
            "type": type,
            "default": default,
            "choices": choices,
            "descr": descr,
            "mandatory": mandatory,
            "append": append,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        # UI/UX rule: either show a metavar (generic label) or enumerate concrete choices,
        # but not both at the same time.
        if metadata["metavar"] is not None and metadata["choices"]:
            raise TypeError(f"{cls.__typename__} cannot have both 'metavar' and 'choices'")

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "-" + name, object)
        return self


class Flag(StorageGuard, metaclass=ArgumentType):
    """
    Named, presence-only switch specification.

    The field holds False on a fresh record and becomes True when the flag is
    given. The long form also accepts an inline boolean literal
    ('--verbose=no').
    """
    __kind__ = FieldKind.OPTION
    __introspectable__ = (
        "names",
        "descr",
        "mandatory",
    )

    def __new__(cls, *names, descr=Unset, mandatory=False):
        metadata = {
            "names": names,
            "descr": descr,
            "mandatory": mandatory,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "-" + name, object)
        return self


class Subcommand(StorageGuard, metaclass=ArgumentType):
    """
    Nested command specification.

    The field name is the subcommand token. Its record class comes from the
    first argument or, when omitted, from the field annotation. The field
    holds None until the subcommand is taken.
    """
    __kind__ = FieldKind.SUBCOMMAND
    __introspectable__ = (
        "record",
        "descr",
    )

    def __new__(cls, record=Unset, /, descr=Unset):
        if not isinstance(record, type | Unset):
            raise TypeError(f"{cls.__typename__} 'record' must be a class")
        metadata = {
            "record": nullify(record),
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "-" + name, object)
        return self


class PlainArgs(StorageGuard, metaclass=ArgumentType):
    """
    Sink for plain (positional) arguments.

    The field annotation must be a mutable sequence or set of str; an
    unannotated field is treated as list[str]. A fresh record gets an empty
    collection.
    """
    __kind__ = FieldKind.PLAIN_ARGS
    __introspectable__ = (
        "descr",
    )

    def __new__(cls, descr=Unset):
        metadata = {"descr": descr}
        _sanitize_metadata(cls, metadata)

        with super().__new__(cls) as self:
            setattr(self, "-descr", metadata["descr"])
        return self


class Ignore(StorageGuard, metaclass=ArgumentType):
    """
    A record field the command line never touches.
    """
    __kind__ = FieldKind.IGNORED
    __introspectable__ = (
        "default",
        "factory",
    )

    def __new__(cls, default=None, factory=Unset):
        if factory is not Unset and not callable(factory):
            raise TypeError(f"{cls.__typename__} 'factory' must be callable")
        if factory is not Unset and default is not None:
            raise TypeError(f"{cls.__typename__} cannot have both 'default' and 'factory'")

        with super().__new__(cls) as self:
            setattr(self, "-default", default)
            setattr(self, "-factory", nullify(factory))
        return self

    def initial(self):
        """
        Return the value a fresh record starts with.
        """
        return self.default if self.factory is None else self.factory()

__all__ = (
    # Public API surface for consumers of argshape.arguments.
    # These names are re-exported from the package __init__.

    "FieldKind",
    "Option",
    "Flag",
    "Subcommand",
    "PlainArgs",
    "Ignore",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
