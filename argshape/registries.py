"""
argshape registries: declarations, name tables, and help rendering.

What this module provides
- Declaration: one recognized option of a record (names, arity, mandatory
  flag) and the behavior that writes a matched value into the record.
- Registry: the read-only set of declarations of one record shape, with its
  short-name table, long-name table, nested subcommand registries and the
  plain-args sink. Built once per shape; safe to share between threads.
- registry(record): memoized Registry construction keyed by the record class.
- render_help / styled_help / helptext: help text as plain str or rich Text.

Name rules at construction
- Declarations without explicit names get a default short name (first letter
  of the field name) and a default long name (the field name, lowercased,
  underscores turned into hyphens).
- A default short name that is already taken is dropped silently; the later
  declaration keeps only its long name. Only debug logs report it.
- Explicit names that collide with anything already registered, and long
  names that collide at all, raise ConfigurationError.
"""
import functools
import re
from collections import defaultdict
from typing import NamedTuple

from rich.text import Text

from .arguments import FieldKind, Flag, Option
from .faults import *
from .shapes import collection
from .utils import *

# Indentation step between help nesting levels.
INDENT = "    "

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


class Declaration(NamedTuple):
    name: str
    spec: Option | Flag
    shorts: tuple[str, ...]
    longs: tuple[str, ...]
    default: bool = False

    @property
    def needs_value(self):
        return isinstance(self.spec, Option)

    @property
    def mandatory(self):
        return self.spec.mandatory

    @property
    def descr(self):
        return self.spec.descr

    @property
    def display(self):
        """
        Preferred spelling in messages: the first long name, else the first short one.
        """
        if self.longs:
            return "--" + self.longs[0]
        if self.shorts:
            return "-" + self.shorts[0]
        return self.name

    @property
    def metavar(self):
        """
        Value label used in help for value-bearing declarations.
        """
        if self.spec.metavar is not None:
            return self.spec.metavar
        if isinstance(choices := self.spec.choices, range) and choices.step == 1 and choices:
            return f"{choices.start}..{choices.stop - 1}"
        if choices:
            items = sorted(map(str, choices)) if isinstance(choices, frozenset) else map(str, choices)
            return "{%s}" % ",".join(items)
        return "<%s>" % re.sub(r"_+", "-", self.name.lower().strip("_"))

    def apply(self, target, name, value):
        """
        Write a matched occurrence into the target record.

        - Flag: None stores True; otherwise a boolean literal is expected.
        - Option: None is a missing value; the token is converted with the
          spec's type, checked against its choices, then stored (or appended).
        """
        if isinstance(self.spec, Flag):
            if value is None:
                setattr(target, self.name, True)
            elif value.lower() in _TRUE:
                setattr(target, self.name, True)
            elif value.lower() in _FALSE:
                setattr(target, self.name, False)
            else:
                raise InvalidValueError(
                    "flag %r cannot take the value %r" % (name, value),
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    input=name,
                    value=value,
                    declaration=self,
                    hint="drop the '=%s' part, or use one of: true, false, yes, no, on, off, 1, 0" % value,
                    docs=getdoc(FaultCode.INVALID_VALUE)
                )
            return

        if value is None:
            raise MissingValueError(
                "option %r requires a value" % name,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                input=name,
                declaration=self,
                hint="use the inline form: %s=%s" % (name, self.metavar),
                docs=getdoc(FaultCode.MISSING_VALUE)
            )

        try:
            converted = self.spec.type(value)
        except (TypeError, ValueError):
            raise InvalidValueError(
                "option %r cannot use the value %r" % (name, value),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                input=name,
                value=value,
                declaration=self,
                hint="expected %s" % self.metavar,
                docs=getdoc(FaultCode.INVALID_VALUE)
            ) from None

        if self.spec.choices and converted not in self.spec.choices:
            raise InvalidValueError(
                "option %r does not accept %r" % (name, value),
                title="invalid choice",
                code=FaultCode.INVALID_VALUE,
                input=name,
                value=value,
                declaration=self,
                hint="pick one of %s" % self.metavar,
                docs=getdoc(FaultCode.INVALID_VALUE)
            )

        if self.spec.append:
            getattr(target, self.name).append(converted)
        else:
            setattr(target, self.name, converted)

    def __str__(self):
        return "%r (%s)" % (self.name, ", ".join(
            ["-" + short for short in self.shorts] + ["--" + long for long in self.longs]
        ))


def _default_names(field):
    """
    Derive the default (short, long) names of an unnamed option field.
    """
    long = re.sub(r"_+", "-", field.name.lower().strip("_"))
    if not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", long):
        raise ConfigurationError(f"cannot derive option names from field {field.name!r}; give explicit names")
    return long[0], long


def _declare(field):
    """
    Build the Declaration of an option field (before collision handling).
    """
    if not (names := field.spec.names):
        short, long = _default_names(field)
        return Declaration(field.name, field.spec, (short,), (long,), True)
    return Declaration(
        field.name,
        field.spec,
        tuple(name[1:] for name in names if not name.startswith("--")),
        tuple(name[2:] for name in names if name.startswith("--")),
    )


def _subrecord(record, field):
    """
    Resolve the record class behind a subcommand field.
    """
    explicit = field.spec.record
    annotated = field.annotation if isinstance(field.annotation, type) else None
    if explicit and annotated and explicit is not annotated:
        raise ConfigurationError(
            f"subcommand {field.name!r} of {record.__qualname__!r} names {explicit.__qualname__!r} "
            f"but is annotated as {annotated.__qualname__!r}"
        )
    if (nested := explicit or annotated) is None:
        raise ConfigurationError(f"subcommand {field.name!r} of {record.__qualname__!r} has no record class")
    return nested


class Registry(StorageGuard):
    """
    Read-only declaration registry of one record shape.

    Properties
    - record: the record class this registry fills.
    - declarations: tuple of Declaration, in field order.
    - shorts / longs: name (without dashes) → Declaration.
    - subcommands: subcommand token → nested Registry.
    - plain: name of the plain-args field, or None.
    - mandatory: the declarations that must appear in a successful parse.

    Construction raises ConfigurationError for author mistakes; a registry is
    never returned half-built.
    """
    record = view("record")
    declarations = view("declarations")
    shorts = view("shorts")
    longs = view("longs")
    subcommands = view("subcommands")
    summaries = view("summaries")
    plain = view("plain")

    def __new__(cls, record, /):
        if not isinstance(fields := getattr(record, "__shape__", None), tuple):
            raise TypeError(f"{getattr(record, "__qualname__", record)!r} is not a @shape record")

        declarations = []
        shorts = {}
        longs = {}
        subcommands = {}
        summaries = {}
        plain = None

        for field in fields:
            # skip ignored and synthetic fields
            if field.kind is FieldKind.IGNORED or field.synthetic:
                continue

            if field.kind is FieldKind.SUBCOMMAND:
                subcommands[field.name] = registry(_subrecord(record, field))
                summaries[field.name] = field.spec.descr
                continue

            if field.kind is FieldKind.PLAIN_ARGS:
                if plain is not None:
                    raise ConfigurationError(f"plain args specified twice ({plain!r} and {field.name!r})")
                if collection(field.annotation) is None:
                    raise ConfigurationError(
                        f"plain args field {field.name!r} must be a mutable collection of str, not {field.annotation!r}"
                    )
                plain = field.name
                continue

            declaration = _declare(field)

            if declaration.default:
                short, = declaration.shorts
                if short in shorts:
                    logger.debug(
                        "default short name '-%s' of %r is taken by %r; keeping long names only",
                        short, declaration.name, shorts[short].name
                    )
                    declaration = declaration._replace(shorts=())
            else:
                for short in declaration.shorts:
                    if short in shorts:
                        raise ConfigurationError(
                            f"arguments {declaration} and {shorts[short]} collide on short name '-{short}'"
                        )

            for long in declaration.longs:
                if long in longs:
                    raise ConfigurationError(
                        f"arguments {declaration} and {longs[long]} collide on long name '--{long}'"
                    )

            shorts.update(dict.fromkeys(declaration.shorts, declaration))
            longs.update(dict.fromkeys(declaration.longs, declaration))
            declarations.append(declaration)
            logger.debug("registered %s on %r", declaration, record.__qualname__)

        with super().__new__(cls) as self:
            setattr(self, "-record", record)
            setattr(self, "-declarations", declarations)
            setattr(self, "-shorts", shorts)
            setattr(self, "-longs", longs)
            setattr(self, "-subcommands", subcommands)
            setattr(self, "-summaries", summaries)
            setattr(self, "-plain", plain)
        return self

    @property
    def mandatory(self):
        return tuple(declaration for declaration in self.declarations if declaration.mandatory)

    def __repr__(self):
        return "registry(record=%s, declarations=%r, subcommands=%r, plain=%r)" % (
            self.record.__qualname__,
            tuple(declaration.name for declaration in self.declarations),
            tuple(self.subcommands),
            self.plain,
        )

    def __rich__(self):
        return styled_help(self)


@functools.cache
def registry(record, /):
    """
    Return the Registry of a record class, building it on first use.

    Configuration errors are not cached; a failing shape raises on every call.
    """
    return Registry(record)


def _lines(registry, prefix):
    """
    Yield help lines as lists of (fragment, style) pairs.

    Layout
    - each subcommand name at the current prefix, its own help one level deeper;
    - then every declaration, one line per short form and per long form, the
      description (and a mandatory mark) after the last form.
    """
    for name, nested in registry.subcommands.items():
        line = [(prefix, ""), (name, "subcommand-name")]
        if descr := registry.summaries[name]:
            line += [(INDENT, ""), (descr, "subcommand-description")]
        yield line
        yield from _lines(nested, prefix + INDENT)

    for declaration in registry.declarations:
        style = "option-name" if declaration.needs_value else "flag-name"
        forms = []
        for short in declaration.shorts:
            form = [("-" + short, style)]
            if declaration.needs_value:
                form += [(" ", ""), (declaration.metavar, "metavar")]
            forms.append(form)
        for long in declaration.longs:
            form = [("--" + long, style)]
            if declaration.needs_value:
                form += [("=", ""), (declaration.metavar, "metavar")]
            forms.append(form)

        *heads, last = forms
        for form in heads:
            yield [(prefix + INDENT, ""), *form]

        tail = []
        if declaration.descr:
            tail += [(INDENT, ""), (declaration.descr, "argument-description")]
        if declaration.mandatory:
            tail += [(" " if declaration.descr else INDENT, ""), ("(mandatory)", "mandatory")]
        yield [(prefix + INDENT, ""), *last, *tail]


def render_help(registry, prefix=""):
    """
    Render help as plain text.

    Example (prefix "")

        build    compile the project
            -t <target>
            --target=<target>    what to build (mandatory)
        -v
        --verbose    be verbose
        -s 1..100
        --size=1..100    size of your shoes
    """
    lines = ["".join(str(fragment) for fragment, _ in line) for line in _lines(registry, prefix)]
    return "".join(line + "\n" for line in lines)


def styled_help(registry, /, *, colorful=True):
    """
    Render help as a rich Text with the same layout as render_help().

    Palette keys
    - subcommand-name, subcommand-description
    - option-name, flag-name, metavar, argument-description, mandatory

    Customization
    - Define a mapping named __styles__ in __main__ to override any palette entry.
    - When colorful is False, styling is suppressed.
    """
    styles = defaultdict(str, {
        "subcommand-name": "bold #36C5F0",  # SKY-BLUE subcommands
        "subcommand-description": "#9CA3AF",
        "option-name": "bold #00E6FF",  # CYAN for options
        "flag-name": "bold #22C55E",  # GREEN for flags
        "metavar": "bold #FFD600",  # AMBER for parameters
        "argument-description": "#9CA3AF",  # Muted gray
        "mandatory": "italic #F97316",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style):
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful and style else "")

    return Text("\n").join(
        Text.assemble(*(text(fragment, style) for fragment, style in line))
        for line in _lines(registry, "")
    )


def helptext(record, /):
    """
    Return the plain help text of a record class.
    """
    return render_help(registry(record))


__all__ = (
    "Declaration",
    "Registry",
    "registry",
    "render_help",
    "styled_help",
    "helptext",
)
