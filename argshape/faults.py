"""
argshape faults (parse errors, configuration errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing parse
  failures. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ParseError: base type that carries a message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- ConfigurationError: author mistakes in a record shape (duplicate explicit
  names, several plain-args sinks, bad plain-args types). These are raised
  while a registry is built and are never shown to end users as parse faults.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser raises ParseError subclasses; the first one aborts the parse.
- parse_args(..., shell=True) hands the fault to trigger(), which prints it
  with rich and exits; otherwise the exception simply propagates.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - tokens (1111x)
      • MALFORMED_ARGUMENT, UNRECOGNIZED_ARGUMENT
    - values (1112x)
      • MISSING_VALUE, INVALID_VALUE
    - completeness (1113x)
      • MANDATORY_MISSING

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- token errors ---
    MALFORMED_ARGUMENT          = 11111
    UNRECOGNIZED_ARGUMENT       = 11112

    # --- value errors ---
    MISSING_VALUE               = 11121
    INVALID_VALUE               = 11122

    # --- completeness errors ---
    MANDATORY_MISSING           = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConfigurationError(TypeError):
    """
    a record shape cannot be turned into a registry.

    raised at construction time only; it signals a programming mistake in the
    shape definition, not bad user input.
    """


class ParseError(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        prog = text(getattr(main, "__prog__", self.options.get("prog", "argshape")), "prog-name")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options.get("title", "parse error").title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")

        renders = [header, message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders[1:]), title=header, title_align="left")

        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedArgumentError(ParseError): ...
class UnrecognizedArgumentError(ParseError): ...
class MissingValueError(ParseError): ...
class InvalidValueError(ParseError): ...
class MandatoryArgumentError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich console followed by exit
      status 1; otherwise the merged exception is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "ParseError",
    "MalformedArgumentError",
    "UnrecognizedArgumentError",
    "MissingValueError",
    "InvalidValueError",
    "MandatoryArgumentError",
    "trigger",
    "getdoc",
)
