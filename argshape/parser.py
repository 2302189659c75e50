"""
argshape parser: classify tokens and fill a record from a registry.

Token grammar (checked in this order for every token)
- '---…'          malformed; the parse fails.
- '--'            separator; every later token is a plain argument.
- '--name[=val]'  long option; the value is the inline part, if any.
- '-x'            short option; a value-bearing option takes the next token.
- '<subcommand>'  a fresh nested record is created, stored on the current
                  record and the rest of the tokens are parsed into it.
- anything else   plain argument (a lone '-' included).

Completion
- After the last token, every mandatory declaration of the current level
  must have been applied; the first missing one (in field order) fails.
- Once a subcommand takes over, the enclosing level is done: its mandatory
  declarations are not checked.

Failures
- The first error aborts the parse; assignments made so far are kept on the
  target record.
- Errors raised while parsing a subcommand propagate unchanged.
"""
import difflib
import sys
from collections.abc import Sequence

from .faults import *
from .registries import registry as lookup
from .utils import *


def _suggest(registry, name):
    candidates = ["--" + long for long in registry.longs] + ["-" + short for short in registry.shorts]
    return tuple(difflib.get_close_matches(name, candidates, n=3))


def _unrecognized(registry, token, name, index):
    suggestions = _suggest(registry, name)
    if suggestions:
        hint = "did you mean %s?" % " or ".join(map(repr, suggestions))
    else:
        hint = "put it after '--' to pass it as a plain argument"
    return UnrecognizedArgumentError(
        "unknown option %r at %s position" % (name, ordinal(index + 1)),
        title="unrecognized argument",
        code=FaultCode.UNRECOGNIZED_ARGUMENT,
        input=token,
        index=index,
        suggestions=suggestions,
        hint=hint,
        docs=getdoc(FaultCode.UNRECOGNIZED_ARGUMENT)
    )


def _sink(registry, target):
    """
    Return the callable that stores one plain argument on the target.
    """
    if registry.plain is None:
        # no sink declared; plain arguments are accepted and dropped
        return [].append
    if (sink := getattr(target, registry.plain, None)) is None:
        raise ConfigurationError(
            f"plain args collection {registry.plain!r} of {type(target).__qualname__!r} is not initialized"
        )
    return sink.append if hasattr(sink, "append") else sink.add


def parse(registry, tokens, offset, target, /):
    """
    Parse tokens[offset:] into target using registry.

    Parameters
    - registry: Registry of the target's record class.
    - tokens: sequence of str (the full argument vector).
    - offset: index of the first token to look at.
    - target: instance of registry.record, mutated in place.

    Raises
    - TypeError when target is not an instance of registry.record.
    - ConfigurationError when the plain-args collection is None.
    - ParseError subclasses for bad input (see faults).
    """
    if not isinstance(target, registry.record):
        raise TypeError(
            f"parse() target must be a {registry.record.__qualname__!r} instance, not {type(target).__qualname__!r}"
        )
    if isinstance(tokens, str) or not isinstance(tokens, Sequence):
        raise TypeError("parse() tokens must be a sequence of strings")
    if not isinstance(offset, int) or offset < 0:
        raise TypeError("parse() offset must be a non-negative integer")

    collect = _sink(registry, target)
    applied = set()

    index = offset
    while index < len(tokens):
        token = tokens[index]

        if token.startswith("---"):
            raise MalformedArgumentError(
                "bad form of argument %r at %s position" % (token, ordinal(index + 1)),
                title="malformed argument",
                code=FaultCode.MALFORMED_ARGUMENT,
                input=token,
                index=index,
                hint="use '--name' for long options and '-x' for short ones; "
                     "put literal values after '--'",
                docs=getdoc(FaultCode.MALFORMED_ARGUMENT)
            )

        elif token == "--":
            logger.debug("separator at %s position; %d plain argument(s) follow", ordinal(index + 1),
                         len(tokens) - index - 1)
            for rest in tokens[index + 1:]:
                collect(rest)
            break

        elif token.startswith("--"):
            name, separator, value = token[2:].partition("=")
            if (declaration := registry.longs.get(name)) is None:
                raise _unrecognized(registry, token, "--" + name, index)
            declaration.apply(target, "--" + name, value if separator else None)
            applied.add(declaration)

        elif token.startswith("-") and len(token) > 1:
            if (declaration := registry.shorts.get(token[1:])) is None:
                raise _unrecognized(registry, token, token, index)
            value = None
            if declaration.needs_value:
                if index + 1 >= len(tokens):
                    raise MissingValueError(
                        "option %r at %s position requires a value" % (token, ordinal(index + 1)),
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        input=token,
                        index=index,
                        declaration=declaration,
                        hint="pass the value after it: %s %s" % (token, declaration.metavar),
                        docs=getdoc(FaultCode.MISSING_VALUE)
                    )
                index += 1
                value = tokens[index]
            declaration.apply(target, token, value)
            applied.add(declaration)

        elif token in registry.subcommands:
            _dispatch(registry, tokens, index, target)
            return

        else:
            collect(token)

        index += 1

    for declaration in registry.declarations:
        if declaration.mandatory and declaration not in applied:
            raise MandatoryArgumentError(
                "mandatory option %r is missing" % declaration.display,
                title="missing mandatory argument",
                code=FaultCode.MANDATORY_MISSING,
                input=declaration.display,
                declaration=declaration,
                hint="add %s to the command line" % declaration.display,
                docs=getdoc(FaultCode.MANDATORY_MISSING)
            )


def _dispatch(registry, tokens, index, target):
    """
    Hand the tokens after a subcommand token to a fresh nested record.
    """
    name = tokens[index]
    nested = registry.subcommands[name]
    child = nested.record()
    setattr(target, name, child)
    logger.debug("subcommand %r at %s position", name, ordinal(index + 1))
    parse(nested, tokens, index + 1, child)


def parse_args(target, tokens=Unset, /, offset=Unset, *, shell=False, colorful=True, fancy=False):
    """
    Fill a @shape record from the command line.

    Parameters
    - target: record instance; its class provides the registry (memoized).
    - tokens: argument vector; defaults to sys.argv.
    - offset: first token to parse; defaults to 1 for sys.argv, else 0.
    - shell: on a parse fault print it to stderr and exit with status 1
      instead of raising.
    - colorful / fancy: rendering options used in shell mode.

    Returns
    - target, for chaining.
    """
    if tokens is Unset:
        tokens, offset = sys.argv, nullify(offset, 1)
    else:
        offset = nullify(offset, 0)

    try:
        parse(lookup(type(target)), tokens, offset, target)
    except ParseError as fault:
        if not shell:
            raise
        trigger(fault, shell=True, colorful=colorful, fancy=fancy)
    return target


__all__ = (
    "parse",
    "parse_args",
)
