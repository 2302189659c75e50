# python
"""
Help rendering behavioral tests (plain and rich).

Scope
- Validate render_help() layout: subcommands first, nested help indented,
  one line per short and long form, metavars and descriptions.
- Validate styled_help() and Registry.__rich__ against the plain layout.

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from rich.text import Text

from argshape import (
    Option,
    Flag,
    Subcommand,
    PlainArgs,
    Registry,
    registry,
    shape,
    render_help,
    styled_help,
    helptext,
)


@shape
class Build:
    target: str = Option("-t", "--target", descr="what to build", mandatory=True)


@shape
class Tool:
    build: Build = Subcommand(descr="compile the project")
    verbose: bool = Flag(descr="be verbose")
    size: int = Option("-s", "--size", type=int, choices=range(1, 101), descr="size of your shoes")
    files: list[str] = PlainArgs()


@shape
class Versions:
    verbose: bool = Flag()
    version: bool = Flag()
    level: str = Option(choices=("low", "high"), mandatory=True)


EXPECTED = (
    "build    compile the project\n"
    "        -t <target>\n"
    "        --target=<target>    what to build (mandatory)\n"
    "    -v\n"
    "    --verbose    be verbose\n"
    "    -s 1..100\n"
    "    --size=1..100    size of your shoes\n"
)


class TestRenderHelp(TestCase):
    """Behavioral tests for plain help text."""

    def testLayout(self):
        self.assertEqual(render_help(registry(Tool)), EXPECTED)

    def testPrefix(self):
        rendered = render_help(registry(Tool), "  ")
        self.assertEqual(rendered, "".join("  " + line + "\n" for line in EXPECTED.splitlines()))

    def testHelptext(self):
        self.assertEqual(helptext(Tool), EXPECTED)

    def testDowngradedDeclarationShowsLongNameOnly(self):
        self.assertEqual(render_help(Registry(Versions)), (
            "    -v\n"
            "    --verbose\n"
            "    --version\n"
            "    -l {low,high}\n"
            "    --level={low,high}    (mandatory)\n"
        ))

    def testEveryNameIsListed(self):
        rendered = render_help(registry(Tool))
        for long in registry(Tool).longs:
            self.assertIn("--" + long, rendered)
        for short in registry(Tool).shorts:
            self.assertIn("-" + short, rendered)

    def testEmptyShape(self):
        @shape
        class Empty:
            pass

        self.assertEqual(render_help(Registry(Empty)), "")


class TestStyledHelp(TestCase):
    """Behavioral tests for rich help."""

    def testSameLayoutAsPlain(self):
        text = styled_help(registry(Tool))
        self.assertIsInstance(text, Text)
        self.assertEqual(text.plain + "\n", EXPECTED)

    def testColorfulHasStyles(self):
        self.assertTrue(styled_help(registry(Tool)).spans)

    def testColorlessHasNoStyles(self):
        self.assertFalse(styled_help(registry(Tool), colorful=False).spans)

    def testRegistryRendersWithRich(self):
        self.assertEqual(registry(Tool).__rich__().plain + "\n", EXPECTED)


if __name__ == "__main__":
    unittest.main()
