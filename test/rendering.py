# python
"""
Help renderer behavioral tests.

Scope
- Section order, titles and skipping of empty sections.
- Usage line tokens (optional brackets, sink ellipsis, overrides, utility name).
- Glossary alignment, default values and word wrapping.
- Low-level tokenize()/wrap() rules and the write/rich entry points.

Conventions
- Test method names follow CamelCase per project convention.
- Expected help texts are spelled out line by line.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.text import Text

from slimarg import *
from slimarg.rendering import tokenize, wrap


class TestSections(TestCase):
    """Fixed section order and titles."""

    def setUp(self):
        self.parser = Parser("Prolog", "Epilog", utility="utility")
        self.parser.add_flag("a", "a", descr="Aa")
        self.parser.add_operand("b", "BBB", "Bb", type=int, default=1, required=True)

    def testDefault(self):
        self.assertEqual(self.parser.format_help(), (
            "Prolog\n"
            "\n"
            "USAGE\n"
            "  utility [-a] BBB\n"
            "\n"
            "OPTIONS\n"
            "  -a  Aa\n"
            "\n"
            "OPERANDS\n"
            "  BBB  Bb\n"
            "\n"
            "Epilog\n"
            "\n"
        ))

    def testCustomTitles(self):
        self.parser.usage_title = "Hello"
        self.parser.options_title = "World"
        self.parser.operands_title = "Goodbye"
        self.assertEqual(self.parser.format_help(), (
            "Prolog\n"
            "\n"
            "Hello\n"
            "  utility [-a] BBB\n"
            "\n"
            "World\n"
            "  -a  Aa\n"
            "\n"
            "Goodbye\n"
            "  BBB  Bb\n"
            "\n"
            "Epilog\n"
            "\n"
        ))

    def testEmptyParserRendersUsageOnly(self):
        self.assertEqual(Parser().format_help(), "USAGE\n  \n\n")

    def testRenderingIsIdempotent(self):
        self.assertEqual(self.parser.format_help(), self.parser.format_help())

    def testHelpIndependentOfParsing(self):
        before = self.parser.format_help()
        self.parser.parse(["x", "-a", "5"])
        self.assertEqual(self.parser.format_help(), before)

    def testWriteHelpSingleWrite(self):
        writes = []

        class Sink:
            def write(self, text):
                writes.append(text)

        self.parser.write_help(Sink())
        self.assertEqual(writes, [self.parser.format_help()])

    def testWriteHelpToStream(self):
        stream = io.StringIO()
        self.parser.write_help(stream)
        self.assertEqual(stream.getvalue(), self.parser.format_help())

    def testRichProtocol(self):
        rendered = self.parser.__rich__()
        self.assertIsInstance(rendered, Text)
        self.assertEqual(rendered.plain, self.parser.format_help())


class TestUsage(TestCase):
    """Usage line contents."""

    def setUp(self):
        self.parser = Parser(options_title="", operands_title="")
        self.parser.add_flag("a", "a", descr="Aa")
        self.parser.add_operand("b", "BBB", "Bb", type=int, default=1)

    def testUtilityNameFromTokens(self):
        self.parser.parse(["hello"])
        self.assertEqual(self.parser.format_help(), "USAGE\n  hello [-a] [BBB]\n\n")

    def testConfiguredUtilityNamePreserved(self):
        self.parser.utility = "custom"
        self.parser.parse(["hello"])
        self.assertEqual(self.parser.format_help(), "USAGE\n  custom [-a] [BBB]\n\n")

    def testUsageOverrides(self):
        self.parser.utility = "utility"
        self.parser.options_usage = "options..."
        self.parser.operands_usage = "operands..."
        self.assertEqual(self.parser.format_help(), "USAGE\n  utility options... operands...\n\n")

    def testHiddenUsage(self):
        self.parser.usage_title = ""
        self.assertEqual(self.parser.format_help(), "")


class TestFormatting(TestCase):
    """Glossary layout for the common argument shapes."""

    def setUp(self):
        self.parser = Parser(utility="hello")

    def testRequiredOptionsAndOperands(self):
        self.parser.add_flag("a", "a", descr="Aa", required=True)
        self.parser.add_option("b", "b", metavar="BB", descr="Bb", type=int, default=1, required=True)
        self.parser.add_operand("c", "CC", "Cc", type=int, default=1, required=True)
        self.parser.add_sink("d", "DDD", "Dd", type=int, required=True)
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello -a -b BB CC DDD...\n"
            "\n"
            "OPTIONS\n"
            "  -a     Aa\n"
            "  -b BB  Bb\n"
            "\n"
            "OPERANDS\n"
            "  CC   Cc\n"
            "  DDD  Dd\n"
            "\n"
        ))

    def testOptionalOptionsAndOperands(self):
        self.parser.add_flag("a", "a", descr="Aa")
        self.parser.add_option("b", "b", metavar="BB", descr="Bb", type=int, default=1)
        self.parser.add_operand("c", "CC", "Cc", type=int, default=1)
        self.parser.add_sink("d", "DDD", "Dd", type=int)
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello [-a] [-b BB] [CC] [DDD]...\n"
            "\n"
            "OPTIONS\n"
            "  -a     Aa\n"
            "  -b BB  Bb (default: 1)\n"
            "\n"
            "OPERANDS\n"
            "  CC   Cc (default: 1)\n"
            "  DDD  Dd\n"
            "\n"
        ))

    def testOnlyLongOptions(self):
        self.parser.add_flag("a", long="aaaa", descr="Aa", required=True)
        self.parser.add_option("b", long="bb", metavar="BBB", descr="Bb", required=True)
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello --aaaa --bb BBB\n"
            "\n"
            "OPTIONS\n"
            "  --aaaa    Aa\n"
            "  --bb BBB  Bb\n"
            "\n"
        ))

    def testMixedShortAndLongOptions(self):
        self.parser.width = 21
        self.parser.add_flag("a", "a", "aa", "Aa", required=True)
        self.parser.add_option("b", "b", "bbb", "BB", "Bb", required=True)
        self.parser.add_option("c", "c", metavar="CCC", descr="Cc", required=True)
        self.parser.add_option("d", long="dddd", metavar="DDDD", descr="Dd", required=True)
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello -a -b BB\n"
            "    -c CCC\n"
            "    --dddd DDDD\n"
            "\n"
            "OPTIONS\n"
            "  -a, --aa         Aa\n"
            "  -b, --bbb BB     Bb\n"
            "  -c CCC           Cc\n"
            "      --dddd DDDD  Dd\n"
            "\n"
        ))

    def testCustomPrefixes(self):
        self.parser.short_prefix = "+"
        self.parser.long_prefix = "/"
        self.parser.add_flag("a", "a", descr="Aa", required=True)
        self.parser.add_option("b", long="bbb", metavar="BB", descr="Bb", required=True)
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello +a /bbb BB\n"
            "\n"
            "OPTIONS\n"
            "  +a           Aa\n"
            "      /bbb BB  Bb\n"
            "\n"
        ))

    def testCustomIndent(self):
        self.parser.width = 16
        self.parser.indent = 4
        self.parser.add_option("b", "b", metavar="BB", descr="Bb", required=True)
        self.parser.add_operand("c", "CCCC", "Cc", required=True)
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "    hello -b BB\n"
            "        CCCC\n"
            "\n"
            "OPTIONS\n"
            "    -b BB    Bb\n"
            "\n"
            "OPERANDS\n"
            "    CCCC    Cc\n"
            "\n"
        ))

    def testSignalsListedWithOptions(self):
        self.parser.add_signal("h", "help", "Show help.")
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello [-h]\n"
            "\n"
            "OPTIONS\n"
            "  -h, --help  Show help.\n"
            "\n"
        ))


class TestDefaults(TestCase):
    """Default values appended to glossary descriptions."""

    def setUp(self):
        self.parser = Parser(usage_title="", options_title="")

    def testStringValues(self):
        self.parser.add_operand("empty", "empty", default="")
        self.parser.add_operand("hello", "hello", default="hello")
        self.assertEqual(self.parser.format_help(), (
            "OPERANDS\n"
            "  empty  (default: \"\")\n"
            "  hello  (default: \"hello\")\n"
            "\n"
        ))

    def testNarrowIntegersPrintAsNumbers(self):
        self.parser.add_operand("char", "char ", type=int8, default=65)
        self.parser.add_operand("schar", "sChar", type=int8, default=-65)
        self.parser.add_operand("uchar", "uChar", type=uint8, default=65)
        self.assertEqual(self.parser.format_help(), (
            "OPERANDS\n"
            "  char   (default: 65)\n"
            "  sChar  (default: -65)\n"
            "  uChar  (default: 65)\n"
            "\n"
        ))

    def testIntegerLimits(self):
        for dest, codec, value in (
                ("int8Min", int8, -128),
                ("int8Max", int8, 127),
                ("uint8Max", uint8, 255),
                ("int32Min", int32, -2147483648),
                ("int32Max", int32, 2147483647),
                ("uint32Max", uint32, 4294967295),
                ("int64Min", int64, -9223372036854775808),
                ("int64Max", int64, 9223372036854775807),
                ("uint64Max", uint64, 18446744073709551615),
        ):
            self.parser.add_operand(dest, dest.ljust(9), type=codec, default=value)
        self.assertEqual(self.parser.format_help(), (
            "OPERANDS\n"
            "  int8Min    (default: -128)\n"
            "  int8Max    (default: 127)\n"
            "  uint8Max   (default: 255)\n"
            "  int32Min   (default: -2147483648)\n"
            "  int32Max   (default: 2147483647)\n"
            "  uint32Max  (default: 4294967295)\n"
            "  int64Min   (default: -9223372036854775808)\n"
            "  int64Max   (default: 9223372036854775807)\n"
            "  uint64Max  (default: 18446744073709551615)\n"
            "\n"
        ))

    def testRealValues(self):
        self.parser.add_operand("zero", "zero", type=float, default=0.0)
        self.parser.add_operand("half", "half", type=float, default=0.5)
        self.assertEqual(self.parser.format_help(), (
            "OPERANDS\n"
            "  zero  (default: 0)\n"
            "  half  (default: 0.5)\n"
            "\n"
        ))

    def testCustomRender(self):
        self.parser.add_operand("mask", "MASK", "Bits.", type=Custom(lambda text: int(text, 0), render=hex), default=255)
        self.assertEqual(self.parser.format_help(), (
            "OPERANDS\n"
            "  MASK  Bits. (default: 0xff)\n"
            "\n"
        ))

    def testCustomIntro(self):
        self.parser.add_operand("i", "II", "Ii", type=int, default=2)
        self.parser.default_intro = "Hello:"
        self.assertEqual(self.parser.format_help(), "OPERANDS\n  II  Ii (Hello:2)\n\n")

    def testDisabledDefaults(self):
        self.parser.add_operand("i", "II", "Ii", type=int, default=2)
        self.parser.default_intro = ""
        self.assertEqual(self.parser.format_help(), "OPERANDS\n  II  Ii\n\n")

    def testNoneDefaultOmitted(self):
        self.parser.add_operand("i", "II", "Ii", type=int)
        self.assertEqual(self.parser.format_help(), "OPERANDS\n  II  Ii\n\n")

    def testDefaultIsDeclaredValueAfterParsing(self):
        self.parser.add_operand("i", "II", "Ii", type=int, default=2)
        self.parser.parse(["", "7"])
        self.assertEqual(self.parser.format_help(), "OPERANDS\n  II  Ii (default: 2)\n\n")


class TestWrapping(TestCase):
    """Word wrapping inside glossaries."""

    def setUp(self):
        self.parser = Parser(usage_title="", operands_title="", width=21)

    def testBoundaries(self):
        self.parser.add_flag("a", "a", descr="Exactly to here Can't fit next t Fullwidthtoken.")
        self.assertEqual(self.parser.format_help(), (
            "OPTIONS\n"
            "  -a  Exactly to here\n"
            "      Can't fit next\n"
            "      t\n"
            "      Fullwidthtoken.\n"
            "\n"
        ))

    def testOvershoot(self):
        self.parser.add_flag("a", "a", descr="Thisisaverylongtoken Next line ok Anotherverylongtoken")
        self.assertEqual(self.parser.format_help(), (
            "OPTIONS\n"
            "  -a  Thisisaverylongtoken\n"
            "      Next line ok\n"
            "      Anotherverylongtoken\n"
            "\n"
        ))

    def testExplicitNewline(self):
        self.parser.add_flag("a", "a", descr="First\nSecond line\n\nFourth \n Fifth")
        self.assertEqual(self.parser.format_help(), (
            "OPTIONS\n"
            "  -a  First\n"
            "      Second line\n"
            "\n"
            "      Fourth\n"
            "      Fifth\n"
            "\n"
        ))

    def testSpaceCollapsing(self):
        self.parser.add_flag("a", "a", descr="  Hello,   world!  ")
        self.assertEqual(self.parser.format_help(), "OPTIONS\n  -a  Hello, world!\n\n")

    def testWhitespaceOnlyDescription(self):
        self.parser.add_flag("a", "a", descr="    ")
        self.assertEqual(self.parser.format_help(), "OPTIONS\n  -a  \n\n")

    def testZeroWidth(self):
        self.parser.add_option("a", "a", "aaa", "AA", "A stupid width.", type=int, default=1)
        self.parser.add_operand("b", "BBB", "Still stupid...", type=int, default=1)
        self.parser.usage_title = "USAGE"
        self.parser.operands_title = "OPERANDS"
        self.parser.utility = "hello"
        self.parser.width = 0
        self.assertEqual(self.parser.format_help(), (
            "USAGE\n"
            "  hello\n"
            "    [-a AA]\n"
            "    [BBB]\n"
            "\n"
            "OPTIONS\n"
            "  -a, --aaa AA  A\n"
            "                stupid\n"
            "                width.\n"
            "                (default: 1)\n"
            "\n"
            "OPERANDS\n"
            "  BBB  Still\n"
            "       stupid...\n"
            "       (default: 1)\n"
            "\n"
        ))

    def testParagraphsWrapAtWidth(self):
        parser = Parser("one two three four five six", usage_title="", width=10)
        self.assertEqual(parser.format_help(), "one two\nthree four\nfive six\n\n")


class TestPrimitives(TestCase):
    """tokenize() and wrap() in isolation."""

    def testTokenize(self):
        self.assertEqual(tokenize("  a  bb\n\nc "), ["a", "bb", "\n", "\n", "c"])
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize("tab\tkept"), ["tab\tkept"])

    def testWrapHangingIndent(self):
        self.assertEqual(wrap(["aaa", "bbb", "ccc"], 0, 2, 7), "aaa bbb\n  ccc")

    def testWrapLongTokenAtLineStart(self):
        self.assertEqual(wrap(["abcdefghij"], 0, 0, 4), "abcdefghij")

    def testWrapNewlineToken(self):
        self.assertEqual(wrap(["a", "\n", "b"], 3, 3, 80), "a\n   b")


if __name__ == "__main__":
    unittest.main()
