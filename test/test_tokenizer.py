# python
"""
Tokenizer behavioral tests.

Scope
- Lossless reconstruction of the typed line from the tokens.
- Quote handling (single, double, unterminated, quotes inside bare tokens).
- Escape handling (control characters, escaped delimiters, unknown escapes).
- Offsets refer to the typed line, whitespace goes to prefixes/suffixes.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from commandeer import Argument, tokenize


class TestReconstruction(TestCase):

    samples = (
        "",
        " ",
        "\t \n",
        "echo",
        "  echo  hello   world  ",
        "foo 'bar baz' qux",
        'say "it is" done',
        "a\\ b c",
        "it's fine",
        "tab\\there \\\\ back",
        "unknown \\q escape",
        "trailing backslash \\",
        "'unterminated quote",
        '"half \\" escaped',
        "'a''b'c",
        "x 'y z'  ",
    )

    def testJoinReproducesInput(self):
        for typed in self.samples:
            with self.subTest(typed=typed):
                self.assertEqual("".join(map(str, tokenize(typed))), typed)

    def testNeverEmpty(self):
        for typed in self.samples:
            with self.subTest(typed=typed):
                self.assertGreaterEqual(len(tokenize(typed)), 1)


class TestTokens(TestCase):

    def testEmptyInput(self):
        self.assertEqual(tokenize(""), [Argument("", 0, 0, "", "")])

    def testNoneInput(self):
        self.assertEqual(tokenize(None), [Argument("", 0, 0, "", "")])

    def testWhitespaceOnly(self):
        self.assertEqual(tokenize("  "), [Argument("", 2, 2, "  ", "")])

    def testSimpleWords(self):
        self.assertEqual(tokenize("a bc"), [Argument("a", 0, 1, "", ""), Argument("bc", 2, 4, " ", "")])

    def testLeadingWhitespaceIsPrefix(self):
        argument, = tokenize("  a")
        self.assertEqual((argument.text, argument.start, argument.end, argument.prefix), ("a", 2, 3, "  "))

    def testTrailingWhitespaceIsSuffix(self):
        self.assertEqual(tokenize("a  "), [Argument("a", 0, 1, "", "  ")])

    def testQuotedToken(self):
        foo, bar, qux = tokenize("foo 'bar baz' qux")
        self.assertEqual([foo.text, bar.text, qux.text], ["foo", "bar baz", "qux"])
        self.assertEqual((bar.start, bar.end, bar.prefix, bar.suffix), (4, 13, " '", "'"))

    def testDoubleQuotedToken(self):
        say, text = tokenize('say "hello world"')
        self.assertEqual(text, Argument("hello world", 4, 17, ' "', '"'))

    def testEscapedSpace(self):
        first, second = tokenize("a\\ b c")
        self.assertEqual((first.text, first.start, first.end), ("a b", 0, 4))
        self.assertEqual((second.text, second.start, second.end), ("c", 5, 6))

    def testEscapedQuoteInsideQuotes(self):
        argument, = tokenize('"a\\"b"')
        self.assertEqual(argument, Argument('a"b', 0, 6, '"', '"'))

    def testControlEscapes(self):
        argument, = tokenize("a\\tb\\nc")
        self.assertEqual(argument.text, "a\tb\nc")
        self.assertEqual(argument.end, 7)

    def testEscapedBackslash(self):
        argument, = tokenize("a\\\\b")
        self.assertEqual(argument.text, "a\\b")

    def testUnknownEscapeKeptVerbatim(self):
        argument, = tokenize("\\q")
        self.assertEqual(argument.text, "\\q")

    def testTrailingBackslashKept(self):
        argument, = tokenize("end\\")
        self.assertEqual(argument.text, "end\\")

    def testQuoteInsideBareTokenIsLiteral(self):
        argument, = tokenize("it's")
        self.assertEqual((argument.text, argument.start, argument.end), ("it's", 0, 4))

    def testUnterminatedQuoteRunsToEnd(self):
        say, rest = tokenize("say 'hello there")
        self.assertEqual((rest.text, rest.start, rest.end, rest.prefix, rest.suffix), ("hello there", 4, 16, " '", ""))

    def testAdjacentQuotedTokens(self):
        first, second, third = tokenize("'a''b'c")
        self.assertEqual([first.text, second.text, third.text], ["a", "b", "c"])
        self.assertEqual([first.end, second.start, third.start], [3, 3, 6])

    def testEmptyQuotes(self):
        say, empty = tokenize("say ''")
        self.assertEqual((empty.text, empty.start, empty.end), ("", 4, 6))

    def testOtherWhitespaceSeparates(self):
        self.assertEqual([argument.text for argument in tokenize("a\tb\nc")], ["a", "b", "c"])


if __name__ == "__main__":
    unittest.main()
