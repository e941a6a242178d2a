"""
Tokens module behavioral tests (raw-line splitting, quoting, classification).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from foxcli import TokenKind, Token, split, classify, tokenize, UnterminatedQuoteError


def kinds(source):
    return [token.kind for token in tokenize(source)]


class TestSplit(TestCase):

    def testWhitespaceCollapses(self):
        self.assertEqual(list(split("  a   b\t c  ")), [("a", False), ("b", False), ("c", False)])

    def testQuotedSpanIsOneToken(self):
        self.assertEqual(
            list(split('run "hello world" --verbose')),
            [("run", False), ("hello world", True), ("--verbose", False)]
        )

    def testAdjacentQuotesJoin(self):
        self.assertEqual(list(split('--msg="a b"')), [("--msg=a b", False)])
        self.assertEqual(list(split('"a b"c')), [("a bc", True)])

    def testEmptyQuotes(self):
        self.assertEqual(list(split('""')), [("", True)])
        self.assertEqual(list(split('a "" b')), [("a", False), ("", True), ("b", False)])

    def testUnterminatedQuote(self):
        with self.assertRaises(UnterminatedQuoteError) as context:
            list(split('run "hello'))
        self.assertEqual(context.exception.input, "hello")
        self.assertEqual(context.exception.options["index"], 2)

    def testEmptyLine(self):
        self.assertEqual(list(split("")), [])
        self.assertEqual(list(split("   ")), [])

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            list(split(["a"]))


class TestClassify(TestCase):

    def testLongForms(self):
        self.assertEqual(classify("--target"), Token(TokenKind.LONG, "--target", "target", None))
        self.assertEqual(classify("--target=prod").value, "prod")
        self.assertEqual(classify("--target:prod").value, "prod")
        self.assertEqual(classify("--target=").value, "")
        self.assertEqual(classify("--url=http://host").value, "http://host")
        self.assertEqual(classify("--url:a=b").value, "a=b")

    def testNameStopsAtWhitespace(self):
        token = classify("--name a=b")
        self.assertIs(token.kind, TokenKind.LONG)
        self.assertEqual(token.name, "name a=b")
        self.assertIsNone(token.value)
        self.assertEqual(classify("--msg=a b").value, "a b")

    def testShortCluster(self):
        token = classify("-abc")
        self.assertIs(token.kind, TokenKind.SHORT)
        self.assertEqual(token.name, "abc")
        self.assertIsNone(token.value)

    def testTerminator(self):
        self.assertIs(classify("--").kind, TokenKind.TERMINATOR)

    def testWords(self):
        for text in ("deploy", "-", "-5", "-1.5", "", "file.txt"):
            with self.subTest(text=text):
                self.assertIs(classify(text).kind, TokenKind.WORD)

    def testQuotedNeverAnOption(self):
        token = classify("--verbose", quoted=True)
        self.assertIs(token.kind, TokenKind.WORD)
        self.assertTrue(token.quoted)


class TestTokenize(TestCase):

    def testRawLine(self):
        tokens = list(tokenize('run "hello world" --verbose'))
        self.assertEqual(len(tokens), 3)
        self.assertEqual([token.kind for token in tokens], [TokenKind.WORD, TokenKind.WORD, TokenKind.LONG])
        self.assertEqual(tokens[1].text, "hello world")
        self.assertTrue(tokens[1].quoted)
        self.assertEqual([token.index for token in tokens], [1, 2, 3])

    def testQuotedDashIsWord(self):
        self.assertEqual(kinds('"-v" -v'), [TokenKind.WORD, TokenKind.SHORT])

    def testInlineQuotedValue(self):
        token, = tokenize('--msg="a b"')
        self.assertIs(token.kind, TokenKind.LONG)
        self.assertEqual(token.name, "msg")
        self.assertEqual(token.value, "a b")

    def testVectorIsVerbatim(self):
        tokens = list(tokenize(['"quoted"', "hello world", "--x=1"]))
        self.assertEqual(tokens[0].text, '"quoted"')
        self.assertFalse(tokens[0].quoted)
        self.assertEqual(tokens[1].text, "hello world")
        self.assertIs(tokens[2].kind, TokenKind.LONG)

    def testLazyAndNonRestartable(self):
        iterator = tokenize(["a", "b"])
        self.assertEqual(next(iterator).text, "a")
        self.assertEqual([token.text for token in iterator], ["b"])
        self.assertEqual(list(iterator), [])

    def testInvalidSources(self):
        with self.assertRaises(TypeError):
            tokenize(42)
        with self.assertRaises(TypeError):
            list(tokenize(["a", 1]))


if __name__ == "__main__":
    unittest.main()
