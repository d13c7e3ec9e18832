import unittest

from sexpi.pure.lexical import (Boolean, CloseParen, Float, Identifier, Integer, Keyword, OpenParen, Operator, classify,
                                split, tokenize)


class SplitTestCase(unittest.TestCase):

    def test_split(self):
        cases = {
            "(let (a 1) (+ a 2))": ["(", "let", "(", "a", "1", ")", "(", "+", "a", "2", ")", ")"],
            "  a \t\n  b  ": ["a", "b"],
            "f(x)": ["f", "(", "x", ")"],
            "abc": ["abc"],
            "": [],
            " \t\n ": [],
            ")(": [")", "("],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, [word for word, __ in split(case)], case)

    def test_offsets(self):
        self.assertEqual([("(", 0), ("+", 1), ("ab", 3), ("2", 6), (")", 7)], list(split("(+ ab 2)")))


class ClassifyTestCase(unittest.TestCase):

    def test_classify(self):
        cases = {
            "(": OpenParen,
            ")": CloseParen,
            "let": Keyword,
            "lambda": Keyword,
            "if": Keyword,
            "=": Operator,
            "+": Operator,
            "-": Operator,
            "*": Operator,
            "/": Operator,
            "#t": Boolean,
            "#f": Boolean,
            "42": Integer,
            "-7": Integer,
            "+5": Integer,
            "9223372036854775807": Integer,
            "-9223372036854775808": Integer,
            "9223372036854775808": Float,
            "3.5": Float,
            "-0.25": Float,
            "1e3": Float,
            ".5": Float,
            "5.": Float,
            "inf": Float,
            "NaN": Float,
            "abc": Identifier,
            "x1": Identifier,
            "1_000": Identifier,
            "#true": Identifier,
            "Let": Identifier,
            "3.0.1": Identifier,
            ".": Identifier,
            "λx.x": Identifier,
            "--": Identifier,
        }
        for case, expected in cases.items():
            token = classify(case)
            self.assertIs(expected, type(token), case)
            self.assertEqual(case, token.lexeme, case)

    def test_values(self):
        self.assertIs(True, classify("#t").value)
        self.assertIs(False, classify("#f").value)
        self.assertEqual(-7, classify("-7").value)
        self.assertEqual(3.5, classify("3.5").value)
        self.assertEqual(float(2 ** 63), classify("9223372036854775808").value)


class TokenizeTestCase(unittest.TestCase):

    def test_tokenize(self):
        expected = [
            OpenParen("("), Keyword("let"), OpenParen("("), Identifier("a"), Integer("1"), CloseParen(")"),
            OpenParen("("), Operator("+"), Identifier("a"), Integer("2"), CloseParen(")"), CloseParen(")")
        ]
        self.assertEqual(expected, tokenize("(let (a 1) (+ a 2))"))

    def test_total(self):
        should_pass = ["", ")))(((", "λx.x", "#", "\r\n", "(((let", "1 2 3", "'quoted \"string\"", "a;;b"]
        for case in should_pass:
            tokens = tokenize(case)
            self.assertIsInstance(tokens, list, case)
            self.assertTrue(all(token.lexeme for token in tokens), case)

    def test_long_numbers(self):
        token, = tokenize("1" * 5000)
        self.assertIs(Float, type(token))
        self.assertEqual(float("inf"), token.value)

        cases = {"0" * 5000 + "1": 1, "-" + "0" * 5000 + "7": -7, "+" + "0" * 5000: 0}
        for case, expected in cases.items():
            token, = tokenize(case)
            self.assertIs(Integer, type(token))
            self.assertEqual(expected, token.value)

    def test_positions(self):
        tokens = tokenize("(+ ab\n  2)")
        self.assertEqual([0, 1, 3, 8, 9], [token.start for token in tokens])
        self.assertEqual(5, tokens[2].end)

    def test_equality_ignores_position(self):
        self.assertEqual(tokenize("(f x)"), tokenize("  ( f   x )"))
        self.assertNotEqual(Integer("1"), Float("1"))

    def test_repr(self):
        self.assertEqual("[OpenParen((), Identifier(f), Float(2.0), CloseParen())]", repr(tokenize("(f 2.0)")))


if __name__ == '__main__':
    unittest.main()
