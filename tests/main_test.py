import io
import os
import re
import sys
import tempfile
import unittest
from unittest import mock

from sexpi.main import main


def plain(text):
    """Strips terminal color codes."""
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.limit = sys.getrecursionlimit()
        self.paths = []

    def tearDown(self):
        sys.setrecursionlimit(self.limit)
        for path in self.paths:
            os.remove(path)

    def write(self, source):
        handle, path = tempfile.mkstemp(suffix=".sx")
        with os.fdopen(handle, "w") as file:
            file.write(source)
        self.paths.append(path)
        return path

    @mock.patch("sys.stdout", new_callable=io.StringIO)
    def test_file(self, stdout):
        main([self.write("(let (a 1) (+ a 2))\n(= 3 3)\n")])
        self.assertEqual("3\n#t\n", stdout.getvalue())

    @mock.patch("sys.stdout", new_callable=io.StringIO)
    def test_tokens_and_tree(self, stdout):
        main(["--tokens", "--tree", self.write("(+ 1 2)")])
        self.assertEqual("OpenParen(() Operator(+) Integer(1) Integer(2) CloseParen())\n"
                         "BinaryOp(op='+', nodes=[\n"
                         "    IntLiteral(expr='1'),\n"
                         "    IntLiteral(expr='2')\n"
                         "])\n"
                         "3\n", stdout.getvalue())

    @mock.patch("sys.stdout", new_callable=io.StringIO)
    def test_trace(self, stdout):
        main(["--trace", self.write("((lambda (x) x) 1)")])
        self.assertEqual("  β ((lambda (x) x) 1) with x = 1\n1\n", plain(stdout.getvalue()))

    @mock.patch("sys.stdout", new_callable=io.StringIO)
    def test_error_exits(self, stdout):
        with self.assertRaises(SystemExit) as context:
            main([self.write("1\n(+ x 1)\n2\n")])
        self.assertEqual(1, context.exception.code)

        output = plain(stdout.getvalue())
        self.assertTrue(output.startswith("1\n"), output)
        self.assertIn("line 2", output)
        self.assertIn("error: unbound variable 'x'", output)
        self.assertNotIn("\n2\n", output)

    @mock.patch("sys.stdout", new_callable=io.StringIO)
    def test_missing_file(self, stdout):
        with self.assertRaises(SystemExit):
            main(["does-not-exist.sx"])
        self.assertIn("'does-not-exist.sx' could not be opened", plain(stdout.getvalue()))


if __name__ == '__main__':
    unittest.main()
