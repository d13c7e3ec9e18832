"""S-expression interpreter.

For reference:
- "pure": the language core, with no I/O of its own
- "lang": error reporting, sessions and the interactive shell built around the core

Basic program flow:
    1. Lexer: splits source text into tokens on whitespace and parentheses (see pure/lexical.py)
    2. Parser: builds one syntax tree per top-level expression by recursive descent (see pure/syntax.py)
    3. Evaluator: walks each tree against an immutable environment (see pure/evaluation.py)

"""

from sexpi.pure.evaluation import Evaluator, interpret
from sexpi.pure.lexical import tokenize
from sexpi.pure.runtime import Environment
from sexpi.pure.syntax import parse
