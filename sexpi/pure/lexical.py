"""Lexical analysis for sexpi: raw source text to an ordered list of tokens.

Formally, words are classified as follows (first match wins):

```
<paren>      ::= "(" | ")"                      ; always a single-character token
<keyword>    ::= "let" | "lambda" | "if"
<operator>   ::= "=" | "+" | "-" | "*" | "/"
<boolean>    ::= "#t" | "#f"
<integer>    ::= ["+" | "-"] <digit>+            ; must fit in a 64-bit signed integer
<float>      ::= anything Python's float accepts in decimal, exponent or inf/nan notation
<identifier> ::= any other run of non-whitespace, non-paren characters
```

Lexing never fails. Note that reserved spellings are never identifiers: a variable named `if` or `#t` cannot be
written, and no attempt is made to detect such collisions.
"""

from dataclasses import dataclass, field
import re


I64_MIN = -2 ** 63
I64_MAX = 2 ** 63 - 1

WHITESPACE = (" ", "\t", "\n")

INTEGER = re.compile(r"[+-]?[0-9]+")
FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)", re.IGNORECASE)


@dataclass(frozen=True)
class Token:
    """Superclass of every token. start is the offset of the token in its source and is ignored by equality."""
    lexeme: str
    start: int = field(default=0, compare=False)

    @property
    def end(self):
        return self.start + len(self.lexeme)

    def __repr__(self):
        return f"{type(self).__name__}({self.lexeme})"

    def __str__(self):
        return self.lexeme


class OpenParen(Token):
    pass


class CloseParen(Token):
    pass


class Keyword(Token):
    """Leading word of a special form: let, lambda or if."""


class Operator(Token):
    """Binary operator: =, +, -, *, /."""


class Boolean(Token):

    @property
    def value(self):
        return self.lexeme == "#t"


class Integer(Token):

    @property
    def value(self):
        return to_int(self.lexeme)


class Float(Token):

    @property
    def value(self):
        return float(self.lexeme)


class Identifier(Token):
    """Any word that is not reserved and not a number. No character-set validation is done."""


RESERVED = {
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
}


def to_int(word):
    """Converts a digit string with optional sign to an int. Leading zeros are dropped first, so padded words stay
    under Python's limit on the length of converted digit strings.
    """
    sign = "-" if word.startswith("-") else ""
    return int(sign + (word.lstrip("+-").lstrip("0") or "0"))


def is_integer(word):
    """Whether or not word is a 64-bit signed integer literal."""
    if INTEGER.fullmatch(word) is None:
        return False
    # more than 19 significant digits never fits in 64 bits
    return len(word.lstrip("+-").lstrip("0")) <= 19 and I64_MIN <= to_int(word) <= I64_MAX


def is_float(word):
    """Whether or not word is a floating point literal."""
    return FLOAT.fullmatch(word) is not None


def classify(word, start=0):
    """Returns the token for a single word. Parentheses are classified here too."""
    if word in RESERVED:
        return RESERVED[word](word, start)
    elif is_integer(word):
        return Integer(word, start)
    elif is_float(word):
        return Float(word, start)
    return Identifier(word, start)


def split(source):
    """Yields (word, start) pairs. Parentheses are always their own word and flush any pending word; whitespace
    flushes the pending word and is otherwise discarded.
    """
    buf = ""
    buf_start = 0

    for idx, char in enumerate(source):
        if char in "()" or char in WHITESPACE:
            if buf:
                yield buf, buf_start
                buf = ""
            if char in "()":
                yield char, idx
        else:
            if not buf:
                buf_start = idx
            buf += char

    if buf:
        yield buf, buf_start


def tokenize(source):
    """Converts source to a list of tokens. Total: any string can be tokenized."""
    return [classify(word, start) for word, start in split(source)]
