"""Abstract syntax tree and recursive-descent parser for sexpi.

Formally, the grammar is

```
<expr>        ::= <atom> | "(" <form> ")"
<atom>        ::= "#t" | "#f" | <integer> | <float> | <identifier>
<form>        ::= "let" "(" <identifier> <expr> ")" <expr>   ; name, bound value, body
                | "lambda" "(" <identifier> ")" <expr>       ; param, body
                | "if" <expr> <expr> <expr>                  ; cond, then, else
                | <operator> <expr> <expr>                   ; left, right
                | <expr> <expr>                              ; callee, single argument
```

The form is chosen by the token right after "(": keywords and operators select their form, while another "(" or an
identifier selects application. Application takes exactly one argument, so functions of several arguments have to be
curried: ((f 1) 2). A bare identifier in callee position is always parsed as an application.

Parsing is strict and left-to-right with no backtracking. The first violation raises a ParseError and nothing after
it is parsed.
"""

from abc import ABC, abstractmethod

from sexpi.lang.error import ParseError
from sexpi.pure.lexical import (Boolean, CloseParen, Float, Identifier, Integer, Keyword, OpenParen, Operator)


class Expression(ABC):
    """Superclass of every node in a syntax tree. Nodes exclusively own their sub-expressions and are not modified
    after parsing. start and end locate the node in its source chunk and are ignored by equality.
    """

    def __init__(self, start=0, end=0):
        self.start = start
        self.end = end
        self._cls = type(self).__name__

    @property
    def nodes(self):
        """Sub-expressions of this node, left to right."""
        return []

    @property
    @abstractmethod
    def expr(self):
        """Canonical source text of this node."""

    @abstractmethod
    def _key(self):
        """Tuple of everything that makes two nodes of the same class equal."""

    def _label(self):
        return f"expr='{self.expr}'"

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Expression>(<label>, nodes=[
            <Expression>(<label>, nodes=[
                ...
                <Expression>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{self._cls}({self._label()}"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return type(other) is type(self) and self._key() == other._key()

    def __hash__(self):
        return hash((self._cls, self._key()))


class Let(Expression):
    """Binds name to the value of bound, visible only inside body."""

    def __init__(self, name, bound, body, start=0, end=0):
        super().__init__(start, end)
        self.name = name
        self.bound = bound
        self.body = body

    @property
    def nodes(self):
        return [self.bound, self.body]

    @property
    def expr(self):
        return f"(let ({self.name} {self.bound.expr}) {self.body.expr})"

    def _key(self):
        return self.name, self.bound, self.body

    def _label(self):
        return f"name='{self.name}'"


class Lambda(Expression):
    """Single-parameter function literal."""

    def __init__(self, param, body, start=0, end=0):
        super().__init__(start, end)
        self.param = param
        self.body = body

    @property
    def nodes(self):
        return [self.body]

    @property
    def expr(self):
        return f"(lambda ({self.param}) {self.body.expr})"

    def _key(self):
        return self.param, self.body

    def _label(self):
        return f"param='{self.param}'"


class If(Expression):

    def __init__(self, cond, then, otherwise, start=0, end=0):
        super().__init__(start, end)
        self.cond = cond
        self.then = then
        self.otherwise = otherwise

    @property
    def nodes(self):
        return [self.cond, self.then, self.otherwise]

    @property
    def expr(self):
        return f"(if {self.cond.expr} {self.then.expr} {self.otherwise.expr})"

    def _key(self):
        return self.cond, self.then, self.otherwise


class Variable(Expression):

    def __init__(self, name, start=0, end=0):
        super().__init__(start, end)
        self.name = name

    @property
    def expr(self):
        return self.name

    def _key(self):
        return (self.name,)


class IntLiteral(Expression):

    def __init__(self, value, start=0, end=0):
        super().__init__(start, end)
        self.value = value

    @property
    def expr(self):
        return str(self.value)

    def _key(self):
        return (self.value,)


class FloatLiteral(Expression):

    def __init__(self, value, start=0, end=0):
        super().__init__(start, end)
        self.value = value

    @property
    def expr(self):
        return repr(self.value)

    def _key(self):
        # repr keeps nan equal to itself
        return (repr(self.value),)


class BoolLiteral(Expression):

    def __init__(self, value, start=0, end=0):
        super().__init__(start, end)
        self.value = value

    @property
    def expr(self):
        return "#t" if self.value else "#f"

    def _key(self):
        return (self.value,)


class BinaryOp(Expression):
    """Operator applied to exactly two operands. op is the operator's spelling."""
    KINDS = {"=": "eq", "+": "add", "-": "sub", "*": "mul", "/": "div"}

    def __init__(self, op, left, right, start=0, end=0):
        super().__init__(start, end)
        if op not in BinaryOp.KINDS:
            raise ValueError(f"{op} not a valid operator")
        self.op = op
        self.left = left
        self.right = right

    @property
    def kind(self):
        return BinaryOp.KINDS[self.op]

    @property
    def nodes(self):
        return [self.left, self.right]

    @property
    def expr(self):
        return f"({self.op} {self.left.expr} {self.right.expr})"

    def _key(self):
        return self.op, self.left, self.right

    def _label(self):
        return f"op='{self.op}'"


class Call(Expression):
    """Application of callee to a single argument."""

    def __init__(self, callee, arg, start=0, end=0):
        super().__init__(start, end)
        self.callee = callee
        self.arg = arg

    @property
    def nodes(self):
        return [self.callee, self.arg]

    @property
    def expr(self):
        return f"({self.callee.expr} {self.arg.expr})"

    def _key(self):
        return self.callee, self.arg


def describe(token):
    """Human-readable name of token for error messages."""
    return "end of input" if token is None else f"'{token.lexeme}'"


def _peek(tokens, cur, expected):
    """Returns tokens[cur], raising a ParseError naming expected if input is exhausted."""
    if cur >= len(tokens):
        start = tokens[-1].end if tokens else 0
        raise ParseError("expected {} but reached end of input", expected, expected=expected, start=start)
    return tokens[cur]


def _expect(tokens, cur, token_type, expected):
    """Returns tokens[cur] if it is a token_type, otherwise raises a ParseError."""
    token = _peek(tokens, cur, expected)
    if not isinstance(token, token_type):
        raise ParseError("expected {} but got {}", (expected, describe(token)), expected=expected, actual=token,
                         start=token.start, end=token.end)
    return token


def _binder(tokens, cur, form):
    """Returns the name in a let/lambda binder slot, which must be a bare identifier."""
    token = _peek(tokens, cur, f"identifier after '{form} ('")
    if not isinstance(token, Identifier):
        raise ParseError("'{}' binds a name, but {} is not an identifier", (form, describe(token)),
                         expected="identifier", actual=token, start=token.start, end=token.end)
    return token.lexeme


def _let_form(tokens, cur):
    _expect(tokens, cur, OpenParen, "'(' after 'let'")
    name = _binder(tokens, cur + 1, "let")
    bound, cur = parse_one(tokens, cur + 2)
    _expect(tokens, cur, CloseParen, "')' closing the 'let' binding")
    body, cur = parse_one(tokens, cur + 1)
    return Let, (name, bound, body), cur


def _lambda_form(tokens, cur):
    _expect(tokens, cur, OpenParen, "'(' after 'lambda'")
    param = _binder(tokens, cur + 1, "lambda")
    _expect(tokens, cur + 2, CloseParen, "')' closing the 'lambda' parameter")
    body, cur = parse_one(tokens, cur + 3)
    return Lambda, (param, body), cur


def _if_form(tokens, cur):
    cond, cur = parse_one(tokens, cur)
    then, cur = parse_one(tokens, cur)
    otherwise, cur = parse_one(tokens, cur)
    return If, (cond, then, otherwise), cur


def _binop_form(tokens, cur, op):
    left, cur = parse_one(tokens, cur)
    right, cur = parse_one(tokens, cur)
    return BinaryOp, (op, left, right), cur


def _call_form(tokens, cur):
    callee, cur = parse_one(tokens, cur)
    arg, cur = parse_one(tokens, cur)
    return Call, (callee, arg), cur


SPECIAL_FORMS = {"let": _let_form, "lambda": _lambda_form, "if": _if_form}


def _form(tokens, cur):
    """Parses whatever follows an opening paren up to (but not including) the closing paren. Returns the node class,
    its arguments, and the position of the token that should close the form.
    """
    head = _peek(tokens, cur, "a form after '('")

    if isinstance(head, Keyword):
        return SPECIAL_FORMS[head.lexeme](tokens, cur + 1)
    elif isinstance(head, Operator):
        return _binop_form(tokens, cur + 1, head.lexeme)
    elif isinstance(head, (OpenParen, Identifier)):
        return _call_form(tokens, cur)

    raise ParseError("expected a keyword, operator or callee after '(' but got {}", describe(head),
                     expected="keyword, operator or callee", actual=head, start=head.start, end=head.end)


def parse_one(tokens, position):
    """Parses one expression starting at tokens[position]. Returns the expression and the position right after it."""
    token = _peek(tokens, position, "an expression")

    if isinstance(token, Boolean):
        return BoolLiteral(token.value, token.start, token.end), position + 1
    elif isinstance(token, Integer):
        return IntLiteral(token.value, token.start, token.end), position + 1
    elif isinstance(token, Float):
        return FloatLiteral(token.value, token.start, token.end), position + 1
    elif isinstance(token, Identifier):
        return Variable(token.lexeme, token.start, token.end), position + 1
    elif not isinstance(token, OpenParen):
        raise ParseError("expected '(' or an atom but got {}", describe(token), expected="'(' or an atom",
                         actual=token, start=token.start, end=token.end)

    node_cls, args, cur = _form(tokens, position + 1)
    close = _expect(tokens, cur, CloseParen, "')'")

    return node_cls(*args, start=token.start, end=close.end), cur + 1


def parse(tokens):
    """Parses every top-level expression in tokens, in order."""
    tokens = list(tokens)
    trees = []
    cur = 0
    while cur < len(tokens):
        tree, cur = parse_one(tokens, cur)
        trees.append(tree)
    return trees
