"""Tree-walking evaluator for sexpi. Evaluation is strict and left-to-right: operands, conditions and arguments are
evaluated before they are used, except for the untaken branch of an if, which is never evaluated.

Evaluation never mutates the environment it is given. let and application both evaluate their body in a new
environment built on top of the old one, and a lambda captures the environment in effect where it is evaluated.
"""

import math
import operator

from sexpi.lang.error import DivisionByZero, GenericException, IntegerOverflow, TypeMismatch, UnboundVariable
from sexpi.pure.lexical import I64_MAX, I64_MIN, tokenize
from sexpi.pure.runtime import BoolValue, Closure, Environment, FloatValue, IntValue
from sexpi.pure.syntax import BinaryOp, BoolLiteral, Call, FloatLiteral, If, IntLiteral, Lambda, Let, Variable, parse


ARITHMETIC = {"+": operator.add, "-": operator.sub, "*": operator.mul}


def truncated_div(dividend, divisor):
    """Integer division rounding toward zero. Python's // rounds toward negative infinity."""
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


def float_div(dividend, divisor):
    """IEEE-754 division: dividing by (signed) zero gives a signed infinity, or nan for 0/0 and nan/0."""
    if divisor != 0:
        return dividend / divisor
    if dividend == 0 or math.isnan(dividend):
        return math.nan
    return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)


class Evaluator:
    """Evaluates syntax trees. error_handler is optional: when given, evaluation steps and warnings are reported to
    it, but evaluation results never depend on it.
    """

    def __init__(self, error_handler=None):
        self.error_handler = error_handler
        self._rules = {
            IntLiteral: self._int_literal,
            FloatLiteral: self._float_literal,
            BoolLiteral: self._bool_literal,
            Variable: self._variable,
            BinaryOp: self._binary_op,
            If: self._if,
            Lambda: self._lambda,
            Call: self._call,
            Let: self._let,
        }

    def evaluate(self, expr, env=None):
        """Returns the value of expr in env (the empty environment if None)."""
        if env is None:
            env = Environment()

        try:
            rule = self._rules[type(expr)]
        except KeyError:
            raise GenericException("cannot evaluate '{}'", repr(expr), internal=True) from None
        return rule(expr, env)

    def _step(self, label, text):
        if self.error_handler is not None:
            self.error_handler.register_step(label, text)

    def _warn(self, *args, **kwargs):
        if self.error_handler is not None:
            self.error_handler.warn(*args, **kwargs)

    def _int_literal(self, expr, env):
        return IntValue(expr.value)

    def _float_literal(self, expr, env):
        return FloatValue(expr.value)

    def _bool_literal(self, expr, env):
        return BoolValue(expr.value)

    def _variable(self, expr, env):
        try:
            return env.lookup(expr.name)
        except KeyError:
            raise UnboundVariable(expr.name, start=expr.start, end=expr.end) from None

    def _binary_op(self, expr, env):
        left = self.evaluate(expr.left, env)
        right = self.evaluate(expr.right, env)

        if not isinstance(left, (IntValue, FloatValue)):
            raise TypeMismatch("'{}' expects {} operands, got {} '{}'", "int or float", left, exprs=expr.op,
                               start=expr.left.start, end=expr.left.end)
        if type(right) is not type(left):
            raise TypeMismatch("'{}' expects {} right operand to match the left, got {} '{}'", left.kind,
                               right, exprs=expr.op, start=expr.right.start, end=expr.right.end)

        if expr.op == "=":
            return BoolValue(left.value == right.value)
        elif expr.op == "/":
            return self._divide(expr, left, right)

        result = ARITHMETIC[expr.op](left.value, right.value)
        if isinstance(left, IntValue):
            return self._checked(expr, result)
        return FloatValue(result)

    def _divide(self, expr, left, right):
        if isinstance(left, FloatValue):
            result = float_div(left.value, right.value)
            if right.value == 0:
                self._warn("floating division by zero in '{}' gives {}", (expr.expr, repr(result)), start=expr.start,
                           end=expr.end)
            return FloatValue(result)

        if right.value == 0:
            raise DivisionByZero("integer division by zero in '{}'", expr.expr, start=expr.start, end=expr.end)
        return self._checked(expr, truncated_div(left.value, right.value))

    def _checked(self, expr, result):
        """Wraps result in an IntValue if it fits in 64 bits."""
        if not I64_MIN <= result <= I64_MAX:
            raise IntegerOverflow("'{}' overflows a 64-bit integer", expr.expr, start=expr.start, end=expr.end)
        return IntValue(result)

    def _if(self, expr, env):
        cond = self.evaluate(expr.cond, env)
        if not isinstance(cond, BoolValue):
            raise TypeMismatch("'if' expects a {} condition, got {} '{}'", "bool", cond, start=expr.cond.start,
                               end=expr.cond.end)
        return self.evaluate(expr.then if cond.value else expr.otherwise, env)

    def _lambda(self, expr, env):
        return Closure(expr.param, expr.body, env)

    def _call(self, expr, env):
        callee = self.evaluate(expr.callee, env)
        if not isinstance(callee, Closure):
            raise TypeMismatch("only a {} can be called, got {} '{}'", "closure", callee, start=expr.callee.start,
                               end=expr.callee.end)

        arg = self.evaluate(expr.arg, env)
        self._step("β", f"{expr.expr} with {callee.param} = {arg}")
        return self.evaluate(callee.body, callee.env.bind(callee.param, arg))

    def _let(self, expr, env):
        bound = self.evaluate(expr.bound, env)
        self._step("let", f"{expr.name} = {bound}")
        return self.evaluate(expr.body, env.bind(expr.name, bound))


def interpret(source, env=None, error_handler=None):
    """Lexes, parses and evaluates every top-level expression in source. Returns their values in source order. Raises
    the first ParseError or EvalError encountered; nothing after it is evaluated.
    """
    evaluator = Evaluator(error_handler)
    return [evaluator.evaluate(tree, env) for tree in parse(tokenize(source))]

