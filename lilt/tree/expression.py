"""Expressions: syntax tree nodes that evaluate to a Value.

Every expression is evaluated with eval(env, module), where env is the dict of variables of the current scope and
module the Module whose functions may be called (None when evaluating a lone expression). Failures are raised as
EvalErrors.
"""

import operator
from abc import abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from lilt.lang.error import ErrorCode, EvalError, MultipleError, UnknownVariableError
from lilt.lang.std import Std
from lilt.lang.token import Comp, Op
from lilt.tree.node import Node
from lilt.tree.value import BoolValue, IntValue, ListValue, NO_VALUE, Value


class Expr(Node):
    """Superclass of all expressions."""

    @abstractmethod
    def eval(self, env, module=None) -> Value:
        """Evaluates this expression against env (mutated by assignments) and module. Returns a Value or raises an
        EvalError.
        """


@dataclass
class ConstExpr(Expr):
    value: Value

    def eval(self, env, module=None):
        return self.value


@dataclass
class NegExpr(Expr):
    expr: Expr

    def eval(self, env, module=None):
        value = self.expr.eval(env, module)
        if isinstance(value, IntValue):
            return IntValue(-value.value)
        raise EvalError(ErrorCode.TYPE_ERROR, "negation only applies to integers, not '{}'", str(value))


@dataclass
class ParenthesisExpr(Expr):
    """Only records that the parentheses were written: evaluates exactly like expr."""
    expr: Expr

    def eval(self, env, module=None):
        return self.expr.eval(env, module)


@dataclass
class BinaryExpr(Expr):
    left: Expr
    op: Op
    right: Expr

    def eval(self, env, module=None):
        # both operands are evaluated even if the left one fails, so that every cause is reported
        left, left_error = try_eval(self.left, env, module)
        right, right_error = try_eval(self.right, env, module)

        if left_error is not None and right_error is not None:
            raise MultipleError([left_error, right_error])
        elif left_error is not None or right_error is not None:
            raise left_error or right_error

        if isinstance(left, IntValue) and isinstance(right, IntValue):
            return IntValue(BinaryExpr.apply(self.op, left.value, right.value))

        if isinstance(left, ListValue) and isinstance(right, ListValue):
            if self.op is Op.PLUS:
                return ListValue(left.values + right.values)
            raise EvalError(ErrorCode.TYPE_ERROR, "only addition is supported for lists, not '{}'", self.op.value)

        msg = "'{}' is not supported between '{}' and '{}'"
        raise EvalError(ErrorCode.TYPE_ERROR, msg, (self.op.value, str(left), str(right)))

    @staticmethod
    def apply(op, left, right):
        """Integer arithmetic. Division truncates toward zero."""
        if op is Op.PLUS:
            return left + right
        elif op is Op.MINUS:
            return left - right
        elif op is Op.TIMES:
            return left * right

        if right == 0:
            raise EvalError(ErrorCode.DIVISION_BY_ZERO, "division by zero: '{} / {}'", (str(left), str(right)))
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient


@dataclass
class CompareExpr(Expr):
    left: Expr
    comp: Comp
    right: Expr

    OPERATORS = {
        Comp.EQUAL: operator.eq,
        Comp.LOWER: operator.lt,
        Comp.LOWER_EQ: operator.le,
        Comp.HIGHER: operator.gt,
        Comp.HIGHER_EQ: operator.ge,
    }

    def eval(self, env, module=None):
        left, left_error = try_eval(self.left, env, module)
        right, right_error = try_eval(self.right, env, module)
        if left_error is not None or right_error is not None:
            raise left_error or right_error  # left failure first
        return BoolValue(CompareExpr.OPERATORS[self.comp](left.key(), right.key()))


@dataclass
class AssignmentExpr(Expr):
    """Binds name in the current scope. The assignment itself yields no value."""
    name: str
    expr: Expr

    def eval(self, env, module=None):
        env[self.name] = self.expr.eval(env, module)
        return NO_VALUE


@dataclass
class IdentExpr(Expr):
    name: str

    def eval(self, env, module=None):
        try:
            return env[self.name]
        except KeyError:
            raise UnknownVariableError(self.name) from None


@dataclass
class FunctionCall(Expr):
    """Calls a function of module, or of the standard library if module does not define name. Arguments are evaluated
    in the caller's scope; the function body only sees its parameters.
    """
    name: str
    args: List[Expr]

    def eval(self, env, module=None):
        if module is not None and module.get_function(self.name) is not None:
            return module.call(self.name, [arg.eval(env, module) for arg in self.args])

        if Std.is_in_standard_lib(self.name):
            return Std.eval(self.name, [arg.eval(env, module) for arg in self.args])

        if module is None:
            raise EvalError(ErrorCode.MODULE_NOT_FOUND, "cannot call '{}' without a module", self.name)
        raise EvalError(ErrorCode.FUNCTION_NOT_FOUND, "function '{}' not found", self.name)


@dataclass
class ListExpr(Expr):
    """Evaluates items in order; unlike BinaryExpr, the first failing item is the only one reported."""
    items: List[Expr]

    def eval(self, env, module=None):
        return ListValue(tuple(item.eval(env, module) for item in self.items))


@dataclass
class ListAccess(Expr):
    name: str
    index: Expr

    def eval(self, env, module=None):
        index = self.index.eval(env, module)
        if not isinstance(index, IntValue):
            raise EvalError(ErrorCode.TYPE_ERROR, "list index must be an integer, not '{}'", str(index))

        try:
            values = env[self.name]
        except KeyError:
            raise UnknownVariableError(self.name) from None
        if not isinstance(values, ListValue):
            raise EvalError(ErrorCode.TYPE_ERROR, "'{}' is not a list", self.name)

        if not 0 <= index.value < len(values):
            msg = "index {} is out of bounds for '{}' of length {}"
            raise EvalError(ErrorCode.INDEX_OUT_OF_BOUNDS, msg, (str(index), self.name, str(len(values))))
        return values.values[index.value]


def try_eval(expr, env, module=None) -> Tuple[Optional[Value], Optional[EvalError]]:
    """Evaluates expr, returning (value, None) on success and (None, error) on failure."""
    try:
        return expr.eval(env, module), None
    except EvalError as error:
        return None, error
