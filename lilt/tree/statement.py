"""Statements: syntax tree nodes that are executed for their effect.

Evaluating a statement yields a StatementEval telling the enclosing statement how to continue: carry on (NONE_EVAL),
leave the function with a value (ReturnEval), or leave the nearest loop (BREAK_EVAL). Failures are raised as
EvalErrors.

Scoping: a CompoundStatement runs in a copy of the enclosing variables, so nothing it binds or rebinds is visible once
it is left. Loops run their body's statements directly in the loop's own scope, so the body's assignments persist
from one iteration to the next.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from lilt.lang.error import ErrorCode, EvalError
from lilt.tree.expression import Expr
from lilt.tree.node import Node
from lilt.tree.value import Value


class StatementEval:
    """Superclass of the three outcomes of a statement."""


@dataclass(frozen=True)
class NoneEval(StatementEval):
    pass


@dataclass(frozen=True)
class ReturnEval(StatementEval):
    value: Value


@dataclass(frozen=True)
class BreakEval(StatementEval):
    pass


NONE_EVAL = NoneEval()
BREAK_EVAL = BreakEval()


class Statement(Node):
    """Superclass of all statements."""

    @abstractmethod
    def eval(self, env, module=None) -> StatementEval:
        """Executes this statement against env and module."""


@dataclass
class SimpleStatement(Statement):
    """`expr;`: the value of expr is discarded."""
    expr: Expr

    def eval(self, env, module=None):
        self.expr.eval(env, module)
        return NONE_EVAL


@dataclass
class CompoundStatement(Statement):
    """`{ statements }`: a new scope."""
    statements: List[Statement] = field(default_factory=list)

    def eval(self, env, module=None):
        return self.eval_in(dict(env), module)

    def eval_in(self, scope, module=None):
        """Runs statements in order directly against scope, stopping at the first return or break."""
        for statement in self.statements:
            outcome = statement.eval(scope, module)
            if outcome != NONE_EVAL:
                return outcome
        return NONE_EVAL


@dataclass
class ReturnStatement(Statement):
    expr: Expr

    def eval(self, env, module=None):
        return ReturnEval(self.expr.eval(env, module))


@dataclass
class IfStatement(Statement):
    """Integer 0 and false are falsy; other integers and true are truthy. Other values cannot be conditions."""
    condition: Expr
    then: Statement
    otherwise: Optional[Statement] = None

    def eval(self, env, module=None):
        if self.condition.eval(env, module).truthy():
            return self.then.eval(env, module)
        elif self.otherwise is not None:
            return self.otherwise.eval(env, module)
        return NONE_EVAL


@dataclass
class LoopStatement(Statement):
    """`loop { ... }`: runs until a break (or a return, which leaves the enclosing function as well)."""
    body: CompoundStatement

    def eval(self, env, module=None):
        while True:
            outcome = self.body.eval_in(env, module)
            if outcome == BREAK_EVAL:
                return NONE_EVAL
            elif outcome != NONE_EVAL:
                return outcome


@dataclass
class BreakStatement(Statement):
    def eval(self, env, module=None):
        return BREAK_EVAL


def reject_break(outcome, where):
    """Returns outcome, unless it is a break that reached where (a function body or the top level) without meeting a
    loop.
    """
    if isinstance(outcome, BreakEval):
        raise EvalError(ErrorCode.BREAK_OUTSIDE_LOOP, "'break' outside of a loop in '{}'", where)
    return outcome
