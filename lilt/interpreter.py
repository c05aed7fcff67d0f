"""lilt interpreter: a small imperative language with integers, booleans, lists, functions, `if` and `loop`.

Basic program flow:
    1. Lexer: turns source text into a flat list of tokens (see lilt/lang/token.py)
    2. Parser: builds a syntax tree out of the tokens by recursive descent (see lilt/lang/parser.py)
        - an expression, a list of statements, or a Module of function declarations
    3. Evaluation: walks the tree against a dict of variables (see lilt/tree)
        - a Module runs its `main` function; other functions are called by name from inside the module

Nothing here prints: errors are raised as GenericExceptions (see lilt/lang/error.py) and rendering them is left to
the caller (e.g. lilt/lang/session.py and lilt/lang/shell.py).
"""

from lilt.lang import parser
from lilt.lang.module import Module
from lilt.lang.token import tokenize
from lilt.tree.statement import CompoundStatement, Statement, reject_break

parse_expression = parser.parse_expression
parse_statements = parser.parse_statements
parse_module = parser.parse_module

TOP_LEVEL = "<top level>"  # reported as the place of a stray break


def evaluate(node, env=None, module=None):
    """Evaluates node against env (a dict, mutated in place) and module.

    - an expression returns its Value
    - a statement returns its StatementEval
    - a list of statements is run in order directly against env, returning the first non-NONE_EVAL outcome
    - a Module runs its entry point and returns the Value it returns; it takes neither env nor module

    A break that is not inside any loop raises an EvalError(BREAK_OUTSIDE_LOOP).
    """
    if isinstance(node, Module):
        if env is not None or module is not None:
            raise ValueError("a Module runs in its own scope: env and module must not be given")
        return node.run()

    if env is None:
        env = {}

    if isinstance(node, list):
        return reject_break(CompoundStatement(node).eval_in(env, module), TOP_LEVEL)
    if isinstance(node, Statement):
        return reject_break(node.eval(env, module), TOP_LEVEL)
    return node.eval(env, module)


def run(source, entry_point=Module.ENTRY_POINT):
    """Tokenizes, parses and runs source as a module, returning the Value returned by entry_point."""
    return parse_module(tokenize(source)).run(entry_point)
