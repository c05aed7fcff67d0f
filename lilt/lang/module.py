"""A module is the parsed form of a whole lilt program: an ordered collection of function declarations, one of which
(by convention `main`) is the entry point.

Modules are never modified once built, so one module can be shared by any number of evaluations.
"""

import logging

from lilt.lang.error import ErrorCode, EvalError, ParseError
from lilt.tree.declaration import FunctionDecl
from lilt.tree.statement import ReturnEval, reject_break
from lilt.tree.value import NO_VALUE

logger = logging.getLogger(__name__)


class Module:
    ENTRY_POINT = "main"

    def __init__(self, declarations=()):
        """Raises a ParseError if two functions share a name."""
        self.declarations = tuple(declarations)
        self._functions = {}

        for declaration in self.declarations:
            if declaration.name in self._functions:
                raise ParseError(ErrorCode.DUPLICATE_FUNCTION, "function '{}' is defined twice", declaration.name)
            self._functions[declaration.name] = declaration

    def get_function(self, name):
        """Returns the FunctionDecl called name, or None."""
        declaration = self._functions.get(name)
        return declaration if isinstance(declaration, FunctionDecl) else None

    def number_of_functions(self):
        return sum(1 for declaration in self.declarations if isinstance(declaration, FunctionDecl))

    def call(self, name, args):
        """Calls function name with args, a list of already-evaluated Values. The body runs in a scope holding only
        the parameters, so it cannot see the caller's variables.
        """
        function = self.get_function(name)
        if function is None:
            raise EvalError(ErrorCode.FUNCTION_NOT_FOUND, "function '{}' not found", name)

        if len(args) != len(function.params):
            msg = "'{}' expects {} argument(s), got {}"
            raise EvalError(ErrorCode.ARITY_MISMATCH, msg, (name, str(len(function.params)), str(len(args))))

        logger.debug("calling %s(%s)", name, ", ".join(str(arg) for arg in args))
        outcome = reject_break(function.body.eval(dict(zip(function.params, args)), self), name)
        return outcome.value if isinstance(outcome, ReturnEval) else NO_VALUE

    def run(self, entry_point=ENTRY_POINT):
        """Calls entry_point with no arguments and returns its value."""
        return self.call(entry_point, [])

    def display(self):
        return "\n".join(declaration.display() for declaration in self.declarations)

    def __repr__(self):
        return f"Module({', '.join(declaration.name for declaration in self.declarations)})"
