"""Standard library: built-in functions called when a function name is not defined by the running module.

Built-ins receive already-evaluated arguments and have no access to the caller's variables or module.
"""

from lilt.lang.error import ErrorCode, EvalError
from lilt.tree.value import IntValue, ListValue, NO_VALUE


class Std:
    PRINT = "print"
    LEN = "len"

    @staticmethod
    def is_in_standard_lib(name):
        return name in Std.FUNCTIONS

    @staticmethod
    def eval(name, args):
        """Calls built-in name with args (list of Values). Raises an EvalError if name is not a built-in."""
        if name not in Std.FUNCTIONS:
            raise EvalError(ErrorCode.FUNCTION_NOT_FOUND, "'{}' is not in the standard library", name)
        return Std.FUNCTIONS[name](args)

    @staticmethod
    def print(args):
        """Prints each argument on its own line."""
        for value in args:
            print(value)
        return NO_VALUE

    @staticmethod
    def len(args):
        if len(args) != 1:
            msg = "'{}' expects 1 argument, got {}"
            raise EvalError(ErrorCode.ARITY_MISMATCH, msg, (Std.LEN, str(len(args))))

        value, = args
        if not isinstance(value, ListValue):
            raise EvalError(ErrorCode.TYPE_ERROR, "'{}' expects a list, not '{}'", (Std.LEN, str(value)))
        return IntValue(len(value))


Std.FUNCTIONS = {
    Std.PRINT: Std.print,
    Std.LEN: Std.len,
}
