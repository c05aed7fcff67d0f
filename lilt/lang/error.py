"""Error handling for the lilt language. Only GenericExceptions should be encountered while running a program: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors are grouped by the layer that raises them (LexError, ParseError, EvalError) and each one carries an ErrorCode so
that a caller can tell them apart without looking at the message.
"""

import sys
from enum import Enum

from termcolor import colored


class ErrorCode(Enum):
    # LexError
    UNKNOWN_CHAR = "unknown character"
    UNTERMINATED_STRING = "unterminated string"
    INVALID_INTEGER = "invalid integer"

    # ParseError
    UNKNOWN_SYNTAX = "unknown syntax"
    TOKENS_NOT_PARSED = "tokens not parsed"
    MALFORMED_ARGUMENTS = "malformed argument list"
    MALFORMED_PARAMETERS = "malformed parameter list"
    MISSING_FUNCTION_BODY = "missing function body"
    DUPLICATE_FUNCTION = "duplicate function"

    # EvalError
    UNKNOWN_VARIABLE = "unknown variable"
    TYPE_ERROR = "type error"
    FUNCTION_NOT_FOUND = "function not found"
    MODULE_NOT_FOUND = "module not found"
    ARITY_MISMATCH = "arity mismatch"
    INDEX_OUT_OF_BOUNDS = "index out of bounds"
    DIVISION_BY_ZERO = "division by zero"
    BREAK_OUTSIDE_LOOP = "break outside loop"
    MULTIPLE_ERRORS = "multiple errors"


class GenericException(Exception):
    """Base of every error lilt reports. msg is a format string filled with exprs (a string or a sequence of strings):
    str(error) is the plain message and error.msg the one shown to the user, with exprs in bold.

    exprs[0] is the offending snippet; start and end delimit the part of it that diagnosis underlines (end=-1 means
    the whole snippet).
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        exprs = [exprs] if isinstance(exprs, str) else list(exprs or [""])

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*[colored(expr, attrs=["bold"]) for expr in exprs])

        self.expr = exprs[0]
        self.start = start
        self.end = len(self.expr) if end == -1 else end
        self.diagnosis = diagnosis
        self.internal = internal


class InterpreterError(GenericException):
    """A GenericException tagged with an ErrorCode. If msg is not given, the code's description is used."""

    def __init__(self, code, msg=None, exprs=None, **kwargs):
        kwargs.setdefault("diagnosis", False)  # tokens do not carry positions
        super().__init__(msg if msg is not None else code.value, exprs, **kwargs)
        self.code = code


class LexError(InterpreterError):
    pass


class UnknownCharError(LexError):
    """Raised on the first character that does not start any token. line is the scanned text, offset the position of
    char within it.
    """

    def __init__(self, char, line="", offset=0):
        if not line:
            line, offset = char, 0
        line_start = line.rfind("\n", 0, offset) + 1  # only keep the offending line for diagnosis
        line_end = line.find("\n", offset)
        super().__init__(ErrorCode.UNKNOWN_CHAR, "unknown character '{}'", char, diagnosis=True)
        self.char = char
        self.expr = line[line_start:line_end if line_end != -1 else len(line)]
        self.start = offset - line_start
        self.end = self.start + 1


class ParseError(InterpreterError):
    pass


class EvalError(InterpreterError):
    pass


class UnknownVariableError(EvalError):
    def __init__(self, name):
        super().__init__(ErrorCode.UNKNOWN_VARIABLE, "unknown variable '{}'", name)
        self.name = name


class MultipleError(EvalError):
    """Both operands of a binary expression failed independently: causes holds the left then the right error."""

    def __init__(self, causes):
        self.causes = list(causes)
        msg = "multiple errors:" + "".join("\n  - " + str(cause) for cause in self.causes)
        super().__init__(ErrorCode.MULTIPLE_ERRORS, msg.replace("{", "{{").replace("}", "}}"))

    def flattened(self):
        """Yields every non-MultipleError cause, depth first, left to right."""
        for cause in self.causes:
            if isinstance(cause, MultipleError):
                yield from cause.flattened()
            else:
                yield cause


class ErrorHandler:
    """Context manager wrapped around everything that runs lilt code. GenericExceptions escaping the block are printed
    as lilt errors; anything else is printed as an internal error and re-raised.

    traceback maps each registered file to the (line, line_num) being processed, or (None, None) when idle.
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal  # exit with status 1 after the first error
        self.traceback = {}

    def register_file(self, path):
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Marks line as the one being processed in path, so that an error raised meanwhile points at it."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Marks path as idle once its current line went through without error."""
        self.traceback[path] = (None, None)

    def _active_lines(self):
        return [(path, line, line_num) for path, (line, line_num) in self.traceback.items() if line]

    @staticmethod
    def diagnose(error, warning=False):
        """Renders error.expr on one line with the error.start:error.end span highlighted, and a caret under it."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        end = max(error.end, error.start + 1)

        before, span, after = error.expr[:error.start], error.expr[error.start:end], error.expr[end:]
        underline = "^" + "~" * (len(span) - 1)
        return (f"  {before}{colored(span, color, attrs=['bold'])}{after}\n"
                f"  {' ' * len(before)}{colored(underline, color, attrs=['bold'])}")

    def _report(self, error, label, color, header):
        print(header + colored(label, color, attrs=["bold"]) + error.msg)
        if error.diagnosis and error.expr and not error.internal:
            print(ErrorHandler.diagnose(error, warning=color == ErrorHandler.WARNING))

    def warn(self, *args, **kwargs):
        """Prints a warning built from GenericException(*args, **kwargs). Execution goes on."""
        active = self._active_lines()
        header = colored(f"{active[0][0]}:{active[0][2]}: ", attrs=["bold"]) if active else ""
        self._report(GenericException(*args, **kwargs), "warning: ", ErrorHandler.WARNING, header)

    def throw(self, error):
        """Prints error (a GenericException) under the lines registered in traceback, then exits if fatal. Otherwise
        every file goes back to idle.
        """
        active = self._active_lines()
        header = "".join(f"  File '{path}', line {line_num}:\n    {line}\n" for path, line, line_num in active)
        if len(active) > 1:
            header = "Traceback:\n" + header
        if error.internal:
            header += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        self._report(error, "error: ", ErrorHandler.ERROR, header)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:
            self.traceback[path] = (None, None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False
        if issubclass(exc_type, SystemExit):
            return False

        if issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("interrupted"))
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("maximum recursion depth exceeded"))
        else:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            return False
        return True
