"""Session control for the lilt language: runs a source file, or accumulates the lines typed in command-line mode.

In file mode the whole file is parsed as a module when the session is created, and run() calls its entry point. In
command-line mode each line is either a function declaration (added to the session's module, replacing any function
of the same name) or an expression/statements, which run() evaluates against the session's variables.
"""

import logging
from collections import Counter

from lilt.lang.error import ErrorCode, GenericException, ParseError
from lilt.lang.module import Module
from lilt.lang.parser import Parser
from lilt.lang.token import TokenType, tokenize
from lilt.tree.statement import CompoundStatement, ReturnEval, reject_break
from lilt.tree.value import NO_VALUE

logger = logging.getLogger(__name__)


class EmptyLineError(Exception):
    """Raised by Session.add on a line with nothing to run (blank or only a comment)."""


class Session:
    """Governs a lilt session, with control over its functions and variables."""
    SH_FILE = "<in>"  # path of the shell session
    ENTRY_POINT = Module.ENTRY_POINT

    def __init__(self, error_handler, path, cmd_line, entry_point=ENTRY_POINT):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # key of this session in the error traceback
        self.cmd_line = cmd_line        # lines typed in the shell rather than a file
        self.entry_point = entry_point  # function run by run() in file mode

        self.functions = {}  # dict of name: FunctionDecl defined in the current session
        self.module = Module()
        self.env = {}        # variables of command-line mode
        self.to_exec = {}    # dict of line num: (text, node) to execute
        self.results = []

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.module = Parser(tokenize(source)).parse_module()
            self.functions = {declaration.name: declaration for declaration in self.module.declarations}
            logger.debug("loaded %s", self.module)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, prev=""):
        """Preprocesses a line typed in command-line mode. prev holds the previous lines if they needed a
        continuation. Returns updated value of line and whether it is still unfinished (more "{" or "(" tokens opened
        than closed; brackets in comments and strings do not count).
        """
        line = (prev + "\n" + line if prev else line).rstrip()
        counts = Counter(token.type for token in tokenize(line))
        unfinished = (counts[TokenType.LBRACE] > counts[TokenType.RBRACE]
                      or counts[TokenType.LPAREN] > counts[TokenType.RPAREN])
        return line, unfinished

    def add(self, line, line_num):
        """Parses line. Function declarations take effect immediately; anything else is delayed until run is called.
        Raises an EmptyLineError if line holds no token.
        """
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        tokens = tokenize(line)
        if not tokens:
            self.error_handler.remove_line(self.path)
            raise EmptyLineError(line)

        if tokens[0].type is TokenType.FN:
            for declaration in Parser(tokens).parse_module().declarations:
                if declaration.name in self.functions:
                    self.error_handler.warn("redefining function '{}'", declaration.name, diagnosis=False)
                self.functions[declaration.name] = declaration
            self.module = Module(self.functions.values())
            logger.debug("session module is now %s", self.module)

        else:
            self.to_exec[line_num] = (line, Session.parse_line(tokens))

        self.error_handler.remove_line(self.path)

    @staticmethod
    def parse_line(tokens):
        """Parses a command-line input as a lone expression if possible (`1 + 1` needs no ";"), as statements
        otherwise.
        """
        try:
            return Parser(tokens).parse_expression()
        except ParseError as error:
            if error.code is ErrorCode.MALFORMED_ARGUMENTS:
                raise
        return CompoundStatement(Parser(tokens).parse_statements())

    def run(self):
        """Runs the entry point in file mode, or the pending lines in command-line mode. Values are appended to
        self.results. Will raise any errors that are encountered.
        """
        if not self.cmd_line:
            logger.debug("running %s()", self.entry_point)
            self.results.append(self.module.run(self.entry_point))
            return

        for line_num, (line, node) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, line, line_num)
            try:
                value = self.execute(node)
            finally:
                del self.to_exec[line_num]

            if value is not NO_VALUE:
                self.results.append(value)
            self.error_handler.remove_line(self.path)

    def execute(self, node):
        """Evaluates an expression or statements against the session's variables and module. Statements are run
        directly in the session's scope, so their assignments are kept for the next lines.
        """
        if not isinstance(node, CompoundStatement):
            return node.eval(self.env, self.module)

        outcome = reject_break(node.eval_in(self.env, self.module), self.path)
        return outcome.value if isinstance(outcome, ReturnEval) else NO_VALUE

    def pop(self):
        """Returns and removes the most recent result."""
        return self.results.pop()
