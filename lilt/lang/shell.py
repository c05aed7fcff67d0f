"""Handles interactive/command-line mode for the lilt interpreter. Uses cmd as backend."""

import cmd

from lilt.lang.error import GenericException
from lilt.lang.parser import Parser
from lilt.lang.session import EmptyLineError, Session
from lilt.lang.token import TokenType, tokenize


class Shell(cmd.Cmd):
    """lilt interpreter shell."""
    intro = "lilt interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # shown while a "{" or "(" is left open
    _tmp_prompt = "> "       # restored once the open line is complete
    IDENT_FOLLOWERS = "=(["  # after a command name, these make it an identifier

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def onecmd(self, line):
        """Sends line to default, bypassing the commands, when it continues an unfinished input or uses a command name
        as a lilt identifier (`vars = [1];`, `tree(1)`, `help[0]`).
        """
        command, arg, line = self.parseline(line)
        if line != "EOF" and (self._tmp_line or (
                command and arg and arg[0] in Shell.IDENT_FOLLOWERS and hasattr(self, "do_" + command))):
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary lilt input."""
        with self.sess.error_handler:  # cmd.Cmd would leave the loop on an uncaught exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(line, self.line_num)
            except EmptyLineError:
                return

            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_vars(self, arg):
        """Prints the variables of the session."""
        for name, value in self.sess.env.items():
            print(f"{name} = {value}")

    def do_tree(self, arg):
        """Prints the syntax tree of an input without running it: tree EXPRESSION, tree STATEMENTS or tree fn ..."""
        with self.sess.error_handler:
            self.line_num += 1
            self.sess.error_handler.register_line(self.sess.path, arg, self.line_num)

            tokens = tokenize(arg)
            if tokens and tokens[0].type is TokenType.FN:
                print(Parser(tokens).parse_module().display())
            elif tokens:
                print(Session.parse_line(tokens).display())

            self.sess.error_handler.remove_line(self.sess.path)

    def do_help(self, arg):
        """Prints a short tour of the language instead of the command list."""
        print("Welcome to the lilt interpreter!\n\n"
              "lilt has integers, booleans, lists, functions, 'if' and 'loop'. Type an \n"
              "expression such as '1 + 2 * 3' to evaluate it, or statements such as \n"
              "'a = [1, 2]; b = a + [3];' to run them. Variables are kept between lines.\n\n"
              "Functions are defined with 'fn name(a, b) { return a + b; }' and called with \n"
              "'name(1, 2)'. 'vars' lists the variables, 'tree INPUT' shows how INPUT is \n"
              "parsed, 'exit' leaves.")

    def emptyline(self):
        """An empty line does nothing (cmd.Cmd would repeat the last command)."""
        return ""

    def do_EOF(self, arg):
        """Ctrl-D: leaves the shell on a fresh line."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Leaves the shell. Takes no argument."""
        if arg:
            with self.sess.error_handler:
                raise GenericException("'exit' takes no argument, got '{}'", arg)
            return False
        return True
