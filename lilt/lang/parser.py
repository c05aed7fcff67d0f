"""Recursive-descent parser for the lilt language. Builds syntax trees (see lilt/tree) out of the tokens produced by
lilt.lang.token.tokenize.

Grammar, alternatives tried in order (first match wins):

```
<declaration> ::= "fn" IDENT "(" [IDENT ("," IDENT)*] ")" <compound>
<statement>   ::= "if" "(" <expr> ")" <compound> ["else" <statement>]
                | "return" <expr> [";"]
                | "loop" <compound>
                | "break" [";"]
                | <expr> ";"
                | <compound>
<compound>    ::= "{" <statement>* "}"

<expr>        ::= IDENT "=" <expr>                            ; assignment
                | <additive> [COMP <additive>]                ; comparisons do not chain
<additive>    ::= <mult> (("+" | "-") <mult>)*                ; left-associative: a - b - c = (a - b) - c
<mult>        ::= <primary> (("*" | "/") <primary>)*          ; left-associative
<primary>     ::= INTEGER | "true" | "false"
                | IDENT "(" [<expr> ("," <expr>)*] ")"        ; function call
                | IDENT "[" <expr> "]"                        ; list access
                | IDENT
                | "(" <expr> ")"
                | "[" [<expr> ("," <expr>)*] "]"              ; list
                | "-" <primary>
```

The parser keeps a single index into the tokens. Every _parse_* method either returns a node, or returns None after
restoring the index to where it started (a checkpoint), so that the next alternative sees the same tokens. The few
mistakes that cannot be fixed by trying another alternative raise a ParseError right away.
"""

import logging

from lilt.lang.error import ErrorCode, ParseError
from lilt.lang.module import Module
from lilt.lang.token import Op, TokenType
from lilt.tree.declaration import FunctionDecl
from lilt.tree.expression import (AssignmentExpr, BinaryExpr, CompareExpr, ConstExpr, FunctionCall, IdentExpr,
                                  ListAccess, ListExpr, NegExpr, ParenthesisExpr)
from lilt.tree.statement import (BreakStatement, CompoundStatement, IfStatement, LoopStatement, ReturnStatement,
                                 SimpleStatement)
from lilt.tree.value import BoolValue, IntValue

logger = logging.getLogger(__name__)


class Parser:
    """Top-down parser over a list of tokens."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.index = 0

    # public API

    def parse_expression(self):
        """Parses the whole token list as one expression."""
        expr = self._parse_expression()
        if expr is None:
            raise ParseError(ErrorCode.UNKNOWN_SYNTAX, "'{}' is not a valid expression", self._remaining())
        self._expect_end()
        return expr

    def parse_statements(self):
        """Parses the whole token list as a sequence of statements."""
        statements = []
        while not self.at_end():
            statement = self._parse_statement()
            if statement is None:
                code = ErrorCode.TOKENS_NOT_PARSED if statements else ErrorCode.UNKNOWN_SYNTAX
                raise ParseError(code, "'{}' is not a valid statement", self._remaining())
            statements.append(statement)
        return statements

    def parse_module(self):
        """Parses the whole token list as a sequence of function declarations."""
        declarations = []
        while not self.at_end():
            declarations.append(self._parse_function())
        module = Module(declarations)
        logger.debug("parsed module with %d function(s)", module.number_of_functions())
        return module

    # cursor

    def peek(self, offset=0):
        """Inspects a token without consuming it. Returns None past the end."""
        position = self.index + offset
        return self.tokens[position] if position < len(self.tokens) else None

    def consume(self):
        """Returns the current token and goes forward."""
        token = self.peek()
        self.index += 1
        return token

    def at_end(self):
        return self.index >= len(self.tokens)

    def _check(self, token_type, offset=0):
        token = self.peek(offset)
        return token is not None and token.type is token_type

    def _accept(self, token_type):
        """Consumes the current token if it has type token_type. Returns whether it did."""
        if self._check(token_type):
            self.index += 1
            return True
        return False

    def _remaining(self):
        return " ".join(str(token) for token in self.tokens[self.index:])

    def _expect_end(self):
        if not self.at_end():
            raise ParseError(ErrorCode.TOKENS_NOT_PARSED, "unexpected '{}'", self._remaining())

    # declarations

    def _parse_function(self):
        if not self._accept(TokenType.FN):
            raise ParseError(ErrorCode.UNKNOWN_SYNTAX, "expected a function declaration, got '{}'", self._remaining())

        name = self.consume()
        if name is None or name.type is not TokenType.IDENT:
            raise ParseError(ErrorCode.UNKNOWN_SYNTAX, "expected a function name after 'fn', got '{}'", str(name))
        name = name.value

        params = self._parse_params(name)

        if not self._check(TokenType.LBRACE):
            raise ParseError(ErrorCode.MISSING_FUNCTION_BODY, "function '{}' has no {{ }} body", name)
        body = self._parse_compound()
        if body is None:
            raise ParseError(ErrorCode.UNKNOWN_SYNTAX, "body of function '{}' is not valid: '{}'",
                             (name, self._remaining()))

        return FunctionDecl(name, params, body)

    def _parse_params(self, name):
        """Matches "(" [IDENT ("," IDENT)*] ")"."""
        malformed = ParseError(ErrorCode.MALFORMED_PARAMETERS, "parameters of function '{}' are malformed", name)

        if not self._accept(TokenType.LPAREN):
            raise malformed
        params = []
        if self._accept(TokenType.RPAREN):
            return params

        while True:
            token = self.consume()
            if token is None or token.type is not TokenType.IDENT:
                raise malformed
            if token.value in params:
                raise ParseError(ErrorCode.MALFORMED_PARAMETERS, "function '{}' repeats parameter '{}'",
                                 (name, token.value))
            params.append(token.value)

            if self._accept(TokenType.RPAREN):
                return params
            if not self._accept(TokenType.COMMA):
                raise malformed

    # statements

    def _parse_statement(self):
        for alternative in (self._parse_if, self._parse_return, self._parse_loop, self._parse_break,
                            self._parse_simple_statement, self._parse_compound):
            statement = alternative()
            if statement is not None:
                return statement
        return None

    def _parse_if(self):
        """Matches "if" "(" <expr> ")" <compound> ["else" <statement>]."""
        checkpoint = self.index
        if self._accept(TokenType.IF) and self._accept(TokenType.LPAREN):
            condition = self._parse_expression()
            if condition is not None and self._accept(TokenType.RPAREN):
                then = self._parse_compound()
                if then is not None:
                    if_checkpoint = self.index
                    if self._accept(TokenType.ELSE):
                        otherwise = self._parse_statement()
                        if otherwise is not None:
                            return IfStatement(condition, then, otherwise)
                        self.index = if_checkpoint
                    return IfStatement(condition, then)
        self.index = checkpoint
        return None

    def _parse_return(self):
        """Matches "return" <expr> [";"]."""
        checkpoint = self.index
        if self._accept(TokenType.RETURN):
            expr = self._parse_expression()
            if expr is not None:
                self._accept(TokenType.SEMICOLON)
                return ReturnStatement(expr)
        self.index = checkpoint
        return None

    def _parse_loop(self):
        """Matches "loop" <compound>."""
        checkpoint = self.index
        if self._accept(TokenType.LOOP):
            body = self._parse_compound()
            if body is not None:
                return LoopStatement(body)
        self.index = checkpoint
        return None

    def _parse_break(self):
        """Matches "break" [";"]."""
        if self._accept(TokenType.BREAK):
            self._accept(TokenType.SEMICOLON)
            return BreakStatement()
        return None

    def _parse_simple_statement(self):
        """Matches <expr> ";"."""
        checkpoint = self.index
        expr = self._parse_expression()
        if expr is not None and self._accept(TokenType.SEMICOLON):
            return SimpleStatement(expr)
        self.index = checkpoint
        return None

    def _parse_compound(self):
        """Matches "{" <statement>* "}"."""
        checkpoint = self.index
        if self._accept(TokenType.LBRACE):
            statements = []
            while True:
                if self._accept(TokenType.RBRACE):
                    return CompoundStatement(statements)
                statement = self._parse_statement()
                if statement is None:
                    break
                statements.append(statement)
        self.index = checkpoint
        return None

    # expressions

    def _parse_expression(self):
        """Matches an assignment, otherwise a (possibly comparison) additive expression."""
        assignment = self._parse_assignment()
        if assignment is not None:
            return assignment
        return self._parse_comparison()

    def _parse_assignment(self):
        """Matches IDENT "=" <expr>."""
        checkpoint = self.index
        if self._check(TokenType.IDENT) and self._check(TokenType.ASSIGN, offset=1):
            name = self.consume().value
            self.consume()
            expr = self._parse_expression()
            if expr is not None:
                return AssignmentExpr(name, expr)
        self.index = checkpoint
        return None

    def _parse_comparison(self):
        """Matches <additive> [COMP <additive>]."""
        checkpoint = self.index
        left = self._parse_additive()
        if left is None:
            return None
        if not self._check(TokenType.COMP):
            return left

        comp = self.consume().value
        right = self._parse_additive()
        if right is not None:
            return CompareExpr(left, comp, right)
        self.index = checkpoint
        return None

    def _parse_additive(self):
        """Matches <mult> (("+" | "-") <mult>)*, building the tree from the left."""
        return self._parse_chain(self._parse_multiplicative, (Op.PLUS, Op.MINUS))

    def _parse_multiplicative(self):
        """Matches <primary> (("*" | "/") <primary>)*, building the tree from the left."""
        return self._parse_chain(self._parse_primary, (Op.TIMES, Op.DIV))

    def _parse_chain(self, parse_operand, ops):
        checkpoint = self.index
        left = parse_operand()
        if left is None:
            return None

        while self._check(TokenType.OP) and self.peek().value in ops:
            op = self.consume().value
            right = parse_operand()
            if right is None:
                self.index = checkpoint
                return None
            left = BinaryExpr(left, op, right)
        return left

    def _parse_primary(self):
        token = self.peek()
        if token is None:
            return None

        if token.type is TokenType.INTEGER:
            self.index += 1
            return ConstExpr(IntValue(token.value))

        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self.index += 1
            return ConstExpr(BoolValue(token.type is TokenType.TRUE))

        if token.type is TokenType.IDENT:
            if self._check(TokenType.LPAREN, offset=1):
                return self._parse_call()
            if self._check(TokenType.LBRACKET, offset=1):
                return self._parse_list_access()
            self.index += 1
            return IdentExpr(token.value)

        if token.type is TokenType.LPAREN:
            return self._parse_parenthesis()

        if token.type is TokenType.LBRACKET:
            return self._parse_list()

        if token.type is TokenType.OP and token.value is Op.MINUS:
            checkpoint = self.index
            self.index += 1
            expr = self._parse_primary()
            if expr is not None:
                return NegExpr(expr)
            self.index = checkpoint

        return None

    def _parse_call(self):
        """Matches IDENT "(" [<expr> ("," <expr>)*] ")". Once the "(" is seen, nothing else can match, so a bad
        argument list is an error rather than a failed alternative.
        """
        name = self.consume().value
        self.consume()
        args = self._parse_sequence(TokenType.RPAREN)
        if args is None:
            raise ParseError(ErrorCode.MALFORMED_ARGUMENTS, "arguments of call to '{}' are malformed", name)
        return FunctionCall(name, args)

    def _parse_list_access(self):
        """Matches IDENT "[" <expr> "]"."""
        checkpoint = self.index
        name = self.consume().value
        self.consume()
        index = self._parse_expression()
        if index is not None and self._accept(TokenType.RBRACKET):
            return ListAccess(name, index)
        self.index = checkpoint
        return None

    def _parse_parenthesis(self):
        """Matches "(" <expr> ")"."""
        checkpoint = self.index
        self.consume()
        expr = self._parse_expression()
        if expr is not None and self._accept(TokenType.RPAREN):
            return ParenthesisExpr(expr)
        self.index = checkpoint
        return None

    def _parse_list(self):
        """Matches "[" [<expr> ("," <expr>)*] "]"."""
        checkpoint = self.index
        self.consume()
        items = self._parse_sequence(TokenType.RBRACKET)
        if items is not None:
            return ListExpr(items)
        self.index = checkpoint
        return None

    def _parse_sequence(self, closing):
        """Matches [<expr> ("," <expr>)*] closing, the opening token being already consumed. Returns the list of
        expressions, or None (index restored) if the sequence is malformed.
        """
        checkpoint = self.index
        exprs = []
        if self._accept(closing):
            return exprs

        while True:
            expr = self._parse_expression()
            if expr is None:
                break
            exprs.append(expr)
            if self._accept(closing):
                return exprs
            if not self._accept(TokenType.COMMA):
                break
        self.index = checkpoint
        return None


def parse_expression(tokens):
    return Parser(tokens).parse_expression()


def parse_statements(tokens):
    return Parser(tokens).parse_statements()


def parse_module(tokens):
    return Parser(tokens).parse_module()
