"""Lexical analysis for the lilt language: turns source text into a flat list of Tokens.

Scanning is greedy, left to right, and skips whitespace:

```
<integer>  ::= <digit>+
<word>     ::= (<letter> | "_") (<letter> | <digit> | "_")*   ; keyword if in Lexer.KEYWORDS, identifier otherwise
<string>   ::= '"' <char>* '"'                                ; no escape sequences
<comment>  ::= "//" <char>* <newline>                         ; produces no token
```

Tokens do not carry positions: error messages past this point are about tokens, not lines and columns.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from lilt.lang.error import ErrorCode, LexError, UnknownCharError


class Op(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIV = "/"


class Comp(Enum):
    EQUAL = "=="
    LOWER = "<"
    LOWER_EQ = "<="
    HIGHER = ">"
    HIGHER_EQ = ">="


class TokenType(Enum):
    OP = "OP"
    COMP = "COMP"
    IDENT = "IDENT"
    INTEGER = "INTEGER"
    STRING = "STRING"

    # symbols
    ASSIGN = "="
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    SEMICOLON = ";"
    COMMA = ","

    # keywords
    RETURN = "return"
    FN = "fn"
    IF = "if"
    ELSE = "else"
    TRUE = "true"
    FALSE = "false"
    LOOP = "loop"
    BREAK = "break"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any = None

    def __str__(self):
        if self.type in (TokenType.OP, TokenType.COMP):
            return self.value.value
        if self.type is TokenType.STRING:
            return f'"{self.value}"'
        if self.value is not None:
            return str(self.value)
        return self.type.value


class Lexer:
    """Single left-to-right scan over text. Use tokenize() rather than this class directly."""
    KEYWORDS = {token_type.value: token_type for token_type in (
        TokenType.RETURN, TokenType.FN, TokenType.IF, TokenType.ELSE,
        TokenType.TRUE, TokenType.FALSE, TokenType.LOOP, TokenType.BREAK,
    )}

    SYMBOLS = {
        "+": Token(TokenType.OP, Op.PLUS),
        "-": Token(TokenType.OP, Op.MINUS),
        "*": Token(TokenType.OP, Op.TIMES),
        "/": Token(TokenType.OP, Op.DIV),
        "(": Token(TokenType.LPAREN),
        ")": Token(TokenType.RPAREN),
        "{": Token(TokenType.LBRACE),
        "}": Token(TokenType.RBRACE),
        "[": Token(TokenType.LBRACKET),
        "]": Token(TokenType.RBRACKET),
        ";": Token(TokenType.SEMICOLON),
        ",": Token(TokenType.COMMA),
        "=": Token(TokenType.ASSIGN),
        "<": Token(TokenType.COMP, Comp.LOWER),
        ">": Token(TokenType.COMP, Comp.HIGHER),
    }

    DOUBLE_SYMBOLS = {
        "==": Token(TokenType.COMP, Comp.EQUAL),
        "<=": Token(TokenType.COMP, Comp.LOWER_EQ),
        ">=": Token(TokenType.COMP, Comp.HIGHER_EQ),
    }

    def __init__(self, text):
        self.text = text
        self.position = 0

    @property
    def current_char(self):
        return self.text[self.position] if self.position < len(self.text) else None

    @property
    def next_char(self):
        return self.text[self.position + 1] if self.position + 1 < len(self.text) else None

    def _take_while(self, predicate):
        start = self.position
        while self.current_char is not None and predicate(self.current_char):
            self.position += 1
        return self.text[start:self.position]

    def tokens(self):
        """Generates tokens until the end of text. Raises a LexError on the first character that starts no token."""
        while self.current_char is not None:
            char = self.current_char

            if char.isspace():
                self.position += 1

            elif char == "/" and self.next_char == "/":
                end = self.text.find("\n", self.position)
                self.position = len(self.text) if end == -1 else end + 1

            elif char.isdecimal():
                digits = self._take_while(str.isdecimal)
                try:
                    value = int(digits)
                except ValueError:  # longer than sys.get_int_max_str_digits()
                    raise LexError(ErrorCode.INVALID_INTEGER, "integer literal of {} digits is too long",
                                   str(len(digits))) from None
                yield Token(TokenType.INTEGER, value)

            elif char.isalpha() or char == "_":
                word = self._take_while(lambda c: c.isalnum() or c == "_")
                if word in Lexer.KEYWORDS:
                    yield Token(Lexer.KEYWORDS[word])
                else:
                    yield Token(TokenType.IDENT, word)

            elif char == "\"":
                end = self.text.find("\"", self.position + 1)
                if end == -1:
                    raise LexError(ErrorCode.UNTERMINATED_STRING, "unterminated string '{}'",
                                   self.text[self.position:])
                yield Token(TokenType.STRING, self.text[self.position + 1:end])
                self.position = end + 1

            elif self.next_char is not None and char + self.next_char in Lexer.DOUBLE_SYMBOLS:
                yield Lexer.DOUBLE_SYMBOLS[char + self.next_char]
                self.position += 2

            elif char in Lexer.SYMBOLS:
                yield Lexer.SYMBOLS[char]
                self.position += 1

            else:
                raise UnknownCharError(char, self.text, self.position)


def tokenize(text: str) -> List[Token]:
    """Returns the tokens of text. Fails fast with a LexError: no partial token list is returned."""
    return list(Lexer(text).tokens())
