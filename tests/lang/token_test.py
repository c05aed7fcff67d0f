import sys
import unittest

from lilt.lang.error import ErrorCode, LexError, UnknownCharError
from lilt.lang.token import Comp, Op, Token, TokenType, tokenize


def op(value):
    return Token(TokenType.OP, value)


def comp(value):
    return Token(TokenType.COMP, value)


def ident(name):
    return Token(TokenType.IDENT, name)


def integer(value):
    return Token(TokenType.INTEGER, value)


PLUS, MINUS, TIMES, DIV = op(Op.PLUS), op(Op.MINUS), op(Op.TIMES), op(Op.DIV)
LPAREN, RPAREN = Token(TokenType.LPAREN), Token(TokenType.RPAREN)
LBRACE, RBRACE = Token(TokenType.LBRACE), Token(TokenType.RBRACE)
SEMICOLON, ASSIGN = Token(TokenType.SEMICOLON), Token(TokenType.ASSIGN)


class TokenizeTestCase(unittest.TestCase):

    def test_operators(self):
        cases = {
            "+-*/": [PLUS, MINUS, TIMES, DIV],
            " + -      */    ": [PLUS, MINUS, TIMES, DIV],
            " (+) -      */    ": [LPAREN, PLUS, RPAREN, MINUS, TIMES, DIV],
            "1+2-31": [integer(1), PLUS, integer(2), MINUS, integer(31)],
            "1+1;": [integer(1), PLUS, integer(1), SEMICOLON],
            "{1+1;}": [LBRACE, integer(1), PLUS, integer(1), SEMICOLON, RBRACE],
            "[1,2]": [Token(TokenType.LBRACKET), integer(1), Token(TokenType.COMMA), integer(2),
                      Token(TokenType.RBRACKET)],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tokenize(case), case)

    def test_double_char_operators(self):
        cases = {
            "==": [comp(Comp.EQUAL)],
            "1 == 2": [integer(1), comp(Comp.EQUAL), integer(2)],
            "1 = 2": [integer(1), ASSIGN, integer(2)],
            "1 < 2": [integer(1), comp(Comp.LOWER), integer(2)],
            "1 <= 2": [integer(1), comp(Comp.LOWER_EQ), integer(2)],
            "1 > 2": [integer(1), comp(Comp.HIGHER), integer(2)],
            "1 >= 2": [integer(1), comp(Comp.HIGHER_EQ), integer(2)],
            "= =": [ASSIGN, ASSIGN],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tokenize(case), case)

    def test_words(self):
        cases = {
            "a = 1;": [ident("a"), ASSIGN, integer(1), SEMICOLON],
            "return 1;": [Token(TokenType.RETURN), integer(1), SEMICOLON],
            "if (1) { return 1; }": [Token(TokenType.IF), LPAREN, integer(1), RPAREN, LBRACE,
                                     Token(TokenType.RETURN), integer(1), SEMICOLON, RBRACE],
            "fn else true false loop break": [Token(TokenType.FN), Token(TokenType.ELSE), Token(TokenType.TRUE),
                                              Token(TokenType.FALSE), Token(TokenType.LOOP), Token(TokenType.BREAK)],
            "my_list _x x1 returned": [ident("my_list"), ident("_x"), ident("x1"), ident("returned")],
            "Return": [ident("Return")],
            "12ab": [integer(12), ident("ab")],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tokenize(case), case)

    def test_comments(self):
        text = "1 // Something\n// Hello\n2\n// Bla-Bla\n3\n"
        self.assertEqual([integer(1), integer(2), integer(3)], tokenize(text))
        self.assertEqual([integer(1), DIV, integer(2)], tokenize("1 / 2 // 3"))
        self.assertEqual([], tokenize("// only a comment"))

    @unittest.skipUnless(getattr(sys, "get_int_max_str_digits", lambda: 0)(), "integers have no digit limit")
    def test_integer_too_long(self):
        with self.assertRaises(LexError) as context:
            tokenize("x = " + "9" * (sys.get_int_max_str_digits() + 1) + ";")
        self.assertIs(ErrorCode.INVALID_INTEGER, context.exception.code)

    def test_string(self):
        cases = {
            "\"Hello world\"": [Token(TokenType.STRING, "Hello world")],
            "1 = \"Hello world\"": [integer(1), ASSIGN, Token(TokenType.STRING, "Hello world")],
            "\"a\\n\"": [Token(TokenType.STRING, "a\\n")],
            "\"\"": [Token(TokenType.STRING, "")],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tokenize(case), case)

        with self.assertRaises(LexError) as context:
            tokenize("\"never closed")
        self.assertIs(ErrorCode.UNTERMINATED_STRING, context.exception.code)

    def test_unknown_char(self):
        should_raise = {"1 % 2": "%", "a & b": "&", "!": "!", "x = 'a'": "'", "1\n2 # 3": "#"}
        for case, char in should_raise.items():
            with self.assertRaises(UnknownCharError, msg=case) as context:
                tokenize(case)
            self.assertEqual(char, context.exception.char, case)
            self.assertIs(ErrorCode.UNKNOWN_CHAR, context.exception.code, case)

    def test_unknown_char_diagnosis(self):
        with self.assertRaises(UnknownCharError) as context:
            tokenize("a = 1;\nb = 2 % 3;")
        error = context.exception
        self.assertEqual("b = 2 % 3;", error.expr)
        self.assertEqual("%", error.expr[error.start:error.end])


if __name__ == '__main__':
    unittest.main()
