import unittest

from lilt.lang.error import ErrorCode, EvalError, UnknownVariableError
from lilt.lang.parser import parse_statements
from lilt.lang.token import tokenize
from lilt.tree.statement import BREAK_EVAL, NONE_EVAL, CompoundStatement, ReturnEval
from lilt.tree.value import IntValue, ListValue


def block(text):
    return CompoundStatement(parse_statements(tokenize(text)))


class CompoundTestCase(unittest.TestCase):

    def test_runs_in_order(self):
        env = {}
        self.assertIs(NONE_EVAL, block("a = 1; b = a + 1; a = b * 10;").eval_in(env))
        self.assertEqual({"a": IntValue(20), "b": IntValue(2)}, env)

    def test_block_scope(self):
        env = {"a": IntValue(1)}
        block("{ a = 2; b = 3; }").eval_in(env)
        self.assertEqual({"a": IntValue(1)}, env)

    def test_block_sees_enclosing_scope(self):
        env = {"a": IntValue(1)}
        self.assertEqual(ReturnEval(IntValue(2)), block("{ b = a + 1; return b; }").eval_in(env))

    def test_eval_copies_scope(self):
        env = {}
        block("a = 1;").eval(env)
        self.assertEqual({}, env)

    def test_stops_at_return(self):
        env = {}
        self.assertEqual(ReturnEval(IntValue(1)), block("a = 1; return a; a = 2;").eval_in(env))
        self.assertEqual(IntValue(1), env["a"])

    def test_stops_at_break(self):
        env = {}
        self.assertIs(BREAK_EVAL, block("a = 1; break; a = 2;").eval_in(env))
        self.assertEqual(IntValue(1), env["a"])

    def test_list_statements(self):
        env = {}
        outcome = block("{ a = [3]; b = a + [1]; return b }").eval_in(env)
        self.assertEqual(ReturnEval(ListValue((IntValue(3), IntValue(1)))), outcome)


class IfTestCase(unittest.TestCase):

    def test_truthiness(self):
        should_pass = ["1", "-1", "true", "1 == 1", "2 > 1", "a"]
        should_fail = ["0", "false", "1 == 2", "a - 5"]

        env = {"a": IntValue(5)}
        for case in should_pass:
            text = f"if ({case}) {{ return 1; }} else {{ return 2; }}"
            self.assertEqual(ReturnEval(IntValue(1)), block(text).eval_in(env), case)
        for case in should_fail:
            text = f"if ({case}) {{ return 1; }} else {{ return 2; }}"
            self.assertEqual(ReturnEval(IntValue(2)), block(text).eval_in(env), case)

    def test_no_else(self):
        self.assertIs(NONE_EVAL, block("if (false) { return 1; }").eval_in({}))

    def test_else_if(self):
        text = "if (n == 0) { return 10; } else if (n == 1) { return 11; } else { return 12; }"
        for n, expected in [(0, 10), (1, 11), (7, 12)]:
            self.assertEqual(ReturnEval(IntValue(expected)), block(text).eval_in({"n": IntValue(n)}))

    def test_branch_scope(self):
        env = {}
        block("if (true) { a = 1; }").eval_in(env)
        self.assertNotIn("a", env)

    def test_invalid_condition(self):
        should_raise = ["if ([1]) { }", "if ([]) { }", "if (a = 1) { }"]
        for case in should_raise:
            with self.assertRaises(EvalError, msg=case) as context:
                block(case).eval_in({})
            self.assertIs(ErrorCode.TYPE_ERROR, context.exception.code, case)

        with self.assertRaises(UnknownVariableError):
            block("if (x) { }").eval_in({})


class LoopTestCase(unittest.TestCase):

    def test_counter(self):
        env = {"i": IntValue(0)}
        outcome = block("loop { if (i == 10) { break; } i = i + 1; }").eval_in(env)
        self.assertIs(NONE_EVAL, outcome)
        self.assertEqual(IntValue(10), env["i"])

    def test_body_assignments_persist(self):
        env = {}
        text = "i = 0; loop { if (i == 3) { break; } acc = i; i = i + 1; }"
        block(text).eval_in(env)
        self.assertEqual(IntValue(2), env["acc"])
        self.assertEqual(IntValue(3), env["i"])

    def test_return_inside_loop(self):
        env = {"i": IntValue(0)}
        outcome = block("loop { i = i + 1; if (i > 4) { return i * 2; } }").eval_in(env)
        self.assertEqual(ReturnEval(IntValue(10)), outcome)

    def test_break_leaves_innermost_loop(self):
        env = {}
        text = """
        outer = 0;
        total = 0;
        loop {
            if (outer == 3) { break; }
            inner = 0;
            loop {
                if (inner == 4) { break; }
                total = total + 1;
                inner = inner + 1;
            }
            outer = outer + 1;
        }
        """
        block(text).eval_in(env)
        self.assertEqual(IntValue(12), env["total"])

    def test_break_from_nested_block(self):
        env = {"i": IntValue(0)}
        block("loop { i = i + 1; { { break; } } }").eval_in(env)
        self.assertEqual(IntValue(1), env["i"])


if __name__ == '__main__':
    unittest.main()
