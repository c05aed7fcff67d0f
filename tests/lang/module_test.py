import unittest

from lilt.lang.error import ErrorCode, EvalError, ParseError, UnknownVariableError
from lilt.lang.module import Module
from lilt.lang.parser import parse_module
from lilt.lang.token import tokenize
from lilt.tree.declaration import FunctionDecl
from lilt.tree.statement import CompoundStatement
from lilt.tree.value import IntValue, ListValue, NO_VALUE

FIB = """
fn fib(n) {
    if (n < 2) {
        return n;
    }
    return fib(n - 1) + fib(n - 2);
}

fn main() {
    return fib(10);
}
"""


def module(text):
    return parse_module(tokenize(text))


class ModuleTestCase(unittest.TestCase):

    def test_fib(self):
        fib = module(FIB)
        cases = {0: 0, 1: 1, 2: 1, 3: 2, 4: 3, 5: 5, 6: 8, 10: 55, 15: 610}
        for n, expected in cases.items():
            self.assertEqual(IntValue(expected), fib.call("fib", [IntValue(n)]), n)
        self.assertEqual(IntValue(55), fib.run())

    def test_iterative(self):
        text = """
        fn sum(values) {
            i = 0;
            total = 0;
            loop {
                if (i == len(values)) { return total; }
                total = total + values[i];
                i = i + 1;
            }
        }

        fn main() { return sum([1, 2, 3, 4]); }
        """
        self.assertEqual(IntValue(10), module(text).run())

    def test_number_of_functions(self):
        self.assertEqual(2, module(FIB).number_of_functions())
        self.assertEqual(0, Module().number_of_functions())

    def test_get_function(self):
        fib = module(FIB)
        self.assertIsInstance(fib.get_function("main"), FunctionDecl)
        self.assertEqual(["n"], fib.get_function("fib").params)
        self.assertIsNone(fib.get_function("len"))

    def test_duplicate_function(self):
        declaration = FunctionDecl("f", [], CompoundStatement())
        with self.assertRaises(ParseError) as context:
            Module([declaration, declaration])
        self.assertIs(ErrorCode.DUPLICATE_FUNCTION, context.exception.code)

    def test_function_scope(self):
        text = """
        fn get() { return x; }
        fn set() { x = 2; return 0; }
        fn main() { x = 1; set(); return x; }
        fn leak() { x = 1; return get(); }
        """
        program = module(text)
        self.assertEqual(IntValue(1), program.run())
        with self.assertRaises(UnknownVariableError):
            program.run("leak")

    def test_arguments_are_values(self):
        text = """
        fn append(l) { l = l + [0]; return len(l); }
        fn main() { a = [1]; n = append(a); return [n, len(a)]; }
        """
        self.assertEqual(ListValue((IntValue(2), IntValue(1))), module(text).run())

    def test_no_return(self):
        self.assertIs(NO_VALUE, module("fn main() { a = 1; }").run())
        self.assertIs(NO_VALUE, module("fn main() { }").run())

    def test_module_shadows_builtins(self):
        self.assertEqual(IntValue(42), module("fn len(l) { return 42; } fn main() { return len([]); }").run())

    def test_errors(self):
        should_raise = {
            ("fn f(a) { return a; }", "f", 0): ErrorCode.ARITY_MISMATCH,
            ("fn f(a) { return a; }", "f", 2): ErrorCode.ARITY_MISMATCH,
            ("fn f() { break; }", "f", 0): ErrorCode.BREAK_OUTSIDE_LOOP,
            ("fn f() { if (true) { break; } }", "f", 0): ErrorCode.BREAK_OUTSIDE_LOOP,
            ("fn f() { return g(); }", "f", 0): ErrorCode.FUNCTION_NOT_FOUND,
            ("fn f() { return 1; }", "main", 0): ErrorCode.FUNCTION_NOT_FOUND,
            ("fn f(a) { return a + true; }", "f", 1): ErrorCode.TYPE_ERROR,
        }
        for (text, name, arity), code in should_raise.items():
            with self.assertRaises(EvalError, msg=text) as context:
                module(text).call(name, [IntValue(1)] * arity)
            self.assertIs(code, context.exception.code, text)

    def test_missing_entry_point(self):
        with self.assertRaises(EvalError) as context:
            module("fn start() { return 1; }").run()
        self.assertIs(ErrorCode.FUNCTION_NOT_FOUND, context.exception.code)
        self.assertEqual(IntValue(1), module("fn start() { return 1; }").run("start"))

    def test_display(self):
        expected = ("FunctionDecl(name='f', params=['a'], nodes=[\n"
                    "    CompoundStatement(nodes=[\n"
                    "        ReturnStatement(nodes=[\n"
                    "            IdentExpr(name='a')\n"
                    "        ])\n"
                    "    ])\n"
                    "])")
        self.assertEqual(expected, module("fn f(a) { return a; }").display())


if __name__ == '__main__':
    unittest.main()
