import unittest

from lcnorm.lang.error import ParseError
from lcnorm.pure.parser import Parser, parse
from lcnorm.pure.term import Abstraction, Application, Variable


class ParserTestCase(unittest.TestCase):

    def test_round_trip(self):
        cases = ["x", "(x.x)", "xy", "abc", "(x.(y.x))", "(x.xx)(y.y)", "(f.(x.fx))ab", "(x.(y.(z.xzy)))",
                 "(x.x)(x.xx)(x.xx)"]
        for case in cases:
            self.assertEqual(case, parse(case).expr, case)

    def test_parse(self):
        cases = {
            "x": Variable("x"),
            "(x.x)": Abstraction("x", Variable("x")),
            "x y z": Application(Application(Variable("x"), Variable("y")), Variable("z")),
            "(x.x y)": Abstraction("x", Application(Variable("x"), Variable("y"))),
            "(x.x) y": Application(Abstraction("x", Variable("x")), Variable("y")),
            "(x.(y.x))": Abstraction("x", Abstraction("y", Variable("x"))),
            "X Y": Application(Variable("X"), Variable("Y")),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(case), case)

    def test_left_associative(self):
        right_nested = Application(Variable("x"), Application(Variable("y"), Variable("z")))
        self.assertNotEqual(right_nested, parse("x y z"))
        self.assertEqual(parse("xyz"), parse("x y z"))

    def test_whitespace(self):
        cases = {
            " ( x . x ) \n y ": "(x.x)y",
            "\t(x.\r\nx)\n": "(x.x)",
            "(x.\n  (y.\n    x y))\n": "(x.(y.xy))",
            "a\tb\rc\nd": "abcd",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse(case).expr, repr(case))

    def test_source_types(self):
        self.assertEqual(parse("(x.x)y"), parse(b"(x.x)y"))
        self.assertEqual(parse("(x.x)y"), Parser(bytearray(b"(x.x)y")).parse())

    def test_parse_error(self):
        should_raise = ["", "   ", "(", "(x", "(x.", "(x.)", "(x.x", "x)", "(x.x))", ".", "(.x)", "(1.x)", "1",
                        "(xx)", "x.y", "(x.x)(", "λx.x", "(x.x)\n)", "(x y)", "((x.x))"]
        for case in should_raise:
            self.assertRaises(ParseError, parse, case)

    def test_parse_error_details(self):
        cases = {
            "": ("unexpected end of input, expected λ-term", 0, 1, 0),
            "(x.x": ("unexpected end of input, expected ')'", 4, 1, 4),
            "(x y)": ("expected '.' but found 'y'", 3, 1, 3),
            "x)": ("unmatched ')'", 1, 1, 1),
            "(x.)": ("expected λ-term but found ')'", 3, 1, 3),
            "(1.x)": ("expected variable but found '1'", 1, 1, 1),
            "x.y": ("expected λ-term but found '.'", 1, 1, 1),
            "(x.λ)": ("expected λ-term but found 'λ'", 3, 1, 3),
            "(x.x)\n(y z)": ("expected '.' but found 'z'", 9, 2, 3),
            "((x.x))": ("expected variable but found '('", 1, 1, 1),
        }
        for case, (msg, offset, line_num, start) in cases.items():
            with self.assertRaises(ParseError) as context:
                parse(case)

            error = context.exception
            self.assertEqual(msg, str(error), case)
            self.assertEqual(offset, error.offset, case)
            self.assertEqual(line_num, error.line_num, case)
            self.assertEqual(start, error.start, case)

        with self.assertRaises(ParseError) as context:
            parse("(x.x)\n(y z)")
        self.assertEqual("(y z)", context.exception.expr)

    def test_cursor(self):
        parser = Parser("  (x.x) y)")
        self.assertEqual("(", parser.read())
        self.assertEqual(2, parser.offset)

        term = parser.parse_expr()
        self.assertEqual("(x.x)y", term.expr)
        self.assertEqual(")", parser.read())  # not consumed
        self.assertIsNone(parser.parse_term())
        self.assertEqual(9, parser.offset)

    def test_trace(self):
        messages = []
        parse("(x.x)y", trace=messages.append)
        self.assertEqual(["consuming '(' at 1:1", "consuming 'x' at 1:4", "consuming 'y' at 1:6"], messages)

        messages = []
        parse("a\n  b", trace=messages.append)
        self.assertEqual(["consuming 'a' at 1:1", "consuming 'b' at 2:3"], messages)


if __name__ == '__main__':
    unittest.main()
