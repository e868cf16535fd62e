import io
import unittest
from contextlib import redirect_stdout

from lparse.lang.error import BindingError, ErrorHandler, GrammarError, NestedParseError, NestingError
from lparse.pure.executor import (
    build_body,
    capture_lambda,
    default_executor,
    parse,
    TransitionExecutor,
)
from lparse.pure.states import ParserState, Transition
from lparse.pure.term import Expression, Variable

S = ParserState


def to_input(term):
    """Renders term back into parser input notation."""
    if isinstance(term, Variable):
        return term.symbol
    body = "(" + "".join(to_input(subterm) for subterm in term.subterms) + ")"
    if term.binding:
        return f"L{term.binding.symbol}.{body}"
    return body


class ParseTestCase(unittest.TestCase):

    def test_parse(self):
        cases = {
            "": [],
            "X1": ["X1"],
            "(X1)": ["X1"],
            "((X1))": ["X1"],
            "x1": ["X1"],
            "AB23": ["AB23"],
            "XL1": ["XL1"],
            "X": ["X"],
            "X1Y2": ["X1", "Y2"],
            "X1LY1.(Y1)": ["X1", "λY1.Y1"],
            "(X1Y1)": ["(X1Y1)"],
            "()": ["()"],
            "LX1.()": ["λX1.()"],
            "(X1)LY1.(X1)": ["X1", "λY1.X1"],
            "lx1.(x1y1)": ["λX1.(X1Y1)"],
            "LX1.(LY1.(X1Y1))": ["λX1.λY1.(X1Y1)"],
            "(LX1.(X1))(Y1)": ["λX1.X1", "Y1"],
            "(X1(Y1)LZ1.(X1)F2)": ["(X1Y1λZ1.X1F2)"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, [term.print() for term in parse(case)], case)

    def test_end_to_end(self):
        group, lam = parse("(X1)LY1.(X1)")

        self.assertIsInstance(group, Expression)
        self.assertIsNone(group.binding)
        self.assertEqual([Variable("X1")], group.subterms)

        self.assertEqual("Y1", lam.binding.print())
        self.assertEqual("λY1.X1", lam.print())

    def test_nested(self):
        term, = parse("(X1(Y1)LZ1.(X1)F2)")
        x, y, lam, f = term.subterms

        self.assertEqual(Variable("X1"), x)
        self.assertIsInstance(y, Expression)
        self.assertEqual("Y1", y.print())
        self.assertEqual("λZ1.X1", lam.print())
        self.assertEqual(Variable("F2"), f)

    def test_case_insensitive(self):
        cases = ["lx1.(x1)", "LX1.(X1)", "Lx1.(X1)"]
        for case in cases:
            self.assertEqual("λX1.X1", parse(case)[0].print(), case)

    def test_round_trip(self):
        cases = ["X1", "((X1))", "(X1)LY1.(X1)", "(X1(Y1)LZ1.(X1)F2)", "LX1.(LY1.(X1Y1))", "LX1.()", "(()X1)"]
        for case in cases:
            terms = parse(case)
            reparsed = parse("".join(to_input(term) for term in terms))
            self.assertEqual([term.print() for term in terms], [term.print() for term in reparsed], case)

    def test_grammar_errors(self):
        should_raise = ["(X1", "LX1X1", "1X", "X1.", "X)", ")", "L1", "LX1.X1", "LX1.", "X1 Y1", "LX1.(X1", "X1)"]
        for case in should_raise:
            self.assertRaises(GrammarError, parse, case)

        # non-ASCII letters are never folded into ASCII ones
        should_raise = ["xß1", "ſ1", "ı1", "lﬁ1.(x1)", "X1Ä1", "x١"]
        for case in should_raise:
            self.assertRaises(GrammarError, parse, case)

        with self.assertRaises(GrammarError) as context:
            parse("xß1")
        self.assertEqual("Xß1", context.exception.expr)
        self.assertEqual((1, "ß"), (context.exception.start, context.exception.char))

    def test_grammar_error_location(self):
        with self.assertRaises(GrammarError) as context:
            parse("LX1X1")
        self.assertEqual(S.LV2, context.exception.state)
        self.assertEqual("X", context.exception.char)
        self.assertEqual("LX1X1", context.exception.expr)
        self.assertEqual(3, context.exception.start)

        with self.assertRaises(GrammarError) as context:
            parse("(x1")
        self.assertEqual(S.P_i, context.exception.state)
        self.assertEqual("", context.exception.char)
        self.assertEqual("(X1", context.exception.expr)

    def test_nested_errors(self):
        should_raise = ["(X1.)", "(1)", "LX1.(Y1.)", "((X1))(L1)", "((X1.))", "(xß1)"]
        for case in should_raise:
            self.assertRaises(NestedParseError, parse, case)

        with self.assertRaises(NestedParseError) as context:
            parse("X1(Y1(Z1.))")
        self.assertEqual("Y1(Z1.)", context.exception.body)
        self.assertIsInstance(context.exception.cause, NestedParseError)
        self.assertEqual("Z1.", context.exception.cause.body)
        self.assertIsInstance(context.exception.cause.cause, GrammarError)


class TransitionExecutorTestCase(unittest.TestCase):

    def test_callbacks(self):
        def leave(*args): ...
        def enter(*args): ...
        def exact(*args): ...
        def other(*args): ...

        executor = TransitionExecutor()
        executor.register(Transition(S.V_f, S.DUMMY), leave)
        executor.register(Transition(S.DUMMY, S.V_i), enter)
        executor.register(Transition(S.V_f, S.V_i), exact)
        executor.register(Transition(S.I_i, S.V_i), other)

        cases = {
            Transition(S.V_f, S.V_i): [leave, enter, exact],
            Transition(S.V_f, S.V_f): [leave],
            Transition(S.I_i, S.V_i): [enter, other],
            Transition(S.P_f, S.V_i): [enter],
            Transition(S.I_i, S.L_i): [],
        }
        for transition, expected in cases.items():
            self.assertEqual(expected, executor.callbacks(transition), transition)

    def test_registration_order(self):
        calls = []
        executor = TransitionExecutor()
        executor.register(Transition(S.DUMMY, S.V_i), lambda executor, char, ctx: calls.append(("enter", char)))
        executor.register(Transition(S.I_i, S.DUMMY), lambda executor, char, ctx: calls.append(("leave", char)))

        self.assertEqual([], executor.parse("X1"))
        self.assertEqual([("enter", "X"), ("leave", "X")], calls)

    def test_binding_error(self):
        executor = TransitionExecutor()
        executor.register(Transition(S.LP1, S.LP1), build_body)
        executor.register(Transition(S.LP1, S.L_f), capture_lambda)

        with self.assertRaises(BindingError) as context:
            executor.parse("LX1.(X1)")
        self.assertEqual("X1", context.exception.body)

    def test_max_depth(self):
        executor = default_executor(max_depth=2)
        self.assertEqual(["X1"], [term.print() for term in executor.parse("((X1))")])

        with self.assertRaises(NestingError) as context:
            executor.parse("(((X1)))")
        self.assertEqual(2, context.exception.limit)
        self.assertRaises(NestingError, executor.parse, "LX1.(LY1.(LZ1.(X1)))")

        self.assertEqual(TransitionExecutor.MAX_DEPTH, default_executor().max_depth)

    def test_trace(self):
        output = io.StringIO()
        with redirect_stdout(output):
            parse("X1", ErrorHandler(trace=True))

        for transition in ("I_i -> V_i", "V_i -> V_f", "V_f -> E_0"):
            self.assertIn(transition, output.getvalue())

        output = io.StringIO()
        with redirect_stdout(output):
            parse("X1", ErrorHandler())
        self.assertEqual("", output.getvalue())


if __name__ == '__main__':
    unittest.main()
