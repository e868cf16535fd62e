"""Transition executor: drives the finite-state core over an input string and builds terms through callbacks registered
on state transitions.

Callbacks are registered on a Transition. ParserState.DUMMY stands for any state, so a callback registered on
(V_f, DUMMY) runs on every transition leaving V_f (including V_f -> V_f) and one registered on (DUMMY, V_i) runs on
every transition entering V_i. All callbacks matching a transition run in registration order.

Parenthesized and λ-abstraction bodies are captured as raw text while the parser is in P_i/LP1. Once the closing
parenthesis is read, the body is parsed by a recursive call with a fresh ParseContext.
"""

from lparse.lang.error import BindingError, GenericException, GrammarError, NestedParseError, NestingError
from lparse.pure.states import end_of_input, MAPPERS, NestingTracker, ParserState, Transition, upper_ascii
from lparse.pure.term import concatenate, Variable

S = ParserState


class ParseContext:
    """Accumulator owned by a single parse call."""

    def __init__(self, expr, depth=0, error_handler=None):
        self.expr = expr
        self.depth = depth
        self.error_handler = error_handler  # receives each transition as a trace step

        self.terms = []       # completed top-level terms, in input order
        self.name = ""        # pending variable name, or binding variable while a λ body is captured
        self.body = ""        # pending captured body
        self.tracker = NestingTracker()
        self.transition = Transition.start()

    @property
    def state(self):
        return self.transition.final


class TransitionExecutor:
    """Owns the state-to-mapper table and the transition-to-callbacks table. Both are read-only once built, so an
    executor may be shared between parse calls.
    """
    MAX_DEPTH = 100

    def __init__(self, mappers=None, max_depth=None):
        self.mappers = dict(mappers if mappers is not None else MAPPERS)
        self.max_depth = max_depth if max_depth is not None else TransitionExecutor.MAX_DEPTH

        self.callback_map = {}  # Transition: [(registration order, callback)]
        self._registered = 0

    def register(self, transition, callback):
        """Registers callback(executor, char, ctx) to run whenever transition (or a wildcard match of it) is taken."""
        self.callback_map.setdefault(transition, []).append((self._registered, callback))
        self._registered += 1
        return self

    def callbacks(self, transition):
        """Returns all callbacks registered on transition, (transition.initial, DUMMY) or (DUMMY, transition.final)."""
        keys = {transition, Transition(transition.initial, S.DUMMY), Transition(S.DUMMY, transition.final)}
        selected = [entry for key in keys for entry in self.callback_map.get(key, [])]
        return [callback for __, callback in sorted(selected, key=lambda entry: entry[0])]

    def apply(self, char, ctx):
        """Runs every callback matching ctx.transition."""
        for callback in self.callbacks(ctx.transition):
            callback(self, char, ctx)

    def parse(self, expr, error_handler=None, depth=0):
        """Parses expr into a list of terms. Raises the first GenericException encountered: no partial result is
        returned. If error_handler is given, each transition is reported as a step.
        """
        if depth > self.max_depth:
            raise NestingError(expr, self.max_depth)

        ctx = ParseContext(upper_ascii(expr), depth, error_handler)

        for pos, char in enumerate(ctx.expr):
            ctx.tracker.update(char)
            try:
                ctx.transition = self.mappers[ctx.state](ctx.state, char, ctx.tracker.depth())
            except GrammarError as error:
                raise error.locate(ctx.expr, pos) from None

            self._step(ctx, char)
            self.apply(char, ctx)

        try:
            ctx.transition = end_of_input(ctx.state)
        except GrammarError as error:
            raise error.locate(ctx.expr, len(ctx.expr)) from None

        self._step(ctx, "")
        self.apply("", ctx)

        return ctx.terms

    def parse_body(self, ctx):
        """Recursively parses the captured body of ctx, wrapping any error with the body as context."""
        try:
            terms = self.parse(ctx.body, ctx.error_handler, ctx.depth + 1)
        except NestingError:
            raise
        except GenericException as error:
            raise NestedParseError(ctx.body, error) from error
        return concatenate(terms)

    @staticmethod
    def _step(ctx, char):
        if ctx.error_handler is not None:
            ctx.error_handler.register_step("  " * ctx.depth + str(ctx.transition), repr(char))


def build_name(executor, char, ctx):
    ctx.name += char


def capture_variable(executor, char, ctx):
    ctx.terms.append(Variable(ctx.name))
    ctx.name = ""


def build_body(executor, char, ctx):
    ctx.body += char


def capture_parenthetical(executor, char, ctx):
    ctx.terms.append(executor.parse_body(ctx))
    ctx.body = ""


def capture_lambda(executor, char, ctx):
    if not ctx.name:
        raise BindingError(ctx.body)

    body = executor.parse_body(ctx)
    ctx.terms.append(body.abstract(Variable(ctx.name)))
    ctx.name = ""
    ctx.body = ""


def default_executor(max_depth=None):
    """Returns an executor with the callbacks needed to build terms."""
    executor = TransitionExecutor(max_depth=max_depth)

    # flush a completed variable before a new name starts building
    for final in (S.V_i, S.P_i, S.L_i, S.E_0):
        executor.register(Transition(S.V_f, final), capture_variable)
    executor.register(Transition(S.V_i, S.E_0), capture_variable)

    for final in (S.V_i, S.V_f, S.LV1, S.LV2):
        executor.register(Transition(S.DUMMY, final), build_name)

    executor.register(Transition(S.P_i, S.P_i), build_body)
    executor.register(Transition(S.LP1, S.LP1), build_body)

    executor.register(Transition(S.P_i, S.P_f), capture_parenthetical)
    executor.register(Transition(S.LP1, S.L_f), capture_lambda)

    return executor


_executor = default_executor()


def parse(expr, error_handler=None):
    """Parses expr with the shared default executor."""
    return _executor.parse(expr, error_handler)
