"""Finite-state core of the parser: parser states, transitions, and one mapper per state that computes the next
transition given the next input character.

Input grammar (ASCII letters are upper-cased before scanning, λ is written as L):

```
<expr>          ::= <variable> | <lambda> | <parenthetical>
<variable>      ::= LETTER+ DIGIT+          ; may not start with L
<lambda>        ::= "L" LETTER+ DIGIT+ "." "(" <expr>* ")"
<parenthetical> ::= "(" <expr>* ")"
```

States:
    I_i         initial state
    L_i         read L, lambda binding expected
    LV1, LV2    reading the letters/digits of the binding variable
    LV3         read the "." ending the binding, "(" expected
    LP1         capturing the lambda body
    L_f         read the ")" closing the lambda body                   (terminal)
    V_i, V_f    reading the letters/digits of a variable               (V_f terminal)
    P_i         capturing a parenthesized body
    P_f         read the ")" closing the parenthesized body            (terminal)
    E_0         end state, entered once after the last character
    DUMMY       stands for any state in callback registration, never a real state

Mappers are pure: (state, char, depth) -> Transition, where depth is the parenthesis depth after counting char. They
raise GrammarError when char is not accepted.
"""

from enum import Enum
from typing import NamedTuple

from lparse.lang.error import GrammarError


class ParserState(Enum):
    I_i = "initial"
    L_i = "lambda"
    LV1 = "binding letters"
    LV2 = "binding digits"
    LV3 = "binding end"
    LP1 = "lambda body"
    L_f = "lambda end"
    V_i = "variable letters"
    V_f = "variable digits"
    P_i = "parenthetical body"
    P_f = "parenthetical end"
    E_0 = "end"
    DUMMY = "any"


class Transition(NamedTuple):
    initial: ParserState
    final: ParserState

    @classmethod
    def start(cls):
        return cls(ParserState.DUMMY, ParserState.I_i)

    def __str__(self):
        return f"{self.initial.name} -> {self.final.name}"


LAMBDA = "L"
OPEN_PAREN = "("
CLOSE_PAREN = ")"
PERIOD = "."


def is_cap_letter(char):
    """Whether or not char is a single ASCII uppercase letter."""
    return len(char) == 1 and "A" <= char <= "Z"


def is_digit_run(expr):
    """Whether or not expr is a non-empty run of ASCII decimal digits."""
    return bool(expr) and all("0" <= char <= "9" for char in expr)


def upper_ascii(expr):
    """Upper-cases the ASCII letters of expr. Other characters are left for the mappers to reject."""
    return "".join(char.upper() if char.isascii() else char for char in expr)


class NestingTracker:
    """Running count of unmatched open parentheses."""

    def __init__(self):
        self.counter = 0

    def update(self, char):
        if char == OPEN_PAREN:
            self.counter += 1
        elif char == CLOSE_PAREN:
            self.counter -= 1

    def depth(self):
        return self.counter


def start_expression(state, char):
    """Dispatch shared by every state after which a new expression may start."""
    if char == LAMBDA:
        return Transition(state, ParserState.L_i)
    elif char == OPEN_PAREN:
        return Transition(state, ParserState.P_i)
    elif is_cap_letter(char):
        return Transition(state, ParserState.V_i)
    raise GrammarError(state, char, "a variable, 'L' or '('")


def map_terminal(state, char, depth):
    return start_expression(state, char)


def map_variable_letters(state, char, depth):
    if is_cap_letter(char):
        return Transition(state, ParserState.V_i)
    elif is_digit_run(char):
        return Transition(state, ParserState.V_f)
    raise GrammarError(state, char, "a letter or digit to complete the variable")


def map_variable_digits(state, char, depth):
    if is_digit_run(char):
        return Transition(state, ParserState.V_f)
    return start_expression(state, char)


def map_lambda(state, char, depth):
    if is_cap_letter(char):
        return Transition(state, ParserState.LV1)
    raise GrammarError(state, char, "a binding variable")


def map_binding_letters(state, char, depth):
    if is_cap_letter(char):
        return Transition(state, ParserState.LV1)
    elif is_digit_run(char):
        return Transition(state, ParserState.LV2)
    raise GrammarError(state, char, "a letter or digit in the binding variable")


def map_binding_digits(state, char, depth):
    if is_digit_run(char):
        return Transition(state, ParserState.LV2)
    elif char == PERIOD:
        return Transition(state, ParserState.LV3)
    raise GrammarError(state, char, "a digit or '.' after the binding variable")


def map_binding_end(state, char, depth):
    if char == OPEN_PAREN:
        return Transition(state, ParserState.LP1)
    raise GrammarError(state, char, "'(' to open the λ-abstraction body")


def capture_until(closed):
    """Returns a mapper that stays in its state until the parenthesis opening the capture is matched."""

    def map_capture(state, char, depth):
        if char == CLOSE_PAREN and depth == 0:
            return Transition(state, closed)
        return Transition(state, state)

    return map_capture


MAPPERS = {
    ParserState.I_i: map_terminal,
    ParserState.L_i: map_lambda,
    ParserState.LV1: map_binding_letters,
    ParserState.LV2: map_binding_digits,
    ParserState.LV3: map_binding_end,
    ParserState.LP1: capture_until(ParserState.L_f),
    ParserState.L_f: map_terminal,
    ParserState.V_i: map_variable_letters,
    ParserState.V_f: map_variable_digits,
    ParserState.P_i: capture_until(ParserState.P_f),
    ParserState.P_f: map_terminal,
}

# states from which input may end; a trailing letter run (V_i) is finalized as a variable
FINAL_STATES = (ParserState.I_i, ParserState.V_i, ParserState.V_f, ParserState.L_f, ParserState.P_f)


def end_of_input(state):
    """Returns the synthetic transition into E_0, or raises GrammarError if input ended mid-expression."""
    if state in FINAL_STATES:
        return Transition(state, ParserState.E_0)
    elif state in (ParserState.LP1, ParserState.P_i):
        raise GrammarError(state, "", "')' to close the body")
    raise GrammarError(state, "", "the rest of the λ-abstraction")
