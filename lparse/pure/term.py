"""Lambda calculus terms: the tree built by the parser, and the term-level operations on it.

A term is either a Variable or an Expression:

```
<term>       ::= <variable> | <expression>
<variable>   ::= LETTER+ DIGIT+             ; e.g. X1, AB23
<expression> ::= [<variable>] <term>*       ; binding present iff the expression is a λ-abstraction
```

Juxtaposed subterms of an Expression denote application, left to right. Every Expression keeps its printed form
(canonical_text) from the moment it is built. Printing collapses an unbound Expression holding a single subterm down to
that subterm, so (((X1))) and X1 print identically. That collapse is the only normalization performed, and two terms
are equal iff they print identically.

Substitution (apply) is deliberately capture-unsafe: there is no alpha-renaming, and it does not stop at abstractions
that rebind the substituted name.
"""

from abc import abstractmethod, ABC


class Term(ABC):
    """Superclass of every node in a parsed lambda calculus tree."""

    @abstractmethod
    def print(self):
        """Returns the canonical textual form of this term."""

    @abstractmethod
    def copy(self):
        """Returns a deep copy of this term."""

    @abstractmethod
    def apply(self, target, replacement):
        """Substitutes occurrences of Variable target within this term. Returns a new term."""

    def abstract(self, binder):
        """Returns λbinder.self. Vacuous abstraction (binder not occurring in self) is legal."""
        return Expression(binder, [self], f"λ{binder.print()}.{self.print()}")

    def equals(self, other):
        """Whether or not self and other are in the same equivalence class, i.e. print identically."""
        return self.print() == other.print()

    def display(self, indents=0):
        """Recursively displays the term tree in a readable format."""
        return f"{'    ' * indents}{self!r}"

    def __eq__(self, other):
        return isinstance(other, Term) and self.equals(other)

    def __hash__(self):
        return hash(self.print())

    def __repr__(self):
        return f"{type(self).__name__}('{self.print()}')"

    def __str__(self):
        return self.print()


class Variable(Term):
    """Variable in lambda calculus: one or more letters followed by digits."""

    def __init__(self, symbol=""):
        self.symbol = symbol

    def print(self):
        return self.symbol

    def copy(self):
        return Variable(self.symbol)

    def apply(self, target, replacement):
        """On a match, the target variable itself is put back in place, not replacement."""
        if self.symbol == target.symbol:
            return target.copy()
        return self.copy()

    def __bool__(self):
        return bool(self.symbol)


class Expression(Term):
    """Sequence of juxtaposed subterms, optionally bound by a variable (a λ-abstraction)."""

    def __init__(self, binding=None, subterms=(), canonical_text=None):
        self.binding = binding
        self.subterms = list(subterms)

        if canonical_text is None:
            canonical_text = "(" + "".join(term.print() for term in self.subterms) + ")"
            if self.binding:
                canonical_text = f"λ{self.binding.print()}.{canonical_text}"
        self.canonical_text = canonical_text

    @property
    def is_abstraction(self):
        return bool(self.binding)

    def print(self):
        if not self.is_abstraction and len(self.subterms) == 1:
            return self.subterms[0].print()
        return self.canonical_text

    def copy(self):
        binding = self.binding.copy() if self.binding else None
        return Expression(binding, [term.copy() for term in self.subterms], self.canonical_text)

    def apply(self, target, replacement):
        """Recurses into every subterm, even beneath a binding that shadows target."""
        subterms = [term.apply(target, replacement) for term in self.subterms]
        binder = self.binding.print() if self.binding else ""
        canonical_text = f"λ{binder}.(" + "".join(term.print() for term in subterms) + ")"
        return Expression(self.binding.copy() if self.binding else None, subterms, canonical_text)

    def display(self, indents=0):
        """Format:
        Expression(binding='<binding>', text='<printed>', subterms=[
            Variable('<symbol>'),
            Expression(...)
        ])
        """
        result = f"{'    ' * indents}Expression("
        if self.binding:
            result += f"binding='{self.binding.print()}', "
        result += f"text='{self.print()}'"
        if self.subterms:
            result += ", subterms=["
            for term in self.subterms:
                result += "\n" + term.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


def concatenate(terms):
    """Wraps terms in an unbound Expression. This is how applications and parenthesized groups are represented."""
    return Expression(None, terms, "(" + "".join(term.print() for term in terms) + ")")


def apply_initial(expression, replacement):
    """Single explicit β-application step: substitutes expression's binding with replacement across its subterms and
    wraps the results in a fresh unbound Expression. Does not reduce any further.
    """
    target = expression.binding if expression.binding else Variable()
    subterms = [term.apply(target, replacement) for term in expression.subterms]
    return Expression(None, subterms, "(" + "".join(term.print() for term in subterms) + ")")
