"""Substitution and reduction of resolved terms.

A reduction is driven by two strategies:
    - a StopCondition, which decides whether a term is already in the requested form
    - a ReductionOrder, which performs exactly one reduction step (or reports that there is no redex left)

reduce/reduce_stepped only loop over these two, so new forms (weak normal form, head normal form) and new orders
(applicative order) can be added as further subclasses and registered in STOP_CONDITIONS/REDUCTION_ORDERS.

Source: http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR
"""

from abc import ABC, abstractmethod

from lcbook.lang.error import ErrorHandler, StepLimitExceeded
from lcbook.pure.term import App, Lam, Ref, Var


def substitute(term, name, value):
    """Replaces every free occurrence of name in term with its own copy of value. Mutates term in place and returns it,
    or returns the copy of value if term itself is the replaced Var.

    Bound variables are not renamed: if value contains a free variable that is bound by a Lam inside term, it will be
    captured. A Lam binding name itself stops the substitution.
    """
    if isinstance(term, Lam):
        if term.binder != name:
            term.body = substitute(term.body, name, value)

    elif isinstance(term, Var):
        if term.name == name:
            return value.copy()

    elif isinstance(term, App):
        term.function = substitute(term.function, name, value)
        term.argument = substitute(term.argument, name, value)

    return term


def unfold(name, book):
    """Returns a fresh copy of the body of the definition called name."""
    return book[name].body.copy()


class StopCondition(ABC):
    """Decides whether a term already is in the requested form."""

    @abstractmethod
    def stop(self, term):
        """Returns True if no more reduction steps are needed."""


class NormalForm(StopCondition):
    """Never stops early: reduction continues until no redex is left anywhere."""

    def stop(self, term):
        return False


class WeakHeadNormalForm(StopCondition):

    def stop(self, term):
        return isinstance(term, (Lam, Var, Ref))


class ReductionOrder(ABC):
    """Chooses and performs a single reduction step."""

    @abstractmethod
    def step(self, term, book):
        """Performs at most one reduction step on term. Returns (term, reduced), where term is either the (mutated)
        input or the node that replaces it, and reduced is whether a step was made.
        """


class NormalOrder(ReductionOrder):
    """Leftmost-outermost reduction. The function position of an application is always exhausted before its argument
    is touched. A Ref in function position is unfolded first and applied by the following step.
    """

    def step(self, term, book):
        if isinstance(term, Lam):
            term.body, reduced = self.step(term.body, book)
            return term, reduced

        elif isinstance(term, Var):
            return term, False

        elif isinstance(term, Ref):
            return unfold(term.name, book), True

        function = term.function
        if isinstance(function, Lam):
            if function.binder is None:
                return function.body, True
            return substitute(function.body, function.binder, term.argument), True

        elif isinstance(function, Var):
            return term, False

        elif isinstance(function, App):
            term.function, reduced = self.step(function, book)
            if not reduced:
                term.argument, reduced = self.step(term.argument, book)
            return term, reduced

        term.function = unfold(function.name, book)
        return term, True


class StepLimit(ReductionOrder):
    """Wraps another ReductionOrder and raises StepLimitExceeded once more than limit steps have reduced something.
    A final call that finds no redex left is not counted. Divergent terms (e.g. `loop = loop`) reduce forever
    otherwise.
    """

    def __init__(self, order, limit):
        self.order = order
        self.limit = limit
        self.steps = 0

    def step(self, term, book):
        term, reduced = self.order.step(term, book)
        if reduced:
            self.steps += 1
            if self.steps > self.limit:
                raise StepLimitExceeded(self.limit)
        return term, reduced


# names are the ones accepted by --form/--order; None marks an extension point without an implementation
STOP_CONDITIONS = {
    "nf": NormalForm,
    "wnf": None,
    "hnf": None,
    "whnf": WeakHeadNormalForm,
}

REDUCTION_ORDERS = {
    "normal": NormalOrder,
    "applicative": None,
}


def reduce(term, book, stop, order, error_handler=None):
    """Reduces term until stop is satisfied and returns the result. If order finds no redex before that, a warning is
    emitted and the stuck term is returned as is: a stuck term is a valid result, not an error.
    """
    while not stop.stop(term):
        term, reduced = order.step(term, book)
        if not reduced:
            if error_handler is None:
                error_handler = ErrorHandler(fatal=False)
            error_handler.warn("no redex left", diagnosis=False)
            break
    return term


def reduce_stepped(term, book, stop, order):
    """Like reduce, but returns a list with a copy of the initial term followed by a copy of the term after every
    successful step. Recording stops silently at the first step that finds no redex.
    """
    steps = [term.copy()]
    while not stop.stop(term):
        term, reduced = order.step(term, book)
        if not reduced:
            break
        steps.append(term.copy())
    return steps
