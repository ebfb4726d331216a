"""Validation passes run over a Book before anything is reduced:

    1. check_has_main: the Book must define 'main'
    2. resolve_refs: free Vars that name a definition become Refs (never fails)
    3. check_unbounds: any Var still free after resolution is an error

resolve_refs must run before check_unbounds, otherwise every reference to a definition would be reported as unbound.
"""

from lcbook.lang.error import MissingMain, UnboundVariable
from lcbook.pure.term import App, Lam, Ref, Var


class VarScope:
    """Counts live binders per name. A plain set is not enough: popping an inner binder that shadows an outer one with
    the same name must leave the outer one visible.
    """

    def __init__(self):
        self.declared = {}

    def push(self, binder):
        if binder is not None:
            self.declared[binder] = self.declared.get(binder, 0) + 1

    def pop(self, binder):
        if binder is not None:
            self.declared[binder] -= 1

    def __contains__(self, name):
        return self.declared.get(name, 0) > 0


def resolve(term, names, scope=None):
    """Replaces every Var in term that is not bound by an enclosing Lam and whose name is in names with a Ref. Mutates
    term in place and returns it, or returns the Ref that replaces it if term itself is such a Var.
    """
    if scope is None:
        scope = VarScope()

    if isinstance(term, Lam):
        scope.push(term.binder)
        term.body = resolve(term.body, names, scope)
        scope.pop(term.binder)

    elif isinstance(term, Var):
        if term.name not in scope and term.name in names:
            return Ref(term.name)

    elif isinstance(term, App):
        term.function = resolve(term.function, names, scope)
        term.argument = resolve(term.argument, names, scope)

    return term


def check(term, scope=None):
    """Raises UnboundVariable for the first Var in term (depth-first, left to right) that no enclosing Lam binds. Refs
    are always accepted.
    """
    if scope is None:
        scope = VarScope()

    if isinstance(term, Lam):
        scope.push(term.binder)
        check(term.body, scope)
        scope.pop(term.binder)

    elif isinstance(term, Var):
        if term.name not in scope:
            raise UnboundVariable(term.name)

    elif isinstance(term, App):
        check(term.function, scope)
        check(term.argument, scope)


def check_has_main(book):
    if "main" not in book:
        raise MissingMain()


def resolve_refs(book):
    """Resolves every definition body in book in place. Only the set of definition names is consulted, so the order in
    which bodies are resolved does not matter.
    """
    names = set(book)
    for definition in book.values():
        definition.body = resolve(definition.body, names)


def check_unbounds(book):
    for definition in book.values():
        check(definition.body)
