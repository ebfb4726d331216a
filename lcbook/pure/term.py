"""Pure lambda calculus terms with named top-level definitions.

The `pure` directory contains the term model and everything that operates on it without knowing about source files:
reference resolution, unbound variable checking, substitution and reduction.

Formally, a term is one of

```
<term> ::= "λ" <name> <term>     ; "abstraction" (Lam)
                                 ; - the binder may be "*", an erased binder that no variable can refer to
         | <name>                ; "variable" (Var), bound by an enclosing abstraction
         | <name>                ; "reference" (Ref), a resolved reference to a definition in the Book
         | "(" <term> <term> ")" ; "application" (App)
```

Var and Ref are written the same way: a Var only becomes a Ref once the scope resolver (see passes.py) finds that it is
not bound by any enclosing abstraction but names a definition.
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional


ERASED = "*"


class Term:
    """Superclass of every node in a term tree. Nodes own their children exclusively, so a tree never shares subtrees."""

    def copy(self):
        """Returns a deep copy of this term."""
        return deepcopy(self)


@dataclass
class Lam(Term):
    """Abstraction. binder is None for an erased binder."""
    binder: Optional[str]
    body: Term

    def __str__(self):
        return f"λ{ERASED if self.binder is None else self.binder} {self.body}"


@dataclass
class Var(Term):
    name: str

    def __str__(self):
        return self.name


@dataclass
class App(Term):
    function: Term
    argument: Term

    def __str__(self):
        return f"({self.function} {self.argument})"


@dataclass
class Ref(Term):
    """Reference to a definition in the Book. Only created by resolve_refs, never by the parser."""
    name: str

    def __str__(self):
        return self.name


@dataclass
class Definition:
    name: str
    body: Term

    def __str__(self):
        return f"{self.name} = {self.body}"


class Book(dict):
    """Maps definition names to Definitions. Declaring a name twice keeps the latest Definition.

    The Book is only written to while it is built and while resolve_refs rewrites the stored bodies; after that it is a
    read-only store that Ref unfolding copies bodies out of.
    """

    @classmethod
    def from_definitions(cls, definitions):
        book = cls()
        for definition in definitions:
            book.define(definition)
        return book

    def define(self, definition):
        self[definition.name] = definition

    def __str__(self):
        return "\n".join(str(definition) for definition in self.values())
