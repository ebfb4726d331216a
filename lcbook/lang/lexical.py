"""Lexical analysis and parsing of lcbook source files. A source file is a Book: a list of named definitions.

All grammar can be loosely defined as follows:

```
<book>       ::= <definition>*
<definition> ::= <name> "=" <term>
<term>       ::= <name>                       ; variable, or reference to a definition
               | <lambda> <binder> <term>     ; abstraction: body extends as far right as possible
               | "(" <term> <term>+ ")"       ; application, associating by left: (a b c) = ((a b) c)

<name>       ::= [_.a-zA-Z][_.a-zA-Z0-9]*
<lambda>     ::= "λ" | "@"
<binder>     ::= <name> | "*"                 ; "*" is an erased binder
```

Comments are `//` to the end of the line and `/* ... */`, which may be nested. Whitespace only separates tokens.
"""

from dataclasses import dataclass
import re

from lcbook.lang.error import ParseFailure
from lcbook.pure.term import App, Book, Definition, Lam, Var


TOKENS = re.compile(r"""
    (?P<NAME>[_.a-zA-Z][_.a-zA-Z0-9]*)
  | (?P<LAMBDA>[@λ])
  | (?P<LINE_COMMENT>//[^\n]*)
  | (?P<BLOCK_COMMENT>/\*)
  | (?P<ERASED>\*)
  | (?P<EQUALS>=)
  | (?P<LPAREN>\()
  | (?P<RPAREN>\))
  | (?P<WHITESPACE>[ \t\f\r\n]+)
""", re.VERBOSE)

COMMENT_DELIMS = re.compile(r"/\*|\*/")

SKIPPED = {"LINE_COMMENT", "WHITESPACE"}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


def position(code, pos):
    """Returns 1-based (line, column) of offset pos in code."""
    line = code.count("\n", 0, pos) + 1
    col = pos - (code.rfind("\n", 0, pos) + 1) + 1
    return line, col


def skip_comment(code, pos):
    """Returns the offset right after the block comment opened at pos, or None if it is never closed."""
    depth = 0
    for match in COMMENT_DELIMS.finditer(code, pos):
        depth += 1 if match.group() == "/*" else -1
        if depth == 0:
            return match.end()
    return None


def tokenize(code):
    """Returns (tokens, errors) for code. errors is a list of (line, col, msg); invalid characters are skipped so that
    every lexical error in code is reported at once.
    """
    tokens, errors = [], []

    pos = 0
    while pos < len(code):
        match = TOKENS.match(code, pos)

        if match is None:
            errors.append((*position(code, pos), f"invalid character '{code[pos]}'"))
            pos += 1

        elif match.lastgroup == "BLOCK_COMMENT":
            end = skip_comment(code, pos)
            if end is None:
                errors.append((*position(code, pos), "unclosed comment"))
                break
            pos = end

        else:
            if match.lastgroup not in SKIPPED:
                tokens.append(Token(match.lastgroup, match.group(), pos))
            pos = match.end()

    return tokens, errors


class Parser:
    """Recursive descent parser over the tokens of a single source string. Stops at the first grammatical error."""

    def __init__(self, code):
        self.code = code
        self.tokens, errors = tokenize(code)
        if errors:
            raise ParseFailure(errors, code)
        self.idx = 0

    def peek(self, offset=0):
        idx = self.idx + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def at(self, kind, offset=0):
        token = self.peek(offset)
        return token is not None and token.kind == kind

    def done(self):
        return self.idx >= len(self.tokens)

    def fail(self, expected):
        token = self.peek()
        if token is None:
            line, col = position(self.code, len(self.code))
            found = "end of input"
            length = 1
        else:
            line, col = position(self.code, token.pos)
            found = f"'{token.text}'"
            length = len(token.text)
        raise ParseFailure([(line, col, f"expected {expected}, found {found}")], self.code, length)

    def expect(self, kind, expected):
        if not self.at(kind):
            self.fail(expected)
        token = self.peek()
        self.idx += 1
        return token

    def book(self):
        definitions = []
        while not self.done():
            definitions.append(self.definition())
        return Book.from_definitions(definitions)

    def definition(self):
        name = self.expect("NAME", "definition name")
        self.expect("EQUALS", "'='")
        return Definition(name.text, self.term())

    def term(self):
        if self.at("NAME"):
            return Var(self.expect("NAME", "name").text)

        elif self.at("LAMBDA"):
            self.idx += 1
            if self.at("ERASED"):
                self.idx += 1
                binder = None
            else:
                binder = self.expect("NAME", "binder name or '*'").text
            return Lam(binder, self.term())

        elif self.at("LPAREN"):
            self.idx += 1
            term = App(self.term(), self.term())
            while not self.at("RPAREN"):
                if self.done():
                    self.fail("')'")
                term = App(term, self.term())
            self.idx += 1
            return term

        self.fail("term")

    def statement(self):
        """A definition if the input starts with `<name> =`, otherwise a term. Used in interactive mode."""
        if self.at("NAME") and self.at("EQUALS", 1):
            statement = self.definition()
        else:
            statement = self.term()

        if not self.done():
            self.fail("end of input")
        return statement


def parse_book(code):
    """Parses code into a Book. Raises ParseFailure."""
    return Parser(code).book()


def parse_term(code):
    """Parses code into a single Term. Raises ParseFailure."""
    parser = Parser(code)
    term = parser.term()
    if not parser.done():
        parser.fail("end of input")
    return term


def parse_statement(code):
    """Parses code into either a Definition or a Term. Raises ParseFailure."""
    return Parser(code).statement()
