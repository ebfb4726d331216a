"""Session control for lcbook. Loads a book from a file, validates it, and reduces its 'main' definition, either once or
step by step. Also evaluates single statements for interactive mode.
"""

from lcbook.lang.error import GenericException, NotImplementedFeature
from lcbook.lang.lexical import parse_book, parse_statement
from lcbook.pure.passes import check, check_has_main, check_unbounds, resolve, resolve_refs
from lcbook.pure.reduce import REDUCTION_ORDERS, STOP_CONDITIONS, StepLimit, reduce, reduce_stepped
from lcbook.pure.term import Book, Definition


class Session:
    """Governs a lcbook session: the Book being evaluated and the strategies used to reduce terms."""
    SH_FILE = "<in>"  # command-line interpreter filename
    MODES = ["run", "run-stepped"]

    def __init__(self, error_handler, path=None, form="nf", order="normal", limit=None):
        self.error_handler = error_handler

        self.path = path if path is not None else Session.SH_FILE  # used for error messages
        self.error_handler.register_file(self.path)

        self.stop = Session.stop_condition(form)
        self.order_name = order
        Session.reduction_order(order)  # fail early on unimplemented orders
        self.limit = limit

        self.book = Book()
        self.results = []

        if path is not None:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    code = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.book = parse_book(code)

    @staticmethod
    def stop_condition(form):
        if STOP_CONDITIONS.get(form) is None:
            raise NotImplementedFeature("form", form)
        return STOP_CONDITIONS[form]()

    @staticmethod
    def reduction_order(order):
        if REDUCTION_ORDERS.get(order) is None:
            raise NotImplementedFeature("order", order)
        return REDUCTION_ORDERS[order]()

    def _order(self):
        """A fresh reduction order for each reduction, so that step limits are counted per reduction."""
        order = Session.reduction_order(self.order_name)
        if self.limit is not None:
            order = StepLimit(order, self.limit)
        return order

    def load(self, require_main=True):
        """Validates self.book: 'main' must exist (if require_main), references are resolved, and no variable may be
        left unbound. Must be called before run.
        """
        if require_main:
            check_has_main(self.book)
        resolve_refs(self.book)
        check_unbounds(self.book)

    def reduce(self, term, mode="run"):
        """Reduces term (which must already be resolved and checked) with this session's strategies. Returns a list of
        terms: just the result in mode 'run', every intermediate term in mode 'run-stepped'.
        """
        if mode == "run":
            return [reduce(term, self.book, self.stop, self._order(), self.error_handler)]
        elif mode == "run-stepped":
            return reduce_stepped(term, self.book, self.stop, self._order())
        raise GenericException("unknown mode '{}'", mode, diagnosis=False)

    def run(self, mode="run"):
        """Reduces a copy of the body of 'main'; the stored definition is left untouched. Sets and returns
        self.results.
        """
        self.results = self.reduce(self.book["main"].body.copy(), mode)
        return self.results

    def evaluate(self, line, line_num=0, mode="run"):
        """Evaluates one statement. A definition is added to the book (replacing one with the same name) and returns
        an empty list; a term is resolved against the book, checked and reduced.
        """
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        statement = parse_statement(line)
        if isinstance(statement, Definition):
            previous = self.book.get(statement.name)
            self.book.define(statement)
            try:
                resolve_refs(self.book)
                check_unbounds(self.book)
            except GenericException:
                # a bad definition must not stay in the book
                if previous is None:
                    del self.book[statement.name]
                else:
                    self.book.define(previous)
                raise
            self.results = []
        else:
            term = resolve(statement, set(self.book))
            check(term)
            self.results = self.reduce(term, mode)

        self.error_handler.remove_line(self.path)  # error was not raised
        return self.results

    def pop(self):
        """Pops the most recent result."""
        return self.results.pop()
