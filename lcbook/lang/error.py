"""Error handling for lcbook. Only GenericExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a lcbook error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)


class ParseFailure(GenericException):
    """One or more lexical/grammatical errors found while parsing a book. Each error is a (line, col, msg) tuple. If
    code is given, the source line of the first error is kept for diagnosis, with length characters marked from its
    column on.
    """

    def __init__(self, errors, code=None, length=1):
        self.errors = errors
        super().__init__("{}", "\n".join(f"{line}:{col}: {msg}" for line, col, msg in errors),
                         diagnosis=code is not None)

        if code is not None:
            line, col, __ = errors[0]
            self.expr = code.split("\n")[line - 1]
            self.start = col - 1
            self.end = self.start + max(length, 1)


class MissingMain(GenericException):

    def __init__(self):
        super().__init__("program doesn't have 'main' definition", diagnosis=False)


class UnboundVariable(GenericException):

    def __init__(self, name):
        self.name = name
        super().__init__("unbound variable '{}'", name, diagnosis=False)


class StepLimitExceeded(GenericException):

    def __init__(self, limit):
        self.limit = limit
        super().__init__("reduction did not stop within {} steps", str(limit), diagnosis=False)


class NotImplementedFeature(GenericException):
    """Raised when a reduction form or order is selected that is only reserved as an extension point."""

    def __init__(self, kind, name):
        super().__init__("{} '{}' is not implemented", (kind, name), diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom lcbook errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}

    @property
    def _out(self):
        return self.stream if self.stream is not None else sys.stderr

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session evaluate."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session evaluate."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        """Returns 'file:line: ' for the innermost registered line, or an empty string."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line is not None:
                return f"{file}:{line_num}: "
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        warning_msg = colored(self._location(), attrs=["bold"]) if self._location() else ""
        warning_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(warning_msg, file=self._out)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True), file=self._out)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=self._out)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error), file=self._out)

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # keep files, forget offending lines

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("term is too deep to reduce: maximum recursion depth exceeded"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
