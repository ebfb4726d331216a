import io
import unittest

from lcbook.lang.error import (ErrorHandler, GenericException, MissingMain, NotImplementedFeature, ParseFailure,
                               StepLimitExceeded, UnboundVariable)
from lcbook.lang.lexical import parse_book


class GenericExceptionTestCase(unittest.TestCase):

    def test_messages(self):
        cases = {
            "'abc' is bad": GenericException("'{}' is bad", "abc"),
            "program doesn't have 'main' definition": MissingMain(),
            "unbound variable 'x'": UnboundVariable("x"),
            "reduction did not stop within 10 steps": StepLimitExceeded(10),
            "order 'applicative' is not implemented": NotImplementedFeature("order", "applicative"),
            "1:2: first\n3:4: second {}": ParseFailure([(1, 2, "first"), (3, 4, "second {}")]),
        }
        for expected, case in cases.items():
            self.assertEqual(expected, case.plain)
            self.assertEqual(expected, str(case))

    def test_span(self):
        error = GenericException("'{}' is bad", "abcdef", start=2)
        self.assertEqual("abcdef", error.expr)
        self.assertEqual((2, 6), (error.start, error.end))


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()

    def test_fatal(self):
        with self.assertRaises(SystemExit) as raised:
            with ErrorHandler(stream=self.stream):
                raise UnboundVariable("x")
        self.assertEqual(1, raised.exception.code)
        self.assertIn("error: ", self.stream.getvalue())

    def test_non_fatal(self):
        should_suppress = [MissingMain(), RecursionError(), KeyboardInterrupt()]
        for case in should_suppress:
            with ErrorHandler(fatal=False, stream=self.stream):
                raise case

        output = self.stream.getvalue()
        self.assertEqual(3, output.count("error: "))
        self.assertIn("maximum recursion depth exceeded", output)
        self.assertIn("keyboard interrupt", output)

    def test_internal(self):
        with self.assertRaises(ValueError):
            with ErrorHandler(fatal=False, stream=self.stream):
                raise ValueError("{oops}")
        self.assertIn("[internal] ", self.stream.getvalue())

    def test_no_error(self):
        with ErrorHandler(stream=self.stream):
            pass
        self.assertEqual("", self.stream.getvalue())

    def test_traceback(self):
        error_handler = ErrorHandler(fatal=False, stream=self.stream)
        error_handler.register_file("book.lc")
        error_handler.register_line("book.lc", "(id y)", 3)

        with error_handler:
            raise UnboundVariable("y")

        self.assertIn("    (id y)", self.stream.getvalue())
        self.assertEqual({"book.lc": (None, None)}, error_handler.traceback)

    def test_warn(self):
        error_handler = ErrorHandler(stream=self.stream)
        error_handler.register_file("book.lc")
        error_handler.register_line("book.lc", "main", 7)
        error_handler.warn("no redex left", diagnosis=False)

        output = self.stream.getvalue()
        self.assertIn("book.lc:7: ", output)
        self.assertIn("warning: ", output)
        self.assertIn("no redex left", output)

    def test_parse_failure_diagnosis(self):
        with ErrorHandler(fatal=False, stream=self.stream):
            parse_book("id = x\nmain foo = y")

        output = self.stream.getvalue()
        self.assertIn("expected '=', found 'foo'", output)
        self.assertIn("  main ", output)
        self.assertIn("^~~", output)

    def test_no_diagnosis(self):
        with ErrorHandler(fatal=False, stream=self.stream):
            raise UnboundVariable("x")
        self.assertNotIn("^", self.stream.getvalue())

    def test_diagnose(self):
        diagnosis = ErrorHandler.diagnose(GenericException("'{}' is bad", "abcdef", start=2, end=4))
        self.assertIn("^~", diagnosis)
        self.assertTrue(diagnosis.startswith("  ab"))


if __name__ == '__main__':
    unittest.main()
