import io
import os
import tempfile
import unittest

from lcbook.lang.error import (ErrorHandler, GenericException, MissingMain, NotImplementedFeature, ParseFailure,
                               StepLimitExceeded, UnboundVariable)
from lcbook.lang.session import Session
from lcbook.pure.term import App, Lam, Ref, Var


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.stream = io.StringIO()
        self.error_handler = ErrorHandler(fatal=False, stream=self.stream)

    def tearDown(self):
        self.tmp.cleanup()

    def session(self, code, **kwargs):
        path = os.path.join(self.tmp.name, "book.lc")
        with open(path, "w", encoding="utf-8") as file:
            file.write(code)
        return Session(self.error_handler, path, **kwargs)

    def test_run(self):
        cases = {
            "id = λx x\nmain = (id id)": "λx x",
            "k = λx λy x\nid = λx x\nmain = (k id id)": "λx x",
            "main = λ* λy y": "λ* λy y",
        }
        for case, expected in cases.items():
            sess = self.session(case)
            sess.load()
            self.assertEqual([expected], [str(term) for term in sess.run()], case)

    def test_run_stepped(self):
        sess = self.session("id = λx x\nmain = (id id)")
        sess.load()
        self.assertEqual(["(id id)", "(λx x id)", "id", "λx x"], [str(term) for term in sess.run("run-stepped")])

    def test_run_leaves_book_untouched(self):
        sess = self.session("id = λx x\nmain = (id id)")
        sess.load()
        sess.run()
        self.assertEqual(App(Ref("id"), Ref("id")), sess.book["main"].body)
        self.assertEqual(["λx x"], [str(term) for term in sess.run()])

    def test_whnf(self):
        sess = self.session("k = λx λy x\nid = λx x\nmain = (k id)", form="whnf")
        sess.load()
        self.assertEqual(["λy id"], [str(term) for term in sess.run()])

    def test_missing_main(self):
        # checked before unbound variables
        sess = self.session("id = x")
        self.assertRaises(MissingMain, sess.load)

    def test_unbound(self):
        sess = self.session("main = x")
        with self.assertRaises(UnboundVariable) as raised:
            sess.load()
        self.assertEqual("x", raised.exception.name)

    def test_parse_failure(self):
        self.assertRaises(ParseFailure, self.session, "main = (x)")

    def test_missing_file(self):
        path = os.path.join(self.tmp.name, "missing.lc")
        self.assertRaises(GenericException, Session, self.error_handler, path)

    def test_not_implemented(self):
        should_raise = [{"form": "wnf"}, {"form": "hnf"}, {"order": "applicative"}, {"form": "nope"}]
        for case in should_raise:
            self.assertRaises(NotImplementedFeature, self.session, "main = x", **case)

    def test_limit(self):
        sess = self.session("loop = loop\nmain = loop", limit=50)
        sess.load()
        self.assertRaises(StepLimitExceeded, sess.run)

    def test_stuck(self):
        sess = self.session("main = λx (x (λy y x))")
        sess.load()
        self.assertEqual(["λx (x (λy y x))"], [str(term) for term in sess.run()])
        self.assertIn("no redex left", self.stream.getvalue())


class EvaluateTestCase(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()
        self.sess = Session(ErrorHandler(fatal=False, stream=self.stream))
        self.sess.load(require_main=False)

    def test_definitions(self):
        self.assertEqual([], self.sess.evaluate("id = λx x"))
        self.assertEqual([Lam("y", Var("y"))], self.sess.evaluate("(id λy y)"))
        self.assertEqual(["(id λy y)", "(λx x λy y)", "λy y"],
                         [str(term) for term in self.sess.evaluate("(id λy y)", mode="run-stepped")])

    def test_forward_reference(self):
        self.sess.evaluate("twice = λf λx (f (f x))")
        self.assertRaises(UnboundVariable, self.sess.evaluate, "main = (twice id)")
        self.assertNotIn("main", self.sess.book)

        self.sess.evaluate("id = λx x")
        self.sess.evaluate("main = (twice id)")
        self.assertEqual(App(Ref("twice"), Ref("id")), self.sess.book["main"].body)

    def test_failed_redefinition(self):
        self.sess.evaluate("id = λx x")
        self.assertRaises(UnboundVariable, self.sess.evaluate, "id = z")
        self.assertEqual(Lam("x", Var("x")), self.sess.book["id"].body)

    def test_shadowing(self):
        self.sess.evaluate("id = λx x")
        self.assertEqual(["λid id"], [str(term) for term in self.sess.evaluate("λid id")])

    def test_errors(self):
        self.assertRaises(UnboundVariable, self.sess.evaluate, "(id y)")
        self.assertRaises(ParseFailure, self.sess.evaluate, "(id)")


if __name__ == '__main__':
    unittest.main()
