"""Handles interactive mode for the lcbook interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lambda calculus book shell."""
    intro = "lcbook :: untyped lambda calculus with definitions\nType '?' or 'help' for more information."
    prompt = "> "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self.mode = "run"
        self.line_num = 0

    def default(self, line):
        """Evaluates a definition or a term."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            for term in self.sess.evaluate(line, self.line_num, self.mode):
                print(term, file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to lcbook!\n\n"
              "Type 'id = λx x' to add a definition to the book, and then '(id y)' to reduce \n"
              "a term that uses it. Terms are reduced in normal order, applications are \n"
              "always parenthesized and '@' can be typed instead of 'λ'.\n\n"
              "Commands:\n"
              "  :step   toggle printing every intermediate reduction step\n"
              "  exit    leave the shell", file=self.stdout)

    def do_step(self, arg):
        """Toggles stepped output."""
        self.mode = "run" if self.mode == "run-stepped" else "run-stepped"
        print(f"stepped output {'on' if self.mode == 'run-stepped' else 'off'}", file=self.stdout)

    def parseline(self, line):
        """Routes ':<command>', exit, EOF and help to commands; every other line goes to default for evaluation."""
        line = line.strip()
        if line.startswith(":"):
            line = line[1:]
        elif line not in ("exit", "EOF", "help", "?"):
            return None, None, line
        return super().parseline(line)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
