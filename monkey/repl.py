"""Interactive read-eval-print loop for Monkey. Uses cmd as backend."""

import cmd
import getpass

from termcolor import colored

from .interpreter import Interpreter
from .objects import Error
from .parser import parse
from .ast import LetStatement


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    prompt = ">> "
    COMMANDS = ('exit', 'EOF')

    def __init__(self, interpreter: Interpreter = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # One interpreter (and so one root environment) for the whole session.
        self.interpreter = interpreter if interpreter is not None else Interpreter()

    def preloop(self):
        self.intro = (f"Hello {getpass.getuser()}! This is the Monkey programming language!\n"
                      "Feel free to type in commands")

    def onecmd(self, line):
        # Only a bare command word is a shell command; `exit + 1` is Monkey.
        stripped = line.strip()
        if not stripped or stripped in self.COMMANDS:
            return super().onecmd(stripped)
        return self.default(line)

    def default(self, line):
        """Parses and evaluates one line of Monkey."""
        program, errors = parse(line)
        if errors:
            for msg in errors:
                self.stdout.write(colored(f"\t{msg}", "red") + "\n")
            return

        try:
            result = self.interpreter.run(program)
        except RecursionError:
            self.stdout.write(colored("ERROR: maximum recursion depth exceeded", "red") + "\n")
            return

        if program.statements and isinstance(program.statements[-1], LetStatement):
            return
        if isinstance(result, Error):
            self.stdout.write(colored(result.inspect(), "red") + "\n")
        else:
            self.stdout.write(result.inspect() + "\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        self.interpreter.close()
        return True
