"""CLI entry point for the Monkey interpreter.

Usage:
    python -m monkey [-v|-vv|-vvv] [FILE ...]

Options:
  -v            Increase debug verbosity (can be repeated)

With one or more files, each file is parsed and evaluated in a fresh
environment and the inspected result is printed. Without files an
interactive session is started.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import sys
from pathlib import Path

from termcolor import colored

from .interpreter import Interpreter
from .parser import parse
from .repl import Shell


def run_files(files: list[str], debug_level: int = 0) -> int:
    for name in files:
        program_file = Path(name)
        if not program_file.exists():
            print(colored(f"Error: file {program_file} not found", "red"), file=sys.stderr)
            return 1
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()
        program, errors = parse(source)
        if errors:
            print(f"Errors in file: {program_file}", file=sys.stderr)
            for msg in errors:
                print(colored(msg, "red"), file=sys.stderr)
            return 1
        interpreter = Interpreter(debug_level=debug_level)
        try:
            result = interpreter.run(program)
        except RecursionError:
            print(colored("Runtime error: maximum recursion depth exceeded", "red"), file=sys.stderr)
            return 1
        finally:
            interpreter.close()
        print(result.inspect())
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='monkey', description="Monkey language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('files', nargs='*', metavar='FILE',
                        help='Monkey source files to run (if empty, starts the REPL)')
    args = parser.parse_args(argv)

    if args.files:
        status = run_files(args.files, args.v)
        if status:
            sys.exit(status)
        return

    Shell(Interpreter(debug_level=args.v)).cmdloop()


if __name__ == '__main__':
    main()
