"""Native builtin functions available to every Monkey program.

Builtins receive already-evaluated arguments and return exactly one
object. They check their own arity and argument types and report misuse
by returning an Error object; they never raise.
"""

from typing import Dict, List, Optional, TextIO

from monkey.builtin_function import Builtin
from monkey.errors import new_error
from monkey.objects import Object, Array, String, Integer, NULL, ARRAY_OBJ


def check_arity(args: List[Object], want: int) -> Optional[Object]:
    if len(args) != want:
        return new_error("wrong number of arguments. got=%d, want=%d", len(args), want)
    return None


def populate_builtins(out: Optional[TextIO] = None) -> Dict[str, Builtin]:
    """Build the builtin table; ``puts`` writes to ``out`` (stdout when None)."""

    def monkey_len(args: List[Object]) -> Object:
        err = check_arity(args, 1)
        if err is not None:
            return err
        arg = args[0]
        if isinstance(arg, String):
            # Length in bytes, not characters.
            return Integer(len(arg.value.encode('utf-8')))
        if isinstance(arg, Array):
            return Integer(len(arg.elements))
        return new_error("argument to `len` not supported, got %s", arg.type())

    def monkey_push(args: List[Object]) -> Object:
        err = check_arity(args, 2)
        if err is not None:
            return err
        arr = args[0]
        if not isinstance(arr, Array):
            return new_error("argument to `push` must be %s, got %s", ARRAY_OBJ, arr.type())
        return Array(arr.elements + [args[1]])

    def monkey_puts(args: List[Object]) -> Object:
        for arg in args:
            print(arg.inspect(), file=out)
        return NULL

    def monkey_first(args: List[Object]) -> Object:
        err = check_arity(args, 1)
        if err is not None:
            return err
        arr = args[0]
        if not isinstance(arr, Array):
            return new_error("argument to `first` must be %s, got %s", ARRAY_OBJ, arr.type())
        return arr.elements[0] if arr.elements else NULL

    def monkey_last(args: List[Object]) -> Object:
        err = check_arity(args, 1)
        if err is not None:
            return err
        arr = args[0]
        if not isinstance(arr, Array):
            return new_error("argument to `last` must be %s, got %s", ARRAY_OBJ, arr.type())
        return arr.elements[-1] if arr.elements else NULL

    def monkey_rest(args: List[Object]) -> Object:
        err = check_arity(args, 1)
        if err is not None:
            return err
        arr = args[0]
        if not isinstance(arr, Array):
            return new_error("argument to `rest` must be %s, got %s", ARRAY_OBJ, arr.type())
        if not arr.elements:
            return NULL
        return Array(arr.elements[1:])

    return {
        'len': Builtin('len', monkey_len),
        'push': Builtin('push', monkey_push),
        'puts': Builtin('puts', monkey_puts),
        'first': Builtin('first', monkey_first),
        'last': Builtin('last', monkey_last),
        'rest': Builtin('rest', monkey_rest),
    }
