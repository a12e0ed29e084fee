"""Tree-walking evaluator for the Monkey language.

``Interpreter.evaluate`` dispatches on the AST node kind and always returns
exactly one runtime object. Control flow is carried by values rather than
Python exceptions:

* a ``return`` statement produces a ``ReturnValue`` wrapper, which every
  enclosing block passes straight up until the function call (or the
  program) unwraps it;
* a runtime failure produces an ``Error`` object, which every operation
  checks for and hands back unchanged, so it always surfaces to whoever
  called ``evaluate`` on the program. The language has no way to catch it.
"""

from __future__ import annotations

import sys
import threading
from typing import Any, Callable, List, Optional, TextIO, Union

from .ast import (
    Node, Program, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Identifier, IntegerLiteral, Boolean, StringLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, HashLiteral, IndexExpression,
    SliceExpression, Expression,
)
from .builtin_function import Builtin
from .environment import Environment
from .errors import ParserError, new_error
from .objects import (
    Object, Integer, String, Array, Hash, HashPair, Hashable, Function,
    ReturnValue, Error, TRUE, FALSE, NULL, native_bool_to_boolean,
    is_error, wrap_int64, INTEGER_OBJ, BOOLEAN_OBJ, STRING_OBJ,
)
from .parser import parse
from .std import populate_builtins

# One Monkey call costs about a dozen Python frames.
RECURSION_LIMIT = 100_000
THREAD_STACK_SIZE = 256 * 1024 * 1024


def call_with_deep_stack(fn: Callable[..., Any], *args: Any) -> Any:
    """Call ``fn(*args)`` on a worker thread sized for deep recursion.

    Exceptions raised by ``fn`` (``RecursionError`` included) are re-raised
    in the calling thread.
    """
    outcome: dict = {}

    def target():
        try:
            outcome['value'] = fn(*args)
        except BaseException as exc:
            outcome['error'] = exc

    old_limit = sys.getrecursionlimit()
    old_stack_size = threading.stack_size(THREAD_STACK_SIZE)
    try:
        sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
        worker = threading.Thread(target=target, name='monkey-eval')
        worker.start()
        worker.join()
    finally:
        threading.stack_size(old_stack_size)
        sys.setrecursionlimit(old_limit)

    if 'error' in outcome:
        raise outcome['error']
    return outcome['value']


class Interpreter:
    """Core interpreter that evaluates a Monkey AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 out: Optional[TextIO] = None):
        self.global_env = Environment()
        self.builtins = populate_builtins(out)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Object:
        if env is None:
            env = self.global_env
        return call_with_deep_stack(self.evaluate, program, env)

    def evaluate(self, node: Node, env: Environment) -> Object:
        # Statements
        if isinstance(node, Program):
            return self.eval_program(node, env)
        if isinstance(node, BlockStatement):
            return self.eval_block(node, env)
        if isinstance(node, ExpressionStatement):
            if node.expression is None:
                return NULL
            return self.evaluate(node.expression, env)
        if isinstance(node, LetStatement):
            value = self.evaluate(node.value, env) if node.value is not None else NULL
            if is_error(value):
                return value
            env.set(node.name.value, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name.value} = {value.inspect()}")
            return NULL
        if isinstance(node, ReturnStatement):
            if node.return_value is None:
                return ReturnValue(NULL)
            value = self.evaluate(node.return_value, env)
            if is_error(value):
                return value
            return ReturnValue(value)

        # Literals
        if isinstance(node, IntegerLiteral):
            return Integer(node.value)
        if isinstance(node, Boolean):
            return native_bool_to_boolean(node.value)
        if isinstance(node, StringLiteral):
            return String(node.value)
        if isinstance(node, ArrayLiteral):
            elements = self.eval_expressions(node.elements, env)
            if isinstance(elements, Error):
                return elements
            return Array(elements)
        if isinstance(node, HashLiteral):
            return self.eval_hash_literal(node, env)
        if isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)

        # Expressions
        if isinstance(node, Identifier):
            return self.eval_identifier(node, env)
        if isinstance(node, PrefixExpression):
            right = self.evaluate(node.right, env)
            if is_error(right):
                return right
            return self.eval_prefix_expression(node.operator, right)
        if isinstance(node, InfixExpression):
            left = self.evaluate(node.left, env)
            if is_error(left):
                return left
            right = self.evaluate(node.right, env)
            if is_error(right):
                return right
            return self.eval_infix_expression(node.operator, left, right)
        if isinstance(node, IfExpression):
            return self.eval_if_expression(node, env)
        if isinstance(node, CallExpression):
            func = self.evaluate(node.function, env)
            if is_error(func):
                return func
            args = self.eval_expressions(node.arguments, env)
            if isinstance(args, Error):
                return args
            return self.apply_function(func, args)
        if isinstance(node, IndexExpression):
            left = self.evaluate(node.left, env)
            if is_error(left):
                return left
            index = self.evaluate(node.index, env)
            if is_error(index):
                return index
            return self.eval_index_expression(left, index)
        if isinstance(node, SliceExpression):
            return self.eval_slice_expression(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def eval_program(self, program: Program, env: Environment) -> Object:
        result: Object = NULL
        for stmt in program.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def eval_block(self, block: BlockStatement, env: Environment) -> Object:
        result: Object = NULL
        for stmt in block.statements:
            result = self.evaluate(stmt, env)
            # leave ReturnValue wrapped so outer blocks stop too
            if isinstance(result, (ReturnValue, Error)):
                return result
        return result

    def eval_expressions(self, exprs: List[Expression], env: Environment) -> Union[List[Object], Error]:
        """Evaluate left to right; the first Error is returned in place of the list."""
        results: List[Object] = []
        for expr in exprs:
            value = self.evaluate(expr, env)
            if isinstance(value, Error):
                return value
            results.append(value)
        return results

    def eval_identifier(self, node: Identifier, env: Environment) -> Object:
        value = env.get(node.value)
        if value is not None:
            return value
        builtin = self.builtins.get(node.value)
        if builtin is not None:
            return builtin
        return new_error("identifier not found: %s", node.value)

    def eval_if_expression(self, node: IfExpression, env: Environment) -> Object:
        condition = self.evaluate(node.condition, env)
        if is_error(condition):
            return condition
        truthy = self.is_truthy(condition)
        if self.debug_level >= 3:
            self.debug(f"if condition {condition.inspect()} -> {truthy}")
        if truthy:
            return self.evaluate(node.consequence, env)
        if node.alternative is not None:
            return self.evaluate(node.alternative, env)
        return NULL

    def eval_hash_literal(self, node: HashLiteral, env: Environment) -> Object:
        pairs = {}
        for key_node, value_node in node.pairs:
            key = self.evaluate(key_node, env)
            if is_error(key):
                return key
            if not isinstance(key, Hashable):
                return new_error("key is not hashable: %s", key.type())
            value = self.evaluate(value_node, env)
            if is_error(value):
                return value
            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)

    def apply_function(self, func: Object, args: List[Object]) -> Object:
        if isinstance(func, Function):
            if len(args) != len(func.parameters):
                return new_error("wrong number of arguments. got=%d, want=%d",
                                 len(args), len(func.parameters))
            if self.debug_level >= 1:
                self.debug(f"call {func.inspect()} with ({', '.join(a.inspect() for a in args)})")
            # New scope hangs off the defining environment, not the caller's.
            call_env = Environment(parent=func.env)
            for param, arg in zip(func.parameters, args):
                call_env.set(param.value, arg)
            result = self.evaluate(func.body, call_env)
            if isinstance(result, ReturnValue):
                return result.value
            return result
        if isinstance(func, Builtin):
            if self.debug_level >= 1:
                self.debug(f"call builtin {func.name} with ({', '.join(a.inspect() for a in args)})")
            return func.fn(args)
        return new_error("not a function: %s", func.type())

    def eval_prefix_expression(self, op: str, right: Object) -> Object:
        if op == '!':
            return FALSE if self.is_truthy(right) else TRUE
        if op == '-':
            if not isinstance(right, Integer):
                return new_error("unknown operator: -%s", right.type())
            return Integer(wrap_int64(-right.value))
        return new_error("unknown operator: %s%s", op, right.type())

    def eval_infix_expression(self, op: str, left: Object, right: Object) -> Object:
        if left.type() != right.type():
            return new_error("type mismatch: %s %s %s", left.type(), op, right.type())
        if left.type() == INTEGER_OBJ:
            return self.eval_integer_infix_expression(op, left, right)
        if left.type() == BOOLEAN_OBJ:
            if op == '==':
                return native_bool_to_boolean(left.value == right.value)
            if op == '!=':
                return native_bool_to_boolean(left.value != right.value)
        if left.type() == STRING_OBJ:
            return self.eval_string_infix_expression(op, left, right)
        return new_error("unknown operator: %s %s %s", left.type(), op, right.type())

    def eval_integer_infix_expression(self, op: str, left: Integer, right: Integer) -> Object:
        a = left.value
        b = right.value
        if op == '+':
            return Integer(wrap_int64(a + b))
        if op == '-':
            return Integer(wrap_int64(a - b))
        if op == '*':
            return Integer(wrap_int64(a * b))
        if op == '/':
            if b == 0:
                return new_error("division by zero")
            # integer division truncating toward zero
            quotient = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                quotient = -quotient
            return Integer(wrap_int64(quotient))
        if op == '<':
            return native_bool_to_boolean(a < b)
        if op == '>':
            return native_bool_to_boolean(a > b)
        if op == '==':
            return native_bool_to_boolean(a == b)
        if op == '!=':
            return native_bool_to_boolean(a != b)
        return new_error("unknown operator: %s %s %s", left.type(), op, right.type())

    def eval_string_infix_expression(self, op: str, left: String, right: String) -> Object:
        if op == '+':
            return String(left.value + right.value)
        if op == '==':
            return native_bool_to_boolean(left.value == right.value)
        if op == '!=':
            return native_bool_to_boolean(left.value != right.value)
        return new_error("unknown operator: %s %s %s", left.type(), op, right.type())

    def eval_index_expression(self, left: Object, index: Object) -> Object:
        if isinstance(left, Array) and isinstance(index, Integer):
            if not left.elements:
                return NULL
            # Out of range indices wrap around in both directions.
            return left.elements[index.value % len(left.elements)]
        if isinstance(left, Hash):
            if not isinstance(index, Hashable):
                return new_error("unusable as hash key: %s", index.type())
            pair = left.pairs.get(index.hash_key())
            return pair.value if pair is not None else NULL
        return new_error("index operator not supported: %s", left.type())

    def eval_slice_expression(self, node: SliceExpression, env: Environment) -> Object:
        left = self.evaluate(node.left, env)
        if is_error(left):
            return left
        bounds: List[Optional[Object]] = []
        for bound_node in (node.lower, node.upper):
            if bound_node is None:
                bounds.append(None)
                continue
            bound = self.evaluate(bound_node, env)
            if is_error(bound):
                return bound
            bounds.append(bound)
        lower, upper = bounds

        if not isinstance(left, Array) or not all(b is None or isinstance(b, Integer) for b in bounds):
            return new_error("slice operator not supported: %s[%s:%s]", left.type(),
                             '' if lower is None else lower.type(),
                             '' if upper is None else upper.type())

        length = len(left.elements)
        start = normalize_bound(0 if lower is None else lower.value, length)
        stop = normalize_bound(length if upper is None else upper.value, length)
        if start is None or stop is None or start >= stop:
            return Array([])
        return Array(left.elements[start:stop])

    @staticmethod
    def is_truthy(value: Object) -> bool:
        return value is not NULL and value is not FALSE


def normalize_bound(bound: int, length: int) -> Optional[int]:
    """Wrap a negative slice bound once; None if it still falls outside [0, length]."""
    if bound < 0:
        bound += length
    if 0 <= bound <= length:
        return bound
    return None


def evaluate(program: Program, env: Optional[Environment] = None) -> Object:
    """Evaluate a parsed program against ``env`` (a fresh root scope by default)."""
    return Interpreter().run(program, env)


def run_program(source: str, debug_level: int = 0) -> Object:
    """Convenience function to parse and evaluate a Monkey program from source."""
    program, errors = parse(source)
    if errors:
        raise ParserError(errors)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(program)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0) -> Object:
    """Parse and evaluate a Monkey source file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level)
