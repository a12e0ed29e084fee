"""Runtime object model for the Monkey interpreter.

Every value the evaluator produces is one of the classes below. They are
immutable once built: operations that "change" an array construct a new
one. ``TRUE``, ``FALSE`` and ``NULL`` are created exactly once; the
evaluator hands out these instances instead of building fresh ones, so
identity comparison against them is always valid.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List

from .ast import BlockStatement, Identifier

if TYPE_CHECKING:
    from .environment import Environment


INTEGER_OBJ = 'INTEGER'
BOOLEAN_OBJ = 'BOOLEAN'
STRING_OBJ = 'STRING'
NULL_OBJ = 'NULL'
ARRAY_OBJ = 'ARRAY'
HASH_OBJ = 'HASH'
FUNCTION_OBJ = 'FUNCTION'
BUILTIN_OBJ = 'BUILTIN'
RETURN_VALUE_OBJ = 'RETURN_VALUE'
ERROR_OBJ = 'ERROR'

UINT64_MASK = 2 ** 64 - 1

FNV64_OFFSET_BASIS = 0xcbf29ce484222325
FNV64_PRIME = 0x100000001b3


def wrap_int64(value: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    value &= UINT64_MASK
    if value >= 2 ** 63:
        value -= 2 ** 64
    return value


def fnv1a_64(data: bytes) -> int:
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & UINT64_MASK
    return h


class Object(ABC):
    """Base class of all runtime values."""

    @abstractmethod
    def type(self) -> str:
        ...

    @abstractmethod
    def inspect(self) -> str:
        ...


@dataclass(frozen=True)
class HashKey:
    """Structural key of a hashable object: its type tag plus a 64-bit hash."""
    type: str
    value: int


class Hashable(ABC):
    """Capability shared by the objects that may be used as hash keys."""

    @abstractmethod
    def hash_key(self) -> HashKey:
        ...


@dataclass(frozen=True)
class Integer(Object, Hashable):
    value: int

    def type(self) -> str:
        return INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER_OBJ, self.value & UINT64_MASK)


@dataclass(frozen=True)
class Boolean(Object, Hashable):
    value: bool

    def type(self) -> str:
        return BOOLEAN_OBJ

    def inspect(self) -> str:
        return 'true' if self.value else 'false'

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN_OBJ, 1 if self.value else 0)


@dataclass(frozen=True)
class String(Object, Hashable):
    value: str

    def type(self) -> str:
        return STRING_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING_OBJ, fnv1a_64(self.value.encode('utf-8')))


@dataclass(frozen=True)
class Null(Object):
    def type(self) -> str:
        return NULL_OBJ

    def inspect(self) -> str:
        return 'null'


@dataclass
class Array(Object):
    elements: List[Object] = field(default_factory=list)

    def type(self) -> str:
        return ARRAY_OBJ

    def inspect(self) -> str:
        return '[' + ', '.join(e.inspect() for e in self.elements) + ']'


@dataclass(frozen=True)
class HashPair:
    key: Object
    value: Object


@dataclass
class Hash(Object):
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def type(self) -> str:
        return HASH_OBJ

    def inspect(self) -> str:
        items = ', '.join(f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values())
        return '{' + items + '}'


@dataclass(eq=False)
class Function(Object):
    """A user function together with the environment it was defined in.

    ``env`` is shared, not copied: the closure sees later changes to the
    defining scope, and keeps that scope alive for as long as it exists.
    """
    parameters: List[Identifier]
    body: BlockStatement
    env: 'Environment' = field(repr=False)

    def type(self) -> str:
        return FUNCTION_OBJ

    def inspect(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class ReturnValue(Object):
    """Carries a returned value up through enclosing blocks to the call site."""
    value: Object

    def type(self) -> str:
        return RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    message: str

    def type(self) -> str:
        return ERROR_OBJ

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_error(obj: Object) -> bool:
    return isinstance(obj, Error)
