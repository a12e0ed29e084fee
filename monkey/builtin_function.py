from dataclasses import dataclass
from typing import Callable, List

from monkey.objects import Object, BUILTIN_OBJ


@dataclass(eq=False)
class Builtin(Object):
    name: str
    fn: Callable[[List[Object]], Object]

    def type(self) -> str:
        return BUILTIN_OBJ

    def inspect(self) -> str:
        return 'builtin function'

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
