from typing import Dict, Optional

from monkey.objects import Object


class Environment:
    """A scope mapping names to runtime objects, linked to its enclosing scope.

    One root environment is created per interpreter session; each function
    call gets a fresh child whose parent is the environment the function was
    defined in (not the caller's), which is what makes scoping lexical.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Object] = {}

    def get(self, name: str) -> Optional[Object]:
        if name in self.values:
            return self.values[name]
        if self.parent is not None:
            return self.parent.get(name)
        return None

    def set(self, name: str, value: Object) -> Object:
        # Always binds locally; an outer binding of the same name is shadowed.
        self.values[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None
