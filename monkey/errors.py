from typing import Any, List

from monkey.objects import Error


class MonkeyError(Exception):
    """Base class for host-level failures raised by the Monkey toolchain."""


class ParserError(MonkeyError):
    """Raised when a program with parse errors is handed over for evaluation."""
    def __init__(self, errors: List[str]):
        super().__init__('\n'.join(errors))
        self.errors = errors


def new_error(fmt: str, *args: Any) -> Error:
    """Build a runtime Error object; these are values, never raised."""
    return Error(fmt % args if args else fmt)
