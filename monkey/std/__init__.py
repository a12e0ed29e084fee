from .builtins import populate_builtins

__all__ = ['populate_builtins']
