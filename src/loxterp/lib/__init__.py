from .builtins import make_default_globals

__all__ = [
    "make_default_globals",
]
