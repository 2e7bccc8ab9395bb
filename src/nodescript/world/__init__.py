from .state import World

__all__ = ["World"]
