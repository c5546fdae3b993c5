from .pointer import L, SemanticPointer
from .runtime import Needle
from .loader import Loader
from .interfaces import FileHandler

__all__ = ["L", "SemanticPointer", "Needle", "Loader", "FileHandler"]
