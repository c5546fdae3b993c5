from .abbreviator import Abbreviator, abbreviate, DEFAULT_OVERRIDES

__all__ = ["Abbreviator", "abbreviate", "DEFAULT_OVERRIDES"]
