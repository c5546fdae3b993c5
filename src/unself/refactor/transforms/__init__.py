from .rename_transformer import BindingRenamerTransformer

__all__ = ["BindingRenamerTransformer"]
