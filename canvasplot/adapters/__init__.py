from .normalize import coerce_1d_numeric, coerce_xy

__all__ = ["coerce_1d_numeric", "coerce_xy"]
