"""Helpers compartidos por los cargadores CSV."""

from .loaders import coerce_int, coerce_numeric, read_table, require_columns

__all__ = ["read_table", "require_columns", "coerce_numeric", "coerce_int"]
