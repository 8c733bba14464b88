"""QPACK header fields, prefix integer coding, and the dynamic table with its encoder and decoder views."""

__version__ = "0.1.0"
__all__ = ["field", "prefix_int", "parse_error", "dynamic_table", "dynamic_views"]