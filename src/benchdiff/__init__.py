"""benchdiff -- smart-contract benchmark comparison."""

__version__ = "0.1.0"
