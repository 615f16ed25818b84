"""Query rewriting over term lattices."""

__version__ = "0.1.0"
