"""injtrace - dependency injection tree reconstruction from resolution paths."""

__version__ = "1.0.0"
