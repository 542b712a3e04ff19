"""Content management backend for a small business website."""

__version__ = "1.0.0"
