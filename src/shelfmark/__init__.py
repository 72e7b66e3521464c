"""Shelfmark: library catalog record model and ISBN enrichment pipeline."""

__version__ = "0.1.0"
