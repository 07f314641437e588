"""Amana Bookstore API: a book catalogue and its reviews over JSON files."""

__version__ = "1.0.0"
