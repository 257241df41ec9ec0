"""Favorite cities and current weather behind session authentication."""

__version__ = "0.1.0"
