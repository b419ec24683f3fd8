"""Render a simple Markdown dialect into styled text runs."""

__version__ = "0.1.0"
