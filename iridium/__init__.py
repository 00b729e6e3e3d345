"""Iridium: build a themed static site (and PDFs) from a Markdown tree."""

__version__ = "0.4.0"
