"""Command-line interface module for XML Pretty Printer.

This module provides the ``xml-pretty-printer`` command for formatting XML
files and checking whether they are already formatted.
"""

from .main import main

__all__ = ["main"]
