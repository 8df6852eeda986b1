"""
pyembedkit CLI module.

This module provides the command-line interface for pyembedkit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
