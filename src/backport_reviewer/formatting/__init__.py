"""
Output Formatting

Formats backport review results for the terminal.
"""

from .console import ConsoleFormatter

__all__ = ['ConsoleFormatter']
