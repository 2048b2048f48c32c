"""
Central version constant for consolekit.
"""

__version__ = "1.0.0"
