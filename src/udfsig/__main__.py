"""
Entry point for `python -m udfsig`.

Usage:
    python -m udfsig verify document.udf
    python -m udfsig info document.udf
"""

from .ui.cli import main

main()
