"""
FILE: taskflow/repl/__init__.py
PURPOSE: Interactive REPL (entry point: taskflow repl)
"""

from .main import execute_line, run_repl

__all__ = ["execute_line", "run_repl"]
