"""
FILE: taskflow/cli/__init__.py
PURPOSE: Typer command-line interface (entry point: taskflow.cli.main:main)
"""
