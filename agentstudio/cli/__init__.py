# file: agentstudio/agentstudio/cli/__init__.py
"""
Command-Line Interface (CLI) for running a studio.
"""
from .studio_cli import cli, run

__all__ = [
    "cli",
    "run",
]
