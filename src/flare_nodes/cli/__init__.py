"""
Flare Nodes CLI - Command-line interface for the Flare Network node.

Commands:
- describe: List resources and operations
- run: Execute one batch locally
"""

from .main import app, cli, main

__all__ = ["app", "cli", "main"]
