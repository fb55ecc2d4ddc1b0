"""
pipsync command line interface.
"""

from pipsync.interface.cli.app import app, main

__all__ = ["app", "main"]
