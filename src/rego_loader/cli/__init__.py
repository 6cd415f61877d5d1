"""Command-line interface for rego-loader.

Provides commands for listing policies and libraries, inspecting single
files, and showing configuration.
"""

from .main import cli, main

__all__ = ["cli", "main"]
