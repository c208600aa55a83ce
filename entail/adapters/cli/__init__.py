"""Command-line interface adapters.

Provides the ``entail`` command:
- positional glob patterns selecting test files
- --bail, --cwd, --ignore and --no-color options
"""
