"""Discovery adapters.

- filesystem: Walk a directory and select test files by glob
- loader: Import test files and adapt their exports into suites
"""
