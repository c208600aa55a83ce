"""External adapters for the entail test harness.

This package contains everything that touches the outside world (the
filesystem, the import system, the terminal) and provides
implementations of the core port interfaces.

Adapter Organization:

- discovery/: Finding test files and importing them into suites
- reporter/: Rendering the event stream as text
- styles/: Terminal colors for report and diff text
- cli/: Command-line interface
"""
