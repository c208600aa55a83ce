"""Test suite for the entail test harness.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - No adapters involved, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - Real filesystem and import system via pytest's tmp_path
   - Validates rendering, discovery and argument parsing

3. fakes/: Port implementations for testing
   - In-memory LoaderPort and a recording write sink
   - Used by core and workflow tests
"""
