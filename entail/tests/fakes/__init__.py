"""Fake implementations of core ports for testing.

- FakeLoader: Serves preset suites instead of importing files
- RecordingWriter: Captures report text chunks for assertion
- RecordingReporter: Captures the raw event stream
"""

from .loader import FakeLoader
from .reporter import RecordingReporter
from .writer import RecordingWriter

__all__ = [
    "FakeLoader",
    "RecordingReporter",
    "RecordingWriter",
]
