"""Core domain logic for the entail test harness.

This package contains zero external dependencies and represents
the pure logic of the harness: suite resolution, execution, equality,
diffing and assertions. Discovery, terminal output and configuration
are handled by the adapters package.
"""

from .models import (
    Case,
    Fail,
    Failed,
    Group,
    Mode,
    Outcome,
    Output,
    Pass,
    Passed,
    Report,
    Skip,
    Start,
    Suite,
    Unit,
)

__all__ = [
    "Case",
    "Fail",
    "Failed",
    "Group",
    "Mode",
    "Outcome",
    "Output",
    "Pass",
    "Passed",
    "Report",
    "Skip",
    "Start",
    "Suite",
    "Unit",
]
