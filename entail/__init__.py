"""entail: a convention-driven test harness.

Test modules export plain functions and nested mappings; names decide
what runs. ``test*`` exports run, ``skip_test*`` exports are skipped and
``only_test*`` exports run exclusively. Inside a mapping, ``skip_`` and
``only_`` prefixes (or ``skip!``/``only!``) do the same for members, and
``"skip": True`` / ``"only": True`` flag a whole group.

Every test body receives the assertion library as its only argument:

    def test_sum(a):
        a.equal(sum([1, 2]), 3)

    test_strings = {
        "upper": lambda a: a.strict_equal("x".upper(), "X"),
        "skip_slow": lambda a: a.fail("not yet"),
    }
"""

from entail.core import assertions
from entail.core.assertions import AssertionFailure
from entail.core.glob import Glob, glob
from entail.core.models import Mode, Report, Unit
from entail.core.runner import run
from entail.core.suite import iterate
from entail.main import test

__version__ = "0.1.0"

__all__ = [
    "AssertionFailure",
    "Glob",
    "Mode",
    "Report",
    "Unit",
    "assertions",
    "glob",
    "iterate",
    "run",
    "test",
]
