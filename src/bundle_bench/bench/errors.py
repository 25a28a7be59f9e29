"""Fatal error types raised by the benchmark harness.

Every error here aborts the whole run. Nothing in the harness retries or
downgrades them; the CLI maps any ``BenchmarkError`` to exit status 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class BenchmarkError(RuntimeError):
    """Base class for run-aborting benchmark failures."""


class ArtifactStoreError(BenchmarkError):
    """Raised when the variant workspace cannot be reset or created."""


class CommandFailedError(BenchmarkError):
    """Raised when an external command exits non-zero or cannot be launched."""

    def __init__(self, command: Sequence[str], *, cwd: Path, returncode: int | None, reason: str | None = None):
        self.command = list(command)
        self.cwd = cwd
        self.returncode = returncode
        self.reason = reason
        rendered = " ".join(self.command)
        if returncode is None:
            detail = f"could not be launched ({reason})" if reason else "could not be launched"
        else:
            detail = f"exited with status {returncode}"
        super().__init__(f"command {detail}: {rendered} (cwd={cwd})")


class ArtifactMissingError(BenchmarkError):
    """Raised when a producer reported success but its bundle is not where it should be."""


class BuildOrderError(BenchmarkError):
    """Raised when a bytecode compile is requested before its source bundle exists."""


class MeasurementError(BenchmarkError):
    """Raised when a size is read for a variant without a successful build."""


class ComparisonError(BenchmarkError):
    """Raised when outcomes cannot be compared against the baseline."""
