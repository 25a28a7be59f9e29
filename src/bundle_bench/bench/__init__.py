"""Bundle variant orchestration and comparison package."""

from bundle_bench.bench.errors import (
    ArtifactMissingError,
    ArtifactStoreError,
    BenchmarkError,
    BuildOrderError,
    CommandFailedError,
    ComparisonError,
    MeasurementError,
)
from bundle_bench.bench.models import BenchRunResult, BuildOutcome, BundleVariant, ComparisonGroup
from bundle_bench.bench.runner import run_bundle_benchmark

__all__ = [
    "ArtifactMissingError",
    "ArtifactStoreError",
    "BenchmarkError",
    "BuildOrderError",
    "CommandFailedError",
    "ComparisonError",
    "MeasurementError",
    "BenchRunResult",
    "BuildOutcome",
    "BundleVariant",
    "ComparisonGroup",
    "run_bundle_benchmark",
]
