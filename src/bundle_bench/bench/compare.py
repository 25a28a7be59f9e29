"""Baseline-relative size comparison across producers."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

import polars as pl

from bundle_bench.bench.errors import ComparisonError
from bundle_bench.bench.matrix import group_key
from bundle_bench.bench.models import (
    VARIANT_KIND_ORDER,
    BuildOutcome,
    ComparisonGroup,
    ComparisonRow,
    GroupKey,
    ProducerName,
    VariantKind,
)

BYTES_PER_MB = 1024 * 1024


def diff_percent(baseline_size: int, challenger_size: int) -> float:
    """Percentage change of challenger relative to baseline."""

    if baseline_size == 0:
        raise ComparisonError("Baseline artifact is 0 bytes; percentage diff is undefined")
    return (challenger_size - baseline_size) / baseline_size * 100


def format_diff(value: float) -> str:
    """Render a diff with explicit sign and two decimals, e.g. ``+20.00%``."""

    if value == 0:
        return "0.00%"
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.2f}%"


def size_mb(size_bytes: int) -> float:
    return size_bytes / BYTES_PER_MB


def build_comparison_groups(
    outcomes: Iterable[BuildOutcome],
    *,
    baseline: ProducerName,
    producers: Sequence[ProducerName],
) -> list[ComparisonGroup]:
    """Group outcomes by mode/minify/bytecode and diff every challenger against baseline.

    Each group must hold exactly one outcome per producer; a missing or duplicate
    entry means the run is inconsistent and is rejected.
    """

    if baseline not in producers:
        raise ComparisonError(f"Baseline producer {baseline} is not part of the compared producers")

    by_group: dict[GroupKey, dict[ProducerName, BuildOutcome]] = {}
    kinds: dict[GroupKey, VariantKind] = {}
    for outcome in outcomes:
        key = group_key(outcome.variant)
        members = by_group.setdefault(key, {})
        if outcome.variant.producer in members:
            raise ComparisonError(f"Duplicate outcome for {outcome.variant_id}")
        members[outcome.variant.producer] = outcome
        kinds[key] = outcome.variant.kind

    challengers_order = [p for p in producers if p != baseline]
    ordered_keys = sorted(by_group, key=lambda k: VARIANT_KIND_ORDER.index(kinds[k]))

    groups: list[ComparisonGroup] = []
    for key in ordered_keys:
        members = by_group[key]
        missing = [p for p in producers if p not in members]
        if missing:
            raise ComparisonError(
                f"Group {kinds[key]} is missing outcomes for producers: {','.join(missing)}"
            )
        unexpected = sorted(p for p in members if p not in producers)
        if unexpected:
            raise ComparisonError(f"Group {kinds[key]} has outcomes for unknown producers: {','.join(unexpected)}")

        base_outcome = members[baseline]
        if base_outcome.size_bytes == 0:
            raise ComparisonError(
                f"Baseline artifact {base_outcome.variant_id} is 0 bytes; refusing to compare against a broken build"
            )
        baseline_row = ComparisonRow(outcome=base_outcome, diff_percent=0.0, diff_label="0.00%", is_baseline=True)
        challenger_rows: list[ComparisonRow] = []
        for producer in challengers_order:
            outcome = members[producer]
            value = diff_percent(base_outcome.size_bytes, outcome.size_bytes)
            challenger_rows.append(
                ComparisonRow(outcome=outcome, diff_percent=value, diff_label=format_diff(value), is_baseline=False)
            )
        groups.append(ComparisonGroup(key=key, kind=kinds[key], baseline=baseline_row, challengers=challenger_rows))
    return groups


def comparison_frame(groups: Sequence[ComparisonGroup], *, labels: Mapping[ProducerName, str]) -> pl.DataFrame:
    """One row per variant, grouped by variant kind with the baseline first."""

    records: list[dict[str, object]] = []
    for group in groups:
        for row in group.rows:
            variant = row.outcome.variant
            records.append(
                {
                    "variant_id": variant.variant_id,
                    "producer": variant.producer,
                    "producer_label": labels.get(variant.producer, variant.producer),
                    "variant_kind": variant.kind,
                    "variant_label": variant.kind_label,
                    "mode": variant.mode,
                    "minified": variant.minified,
                    "bytecode_compiled": variant.bytecode_compiled,
                    "size_bytes": row.outcome.size_bytes,
                    "size_mb": round(size_mb(row.outcome.size_bytes), 2),
                    "diff_percent": row.diff_percent,
                    "diff_label": row.diff_label,
                    "is_baseline": row.is_baseline,
                }
            )
    schema = {
        "variant_id": pl.String,
        "producer": pl.String,
        "producer_label": pl.String,
        "variant_kind": pl.String,
        "variant_label": pl.String,
        "mode": pl.String,
        "minified": pl.Boolean,
        "bytecode_compiled": pl.Boolean,
        "size_bytes": pl.Int64,
        "size_mb": pl.Float64,
        "diff_percent": pl.Float64,
        "diff_label": pl.String,
        "is_baseline": pl.Boolean,
    }
    return pl.DataFrame(records, schema=schema)
