"""Table and narrative rendering for bundle size comparisons."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import polars as pl

from bundle_bench.bench.compare import size_mb
from bundle_bench.bench.models import ComparisonGroup, ProducerName


def _markdown_table(df: pl.DataFrame, *, max_rows: int = 60) -> str:
    if df.height == 0:
        return "(no rows)"
    head = df.head(max_rows)
    cols = head.columns
    lines = [
        "| " + " | ".join(cols) + " |",
        "| " + " | ".join(["---"] * len(cols)) + " |",
    ]
    for row in head.to_dicts():
        lines.append("| " + " | ".join(str(row.get(col, "")) for col in cols) + " |")
    return "\n".join(lines)


def display_frame(frame: pl.DataFrame, *, baseline_label: str) -> pl.DataFrame:
    """Presentation columns: bundle type, size in MB, and diff vs baseline."""

    return frame.select(
        pl.concat_str([pl.col("producer_label"), pl.col("variant_label")], separator=" ").alias("Bundle Type"),
        pl.col("size_mb").map_elements(lambda v: f"{v:.2f}", return_dtype=pl.String).alias("Size (MB)"),
        pl.col("diff_label").alias(f"Diff vs {baseline_label}"),
    )


def render_table(frame: pl.DataFrame, *, baseline_label: str) -> str:
    return _markdown_table(display_frame(frame, baseline_label=baseline_label))


def render_summary(groups: Sequence[ComparisonGroup], *, labels: Mapping[ProducerName, str]) -> list[str]:
    """One narrative line per challenger per group."""

    lines: list[str] = []
    for group in groups:
        base = group.baseline.outcome
        base_label = labels.get(base.variant.producer, base.variant.producer)
        for row in group.challengers:
            challenger = row.outcome
            marker = "📈" if row.diff_percent > 0 else "📉"
            lines.append(
                f"{marker} {group.baseline.outcome.variant.kind_label}: "
                f"{labels.get(challenger.variant.producer, challenger.variant.producer)} is {row.diff_label} "
                f"compared to {base_label} "
                f"({size_mb(challenger.size_bytes):.2f}MB vs {size_mb(base.size_bytes):.2f}MB)"
            )
    return lines


def render_report(
    *,
    summary: dict[str, Any],
    frame: pl.DataFrame,
    groups: Sequence[ComparisonGroup],
    labels: Mapping[ProducerName, str],
) -> str:
    """Render the markdown report for one benchmark run."""

    baseline_label = labels.get(summary["baseline"], summary["baseline"])
    lines: list[str] = []
    lines.append("# Bundle Size Comparison")
    lines.append("")
    lines.append("## Run")
    lines.append(f"- run_id: `{summary.get('run_id')}`")
    lines.append(f"- started_at: `{summary.get('started_at')}`")
    lines.append(f"- platform: `{summary.get('platform')}`")
    lines.append(f"- producers: `{','.join(summary.get('producers', []))}`")
    lines.append(f"- baseline: `{summary.get('baseline')}`")
    lines.append(f"- variants_built: `{summary.get('variants_built')}`")
    lines.append("")

    lines.append("## Sizes")
    lines.append(render_table(frame, baseline_label=baseline_label))
    lines.append("")

    lines.append("## Summary")
    summary_lines = render_summary(groups, labels=labels)
    if not summary_lines:
        lines.append("- (single producer, nothing to compare)")
    for line in summary_lines:
        lines.append(f"- {line}")
    lines.append("")

    lines.append("## Notes")
    lines.append("- Sizes are single-run byte counts of the bundle file; MB = bytes / 1024^2.")
    lines.append(f"- Diffs are relative to {baseline_label} within the same mode/minify/bytecode group.")
    lines.append("")
    return "\n".join(lines) + "\n"
