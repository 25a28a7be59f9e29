"""Orchestration for one full bundle size benchmark run."""

from __future__ import annotations

import logging
import time
from typing import Any, Sequence
from uuid import uuid4

from bundle_bench.bench.builder import BundleBuilder
from bundle_bench.bench.compare import build_comparison_groups, comparison_frame
from bundle_bench.bench.matrix import build_variant_matrix
from bundle_bench.bench.models import BenchRunResult, BuildOutcome, ComparisonGroup, ProducerName
from bundle_bench.bench.process import CommandRunner, run_command
from bundle_bench.bench.reports import render_report
from bundle_bench.bench.sizes import SizeCollector
from bundle_bench.bench.workspace import ArtifactStore
from bundle_bench.bench.writer import (
    write_csv_atomically,
    write_json_atomically,
    write_markdown_atomically,
)
from bundle_bench.config import AppSettings
from bundle_bench.utils.time_utils import now_utc

LOGGER = logging.getLogger(__name__)


def resolve_producers(
    settings: AppSettings,
    producers: Sequence[ProducerName] | None,
    baseline: ProducerName | None,
) -> tuple[list[ProducerName], ProducerName]:
    """Apply CLI overrides to configured producers/baseline; baseline goes first."""

    chosen = list(producers) if producers else list(settings.build.producers)
    if len(set(chosen)) != len(chosen):
        raise ValueError(f"Producers must be unique: {','.join(chosen)}")
    effective_baseline = baseline or settings.build.baseline
    if effective_baseline not in chosen:
        if producers and baseline is None:
            effective_baseline = chosen[0]
        else:
            raise ValueError(f"Baseline {effective_baseline} is not one of the selected producers: {','.join(chosen)}")
    ordered = [effective_baseline, *[p for p in chosen if p != effective_baseline]]
    return ordered, effective_baseline


def build_store(settings: AppSettings) -> ArtifactStore:
    return ArtifactStore(
        settings.paths.workspace_root,
        bundle_file_name=settings.build.bundle_file_name,
        assets_dir_name=settings.build.assets_dir_name,
        protected_paths=(settings.paths.app_root,),
    )


def _summary_payload(
    *,
    run_id: str,
    started_at: str,
    elapsed_sec: float,
    settings: AppSettings,
    producers: list[ProducerName],
    baseline: ProducerName,
    outcomes: list[BuildOutcome],
    groups: list[ComparisonGroup],
) -> dict[str, Any]:
    return {
        "run_id": run_id,
        "started_at": started_at,
        "elapsed_sec": round(elapsed_sec, 3),
        "platform": settings.build.platform,
        "entry_file": settings.build.entry_file,
        "app_root": str(settings.paths.app_root),
        "workspace_root": str(settings.paths.workspace_root),
        "producers": producers,
        "baseline": baseline,
        "variants_built": len(outcomes),
        "sizes_bytes": {outcome.variant_id: outcome.size_bytes for outcome in outcomes},
        "groups": [
            {
                "variant_kind": group.kind,
                "mode": group.key[0],
                "minified": group.key[1],
                "bytecode_compiled": group.key[2],
                "baseline": group.baseline.outcome.variant_id,
                "diffs": {row.outcome.variant_id: row.diff_label for row in group.rows},
            }
            for group in groups
        ],
    }


def run_bundle_benchmark(
    settings: AppSettings,
    *,
    producers: Sequence[ProducerName] | None = None,
    baseline: ProducerName | None = None,
    runner: CommandRunner = run_command,
    logger: logging.Logger | None = None,
) -> BenchRunResult:
    """Reset the workspace, build every variant in order, measure, compare, and report.

    Any failure raises a ``BenchmarkError`` subclass straight to the caller;
    nothing is measured or reported unless every variant built.
    """

    effective_logger = logger or LOGGER
    ordered_producers, effective_baseline = resolve_producers(settings, producers, baseline)
    labels = {p: settings.producers.label_for(p) for p in ordered_producers}

    run_id = f"bench-{uuid4().hex[:12]}"
    started_at = now_utc().isoformat()
    started = time.perf_counter()
    effective_logger.info(
        "bench.start run_id=%s producers=%s baseline=%s app_root=%s",
        run_id,
        ",".join(ordered_producers),
        effective_baseline,
        settings.paths.app_root,
    )

    store = build_store(settings)
    store.reset()

    variants = build_variant_matrix(ordered_producers)
    for variant in variants:
        store.ensure(variant.variant_id)

    builder = BundleBuilder.from_settings(settings, store=store, runner=runner, logger=effective_logger)
    for idx, variant in enumerate(variants, start=1):
        effective_logger.info("bench.progress %s/%s variant=%s", idx, len(variants), variant.variant_id)
        builder.build_variant(variant)

    outcomes = SizeCollector(builder).measure_all(variants)
    groups = build_comparison_groups(outcomes, baseline=effective_baseline, producers=ordered_producers)
    frame = comparison_frame(groups, labels=labels)

    summary = _summary_payload(
        run_id=run_id,
        started_at=started_at,
        elapsed_sec=time.perf_counter() - started,
        settings=settings,
        producers=ordered_producers,
        baseline=effective_baseline,
        outcomes=outcomes,
        groups=groups,
    )
    report_text = render_report(summary=summary, frame=frame, groups=groups, labels=labels)

    report_dir = store.report_dir()
    summary_path = write_json_atomically(summary, report_dir / "summary.json")
    sizes_path = write_csv_atomically(frame, report_dir / "sizes.csv")
    report_path = write_markdown_atomically(report_text, report_dir / "report.md")

    effective_logger.info(
        "bench.done run_id=%s variants=%s groups=%s report=%s",
        run_id,
        len(outcomes),
        len(groups),
        report_path,
    )
    return BenchRunResult(
        run_id=run_id,
        workspace_dir=store.root,
        baseline=effective_baseline,
        outcomes=outcomes,
        groups=groups,
        report_text=report_text,
        summary_path=summary_path,
        sizes_path=sizes_path,
        report_path=report_path,
    )
