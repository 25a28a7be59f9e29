"""Typer CLI entrypoint for bundle_bench."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import cast

import typer
import yaml

from bundle_bench.bench.builder import BundleBuilder, plan_commands
from bundle_bench.bench.errors import BenchmarkError
from bundle_bench.bench.matrix import build_variant_matrix
from bundle_bench.bench.models import ProducerName
from bundle_bench.bench.runner import build_store, resolve_producers, run_bundle_benchmark
from bundle_bench.config import AppSettings, load_settings
from bundle_bench.logging_utils import configure_logging

app = typer.Typer(
    add_completion=False,
    help="Bundle size benchmark across Metro, Re.Pack, and Expo.",
    no_args_is_help=True,
)

ALLOWED_PRODUCERS = {"metro", "repack", "expo"}


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        logger = configure_logging(
            settings.paths.logs_root / settings.logging.file_name,
            level=settings.logging.level,
        )
    else:
        logger = logging.getLogger("bundle_bench")
    return settings, logger


def _normalize_producers(values: list[str] | None) -> list[ProducerName] | None:
    if not values:
        return None
    normalized: list[ProducerName] = []
    for value in values:
        for part in value.split(","):
            candidate = part.strip().lower()
            if candidate == "":
                continue
            if candidate not in ALLOWED_PRODUCERS:
                allowed_rendered = ",".join(sorted(ALLOWED_PRODUCERS))
                raise typer.BadParameter(f"producer must be one of: {allowed_rendered}")
            normalized.append(cast(ProducerName, candidate))
    return normalized or None


def _normalize_baseline(value: str | None) -> ProducerName | None:
    if value is None:
        return None
    candidate = value.strip().lower()
    if candidate not in ALLOWED_PRODUCERS:
        allowed_rendered = ",".join(sorted(ALLOWED_PRODUCERS))
        raise typer.BadParameter(f"baseline must be one of: {allowed_rendered}")
    return cast(ProducerName, candidate)


def _resolve_selection(
    settings: AppSettings,
    producer: list[str] | None,
    baseline: str | None,
) -> tuple[list[ProducerName], ProducerName]:
    try:
        return resolve_producers(settings, _normalize_producers(producer), _normalize_baseline(baseline))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


ConfigFileOption = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)
ProducerOption = typer.Option(
    None,
    "--producer",
    "-p",
    help="Producer to include (repeatable or comma-separated): metro, repack, expo.",
)
BaselineOption = typer.Option(
    None,
    "--baseline",
    help="Producer all diffs are computed against.",
)


@app.command("show-config")
def show_config(config_file: Path | None = ConfigFileOption) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("list-variants")
def list_variants(
    producer: list[str] | None = ProducerOption,
    baseline: str | None = BaselineOption,
    config_file: Path | None = ConfigFileOption,
) -> None:
    """List every variant id of the build matrix in build order."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    producers, effective_baseline = _resolve_selection(settings, producer, baseline)
    variants = build_variant_matrix(producers)
    typer.echo(f"baseline: {effective_baseline}")
    typer.echo(f"variant_count: {len(variants)}")
    for variant in variants:
        typer.echo(f"{variant.variant_id}\t{settings.producers.label_for(variant.producer)} {variant.kind_label}")


@app.command("plan")
def plan(
    producer: list[str] | None = ProducerOption,
    baseline: str | None = BaselineOption,
    config_file: Path | None = ConfigFileOption,
) -> None:
    """Print the external command for each variant without running anything."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    producers, _ = _resolve_selection(settings, producer, baseline)
    builder = BundleBuilder.from_settings(settings, store=build_store(settings))
    typer.echo(f"cwd: {settings.paths.app_root}")
    for variant_id, command in plan_commands(builder, build_variant_matrix(producers)):
        typer.echo(f"{variant_id}: {shlex.join(command)}")


@app.command("run")
def run(
    producer: list[str] | None = ProducerOption,
    baseline: str | None = BaselineOption,
    config_file: Path | None = ConfigFileOption,
) -> None:
    """Reset the workspace, build every variant, and print the size comparison."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    producers, effective_baseline = _resolve_selection(settings, producer, baseline)
    try:
        result = run_bundle_benchmark(
            settings,
            producers=producers,
            baseline=effective_baseline,
            logger=logger,
        )
    except BenchmarkError as exc:
        logger.error("bench.failed error_type=%s error=%s", type(exc).__name__, exc)
        typer.echo(f"Benchmark failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(result.report_text)
    typer.echo(f"run_id: {result.run_id}")
    typer.echo(f"summary_json: {result.summary_path}")
    typer.echo(f"sizes_csv: {result.sizes_path}")
    typer.echo(f"report_md: {result.report_path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
