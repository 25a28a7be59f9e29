"""Typed models for bundle variants, build outcomes, and comparison results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from bundle_bench.config import ProducerKey

ProducerName = ProducerKey
BuildMode = Literal["development", "production"]
VariantKind = Literal["dev", "prod", "prod_min", "prod_hbc", "prod_min_hbc"]
ArtifactKind = Literal["bundle", "assets"]

VARIANT_KIND_ORDER: tuple[VariantKind, ...] = ("dev", "prod", "prod_min", "prod_hbc", "prod_min_hbc")

VARIANT_KIND_LABELS: dict[VariantKind, str] = {
    "dev": "Development",
    "prod": "Production",
    "prod_min": "Production Minified",
    "prod_hbc": "Production (HBC)",
    "prod_min_hbc": "Production Minified (HBC)",
}

VARIANT_KIND_SUFFIXES: dict[VariantKind, str] = {
    "dev": "dev",
    "prod": "prod",
    "prod_min": "prod-min",
    "prod_hbc": "prod-hbc",
    "prod_min_hbc": "prod-min-hbc",
}


def variant_kind_for(mode: BuildMode, minified: bool, bytecode_compiled: bool) -> VariantKind:
    """Resolve the variant kind for one point of the build matrix."""

    if mode == "development":
        if minified or bytecode_compiled:
            raise ValueError("development variants are never minified or bytecode compiled")
        return "dev"
    if bytecode_compiled:
        return "prod_min_hbc" if minified else "prod_hbc"
    return "prod_min" if minified else "prod"


@dataclass(frozen=True, slots=True)
class BundleVariant:
    """One producer/mode/minify/bytecode combination of the build matrix."""

    producer: ProducerName
    mode: BuildMode
    minified: bool
    bytecode_compiled: bool
    kind: VariantKind = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", variant_kind_for(self.mode, self.minified, self.bytecode_compiled))

    @property
    def variant_id(self) -> str:
        return f"{self.producer}-{VARIANT_KIND_SUFFIXES[self.kind]}"

    @property
    def kind_label(self) -> str:
        return VARIANT_KIND_LABELS[self.kind]

    @property
    def is_dev(self) -> bool:
        return self.mode == "development"


GroupKey = tuple[BuildMode, bool, bool]


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    """Measured size of one successfully built variant."""

    variant: BundleVariant
    size_bytes: int

    @property
    def variant_id(self) -> str:
        return self.variant.variant_id


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    """One variant's size relative to the baseline of its group."""

    outcome: BuildOutcome
    diff_percent: float
    diff_label: str
    is_baseline: bool


@dataclass(frozen=True, slots=True)
class ComparisonGroup:
    """Variants sharing mode/minify/bytecode across producers."""

    key: GroupKey
    kind: VariantKind
    baseline: ComparisonRow
    challengers: list[ComparisonRow]

    @property
    def rows(self) -> list[ComparisonRow]:
        return [self.baseline, *self.challengers]


@dataclass(frozen=True, slots=True)
class BenchRunResult:
    """Outcomes, comparison groups, and report artifacts of one benchmark run."""

    run_id: str
    workspace_dir: Path
    baseline: ProducerName
    outcomes: list[BuildOutcome]
    groups: list[ComparisonGroup]
    report_text: str
    summary_path: Path
    sizes_path: Path
    report_path: Path
