"""Variant matrix construction for bundle size benchmarks."""

from __future__ import annotations

from typing import Iterable, Sequence

from bundle_bench.bench.models import BuildMode, BundleVariant, GroupKey, ProducerName

# (mode, minified, bytecode_compiled) per producer, in build order. Bytecode
# forms come after the production bundles they are compiled from.
MATRIX_SHAPE: tuple[tuple[BuildMode, bool, bool], ...] = (
    ("development", False, False),
    ("production", False, False),
    ("production", True, False),
    ("production", False, True),
    ("production", True, True),
)


def build_variant_matrix(producers: Sequence[ProducerName]) -> list[BundleVariant]:
    """Build the full declared matrix, producer by producer."""

    if not producers:
        raise ValueError("At least one producer is required to build the variant matrix")
    if len(set(producers)) != len(producers):
        raise ValueError(f"Producers must be unique: {','.join(producers)}")

    variants: list[BundleVariant] = []
    for producer in producers:
        for mode, minified, bytecode_compiled in MATRIX_SHAPE:
            variants.append(
                BundleVariant(
                    producer=producer,
                    mode=mode,
                    minified=minified,
                    bytecode_compiled=bytecode_compiled,
                )
            )
    validate_matrix(variants)
    return variants


def source_variant(variant: BundleVariant) -> BundleVariant:
    """Return the raw production variant a bytecode variant is compiled from."""

    if not variant.bytecode_compiled:
        raise ValueError(f"{variant.variant_id} is not a bytecode variant")
    return BundleVariant(
        producer=variant.producer,
        mode="production",
        minified=variant.minified,
        bytecode_compiled=False,
    )


def group_key(variant: BundleVariant) -> GroupKey:
    return (variant.mode, variant.minified, variant.bytecode_compiled)


def validate_matrix(variants: Iterable[BundleVariant]) -> None:
    """Check id uniqueness and that every bytecode source is built earlier."""

    seen: set[str] = set()
    for variant in variants:
        if variant.variant_id in seen:
            raise ValueError(f"Duplicate variant id in matrix: {variant.variant_id}")
        if variant.bytecode_compiled:
            source_id = source_variant(variant).variant_id
            if source_id not in seen:
                raise ValueError(f"{variant.variant_id} is ordered before its source variant {source_id}")
        seen.add(variant.variant_id)
