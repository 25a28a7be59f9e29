"""Byte-size collection for built variants."""

from __future__ import annotations

import logging
from typing import Iterable

from bundle_bench.bench.builder import BundleBuilder
from bundle_bench.bench.errors import MeasurementError
from bundle_bench.bench.models import BuildOutcome, BundleVariant

LOGGER = logging.getLogger(__name__)


class SizeCollector:
    """Reads bundle sizes, only for variants the builder has completed."""

    def __init__(self, builder: BundleBuilder) -> None:
        self.builder = builder

    def measure(self, variant: BundleVariant) -> BuildOutcome:
        if not self.builder.is_built(variant):
            raise MeasurementError(f"Cannot measure {variant.variant_id}: no successful build recorded")
        bundle_path = self.builder.store.path_for(variant.variant_id, "bundle")
        try:
            size_bytes = bundle_path.stat().st_size
        except OSError as exc:
            raise MeasurementError(f"Cannot stat bundle for {variant.variant_id}: {exc}") from exc
        LOGGER.info("bench.measure variant=%s size_bytes=%s", variant.variant_id, size_bytes)
        return BuildOutcome(variant=variant, size_bytes=size_bytes)

    def measure_all(self, variants: Iterable[BundleVariant]) -> list[BuildOutcome]:
        return [self.measure(variant) for variant in variants]
