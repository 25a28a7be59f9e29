"""Sequential bundle building and bytecode compilation per variant."""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Sequence

from bundle_bench.bench.errors import ArtifactMissingError, BuildOrderError
from bundle_bench.bench.matrix import source_variant
from bundle_bench.bench.models import BundleVariant, ProducerName
from bundle_bench.bench.process import CommandRunner, run_command
from bundle_bench.bench.producers import BundleProducerAdapter, build_adapters
from bundle_bench.bench.workspace import ArtifactStore
from bundle_bench.config import AppSettings

LOGGER = logging.getLogger(__name__)

HERMESC_OS_DIRS = {
    "Darwin": "osx-bin",
    "Linux": "linux64-bin",
    "Windows": "win64-bin",
}


def default_hermesc_path(app_root: Path, system: str | None = None) -> Path:
    """Location of the hermesc binary shipped inside react-native for this host."""

    host = system or platform.system()
    os_dir = HERMESC_OS_DIRS.get(host, "osx-bin")
    binary = "hermesc.exe" if host == "Windows" else "hermesc"
    return app_root / "node_modules" / "react-native" / "sdks" / "hermesc" / os_dir / binary


class BundleBuilder:
    """Runs each variant's producer command or hermesc compile, in caller order."""

    def __init__(
        self,
        *,
        store: ArtifactStore,
        adapters: dict[ProducerName, BundleProducerAdapter],
        app_root: Path,
        hermesc_path: Path,
        runner: CommandRunner = run_command,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.adapters = adapters
        self.app_root = app_root
        self.hermesc_path = hermesc_path
        self.runner = runner
        self.logger = logger or LOGGER
        self._completed: set[str] = set()

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        store: ArtifactStore,
        runner: CommandRunner = run_command,
        logger: logging.Logger | None = None,
    ) -> "BundleBuilder":
        hermesc = settings.build.hermesc_path or default_hermesc_path(settings.paths.app_root)
        if not hermesc.is_absolute():
            hermesc = settings.paths.app_root / hermesc
        return cls(
            store=store,
            adapters=build_adapters(settings),
            app_root=settings.paths.app_root,
            hermesc_path=hermesc,
            runner=runner,
            logger=logger,
        )

    @property
    def completed(self) -> frozenset[str]:
        return frozenset(self._completed)

    def is_built(self, variant: BundleVariant) -> bool:
        return variant.variant_id in self._completed

    def adapter_for(self, variant: BundleVariant) -> BundleProducerAdapter:
        try:
            return self.adapters[variant.producer]
        except KeyError as exc:
            raise ValueError(f"No producer adapter registered for {variant.producer}") from exc

    def compile_command(self, source: BundleVariant, target: BundleVariant) -> list[str]:
        return [
            str(self.hermesc_path),
            str(self.store.path_for(source.variant_id, "bundle")),
            "-emit-binary",
            "-out",
            str(self.store.path_for(target.variant_id, "bundle")),
            "-O",
            "-w",
        ]

    def command_for(self, variant: BundleVariant) -> list[str]:
        if variant.bytecode_compiled:
            return self.compile_command(source_variant(variant), variant)
        return self.adapter_for(variant).build_command(variant, self.store)

    def _require_bundle(self, variant: BundleVariant) -> Path:
        bundle_path = self.store.path_for(variant.variant_id, "bundle")
        if not bundle_path.is_file():
            raise ArtifactMissingError(
                f"{variant.variant_id} reported success but {bundle_path} does not exist"
            )
        return bundle_path

    def build(self, variant: BundleVariant) -> Path:
        """Build a raw (non-bytecode) variant from source."""

        if variant.bytecode_compiled:
            raise ValueError(f"{variant.variant_id} is a bytecode variant; use compile()")
        adapter = self.adapter_for(variant)
        self.logger.info("bench.build.start variant=%s producer=%s", variant.variant_id, adapter.label)
        self.runner(
            adapter.build_command(variant, self.store),
            cwd=self.app_root,
            env_overrides=adapter.env_overrides() or None,
            logger=self.logger,
        )
        adapter.finalize(variant, self.store)
        bundle_path = self._require_bundle(variant)
        self._completed.add(variant.variant_id)
        self.logger.info("bench.build.done variant=%s bundle=%s", variant.variant_id, bundle_path)
        return bundle_path

    def compile(self, source: BundleVariant, target: BundleVariant) -> Path:
        """Compile the source variant's bundle into the target's bytecode bundle."""

        if not target.bytecode_compiled or source_variant(target) != source:
            raise ValueError(f"{target.variant_id} is not the bytecode form of {source.variant_id}")
        if not self.is_built(source):
            raise BuildOrderError(
                f"Cannot compile {target.variant_id}: source variant {source.variant_id} has not been built"
            )
        self.logger.info("bench.compile.start variant=%s source=%s", target.variant_id, source.variant_id)
        self.runner(self.compile_command(source, target), cwd=self.app_root, env_overrides=None, logger=self.logger)
        bundle_path = self._require_bundle(target)
        self._completed.add(target.variant_id)
        self.logger.info("bench.compile.done variant=%s bundle=%s", target.variant_id, bundle_path)
        return bundle_path

    def build_variant(self, variant: BundleVariant) -> Path:
        if variant.bytecode_compiled:
            return self.compile(source_variant(variant), variant)
        return self.build(variant)


def plan_commands(builder: BundleBuilder, variants: Sequence[BundleVariant]) -> list[tuple[str, list[str]]]:
    """Commands each variant would run, without executing anything."""

    return [(variant.variant_id, builder.command_for(variant)) for variant in variants]
