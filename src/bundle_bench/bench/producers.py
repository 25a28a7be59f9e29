"""Producer adapters that turn a bundle variant into an external build invocation."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol

from bundle_bench.bench.errors import ArtifactMissingError
from bundle_bench.bench.models import BundleVariant, ProducerName
from bundle_bench.bench.workspace import ArtifactStore
from bundle_bench.config import AppSettings, BundleProducerConfig, ExpoProducerConfig
from bundle_bench.utils.paths import move_tree_contents, remove_tree

LOGGER = logging.getLogger(__name__)

EXPO_BUNDLE_SUFFIXES = (".js", ".hbc")


def _flag(value: bool) -> str:
    return "true" if value else "false"


class BundleProducerAdapter(Protocol):
    """Producer-specific command shape and output handling."""

    producer: ProducerName
    label: str

    def build_command(self, variant: BundleVariant, store: ArtifactStore) -> list[str]: ...

    def env_overrides(self) -> dict[str, str]: ...

    def locate_output(self, variant: BundleVariant, store: ArtifactStore) -> Path: ...

    def finalize(self, variant: BundleVariant, store: ArtifactStore) -> Path: ...


class ReactNativeBundleAdapter:
    """``react-native bundle``-shaped producers (Metro, Re.Pack)."""

    def __init__(
        self,
        producer: ProducerName,
        config: BundleProducerConfig,
        *,
        npx_command: str,
        platform: str,
        entry_file: str,
    ) -> None:
        self.producer = producer
        self.label = config.label
        self.config = config
        self.npx_command = npx_command
        self.platform = platform
        self.entry_file = entry_file

    def build_command(self, variant: BundleVariant, store: ArtifactStore) -> list[str]:
        command = [
            self.npx_command,
            "react-native",
            self.config.subcommand,
            "--platform",
            self.platform,
            "--dev",
            _flag(variant.is_dev),
            "--entry-file",
            self.entry_file,
            "--bundle-output",
            str(store.path_for(variant.variant_id, "bundle")),
            "--assets-dest",
            str(store.path_for(variant.variant_id, "assets")),
            "--minify",
            _flag(variant.minified),
        ]
        if self.config.config_file:
            command.extend(["--config", self.config.config_file])
        if self.config.reset_cache:
            command.append("--reset-cache")
        return command

    def env_overrides(self) -> dict[str, str]:
        return {}

    def locate_output(self, variant: BundleVariant, store: ArtifactStore) -> Path:
        return store.path_for(variant.variant_id, "bundle")

    def finalize(self, variant: BundleVariant, store: ArtifactStore) -> Path:
        return self.locate_output(variant, store)


class ExpoExportAdapter:
    """``expo export`` producer; relocates the framework-placed bundle afterwards."""

    producer: ProducerName = "expo"

    def __init__(
        self,
        config: ExpoProducerConfig,
        *,
        npx_command: str,
        platform: str,
        app_root: Path,
    ) -> None:
        self.label = config.label
        self.config = config
        self.npx_command = npx_command
        self.platform = platform
        self.app_root = app_root

    def export_dir(self, variant: BundleVariant, store: ArtifactStore) -> Path:
        return store.variant_dir(variant.variant_id) / self.config.export_dir_name

    def build_command(self, variant: BundleVariant, store: ArtifactStore) -> list[str]:
        command = [self.npx_command, "expo", "export", "--platform", self.platform]
        if variant.is_dev:
            command.append("--dev")
        if not variant.minified:
            command.append("--no-minify")
        # Bytecode variants are produced by hermesc from this raw output.
        command.append("--no-bytecode")
        command.extend(["--output-dir", str(self.export_dir(variant, store))])
        return command

    def env_overrides(self) -> dict[str, str]:
        return dict(self.config.export_env)

    def locate_output(self, variant: BundleVariant, store: ArtifactStore) -> Path:
        """Find the single bundle expo wrote under ``_expo/static/js/<platform>/``."""

        js_dir = self.export_dir(variant, store) / "_expo" / "static" / "js" / self.platform
        candidates = (
            sorted(p for p in js_dir.iterdir() if p.is_file() and p.suffix in EXPO_BUNDLE_SUFFIXES)
            if js_dir.is_dir()
            else []
        )
        if not candidates:
            raise ArtifactMissingError(f"expo export produced no bundle for {variant.variant_id} under {js_dir}")
        if len(candidates) > 1:
            names = ",".join(p.name for p in candidates)
            raise ArtifactMissingError(
                f"expo export produced {len(candidates)} bundles for {variant.variant_id} under {js_dir}: {names}"
            )
        return candidates[0]

    def finalize(self, variant: BundleVariant, store: ArtifactStore) -> Path:
        produced = self.locate_output(variant, store)
        target = store.path_for(variant.variant_id, "bundle")
        shutil.move(str(produced), str(target))

        export_dir = self.export_dir(variant, store)
        moved_assets = move_tree_contents(export_dir / "assets", store.path_for(variant.variant_id, "assets"))
        remove_tree(export_dir)
        for stray in self.config.stray_dirs:
            if remove_tree(self.app_root / stray):
                LOGGER.info("expo.cleanup removed=%s", self.app_root / stray)
        LOGGER.info(
            "expo.relocated variant=%s from=%s to=%s assets_moved=%s",
            variant.variant_id,
            produced.name,
            target,
            moved_assets,
        )
        return target


def build_adapters(settings: AppSettings) -> dict[ProducerName, BundleProducerAdapter]:
    """Instantiate one adapter per configured producer key."""

    build_cfg = settings.build
    adapters: dict[ProducerName, BundleProducerAdapter] = {
        "metro": ReactNativeBundleAdapter(
            "metro",
            settings.producers.metro,
            npx_command=build_cfg.npx_command,
            platform=build_cfg.platform,
            entry_file=build_cfg.entry_file,
        ),
        "repack": ReactNativeBundleAdapter(
            "repack",
            settings.producers.repack,
            npx_command=build_cfg.npx_command,
            platform=build_cfg.platform,
            entry_file=build_cfg.entry_file,
        ),
        "expo": ExpoExportAdapter(
            settings.producers.expo,
            npx_command=build_cfg.npx_command,
            platform=build_cfg.platform,
            app_root=settings.paths.app_root,
        ),
    }
    return adapters
