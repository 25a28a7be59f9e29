"""Per-run artifact workspace with one directory per variant id."""

from __future__ import annotations

import logging
from pathlib import Path

from bundle_bench.bench.errors import ArtifactStoreError
from bundle_bench.bench.models import ArtifactKind
from bundle_bench.utils.paths import ensure_directories, remove_tree

LOGGER = logging.getLogger(__name__)

REPORT_DIR_NAME = "report"


class ArtifactStore:
    """Owns ``<workspace>/<variant_id>/{index.bundle,assets/}`` for a single run."""

    def __init__(
        self,
        root: Path,
        *,
        bundle_file_name: str = "index.bundle",
        assets_dir_name: str = "assets",
        protected_paths: tuple[Path, ...] = (),
    ) -> None:
        self.root = root
        self.bundle_file_name = bundle_file_name
        self.assets_dir_name = assets_dir_name
        self._protected = tuple(p.resolve() for p in protected_paths)

    def _check_reset_target(self) -> None:
        resolved = self.root.resolve()
        if resolved == Path(resolved.anchor):
            raise ArtifactStoreError(f"Refusing to reset filesystem root as workspace: {resolved}")
        for protected in self._protected:
            if resolved == protected or resolved in protected.parents:
                raise ArtifactStoreError(f"Refusing to reset workspace {resolved}; it contains {protected}")

    def reset(self) -> Path:
        """Delete and recreate the workspace root."""

        self._check_reset_target()
        try:
            removed = remove_tree(self.root)
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactStoreError(f"Failed to reset workspace {self.root}: {exc}") from exc
        LOGGER.info("workspace.reset root=%s removed_previous=%s", self.root, removed)
        return self.root

    def variant_dir(self, variant_id: str) -> Path:
        return self.root / variant_id

    def ensure(self, variant_id: str) -> Path:
        """Create the variant directory and its assets subdirectory."""

        variant_dir = self.variant_dir(variant_id)
        try:
            ensure_directories([variant_dir, variant_dir / self.assets_dir_name])
        except OSError as exc:
            raise ArtifactStoreError(f"Failed to create workspace for {variant_id}: {exc}") from exc
        return variant_dir

    def path_for(self, variant_id: str, kind: ArtifactKind) -> Path:
        """Deterministic artifact path; never creates anything."""

        if kind == "bundle":
            return self.variant_dir(variant_id) / self.bundle_file_name
        if kind == "assets":
            return self.variant_dir(variant_id) / self.assets_dir_name
        raise ValueError(f"Unsupported artifact kind: {kind}")

    def report_dir(self) -> Path:
        return self.root / REPORT_DIR_NAME
