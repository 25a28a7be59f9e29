"""Shared fixtures: isolated settings and a fake bundler toolchain."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping, Sequence

import pytest

from bundle_bench.bench.errors import CommandFailedError
from bundle_bench.config import SETTINGS_FILE_ENV, AppSettings, BuildConfig, PathsConfig


def _option_value(argv: list[str], flag: str) -> str:
    return argv[argv.index(flag) + 1]


class FakeToolchain:
    """Stands in for npx/hermesc: writes bundles of known sizes where each tool would."""

    def __init__(self, sizes: Mapping[str, int] | None = None, fail_on: set[str] | None = None):
        self.sizes = dict(sizes or {})
        self.fail_on = set(fail_on or ())
        self.calls: list[tuple[str, list[str], Path, dict[str, str] | None]] = []

    def size_for(self, variant_id: str) -> int:
        return self.sizes.get(variant_id, 1000 + 10 * len(self.calls))

    def __call__(
        self,
        command: Sequence[str],
        *,
        cwd: Path,
        env_overrides: Mapping[str, str] | None = None,
        logger=None,
    ) -> None:
        argv = [str(part) for part in command]
        if argv[0].endswith("hermesc"):
            target = Path(_option_value(argv, "-out"))
        elif argv[1] == "expo":
            target = Path(_option_value(argv, "--output-dir"))
        else:
            target = Path(_option_value(argv, "--bundle-output"))
        variant_id = target.parent.name
        self.calls.append((variant_id, argv, cwd, dict(env_overrides) if env_overrides else None))

        if variant_id in self.fail_on:
            raise CommandFailedError(argv, cwd=cwd, returncode=1)

        size = self.size_for(variant_id)
        if argv[0].endswith("hermesc"):
            source = Path(argv[1])
            assert source.is_file(), f"hermesc input missing: {source}"
            target.write_bytes(b"\xc6" * size)
        elif argv[1] == "expo":
            js_dir = target / "_expo" / "static" / "js" / _option_value(argv, "--platform")
            js_dir.mkdir(parents=True, exist_ok=True)
            (js_dir / "index-0f3a9c.js").write_bytes(b"e" * size)
            (target / "assets").mkdir(parents=True, exist_ok=True)
            (target / "assets" / "logo.png").write_bytes(b"png")
            (target / "metadata.json").write_text("{}", encoding="utf-8")
            (cwd / "dist").mkdir(parents=True, exist_ok=True)
        else:
            target.write_bytes(b"b" * size)
            assets = Path(_option_value(argv, "--assets-dest"))
            (assets / "logo.png").write_bytes(b"png")

    def variant_order(self) -> list[str]:
        return [variant_id for variant_id, *_ in self.calls]


@pytest.fixture(autouse=True)
def isolated_settings_file(tmp_path, monkeypatch):
    """Keep the repository's configs/settings.yaml and env out of unit tests."""

    monkeypatch.setenv(SETTINGS_FILE_ENV, str(tmp_path / "no-settings.yaml"))
    for key in ("BUNDLE_BENCH_BUILD__PRODUCERS", "BUNDLE_BENCH_BUILD__BASELINE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def app_root(tmp_path) -> Path:
    root = tmp_path / "app"
    root.mkdir()
    (root / "index.js").write_text("export default {};\n", encoding="utf-8")
    return root


@pytest.fixture
def make_settings(tmp_path, app_root) -> Callable[..., AppSettings]:
    def factory(producers: list[str] | None = None, baseline: str = "metro") -> AppSettings:
        return AppSettings(
            paths=PathsConfig(
                app_root=app_root,
                workspace_root=tmp_path / "artifacts",
                logs_root=tmp_path / "logs",
            ),
            build=BuildConfig(
                producers=producers or ["metro", "repack", "expo"],
                baseline=baseline,
                hermesc_path=app_root / "bin" / "hermesc",
            ),
        )

    return factory


@pytest.fixture
def settings(make_settings) -> AppSettings:
    return make_settings()


@pytest.fixture
def toolchain() -> FakeToolchain:
    return FakeToolchain()
