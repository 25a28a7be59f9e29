"""Tests for settings loading and validation."""

import pytest
import yaml
from pydantic import ValidationError

from bundle_bench.config import AppSettings, BuildConfig, load_settings


def test_defaults_cover_three_producers_with_metro_baseline():
    settings = AppSettings()
    assert settings.build.producers == ["metro", "repack", "expo"]
    assert settings.build.baseline == "metro"
    assert settings.producers.label_for("repack") == "Re.Pack"
    assert settings.producers.metro.reset_cache is True
    assert settings.producers.repack.reset_cache is False


def test_baseline_must_be_a_selected_producer():
    with pytest.raises(ValidationError):
        BuildConfig(producers=["repack", "expo"], baseline="metro")


def test_duplicate_producers_rejected():
    with pytest.raises(ValidationError):
        BuildConfig(producers=["metro", "metro"])


def test_load_settings_resolves_paths_against_project_root(tmp_path):
    (tmp_path / "configs").mkdir()
    settings_file = tmp_path / "configs" / "settings.yaml"
    settings_file.write_text(
        yaml.safe_dump({"paths": {"app_root": "./apps/demo"}, "build": {"platform": "android"}}),
        encoding="utf-8",
    )
    settings = load_settings(settings_file)
    assert settings.paths.app_root == (tmp_path / "apps" / "demo").resolve()
    assert settings.paths.workspace_root == (tmp_path / "artifacts").resolve()
    assert settings.build.platform == "android"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    (tmp_path / "configs").mkdir()
    settings_file = tmp_path / "configs" / "settings.yaml"
    settings_file.write_text(yaml.safe_dump({"build": {"entry_file": "index.js"}}), encoding="utf-8")
    monkeypatch.setenv("BUNDLE_BENCH_BUILD__ENTRY_FILE", "index.ts")
    settings = load_settings(settings_file)
    assert settings.build.entry_file == "index.ts"
