"""Configuration models and loading logic."""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "BUNDLE_BENCH_SETTINGS_FILE"

ProducerKey = Literal["metro", "repack", "expo"]


class ProjectConfig(BaseModel):
    """Project metadata settings."""

    name: str = "bundle_bench"
    env: str = "dev"


class PathsConfig(BaseModel):
    """Filesystem paths for the benchmarked app, the variant workspace, and logs."""

    app_root: Path = Path("./apps/app")
    workspace_root: Path = Path("./artifacts")
    logs_root: Path = Path("./logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        updates: dict[str, Path] = {}
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            updates[field_name] = value if value.is_absolute() else (project_root / value).resolve()
        return self.model_copy(update=updates)


class LoggingConfig(BaseModel):
    """Log level and log file name under paths.logs_root."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file_name: str = "bench.log"


class BuildConfig(BaseModel):
    """Fixed inputs shared by every bundle invocation."""

    platform: Literal["ios", "android"] = "ios"
    entry_file: str = "index.js"
    bundle_file_name: str = "index.bundle"
    assets_dir_name: str = "assets"
    producers: list[ProducerKey] = Field(default_factory=lambda: ["metro", "repack", "expo"], min_length=1)
    baseline: ProducerKey = "metro"
    npx_command: str = "npx"
    hermesc_path: Path | None = None

    @model_validator(mode="after")
    def _check_producers(self) -> "BuildConfig":
        if len(set(self.producers)) != len(self.producers):
            raise ValueError("build.producers must not contain duplicates")
        if self.baseline not in self.producers:
            raise ValueError(f"build.baseline={self.baseline} is not one of build.producers")
        return self


class BundleProducerConfig(BaseModel):
    """Command shape for a producer driven through the react-native CLI."""

    label: str
    subcommand: str = "bundle"
    config_file: str | None = None
    reset_cache: bool = False


class ExpoProducerConfig(BaseModel):
    """Command shape and cleanup rules for the framework export producer."""

    label: str = "Expo"
    export_dir_name: str = "export"
    export_env: dict[str, str] = Field(
        default_factory=lambda: {
            "EXPO_UNSTABLE_TREE_SHAKING": "1",
            "EXPO_UNSTABLE_METRO_OPTIMIZE_GRAPH": "1",
        }
    )
    stray_dirs: list[str] = Field(default_factory=lambda: ["dist"])


class ProducersConfig(BaseModel):
    """Per-producer invocation settings."""

    metro: BundleProducerConfig = Field(
        default_factory=lambda: BundleProducerConfig(label="Metro", subcommand="bundle", reset_cache=True)
    )
    repack: BundleProducerConfig = Field(
        default_factory=lambda: BundleProducerConfig(label="Re.Pack", subcommand="webpack-bundle")
    )
    expo: ExpoProducerConfig = Field(default_factory=ExpoProducerConfig)

    def label_for(self, producer: ProducerKey) -> str:
        """Human-readable producer name used in reports."""

        return getattr(self, producer).label


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    producers: ProducersConfig = Field(default_factory=ProducersConfig)

    model_config = SettingsConfigDict(
        env_prefix="BUNDLE_BENCH_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "configs/settings.yaml").exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides."""

    settings_file = resolve_settings_file(config_file)
    project_root = settings_file.parent.parent.resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_file_override = None
    resolved_paths = settings.paths.resolved(project_root=project_root)
    return settings.model_copy(update={"paths": resolved_paths})
