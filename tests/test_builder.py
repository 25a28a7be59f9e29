"""Tests for variant building, bytecode compilation order, and command planning."""

from pathlib import Path

import pytest

from bundle_bench.bench.builder import BundleBuilder, default_hermesc_path, plan_commands
from bundle_bench.bench.errors import ArtifactMissingError, BuildOrderError, CommandFailedError
from bundle_bench.bench.matrix import build_variant_matrix, source_variant
from bundle_bench.bench.models import BundleVariant
from bundle_bench.bench.runner import build_store


@pytest.fixture
def prepared(settings, toolchain):
    store = build_store(settings)
    store.reset()
    variants = build_variant_matrix(["metro", "repack", "expo"])
    for variant in variants:
        store.ensure(variant.variant_id)
    builder = BundleBuilder.from_settings(settings, store=store, runner=toolchain)
    return builder, variants


class TestBuild:
    def test_build_runs_in_app_root_and_records_completion(self, prepared, toolchain, app_root):
        builder, variants = prepared
        dev = variants[0]
        path = builder.build(dev)
        assert path.is_file()
        assert builder.is_built(dev)
        assert toolchain.calls[0][2] == app_root

    def test_expo_build_passes_env_overrides_and_relocates(self, prepared, toolchain):
        builder, variants = prepared
        expo_prod = next(v for v in variants if v.variant_id == "expo-prod")
        builder.build(expo_prod)
        assert toolchain.calls[-1][3] == {
            "EXPO_UNSTABLE_TREE_SHAKING": "1",
            "EXPO_UNSTABLE_METRO_OPTIMIZE_GRAPH": "1",
        }
        assert builder.store.path_for("expo-prod", "bundle").is_file()

    def test_build_rejects_bytecode_variant(self, prepared):
        builder, variants = prepared
        hbc = next(v for v in variants if v.bytecode_compiled)
        with pytest.raises(ValueError):
            builder.build(hbc)

    def test_success_without_artifact_is_fatal(self, prepared):
        builder, variants = prepared
        builder.runner = lambda command, **kwargs: None
        with pytest.raises(ArtifactMissingError):
            builder.build(variants[0])
        assert not builder.is_built(variants[0])

    def test_failed_command_propagates(self, settings):
        from conftest import FakeToolchain

        store = build_store(settings)
        store.reset()
        store.ensure("metro-dev")
        builder = BundleBuilder.from_settings(settings, store=store, runner=FakeToolchain(fail_on={"metro-dev"}))
        variant = BundleVariant(producer="metro", mode="development", minified=False, bytecode_compiled=False)
        with pytest.raises(CommandFailedError):
            builder.build(variant)
        assert not builder.is_built(variant)


class TestCompile:
    def test_compile_before_source_build_is_rejected(self, prepared, toolchain):
        builder, variants = prepared
        target = next(v for v in variants if v.variant_id == "metro-prod-hbc")
        with pytest.raises(BuildOrderError):
            builder.compile(source_variant(target), target)
        assert toolchain.calls == []

    def test_compile_invokes_hermesc_with_optimize_and_no_warnings(self, prepared, toolchain, app_root):
        builder, variants = prepared
        target = next(v for v in variants if v.variant_id == "repack-prod-min-hbc")
        source = source_variant(target)
        builder.build(source)
        builder.compile(source, target)
        _, argv, cwd, env = toolchain.calls[-1]
        assert argv == [
            str(app_root / "bin" / "hermesc"),
            str(builder.store.path_for("repack-prod-min", "bundle")),
            "-emit-binary",
            "-out",
            str(builder.store.path_for("repack-prod-min-hbc", "bundle")),
            "-O",
            "-w",
        ]
        assert cwd == app_root
        assert env is None
        assert builder.is_built(target)

    def test_compile_rejects_mismatched_source(self, prepared):
        builder, variants = prepared
        target = next(v for v in variants if v.variant_id == "metro-prod-min-hbc")
        wrong_source = next(v for v in variants if v.variant_id == "metro-prod")
        with pytest.raises(ValueError):
            builder.compile(wrong_source, target)

    def test_build_variant_runs_whole_matrix_in_order(self, prepared, toolchain):
        builder, variants = prepared
        for variant in variants:
            builder.build_variant(variant)
        assert toolchain.variant_order() == [v.variant_id for v in variants]
        assert builder.completed == frozenset(v.variant_id for v in variants)


class TestPlanning:
    def test_plan_commands_does_not_execute(self, prepared, toolchain):
        builder, variants = prepared
        planned = plan_commands(builder, variants)
        assert [variant_id for variant_id, _ in planned] == [v.variant_id for v in variants]
        assert toolchain.calls == []
        assert planned[3][1][0].endswith("hermesc")

    @pytest.mark.parametrize(
        "system,expected",
        [
            ("Darwin", Path("osx-bin") / "hermesc"),
            ("Linux", Path("linux64-bin") / "hermesc"),
            ("Windows", Path("win64-bin") / "hermesc.exe"),
        ],
    )
    def test_default_hermesc_path_per_host(self, tmp_path, system, expected):
        path = default_hermesc_path(tmp_path, system=system)
        assert path == tmp_path / "node_modules" / "react-native" / "sdks" / "hermesc" / expected
