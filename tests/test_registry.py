"""Tests for the step registry and option presets."""

import pytest

from style_replacer.steps.marker_block import MarkerBlockTransformer
from style_replacer.steps.registry import DEFINITIONS_DIR, StepRegistry


@pytest.fixture
def bundled():
    return StepRegistry(definitions_dir=DEFINITIONS_DIR)


class TestSteps:
    def test_builtin_step(self, bundled):
        assert bundled.list_keys() == ["smart_style_replacer"]
        assert bundled.count() == 1
        assert isinstance(bundled.get_step("smart_style_replacer"), MarkerBlockTransformer)

    def test_unknown_step(self, bundled):
        assert bundled.get_step("nope") is None
        assert bundled.get_description("nope") is None

    def test_descriptions_keyed_by_step(self, bundled):
        descriptions = bundled.list_descriptions()
        assert descriptions["smart_style_replacer"].name == "Smart Style Replacer"


class TestBundledPresets:
    def test_loads_all(self, bundled):
        assert bundled.list_preset_keys() == ["centered", "left_aligned", "right_aligned"]

    def test_right_aligned_values(self, bundled):
        preset = bundled.get_preset("right_aligned")
        assert preset.step_key == "smart_style_replacer"
        assert preset.option_values == {"marker": ">r", "styleName": "RightAligned"}

    def test_filter_by_step(self, bundled):
        assert len(bundled.list_presets(step_key="smart_style_replacer")) == 3
        assert bundled.list_presets(step_key="other") == []


class TestPresetLoading:
    def test_missing_directory(self, tmp_path):
        registry = StepRegistry(definitions_dir=tmp_path / "absent")
        assert registry.list_presets() == []

    def test_bad_entries_skipped(self, tmp_path):
        (tmp_path / "mixed.yaml").write_text(
            "presets:\n"
            "  - preset_key: quote\n"
            "    preset_name: Quote\n"
            "    step_key: smart_style_replacer\n"
            "    option_values: {marker: '>q', styleName: Quote}\n"
            "  - preset_name: missing key\n"
            "  - preset_key: orphan\n"
            "    preset_name: Orphan\n"
            "    step_key: unknown_step\n"
        )
        registry = StepRegistry(definitions_dir=tmp_path)
        assert registry.list_preset_keys() == ["quote"]

    def test_unparseable_file_skipped(self, tmp_path):
        (tmp_path / "broken.yaml").write_text("presets: [unclosed\n")
        (tmp_path / "empty.yaml").write_text("")
        registry = StepRegistry(definitions_dir=tmp_path)
        assert registry.list_presets() == []

    def test_reload_picks_up_new_files(self, tmp_path):
        registry = StepRegistry(definitions_dir=tmp_path)
        assert registry.list_presets() == []
        (tmp_path / "late.yaml").write_text(
            "presets:\n"
            "  - preset_key: late\n"
            "    preset_name: Late\n"
            "    step_key: smart_style_replacer\n"
        )
        assert registry.list_presets() == []
        registry.reload()
        assert registry.list_preset_keys() == ["late"]

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STYLE_REPLACER_DEFINITIONS_DIR", str(tmp_path))
        assert StepRegistry().definitions_dir == tmp_path
