"""Unit tests for presets, config overrides, JSON config files, and env vars.

WHY: Timing policy (fallback pads, granularity, preview) is configuration,
not code. A preset that leaks mutations between runs, or a config file
typo that slips through, changes every subtitle the tool writes.

HOW: Tests cover resolve_config() copying and validation, style merging,
AssStyle rendering, load_config_file() with jsonschema validation (using
tmp_path files), and env_overrides() via monkeypatch.

RULES:
- Presets must never be mutated by callers.
- All file I/O uses tmp_path.
"""

import json

import pytest

from lrc2ass.config import env_overrides
from lrc2ass.presets import (
    DEFAULT_STYLE,
    PRESETS,
    AssStyle,
    KaraokeConfig,
    load_config_file,
    resolve_config,
)


class TestResolveConfig:

    def test_returns_copy(self):
        config = resolve_config("karaoke")
        config.styles[0].fontsize = 99
        config.document_fallback_s = 42.0
        assert PRESETS["karaoke"].styles[0].fontsize == 17
        assert PRESETS["karaoke"].document_fallback_s == 3.0

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            resolve_config("disco")

    def test_overrides_applied(self):
        config = resolve_config("karaoke", {"granularity": "syllable", "document_fallback_s": 5.0})
        assert config.granularity == "syllable"
        assert config.document_fallback_s == 5.0

    def test_none_overrides_ignored(self):
        config = resolve_config("line", {"granularity": None})
        assert config.granularity == "character"

    def test_unknown_override_field(self):
        with pytest.raises(ValueError, match="Unknown config field"):
            resolve_config("karaoke", {"colour": "red"})

    def test_preset_policies(self):
        assert PRESETS["karaoke"].granularity == "auto"
        assert PRESETS["line"].granularity == "character"
        assert PRESETS["line"].next_line_preview is False
        assert PRESETS["classic"].extend_to_next_line is False
        assert PRESETS["classic"].syllable_fallback_s == 1.0


class TestConfigValidation:

    def test_invalid_granularity(self):
        with pytest.raises(ValueError, match="granularity"):
            KaraokeConfig(granularity="word")

    def test_non_positive_fallback(self):
        with pytest.raises(ValueError):
            KaraokeConfig(document_fallback_s=0)
        with pytest.raises(ValueError):
            resolve_config("karaoke", {"syllable_fallback_s": -1.0})

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_fallback(self, value):
        with pytest.raises(ValueError, match="finite"):
            KaraokeConfig(document_fallback_s=value)
        with pytest.raises(ValueError, match="finite"):
            resolve_config("karaoke", {"syllable_fallback_s": value})

    def test_minimum_centiseconds(self):
        with pytest.raises(ValueError):
            KaraokeConfig(min_centiseconds=0)


class TestStyles:

    def test_merge_existing_style(self):
        config = resolve_config("karaoke", {"styles": [{"name": "Default", "fontsize": 40}]})
        default = config.styles[0]
        assert default.fontsize == 40
        assert default.bold == -1
        assert config.styles[1].name == "NextLine"

    def test_new_style_appended(self):
        config = resolve_config("karaoke", {"styles": [{"name": "Chorus", "italic": -1}]})
        chorus = config.styles[-1]
        assert chorus.name == "Chorus"
        assert chorus.italic == -1
        assert chorus.fontname == DEFAULT_STYLE.fontname

    def test_style_number_formatting(self):
        style = AssStyle(name="X", fontsize=40.0, outline=1.5)
        fields = style.to_ass()[len("Style: "):].split(",")
        assert fields[0] == "X"
        assert fields[2] == "40"
        assert fields[16] == "1.5"
        assert len(fields) == 23


class TestConfigFile:
    """JSON overrides validated against config_schema.json."""

    def _write(self, tmp_path, data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_valid_file(self, tmp_path):
        path = self._write(tmp_path, {
            "preset": "line",
            "document_fallback_s": 4.0,
            "styles": [{"name": "Default", "fontsize": 48, "primary_colour": "&H0000FFFF"}],
        })
        data = load_config_file(path)
        assert data["preset"] == "line"
        assert data["styles"][0]["fontsize"] == 48

    def test_invalid_granularity(self, tmp_path):
        path = self._write(tmp_path, {"granularity": "word"})
        with pytest.raises(ValueError, match="Invalid config file"):
            load_config_file(path)

    def test_unknown_key(self, tmp_path):
        path = self._write(tmp_path, {"speed": 2})
        with pytest.raises(ValueError, match="Invalid config file"):
            load_config_file(path)

    def test_bad_colour(self, tmp_path):
        path = self._write(tmp_path, {"styles": [{"name": "Default", "primary_colour": "white"}]})
        with pytest.raises(ValueError):
            load_config_file(path)

    def test_style_requires_name(self, tmp_path):
        path = self._write(tmp_path, {"styles": [{"fontsize": 20}]})
        with pytest.raises(ValueError):
            load_config_file(path)

    def test_not_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_config_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_config_file(tmp_path / "missing.json")


class TestEnvOverrides:

    def test_empty_when_unset(self):
        assert env_overrides() == {}

    def test_fallbacks_from_env(self, monkeypatch):
        monkeypatch.setenv("LRC2ASS_DOCUMENT_FALLBACK_S", "4.5")
        monkeypatch.setenv("LRC2ASS_SYLLABLE_FALLBACK_S", "0.25")
        assert env_overrides() == {
            "document_fallback_s": 4.5,
            "syllable_fallback_s": 0.25,
        }

    def test_preview_toggle(self, monkeypatch):
        monkeypatch.setenv("LRC2ASS_NEXT_LINE_PREVIEW", "no")
        assert env_overrides() == {"next_line_preview": False}

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("LRC2ASS_DOCUMENT_FALLBACK_S", "long")
        with pytest.raises(ValueError, match="LRC2ASS_DOCUMENT_FALLBACK_S"):
            env_overrides()

    def test_invalid_bool(self, monkeypatch):
        monkeypatch.setenv("LRC2ASS_NEXT_LINE_PREVIEW", "maybe")
        with pytest.raises(ValueError, match="LRC2ASS_NEXT_LINE_PREVIEW"):
            env_overrides()
