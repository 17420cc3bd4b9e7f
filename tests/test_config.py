"""Tests for config module."""

import json

import pytest

from brevit.config import (
    BrevitConfig,
    ImageOptimizationMode,
    JsonOptimizationMode,
    TextOptimizationMode,
)
from brevit.options import EncodeOptions


class TestDefaults:
    def test_defaults(self):
        cfg = BrevitConfig()
        assert cfg.json_mode is JsonOptimizationMode.FLATTEN
        assert cfg.text_mode is TextOptimizationMode.CLEAN
        assert cfg.image_mode is ImageOptimizationMode.OCR
        assert cfg.json_paths_to_keep == []
        assert cfg.long_text_threshold == 500
        assert cfg.enable_abbreviations is True
        assert cfg.abbreviation_threshold == 2
        assert cfg.input_formats == ["json"]
        assert cfg.metrics_enabled is False

    def test_encode_options(self):
        cfg = BrevitConfig(enable_abbreviations=False, abbreviation_threshold=3)
        assert cfg.encode_options() == EncodeOptions(enable_abbreviations=False, abbreviation_threshold=3)


class TestModes:
    def test_string_modes_are_parsed(self):
        cfg = BrevitConfig(json_mode="ToYaml", text_mode="summarizefast", image_mode="METADATA")
        assert cfg.json_mode is JsonOptimizationMode.TO_YAML
        assert cfg.text_mode is TextOptimizationMode.SUMMARIZE_FAST
        assert cfg.image_mode is ImageOptimizationMode.METADATA

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="Valid values are"):
            BrevitConfig(json_mode="Compress")


class TestFromFile:
    def test_basic(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps({
            "json_mode": "Filter",
            "json_paths_to_keep": ["user.name"],
            "enable_abbreviations": False,
            "abbreviation_threshold": 4,
            "input_formats": ["json", "yaml"],
        }))
        cfg = BrevitConfig.from_file(str(cfg_file))
        assert cfg.json_mode is JsonOptimizationMode.FILTER
        assert cfg.json_paths_to_keep == ["user.name"]
        assert cfg.enable_abbreviations is False
        assert cfg.abbreviation_threshold == 4
        assert cfg.input_formats == ["json", "yaml"]

    def test_unknown_key(self, tmp_path):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps({"jsonMode": "Flatten"}))
        with pytest.raises(ValueError, match="Unknown config keys: jsonMode"):
            BrevitConfig.from_file(str(cfg_file))


class TestFromEnv:
    def test_defaults_when_unset(self, monkeypatch):
        for var in ("BREVIT_JSON_MODE", "BREVIT_ENABLE_ABBREVIATIONS", "METRICS_ENABLED"):
            monkeypatch.delenv(var, raising=False)
        cfg = BrevitConfig.from_env()
        assert cfg.json_mode is JsonOptimizationMode.FLATTEN
        assert cfg.enable_abbreviations is True
        assert cfg.metrics_enabled is False

    def test_all_vars(self, monkeypatch):
        monkeypatch.setenv("BREVIT_JSON_MODE", "None")
        monkeypatch.setenv("BREVIT_TEXT_MODE", "SummarizeHighQuality")
        monkeypatch.setenv("BREVIT_IMAGE_MODE", "Metadata")
        monkeypatch.setenv("BREVIT_JSON_PATHS_TO_KEEP", "a.b, c")
        monkeypatch.setenv("BREVIT_LONG_TEXT_THRESHOLD", "1000")
        monkeypatch.setenv("BREVIT_ENABLE_ABBREVIATIONS", "no")
        monkeypatch.setenv("BREVIT_ABBREVIATION_THRESHOLD", "3")
        monkeypatch.setenv("BREVIT_INPUT_FORMATS", "json,yaml")
        monkeypatch.setenv("METRICS_ENABLED", "true")
        monkeypatch.setenv("METRICS_PORT", "9191")
        cfg = BrevitConfig.from_env()
        assert cfg.json_mode is JsonOptimizationMode.NONE
        assert cfg.text_mode is TextOptimizationMode.SUMMARIZE_HIGH_QUALITY
        assert cfg.image_mode is ImageOptimizationMode.METADATA
        assert cfg.json_paths_to_keep == ["a.b", "c"]
        assert cfg.long_text_threshold == 1000
        assert cfg.enable_abbreviations is False
        assert cfg.abbreviation_threshold == 3
        assert cfg.input_formats == ["json", "yaml"]
        assert cfg.metrics_enabled is True
        assert cfg.metrics_port == 9191


class TestLoad:
    def test_file_takes_priority(self, tmp_path, monkeypatch):
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps({"json_mode": "ToYaml"}))
        monkeypatch.setenv("BREVIT_CONFIG", str(cfg_file))
        monkeypatch.setenv("BREVIT_JSON_MODE", "None")
        assert BrevitConfig.load().json_mode is JsonOptimizationMode.TO_YAML

    def test_falls_back_to_env(self, monkeypatch):
        monkeypatch.delenv("BREVIT_CONFIG", raising=False)
        monkeypatch.setenv("BREVIT_JSON_MODE", "None")
        assert BrevitConfig.load().json_mode is JsonOptimizationMode.NONE
