"""Configuration for brevit.

Supports two sources:
  1. Environment variables (BREVIT_* prefix)
  2. JSON config file named by BREVIT_CONFIG
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum

from brevit.options import EncodeOptions


class JsonOptimizationMode(str, Enum):
    NONE = "None"
    FLATTEN = "Flatten"
    TO_YAML = "ToYaml"
    FILTER = "Filter"


class TextOptimizationMode(str, Enum):
    NONE = "None"
    CLEAN = "Clean"
    SUMMARIZE_FAST = "SummarizeFast"
    SUMMARIZE_HIGH_QUALITY = "SummarizeHighQuality"


class ImageOptimizationMode(str, Enum):
    NONE = "None"
    OCR = "Ocr"
    METADATA = "Metadata"


def _parse_mode(enum_cls: type[Enum], raw: str | Enum) -> Enum:
    if isinstance(raw, enum_cls):
        return raw
    for member in enum_cls:
        if member.value.lower() == str(raw).strip().lower():
            return member
    valid = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Invalid {enum_cls.__name__} {raw!r}. Valid values are: {valid}")


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() not in ("false", "0", "no", "")


def parse_list(raw: str) -> list[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


@dataclass
class BrevitConfig:
    """Client configuration: optimization modes plus encoder options."""

    json_mode: JsonOptimizationMode = JsonOptimizationMode.FLATTEN
    text_mode: TextOptimizationMode = TextOptimizationMode.CLEAN
    image_mode: ImageOptimizationMode = ImageOptimizationMode.OCR
    json_paths_to_keep: list[str] = field(default_factory=list)
    long_text_threshold: int = 500
    enable_abbreviations: bool = True
    abbreviation_threshold: int = 2
    input_formats: list[str] = field(default_factory=lambda: ["json"])
    metrics_enabled: bool = False
    metrics_port: int = 9090

    def __post_init__(self):
        self.json_mode = _parse_mode(JsonOptimizationMode, self.json_mode)
        self.text_mode = _parse_mode(TextOptimizationMode, self.text_mode)
        self.image_mode = _parse_mode(ImageOptimizationMode, self.image_mode)

    def encode_options(self) -> EncodeOptions:
        return EncodeOptions(
            enable_abbreviations=self.enable_abbreviations,
            abbreviation_threshold=self.abbreviation_threshold,
        )

    @classmethod
    def from_env(cls) -> "BrevitConfig":
        """Build config from BREVIT_* environment variables."""
        env = os.environ
        return cls(
            json_mode=env.get("BREVIT_JSON_MODE", JsonOptimizationMode.FLATTEN.value),
            text_mode=env.get("BREVIT_TEXT_MODE", TextOptimizationMode.CLEAN.value),
            image_mode=env.get("BREVIT_IMAGE_MODE", ImageOptimizationMode.OCR.value),
            json_paths_to_keep=parse_list(env.get("BREVIT_JSON_PATHS_TO_KEEP", "")),
            long_text_threshold=int(env.get("BREVIT_LONG_TEXT_THRESHOLD", "500")),
            enable_abbreviations=parse_bool(env.get("BREVIT_ENABLE_ABBREVIATIONS", "true")),
            abbreviation_threshold=int(env.get("BREVIT_ABBREVIATION_THRESHOLD", "2")),
            input_formats=parse_list(env.get("BREVIT_INPUT_FORMATS", "json")),
            metrics_enabled=parse_bool(env.get("METRICS_ENABLED", "false")),
            metrics_port=int(env.get("METRICS_PORT", "9090")),
        )

    @classmethod
    def from_dict(cls, raw: dict) -> "BrevitConfig":
        known = cls.__dataclass_fields__
        unknown = sorted(set(raw) - set(known))
        if unknown:
            raise ValueError(
                f"Unknown config keys: {', '.join(unknown)}. "
                f"Valid keys are: {', '.join(known)}"
            )
        return cls(**raw)

    @classmethod
    def from_file(cls, path: str) -> "BrevitConfig":
        """Load config from a JSON file of field names → values."""
        with open(path) as f:
            raw = json.load(f)
        return cls.from_dict(raw)

    @classmethod
    def load(cls) -> "BrevitConfig":
        """Load config: BREVIT_CONFIG file takes priority, falls back to env vars."""
        config_path = os.environ.get("BREVIT_CONFIG")
        if config_path:
            return cls.from_file(config_path)
        return cls.from_env()
