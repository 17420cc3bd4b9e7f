"""Structure analysis and strategy selection for ``BrevitClient.brevity``.

The analysis walks the input once and records the features that decide how
it should be optimized; ``select_strategy`` turns those features into a
scored list of candidates and picks the best one.
"""

from dataclasses import dataclass
from typing import Any

from brevit.classifier import Primitive, Uniform, classify_array, value_kind
from brevit.config import (
    BrevitConfig,
    ImageOptimizationMode,
    JsonOptimizationMode,
    TextOptimizationMode,
)

IMAGE_TYPES = (bytes, bytearray, memoryview)


@dataclass
class StructureAnalysis:
    type: str = "primitive"
    depth: int = 0
    has_uniform_arrays: bool = False
    has_primitive_arrays: bool = False
    has_nested_objects: bool = False
    text_length: int = 0
    array_count: int = 0
    object_count: int = 0
    complexity: str = "simple"


@dataclass(frozen=True)
class Strategy:
    """A chosen way to optimize one input; modes left as ``None`` fall back to config."""
    name: str
    score: int
    reason: str
    json_mode: JsonOptimizationMode | None = None
    text_mode: TextOptimizationMode | None = None
    image_mode: ImageOptimizationMode | None = None


DEFAULT_STRATEGY = Strategy(
    name="Flatten",
    score=50,
    reason="Default flatten strategy",
    json_mode=JsonOptimizationMode.FLATTEN,
)


def analyze_structure(data: Any, long_text_threshold: int = 500) -> StructureAnalysis:
    analysis = StructureAnalysis()

    def walk(node: Any, depth: int) -> None:
        analysis.depth = max(analysis.depth, depth)
        kind = value_kind(node)
        if kind == "string":
            analysis.text_length += len(node)
        elif kind == "array":
            analysis.array_count += 1
            shape = classify_array(list(node))
            if isinstance(shape, Uniform):
                analysis.has_uniform_arrays = True
            elif isinstance(shape, Primitive):
                analysis.has_primitive_arrays = True
            for item in node:
                walk(item, depth + 1)
        elif kind == "object":
            analysis.object_count += 1
            if depth > 0:
                analysis.has_nested_objects = True
            for v in node.values():
                walk(v, depth + 1)

    if not isinstance(data, IMAGE_TYPES):
        walk(data, 0)

    if analysis.depth > 3 or analysis.array_count > 5 or analysis.object_count > 10:
        analysis.complexity = "complex"
    elif analysis.depth > 1 or analysis.array_count > 0 or analysis.object_count > 3:
        analysis.complexity = "moderate"

    if isinstance(data, str):
        analysis.type = "longText" if len(data) > long_text_threshold else "text"
    elif isinstance(data, IMAGE_TYPES):
        analysis.type = "image"
    else:
        kind = value_kind(data)
        analysis.type = kind if kind in ("array", "object") else "primitive"
    return analysis


def candidate_strategies(analysis: StructureAnalysis, config: BrevitConfig) -> list[Strategy]:
    strategies = []

    if analysis.has_uniform_arrays or analysis.has_primitive_arrays:
        strategies.append(Strategy(
            name="Flatten",
            score=100 if analysis.has_uniform_arrays else 80,
            reason=(
                "Uniform object arrays detected - tabular format optimal"
                if analysis.has_uniform_arrays
                else "Primitive arrays detected - comma-separated format optimal"
            ),
            json_mode=JsonOptimizationMode.FLATTEN,
        ))

    if analysis.has_nested_objects or analysis.complexity == "moderate":
        strategies.append(Strategy(
            name="Flatten",
            score=70,
            reason="Nested objects detected - flatten format optimal",
            json_mode=JsonOptimizationMode.FLATTEN,
        ))

    if analysis.complexity == "moderate" and not analysis.has_uniform_arrays:
        strategies.append(Strategy(
            name="ToYaml",
            score=60,
            reason="Moderate complexity - YAML format may be more readable",
            json_mode=JsonOptimizationMode.TO_YAML,
        ))

    if analysis.type == "longText":
        strategies.append(Strategy(
            name="TextOptimization",
            score=90,
            reason="Long text detected - summarization recommended",
            text_mode=config.text_mode,
        ))

    if analysis.type == "image":
        strategies.append(Strategy(
            name="ImageOptimization",
            score=100,
            reason="Image data detected - OCR recommended",
            image_mode=config.image_mode,
        ))

    return strategies


def select_strategy(analysis: StructureAnalysis, config: BrevitConfig) -> Strategy:
    """Highest score wins; the earliest candidate wins a tie."""
    best = DEFAULT_STRATEGY
    for strategy in candidate_strategies(analysis, config):
        if best is DEFAULT_STRATEGY or strategy.score > best.score:
            best = strategy
    return best
