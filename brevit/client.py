"""
client.py — dispatch raw input to the right optimizer.

Structured input (dicts, lists, JSON strings) goes through the configured
``json_mode``; long text goes to the text optimizer; bytes go to the image
optimizer. Text and image optimizers are injectable async callables so that
real summarization or OCR can live behind an API the caller controls.
"""

import inspect
import json
import logging
import re
import time
from typing import Any, Awaitable, Callable

import yaml

from brevit.analysis import IMAGE_TYPES, Strategy, analyze_structure, select_strategy
from brevit.classifier import is_scalar
from brevit.config import (
    BrevitConfig,
    ImageOptimizationMode,
    JsonOptimizationMode,
    TextOptimizationMode,
)
from brevit.emitter import render_scalar
from brevit.encoder import encode
from brevit.filtering import filter_paths
from brevit.metrics import CallRecord, MetricsRecorder, NoopRecorder
from brevit.parsers import parse_input
from brevit.tokens import stats

logger = logging.getLogger("brevit")

TextOptimizer = Callable[[str, str | None], Awaitable[str]]
ImageOptimizer = Callable[[bytes, str | None], Awaitable[str]]

STUB_SUMMARY_CHARS = 150

_WS_RUN = re.compile(r"[ \t]+")
_BLANK_LINES = re.compile(r"\n{3,}")


def clean_text(text: str) -> str:
    """Collapse horizontal whitespace runs and excess blank lines."""
    lines = [_WS_RUN.sub(" ", ln).strip() for ln in text.strip().splitlines()]
    return _BLANK_LINES.sub("\n\n", "\n".join(lines))


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class BrevitClient:
    """Optimizes objects, JSON strings, text and image bytes for LLM prompts."""

    def __init__(
        self,
        config: BrevitConfig | None = None,
        *,
        text_optimizer: TextOptimizer | None = None,
        image_optimizer: ImageOptimizer | None = None,
        metrics: MetricsRecorder | None = None,
    ):
        """
        Args:
            config: Client configuration (defaults when None).
            text_optimizer: ``async (text, intent) -> str`` used for long text.
            image_optimizer: ``async (data, intent) -> str`` used for image bytes.
            metrics: Metrics recorder (NoopRecorder when None).
        """
        self.config = config or BrevitConfig()
        self._custom_text_optimizer = text_optimizer
        self._custom_image_optimizer = image_optimizer
        self.metrics: MetricsRecorder = metrics or NoopRecorder()
        self._strategies: dict[str, tuple[Callable, Callable]] = {}

    # ── public API ───────────────────────────────────────────────────────

    async def optimize(self, raw_data: Any, intent: str | None = None) -> str:
        """Optimize *raw_data* using the configured modes."""
        return await self._run(raw_data, intent, strategy=None)

    async def brevity(self, raw_data: Any, intent: str | None = None) -> str:
        """Analyze *raw_data* and apply the best-scoring strategy.

        Registered custom strategies compete with the built-in ones; the
        configured modes are never modified.
        """
        data = self._structured_or_raw(raw_data)
        analysis = analyze_structure(data, self.config.long_text_threshold)
        strategy = select_strategy(analysis, self.config)

        custom = self._best_custom_strategy(data, strategy.score)
        if custom is not None:
            name, reason, optimizer = custom
            logger.info("strategy=%s reason=%s", name, reason)
            return str(await _maybe_await(optimizer(data, intent)))

        logger.info("strategy=%s score=%d reason=%s", strategy.name, strategy.score, strategy.reason)
        return await self._run(raw_data, intent, strategy=strategy)

    def register_strategy(
        self,
        name: str,
        analyzer: Callable[[Any], dict],
        optimizer: Callable[[Any, str | None], Any],
    ) -> None:
        """Register a custom strategy for ``brevity``.

        Args:
            name: Strategy name (re-registering replaces it).
            analyzer: ``(data) -> {"score": 0..100, "reason": str}``.
            optimizer: ``(data, intent) -> str``, sync or async.
        """
        self._strategies[name] = (analyzer, optimizer)

    # ── dispatch ─────────────────────────────────────────────────────────

    def _structured_or_raw(self, raw_data: Any) -> Any:
        if isinstance(raw_data, str):
            try:
                data, _ = parse_input(raw_data, formats=self.config.input_formats)
                return data
            except ValueError:
                return raw_data
        return raw_data

    def _best_custom_strategy(self, data: Any, floor: int) -> tuple[str, str, Callable] | None:
        best = None
        best_score = floor
        for name, (analyzer, optimizer) in self._strategies.items():
            verdict = analyzer(data) or {}
            score = verdict.get("score", 0)
            if score > best_score:
                best, best_score = (name, verdict.get("reason", ""), optimizer), score
        return best

    async def _run(self, raw_data: Any, intent: str | None, strategy: Strategy | None) -> str:
        start = time.perf_counter()
        kind, mode, source, result = await self._dispatch(raw_data, intent, strategy)
        record = CallRecord(kind, mode, time.perf_counter() - start)

        if self.metrics.enabled and source is not None:
            s = stats(source, result)
            record.input_tokens, record.output_tokens = s["orig_tok"], s["cond_tok"]
        self.metrics.observe(record)
        logger.debug("kind=%s mode=%s output_chars=%d", kind, mode, len(result))
        return result

    async def _dispatch(
        self, raw_data: Any, intent: str | None, strategy: Strategy | None,
    ) -> tuple[str, str, str | None, str]:
        """Return ``(kind, mode, source_text, result)``."""
        if isinstance(raw_data, IMAGE_TYPES):
            mode = (strategy and strategy.image_mode) or self.config.image_mode
            result = await self._optimize_image(bytes(raw_data), intent, mode)
            return "image", mode.value, None, result

        if isinstance(raw_data, str):
            try:
                data, _ = parse_input(raw_data, formats=self.config.input_formats)
            except ValueError:
                mode = (strategy and strategy.text_mode) or self.config.text_mode
                if len(raw_data) > self.config.long_text_threshold:
                    result = await self._optimize_text(raw_data, intent, mode)
                    return "text", mode.value, raw_data, result
                return "text", "passthrough", raw_data, raw_data
            mode = (strategy and strategy.json_mode) or self.config.json_mode
            return "json", mode.value, raw_data, self._optimize_structured(data, mode)

        if isinstance(raw_data, (dict, list, tuple)):
            mode = (strategy and strategy.json_mode) or self.config.json_mode
            source = None
            if self.metrics.enabled:
                source = json.dumps(raw_data, ensure_ascii=False, default=str)
            return "json", mode.value, source, self._optimize_structured(raw_data, mode)

        if is_scalar(raw_data):
            return "primitive", "passthrough", None, render_scalar(raw_data)
        return "primitive", "passthrough", None, str(raw_data)

    def _optimize_structured(self, data: Any, mode: JsonOptimizationMode) -> str:
        if mode == JsonOptimizationMode.FLATTEN:
            return encode(data, self.config.encode_options())
        if mode == JsonOptimizationMode.TO_YAML:
            return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")
        if mode == JsonOptimizationMode.FILTER:
            kept = filter_paths(data, self.config.json_paths_to_keep)
            return encode(kept, self.config.encode_options())
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    async def _optimize_text(self, text: str, intent: str | None, mode: TextOptimizationMode) -> str:
        if self._custom_text_optimizer is not None:
            return await self._custom_text_optimizer(text, intent)
        return default_text_optimizer(text, mode)

    async def _optimize_image(self, data: bytes, intent: str | None, mode: ImageOptimizationMode) -> str:
        if self._custom_image_optimizer is not None:
            return await self._custom_image_optimizer(data, intent)
        return default_image_optimizer(data, mode)


# ── default optimizers ───────────────────────────────────────────────────────

def default_text_optimizer(text: str, mode: TextOptimizationMode) -> str:
    if mode == TextOptimizationMode.NONE:
        return text
    if mode == TextOptimizationMode.CLEAN:
        return clean_text(text)
    logger.warning(
        "text_mode=%s needs a text_optimizer; returning a stub summary", mode.value,
    )
    return (
        f"[{mode.value} Stub: Summary of text follows...]\n"
        f"{text[:STUB_SUMMARY_CHARS]}...\n"
        f"[End of summary]"
    )


def default_image_optimizer(data: bytes, mode: ImageOptimizationMode) -> str:
    if mode == ImageOptimizationMode.OCR:
        logger.warning("image_mode=Ocr needs an image_optimizer; returning stub OCR text")
        return (
            f"[OCR Stub: Extracted text from image ({len(data)} bytes)]\n"
            "Sample OCR Text: INVOICE #1234\n"
            "Total: $499.99\n"
            "[End of extracted text]"
        )
    return f"[Image: {len(data)} bytes]"
