"""Prometheus metrics for BrevitClient calls.

Each ``optimize``/``brevity`` call produces one ``CallRecord``; a recorder
turns it into counter and histogram updates. ``NoopRecorder`` is the default,
so a client built without metrics never touches prometheus_client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, start_http_server

# output/input token ratios; above 1.0 means the call made the input larger
RATIO_BUCKETS = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0, 1.5, 2.0)
SECONDS_BUCKETS = (0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0, 5.0)


@dataclass
class CallRecord:
    """What one client call did.

    ``kind`` is ``json``, ``text``, ``image`` or ``primitive``; ``mode`` is the
    optimization mode value, or ``passthrough`` when the input was returned
    unchanged. Token counts are only filled in when the recorder is enabled.
    """
    kind: str
    mode: str
    seconds: float
    input_tokens: int | None = None
    output_tokens: int | None = None

    @property
    def ratio(self) -> float | None:
        if not self.input_tokens or self.output_tokens is None:
            return None
        return self.output_tokens / self.input_tokens


class MetricsRecorder(Protocol):
    enabled: bool

    def observe(self, record: CallRecord) -> None: ...


class NoopRecorder:
    enabled = False

    def observe(self, record: CallRecord) -> None:
        pass


class PrometheusRecorder:
    """Every series is labelled by ``kind`` and ``mode``."""

    enabled = True

    def __init__(self, registry: CollectorRegistry | None = None):
        registry = registry if registry is not None else REGISTRY
        labels = ["kind", "mode"]

        self.calls = Counter(
            "brevit_calls_total", "Client calls", labels, registry=registry,
        )
        self.input_tokens = Counter(
            "brevit_input_tokens_total", "Tokens in the raw input", labels, registry=registry,
        )
        self.output_tokens = Counter(
            "brevit_output_tokens_total", "Tokens in the optimized output", labels, registry=registry,
        )
        self.saved_tokens = Counter(
            "brevit_saved_tokens_total", "Input minus output tokens, when positive", labels,
            registry=registry,
        )
        self.ratio = Histogram(
            "brevit_token_ratio", "Output/input tokens per call", labels,
            buckets=RATIO_BUCKETS, registry=registry,
        )
        self.seconds = Histogram(
            "brevit_call_seconds", "Time spent per call", labels,
            buckets=SECONDS_BUCKETS, registry=registry,
        )

    def observe(self, record: CallRecord) -> None:
        labels = {"kind": record.kind, "mode": record.mode}
        self.calls.labels(**labels).inc()
        self.seconds.labels(**labels).observe(record.seconds)

        if record.input_tokens is None or record.output_tokens is None:
            return
        self.input_tokens.labels(**labels).inc(record.input_tokens)
        self.output_tokens.labels(**labels).inc(record.output_tokens)
        saved = record.input_tokens - record.output_tokens
        if saved > 0:
            self.saved_tokens.labels(**labels).inc(saved)
        if record.ratio is not None:
            self.ratio.labels(**labels).observe(record.ratio)


def create_recorder(
    enabled: bool = False,
    port: int = 9090,
    registry: CollectorRegistry | None = None,
) -> MetricsRecorder:
    """Return a NoopRecorder, or a PrometheusRecorder served on *port*."""
    if not enabled:
        return NoopRecorder()
    recorder = PrometheusRecorder(registry)
    start_http_server(port, registry=registry if registry is not None else REGISTRY)
    return recorder
