"""
Defines Prometheus metrics for the extraction engine.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Importing the module twice (test reloads, several engines in one process)
# must reuse the registered collectors instead of raising.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "documents_parsed": Counter(
            "contentquarry_documents_parsed_total",
            "Total number of documents parsed, by outcome",
            ["outcome"],
        ),
        "parse_attempts": Histogram(
            "contentquarry_parse_attempts",
            "Number of retry attempts needed per parse",
            buckets=(1, 2, 3, 4),
        ),
        "parse_duration_seconds": Histogram(
            "contentquarry_parse_duration_seconds",
            "Time taken to parse one document",
        ),
        "article_length_chars": Histogram(
            "contentquarry_article_length_chars",
            "Text length of accepted articles",
            buckets=(250, 500, 1000, 2500, 5000, 10000, 25000, 50000),
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def increment(name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
    """Increment a counter metric."""
    if name in METRICS:
        metric = METRICS[name]
        if labels is not None:
            metric.labels(**labels).inc(value)
        else:
            metric.inc(value)


def observe(name: str, value: float, labels: Optional[Dict[str, Any]] = None) -> None:
    """Observe a histogram metric."""
    if name in METRICS:
        metric = METRICS[name]
        if labels is not None:
            metric.labels(**labels).observe(value)
        else:
            metric.observe(value)


def record_parse(outcome: str, attempts: int, duration: float, length: int = 0) -> None:
    """Record the metrics of one finished parse call."""
    increment("documents_parsed", labels={"outcome": outcome})
    observe("parse_duration_seconds", duration)
    if attempts:
        observe("parse_attempts", attempts)
    if outcome == "success":
        observe("article_length_chars", length)


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    return generate_latest().decode("utf-8")
