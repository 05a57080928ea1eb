"""
Prometheus metrics collection for the VRAC pipeline

Every condition the pipeline absorbs (missing files, skipped rows,
discarded candidates) is counted here so it stays visible without
failing the run.
"""
import os
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# SOURCE METRICS
# =======================

# Candidate files by outcome
candidates_total = Counter(
    name="vrac_candidates_total",
    documentation="Candidate source files by dialect and outcome",
    labelnames=["dialect", "outcome"],  # outcome: parsed, missing, unreadable, discarded
    registry=REGISTRY,
)

# Rows skipped while parsing
rows_skipped_total = Counter(
    name="vrac_rows_skipped_total",
    documentation="Product rows skipped by the dialect parsers",
    labelnames=["dialect", "reason"],  # reason: malformed, zero_quantity, out_of_rank
    registry=REGISTRY,
)

# Rows accepted while parsing
rows_parsed_total = Counter(
    name="vrac_rows_parsed_total",
    documentation="Product rows accepted by the dialect parsers",
    labelnames=["dialect"],
    registry=REGISTRY,
)

# Disagreements between the mapping table and the export content
mapping_mismatches_total = Counter(
    name="vrac_mapping_mismatches_total",
    documentation="Exports whose detected pharmacy or year differs from the mapping table",
    labelnames=["field"],  # field: pharmacy_id, year
    registry=REGISTRY,
)

# =======================
# DEDUPLICATION METRICS
# =======================

superseded_candidates_total = Counter(
    name="vrac_superseded_candidates_total",
    documentation="Parsed candidates dropped because a richer or earlier record exists for the same key",
    registry=REGISTRY,
)

canonical_periods = Gauge(
    name="vrac_canonical_periods",
    documentation="Canonical period records produced by the last run",
    registry=REGISTRY,
)

# =======================
# ENRICHMENT METRICS
# =======================

enrichment_duration_seconds = Histogram(
    name="vrac_enrichment_stage_duration_seconds",
    documentation="Time spent running one enrichment stage over all canonical records",
    labelnames=["stage"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    registry=REGISTRY,
)

# =======================
# RUN METRICS
# =======================

pipeline_runs_total = Counter(
    name="vrac_pipeline_runs_total",
    documentation="Pipeline runs by final status",
    labelnames=["status"],  # status: success, input_error, write_error, failure
    registry=REGISTRY,
)

pipeline_duration_seconds = Histogram(
    name="vrac_pipeline_duration_seconds",
    documentation="End-to-end duration of a pipeline run",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: binding a port is only wanted when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(enrichment_duration_seconds, stage="health_index"):
            ...
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        metric = self.histogram.labels(**self.labels) if self.labels else self.histogram
        self.timer = metric.time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    if labels:
        gauge.labels(**labels).set(value)
    else:
        gauge.set(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    if labels:
        histogram.labels(**labels).observe(value)
    else:
        histogram.observe(value)


# =======================
# PIPELINE HELPERS
# =======================

def record_candidate(dialect: str, outcome: str) -> None:
    """Count one candidate file outcome (parsed, missing, unreadable, discarded)."""
    increment_counter(candidates_total, 1, dialect=dialect, outcome=outcome)


def record_row_skipped(dialect: str, reason: str) -> None:
    """Count one product row dropped by a parser."""
    increment_counter(rows_skipped_total, 1, dialect=dialect, reason=reason)


def record_rows_parsed(dialect: str, count: int) -> None:
    if count > 0:
        increment_counter(rows_parsed_total, count, dialect=dialect)


def record_mapping_mismatch(field: str) -> None:
    increment_counter(mapping_mismatches_total, 1, field=field)


def record_run(status: str, duration_seconds: float, periods: int | None = None) -> None:
    """
    Record the outcome of a pipeline run.

    Args:
        status: Final status (success, input_error, write_error, failure)
        duration_seconds: Run duration in seconds
        periods: Canonical period count (successful runs only)
    """
    increment_counter(pipeline_runs_total, 1, status=status)
    observe_histogram(pipeline_duration_seconds, duration_seconds)
    if periods is not None:
        set_gauge(canonical_periods, periods)


def get_sample_value(name: str, labels: dict[str, str] | None = None) -> float:
    """Read the current value of a sample (0.0 if it was never recorded)."""
    value = REGISTRY.get_sample_value(name, labels or {})
    return value or 0.0
