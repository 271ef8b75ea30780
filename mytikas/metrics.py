"""Prometheus metrics for the Mytikas engine and its HTTP surface.

Counters and histograms live here so the FastAPI handlers, the engine
facade and the self-play soak can record telemetry without each managing
its own metric instances.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


API_REQUESTS: Final[Counter] = Counter(
    "mytikas_api_requests_total",
    "Total number of engine API requests, labeled by endpoint and outcome.",
    labelnames=("endpoint", "outcome"),
)

API_LATENCY: Final[Histogram] = Histogram(
    "mytikas_api_latency_seconds",
    "Latency of engine API requests in seconds, labeled by endpoint.",
    labelnames=("endpoint",),
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0),
)

TURNS_GENERATED: Final[Histogram] = Histogram(
    "mytikas_turns_generated",
    "Number of legal turns enumerated per position.",
    buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500),
)

TURN_CACHE_LOOKUPS: Final[Counter] = Counter(
    "mytikas_turn_cache_lookups_total",
    "Turn cache lookups, labeled by outcome (hit/miss).",
    labelnames=("outcome",),
)

TURNS_APPLIED: Final[Counter] = Counter(
    "mytikas_turns_applied_total",
    "Turns applied through the engine facade, labeled by validation mode.",
    labelnames=("validated",),
)

SELF_PLAY_GAMES: Final[Counter] = Counter(
    "mytikas_self_play_games_total",
    "Completed self-play games, labeled by outcome (light/dark/unfinished).",
    labelnames=("outcome",),
)

INVARIANT_VIOLATIONS: Final[Counter] = Counter(
    "mytikas_invariant_violations_total",
    "Position invariant violations observed during self-play, by source.",
    labelnames=("source",),
)


# Create the labeled children up front so the series are exported with zero
# values before the first request.
API_REQUESTS.labels("init", "init")
API_LATENCY.labels("init")


def record_api_request(endpoint: str, outcome: str, duration_seconds: float) -> None:
    """Record the outcome and latency of one API request."""
    API_REQUESTS.labels(endpoint, outcome).inc()
    API_LATENCY.labels(endpoint).observe(duration_seconds)
