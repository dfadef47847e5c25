"""
Prometheus metrics for pricing runs, cache lookups and registry operations.

Metrics are process-local; a pricing job can expose them with
prometheus_client's exposition helpers or push them to a gateway.

Metric Types:
    - Counter: Cumulative metrics that only increase (e.g., cache misses)
    - Histogram: Observations bucketed by value (e.g., run duration)
    - Gauge: Point-in-time value that can go up or down (e.g., last run revenue)

Example:
    >>> from hotel_pricing.metrics import pricing_outcomes
    >>> pricing_outcomes.labels(status="priced", reason="").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# Rate Cache Metrics
# =============================================================================

rate_cache_lookups = Counter(
    "hotel_pricing_rate_cache_lookups_total",
    "Total number of rate cache lookups",
    ["result"],
)
"""
Counter for rate cache lookups.

Labels:
    result: hit or miss
"""

# =============================================================================
# Registry Metrics
# =============================================================================

registry_operations = Counter(
    "hotel_pricing_registry_operations_total",
    "Total reservation registry operations",
    ["operation", "status"],
)
"""
Counter for registry operations.

Labels:
    operation: insert, bulk_insert, delete, cancel
    status: success or failure
"""

# =============================================================================
# Pricing Metrics
# =============================================================================

pricing_outcomes = Counter(
    "hotel_pricing_outcomes_total",
    "Total reservations processed by batch pricing",
    ["status", "reason"],
)
"""
Counter for per-reservation pricing outcomes.

Labels:
    status: priced or unpriced
    reason: Error class name for unpriced reservations, empty otherwise
"""

run_duration = Histogram(
    "hotel_pricing_run_duration_seconds",
    "Duration of full pricing runs in seconds",
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0, float("inf")),
)

last_run_revenue = Gauge(
    "hotel_pricing_last_run_revenue",
    "Total revenue reported by the most recent completed pricing run",
)

# =============================================================================
# Flow Metrics
# =============================================================================

flow_transitions = Counter(
    "hotel_pricing_flow_transitions_total",
    "Flow controller state transitions",
    ["state"],
)
"""
Counter for flow controller state transitions.

Labels:
    state: State entered (RUNNING, ERROR, DONE)
"""
