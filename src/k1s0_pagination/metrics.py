"""OpenTelemetry pagination metrics"""

from __future__ import annotations

from opentelemetry import metrics

_meter = metrics.get_meter("k1s0.pagination", version="0.1.0")

pagination_requests_total = _meter.create_counter(
    name="pagination_requests_total",
    description="Total number of List calls served",
    unit="1",
)

pagination_invalid_argument_total = _meter.create_counter(
    name="pagination_invalid_argument_total",
    description="Total number of List calls rejected with InvalidArgument",
    unit="1",
)

pagination_degraded_total = _meter.create_counter(
    name="pagination_degraded_total",
    description="Total number of degraded pages returned after a Lister timeout",
    unit="1",
)

pagination_exhausted_total = _meter.create_counter(
    name="pagination_exhausted_total",
    description="Total number of List calls whose offset exceeded the collection",
    unit="1",
)

cursor_store_evicted_total = _meter.create_counter(
    name="cursor_store_evicted_total",
    description="Total number of expired cursor records removed from the store",
    unit="1",
)
