"""Structured logging and in-memory metrics for fleet dashboard service."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import json
import logging
from threading import Lock
from typing import Any


def configure_logging(level: str) -> None:
    """Configure service logging format once."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
    )


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Emit one structured JSON log line."""

    payload = {
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "event": event,
        **fields,
    }
    logger.info(json.dumps(payload, default=str, separators=(",", ":")))


class DashboardMetrics:
    """Thread-safe in-memory metrics for dashboard computations."""

    VIEW_STATES = ("loading", "error", "ready")

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.computations_total = 0
            self.views_by_state: dict[str, int] = {state: 0 for state in self.VIEW_STATES}
            self.snapshot_updates_by_source: dict[str, int] = {}
            self.listener_errors_total = 0
            self.latency_ms_sum = 0.0
            self.latency_ms_count = 0
            self.last_inventory_value = Decimal("0")

    def record_snapshot_update(self, source: str) -> None:
        with self._lock:
            self.snapshot_updates_by_source[source] = self.snapshot_updates_by_source.get(source, 0) + 1

    def record_computation(self, state: str, latency_ms: float, inventory_value: Decimal | None = None) -> None:
        with self._lock:
            self.computations_total += 1
            self.views_by_state[state] = self.views_by_state.get(state, 0) + 1
            self.latency_ms_sum += max(latency_ms, 0.0)
            self.latency_ms_count += 1
            if inventory_value is not None:
                self.last_inventory_value = inventory_value

    def record_listener_error(self) -> None:
        with self._lock:
            self.listener_errors_total += 1

    def render_prometheus(self) -> str:
        with self._lock:
            lines = [
                "# HELP fleet_dashboard_computations_total Total dashboard view computations.",
                "# TYPE fleet_dashboard_computations_total counter",
                f"fleet_dashboard_computations_total {self.computations_total}",
                "# HELP fleet_dashboard_views_total Computed views by resulting state.",
                "# TYPE fleet_dashboard_views_total counter",
            ]
            for state, count in sorted(self.views_by_state.items()):
                lines.append(f"fleet_dashboard_views_total{{state=\"{state}\"}} {count}")
            lines.extend(
                [
                    "# HELP fleet_dashboard_snapshot_updates_total Snapshots published per source.",
                    "# TYPE fleet_dashboard_snapshot_updates_total counter",
                ]
            )
            for source, count in sorted(self.snapshot_updates_by_source.items()):
                lines.append(f"fleet_dashboard_snapshot_updates_total{{source=\"{source}\"}} {count}")
            lines.extend(
                [
                    "# HELP fleet_dashboard_listener_errors_total Failed view listener notifications.",
                    "# TYPE fleet_dashboard_listener_errors_total counter",
                    f"fleet_dashboard_listener_errors_total {self.listener_errors_total}",
                    "# HELP fleet_dashboard_latency_ms_sum Sum of computation latency in milliseconds.",
                    "# TYPE fleet_dashboard_latency_ms_sum counter",
                    f"fleet_dashboard_latency_ms_sum {self.latency_ms_sum:.3f}",
                    "# HELP fleet_dashboard_latency_ms_count Number of latency observations.",
                    "# TYPE fleet_dashboard_latency_ms_count counter",
                    f"fleet_dashboard_latency_ms_count {self.latency_ms_count}",
                    "# HELP fleet_dashboard_inventory_value_last Last computed inventory valuation.",
                    "# TYPE fleet_dashboard_inventory_value_last gauge",
                    f"fleet_dashboard_inventory_value_last {self.last_inventory_value:.2f}",
                ]
            )
        return "\n".join(lines) + "\n"


_metrics = DashboardMetrics()


def get_metrics() -> DashboardMetrics:
    """Return singleton metrics collector."""

    return _metrics
