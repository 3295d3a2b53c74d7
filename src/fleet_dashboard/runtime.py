"""Recomputes the dashboard whenever a source publishes a new snapshot."""

from __future__ import annotations

from datetime import datetime
import logging
from threading import Lock, RLock
from time import perf_counter
from typing import Callable

from .config import Settings
from .engine import DashboardAssembler, SourceSnapshots
from .observability import DashboardMetrics, log_event
from .schemas import (
    ComponentSnapshot,
    DashboardViewModel,
    InventorySnapshot,
    MachineSnapshot,
    SourceName,
)
from .store import InMemorySnapshotStore


ViewListener = Callable[[DashboardViewModel], None]

logger = logging.getLogger("fleet_dashboard")


class DashboardRuntime:
    """Wires source change notifications to fresh dashboard computations.

    Each publication swaps one snapshot atomically, recomputes the whole view
    from the resulting triple and replaces the current view. A view computed
    from an older triple never overwrites one computed from a newer triple,
    and listeners are notified in the order views are stored.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        store: InMemorySnapshotStore,
        metrics: DashboardMetrics,
    ) -> None:
        self._settings = settings
        self._store = store
        self._metrics = metrics
        self._assembler = DashboardAssembler(shortlist_size=settings.shortlist_size)
        self._listeners_lock = Lock()
        self._listeners: list[ViewListener] = []
        # Reentrant so a listener may publish from inside its callback.
        self._publication_lock = RLock()

    def reset_state_for_tests(self) -> None:
        """Reset store and listeners for deterministic tests."""

        self._store.reset()
        with self._listeners_lock:
            self._listeners = []

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a view listener and return a callable that removes it."""

        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def compute(
        self,
        snapshots: SourceSnapshots,
        *,
        now: datetime | None = None,
        trace_id: str | None = None,
    ) -> DashboardViewModel:
        """Compute a view from an explicit snapshot triple without touching stored state."""

        started = perf_counter()
        view = self._assembler.assemble(snapshots, now=now)
        latency_ms = (perf_counter() - started) * 1000.0

        inventory_value = view.inventory_summary.total_value if view.state == "ready" else None
        if self._settings.metrics_enabled:
            self._metrics.record_computation(view.state, latency_ms, inventory_value)

        fields: dict[str, object] = {
            "trace_id": trace_id,
            "state": view.state,
            "source_states": {name: snapshot.state for name, snapshot in snapshots.ordered()},
            "latency_ms": round(latency_ms, 3),
        }
        if view.state == "error":
            fields["error_source"] = view.source
            fields["error_message"] = view.message
        elif view.state == "ready":
            fields["machines_total"] = view.machine_summary.total
            fields["components_total"] = view.component_summary.total
            fields["inventory_total"] = view.inventory_summary.total
        log_event(logger, "dashboard_view_computed", **fields)
        return view

    def publish(
        self,
        source: SourceName,
        snapshot: MachineSnapshot | ComponentSnapshot | InventorySnapshot,
        *,
        now: datetime | None = None,
        trace_id: str | None = None,
    ) -> DashboardViewModel:
        """Replace one source snapshot, recompute, and notify listeners."""

        version, snapshots = self._store.replace(source, snapshot)
        if self._settings.metrics_enabled:
            self._metrics.record_snapshot_update(source)
        log_event(
            logger,
            "dashboard_snapshot_published",
            trace_id=trace_id,
            source=source,
            source_state=snapshot.state,
            items=len(snapshot.items),
            version=version,
        )

        view = self.compute(snapshots, now=now, trace_id=trace_id)
        # Storing and fan-out happen together so listeners see views in version order.
        with self._publication_lock:
            if not self._store.set_view(version, view):
                log_event(logger, "dashboard_view_superseded", trace_id=trace_id, source=source, version=version)
                return view
            self._notify(view, trace_id=trace_id)
        return view

    def current_view(self) -> DashboardViewModel:
        return self._store.view()

    def current_snapshots(self) -> SourceSnapshots:
        return self._store.snapshots()

    def _notify(self, view: DashboardViewModel, *, trace_id: str | None) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(view)
            except Exception as exc:
                if self._settings.metrics_enabled:
                    self._metrics.record_listener_error()
                log_event(
                    logger,
                    "dashboard_listener_error",
                    trace_id=trace_id,
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(exc),
                )
