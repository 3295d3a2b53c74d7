"""HTTP routes for fleet dashboard service."""

from datetime import datetime, timezone
import logging
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from .config import get_settings
from .engine import SourceSnapshots
from .observability import get_metrics, log_event
from .runtime import DashboardRuntime
from .schemas import (
    ComponentSnapshot,
    DashboardComputeRequest,
    DashboardViewModel,
    HealthResponse,
    InventorySnapshot,
    MachineSnapshot,
    SourceName,
)
from .store import InMemorySnapshotStore

router = APIRouter()
logger = logging.getLogger("fleet_dashboard")

_settings = get_settings()
_store = InMemorySnapshotStore()
_metrics = get_metrics()
_runtime = DashboardRuntime(settings=_settings, store=_store, metrics=_metrics)


def _trace_id(request: Request) -> str:
    return request.headers.get("x-trace-id", "").strip() or uuid4().hex


def _publish(
    source: SourceName,
    snapshot: MachineSnapshot | ComponentSnapshot | InventorySnapshot,
    request: Request,
) -> DashboardViewModel:
    trace_id = _trace_id(request)
    log_event(
        logger,
        "dashboard_source_update_request",
        trace_id=trace_id,
        source=source,
        is_loading=snapshot.is_loading,
        has_error=bool(snapshot.error),
        items=len(snapshot.items),
    )
    return _runtime.publish(source, snapshot, trace_id=trace_id)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        service=_settings.service_name,
        version=_settings.service_version,
        timestamp=datetime.now(tz=timezone.utc),
    )


@router.get("/metrics", response_class=PlainTextResponse)
def metrics() -> str:
    if not _settings.metrics_enabled:
        raise HTTPException(status_code=404, detail="metrics endpoint disabled")
    return _metrics.render_prometheus()


@router.post("/dashboard/compute", response_model=DashboardViewModel)
def compute_dashboard(payload: DashboardComputeRequest, request: Request) -> DashboardViewModel:
    trace_id = _trace_id(request)
    log_event(
        logger,
        "dashboard_compute_request",
        trace_id=trace_id,
        machines=len(payload.machines.items),
        components=len(payload.components.items),
        inventory=len(payload.inventory.items),
    )
    snapshots = SourceSnapshots(
        machines=payload.machines,
        components=payload.components,
        inventory=payload.inventory,
    )
    return _runtime.compute(snapshots, now=payload.now, trace_id=trace_id)


@router.get("/dashboard", response_model=DashboardViewModel)
def current_dashboard() -> DashboardViewModel:
    return _runtime.current_view()


@router.put("/sources/machines", response_model=DashboardViewModel)
def publish_machines(payload: MachineSnapshot, request: Request) -> DashboardViewModel:
    return _publish("machines", payload, request)


@router.put("/sources/components", response_model=DashboardViewModel)
def publish_components(payload: ComponentSnapshot, request: Request) -> DashboardViewModel:
    return _publish("components", payload, request)


@router.put("/sources/inventory", response_model=DashboardViewModel)
def publish_inventory(payload: InventorySnapshot, request: Request) -> DashboardViewModel:
    return _publish("inventory", payload, request)
