"""In-memory snapshot store for fleet dashboard service."""

from __future__ import annotations

from threading import Lock

from .engine import SourceSnapshots
from .schemas import (
    ComponentSnapshot,
    DashboardViewModel,
    InventorySnapshot,
    LoadingView,
    MachineSnapshot,
    SourceName,
)


class InMemorySnapshotStore:
    """Thread-safe holder of the latest snapshot triple and its view."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._snapshots = SourceSnapshots()
            self._view: DashboardViewModel = LoadingView()
            self._version = 0
            self._view_version = 0

    def replace(
        self,
        source: SourceName,
        snapshot: MachineSnapshot | ComponentSnapshot | InventorySnapshot,
    ) -> tuple[int, SourceSnapshots]:
        """Swap one source snapshot and return the new version and triple."""

        with self._lock:
            self._snapshots = self._snapshots.with_source(source, snapshot)
            self._version += 1
            return self._version, self._snapshots

    def snapshots(self) -> SourceSnapshots:
        with self._lock:
            return self._snapshots

    def set_view(self, version: int, view: DashboardViewModel) -> bool:
        """Store `view` unless a newer snapshot version already produced one."""

        with self._lock:
            if version < self._view_version:
                return False
            self._view = view
            self._view_version = version
            return True

    def view(self) -> DashboardViewModel:
        with self._lock:
            return self._view
