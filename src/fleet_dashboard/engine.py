"""Dashboard view model assembly gated on the readiness of all sources."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import ClassVar

from .aggregation import AggregateStatsBuilder
from .formatting import as_utc, format_relative_time
from .ranking import select_top
from .schemas import (
    ComponentSnapshot,
    CriticalComponent,
    DashboardViewModel,
    ErrorView,
    InventorySnapshot,
    LoadingView,
    LowStockItem,
    MachineSnapshot,
    ReadyView,
    RecentMachine,
    SourceName,
)
from .scoring import ComponentHealthClassifier, InventoryHealthClassifier, MachineRiskDeriver


@dataclass(frozen=True)
class SourceSnapshots:
    """Atomic triple of source snapshots observed by one computation pass."""

    machines: MachineSnapshot = field(default_factory=lambda: MachineSnapshot(is_loading=True))
    components: ComponentSnapshot = field(default_factory=lambda: ComponentSnapshot(is_loading=True))
    inventory: InventorySnapshot = field(default_factory=lambda: InventorySnapshot(is_loading=True))

    SOURCE_ORDER: ClassVar[tuple[SourceName, ...]] = ("machines", "components", "inventory")

    def ordered(self) -> list[tuple[SourceName, MachineSnapshot | ComponentSnapshot | InventorySnapshot]]:
        return [(name, getattr(self, name)) for name in self.SOURCE_ORDER]

    def with_source(
        self,
        source: SourceName,
        snapshot: MachineSnapshot | ComponentSnapshot | InventorySnapshot,
    ) -> SourceSnapshots:
        """Return a new triple with one source replaced."""

        expected = {
            "machines": MachineSnapshot,
            "components": ComponentSnapshot,
            "inventory": InventorySnapshot,
        }.get(source)
        if expected is None:
            raise ValueError(f"unknown source: {source}")
        if not isinstance(snapshot, expected):
            raise TypeError(f"{source} expects {expected.__name__}, got {type(snapshot).__name__}")
        return replace(self, **{source: snapshot})


@dataclass(frozen=True)
class SourceError:
    """Failed data fetch reported by one source."""

    source: SourceName
    message: str


def first_source_error(snapshots: SourceSnapshots) -> SourceError | None:
    """Return the first errored source in priority order, if any."""

    for name, snapshot in snapshots.ordered():
        if snapshot.state == "error":
            return SourceError(source=name, message=snapshot.error or "")
    return None


class DashboardAssembler:
    """Turns one snapshot triple into a loading, error, or ready view model."""

    def __init__(
        self,
        *,
        shortlist_size: int = 3,
        stats_builder: AggregateStatsBuilder | None = None,
    ) -> None:
        self._shortlist_size = shortlist_size
        self._component_classifier = ComponentHealthClassifier()
        self._inventory_classifier = InventoryHealthClassifier()
        self._machine_risk = MachineRiskDeriver()
        self._stats_builder = stats_builder or AggregateStatsBuilder(
            component_classifier=self._component_classifier,
            inventory_classifier=self._inventory_classifier,
        )

    def assemble(self, snapshots: SourceSnapshots, *, now: datetime | None = None) -> DashboardViewModel:
        if any(snapshot.state == "loading" for _, snapshot in snapshots.ordered()):
            return LoadingView()

        error = first_source_error(snapshots)
        if error is not None:
            return ErrorView(source=error.source, message=error.message)

        computed_at = now or datetime.now(tz=timezone.utc)
        summaries = self._stats_builder.build(
            snapshots.machines.items,
            snapshots.components.items,
            snapshots.inventory.items,
        )
        return ReadyView(
            machine_summary=summaries.machine_summary,
            component_summary=summaries.component_summary,
            risk_factor_summary=summaries.risk_factor_summary,
            inventory_summary=summaries.inventory_summary,
            recent_machines=self._recent_machines(snapshots.machines, computed_at),
            critical_components=self._critical_components(snapshots.components),
            low_stock_items=self._low_stock_items(snapshots.inventory),
            computed_at=computed_at,
        )

    def _recent_machines(self, snapshot: MachineSnapshot, now: datetime) -> list[RecentMachine]:
        machines = select_top(
            snapshot.items,
            key=lambda machine: as_utc(machine.updated_at),
            direction="desc",
            limit=self._shortlist_size,
        )
        return [
            RecentMachine(
                id=machine.id,
                name=machine.name,
                status=machine.status,
                risk_level=self._machine_risk.derive(machine),
                last_updated_label=format_relative_time(machine.updated_at, now),
                updated_at=machine.updated_at,
                average_risk_score=self._machine_risk.average_score(machine),
            )
            for machine in machines
        ]

    def _critical_components(self, snapshot: ComponentSnapshot) -> list[CriticalComponent]:
        scored = [
            (component, self._component_classifier.classify(component))
            for component in snapshot.items
        ]
        ranked = select_top(
            scored,
            key=lambda pair: pair[1].score,
            direction="desc",
            limit=self._shortlist_size,
        )
        return [
            CriticalComponent(
                id=component.id,
                name=component.name,
                category=component.category,
                issue=result.top_issue_name,
                severity=result.risk_level,
                health=result.classification,
                score=result.score,
            )
            for component, result in ranked
        ]

    def _low_stock_items(self, snapshot: InventorySnapshot) -> list[LowStockItem]:
        short = [record for record in snapshot.items if record.quantity <= record.minimum_quantity]
        ranked = select_top(
            short,
            key=lambda record: record.quantity,
            direction="asc",
            limit=self._shortlist_size,
        )
        return [
            LowStockItem(
                id=record.inventory_id,
                component_id=record.component_id,
                name=record.component_name,
                quantity=record.quantity,
                minimum=record.minimum_quantity,
                category=record.category,
                stock_level=self._inventory_classifier.classify(record),
            )
            for record in ranked
        ]
