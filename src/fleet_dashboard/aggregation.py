"""Organization-wide summary statistics for the dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from .formatting import format_currency
from .scoring import ComponentHealthClassifier, InventoryHealthClassifier, RiskModel
from .schemas import (
    Component,
    ComponentSummary,
    InventoryRecord,
    InventorySummary,
    Machine,
    MachineSummary,
    RiskFactorSummary,
)


@dataclass(frozen=True)
class DashboardSummaries:
    """The four summary blocks computed from one snapshot triple."""

    machine_summary: MachineSummary
    component_summary: ComponentSummary
    risk_factor_summary: RiskFactorSummary
    inventory_summary: InventorySummary


def _percentage(count: int, total: int) -> int:
    if total == 0:
        return 0
    ratio = Decimal(count) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class AggregateStatsBuilder:
    """Tallies per-entity classifications into dashboard summaries."""

    def __init__(
        self,
        *,
        component_classifier: ComponentHealthClassifier | None = None,
        inventory_classifier: InventoryHealthClassifier | None = None,
    ) -> None:
        self._component_classifier = component_classifier or ComponentHealthClassifier()
        self._inventory_classifier = inventory_classifier or InventoryHealthClassifier()

    def build(
        self,
        machines: Sequence[Machine],
        components: Sequence[Component],
        inventory: Sequence[InventoryRecord],
    ) -> DashboardSummaries:
        return DashboardSummaries(
            machine_summary=self.machine_summary(machines),
            component_summary=self.component_summary(components),
            risk_factor_summary=self.risk_factor_summary(components),
            inventory_summary=self.inventory_summary(inventory),
        )

    @staticmethod
    def machine_summary(machines: Sequence[Machine]) -> MachineSummary:
        counts = {"Active": 0, "Maintenance": 0, "Error": 0}
        for machine in machines:
            counts[machine.status] += 1
        return MachineSummary(
            total=len(machines),
            active=counts["Active"],
            maintenance=counts["Maintenance"],
            error=counts["Error"],
        )

    def component_summary(self, components: Sequence[Component]) -> ComponentSummary:
        counts = {"Healthy": 0, "Warning": 0, "Critical": 0}
        for component in components:
            counts[self._component_classifier.classify(component).classification] += 1
        return ComponentSummary(
            total=len(components),
            healthy=counts["Healthy"],
            warning=counts["Warning"],
            critical=counts["Critical"],
        )

    @staticmethod
    def risk_factor_summary(components: Sequence[Component]) -> RiskFactorSummary:
        counts = {"Low": 0, "Medium": 0, "High": 0}
        total = 0
        for component in components:
            for factor in component.risk_factors:
                total += 1
                counts[RiskModel.classify(RiskModel.score(factor.severity, factor.probability))] += 1
        return RiskFactorSummary(
            total=total,
            low=counts["Low"],
            medium=counts["Medium"],
            high=counts["High"],
        )

    def inventory_summary(self, inventory: Sequence[InventoryRecord]) -> InventorySummary:
        counts = {"Healthy": 0, "Low": 0, "Out": 0}
        total_value = Decimal("0")
        for record in inventory:
            counts[self._inventory_classifier.classify(record)] += 1
            total_value += record.quantity * (record.unit_cost or Decimal("0"))

        total = len(inventory)
        return InventorySummary(
            total=total,
            healthy=counts["Healthy"],
            low=counts["Low"],
            out=counts["Out"],
            total_value=total_value,
            total_value_display=format_currency(total_value),
            low_stock_percentage=_percentage(counts["Low"], total),
            out_of_stock_percentage=_percentage(counts["Out"], total),
        )
