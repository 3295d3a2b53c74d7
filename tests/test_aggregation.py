"""Tests for organization-wide summary statistics."""

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from fleet_dashboard.aggregation import AggregateStatsBuilder  # noqa: E402
from fleet_dashboard.schemas import Component, InventoryRecord, Machine, RiskFactor  # noqa: E402


def _machine(machine_id: str, status: str) -> Machine:
    return Machine(
        id=machine_id,
        name=f"Machine {machine_id}",
        status=status,
        updated_at=datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc),
    )


def _component(component_id: str, *factors: tuple[int, int]) -> Component:
    return Component(
        id=component_id,
        name=f"Component {component_id}",
        category="Power",
        risk_factors=[
            RiskFactor(name=f"risk-{index}", severity=severity, probability=probability)
            for index, (severity, probability) in enumerate(factors)
        ],
    )


def _record(record_id: str, quantity: int, minimum: int, unit_cost: str | None = None) -> InventoryRecord:
    return InventoryRecord(
        inventory_id=record_id,
        component_id=f"cmp-{record_id}",
        component_name=f"Part {record_id}",
        category="Power",
        quantity=quantity,
        minimum_quantity=minimum,
        unit_cost=unit_cost,
    )


def test_end_to_end_scenario_summaries() -> None:
    summaries = AggregateStatsBuilder().build(
        [_machine("m1", "Active"), _machine("m2", "Active"), _machine("m3", "Error")],
        [_component("c1"), _component("c2", (5, 4))],
        [_record("i1", 0, 1), _record("i2", 2, 5)],
    )

    machine = summaries.machine_summary
    assert (machine.total, machine.active, machine.maintenance, machine.error) == (3, 2, 0, 1)

    component = summaries.component_summary
    assert (component.total, component.healthy, component.warning, component.critical) == (2, 1, 0, 1)

    inventory = summaries.inventory_summary
    assert (inventory.total, inventory.healthy, inventory.low, inventory.out) == (2, 0, 1, 1)
    assert inventory.low_stock_percentage == 50
    assert inventory.out_of_stock_percentage == 50


def test_risk_factor_summary_counts_factors_not_components() -> None:
    components = [
        _component("c1"),
        _component("c2", (5, 4)),
        _component("c3", (2, 3), (1, 5)),
    ]
    builder = AggregateStatsBuilder()

    risk = builder.risk_factor_summary(components)
    assert (risk.total, risk.high, risk.medium, risk.low) == (3, 1, 1, 1)

    # c3 scores max severity 2 times max probability 5 as a component
    component = builder.component_summary(components)
    assert (component.healthy, component.warning, component.critical) == (1, 1, 1)


def test_inventory_valuation_is_exact() -> None:
    summary = AggregateStatsBuilder().inventory_summary(
        [_record("i1", 3, 1, "2.50"), _record("i2", 0, 1, "9.99")]
    )
    assert summary.total_value == Decimal("7.50")
    assert summary.total_value_display == "$7.50"


def test_inventory_valuation_has_no_float_drift() -> None:
    records = [_record(f"i{index}", 1, 0, "0.10") for index in range(3)]
    summary = AggregateStatsBuilder().inventory_summary(records)
    assert summary.total_value == Decimal("0.30")


def test_missing_unit_cost_counts_as_zero() -> None:
    summary = AggregateStatsBuilder().inventory_summary(
        [_record("i1", 4, 1), _record("i2", 2, 1, "1.25")]
    )
    assert summary.total_value == Decimal("2.50")
    assert summary.healthy == 2


def test_stock_percentages_round_half_up() -> None:
    builder = AggregateStatsBuilder()

    thirds = builder.inventory_summary([_record("i1", 1, 2), _record("i2", 0, 2), _record("i3", 0, 2)])
    assert thirds.low_stock_percentage == 33
    assert thirds.out_of_stock_percentage == 67

    eighths = builder.inventory_summary([_record("i1", 0, 1)] + [_record(f"h{n}", 9, 1) for n in range(7)])
    assert eighths.out_of_stock_percentage == 13


def test_empty_collections_produce_zero_summaries() -> None:
    summaries = AggregateStatsBuilder().build([], [], [])
    assert summaries.machine_summary.total == 0
    assert summaries.component_summary.total == 0
    assert summaries.risk_factor_summary.total == 0
    assert summaries.inventory_summary.total == 0
    assert summaries.inventory_summary.total_value == Decimal("0")
    assert summaries.inventory_summary.total_value_display == "$0.00"
    assert summaries.inventory_summary.low_stock_percentage == 0
