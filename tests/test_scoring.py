"""Tests for risk scoring and per-entity classification."""

from datetime import datetime, timezone
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from fleet_dashboard.schemas import Component, InventoryRecord, Machine, RiskFactor  # noqa: E402
from fleet_dashboard.scoring import (  # noqa: E402
    ComponentHealthClassifier,
    InventoryHealthClassifier,
    MachineRiskDeriver,
    RiskModel,
)


def _component(component_id: str, *factors: tuple[str, int, int]) -> Component:
    return Component(
        id=component_id,
        name=f"Component {component_id}",
        category="Drive",
        risk_factors=[
            RiskFactor(name=name, severity=severity, probability=probability)
            for name, severity, probability in factors
        ],
    )


def _machine(*components: Component) -> Machine:
    return Machine(
        id="machine-1",
        name="Assembly Line Robot A1",
        status="Active",
        updated_at=datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc),
        components=list(components),
    )


def _record(quantity: int, minimum: int) -> InventoryRecord:
    return InventoryRecord(
        inventory_id="inv-1",
        component_id="drive-servo-1",
        component_name="High-Torque Servo",
        category="Drive",
        quantity=quantity,
        minimum_quantity=minimum,
    )


@pytest.mark.parametrize(
    ("score", "level"),
    [(0, "Low"), (5, "Low"), (6, "Medium"), (14, "Medium"), (15, "High"), (25, "High")],
)
def test_risk_model_threshold_boundaries(score: int, level: str) -> None:
    assert RiskModel.classify(score) == level


def test_risk_model_score_is_product() -> None:
    assert RiskModel.score(3, 5) == 15
    assert RiskModel.classify(RiskModel.score(3, 2)) == "Medium"
    assert RiskModel.classify(RiskModel.score(5, 1)) == "Low"


def test_component_without_risk_factors_is_healthy() -> None:
    result = ComponentHealthClassifier().classify(_component("c1"))
    assert result.classification == "Healthy"
    assert result.score == 0
    assert result.top_issue_name is None
    assert result.risk_level == "Low"


def test_component_score_uses_independent_maxima() -> None:
    component = _component("c1", ("Overheating", 2, 2), ("Bearing wear", 5, 1), ("Short circuit", 1, 4))
    result = ComponentHealthClassifier().classify(component)

    # max severity 5 (bearing wear) times max probability 4 (short circuit)
    assert result.score == 20
    assert result.classification == "Critical"
    assert result.risk_level == "High"


def test_component_issue_is_first_factor_not_worst() -> None:
    component = _component("c1", ("Cable fraying", 1, 1), ("Overheating risk", 5, 5))
    result = ComponentHealthClassifier().classify(component)

    assert result.score == 25
    assert result.top_issue_name == "Cable fraying"


def test_component_warning_band() -> None:
    result = ComponentHealthClassifier().classify(_component("c1", ("Capacity degradation", 2, 3)))
    assert result.score == 6
    assert result.classification == "Warning"


def test_machine_without_components_is_low_risk() -> None:
    deriver = MachineRiskDeriver()
    machine = _machine()
    assert deriver.max_score(machine) == 0
    assert deriver.derive(machine) == "Low"
    assert deriver.average_score(machine) == 0.0


def test_machine_risk_uses_per_factor_products() -> None:
    component = _component("c1", ("Overheating", 2, 2), ("Bearing wear", 5, 1), ("Short circuit", 1, 4))
    deriver = MachineRiskDeriver()
    machine = _machine(component)

    # the component alone classifies Critical, the real per-factor maximum is 5
    assert ComponentHealthClassifier().classify(component).classification == "Critical"
    assert deriver.max_score(machine) == 5
    assert deriver.derive(machine) == "Low"


def test_machine_risk_takes_maximum_across_components() -> None:
    machine = _machine(_component("c1"), _component("c2", ("Firmware bug", 3, 3)), _component("c3", ("Loose bolt", 1, 2)))
    deriver = MachineRiskDeriver()
    assert deriver.max_score(machine) == 9
    assert deriver.derive(machine) == "Medium"


def test_machine_average_risk_score() -> None:
    machine = _machine(
        _component("c1", ("Overheating", 2, 2), ("Bearing wear", 5, 1)),
        _component("c2", ("Short circuit", 1, 4)),
        _component("c3"),
    )
    assert MachineRiskDeriver().average_score(machine) == 4.3


@pytest.mark.parametrize(
    ("quantity", "minimum", "level"),
    [(0, 0, "Out"), (0, 3, "Out"), (5, 5, "Low"), (1, 5, "Low"), (6, 5, "Healthy"), (1, 0, "Healthy")],
)
def test_inventory_classifier(quantity: int, minimum: int, level: str) -> None:
    assert InventoryHealthClassifier.classify(_record(quantity, minimum)) == level


def test_machine_average_risk_score_rounds_ties_up() -> None:
    machine = _machine(
        _component("c1", ("Loose cable", 1, 1), ("Dust ingress", 1, 2), ("Wear", 1, 3), ("Drift", 1, 3)),
    )
    # mean of 1, 2, 3, 3 is 2.25
    assert MachineRiskDeriver().average_score(machine) == 2.3
