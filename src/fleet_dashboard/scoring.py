"""Risk scoring and per-entity health classification."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .schemas import (
    Component,
    ComponentHealth,
    InventoryRecord,
    Machine,
    RiskLevel,
    StockLevel,
)


HIGH_RISK_THRESHOLD = 15
MEDIUM_RISK_THRESHOLD = 6

_TENTH = Decimal("0.1")


class RiskModel:
    """Scores (severity, probability) pairs and maps scores to risk levels."""

    @staticmethod
    def score(severity: int, probability: int) -> int:
        return severity * probability

    @staticmethod
    def classify(score: int) -> RiskLevel:
        if score >= HIGH_RISK_THRESHOLD:
            return "High"
        if score >= MEDIUM_RISK_THRESHOLD:
            return "Medium"
        return "Low"


@dataclass(frozen=True)
class ComponentHealthResult:
    """Aggregate risk classification of one component."""

    classification: ComponentHealth
    score: int
    top_issue_name: str | None
    risk_level: RiskLevel


class ComponentHealthClassifier:
    """Classifies a component from its independently maximized severity and probability.

    The reported issue is the first risk factor in sequence order, which is not
    necessarily the factor that produced the score.
    """

    _HEALTH_BY_LEVEL: dict[str, ComponentHealth] = {
        "High": "Critical",
        "Medium": "Warning",
        "Low": "Healthy",
    }

    def classify(self, component: Component) -> ComponentHealthResult:
        factors = component.risk_factors
        if not factors:
            return ComponentHealthResult(
                classification="Healthy",
                score=0,
                top_issue_name=None,
                risk_level="Low",
            )

        max_severity = max(factor.severity for factor in factors)
        max_probability = max(factor.probability for factor in factors)
        score = RiskModel.score(max_severity, max_probability)
        level = RiskModel.classify(score)
        return ComponentHealthResult(
            classification=self._HEALTH_BY_LEVEL[level],
            score=score,
            top_issue_name=factors[0].name,
            risk_level=level,
        )


class MachineRiskDeriver:
    """Derives machine risk from the per-factor products of all its components."""

    @staticmethod
    def _products(machine: Machine) -> list[int]:
        products: list[int] = []
        for component in machine.components:
            if not component.risk_factors:
                products.append(0)
                continue
            products.extend(
                RiskModel.score(factor.severity, factor.probability)
                for factor in component.risk_factors
            )
        return products

    def max_score(self, machine: Machine) -> int:
        return max(self._products(machine), default=0)

    def derive(self, machine: Machine) -> RiskLevel:
        return RiskModel.classify(self.max_score(machine))

    def average_score(self, machine: Machine) -> float:
        """Mean product over the machine's risk factors to one decimal, ties rounded up.

        Returns 0.0 when the machine has no risk factors.
        """

        products = [
            RiskModel.score(factor.severity, factor.probability)
            for component in machine.components
            for factor in component.risk_factors
        ]
        if not products:
            return 0.0
        mean = Decimal(sum(products)) / Decimal(len(products))
        return float(mean.quantize(_TENTH, rounding=ROUND_HALF_UP))


class InventoryHealthClassifier:
    """Classifies one inventory record against its minimum quantity."""

    @staticmethod
    def classify(record: InventoryRecord) -> StockLevel:
        if record.quantity == 0:
            return "Out"
        if record.quantity <= record.minimum_quantity:
            return "Low"
        return "Healthy"
