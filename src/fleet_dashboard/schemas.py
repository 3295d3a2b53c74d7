"""Pydantic schemas for fleet dashboard inputs and view model."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


MachineStatus = Literal["Active", "Maintenance", "Error"]
ComponentCategory = Literal[
    "Drive",
    "Controller",
    "Power",
    "Communication",
    "Software",
    "ObjectManipulation",
    "Sensors",
    "Chassis",
]
RiskLevel = Literal["Low", "Medium", "High"]
ComponentHealth = Literal["Healthy", "Warning", "Critical"]
StockLevel = Literal["Healthy", "Low", "Out"]
SourceName = Literal["machines", "components", "inventory"]
SourceState = Literal["loading", "error", "ready"]


class RiskFactor(BaseModel):
    """Named hazard rated by severity and probability."""

    model_config = ConfigDict(frozen=True)

    name: str
    severity: int = Field(ge=1)
    probability: int = Field(ge=1)


class Component(BaseModel):
    """Tracked component with its ordered risk factors."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    category: ComponentCategory
    risk_factors: list[RiskFactor] = Field(default_factory=list)


class Machine(BaseModel):
    """Fleet machine assembled from components."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    status: MachineStatus
    updated_at: datetime
    components: list[Component] = Field(default_factory=list)


class InventoryRecord(BaseModel):
    """Stock level of one spare part."""

    model_config = ConfigDict(frozen=True)

    inventory_id: str = Field(min_length=1)
    component_id: str = Field(min_length=1)
    component_name: str
    category: str
    quantity: int = Field(ge=0)
    minimum_quantity: int = Field(ge=0)
    unit_cost: Annotated[Decimal, Field(ge=0)] | None = None


class _SourceSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_loading: bool = False
    error: str | None = None

    @property
    def state(self) -> SourceState:
        if self.is_loading:
            return "loading"
        if self.error:
            return "error"
        return "ready"


class MachineSnapshot(_SourceSnapshot):
    """Point-in-time view of the machine source."""

    items: list[Machine] = Field(default_factory=list)


class ComponentSnapshot(_SourceSnapshot):
    """Point-in-time view of the component source."""

    items: list[Component] = Field(default_factory=list)


class InventorySnapshot(_SourceSnapshot):
    """Point-in-time view of the inventory source."""

    items: list[InventoryRecord] = Field(default_factory=list)


class MachineSummary(BaseModel):
    """Machine counts by status."""

    total: int = Field(ge=0)
    active: int = Field(ge=0)
    maintenance: int = Field(ge=0)
    error: int = Field(ge=0)


class ComponentSummary(BaseModel):
    """Component counts by health classification."""

    total: int = Field(ge=0)
    healthy: int = Field(ge=0)
    warning: int = Field(ge=0)
    critical: int = Field(ge=0)


class RiskFactorSummary(BaseModel):
    """Risk factor counts by risk level."""

    total: int = Field(ge=0)
    low: int = Field(ge=0)
    medium: int = Field(ge=0)
    high: int = Field(ge=0)


class InventorySummary(BaseModel):
    """Inventory counts by stock level plus valuation."""

    total: int = Field(ge=0)
    healthy: int = Field(ge=0)
    low: int = Field(ge=0)
    out: int = Field(ge=0)
    total_value: Decimal
    total_value_display: str
    low_stock_percentage: int = Field(ge=0, le=100)
    out_of_stock_percentage: int = Field(ge=0, le=100)


class RecentMachine(BaseModel):
    """Recently updated machine with derived risk."""

    id: str
    name: str
    status: MachineStatus
    risk_level: RiskLevel
    last_updated_label: str
    updated_at: datetime
    average_risk_score: float = Field(ge=0)


class CriticalComponent(BaseModel):
    """Highest-risk component entry."""

    id: str
    name: str
    category: ComponentCategory
    issue: str | None = None
    severity: RiskLevel
    health: ComponentHealth
    score: int = Field(ge=0)


class LowStockItem(BaseModel):
    """Inventory record at or under its minimum quantity."""

    id: str
    component_id: str
    name: str
    quantity: int = Field(ge=0)
    minimum: int = Field(ge=0)
    category: str
    stock_level: StockLevel


class LoadingView(BaseModel):
    """Placeholder while any source is still loading."""

    state: Literal["loading"] = "loading"


class ErrorView(BaseModel):
    """First source error, blocking the whole dashboard."""

    state: Literal["error"] = "error"
    source: SourceName
    message: str


class ReadyView(BaseModel):
    """Full dashboard computed from one snapshot triple."""

    state: Literal["ready"] = "ready"
    machine_summary: MachineSummary
    component_summary: ComponentSummary
    risk_factor_summary: RiskFactorSummary
    inventory_summary: InventorySummary
    recent_machines: list[RecentMachine]
    critical_components: list[CriticalComponent]
    low_stock_items: list[LowStockItem]
    computed_at: datetime


DashboardViewModel = Annotated[
    Union[LoadingView, ErrorView, ReadyView],
    Field(discriminator="state"),
]


class DashboardComputeRequest(BaseModel):
    """Stateless compute request carrying a full snapshot triple."""

    model_config = ConfigDict(extra="forbid")

    machines: MachineSnapshot
    components: ComponentSnapshot
    inventory: InventorySnapshot
    now: datetime | None = None


class HealthResponse(BaseModel):
    """Health endpoint response."""

    status: Literal["ok"] = "ok"
    service: str
    version: str
    timestamp: datetime
