"""Build (assembled PC bundle) models and slot allocation table."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.product import SearchFilters, SearchHit


class Slot(str, Enum):
    """Component categories a build is made of, in assembly order."""

    CPU = "cpu"
    MOTHERBOARD = "motherboard"
    RAM = "ram"
    GPU = "gpu"
    STORAGE = "storage"
    PSU = "psu"
    CASE = "case"

    @property
    def fraction(self) -> Decimal:
        return SLOT_FRACTIONS[self]

    @property
    def category_label(self) -> str:
        return SLOT_CATEGORIES[self]


# Decimal keeps the table summing to exactly 1 and allocations exact.
SLOT_FRACTIONS: dict[Slot, Decimal] = {
    Slot.CPU: Decimal("0.18"),
    Slot.MOTHERBOARD: Decimal("0.15"),
    Slot.RAM: Decimal("0.10"),
    Slot.GPU: Decimal("0.35"),
    Slot.STORAGE: Decimal("0.08"),
    Slot.PSU: Decimal("0.07"),
    Slot.CASE: Decimal("0.07"),
}

# Category names as they appear in the dealer catalog.
SLOT_CATEGORIES: dict[Slot, str] = {
    Slot.CPU: "процессоры",
    Slot.MOTHERBOARD: "материнские платы",
    Slot.RAM: "оперативная память",
    Slot.GPU: "видеокарты",
    Slot.STORAGE: "накопители",
    Slot.PSU: "блоки питания",
    Slot.CASE: "корпуса",
}

GPU_UPGRADE_QUERY = "видеокарта"


def allocate(budget: float, slot: Slot) -> float:
    """Return the share of ``budget`` reserved for ``slot``."""
    return float(Decimal(str(budget)) * slot.fraction)


def allocations(budget: float) -> dict[Slot, float]:
    return {slot: allocate(budget, slot) for slot in Slot}


class BuildParts(BaseModel):
    """Fixed-shape record holding the chosen component per slot."""

    model_config = ConfigDict(frozen=True)

    cpu: SearchHit | None = None
    motherboard: SearchHit | None = None
    ram: SearchHit | None = None
    gpu: SearchHit | None = None
    storage: SearchHit | None = None
    psu: SearchHit | None = None
    case: SearchHit | None = None

    def get(self, slot: Slot) -> SearchHit | None:
        return getattr(self, slot.value)

    def items(self) -> list[tuple[Slot, SearchHit]]:
        """Filled slots in assembly order."""
        return [(slot, hit) for slot in Slot if (hit := self.get(slot)) is not None]

    @classmethod
    def from_choices(cls, choices: dict[Slot, SearchHit]) -> BuildParts:
        return cls(**{slot.value: hit for slot, hit in choices.items()})


class Build(BaseModel):
    """A session's assembled bundle together with the budget it targeted."""

    model_config = ConfigDict(frozen=True)

    parts: BuildParts = Field(default_factory=BuildParts)
    total: float = 0.0
    budget: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.parts.items()

    @classmethod
    def empty(cls) -> Build:
        return cls()


class BuildRequest(BaseModel):
    """Incoming payload for POST /builds/{session_id}."""

    budget: float = Field(
        ..., gt=0, allow_inf_nan=False, description="Total budget for the bundle"
    )
    filters: SearchFilters = Field(default_factory=SearchFilters)


class BuildSummary(BaseModel):
    """Read-only order summary of a stored build."""

    session_id: str
    has_build: bool
    summary: str
