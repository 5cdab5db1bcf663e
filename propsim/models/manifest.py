"""Auto-fill manifest: which draft fields were estimated, and why."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class AssumptionSource(Enum):
    ESTIMATED = "estimated"  # Structure/age heuristic
    DEFAULT = "default"  # Standard convention or statutory rate


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class AssumptionDetail:
    field_name: str
    value: Decimal | int | str
    source: AssumptionSource
    confidence: Confidence
    justification: str


@dataclass(frozen=True)
class AssumptionManifest:
    details: dict[str, AssumptionDetail] = field(default_factory=dict)

    def get(self, field_name: str) -> AssumptionDetail | None:
        return self.details.get(field_name)

    @property
    def auto_filled(self) -> list[str]:
        return list(self.details)
