"""Depreciation computation: straight-line over the remaining useful life,
with an optional equipment component on its own shorter life.

Pure functions. Amounts are whole yen; the final year of each component
absorbs the rounding remainder so the cumulative charge equals the base.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

from propsim.models.configuration import (
    LEGAL_USEFUL_LIFE,
    Configuration,
    StructureType,
    UsefulLifeMethod,
    clamp_pct,
)

ONE_YEN = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
MIN_USEFUL_LIFE = 2


@dataclass(frozen=True)
class YearlyDepreciation:
    year: int
    body: Decimal
    equipment: Decimal
    total: Decimal


def useful_life(
    structure: StructureType,
    building_age: int,
    method: UsefulLifeMethod = UsefulLifeMethod.REMAINING,
) -> int:
    """Depreciation period in years for a building bought at `building_age`.

    REMAINING: legal life minus age, floored at 20% of the legal life.
    SIMPLIFIED: the statutory shortcut for used buildings,
    (legal - age) + age x 20%, or legal x 20% once fully aged.
    """
    legal = LEGAL_USEFUL_LIFE[structure]
    age = max(0, building_age)
    floor_life = max(MIN_USEFUL_LIFE, legal * 20 // 100)

    if method is UsefulLifeMethod.SIMPLIFIED:
        if age >= legal:
            return floor_life
        return max(MIN_USEFUL_LIFE, (legal - age) + age * 20 // 100)

    return max(floor_life, legal - age)


def component_prices(config: Configuration) -> tuple[Decimal, Decimal]:
    """(body, equipment) split of the building price."""
    building = config.building_price
    if building <= 0:
        return ZERO, ZERO
    if config.equipment is None:
        return building, ZERO
    equipment = (building * clamp_pct(config.equipment.ratio) / HUNDRED).quantize(ONE_YEN, ROUND_HALF_UP)
    return building - equipment, equipment


def straight_line(base: Decimal, life: int, year: int) -> Decimal:
    """Straight-line charge for a given year (1-indexed)."""
    if base <= 0 or life <= 0 or year < 1 or year > life:
        return ZERO
    annual = (base / life).quantize(ONE_YEN, ROUND_DOWN)
    if year < life:
        return annual
    return base - annual * (life - 1)


def compute_yearly_depreciation(config: Configuration, year: int) -> YearlyDepreciation:
    body_base, equipment_base = component_prices(config)
    body_life = useful_life(config.structure, config.building_age, config.useful_life_method)
    body = straight_line(body_base, body_life, year)

    equipment = ZERO
    if config.equipment is not None:
        equipment = straight_line(equipment_base, max(1, config.equipment.useful_life), year)

    return YearlyDepreciation(year=year, body=body, equipment=equipment, total=body + equipment)


def depreciation_schedule(config: Configuration, years: int) -> tuple[YearlyDepreciation, ...]:
    return tuple(compute_yearly_depreciation(config, y) for y in range(1, years + 1))


def total_depreciation_taken(config: Configuration, through_year: int) -> Decimal:
    """Sum of all depreciation taken from year 1 through given year."""
    total = ZERO
    for y in range(1, through_year + 1):
        total += compute_yearly_depreciation(config, y).total
    return total
