"""Fixed-asset tax and one-off real-estate acquisition tax.

Evaluations are simplified: a flat percentage of the land and building
price, with the building evaluation aging 1.5 points a year down to a 20%
floor. Pure functions, no I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from propsim.models.configuration import Configuration, clamp_pct

ONE_YEN = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

BUILDING_DECAY_PER_YEAR = Decimal("1.5")  # Points of evaluation lost per year of age
BUILDING_DECAY_FLOOR = Decimal("20")  # % of the original evaluation


@dataclass(frozen=True)
class PropertyTaxAssessment:
    year: int
    land_evaluation: Decimal
    taxable_land: Decimal
    building_evaluation: Decimal
    taxable_building: Decimal
    relief_applied: bool
    tax: Decimal


def building_aging_factor(age: int) -> Decimal:
    """Remaining share (0-1) of the building evaluation at a given age."""
    pct = HUNDRED - BUILDING_DECAY_PER_YEAR * max(0, age)
    return max(BUILDING_DECAY_FLOOR, pct) / HUNDRED


def land_evaluation(config: Configuration) -> Decimal:
    params = config.property_tax
    return config.land_price * clamp_pct(params.land_evaluation_rate) / HUNDRED


def building_evaluation(config: Configuration, year: int = 1) -> Decimal:
    params = config.property_tax
    raw = config.building_price * clamp_pct(params.building_evaluation_rate) / HUNDRED
    return raw * building_aging_factor(config.age_at_year(year))


def in_relief_window(config: Configuration, year: int) -> bool:
    relief = config.property_tax.new_build_relief
    if relief is None or relief.years <= 0:
        return False
    return config.age_at_year(year) < relief.years


def assess_property_tax(config: Configuration, year: int) -> PropertyTaxAssessment:
    """Annual fixed-asset tax for a given year (1-indexed)."""
    params = config.property_tax
    land_eval = land_evaluation(config)
    taxable_land = land_eval * clamp_pct(params.land_special_reduction_rate) / HUNDRED

    building_eval = building_evaluation(config, year)
    relief = in_relief_window(config, year)
    relief_terms = params.new_build_relief
    taxable_building = building_eval
    if relief and relief_terms is not None:
        taxable_building = building_eval * (1 - clamp_pct(relief_terms.rate) / HUNDRED)

    tax = ((taxable_land + taxable_building) * max(ZERO, params.property_tax_rate) / HUNDRED).quantize(
        ONE_YEN, ROUND_HALF_UP
    )
    return PropertyTaxAssessment(
        year=year,
        land_evaluation=land_eval,
        taxable_land=taxable_land,
        building_evaluation=building_eval,
        taxable_building=taxable_building,
        relief_applied=relief,
        tax=tax,
    )


def property_tax(config: Configuration, year: int) -> Decimal:
    return assess_property_tax(config, year).tax


def acquisition_tax(config: Configuration) -> Decimal:
    """One-off acquisition tax on the evaluations at purchase.

    The building part uses the registered evaluation without the aging factor.
    """
    params = config.property_tax
    land_part = land_evaluation(config) * clamp_pct(params.acquisition_land_reduction_rate) / HUNDRED
    raw_building = config.building_price * clamp_pct(params.building_evaluation_rate) / HUNDRED
    base = land_part + raw_building
    return (base * max(ZERO, params.acquisition_tax_rate) / HUNDRED).quantize(ONE_YEN, ROUND_HALF_UP)


def acquisition_tax_booking_year(config: Configuration) -> int:
    """Year the acquisition tax lands in; pulled into the horizon if needed."""
    return min(config.property_tax.acquisition_tax_timing.booking_year, max(1, config.horizon_years))


def acquisition_tax_for_year(config: Configuration, year: int) -> Decimal:
    """Acquisition tax booked in exactly one year, per the configured timing."""
    if year != acquisition_tax_booking_year(config):
        return ZERO
    return acquisition_tax(config)
