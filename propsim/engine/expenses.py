"""Operating expense engine: simple OER, detailed items, presets, repairs.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from propsim.models.configuration import (
    CleaningPlan,
    Configuration,
    DetailedExpense,
    EventItem,
    EventMode,
    LeasingCost,
    OerAgeBand,
    OerBase,
    OerPropertyType,
    RateItem,
    SimpleExpense,
    StructureType,
)

ONE_YEN = Decimal("1")
TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

# OER (% of GPR, excluding consumption tax) by property type and age band
OER_TEMPLATES: dict[OerPropertyType, dict[OerAgeBand, Decimal]] = {
    OerPropertyType.UNIT: {
        OerAgeBand.NEW: Decimal("16"), OerAgeBand.MID: Decimal("18"), OerAgeBand.OLD: Decimal("22"),
    },
    OerPropertyType.WOOD_APARTMENT: {
        OerAgeBand.NEW: Decimal("11"), OerAgeBand.MID: Decimal("16"), OerAgeBand.OLD: Decimal("24"),
    },
    OerPropertyType.STEEL_APARTMENT: {
        OerAgeBand.NEW: Decimal("14"), OerAgeBand.MID: Decimal("20"), OerAgeBand.OLD: Decimal("26"),
    },
    OerPropertyType.RC_APARTMENT: {
        OerAgeBand.NEW: Decimal("15"), OerAgeBand.MID: Decimal("21"), OerAgeBand.OLD: Decimal("29"),
    },
}

NEW_BAND_MAX_AGE = 10
MID_BAND_MAX_AGE = 20

# Per-visit common-area cleaning fee (yen) by unit-count band and visits per month.
# Only 9-16 unit buildings get an automatic line; smaller ones are owner-cleaned
# and larger ones are quoted individually.
CLEANING_FEES: dict[tuple[int, int], dict[int, Decimal]] = {
    (9, 12): {1: Decimal("10000"), 2: Decimal("9000"), 4: Decimal("8000")},
    (13, 16): {1: Decimal("12000"), 2: Decimal("11000"), 4: Decimal("10000")},
}

# Relative weights used to spread a target OER across preset line items
PRESET_WEIGHTS: dict[OerPropertyType, tuple[tuple[str, Decimal], ...]] = {
    OerPropertyType.UNIT: (
        ("PM fee", Decimal("30")),
        ("HOA management fee", Decimal("30")),
        ("HOA repair reserve", Decimal("35")),
        ("Insurance", Decimal("5")),
    ),
}
DEFAULT_PRESET_WEIGHTS: tuple[tuple[str, Decimal], ...] = (
    ("PM fee", Decimal("30")),
    ("Building management", Decimal("20")),
    ("Utilities", Decimal("10")),
    ("Insurance", Decimal("5")),
    ("Repair reserve", Decimal("35")),
)


def oer_age_band(age: int) -> OerAgeBand:
    if age <= NEW_BAND_MAX_AGE:
        return OerAgeBand.NEW
    if age <= MID_BAND_MAX_AGE:
        return OerAgeBand.MID
    return OerAgeBand.OLD


def oer_rate_for_age(property_type: OerPropertyType, age: int | Decimal) -> Decimal:
    """Template OER interpolated linearly between the band breakpoints.

    NEW applies at age 0, MID at 10, OLD from 20 onward.
    """
    template = OER_TEMPLATES[property_type]
    new_rate = template[OerAgeBand.NEW]
    mid_rate = template[OerAgeBand.MID]
    old_rate = template[OerAgeBand.OLD]
    age = max(Decimal("0"), Decimal(age))

    band = oer_age_band(age)
    if band is OerAgeBand.NEW:
        return new_rate + (mid_rate - new_rate) * age / NEW_BAND_MAX_AGE
    if band is OerAgeBand.MID:
        return mid_rate + (old_rate - mid_rate) * (age - NEW_BAND_MAX_AGE) / (MID_BAND_MAX_AGE - NEW_BAND_MAX_AGE)
    return old_rate


def infer_property_type(structure: StructureType, unit_count: int) -> OerPropertyType:
    if unit_count == 1:
        return OerPropertyType.UNIT
    if structure is StructureType.WOOD:
        return OerPropertyType.WOOD_APARTMENT
    if structure in (StructureType.S_HEAVY, StructureType.S_LIGHT):
        return OerPropertyType.STEEL_APARTMENT
    return OerPropertyType.RC_APARTMENT


def cleaning_annual_cost(plan: CleaningPlan | None) -> Decimal:
    """Annual cleaning cost from the unit-band x visit-frequency table.

    Visit counts between table columns use the next lower column's fee.
    Returns 0 outside the 9-16 unit range or with no visits.
    """
    if plan is None or plan.visits_per_month <= 0:
        return ZERO
    for (low, high), fees in CLEANING_FEES.items():
        if low <= plan.unit_count <= high:
            column = max(v for v in fees if v <= plan.visits_per_month)
            return fees[column] * plan.visits_per_month * 12
    return ZERO


def _event_amount(item: EventItem, year: int) -> Decimal:
    amount = max(ZERO, item.amount)
    interval = max(1, item.interval_years)
    start = max(1, item.start_year)
    if item.mode is EventMode.CASH:
        if year >= start and (year - start) % interval == 0:
            return amount
        return ZERO
    return amount / interval


def detailed_expenses(
    policy: DetailedExpense, year: int, gpr: Decimal, egi: Decimal
) -> dict[str, Decimal]:
    """Itemized detailed-mode operating expenses for a given year."""
    rate_total = ZERO
    for item in policy.rate_items:
        if not item.enabled:
            continue
        base = egi if item.base is OerBase.EGI else gpr
        rate_total += base * max(ZERO, item.rate) / HUNDRED

    fixed_total = sum(
        (max(ZERO, item.annual_amount) for item in policy.fixed_items if item.enabled), ZERO
    )
    event_total = sum(
        (_event_amount(item, year) for item in policy.event_items if item.enabled), ZERO
    )
    leasing = gpr * policy.leasing.rate / HUNDRED if policy.leasing is not None else ZERO
    cleaning = cleaning_annual_cost(policy.cleaning)

    rate_total = rate_total.quantize(ONE_YEN, ROUND_HALF_UP)
    fixed_total = fixed_total.quantize(ONE_YEN, ROUND_HALF_UP)
    event_total = event_total.quantize(ONE_YEN, ROUND_HALF_UP)
    leasing = leasing.quantize(ONE_YEN, ROUND_HALF_UP)
    cleaning = cleaning.quantize(ONE_YEN, ROUND_HALF_UP)

    return {
        "rate_items": rate_total,
        "fixed_items": fixed_total,
        "event_items": event_total,
        "leasing": leasing,
        "cleaning": cleaning,
        "total": rate_total + fixed_total + event_total + leasing + cleaning,
    }


def simple_expense_rate(policy: SimpleExpense, config: Configuration, year: int) -> Decimal:
    """Rate for the year: fixed, or following the template as the building ages."""
    if policy.template is None:
        return max(ZERO, policy.rate)
    return oer_rate_for_age(policy.template, config.age_at_year(year))


def operating_expense(config: Configuration, year: int, gpr: Decimal, egi: Decimal) -> Decimal:
    """Operating expense for a given year under the configured policy."""
    policy = config.expenses
    if isinstance(policy, DetailedExpense):
        return detailed_expenses(policy, year, gpr, egi)["total"]
    rate = simple_expense_rate(policy, config, year)
    return (gpr * rate / HUNDRED).quantize(ONE_YEN, ROUND_HALF_UP)


def repair_cost(config: Configuration, year: int) -> Decimal:
    """One-off repair events booked in their year."""
    return sum(
        (max(ZERO, event.amount) for event in config.repair_events if event.year == year), ZERO
    )


def build_detailed_preset(
    property_type: OerPropertyType,
    building_age: int,
    annual_gpr: Decimal,
    unit_count: int = 0,
    visits_per_month: int = 2,
    leasing: LeasingCost | None = None,
) -> DetailedExpense:
    """Detailed policy whose year-one total matches the simple template rate.

    Cleaning is carved out of the budget first, then leasing when it fits in
    half of what is left. The remainder is spread over GPR-based rate items.
    """
    target = oer_rate_for_age(property_type, building_age)
    remaining = target

    cleaning: CleaningPlan | None = None
    if annual_gpr > 0:
        plan = CleaningPlan(unit_count=unit_count, visits_per_month=visits_per_month)
        cleaning_rate = cleaning_annual_cost(plan) / annual_gpr * HUNDRED
        if ZERO < cleaning_rate <= remaining:
            cleaning = plan
            remaining -= cleaning_rate

    kept_leasing: LeasingCost | None = None
    if leasing is not None and ZERO < leasing.rate <= remaining / 2:
        kept_leasing = leasing
        remaining -= leasing.rate

    weights = PRESET_WEIGHTS.get(property_type, DEFAULT_PRESET_WEIGHTS)
    weight_total = sum((w for _, w in weights), ZERO)
    items = tuple(
        RateItem(label=label, rate=(remaining * weight / weight_total).quantize(TWO_PLACES, ROUND_HALF_UP))
        for label, weight in weights
    )

    return DetailedExpense(
        rate_items=items,
        fixed_items=(),
        event_items=(),
        leasing=kept_leasing,
        cleaning=cleaning,
    )
