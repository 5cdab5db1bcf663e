"""Rental income: gross potential rent, occupancy, effective income.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from propsim.models.configuration import (
    AgeBandedOccupancy,
    Configuration,
    CyclicVacancy,
    ProbabilisticVacancy,
    RentCurve,
    clamp_pct,
)

ONE_YEN = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def rent_decline_factor(
    year: int, decline_rate: Decimal, curve: RentCurve | None = None
) -> Decimal:
    """Rent falls by `decline_rate`% every 2 years; year 1 and 2 share a level.

    With a RentCurve the early rate applies up to the switch year and the
    late rate after it.
    """
    if curve is None:
        step = 1 - clamp_pct(decline_rate) / HUNDRED
        return _steps(step, (year - 1) // 2)

    early = 1 - clamp_pct(curve.early_rate) / HUNDRED
    late = 1 - clamp_pct(curve.late_rate) / HUNDRED
    switch = max(1, curve.switch_year)
    early_steps = (min(year, switch) - 1) // 2
    late_steps = max(0, year - switch) // 2
    return _steps(early, early_steps) * _steps(late, late_steps)


def _steps(base: Decimal, n: int) -> Decimal:
    # Decimal("0") ** 0 is an InvalidOperation
    if n <= 0:
        return Decimal("1")
    return base ** n


def gross_potential_rent(config: Configuration, year: int) -> Decimal:
    """Full-occupancy annual rent for a given year (1-indexed)."""
    if config.monthly_rent <= 0:
        return ZERO
    annual = config.monthly_rent * 12
    factor = rent_decline_factor(year, config.rent_decline_rate, config.rent_curve)
    return (annual * factor).quantize(ONE_YEN, ROUND_HALF_UP)


def base_occupancy(config: Configuration, year: int) -> Decimal:
    """Occupancy % before scenario decline and vacancy adjustments."""
    policy = config.occupancy
    if not isinstance(policy, AgeBandedOccupancy):
        return policy.rate

    age = config.age_at_year(year)
    if age <= 2:
        return policy.years_1_2
    if age <= 10:
        return policy.years_3_10
    if age <= 20:
        return policy.years_11_20
    if age <= 30:
        return policy.years_21_30
    return policy.years_31_40


def vacancy_loss(config: Configuration, year: int) -> Decimal:
    """Fraction (0-1) of the year lost to turnover vacancy."""
    model = config.vacancy
    if isinstance(model, CyclicVacancy):
        cycle = max(1, model.cycle_years)
        if year % cycle == 0:
            return min(Decimal("1"), max(ZERO, model.vacancy_months) / 12)
        return ZERO
    if isinstance(model, ProbabilisticVacancy):
        # Expected loss, not a random draw
        probability = clamp_pct(model.probability) / HUNDRED
        return min(Decimal("1"), probability * max(ZERO, model.vacancy_months) / 12)
    return ZERO


def occupancy_rate(config: Configuration, year: int) -> Decimal:
    """Resolved occupancy % for the year, always within 0..100."""
    occupancy = base_occupancy(config, year)
    decline = config.occupancy_decline
    if decline is not None and year >= decline.start_year:
        occupancy = max(ZERO, occupancy - decline.delta)
    occupancy = occupancy * (1 - vacancy_loss(config, year))
    return clamp_pct(occupancy)


def effective_income(config: Configuration, year: int) -> Decimal:
    """EGI = GPR x occupancy. Never exceeds GPR."""
    gpr = gross_potential_rent(config, year)
    return (gpr * occupancy_rate(config, year) / HUNDRED).quantize(ONE_YEN, ROUND_HALF_UP)
