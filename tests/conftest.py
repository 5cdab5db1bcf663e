"""Canonical test fixtures used across all engine tests.

Fixture: 100M yen new RC apartment, 60% building, 500K/month rent at 95%
occupancy, 95M loan at 1.6% over 30 years, RC template OER.
Investor: individual with no other income.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from propsim.models.configuration import (
    Configuration,
    ExitStrategy,
    FlatOccupancy,
    IndividualTax,
    LoanTerms,
    OccupancyDecline,
    OerPropertyType,
    RentCurve,
    SimpleExpense,
    StressScenario,
    StructureType,
)


@pytest.fixture
def canonical_config() -> Configuration:
    """100M RC new build with standard assumptions."""
    return Configuration(
        price=Decimal("100000000"),
        building_ratio=Decimal("60"),
        structure=StructureType.RC,
        building_age=0,
        loan=LoanTerms(
            principal=Decimal("95000000"),
            interest_rate=Decimal("1.6"),
            term_years=30,
        ),
        monthly_rent=Decimal("500000"),
        occupancy=FlatOccupancy(Decimal("95")),
        expenses=SimpleExpense(Decimal("15"), template=OerPropertyType.RC_APARTMENT),
        tax_regime=IndividualTax(other_income=Decimal("0")),
    )


@pytest.fixture
def stressed_config(canonical_config) -> Configuration:
    """Canonical deal with all three stress levers on."""
    return replace(
        canonical_config,
        stress=StressScenario(
            interest_shock_year=5,
            interest_shock_delta=Decimal("1"),
            rent_curve=RentCurve(Decimal("1.5"), Decimal("0.5"), 10),
            occupancy_decline=OccupancyDecline(start_year=10, delta=Decimal("5")),
        ),
    )


@pytest.fixture
def exit_config(canonical_config) -> Configuration:
    """Canonical deal sold in year 10 at a 7% cap."""
    return replace(canonical_config, exit=ExitStrategy())


@pytest.fixture
def wood_config() -> Configuration:
    """Older wooden apartment: short remaining life, high OER."""
    return Configuration(
        price=Decimal("30000000"),
        building_ratio=Decimal("30"),
        structure=StructureType.WOOD,
        building_age=25,
        loan=LoanTerms(
            principal=Decimal("27000000"),
            interest_rate=Decimal("2.2"),
            term_years=15,
        ),
        monthly_rent=Decimal("250000"),
        unit_count=6,
        occupancy=FlatOccupancy(Decimal("85")),
        expenses=SimpleExpense(Decimal("24")),
    )
