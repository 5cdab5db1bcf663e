"""Fully-resolved simulation configuration.

One immutable record per run. Money is Decimal yen; rates are Decimal
percentages on a 0-100 scale. Mode toggles are tagged variants, so a
configuration cannot carry, say, cyclic vacancy parameters under a fixed
vacancy model. Collections are tuples to keep the record hashable.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class StructureType(Enum):
    RC = "RC"
    SRC = "SRC"
    S_HEAVY = "S_HEAVY"  # Heavy steel frame (> 4mm)
    S_LIGHT = "S_LIGHT"  # Light steel frame (<= 3mm)
    WOOD = "WOOD"


# Statutory useful life for residential use, in years
LEGAL_USEFUL_LIFE: dict[StructureType, int] = {
    StructureType.RC: 47,
    StructureType.SRC: 47,
    StructureType.S_HEAVY: 34,
    StructureType.S_LIGHT: 19,
    StructureType.WOOD: 22,
}


class UsefulLifeMethod(Enum):
    REMAINING = "remaining"
    SIMPLIFIED = "simplified"


class AcquisitionTaxTiming(Enum):
    YEAR_OF_PURCHASE = "year_of_purchase"
    FOLLOWING_YEAR = "following_year"

    @property
    def booking_year(self) -> int:
        return 1 if self is AcquisitionTaxTiming.YEAR_OF_PURCHASE else 2


def clamp_pct(value: Decimal, upper: Decimal = HUNDRED) -> Decimal:
    """Clamp a percentage into [0, upper]."""
    return max(ZERO, min(upper, value))


# ---------------------------------------------------------------------------
# Loan
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RateShock:
    """Permanent rate increase from `year` onward."""
    year: int
    delta: Decimal  # Percentage points


@dataclass(frozen=True)
class LoanTerms:
    principal: Decimal
    interest_rate: Decimal  # Annual %
    term_years: int
    rate_shock: RateShock | None = None

    def rate_for_year(self, year: int) -> Decimal:
        if self.rate_shock is not None and year >= self.rate_shock.year:
            return max(ZERO, self.interest_rate + self.rate_shock.delta)
        return self.interest_rate


# ---------------------------------------------------------------------------
# Income: occupancy, vacancy, rent decline
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlatOccupancy:
    rate: Decimal


@dataclass(frozen=True)
class AgeBandedOccupancy:
    """Occupancy by building age band (the form's detail mode)."""
    years_1_2: Decimal
    years_3_10: Decimal
    years_11_20: Decimal
    years_21_30: Decimal
    years_31_40: Decimal


OccupancyPolicy = FlatOccupancy | AgeBandedOccupancy


@dataclass(frozen=True)
class FixedVacancy:
    pass


@dataclass(frozen=True)
class CyclicVacancy:
    cycle_years: int
    vacancy_months: Decimal


@dataclass(frozen=True)
class ProbabilisticVacancy:
    probability: Decimal  # Annual %
    vacancy_months: Decimal


VacancyModel = FixedVacancy | CyclicVacancy | ProbabilisticVacancy


@dataclass(frozen=True)
class RentCurve:
    """Two-phase rent decline, each rate applied every 2 years."""
    early_rate: Decimal
    late_rate: Decimal
    switch_year: int


@dataclass(frozen=True)
class OccupancyDecline:
    start_year: int
    delta: Decimal  # Percentage points subtracted


# ---------------------------------------------------------------------------
# Operating expenses
# ---------------------------------------------------------------------------

class OerPropertyType(Enum):
    UNIT = "UNIT"  # Single condo unit
    WOOD_APARTMENT = "WOOD_APARTMENT"
    STEEL_APARTMENT = "STEEL_APARTMENT"
    RC_APARTMENT = "RC_APARTMENT"


class OerAgeBand(Enum):
    NEW = "NEW"  # <= 10 years
    MID = "MID"  # <= 20 years
    OLD = "OLD"


class OerBase(Enum):
    GPR = "GPR"
    EGI = "EGI"


class EventMode(Enum):
    RESERVE = "RESERVE"  # Levelized: amount / interval every year
    CASH = "CASH"  # Full amount in the occurrence year


@dataclass(frozen=True)
class RateItem:
    label: str
    rate: Decimal
    base: OerBase = OerBase.GPR
    enabled: bool = True


@dataclass(frozen=True)
class FixedItem:
    label: str
    annual_amount: Decimal
    enabled: bool = True


@dataclass(frozen=True)
class EventItem:
    label: str
    amount: Decimal
    interval_years: int
    start_year: int = 1
    mode: EventMode = EventMode.RESERVE
    enabled: bool = True


@dataclass(frozen=True)
class LeasingCost:
    """Turnover cost: advertising months paid per average tenancy."""
    marketing_months: Decimal
    average_tenancy_years: Decimal

    @property
    def rate(self) -> Decimal:
        if self.marketing_months <= 0 or self.average_tenancy_years <= 0:
            return ZERO
        return self.marketing_months / (self.average_tenancy_years * 12) * HUNDRED


@dataclass(frozen=True)
class CleaningPlan:
    """Common-area cleaning, priced from the unit-count x visits table."""
    unit_count: int
    visits_per_month: int


@dataclass(frozen=True)
class SimpleExpense:
    """Single OER on GPR. With a template the rate follows the building age."""
    rate: Decimal
    template: OerPropertyType | None = None


@dataclass(frozen=True)
class DetailedExpense:
    rate_items: tuple[RateItem, ...] = ()
    fixed_items: tuple[FixedItem, ...] = ()
    event_items: tuple[EventItem, ...] = ()
    leasing: LeasingCost | None = None
    cleaning: CleaningPlan | None = None


ExpensePolicy = SimpleExpense | DetailedExpense


@dataclass(frozen=True)
class RepairEvent:
    year: int
    amount: Decimal
    label: str = ""


# ---------------------------------------------------------------------------
# Acquisition, property tax, depreciation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AcquisitionCostRates:
    registration: Decimal = Decimal("1.2")  # % of price
    loan_fee: Decimal = Decimal("2.2")  # % of loan principal
    fire_insurance: Decimal = Decimal("0.4")  # % of building price
    water_contribution: Decimal = Decimal("0.2")  # % of price
    misc: Decimal = Decimal("0")  # % of price


@dataclass(frozen=True)
class NewBuildRelief:
    """Building taxable base reduced by `rate`% while the building is young."""
    years: int
    rate: Decimal


@dataclass(frozen=True)
class PropertyTaxParams:
    land_evaluation_rate: Decimal = Decimal("70")
    building_evaluation_rate: Decimal = Decimal("50")
    land_special_reduction_rate: Decimal = Decimal("16.67")  # Residential land 1/6
    property_tax_rate: Decimal = Decimal("1.7")  # Fixed asset 1.4 + city planning 0.3
    acquisition_tax_rate: Decimal = Decimal("3")
    acquisition_land_reduction_rate: Decimal = Decimal("50")
    new_build_relief: NewBuildRelief | None = None
    acquisition_tax_timing: AcquisitionTaxTiming = AcquisitionTaxTiming.FOLLOWING_YEAR


@dataclass(frozen=True)
class EquipmentSplit:
    ratio: Decimal  # % of building price
    useful_life: int


# ---------------------------------------------------------------------------
# Tax regime
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IndividualTax:
    other_income: Decimal = Decimal("0")  # Salary etc., after deductions
    resident_tax_rate: Decimal = Decimal("10")


@dataclass(frozen=True)
class CorporateTax:
    rate: Decimal = Decimal("23.2")
    minimum_tax: Decimal = Decimal("70000")  # Per-capita levy, charged every year
    reduced_rate: Decimal | None = Decimal("15")
    reduced_rate_threshold: Decimal = Decimal("8000000")


TaxRegime = IndividualTax | CorporateTax


# ---------------------------------------------------------------------------
# Stress scenario and exit
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StressScenario:
    interest_shock_year: int = 5
    interest_shock_delta: Decimal = Decimal("1")
    rent_curve: RentCurve | None = None
    occupancy_decline: OccupancyDecline | None = None

    @property
    def first_active_year(self) -> int:
        years = [self.interest_shock_year]
        if self.rent_curve is not None:
            years.append(1)
        if self.occupancy_decline is not None:
            years.append(self.occupancy_decline.start_year)
        return min(years)


@dataclass(frozen=True)
class ExitStrategy:
    year: int = 10
    cap_rate: Decimal = Decimal("7")
    brokerage_rate: Decimal = Decimal("3")
    brokerage_fixed: Decimal = Decimal("600000")
    other_cost_rate: Decimal = Decimal("1")
    short_term_tax_rate: Decimal = Decimal("39")
    long_term_tax_rate: Decimal = Decimal("20")
    discount_rate: Decimal = Decimal("4")
    capitalize_acquisition_costs: bool = False


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_HORIZON_YEARS = 35
MAX_HORIZON_YEARS = 40
MAX_LOAN_TERM_YEARS = 50


@dataclass(frozen=True)
class Configuration:
    # Property
    price: Decimal
    building_ratio: Decimal
    structure: StructureType
    building_age: int
    loan: LoanTerms

    # Income
    monthly_rent: Decimal
    rent_decline_rate: Decimal = Decimal("0")  # % per 2 years
    occupancy: OccupancyPolicy = field(default_factory=lambda: FlatOccupancy(Decimal("100")))
    vacancy: VacancyModel = field(default_factory=FixedVacancy)
    rent_curve: RentCurve | None = None
    occupancy_decline: OccupancyDecline | None = None
    unit_count: int = 0

    # Expenses
    expenses: ExpensePolicy = field(default_factory=lambda: SimpleExpense(Decimal("15")))
    repair_events: tuple[RepairEvent, ...] = ()

    # Acquisition, property tax, depreciation
    acquisition_costs: AcquisitionCostRates = field(default_factory=AcquisitionCostRates)
    property_tax: PropertyTaxParams = field(default_factory=PropertyTaxParams)
    equipment: EquipmentSplit | None = None
    useful_life_method: UsefulLifeMethod = UsefulLifeMethod.REMAINING

    # Tax
    tax_regime: TaxRegime = field(default_factory=IndividualTax)

    # Toggles
    stress: StressScenario | None = None
    exit: ExitStrategy | None = None

    horizon_years: int = DEFAULT_HORIZON_YEARS

    @property
    def building_price(self) -> Decimal:
        return (self.price * clamp_pct(self.building_ratio) / HUNDRED).quantize(Decimal("1"))

    @property
    def land_price(self) -> Decimal:
        return self.price - self.building_price

    @property
    def land_share(self) -> Decimal:
        """Land fraction of the price (0-1), used to limit loss offsets."""
        if self.price <= 0:
            return ZERO
        return self.land_price / self.price

    @property
    def is_empty(self) -> bool:
        """Price or rent not entered yet: the run yields all zeros."""
        return self.price <= 0 or self.monthly_rent <= 0

    def age_at_year(self, year: int) -> int:
        return self.building_age + max(0, year - 1)
