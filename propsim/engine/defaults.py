"""Defaulting: fill ungathered draft fields, then resolve a Configuration.

Sits between input gathering and the pure engine:
    ConfigurationDraft -> (ConfigurationDraft, AssumptionManifest) -> Configuration

Every field is: user value if present, otherwise a structure/age estimate,
otherwise a standard default. Defaulting is idempotent.
"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from propsim.config import settings
from propsim.engine.expenses import build_detailed_preset, infer_property_type, oer_rate_for_age
from propsim.models.configuration import (
    DEFAULT_HORIZON_YEARS,
    LEGAL_USEFUL_LIFE,
    MAX_HORIZON_YEARS,
    MAX_LOAN_TERM_YEARS,
    AcquisitionCostRates,
    AcquisitionTaxTiming,
    CleaningPlan,
    Configuration,
    CorporateTax,
    CyclicVacancy,
    DetailedExpense,
    EquipmentSplit,
    ExitStrategy,
    FixedVacancy,
    FlatOccupancy,
    IndividualTax,
    LeasingCost,
    LoanTerms,
    NewBuildRelief,
    OccupancyDecline,
    ProbabilisticVacancy,
    PropertyTaxParams,
    RentCurve,
    SimpleExpense,
    StressScenario,
    StructureType,
    UsefulLifeMethod,
    clamp_pct,
)
from propsim.models.draft import ConfigurationDraft, ExpenseMode, TaxKind, VacancyKind
from propsim.models.manifest import AssumptionDetail, AssumptionManifest, AssumptionSource, Confidence

ONE_YEN = Decimal("1")
TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Building share of the price by structure, keyed on the upper age of each band
BUILDING_RATIO_TABLE: dict[StructureType, tuple[tuple[int | None, Decimal], ...]] = {
    StructureType.RC: ((5, Decimal("70")), (15, Decimal("60")), (25, Decimal("50")), (35, Decimal("40")), (None, Decimal("30"))),
    StructureType.SRC: ((5, Decimal("70")), (15, Decimal("60")), (25, Decimal("50")), (35, Decimal("40")), (None, Decimal("30"))),
    StructureType.S_HEAVY: ((5, Decimal("65")), (15, Decimal("55")), (25, Decimal("45")), (35, Decimal("35")), (None, Decimal("25"))),
    StructureType.S_LIGHT: ((5, Decimal("55")), (15, Decimal("45")), (25, Decimal("35")), (35, Decimal("25")), (None, Decimal("15"))),
    StructureType.WOOD: ((5, Decimal("50")), (15, Decimal("40")), (25, Decimal("30")), (35, Decimal("20")), (None, Decimal("10"))),
}

INTEREST_RATE_TABLE: dict[StructureType, Decimal] = {
    StructureType.RC: Decimal("1.6"),
    StructureType.SRC: Decimal("1.6"),
    StructureType.S_HEAVY: Decimal("1.8"),
    StructureType.S_LIGHT: Decimal("2.0"),
    StructureType.WOOD: Decimal("2.2"),
}

# Years lenders commonly allow beyond the remaining legal life
LOAN_DURATION_BONUS: dict[StructureType, int] = {
    StructureType.RC: 8,
    StructureType.SRC: 8,
    StructureType.S_HEAVY: 10,
    StructureType.S_LIGHT: 12,
    StructureType.WOOD: 15,
}
MIN_LOAN_YEARS = 10
MAX_LOAN_YEARS = 35

DEFAULT_EQUITY_RATIO = Decimal("5")

# Fields where zero is a meaningful answer: only None counts as missing
ZERO_ALLOWED = frozenset({
    "building_age",
    "unit_count",
    "rent_decline_rate",
    "misc_cost_rate",
    "other_income",
})


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------

def suggest_building_ratio(structure: StructureType, building_age: int) -> Decimal:
    age = max(0, building_age)
    for max_age, ratio in BUILDING_RATIO_TABLE[structure]:
        if max_age is None or age <= max_age:
            return ratio
    return BUILDING_RATIO_TABLE[structure][-1][1]


def suggest_interest_rate(structure: StructureType) -> Decimal:
    return INTEREST_RATE_TABLE[structure]


def suggest_loan_years(structure: StructureType, building_age: int) -> int:
    """Remaining legal life plus the lender bonus, within 10..35 years."""
    age = max(0, building_age)
    remaining = max(0, LEGAL_USEFUL_LIFE[structure] - age)
    optimistic = remaining + LOAN_DURATION_BONUS[structure]
    if structure is StructureType.WOOD and age <= 10:
        optimistic = max(optimistic, MAX_LOAN_YEARS)
    return min(MAX_LOAN_YEARS, max(MIN_LOAN_YEARS, optimistic))


def suggest_occupancy_rate(building_age: int) -> Decimal:
    age = max(0, building_age)
    if age <= 10:
        return Decimal("95")
    if age <= 20:
        return Decimal("90")
    if age <= 30:
        return Decimal("85")
    return Decimal("80")


def suggest_new_build_relief_years(structure: StructureType) -> int:
    # Mid/high-rise fireproof buildings get the longer relief window
    return 5 if structure in (StructureType.RC, StructureType.SRC) else 3


# ---------------------------------------------------------------------------
# Draft defaulting
# ---------------------------------------------------------------------------

def _is_missing(name: str, value) -> bool:
    if value is None:
        return True
    if name in ZERO_ALLOWED or isinstance(value, (bool, str)) or not isinstance(value, (int, Decimal)):
        return False
    return value <= 0


class _Filler:
    """Collects auto-filled values and their manifest entries."""

    def __init__(self, draft: ConfigurationDraft):
        self.draft = draft
        self.updates: dict[str, object] = {}
        self.details: dict[str, AssumptionDetail] = {}

    def current(self, name: str):
        return self.updates.get(name, getattr(self.draft, name))

    def missing(self, name: str) -> bool:
        return _is_missing(name, getattr(self.draft, name))

    def fill(
        self,
        name: str,
        value,
        source: AssumptionSource,
        confidence: Confidence,
        justification: str,
    ) -> None:
        if value is None or not self.missing(name):
            return
        if value == getattr(self.draft, name):
            return
        self.updates[name] = value
        detail_value = value.value if isinstance(value, Enum) else value
        self.details[name] = AssumptionDetail(
            field_name=name,
            value=detail_value,
            source=source,
            confidence=confidence,
            justification=justification,
        )

    def default(self, name: str, value, justification: str) -> None:
        self.fill(name, value, AssumptionSource.DEFAULT, Confidence.HIGH, justification)

    def estimate(self, name: str, value, justification: str) -> None:
        self.fill(name, value, AssumptionSource.ESTIMATED, Confidence.MEDIUM, justification)


def apply_estimated_defaults_with_manifest(
    draft: ConfigurationDraft,
) -> tuple[ConfigurationDraft, AssumptionManifest]:
    """Fill every missing field and report what was filled.

    Returns (defaulted draft, AssumptionManifest).
    """
    f = _Filler(draft)
    structure = draft.structure
    age = draft.building_age
    price = draft.price or ZERO

    # ------------------------------------------------------------------
    # Property
    # ------------------------------------------------------------------
    if structure is not None:
        f.estimate(
            "building_ratio", suggest_building_ratio(structure, age or 0),
            f"{structure.value} aged {age or 0}y: typical building share of price",
        )
    f.default(
        "horizon_years", settings.default_horizon_years,
        f"{settings.default_horizon_years}-year long-hold projection",
    )

    # ------------------------------------------------------------------
    # Loan
    # ------------------------------------------------------------------
    if price > 0:
        if f.missing("equity_ratio"):
            if draft.loan_amount is not None:
                loan_guess = draft.loan_amount
                just = "Implied by the entered loan amount"
            else:
                loan_guess = (price * (1 - DEFAULT_EQUITY_RATIO / HUNDRED)).quantize(ONE_YEN, ROUND_HALF_UP)
                just = f"{DEFAULT_EQUITY_RATIO}% down payment"
            equity = clamp_pct((price - loan_guess) / price * HUNDRED).quantize(TWO_PLACES, ROUND_HALF_UP)
            f.estimate("equity_ratio", equity, just)
        equity = f.current("equity_ratio")
        if equity is None:
            equity = DEFAULT_EQUITY_RATIO
        loan = max(ZERO, (price * (1 - equity / HUNDRED)).quantize(ONE_YEN, ROUND_HALF_UP))
        f.estimate("loan_amount", loan, f"Price less {equity}% equity")

    if structure is not None:
        f.estimate(
            "interest_rate", suggest_interest_rate(structure),
            f"Typical investment loan rate for {structure.value}",
        )
        if age is not None:
            f.estimate(
                "loan_years", suggest_loan_years(structure, age),
                f"Remaining legal life ({LEGAL_USEFUL_LIFE[structure]}y - {age}y) plus lender allowance",
            )

    # ------------------------------------------------------------------
    # Income
    # ------------------------------------------------------------------
    if age is not None:
        f.estimate("occupancy_rate", suggest_occupancy_rate(age), f"Typical occupancy at {age}y")
    f.default("rent_decline_rate", Decimal("0.5"), "0.5% rent decline every 2 years")
    f.default("vacancy_model", VacancyKind.FIXED, "No turnover vacancy model")
    f.default("vacancy_cycle_years", 4, "Turnover every 4 years")
    f.default("vacancy_cycle_months", Decimal("3"), "3 months to re-let")
    f.default("vacancy_probability", Decimal("20"), "20% annual turnover probability")
    f.default("vacancy_probability_months", Decimal("2"), "2 months to re-let")

    # ------------------------------------------------------------------
    # Operating expenses
    # ------------------------------------------------------------------
    f.default("unit_count", 0, "Unit count unknown")
    f.default("expense_mode", ExpenseMode.SIMPLE, "Single OER on gross potential rent")
    property_type = draft.oer_property_type
    if property_type is None and structure is not None:
        property_type = infer_property_type(structure, draft.unit_count or 0)
    if property_type is not None:
        rate = oer_rate_for_age(property_type, age or 0).quantize(TWO_PLACES, ROUND_HALF_UP)
        f.estimate(
            "expense_rate", rate,
            f"OER template {property_type.value} at {age or 0}y",
        )
    f.default("leasing_months", Decimal("2"), "2 months of advertising per turnover")
    f.default("leasing_tenancy_years", Decimal("2"), "Average 2-year tenancy")
    f.default("cleaning_visits_per_month", 2, "Common-area cleaning twice a month")

    # ------------------------------------------------------------------
    # Acquisition costs
    # ------------------------------------------------------------------
    f.default("registration_rate", Decimal("1.2"), "Registration and judicial scrivener, 1.2% of price")
    f.default("loan_fee_rate", Decimal("2.2"), "Bank arrangement fee, 2.2% of loan")
    f.default("fire_insurance_rate", Decimal("0.4"), "Fire insurance, 0.4% of building price")
    f.default("water_contribution_rate", Decimal("0.2"), "Water utility contribution, 0.2% of price")
    f.default("misc_cost_rate", ZERO, "No miscellaneous costs")

    # ------------------------------------------------------------------
    # Property and acquisition tax
    # ------------------------------------------------------------------
    f.default("land_evaluation_rate", Decimal("70"), "Land assessed at 70% of price")
    f.default("building_evaluation_rate", Decimal("50"), "Building assessed at 50% of price")
    f.default("land_reduction_rate", Decimal("16.67"), "Small residential land special measure (1/6)")
    f.default("property_tax_rate", Decimal("1.7"), "Fixed asset tax 1.4% + city planning tax 0.3%")
    f.default("acquisition_tax_rate", Decimal("3"), "Residential acquisition tax rate 3%")
    f.default("acquisition_land_reduction_rate", Decimal("50"), "Residential land taxed on half its evaluation")
    f.default(
        "acquisition_tax_timing", AcquisitionTaxTiming.FOLLOWING_YEAR,
        "Prefectural notice arrives the year after purchase",
    )
    if structure is not None:
        f.estimate(
            "new_build_relief_years", suggest_new_build_relief_years(structure),
            f"New-build relief period for {structure.value}",
        )
    f.default("new_build_relief_rate", Decimal("50"), "New-build relief halves the building tax")

    # ------------------------------------------------------------------
    # Depreciation
    # ------------------------------------------------------------------
    f.default("equipment_ratio", Decimal("20"), "Equipment 20% of building price")
    f.default("equipment_useful_life", 15, "Building equipment useful life 15 years")
    f.default("useful_life_method", UsefulLifeMethod.REMAINING, "Remaining legal life")

    # ------------------------------------------------------------------
    # Income tax
    # ------------------------------------------------------------------
    f.default("tax_kind", TaxKind.INDIVIDUAL, "Individual investor")
    f.default("resident_tax_rate", Decimal("10"), "Flat 10% resident tax")
    f.default("corporate_tax_rate", Decimal("23.2"), "Standard corporate tax rate")
    f.default("corporate_reduced_rate", Decimal("15"), "SME reduced rate")
    f.default("corporate_reduced_threshold", Decimal("8000000"), "SME reduced rate on the first 8M yen")
    f.default("corporate_minimum_tax", Decimal("70000"), "Per-capita levy charged even at a loss")

    # ------------------------------------------------------------------
    # Stress scenario
    # ------------------------------------------------------------------
    f.default("shock_year", 5, "Rate shock from year 5")
    f.default("shock_delta", Decimal("1"), "+1.0pt rate shock")
    f.default("rent_decline_early_rate", Decimal("1.5"), "1.5% per 2 years in the early phase")
    f.default("rent_decline_late_rate", Decimal("0.5"), "0.5% per 2 years in the late phase")
    f.default("rent_decline_switch_year", 10, "Rent curve switches at year 10")
    f.default("occupancy_decline_start_year", 10, "Occupancy decline from year 10")
    f.default("occupancy_decline_delta", Decimal("5"), "-5pt occupancy")

    # ------------------------------------------------------------------
    # Exit
    # ------------------------------------------------------------------
    f.default("exit_year", 10, "Sale in year 10")
    f.default("exit_cap_rate", Decimal("7"), "Exit cap rate 7%")
    f.default("exit_brokerage_rate", Decimal("3"), "Brokerage 3% + 600,000 yen")
    f.default("exit_brokerage_fixed", Decimal("600000"), "Brokerage 3% + 600,000 yen")
    f.default("exit_other_cost_rate", Decimal("1"), "Other sale costs 1%")
    f.default("exit_short_term_tax_rate", Decimal("39"), "Short-term transfer income tax (<= 5 years)")
    f.default("exit_long_term_tax_rate", Decimal("20"), "Long-term transfer income tax")
    f.default("exit_discount_rate", Decimal("4"), "4% discount rate for NPV")

    return replace(draft, **f.updates), AssumptionManifest(details=f.details)


def apply_estimated_defaults(draft: ConfigurationDraft) -> ConfigurationDraft:
    defaulted, _ = apply_estimated_defaults_with_manifest(draft)
    return defaulted


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def _dec(value: Decimal | None, fallback: Decimal = ZERO) -> Decimal:
    return fallback if value is None else Decimal(value)


def _nonneg(value: Decimal | None) -> Decimal:
    return max(ZERO, _dec(value))


def _year(value: int | None, fallback: int = 1, ceiling: int | None = None) -> int:
    years = max(1, fallback if value is None else int(value))
    if ceiling is not None:
        years = min(ceiling, years)
    return years


def build_configuration(draft: ConfigurationDraft) -> Configuration:
    """Resolve a draft into a clamped, fully-typed Configuration.

    Defaults are applied first; anything still missing (price, rent,
    structure) degrades to zero or RC so the engine never raises.
    """
    d = apply_estimated_defaults(draft)
    structure = d.structure or StructureType.RC
    age = max(0, d.building_age or 0)
    units = max(0, d.unit_count or 0)
    price = _nonneg(d.price)
    monthly_rent = _nonneg(d.monthly_rent)

    loan = LoanTerms(
        principal=_nonneg(d.loan_amount),
        interest_rate=_nonneg(d.interest_rate),
        term_years=_year(d.loan_years, MIN_LOAN_YEARS, MAX_LOAN_TERM_YEARS),
    )

    # Occupancy
    occupancy = d.occupancy_bands or FlatOccupancy(clamp_pct(_dec(d.occupancy_rate, HUNDRED)))

    if d.vacancy_model is VacancyKind.CYCLE:
        vacancy = CyclicVacancy(
            cycle_years=_year(d.vacancy_cycle_years, 4),
            vacancy_months=min(Decimal("12"), _nonneg(d.vacancy_cycle_months)),
        )
    elif d.vacancy_model is VacancyKind.PROBABILITY:
        vacancy = ProbabilisticVacancy(
            probability=clamp_pct(_dec(d.vacancy_probability)),
            vacancy_months=min(Decimal("12"), _nonneg(d.vacancy_probability_months)),
        )
    else:
        vacancy = FixedVacancy()

    # Operating expenses
    property_type = d.oer_property_type or infer_property_type(structure, units)
    leasing = None
    if d.leasing_enabled:
        leasing = LeasingCost(
            marketing_months=_nonneg(d.leasing_months),
            average_tenancy_years=_nonneg(d.leasing_tenancy_years),
        )
    visits = max(0, d.cleaning_visits_per_month or 0)

    if d.expense_mode is ExpenseMode.DETAILED:
        if d.oer_rate_items or d.oer_fixed_items or d.oer_event_items:
            expenses = DetailedExpense(
                rate_items=d.oer_rate_items,
                fixed_items=d.oer_fixed_items,
                event_items=d.oer_event_items,
                leasing=leasing,
                cleaning=CleaningPlan(unit_count=units, visits_per_month=visits),
            )
        else:
            expenses = build_detailed_preset(
                property_type, age, monthly_rent * 12,
                unit_count=units, visits_per_month=visits, leasing=leasing,
            )
    else:
        rate = _nonneg(d.expense_rate)
        # A rate left at the template suggestion keeps following the template as the building ages
        template_rate = oer_rate_for_age(property_type, age)
        template = property_type if abs(rate - template_rate) < TWO_PLACES else None
        expenses = SimpleExpense(rate=rate, template=template)

    relief = None
    if d.new_build_relief_enabled:
        relief = NewBuildRelief(
            years=max(0, d.new_build_relief_years or 0),
            rate=clamp_pct(_dec(d.new_build_relief_rate)),
        )
    property_tax = PropertyTaxParams(
        land_evaluation_rate=clamp_pct(_dec(d.land_evaluation_rate)),
        building_evaluation_rate=clamp_pct(_dec(d.building_evaluation_rate)),
        land_special_reduction_rate=clamp_pct(_dec(d.land_reduction_rate)),
        property_tax_rate=_nonneg(d.property_tax_rate),
        acquisition_tax_rate=_nonneg(d.acquisition_tax_rate),
        acquisition_land_reduction_rate=clamp_pct(_dec(d.acquisition_land_reduction_rate)),
        new_build_relief=relief,
        acquisition_tax_timing=d.acquisition_tax_timing or AcquisitionTaxTiming.FOLLOWING_YEAR,
    )

    equipment = None
    if d.equipment_split_enabled:
        equipment = EquipmentSplit(
            ratio=clamp_pct(_dec(d.equipment_ratio)),
            useful_life=_year(d.equipment_useful_life, 15),
        )

    if d.tax_kind is TaxKind.CORPORATE:
        tax_regime = CorporateTax(
            rate=_nonneg(d.corporate_tax_rate),
            minimum_tax=_nonneg(d.corporate_minimum_tax),
            reduced_rate=None if d.corporate_reduced_rate is None else _nonneg(d.corporate_reduced_rate),
            reduced_rate_threshold=_nonneg(d.corporate_reduced_threshold),
        )
    else:
        tax_regime = IndividualTax(
            other_income=_nonneg(d.other_income),
            resident_tax_rate=clamp_pct(_dec(d.resident_tax_rate, Decimal("10"))),
        )

    stress = None
    if d.stress_enabled:
        stress = StressScenario(
            interest_shock_year=_year(d.shock_year, 5),
            interest_shock_delta=_dec(d.shock_delta),
            rent_curve=RentCurve(
                early_rate=clamp_pct(_dec(d.rent_decline_early_rate)),
                late_rate=clamp_pct(_dec(d.rent_decline_late_rate)),
                switch_year=_year(d.rent_decline_switch_year, 10),
            ) if d.rent_curve_enabled else None,
            occupancy_decline=OccupancyDecline(
                start_year=_year(d.occupancy_decline_start_year, 10),
                delta=clamp_pct(_dec(d.occupancy_decline_delta)),
            ) if d.occupancy_decline_enabled else None,
        )

    exit_strategy = None
    if d.exit_enabled:
        exit_strategy = ExitStrategy(
            year=_year(d.exit_year, 10),
            cap_rate=_nonneg(d.exit_cap_rate),
            brokerage_rate=_nonneg(d.exit_brokerage_rate),
            brokerage_fixed=_nonneg(d.exit_brokerage_fixed),
            other_cost_rate=_nonneg(d.exit_other_cost_rate),
            short_term_tax_rate=clamp_pct(_dec(d.exit_short_term_tax_rate)),
            long_term_tax_rate=clamp_pct(_dec(d.exit_long_term_tax_rate)),
            discount_rate=_nonneg(d.exit_discount_rate),
            capitalize_acquisition_costs=d.capitalize_acquisition_costs,
        )

    return Configuration(
        price=price,
        building_ratio=clamp_pct(_dec(d.building_ratio)),
        structure=structure,
        building_age=age,
        loan=loan,
        monthly_rent=monthly_rent,
        rent_decline_rate=clamp_pct(_dec(d.rent_decline_rate)),
        occupancy=occupancy,
        vacancy=vacancy,
        unit_count=units,
        expenses=expenses,
        repair_events=d.repair_events,
        acquisition_costs=AcquisitionCostRates(
            registration=_nonneg(d.registration_rate),
            loan_fee=_nonneg(d.loan_fee_rate),
            fire_insurance=_nonneg(d.fire_insurance_rate),
            water_contribution=_nonneg(d.water_contribution_rate),
            misc=_nonneg(d.misc_cost_rate),
        ),
        property_tax=property_tax,
        equipment=equipment,
        useful_life_method=d.useful_life_method or UsefulLifeMethod.REMAINING,
        tax_regime=tax_regime,
        stress=stress,
        exit=exit_strategy,
        horizon_years=max(1, min(MAX_HORIZON_YEARS, d.horizon_years or DEFAULT_HORIZON_YEARS)),
    )
