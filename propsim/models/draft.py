"""Raw, all-optional simulation input as gathered from a form or an import.

`None` marks a field the user has not filled in. Numeric fields where zero is
not a meaningful answer (ratios, rates, years) are also treated as missing
when non-positive; see `propsim.engine.defaults`.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from propsim.models.configuration import (
    AcquisitionTaxTiming,
    AgeBandedOccupancy,
    EventItem,
    FixedItem,
    OerPropertyType,
    RateItem,
    RepairEvent,
    StructureType,
    UsefulLifeMethod,
)


class VacancyKind(Enum):
    FIXED = "FIXED"
    CYCLE = "CYCLE"
    PROBABILITY = "PROBABILITY"


class ExpenseMode(Enum):
    SIMPLE = "SIMPLE"
    DETAILED = "DETAILED"


class TaxKind(Enum):
    INDIVIDUAL = "INDIVIDUAL"
    CORPORATE = "CORPORATE"


@dataclass(frozen=True)
class ConfigurationDraft:
    # Property
    price: Decimal | None = None
    building_ratio: Decimal | None = None
    structure: StructureType | None = None
    building_age: int | None = None
    unit_count: int | None = None
    horizon_years: int | None = None

    # Loan
    loan_amount: Decimal | None = None
    equity_ratio: Decimal | None = None
    interest_rate: Decimal | None = None
    loan_years: int | None = None

    # Income
    monthly_rent: Decimal | None = None
    rent_decline_rate: Decimal | None = None
    occupancy_rate: Decimal | None = None
    occupancy_bands: AgeBandedOccupancy | None = None
    vacancy_model: VacancyKind | None = None
    vacancy_cycle_years: int | None = None
    vacancy_cycle_months: Decimal | None = None
    vacancy_probability: Decimal | None = None
    vacancy_probability_months: Decimal | None = None

    # Operating expenses
    expense_mode: ExpenseMode | None = None
    expense_rate: Decimal | None = None
    oer_property_type: OerPropertyType | None = None
    oer_rate_items: tuple[RateItem, ...] = ()
    oer_fixed_items: tuple[FixedItem, ...] = ()
    oer_event_items: tuple[EventItem, ...] = ()
    leasing_enabled: bool = True
    leasing_months: Decimal | None = None
    leasing_tenancy_years: Decimal | None = None
    cleaning_visits_per_month: int | None = None
    repair_events: tuple[RepairEvent, ...] = ()

    # Acquisition costs (% rates)
    registration_rate: Decimal | None = None
    loan_fee_rate: Decimal | None = None
    fire_insurance_rate: Decimal | None = None
    water_contribution_rate: Decimal | None = None
    misc_cost_rate: Decimal | None = None

    # Property and acquisition tax
    land_evaluation_rate: Decimal | None = None
    building_evaluation_rate: Decimal | None = None
    land_reduction_rate: Decimal | None = None
    property_tax_rate: Decimal | None = None
    acquisition_tax_rate: Decimal | None = None
    acquisition_land_reduction_rate: Decimal | None = None
    acquisition_tax_timing: AcquisitionTaxTiming | None = None
    new_build_relief_enabled: bool = False
    new_build_relief_years: int | None = None
    new_build_relief_rate: Decimal | None = None

    # Depreciation
    equipment_split_enabled: bool = False
    equipment_ratio: Decimal | None = None
    equipment_useful_life: int | None = None
    useful_life_method: UsefulLifeMethod | None = None

    # Income tax
    tax_kind: TaxKind | None = None
    other_income: Decimal | None = None
    resident_tax_rate: Decimal | None = None
    corporate_tax_rate: Decimal | None = None
    corporate_reduced_rate: Decimal | None = None
    corporate_reduced_threshold: Decimal | None = None
    corporate_minimum_tax: Decimal | None = None

    # Stress scenario
    stress_enabled: bool = False
    shock_year: int | None = None
    shock_delta: Decimal | None = None
    rent_curve_enabled: bool = False
    rent_decline_early_rate: Decimal | None = None
    rent_decline_late_rate: Decimal | None = None
    rent_decline_switch_year: int | None = None
    occupancy_decline_enabled: bool = False
    occupancy_decline_start_year: int | None = None
    occupancy_decline_delta: Decimal | None = None

    # Exit
    exit_enabled: bool = False
    exit_year: int | None = None
    exit_cap_rate: Decimal | None = None
    exit_brokerage_rate: Decimal | None = None
    exit_brokerage_fixed: Decimal | None = None
    exit_other_cost_rate: Decimal | None = None
    exit_short_term_tax_rate: Decimal | None = None
    exit_long_term_tax_rate: Decimal | None = None
    exit_discount_rate: Decimal | None = None
    capitalize_acquisition_costs: bool = False
