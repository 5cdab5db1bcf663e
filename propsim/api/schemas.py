"""Pydantic schemas for API request/response models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from propsim.models.configuration import (
    MAX_LOAN_TERM_YEARS,
    AcquisitionTaxTiming,
    EventMode,
    OerBase,
    OerPropertyType,
    StructureType,
    UsefulLifeMethod,
)
from propsim.models.draft import ExpenseMode, TaxKind, VacancyKind
from propsim.models.manifest import AssumptionSource, Confidence


# ---- Request schemas ----

class RateItemSchema(BaseModel):
    label: str
    rate: Decimal
    base: OerBase = OerBase.GPR
    enabled: bool = True


class FixedItemSchema(BaseModel):
    label: str
    annual_amount: Decimal
    enabled: bool = True


class EventItemSchema(BaseModel):
    label: str
    amount: Decimal
    interval_years: int = Field(..., ge=1)
    start_year: int = 1
    mode: EventMode = EventMode.RESERVE
    enabled: bool = True


class RepairEventSchema(BaseModel):
    year: int = Field(..., ge=1)
    amount: Decimal
    label: str = ""


class OccupancyBandsSchema(BaseModel):
    years_1_2: Decimal
    years_3_10: Decimal
    years_11_20: Decimal
    years_21_30: Decimal
    years_31_40: Decimal


class DraftSchema(BaseModel):
    """Raw simulation input. Omitted fields are estimated server-side."""

    # Property
    price: Decimal | None = Field(None, description="Acquisition price (yen)")
    building_ratio: Decimal | None = None
    structure: StructureType | None = None
    building_age: int | None = Field(None, ge=0)
    unit_count: int | None = Field(None, ge=0)
    horizon_years: int | None = None

    # Loan
    loan_amount: Decimal | None = None
    equity_ratio: Decimal | None = None
    interest_rate: Decimal | None = None
    loan_years: int | None = Field(None, le=MAX_LOAN_TERM_YEARS)

    # Income
    monthly_rent: Decimal | None = Field(None, description="Full-occupancy monthly rent (yen)")
    rent_decline_rate: Decimal | None = None
    occupancy_rate: Decimal | None = None
    occupancy_bands: OccupancyBandsSchema | None = None
    vacancy_model: VacancyKind | None = None
    vacancy_cycle_years: int | None = None
    vacancy_cycle_months: Decimal | None = None
    vacancy_probability: Decimal | None = None
    vacancy_probability_months: Decimal | None = None

    # Operating expenses
    expense_mode: ExpenseMode | None = None
    expense_rate: Decimal | None = None
    oer_property_type: OerPropertyType | None = None
    oer_rate_items: list[RateItemSchema] = []
    oer_fixed_items: list[FixedItemSchema] = []
    oer_event_items: list[EventItemSchema] = []
    leasing_enabled: bool = True
    leasing_months: Decimal | None = None
    leasing_tenancy_years: Decimal | None = None
    cleaning_visits_per_month: int | None = None
    repair_events: list[RepairEventSchema] = []

    # Acquisition costs
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


class LocationRequest(BaseModel):
    address: str = Field(..., description="Japanese address string")


# ---- Response schemas ----

class AssumptionDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field_name: str
    value: Decimal | int | str
    source: AssumptionSource
    confidence: Confidence
    justification: str


class DefaultsResponse(BaseModel):
    draft: DraftSchema
    auto_filled: list[AssumptionDetailResponse]


class YearlyResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    gross_potential_rent: Decimal
    occupancy_rate: Decimal
    effective_income: Decimal
    operating_expense: Decimal
    repair_cost: Decimal
    property_tax: Decimal
    acquisition_tax: Decimal
    noi: Decimal
    interest_paid: Decimal
    principal_paid: Decimal
    debt_service: Decimal
    loan_balance: Decimal
    depreciation_body: Decimal
    depreciation_equipment: Decimal
    depreciation_total: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    cash_flow_pre_tax: Decimal
    cash_flow_post_tax: Decimal
    dscr: Decimal
    noi_yield: Decimal
    yield_gap: Decimal
    cash_on_cash_pre_tax: Decimal
    cash_on_cash_post_tax: Decimal
    principal_exceeds_depreciation: bool


class AcquisitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    building_price: Decimal
    land_price: Decimal
    equipment_price: Decimal
    registration_cost: Decimal
    loan_fee: Decimal
    fire_insurance: Decimal
    water_contribution: Decimal
    misc_cost: Decimal
    total_costs: Decimal
    acquisition_tax: Decimal
    loan_principal: Decimal
    equity_required: Decimal


class ExitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exit_year: int
    noi_at_exit: Decimal
    sale_price: Decimal
    transaction_costs: Decimal
    book_value: Decimal
    capital_gain: Decimal
    capital_gains_rate: Decimal
    capital_gains_tax: Decimal
    loan_payoff: Decimal
    net_proceeds: Decimal
    npv: Decimal
    irr: Decimal
    equity_multiple: Decimal


class ScenarioResponse(BaseModel):
    yearly: list[YearlyResultResponse]
    exit: ExitResponse | None = None
    dead_cross_year: int | None = None
    minimum_dscr: Decimal | None = None


class SimulationResponse(BaseModel):
    acquisition: AcquisitionResponse
    baseline: list[YearlyResultResponse]
    scenario: ScenarioResponse | None = None
    exit: ExitResponse | None = None
    dead_cross_year: int | None = None
    minimum_dscr: Decimal | None = None
    auto_filled: list[AssumptionDetailResponse] = []


class LocationResponse(BaseModel):
    address: str
    matched_address: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    warnings: list[str] = []
