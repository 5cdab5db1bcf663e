from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class YearlyResult:
    year: int

    # Income
    gross_potential_rent: Decimal = Decimal("0")
    occupancy_rate: Decimal = Decimal("0")  # % actually applied
    effective_income: Decimal = Decimal("0")

    # Expenses
    operating_expense: Decimal = Decimal("0")
    repair_cost: Decimal = Decimal("0")
    property_tax: Decimal = Decimal("0")
    acquisition_tax: Decimal = Decimal("0")  # Booked once
    noi: Decimal = Decimal("0")

    # Debt
    interest_paid: Decimal = Decimal("0")
    principal_paid: Decimal = Decimal("0")
    debt_service: Decimal = Decimal("0")
    loan_balance: Decimal = Decimal("0")

    # Depreciation
    depreciation_body: Decimal = Decimal("0")
    depreciation_equipment: Decimal = Decimal("0")
    depreciation_total: Decimal = Decimal("0")

    # Tax
    taxable_income: Decimal = Decimal("0")  # Negative = loss
    income_tax: Decimal = Decimal("0")

    # Cash flow
    cash_flow_pre_tax: Decimal = Decimal("0")
    cash_flow_post_tax: Decimal = Decimal("0")

    # Ratios
    dscr: Decimal = Decimal("0")  # 0 once no debt service is due
    noi_yield: Decimal = Decimal("0")  # % of price plus acquisition costs
    yield_gap: Decimal = Decimal("0")  # NOI yield less the loan rate, points
    cash_on_cash_pre_tax: Decimal = Decimal("0")  # % of equity required
    cash_on_cash_post_tax: Decimal = Decimal("0")

    # Principal repaid exceeds the depreciation charge (phantom income)
    principal_exceeds_depreciation: bool = False


@dataclass(frozen=True)
class AcquisitionSummary:
    building_price: Decimal = Decimal("0")
    land_price: Decimal = Decimal("0")
    equipment_price: Decimal = Decimal("0")

    registration_cost: Decimal = Decimal("0")
    loan_fee: Decimal = Decimal("0")
    fire_insurance: Decimal = Decimal("0")
    water_contribution: Decimal = Decimal("0")
    misc_cost: Decimal = Decimal("0")
    total_costs: Decimal = Decimal("0")

    acquisition_tax: Decimal = Decimal("0")
    loan_principal: Decimal = Decimal("0")
    equity_required: Decimal = Decimal("0")  # Price + costs - loan


@dataclass(frozen=True)
class ExitSummary:
    exit_year: int = 0
    noi_at_exit: Decimal = Decimal("0")
    sale_price: Decimal = Decimal("0")
    transaction_costs: Decimal = Decimal("0")
    book_value: Decimal = Decimal("0")
    capital_gain: Decimal = Decimal("0")
    capital_gains_rate: Decimal = Decimal("0")
    capital_gains_tax: Decimal = Decimal("0")
    loan_payoff: Decimal = Decimal("0")
    net_proceeds: Decimal = Decimal("0")

    # Returns on the equity outlay
    npv: Decimal = Decimal("0")
    irr: Decimal = Decimal("0")
    equity_multiple: Decimal = Decimal("0")
    cash_flows: tuple[Decimal, ...] = ()


@dataclass(frozen=True)
class ScenarioResult:
    """Stressed run: independent loan and tax state from the baseline."""
    yearly: tuple[YearlyResult, ...] = ()
    exit: ExitSummary | None = None
    dead_cross_year: int | None = None
    minimum_dscr: Decimal | None = None  # None when no year carries debt


@dataclass(frozen=True)
class SimulationResult:
    acquisition: AcquisitionSummary = field(default_factory=AcquisitionSummary)
    baseline: tuple[YearlyResult, ...] = ()
    scenario: ScenarioResult | None = None
    exit: ExitSummary | None = None
    dead_cross_year: int | None = None
    minimum_dscr: Decimal | None = None  # None when no year carries debt

    @property
    def total_cash_flow_post_tax(self) -> Decimal:
        return sum((y.cash_flow_post_tax for y in self.baseline), Decimal("0"))
