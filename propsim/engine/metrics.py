"""Debt-coverage and return ratios for a projected year.

Coverage income is NOI less repairs, the amount a lender sees as
available for debt service. Yields and cash-on-cash are percentages.
"""

from decimal import Decimal, ROUND_HALF_UP

from propsim.models.results import YearlyResult

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def coverage_income(noi_amount: Decimal, repair_cost: Decimal) -> Decimal:
    return noi_amount - repair_cost


def dscr(coverage: Decimal, annual_debt_service: Decimal) -> Decimal:
    """Debt Service Coverage Ratio = coverage income / annual debt service."""
    if annual_debt_service <= 0:
        return ZERO
    return (coverage / annual_debt_service).quantize(FOUR_PLACES, ROUND_HALF_UP)


def noi_yield(coverage: Decimal, total_price: Decimal) -> Decimal:
    """Coverage income over price plus acquisition costs, in percent."""
    if total_price <= 0:
        return ZERO
    return (coverage / total_price * HUNDRED).quantize(TWO_PLACES, ROUND_HALF_UP)


def yield_gap(yield_pct: Decimal, interest_rate: Decimal) -> Decimal:
    """Spread of the NOI yield over the loan rate, in percentage points."""
    return (yield_pct - interest_rate).quantize(TWO_PLACES, ROUND_HALF_UP)


def cash_on_cash(cash_flow: Decimal, equity: Decimal) -> Decimal:
    """Annual cash flow / equity invested, in percent."""
    if equity <= 0:
        return ZERO
    return (cash_flow / equity * HUNDRED).quantize(TWO_PLACES, ROUND_HALF_UP)


def minimum_dscr(yearly: tuple[YearlyResult, ...]) -> Decimal | None:
    """Lowest DSCR over the years that carry debt service, None without debt."""
    ratios = [y.dscr for y in yearly if y.debt_service > 0]
    return min(ratios) if ratios else None
