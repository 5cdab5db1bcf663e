"""Property disposition (sale) at the exit year.

Sale price by direct capitalization of the exit-year NOI, transfer-income
tax on the gain over book value, and return metrics on the equity outlay.

Pure functions. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from propsim.engine.depreciation import total_depreciation_taken
from propsim.engine.irr import compute_equity_multiple, compute_irr, compute_npv
from propsim.models.configuration import Configuration, ExitStrategy
from propsim.models.results import AcquisitionSummary, ExitSummary, YearlyResult

ONE_YEN = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

SHORT_TERM_MAX_YEARS = 5  # Holding periods up to this are taxed at the short-term rate


def sale_price(noi: Decimal, cap_rate: Decimal) -> Decimal:
    """Direct capitalization; 0 when either input is not positive."""
    if cap_rate <= 0 or noi <= 0:
        return ZERO
    return (noi / (cap_rate / HUNDRED)).quantize(ONE_YEN, ROUND_HALF_UP)


def transaction_costs(price: Decimal, strategy: ExitStrategy) -> Decimal:
    """Brokerage (rate + fixed) plus other costs. No sale, no costs."""
    if price <= 0:
        return ZERO
    brokerage = price * max(ZERO, strategy.brokerage_rate) / HUNDRED + max(ZERO, strategy.brokerage_fixed)
    other = price * max(ZERO, strategy.other_cost_rate) / HUNDRED
    return (brokerage + other).quantize(ONE_YEN, ROUND_HALF_UP)


def equity_cash_flows(
    equity: Decimal, yearly: tuple[YearlyResult, ...], exit_year: int, net_proceeds: Decimal
) -> list[Decimal]:
    """[-equity, CF_1, ..., CF_exit + net proceeds]."""
    flows = [-equity] + [y.cash_flow_post_tax for y in yearly[:exit_year]]
    flows[-1] += net_proceeds
    return flows


def compute_disposition(
    config: Configuration,
    yearly: tuple[YearlyResult, ...],
    acquisition: AcquisitionSummary,
) -> ExitSummary | None:
    """Compute sale economics at the exit year, or None when exit is off.

    Args:
        config: Resolved configuration (exit strategy, price)
        yearly: The run's yearly results; the exit year is clamped to their span
        acquisition: Up-front costs and equity for basis and return metrics
    """
    strategy = config.exit
    if strategy is None or not yearly:
        return None

    exit_year = max(1, min(strategy.year, len(yearly)))
    row = yearly[exit_year - 1]

    price = sale_price(row.noi, strategy.cap_rate)
    costs = transaction_costs(price, strategy)

    book_value = config.price - total_depreciation_taken(config, exit_year)
    if strategy.capitalize_acquisition_costs:
        book_value += acquisition.total_costs + acquisition.acquisition_tax

    gain = price - costs - book_value
    if exit_year <= SHORT_TERM_MAX_YEARS:
        gains_rate = strategy.short_term_tax_rate
    else:
        gains_rate = strategy.long_term_tax_rate
    gains_tax = ZERO
    if gain > 0:
        gains_tax = (gain * max(ZERO, gains_rate) / HUNDRED).quantize(ONE_YEN, ROUND_HALF_UP)

    loan_payoff = row.loan_balance
    net_proceeds = price - costs - gains_tax - loan_payoff

    flows = equity_cash_flows(acquisition.equity_required, yearly, exit_year, net_proceeds)

    return ExitSummary(
        exit_year=exit_year,
        noi_at_exit=row.noi,
        sale_price=price,
        transaction_costs=costs,
        book_value=book_value,
        capital_gain=gain,
        capital_gains_rate=gains_rate,
        capital_gains_tax=gains_tax,
        loan_payoff=loan_payoff,
        net_proceeds=net_proceeds,
        npv=compute_npv(strategy.discount_rate, flows),
        irr=compute_irr(flows),
        equity_multiple=compute_equity_multiple(sum(flows[1:], ZERO), acquisition.equity_required),
        cash_flows=tuple(flows),
    )
