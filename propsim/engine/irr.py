"""Return metrics on an equity cash-flow vector: NPV, IRR, equity multiple.

Flows are annual, flows[0] is the equity outlay at purchase (negative) and
the exit year's flow carries the net sale proceeds. IRR is solved with scipy.
"""

from decimal import Decimal, ROUND_HALF_UP

from scipy.optimize import brentq

ONE_YEN = Decimal("1")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")

# IRR search bracket as fractions: -50% .. +1000%
IRR_LOWER = -0.5
IRR_UPPER = 10.0


def compute_npv(discount_rate: Decimal, cash_flows: list[Decimal]) -> Decimal:
    """NPV in yen, flows[t] discounted by (1 + rate)^t with the rate in percent."""
    factor = 1 + discount_rate / 100
    if factor <= 0:
        return ZERO
    total = sum((cf / factor ** t for t, cf in enumerate(cash_flows)), ZERO)
    return total.quantize(ONE_YEN, ROUND_HALF_UP)


def _float_npv(rate: float, flows: list[float]) -> float:
    return sum(cf / (1 + rate) ** t for t, cf in enumerate(flows))


def compute_irr(cash_flows: list[Decimal]) -> Decimal:
    """IRR as a fraction (0.05 = 5%), or 0 when none exists in the bracket."""
    if len(cash_flows) < 2:
        return ZERO

    flows = [float(cf) for cf in cash_flows]
    try:
        irr = brentq(_float_npv, IRR_LOWER, IRR_UPPER, args=(flows,), xtol=1e-8, maxiter=1000)
    except ValueError:
        # No sign change, e.g. a deal that never pays back
        return ZERO
    return Decimal(str(irr)).quantize(FOUR_PLACES, ROUND_HALF_UP)


def compute_equity_multiple(total_cash_returned: Decimal, total_cash_invested: Decimal) -> Decimal:
    """Total cash back over equity put in."""
    if total_cash_invested <= 0:
        return ZERO
    return (total_cash_returned / total_cash_invested).quantize(FOUR_PLACES, ROUND_HALF_UP)
