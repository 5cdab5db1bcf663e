"""Up-front purchase economics: price split, closing costs, equity required."""

from decimal import Decimal, ROUND_HALF_UP

from propsim.engine.depreciation import component_prices
from propsim.engine.property_tax import acquisition_tax
from propsim.models.configuration import Configuration
from propsim.models.results import AcquisitionSummary

ONE_YEN = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _pct_of(amount: Decimal, rate: Decimal) -> Decimal:
    return (max(ZERO, amount) * max(ZERO, rate) / HUNDRED).quantize(ONE_YEN, ROUND_HALF_UP)


def compute_acquisition_summary(config: Configuration) -> AcquisitionSummary:
    """Closing costs and the cash needed at purchase.

    The acquisition tax is reported but not part of the equity required; it
    is paid out of operating cash flow in its booking year.
    """
    if config.price <= 0:
        return AcquisitionSummary()

    rates = config.acquisition_costs
    principal = max(ZERO, config.loan.principal)
    _, equipment = component_prices(config)

    registration = _pct_of(config.price, rates.registration)
    loan_fee = _pct_of(principal, rates.loan_fee)
    fire_insurance = _pct_of(config.building_price, rates.fire_insurance)
    water = _pct_of(config.price, rates.water_contribution)
    misc = _pct_of(config.price, rates.misc)
    total = registration + loan_fee + fire_insurance + water + misc

    return AcquisitionSummary(
        building_price=config.building_price,
        land_price=config.land_price,
        equipment_price=equipment,
        registration_cost=registration,
        loan_fee=loan_fee,
        fire_insurance=fire_insurance,
        water_contribution=water,
        misc_cost=misc,
        total_costs=total,
        acquisition_tax=acquisition_tax(config),
        loan_principal=principal,
        equity_required=config.price + total - principal,
    )
