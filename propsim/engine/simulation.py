"""Simulation orchestrator: composes all engine sub-modules into a full run.

Pure computation. No I/O. Configuration in, SimulationResult out.
"""

import logging
from decimal import Decimal
from functools import lru_cache

from propsim.config import settings
from propsim.models.configuration import MAX_HORIZON_YEARS, Configuration
from propsim.models.results import ScenarioResult, SimulationResult, YearlyResult

from propsim.engine.acquisition import compute_acquisition_summary
from propsim.engine.debt import amortization_schedule, yearly_debt_summary
from propsim.engine.income import effective_income, gross_potential_rent, occupancy_rate
from propsim.engine.expenses import operating_expense, repair_cost
from propsim.engine.depreciation import depreciation_schedule
from propsim.engine.property_tax import acquisition_tax_for_year, property_tax
from propsim.engine.tax import income_tax, taxable_rental_income
from propsim.engine.disposition import compute_disposition
from propsim.engine.scenario import derive_stressed_configuration
from propsim.engine.metrics import cash_on_cash, coverage_income, dscr, minimum_dscr, noi_yield, yield_gap

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def horizon_years(config: Configuration) -> int:
    return max(1, min(MAX_HORIZON_YEARS, config.horizon_years))


def find_dead_cross_year(yearly: tuple[YearlyResult, ...]) -> int | None:
    """First year whose post-tax cash flow turns non-positive after a positive year."""
    for prev, current in zip(yearly, yearly[1:]):
        if prev.cash_flow_post_tax > 0 and current.cash_flow_post_tax <= 0:
            return current.year
    return None


def project_years(config: Configuration) -> tuple[YearlyResult, ...]:
    """Year-by-year projection for one configuration.

    The amortization and depreciation schedules are built once and threaded
    through the yearly loop; everything else is a function of the year.
    """
    years = horizon_years(config)
    if config.is_empty:
        logger.debug("Price or rent not set; returning an all-zero projection")
        return tuple(YearlyResult(year=y) for y in range(1, years + 1))

    debt = yearly_debt_summary(amortization_schedule(config.loan), years)
    depreciation = depreciation_schedule(config, years)
    land_share = config.land_share
    acquisition = compute_acquisition_summary(config)
    total_price = config.price + acquisition.total_costs

    results: list[YearlyResult] = []
    for year in range(1, years + 1):
        debt_year = debt[year - 1]
        dep = depreciation[year - 1]

        # Income
        gpr = gross_potential_rent(config, year)
        occupancy = occupancy_rate(config, year)
        egi = effective_income(config, year)

        # Expenses
        opex = operating_expense(config, year, gpr, egi)
        repairs = repair_cost(config, year)
        prop_tax = property_tax(config, year)
        acq_tax = acquisition_tax_for_year(config, year)
        year_noi = egi - opex - prop_tax

        # Tax
        taxable = taxable_rental_income(
            effective_income=egi,
            operating_expense=opex,
            repair_cost=repairs,
            interest_paid=debt_year.interest,
            depreciation=dep.total,
            property_tax=prop_tax,
        )
        tax = income_tax(config.tax_regime, taxable, debt_year.interest, land_share)

        # Cash flow
        cf_pre = egi - opex - repairs - debt_year.debt_service - prop_tax - acq_tax
        cf_post = cf_pre - tax

        # Ratios
        coverage = coverage_income(year_noi, repairs)
        year_yield = noi_yield(coverage, total_price)

        results.append(YearlyResult(
            year=year,
            gross_potential_rent=gpr,
            occupancy_rate=occupancy,
            effective_income=egi,
            operating_expense=opex,
            repair_cost=repairs,
            property_tax=prop_tax,
            acquisition_tax=acq_tax,
            noi=year_noi,
            interest_paid=debt_year.interest,
            principal_paid=debt_year.principal,
            debt_service=debt_year.debt_service,
            loan_balance=debt_year.ending_balance,
            depreciation_body=dep.body,
            depreciation_equipment=dep.equipment,
            depreciation_total=dep.total,
            taxable_income=taxable,
            income_tax=tax,
            cash_flow_pre_tax=cf_pre,
            cash_flow_post_tax=cf_post,
            dscr=dscr(coverage, debt_year.debt_service),
            noi_yield=year_yield,
            yield_gap=yield_gap(year_yield, config.loan.rate_for_year(year)),
            cash_on_cash_pre_tax=cash_on_cash(cf_pre, acquisition.equity_required),
            cash_on_cash_post_tax=cash_on_cash(cf_post, acquisition.equity_required),
            principal_exceeds_depreciation=debt_year.principal > dep.total,
        ))

    return tuple(results)


def simulate(config: Configuration) -> SimulationResult:
    """Run the baseline, the optional stressed scenario and the optional exit.

    Each run has its own loan and tax state; the scenario shares nothing
    with the baseline but the inputs it was derived from.
    """
    acquisition = compute_acquisition_summary(config)
    baseline = project_years(config)

    if config.is_empty:
        return SimulationResult(acquisition=acquisition, baseline=baseline)

    scenario: ScenarioResult | None = None
    stressed_config = derive_stressed_configuration(config)
    if stressed_config is not None:
        stressed = project_years(stressed_config)
        scenario = ScenarioResult(
            yearly=stressed,
            exit=compute_disposition(stressed_config, stressed, acquisition),
            dead_cross_year=find_dead_cross_year(stressed),
            minimum_dscr=minimum_dscr(stressed),
        )

    return SimulationResult(
        acquisition=acquisition,
        baseline=baseline,
        scenario=scenario,
        exit=compute_disposition(config, baseline, acquisition),
        dead_cross_year=find_dead_cross_year(baseline),
        minimum_dscr=minimum_dscr(baseline),
    )


@lru_cache(maxsize=settings.simulation_cache_size)
def simulate_cached(config: Configuration) -> SimulationResult:
    """simulate() memoized by configuration; results are immutable."""
    return simulate(config)
