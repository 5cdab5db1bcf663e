from dataclasses import replace
from decimal import Decimal

from propsim.engine.metrics import cash_on_cash, dscr, noi_yield
from propsim.engine.simulation import (
    find_dead_cross_year,
    horizon_years,
    project_years,
    simulate,
    simulate_cached,
)
from propsim.models.configuration import CorporateTax, StressScenario
from propsim.models.results import YearlyResult


def _rows(*cash_flows):
    return tuple(
        YearlyResult(year=i + 1, cash_flow_post_tax=Decimal(cf)) for i, cf in enumerate(cash_flows)
    )


class TestProjectYears:
    def test_horizon_length(self, canonical_config):
        yearly = project_years(canonical_config)
        assert len(yearly) == 35
        assert [y.year for y in yearly] == list(range(1, 36))

    def test_loan_paid_off_at_term(self, canonical_config):
        yearly = project_years(canonical_config)
        assert yearly[29].loan_balance == Decimal("0")
        assert yearly[30].debt_service == Decimal("0")

    def test_year_one_pre_tax_positive(self, canonical_config):
        yearly = project_years(canonical_config)
        assert yearly[0].cash_flow_pre_tax > 0

    def test_depreciation_every_year(self, canonical_config):
        for y in project_years(canonical_config):
            assert y.depreciation_total > 0

    def test_noi_excludes_debt_and_repairs(self, canonical_config):
        y = project_years(canonical_config)[0]
        assert y.noi == y.effective_income - y.operating_expense - y.property_tax

    def test_cash_flow_composition(self, canonical_config):
        for y in project_years(canonical_config):
            pre = (
                y.effective_income - y.operating_expense - y.repair_cost
                - y.debt_service - y.property_tax - y.acquisition_tax
            )
            assert y.cash_flow_pre_tax == pre
            assert y.cash_flow_post_tax == pre - y.income_tax

    def test_acquisition_tax_booked_once(self, canonical_config):
        yearly = project_years(canonical_config)
        booked = [y.year for y in yearly if y.acquisition_tax > 0]
        assert booked == [2]

    def test_effective_income_within_gpr(self, canonical_config):
        for y in project_years(canonical_config):
            assert y.effective_income <= y.gross_potential_rent

    def test_principal_flag(self, canonical_config):
        for y in project_years(canonical_config):
            assert y.principal_exceeds_depreciation == (y.principal_paid > y.depreciation_total)

    def test_corporate_minimum_tax_every_year(self, canonical_config):
        config = replace(canonical_config, tax_regime=CorporateTax())
        for y in project_years(config):
            assert y.income_tax >= Decimal("70000")

    def test_empty_configuration_all_zero(self, canonical_config):
        config = replace(canonical_config, price=Decimal("0"))
        yearly = project_years(config)
        assert len(yearly) == 35
        for y in yearly:
            assert y.cash_flow_post_tax == Decimal("0")
            assert y.loan_balance == Decimal("0")

    def test_dscr_each_year(self, canonical_config):
        for y in project_years(canonical_config):
            assert y.dscr == dscr(y.noi - y.repair_cost, y.debt_service)

    def test_dscr_zero_after_payoff(self, canonical_config):
        yearly = project_years(canonical_config)
        assert yearly[0].dscr > 1
        assert yearly[30].dscr == Decimal("0")

    def test_yield_and_cash_on_cash(self, canonical_config):
        y = project_years(canonical_config)[0]
        # Price plus 3,730,000 closing costs; equity 8,730,000
        assert y.noi_yield == noi_yield(y.noi - y.repair_cost, Decimal("103730000"))
        assert y.yield_gap == y.noi_yield - Decimal("1.6")
        assert y.cash_on_cash_pre_tax == cash_on_cash(y.cash_flow_pre_tax, Decimal("8730000"))
        assert y.cash_on_cash_post_tax == cash_on_cash(y.cash_flow_post_tax, Decimal("8730000"))

    def test_horizon_clamped(self, canonical_config):
        assert horizon_years(replace(canonical_config, horizon_years=80)) == 40
        assert horizon_years(replace(canonical_config, horizon_years=0)) == 1


class TestDeadCross:
    def test_first_turn_non_positive(self):
        assert find_dead_cross_year(_rows("100", "50", "0", "-10")) == 3

    def test_never_positive(self):
        assert find_dead_cross_year(_rows("-100", "-50", "-10")) is None

    def test_stays_positive(self):
        assert find_dead_cross_year(_rows("100", "90", "80")) is None

    def test_negative_start_then_turn(self):
        assert find_dead_cross_year(_rows("-100", "20", "-5")) == 3


class TestSimulate:
    def test_baseline_only(self, canonical_config):
        result = simulate(canonical_config)
        assert result.scenario is None
        assert result.exit is None
        assert len(result.baseline) == 35

    def test_acquisition_included(self, canonical_config):
        result = simulate(canonical_config)
        assert result.acquisition.equity_required == Decimal("8730000")

    def test_scenario_runs_independently(self, stressed_config):
        result = simulate(stressed_config)
        assert result.scenario is not None
        assert len(result.scenario.yearly) == 35
        assert result.scenario.yearly[29].loan_balance == Decimal("0")
        # Baseline keeps the unshocked rate
        assert result.baseline[4].interest_paid < result.scenario.yearly[4].interest_paid

    def test_stressed_never_better_than_baseline(self, stressed_config):
        result = simulate(stressed_config)
        start = stressed_config.stress.first_active_year
        for base, stressed in zip(result.baseline[start - 1:], result.scenario.yearly[start - 1:]):
            assert stressed.cash_flow_post_tax <= base.cash_flow_post_tax

    def test_identical_before_stress(self, canonical_config):
        config = replace(canonical_config, stress=StressScenario(interest_shock_year=5))
        result = simulate(config)
        for base, stressed in zip(result.baseline[:4], result.scenario.yearly[:4]):
            assert stressed == base

    def test_exit_for_both_runs(self, exit_config, stressed_config):
        config = replace(stressed_config, exit=exit_config.exit)
        result = simulate(config)
        assert result.exit is not None
        assert result.scenario.exit is not None
        assert result.scenario.exit.sale_price <= result.exit.sale_price

    def test_empty_configuration(self, stressed_config):
        config = replace(stressed_config, monthly_rent=Decimal("0"))
        result = simulate(config)
        assert result.scenario is None
        assert result.exit is None
        assert result.dead_cross_year is None
        assert result.minimum_dscr is None

    def test_minimum_dscr_over_loan_term(self, canonical_config):
        result = simulate(canonical_config)
        assert result.minimum_dscr == min(y.dscr for y in result.baseline[:30])

    def test_stress_lowers_minimum_dscr(self, stressed_config):
        result = simulate(stressed_config)
        assert result.scenario.minimum_dscr <= result.minimum_dscr

    def test_deterministic(self, stressed_config):
        assert simulate(stressed_config) == simulate(stressed_config)

    def test_total_post_tax(self, canonical_config):
        result = simulate(canonical_config)
        assert result.total_cash_flow_post_tax == sum(y.cash_flow_post_tax for y in result.baseline)

    def test_cached(self, canonical_config):
        first = simulate_cached(canonical_config)
        assert simulate_cached(replace(canonical_config)) is first
