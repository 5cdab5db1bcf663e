from decimal import Decimal

from propsim.engine.debt import amortization_schedule, monthly_payment, yearly_debt_summary
from propsim.models.configuration import LoanTerms, RateShock


class TestMonthlyPayment:
    def test_canonical_loan(self):
        # 95M at 1.6% over 30 years is roughly 332K/month
        pmt = monthly_payment(Decimal("95000000"), Decimal("1.6"), 30)
        assert Decimal("332000") < pmt < Decimal("333000")

    def test_zero_rate(self):
        pmt = monthly_payment(Decimal("360000"), Decimal("0"), 30)
        assert pmt == Decimal("1000")

    def test_zero_principal(self):
        assert monthly_payment(Decimal("0"), Decimal("1.6"), 30) == Decimal("0")

    def test_zero_term(self):
        assert monthly_payment(Decimal("1000000"), Decimal("1.6"), 0) == Decimal("0")

    def test_whole_yen(self):
        pmt = monthly_payment(Decimal("12345678"), Decimal("2.35"), 25)
        assert pmt == pmt.to_integral_value()


class TestAmortizationSchedule:
    def test_length_matches_term(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        assert len(schedule.payments) == 360

    def test_final_balance_exactly_zero(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        assert schedule.payments[-1].balance == Decimal("0")

    def test_balance_never_increases(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        balances = [p.balance for p in schedule.payments]
        for prev, cur in zip(balances, balances[1:]):
            assert cur <= prev

    def test_principal_repaid_in_full(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        assert schedule.total_principal == canonical_config.loan.principal

    def test_first_month_interest(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        # 95M * 1.6% / 12
        assert schedule.payments[0].interest == Decimal("126667")

    def test_interest_plus_principal_is_payment(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        for p in schedule.payments:
            assert p.interest + p.principal == p.payment

    def test_no_loan_empty_schedule(self):
        loan = LoanTerms(principal=Decimal("0"), interest_rate=Decimal("1.6"), term_years=30)
        schedule = amortization_schedule(loan)
        assert schedule.payments == ()
        assert schedule.total_interest == Decimal("0")

    def test_zero_rate_loan(self):
        loan = LoanTerms(principal=Decimal("1200000"), interest_rate=Decimal("0"), term_years=10)
        schedule = amortization_schedule(loan)
        assert schedule.initial_payment == Decimal("10000")
        assert schedule.total_interest == Decimal("0")
        assert schedule.payments[-1].balance == Decimal("0")


class TestRateShock:
    def _shocked(self, canonical_config):
        loan = canonical_config.loan
        return LoanTerms(
            principal=loan.principal,
            interest_rate=loan.interest_rate,
            term_years=loan.term_years,
            rate_shock=RateShock(year=5, delta=Decimal("1")),
        )

    def test_rate_changes_at_shock_year(self, canonical_config):
        schedule = amortization_schedule(self._shocked(canonical_config))
        assert schedule.payments[47].annual_rate == Decimal("1.6")  # Month 48, year 4
        assert schedule.payments[48].annual_rate == Decimal("2.6")  # Month 49, year 5

    def test_payment_rises_after_shock(self, canonical_config):
        schedule = amortization_schedule(self._shocked(canonical_config))
        assert schedule.payments[48].payment > schedule.payments[47].payment

    def test_still_pays_off_on_original_term(self, canonical_config):
        schedule = amortization_schedule(self._shocked(canonical_config))
        assert len(schedule.payments) == 360
        assert schedule.payments[-1].balance == Decimal("0")

    def test_more_interest_than_baseline(self, canonical_config):
        base = amortization_schedule(canonical_config.loan)
        shocked = amortization_schedule(self._shocked(canonical_config))
        assert shocked.total_interest > base.total_interest

    def test_negative_delta_floors_at_zero(self):
        loan = LoanTerms(
            principal=Decimal("1000000"),
            interest_rate=Decimal("0.5"),
            term_years=5,
            rate_shock=RateShock(year=2, delta=Decimal("-2")),
        )
        assert loan.rate_for_year(2) == Decimal("0")


class TestYearlyDebtSummary:
    def test_covers_full_horizon(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        yearly = yearly_debt_summary(schedule, 35)
        assert len(yearly) == 35
        assert [y.year for y in yearly] == list(range(1, 36))

    def test_zero_after_term(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        yearly = yearly_debt_summary(schedule, 35)
        assert yearly[29].ending_balance == Decimal("0")
        for y in yearly[30:]:
            assert y.debt_service == Decimal("0")
            assert y.ending_balance == Decimal("0")

    def test_totals_match_schedule(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        yearly = yearly_debt_summary(schedule, 35)
        assert sum(y.interest for y in yearly) == schedule.total_interest
        assert sum(y.principal for y in yearly) == schedule.total_principal

    def test_debt_service_is_interest_plus_principal(self, canonical_config):
        schedule = amortization_schedule(canonical_config.loan)
        for y in yearly_debt_summary(schedule, 30):
            assert y.debt_service == y.interest + y.principal
