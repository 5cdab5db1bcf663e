from decimal import Decimal

from propsim.engine.metrics import (
    cash_on_cash,
    coverage_income,
    dscr,
    minimum_dscr,
    noi_yield,
    yield_gap,
)
from propsim.models.results import YearlyResult


class TestDscr:
    def test_ratio(self):
        assert dscr(Decimal("1200000"), Decimal("1000000")) == Decimal("1.2000")

    def test_no_debt_service(self):
        assert dscr(Decimal("1200000"), Decimal("0")) == Decimal("0")

    def test_coverage_after_repairs(self):
        assert coverage_income(Decimal("4200000"), Decimal("1000000")) == Decimal("3200000")

    def test_shortfall_below_one(self):
        assert dscr(Decimal("900000"), Decimal("1000000")) < 1


class TestYields:
    def test_noi_yield(self):
        assert noi_yield(Decimal("5000000"), Decimal("100000000")) == Decimal("5.00")

    def test_noi_yield_without_price(self):
        assert noi_yield(Decimal("5000000"), Decimal("0")) == Decimal("0")

    def test_yield_gap(self):
        assert yield_gap(Decimal("5.00"), Decimal("1.6")) == Decimal("3.40")

    def test_negative_gap(self):
        assert yield_gap(Decimal("3.00"), Decimal("4.5")) == Decimal("-1.50")


class TestCashOnCash:
    def test_ratio(self):
        assert cash_on_cash(Decimal("436500"), Decimal("8730000")) == Decimal("5.00")

    def test_negative_cash_flow(self):
        assert cash_on_cash(Decimal("-873000"), Decimal("8730000")) == Decimal("-10.00")

    def test_no_equity(self):
        assert cash_on_cash(Decimal("436500"), Decimal("0")) == Decimal("0")


class TestMinimumDscr:
    def test_lowest_year_with_debt(self):
        yearly = (
            YearlyResult(year=1, dscr=Decimal("1.4"), debt_service=Decimal("100")),
            YearlyResult(year=2, dscr=Decimal("1.1"), debt_service=Decimal("100")),
            YearlyResult(year=3, dscr=Decimal("0"), debt_service=Decimal("0")),
        )
        assert minimum_dscr(yearly) == Decimal("1.1")

    def test_no_debt(self):
        yearly = (YearlyResult(year=1), YearlyResult(year=2))
        assert minimum_dscr(yearly) is None
