from decimal import Decimal

from propsim.engine.tax import (
    corporate_tax,
    income_tax,
    individual_tax,
    limit_land_interest_loss,
    national_income_tax,
    personal_tax,
    taxable_rental_income,
)
from propsim.models.configuration import CorporateTax, IndividualTax


class TestTaxableRentalIncome:
    def test_deducts_everything(self):
        result = taxable_rental_income(
            effective_income=Decimal("5700000"),
            operating_expense=Decimal("900000"),
            repair_cost=Decimal("100000"),
            interest_paid=Decimal("1500000"),
            depreciation=Decimal("1276595"),
            property_tax=Decimal("589349"),
        )
        assert result == Decimal("1334056")

    def test_can_be_negative(self):
        result = taxable_rental_income(
            Decimal("1000000"), Decimal("500000"), Decimal("0"),
            Decimal("800000"), Decimal("900000"), Decimal("100000"),
        )
        assert result == Decimal("-1300000")


class TestNationalIncomeTax:
    def test_first_bracket(self):
        assert national_income_tax(Decimal("1000000")) == Decimal("50000")

    def test_quick_deduction(self):
        assert national_income_tax(Decimal("5000000")) == Decimal("572500")

    def test_continuous_at_bracket_edges(self):
        assert national_income_tax(Decimal("1950000")) == Decimal("97500")
        assert national_income_tax(Decimal("3300000")) == Decimal("232500")

    def test_top_bracket(self):
        assert national_income_tax(Decimal("50000000")) == Decimal("17704000")

    def test_zero_or_loss(self):
        assert national_income_tax(Decimal("0")) == Decimal("0")
        assert national_income_tax(Decimal("-100")) == Decimal("0")


class TestPersonalTax:
    def test_adds_resident_tax(self):
        assert personal_tax(Decimal("1000000"), Decimal("10")) == Decimal("150000")


class TestLandInterestLimitation:
    def test_gain_unchanged(self):
        assert limit_land_interest_loss(Decimal("500000"), Decimal("1000000"), Decimal("0.4")) == Decimal("500000")

    def test_loss_reduced_by_land_interest(self):
        result = limit_land_interest_loss(Decimal("-1000000"), Decimal("1000000"), Decimal("0.4"))
        assert result == Decimal("-600000")

    def test_never_turns_into_gain(self):
        result = limit_land_interest_loss(Decimal("-100000"), Decimal("1000000"), Decimal("0.4"))
        assert result == Decimal("0")


class TestIndividualTax:
    def test_no_other_income(self):
        assert individual_tax(Decimal("1000000"), IndividualTax()) == Decimal("150000")

    def test_marginal_on_top_of_salary(self):
        regime = IndividualTax(other_income=Decimal("5000000"))
        # tax(6M) - tax(5M) = 1,372,500 - 1,072,500
        assert individual_tax(Decimal("1000000"), regime) == Decimal("300000")

    def test_loss_never_refunds(self):
        regime = IndividualTax(other_income=Decimal("5000000"))
        result = individual_tax(
            Decimal("-1000000"), regime, interest_paid=Decimal("1000000"), land_share=Decimal("0.4")
        )
        assert result == Decimal("0")

    def test_resident_rate_configurable(self):
        regime = IndividualTax(resident_tax_rate=Decimal("0"))
        assert individual_tax(Decimal("1000000"), regime) == Decimal("50000")


class TestCorporateTax:
    def test_reduced_tier_then_full_rate(self):
        # 8M * 15% + 2M * 23.2% + 70K
        assert corporate_tax(Decimal("10000000"), CorporateTax()) == Decimal("1734000")

    def test_minimum_tax_on_loss(self):
        assert corporate_tax(Decimal("-5000000"), CorporateTax()) == Decimal("70000")
        assert corporate_tax(Decimal("0"), CorporateTax()) == Decimal("70000")

    def test_flat_rate_without_reduced_tier(self):
        regime = CorporateTax(rate=Decimal("30"), reduced_rate=None)
        assert corporate_tax(Decimal("1000000"), regime) == Decimal("370000")


class TestIncomeTaxDispatch:
    def test_individual(self):
        assert income_tax(IndividualTax(), Decimal("1000000")) == Decimal("150000")

    def test_corporate(self):
        assert income_tax(CorporateTax(), Decimal("1000000")) == Decimal("220000")
