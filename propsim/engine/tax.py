"""Income tax on rental income: individual (progressive) or corporate.

Individual investors pay national income tax on a progressive bracket table
plus a flat resident tax, with rental income combined with their other
income. Only the tax increase caused by the property is attributed to it.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from propsim.models.configuration import CorporateTax, IndividualTax, TaxRegime, clamp_pct

ONE_YEN = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

# National income tax, quick-deduction form: (upper bound, rate, deduction)
INCOME_TAX_BRACKETS: tuple[tuple[Decimal | None, Decimal, Decimal], ...] = (
    (Decimal("1950000"), Decimal("0.05"), Decimal("0")),
    (Decimal("3300000"), Decimal("0.10"), Decimal("97500")),
    (Decimal("6950000"), Decimal("0.20"), Decimal("427500")),
    (Decimal("9000000"), Decimal("0.23"), Decimal("636000")),
    (Decimal("18000000"), Decimal("0.33"), Decimal("1536000")),
    (Decimal("40000000"), Decimal("0.40"), Decimal("2796000")),
    (None, Decimal("0.45"), Decimal("4796000")),
)


def taxable_rental_income(
    effective_income: Decimal,
    operating_expense: Decimal,
    repair_cost: Decimal,
    interest_paid: Decimal,
    depreciation: Decimal,
    property_tax: Decimal,
) -> Decimal:
    """Rental income for tax purposes. Negative = loss."""
    return (
        effective_income - operating_expense - repair_cost
        - interest_paid - depreciation - property_tax
    )


def national_income_tax(taxable_income: Decimal) -> Decimal:
    if taxable_income <= 0:
        return ZERO
    for upper, rate, deduction in INCOME_TAX_BRACKETS:
        if upper is None or taxable_income <= upper:
            return max(ZERO, taxable_income * rate - deduction)
    return ZERO


def personal_tax(taxable_income: Decimal, resident_tax_rate: Decimal) -> Decimal:
    """National income tax plus flat resident tax on a total income."""
    if taxable_income <= 0:
        return ZERO
    resident = taxable_income * clamp_pct(resident_tax_rate) / HUNDRED
    return (national_income_tax(taxable_income) + resident).quantize(ONE_YEN, ROUND_HALF_UP)


def limit_land_interest_loss(
    rental_income: Decimal, interest_paid: Decimal, land_share: Decimal
) -> Decimal:
    """Interest on the land portion of the loan cannot create an offsettable loss.

    Only applies when rental income is a loss; the adjusted loss never turns
    into a gain.
    """
    if rental_income >= 0:
        return rental_income
    add_back = max(ZERO, interest_paid) * max(ZERO, min(Decimal("1"), land_share))
    return min(ZERO, rental_income + add_back)


def individual_tax(
    rental_income: Decimal,
    regime: IndividualTax,
    interest_paid: Decimal = ZERO,
    land_share: Decimal = ZERO,
) -> Decimal:
    """Tax attributable to the property: tax(other + rental) - tax(other).

    Never negative: a rental loss does not produce a refund line.
    """
    other = max(ZERO, regime.other_income)
    rental = limit_land_interest_loss(rental_income, interest_paid, land_share)
    with_property = personal_tax(other + rental, regime.resident_tax_rate)
    without_property = personal_tax(other, regime.resident_tax_rate)
    return max(ZERO, with_property - without_property)


def corporate_tax(taxable_income: Decimal, regime: CorporateTax) -> Decimal:
    """Corporate tax plus the flat per-capita levy charged every year."""
    tax = ZERO
    if taxable_income > 0:
        rate = max(ZERO, regime.rate) / HUNDRED
        if regime.reduced_rate is not None and regime.reduced_rate_threshold > 0:
            reduced_base = min(taxable_income, regime.reduced_rate_threshold)
            tax = reduced_base * max(ZERO, regime.reduced_rate) / HUNDRED
            tax += (taxable_income - reduced_base) * rate
        else:
            tax = taxable_income * rate
    tax += max(ZERO, regime.minimum_tax)
    return tax.quantize(ONE_YEN, ROUND_HALF_UP)


def income_tax(
    regime: TaxRegime,
    rental_income: Decimal,
    interest_paid: Decimal = ZERO,
    land_share: Decimal = ZERO,
) -> Decimal:
    if isinstance(regime, CorporateTax):
        return corporate_tax(rental_income, regime)
    return individual_tax(rental_income, regime, interest_paid, land_share)
