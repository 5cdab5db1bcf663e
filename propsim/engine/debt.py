"""Amortization schedule computation.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from propsim.models.configuration import LoanTerms

ONE_YEN = Decimal("1")
ZERO = Decimal("0")


@dataclass(frozen=True)
class AmortizationPayment:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    annual_rate: Decimal

    @property
    def year(self) -> int:
        return (self.period - 1) // 12 + 1


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: tuple[AmortizationPayment, ...]
    initial_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal


@dataclass(frozen=True)
class YearlyDebt:
    year: int
    interest: Decimal = ZERO
    principal: Decimal = ZERO
    debt_service: Decimal = ZERO
    ending_balance: Decimal = ZERO


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Fixed monthly payment for an annual rate given in percent."""
    if principal <= 0 or term_years <= 0:
        return ZERO
    n = term_years * 12
    if annual_rate <= 0:
        return (principal / n).quantize(ONE_YEN, ROUND_HALF_UP)

    r = annual_rate / 100 / 12
    # M = P * r / (1 - (1+r)^-n)
    payment = principal * r / (1 - (1 + r) ** -n)
    return payment.quantize(ONE_YEN, ROUND_HALF_UP)


def amortization_schedule(loan: LoanTerms) -> AmortizationSchedule:
    """Generate the full monthly schedule for the loan term.

    When the rate changes (a rate shock) the remaining balance is
    re-amortized over the remaining term, so payoff still lands on the
    original final month. The final payment clears whatever balance is left.
    """
    if loan.principal <= 0 or loan.term_years <= 0:
        return AmortizationSchedule(
            payments=(), initial_payment=ZERO, total_interest=ZERO, total_principal=ZERO,
        )

    n_periods = loan.term_years * 12
    rate = loan.rate_for_year(1)
    pmt = monthly_payment(loan.principal, rate, loan.term_years)
    initial_payment = pmt

    payments: list[AmortizationPayment] = []
    balance = loan.principal
    total_interest = ZERO
    total_principal = ZERO

    for period in range(1, n_periods + 1):
        year = (period - 1) // 12 + 1
        if period % 12 == 1:
            year_rate = loan.rate_for_year(year)
            if year_rate != rate:
                rate = year_rate
                pmt = monthly_payment(balance, rate, loan.term_years - (year - 1))

        interest = (balance * rate / 100 / 12).quantize(ONE_YEN, ROUND_HALF_UP)
        principal_paid = pmt - interest

        # Final payment adjustment
        if principal_paid > balance or period == n_periods:
            principal_paid = balance
        principal_paid = max(ZERO, principal_paid)
        actual_payment = interest + principal_paid

        balance -= principal_paid
        total_interest += interest
        total_principal += principal_paid

        payments.append(AmortizationPayment(
            period=period,
            payment=actual_payment,
            principal=principal_paid,
            interest=interest,
            balance=balance,
            annual_rate=rate,
        ))

    return AmortizationSchedule(
        payments=tuple(payments),
        initial_payment=initial_payment,
        total_interest=total_interest,
        total_principal=total_principal,
    )


def yearly_debt_summary(schedule: AmortizationSchedule, years: int) -> tuple[YearlyDebt, ...]:
    """Aggregate the schedule by year for years 1..years.

    Years after the term carry zero payments and a zero balance.
    """
    by_year: dict[int, YearlyDebt] = {}
    for p in schedule.payments:
        prev = by_year.get(p.year, YearlyDebt(year=p.year))
        by_year[p.year] = YearlyDebt(
            year=p.year,
            interest=prev.interest + p.interest,
            principal=prev.principal + p.principal,
            debt_service=prev.debt_service + p.payment,
            ending_balance=p.balance,
        )
    return tuple(by_year.get(year, YearlyDebt(year=year)) for year in range(1, years + 1))
