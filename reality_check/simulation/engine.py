from __future__ import annotations

"""
Deterministic 10-year projection engine for Reality Check.

Given a scenario, the engine walks the study years (unpaid costs roll into the
loan balance and compound annually), fixes a level monthly payment from the
balance at graduation, and then advances the whole horizon year by year. The
repayment loop is deliberately simple: each month accrues interest and then
subtracts the fixed payment, clamped at zero. That leaves a small residual
balance compared with closed-form annuity math, which is part of what the
trainer shows students.
"""

import math
from typing import List, Optional

from reality_check.logging_config import get_logger
from reality_check.models.domain import DEFAULT_ASSUMPTIONS, Assumptions, ProjectionYear, Scenario

logger = get_logger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward positive infinity instead of to even.

    Display numbers must match what a student gets by hand (and what the
    classroom material shows), so Python's banker's rounding is not used.
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _accrue_study_year(debt: float, scenario: Scenario) -> float:
    """Add one study year's unmet costs to the balance, then compound a year of interest."""
    annual_expenses = scenario.education_cost_per_year + scenario.monthly_expenses * 12
    deficit = max(0.0, annual_expenses - scenario.annual_income_while_studying)
    debt += deficit
    debt += debt * scenario.federal_loan_rate
    return debt


def debt_at_graduation(scenario: Scenario) -> float:
    """Balance owed when repayment starts, after every study year has accrued.

    A year counts as a study year while ``year <= years_in_school``, so a
    six-month program contributes no study years at all.
    """
    debt = scenario.current_debt
    year = 1
    while year <= scenario.years_in_school:
        debt = _accrue_study_year(debt, scenario)
        year += 1
    return debt


def monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """Level monthly payment that retires ``principal`` over ``years`` (annuity formula).

    Returns 0 when there is nothing owed or the rate is zero, which also keeps
    the formula away from a zero denominator.
    """
    monthly_rate = annual_rate / 12
    months = years * 12
    if principal <= 0 or monthly_rate <= 0:
        return 0.0
    growth = (1 + monthly_rate) ** months
    return principal * monthly_rate * growth / (growth - 1)


def salary_for_year(scenario: Scenario, years_post_grad: float, growth_rate: float) -> float:
    """Gross salary for the given (1-indexed) year after graduation.

    Year 1 pays the starting salary, years 2-5 interpolate linearly towards
    the year-5 salary, and later years add a fixed share of the year-5 salary
    per year. Fractional offsets (short programs) use the same branches.
    """
    if years_post_grad == 1:
        return scenario.start_salary
    if years_post_grad <= 5:
        progress = (years_post_grad - 1) / 4
        return scenario.start_salary + (scenario.salary_5yr - scenario.start_salary) * progress
    return scenario.salary_5yr + scenario.salary_5yr * growth_rate * (years_post_grad - 5)


def _repay_year(debt: float, payment: float, monthly_rate: float) -> float:
    """Advance the balance through twelve months of interest followed by payment."""
    for _ in range(12):
        debt += debt * monthly_rate
        debt = max(0.0, debt - payment)
    return debt


def project(scenario: Scenario, assumptions: Optional[Assumptions] = None) -> List[ProjectionYear]:
    """Compute the year-by-year timeline for a scenario.

    The payment is fixed from the graduation balance first; the timeline pass
    then restarts from the pre-existing debt and replays the study years
    identically before repaying. Each row records rounded display values
    while the raw balance carries into the next year.
    """
    assumptions = assumptions or DEFAULT_ASSUMPTIONS
    graduation_debt = debt_at_graduation(scenario)
    payment = monthly_payment(graduation_debt, scenario.federal_loan_rate, scenario.loan_repayment_years)
    monthly_rate = scenario.federal_loan_rate / 12
    logger.debug(
        "Projecting %s: debt at graduation %.2f, monthly payment %.2f",
        scenario.name,
        graduation_debt,
        payment,
    )

    rows: List[ProjectionYear] = []
    debt = scenario.current_debt
    for year in range(1, assumptions.horizon_years + 1):
        is_school = year <= scenario.years_in_school
        years_post_grad = year - scenario.years_in_school
        annual_debt_payment = 0.0

        if is_school:
            annual_income = scenario.annual_income_while_studying
            debt = _accrue_study_year(debt, scenario)
        else:
            annual_income = salary_for_year(scenario, years_post_grad, assumptions.late_career_growth_rate)
            annual_debt_payment = payment * 12
            debt = _repay_year(debt, payment, monthly_rate)

        taxes = max(0.0, annual_income * assumptions.tax_rate)
        after_tax_income = annual_income - taxes
        dti = (annual_debt_payment / annual_income) * 100 if annual_income > 0 else 0.0
        # The fixed payment is charged against cash flow in study years too.
        surplus = after_tax_income / 12 - (scenario.monthly_expenses + payment)
        earned = after_tax_income * years_post_grad if not is_school else 0.0
        net_worth = earned - max(0.0, debt)

        rows.append(
            ProjectionYear(
                year=year,
                is_school=is_school,
                debt=int(round_half_up(max(0.0, debt))),
                annual_income=int(round_half_up(annual_income)),
                monthly_debt_payment=int(round_half_up(payment)),
                annual_debt_payment=int(round_half_up(annual_debt_payment)),
                debt_to_income_ratio=round_half_up(dti, 1),
                monthly_surplus=int(round_half_up(surplus)),
                net_worth=int(round_half_up(net_worth)),
            )
        )
    return rows


def first_post_grad_year(projection: List[ProjectionYear]) -> Optional[ProjectionYear]:
    """First row outside school, or None if the horizon ends before graduation."""
    return next((row for row in projection if not row.is_school), None)
