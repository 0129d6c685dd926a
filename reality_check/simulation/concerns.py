from __future__ import annotations

"""
Concern catalogue and evaluator.

The catalogue is a closed, read-only tuple of eight definitions built at
import time. Each definition pairs static text with a predicate over the
first post-graduation year, the scenario, and the full projection. Evidence
strings for every concern come from ``format_evidence`` so the "applies only"
and "full checklist" views can never disagree about the numbers they show.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from reality_check.models.domain import (
    DEFAULT_ASSUMPTIONS,
    Assumptions,
    ConcernResult,
    ProjectionYear,
    Scenario,
)
from reality_check.simulation.engine import first_post_grad_year, round_half_up

Predicate = Callable[[Optional[ProjectionYear], Scenario, List[ProjectionYear]], bool]

DTI_THRESHOLD_PCT = 20
SCHOOL_SHORTFALL_THRESHOLD = -500
DEPENDENT_SALARY_FLOOR = 50000
RESIDUAL_DEBT_THRESHOLD = 5000
EDUCATION_COST_SALARY_SHARE = 0.4
# Only these markets have a salary floor; every other location is exempt.
LOCATION_SALARY_FLOORS: Dict[str, float] = {
    "San Francisco": 120000,
    "Austin/Denver": 50000,
}


@dataclass(frozen=True)
class ConcernDefinition:
    """Static description of one risk condition plus its predicate."""
    id: str
    title: str
    description: str
    predicate: Predicate


def _location_mismatch(first: Optional[ProjectionYear], scen: Scenario, projection: List[ProjectionYear]) -> bool:
    floor = LOCATION_SALARY_FLOORS.get(scen.location)
    if floor is None or first is None:
        return False
    return first.annual_income < floor


CONCERNS: Tuple[ConcernDefinition, ...] = (
    ConcernDefinition(
        id="debt_burden",
        title="High Debt-to-Income Ratio",
        description="Debt payments consume too much of monthly income",
        predicate=lambda first, scen, proj: first is not None and first.debt_to_income_ratio > DTI_THRESHOLD_PCT,
    ),
    ConcernDefinition(
        id="school_deficit",
        title="Monthly Deficit During School",
        description="Expenses exceed income while studying",
        predicate=lambda first, scen, proj: any(
            row.monthly_surplus < SCHOOL_SHORTFALL_THRESHOLD for row in proj if row.is_school
        ),
    ),
    ConcernDefinition(
        id="dependent_burden",
        title="Supporting Dependents on Entry Salary",
        description="Dependent costs too high relative to starting income",
        predicate=lambda first, scen, proj: scen.dependents > 0
        and first is not None
        and first.annual_income < DEPENDENT_SALARY_FLOOR,
    ),
    ConcernDefinition(
        id="extended_debt",
        title="Debt Extends Beyond 10 Years",
        description="Significant debt remaining after decade of repayment",
        predicate=lambda first, scen, proj: proj[-1].debt > RESIDUAL_DEBT_THRESHOLD,
    ),
    ConcernDefinition(
        id="job_market",
        title="Weak Job Market for This Career",
        description="Limited growth prospects in chosen field",
        predicate=lambda first, scen, proj: scen.job_growth == "weak",
    ),
    ConcernDefinition(
        id="high_education_cost",
        title="High Education Cost Relative to Starting Salary",
        description="Education expense is disproportionate to entry salary",
        predicate=lambda first, scen, proj: first is not None
        and scen.total_education_cost > first.annual_income * EDUCATION_COST_SALARY_SHARE,
    ),
    ConcernDefinition(
        id="location_salary_mismatch",
        title="Salary May Not Match Cost of Living",
        description="Starting salary seems low for the location",
        predicate=_location_mismatch,
    ),
    ConcernDefinition(
        id="no_work_income",
        title="No Income During School",
        description="Full-time student with no part-time work",
        predicate=lambda first, scen, proj: scen.annual_income_while_studying == 0,
    ),
)

CONCERN_IDS: Tuple[str, ...] = tuple(c.id for c in CONCERNS)
CONCERNS_BY_ID: Dict[str, ConcernDefinition] = {c.id: c for c in CONCERNS}


def _number(value: float) -> str:
    """Plain number as a student would write it: ``4`` not ``4.0``, ``0.5`` stays."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _grouped(value: float) -> str:
    """Number with thousands separators, e.g. ``25,000``."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_evidence(
    concern_id: str,
    scenario: Scenario,
    projection: List[ProjectionYear],
    assumptions: Optional[Assumptions] = None,
) -> str:
    """Numeric justification shown next to a concern, whether or not it applies."""
    assumptions = assumptions or DEFAULT_ASSUMPTIONS
    first = first_post_grad_year(projection)
    first_income = first.annual_income if first else 0
    final_year = projection[-1]

    if concern_id == "debt_burden":
        payment = first.monthly_debt_payment if first else 0
        dti = first.debt_to_income_ratio if first else 0.0
        monthly_salary = int(round_half_up(first_income / 12))
        return f"${payment}/month debt payment vs ${monthly_salary}/month salary ({_number(dti)}% DTI)"
    if concern_id == "school_deficit":
        school_years = [row for row in projection if row.is_school]
        shortfall = abs(school_years[0].monthly_surplus) if school_years else 0
        return f"Around ${shortfall}/month shortfall"
    if concern_id == "dependent_burden":
        yearly_cost = scenario.dependents * assumptions.dependent_evidence_monthly_cost * 12
        return f"Dependent costs: ${_number(yearly_cost)}/year. Entry salary: ${first_income}/year"
    if concern_id == "extended_debt":
        return f"Remaining debt: ${_grouped(final_year.debt)}"
    if concern_id == "job_market":
        return f"Job growth: {scenario.job_growth}. Salary plateau: ${_number(scenario.salary_5yr)}/year"
    if concern_id == "high_education_cost":
        ratio = int(round_half_up(scenario.total_education_cost / first_income * 100)) if first_income else 0
        return (
            f"Education cost: ${_grouped(scenario.total_education_cost)} vs first year salary: "
            f"${_grouped(first_income)} ({ratio}% of salary)"
        )
    if concern_id == "location_salary_mismatch":
        return (
            f"{scenario.location} - Starting salary ${_grouped(first_income)}, "
            f"monthly expenses ${_grouped(scenario.monthly_expenses)}"
        )
    if concern_id == "no_work_income":
        return f"{_number(scenario.years_in_school)} years of school with $0 income"
    raise KeyError(f"Unknown concern id: {concern_id}")


def evaluate(
    concern: ConcernDefinition,
    scenario: Scenario,
    projection: List[ProjectionYear],
    assumptions: Optional[Assumptions] = None,
) -> ConcernResult:
    """Run one concern's predicate and attach its evidence string."""
    first = first_post_grad_year(projection)
    return ConcernResult(
        id=concern.id,
        title=concern.title,
        description=concern.description,
        evidence=format_evidence(concern.id, scenario, projection, assumptions),
        applies=bool(concern.predicate(first, scenario, projection)),
    )


def describe_all_concerns(
    scenario: Scenario,
    projection: List[ProjectionYear],
    assumptions: Optional[Assumptions] = None,
) -> List[ConcernResult]:
    """All eight concerns in catalogue order, each with evidence and verdict."""
    return [evaluate(concern, scenario, projection, assumptions) for concern in CONCERNS]


def identify_concerns(
    scenario: Scenario,
    projection: List[ProjectionYear],
    assumptions: Optional[Assumptions] = None,
) -> List[ConcernResult]:
    """Only the concerns whose predicate holds (the ground truth for a round)."""
    return [result for result in describe_all_concerns(scenario, projection, assumptions) if result.applies]
