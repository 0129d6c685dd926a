from __future__ import annotations

"""
Procedural scenario generator for Reality Check rounds.

Every round starts from a student plan drawn uniformly from small fixed
tables. The dependent and existing-debt tables repeat zero on purpose: most
students have no children and no prior debt, and that skew decides which
concerns show up later. Draws go through a numpy Generator so a seeded round
can be replayed exactly.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from reality_check.logging_config import get_logger
from reality_check.models.domain import DEFAULT_ASSUMPTIONS, Assumptions, Scenario

logger = get_logger(__name__)


@dataclass(frozen=True)
class CareerOption:
    """Career target tied to a location and its cost of living."""
    title: str
    start_salary: float
    salary_5yr: float
    job_growth: str
    location: str
    monthly_base_expenses: float


@dataclass(frozen=True)
class EducationPath:
    """Route into the career, priced per year of study."""
    name: str
    years: float
    cost_per_year: float


NAMES: Tuple[str, ...] = ("Alex", "Jordan", "Taylor", "Casey", "Morgan", "Riley", "Avery", "Quinn")

CAREERS: Tuple[CareerOption, ...] = (
    CareerOption("Nursing", 62000, 72000, "strong", "Mid-size city", 2200),
    CareerOption("Software Engineer (MAG 7)", 200000, 250000, "strong", "San Francisco", 4500),
    CareerOption("High School Teacher", 42000, 50000, "weak", "Suburban", 1800),
    CareerOption("Business Analyst", 58000, 72000, "moderate", "Austin/Denver", 2400),
    CareerOption("Social Worker", 38000, 42000, "weak", "Mid-size city", 1900),
    CareerOption("Mechanical Engineer", 72000, 92000, "strong", "Austin/Denver", 2500),
)

EDUCATION_PATHS: Tuple[EducationPath, ...] = (
    EducationPath("Community College (2yr)", 2, 6500),
    EducationPath("State University (4yr)", 4, 16000),
    EducationPath("Private University (4yr)", 4, 32000),
    EducationPath("Bootcamp (6mo)", 0.5, 14000),
)

# Weighted toward zero by repetition; draws are uniform over the slots.
DEPENDENT_SLOTS: Tuple[int, ...] = (0, 0, 0, 1, 2)
EXISTING_DEBT_SLOTS: Tuple[float, ...] = (0, 0, 5000, 12000, 25000)

MIN_AGE = 18
AGE_SPAN = 6


def _pick(rng: Any, table: Sequence[Any]) -> Any:
    """Uniformly draw one entry from a fixed table."""
    return table[int(rng.integers(len(table)))]


def generate_scenario(rng: Any = None, assumptions: Optional[Assumptions] = None) -> Scenario:
    """Draw a new, internally consistent student scenario.

    The career, education path, dependent count, and existing debt are drawn
    independently; working during school is a fair coin. Derived values are
    filled in here so downstream code never recomputes them: total education
    cost, monthly expenses including childcare per dependent, and the fixed
    work-study income when the student works. Pass a seeded Generator (or an
    object exposing ``integers`` and ``random``) to make the draw reproducible.
    """
    rng = rng if rng is not None else np.random.default_rng()
    assumptions = assumptions or DEFAULT_ASSUMPTIONS

    career = _pick(rng, CAREERS)
    path = _pick(rng, EDUCATION_PATHS)
    dependents = _pick(rng, DEPENDENT_SLOTS)
    current_debt = _pick(rng, EXISTING_DEBT_SLOTS)

    will_work = float(rng.random()) > 0.5
    income_while_studying = assumptions.work_study_annual_income if will_work else 0.0
    monthly_expenses = career.monthly_base_expenses + dependents * assumptions.childcare_monthly_per_dependent

    scenario = Scenario(
        name=_pick(rng, NAMES),
        age=MIN_AGE + int(rng.integers(AGE_SPAN)),
        career=career.title,
        location=career.location,
        start_salary=career.start_salary,
        salary_5yr=career.salary_5yr,
        job_growth=career.job_growth,
        monthly_base_expenses=career.monthly_base_expenses,
        education_path=path.name,
        years_in_school=path.years,
        education_cost_per_year=path.cost_per_year,
        total_education_cost=path.cost_per_year * path.years,
        current_debt=current_debt,
        federal_loan_rate=assumptions.federal_loan_rate,
        loan_repayment_years=assumptions.loan_repayment_years,
        dependents=dependents,
        monthly_expenses=monthly_expenses,
        will_work_during_school=will_work,
        annual_income_while_studying=income_while_studying,
    )
    logger.debug(
        "Generated scenario: %s, %s via %s (debt=%s, dependents=%s, works=%s)",
        scenario.name,
        scenario.career,
        scenario.education_path,
        scenario.current_debt,
        scenario.dependents,
        scenario.will_work_during_school,
    )
    return scenario
