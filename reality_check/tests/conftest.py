"""Shared fixtures and scenario builders for the Reality Check tests."""

import itertools
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from reality_check.models.domain import DEFAULT_ASSUMPTIONS, Scenario
from reality_check.simulation.scenario import CAREERS, DEPENDENT_SLOTS, EDUCATION_PATHS, EXISTING_DEBT_SLOTS


def make_scenario(**overrides) -> Scenario:
    """Build a teacher-at-state-school scenario, keeping derived fields consistent."""
    values = dict(
        name="Alex",
        age=19,
        career="High School Teacher",
        location="Suburban",
        start_salary=42000,
        salary_5yr=50000,
        job_growth="weak",
        monthly_base_expenses=1800,
        education_path="State University (4yr)",
        years_in_school=4,
        education_cost_per_year=16000,
        current_debt=0,
        federal_loan_rate=0.05,
        loan_repayment_years=10,
        dependents=0,
        will_work_during_school=False,
    )
    values.update(overrides)
    values.setdefault("total_education_cost", values["years_in_school"] * values["education_cost_per_year"])
    values.setdefault(
        "monthly_expenses",
        values["monthly_base_expenses"] + values["dependents"] * DEFAULT_ASSUMPTIONS.childcare_monthly_per_dependent,
    )
    values.setdefault(
        "annual_income_while_studying",
        DEFAULT_ASSUMPTIONS.work_study_annual_income if values["will_work_during_school"] else 0,
    )
    return Scenario(**values)


def table_scenarios() -> Iterator[Scenario]:
    """Every combination the generator can produce (name and age held fixed)."""
    for career, path, dependents, debt, works in itertools.product(
        CAREERS, EDUCATION_PATHS, sorted(set(DEPENDENT_SLOTS)), sorted(set(EXISTING_DEBT_SLOTS)), (False, True)
    ):
        yield make_scenario(
            career=career.title,
            location=career.location,
            start_salary=career.start_salary,
            salary_5yr=career.salary_5yr,
            job_growth=career.job_growth,
            monthly_base_expenses=career.monthly_base_expenses,
            education_path=path.name,
            years_in_school=path.years,
            education_cost_per_year=path.cost_per_year,
            current_debt=debt,
            dependents=dependents,
            will_work_during_school=works,
        )


@pytest.fixture
def teacher_scenario() -> Scenario:
    return make_scenario()


@pytest.fixture
def client() -> Iterator[TestClient]:
    from reality_check.main import app, store

    with TestClient(app) as test_client:
        yield test_client
    store.rounds.clear()
