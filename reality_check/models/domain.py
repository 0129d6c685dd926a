from __future__ import annotations

"""Pydantic models for the Reality Check backend.

Defines the generated student scenario, the yearly projection rows, concern
results, and diagnosis feedback shared between the API and the simulation
core. Scenario and projection records are frozen: a round is computed once and
only ever read afterwards, so the models refuse mutation after construction.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Assumptions(BaseModel):
    """Fixed simplifying constants behind every projection.

    The trainer deliberately models a single flat-tax, fixed-rate world so the
    arithmetic stays explainable. These values can be overridden per call to
    explore "what if" variants, but the defaults reproduce the classroom
    numbers exactly.
    """
    model_config = ConfigDict(frozen=True)

    tax_rate: float = 0.20
    federal_loan_rate: float = 0.05
    loan_repayment_years: int = 10
    horizon_years: int = 10
    childcare_monthly_per_dependent: float = 1800.0
    work_study_annual_income: float = 18000.0
    dependent_evidence_monthly_cost: float = 600.0
    late_career_growth_rate: float = 0.02

    @field_validator("tax_rate", "federal_loan_rate", "late_career_growth_rate")
    @classmethod
    def check_rate(cls, v: float) -> float:
        """Rates are fractions; anything outside [0, 1) is a unit mistake."""
        if v < 0 or v >= 1:
            raise ValueError("rates must be in [0, 1)")
        return v

    @field_validator("loan_repayment_years", "horizon_years")
    @classmethod
    def check_years(cls, v: int) -> int:
        """A horizon or repayment term of zero years has nothing to project."""
        if v <= 0:
            raise ValueError("year counts must be positive")
        return v


DEFAULT_ASSUMPTIONS = Assumptions()


class Scenario(BaseModel):
    """One student's plan: career target, education path, debt, and household.

    Scenarios normally come from the generator, which only draws from
    well-formed tables. The validators exist for scenarios posted directly to
    the API: they enforce a positive study duration that ends inside the
    projection horizon (so there is always a first post-graduation year) and
    keep the derived totals consistent with their inputs.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    age: int = Field(ge=18, le=23)
    career: str
    location: str
    start_salary: float = Field(ge=0)
    salary_5yr: float = Field(ge=0)
    job_growth: str
    monthly_base_expenses: float = Field(ge=0)
    education_path: str
    years_in_school: float
    education_cost_per_year: float = Field(ge=0)
    total_education_cost: float = Field(ge=0)
    current_debt: float = Field(ge=0)
    federal_loan_rate: float = Field(ge=0, lt=1)
    loan_repayment_years: int = Field(gt=0)
    dependents: int = Field(ge=0)
    monthly_expenses: float = Field(ge=0)
    will_work_during_school: bool
    annual_income_while_studying: float = Field(ge=0)

    @field_validator("job_growth")
    @classmethod
    def check_growth(cls, v: str) -> str:
        """Only the three growth bands the career tables use are meaningful."""
        if v not in ("weak", "moderate", "strong"):
            raise ValueError("job_growth must be one of weak, moderate, strong")
        return v

    @field_validator("years_in_school")
    @classmethod
    def check_duration(cls, v: float) -> float:
        """Study must take some time and finish before the 10-year horizon.

        Concern predicates read the first post-graduation year; a plan that
        never graduates inside the horizon has no such year.
        """
        if v <= 0 or v >= DEFAULT_ASSUMPTIONS.horizon_years:
            raise ValueError("years_in_school must be > 0 and below the projection horizon")
        return v

    @model_validator(mode="after")
    def check_derived(self) -> "Scenario":
        """Reject records whose derived fields contradict their inputs."""
        if self.monthly_expenses < self.monthly_base_expenses:
            raise ValueError("monthly_expenses cannot be below monthly_base_expenses")
        if abs(self.total_education_cost - self.years_in_school * self.education_cost_per_year) > 0.5:
            raise ValueError("total_education_cost must equal years_in_school * education_cost_per_year")
        if not self.will_work_during_school and self.annual_income_while_studying != 0:
            raise ValueError("annual_income_while_studying must be 0 when not working during school")
        return self


class ProjectionYear(BaseModel):
    """Snapshot of one projected year, with currency values rounded for display.

    Rounding happens only when the row is recorded; the engine carries raw
    balances forward between years.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    is_school: bool
    debt: int
    annual_income: int
    monthly_debt_payment: int
    annual_debt_payment: int
    debt_to_income_ratio: float
    monthly_surplus: int
    net_worth: int


class ConcernResult(BaseModel):
    """A concern evaluated against one scenario: static text, evidence, verdict."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    evidence: str
    applies: bool


class ChecklistItem(BaseModel):
    """Player-facing view of a concern; the verdict is withheld until scoring."""
    id: str
    title: str
    description: str
    evidence: str


class Feedback(BaseModel):
    """Outcome of comparing a diagnosis with the ground-truth concern set.

    Missed concerns are carried as full results so the caller can explain
    them. False positives are carried as ids, alongside the display entries
    that could be resolved from the checklist; unknown ids have no entry.
    """
    correct_identifications: int
    total_concerns: int
    missed_concerns: List[ConcernResult] = Field(default_factory=list)
    false_positives: List[str] = Field(default_factory=list)
    false_positive_details: List[ConcernResult] = Field(default_factory=list)
    score: int
    grade: str
    caught_all: bool


class DiagnosisRequest(BaseModel):
    """Concern ids the player flagged for a round."""
    selected_ids: List[str] = Field(default_factory=list)


class RoundView(BaseModel):
    """Everything the player sees for a round before submitting a diagnosis."""
    round_id: str
    scenario: Scenario
    projection: List[ProjectionYear]
    checklist: List[ChecklistItem]
    seed: Optional[int] = None
