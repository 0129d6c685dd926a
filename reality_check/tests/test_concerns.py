import pytest

from conftest import make_scenario, table_scenarios
from reality_check.models.domain import ProjectionYear
from reality_check.simulation.concerns import (
    CONCERN_IDS,
    CONCERNS,
    CONCERNS_BY_ID,
    describe_all_concerns,
    format_evidence,
    identify_concerns,
)
from reality_check.simulation.engine import first_post_grad_year, project


def _by_id(results):
    return {r.id: r for r in results}


def test_catalogue_is_fixed_and_ordered():
    assert CONCERN_IDS == (
        "debt_burden",
        "school_deficit",
        "dependent_burden",
        "extended_debt",
        "job_market",
        "high_education_cost",
        "location_salary_mismatch",
        "no_work_income",
    )
    assert isinstance(CONCERNS, tuple)


def test_teacher_at_state_school_ground_truth(teacher_scenario):
    truth = {c.id for c in identify_concerns(teacher_scenario, project(teacher_scenario))}
    assert truth == {
        "debt_burden",
        "school_deficit",
        "extended_debt",
        "job_market",
        "high_education_cost",
        "no_work_income",
    }


def test_evidence_strings_for_teacher(teacher_scenario):
    rows = project(teacher_scenario)
    results = _by_id(describe_all_concerns(teacher_scenario, rows))
    first = rows[4]
    assert results["debt_burden"].evidence == (
        f"${first.monthly_debt_payment}/month debt payment vs $3500/month salary "
        f"({first.debt_to_income_ratio:g}% DTI)"
    )
    assert results["school_deficit"].evidence == f"Around ${abs(rows[0].monthly_surplus)}/month shortfall"
    assert results["dependent_burden"].evidence == "Dependent costs: $0/year. Entry salary: $42000/year"
    assert results["extended_debt"].evidence == f"Remaining debt: ${rows[-1].debt:,}"
    assert results["job_market"].evidence == "Job growth: weak. Salary plateau: $50000/year"
    assert results["high_education_cost"].evidence == (
        "Education cost: $64,000 vs first year salary: $42,000 (152% of salary)"
    )
    assert results["location_salary_mismatch"].evidence == (
        "Suburban - Starting salary $42,000, monthly expenses $1,800"
    )
    assert results["no_work_income"].evidence == "4 years of school with $0 income"


def test_fractional_duration_evidence_and_missing_school_years():
    scen = make_scenario(education_path="Bootcamp (6mo)", years_in_school=0.5, education_cost_per_year=14000)
    results = _by_id(describe_all_concerns(scen, project(scen)))
    assert results["no_work_income"].evidence == "0.5 years of school with $0 income"
    assert results["school_deficit"].evidence == "Around $0/month shortfall"
    assert not results["school_deficit"].applies


def test_dependent_burden_uses_entry_salary():
    scen = make_scenario(dependents=1)
    results = _by_id(describe_all_concerns(scen, project(scen)))
    assert results["dependent_burden"].applies
    assert results["dependent_burden"].evidence == "Dependent costs: $7200/year. Entry salary: $42000/year"

    nurse = make_scenario(dependents=2, start_salary=62000, salary_5yr=72000, job_growth="strong")
    assert not _by_id(describe_all_concerns(nurse, project(nurse)))["dependent_burden"].applies


def test_working_low_cost_plan_avoids_debt_concerns():
    scen = make_scenario(
        career="Nursing",
        location="Mid-size city",
        start_salary=62000,
        salary_5yr=72000,
        job_growth="strong",
        monthly_base_expenses=1000,
        education_path="Community College (2yr)",
        years_in_school=2,
        education_cost_per_year=6000,
        will_work_during_school=True,
    )
    # 6,000 tuition + 12,000 living is fully covered by 18,000 of wages.
    assert identify_concerns(scen, project(scen)) == []


@pytest.mark.parametrize(
    "location,salary,expected",
    [
        ("San Francisco", 119000, True),
        ("San Francisco", 120000, False),
        ("Austin/Denver", 49000, True),
        ("Austin/Denver", 50000, False),
        ("Mid-size city", 10000, False),
        ("Suburban", 10000, False),
        ("Boston", 20000, False),
    ],
)
def test_location_salary_mismatch(location, salary, expected):
    scen = make_scenario(location=location, start_salary=salary, years_in_school=2)
    results = _by_id(describe_all_concerns(scen, project(scen)))
    assert results["location_salary_mismatch"].applies is expected


def _rows(school_surplus=-100, first_dti=0.0, first_income=42000, final_debt=0):
    """Four study years then six working years, with the threshold fields set directly."""
    rows = []
    for year in range(1, 11):
        is_school = year <= 4
        rows.append(
            ProjectionYear(
                year=year,
                is_school=is_school,
                debt=final_debt if year == 10 else 0,
                annual_income=0 if is_school else first_income,
                monthly_debt_payment=0,
                annual_debt_payment=0,
                debt_to_income_ratio=first_dti if year == 5 else 0.0,
                monthly_surplus=school_surplus if is_school else 0,
                net_worth=0,
            )
        )
    return rows


@pytest.mark.parametrize(
    "concern_id,scenario_overrides,row_values,expected",
    [
        ("debt_burden", {}, {"first_dti": 20.0}, False),
        ("debt_burden", {}, {"first_dti": 20.1}, True),
        ("school_deficit", {}, {"school_surplus": -500}, False),
        ("school_deficit", {}, {"school_surplus": -501}, True),
        ("extended_debt", {}, {"final_debt": 5000}, False),
        ("extended_debt", {}, {"final_debt": 5001}, True),
        ("dependent_burden", {"dependents": 1}, {"first_income": 50000}, False),
        ("dependent_burden", {"dependents": 1}, {"first_income": 49999}, True),
        ("dependent_burden", {"dependents": 0}, {"first_income": 10000}, False),
        # 4 years at 16,000 is 64,000 of tuition, exactly 40% of 160,000.
        ("high_education_cost", {}, {"first_income": 160000}, False),
        ("high_education_cost", {}, {"first_income": 159999}, True),
    ],
)
def test_thresholds_are_strict(concern_id, scenario_overrides, row_values, expected):
    scen = make_scenario(**scenario_overrides)
    rows = _rows(**row_values)
    predicate = CONCERNS_BY_ID[concern_id].predicate
    assert predicate(first_post_grad_year(rows), scen, rows) is expected


def test_zero_dti_evidence_reads_as_whole_number():
    scen = make_scenario(education_cost_per_year=0, monthly_base_expenses=1000, will_work_during_school=True)
    evidence = format_evidence("debt_burden", scen, project(scen))
    assert evidence == "$0/month debt payment vs $3500/month salary (0% DTI)"


def test_identify_is_filtered_describe_for_all_tables():
    for scen in table_scenarios():
        rows = project(scen)
        everything = describe_all_concerns(scen, rows)
        applying = identify_concerns(scen, rows)
        assert [c.id for c in everything] == list(CONCERN_IDS)
        assert applying == [c for c in everything if c.applies]
        for c in everything:
            assert c.evidence == format_evidence(c.id, scen, rows)


def test_location_mismatch_never_outside_listed_markets():
    for scen in table_scenarios():
        if scen.location in ("San Francisco", "Austin/Denver"):
            continue
        results = _by_id(describe_all_concerns(scen, project(scen)))
        assert not results["location_salary_mismatch"].applies


def test_unknown_concern_id_raises(teacher_scenario):
    with pytest.raises(KeyError):
        format_evidence("vibes", teacher_scenario, project(teacher_scenario))
