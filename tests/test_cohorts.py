"""
Unit tests for cohorts.py population filters.
"""

from cps_labor import cohorts


def _statuses(df):
    return sorted(df["employment_status"].tolist())


# =============================================================================
# Labor-force status
# =============================================================================

def test_status_filters(make_frame):
    df = make_frame([{"employment_status": s} for s in (1, 2, 3, 4, 5, 6, 7, -1)])

    assert _statuses(cohorts.labor_force(df)) == [1, 2, 3, 4]
    assert _statuses(cohorts.employed(df)) == [1, 2]
    assert _statuses(cohorts.unemployed(df)) == [3, 4]
    assert _statuses(cohorts.not_in_labor_force(df)) == [5, 6, 7]
    assert _statuses(cohorts.civilian_population(df)) == [1, 2, 3, 4, 5, 6, 7]


def test_filters_compose(make_frame):
    df = make_frame([
        {"employment_status": 3, "age": 16},
        {"employment_status": 1, "age": 16},
        {"employment_status": 3, "age": 40},
    ])

    result = cohorts.unemployed(cohorts.youth(df))

    assert len(result) == 1
    assert result["age"].iloc[0] == 16


def test_filters_do_not_mutate_input(make_frame):
    df = make_frame([{"employment_status": 1}, {"employment_status": 5}])
    before = df.copy()

    cohorts.employed(df)
    cohorts.valid_wage(df)

    assert df.equals(before)


def test_empty_result_is_empty_frame(make_frame):
    df = make_frame([{"employment_status": 1}])

    result = cohorts.unemployed(df)

    assert result.empty
    assert list(result.columns) == list(df.columns)


# =============================================================================
# Demographics
# =============================================================================

def test_age_bounds(make_frame):
    df = make_frame([{"age": a} for a in (15, 17, 18, 24, 25, 54, 55)])

    assert sorted(cohorts.youth(df)["age"]) == [15, 17]
    assert sorted(cohorts.prime_age(df)["age"]) == [25, 54]


def test_missing_age_never_matches(make_frame):
    df = make_frame([{"age": "n/a"}, {"age": 30}])

    assert len(cohorts.youth(df)) == 0
    assert len(cohorts.prime_age(df)) == 1


# =============================================================================
# Job characteristics
# =============================================================================

def test_employed_hourly_private(make_frame):
    df = make_frame([
        {},                                   # match
        {"class_of_worker": 5},               # nonprofit: match
        {"class_of_worker": 7},               # self-employed incorporated: match
        {"class_of_worker": 1},               # federal government
        {"paid_hourly": 2},                   # salaried
        {"employment_status": 4},             # looking for work
    ])

    assert len(cohorts.employed_hourly_private(df)) == 3


def test_valid_wage_excludes_missing_and_zero(make_frame):
    df = make_frame([
        {"hourly_earnings": -0.01},
        {"hourly_earnings": 0},
        {"hourly_earnings": 9.5},
    ])

    result = cohorts.valid_wage(df)

    assert result["hourly_earnings"].tolist() == [9.5]


def test_full_time_codes(make_frame):
    df = make_frame([{"usual_hours_code": c} for c in range(1, 9)])

    assert sorted(cohorts.full_time(df)["usual_hours_code"]) == [3, 4, 5, 6, 7]


def test_discouraged_workers_absent_column(make_frame):
    df = make_frame([{}])

    assert cohorts.discouraged_workers(df).empty


def test_with_valid_code_drops_not_applicable(make_frame):
    df = make_frame([
        {"industry_major": 0},
        {"industry_major": -1},
        {"industry_major": 15},
        {"industry_major": "?"},
        {"industry_major": 1},
        {"industry_major": 14},
    ])

    result = cohorts.with_valid_code(df, "industry_major", range(1, 15))

    assert sorted(result["industry_major"]) == [1, 14]
