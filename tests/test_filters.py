import pytest

from filters import (
    AgeRangePreset,
    PatientFilters,
    PatientListView,
    PatientTab,
    filter_patients,
    parse_age_range,
)
from patients import RiskLevel


@pytest.fixture
def roster(make_patient):
    return [
        make_patient(index=1, age=17, risk_level=RiskLevel.HIGH, conditions=("Heart Disease", "Obesity")),
        make_patient(index=2, age=18, risk_level=RiskLevel.MEDIUM, conditions=("Diabetes Type 2",)),
        make_patient(index=3, age=30, risk_level=RiskLevel.LOW, conditions=("Asthma", "Anxiety")),
        make_patient(index=4, age=31, risk_level=RiskLevel.HIGH, conditions=("Chronic Kidney Disease",)),
        make_patient(index=10, age=72, risk_level=RiskLevel.LOW, conditions=("Hypertension",)),
    ]


def ids(patients):
    return [p.id for p in patients]


def test_defaults_return_everything_in_order(patients):
    assert filter_patients(patients, "", PatientFilters(), PatientTab.ALL) == patients


def test_query_matches_id_exactly(roster):
    assert ids(filter_patients(roster, "P1001")) == ["P1001"]


def test_query_id_is_substring_match(roster):
    assert ids(filter_patients(roster, "P100")) == ["P1001", "P1002", "P1003", "P1004"]


def test_query_is_case_insensitive_on_name_and_conditions(roster):
    assert ids(filter_patients(roster, "patient 1")) == ["P1001", "P1010"]
    assert ids(filter_patients(roster, "KIDNEY")) == ["P1004"]
    assert ids(filter_patients(roster, "disease")) == ["P1001", "P1004"]


def test_age_range_is_inclusive(roster):
    filters = PatientFilters(age_range=(18, 30))
    assert ids(filter_patients(roster, "", filters)) == ["P1002", "P1003"]


def test_age_range_excludes_31_and_17(patients):
    result = filter_patients(patients, "", PatientFilters(age_range=(18, 30)))
    assert result
    assert all(18 <= p.age <= 30 for p in result)
    assert not any(p.age in (17, 31) for p in result)


def test_inverted_age_range_matches_nothing(roster):
    assert filter_patients(roster, "", PatientFilters(age_range=(50, 20))) == []


def test_risk_level_selection(roster):
    filters = PatientFilters.create(risk_levels=[RiskLevel.HIGH, RiskLevel.LOW])
    assert ids(filter_patients(roster, "", filters)) == ["P1001", "P1003", "P1004", "P1010"]


def test_condition_filter_is_substring(roster):
    filters = PatientFilters.create(conditions=["diabetes", "asthma"])
    assert ids(filter_patients(roster, "", filters)) == ["P1002", "P1003"]


def test_condition_filter_is_asymmetric(roster):
    # the selected label must be inside the patient's label, not the other way round
    filters = PatientFilters.create(conditions=["Diabetes Type 2 with complications"])
    assert filter_patients(roster, "", filters) == []


def test_high_risk_tab(roster):
    assert ids(filter_patients(roster, "", PatientFilters(), PatientTab.HIGH_RISK)) == ["P1001", "P1004"]


def test_predicates_combine_with_and(roster):
    filters = PatientFilters.create(risk_levels=[RiskLevel.HIGH], age_range=(18, 120))
    assert ids(filter_patients(roster, "kidney", filters, PatientTab.HIGH_RISK)) == ["P1004"]
    assert filter_patients(roster, "asthma", filters) == []


def test_parse_age_range_presets():
    assert parse_age_range("18-30") == (18, 30)
    assert parse_age_range("31-50") == (31, 50)
    assert parse_age_range("51-70") == (51, 70)
    assert parse_age_range("71+") == (71, 120)
    assert parse_age_range("all") is None
    assert parse_age_range("bogus") is None
    assert parse_age_range(None) is None
    assert AgeRangePreset.AGE_71_PLUS.bounds == (71, 120)


def test_filter_toggles_and_badge_count():
    filters = PatientFilters()
    assert filters.is_empty
    filters = filters.toggle_risk_level(RiskLevel.HIGH).toggle_condition("COPD").with_age_range("31-50")
    assert filters.active_count == 3
    assert filters.age_range == (31, 50)
    filters = filters.toggle_risk_level(RiskLevel.HIGH).toggle_condition("COPD")
    assert filters.active_count == 1
    assert filters.with_age_range("all").is_empty
    assert filters.cleared() == PatientFilters()


def test_filters_compare_structurally():
    a = PatientFilters.create(risk_levels=[RiskLevel.LOW, RiskLevel.HIGH], conditions=["Asthma"])
    b = PatientFilters.create(risk_levels=[RiskLevel.HIGH, RiskLevel.LOW], conditions=["Asthma"])
    assert a == b
    assert hash(a) == hash(b)


def test_list_view_memoizes_on_structural_equality(roster):
    view = PatientListView()
    first = view.visible(roster, "p", PatientFilters.create(risk_levels=[RiskLevel.HIGH]))
    second = view.visible(list(roster), "p", PatientFilters.create(risk_levels=[RiskLevel.HIGH]))
    assert first == second
    assert view.recomputations == 1
    view.visible(roster, "p", PatientFilters.create(risk_levels=[RiskLevel.HIGH]), PatientTab.HIGH_RISK)
    assert view.recomputations == 2
