import pytest
from heart_failure.services.analysis import risk_categories
from heart_failure.services.risk import HIGH_RISK, LOW_RISK, MEDIUM_RISK, classify_risk

@pytest.mark.parametrize("age, ef, expected", [
    (66, 29, HIGH_RISK),
    (66, 30, LOW_RISK),
    (65, 20, MEDIUM_RISK),   # boundary belongs to the medium band
    (45, 60, MEDIUM_RISK),
    (44, 20, LOW_RISK),
    (80, None, LOW_RISK),
    (None, 10, LOW_RISK),
])
def test_classify_risk(age, ef, expected):
    assert classify_risk(age, ef) == expected

def test_sql_and_python_rules_agree(conn):
    df = risk_categories(conn)
    assert len(df) == 12
    for row in df.itertuples():
        assert row.risk_category == classify_risk(row.age, row.ejection_fraction)
    assert df["risk_category"].value_counts().to_dict() == {MEDIUM_RISK: 5, LOW_RISK: 4, HIGH_RISK: 3}
