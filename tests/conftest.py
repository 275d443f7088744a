"""
Shared fixtures: a small records CSV and a SQLite database loaded from it.
"""
import pytest
from heart_failure.core.db import get_engine
from heart_failure.services.etl import run_etl

HEADER = (
    "age,anaemia,creatinine_phosphokinase,diabetes,ejection_fraction,high_blood_pressure,"
    "platelets,serum_creatinine,serum_sodium,sex,smoking,time,DEATH_EVENT"
)

CLEAN_ROWS = [
    "75,0,582,0,20,1,265000,1.9,130,1,0,4,1",
    "55,0,7861,0,38,0,263358.03,1.1,136,1,0,6,1",
    "65,0,146,0,20,0,162000,1.3,129,1,1,7,1",
    "50,1,111,0,20,0,210000,1.9,137,1,0,7,1",
    "65,1,160,1,20,0,327000,2.7,116,0,0,8,1",
    "90,1,47,0,40,1,204000,2.1,132,1,1,8,1",
    "75,1,246,0,15,0,127000,1.2,137,1,0,10,1",
    "60.667,1,315,1,60,0,454000,1.1,131,1,1,10,1",
    "42,0,582,0,40,0,263358.03,1.18,137,0,0,250,0",
    "40,0,244,0,45,1,,0.9,140,0,1,230,0",
    "70,0,69,1,40,1,293000,1.7,136,0,0,231,0",
    "68,1,220,0,25,1,270000,1.6,135,0,0,100,0",
]

BAD_ROWS = [
    "50,0,100,0,120,0,250000,1.0,138,1,0,50,0",   # ejection fraction out of range
    "55,2,100,0,40,0,250000,1.0,138,1,0,50,0",    # anaemia not 0/1
    "abc,0,100,0,40,0,250000,1.0,138,1,0,50,0",   # age not numeric
]


@pytest.fixture
def raw_csv(tmp_path):
    path = tmp_path / "heart_failure_clinical_records.csv"
    path.write_text("\n".join([HEADER] + CLEAN_ROWS + BAD_ROWS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def engine(tmp_path):
    eng = get_engine(f"sqlite:///{tmp_path / 'heart_failure.db'}")
    yield eng
    eng.dispose()


@pytest.fixture
def loaded_engine(engine, raw_csv, tmp_path):
    run_etl(engine, raw_csv, tmp_path / "clean.csv", tmp_path / "rejects.csv")
    return engine


@pytest.fixture
def conn(loaded_engine):
    with loaded_engine.connect() as c:
        yield c


@pytest.fixture
def record():
    """One valid row, without patient_id."""
    return {
        "age": 58, "anaemia": 0, "creatinine_phosphokinase": 120, "diabetes": 0,
        "ejection_fraction": 40, "high_blood_pressure": 0, "platelets": 250000.0,
        "serum_creatinine": 1.0, "serum_sodium": 138, "sex": 1, "smoking": 0,
        "time": 30, "death_event": 0,
    }
