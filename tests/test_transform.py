"""
Extract and transform tests
"""
import pandas as pd
import pytest
from heart_failure.extract.extract_records import read_records
from heart_failure.transforms.transform_records import build_flags, main as transform_records, to_number

def test_read_records_normalises_headers(raw_csv):
    df = read_records(raw_csv)
    assert "death_event" in df.columns
    assert (df["source_file"] == raw_csv.name).all()
    assert len(df) == 15

def test_read_records_missing_column(tmp_path):
    path = tmp_path / "broken.csv"
    path.write_text("age,sex\n60,1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Missing columns"):
        read_records(path)

def test_transform_splits_clean_and_rejected(raw_csv, tmp_path):
    clean_path, rejects_path = tmp_path / "clean.csv", tmp_path / "rejects.csv"
    stats = transform_records(raw_csv, clean_path, rejects_path)
    assert stats == {"clean": 12, "rejected": 3}

    rejects = pd.read_csv(rejects_path)
    assert sorted(rejects["qa_flags"]) == ["EF_OUT_OF_RANGE", "INVALID_AGE", "INVALID_ANAEMIA"]

    clean = pd.read_csv(clean_path)
    assert "qa_flags" not in clean.columns
    # fractional age rounded
    assert 61 in clean["age"].tolist()
    assert clean["platelets"].isna().sum() == 1

HEADER = (
    "age,anaemia,creatinine_phosphokinase,diabetes,ejection_fraction,high_blood_pressure,"
    "platelets,serum_creatinine,serum_sodium,sex,smoking,time,death_event\n"
)

def test_clean_run_clears_previous_rejects(raw_csv, tmp_path):
    rejects = tmp_path / "rejects.csv"
    transform_records(raw_csv, tmp_path / "clean.csv", rejects)
    assert len(pd.read_csv(rejects)) == 3

    src = tmp_path / "ok.csv"
    src.write_text(HEADER + "60,0,100,0,40,0,250000,1.0,138,1,0,50,0\n", encoding="utf-8")
    stats = transform_records(src, tmp_path / "clean.csv", rejects)
    assert stats == {"clean": 1, "rejected": 0}
    logged = pd.read_csv(rejects)
    assert logged.empty
    assert "qa_flags" in logged.columns

def test_half_ages_round_up(tmp_path):
    src = tmp_path / "halves.csv"
    src.write_text(
        HEADER
        + "60.5,0,100,0,40,0,250000,1.0,138,1,0,50,0\n"
        + "61.5,0,100,0,40,0,250000,1.0,138,1,0,50,0\n"
        + "62.4,0,100,0,40,0,250000,1.0,138,1,0,50,0\n",
        encoding="utf-8",
    )
    clean = tmp_path / "clean.csv"
    transform_records(src, clean, tmp_path / "rejects.csv")
    assert pd.read_csv(clean)["age"].tolist() == [61, 62, 62]

def test_build_flags_collects_every_problem():
    row = pd.Series({
        "age": "70", "anaemia": "1", "creatinine_phosphokinase": "100", "diabetes": "x",
        "ejection_fraction": "-5", "high_blood_pressure": "0", "platelets": "1",
        "serum_creatinine": "1.0", "serum_sodium": "137", "sex": "1", "smoking": "3",
        "time": "-1", "death_event": "0",
    })
    flags = build_flags(row).split("|")
    assert set(flags) == {"INVALID_DIABETES", "INVALID_SMOKING", "EF_OUT_OF_RANGE", "NEGATIVE_TIME"}

def test_to_number():
    assert to_number(" 1.5 ") == 1.5
    assert to_number("abc") is None
    assert to_number(None) is None
    assert to_number("inf") is None
