"""
Basic tests for the ETL pipeline
"""
import pytest
from sqlalchemy import text
from heart_failure.core import db
from heart_failure.services.etl import run_etl

def test_database_connection(engine):
    """Test that we can connect to the database"""
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1"))
        assert result.fetchone()[0] == 1

def test_missing_database_settings(monkeypatch):
    monkeypatch.setattr(db, "DATABASE_URL", None)
    with pytest.raises(ValueError, match="Missing required DB environment variables"):
        db.get_engine()

def test_etl_output_files_exist(engine, raw_csv, tmp_path):
    """Test that ETL creates cleaned and rejects files"""
    clean, rejects = tmp_path / "clean.csv", tmp_path / "rejects.csv"
    stats = run_etl(engine, raw_csv, clean, rejects)
    assert clean.exists(), "Cleaned records file not found"
    assert rejects.exists(), "Rejects file not found"
    assert stats == {"clean": 12, "rejected": 3, "records": 12}

def test_data_loaded_to_database(loaded_engine):
    """Test that data and derived objects were created"""
    with loaded_engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM heart_failure")).scalar_one() == 12
        assert conn.execute(text("SELECT COUNT(*) FROM high_risk_patients")).scalar_one() == 3
        assert conn.execute(text("SELECT COUNT(*) FROM critical_patients")).scalar_one() == 2
        assert conn.execute(text("SELECT COUNT(*) FROM death_summary")).scalar_one() == 2

def test_create_tables_is_idempotent(loaded_engine):
    db.create_tables(loaded_engine)
    with loaded_engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM heart_failure")).scalar_one() == 12
