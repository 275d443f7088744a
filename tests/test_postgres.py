"""
Runs against a live PostgreSQL when DATABASE_URL points at one.
Everything happens in one transaction that is rolled back.
"""
import pytest
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from heart_failure.core.config import DATABASE_URL
from heart_failure.core.db import get_engine
from heart_failure.models import Base, heart_failure as hf
from heart_failure.models.derived import (
    add_ejection_fraction_check,
    create_death_summary,
    install_critical_trigger,
    refresh_death_summary,
)
from heart_failure.services import analysis
from heart_failure.services.integrity import death_summary_consistent

pytestmark = pytest.mark.skipif(
    not (DATABASE_URL or "").startswith("postgresql"),
    reason="DATABASE_URL does not point at PostgreSQL",
)

@pytest.fixture
def pg_conn():
    engine = get_engine()
    with engine.connect() as conn:
        trans = conn.begin()
        Base.metadata.create_all(conn)
        try:
            yield conn
        finally:
            trans.rollback()
    engine.dispose()

def _insert(conn, record, **overrides):
    return conn.execute(insert(hf).values(**{**record, **overrides})).inserted_primary_key[0]

def test_trigger_marks_low_ejection_fraction(pg_conn, record):
    install_critical_trigger(pg_conn)
    pid = _insert(pg_conn, record, ejection_fraction=10)
    death = pg_conn.execute(select(hf.c.death_event).where(hf.c.patient_id == pid)).scalar_one()
    assert death == 1

def test_check_rejects_out_of_range(pg_conn, record):
    add_ejection_fraction_check(pg_conn)
    with pytest.raises(IntegrityError):
        with pg_conn.begin_nested():
            _insert(pg_conn, record, ejection_fraction=150)

def test_materialized_view_refresh(pg_conn, record):
    create_death_summary(pg_conn)
    assert death_summary_consistent(pg_conn)
    _insert(pg_conn, record, death_event=1)
    assert not death_summary_consistent(pg_conn)
    refresh_death_summary(pg_conn)
    assert death_summary_consistent(pg_conn)

def test_postgres_only_queries(pg_conn, record):
    _insert(pg_conn, record)
    rows = analysis.records_as_json(pg_conn, limit=1)
    assert "patient_id" in rows[0]
    assert analysis.median_age(pg_conn) is not None
    rollup = analysis.sex_diabetes_rollup(pg_conn)
    assert rollup[rollup["sex"].isna() & rollup["diabetes"].isna()]["total_patients"].tolist() == [
        analysis.count_patients(pg_conn)
    ]
