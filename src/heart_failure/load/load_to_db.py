"""
Load cleaned records CSV into the database.
- Assumes the CSV is already cleaned by the transform step.
- patient_id is generated by the database.
- Skips the load when the table already holds rows.
"""

from __future__ import annotations
import logging
from pathlib import Path
import pandas as pd
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from heart_failure.core.db import get_engine
from heart_failure.core.config import RECORDS_CLEAN
from heart_failure.models import HeartFailureRecord, DATA_COLUMNS, INT_COLUMNS

log = logging.getLogger(__name__)

def _nan_to_none_dicts(df: pd.DataFrame, cols: list[str]) -> list[dict]:
    """Convert a DataFrame subset to list-of-dicts and replace NaN/NA with None."""
    out = []
    for rec in df[cols].astype(object).to_dict("records"):
        out.append({k: (None if pd.isna(v) else v) for k, v in rec.items()})
    return out

def load_records(session: Session, csv_path: str | Path = RECORDS_CLEAN) -> int:
    df = pd.read_csv(csv_path)
    log.info("Records: reading %d rows", len(df))

    cols = [c for c in df.columns if c in DATA_COLUMNS]
    for col in cols:
        df[col] = pd.to_numeric(df[col], errors="coerce")
        if col in INT_COLUMNS:
            df[col] = df[col].round().astype("Int64")

    recs = _nan_to_none_dicts(df, cols)
    # numpy scalars -> python for the DB driver
    objs = [
        HeartFailureRecord(**{k: (v.item() if hasattr(v, "item") else v) for k, v in rec.items()})
        for rec in recs
    ]
    session.bulk_save_objects(objs)
    log.info("Records: inserted %d", len(objs))
    return len(objs)

def load_all(engine: Engine | None = None, csv_path: str | Path = RECORDS_CLEAN) -> dict:
    log.info("Starting DB load")
    engine = engine or get_engine()

    with Session(engine) as session:
        existing = session.scalar(select(func.count()).select_from(HeartFailureRecord))
        if existing:
            # rows are bulk-created once
            log.warning("heart_failure already holds %d rows. Skipping load.", existing)
            return {"records": 0}
        try:
            count = load_records(session, csv_path)
            session.commit()
            log.info("Load committed successfully")
        except Exception as e:
            session.rollback()
            log.error("Load failed; rolled back: %s", e, exc_info=True)
            raise

    log.info("Load summary: records=%d", count)
    return {"records": count}

if __name__ == "__main__":
    from heart_failure.core.logging_setup import setup_logging
    setup_logging()
    load_all()
