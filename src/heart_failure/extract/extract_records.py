"""
Extract heart failure clinical records, raw DataFrame.
"""
from __future__ import annotations
import logging
from pathlib import Path
import pandas as pd
from heart_failure.core.config import CSV_DELIMITER, RECORDS_FILE
from heart_failure.models.tables import DATA_COLUMNS

log = logging.getLogger(__name__)

def read_records(csv_path: str | Path = RECORDS_FILE) -> pd.DataFrame:
    """Read raw records CSV; headers are normalised to the table's column names."""
    df = pd.read_csv(csv_path, sep=CSV_DELIMITER, dtype=str, keep_default_na=False)
    df.columns = df.columns.str.strip().str.lower()

    missing = [c for c in DATA_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in records file: {missing}")

    df["source_file"] = Path(csv_path).name
    log.info("Extracted records: %s (%d rows)", csv_path, len(df))
    return df
