"""
Transform heart failure records: normalise missing values, validate ranges and
binary indicators, write tidy CSV and log rejected rows.
"""

from __future__ import annotations
import logging
import math
import numpy as np
from pathlib import Path
import pandas as pd
from heart_failure.core.logging_setup import setup_logging
from heart_failure.extract.extract_records import read_records
from heart_failure.models.tables import BINARY_COLUMNS, DATA_COLUMNS, INT_COLUMNS
from heart_failure.core.config import (
    EF_MAX,
    EF_MIN,
    RECORDS_CLEAN,
    RECORDS_FILE,
    RECORDS_LOGS,
)

log = logging.getLogger(__name__)

# constants
MISSING_TOKENS = {t.lower() for t in ["", " ", "NA", "N/A", "NULL", "NaN"]}

# helpers
def _normalize_missing(series: pd.Series) -> pd.Series:
    """
    Map common missing tokens (case/space-insensitive) to NA.
    """
    s = series.astype(str)
    mask = s.str.strip().str.lower().isin(MISSING_TOKENS) | series.isna()
    out = series.astype(object).copy()
    out[mask] = pd.NA
    return out

def to_number(x) -> float | None:
    if x is None or pd.isna(x):
        return None
    try:
        v = float(str(x).strip())
    except ValueError:
        return None
    return v if math.isfinite(v) else None

def build_flags(row: pd.Series) -> str:
    flags = []

    # unparsable numerics
    for col in DATA_COLUMNS:
        raw = row.get(col)
        if pd.notna(raw) and to_number(raw) is None:
            flags.append(f"INVALID_{col.upper()}")

    # 0/1 indicators
    for col in BINARY_COLUMNS:
        v = to_number(row.get(col))
        if v is not None and v not in (0, 1):
            flags.append(f"INVALID_{col.upper()}")

    ef = to_number(row.get("ejection_fraction"))
    if ef is not None and not (EF_MIN <= ef <= EF_MAX):
        flags.append("EF_OUT_OF_RANGE")

    t = to_number(row.get("time"))
    if t is not None and t < 0:
        flags.append("NEGATIVE_TIME")

    return "OK" if not flags else "|".join(flags)

def coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    for col in DATA_COLUMNS:
        out[col] = pd.to_numeric(out[col], errors="coerce").astype("float64")
    # fractional ages exist in the public dataset; halves round up
    for col in INT_COLUMNS:
        out[col] = np.floor(out[col] + 0.5).astype("Int64")
    return out

# main transform
def main(
    src: str | Path = RECORDS_FILE,
    out: str | Path = RECORDS_CLEAN,
    rejects: str | Path = RECORDS_LOGS,
) -> dict:
    log.info("Loading records (extract)...")
    df = read_records(src)
    df = df[DATA_COLUMNS + ["source_file"]].copy()

    for col in DATA_COLUMNS:
        df[col] = _normalize_missing(df[col])

    # QA flags
    df["qa_flags"] = [build_flags(r) for _, r in df.iterrows()]
    bad = df["qa_flags"] != "OK"

    rejected = df.loc[bad]
    # header-only when nothing is rejected
    Path(rejects).parent.mkdir(parents=True, exist_ok=True)
    rejected.to_csv(rejects, index=False)
    if not rejected.empty:
        log.warning("Rejected %d rows, logged to %s", len(rejected), rejects)

    clean = coerce_types(df.loc[~bad, DATA_COLUMNS])

    missing = clean.isna().sum()
    for col, n in missing[missing > 0].items():
        log.warning("Column %s has %d missing values", col, n)

    Path(out).parent.mkdir(parents=True, exist_ok=True)
    clean.to_csv(out, index=False)
    log.info("Saved cleaned records: %s (%d rows)", out, len(clean))
    return {"clean": len(clean), "rejected": len(rejected)}

if __name__ == "__main__":
    setup_logging()
    main()
