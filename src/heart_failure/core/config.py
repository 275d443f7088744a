
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()

# project paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
DATA_DIR   = BASE_DIR / "data"
RAW_DIR    = DATA_DIR / "raw"
CLEAN_DIR  = DATA_DIR / "cleaned"
LOGS_DIR   = DATA_DIR / "logs"

# input file
RECORDS_FILE = Path(os.getenv("HF_RECORDS_FILE", RAW_DIR / "heart_failure_clinical_records.csv"))
CSV_DELIMITER = ","

# output files
RECORDS_CLEAN = CLEAN_DIR / "heart_failure_clean.csv"

# logs
RECORDS_LOGS = LOGS_DIR / "heart_failure_rejects.csv"

# clinical thresholds
HIGH_RISK_MIN_AGE = 60
HIGH_RISK_MAX_EF = 35
HIGH_RISK_MIN_CREATININE = 1.5
CRITICAL_MIN_CREATININE = 2.0
CRITICAL_EF_THRESHOLD = 25
EF_MIN, EF_MAX = 0, 100

# Database
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5433")
DB_NAME = os.getenv("DB_NAME")


def _build_url() -> str | None:
    if not all([DB_USER, DB_PASSWORD, DB_NAME]):
        return None
    return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


DATABASE_URL = os.getenv("DATABASE_URL") or _build_url()
