"""
CLI wrapper for the heart failure ETL pipeline.
Run with:
    python -m heart_failure.scripts.run_etl
Or directly:
    python src/heart_failure/scripts/run_etl.py
"""
import logging
from heart_failure.core.logging_setup import setup_logging
from heart_failure.services.etl import run_etl

if __name__ == "__main__":
    setup_logging()
    log = logging.getLogger(__name__)

    log.info("Starting Heart Failure ETL Pipeline")
    stats = run_etl()

    log.info("Pipeline complete: %s", stats)
