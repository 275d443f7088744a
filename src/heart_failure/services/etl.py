"""
ETL service - orchestrates extract, transform, load and derived objects
"""
import logging
from sqlalchemy.engine import Engine
from heart_failure.core.config import RECORDS_CLEAN, RECORDS_FILE, RECORDS_LOGS
from heart_failure.core.db import create_tables, get_engine
from heart_failure.transforms.transform_records import main as transform_records
from heart_failure.load.load_to_db import load_all
from heart_failure.models.derived import create_derived_objects

log = logging.getLogger(__name__)

def run_etl(engine: Engine | None = None, src=RECORDS_FILE, clean=RECORDS_CLEAN, rejects=RECORDS_LOGS) -> dict:
    """Execute the complete ETL pipeline"""
    try:
        engine = engine or get_engine()
        create_tables(engine)

        log.info("Running transform...")
        transform_stats = transform_records(src, clean, rejects)

        log.info("Loading data to database...")
        load_stats = load_all(engine, clean)

        log.info("Creating views, trigger, death summary and checks...")
        create_derived_objects(engine)

        stats = {**transform_stats, **load_stats}
        log.info("Pipeline complete: %s", stats)
        return stats

    except Exception as e:
        log.error("ETL pipeline failed: %s", e, exc_info=True)
        raise
