"""
Apply the bulk update/delete and refresh death_summary.
Run: python -m heart_failure.scripts.run_maintenance
"""
import logging
from heart_failure.core.db import get_engine
from heart_failure.core.logging_setup import setup_logging
from heart_failure.models.derived import refresh_death_summary
from heart_failure.services.maintenance import mark_older_smokers, purge_invalid_ages

def main() -> dict:
    log = logging.getLogger(__name__)
    engine = get_engine()
    with engine.begin() as conn:
        updated = mark_older_smokers(conn)
        deleted = purge_invalid_ages(conn)
        refresh_death_summary(conn)
    log.info("Maintenance done: updated=%d, deleted=%d", updated, deleted)
    return {"updated": updated, "deleted": deleted}

if __name__ == "__main__":
    setup_logging()
    main()
