"""
Bulk mutations on heart_failure. Both run in the caller's transaction.
"""
import logging
from sqlalchemy import delete, update
from sqlalchemy.engine import Connection
from heart_failure.models.tables import heart_failure as hf

log = logging.getLogger(__name__)

SMOKER_MIN_AGE = 55
MIN_VALID_AGE = 1

def mark_older_smokers(conn: Connection, min_age: int = SMOKER_MIN_AGE) -> int:
    """Set smoking = 1 for non-smokers older than min_age."""
    result = conn.execute(
        update(hf)
        .where(hf.c.smoking == 0, hf.c.age > min_age)
        .values(smoking=1)
    )
    log.info("Marked %d patients over %d as smokers", result.rowcount, min_age)
    return result.rowcount

def purge_invalid_ages(conn: Connection, below: int = MIN_VALID_AGE) -> int:
    """Delete test records with an age under `below`."""
    result = conn.execute(delete(hf).where(hf.c.age < below))
    if result.rowcount:
        log.warning("Deleted %d records with age < %d", result.rowcount, below)
    else:
        log.info("No records with age < %d", below)
    return result.rowcount
