"""
Dataset consistency checks for heart_failure and its derived objects.
"""
from __future__ import annotations
import logging
from sqlalchemy import func, not_, select
from sqlalchemy.engine import Connection
from heart_failure.core.config import EF_MAX, EF_MIN
from heart_failure.models.tables import heart_failure as hf
from heart_failure.models.derived import death_summary, high_risk_condition, high_risk_patients

log = logging.getLogger(__name__)

def ejection_fraction_violations(conn: Connection) -> int:
    """Rows whose ejection fraction lies outside [0, 100], including rows stored before the check existed."""
    stmt = select(func.count()).select_from(hf).where(not_(hf.c.ejection_fraction.between(EF_MIN, EF_MAX)))
    return conn.execute(stmt).scalar_one()

def high_risk_view_consistent(conn: Connection) -> bool:
    from_view = conn.execute(select(func.count()).select_from(high_risk_patients)).scalar_one()
    ad_hoc = conn.execute(select(func.count()).select_from(hf).where(high_risk_condition())).scalar_one()
    if from_view != ad_hoc:
        log.warning("high_risk_patients has %d rows, predicates match %d", from_view, ad_hoc)
    return from_view == ad_hoc

def death_summary_consistent(conn: Connection) -> bool:
    """
    Compare the death_summary snapshot against SUM(death_event) grouped by sex.
    A snapshot taken before later writes reports False until refreshed.
    """
    stored = {
        r.sex: r.deaths
        for r in conn.execute(select(death_summary.c.sex, death_summary.c.deaths))
    }
    live = {
        r.sex: r.deaths
        for r in conn.execute(
            select(hf.c.sex, func.sum(hf.c.death_event).label("deaths")).group_by(hf.c.sex)
        )
        if r.deaths
    }
    if stored != live:
        log.warning("death_summary is stale: stored=%s live=%s", stored, live)
    return stored == live

def run_checks(conn: Connection) -> dict:
    results = {
        "ejection_fraction_violations": ejection_fraction_violations(conn),
        "high_risk_view_consistent": high_risk_view_consistent(conn),
        "death_summary_consistent": death_summary_consistent(conn),
    }
    log.info("Integrity checks: %s", results)
    return results
