"""
Database objects derived from the heart_failure table:
- views high_risk_patients and critical_patients
- mark_critical trigger (low ejection fraction forces death_event = 1)
- death_summary materialized view
- chk_ejection_fraction check, added after data is loaded

PostgreSQL gets the native objects. SQLite gets triggers and a snapshot
table with the same observable behaviour.
"""

from __future__ import annotations
import logging
from sqlalchemy import Integer, and_, column, func, inspect, select, table
from sqlalchemy.engine import Connection, Engine
from heart_failure.core.db import is_postgres
from heart_failure.core.config import (
    CRITICAL_EF_THRESHOLD,
    CRITICAL_MIN_CREATININE,
    EF_MAX,
    EF_MIN,
    HIGH_RISK_MAX_EF,
    HIGH_RISK_MIN_AGE,
    HIGH_RISK_MIN_CREATININE,
)
from heart_failure.models.tables import heart_failure as hf

log = logging.getLogger(__name__)

CHECK_NAME = "chk_ejection_fraction"
TRIGGER_NAME = "mark_critical"

def high_risk_condition(source=hf):
    return and_(
        source.c.age > HIGH_RISK_MIN_AGE,
        source.c.ejection_fraction < HIGH_RISK_MAX_EF,
        source.c.serum_creatinine > HIGH_RISK_MIN_CREATININE,
    )

def critical_condition(source=hf):
    return and_(
        source.c.death_event == 1,
        source.c.serum_creatinine > CRITICAL_MIN_CREATININE,
    )

HIGH_RISK_SELECT = select(hf).where(high_risk_condition())
CRITICAL_SELECT = select(hf).where(critical_condition())
DEATH_SUMMARY_SELECT = (
    select(hf.c.sex, func.count().label("deaths"))
    .where(hf.c.death_event == 1)
    .group_by(hf.c.sex)
)

VIEWS = {
    "high_risk_patients": HIGH_RISK_SELECT,
    "critical_patients": CRITICAL_SELECT,
}

# queryable handles for the derived relations
def _mirror(name: str):
    return table(name, *[column(c.name, c.type) for c in hf.c])

high_risk_patients = _mirror("high_risk_patients")
critical_patients = _mirror("critical_patients")
death_summary = table("death_summary", column("sex", Integer), column("deaths", Integer))


def _literal_sql(stmt, conn: Connection) -> str:
    return str(stmt.compile(dialect=conn.dialect, compile_kwargs={"literal_binds": True}))


def create_views(conn: Connection) -> None:
    for name, stmt in VIEWS.items():
        conn.exec_driver_sql(f"DROP VIEW IF EXISTS {name}")
        conn.exec_driver_sql(f"CREATE VIEW {name} AS {_literal_sql(stmt, conn)}")
        log.info("View %s created", name)


_PG_TRIGGER_FUNCTION = f"""
CREATE OR REPLACE FUNCTION {TRIGGER_NAME}()
RETURNS TRIGGER AS $$
BEGIN
    IF NEW.ejection_fraction < {CRITICAL_EF_THRESHOLD} THEN
        NEW.death_event := 1;
    END IF;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql
"""

_SQLITE_TRIGGER = """
CREATE TRIGGER IF NOT EXISTS {name}_{event} AFTER {event_sql} ON heart_failure
FOR EACH ROW WHEN NEW.ejection_fraction < {threshold}
    AND (NEW.death_event IS NULL OR NEW.death_event <> 1)
BEGIN
    UPDATE heart_failure SET death_event = 1 WHERE patient_id = NEW.patient_id;
END
"""

def install_critical_trigger(conn: Connection) -> None:
    """Rows inserted or updated from now on with a low ejection fraction get death_event = 1."""
    if is_postgres(conn):
        conn.exec_driver_sql(_PG_TRIGGER_FUNCTION)
        conn.exec_driver_sql(f"DROP TRIGGER IF EXISTS {TRIGGER_NAME} ON heart_failure")
        conn.exec_driver_sql(
            f"CREATE TRIGGER {TRIGGER_NAME} BEFORE INSERT OR UPDATE ON heart_failure "
            f"FOR EACH ROW EXECUTE FUNCTION {TRIGGER_NAME}()"
        )
    else:
        for event, event_sql in (("insert", "INSERT"), ("update", "UPDATE")):
            conn.exec_driver_sql(_SQLITE_TRIGGER.format(
                name=TRIGGER_NAME, event=event, event_sql=event_sql, threshold=CRITICAL_EF_THRESHOLD,
            ))
    log.info("Trigger %s installed (ejection_fraction < %d)", TRIGGER_NAME, CRITICAL_EF_THRESHOLD)


def create_death_summary(conn: Connection) -> None:
    body = _literal_sql(DEATH_SUMMARY_SELECT, conn)
    if is_postgres(conn):
        conn.exec_driver_sql("DROP MATERIALIZED VIEW IF EXISTS death_summary")
        conn.exec_driver_sql(f"CREATE MATERIALIZED VIEW death_summary AS {body}")
    else:
        conn.exec_driver_sql("DROP TABLE IF EXISTS death_summary")
        conn.exec_driver_sql(f"CREATE TABLE death_summary AS {body}")
    log.info("death_summary created")


def refresh_death_summary(conn: Connection) -> None:
    """Recompute death_summary in full."""
    if is_postgres(conn):
        conn.exec_driver_sql("REFRESH MATERIALIZED VIEW death_summary")
    else:
        conn.exec_driver_sql("DELETE FROM death_summary")
        conn.exec_driver_sql(f"INSERT INTO death_summary (sex, deaths) {_literal_sql(DEATH_SUMMARY_SELECT, conn)}")
    log.info("death_summary refreshed")


_SQLITE_CHECK = """
CREATE TRIGGER IF NOT EXISTS {name}_{event} BEFORE {event_sql} ON heart_failure
FOR EACH ROW WHEN NEW.ejection_fraction NOT BETWEEN {lo} AND {hi}
BEGIN
    SELECT RAISE(ABORT, '{name}');
END
"""

def add_ejection_fraction_check(conn: Connection) -> None:
    """
    Add the ejection fraction range check to an existing table.
    Only new writes are validated; rows already stored are left as they are.
    """
    if is_postgres(conn):
        existing = {c["name"] for c in inspect(conn).get_check_constraints("heart_failure")}
        if CHECK_NAME in existing:
            log.info("Constraint %s already present", CHECK_NAME)
            return
        conn.exec_driver_sql(
            f"ALTER TABLE heart_failure ADD CONSTRAINT {CHECK_NAME} "
            f"CHECK (ejection_fraction BETWEEN {EF_MIN} AND {EF_MAX}) NOT VALID"
        )
    else:
        for event, event_sql in (("insert", "INSERT"), ("update", "UPDATE")):
            conn.exec_driver_sql(_SQLITE_CHECK.format(
                name=CHECK_NAME, event=event, event_sql=event_sql, lo=EF_MIN, hi=EF_MAX,
            ))
    log.info("Constraint %s added", CHECK_NAME)


def create_derived_objects(engine: Engine) -> None:
    with engine.begin() as conn:
        create_views(conn)
        install_critical_trigger(conn)
        create_death_summary(conn)
        add_ejection_fraction_check(conn)
    log.info("Derived objects ready")
