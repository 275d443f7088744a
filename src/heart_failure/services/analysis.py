"""
Analytical queries over the heart_failure table.

Row sets come back as pandas DataFrames, single-row aggregates as scalars or
dicts. Every function takes an open SQLAlchemy Connection.
"""

from __future__ import annotations
import json
import logging
import pandas as pd
from sqlalchemy import case, func, literal_column, null, or_, select, union_all
from sqlalchemy.engine import Connection
from heart_failure.core.db import is_postgres
from heart_failure.core.config import HIGH_RISK_MAX_EF, HIGH_RISK_MIN_AGE
from heart_failure.models.tables import heart_failure as hf
from heart_failure.models.derived import critical_patients, death_summary, high_risk_patients
from heart_failure.services.risk import risk_category_expr

log = logging.getLogger(__name__)

NORMAL_SODIUM = (135, 145)
ELDERLY_AGE = 70
LONG_FOLLOW_UP_DAYS = 200

def _frame(conn: Connection, stmt) -> pd.DataFrame:
    return pd.read_sql(stmt, conn)

def _num(v):
    """AVG comes back as Decimal on PostgreSQL."""
    return None if v is None else float(v)

def count_patients(conn: Connection) -> int:
    return conn.execute(select(func.count()).select_from(hf)).scalar_one()

def sample_rows(conn: Connection, limit: int = 5) -> pd.DataFrame:
    return _frame(conn, select(hf).order_by(hf.c.patient_id).limit(limit))

def smoking_death_rate(conn: Connection) -> pd.DataFrame:
    """Patients and deaths per smoking status."""
    stmt = (
        select(
            hf.c.smoking,
            func.count().label("total_patients"),
            func.sum(hf.c.death_event).label("deaths"),
        )
        .group_by(hf.c.smoking)
        .order_by(hf.c.smoking)
    )
    return _frame(conn, stmt)

def age_and_ejection_summary(conn: Connection) -> dict:
    row = conn.execute(select(
        func.avg(hf.c.age).label("avg_age"),
        func.avg(hf.c.ejection_fraction).label("avg_ejection_fraction"),
    )).one()
    return {"avg_age": _num(row.avg_age), "avg_ejection_fraction": _num(row.avg_ejection_fraction)}

def death_lab_averages(conn: Connection) -> dict:
    """Kidney and sodium levels across death cases."""
    row = conn.execute(
        select(
            func.avg(hf.c.serum_creatinine).label("avg_creatinine"),
            func.avg(hf.c.serum_sodium).label("avg_sodium"),
        ).where(hf.c.death_event == 1)
    ).one()
    return {"avg_creatinine": _num(row.avg_creatinine), "avg_sodium": _num(row.avg_sodium)}

def high_risk_count(conn: Connection) -> int:
    return conn.execute(select(func.count()).select_from(high_risk_patients)).scalar_one()

def older_than_average(conn: Connection) -> pd.DataFrame:
    avg_age = select(func.avg(hf.c.age)).scalar_subquery()
    return _frame(conn, select(hf).where(hf.c.age > avg_age).order_by(hf.c.patient_id))

def max_creatinine_by_sex(conn: Connection) -> pd.DataFrame:
    """Patients holding the highest serum creatinine within their sex."""
    h = hf.alias("h")
    max_for_sex = (
        select(func.max(hf.c.serum_creatinine))
        .where(hf.c.sex == h.c.sex)
        .scalar_subquery()
    )
    return _frame(conn, select(h).where(h.c.serum_creatinine == max_for_sex).order_by(h.c.patient_id))

def risk_categories(conn: Connection) -> pd.DataFrame:
    stmt = select(
        hf.c.patient_id,
        hf.c.age,
        hf.c.ejection_fraction,
        risk_category_expr(hf).label("risk_category"),
    ).order_by(hf.c.patient_id)
    return _frame(conn, stmt)

def cte_high_risk_count(conn: Connection) -> int:
    high_risk = (
        select(hf)
        .where(hf.c.age > HIGH_RISK_MIN_AGE, hf.c.ejection_fraction < HIGH_RISK_MAX_EF)
        .cte("high_risk")
    )
    return conn.execute(select(func.count().label("high_risk_patients")).select_from(high_risk)).scalar_one()

def elderly_if_deaths_exist(conn: Connection) -> pd.DataFrame:
    """Patients over 70, returned only when at least one death is recorded."""
    h = hf.alias("h")
    any_death = (
        select(literal_column("1"))
        .select_from(hf)
        .where(hf.c.death_event == 1, h.c.age > ELDERLY_AGE)
    )
    return _frame(conn, select(h).where(any_death.exists()).order_by(h.c.patient_id))

def critical_patient_rows(conn: Connection) -> pd.DataFrame:
    return _frame(conn, select(critical_patients).order_by(critical_patients.c.patient_id))

def median_age_stmt():
    return select(func.percentile_cont(0.5).within_group(hf.c.age).label("median_age")).select_from(hf)

def median_age(conn: Connection) -> float | None:
    if is_postgres(conn):
        return _num(conn.execute(median_age_stmt()).scalar_one())
    # no PERCENTILE_CONT outside PostgreSQL
    ages = _frame(conn, select(hf.c.age))["age"].dropna()
    return float(ages.median()) if len(ages) else None

def grouping_sets_stmt(a: str, b: str, label: str, cube: bool, postgres: bool):
    """
    ROLLUP(a, b) or CUBE(a, b) counts. Outside PostgreSQL the grouping sets
    are spelled out as a UNION ALL; rolled-up columns are NULL.
    """
    if postgres:
        grouper = func.cube if cube else func.rollup
        return select(hf.c[a], hf.c[b], func.count().label(label)).group_by(grouper(hf.c[a], hf.c[b]))

    sets = [(a, b), (a,), (b,), ()] if cube else [(a, b), (a,), ()]
    parts = []
    for keep in sets:
        cols = [hf.c[c].label(c) if c in keep else null().label(c) for c in (a, b)]
        parts.append(select(*cols, func.count().label(label)).select_from(hf).group_by(*[hf.c[c] for c in keep]))
    return union_all(*parts)

def sex_diabetes_rollup(conn: Connection) -> pd.DataFrame:
    return _frame(conn, grouping_sets_stmt("sex", "diabetes", "total_patients", cube=False, postgres=is_postgres(conn)))

def sex_smoking_cube(conn: Connection) -> pd.DataFrame:
    return _frame(conn, grouping_sets_stmt("sex", "smoking", "total", cube=True, postgres=is_postgres(conn)))

def filtered_totals(conn: Connection) -> dict:
    row = conn.execute(select(
        func.count().label("total_patients"),
        func.count().filter(hf.c.death_event == 1).label("total_deaths"),
        func.count().filter(hf.c.diabetes == 1).label("diabetics"),
    ).select_from(hf)).one()
    return dict(row._mapping)

def records_json_stmt(limit: int = 3):
    h = hf.alias("h")
    return select(func.row_to_json(literal_column("h"))).select_from(h).order_by(h.c.patient_id).limit(limit)

def records_as_json(conn: Connection, limit: int = 3) -> list[dict]:
    if is_postgres(conn):
        return list(conn.execute(records_json_stmt(limit)).scalars())
    df = sample_rows(conn, limit)
    return json.loads(df.to_json(orient="records"))

def smoker_split(conn: Connection) -> dict:
    row = conn.execute(select(
        func.sum(case((hf.c.smoking == 1, 1), else_=0)).label("smokers"),
        func.sum(case((hf.c.smoking == 0, 1), else_=0)).label("non_smokers"),
    ).select_from(hf)).one()
    return {"smokers": int(row.smokers or 0), "non_smokers": int(row.non_smokers or 0)}

def normal_sodium(conn: Connection) -> pd.DataFrame:
    stmt = select(hf).where(hf.c.serum_sodium.between(*NORMAL_SODIUM)).order_by(hf.c.patient_id)
    return _frame(conn, stmt)

def missing_platelets(conn: Connection) -> int:
    stmt = select(func.count().label("missing_platelets")).select_from(hf).where(hf.c.platelets.is_(None))
    return conn.execute(stmt).scalar_one()

def long_follow_up(conn: Connection, days: int = LONG_FOLLOW_UP_DAYS) -> pd.DataFrame:
    return _frame(conn, select(hf).where(hf.c.time > days).order_by(hf.c.patient_id))

def smokers_or_diabetics(conn: Connection) -> pd.DataFrame:
    stmt = select(hf).where(or_(hf.c.smoking == 1, hf.c.diabetes == 1)).order_by(hf.c.patient_id)
    return _frame(conn, stmt)

def death_summary_rows(conn: Connection) -> pd.DataFrame:
    return _frame(conn, select(death_summary).order_by(death_summary.c.sex))

REPORTS = {
    "Patient count": count_patients,
    "Sample rows": sample_rows,
    "Smoking vs deaths": smoking_death_rate,
    "Average age and ejection fraction": age_and_ejection_summary,
    "Lab averages in death cases": death_lab_averages,
    "High risk patients": high_risk_count,
    "Older than average": older_than_average,
    "Highest creatinine per sex": max_creatinine_by_sex,
    "Risk categories": risk_categories,
    "High risk (CTE)": cte_high_risk_count,
    "Over 70 when deaths exist": elderly_if_deaths_exist,
    "Critical patients": critical_patient_rows,
    "Median age": median_age,
    "Sex x diabetes rollup": sex_diabetes_rollup,
    "Sex x smoking cube": sex_smoking_cube,
    "Totals": filtered_totals,
    "Records as JSON": records_as_json,
    "Smokers vs non-smokers": smoker_split,
    "Normal sodium": normal_sodium,
    "Missing platelets": missing_platelets,
    "Follow-up over 200 days": long_follow_up,
    "Smokers or diabetics": smokers_or_diabetics,
    "Death summary": death_summary_rows,
}
