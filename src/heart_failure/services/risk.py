"""
Risk categories from age and ejection fraction. First matching rule wins:
HIGH RISK for age > 65 with ejection fraction < 30, MEDIUM RISK for ages
45..65 inclusive, LOW RISK otherwise (unknown inputs included).
"""
from __future__ import annotations
from sqlalchemy import and_, case

HIGH_RISK = "HIGH RISK"
MEDIUM_RISK = "MEDIUM RISK"
LOW_RISK = "LOW RISK"

HIGH_MIN_AGE = 65
HIGH_MAX_EF = 30
MEDIUM_AGE_RANGE = (45, 65)

def risk_category_expr(source):
    """SQL CASE expression over a table/alias exposing age and ejection_fraction."""
    return case(
        (and_(source.c.age > HIGH_MIN_AGE, source.c.ejection_fraction < HIGH_MAX_EF), HIGH_RISK),
        (source.c.age.between(*MEDIUM_AGE_RANGE), MEDIUM_RISK),
        else_=LOW_RISK,
    )

def classify_risk(age, ejection_fraction) -> str:
    """Python twin of risk_category_expr."""
    if age is not None and ejection_fraction is not None:
        if age > HIGH_MIN_AGE and ejection_fraction < HIGH_MAX_EF:
            return HIGH_RISK
    if age is not None:
        lo, hi = MEDIUM_AGE_RANGE
        if lo <= age <= hi:
            return MEDIUM_RISK
    return LOW_RISK
