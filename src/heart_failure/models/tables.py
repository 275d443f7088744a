"""
ORM model for the heart failure clinical records table.
"""

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import Column, Float, Integer

class Base(DeclarativeBase):
    pass

class HeartFailureRecord(Base):
    __tablename__ = "heart_failure"

    patient_id               = Column(Integer, primary_key=True, autoincrement=True)
    age                      = Column(Integer)
    anaemia                  = Column(Integer)   # 0/1
    creatinine_phosphokinase = Column(Integer)
    diabetes                 = Column(Integer)   # 0/1
    ejection_fraction        = Column(Integer)   # percent, 0..100
    high_blood_pressure      = Column(Integer)   # 0/1
    platelets                = Column(Float)
    serum_creatinine         = Column(Float)
    serum_sodium             = Column(Integer)
    sex                      = Column(Integer)   # 0/1
    smoking                  = Column(Integer)   # 0/1
    time                     = Column(Integer)   # follow-up days
    death_event              = Column(Integer)   # 0/1

# column order of the source CSV
DATA_COLUMNS = [
    "age", "anaemia", "creatinine_phosphokinase", "diabetes",
    "ejection_fraction", "high_blood_pressure", "platelets",
    "serum_creatinine", "serum_sodium", "sex", "smoking", "time", "death_event",
]

FLOAT_COLUMNS = ["platelets", "serum_creatinine"]
INT_COLUMNS = [c for c in DATA_COLUMNS if c not in FLOAT_COLUMNS]

BINARY_COLUMNS = ["anaemia", "diabetes", "high_blood_pressure", "sex", "smoking", "death_event"]

heart_failure = HeartFailureRecord.__table__
