from heart_failure.models.tables import (
    Base,
    HeartFailureRecord,
    heart_failure,
    DATA_COLUMNS,
    BINARY_COLUMNS,
    FLOAT_COLUMNS,
    INT_COLUMNS,
)

__all__ = ["Base", "HeartFailureRecord", "heart_failure", "DATA_COLUMNS", "BINARY_COLUMNS",
           "FLOAT_COLUMNS", "INT_COLUMNS"]
