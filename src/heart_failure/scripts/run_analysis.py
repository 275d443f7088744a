"""
Run every analysis query and print the results.
Run: python -m heart_failure.scripts.run_analysis
"""
import pandas as pd
from heart_failure.core.db import get_engine
from heart_failure.services.analysis import REPORTS

def _show(result):
    if isinstance(result, pd.DataFrame):
        if result.empty:
            print("   (no rows)")
        else:
            print(result.head(10).to_string(index=False))
            if len(result) > 10:
                print(f"   ... {len(result)} rows")
    elif isinstance(result, dict):
        for k, v in result.items():
            print(f"   {k}: {v}")
    elif isinstance(result, list):
        for item in result:
            print(f"   {item}")
    else:
        print(f"   {result}")

def main():
    engine = get_engine()
    print("Heart Failure Database - Analysis\n")
    with engine.connect() as conn:
        for i, (title, query) in enumerate(REPORTS.items(), start=1):
            print(f"\n{i}. {title}:")
            _show(query(conn))

if __name__ == "__main__":
    main()
