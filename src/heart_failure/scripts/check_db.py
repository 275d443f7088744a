"""
Check the database connection, list tables and run the integrity checks.
Run with: python -m heart_failure.scripts.check_db
"""
from sqlalchemy import inspect, text
from heart_failure.core.db import get_engine
from heart_failure.services.integrity import run_checks

def main():
    try:
        engine = get_engine()
        insp = inspect(engine)

        print("Database Connection: SUCCESS\n")
        print("Tables in database:")

        tables = insp.get_table_names()
        with engine.connect() as conn:
            if tables:
                for table in tables:
                    count = conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()
                    print(f"  - {table}: {count} rows")
            else:
                print("  No tables found")

            if "heart_failure" in tables:
                print("\nIntegrity checks:")
                for name, result in run_checks(conn).items():
                    print(f"  - {name}: {result}")

    except Exception as e:
        print("Database Connection: FAILED")
        print(f"Error: {e}")

if __name__ == "__main__":
    main()
