"""
Verify that the database exposes every stored procedure used by the API.

Usage:
    python check_procedures.py

Exits with status 1 when procedures are missing or the database is unreachable.
"""
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.db.diagnostics import REQUIRED_PROCEDURES, find_missing_procedures
from app.db.session import create_db_engine


def check() -> int:
    engine = create_db_engine(settings)
    try:
        with engine.connect() as connection:
            missing = find_missing_procedures(connection)
    except Exception as e:
        print(f"Could not inspect the database: {e}")
        return 1
    finally:
        engine.dispose()

    if missing:
        print(f"Missing {len(missing)} of {len(REQUIRED_PROCEDURES)} procedures:")
        for name in missing:
            print(f"   - {name}")
        return 1

    print(f"All {len(REQUIRED_PROCEDURES)} procedures are present")
    return 0


if __name__ == "__main__":
    sys.exit(check())
