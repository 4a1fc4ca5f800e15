#!/usr/bin/env python3
"""
Initialize the finance tracker database.

Run this script to create the database schema. The CLI does the same on
startup, so this is only needed to prepare a database ahead of time.
"""
import sys
from pathlib import Path

from finance_tracker.config.settings import ConfigLoader
from finance_tracker.database.connection import DatabaseConfig, DatabaseManager


def main():
    """Initialize the database."""
    db_path = sys.argv[1] if len(sys.argv) > 1 else ConfigLoader.load_app_config()["database_path"]

    config = DatabaseConfig(Path(db_path))
    print(f"Initializing database at: {config.db_path}")

    with DatabaseManager(config) as db:
        version = db.initialize_schema()

    if version:
        print("✓ Database initialized successfully!")
        print(f"  Schema version: {version[0]}")
        print(f"  Description: {version[1]}")
    else:
        print("✗ Database initialization may have failed")


if __name__ == "__main__":
    main()
