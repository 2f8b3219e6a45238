# scripts/setup/seed_spaces.py
"""
Seed vehicle categories and the fixed space inventory.
Usage: python scripts/setup/seed_spaces.py
Does nothing to spaces if any already exist.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from lotmanager.database import SessionLocal, create_tables
from lotmanager.services.seeding import seed_categories, seed_spaces


def main():
    create_tables()
    db = SessionLocal()
    try:
        categories = seed_categories(db)
        spaces = seed_spaces(db)
    finally:
        db.close()

    print(f"✅ {categories} categories added")
    if spaces:
        print(f"✅ {spaces} spaces created")
    else:
        print("⚠️  Spaces already exist — nothing created")


if __name__ == "__main__":
    main()
