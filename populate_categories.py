#!/usr/bin/env python3
"""
Script to populate the categories table with the default storefront categories.
Existing categories are kept; only missing names are inserted.

Usage: python populate_categories.py
"""

from app import create_app
from models import db
from models.category import Category


def populate_categories():
    """Populate the categories table with the default catalog categories"""

    category_names = [
        'Accessories',
        'Audio',
        'Cameras',
        'Computers',
        'Gaming',
        'Home',
        'Phones',
        'Wearables',
    ]

    app = create_app()

    with app.app_context():
        print("Creating database tables...")
        db.create_all()

        existing = {category.name for category in Category.query.all()}
        missing = [name for name in category_names if name not in existing]

        print(f"\nInserting {len(missing)} of {len(category_names)} categories...")
        for name in missing:
            db.session.add(Category(name=name))
            print(f"  - {name}")

        try:
            db.session.commit()
            print(f"\n✓ Successfully inserted {len(missing)} categories!")
            print(f"✓ Database now contains {Category.query.count()} categories")

        except Exception as e:
            db.session.rollback()
            print(f"\n✗ Error occurred: {e}")
            raise


if __name__ == '__main__':
    populate_categories()
