"""
Database Health Check Script
Verifies that the catalog database is reachable and its derived state is consistent
"""

from app import create_app
from models import db
from models.category import Category
from models.product import Product
from models.review import Review
from models.search_history import SearchHistory, SearchTerm
from models.user import User
from services.review_service import recompute_rating_summary
from sqlalchemy import inspect


def find_inconsistent_products():
    """Return products whose stored rating summary disagrees with their reviews"""
    inconsistent = []
    for product in Product.query.all():
        stored = (product.num_reviews, product.rating)
        ratings = [review.rating for review in product.reviews]
        expected = (len(ratings), sum(ratings) / len(ratings) if ratings else 0.0)
        if stored[0] != expected[0] or abs(stored[1] - expected[1]) > 1e-9:
            inconsistent.append((product, stored, expected))
    return inconsistent


def check_database(repair=False):
    """Check if database is working correctly"""
    app = create_app('development')

    with app.app_context():
        try:
            print("=" * 60)
            print("DATABASE HEALTH CHECK")
            print("=" * 60)

            # Check if tables exist
            inspector = inspect(db.engine)
            tables = inspector.get_table_names()

            expected_tables = [
                'users', 'categories', 'products', 'reviews',
                'search_histories', 'search_terms'
            ]

            missing_tables = set(expected_tables) - set(tables)
            if missing_tables:
                print(f"\n❌ MISSING TABLES: {missing_tables}")
                return False

            print(f"\n✅ All {len(expected_tables)} expected tables exist")

            # Check record counts
            print("\n📊 Record Counts:")
            counts = {
                'Users': User.query.count(),
                'Categories': Category.query.count(),
                'Products': Product.query.count(),
                'Reviews': Review.query.count(),
                'Search Histories': SearchHistory.query.count(),
                'Search Terms': SearchTerm.query.count(),
            }

            for name, count in counts.items():
                print(f"  - {name}: {count}")

            if Category.query.count() == 0:
                print("\n⚠️  WARNING: No categories in database!")
                print("   Run: python populate_categories.py")

            inconsistent = find_inconsistent_products()
            if inconsistent:
                print(f"\n⚠️  {len(inconsistent)} product(s) with a stale rating summary:")
                for product, stored, expected in inconsistent:
                    print(f"  - {product.id} {product.name}: stored={stored} expected={expected}")
                    if repair:
                        recompute_rating_summary(product)
                if repair:
                    db.session.commit()
                    print("   Repaired.")
                else:
                    return False

            print("\n" + "=" * 60)
            print("✅ DATABASE IS HEALTHY!")
            print("=" * 60)
            return True

        except Exception as e:
            db.session.rollback()
            print("\n" + "=" * 60)
            print(f"❌ DATABASE ERROR: {e}")
            print("=" * 60)
            return False


if __name__ == '__main__':
    import sys
    check_database(repair='--repair' in sys.argv)
