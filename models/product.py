from models import db
from datetime import datetime, timezone


class Product(db.Model):
    """Product model - catalog entry owning its reviews and rating summary"""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(200), nullable=False, index=True)
    brand = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(500))

    price = db.Column(db.Numeric(precision=10, scale=2), nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False)
    count_in_stock = db.Column(db.Integer, nullable=False, default=0)

    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False, index=True)

    # Derived from reviews: num_reviews == len(reviews), rating == mean of review ratings
    rating = db.Column(db.Float, nullable=False, default=0.0)
    num_reviews = db.Column(db.Integer, nullable=False, default=0)

    # Optimistic locking counter, bumped by SQLAlchemy on every UPDATE
    version_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    category = db.relationship('Category', back_populates='products')
    reviews = db.relationship(
        'Review',
        back_populates='product',
        order_by='Review.id',
        cascade='all, delete-orphan'
    )

    __mapper_args__ = {'version_id_col': version_id}

    def to_dict(self, include_reviews=True):
        data = {
            'id': self.id,
            'name': self.name,
            'brand': self.brand,
            'description': self.description,
            'image': self.image,
            'price': float(self.price) if self.price is not None else None,
            'quantity': self.quantity,
            'count_in_stock': self.count_in_stock,
            'category': self.category.to_dict() if self.category else None,
            'rating': self.rating,
            'num_reviews': self.num_reviews,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_reviews:
            data['reviews'] = [review.to_dict() for review in self.reviews]
        return data

    def __repr__(self):
        return f'<Product {self.name}>'
