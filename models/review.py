from models import db
from datetime import datetime, timezone

MIN_RATING = 1
MAX_RATING = 5


class Review(db.Model):
    """Review model - one rating and comment per (product, user)"""
    __tablename__ = 'reviews'

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    # Reviewer display name at the time of the review
    name = db.Column(db.String(100), nullable=False)

    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=False, default='')

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    product = db.relationship('Product', back_populates='reviews')
    user = db.relationship('User', back_populates='reviews')

    __table_args__ = (
        db.UniqueConstraint('product_id', 'user_id', name='unique_review_per_user'),
        db.CheckConstraint(f'rating BETWEEN {MIN_RATING} AND {MAX_RATING}', name='review_rating_range'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'rating': self.rating,
            'comment': self.comment,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Review product_id={self.product_id} user_id={self.user_id} rating={self.rating}>'
