from models import db
from sqlalchemy.orm import validates


class Category(db.Model):
    """Category model - groups products for browsing and filtering"""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(32), unique=True, nullable=False)

    # Relationships
    products = db.relationship('Product', back_populates='category', lazy='dynamic')

    @validates('name')
    def validate_name(self, key, name):
        if not name or not name.strip():
            raise ValueError('Category name is required')
        return name.strip()

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f'<Category {self.name}>'
