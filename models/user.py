from models import db
from datetime import datetime
from flask_login import UserMixin
from sqlalchemy.orm import validates
import re


class User(UserMixin, db.Model):
    """User model - identity of shoppers who search and review"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String, unique=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    search_history = db.relationship(
        'SearchHistory', back_populates='user', uselist=False, cascade='all, delete-orphan'
    )
    reviews = db.relationship('Review', back_populates='user', lazy='dynamic')

    @validates('email')
    def validate_email(self, key, email):
        if not email:
            raise ValueError('Email is required')
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(pattern, email):
            raise ValueError(f'Invalid email format: {email}')
        return email

    def __repr__(self):
        return f'<User {self.email}>'
