from models import db
from datetime import datetime, timezone


class SearchHistory(db.Model):
    """SearchHistory model - one ordered log of search terms per user"""
    __tablename__ = 'search_histories'

    id = db.Column(db.Integer, primary_key=True)

    # At most one history per user
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    user = db.relationship('User', back_populates='search_history')
    entries = db.relationship(
        'SearchTerm',
        back_populates='history',
        order_by='SearchTerm.id',
        cascade='all, delete-orphan'
    )

    @property
    def terms(self):
        """Search terms in submission order, duplicates included"""
        return [entry.term for entry in self.entries]

    def __repr__(self):
        return f'<SearchHistory user_id={self.user_id} terms={len(self.entries)}>'


class SearchTerm(db.Model):
    """SearchTerm model - a single submitted search, ordered by id"""
    __tablename__ = 'search_terms'

    id = db.Column(db.Integer, primary_key=True)

    history_id = db.Column(db.Integer, db.ForeignKey('search_histories.id'), nullable=False, index=True)
    term = db.Column(db.String(200), nullable=False)

    searched_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    history = db.relationship('SearchHistory', back_populates='entries')

    def __repr__(self):
        return f'<SearchTerm {self.term!r} history_id={self.history_id}>'
