"""
Unit tests for search history storage and the search intake service.

Covers appending to a user's history, recommendation on submit, term
validation and concurrent first searches for the same user.
"""

import sys
import os
import threading
import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.user import User
from models.search_history import SearchHistory, SearchTerm
from services.exceptions import NotFoundError, StoreError, ValidationError
from services import search_history_service
from services.search_history_service import append_search_term, get_search_history
from services.search_intake_service import get_search_summary, submit_search, validate_search_term


@pytest.fixture(scope='function')
def app_context():
    """Create a fresh app context and database for each test"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def test_user(app_context):
    """Create a test user"""
    user = User(username='shopper', email='shopper@example.com')
    db.session.add(user)
    db.session.commit()
    return user


class TestSearchHistoryStore:
    """Tests for get_search_history and append_search_term"""

    def test_no_history_before_first_search(self, test_user):
        assert get_search_history(test_user.id) is None

    def test_first_append_creates_history(self, test_user):
        history = append_search_term(test_user.id, 'camera')

        assert history.id is not None
        assert history.user_id == test_user.id
        assert history.terms == ['camera']
        assert SearchHistory.query.count() == 1

    def test_append_preserves_order_and_duplicates(self, test_user):
        for term in ['camera', 'lens', 'camera', 'tripod']:
            append_search_term(test_user.id, term)

        history = get_search_history(test_user.id)
        assert history.terms == ['camera', 'lens', 'camera', 'tripod']
        assert SearchHistory.query.count() == 1
        assert SearchTerm.query.count() == 4

    def test_histories_are_per_user(self, test_user):
        other = User(username='other', email='other@example.com')
        db.session.add(other)
        db.session.commit()

        append_search_term(test_user.id, 'camera')
        append_search_term(other.id, 'phone')

        assert get_search_history(test_user.id).terms == ['camera']
        assert get_search_history(other.id).terms == ['phone']

    def test_unknown_user_raises_not_found(self, app_context):
        with pytest.raises(NotFoundError):
            append_search_term(999, 'camera')

        assert SearchHistory.query.count() == 0

    def test_store_failure_raises_store_error_and_rolls_back(self, test_user):
        append_search_term(test_user.id, 'camera')

        with patch.object(db.session, 'commit', side_effect=OperationalError('COMMIT', {}, Exception('disk I/O error'))):
            with pytest.raises(StoreError) as exc_info:
                append_search_term(test_user.id, 'lens')

        assert exc_info.value.status_code == 500
        assert get_search_history(test_user.id).terms == ['camera']


class TestValidateSearchTerm:
    """Tests for validate_search_term"""

    def test_strips_whitespace(self):
        assert validate_search_term('  headphones  ') == 'headphones'

    @pytest.mark.parametrize('term', ['', '   ', None, 42, 'x' * 201])
    def test_rejects_invalid_terms(self, term):
        with pytest.raises(ValidationError) as exc_info:
            validate_search_term(term)

        assert exc_info.value.status_code == 400


class TestSubmitSearch:
    """Tests for submit_search"""

    def test_first_search_recommends_itself(self, test_user):
        result = submit_search(test_user.id, 'x')

        assert result == {'recommendation': ['x']}

    def test_history_kept_in_order(self, test_user):
        submit_search(test_user.id, 'x')
        submit_search(test_user.id, 'y')

        assert get_search_history(test_user.id).terms == ['x', 'y']

    def test_recommends_most_searched(self, test_user):
        for term in ['mouse', 'keyboard', 'mouse', 'monitor']:
            result = submit_search(test_user.id, term)

        assert result == {'recommendation': ['mouse']}

    def test_tie_stays_in_tied_set(self, test_user):
        submit_search(test_user.id, 'a')
        result = submit_search(test_user.id, 'b')

        assert len(result['recommendation']) == 1
        assert result['recommendation'][0] in {'a', 'b'}

    def test_first_policy_from_config(self, test_user, app_context):
        app_context.config['RECOMMENDATION_TIE_BREAK'] = 'first'

        submit_search(test_user.id, 'b')
        result = submit_search(test_user.id, 'a')

        assert result == {'recommendation': ['b']}

    def test_explicit_policy_overrides_config(self, test_user, app_context):
        app_context.config['RECOMMENDATION_TIE_BREAK'] = 'random'

        submit_search(test_user.id, 'b')
        result = submit_search(test_user.id, 'a', tie_break='first')

        assert result == {'recommendation': ['b']}

    def test_invalid_term_does_not_touch_store(self, test_user):
        with pytest.raises(ValidationError):
            submit_search(test_user.id, '   ')

        assert get_search_history(test_user.id) is None

    def test_term_is_stored_stripped(self, test_user):
        submit_search(test_user.id, '  speaker ')

        assert get_search_history(test_user.id).terms == ['speaker']

    def test_store_error_propagates(self, test_user):
        with patch('services.search_intake_service.append_search_term',
                   side_effect=StoreError('append_search_term', Exception('down'))):
            with pytest.raises(StoreError):
                submit_search(test_user.id, 'x')


class TestGetSearchSummary:
    """Tests for get_search_summary"""

    def test_empty_summary(self, test_user):
        assert get_search_summary(test_user.id) == {'terms': [], 'counts': {}, 'recommendation': []}

    def test_summary_counts(self, test_user):
        for term in ['a', 'b', 'a']:
            submit_search(test_user.id, term)

        summary = get_search_summary(test_user.id)

        assert summary['terms'] == ['a', 'b', 'a']
        assert summary['counts'] == {'a': 2, 'b': 1}
        assert summary['recommendation'] == ['a']


def test_concurrent_first_searches_create_single_history(tmp_path):
    """N concurrent searches by a brand-new user leave one history holding all N terms"""
    app = create_app('testing', SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'concurrency.db'}")

    with app.app_context():
        db.create_all()
        user = User(username='racer', email='racer@example.com')
        db.session.add(user)
        db.session.commit()
        user_id = user.id
        db.session.remove()

    terms = [f'term-{i}' for i in range(8)]
    results = {}
    errors = []
    barrier = threading.Barrier(len(terms))

    def worker(term):
        with app.app_context():
            barrier.wait()
            try:
                results[term] = submit_search(user_id, term)
            except Exception as e:
                errors.append(e)

    threads = [threading.Thread(target=worker, args=(term,)) for term in terms]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(results) == len(terms)

    with app.app_context():
        assert SearchHistory.query.filter_by(user_id=user_id).count() == 1
        history = get_search_history(user_id)
        assert sorted(history.terms) == sorted(terms)
        for result in results.values():
            assert len(result['recommendation']) == 1
            assert result['recommendation'][0] in terms
        db.session.remove()
        db.drop_all()


def test_history_created_by_another_connection_gets_the_term(tmp_path):
    """If another writer creates the history before our commit, the term is appended to theirs"""
    app = create_app('testing', SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'retry.db'}")
    real_append = search_history_service._append
    calls = []

    with app.app_context():
        db.create_all()
        user = User(username='late', email='late@example.com')
        db.session.add(user)
        db.session.commit()
        user_id = user.id

        def append_then_compete(uid, term):
            history = real_append(uid, term)
            calls.append(term)
            if len(calls) == 1:
                with db.engine.begin() as conn:
                    result = conn.execute(SearchHistory.__table__.insert().values(user_id=uid))
                    conn.execute(SearchTerm.__table__.insert().values(
                        history_id=result.inserted_primary_key[0], term='other'
                    ))
            return history

        with patch('services.search_history_service._append', side_effect=append_then_compete):
            history = append_search_term(user_id, 'mine')

        assert len(calls) == 2
        assert history.terms == ['other', 'mine']
        assert SearchHistory.query.filter_by(user_id=user_id).count() == 1

        db.session.remove()
        db.drop_all()
