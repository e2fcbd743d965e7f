"""Search History Service - Persists the ordered log of terms each user searches"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models import db
from models.search_history import SearchHistory, SearchTerm
from models.user import User
from services.exceptions import NotFoundError, StoreError
from services.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)

# Serializes appends for the same user within this process
_history_locks = KeyedLock()


def get_search_history(user_id: int) -> Optional[SearchHistory]:
    """
    Get a user's search history.

    Args:
        user_id: The ID of the user

    Returns:
        The SearchHistory, or None if the user has never searched
    """
    try:
        return SearchHistory.query.filter_by(user_id=user_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load search history for user_id={user_id}: {str(e)}", exc_info=True)
        raise StoreError('get_search_history', e) from e


def _append(user_id: int, term: str) -> SearchHistory:
    history = SearchHistory.query.filter_by(user_id=user_id).with_for_update().first()

    if history is None:
        if db.session.get(User, user_id) is None:
            raise NotFoundError('User', user_id)

        logger.info(f"Creating search history for user_id={user_id}")
        history = SearchHistory(user_id=user_id, entries=[SearchTerm(term=term)])
        db.session.add(history)
    else:
        history.entries.append(SearchTerm(term=term))

    return history


def append_search_term(user_id: int, term: str) -> SearchHistory:
    """
    Append a term to a user's search history, creating the history on first search.

    Appends for the same user are serialized so that two concurrent first
    searches never create two histories. If another process creates the
    history between our read and our commit, the unique constraint on user_id
    rejects our insert and the term is appended to the winner's record instead.

    Args:
        user_id: The ID of the user performing the search
        term: The (already validated) search term

    Returns:
        The updated SearchHistory

    Raises:
        NotFoundError: If the user does not exist
        StoreError: If the database operation fails
    """
    with _history_locks.hold(user_id):
        try:
            history = _append(user_id, term)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning(f"Search history for user_id={user_id} was created concurrently, retrying append")
            try:
                history = _append(user_id, term)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Failed to append search term for user_id={user_id}: {str(e)}", exc_info=True)
                raise StoreError('append_search_term', e) from e
        except NotFoundError:
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to append search term for user_id={user_id}: {str(e)}", exc_info=True)
            raise StoreError('append_search_term', e) from e

    logger.debug(f"Appended search term '{term}' for user_id={user_id}")
    return history
