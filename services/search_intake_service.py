"""
Search Intake Service - Records a user's search and recommends their most searched term.

Workflow per search:
1. Validate the term
2. Append it to the user's stored history
3. Recompute term frequencies over the full stored history
4. Return the recommendation (zero or one term)
"""

import logging
from typing import Any, Dict, Optional
from flask import current_app, has_app_context
from pydantic import ValidationError as PydanticValidationError
from schemas.search import SearchInput
from services.exceptions import ValidationError
from services.recommendation_service import TIE_BREAK_RANDOM, count_terms, recommend
from services.search_history_service import append_search_term, get_search_history

logger = logging.getLogger(__name__)


def _tie_break_policy(tie_break: Optional[str]) -> str:
    if tie_break:
        return tie_break
    if has_app_context():
        return current_app.config.get('RECOMMENDATION_TIE_BREAK', TIE_BREAK_RANDOM)
    return TIE_BREAK_RANDOM


def validate_search_term(term: Any) -> str:
    """
    Validate and normalize a search term.

    Returns:
        The term with surrounding whitespace stripped

    Raises:
        ValidationError: If the term is missing, blank, not a string or too long
    """
    try:
        return SearchInput(term=term).term
    except PydanticValidationError as e:
        logger.warning(f"Rejected search term {term!r}")
        raise ValidationError('Invalid search term', details={'errors': e.errors(include_url=False)}) from e


def submit_search(user_id: int, term: Any, tie_break: Optional[str] = None) -> Dict[str, Any]:
    """
    Record a search and return the user's most searched term.

    Args:
        user_id: The ID of the authenticated user
        term: The submitted search term
        tie_break: Override for the RECOMMENDATION_TIE_BREAK config value

    Returns:
        dict: {'recommendation': [term]} (empty list only if nothing is stored)

    Raises:
        ValidationError: If the term is invalid (nothing is stored)
        NotFoundError: If the user does not exist
        StoreError: If the database operation fails

    Example:
        >>> submit_search(user_id=1, term='headphones')
        {'recommendation': ['headphones']}
    """
    term = validate_search_term(term)
    history = append_search_term(user_id, term)

    recommendation = recommend(history.terms, tie_break=_tie_break_policy(tie_break))

    logger.info(f"Recorded search for user_id={user_id}, recommendation={recommendation}")
    return {'recommendation': recommendation}


def get_search_summary(user_id: int, tie_break: Optional[str] = None) -> Dict[str, Any]:
    """
    Read-only view of a user's searches.

    Returns:
        dict: {
            'terms': list of terms in submission order,
            'counts': {term: count},
            'recommendation': [term] or []
        }
    """
    history = get_search_history(user_id)
    terms = history.terms if history else []

    return {
        'terms': terms,
        'counts': dict(count_terms(terms)),
        'recommendation': recommend(terms, tie_break=_tie_break_policy(tie_break))
    }
