from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from services.search_intake_service import get_search_summary, submit_search
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('search', __name__, url_prefix='/api/search')


@bp.route('', methods=['POST'])
@login_required
def search_input():
    """
    Record a search term for the current user and return their most searched term.

    Request body:
    {
        "term": "running shoes"
    }

    Response (201):
    {
        "success": true,
        "message": "Search input saved successfully",
        "recommendation": ["running shoes"]
    }
    """
    data = request.get_json(silent=True) or {}

    result = submit_search(current_user.id, data.get('term'))

    return jsonify({
        'success': True,
        'message': 'Search input saved successfully',
        'recommendation': result['recommendation']
    }), 201


@bp.route('/history', methods=['GET'])
@login_required
def search_history():
    """
    Get the current user's search terms, per-term counts and recommendation.

    Returns:
        JSON object with terms (submission order), counts and recommendation
    """
    summary = get_search_summary(current_user.id)

    return jsonify({
        'success': True,
        'data': summary,
        'count': len(summary['terms'])
    }), 200
