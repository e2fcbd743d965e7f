from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from services import product_service
from services.review_service import add_product_review
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('products', __name__, url_prefix='/api/products')


def _products_response(products):
    return jsonify({
        'success': True,
        'products': [product.to_dict(include_reviews=False) for product in products],
        'count': len(products)
    }), 200


@bp.route('', methods=['GET'])
def fetch_products():
    """
    Search products by name.

    Query params:
        - keyword: case-insensitive substring of the product name; blank returns []
    """
    return _products_response(product_service.search_products(request.args.get('keyword')))


@bp.route('/all', methods=['GET'])
def fetch_all_products():
    """Newest products first."""
    return _products_response(product_service.list_products())


@bp.route('/top', methods=['GET'])
def fetch_top_products():
    """Highest rated products."""
    return _products_response(product_service.top_products())


@bp.route('/new', methods=['GET'])
def fetch_new_products():
    """Most recently added products."""
    return _products_response(product_service.new_products())


@bp.route('/filtered', methods=['POST'])
def filter_products():
    """
    Filter products by category and price range.

    Request body:
    {
        "checked": [1, 3],     // category ids, optional
        "radio": [10, 50]      // inclusive price range, optional
    }
    """
    data = request.get_json(silent=True) or {}
    products = product_service.filter_products(data.get('checked'), data.get('radio'))
    return _products_response(products)


@bp.route('/categories', methods=['GET'])
def fetch_categories():
    categories = product_service.list_categories()
    return jsonify({
        'success': True,
        'data': [category.to_dict() for category in categories],
        'count': len(categories)
    }), 200


@bp.route('/categories', methods=['POST'])
@login_required
def add_category():
    data = request.get_json(silent=True) or {}
    category = product_service.create_category(data.get('name'))
    return jsonify({'success': True, 'data': category.to_dict()}), 201


@bp.route('/<int:product_id>', methods=['GET'])
def fetch_product_by_id(product_id):
    """Get a product with its reviews."""
    product = product_service.get_product(product_id)
    return jsonify({'success': True, 'data': product.to_dict()}), 200


@bp.route('', methods=['POST'])
@login_required
def add_product():
    """Create a product from the JSON body."""
    product = product_service.create_product(request.get_json(silent=True) or {})
    return jsonify({'success': True, 'data': product.to_dict()}), 201


@bp.route('/<int:product_id>', methods=['PUT'])
@login_required
def update_product_details(product_id):
    """Update the product fields present in the JSON body."""
    product = product_service.update_product(product_id, request.get_json(silent=True) or {})
    return jsonify({'success': True, 'data': product.to_dict()}), 200


@bp.route('/<int:product_id>', methods=['DELETE'])
@login_required
def remove_product(product_id):
    removed = product_service.remove_product(product_id)
    return jsonify({'success': True, 'data': removed}), 200


@bp.route('/<int:product_id>/reviews', methods=['POST'])
@login_required
def create_product_review(product_id):
    """
    Review a product as the current user.

    Request body:
    {
        "rating": 5,
        "comment": "Great sound"
    }

    Returns:
        201 on success, 400 if the user already reviewed the product or the
        rating is invalid, 404 if the product does not exist
    """
    data = request.get_json(silent=True) or {}

    product = add_product_review(
        product_id=product_id,
        user_id=current_user.id,
        rating=data.get('rating'),
        comment=data.get('comment')
    )

    return jsonify({
        'success': True,
        'message': 'Review added',
        'num_reviews': product.num_reviews,
        'rating': product.rating
    }), 201
