"""Product Service - Catalog CRUD and listing queries"""
import logging
from typing import Any, Dict, List, Optional
from flask import current_app
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.category import Category
from models.product import Product
from schemas.product import ProductFilter, ProductInput
from services.exceptions import NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)


def _parse_fields(fields: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    try:
        product_input = ProductInput.model_validate(fields or {})
    except PydanticValidationError as e:
        logger.warning(f"Rejected product fields: {list((fields or {}).keys())}")
        raise ValidationError('Invalid product fields', details={'errors': e.errors(include_url=False)}) from e

    values = product_input.model_dump(exclude_unset=True)
    category_id = values.get('category_id')
    if category_id is not None and db.session.get(Category, category_id) is None:
        raise NotFoundError('Category', category_id)
    return values


def _escape_like(keyword: str) -> str:
    return keyword.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def get_product(product_id: int) -> Product:
    """
    Get a product by ID.

    Raises:
        NotFoundError: If no product has this ID
    """
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product', product_id)
    return product


def create_product(fields: Dict[str, Any]) -> Product:
    """
    Create a catalog product.

    Args:
        fields: Product fields (name, brand, description, price, quantity,
            count_in_stock, category, image)

    Returns:
        The created Product

    Raises:
        ValidationError: If a field has the wrong type
        NotFoundError: If the category does not exist
        StoreError: If the insert fails, including missing required columns
    """
    values = _parse_fields(fields)

    try:
        product = Product(**values)
        db.session.add(product)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to create product: {str(e)}", exc_info=True)
        raise StoreError('create_product', e) from e

    logger.info(f"Created product id={product.id} name='{product.name}'")
    return product


def update_product(product_id: int, fields: Dict[str, Any]) -> Product:
    """
    Update the given fields of a product. Rating summary fields are never
    written here; they are owned by the review service.

    Raises:
        ValidationError: If a field has the wrong type
        NotFoundError: If the product or category does not exist
        StoreError: If the update fails
    """
    values = _parse_fields(fields)
    product = get_product(product_id)

    try:
        for key, value in values.items():
            setattr(product, key, value)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to update product id={product_id}: {str(e)}", exc_info=True)
        raise StoreError('update_product', e) from e

    logger.info(f"Updated product id={product_id} fields={sorted(values.keys())}")
    return product


def remove_product(product_id: int) -> Dict[str, Any]:
    """
    Delete a product together with its reviews.

    Returns:
        The removed product as a dict

    Raises:
        NotFoundError: If the product does not exist
        StoreError: If the delete fails
    """
    product = get_product(product_id)
    removed = product.to_dict(include_reviews=False)

    try:
        db.session.delete(product)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to remove product id={product_id}: {str(e)}", exc_info=True)
        raise StoreError('remove_product', e) from e

    logger.info(f"Removed product id={product_id}")
    return removed


def search_products(keyword: Optional[str]) -> List[Product]:
    """
    Case-insensitive substring search on product names.

    A missing or blank keyword returns no products.
    """
    if not keyword or not keyword.strip():
        return []

    pattern = f"%{_escape_like(keyword.strip())}%"
    return Product.query.filter(Product.name.ilike(pattern, escape='\\')).order_by(Product.id).all()


def list_products(limit: Optional[int] = None) -> List[Product]:
    """Newest products first, at most PRODUCT_LIST_LIMIT."""
    limit = limit or current_app.config['PRODUCT_LIST_LIMIT']
    return Product.query.order_by(Product.created_at.desc(), Product.id.desc()).limit(limit).all()


def top_products(limit: Optional[int] = None) -> List[Product]:
    """Highest rated products, at most TOP_PRODUCTS_LIMIT."""
    limit = limit or current_app.config['TOP_PRODUCTS_LIMIT']
    return Product.query.order_by(Product.rating.desc(), Product.id).limit(limit).all()


def new_products(limit: Optional[int] = None) -> List[Product]:
    """Most recently inserted products, at most NEW_PRODUCTS_LIMIT."""
    limit = limit or current_app.config['NEW_PRODUCTS_LIMIT']
    return Product.query.order_by(Product.id.desc()).limit(limit).all()


def filter_products(checked: Optional[List[int]] = None, radio: Optional[List[Any]] = None) -> List[Product]:
    """
    Filter products by category and price.

    Args:
        checked: Category IDs to include; empty means every category
        radio: Inclusive [min_price, max_price]; empty means any price

    Raises:
        ValidationError: If the price range is malformed
    """
    try:
        product_filter = ProductFilter(checked=checked or [], radio=radio or [])
    except PydanticValidationError as e:
        raise ValidationError('Invalid product filter', details={'errors': e.errors(include_url=False)}) from e

    query = Product.query
    if product_filter.checked:
        query = query.filter(Product.category_id.in_(product_filter.checked))
    if product_filter.radio:
        low, high = product_filter.radio
        query = query.filter(Product.price >= low, Product.price <= high)

    return query.order_by(Product.id).all()


def create_category(name: str) -> Category:
    """
    Create a product category.

    Raises:
        ValidationError: If the name is blank
        StoreError: If the insert fails (e.g. the name already exists)
    """
    try:
        category = Category(name=name)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    try:
        db.session.add(category)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to create category '{name}': {str(e)}", exc_info=True)
        raise StoreError('create_category', e) from e

    logger.info(f"Created category id={category.id} name='{category.name}'")
    return category


def list_categories() -> List[Category]:
    return Category.query.order_by(Category.name).all()
