"""
Review Service - Adds product reviews and keeps the product's rating summary consistent.

A product may hold at most one review per user. After every successful review
the product's num_reviews equals the number of reviews and its rating equals
the plain mean of all review ratings.
"""

import logging
from typing import Any
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models import db
from models.product import Product
from models.review import Review
from models.user import User
from schemas.review import ReviewInput
from services.exceptions import DuplicateReviewError, NotFoundError, StoreError, ValidationError
from services.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)

# Serializes review additions for the same product within this process
_product_locks = KeyedLock()


def validate_review(rating: Any, comment: Any) -> ReviewInput:
    """
    Validate a review submission.

    Numeric strings are accepted for the rating ("4" -> 4). A missing comment
    becomes an empty string.

    Raises:
        ValidationError: If the rating is not an integer from 1 to 5 or the comment is not text
    """
    try:
        return ReviewInput(rating=rating, comment='' if comment is None else comment)
    except PydanticValidationError as e:
        logger.warning(f"Rejected review: rating={rating!r}")
        raise ValidationError('Invalid review', details={'errors': e.errors(include_url=False)}) from e


def recompute_rating_summary(product: Product) -> Product:
    """
    Recompute num_reviews and rating from the product's full review list.

    The rating is sum(ratings) / count, or 0.0 when there are no reviews.
    """
    ratings = [review.rating for review in product.reviews]
    product.num_reviews = len(ratings)
    product.rating = sum(ratings) / len(ratings) if ratings else 0.0
    return product


def add_product_review(product_id: int, user_id: int, rating: Any, comment: Any = '') -> Product:
    """
    Add a user's review to a product.

    The product row is locked for the duration of the read-modify-write and
    the review, count and mean are committed together. On any failure the
    session is rolled back and the product is left untouched.

    Args:
        product_id: The ID of the product being reviewed
        user_id: The ID of the reviewing user
        rating: Star rating, 1 to 5
        comment: Free text comment

    Returns:
        The updated Product

    Raises:
        ValidationError: If rating or comment are invalid (store is not touched)
        NotFoundError: If the product or user does not exist
        DuplicateReviewError: If the user already reviewed this product
        StoreError: If the database operation fails

    Example:
        >>> product = add_product_review(product_id=7, user_id=3, rating=4, comment='Comfy')
        >>> product.num_reviews, product.rating
        (1, 4.0)
    """
    review_input = validate_review(rating, comment)

    with _product_locks.hold(product_id):
        try:
            product = Product.query.filter_by(id=product_id).with_for_update().first()
            if product is None:
                raise NotFoundError('Product', product_id)

            user = db.session.get(User, user_id)
            if user is None:
                raise NotFoundError('User', user_id)

            if any(review.user_id == user_id for review in product.reviews):
                raise DuplicateReviewError(product_id, user_id)

            product.reviews.append(Review(
                user_id=user_id,
                name=user.username,
                rating=review_input.rating,
                comment=review_input.comment
            ))
            recompute_rating_summary(product)

            db.session.commit()

        except (NotFoundError, DuplicateReviewError) as e:
            db.session.rollback()
            logger.warning(f"Review rejected for product_id={product_id}, user_id={user_id}: {e.message}")
            raise
        except IntegrityError as e:
            db.session.rollback()
            try:
                already_reviewed = Review.query.filter_by(product_id=product_id, user_id=user_id).first() is not None
            except SQLAlchemyError as lookup_error:
                db.session.rollback()
                logger.error(f"Failed to add review for product_id={product_id}: {str(lookup_error)}", exc_info=True)
                raise StoreError('add_product_review', lookup_error) from lookup_error
            if already_reviewed:
                # Review committed elsewhere between our check and our commit
                logger.warning(f"Concurrent duplicate review for product_id={product_id}, user_id={user_id}")
                raise DuplicateReviewError(product_id, user_id) from e
            logger.error(f"Failed to add review for product_id={product_id}: {str(e)}", exc_info=True)
            raise StoreError('add_product_review', e) from e
        except SQLAlchemyError as e:
            # Includes StaleDataError when the product version changed under us
            db.session.rollback()
            logger.error(f"Failed to add review for product_id={product_id}: {str(e)}", exc_info=True)
            raise StoreError('add_product_review', e) from e

    logger.info(
        f"Review added: product_id={product_id}, user_id={user_id}, "
        f"num_reviews={product.num_reviews}, rating={product.rating:.2f}"
    )
    return product
