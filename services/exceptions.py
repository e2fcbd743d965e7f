"""Catalog service exceptions.

Every error a service surfaces to its caller derives from CatalogError, which
carries the HTTP status code the blueprints render it with.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for catalog service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ValidationError(CatalogError):
    """Raised for malformed input, before the store is touched."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)


class DuplicateReviewError(CatalogError):
    """Raised when a user reviews a product they already reviewed."""

    def __init__(self, product_id: int, user_id: int):
        super().__init__(
            message="Product already reviewed",
            status_code=400,
            details={"product_id": product_id, "user_id": user_id},
        )


class NotFoundError(CatalogError):
    """Raised when a referenced product or user does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} not found",
            status_code=404,
            details={"entity": entity, "id": entity_id},
        )


class StoreError(CatalogError):
    """Raised when the database fails underneath an operation."""

    def __init__(self, operation: str, error: Exception):
        super().__init__(
            message="Server error",
            status_code=500,
            details={
                "operation": operation,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
