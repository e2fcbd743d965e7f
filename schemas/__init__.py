"""
Input Pydantic Models

Validation models for data entering the catalog services:
- SearchInput (search term)
- ReviewInput (rating and comment)
- ProductInput (product fields, type coercion only)
"""

from .search import SearchInput
from .review import ReviewInput
from .product import ProductInput, ProductFilter

__all__ = [
    'SearchInput',
    'ReviewInput',
    'ProductInput',
    'ProductFilter'
]
