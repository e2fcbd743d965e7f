from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ProductInput(BaseModel):
    """
    Product fields for create and update.

    Fields are optional here: only their types are checked. Columns that the
    database requires reject missing values on commit.
    """
    name: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    count_in_stock: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[int] = Field(default=None, alias='category')

    model_config = {'populate_by_name': True, 'extra': 'ignore'}


class ProductFilter(BaseModel):
    """
    Catalog filter: categories to include and an inclusive [min, max] price range.
    Empty lists mean "no constraint".
    """
    checked: List[int] = Field(default_factory=list, description="Category ids")
    radio: List[Decimal] = Field(default_factory=list, description="[min_price, max_price]")

    @field_validator('radio')
    @classmethod
    def validate_price_range(cls, value):
        if value and len(value) != 2:
            raise ValueError('price range must be [min, max]')
        if value and value[0] > value[1]:
            raise ValueError('price range minimum exceeds maximum')
        return value
