"""
Schemas for storefront cart lines and the order-cart items stored on orders.
"""

from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator

from storefront.core.utils import coerce_quantity, finite_number, normalize_price_delta
from storefront.schemas.base import BaseSchema


class OptionSelection(BaseSchema):
    """One configured option on a product page (select, radio, checkbox or free text)"""
    group: str = "option"
    value: str = ""
    label: str = ""
    price_delta: float = 0.0

    @field_validator('price_delta', mode='before')
    @classmethod
    def validate_price_delta(cls, v):
        return normalize_price_delta(v)


class CartItem(BaseSchema):
    id: str
    name: str = "Item"
    price: float = 0.0
    base_price: Optional[float] = None
    extra: Optional[float] = None
    quantity: int = 1
    image: Optional[str] = None
    options: Dict[str, str] = Field(default_factory=dict)
    selections: List[OptionSelection] = Field(default_factory=list)
    signature: Optional[str] = None
    install_only: bool = False
    shipping_class: Optional[str] = None
    product_url: Optional[str] = None
    product_id: Optional[str] = None
    product_slug: Optional[str] = None
    sku: Optional[str] = None
    categories: Optional[List[str]] = None

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v):
        if v is None or v == '':
            return 0.0
        number = finite_number(v)
        if number is None:
            raise ValueError(f'Price must be a valid number, got: {v}')
        return number

    @field_validator('base_price', 'extra', mode='before')
    @classmethod
    def validate_optional_price(cls, v):
        if v is None or v == '':
            return None
        number = finite_number(v)
        if number is None:
            raise ValueError(f'Price must be a valid number, got: {v}')
        return number

    @field_validator('quantity', mode='before')
    @classmethod
    def validate_quantity(cls, v):
        return coerce_quantity(v)

    @property
    def line_total(self) -> float:
        return round((self.price or 0.0) * self.quantity, 2)


class OrderCartItem(BaseSchema):
    """Cart line in the shape persisted on Sanity order documents"""
    type: str = Field("orderCartItem", alias="_type")
    key: str = Field(alias="_key")
    id: Optional[str] = None
    sku: Optional[str] = None
    name: Optional[str] = None
    price: float = 0.0
    quantity: float = 1
    categories: Optional[List[str]] = None
    image: Optional[str] = None
    product_url: Optional[str] = None
    product_slug: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
