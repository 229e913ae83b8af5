"""
Schemas for shipping quotes: cart lines, destinations, parcels and normalized rates.
"""

from typing import ClassVar, List, Optional, Tuple
from pydantic import Field, field_validator

from storefront.core.enums import DimensionUnit, QuoteErrorType, WeightUnit
from storefront.core.utils import coerce_quantity
from storefront.schemas.base import BaseSchema, FrozenSchema


class CartItemInput(BaseSchema):
    """A cart line referencing a Sanity product _id or a variant _id/id/_key"""
    id: str
    quantity: int = 1

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        if v is None or str(v).strip() == '':
            raise ValueError('Cart item id is required')
        return str(v).strip()

    @field_validator('quantity', mode='before')
    @classmethod
    def validate_quantity(cls, v):
        """Anything that is not a positive number ships as a single unit"""
        return coerce_quantity(v)


class Destination(BaseSchema):
    """Postal address a quote is priced to"""
    name: Optional[str] = None
    phone: Optional[str] = None
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: Optional[str] = "US"

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("address_line1", "city", "state", "postal_code")

    def missing_field(self) -> Optional[str]:
        """Wire name of the first required field that is blank, or None"""
        for field_name in self.REQUIRED_FIELDS:
            value = getattr(self, field_name)
            if not value or not str(value).strip():
                return type(self).model_fields[field_name].alias or field_name
        return None

    def to_shipengine(self) -> dict:
        return {
            "name": self.name or "",
            "phone": self.phone or "",
            "address_line1": self.address_line1,
            "address_line2": self.address_line2 or None,
            "city_locality": self.city,
            "state_province": self.state,
            "postal_code": self.postal_code,
            "country_code": (self.country or "US").upper(),
        }


class PackageWeight(FrozenSchema):
    value: float
    unit: WeightUnit = WeightUnit.POUND


class PackageDimensions(FrozenSchema):
    length: float
    width: float
    height: float
    unit: DimensionUnit = DimensionUnit.INCH


class PackageSpec(FrozenSchema):
    """One parcel; the quote builds one of these per unit of quantity"""
    weight: PackageWeight
    dimensions: PackageDimensions
    sku: Optional[str] = None
    title: Optional[str] = None

    def to_shipengine(self) -> dict:
        return {
            "weight": self.weight.model_dump(mode="json"),
            "dimensions": self.dimensions.model_dump(mode="json"),
        }


class ShippingRate(FrozenSchema):
    """A carrier rate normalized from whatever shape the provider returned"""
    carrier_id: Optional[str] = None
    carrier: Optional[str] = None
    service_code: Optional[str] = None
    service: Optional[str] = None
    amount: float
    currency: str = "USD"
    delivery_days: Optional[int] = None
    estimated_delivery_date: Optional[str] = None


class ShippingQuoteResult(FrozenSchema):
    success: bool
    freight: bool = False
    install_only: bool = False
    rates: Tuple[ShippingRate, ...] = ()
    best_rate: Optional[ShippingRate] = None
    packages: Tuple[PackageSpec, ...] = ()
    missing: Tuple[str, ...] = ()
    message: Optional[str] = None
    error_type: Optional[QuoteErrorType] = None


class ShippingRatesRequest(BaseSchema):
    """Body of POST /api/shipping-rates"""
    cart: List[CartItemInput] = Field(default_factory=list)
    destination: Destination = Field(default_factory=Destination)
