"""
Schemas for the checkout funnel: addresses, browser-facing rates, reducer state and events.
"""

from typing import List, Optional, Tuple
from pydantic import Field, field_validator

from storefront.core.enums import CheckoutEventType, CheckoutStatus
from storefront.core.utils import finite_number
from storefront.schemas.base import BaseSchema, FrozenSchema
from storefront.schemas.cart import CartItem


class CheckoutAddress(FrozenSchema):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    line1: str = ""
    line2: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "US"

    def to_destination_payload(self) -> dict:
        """Field names the shipping quote understands"""
        return {
            "name": self.name,
            "phone": self.phone,
            "addressLine1": self.line1,
            "addressLine2": self.line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
            "country": self.country,
        }


class CheckoutRate(FrozenSchema):
    """A shipping option as the checkout page shows it, priced in integer cents"""
    id: str
    provider: str = "shipengine"
    carrier: str = "Shipping"
    service: str = "Standard"
    amount_cents: int
    currency: str = "USD"
    est_days: Optional[int] = None

    @field_validator('amount_cents', mode='before')
    @classmethod
    def validate_amount_cents(cls, v):
        number = finite_number(v)
        if number is None:
            raise ValueError(f'amountCents must be a number, got: {v}')
        return max(0, int(round(number)))


class CheckoutState(FrozenSchema):
    status: CheckoutStatus = CheckoutStatus.CART_READY
    address: CheckoutAddress = Field(default_factory=CheckoutAddress)
    rates: Tuple[CheckoutRate, ...] = ()
    selected_rate: Optional[CheckoutRate] = None
    error: Optional[str] = None
    last_safe_status: CheckoutStatus = CheckoutStatus.CART_READY
    rates_request_id: int = 0


class CheckoutEvent(FrozenSchema):
    """A single reducer input. Only the payload fields relevant to `type` are set."""
    type: CheckoutEventType
    address: Optional[CheckoutAddress] = None
    rates: Optional[Tuple[CheckoutRate, ...]] = None
    rate: Optional[CheckoutRate] = None
    message: Optional[str] = None
    request_id: Optional[int] = None

    @classmethod
    def start_checkout(cls):
        return cls(type=CheckoutEventType.START_CHECKOUT)

    @classmethod
    def address_updated(cls, address: CheckoutAddress):
        return cls(type=CheckoutEventType.ADDRESS_UPDATED, address=address)

    @classmethod
    def address_validated_ok(cls):
        return cls(type=CheckoutEventType.ADDRESS_VALIDATED_OK)

    @classmethod
    def address_validated_fail(cls, message: str):
        return cls(type=CheckoutEventType.ADDRESS_VALIDATED_FAIL, message=message)

    @classmethod
    def request_rates(cls):
        return cls(type=CheckoutEventType.REQUEST_RATES)

    @classmethod
    def rates_success(cls, rates, request_id: Optional[int] = None):
        return cls(type=CheckoutEventType.RATES_SUCCESS, rates=tuple(rates), request_id=request_id)

    @classmethod
    def rates_fail(cls, message: str, request_id: Optional[int] = None):
        return cls(type=CheckoutEventType.RATES_FAIL, message=message, request_id=request_id)

    @classmethod
    def select_rate(cls, rate: CheckoutRate):
        return cls(type=CheckoutEventType.SELECT_RATE, rate=rate)

    @classmethod
    def create_payment_session(cls):
        return cls(type=CheckoutEventType.CREATE_PAYMENT_SESSION)

    @classmethod
    def payment_session_success(cls):
        return cls(type=CheckoutEventType.PAYMENT_SESSION_SUCCESS)

    @classmethod
    def payment_session_fail(cls, message: str):
        return cls(type=CheckoutEventType.PAYMENT_SESSION_FAIL, message=message)

    @classmethod
    def reset_error(cls):
        return cls(type=CheckoutEventType.RESET_ERROR)


class ShippingQuoteItem(BaseSchema):
    """Cart line as posted by the checkout page"""
    sku: Optional[str] = None
    product_id: Optional[str] = None
    id: Optional[str] = None
    quantity: float = 0

    @field_validator('quantity', mode='before')
    @classmethod
    def validate_quantity(cls, v):
        return finite_number(v) or 0

    @property
    def reference(self) -> Optional[str]:
        """Identifier used to look the item up in the content store"""
        return self.product_id or self.id or self.sku


class ShippingQuoteRequest(BaseSchema):
    """Body of POST /api/shipping/quote"""
    items: List[ShippingQuoteItem] = Field(default_factory=list)
    address: Optional[CheckoutAddress] = None


class CheckoutSessionRequest(BaseSchema):
    """Body of POST /api/checkout"""
    cart: List[CartItem] = Field(default_factory=list)
    address: Optional[CheckoutAddress] = None
    selected_rate: Optional[CheckoutRate] = None


class CheckoutSessionResponse(BaseSchema):
    url: str
    session_id: Optional[str] = None
