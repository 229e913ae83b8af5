"""
Schema exports for the application.
"""

# Base schemas
from .base import BaseSchema, FrozenSchema

# Cart schemas
from .cart import CartItem, OptionSelection, OrderCartItem

# Shipping schemas
from .shipping import (
    CartItemInput,
    Destination,
    PackageWeight,
    PackageDimensions,
    PackageSpec,
    ShippingRate,
    ShippingQuoteResult,
    ShippingRatesRequest,
)

# Checkout schemas
from .checkout import (
    CheckoutAddress,
    CheckoutRate,
    CheckoutState,
    CheckoutEvent,
    ShippingQuoteItem,
    ShippingQuoteRequest,
    CheckoutSessionRequest,
    CheckoutSessionResponse,
)
