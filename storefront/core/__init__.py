"""
Core module exports.
"""
from .enums import (
    CheckoutStatus,
    CheckoutEventType,
    QuoteErrorType,
    ShippingClass,
    WeightUnit,
    DimensionUnit,
)

from .exceptions import (
    BaseServiceError,
    ShippingServiceError,
    ShippingConfigurationError,
    ShipEngineAPIError,
    SanityAPIError,
    PaymentServiceError,
    PaymentConfigurationError,
    StripeAPIError,
)
