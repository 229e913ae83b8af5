"""
Shared enums and constants used across the application.
"""

from enum import Enum


class WeightUnit(str, Enum):
    """Weight units in ShipEngine's vocabulary"""
    POUND = "pound"
    OUNCE = "ounce"
    GRAM = "gram"
    KILOGRAM = "kilogram"


class DimensionUnit(str, Enum):
    """Dimension units in ShipEngine's vocabulary"""
    INCH = "inch"
    CENTIMETER = "centimeter"


class ShippingClass(str, Enum):
    STANDARD = "standard"
    FREIGHT = "freight"
    INSTALL_ONLY = "installonly"

    @classmethod
    def normalize(cls, raw) -> str:
        # "Install Only", "install_only" and "install-only" all collapse to "installonly"
        text = str(raw or "").lower()
        for ch in (" ", "_", "-", "\t"):
            text = text.replace(ch, "")
        return text


class CheckoutStatus(str, Enum):
    """Checkout funnel statuses, in the order a customer normally passes them"""
    CART_READY = "CART_READY"
    CHECKOUT_ADDRESS_REQUIRED = "CHECKOUT_ADDRESS_REQUIRED"
    ADDRESS_VALID = "ADDRESS_VALID"
    RATES_LOADING = "RATES_LOADING"
    RATES_READY = "RATES_READY"
    RATE_SELECTED = "RATE_SELECTED"
    PAYMENT_CREATING = "PAYMENT_CREATING"
    PAYMENT_REDIRECTING = "PAYMENT_REDIRECTING"
    ERROR = "ERROR"

    @property
    def is_safe(self) -> bool:
        """Statuses a RESET_ERROR may return to"""
        return self in SAFE_STATUSES


SAFE_STATUSES = frozenset({
    CheckoutStatus.CART_READY,
    CheckoutStatus.CHECKOUT_ADDRESS_REQUIRED,
    CheckoutStatus.ADDRESS_VALID,
    CheckoutStatus.RATES_READY,
    CheckoutStatus.RATE_SELECTED,
    CheckoutStatus.PAYMENT_REDIRECTING,
})


class CheckoutEventType(str, Enum):
    START_CHECKOUT = "START_CHECKOUT"
    ADDRESS_UPDATED = "ADDRESS_UPDATED"
    ADDRESS_VALIDATED_OK = "ADDRESS_VALIDATED_OK"
    ADDRESS_VALIDATED_FAIL = "ADDRESS_VALIDATED_FAIL"
    REQUEST_RATES = "REQUEST_RATES"
    RATES_SUCCESS = "RATES_SUCCESS"
    RATES_FAIL = "RATES_FAIL"
    SELECT_RATE = "SELECT_RATE"
    CREATE_PAYMENT_SESSION = "CREATE_PAYMENT_SESSION"
    PAYMENT_SESSION_SUCCESS = "PAYMENT_SESSION_SUCCESS"
    PAYMENT_SESSION_FAIL = "PAYMENT_SESSION_FAIL"
    RESET_ERROR = "RESET_ERROR"


class QuoteErrorType(str, Enum):
    """Why a shipping quote failed; routes map these to HTTP status codes"""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    PROVIDER = "provider"
