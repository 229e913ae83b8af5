class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class ShippingServiceError(BaseServiceError):
    """Base exception for shipping errors."""
    pass

class ShippingConfigurationError(ShippingServiceError):
    """Raised when origin address or API credentials are not configured."""
    pass

class ShipEngineAPIError(ShippingServiceError):
    """Raised when ShipEngine API calls fail."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code

class SanityAPIError(BaseServiceError):
    """Raised when Sanity content API calls fail."""
    pass

class PaymentServiceError(BaseServiceError):
    """Base exception for payment errors."""
    pass

class PaymentConfigurationError(PaymentServiceError):
    """Raised when Stripe credentials are not configured."""
    pass

class StripeAPIError(PaymentServiceError):
    """Raised when Stripe API calls fail."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
