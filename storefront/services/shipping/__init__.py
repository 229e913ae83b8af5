from .quote import ShippingQuoteService, compute_shipping_quote
from .factory import get_carrier
