from .client import StripeClient
