from fastapi import Depends

from storefront.core.config import Settings, get_settings
from storefront.services.sanity.client import SanityClient
from storefront.services.shipping.factory import get_carrier
from storefront.services.shipping.quote import ShippingQuoteService
from storefront.services.stripe.client import StripeClient


def get_quote_service(settings: Settings = Depends(get_settings)) -> ShippingQuoteService:
    """Dependency for the shipping quote service, built from current settings."""
    return ShippingQuoteService(
        sanity=SanityClient.from_settings(settings),
        carrier=get_carrier(
            "shipengine",
            api_key=settings.SHIPENGINE_API_KEY,
            base_url=settings.SHIPENGINE_BASE_URL,
            timeout=settings.HTTP_TIMEOUT,
        ),
        settings=settings,
    )


def get_stripe_client(settings: Settings = Depends(get_settings)) -> StripeClient:
    return StripeClient(
        secret_key=settings.STRIPE_SECRET_KEY,
        base_url=settings.STRIPE_API_BASE,
        site_url=settings.SITE_URL,
        currency=settings.STRIPE_CURRENCY,
        timeout=settings.HTTP_TIMEOUT,
    )
