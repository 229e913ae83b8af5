"""
Shipping quote service.

Builds parcels from the cart and Sanity shipping metadata, checks freight
thresholds, and asks ShipEngine for rates. Every failure comes back as an
unsuccessful ShippingQuoteResult; nothing here raises to the caller.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from storefront.core.config import Settings, get_settings
from storefront.core.enums import QuoteErrorType
from storefront.core.exceptions import (
    SanityAPIError,
    ShipEngineAPIError,
    ShippingConfigurationError,
)
from storefront.schemas.shipping import CartItemInput, Destination, ShippingQuoteResult
from storefront.services.sanity.client import SanityClient
from storefront.services.shipping.base import BaseCarrier
from storefront.services.shipping.carrier_ids import resolve_carrier_ids
from storefront.services.shipping.factory import get_carrier
from storefront.services.shipping.normalizer import normalize_rates
from storefront.services.shipping.packages import MAX_PACKAGES, PackagePlan, build_package_plan

logger = logging.getLogger(__name__)

EMPTY_CART_MESSAGE = "Cart is empty."
INSTALL_ONLY_MESSAGE = "Install-only items do not require shipping."
FREIGHT_MESSAGE = "Freight required due to weight or dimensions."
ORIGIN_MISSING_MESSAGE = "Shipping origin (postal code and city) is not configured."

CartLike = Iterable[Union[CartItemInput, Dict[str, Any]]]
DestinationLike = Union[Destination, Dict[str, Any], None]


def _failure(message: str, error_type: QuoteErrorType, **extra) -> ShippingQuoteResult:
    return ShippingQuoteResult(success=False, message=message, error_type=error_type, **extra)


class ShippingQuoteService:
    """Quote shipping for a cart against a destination"""

    def __init__(
        self,
        sanity: Optional[SanityClient] = None,
        carrier: Optional[BaseCarrier] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.sanity = sanity or SanityClient.from_settings(self.settings)
        self.carrier = carrier or get_carrier("shipengine")

    async def _fetch_products(self, ids: List[str]) -> List[Dict[str, Any]]:
        try:
            return await self.sanity.get_products_for_shipping(ids)
        except SanityAPIError as e:
            logger.error(f"Sanity product lookup failed, using default parcels: {e}")
            return []

    def _plan(self, cart: Sequence[CartItemInput], products: List[Dict[str, Any]]) -> PackagePlan:
        return build_package_plan(
            cart,
            products,
            default_dimensions=self.settings.default_box_dimensions,
            default_weight=self.settings.DEFAULT_BOX_WEIGHT_LB,
            freight_weight=self.settings.FREIGHT_WEIGHT_LB,
            freight_dimension=self.settings.FREIGHT_DIMENSION_IN,
        )

    def _origin_configured(self) -> bool:
        return bool((self.settings.ORIGIN_POSTAL or "").strip() and (self.settings.ORIGIN_CITY or "").strip())

    async def _build_rate_request(self, destination: Destination, plan: PackagePlan) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "shipment": {
                "validate_address": "no_validation",
                "ship_from": self.settings.ship_from,
                "ship_to": destination.to_shipengine(),
                "packages": [package.to_shipengine() for package in plan.packages],
            },
        }
        carrier_ids = await resolve_carrier_ids(self.settings.shipengine_carrier_ids, self.carrier)
        if carrier_ids:
            payload["rate_options"] = {"carrier_ids": carrier_ids}
        return payload

    async def quote(self, cart: CartLike, destination: DestinationLike) -> ShippingQuoteResult:
        """
        Quote the cart to the destination

        Args:
            cart: Cart lines, as CartItemInput or `{"id", "quantity"}` dicts
            destination: Destination or a dict with its camelCase or snake_case fields

        Returns:
            ShippingQuoteResult; check `success`, then `freight` and `install_only`
        """
        try:
            items = [CartItemInput.from_payload(item) for item in (cart or [])]
            dest = Destination.from_payload(destination or {})
        except PydanticValidationError as e:
            logger.warning(f"Rejected quote request: {e}")
            return _failure(f"Invalid quote request: {e.errors()[0].get('msg')}", QuoteErrorType.VALIDATION)

        if not items:
            return _failure(EMPTY_CART_MESSAGE, QuoteErrorType.VALIDATION)

        missing_field = dest.missing_field()
        if missing_field:
            return _failure(f"Missing destination.{missing_field}", QuoteErrorType.VALIDATION)

        units = sum(item.quantity for item in items)
        if units > MAX_PACKAGES:
            return _failure(
                f"Too many units to quote ({units}); the limit is {MAX_PACKAGES}.",
                QuoteErrorType.VALIDATION,
            )

        ids = list(dict.fromkeys(item.id for item in items))
        products = await self._fetch_products(ids)
        plan = self._plan(items, products)
        missing = tuple(plan.missing)

        if plan.missing:
            logger.warning(f"No shipping metadata for {len(plan.missing)} cart item(s): {', '.join(plan.missing)}")

        if plan.install_only:
            return ShippingQuoteResult(
                success=True,
                install_only=True,
                missing=missing,
                message=INSTALL_ONLY_MESSAGE,
            )

        if plan.freight:
            logger.info(
                f"Freight quote: {plan.total_weight:.1f} lb, longest side {plan.max_dimension:.1f} in"
            )
            return ShippingQuoteResult(
                success=True,
                freight=True,
                packages=tuple(plan.packages),
                missing=missing,
                message=FREIGHT_MESSAGE,
            )

        if not self._origin_configured():
            logger.error(ORIGIN_MISSING_MESSAGE)
            return _failure(ORIGIN_MISSING_MESSAGE, QuoteErrorType.CONFIGURATION, missing=missing)

        try:
            payload = await self._build_rate_request(dest, plan)
            response = await self.carrier.get_rates(payload)
        except ShippingConfigurationError as e:
            logger.error(f"Shipping quote not configured: {e}")
            return _failure(str(e), QuoteErrorType.CONFIGURATION, missing=missing)
        except ShipEngineAPIError as e:
            return _failure(
                str(e),
                QuoteErrorType.PROVIDER,
                packages=tuple(plan.packages),
                missing=missing,
            )

        rates = normalize_rates(response)
        logger.info(f"Quoted {len(rates)} rate(s) for {len(plan.packages)} package(s)")

        return ShippingQuoteResult(
            success=True,
            rates=rates,
            best_rate=rates[0] if rates else None,
            packages=tuple(plan.packages),
            missing=missing,
        )


async def compute_shipping_quote(
    cart: CartLike,
    destination: DestinationLike,
    service: Optional[ShippingQuoteService] = None,
) -> ShippingQuoteResult:
    """Quote with the default (settings-configured) service unless one is passed"""
    service = service or ShippingQuoteService()
    return await service.quote(cart, destination)
