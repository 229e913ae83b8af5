import logging
import httpx
from typing import Any, Dict, List, Optional

from storefront.core.config import get_settings
from storefront.core.exceptions import PaymentConfigurationError, StripeAPIError
from storefront.schemas.cart import CartItem
from storefront.schemas.checkout import CheckoutAddress, CheckoutRate
from storefront.services.cart import summarize_options
from storefront.services.shipping.labels import build_shipping_label

logger = logging.getLogger(__name__)

METADATA_VALUE_LIMIT = 500


def clamp(value: Any, limit: int = METADATA_VALUE_LIMIT) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit]


def flatten_params(data: Any, prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested params into Stripe's bracketed form encoding

    Examples:
        {"line_items": [{"quantity": 2}]} -> {"line_items[0][quantity]": "2"}
        {"automatic_tax": {"enabled": True}} -> {"automatic_tax[enabled]": "true"}
    """
    flat: Dict[str, str] = {}
    if isinstance(data, dict):
        items = data.items()
    elif isinstance(data, (list, tuple)):
        items = enumerate(data)
    else:
        if data is None:
            return flat
        if isinstance(data, bool):
            flat[prefix] = "true" if data else "false"
        else:
            flat[prefix] = str(data)
        return flat

    for key, value in items:
        name = f"{prefix}[{key}]" if prefix else str(key)
        flat.update(flatten_params(value, name))
    return flat


class StripeClient:
    """
    Async client for the Stripe REST API, limited to Checkout Sessions.

    Stripe takes form-encoded bodies with bracketed keys, so session params are
    built as nested dicts and flattened just before sending.

    Documentation: https://docs.stripe.com/api/checkout/sessions/create
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        site_url: Optional[str] = None,
        currency: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.base_url = (base_url or settings.STRIPE_API_BASE).rstrip("/")
        self.site_url = (site_url or settings.SITE_URL).rstrip("/")
        self.currency = (currency or settings.STRIPE_CURRENCY).lower()
        self.timeout = timeout or settings.HTTP_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

    async def _make_request(self, method: str, endpoint: str, data: Optional[Dict] = None) -> Dict:
        """
        Make a request to the Stripe API

        Raises:
            PaymentConfigurationError: If no secret key is set
            StripeAPIError: If the request fails
        """
        if not self.is_configured:
            raise PaymentConfigurationError("Stripe secret key not configured")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        form = flatten_params(data or {})
        logger.debug(f"Making {method} request to {url} with {len(form)} form fields")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    data=form,
                )

                if response.status_code not in (200, 201):
                    logger.error(f"Stripe API error {response.status_code}: {response.text}")
                    raise StripeAPIError(
                        f"Stripe error {response.status_code}: {response.text}",
                        status_code=response.status_code,
                    )

                return response.json()

        except httpx.RequestError as e:
            logger.error(f"Network error: {str(e)}")
            raise StripeAPIError(f"Network error: {str(e)}")

    def _line_item(self, item: CartItem) -> Dict[str, Any]:
        product_data: Dict[str, Any] = {"name": clamp(item.name or "Item", 250)}
        if item.image:
            product_data["images"] = [item.image]

        metadata: Dict[str, str] = {}
        options = item.options or summarize_options(item.selections)
        if options:
            metadata["selected_options"] = clamp(
                " • ".join(f"{group}: {labels}" for group, labels in sorted(options.items()))
            )
        if item.signature:
            metadata["configuration_signature"] = clamp(item.signature, 120)
        for key, value in (("sku", item.sku), ("product_id", item.product_id), ("product_url", item.product_url)):
            if value:
                metadata[key] = clamp(value)
        if item.base_price is not None:
            metadata["original_price"] = f"{item.base_price:.2f}"
        if item.extra:
            metadata["option_upcharge"] = f"{item.extra:.2f}"
        if metadata:
            product_data["metadata"] = metadata

        return {
            "price_data": {
                "currency": self.currency,
                "product_data": product_data,
                "unit_amount": int(round((item.price or 0) * 100)),
            },
            "quantity": item.quantity,
        }

    @staticmethod
    def _shipping_option(rate: CheckoutRate) -> Dict[str, Any]:
        option: Dict[str, Any] = {
            "type": "fixed_amount",
            "display_name": build_shipping_label(rate.service, rate.carrier),
            "fixed_amount": {"amount": rate.amount_cents, "currency": rate.currency.lower()},
            "metadata": {
                "rate_id": clamp(rate.id),
                "provider": rate.provider,
                "carrier": clamp(rate.carrier),
                "service": clamp(rate.service),
            },
        }
        if rate.est_days:
            option["delivery_estimate"] = {
                "minimum": {"unit": "business_day", "value": rate.est_days},
                "maximum": {"unit": "business_day", "value": rate.est_days},
            }
        return {"shipping_rate_data": option}

    def build_session_params(
        self,
        cart: List[CartItem],
        address: Optional[CheckoutAddress] = None,
        selected_rate: Optional[CheckoutRate] = None,
    ) -> Dict[str, Any]:
        """Checkout Session params as a nested dict, before form encoding"""
        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [self._line_item(item) for item in cart],
            "success_url": f"{self.site_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.site_url}/checkout/cancel",
            "billing_address_collection": "required",
        }

        metadata: Dict[str, str] = {}
        if selected_rate is not None:
            params["shipping_options"] = [self._shipping_option(selected_rate)]
            metadata["shipping_rate_id"] = clamp(selected_rate.id)
            metadata["shipping_label"] = clamp(build_shipping_label(selected_rate.service, selected_rate.carrier))

        if address is not None:
            country = (address.country or "US").upper()
            params["shipping_address_collection"] = {"allowed_countries": [country]}
            if address.email:
                params["customer_email"] = address.email
            ship_to = ", ".join(
                part for part in (address.line1, address.line2, address.city, address.state, address.postal_code, country)
                if part
            )
            metadata["ship_to"] = clamp(ship_to)
            if address.name:
                metadata["ship_to_name"] = clamp(address.name)

        if metadata:
            params["metadata"] = metadata
        return params

    async def create_checkout_session(
        self,
        cart: List[CartItem],
        address: Optional[CheckoutAddress] = None,
        selected_rate: Optional[CheckoutRate] = None,
    ) -> Dict[str, Any]:
        """
        Create a Checkout Session and return Stripe's session object

        Raises:
            PaymentConfigurationError: If no secret key is set
            StripeAPIError: If Stripe rejects the session
        """
        params = self.build_session_params(cart, address, selected_rate)
        session = await self._make_request("POST", "/checkout/sessions", params)
        logger.info(f"Created Stripe checkout session {session.get('id')} for {len(cart)} line(s)")
        return session
