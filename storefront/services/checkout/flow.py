"""
Server-side driver for the checkout reducer.

CheckoutFlow does what the checkout page does around the reducer: validate
the address, fetch and convert rates, create the payment session. Service
failures become *_FAIL events on the state; nothing is raised to the caller.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from storefront.core.enums import CheckoutStatus
from storefront.core.exceptions import PaymentServiceError
from storefront.schemas.cart import CartItem
from storefront.schemas.checkout import (
    CheckoutAddress,
    CheckoutEvent,
    CheckoutRate,
    CheckoutState,
    ShippingQuoteItem,
)
from storefront.schemas.shipping import CartItemInput
from storefront.services.checkout.rates import to_checkout_rates
from storefront.services.checkout.state import checkout_reducer, initial_checkout_state, validate_address
from storefront.services.shipping.quote import ShippingQuoteService
from storefront.services.stripe.client import StripeClient

logger = logging.getLogger(__name__)

INCOMPLETE_ADDRESS_MESSAGE = "Please complete the shipping address before requesting rates."
RATES_UNAVAILABLE_MESSAGE = "Unable to fetch shipping rates."
NO_RATES_MESSAGE = "No shipping rates were returned for this address."
NO_CHECKOUT_URL_MESSAGE = "Stripe did not return a checkout URL."

INSTALL_ONLY_RATE = CheckoutRate(
    id="install-only",
    provider="none",
    carrier="Install Only",
    service="No Shipping Required",
    amount_cents=0,
)


def to_quote_cart(items: Iterable[Union[ShippingQuoteItem, Dict[str, Any]]]) -> List[CartItemInput]:
    """Checkout-page lines to quote lines; lines without a reference or a positive quantity are dropped"""
    cart = []
    for raw in items or []:
        item = ShippingQuoteItem.from_payload(raw)
        if item.reference and item.quantity > 0:
            cart.append(CartItemInput(id=item.reference, quantity=item.quantity))
    return cart


class CheckoutFlow:
    """One customer's checkout, from cart review to the payment redirect"""

    def __init__(
        self,
        quote_service: Optional[ShippingQuoteService] = None,
        stripe_client: Optional[StripeClient] = None,
        state: Optional[CheckoutState] = None,
    ):
        self.quote_service = quote_service or ShippingQuoteService()
        self.stripe_client = stripe_client or StripeClient()
        self.state = state or initial_checkout_state()

    def dispatch(self, event: CheckoutEvent) -> CheckoutState:
        previous = self.state.status
        self.state = checkout_reducer(self.state, event)
        if self.state.status != previous:
            logger.debug(f"Checkout {event.type.value}: {previous.value} -> {self.state.status.value}")
        return self.state

    def start(self) -> CheckoutState:
        return self.dispatch(CheckoutEvent.start_checkout())

    def update_address(self, address: Union[CheckoutAddress, Dict[str, Any]]) -> CheckoutState:
        return self.dispatch(CheckoutEvent.address_updated(CheckoutAddress.from_payload(address)))

    async def request_rates(self, items: Iterable[Union[ShippingQuoteItem, Dict[str, Any]]]) -> CheckoutState:
        if not validate_address(self.state.address):
            return self.dispatch(CheckoutEvent.address_validated_fail(INCOMPLETE_ADDRESS_MESSAGE))

        self.dispatch(CheckoutEvent.address_validated_ok())
        self.dispatch(CheckoutEvent.request_rates())
        if self.state.status != CheckoutStatus.RATES_LOADING:
            return self.state
        request_id = self.state.rates_request_id

        result = await self.quote_service.quote(
            to_quote_cart(items),
            self.state.address.to_destination_payload(),
        )

        if not result.success or result.freight:
            return self.dispatch(CheckoutEvent.rates_fail(result.message or RATES_UNAVAILABLE_MESSAGE, request_id))
        if result.install_only:
            return self.dispatch(CheckoutEvent.rates_success([INSTALL_ONLY_RATE], request_id))

        rates = to_checkout_rates(result.rates)
        if not rates:
            return self.dispatch(CheckoutEvent.rates_fail(NO_RATES_MESSAGE, request_id))
        return self.dispatch(CheckoutEvent.rates_success(rates, request_id))

    def select_rate(self, rate: Union[CheckoutRate, str]) -> CheckoutState:
        if isinstance(rate, str):
            rate = next((r for r in self.state.rates if r.id == rate), None)
            if rate is None:
                return self.state
        return self.dispatch(CheckoutEvent.select_rate(rate))

    async def pay(self, cart: Iterable[Union[CartItem, Dict[str, Any]]]) -> Optional[str]:
        """
        Create the payment session for the selected rate

        Returns:
            The Stripe Checkout URL, or None when payment could not start
            (the reason is on `state.error` when it failed)
        """
        lines = [CartItem.from_payload(item) for item in cart or []]
        if not lines or self.state.selected_rate is None:
            return None

        self.dispatch(CheckoutEvent.create_payment_session())
        if self.state.status != CheckoutStatus.PAYMENT_CREATING:
            return None

        try:
            session = await self.stripe_client.create_checkout_session(
                lines, self.state.address, self.state.selected_rate
            )
        except PaymentServiceError as e:
            self.dispatch(CheckoutEvent.payment_session_fail(str(e)))
            return None

        url = session.get("url")
        if not url:
            self.dispatch(CheckoutEvent.payment_session_fail(NO_CHECKOUT_URL_MESSAGE))
            return None

        self.dispatch(CheckoutEvent.payment_session_success())
        return url

    def reset_error(self) -> CheckoutState:
        return self.dispatch(CheckoutEvent.reset_error())
