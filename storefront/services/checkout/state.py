"""
Checkout funnel state machine.

`checkout_reducer` is a pure function: it never mutates the state it is given
and returns the same object when an event does not apply. States are frozen
pydantic models, so every transition goes through `model_copy(update=...)`.
"""

import logging
from typing import Optional

from storefront.core.enums import CheckoutEventType, CheckoutStatus
from storefront.schemas.checkout import CheckoutAddress, CheckoutEvent, CheckoutRate, CheckoutState

logger = logging.getLogger(__name__)

INITIAL_CHECKOUT_STATE = CheckoutState()


def initial_checkout_state() -> CheckoutState:
    return INITIAL_CHECKOUT_STATE


def validate_address(address: Optional[CheckoutAddress]) -> bool:
    """True when line1, city, state, postal code and country are all filled in"""
    if address is None:
        return False
    required = (address.line1, address.city, address.state, address.postal_code, address.country)
    return all(isinstance(value, str) and value.strip() for value in required)


def _with_status(state: CheckoutState, status: CheckoutStatus, **update) -> CheckoutState:
    update.update(status=status, error=None)
    if status.is_safe:
        update["last_safe_status"] = status
    return state.model_copy(update=update)


def _fail(state: CheckoutState, message: Optional[str]) -> CheckoutState:
    return state.model_copy(update={
        "status": CheckoutStatus.ERROR,
        "error": message or "Something went wrong.",
    })


def _find_rate(state: CheckoutState, rate: Optional[CheckoutRate]) -> Optional[CheckoutRate]:
    if rate is None:
        return None
    for candidate in state.rates:
        if candidate.id == rate.id:
            return candidate
    return None


def _is_current_rates_response(state: CheckoutState, event: CheckoutEvent) -> bool:
    if state.status != CheckoutStatus.RATES_LOADING:
        return False
    return event.request_id is None or event.request_id == state.rates_request_id


def checkout_reducer(state: CheckoutState, event: CheckoutEvent) -> CheckoutState:
    """
    Apply one event to the checkout state

    Args:
        state: Current state
        event: Event to apply

    Returns:
        The next state, or `state` itself when the event is not valid here
    """
    kind = event.type

    if kind == CheckoutEventType.START_CHECKOUT:
        return _with_status(state, CheckoutStatus.CHECKOUT_ADDRESS_REQUIRED, rates=(), selected_rate=None)

    if kind == CheckoutEventType.ADDRESS_UPDATED:
        return _with_status(
            state,
            CheckoutStatus.CHECKOUT_ADDRESS_REQUIRED,
            address=event.address or CheckoutAddress(),
            rates=(),
            selected_rate=None,
        )

    if kind == CheckoutEventType.ADDRESS_VALIDATED_OK:
        return _with_status(state, CheckoutStatus.ADDRESS_VALID)

    if kind == CheckoutEventType.ADDRESS_VALIDATED_FAIL:
        return _fail(state, event.message)

    if kind == CheckoutEventType.REQUEST_RATES:
        if state.status != CheckoutStatus.ADDRESS_VALID:
            return state
        return state.model_copy(update={
            "status": CheckoutStatus.RATES_LOADING,
            "error": None,
            "rates_request_id": state.rates_request_id + 1,
        })

    if kind == CheckoutEventType.RATES_SUCCESS:
        if not _is_current_rates_response(state, event):
            logger.debug(f"Ignoring stale rates response {event.request_id} in {state.status.value}")
            return state
        rates = tuple(sorted(event.rates or (), key=lambda r: r.amount_cents))
        return _with_status(state, CheckoutStatus.RATES_READY, rates=rates, selected_rate=None)

    if kind == CheckoutEventType.RATES_FAIL:
        if not _is_current_rates_response(state, event):
            logger.debug(f"Ignoring stale rates failure {event.request_id} in {state.status.value}")
            return state
        return _fail(state, event.message)

    if kind == CheckoutEventType.SELECT_RATE:
        if state.status not in (CheckoutStatus.RATES_READY, CheckoutStatus.RATE_SELECTED):
            return state
        rate = _find_rate(state, event.rate)
        if rate is None:
            return state
        return _with_status(state, CheckoutStatus.RATE_SELECTED, selected_rate=rate)

    if kind == CheckoutEventType.CREATE_PAYMENT_SESSION:
        if state.status != CheckoutStatus.RATE_SELECTED:
            return state
        return state.model_copy(update={"status": CheckoutStatus.PAYMENT_CREATING, "error": None})

    if kind in (CheckoutEventType.PAYMENT_SESSION_SUCCESS, CheckoutEventType.PAYMENT_SESSION_FAIL):
        if state.status != CheckoutStatus.PAYMENT_CREATING:
            logger.debug(f"Ignoring {kind.value} in {state.status.value}")
            return state
        if kind == CheckoutEventType.PAYMENT_SESSION_FAIL:
            return _fail(state, event.message)
        return _with_status(state, CheckoutStatus.PAYMENT_REDIRECTING)

    if kind == CheckoutEventType.RESET_ERROR:
        return state.model_copy(update={"status": state.last_safe_status, "error": None})

    return state
