# Checkout reducer unit tests
import pytest

from storefront.core.enums import CheckoutStatus
from storefront.schemas.checkout import CheckoutAddress, CheckoutEvent, CheckoutRate, CheckoutState
from storefront.services.checkout.state import (
    INITIAL_CHECKOUT_STATE,
    checkout_reducer,
    initial_checkout_state,
    validate_address,
)

ADDRESS = CheckoutAddress(line1="1 Main St", city="Austin", state="TX", postal_code="78701", country="US")
CHEAP = CheckoutRate(id="usps", carrier="USPS", service="Priority", amount_cents=1250)
PRICEY = CheckoutRate(id="ups", carrier="UPS", service="Ground", amount_cents=1840)


def run(*events, state=None):
    state = state or initial_checkout_state()
    for event in events:
        state = checkout_reducer(state, event)
    return state


def rates_ready_state():
    return run(
        CheckoutEvent.start_checkout(),
        CheckoutEvent.address_updated(ADDRESS),
        CheckoutEvent.address_validated_ok(),
        CheckoutEvent.request_rates(),
        CheckoutEvent.rates_success([PRICEY, CHEAP], request_id=1),
    )


def test_initial_state():
    state = initial_checkout_state()
    assert state is INITIAL_CHECKOUT_STATE
    assert state.status == CheckoutStatus.CART_READY
    assert state.rates == ()
    assert state.selected_rate is None
    assert state.address.country == "US"


@pytest.mark.parametrize("field", ["line1", "city", "state", "postal_code", "country"])
def test_validate_address_requires_fields(field):
    assert validate_address(ADDRESS) is True
    assert validate_address(ADDRESS.model_copy(update={field: "  "})) is False


def test_validate_address_none():
    assert validate_address(None) is False


def test_happy_path():
    state = rates_ready_state()
    assert state.status == CheckoutStatus.RATES_READY
    assert state.rates == (CHEAP, PRICEY)

    state = run(CheckoutEvent.select_rate(PRICEY), state=state)
    assert state.status == CheckoutStatus.RATE_SELECTED
    assert state.selected_rate == PRICEY

    state = run(CheckoutEvent.create_payment_session(), state=state)
    assert state.status == CheckoutStatus.PAYMENT_CREATING

    state = run(CheckoutEvent.payment_session_success(), state=state)
    assert state.status == CheckoutStatus.PAYMENT_REDIRECTING
    assert state.last_safe_status == CheckoutStatus.PAYMENT_REDIRECTING


def test_reducer_does_not_mutate_state():
    before = rates_ready_state()
    after = checkout_reducer(before, CheckoutEvent.select_rate(CHEAP))

    assert before.status == CheckoutStatus.RATES_READY
    assert before.selected_rate is None
    assert after is not before


def test_start_checkout_clears_rates():
    state = run(CheckoutEvent.select_rate(CHEAP), state=rates_ready_state())
    state = run(CheckoutEvent.start_checkout(), state=state)

    assert state.status == CheckoutStatus.CHECKOUT_ADDRESS_REQUIRED
    assert state.rates == ()
    assert state.selected_rate is None


def test_address_update_clears_rates_and_keeps_address():
    new_address = ADDRESS.model_copy(update={"postal_code": "73301"})
    state = run(CheckoutEvent.address_updated(new_address), state=rates_ready_state())

    assert state.status == CheckoutStatus.CHECKOUT_ADDRESS_REQUIRED
    assert state.address.postal_code == "73301"
    assert state.rates == ()


def test_request_rates_only_from_address_valid():
    state = run(CheckoutEvent.start_checkout())
    assert run(CheckoutEvent.request_rates(), state=state) is state

    state = run(CheckoutEvent.address_validated_ok(), CheckoutEvent.request_rates(), state=state)
    assert state.status == CheckoutStatus.RATES_LOADING
    assert state.rates_request_id == 1


def test_select_rate_before_rates_ready_is_ignored():
    state = run(CheckoutEvent.start_checkout(), CheckoutEvent.address_validated_ok())
    assert run(CheckoutEvent.select_rate(CHEAP), state=state) is state


def test_select_unknown_rate_is_ignored():
    state = rates_ready_state()
    stranger = CheckoutRate(id="dhl", carrier="DHL", service="Express", amount_cents=9900)
    assert run(CheckoutEvent.select_rate(stranger), state=state) is state


def test_reselect_rate():
    state = run(CheckoutEvent.select_rate(CHEAP), CheckoutEvent.select_rate(PRICEY), state=rates_ready_state())
    assert state.selected_rate == PRICEY
    assert state.status == CheckoutStatus.RATE_SELECTED


def test_create_payment_session_requires_selected_rate():
    state = rates_ready_state()
    assert run(CheckoutEvent.create_payment_session(), state=state) is state


def test_rates_fail_then_reset():
    state = run(
        CheckoutEvent.start_checkout(),
        CheckoutEvent.address_updated(ADDRESS),
        CheckoutEvent.address_validated_ok(),
        CheckoutEvent.request_rates(),
        CheckoutEvent.rates_fail("ShipEngine error 500: boom"),
    )
    assert state.status == CheckoutStatus.ERROR
    assert state.error == "ShipEngine error 500: boom"

    state = run(CheckoutEvent.reset_error(), state=state)
    assert state.status == CheckoutStatus.ADDRESS_VALID
    assert state.error is None
    assert state.address == ADDRESS


def test_payment_failure_reset_keeps_selection():
    state = run(
        CheckoutEvent.select_rate(CHEAP),
        CheckoutEvent.create_payment_session(),
        CheckoutEvent.payment_session_fail("Stripe error 402"),
        state=rates_ready_state(),
    )
    assert state.status == CheckoutStatus.ERROR

    state = run(CheckoutEvent.reset_error(), state=state)
    assert state.status == CheckoutStatus.RATE_SELECTED
    assert state.selected_rate == CHEAP
    assert state.rates == (CHEAP, PRICEY)
    assert state.address == ADDRESS


def test_address_validation_failure():
    state = run(CheckoutEvent.start_checkout(), CheckoutEvent.address_validated_fail("Please complete the address"))
    assert state.status == CheckoutStatus.ERROR
    assert run(CheckoutEvent.reset_error(), state=state).status == CheckoutStatus.CHECKOUT_ADDRESS_REQUIRED


def test_stale_rates_response_is_ignored():
    loading = run(
        CheckoutEvent.start_checkout(),
        CheckoutEvent.address_updated(ADDRESS),
        CheckoutEvent.address_validated_ok(),
        CheckoutEvent.request_rates(),
    )
    assert loading.rates_request_id == 1

    assert run(CheckoutEvent.rates_success([CHEAP], request_id=0), state=loading) is loading
    assert run(CheckoutEvent.rates_fail("late", request_id=0), state=loading) is loading


def test_rates_response_outside_loading_is_ignored():
    state = run(CheckoutEvent.start_checkout())
    assert run(CheckoutEvent.rates_success([CHEAP]), state=state) is state


def test_failure_without_message_gets_default_error():
    state = run(CheckoutEvent.start_checkout(), CheckoutEvent(type="ADDRESS_VALIDATED_FAIL"))
    assert state.status == CheckoutStatus.ERROR
    assert state.error


@pytest.mark.parametrize("event", [
    CheckoutEvent.payment_session_success(),
    CheckoutEvent.payment_session_fail("Stripe error 402"),
])
def test_payment_result_outside_payment_creating_is_ignored(event):
    fresh = run(CheckoutEvent.start_checkout())
    assert run(event, state=fresh) is fresh

    selected = run(CheckoutEvent.select_rate(CHEAP), state=rates_ready_state())
    assert run(event, state=selected) is selected
