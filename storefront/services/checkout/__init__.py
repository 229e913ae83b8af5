from .state import INITIAL_CHECKOUT_STATE, checkout_reducer, initial_checkout_state, validate_address
from .flow import CheckoutFlow
