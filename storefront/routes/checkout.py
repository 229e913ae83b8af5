import logging

from fastapi import APIRouter, Depends, HTTPException

from storefront.core.exceptions import PaymentConfigurationError, StripeAPIError
from storefront.dependencies import get_stripe_client
from storefront.schemas.checkout import CheckoutSessionRequest, CheckoutSessionResponse
from storefront.services.checkout.state import validate_address
from storefront.services.stripe.client import StripeClient

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["checkout"],
)


@router.post("/checkout")
async def create_checkout(
    request: CheckoutSessionRequest,
    stripe_client: StripeClient = Depends(get_stripe_client),
):
    """Create a Stripe Checkout Session for the cart and the selected shipping rate."""
    if not request.cart:
        raise HTTPException(status_code=400, detail="Cart is empty")

    if request.selected_rate is None:
        raise HTTPException(status_code=400, detail="A shipping rate must be selected")

    if request.address is not None and not validate_address(request.address):
        raise HTTPException(status_code=400, detail="Shipping address is incomplete")

    try:
        session = await stripe_client.create_checkout_session(
            request.cart, request.address, request.selected_rate
        )
    except PaymentConfigurationError as e:
        logger.error(f"Checkout unavailable: {e}")
        raise HTTPException(status_code=500, detail="Payments are not configured")
    except StripeAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if not session.get("url"):
        raise HTTPException(status_code=502, detail="Stripe did not return a checkout URL")

    return CheckoutSessionResponse(url=session["url"], session_id=session.get("id")).to_payload()
