import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from storefront.core.enums import QuoteErrorType
from storefront.dependencies import get_quote_service
from storefront.schemas.checkout import ShippingQuoteRequest
from storefront.schemas.shipping import ShippingRatesRequest
from storefront.services.checkout.flow import to_quote_cart
from storefront.services.checkout.rates import to_checkout_rates
from storefront.services.checkout.state import validate_address
from storefront.services.shipping.quote import ShippingQuoteService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["shipping"],
)

ERROR_STATUS_CODES = {
    QuoteErrorType.VALIDATION: 400,
    QuoteErrorType.CONFIGURATION: 500,
    QuoteErrorType.PROVIDER: 502,
}


@router.post("/shipping/quote")
async def shipping_quote(
    request: ShippingQuoteRequest,
    quote_service: ShippingQuoteService = Depends(get_quote_service),
):
    """Rates for the checkout page, in integer cents."""
    cart = to_quote_cart(request.items)
    if not cart:
        raise HTTPException(status_code=400, detail="Cart items are required")

    if not validate_address(request.address):
        raise HTTPException(status_code=400, detail="Shipping address is required")

    result = await quote_service.quote(cart, request.address.to_destination_payload())

    if not result.success:
        logger.warning(f"Shipping quote failed: {result.message}")
        raise HTTPException(status_code=502, detail=result.message or "Failed to retrieve shipping rates")

    if result.freight:
        return {"rates": [], "freight": True, "message": result.message}

    if result.install_only:
        return {"rates": [], "installOnly": True, "message": result.message}

    return {"rates": [rate.to_payload() for rate in to_checkout_rates(result.rates)]}


@router.post("/shipping-rates")
async def shipping_rates(
    request: ShippingRatesRequest,
    quote_service: ShippingQuoteService = Depends(get_quote_service),
):
    """Full quote result: parcels, freight flag, every normalized rate and the best one."""
    result = await quote_service.quote(request.cart, request.destination)
    status_code = 200 if result.success else ERROR_STATUS_CODES.get(result.error_type, 502)
    return JSONResponse(status_code=status_code, content=result.to_payload())
