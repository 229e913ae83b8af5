"""
Conversion of quoted shipping rates into the integer-cents rates the checkout
page lists and the reducer stores.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from storefront.core.utils import finite_number
from storefront.schemas.checkout import CheckoutRate
from storefront.schemas.shipping import ShippingRate

logger = logging.getLogger(__name__)


def to_cents(amount: Any) -> Optional[int]:
    """Dollar amount to integer cents, None when it is not a finite number"""
    value = finite_number(amount)
    return int(round(value * 100)) if value is not None else None


def rate_id(carrier: str, service: str, amount_cents: int) -> str:
    """Stable id for a rate, e.g. `UPS-Ground-1250`"""
    return f"{carrier}-{service}-{amount_cents}"


def checkout_rate_from_shipping_rate(rate: ShippingRate, provider: str = "shipengine") -> Optional[CheckoutRate]:
    cents = to_cents(rate.amount)
    if cents is None:
        return None
    carrier = (rate.carrier or "Shipping").strip()
    service = (rate.service or "Standard").strip()
    return CheckoutRate(
        id=rate_id(carrier, service, cents),
        provider=provider,
        carrier=carrier,
        service=service,
        amount_cents=cents,
        currency=(rate.currency or "USD").upper(),
        est_days=rate.delivery_days,
    )


def _coerce_raw_rate(raw: Dict[str, Any]) -> Optional[CheckoutRate]:
    # Browsers post either amountCents or a dollar amount
    raw_cents = raw.get("amountCents", raw.get("amount_cents"))
    if raw_cents is not None:
        whole = finite_number(raw_cents)
        cents = int(round(whole)) if whole is not None else None
    else:
        cents = to_cents(raw.get("amount") or 0)
    if cents is None:
        return None

    carrier = str(raw.get("carrier") or "Shipping").strip()
    service = str(raw.get("service") or "Standard").strip()
    est_days = raw.get("estDays", raw.get("est_days"))
    try:
        est_days = int(est_days) if est_days is not None else None
    except (TypeError, ValueError, OverflowError):
        est_days = None

    return CheckoutRate(
        id=str(raw.get("id") or rate_id(carrier, service, cents)),
        provider=str(raw.get("provider") or "shipengine"),
        carrier=carrier,
        service=service,
        amount_cents=cents,
        currency=str(raw.get("currency") or "USD").upper(),
        est_days=est_days,
    )


def to_checkout_rates(rates: Iterable[Union[ShippingRate, CheckoutRate, Dict[str, Any]]]) -> List[CheckoutRate]:
    """
    Convert quoted or posted rates into CheckoutRates, dropping any whose price
    is not a finite number
    """
    converted = []
    for rate in rates or []:
        if isinstance(rate, CheckoutRate):
            converted.append(rate)
            continue
        if isinstance(rate, ShippingRate):
            checkout_rate = checkout_rate_from_shipping_rate(rate)
        elif isinstance(rate, dict):
            checkout_rate = _coerce_raw_rate(rate)
        else:
            logger.debug(f"Skipping unrecognised rate {rate!r}")
            continue
        if checkout_rate is not None:
            converted.append(checkout_rate)
    return converted
