"""
Normalizes carrier-aggregator rate payloads into ShippingRate objects.

Accepts either a bare list of rates (ShipEngine /rates/estimate) or an object
holding `rate_response.rates` (ShipEngine /rates), with snake_case or
camelCase field names.
"""

import math
from typing import Any, List, Optional, Tuple

from storefront.schemas.shipping import ShippingRate


def extract_raw_rates(data: Any) -> List[dict]:
    if isinstance(data, list):
        return [r for r in data if isinstance(r, dict)]
    if isinstance(data, dict):
        rates = (data.get("rate_response") or {}).get("rates") or data.get("rates") or []
        return [r for r in rates if isinstance(r, dict)]
    return []


def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _amount(raw: dict) -> float:
    shipping_amount = raw.get("shipping_amount")
    value = shipping_amount.get("amount") if isinstance(shipping_amount, dict) else None
    if value is None:
        value = raw.get("amount", 0)
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def _currency(raw: dict) -> str:
    shipping_amount = raw.get("shipping_amount")
    value = shipping_amount.get("currency") if isinstance(shipping_amount, dict) else None
    return str(value or raw.get("currency") or "USD").upper()


def _delivery_days(raw: dict) -> Optional[int]:
    value = _first(raw, "delivery_days", "deliveryDays")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError, OverflowError):
        return None


def normalize_rate(raw: dict) -> ShippingRate:
    return ShippingRate(
        carrier_id=_first(raw, "carrier_id", "carrierId"),
        carrier=_first(raw, "carrier_friendly_name", "carrier"),
        service_code=_first(raw, "service_code", "serviceCode"),
        service=_first(raw, "service_type", "service", "service_name", "serviceCode", "service_code"),
        amount=_amount(raw),
        currency=_currency(raw),
        delivery_days=_delivery_days(raw),
        estimated_delivery_date=_first(raw, "estimated_delivery_date", "estimatedDeliveryDate"),
    )


def normalize_rates(data: Any) -> Tuple[ShippingRate, ...]:
    """Normalized rates with finite, non-negative amounts, cheapest first"""
    rates = [normalize_rate(raw) for raw in extract_raw_rates(data)]
    rates = [r for r in rates if math.isfinite(r.amount) and r.amount >= 0]
    return tuple(sorted(rates, key=lambda r: r.amount))
