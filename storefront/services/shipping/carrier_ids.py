"""
Carrier-id resolution for ShipEngine rate requests.

Configured ids win. Without any, the carrier accounts on the API key are
listed once and remembered for the life of the process.
"""

import logging
import re
from typing import Iterable, List, Optional

from storefront.core.exceptions import ShippingServiceError
from storefront.services.shipping.base import BaseCarrier

logger = logging.getLogger(__name__)

_CARRIER_ID_PATTERNS = (
    re.compile(r"^se-"),
    re.compile(r"^car_"),
    re.compile(r"^[0-9a-f-]{16,}$", re.IGNORECASE),
)

# Process-lifetime cache; no invalidation
_cached_carrier_ids: Optional[List[str]] = None


def looks_like_carrier_id(value) -> bool:
    if not value:
        return False
    text = str(value).strip()
    if not text:
        return False
    return any(pattern.search(text) for pattern in _CARRIER_ID_PATTERNS)


def parse_carrier_ids(values: Iterable) -> List[str]:
    """Keep carrier-id-shaped values, first occurrence order, no duplicates"""
    seen = []
    for value in values or []:
        text = str(value).strip()
        if looks_like_carrier_id(text) and text not in seen:
            seen.append(text)
    return seen


def get_cached_carrier_ids() -> Optional[List[str]]:
    return list(_cached_carrier_ids) if _cached_carrier_ids is not None else None


def clear_carrier_id_cache() -> None:
    global _cached_carrier_ids
    _cached_carrier_ids = None


async def resolve_carrier_ids(configured: Iterable, carrier: BaseCarrier) -> List[str]:
    """
    Carrier ids to put in `rate_options.carrier_ids`

    Args:
        configured: Ids from settings (may be empty or contain junk)
        carrier: Provider used to list carriers when nothing is configured

    Returns:
        A list of ids; empty when nothing is configured and the lookup failed,
        in which case the provider falls back to account defaults
    """
    global _cached_carrier_ids

    ids = parse_carrier_ids(configured)
    if ids:
        return ids

    if _cached_carrier_ids is not None:
        return list(_cached_carrier_ids)

    try:
        carriers = await carrier.list_carriers()
    except ShippingServiceError as e:
        logger.warning(f"Carrier lookup failed, quoting with account defaults: {e}")
        return []

    ids = parse_carrier_ids(c.get("carrier_id") for c in carriers if isinstance(c, dict))
    if ids:
        _cached_carrier_ids = ids
        logger.info(f"Cached {len(ids)} carrier ids from {carrier.carrier_name}")
    return list(ids)
