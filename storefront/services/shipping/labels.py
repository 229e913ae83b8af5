"""
Human-readable shipping labels for rates shown at checkout.
"""

import re
from typing import Optional

CARRIER_LABELS = {
    "usps": "USPS",
    "ups": "UPS",
    "fedex": "FedEx",
    "dhl": "DHL",
    "ontrac": "OnTrac",
}

_ORDINAL = re.compile(r"^\d+(?:st|nd|rd|th)?$", re.IGNORECASE)


def _humanize_token(token: str) -> str:
    lower = token.lower()
    if lower in CARRIER_LABELS:
        return CARRIER_LABELS[lower]
    if _ORDINAL.match(token):
        return token.upper()
    if lower in ("us", "usa"):
        return lower.upper()
    return token[:1].upper() + token[1:]


def humanize_shipping_code(value: Optional[str]) -> str:
    """
    Examples:
        "ups_ground"        -> "UPS Ground"
        "fedex-2nd-day"     -> "FedEx 2ND Day"
        "usps_priority_mail" -> "USPS Priority Mail"
    """
    if not value:
        return ""
    cleaned = re.sub(r"\s+", " ", re.sub(r"[_-]+", " ", str(value))).strip()
    return " ".join(_humanize_token(token) for token in cleaned.split(" ") if token)


def build_shipping_label(service: Optional[str], carrier: Optional[str] = None) -> str:
    """`"<service> | <carrier>"`, or just the service when it already names the carrier"""
    service_label = humanize_shipping_code(service or "Shipping") or "Shipping"
    carrier_label = humanize_shipping_code(carrier or "")
    if not carrier_label:
        return service_label
    if service_label.lower().startswith(carrier_label.lower()):
        return service_label
    return f"{service_label} | {carrier_label}"
