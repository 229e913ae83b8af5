"""
Shipping carrier factory to make carrier selection easy
"""
from storefront.services.shipping.base import BaseCarrier
from storefront.services.shipping.carriers.shipengine import ShipEngineCarrier


def get_carrier(carrier_code: str = "shipengine", **kwargs) -> BaseCarrier:
    """
    Factory function to get the appropriate carrier by code

    Args:
        carrier_code: The code of the carrier to use
        **kwargs: Passed through to the carrier constructor

    Returns:
        An instance of the appropriate carrier class

    Raises:
        ValueError: If the carrier code is not supported
    """
    carriers = {
        "shipengine": ShipEngineCarrier,
    }

    code = (carrier_code or "").lower()
    if code not in carriers:
        raise ValueError(f"Carrier '{carrier_code}' is not supported")

    return carriers[code](**kwargs)
