"""
Base Carrier Interface

This module defines the abstract base class that all rate-provider
implementations must implement.

Each carrier implementation provides standard methods for:
- Getting shipping rates for a shipment
- Listing the carrier accounts available to the API key

The quote service only talks to this interface, so a second aggregator
(EasyPost, Shippo) can be added behind the factory without touching it.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List


class BaseCarrier(ABC):
    """Base class for all shipping rate providers"""

    carrier_name = "Generic Carrier"
    carrier_code = "generic"

    @abstractmethod
    async def get_rates(self, shipment_details: Dict[str, Any]) -> Any:
        """Get shipping rates

        Args:
            shipment_details: Rate request in the provider's format

        Returns:
            Raw provider response (a rate list or an object wrapping one)

        Raises:
            ShipEngineAPIError (or the provider's equivalent) on failure
        """
        pass

    @abstractmethod
    async def list_carriers(self) -> List[Dict[str, Any]]:
        """List the carrier accounts connected to this provider

        Returns:
            Carrier records, each carrying at least a `carrier_id`
        """
        pass
