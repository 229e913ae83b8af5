"""
ShipEngine Carrier Implementation

This module implements the ShipEngine rate-aggregation API integration.

Features:
- Rate calculation across every carrier account on the API key
- Rate estimates (no address validation, no label purchase)
- Carrier account listing

ShipEngine API Docs:
 - https://www.shipengine.com/docs/rates/
 - https://www.shipengine.com/docs/reference/list-carriers/
"""

import json
import logging
from typing import Dict, Any, List, Optional

import httpx

from storefront.core.config import get_settings
from storefront.core.exceptions import ShipEngineAPIError, ShippingConfigurationError
from storefront.services.shipping.base import BaseCarrier

logger = logging.getLogger(__name__)


class ShipEngineCarrier(BaseCarrier):
    """ShipEngine carrier implementation."""

    carrier_name = "ShipEngine"
    carrier_code = "shipengine"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize the ShipEngine carrier.

        Args:
            api_key: ShipEngine API key, defaults to SHIPENGINE_API_KEY
            base_url: API root, defaults to SHIPENGINE_BASE_URL
            timeout: Request timeout in seconds
        """
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.SHIPENGINE_API_KEY
        self.base_url = (base_url or settings.SHIPENGINE_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT

    def _get_headers(self) -> Dict[str, str]:
        """Get the standard headers for API requests"""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "API-Key": self.api_key,
        }

    async def _make_request(self, method: str, endpoint: str, data: Optional[Dict] = None) -> Any:
        """
        Make a request to the ShipEngine API

        Raises:
            ShippingConfigurationError: If no API key is set
            ShipEngineAPIError: If the request fails
        """
        if not self.api_key:
            raise ShippingConfigurationError("ShipEngine API key not configured")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.debug(f"Making {method} request to {url}")
        if data:
            logger.debug(f"Data: {json.dumps(data)[:500]}...")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    json=data,
                )

                if response.status_code not in (200, 201):
                    logger.error(f"ShipEngine API error {response.status_code}: {response.text}")
                    raise ShipEngineAPIError(
                        f"ShipEngine error {response.status_code}: {response.text}",
                        status_code=response.status_code,
                    )

                return response.json()

        except httpx.RequestError as e:
            logger.error(f"Network error: {str(e)}")
            raise ShipEngineAPIError(f"Network error: {str(e)}")

    async def get_rates(self, shipment_details: Dict[str, Any]) -> Any:
        """Get shipping rates for a potential shipment

        Args:
            shipment_details: `{shipment: {...}, rate_options: {...}}` payload

        Returns:
            Rate information (`rate_response.rates` holds the list)
        """
        result = await self._make_request("POST", "/rates", shipment_details)
        logger.info("Rate information retrieved")
        return result

    async def estimate_rates(self, shipment_details: Dict[str, Any]) -> Any:
        """Rate estimate without a full shipment; returns a bare rate list"""
        return await self._make_request("POST", "/rates/estimate", shipment_details)

    async def list_carriers(self) -> List[Dict[str, Any]]:
        """List carrier accounts connected to this API key"""
        result = await self._make_request("GET", "/carriers")
        carriers = result.get("carriers", []) if isinstance(result, dict) else result
        return carriers or []
