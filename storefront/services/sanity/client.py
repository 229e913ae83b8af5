import json
import logging
import httpx
from typing import Any, Dict, List, Optional

from storefront.core.exceptions import SanityAPIError
from storefront.core.config import get_settings

logger = logging.getLogger(__name__)


PRODUCT_SHIPPING_QUERY = """*[_type == "product" && (
  _id in $ids ||
  count(variants[@._id in $ids || @.id in $ids || @._key in $ids]) > 0
)]{
  _id,
  title,
  sku,
  shippingWeight,
  boxDimensions,
  shipsAlone,
  shippingClass,
  variants[]{
    _id,
    _key,
    id,
    title,
    sku,
    shippingWeight,
    boxDimensions,
    shipsAlone,
    shippingClass
  }
}"""


class SanityClient:
    """
    Async client for the Sanity content API (GROQ query endpoint).

    Only reads are needed here: the storefront keeps product shipping metadata
    (weight, box dimensions, ships-alone flag, shipping class) on product and
    variant documents.

    Documentation: https://www.sanity.io/docs/http-query
    """

    API_HOST = "api.sanity.io"
    CDN_HOST = "apicdn.sanity.io"

    def __init__(
        self,
        project_id: str,
        dataset: str,
        api_version: str = "2023-01-01",
        token: Optional[str] = None,
        use_cdn: bool = False,
        timeout: float = 30.0,
    ):
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip("v")
        self.token = token
        self.timeout = timeout
        host = self.CDN_HOST if use_cdn and not token else self.API_HOST
        self.base_url = f"https://{project_id}.{host}/v{self.api_version}"

    @classmethod
    def from_settings(cls, settings=None) -> "SanityClient":
        settings = settings or get_settings()
        return cls(
            project_id=settings.SANITY_PROJECT_ID,
            dataset=settings.SANITY_DATASET,
            api_version=settings.SANITY_API_VERSION,
            token=settings.SANITY_API_TOKEN or None,
            use_cdn=settings.SANITY_USE_CDN,
            timeout=settings.HTTP_TIMEOUT,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.project_id and self.dataset)

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _encode_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
        """GROQ parameters travel as `$name=<json>` query-string entries"""
        return {f"${name}": json.dumps(value) for name, value in (params or {}).items()}

    async def fetch(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GROQ query and return its `result`

        Raises:
            SanityAPIError: If the client is unconfigured or the request fails
        """
        if not self.is_configured:
            raise SanityAPIError("Sanity project id and dataset are not configured")

        url = f"{self.base_url}/data/query/{self.dataset}"
        request_params = {"query": query, **self._encode_params(params)}
        logger.debug(f"Sanity query to {url} with params {list((params or {}).keys())}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=self._get_headers(), params=request_params)

                if response.status_code != 200:
                    logger.error(f"Sanity API error {response.status_code}: {response.text}")
                    raise SanityAPIError(f"Sanity query failed ({response.status_code}): {response.text}")

                return response.json().get("result")

        except httpx.RequestError as e:
            logger.error(f"Network error: {str(e)}")
            raise SanityAPIError(f"Network error: {str(e)}")

    async def get_products_for_shipping(self, ids: List[str]) -> List[Dict[str, Any]]:
        """Products whose _id, or any variant's _id/id/_key, is in `ids`"""
        if not ids:
            return []
        result = await self.fetch(PRODUCT_SHIPPING_QUERY, {"ids": list(ids)})
        return result if isinstance(result, list) else []
