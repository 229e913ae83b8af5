# Sanity content API client unit tests
import json

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from storefront.core.exceptions import SanityAPIError
from storefront.services.sanity.client import PRODUCT_SHIPPING_QUERY, SanityClient


def mock_http(mocker, status_code=200, json_data=None, text=""):
    mock_client = mocker.patch("httpx.AsyncClient")
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    session = AsyncMock()
    session.get.return_value = response
    mock_client.return_value.__aenter__.return_value = session
    return session


def test_base_url_and_cdn():
    assert SanityClient("abc", "production", "v2023-01-01").base_url == "https://abc.api.sanity.io/v2023-01-01"
    assert SanityClient("abc", "production", use_cdn=True).base_url.startswith("https://abc.apicdn.sanity.io/")
    # Authenticated reads never go through the CDN
    assert "apicdn" not in SanityClient("abc", "production", token="t", use_cdn=True).base_url


def test_from_settings(settings):
    client = SanityClient.from_settings(settings)
    assert client.project_id == "testproj"
    assert client.token == "sanity_test_token"
    assert client.is_configured


@pytest.mark.asyncio
async def test_product_lookup_sends_groq_params(mocker):
    session = mock_http(mocker, json_data={"result": [{"_id": "sku-1"}]})
    client = SanityClient("abc", "production", token="secret")

    products = await client.get_products_for_shipping(["sku-1", "var-2"])

    assert products == [{"_id": "sku-1"}]
    args, kwargs = session.get.call_args
    assert args[0] == "https://abc.api.sanity.io/v2023-01-01/data/query/production"
    assert kwargs["params"]["query"] == PRODUCT_SHIPPING_QUERY
    assert json.loads(kwargs["params"]["$ids"]) == ["sku-1", "var-2"]
    assert kwargs["headers"]["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_empty_ids_skip_request(mocker):
    mock_client = mocker.patch("httpx.AsyncClient")
    client = SanityClient("abc", "production")

    assert await client.get_products_for_shipping([]) == []
    mock_client.assert_not_called()


@pytest.mark.asyncio
async def test_error_status_raises(mocker):
    mock_http(mocker, status_code=403, text="forbidden")
    client = SanityClient("abc", "production")

    with pytest.raises(SanityAPIError, match="403"):
        await client.fetch("*[]")


@pytest.mark.asyncio
async def test_network_error_raises(mocker):
    session = mock_http(mocker)
    session.get.side_effect = httpx.ReadTimeout("timed out")
    client = SanityClient("abc", "production")

    with pytest.raises(SanityAPIError, match="Network error"):
        await client.fetch("*[]")


@pytest.mark.asyncio
async def test_unconfigured_client_raises():
    with pytest.raises(SanityAPIError):
        await SanityClient("", "production").fetch("*[]")
