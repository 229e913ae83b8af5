# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.core.config import Settings, get_settings, clear_settings_cache
from storefront.services.shipping.carrier_ids import clear_carrier_id_cache


@pytest.fixture(scope="session")
def settings():
    """Provide test settings"""
    return Settings(
        SANITY_PROJECT_ID="testproj",
        SANITY_DATASET="production",
        SANITY_API_TOKEN="sanity_test_token",
        SHIPENGINE_API_KEY="TEST_shipengine_key",
        SHIPENGINE_CARRIER_IDS="se-111, se-222",
        STRIPE_SECRET_KEY="sk_test_123",
        SITE_URL="https://shop.example.com",
        ORIGIN_CITY="Las Vegas",
        ORIGIN_POSTAL="89101",
    )


@pytest.fixture(autouse=True)
def reset_caches():
    """Settings and carrier ids are cached per process; start every test clean"""
    clear_settings_cache()
    clear_carrier_id_cache()
    yield
    clear_settings_cache()
    clear_carrier_id_cache()
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(settings):
    """Provide a test client with overridden settings"""
    def get_test_settings():
        return settings

    app.dependency_overrides[get_settings] = get_test_settings
    with TestClient(app) as client:
        yield client


# Mock fixtures for external services
@pytest.fixture
def mock_carrier(mocker):
    """A rate provider whose calls are AsyncMocks"""
    carrier = mocker.MagicMock()
    carrier.carrier_name = "ShipEngine"
    carrier.carrier_code = "shipengine"
    carrier.get_rates = mocker.AsyncMock(return_value={"rate_response": {"rates": []}})
    carrier.list_carriers = mocker.AsyncMock(return_value=[])
    return carrier


@pytest.fixture
def mock_sanity(mocker):
    """A Sanity client that returns no products unless told otherwise"""
    sanity = mocker.MagicMock()
    sanity.get_products_for_shipping = mocker.AsyncMock(return_value=[])
    return sanity


@pytest.fixture
def sample_products():
    """Sanity shipping metadata for one plain product and one product with variants"""
    return [
        {
            "_id": "sku-1",
            "title": "Billet Intake Elbow",
            "sku": "FAS-ELB-1",
            "shippingWeight": 5,
            "boxDimensions": "10x8x4",
            "shipsAlone": False,
            "shippingClass": "standard",
            "variants": [],
        },
        {
            "_id": "prod-2",
            "title": "Pulley Kit",
            "sku": "FAS-PUL",
            "shippingWeight": 12,
            "boxDimensions": "14 x 12 x 6 in",
            "variants": [
                {"_key": "var-2a", "title": "Pulley Kit 2.5in", "sku": "FAS-PUL-25", "shippingWeight": 3},
                {"_key": "var-2b", "title": "Install Service", "shippingClass": "Install Only"},
            ],
        },
    ]


@pytest.fixture
def destination():
    return {
        "name": "Jane Doe",
        "addressLine1": "1 Main St",
        "city": "Austin",
        "state": "TX",
        "postalCode": "78701",
        "country": "us",
    }


@pytest.fixture
def shipengine_rates_response():
    """A /v1/rates response, deliberately unsorted"""
    return {
        "rate_response": {
            "rates": [
                {
                    "carrier_id": "se-222",
                    "carrier_friendly_name": "UPS",
                    "service_code": "ups_ground",
                    "service_type": "UPS® Ground",
                    "shipping_amount": {"currency": "usd", "amount": 18.4},
                    "delivery_days": 4,
                },
                {
                    "carrier_id": "se-111",
                    "carrier_friendly_name": "USPS",
                    "service_code": "usps_priority_mail",
                    "service_type": "USPS Priority Mail",
                    "shipping_amount": {"currency": "usd", "amount": 12.5},
                    "delivery_days": 2,
                },
                {
                    "carrier_id": "se-333",
                    "carrier_friendly_name": "FedEx",
                    "service_code": "fedex_ground",
                    "service_type": "FedEx Ground",
                    "shipping_amount": {"currency": "usd", "amount": "not-a-number"},
                },
            ]
        }
    }
