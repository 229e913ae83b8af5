# storefront/core/config.py

import os
from functools import lru_cache
from typing import List, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


def _parse_csv_list(value):
    if value in (None, "", []):
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.replace(" ", ",").split(",") if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(part).strip() for part in value if str(part).strip()]
    return []


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Sanity content store
    SANITY_PROJECT_ID: str = ""
    SANITY_DATASET: str = "production"
    SANITY_API_VERSION: str = "2023-01-01"
    SANITY_API_TOKEN: str = ""
    SANITY_USE_CDN: bool = False

    # ShipEngine
    SHIPENGINE_API_KEY: str = ""
    SHIPENGINE_BASE_URL: str = "https://api.shipengine.com/v1"
    SHIPENGINE_CARRIER_ID: str = ""
    SHIPENGINE_CARRIER_IDS: str = ""  # comma or space separated

    # Ship-from origin
    ORIGIN_NAME: str = "FAS Motorsports"
    ORIGIN_PHONE: str = "000-000-0000"
    ORIGIN_ADDRESS1: str = "123 Business Rd"
    ORIGIN_ADDRESS2: Optional[str] = None
    ORIGIN_CITY: str = "Las Vegas"
    ORIGIN_STATE: str = "NV"
    ORIGIN_POSTAL: str = "89101"
    ORIGIN_COUNTRY: str = "US"

    # Default parcel when a product has no shipping metadata
    DEFAULT_BOX_LENGTH: float = 12.0
    DEFAULT_BOX_WIDTH: float = 9.0
    DEFAULT_BOX_HEIGHT: float = 3.0
    DEFAULT_BOX_WEIGHT_LB: float = 2.0

    # Freight thresholds (pounds / inches)
    FREIGHT_WEIGHT_LB: float = 150.0
    FREIGHT_DIMENSION_IN: float = 60.0

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    STRIPE_CURRENCY: str = "usd"
    SITE_URL: str = "http://localhost:4321"

    # HTTP
    CORS_ALLOW: str = ""
    HTTP_TIMEOUT: float = 30.0

    # Environment
    ENVIRONMENT: str = "development"

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists(os.environ.get('ENV_FILE', '.env')) else None,
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return _parse_csv_list(self.CORS_ALLOW)

    @property
    def shipengine_carrier_ids(self) -> List[str]:
        """Configured carrier ids, list variable first, then the single id"""
        ids = _parse_csv_list(self.SHIPENGINE_CARRIER_IDS)
        if self.SHIPENGINE_CARRIER_ID.strip():
            ids.append(self.SHIPENGINE_CARRIER_ID.strip())
        return ids

    @property
    def default_box_dimensions(self) -> dict:
        return {
            "length": self.DEFAULT_BOX_LENGTH,
            "width": self.DEFAULT_BOX_WIDTH,
            "height": self.DEFAULT_BOX_HEIGHT,
        }

    @property
    def ship_from(self) -> dict:
        """Origin address in ShipEngine's field names"""
        return {
            "name": self.ORIGIN_NAME,
            "phone": self.ORIGIN_PHONE,
            "address_line1": self.ORIGIN_ADDRESS1,
            "address_line2": self.ORIGIN_ADDRESS2 or None,
            "city_locality": self.ORIGIN_CITY,
            "state_province": self.ORIGIN_STATE,
            "postal_code": self.ORIGIN_POSTAL,
            "country_code": (self.ORIGIN_COUNTRY or "US").upper(),
        }


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
