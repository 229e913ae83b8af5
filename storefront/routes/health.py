from fastapi import APIRouter, Depends

from storefront.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic health check, with which integrations have credentials"""
    return {
        "status": "healthy",
        "service": "Storefront Commerce",
        "environment": settings.ENVIRONMENT,
        "integrations": {
            "sanity": bool(settings.SANITY_PROJECT_ID),
            "shipengine": bool(settings.SHIPENGINE_API_KEY),
            "stripe": bool(settings.STRIPE_SECRET_KEY),
        },
    }
