from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from app_models import User
from app_utils.errors import InvalidInput, GeocodeUnavailable, GeocoderNotConfigured
from app_utils.geo import get_geocoder
from routers.auth import get_current_user
from schemas import GeocodeResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/geocode", tags=["Geocode"])


async def json_body(request: Request):
    """Raw JSON body, or None when it is missing or unparseable."""
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("", response_model=GeocodeResponse)
def geocode_location(
    payload=Depends(json_body),
    current_user: User = Depends(get_current_user)
):
    """
    Resolve a coordinate to {county, state} with the configured provider
    """
    try:
        if not isinstance(payload, dict):
            raise InvalidInput("Request body must be a JSON object with lat and lng")
        return get_geocoder().resolve(payload.get("lat"), payload.get("lng"))
    except InvalidInput as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except GeocoderNotConfigured as e:
        logger.error(str(e))
        return JSONResponse(status_code=500, content={"error": str(e)})
    except GeocodeUnavailable as e:
        logger.error(f"Error in geocoding: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to get location information"})
