"""
Reverse geocoding: (lat, lng) -> {"county", "state"}.

Two interchangeable providers sit behind the same resolve() call:
- GoogleGeocoder: commercial API keyed by GOOGLE_MAPS_API_KEY
- CensusGeocoder: public US Census geographies service
"""
import math
import logging

import requests

from app_utils import constants
from app_utils.constants import UNKNOWN
from app_utils.errors import InvalidInput, GeocodeUnavailable, GeocoderNotConfigured

logger = logging.getLogger(__name__)

COUNTY_TYPE = "administrative_area_level_2"
STATE_TYPE = "administrative_area_level_1"
SPECIFIC_RESULT_TYPES = ("street_address", "route")


def validate_coordinates(lat, lng):
    """
    Ensure lat/lng are present, numeric and in range.
    Returns them as floats.
    """
    for name, value in (("lat", lat), ("lng", lng)):
        # bool is an int subclass; "true" is not a coordinate
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(f"Invalid coordinates: {name} must be a number")
        if not math.isfinite(value):
            raise InvalidInput(f"Invalid coordinates: {name} must be finite")

    if not -90 <= lat <= 90:
        raise InvalidInput("Invalid coordinates: lat must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise InvalidInput("Invalid coordinates: lng must be between -180 and 180")

    return float(lat), float(lng)


def _extract_county_state(components, county, state):
    for component in components:
        types = component.get("types", [])
        if COUNTY_TYPE in types:
            county = component.get("long_name") or county
        if STATE_TYPE in types:
            state = component.get("short_name") or state
    return county, state


def pick_county_state(results):
    """
    Choose county/state from a list of Google geocode results.

    The first street_address/route result is the most specific one; if it
    carries no county, fall back to scanning every result in order.
    """
    county, state = UNKNOWN, UNKNOWN

    for result in results:
        types = result.get("types", [])
        if any(t in types for t in SPECIFIC_RESULT_TYPES):
            county, state = _extract_county_state(result.get("address_components", []), county, state)
            break

    if county == UNKNOWN:
        for result in results:
            county, state = _extract_county_state(result.get("address_components", []), county, state)
            if county != UNKNOWN:
                break

    return {"county": county, "state": state}


class GoogleGeocoder:
    name = "google"

    def __init__(self, api_key=None, timeout=None, session=None):
        self.api_key = api_key if api_key is not None else constants.GOOGLE_MAPS_API_KEY
        self.timeout = timeout or constants.GEOCODE_TIMEOUT_SECONDS
        self.http = session or requests

    def resolve(self, lat, lng):
        lat, lng = validate_coordinates(lat, lng)

        if not self.api_key:
            raise GeocoderNotConfigured(
                "Google Maps API key not configured. Please add GOOGLE_MAPS_API_KEY to your .env file"
            )

        try:
            response = self.http.get(
                constants.GOOGLE_GEOCODE_URL,
                params={"latlng": f"{lat},{lng}", "key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GeocodeUnavailable(f"Google API request failed: {e}") from e

        if response.status_code != 200:
            raise GeocodeUnavailable(f"Google API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise GeocodeUnavailable("Google API returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise GeocodeUnavailable("Google API returned an unexpected body")

        if data.get("status") != "OK":
            raise GeocodeUnavailable(f"Geocoding failed: {data.get('status')}")

        try:
            return pick_county_state(data.get("results") or [])
        except (AttributeError, TypeError) as e:
            raise GeocodeUnavailable("Google API returned an unexpected body") from e


class CensusGeocoder:
    name = "census"

    def __init__(self, benchmark=None, vintage=None, timeout=None, session=None):
        self.benchmark = benchmark or constants.CENSUS_BENCHMARK
        self.vintage = vintage or constants.CENSUS_VINTAGE
        self.timeout = timeout or constants.GEOCODE_TIMEOUT_SECONDS
        self.http = session or requests

    def resolve(self, lat, lng):
        lat, lng = validate_coordinates(lat, lng)

        params = {
            "x": lng,
            "y": lat,
            "benchmark": self.benchmark,
            "vintage": self.vintage,
            "format": "json",
        }
        try:
            response = self.http.get(constants.CENSUS_GEOCODE_URL, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise GeocodeUnavailable(f"Census geocoder request failed: {e}") from e

        if response.status_code != 200:
            raise GeocodeUnavailable(f"Census geocoder error: {response.status_code}")

        try:
            geographies = response.json()["result"]["geographies"]
            states = geographies.get("States") or [{}]
            counties = geographies.get("Counties") or [{}]
            county = counties[0].get("NAME") or UNKNOWN
            state = states[0].get("NAME") or UNKNOWN
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            raise GeocodeUnavailable("Census geocoder returned an unexpected body") from e

        return {"county": county, "state": state}


PROVIDERS = {
    GoogleGeocoder.name: GoogleGeocoder,
    CensusGeocoder.name: CensusGeocoder,
}

_geocoders = {}


def get_geocoder(provider=None):
    """Get or create the geocoder for a provider (defaults to GEOCODER_PROVIDER)."""
    provider = (provider or constants.GEOCODER_PROVIDER).lower()
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown geocoder provider: {provider}")

    if provider not in _geocoders:
        _geocoders[provider] = PROVIDERS[provider]()
        logger.info(f"Geocoder initialised: {provider}")
    return _geocoders[provider]
