import logging

from app_utils.constants import UNKNOWN, REPAIR_FORM_URL
from app_utils.errors import GeocodeUnavailable, Forbidden, NotFound
from app_utils.geo import validate_coordinates, get_geocoder
import crud

logger = logging.getLogger(__name__)


def resolve_county(lat, lng, geocoder=None):
    """County for a point, or "Unknown" if the provider is down or unconfigured."""
    geocoder = geocoder or get_geocoder()
    try:
        return geocoder.resolve(lat, lng).get("county") or UNKNOWN
    except GeocodeUnavailable as e:
        logger.warning(f"County lookup failed for ({lat}, {lng}), using {UNKNOWN}: {e}")
        return UNKNOWN


def create_report_workflow(db, user_id, lat, lng, geocoder=None):
    """
    Validate -> resolve county -> insert a pending report.
    Geocoding never blocks creation; duplicates at the same point are allowed.
    """
    lat, lng = validate_coordinates(lat, lng)
    county = resolve_county(lat, lng, geocoder)

    report = crud.create_report(db, user_id, lat, lng, county)
    logger.info(f"Report {report.id} created for user {user_id} in {county}")
    return report


def complete_report(db, report_id, user_id):
    if not crud.complete_report(db, report_id, user_id):
        raise Forbidden(f"Report {report_id} not completed: missing or not owned by user {user_id}")


def delete_report(db, report_id, user_id):
    if not crud.delete_report(db, report_id, user_id):
        raise Forbidden(f"Report {report_id} not deleted: missing or not owned by user {user_id}")


def get_report_detail(db, report_id, user_id, geocoder=None):
    """
    Owner-scoped report plus what the client needs to hand off to the
    repair-request form. A report saved without a county gets one resolved
    (Census by default) and cached on the row.
    """
    report = crud.get_report(db, report_id, user_id)
    if not report:
        raise NotFound("Report not found")

    if not report.county:
        county = resolve_county(report.lat, report.lng, geocoder or get_geocoder("census"))
        report = crud.set_report_county(db, report, county)

    return {
        "status": "success",
        "report": report,
        "repair_form": {
            "url": REPAIR_FORM_URL,
            "fields": {
                "county": report.county,
                "lat": report.lat,
                "lng": report.lng
            }
        }
    }
