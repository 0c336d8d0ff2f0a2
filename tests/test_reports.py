"""
Tests for the report workflow: county resolution, lifecycle and ownership.
"""
import pytest
from unittest.mock import Mock, patch

import crud
from app_models import Report
from app_utils.errors import InvalidInput, Forbidden, NotFound, GeocodeUnavailable, GeocoderNotConfigured
from app_utils.geo import GoogleGeocoder, CensusGeocoder
from services import report_service


def _down_geocoder(error=GeocodeUnavailable("provider down")):
    return Mock(resolve=Mock(side_effect=error))


# -------------------- create --------------------

def test_create_then_lookup_is_pending_with_resolved_county(db, user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)

    stored = crud.get_report(db, report.id, user.id)
    assert stored.status == "pending"
    assert stored.county == "Baltimore County"
    assert (stored.lat, stored.lng) == (39.29, -76.61)
    assert stored.created_at is not None
    assert stored.updated_at is not None
    stub_geocoder.resolve.assert_called_once_with(39.29, -76.61)


@pytest.mark.parametrize("error", [GeocodeUnavailable("503"), GeocoderNotConfigured("no key")])
def test_geocoder_failure_still_creates_report(db, user, error):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=_down_geocoder(error))
    assert report.county == "Unknown"
    assert report.status == "pending"


def _http_returning(body):
    response = Mock(status_code=200)
    response.json = Mock(return_value=body)
    return Mock(get=Mock(return_value=response))


@pytest.mark.parametrize("geocoder", [
    GoogleGeocoder(api_key="test-key", session=_http_returning(None)),
    GoogleGeocoder(api_key="test-key", session=_http_returning([])),
    GoogleGeocoder(api_key="test-key", session=_http_returning({"status": "OK", "results": [None]})),
    GoogleGeocoder(api_key="test-key", session=_http_returning(
        {"status": "OK", "results": [{"types": ["route"], "address_components": [None]}]}
    )),
    CensusGeocoder(session=_http_returning({"result": {"geographies": []}})),
    CensusGeocoder(session=_http_returning({"result": {"geographies": {"Counties": [None]}}})),
], ids=["google-null", "google-list", "google-null-result", "google-null-component",
        "census-list-geographies", "census-null-county"])
def test_malformed_geocoder_reply_still_creates_report(db, user, geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=geocoder)
    assert report.county == "Unknown"
    assert report.status == "pending"


def test_invalid_coordinates_rejected_before_geocoding(db, user, stub_geocoder):
    with pytest.raises(InvalidInput):
        report_service.create_report_workflow(db, user.id, None, -76.61, geocoder=stub_geocoder)
    stub_geocoder.resolve.assert_not_called()
    assert db.query(Report).count() == 0


def test_same_point_twice_creates_two_reports(db, user, stub_geocoder):
    first = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)
    second = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)
    assert first.id != second.id
    assert db.query(Report).count() == 2


# -------------------- complete / delete --------------------

def test_complete_own_report(db, user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)

    report_service.complete_report(db, report.id, user.id)

    db.refresh(report)
    assert report.status == "completed"


def test_complete_twice_is_harmless(db, user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)
    report_service.complete_report(db, report.id, user.id)
    report_service.complete_report(db, report.id, user.id)

    db.refresh(report)
    assert report.status == "completed"


def test_complete_by_other_user_leaves_status(db, user, other_user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)

    with pytest.raises(Forbidden):
        report_service.complete_report(db, report.id, other_user.id)

    db.refresh(report)
    assert report.status == "pending"


def test_delete_own_report(db, user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)
    report_service.delete_report(db, report.id, user.id)
    assert crud.get_report(db, report.id, user.id) is None


def test_delete_by_other_user_keeps_row(db, user, other_user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)

    with pytest.raises(Forbidden):
        report_service.delete_report(db, report.id, other_user.id)

    assert crud.get_report(db, report.id, user.id) is not None


# -------------------- detail --------------------

def test_detail_includes_repair_form_fields(db, user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)

    detail = report_service.get_report_detail(db, report.id, user.id)

    assert detail["repair_form"]["url"].startswith("https://")
    assert detail["repair_form"]["fields"] == {"county": "Baltimore County", "lat": 39.29, "lng": -76.61}


def test_detail_resolves_and_caches_missing_county(db, user, stub_geocoder):
    report = crud.create_report(db, user.id, 39.29, -76.61, county="")

    detail = report_service.get_report_detail(db, report.id, user.id, geocoder=stub_geocoder)
    assert detail["report"].county == "Baltimore County"

    report_service.get_report_detail(db, report.id, user.id, geocoder=stub_geocoder)
    stub_geocoder.resolve.assert_called_once()


def test_detail_hidden_from_other_users(db, user, other_user, stub_geocoder):
    report = report_service.create_report_workflow(db, user.id, 39.29, -76.61, geocoder=stub_geocoder)
    with pytest.raises(NotFound):
        report_service.get_report_detail(db, report.id, other_user.id)


# -------------------- HTTP --------------------

@pytest.fixture
def geocoded(stub_geocoder):
    with patch("services.report_service.get_geocoder", return_value=stub_geocoder):
        yield stub_geocoder


def test_report_api_lifecycle(client, auth, geocoded):
    _, headers = auth

    resp = client.post("/api/reports/", json={"lat": 39.29, "lng": -76.61}, headers=headers)
    assert resp.status_code == 201
    report_id = resp.json()["report_id"]
    assert resp.json()["report"]["county"] == "Baltimore County"

    resp = client.get(f"/api/reports/{report_id}", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["report"]["status"] == "pending"
    assert body["repair_form"]["fields"]["county"] == "Baltimore County"

    resp = client.patch(f"/api/reports/{report_id}/complete", headers=headers)
    assert resp.status_code == 200

    resp = client.get("/api/reports/?status=completed", headers=headers)
    assert [r["id"] for r in resp.json()["reports"]] == [report_id]

    resp = client.delete(f"/api/reports/{report_id}", headers=headers)
    assert resp.status_code == 200
    assert client.get(f"/api/reports/{report_id}", headers=headers).status_code == 404


def test_report_api_rejects_bad_coordinates(client, auth, geocoded):
    _, headers = auth
    resp = client.post("/api/reports/", json={"lat": "39.29", "lng": -76.61}, headers=headers)
    assert resp.status_code == 400


def test_reports_are_scoped_to_owner(client, auth, login, geocoded):
    _, headers = auth
    _, other_headers = login("other@example.com", name="Other")

    report_id = client.post("/api/reports/", json={"lat": 39.29, "lng": -76.61}, headers=headers).json()["report_id"]

    assert client.get("/api/reports/", headers=other_headers).json()["count"] == 0
    assert client.get(f"/api/reports/{report_id}", headers=other_headers).status_code == 404

    resp = client.patch(f"/api/reports/{report_id}/complete", headers=other_headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Failed to update report. Please try again."

    assert client.delete(f"/api/reports/{report_id}", headers=other_headers).status_code == 403
    assert client.get(f"/api/reports/{report_id}", headers=headers).json()["report"]["status"] == "pending"


def test_report_listing_newest_first(client, auth, geocoded):
    _, headers = auth
    ids = [
        client.post("/api/reports/", json={"lat": 39.0 + i / 10, "lng": -76.6}, headers=headers).json()["report_id"]
        for i in range(3)
    ]
    listed = [r["id"] for r in client.get("/api/reports/", headers=headers).json()["reports"]]
    assert listed == list(reversed(ids))


def test_report_listing_rejects_unknown_status(client, auth):
    _, headers = auth
    assert client.get("/api/reports/?status=open", headers=headers).status_code == 400
