from fastapi import APIRouter, Depends, HTTPException, Query, Body
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from app_models import User
from app_utils.constants import REPORT_STATUSES
from app_utils.errors import InvalidInput, Forbidden, NotFound
from routers.auth import get_current_user
from schemas import ReportResponse, ReportDetailResponse
from services import report_service
import crud
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])

# Ownership failures are reported the same way as any other failed write
WRITE_FAILED = "Failed to update report. Please try again."


# ==================================================
# FILE A REPORT FROM A MAP POINT
# ==================================================
@router.post("/", status_code=201)
def create_report(
    payload: dict = Body(..., examples=[{"lat": 39.29, "lng": -76.61}]),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a pending report for a coordinate. The county is resolved
    once here; if the geocoder is down it is stored as "Unknown".
    """
    try:
        report = report_service.create_report_workflow(
            db, current_user.id, payload.get("lat"), payload.get("lng")
        )
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "status": "success",
        "report_id": report.id,
        "report": ReportResponse.model_validate(report).model_dump()
    }


# ==================================================
# DASHBOARD LISTING
# ==================================================
@router.get("/")
def get_reports(
    status: Optional[str] = Query(None, description="Filter by status (pending, completed)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    The current user's reports, newest first
    """
    if status and status not in REPORT_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of: {', '.join(REPORT_STATUSES)}")

    reports = crud.list_reports(db, current_user.id, status=status, skip=skip, limit=limit)
    return {
        "status": "success",
        "count": len(reports),
        "reports": [ReportResponse.model_validate(r).model_dump() for r in reports]
    }


@router.get("/{report_id}", response_model=ReportDetailResponse)
def get_report(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        detail = report_service.get_report_detail(db, report_id, current_user.id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    detail["report"] = ReportResponse.model_validate(detail["report"])
    return detail


# ==================================================
# COMPLETE / DELETE
# ==================================================
@router.patch("/{report_id}/complete")
def complete_report(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        report_service.complete_report(db, report_id, current_user.id)
    except Forbidden as e:
        logger.warning(str(e))
        raise HTTPException(status_code=403, detail=WRITE_FAILED)

    return {"status": "success", "message": "Report marked as completed"}


@router.delete("/{report_id}")
def delete_report(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        report_service.delete_report(db, report_id, current_user.id)
    except Forbidden as e:
        logger.warning(str(e))
        raise HTTPException(status_code=403, detail=WRITE_FAILED)

    return {"status": "success", "message": f"Report {report_id} deleted"}
