from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from app_models import User
from app_utils.constants import LEADERBOARD_LIMIT
from app_utils.errors import InvalidInput, DuplicateVote, NotFound
from app_utils.map_view import MapView
from routers.auth import get_current_user
from schemas import PotholeResponse, LeaderboardEntry, VoteCreate, VoteResponse
from services.vote_service import cast_vote
import crud

router = APIRouter(prefix="/api/potholes", tags=["Potholes"])


def _pothole_data(pothole):
    return PotholeResponse.model_validate(pothole).model_dump()


# ==================================================
# LIST POTHOLES
# ==================================================
@router.get("/")
def get_potholes(
    limit: Optional[int] = Query(None, ge=1, description="Max potholes to return (sidebar uses 5)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    All potholes, newest first
    """
    potholes = crud.list_potholes(db, limit=limit)
    return {
        "status": "success",
        "count": len(potholes),
        "potholes": [_pothole_data(p) for p in potholes]
    }


@router.get("/search")
def search_potholes(
    q: str = Query(..., min_length=1, description="Text to match against pothole names"),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    potholes = crud.search_potholes(db, q.strip(), limit=limit)
    return {
        "status": "success",
        "count": len(potholes),
        "potholes": [_pothole_data(p) for p in potholes]
    }


# ==================================================
# LEADERBOARD
# ==================================================
@router.get("/leaderboard")
def get_leaderboard(
    limit: int = Query(LEADERBOARD_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Top potholes by community upvotes; ties go to the newest
    """
    potholes = crud.leaderboard(db, limit=limit)
    entries = [
        LeaderboardEntry(rank=index + 1, **_pothole_data(p)).model_dump()
        for index, p in enumerate(potholes)
    ]
    return {
        "status": "success",
        "count": len(entries),
        "leaderboard": entries
    }


# ==================================================
# MAP PAYLOAD
# ==================================================
@router.get("/map")
def get_map(
    focus: Optional[str] = Query(None, description="Pothole ID to centre the map on"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    map_view = MapView()
    try:
        for pothole in crud.list_potholes(db):
            map_view.add_pothole(pothole)
        if focus and map_view.focus_on(focus) is None:
            raise HTTPException(status_code=404, detail="Pothole not found")
        return {"status": "success", "map": map_view.to_dict()}
    finally:
        map_view.destroy()


@router.get("/{pothole_id}")
def get_pothole(
    pothole_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    pothole = crud.get_pothole(db, pothole_id)
    if not pothole:
        raise HTTPException(status_code=404, detail="Pothole not found")
    return {"status": "success", "pothole": _pothole_data(pothole)}


# ==================================================
# VOTE
# ==================================================
@router.post("/{pothole_id}/votes")
def vote_on_pothole(
    pothole_id: str,
    payload: VoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Upvote or downvote a pothole. Each user gets one of each.
    """
    try:
        result = cast_vote(db, pothole_id, current_user.id, payload.vote_type)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateVote as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {
        "status": "success",
        "message": f"{payload.vote_type.capitalize()}d pothole!",
        "vote": VoteResponse.model_validate(result["vote"]).model_dump(),
        "upvote_count": result["upvote_count"]
    }
