from app_models import User, UserSession, Pothole, PotholeVote, Report
from app_utils.constants import REPORT_PENDING, REPORT_COMPLETED, UPVOTE
from datetime import datetime, timezone
from sqlalchemy import case, update
import secrets


def _now():
    return datetime.now(timezone.utc)


# ---------- User / Session ----------
def get_user_by_email(db, email):
    return db.query(User).filter(User.email == email).first()


def create_user(db, name, email, hashed_password):
    user = User(name=name, email=email, hashed_password=hashed_password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_session(db, user_id):
    session = UserSession(token=secrets.token_urlsafe(32), user_id=user_id)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_user_for_token(db, token):
    """Return the user owning a live session token, or None."""
    return (
        db.query(User)
        .join(UserSession, UserSession.user_id == User.id)
        .filter(
            UserSession.token == token,
            UserSession.revoked_at.is_(None)
        )
        .first()
    )


def revoke_session(db, token):
    rows = db.query(UserSession).filter(
        UserSession.token == token,
        UserSession.revoked_at.is_(None)
    ).update({UserSession.revoked_at: _now()}, synchronize_session=False)
    db.commit()
    return rows


# ---------- Pothole ----------
def get_pothole(db, pothole_id):
    return db.query(Pothole).filter(Pothole.id == pothole_id).first()


def list_potholes(db, limit=None):
    query = db.query(Pothole).order_by(Pothole.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def search_potholes(db, text, limit=None):
    query = (
        db.query(Pothole)
        .filter(Pothole.name.ilike(f"%{text}%"))
        .order_by(Pothole.created_at.desc())
    )
    if limit:
        query = query.limit(limit)
    return query.all()


def leaderboard(db, limit=None):
    """Potholes by upvote_count desc, newest first on ties."""
    query = db.query(Pothole).order_by(
        Pothole.upvote_count.desc(),
        Pothole.created_at.desc()
    )
    if limit:
        query = query.limit(limit)
    return query.all()


def create_pothole(db, name, latitude, longitude, user_id=None, upvote_count=0, created_at=None):
    pothole = Pothole(
        name=name,
        latitude=latitude,
        longitude=longitude,
        user_id=user_id,
        upvote_count=upvote_count,
        created_at=created_at or _now()
    )
    db.add(pothole)
    db.commit()
    db.refresh(pothole)
    return pothole


# ---------- Vote ----------
def add_vote(db, pothole_id, user_id, vote_type):
    """
    Stage a vote row and flush it so the unique constraint fires here.
    Caller owns the transaction.
    """
    vote = PotholeVote(pothole_id=pothole_id, user_id=user_id, vote_type=vote_type)
    db.add(vote)
    db.flush()
    return vote


def adjust_upvote_count(db, pothole_id, vote_type):
    """Atomic in-database counter change; downvotes floor at zero."""
    if vote_type == UPVOTE:
        new_count = Pothole.upvote_count + 1
    else:
        new_count = case(
            (Pothole.upvote_count > 0, Pothole.upvote_count - 1),
            else_=0
        )

    db.execute(
        update(Pothole)
        .where(Pothole.id == pothole_id)
        .values(upvote_count=new_count)
        .execution_options(synchronize_session=False)
    )


def count_votes(db, pothole_id, user_id=None, vote_type=None):
    query = db.query(PotholeVote).filter(PotholeVote.pothole_id == pothole_id)
    if user_id is not None:
        query = query.filter(PotholeVote.user_id == user_id)
    if vote_type is not None:
        query = query.filter(PotholeVote.vote_type == vote_type)
    return query.count()


# ---------- Report ----------
def create_report(db, user_id, lat, lng, county):
    now = _now()
    report = Report(
        user_id=user_id,
        lat=lat,
        lng=lng,
        county=county,
        status=REPORT_PENDING,
        created_at=now,
        updated_at=now
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def get_report(db, report_id, user_id):
    return db.query(Report).filter(
        Report.id == report_id,
        Report.user_id == user_id
    ).first()


def list_reports(db, user_id, status=None, skip=0, limit=50):
    query = db.query(Report).filter(Report.user_id == user_id)
    if status:
        query = query.filter(Report.status == status)
    return query.order_by(Report.created_at.desc()).offset(skip).limit(limit).all()


def set_report_county(db, report, county):
    report.county = county
    db.commit()
    db.refresh(report)
    return report


def complete_report(db, report_id, user_id):
    """Returns rows affected; 0 means missing or not owned."""
    rows = db.query(Report).filter(
        Report.id == report_id,
        Report.user_id == user_id
    ).update(
        {Report.status: REPORT_COMPLETED, Report.updated_at: _now()},
        synchronize_session=False
    )
    db.commit()
    return rows


def delete_report(db, report_id, user_id):
    rows = db.query(Report).filter(
        Report.id == report_id,
        Report.user_id == user_id
    ).delete(synchronize_session=False)
    db.commit()
    return rows
