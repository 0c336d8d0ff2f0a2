from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from database import Base
import uuid


def _new_id():
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True)
    token = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)  # NULL while the session is live


class Pothole(Base):
    __tablename__ = "potholes"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    latitude = Column(Float, nullable=False, index=True)
    longitude = Column(Float, nullable=False, index=True)
    upvote_count = Column(Integer, nullable=False, default=0, server_default="0")
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # reporter, if known
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class PotholeVote(Base):
    __tablename__ = "pothole_votes"
    __table_args__ = (
        # One row per (pothole, user, vote_type); an upvote and a downvote may coexist
        UniqueConstraint("pothole_id", "user_id", "vote_type", name="uq_pothole_vote"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    pothole_id = Column(String(36), ForeignKey("potholes.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vote_type = Column(String, nullable=False)  # upvote, downvote
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Report(Base):
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    county = Column(String, nullable=True)

    status = Column(String, nullable=False, default="pending")  # pending, completed
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
