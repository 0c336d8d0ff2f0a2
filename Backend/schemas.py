from pydantic import BaseModel, EmailStr
from typing import List, Optional
from datetime import datetime


# User Schemas
class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    status: str
    token: str
    user: UserResponse

class MessageResponse(BaseModel):
    status: str
    message: str


# Pothole Schemas
class PotholeResponse(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    upvote_count: int
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LeaderboardEntry(PotholeResponse):
    rank: int

class VoteCreate(BaseModel):
    vote_type: str            # upvote | downvote

class VoteResponse(BaseModel):
    id: str
    pothole_id: str
    user_id: int
    vote_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Report Schemas
class ReportResponse(BaseModel):
    id: str
    user_id: int
    lat: float
    lng: float
    county: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RepairFormFields(BaseModel):
    county: str
    lat: float
    lng: float

class RepairForm(BaseModel):
    url: str
    fields: RepairFormFields

class ReportDetailResponse(BaseModel):
    status: str
    report: ReportResponse
    repair_form: RepairForm


# Geocode Schemas
class GeocodeResponse(BaseModel):
    county: str
    state: str
