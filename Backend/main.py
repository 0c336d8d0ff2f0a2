from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from routers.auth import router as auth_router
from routers.potholes import router as potholes_router
from routers.reports import router as reports_router
from routers.geocode import router as geocode_router

from app_utils.constants import CORS_ORIGINS
from database import engine, Base
import app_models  # noqa: F401  registers tables on Base
import logging
import os

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pothole Tracker API",
    description="Community pothole map: votes, leaderboard and repair-request reports",
    version="1.0.0"
)

# -------------------------------------
# Startup - Create Database Tables
# -------------------------------------
@app.on_event("startup")
async def startup_event():
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        logger.warning("Application will continue, but DB operations may fail")


# -------------------------------------
# Unexpected store errors
# -------------------------------------
@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Something went wrong, please try again."}
    )


# -------------------------------------
# CORS SETTINGS
# -------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------
# ROUTERS
# -------------------------------------
app.include_router(auth_router)
app.include_router(potholes_router)
app.include_router(reports_router)
app.include_router(geocode_router)


# -------------------------------------
# Root Endpoint
# -------------------------------------
@app.get("/")
async def root():
    return {
        "message": "Pothole Tracker API",
        "endpoints": {
            "auth": "/api/auth",
            "potholes": "/api/potholes",
            "leaderboard": "/api/potholes/leaderboard",
            "map": "/api/potholes/map",
            "reports": "/api/reports",
            "geocode": "/api/geocode",
        }
    }

#--------------Health Check Endpoint----------------
@app.get("/health")
async def health_check():
    return {"status": "ok"}
