import os
from dotenv import load_dotenv

load_dotenv()

# ---------------- Geocoding ----------------
GEOCODER_PROVIDER = os.getenv("GEOCODER_PROVIDER", "google").lower()

# Older front-end builds only exported the Vite-prefixed name
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY") or os.getenv("VITE_GOOGLE_MAPS_API_KEY")
GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

CENSUS_GEOCODE_URL = "https://geocoding.geo.census.gov/geographies/coordinates"
CENSUS_BENCHMARK = os.getenv("CENSUS_BENCHMARK", "Public_AR_Current")
CENSUS_VINTAGE = os.getenv("CENSUS_VINTAGE", "Current_Current")

GEOCODE_TIMEOUT_SECONDS = float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "5"))

UNKNOWN = "Unknown"

# ---------------- Reports ----------------
REPORT_PENDING = "pending"
REPORT_COMPLETED = "completed"
REPORT_STATUSES = (REPORT_PENDING, REPORT_COMPLETED)

# MDOT SHA customer service request form, embedded by the client
REPAIR_FORM_URL = os.getenv("REPAIR_FORM_URL", "https://mdotsha.my.salesforce-sites.com/customercare")

# ---------------- Votes ----------------
UPVOTE = "upvote"
DOWNVOTE = "downvote"
VOTE_TYPES = (UPVOTE, DOWNVOTE)

# ---------------- Map ----------------
DEFAULT_LAT = 39.0458   # Maryland
DEFAULT_LON = -76.6413
FOCUS_SPAN = 0.01
MARKER_COLOR = "#ff6b6b"

# ---------------- Listings ----------------
RECENT_POTHOLES_LIMIT = 5
LEADERBOARD_LIMIT = 10

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
