"""
Load potholes from a JSON file into the potholes table.

Usage: python -m scripts.seed_potholes potholes.json

File format: a list of {"name", "latitude", "longitude"} objects,
optionally with "upvote_count".
"""
import json
import sys
from pathlib import Path


def load_potholes(path):
    records = json.loads(Path(path).read_text())
    if not isinstance(records, list):
        raise ValueError("Seed file must contain a JSON list")
    return records


def seed(db, records):
    import crud
    from app_utils.geo import validate_coordinates

    created = []
    for record in records:
        lat, lng = validate_coordinates(record.get("latitude"), record.get("longitude"))
        created.append(crud.create_pothole(
            db,
            name=record.get("name") or f"Pothole at {lat:.4f}, {lng:.4f}",
            latitude=lat,
            longitude=lng,
            upvote_count=max(0, int(record.get("upvote_count") or 0))
        ))
    return created


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    from database import SessionLocal, engine, Base
    import app_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed(db, load_potholes(sys.argv[1]))
        print(f"[SUCCESS] Seeded {len(created)} pothole(s)")
    finally:
        db.close()
