"""
Database Migration Script
Enforces one vote per (pothole_id, user_id, vote_type) on databases created
before the constraint existed:
- backs the counter effect of duplicate votes out of upvote_count
- removes duplicate pothole_votes rows (keeps one per triple)
- clamps null/negative upvote_count values to 0
- creates the unique index uq_pothole_vote
"""
from sqlalchemy import text
import sys


# Extra rows per (pothole, vote_type) beyond the one that is kept
DUPLICATE_EXCESS = """
    SELECT pothole_id, vote_type, SUM(n - 1) AS extra
    FROM (
        SELECT pothole_id, vote_type, COUNT(*) AS n
        FROM pothole_votes
        GROUP BY pothole_id, user_id, vote_type
        HAVING COUNT(*) > 1
    ) AS dupes
    GROUP BY pothole_id, vote_type
"""

ADJUST_COUNT = """
    UPDATE potholes SET upvote_count = upvote_count + :delta
    WHERE id = :pothole_id AND upvote_count IS NOT NULL
"""

DEDUPE_VOTES = """
    DELETE FROM pothole_votes
    WHERE id NOT IN (
        SELECT keep_id FROM (
            SELECT MIN(id) AS keep_id
            FROM pothole_votes
            GROUP BY pothole_id, user_id, vote_type
        ) AS keepers
    )
"""

CLAMP_COUNTS = "UPDATE potholes SET upvote_count = 0 WHERE upvote_count IS NULL OR upvote_count < 0"

CREATE_UNIQUE_INDEX = """
    CREATE UNIQUE INDEX IF NOT EXISTS uq_pothole_vote
    ON pothole_votes (pothole_id, user_id, vote_type)
"""


def _count_corrections(rows):
    """{pothole_id: delta} undoing what the duplicate votes did to upvote_count."""
    deltas = {}
    for pothole_id, vote_type, extra in rows:
        sign = -1 if vote_type == "upvote" else 1
        deltas[pothole_id] = deltas.get(pothole_id, 0) + sign * int(extra)
    return deltas


def migrate(bind=None):
    """Run migration; returns the number of duplicate votes removed."""
    if bind is None:
        from database import engine as bind

    print("Starting migration: unique vote constraint on pothole_votes...")

    with bind.begin() as conn:
        deltas = _count_corrections(conn.execute(text(DUPLICATE_EXCESS)).fetchall())
        for pothole_id, delta in deltas.items():
            if delta:
                conn.execute(text(ADJUST_COUNT), {"delta": delta, "pothole_id": pothole_id})
        print(f"[OK] Recomputed upvote_count for {len(deltas)} pothole(s)")

        removed = conn.execute(text(DEDUPE_VOTES)).rowcount
        print(f"[OK] Removed {removed} duplicate vote(s)")

        clamped = conn.execute(text(CLAMP_COUNTS)).rowcount
        print(f"[OK] Clamped {clamped} null/negative upvote count(s)")

        conn.execute(text(CREATE_UNIQUE_INDEX))
        print("[OK] Unique index uq_pothole_vote created")

    print("\n[SUCCESS] Migration completed successfully!")
    return removed


if __name__ == "__main__":
    try:
        migrate()
    except Exception as e:
        print(f"\n[ERROR] Migration failed: {e}")
        sys.exit(1)
