import logging

from sqlalchemy.exc import IntegrityError

from app_utils.constants import VOTE_TYPES
from app_utils.errors import InvalidInput, DuplicateVote, NotFound
from crud import get_pothole, add_vote, adjust_upvote_count

logger = logging.getLogger(__name__)


def cast_vote(db, pothole_id, user_id, vote_type):
    """
    Record one vote per (pothole, user, vote_type) and adjust the pothole's
    upvote_count in the same transaction.

    The unique constraint on pothole_votes is the duplicate check, so two
    concurrent identical requests cannot both land.
    """
    if vote_type not in VOTE_TYPES:
        raise InvalidInput(f"vote_type must be one of: {', '.join(VOTE_TYPES)}")

    pothole = get_pothole(db, pothole_id)
    if not pothole:
        raise NotFound("Pothole not found")

    try:
        vote = add_vote(db, pothole_id, user_id, vote_type)
        adjust_upvote_count(db, pothole_id, vote_type)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Duplicate {vote_type} rejected: pothole={pothole_id} user={user_id}")
        raise DuplicateVote(vote_type)

    db.refresh(vote)
    db.refresh(pothole)

    return {
        "status": "success",
        "vote": vote,
        "upvote_count": pothole.upvote_count
    }
