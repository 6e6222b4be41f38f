import logging

from sqlalchemy import select, false

from notehub.extensions import db
from notehub.common.errors import NotFound
from notehub.notes.listing import is_live_note
from notehub.reviews.models import Review

log = logging.getLogger(__name__)


def _require_live_note(note_id):
    if not is_live_note(note_id):
        raise NotFound("Note not found.", {"note_id": note_id})


def list_reviews(note_id) -> list:
    _require_live_note(note_id)
    stmt = (
        select(Review)
        .where(Review.note_id == note_id, Review.is_deleted == false())
        .order_by(Review.created_at.desc(), Review.review_id.desc())
    )
    return db.session.execute(stmt).scalars().all()


def add_review(note_id, content: str, rating: int) -> Review:
    _require_live_note(note_id)
    review = Review(note_id=note_id, content=content, rating=rating)
    db.session.add(review)
    db.session.commit()
    log.info("review_added", extra={"note_id": note_id, "review_id": review.review_id})
    return review


def update_review(review_id, content: str, rating: int) -> Review:
    review = db.session.execute(
        select(Review).where(Review.review_id == review_id, Review.is_deleted == false())
    ).scalar_one_or_none()
    if review is None:
        raise NotFound("Review not found.", {"review_id": review_id})
    review.content = content
    review.rating = rating
    db.session.commit()
    return review
