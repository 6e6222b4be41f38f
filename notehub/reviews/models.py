from sqlalchemy import func, false, ForeignKey, CheckConstraint
from notehub.extensions import db
from notehub.common.softdelete import TrashLogMixin


class Review(db.Model):
    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),)

    review_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    note_id = db.Column(db.Integer, ForeignKey("notes.note_id", ondelete="CASCADE"), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    is_deleted = db.Column(db.Boolean, nullable=False, default=False, server_default=false(), index=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)

    note = db.relationship("Note")


class ReviewTrash(TrashLogMixin, db.Model):
    __tablename__ = "review_trash"
    entity_key = "review_id"

    review_id = db.Column(db.Integer, ForeignKey("reviews.review_id", ondelete="CASCADE"), primary_key=True)
