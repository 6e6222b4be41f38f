from sqlalchemy import func, false, ForeignKey
from notehub.extensions import db
from notehub.common.softdelete import TrashLogMixin


class Note(db.Model):
    __tablename__ = "notes"

    note_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    course_id = db.Column(db.Integer, ForeignKey("courses.course_id"), nullable=False, index=True)
    course = db.relationship("Course")

    is_deleted = db.Column(db.Boolean, nullable=False, default=False, server_default=false(), index=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    files = db.relationship("File", back_populates="note", lazy="selectin")


class File(db.Model):
    __tablename__ = "files"

    file_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    note_id = db.Column(db.Integer, ForeignKey("notes.note_id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = db.Column(db.String(255), nullable=False)
    file_url = db.Column(db.String(1024), nullable=False)
    uploaded_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)

    note = db.relationship("Note", back_populates="files")


class NoteTag(db.Model):
    __tablename__ = "note_tags"

    note_id = db.Column(db.Integer, ForeignKey("notes.note_id", ondelete="CASCADE"), primary_key=True)
    tag_id = db.Column(db.Integer, ForeignKey("tags.tag_id", ondelete="CASCADE"), primary_key=True)


class Trash(TrashLogMixin, db.Model):
    """Une ligne par note actuellement dans la corbeille."""
    __tablename__ = "trash"
    entity_key = "note_id"

    note_id = db.Column(db.Integer, ForeignKey("notes.note_id", ondelete="CASCADE"), primary_key=True)
