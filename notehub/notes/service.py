import logging
import os
import tempfile
from contextlib import contextmanager

from sqlalchemy import select, false
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.utils import secure_filename

from notehub.extensions import db
from notehub.catalog.models import Course, Tag
from notehub.common.errors import ApiError, NotFound
from notehub.notes.models import Note, File, NoteTag
from notehub.storage import make_key, store_file, discard_blob

log = logging.getLogger(__name__)


@contextmanager
def spooled_upload(file_storage, tmp_dir):
    """Copie l'upload dans un fichier temporaire, supprimé quelle que soit la sortie."""
    os.makedirs(tmp_dir, exist_ok=True)
    suffix = os.path.splitext(secure_filename(file_storage.filename or ""))[1]
    fd, path = tempfile.mkstemp(dir=tmp_dir, suffix=suffix)
    os.close(fd)
    try:
        file_storage.save(path)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            log.warning("temp_file_cleanup_failed", extra={"tmp_path": path}, exc_info=True)


def _check_references(course_id, tag_id):
    details = {}
    if db.session.get(Course, course_id) is None:
        details["course_id"] = ["Unknown course."]
    if tag_id is not None and db.session.get(Tag, tag_id) is None:
        details["tag_id"] = ["Unknown tag."]
    if details:
        raise ApiError("Invalid note metadata.", 400, "validation_error", details)


def _insert_note_rows(data, original_name, file_url) -> Note:
    note = Note(
        title=data["title"],
        description=data.get("description"),
        course_id=data["course_id"],
    )
    db.session.add(note)
    db.session.flush()  # note_id généré

    db.session.add(File(note_id=note.note_id, file_name=original_name, file_url=file_url))
    if data.get("tag_id") is not None:
        db.session.add(NoteTag(note_id=note.note_id, tag_id=data["tag_id"]))
    db.session.commit()
    return note


def ensure_file(file_storage):
    if file_storage is None or not (file_storage.filename or "").strip():
        raise ApiError("No file uploaded.", 400, "validation_error", {"file": ["Missing file."]})
    return file_storage


def create_note_from_upload(file_storage, data, storage, tmp_dir, folder="notes") -> dict:
    """Stocke le fichier puis écrit note, fichier et tag en une transaction.

    Si la phase base de données échoue, le blob stocké est supprimé.
    """
    ensure_file(file_storage)
    _check_references(data["course_id"], data.get("tag_id"))

    original_name = file_storage.filename
    key = make_key(original_name, folder)
    with spooled_upload(file_storage, tmp_dir) as path:
        blob = store_file(storage, path, key, file_storage.mimetype)

        try:
            note = _insert_note_rows(data, original_name, blob.url)
        except SQLAlchemyError:
            db.session.rollback()
            log.exception("note_insert_failed", extra={"key": blob.key})
            discard_blob(storage, blob)
            raise ApiError("Failed to save note.", 500, "database_error")

    log.info("note_uploaded", extra={"note_id": note.note_id, "key": blob.key})
    return {"message": "File uploaded and note saved.", "note_id": note.note_id, "file_url": blob.url}


def update_description(note_id, description) -> Note:
    note = db.session.execute(
        select(Note).where(Note.note_id == note_id, Note.is_deleted == false())
    ).scalar_one_or_none()
    if note is None:
        raise NotFound("Note not found.", {"note_id": note_id})
    note.description = description
    db.session.commit()
    return note
