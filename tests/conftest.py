# tests/conftest.py
import os, sys
from datetime import datetime, timedelta
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("APP_ENV", "test")

from notehub import create_app
from notehub.extensions import db
from notehub.storage import StoredBlob


class FakeStorage:
    """Blob storage en mémoire; ``fail_times`` erreurs transitoires avant succès."""

    transient_errors = (ConnectionError,)

    def __init__(self, fail_times=0, error=None):
        self.fail_times = fail_times
        self.error = error
        self.calls = 0
        self.blobs = {}
        self.deleted = []

    def upload(self, path, key, content_type=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.fail_times > 0:
            self.fail_times -= 1
            raise ConnectionError("storage temporarily unavailable")
        with open(path, "rb") as fh:
            self.blobs[key] = fh.read()
        return StoredBlob(key=key, url=f"https://files.example.test/{key}")

    def delete(self, blob):
        self.deleted.append(blob.key)
        self.blobs.pop(blob.key, None)


@pytest.fixture()
def app(tmp_path):
    app = create_app()
    app.config.update(
        TESTING=True,
        UPLOAD_TMP_DIR=str(tmp_path / "uploads"),
    )
    app.extensions["blob_storage"] = FakeStorage()
    with app.app_context():
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(app):
    return app.extensions["blob_storage"]


@pytest.fixture()
def catalog(app):
    from notehub.catalog.models import Department, Course, Tag

    db.session.add_all([
        Department(department_id=1, name="Computer Science"),
        Department(department_id=2, name="Mathematics"),
    ])
    db.session.add_all([
        Course(course_id=5, name="Algorithms", department_id=1),
        Course(course_id=6, name="Databases", department_id=1),
        Course(course_id=7, name="Calculus", department_id=2),
    ])
    db.session.add_all([Tag(tag_id=1, name="exam"), Tag(tag_id=2, name="lecture")])
    db.session.commit()
    return {"departments": [1, 2], "courses": [5, 6, 7], "tags": [1, 2]}


@pytest.fixture()
def make_note(catalog):
    from notehub.notes.models import Note, File, NoteTag

    base = datetime(2024, 1, 1, 12, 0, 0)

    def _make(title, course_id=5, tag_ids=(), days=0, description=None, files=1):
        note = Note(
            title=title,
            description=description,
            course_id=course_id,
            created_at=base + timedelta(days=days),
        )
        db.session.add(note)
        db.session.flush()
        for i in range(files):
            db.session.add(File(
                note_id=note.note_id,
                file_name=f"{title}-{i}.pdf",
                file_url=f"https://files.example.test/{note.note_id}/{i}.pdf",
            ))
        for tag_id in tag_ids:
            db.session.add(NoteTag(note_id=note.note_id, tag_id=tag_id))
        db.session.commit()
        return note.note_id

    return _make


@pytest.fixture()
def make_review():
    from notehub.reviews.models import Review

    def _make(note_id, rating, content="ok", is_deleted=False):
        review = Review(note_id=note_id, rating=rating, content=content, is_deleted=is_deleted)
        db.session.add(review)
        db.session.commit()
        return review.review_id

    return _make
