# tests/test_dashboard.py
from datetime import datetime

from notehub.extensions import db
from notehub.notes.models import Trash
from notehub.reviews.models import ReviewTrash


def test_stats_count_live_notes_and_their_files(client, make_note):
    make_note("A", course_id=5, files=2)
    make_note("B", course_id=6, files=1)
    make_note("C", course_id=7, files=1)
    gone = make_note("D", course_id=7, files=3)
    client.delete(f"/notes/{gone}")

    r = client.get("/stats")
    assert r.status_code == 200
    stats = r.get_json()
    assert stats["total_notes"] == 3
    assert stats["total_files"] == 4
    assert stats["files_per_course"] == [
        {"course_name": "Algorithms", "file_count": 2},
        {"course_name": "Calculus", "file_count": 1},
        {"course_name": "Databases", "file_count": 1},
    ]
    assert stats["files_per_department"] == [
        {"department_name": "Computer Science", "file_count": 3},
        {"department_name": "Mathematics", "file_count": 1},
    ]


def test_stats_empty(client, catalog):
    stats = client.get("/stats").get_json()
    assert stats == {"total_notes": 0, "total_files": 0, "files_per_course": [], "files_per_department": []}


def test_deleted_notes_newest_deleted_first(client, make_note):
    first = make_note("First")
    second = make_note("Second")
    make_note("Alive")
    client.delete(f"/notes/{first}")
    client.delete(f"/notes/{second}")
    db.session.get(Trash, first).deleted_at = datetime(2024, 3, 1)
    db.session.get(Trash, second).deleted_at = datetime(2024, 3, 2)
    db.session.commit()

    deleted = client.get("/deleted-notes").get_json()
    assert [(d["note_id"], d["title"]) for d in deleted] == [(second, "Second"), (first, "First")]


def test_deleted_reviews_carry_note_title(client, make_note, make_review):
    note_id = make_note("Parent note")
    keep = make_review(note_id, 5, "keep")
    drop = make_review(note_id, 1, "drop")
    client.delete(f"/reviews/{drop}")

    deleted = client.get("/deleted-reviews").get_json()
    assert len(deleted) == 1
    row = deleted[0]
    assert row["review_id"] == drop
    assert row["content"] == "drop"
    assert row["note_title"] == "Parent note"
    assert row["deleted_at"]
    assert db.session.get(ReviewTrash, keep) is None

    client.post(f"/restore-review/{drop}")
    assert client.get("/deleted-reviews").get_json() == []
