# tests/test_notes.py
import io


def _upload(client, **fields):
    data = {"title": "Lecture 1", "course_id": "5"}
    data.update(fields)
    data.setdefault("file", (io.BytesIO(b"%PDF-1.4 notes"), "lecture 1.pdf"))
    return client.post("/upload", data=data, content_type="multipart/form-data")


def test_upload_then_detail(client, catalog, storage):
    r = _upload(client)
    assert r.status_code == 201
    body = r.get_json()
    note_id = body["note_id"]
    assert body["file_url"].startswith("https://files.example.test/notes/")

    r = client.get(f"/notes/{note_id}")
    assert r.status_code == 200
    note = r.get_json()
    assert note["title"] == "Lecture 1"
    assert note["course_name"] == "Algorithms"
    assert note["tags"] is None
    assert note["avg_rating"] is None
    assert note["file_urls"] == body["file_url"]
    assert list(storage.blobs.values()) == [b"%PDF-1.4 notes"]


def test_upload_with_tag_and_description(client, catalog):
    r = _upload(client, tag_id="2", description="week one")
    assert r.status_code == 201
    note = client.get(f"/notes/{r.get_json()['note_id']}").get_json()
    assert note["tags"] == "lecture"
    assert note["description"] == "week one"

    assert [n["note_id"] for n in client.get("/notes?tag_id=2").get_json()] == [note["note_id"]]


def test_detail_lists_all_file_urls(client, make_note):
    note_id = make_note("Multi", files=2)
    note = client.get(f"/notes/{note_id}").get_json()
    assert sorted(note["file_urls"].split(",")) == [
        f"https://files.example.test/{note_id}/0.pdf",
        f"https://files.example.test/{note_id}/1.pdf",
    ]


def test_detail_unknown_or_trashed_is_404(client, make_note):
    r = client.get("/notes/999")
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "not_found"

    note_id = make_note("Gone")
    assert client.delete(f"/notes/{note_id}").status_code == 200
    assert client.get(f"/notes/{note_id}").status_code == 404


def test_update_description(client, make_note):
    note_id = make_note("Edit me", description="before")
    r = client.put(f"/notes/{note_id}/description", json={"description": "after"})
    assert r.status_code == 200
    assert client.get(f"/notes/{note_id}").get_json()["description"] == "after"

    r = client.put(f"/notes/{note_id}/description", json={})
    assert r.status_code == 400

    r = client.put("/notes/999/description", json={"description": "x"})
    assert r.status_code == 404


def test_detail_file_urls_are_distinct(client, make_note):
    from notehub.extensions import db
    from notehub.notes.models import File

    note_id = make_note("Dup", files=1)
    url = f"https://files.example.test/{note_id}/0.pdf"
    db.session.add(File(note_id=note_id, file_name="copy.pdf", file_url=url))
    db.session.commit()

    note = client.get(f"/notes/{note_id}").get_json()
    assert note["file_urls"] == url
