from flask import Blueprint, request, jsonify, current_app

from notehub.extensions import limiter
from notehub.common.errors import NotFound
from notehub.common.softdelete import soft_delete
from notehub.notes.models import Note, Trash
from notehub.notes.schemas import (
    NoteFilterArgs, NoteUploadIn, DescriptionIn, NoteSummaryOut, NoteDetailOut, UploadOut
)
from notehub.notes import listing, service
from notehub.storage import get_storage

bp = Blueprint("notes", __name__)

filter_args = NoteFilterArgs()
upload_in = NoteUploadIn()
description_in = DescriptionIn()
note_out_many = NoteSummaryOut(many=True)
note_detail_out = NoteDetailOut()
upload_out = UploadOut()


@bp.get("/notes")
def list_notes():
    args = filter_args.load(request.args)
    rows = listing.list_notes(**args)
    return jsonify(note_out_many.dump(rows)), 200


@bp.get("/notes/<id:note_id>")
def get_note(note_id):
    note = listing.get_note_detail(note_id)
    if note is None:
        raise NotFound("Note not found.", {"note_id": note_id})
    return jsonify(note_detail_out.dump(note)), 200


@bp.put("/notes/<id:note_id>/description")
def update_description(note_id):
    payload = request.get_json(silent=True) or {}
    data = description_in.load(payload)
    note = service.update_description(note_id, data["description"])
    return jsonify({"status": "success", "note_id": note.note_id, "description": note.description}), 200


@bp.delete("/notes/<id:note_id>")
def delete_note(note_id):
    changed = soft_delete(Note, Trash, note_id)
    return jsonify({"status": "success", "changed": changed}), 200


@bp.post("/upload")
@limiter.limit(lambda: current_app.config.get("RATELIMIT_UPLOAD", "20/hour"))
def upload():
    file = service.ensure_file(request.files.get("file"))
    data = upload_in.load(request.form)
    result = service.create_note_from_upload(
        file,
        data,
        get_storage(),
        tmp_dir=current_app.config["UPLOAD_TMP_DIR"],
        folder=current_app.config.get("STORAGE_FOLDER", "notes"),
    )
    return jsonify(upload_out.dump(result)), 201
