from flask import Blueprint, jsonify

from notehub.common.softdelete import restore
from notehub.dashboard import service
from notehub.dashboard.schemas import StatsOut, DeletedNoteOut, DeletedReviewOut
from notehub.notes.models import Note, Trash
from notehub.reviews.models import Review, ReviewTrash

bp = Blueprint("dashboard", __name__)

stats_out = StatsOut()
deleted_note_out_many = DeletedNoteOut(many=True)
deleted_review_out_many = DeletedReviewOut(many=True)


@bp.get("/stats")
def stats():
    return jsonify(stats_out.dump(service.collect_stats())), 200


@bp.get("/deleted-notes")
def deleted_notes():
    return jsonify(deleted_note_out_many.dump(service.deleted_notes())), 200


@bp.get("/deleted-reviews")
def deleted_reviews():
    return jsonify(deleted_review_out_many.dump(service.deleted_reviews())), 200


@bp.post("/restore-note/<id:note_id>")
def restore_note(note_id):
    changed = restore(Note, Trash, note_id)
    return jsonify({"status": "success", "changed": changed}), 200


@bp.post("/restore-review/<id:review_id>")
def restore_review(review_id):
    changed = restore(Review, ReviewTrash, review_id)
    return jsonify({"status": "success", "changed": changed}), 200
