from flask import Blueprint, request, jsonify, current_app

from notehub.extensions import limiter
from notehub.common.softdelete import soft_delete
from notehub.reviews.models import Review, ReviewTrash
from notehub.reviews.schemas import ReviewIn, ReviewOut
from notehub.reviews import service

bp = Blueprint("reviews", __name__)

review_in = ReviewIn()
review_out = ReviewOut()
review_out_many = ReviewOut(many=True)


@bp.get("/notes/<id:note_id>/reviews")
def list_reviews(note_id):
    reviews = service.list_reviews(note_id)
    return jsonify(review_out_many.dump(reviews)), 200


@bp.post("/notes/<id:note_id>/reviews")
@limiter.limit(lambda: current_app.config.get("RATELIMIT_REVIEWS", "30/minute"))
def create_review(note_id):
    payload = request.get_json(silent=True) or {}
    data = review_in.load(payload)
    review = service.add_review(note_id, data["content"], data["rating"])
    return jsonify(review_out.dump(review)), 201


@bp.put("/reviews/<id:review_id>")
def update_review(review_id):
    payload = request.get_json(silent=True) or {}
    data = review_in.load(payload)
    review = service.update_review(review_id, data["content"], data["rating"])
    return jsonify(review_out.dump(review)), 200


@bp.delete("/reviews/<id:review_id>")
def delete_review(review_id):
    changed = soft_delete(Review, ReviewTrash, review_id)
    return jsonify({"status": "success", "changed": changed}), 200
