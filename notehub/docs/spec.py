# notehub/docs/spec.py
from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from marshmallow import Schema, fields

from notehub.catalog.schemas import DepartmentOut, CourseIn, CourseOut, TagIn, TagOut
from notehub.dashboard.schemas import StatsOut, DeletedNoteOut, DeletedReviewOut
from notehub.notes.schemas import DescriptionIn, NoteSummaryOut, NoteDetailOut, UploadOut
from notehub.reviews.schemas import ReviewIn, ReviewOut
from notehub.common.utils import MAX_ID


class TransitionOut(Schema):
    status = fields.String()
    changed = fields.Boolean()


class ErrorOut(Schema):
    error = fields.Dict()


def _ref(name: str):
    return {"$ref": f"#/components/schemas/{name}"}


def _json(name: str, many: bool = False):
    schema = {"type": "array", "items": _ref(name)} if many else _ref(name)
    return {"content": {"application/json": {"schema": schema}}}


def _ok(name: str, many: bool = False, code: str = "200", description: str = "OK"):
    return {code: {"description": description, **_json(name, many)}}


def _path_id(name: str):
    return {"in": "path", "name": name, "required": True, "schema": {"type": "integer", "minimum": 1, "maximum": MAX_ID}}


def _query(name: str, type_: str = "integer", **extra):
    return {"in": "query", "name": name, "schema": {"type": type_, **extra}}


NOT_FOUND = {"404": {"description": "Not found", **_json("Error")}}
INVALID = {"400": {"description": "Validation error", **_json("Error")}}


def build_spec():
    spec = APISpec(
        title="NoteHub API",
        version="1.0.0",
        openapi_version="3.0.3",
        info={"description": "Course notes sharing service, OpenAPI document"},
        plugins=[MarshmallowPlugin()],
    )

    # Composants
    for name, schema in (
        ("Department", DepartmentOut),
        ("CourseIn", CourseIn),
        ("Course", CourseOut),
        ("TagIn", TagIn),
        ("Tag", TagOut),
        ("NoteSummary", NoteSummaryOut),
        ("NoteDetail", NoteDetailOut),
        ("DescriptionIn", DescriptionIn),
        ("Upload", UploadOut),
        ("ReviewIn", ReviewIn),
        ("Review", ReviewOut),
        ("Stats", StatsOut),
        ("DeletedNote", DeletedNoteOut),
        ("DeletedReview", DeletedReviewOut),
        ("Transition", TransitionOut),
        ("Error", ErrorOut),
    ):
        spec.components.schema(name, schema=schema)

    # ---- CATALOG ----
    spec.path(path="/departments", operations={
        "get": {"summary": "List departments", "responses": _ok("Department", many=True)},
    })
    spec.path(path="/courses", operations={
        "get": {
            "summary": "List courses",
            "parameters": [_query("department_id")],
            "responses": _ok("Course", many=True),
        },
        "post": {
            "summary": "Create course",
            "requestBody": {"required": True, **_json("CourseIn")},
            "responses": {**_ok("Course", code="201", description="Created"), **INVALID,
                          "409": {"description": "Already exists"}},
        },
    })
    spec.path(path="/tags", operations={
        "get": {"summary": "List tags", "responses": _ok("Tag", many=True)},
        "post": {
            "summary": "Create tag",
            "requestBody": {"required": True, **_json("TagIn")},
            "responses": {**_ok("Tag", code="201", description="Created"), **INVALID,
                          "409": {"description": "Already exists"}},
        },
    })

    # ---- NOTES ----
    spec.path(path="/notes", operations={
        "get": {
            "summary": "List live notes (filtered, sorted)",
            "parameters": [
                _query("department_id"),
                _query("course_id"),
                _query("tag_id"),
                _query("tag", "string"),
                _query("sort_by", "string", enum=["date", "rating"]),
            ],
            "responses": {**_ok("NoteSummary", many=True), **INVALID},
        },
    })
    spec.path(path="/notes/{note_id}", operations={
        "get": {
            "summary": "Get note detail",
            "parameters": [_path_id("note_id")],
            "responses": {**_ok("NoteDetail"), **NOT_FOUND},
        },
        "delete": {
            "summary": "Move note to trash",
            "parameters": [_path_id("note_id")],
            "responses": {**_ok("Transition"), **NOT_FOUND},
        },
    })
    spec.path(path="/notes/{note_id}/description", operations={
        "put": {
            "summary": "Update note description",
            "parameters": [_path_id("note_id")],
            "requestBody": {"required": True, **_json("DescriptionIn")},
            "responses": {"200": {"description": "Updated"}, **NOT_FOUND},
        },
    })
    spec.path(path="/upload", operations={
        "post": {
            "summary": "Upload a note file with metadata",
            "requestBody": {
                "required": True,
                "content": {"multipart/form-data": {"schema": {
                    "type": "object",
                    "required": ["file", "title", "course_id"],
                    "properties": {
                        "file": {"type": "string", "format": "binary"},
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "course_id": {"type": "integer"},
                        "tag_id": {"type": "integer"},
                    },
                }}},
            },
            "responses": {**_ok("Upload", code="201", description="Created"), **INVALID,
                          "502": {"description": "Storage unavailable"}},
        },
    })

    # ---- REVIEWS ----
    spec.path(path="/notes/{note_id}/reviews", operations={
        "get": {
            "summary": "List live reviews, newest first",
            "parameters": [_path_id("note_id")],
            "responses": {**_ok("Review", many=True), **NOT_FOUND},
        },
        "post": {
            "summary": "Add review",
            "parameters": [_path_id("note_id")],
            "requestBody": {"required": True, **_json("ReviewIn")},
            "responses": {**_ok("Review", code="201", description="Created"), **INVALID, **NOT_FOUND},
        },
    })
    spec.path(path="/reviews/{review_id}", operations={
        "put": {
            "summary": "Update review",
            "parameters": [_path_id("review_id")],
            "requestBody": {"required": True, **_json("ReviewIn")},
            "responses": {**_ok("Review"), **INVALID, **NOT_FOUND},
        },
        "delete": {
            "summary": "Move review to trash",
            "parameters": [_path_id("review_id")],
            "responses": {**_ok("Transition"), **NOT_FOUND},
        },
    })

    # ---- DASHBOARD ----
    spec.path(path="/stats", operations={"get": {"summary": "Aggregate stats", "responses": _ok("Stats")}})
    spec.path(path="/deleted-notes", operations={
        "get": {"summary": "Trashed notes", "responses": _ok("DeletedNote", many=True)},
    })
    spec.path(path="/deleted-reviews", operations={
        "get": {"summary": "Trashed reviews", "responses": _ok("DeletedReview", many=True)},
    })
    spec.path(path="/restore-note/{note_id}", operations={
        "post": {
            "summary": "Restore note from trash",
            "parameters": [_path_id("note_id")],
            "responses": {**_ok("Transition"), **NOT_FOUND},
        },
    })
    spec.path(path="/restore-review/{review_id}", operations={
        "post": {
            "summary": "Restore review from trash",
            "parameters": [_path_id("review_id")],
            "responses": {**_ok("Transition"), **NOT_FOUND},
        },
    })

    return spec.to_dict()
