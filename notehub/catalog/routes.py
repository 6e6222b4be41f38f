from flask import Blueprint, request, jsonify
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from notehub.extensions import db
from notehub.catalog.models import Department, Course, Tag
from notehub.catalog.schemas import (
    DepartmentOut, CourseArgs, CourseIn, CourseOut, TagIn, TagOut
)
from notehub.common.errors import ApiError

bp = Blueprint("catalog", __name__)

department_out_many = DepartmentOut(many=True)
course_args = CourseArgs()
course_in = CourseIn()
course_out = CourseOut()
course_out_many = CourseOut(many=True)
tag_in = TagIn()
tag_out = TagOut()
tag_out_many = TagOut(many=True)


def _commit_or_conflict(message, details):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ApiError(message, 409, "conflict", details=details)


@bp.get("/departments")
def list_departments():
    rows = db.session.execute(select(Department).order_by(Department.department_id)).scalars().all()
    return jsonify(department_out_many.dump(rows)), 200


@bp.get("/courses")
def list_courses():
    args = course_args.load(request.args)
    stmt = select(Course).order_by(Course.course_id)
    if "department_id" in args:
        stmt = stmt.where(Course.department_id == args["department_id"])
    rows = db.session.execute(stmt).scalars().all()
    return jsonify(course_out_many.dump(rows)), 200


@bp.post("/courses")
def create_course():
    payload = request.get_json(silent=True) or {}
    data = course_in.load(payload)

    if db.session.get(Department, data["department_id"]) is None:
        raise ApiError("Unknown department.", 400, "validation_error",
                       details={"department_id": ["Unknown department."]})

    course = Course(name=data["name"], department_id=data["department_id"])
    if data.get("course_id") is not None:
        if db.session.get(Course, data["course_id"]) is not None:
            raise ApiError("Course already exists.", 409, "conflict", details={"course_id": data["course_id"]})
        course.course_id = data["course_id"]
    db.session.add(course)
    _commit_or_conflict("Course already exists.", {"course_id": data.get("course_id")})
    return jsonify(course_out.dump(course)), 201


@bp.get("/tags")
def list_tags():
    rows = db.session.execute(select(Tag).order_by(Tag.tag_id)).scalars().all()
    return jsonify(tag_out_many.dump(rows)), 200


@bp.post("/tags")
def create_tag():
    payload = request.get_json(silent=True) or {}
    data = tag_in.load(payload)
    tag = Tag(name=data["name"])
    db.session.add(tag)
    _commit_or_conflict("Tag already exists.", {"name": tag.name})
    return jsonify(tag_out.dump(tag)), 201
