"""Agrégats en lecture seule pour le tableau de bord développeur."""
from sqlalchemy import select, func, false, true

from notehub.extensions import db
from notehub.catalog.models import Course, Department
from notehub.notes.models import Note, File, Trash
from notehub.reviews.models import Review, ReviewTrash


def collect_stats() -> dict:
    live = Note.is_deleted == false()

    total_notes = db.session.scalar(select(func.count(Note.note_id)).where(live))
    total_files = db.session.scalar(
        select(func.count(File.file_id)).join(Note, Note.note_id == File.note_id).where(live)
    )

    per_course = db.session.execute(
        select(Course.name.label("course_name"), func.count(File.file_id).label("file_count"))
        .select_from(File)
        .join(Note, Note.note_id == File.note_id)
        .join(Course, Course.course_id == Note.course_id)
        .where(live)
        .group_by(Course.course_id, Course.name)
        .order_by(Course.name)
    ).mappings().all()

    per_department = db.session.execute(
        select(Department.name.label("department_name"), func.count(File.file_id).label("file_count"))
        .select_from(File)
        .join(Note, Note.note_id == File.note_id)
        .join(Course, Course.course_id == Note.course_id)
        .join(Department, Department.department_id == Course.department_id)
        .where(live)
        .group_by(Department.department_id, Department.name)
        .order_by(Department.name)
    ).mappings().all()

    return {
        "total_notes": total_notes or 0,
        "total_files": total_files or 0,
        "files_per_course": [dict(r) for r in per_course],
        "files_per_department": [dict(r) for r in per_department],
    }


def deleted_notes() -> list:
    stmt = (
        select(Note.note_id, Note.title, Trash.deleted_at)
        .join(Trash, Trash.note_id == Note.note_id)
        .where(Note.is_deleted == true())
        .order_by(Trash.deleted_at.desc(), Note.note_id.desc())
    )
    return [dict(r) for r in db.session.execute(stmt).mappings()]


def deleted_reviews() -> list:
    stmt = (
        select(
            Review.review_id,
            Review.content,
            Review.rating,
            Review.note_id,
            Note.title.label("note_title"),
            ReviewTrash.deleted_at,
        )
        .join(ReviewTrash, ReviewTrash.review_id == Review.review_id)
        .join(Note, Note.note_id == Review.note_id)
        .where(Review.is_deleted == true())
        .order_by(ReviewTrash.deleted_at.desc(), Review.review_id.desc())
    )
    return [dict(r) for r in db.session.execute(stmt).mappings()]
