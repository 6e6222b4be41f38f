"""Listing filtré des notes et détail d'une note.

Tags, URLs de fichiers et note moyenne sont agrégés dans des sous-requêtes
par note puis joints à ``notes`` : plusieurs tags ou fichiers ne comptent
jamais un avis plusieurs fois. Toutes les valeurs du client sont des
paramètres liés.
"""
from sqlalchemy import select, func, case, exists, false

from notehub.extensions import db
from notehub.catalog.models import Course, Tag
from notehub.notes.models import Note, File, NoteTag
from notehub.reviews.models import Review

SORT_ORDERS = ("date", "rating")


def _tags_subquery():
    return (
        select(NoteTag.note_id, func.aggregate_strings(Tag.name, ",").label("tags"))
        .join(Tag, Tag.tag_id == NoteTag.tag_id)
        .group_by(NoteTag.note_id)
        .subquery("note_tag_names")
    )


def _ratings_subquery():
    return (
        select(Review.note_id, func.avg(Review.rating).label("avg_rating"))
        .where(Review.is_deleted == false())
        .group_by(Review.note_id)
        .subquery("note_ratings")
    )


def _files_subquery():
    # une URL enregistrée deux fois n'apparaît qu'une fois
    urls = select(File.note_id, File.file_url).distinct().subquery("distinct_file_urls")
    return (
        select(urls.c.note_id, func.aggregate_strings(urls.c.file_url, ",").label("file_urls"))
        .group_by(urls.c.note_id)
        .subquery("note_file_urls")
    )


def _base_query(with_files=False):
    tags = _tags_subquery()
    ratings = _ratings_subquery()

    columns = [
        Note.note_id,
        Note.title,
        Note.description,
        Note.created_at,
        Course.name.label("course_name"),
        tags.c.tags,
        ratings.c.avg_rating,
    ]
    stmt = (
        select(*columns)
        .outerjoin(Course, Course.course_id == Note.course_id)
        .outerjoin(tags, tags.c.note_id == Note.note_id)
        .outerjoin(ratings, ratings.c.note_id == Note.note_id)
        .where(Note.is_deleted == false())
    )
    if with_files:
        files = _files_subquery()
        stmt = stmt.add_columns(files.c.file_urls).outerjoin(files, files.c.note_id == Note.note_id)
    return stmt, ratings


def build_notes_query(department_id=None, course_id=None, tag_id=None, tag=None, sort_by=None):
    stmt, ratings = _base_query()

    if department_id is not None:
        stmt = stmt.where(Course.department_id == department_id)
    if course_id is not None:
        stmt = stmt.where(Note.course_id == course_id)
    if tag_id is not None:
        stmt = stmt.where(
            exists().where(NoteTag.note_id == Note.note_id, NoteTag.tag_id == tag_id)
        )
    if tag is not None:
        stmt = stmt.where(
            exists()
            .where(NoteTag.note_id == Note.note_id)
            .where(NoteTag.tag_id == Tag.tag_id)
            .where(Tag.name == tag)
        )

    if sort_by == "date":
        stmt = stmt.order_by(Note.created_at.desc(), Note.note_id.desc())
    elif sort_by == "rating":
        # notes sans avis en dernier, égalités par note_id croissant
        unrated_last = case((ratings.c.avg_rating.is_(None), 1), else_=0)
        stmt = stmt.order_by(unrated_last, ratings.c.avg_rating.desc(), Note.note_id.asc())
    else:
        stmt = stmt.order_by(Note.note_id.asc())
    return stmt


def list_notes(department_id=None, course_id=None, tag_id=None, tag=None, sort_by=None) -> list:
    if sort_by is not None and sort_by not in SORT_ORDERS:
        raise ValueError(f"sort_by must be one of {SORT_ORDERS}")
    stmt = build_notes_query(department_id, course_id, tag_id, tag, sort_by)
    return [dict(row) for row in db.session.execute(stmt).mappings()]


def get_note_detail(note_id):
    """Note active avec cours, tags, URLs de fichiers et note moyenne, ou None."""
    stmt, _ = _base_query(with_files=True)
    row = db.session.execute(stmt.where(Note.note_id == note_id)).mappings().first()
    return dict(row) if row is not None else None


def is_live_note(note_id) -> bool:
    stmt = select(Note.note_id).where(Note.note_id == note_id, Note.is_deleted == false())
    return db.session.execute(stmt).first() is not None
