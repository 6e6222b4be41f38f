from sqlalchemy import ForeignKey
from notehub.extensions import db


class Department(db.Model):
    __tablename__ = "departments"

    department_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), unique=True, nullable=False)

    courses = db.relationship("Course", back_populates="department", lazy="selectin")


class Course(db.Model):
    __tablename__ = "courses"

    course_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(200), nullable=False)
    department_id = db.Column(
        db.Integer, ForeignKey("departments.department_id", ondelete="CASCADE"), nullable=False, index=True
    )

    department = db.relationship("Department", back_populates="courses")


class Tag(db.Model):
    __tablename__ = "tags"

    tag_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
