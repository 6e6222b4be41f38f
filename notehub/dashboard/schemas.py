from marshmallow import Schema, fields


class CourseFileCount(Schema):
    course_name = fields.String()
    file_count = fields.Integer()


class DepartmentFileCount(Schema):
    department_name = fields.String()
    file_count = fields.Integer()


class StatsOut(Schema):
    total_notes = fields.Integer(required=True)
    total_files = fields.Integer(required=True)
    files_per_course = fields.List(fields.Nested(CourseFileCount))
    files_per_department = fields.List(fields.Nested(DepartmentFileCount))


class DeletedNoteOut(Schema):
    note_id = fields.Integer(required=True)
    title = fields.String(required=True)
    deleted_at = fields.DateTime(required=True)


class DeletedReviewOut(Schema):
    review_id = fields.Integer(required=True)
    content = fields.String(required=True)
    rating = fields.Integer(required=True)
    note_id = fields.Integer(required=True)
    note_title = fields.String(allow_none=True)
    deleted_at = fields.DateTime(required=True)
