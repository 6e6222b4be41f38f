from marshmallow import Schema, fields, validate
from notehub.common.schemas import QuerySchema
from notehub.common.utils import id_range


class NoteFilterArgs(QuerySchema):
    department_id = fields.Integer(strict=False, validate=id_range)
    course_id = fields.Integer(strict=False, validate=id_range)
    tag_id = fields.Integer(strict=False, validate=id_range)
    tag = fields.String(validate=validate.Length(max=64))
    sort_by = fields.String(validate=validate.OneOf(["date", "rating"]))


class NoteUploadIn(QuerySchema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(load_default=None)
    course_id = fields.Integer(required=True, validate=id_range)
    tag_id = fields.Integer(load_default=None, validate=id_range)


class DescriptionIn(Schema):
    description = fields.String(required=True, allow_none=True)


class NoteSummaryOut(Schema):
    note_id = fields.Integer(required=True)
    title = fields.String(required=True)
    description = fields.String(allow_none=True)
    course_name = fields.String(allow_none=True)
    tags = fields.String(allow_none=True)
    avg_rating = fields.Float(allow_none=True)
    created_at = fields.DateTime()


class NoteDetailOut(NoteSummaryOut):
    file_urls = fields.String(allow_none=True)


class UploadOut(Schema):
    message = fields.String()
    note_id = fields.Integer()
    file_url = fields.String()
