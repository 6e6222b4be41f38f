from marshmallow import Schema, fields, validate, pre_load
from notehub.common.schemas import QuerySchema, stripped
from notehub.common.utils import id_range


class DepartmentOut(Schema):
    department_id = fields.Integer(required=True)
    name = fields.String(required=True)


class CourseArgs(QuerySchema):
    department_id = fields.Integer(validate=id_range)


class CourseIn(Schema):
    course_id = fields.Integer(load_default=None, validate=id_range)
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    department_id = fields.Integer(required=True, validate=id_range)

    @pre_load
    def _strip(self, data, **kwargs):
        return stripped(data, "name")


class CourseOut(Schema):
    course_id = fields.Integer(required=True)
    name = fields.String(required=True)
    department_id = fields.Integer(required=True)


class TagIn(Schema):
    # "   " devient "" et échoue sur Length(min=1)
    name = fields.String(required=True, validate=validate.Length(min=1, max=64))

    @pre_load
    def _strip(self, data, **kwargs):
        return stripped(data, "name")


class TagOut(Schema):
    tag_id = fields.Integer(required=True)
    name = fields.String(required=True)
