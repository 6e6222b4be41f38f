from marshmallow import Schema, fields, validate, pre_load
from notehub.common.schemas import stripped


class ReviewIn(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1))
    # entier strict: "5" ou 4.5 sont refusés
    rating = fields.Integer(required=True, strict=True, validate=validate.Range(min=1, max=5))

    @pre_load
    def _strip(self, data, **kwargs):
        return stripped(data, "content")


class ReviewOut(Schema):
    review_id = fields.Integer(required=True)
    note_id = fields.Integer(required=True)
    content = fields.String(required=True)
    rating = fields.Integer(required=True)
    created_at = fields.DateTime(required=True)
