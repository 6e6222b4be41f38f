from marshmallow import validate
from werkzeug.routing import IntegerConverter

# plus grand id accepté (colonnes INTEGER signées 32 bits)
MAX_ID = 2**31 - 1

id_range = validate.Range(min=1, max=MAX_ID)


class IdConverter(IntegerConverter):
    """``<id:...>``: entier borné, un id hors plage ne matche aucune route (404)."""

    def __init__(self, map, min=1, max=MAX_ID):
        super().__init__(map, min=min, max=max)
