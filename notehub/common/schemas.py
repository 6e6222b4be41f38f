from marshmallow import Schema, EXCLUDE, pre_load


class QuerySchema(Schema):
    """Base des entrées query-string / formulaire : une valeur vide vaut absence."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def _drop_empty(self, data, **kwargs):
        items = data.items() if hasattr(data, "items") else []
        return {
            k: (v.strip() if isinstance(v, str) else v)
            for k, v in items
            if not (v is None or (isinstance(v, str) and not v.strip()))
        }


def stripped(data, *names):
    # copie du payload avec les champs texte nommés sans espaces de bord
    if not isinstance(data, dict):
        return data
    return {k: (v.strip() if k in names and isinstance(v, str) else v) for k, v in data.items()}
