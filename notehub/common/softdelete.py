"""Corbeille et restauration, communes aux notes et aux avis.

Une entité est ACTIVE (``is_deleted`` faux, pas de ligne corbeille) ou
TRASHED (``is_deleted`` vrai, ligne corbeille présente). Chaque transition
change le drapeau et écrit ou supprime la ligne corbeille dans la même
transaction. Depuis le mauvais état, la transition ne fait rien.
"""
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from notehub.common.errors import ApiError, NotFound
from notehub.extensions import db

log = logging.getLogger(__name__)


class TrashLogMixin:
    """Table corbeille indexée par l'id de l'entité enregistrée.

    Les sous-classes renseignent ``entity_key`` avec le nom de leur colonne
    de clé primaire.
    """

    entity_key = None

    deleted_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), nullable=False)

    @classmethod
    def entry(cls, entity_id):
        return db.session.get(cls, entity_id)

    @classmethod
    def record(cls, entity_id):
        # merge: tolère une ligne orpheline laissée par un état incohérent
        return db.session.merge(cls(**{cls.entity_key: entity_id}))

    @classmethod
    def discard(cls, entity_id):
        row = cls.entry(entity_id)
        if row is not None:
            db.session.delete(row)


def _load_locked(model, entity_id):
    # FOR UPDATE sérialise les delete/restore concurrents (ignoré par SQLite)
    entity = db.session.get(model, entity_id, with_for_update=True)
    if entity is None:
        db.session.rollback()
        raise NotFound(f"{model.__name__} not found.", {"id": entity_id})
    return entity


def _transition(model, trash_model, entity_id, to_deleted: bool) -> bool:
    entity = _load_locked(model, entity_id)
    if bool(entity.is_deleted) == to_deleted:
        db.session.rollback()  # libère le verrou
        return False

    try:
        entity.is_deleted = to_deleted
        if to_deleted:
            trash_model.record(entity_id)
        else:
            trash_model.discard(entity_id)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        log.exception(
            "soft_delete_transaction_failed",
            extra={"entity": model.__name__, "entity_id": entity_id, "to_deleted": to_deleted},
        )
        action = "delete" if to_deleted else "restore"
        raise ApiError(f"Failed to {action} {model.__name__.lower()}.", 500, "transaction_failed")

    log.info(
        "soft_deleted" if to_deleted else "restored",
        extra={"entity": model.__name__, "entity_id": entity_id},
    )
    return True


def soft_delete(model, trash_model, entity_id) -> bool:
    """ACTIVE -> TRASHED. Retourne False si l'entité était déjà à la corbeille."""
    return _transition(model, trash_model, entity_id, to_deleted=True)


def restore(model, trash_model, entity_id) -> bool:
    """TRASHED -> ACTIVE. Retourne False si l'entité était déjà active."""
    return _transition(model, trash_model, entity_id, to_deleted=False)
