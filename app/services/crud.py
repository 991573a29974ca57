"""Generic CRUD helpers for soft-deletable entities.

Validation always runs before any write. Store errors are not caught here;
they propagate to the request wrapper unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.core.errors import NotFoundError
from app.core.errors import ValidationError
from app.core.fields import FieldSpec
from app.core.request import ApiRequest
from app.core.validation import coerce_number
from app.core.validation import validate_id
from app.core.validation import validate_object
from app.core.validation import validate_single_array_element
from app.db.store import EntityStoreAdapter
from app.db.store import ne

Schema = Mapping[str, FieldSpec | Mapping[str, Any]]


def get_single(entity_id: int, store: EntityStoreAdapter) -> Any:
    """Fetch a non-deleted entity or raise not found."""
    entity = store.find_one(id=entity_id, isdeleted=ne(True))
    if entity is None:
        raise NotFoundError(f"{store.name} not found with id={entity_id}")
    return entity


def get_all(store: EntityStoreAdapter) -> list[Any]:
    """List all non-deleted entities."""
    return store.find_many(isdeleted=ne(True))


def _validated_path_id(request: ApiRequest) -> int:
    entity_id = coerce_number(request.params.get("id"))
    errors = validate_id(entity_id)
    if errors:
        raise ValidationError(errors)
    return int(entity_id)


def get_entity(request: ApiRequest, store: EntityStoreAdapter) -> Any:
    """Fetch the entity addressed by ``request.params["id"]``."""
    return get_single(_validated_path_id(request), store)


def remove_entity(request: ApiRequest, store: EntityStoreAdapter) -> dict[str, Any]:
    """Soft-delete the entity addressed by ``request.params["id"]``.

    Removing an already removed entity returns the same response without
    writing again.
    """
    entity_id = _validated_path_id(request)
    response = {"isdeleted": True, "id": entity_id}
    if store.exists(id=entity_id, isdeleted=True):
        return response
    entity = get_single(entity_id, store)
    store.save(entity, {"isdeleted": True})
    return response


def _validated_input(request: ApiRequest, wrap_key: str, schema: Schema) -> dict[str, Any]:
    """Unwrap ``request.body[wrap_key][0]`` and validate it against ``schema``."""
    error = validate_single_array_element(request.body, wrap_key)
    if error is not None:
        raise ValidationError([error])
    values = request.body[wrap_key][0]
    errors = validate_object(schema, values)
    if errors:
        raise ValidationError(errors)
    return values


def create_entity(
    request: ApiRequest,
    wrap_key: str,
    store: EntityStoreAdapter,
    schema: Schema,
) -> tuple[Any, int]:
    """Create an entity from ``request.body[wrap_key][0]``; returns it with status 201."""
    values = _validated_input(request, wrap_key, schema)
    values["isdeleted"] = False
    return store.create(values), 201


def update_entity(
    request: ApiRequest,
    wrap_key: str,
    store: EntityStoreAdapter,
    schema: Schema,
) -> Any:
    """Update the entity whose ``id`` is given in ``request.body[wrap_key][0]``."""
    values = _validated_input(request, wrap_key, schema)
    entity = get_single(values["id"], store)
    return store.save(entity, values)
