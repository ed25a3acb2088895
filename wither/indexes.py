"""Reading, diffing and synchronizing the indexes of a collection."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pymongo.errors import OperationFailure, PyMongoError

from .common import IndexModel
from .errors import MongoError

logger = logging.getLogger(__name__)

MONGO_ID_INDEX_NAME = "_id_"
MONGO_DIFF_INDEX_BLACKLIST = frozenset({"v", "ns", "key"})
_NAMESPACE_NOT_FOUND = 26
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _as_i32(value: Any) -> int | None:
    if type(value) is int and _I32_MIN <= value <= _I32_MAX:
        return value
    return None


def generate_index_name_from_keys(keys: Mapping[str, Any]) -> str:
    """Generate an index name from its keys, as the index management spec does.

    Values that are not 32-bit integers count as ``0``.
    """
    parts = []
    for key, value in keys.items():
        order = _as_i32(value)
        parts.append(f"{key}_{0 if order is None else order}")
    return "_".join(parts)


def build_index_map(list_index: Mapping[str, Any]) -> dict[str, IndexModel]:
    """Map generated index names to index models from a ``listIndexes`` reply.

    The default ``_id_`` index and entries without a name or keys are left out.
    """
    cursor = list_index.get("cursor")
    if not isinstance(cursor, Mapping):
        return {}
    first_batch = cursor.get("firstBatch")
    if not isinstance(first_batch, list):
        return {}

    index_map: dict[str, IndexModel] = {}
    for entry in first_batch:
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or name == MONGO_ID_INDEX_NAME:
            continue
        keys = entry.get("key")
        if not isinstance(keys, Mapping):
            continue
        options = {
            key: value
            for key, value in entry.items()
            if key not in MONGO_DIFF_INDEX_BLACKLIST
        }
        index_map[generate_index_name_from_keys(keys)] = IndexModel(dict(keys), options)
    return index_map


def fetch_current_indexes(db: Any, coll: Any) -> dict[str, IndexModel]:
    """Fetch the indexes currently on ``coll``; a missing collection has none."""
    try:
        reply = db.command({"listIndexes": coll.name})
    except OperationFailure as exc:
        if exc.code == _NAMESPACE_NOT_FOUND:
            return {}
        raise MongoError(exc) from exc
    except PyMongoError as exc:
        raise MongoError(exc) from exc
    return build_index_map(reply)


def _aspired_indexes(model_indexes: Iterable[IndexModel]) -> dict[str, IndexModel]:
    aspired: dict[str, IndexModel] = {}
    for index in model_indexes:
        name = generate_index_name_from_keys(index.keys)
        options = dict(index.options) if index.options is not None else {}
        if not isinstance(options.get("name"), str):
            options["name"] = name
        aspired[name] = IndexModel(dict(index.keys), options)
    return aspired


def _run(db: Any, command: Mapping[str, Any]) -> None:
    try:
        db.command(command)
    except PyMongoError as exc:
        raise MongoError(exc) from exc


def sync_model_indexes(
    db: Any,
    coll: Any,
    model_indexes: Iterable[IndexModel],
    current_indexes: Mapping[str, IndexModel],
) -> None:
    """Make the indexes of ``coll`` match ``model_indexes``.

    Indexes not declared are dropped; declared indexes whose options differ
    from the current ones are dropped and created again.
    """
    logger.info("Synchronizing indexes for '%s'.", coll.full_name)

    aspired = _aspired_indexes(model_indexes)
    to_drop = [name for name in current_indexes if name not in aspired]
    to_create: list[IndexModel] = []
    for name, index in aspired.items():
        current = current_indexes.get(name)
        if current is None:
            to_create.append(index)
        elif index.options != current.options:
            to_drop.append(name)
            to_create.append(index)

    for name in to_drop:
        _run(db, {"dropIndexes": coll.name, "index": name})

    if to_create:
        _run(
            db,
            {
                "createIndexes": coll.name,
                "indexes": [index.to_command_document() for index in to_create],
            },
        )

    logger.info("Synchronized indexes for '%s'.", coll.full_name)