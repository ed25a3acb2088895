# wither

Model declarations, read/write concern specifications and index
synchronization for MongoDB, built on top of `pymongo`.

The package is made of five modules:

- `wither.meta` – the `model` decorator that declares a model class.
- `wither.common` – `IndexModel`, an index definition.
- `wither.concerns` – read and write concern specifications.
- `wither.indexes` – reading, diffing and synchronizing collection indexes.
- `wither.errors` – the error classes.

## Declaring a model

`model` works as `@model` or `@model(...)`. It turns the class into a
dataclass (unless it already is one), checks it, and attaches the class
attributes `COLLECTION_NAME`, `INDEXES`, `READ_CONCERN`, `WRITE_CONCERN` and
`SELECTION_CRITERIA`.

```python
import dataclasses

from bson import ObjectId

from wither.common import IndexModel
from wither.meta import ID_FIELD_METADATA, model


@model(
    collection_name="users",
    indexes=[
        IndexModel({"email": 1}, {"unique": True}),
        {"keys": {"created": -1}},
    ],
    read_concern="majority",
    write_concern={"w": "majority", "w_timeout": 10, "journal": True},
)
class User:
    id: ObjectId | None = dataclasses.field(default=None, metadata=ID_FIELD_METADATA)
    email: str = ""


User.COLLECTION_NAME   # "users"
User.INDEXES           # (IndexModel(keys={'email': 1}, options={'unique': True}),
                       #  IndexModel(keys={'created': -1}, options=None))
User.WRITE_CONCERN     # pymongo WriteConcern(w="majority", wtimeout=10000, j=True)
```

Rules enforced by `model` (breaking one raises `ModelDefinitionError`):

- The class must have an `id` field. Its field metadata must be
  `{"rename": "_id", "skip_serializing_if": "is_none"}` (`ID_FIELD_METADATA`),
  unless `skip_serde_checks=True` is passed.
- `collection_name`, when given, must be a non-empty string. Without it the
  name comes from `default_collection_name`, which snake-cases the class
  name and pluralizes its last word: `BlogPost` becomes `blog_posts`.
  `table_case` and `pluralize` are available on their own as well.
- `indexes` is a sequence of `IndexModel` instances or mappings with a
  `keys` document and an optional `options` document.
- `selection_criteria`, when given, must be a callable; it is stored as a
  static method in `SELECTION_CRITERIA`.
- Any other keyword is rejected as an unrecognized model attribute.

## Read and write concerns

`wither.concerns.read_concern_from_spec` accepts `None`, a pymongo
`ReadConcern`, one of the level names in `ReadConcernLevel` (`"local"`,
`"majority"`, `"linearizable"`, `"available"`), or `{"custom": "<level>"}`.

`write_concern_from_spec` accepts `None`, a pymongo `WriteConcern`, a
`WriteConcernSpec`, or a mapping with the keys `w`, `w_timeout` and
`journal`:

- `w` is `"majority"`, `{"nodes": 3}`, `{"custom": "tag"}` or an
  `Acknowledgment`; node counts must fit in a signed 32-bit integer.
- `w_timeout` is a whole number of seconds; it is passed to pymongo in
  milliseconds.
- `journal` is a boolean.

```python
from wither.concerns import WriteConcernSpec, read_concern_from_spec, write_concern_from_spec

read_concern_from_spec({"custom": "custom-concern"})
write_concern_from_spec({"w": {"nodes": 3}, "w_timeout": 0, "journal": False})
WriteConcernSpec(w={"custom": "custom"}).to_write_concern()
```

A malformed specification raises `ConcernSpecError` (a `ValueError`).

## Synchronizing indexes

```python
from pymongo import MongoClient

from wither.indexes import fetch_current_indexes, sync_model_indexes

db = MongoClient("mongodb://localhost:27017/")["mydb"]
coll = db[User.COLLECTION_NAME]

current = fetch_current_indexes(db, coll)
sync_model_indexes(db, coll, User.INDEXES, current)
```

- Index names are generated from the keys with
  `generate_index_name_from_keys`: `{"i": -1}` is named `i_-1`,
  `{"a": 1, "b": -1}` is named `a_1_b_-1`; values that are not 32-bit
  integers count as `0`.
- `fetch_current_indexes` runs `listIndexes` and returns a dict from
  generated name to `IndexModel`, leaving out the default `_id_` index. A
  collection that does not exist yet has no indexes. `build_index_map` does
  the same from a `listIndexes` reply you already have.
- `sync_model_indexes` drops every current index the model does not declare,
  drops and recreates every declared index whose options differ, and creates
  the missing ones in a single `createIndexes` command. Each declared index
  gets a `name` option set to its generated name unless it names itself.

Driver errors raised during these commands are wrapped in `MongoError`.

## Errors

All errors in `wither.errors` derive from `WitherError`. `MongoError` and
`BsonError` wrap a lower-level exception, available as `cause`. The others
carry fixed messages: `ModelIdRequiredForOperation`, `ModelSerToDocument`
(which records the offending `element_type`),
`ServerFailedToReturnUpdatedDoc`, `ServerFailedToReturnObjectId` and
`MigrationSetOrUnsetRequired`.

## What this package does not do

There is no model base class with document operations: no `find`, `save`,
`update` or `delete` on model instances, no conversion between instances and
documents, and no cursor that yields model instances. There is also no
migration runner. Use the pymongo collection directly, with the
`COLLECTION_NAME`, `READ_CONCERN`, `WRITE_CONCERN` and `SELECTION_CRITERIA`
attributes that `model` attaches, for reading and writing documents.