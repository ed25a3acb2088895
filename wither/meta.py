"""Declaring model classes: collection name, indexes, concerns and the ID field."""

from __future__ import annotations

import dataclasses
import enum
import re
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .common import IndexModel
from .concerns import ConcernSpecError, read_concern_from_spec, write_concern_from_spec

ID_FIELD_NAME = "id"
ID_FIELD_METADATA: Mapping[str, str] = MappingProxyType(
    {"rename": "_id", "skip_serializing_if": "is_none"}
)
_INDEX_SPEC_KEYS = frozenset({"keys", "options"})


class ModelDefinitionError(ValueError):
    """A model class or its model configuration is malformed."""


_UNCOUNTABLE = frozenset(
    {"equipment", "information", "rice", "money", "species", "series", "fish", "sheep", "jeans", "police"}
)
_IRREGULAR = {
    "person": "people",
    "man": "men",
    "child": "children",
    "sex": "sexes",
    "move": "moves",
    "zombie": "zombies",
}
_IRREGULAR_PLURALS = frozenset(_IRREGULAR.values())
_PLURAL_RULES = [
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"(quiz)$", r"\1zes"),
        (r"^(oxen)$", r"\1"),
        (r"^(ox)$", r"\1en"),
        (r"^(m|l)ice$", r"\1ice"),
        (r"^(m|l)ouse$", r"\1ice"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(hive)$", r"\1s"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"sis$", "ses"),
        (r"([ti])a$", r"\1a"),
        (r"([ti])um$", r"\1a"),
        (r"(buffal|tomat)o$", r"\1oes"),
        (r"(bu)s$", r"\1ses"),
        (r"(alias|status)$", r"\1es"),
        (r"(octop|vir)i$", r"\1i"),
        (r"(octop|vir)us$", r"\1i"),
        (r"^(ax|test)is$", r"\1es"),
        (r"s$", "s"),
        (r"$", "s"),
    )
]


def pluralize(word: str) -> str:
    """Return the English plural of ``word``."""
    if not word:
        return word
    lowered = word.lower()
    if lowered in _UNCOUNTABLE or lowered in _IRREGULAR_PLURALS:
        return word
    if lowered in _IRREGULAR:
        plural = _IRREGULAR[lowered]
        return plural[0].upper() + plural[1:] if word[0].isupper() else plural
    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word, count=1)
    return word


def _snake_case(name: str) -> str:
    text = re.sub(r"[\s\-]+", "_", name.strip())
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", text)
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    return re.sub(r"_+", "_", text).lower()


def table_case(name: str) -> str:
    """Snake-case ``name`` and pluralize its last word."""
    head, sep, last = _snake_case(name).rpartition("_")
    return f"{head}{sep}{pluralize(last)}"


def default_collection_name(class_name: str) -> str:
    """The collection name used for a model class that does not name one."""
    return pluralize(table_case(class_name))


def _check_collection_name(collection_name: Any, class_name: str) -> str:
    if collection_name is None:
        return default_collection_name(class_name)
    if not isinstance(collection_name, str):
        raise ModelDefinitionError("the collection name must be a string")
    if not collection_name:
        raise ModelDefinitionError(
            "wither model collection names must be at least one character in length"
        )
    return collection_name


def _index_from_spec(spec: Any) -> IndexModel:
    if isinstance(spec, IndexModel):
        keys, options = spec.keys, spec.options
    elif isinstance(spec, Mapping) and "keys" in spec and set(spec) <= _INDEX_SPEC_KEYS:
        keys, options = spec["keys"], spec.get("options")
    else:
        raise ModelDefinitionError(f"malformed wither model index specification: {spec!r}")
    if not isinstance(keys, Mapping):
        raise ModelDefinitionError("malformed wither model index specification: keys must be a document")
    if options is not None and not isinstance(options, Mapping):
        raise ModelDefinitionError(
            "malformed wither model index specification: options must be a document"
        )
    return IndexModel(dict(keys), None if options is None else dict(options))


def _check_indexes(indexes: Iterable[Any] | None) -> tuple[IndexModel, ...]:
    if indexes is None:
        return ()
    if isinstance(indexes, (str, bytes, Mapping, IndexModel)):
        raise ModelDefinitionError("indexes must be given as a sequence of index specifications")
    return tuple(_index_from_spec(spec) for spec in indexes)


def _check_id_field(cls: type, skip_serde_checks: bool) -> None:
    id_field = next(
        (f for f in dataclasses.fields(cls) if f.name == ID_FIELD_NAME), None
    )
    if id_field is None:
        raise ModelDefinitionError(
            "wither models must have a field `id` holding an optional ObjectId"
        )
    if skip_serde_checks:
        return
    metadata = id_field.metadata
    rename = metadata.get("rename")
    if rename is not None and rename != ID_FIELD_METADATA["rename"]:
        raise ModelDefinitionError('the `rename` metadata of a model ID field must be "_id"')
    skip = metadata.get("skip_serializing_if")
    if skip is not None and skip != ID_FIELD_METADATA["skip_serializing_if"]:
        raise ModelDefinitionError(
            'the `skip_serializing_if` metadata of a model ID field must be "is_none"'
        )
    if rename is None or skip is None:
        raise ModelDefinitionError(
            "the ID field of a model must carry the metadata "
            '{"rename": "_id", "skip_serializing_if": "is_none"}'
        )


def _configure(
    cls: Any,
    collection_name: Any,
    indexes: Iterable[Any] | None,
    read_concern: Any,
    write_concern: Any,
    selection_criteria: Callable[[], Any] | None,
    skip_serde_checks: bool,
) -> type:
    if not isinstance(cls, type) or issubclass(cls, enum.Enum):
        raise ModelDefinitionError("only classes can be used as wither models")
    name = _check_collection_name(collection_name, cls.__name__)
    index_models = _check_indexes(indexes)
    try:
        read = read_concern_from_spec(read_concern)
    except ConcernSpecError as exc:
        raise ModelDefinitionError(f"malformed wither model read concern attribute: {exc}") from exc
    try:
        write = write_concern_from_spec(write_concern)
    except ConcernSpecError as exc:
        raise ModelDefinitionError(f"malformed wither model write concern attribute: {exc}") from exc
    if selection_criteria is not None and not callable(selection_criteria):
        raise ModelDefinitionError("selection_criteria must be a callable producing the criteria")
    if not isinstance(skip_serde_checks, bool):
        raise ModelDefinitionError("skip_serde_checks must be a boolean")

    if "__dataclass_fields__" not in cls.__dict__:
        cls = dataclasses.dataclass(cls)
    _check_id_field(cls, skip_serde_checks)

    cls.COLLECTION_NAME = name
    cls.INDEXES = index_models
    cls.READ_CONCERN = read
    cls.WRITE_CONCERN = write
    cls.SELECTION_CRITERIA = None if selection_criteria is None else staticmethod(selection_criteria)
    return cls


def model(
    cls: type | None = None,
    *,
    collection_name: str | None = None,
    indexes: Iterable[Any] | None = (),
    read_concern: Any = None,
    write_concern: Any = None,
    selection_criteria: Callable[[], Any] | None = None,
    skip_serde_checks: bool = False,
    **kwargs: Any,
) -> Any:
    """Configure a class as a model; usable as ``@model`` or ``@model(...)``.

    The class is made a dataclass if it is not one, must have an ``id`` field,
    and gains ``COLLECTION_NAME``, ``INDEXES``, ``READ_CONCERN``,
    ``WRITE_CONCERN`` and ``SELECTION_CRITERIA`` class attributes.
    """
    if kwargs:
        raise ModelDefinitionError(f"unrecognized wither model attribute {sorted(kwargs)[0]!r}")

    def apply(target: Any) -> type:
        return _configure(
            target,
            collection_name,
            indexes,
            read_concern,
            write_concern,
            selection_criteria,
            skip_serde_checks,
        )

    if cls is None:
        return apply
    return apply(cls)