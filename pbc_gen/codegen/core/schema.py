"""
Schema document model for PocketBase collection exports.

A schema export is a JSON array of collection objects. Older exports list
a collection's fields under ``schema`` with type specific settings nested in
``options``; newer exports use ``fields`` and put most settings directly on
the field object. Both shapes decode into the same dataclasses here.
"""

import json
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


class SchemaParseError(Exception):
    """Raised when a schema document or one of its entries is malformed."""

    pass


# Option keys that may also be declared on the field object itself. When
# present and not null there, the field-level value replaces the nested one.
FIELD_LEVEL_OPTION_KEYS: Tuple[Tuple[str, str], ...] = (
    ("maxSelect", "max_select"),
    ("minSelect", "min_select"),
    ("values", "values"),
    ("collectionId", "collection_id"),
    ("cascadeDelete", "cascade_delete"),
    ("thumbs", "thumbs"),
    ("mimeTypes", "mime_types"),
    ("maxSize", "max_size"),
    ("protected", "protected"),
    ("pattern", "pattern"),
    ("min", "min"),
    ("max", "max"),
)


def _expect_object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaParseError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _get_str(data: Dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaParseError(f"{what}.{key} must be a string")
    return value


def _get_optional_str(data: Dict[str, Any], key: str, what: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise SchemaParseError(f"{what}.{key} must be a string or null")
    return value


def _get_bool(data: Dict[str, Any], key: str, what: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SchemaParseError(f"{what}.{key} must be a boolean")
    return value


def _get_int(data: Dict[str, Any], key: str, what: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise SchemaParseError(f"{what}.{key} must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise SchemaParseError(f"{what}.{key} must be an integer")
    return value


def _get_str_list(data: Dict[str, Any], key: str, what: str) -> Tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SchemaParseError(f"{what}.{key} must be a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class FieldOptions:
    """Type specific field settings."""

    collection_id: str = ""
    cascade_delete: bool = False

    # min/max hold numbers for number fields and lengths or dates for others
    min: Any = None
    max: Any = None

    # None means "not declared", which is not the same as 1
    min_select: Optional[int] = None
    max_select: Optional[int] = None

    pattern: str = ""
    mime_types: Tuple[str, ...] = ()
    thumbs: Tuple[str, ...] = ()
    max_size: int = 0
    protected: bool = False
    values: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, what: str = "options") -> "FieldOptions":
        """Decode an ``options`` object; ``None`` yields empty options."""
        if data is None:
            return cls()
        data = _expect_object(data, what)
        return cls(**_decode_option_values(data, data.keys(), what))

    def with_field_level(self, data: Dict[str, Any], what: str = "field") -> "FieldOptions":
        """
        Return a copy overwritten by option keys declared on the field object.

        Only keys that are present with a non-null value replace the nested
        settings; everything else is kept as decoded from ``options``.
        """
        present = [key for key, _ in FIELD_LEVEL_OPTION_KEYS if data.get(key) is not None]
        if not present:
            return self
        return replace(self, **_decode_option_values(data, present, what))


_OPTION_DECODERS = {
    "collectionId": ("collection_id", _get_str),
    "cascadeDelete": ("cascade_delete", _get_bool),
    "minSelect": ("min_select", _get_int),
    "maxSelect": ("max_select", _get_int),
    "pattern": ("pattern", _get_str),
    "mimeTypes": ("mime_types", _get_str_list),
    "thumbs": ("thumbs", _get_str_list),
    "protected": ("protected", _get_bool),
    "values": ("values", _get_str_list),
}


def _decode_option_values(data: Dict[str, Any], keys, what: str) -> Dict[str, Any]:
    decoded: Dict[str, Any] = {}
    for key in keys:
        if key in _OPTION_DECODERS:
            attr, getter = _OPTION_DECODERS[key]
            decoded[attr] = getter(data, key, what)
        elif key in ("min", "max"):
            decoded[key] = data.get(key)
        elif key == "maxSize":
            decoded["max_size"] = _get_int(data, key, what) or 0
    return decoded


@dataclass(frozen=True)
class FieldSchema:
    """One field declaration within a collection."""

    id: str = ""
    name: str = ""
    type: str = ""
    system: bool = False
    required: bool = False
    presentable: bool = False
    unique: bool = False
    hidden: bool = False
    options: FieldOptions = field(default_factory=FieldOptions)

    @classmethod
    def from_dict(cls, data: Any, what: str = "field") -> "FieldSchema":
        """
        Decode a field object from either export format.

        Nested ``options`` are decoded first; option keys declared on the
        field object are applied afterwards and take precedence.
        """
        data = _expect_object(data, what)
        options = FieldOptions.from_dict(data.get("options"), f"{what}.options")
        options = options.with_field_level(data, what)

        return cls(
            id=_get_str(data, "id", what),
            name=_get_str(data, "name", what),
            type=_get_str(data, "type", what),
            system=_get_bool(data, "system", what),
            required=_get_bool(data, "required", what),
            presentable=_get_bool(data, "presentable", what),
            unique=_get_bool(data, "unique", what),
            hidden=_get_bool(data, "hidden", what),
            options=options,
        )


@dataclass(frozen=True)
class CollectionSchema:
    """
    One collection (record type) from the export.

    ``fields`` always holds the decoded field list, whichever key it came
    from. ``schema`` mirrors the legacy key and is always empty after
    decoding.
    """

    id: str = ""
    name: str = ""
    type: str = "base"
    system: bool = False
    indexes: Tuple[str, ...] = ()
    list_rule: Optional[str] = None
    view_rule: Optional[str] = None
    create_rule: Optional[str] = None
    update_rule: Optional[str] = None
    delete_rule: Optional[str] = None
    query: Optional[str] = None
    fields: Tuple[FieldSchema, ...] = ()
    schema: Tuple[FieldSchema, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, what: str = "collection") -> "CollectionSchema":
        """
        Decode a collection object.

        A non-null ``schema`` list wins over a non-null ``fields`` list.
        """
        data = _expect_object(data, what)

        if data.get("schema") is not None:
            raw_fields, key = data["schema"], "schema"
        elif data.get("fields") is not None:
            raw_fields, key = data["fields"], "fields"
        else:
            raw_fields, key = [], "fields"

        if not isinstance(raw_fields, list):
            raise SchemaParseError(f"{what}.{key} must be a list")

        name = _get_str(data, "name", what)
        label = f"{what} {name!r}" if name else what
        fields = tuple(
            FieldSchema.from_dict(item, f"{label}.{key}[{index}]")
            for index, item in enumerate(raw_fields)
        )

        query = None
        options = data.get("options")
        if isinstance(options, dict):
            query = _get_optional_str(options, "query", f"{label}.options")
        if query is None:
            query = _get_optional_str(data, "viewQuery", label)

        return cls(
            id=_get_str(data, "id", what),
            name=name,
            type=_get_str(data, "type", what) or "base",
            system=_get_bool(data, "system", what),
            indexes=_get_str_list(data, "indexes", label),
            list_rule=_get_optional_str(data, "listRule", label),
            view_rule=_get_optional_str(data, "viewRule", label),
            create_rule=_get_optional_str(data, "createRule", label),
            update_rule=_get_optional_str(data, "updateRule", label),
            delete_rule=_get_optional_str(data, "deleteRule", label),
            query=query,
            fields=fields,
        )

    def get_field(self, name: str) -> Optional[FieldSchema]:
        """Return the first field with the given name, if any."""
        for item in self.fields:
            if item.name == name:
                return item
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None


def parse_collections(data: Any) -> List[CollectionSchema]:
    """
    Decode an already-loaded JSON value into collections.

    Args:
        data: Result of ``json.loads`` on a schema export

    Returns:
        Collections in document order

    Raises:
        SchemaParseError: If the value is not an array or an entry is malformed
    """
    if not isinstance(data, list):
        raise SchemaParseError(
            f"schema document must be a JSON array, got {type(data).__name__}"
        )
    return [
        CollectionSchema.from_dict(item, f"collection[{index}]")
        for index, item in enumerate(data)
    ]


def parse_schema_document(raw: bytes | str) -> List[CollectionSchema]:
    """Parse raw JSON text into collections."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SchemaParseError(f"invalid JSON: {e}") from e
    return parse_collections(data)


def collection_names_by_id(collections: List[CollectionSchema]) -> Mapping[str, str]:
    """
    Build a read-only collection id to name table.

    The first collection declaring an id wins; collections without an id
    are left out.
    """
    names: Dict[str, str] = {}
    for collection in collections:
        if collection.id and collection.id not in names:
            names[collection.id] = collection.name
    return MappingProxyType(names)
