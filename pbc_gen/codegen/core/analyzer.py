"""
Semantic analysis of select, relation and file fields.

Each analysis returns an EnhancedFieldInfo: the original field plus the
names and flags needed to emit enum constants, relation handles or file
references for it.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple, Union

from ...logging_config import get_logger
from .naming import IdentifierCategory, sanitize_identifier, to_pascal_case
from .schema import CollectionSchema, FieldSchema, collection_names_by_id

logger = get_logger(__name__)

CollectionLookup = Union[Mapping[str, str], Iterable[CollectionSchema]]


@dataclass(frozen=True)
class EnhancedFieldInfo:
    """A field together with its derived enum, relation or file data."""

    field: FieldSchema

    # select
    enum_values: Tuple[str, ...] = ()
    enum_type_name: str = ""

    # relation
    target_collection: str = ""
    relation_type_name: str = ""
    is_multi_relation: bool = False

    # file
    file_type_name: str = ""
    is_multi_file: bool = False
    has_thumbnails: bool = False
    thumbnail_sizes: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def type(self) -> str:
        return self.field.type

    @property
    def is_enum(self) -> bool:
        return bool(self.enum_type_name)

    @property
    def is_relation(self) -> bool:
        return bool(self.relation_type_name)

    @property
    def is_file(self) -> bool:
        return bool(self.file_type_name)


def _max_select_above_one(field: FieldSchema) -> bool:
    max_select = field.options.max_select
    return max_select is not None and max_select > 1


def enum_type_name(collection_name: str, field_name: str) -> str:
    return sanitize_identifier(
        to_pascal_case(collection_name) + to_pascal_case(field_name) + "Type",
        IdentifierCategory.ENUM,
    )


def relation_type_name(target_collection: str) -> str:
    return sanitize_identifier(
        to_pascal_case(target_collection) + "Relation", IdentifierCategory.RELATION
    )


def file_type_name(field_name: str) -> str:
    return sanitize_identifier(to_pascal_case(field_name) + "File", IdentifierCategory.FILE)


def resolve_collection_name(collection_id: str, collections: CollectionLookup) -> Optional[str]:
    """
    Find the name of the collection with the given id.

    Accepts either a prebuilt id-to-name table or the collection list, in
    which case the first collection with a matching id wins.
    """
    if not collection_id:
        return None
    if isinstance(collections, Mapping):
        return collections.get(collection_id)
    for collection in collections:
        if collection.id == collection_id:
            return collection.name
    return None


def analyze_select_field(field: FieldSchema, collection_name: str) -> EnhancedFieldInfo:
    values = field.options.values
    if not values:
        return EnhancedFieldInfo(field=field)
    return EnhancedFieldInfo(
        field=field,
        enum_values=tuple(values),
        enum_type_name=enum_type_name(collection_name, field.name),
    )


def analyze_relation_field(field: FieldSchema, collections: CollectionLookup) -> EnhancedFieldInfo:
    """
    Resolve a relation's target collection.

    A relation whose target id is missing or unknown produces no relation
    data. Multiplicity here only counts an explicit maxSelect above one.
    """
    target = resolve_collection_name(field.options.collection_id, collections)
    if not target:
        if field.options.collection_id:
            logger.debug(
                "Relation field %r targets unknown collection id %r; skipping",
                field.name,
                field.options.collection_id,
            )
        return EnhancedFieldInfo(field=field)

    return EnhancedFieldInfo(
        field=field,
        target_collection=target,
        relation_type_name=relation_type_name(target),
        is_multi_relation=_max_select_above_one(field),
    )


def analyze_file_field(field: FieldSchema) -> EnhancedFieldInfo:
    thumbs = tuple(field.options.thumbs)
    return EnhancedFieldInfo(
        field=field,
        file_type_name=file_type_name(field.name),
        is_multi_file=_max_select_above_one(field),
        has_thumbnails=bool(thumbs),
        thumbnail_sizes=thumbs,
    )


def analyze_enhanced_field(
    field: FieldSchema, collection_name: str, collections: CollectionLookup
) -> EnhancedFieldInfo:
    """
    Derive enum, relation or file data for a field.

    Args:
        field: Field to analyze
        collection_name: Name of the collection declaring the field
        collections: All collections of the document, or an id-to-name
            table built with ``collection_names_by_id``

    Returns:
        EnhancedFieldInfo; fields of other types carry no derived data
    """
    if field.type == "select":
        return analyze_select_field(field, collection_name)
    if field.type == "relation":
        return analyze_relation_field(field, collections)
    if field.type == "file":
        return analyze_file_field(field)
    return EnhancedFieldInfo(field=field)


__all__ = [
    "EnhancedFieldInfo",
    "analyze_enhanced_field",
    "analyze_file_field",
    "analyze_relation_field",
    "analyze_select_field",
    "collection_names_by_id",
    "resolve_collection_name",
]
