"""
Emission model handed to the Go templates.

Everything here is an immutable value built bottom-up by the assembler;
templates only read it.
"""

from dataclasses import dataclass
from typing import Tuple

from ...core.version import SchemaVersion


@dataclass(frozen=True)
class FieldData:
    """One struct field and its accessor."""

    json_name: str
    go_name: str
    go_type: str
    omit_empty: bool
    getter_method: str
    is_pointer: bool
    base_type: str
    field_type: str = ""
    is_multi: bool = False
    imports: Tuple[str, ...] = ()

    @property
    def is_nilable(self) -> bool:
        """Whether the Go value can be compared with nil."""
        return (
            self.is_pointer
            or self.go_type.startswith("[]")
            or self.go_type in ("json.RawMessage", "any")
        )


@dataclass(frozen=True)
class CollectionData:
    """One collection rendered as one struct."""

    collection_name: str
    struct_name: str
    schema_version: SchemaVersion
    use_timestamps: bool
    fields: Tuple[FieldData, ...] = ()


@dataclass(frozen=True)
class TemplateData:
    """Base model: package settings and per-collection field descriptors."""

    package_name: str
    json_library: str
    schema_version: SchemaVersion
    use_generic: bool
    collections: Tuple[CollectionData, ...] = ()


@dataclass(frozen=True)
class ConstantData:
    """One enum constant."""

    name: str
    value: str


@dataclass(frozen=True)
class EnumData:
    """Constants for one select field."""

    collection_name: str
    field_name: str
    enum_type_name: str
    constants: Tuple[ConstantData, ...] = ()


@dataclass(frozen=True)
class MethodData:
    """A method generated on a relation or file handle type."""

    name: str
    return_type: str
    body: str
    params: str = ""


@dataclass(frozen=True)
class RelationTypeData:
    """A typed handle for relations pointing at one collection."""

    type_name: str
    target_collection: str
    target_type_name: str
    is_multi: bool
    methods: Tuple[MethodData, ...] = ()

    @property
    def multi_type_name(self) -> str:
        return self.type_name + "s"


@dataclass(frozen=True)
class FileTypeData:
    """A file reference type for one file field."""

    type_name: str
    collection_name: str
    field_name: str
    is_multi: bool
    has_thumbnails: bool
    thumbnail_sizes: Tuple[str, ...] = ()
    methods: Tuple[MethodData, ...] = ()


@dataclass(frozen=True)
class EnhancedTemplateData:
    """
    Base model plus the optional enum, relation and file collections.

    Each side collection is empty unless its flag is set.
    """

    base: TemplateData
    enums: Tuple[EnumData, ...] = ()
    relation_types: Tuple[RelationTypeData, ...] = ()
    file_types: Tuple[FileTypeData, ...] = ()
    generate_enums: bool = False
    generate_relations: bool = False
    generate_files: bool = False

    @property
    def package_name(self) -> str:
        return self.base.package_name

    @property
    def json_library(self) -> str:
        return self.base.json_library

    @property
    def schema_version(self) -> SchemaVersion:
        return self.base.schema_version

    @property
    def use_generic(self) -> bool:
        return self.base.use_generic

    @property
    def collections(self) -> Tuple[CollectionData, ...]:
        return self.base.collections


__all__ = [
    "CollectionData",
    "ConstantData",
    "EnhancedTemplateData",
    "EnumData",
    "FieldData",
    "FileTypeData",
    "MethodData",
    "RelationTypeData",
    "TemplateData",
]
