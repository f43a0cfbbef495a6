"""
Assembly of the Go emission model.

Folds parsed collections into the flat structure rendered by the Go
templates: one struct descriptor per collection, plus the optional enum,
relation and file descriptors.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ....logging_config import get_logger
from ...core.analyzer import EnhancedFieldInfo, analyze_enhanced_field
from ...core.config import GeneratorConfig
from ...core.naming import (
    IdentifierCategory,
    sanitize_identifier,
    to_constant_name,
    to_pascal_case,
)
from ...core.schema import CollectionSchema, FieldSchema, collection_names_by_id
from ...core.version import SchemaVersion
from .model import (
    CollectionData,
    ConstantData,
    EnhancedTemplateData,
    EnumData,
    FieldData,
    FileTypeData,
    MethodData,
    RelationTypeData,
    TemplateData,
)
from .types import GoTypeMapper

logger = get_logger(__name__)

# System collection left out of generated models.
SKIPPED_SYSTEM_COLLECTIONS = frozenset({"_superusers"})

# Fields provided by the embedded pocketbase.BaseModel / BaseDateTime.
BASE_MODEL_FIELDS = frozenset({"id", "collectionId", "collectionName"})
BASE_DATETIME_FIELDS = frozenset({"created", "updated"})


def struct_name(collection_name: str) -> str:
    return sanitize_identifier(to_pascal_case(collection_name), IdentifierCategory.COLLECTION)


def go_field_name(field_name: str) -> str:
    return sanitize_identifier(to_pascal_case(field_name), IdentifierCategory.FIELD)


def is_skipped_collection(schema: CollectionSchema) -> bool:
    return schema.system and schema.name in SKIPPED_SYSTEM_COLLECTIONS


def uses_timestamps(schema: CollectionSchema, schema_version: SchemaVersion) -> bool:
    """
    Whether the struct embeds BaseDateTime.

    Legacy exports never list created/updated, so they are always embedded.
    Current exports embed them only when both fields are declared.
    """
    if schema_version is SchemaVersion.LEGACY:
        return True
    return schema.has_field("created") and schema.has_field("updated")


def build_field_data(field: FieldSchema, mapper: GoTypeMapper) -> FieldData:
    """Map one field to its struct descriptor; optional means not required."""
    mapped = mapper.map_field(field, wants_optional=not field.required)
    go_type = mapped.go_type
    return FieldData(
        json_name=field.name,
        go_name=go_field_name(field.name),
        go_type=go_type.name,
        omit_empty=not field.required,
        getter_method=mapped.getter_method,
        is_pointer=go_type.is_pointer,
        base_type=go_type.base_name,
        field_type=field.type,
        is_multi=mapped.is_multi,
        imports=tuple(sorted(go_type.imports_needed)),
    )


def process_fields(fields: Iterable[FieldSchema], mapper: GoTypeMapper) -> Tuple[FieldData, ...]:
    """
    Build struct field descriptors in declaration order.

    System and hidden fields are skipped, and so is any later field reusing
    a name already seen.
    """
    result: List[FieldData] = []
    seen = set()
    for field in fields:
        if field.system or field.hidden:
            continue
        if field.name in seen:
            logger.debug("Skipping duplicate field %r", field.name)
            continue
        seen.add(field.name)
        result.append(build_field_data(field, mapper))
    return tuple(result)


def build_template_data(
    schemas: Sequence[CollectionSchema],
    package_name: str,
    schema_version: SchemaVersion = SchemaVersion.LATEST,
    use_generic: bool = False,
    json_library: str = "",
    mapper: Optional[GoTypeMapper] = None,
) -> TemplateData:
    """
    Build the base model: one struct descriptor per collection.

    Args:
        schemas: Parsed collections in document order
        package_name: Go package of the generated file
        schema_version: Version used for timestamp embedding
        use_generic: Use ``Get[T]`` accessors
        json_library: JSON package import path
        mapper: Type mapper; built from use_generic/json_library when omitted

    Returns:
        TemplateData
    """
    mapper = mapper or GoTypeMapper(use_generic=use_generic, json_library=json_library)

    collections = []
    for schema in schemas:
        if is_skipped_collection(schema):
            logger.debug("Skipping system collection %r", schema.name)
            continue

        collection = CollectionData(
            collection_name=schema.name,
            struct_name=struct_name(schema.name),
            schema_version=schema_version,
            use_timestamps=uses_timestamps(schema, schema_version),
            fields=process_fields(schema.fields, mapper),
        )
        logger.debug(
            "Processed collection %r: schema_version=%s, use_timestamps=%s, fields=%d",
            collection.collection_name,
            collection.schema_version,
            collection.use_timestamps,
            len(collection.fields),
        )
        collections.append(collection)

    return TemplateData(
        package_name=package_name,
        json_library=json_library,
        schema_version=schema_version,
        use_generic=use_generic,
        collections=tuple(collections),
    )


class _EnhancedGenerator:
    """Shared walk over every non-system field of every modelled collection."""

    field_type = ""

    def _iter_fields(
        self, collections: Sequence[CollectionData], schemas: Sequence[CollectionSchema]
    ) -> Iterable[Tuple[str, FieldSchema]]:
        schema_map: Dict[str, CollectionSchema] = {}
        for schema in schemas:
            schema_map.setdefault(schema.name, schema)

        for collection in collections:
            schema = schema_map.get(collection.collection_name)
            if schema is None:
                continue
            for field in schema.fields:
                if field.system or field.type != self.field_type:
                    continue
                yield collection.collection_name, field


class EnumGenerator(_EnhancedGenerator):
    """Builds enum descriptors for select fields with declared values."""

    field_type = "select"

    def generate_enums(
        self, collections: Sequence[CollectionData], schemas: Sequence[CollectionSchema]
    ) -> Tuple[EnumData, ...]:
        """One EnumData per qualifying select field; no deduplication."""
        enums = []
        for collection_name, field in self._iter_fields(collections, schemas):
            enhanced = analyze_enhanced_field(field, collection_name, schemas)
            if enhanced.is_enum:
                enums.append(self.generate_enum_data(enhanced, collection_name))
        return tuple(enums)

    def generate_enum_data(self, enhanced: EnhancedFieldInfo, collection_name: str) -> EnumData:
        return EnumData(
            collection_name=collection_name,
            field_name=enhanced.name,
            enum_type_name=enhanced.enum_type_name,
            constants=self.generate_enum_constants(enhanced, collection_name),
        )

    def generate_enum_constants(
        self, enhanced: EnhancedFieldInfo, collection_name: str
    ) -> Tuple[ConstantData, ...]:
        return tuple(
            ConstantData(
                name=sanitize_identifier(
                    to_constant_name(collection_name, enhanced.name, value),
                    IdentifierCategory.ENUM,
                ),
                value=value,
            )
            for value in enhanced.enum_values
        )


class RelationGenerator(_EnhancedGenerator):
    """Builds relation handle descriptors, one per target type name."""

    field_type = "relation"

    def generate_relation_types(
        self, collections: Sequence[CollectionData], schemas: Sequence[CollectionSchema]
    ) -> Tuple[RelationTypeData, ...]:
        """
        Relation descriptors deduplicated by type name.

        The first field producing a type name wins; relations whose target
        cannot be resolved are left out.
        """
        names_by_id: Mapping[str, str] = collection_names_by_id(schemas)

        relation_types = []
        seen = set()
        for collection_name, field in self._iter_fields(collections, schemas):
            enhanced = analyze_enhanced_field(field, collection_name, names_by_id)
            if not enhanced.is_relation:
                continue
            if enhanced.relation_type_name in seen:
                continue
            seen.add(enhanced.relation_type_name)
            relation_types.append(self.generate_relation_type_data(enhanced))
        return tuple(relation_types)

    def generate_relation_type_data(self, enhanced: EnhancedFieldInfo) -> RelationTypeData:
        target_type_name = struct_name(enhanced.target_collection)
        return RelationTypeData(
            type_name=enhanced.relation_type_name,
            target_collection=enhanced.target_collection,
            target_type_name=target_type_name,
            is_multi=enhanced.is_multi_relation,
            methods=self.generate_relation_methods(target_type_name),
        )

    def generate_relation_methods(self, target_type_name: str) -> Tuple[MethodData, ...]:
        return (
            MethodData(name="ID", return_type="string", body="return r.id"),
            MethodData(
                name="Load",
                params="ctx context.Context, client pocketbase.RecordServiceAPI",
                return_type=f"(*{target_type_name}, error)",
                body=(
                    'if r.id == "" {\n'
                    "\treturn nil, nil\n"
                    "}\n"
                    f"return Get{target_type_name}(ctx, client, r.id, nil)"
                ),
            ),
            MethodData(name="IsEmpty", return_type="bool", body='return r.id == ""'),
        )


class FileGenerator(_EnhancedGenerator):
    """Builds file reference descriptors, one per file field."""

    field_type = "file"

    def generate_file_types(
        self, collections: Sequence[CollectionData], schemas: Sequence[CollectionSchema]
    ) -> Tuple[FileTypeData, ...]:
        return tuple(
            self.generate_file_type_data(
                analyze_enhanced_field(field, collection_name, schemas), collection_name
            )
            for collection_name, field in self._iter_fields(collections, schemas)
        )

    def generate_file_type_data(self, enhanced: EnhancedFieldInfo, collection_name: str) -> FileTypeData:
        return FileTypeData(
            type_name=enhanced.file_type_name,
            collection_name=collection_name,
            field_name=enhanced.name,
            is_multi=enhanced.is_multi_file,
            has_thumbnails=enhanced.has_thumbnails,
            thumbnail_sizes=enhanced.thumbnail_sizes,
            methods=self.generate_file_methods(enhanced),
        )

    def generate_file_methods(self, enhanced: EnhancedFieldInfo) -> Tuple[MethodData, ...]:
        methods = [
            MethodData(name="Filename", return_type="string", body="return f.filename"),
            MethodData(
                name="URL",
                params="baseURL string",
                return_type="string",
                body=(
                    'if f.filename == "" {\n'
                    '\treturn ""\n'
                    "}\n"
                    'return fmt.Sprintf("%s/api/files/%s/%s/%s", baseURL, f.collection, f.recordID, f.filename)'
                ),
            ),
        ]
        if enhanced.has_thumbnails:
            methods.append(
                MethodData(
                    name="ThumbURL",
                    params="baseURL, thumb string",
                    return_type="string",
                    body=(
                        'if f.filename == "" {\n'
                        '\treturn ""\n'
                        "}\n"
                        'return fmt.Sprintf("%s/api/files/%s/%s/%s?thumb=%s", '
                        "baseURL, f.collection, f.recordID, f.filename, thumb)"
                    ),
                )
            )
        methods.append(MethodData(name="IsEmpty", return_type="bool", body='return f.filename == ""'))
        return tuple(methods)


def build_emission_model(
    schemas: Sequence[CollectionSchema],
    config: GeneratorConfig,
    schema_version: SchemaVersion,
) -> EnhancedTemplateData:
    """
    Build the complete emission model for a run.

    The base model is built first and is the same whatever feature flags
    are set; side collections are only filled for enabled flags.

    Args:
        schemas: Parsed collections in document order
        config: Package settings and feature flags
        schema_version: Detected or forced schema version

    Returns:
        EnhancedTemplateData
    """
    base = build_template_data(
        schemas,
        config.package_name,
        schema_version,
        use_generic=config.use_generic,
        json_library=config.json_library,
    )

    enums: Tuple[EnumData, ...] = ()
    relation_types: Tuple[RelationTypeData, ...] = ()
    file_types: Tuple[FileTypeData, ...] = ()

    if config.generate_enums:
        enums = EnumGenerator().generate_enums(base.collections, schemas)
    if config.generate_relations:
        relation_types = RelationGenerator().generate_relation_types(base.collections, schemas)
    if config.generate_files:
        file_types = FileGenerator().generate_file_types(base.collections, schemas)

    logger.info(
        "Assembled %d collections, %d enums, %d relation types, %d file types",
        len(base.collections),
        len(enums),
        len(relation_types),
        len(file_types),
    )

    return EnhancedTemplateData(
        base=base,
        enums=enums,
        relation_types=relation_types,
        file_types=file_types,
        generate_enums=config.generate_enums,
        generate_relations=config.generate_relations,
        generate_files=config.generate_files,
    )
