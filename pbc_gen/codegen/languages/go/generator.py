"""
Go code generator implementation.

Renders the assembled emission model into a single Go source file with one
record wrapper per collection, plus the optional enum constants, relation
handles and file references.
"""

import dataclasses
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ....logging_config import get_logger
from ...core.generator import CodeGenerator
from ...core.naming import IdentifierCategory, sanitize_identifier, to_pascal_case
from .assembler import BASE_DATETIME_FIELDS, BASE_MODEL_FIELDS
from .model import (
    CollectionData,
    EnhancedTemplateData,
    EnumData,
    FieldData,
    FileTypeData,
    MethodData,
    RelationTypeData,
)
from .naming import validate_go_package_name
from .types import GoTypeMapper

logger = get_logger(__name__)

CLIENT_IMPORT = "github.com/mrchypark/pocketbase-client"
MAIN_TEMPLATE = "models.go.j2"

# Members every generated struct already has.
RESERVED_MEMBERS = frozenset({"Record", "ToMap"})


class GoGenerator(CodeGenerator):
    """Code generator for PocketBase record wrappers in Go."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Go generator.

        Recognised config keys:
            client_import: Import path of the PocketBase Go client
        """
        super().__init__(config)
        self.client_import = self.config.get("client_import", CLIENT_IMPORT)

    @property
    def language_name(self) -> str:
        return "go"

    @property
    def file_extension(self) -> str:
        return ".go"

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def generate(self, model: EnhancedTemplateData) -> str:
        """Render the whole Go file for a model."""
        return self.render_template(MAIN_TEMPLATE, self.build_context(model))

    def build_context(self, model: EnhancedTemplateData) -> Dict[str, Any]:
        """
        Build the template context.

        Side collections are deduplicated here since every generated name
        lives in one Go package.
        """
        collections = [
            (collection, self.accessor_fields(collection)[0]) for collection in model.collections
        ]
        file_types = self.unique_file_types(model.file_types)
        rendered_fields = [f for _, fields in collections for f in fields]

        return {
            "model": model,
            "imports": self.collect_imports(rendered_fields, file_types),
            "collections": collections,
            "enums": self.unique_enums(model.enums),
            "relation_types": self.renderable_relation_types(model)[0],
            "file_types": file_types,
            "file_reference_methods": self.file_reference_methods(file_types),
            "thumb_constants": self.thumb_constants(file_types),
        }

    def collect_imports(
        self, fields: Iterable[FieldData], file_types: Tuple[FileTypeData, ...] = ()
    ) -> List[str]:
        """
        Sorted import paths for the generated file.

        Only fields that get accessors contribute, since Go rejects unused
        imports.
        """
        imports: Set[str] = {"context", self.client_import}
        for f in fields:
            imports.update(f.imports)
        if file_types:
            imports.add("fmt")
        return sorted(imports)

    def accessor_fields(self, collection: CollectionData) -> Tuple[Tuple[FieldData, ...], List[str]]:
        """
        Fields that get accessors, and warnings for the ones dropped.

        Record metadata fields are read through the embedded record, so
        they never get accessors of their own.
        """
        skipped = set(BASE_MODEL_FIELDS)
        if collection.use_timestamps:
            skipped |= BASE_DATETIME_FIELDS

        kept: List[FieldData] = []
        warnings: List[str] = []
        members: Set[str] = set(RESERVED_MEMBERS)

        for f in collection.fields:
            if f.json_name in skipped:
                continue

            names = {f.go_name, f"Set{f.go_name}"}
            if f.is_pointer:
                names.add(f"{f.go_name}ValueOr")

            clash = sorted(names & members)
            if clash:
                warnings.append(
                    f"Field {collection.collection_name}.{f.json_name} skipped: "
                    f"{', '.join(clash)} already defined on {collection.struct_name}"
                )
                continue

            members |= names
            kept.append(f)

        return tuple(kept), warnings

    def unique_enums(self, enums: Tuple[EnumData, ...]) -> Tuple[EnumData, ...]:
        """First enum per type name, with constant names unique package-wide."""
        result = []
        seen_types: Set[str] = set()
        seen_constants: Set[str] = set()

        for enum in enums:
            if enum.enum_type_name in seen_types:
                logger.debug("Skipping duplicate enum %s", enum.enum_type_name)
                continue
            seen_types.add(enum.enum_type_name)

            constants = []
            for constant in enum.constants:
                if constant.name in seen_constants:
                    continue
                seen_constants.add(constant.name)
                constants.append(constant)

            if constants:
                result.append(dataclasses.replace(enum, constants=tuple(constants)))
        return tuple(result)

    def renderable_relation_types(
        self, model: EnhancedTemplateData
    ) -> Tuple[Tuple[RelationTypeData, ...], List[str]]:
        """Relation types whose target collection has a generated struct."""
        struct_names = {collection.struct_name for collection in model.collections}
        kept = []
        warnings = []
        for relation in model.relation_types:
            if relation.target_type_name not in struct_names:
                warnings.append(
                    f"Relation type {relation.type_name} skipped: "
                    f"no model generated for collection {relation.target_collection}"
                )
                continue
            kept.append(relation)
        return tuple(kept), warnings

    def unique_file_types(self, file_types: Tuple[FileTypeData, ...]) -> Tuple[FileTypeData, ...]:
        result = []
        seen: Set[str] = set()
        for file_type in file_types:
            if file_type.type_name in seen:
                continue
            seen.add(file_type.type_name)
            result.append(file_type)
        return tuple(result)

    def file_reference_methods(self, file_types: Tuple[FileTypeData, ...]) -> Tuple[MethodData, ...]:
        """Union of the file methods by name, in first-seen order."""
        methods: Dict[str, MethodData] = {}
        for file_type in file_types:
            for method in file_type.methods:
                methods.setdefault(method.name, method)
        return tuple(methods.values())

    def thumb_constants(self, file_types: Tuple[FileTypeData, ...]) -> Dict[str, List[Tuple[str, str]]]:
        """Thumbnail size constants keyed by file type name."""
        constants: Dict[str, List[Tuple[str, str]]] = {}
        seen: Set[str] = set()
        for file_type in file_types:
            entries = []
            for size in file_type.thumbnail_sizes:
                name = sanitize_identifier(
                    f"{file_type.type_name}Thumb{to_pascal_case(size)}", IdentifierCategory.FILE
                )
                if name in seen:
                    continue
                seen.add(name)
                entries.append((name, size))
            constants[file_type.type_name] = entries
        return constants

    def validate_model(self, model: EnhancedTemplateData) -> List[str]:
        """Go-specific checks on the emission model."""
        warnings = super().validate_model(model)

        for problem in validate_go_package_name(model.package_name):
            warnings.append(f"Package name: {problem}")

        mapper = GoTypeMapper(use_generic=model.use_generic, json_library=model.json_library)
        for collection in model.collections:
            fields, skipped = self.accessor_fields(collection)
            warnings.extend(skipped)

            if not fields:
                warnings.append(
                    f"Collection {collection.collection_name} has no fields - "
                    f"{collection.struct_name} will only expose the embedded record"
                )

            for f in collection.fields:
                if f.field_type and not mapper.is_known_type(f.field_type):
                    warnings.append(
                        f"Field {collection.collection_name}.{f.json_name} has unknown "
                        f"type {f.field_type!r}, mapped to {f.go_type}"
                    )

        warnings.extend(self.renderable_relation_types(model)[1])
        return warnings

    def describe(self, model: EnhancedTemplateData) -> Dict[str, Any]:
        return {
            "package_name": model.package_name,
            "schema_version": str(model.schema_version),
            "collections": len(model.collections),
            "enums": len(self.unique_enums(model.enums)),
            "relation_types": len(self.renderable_relation_types(model)[0]),
            "file_types": len(self.unique_file_types(model.file_types)),
        }


def create_go_generator(config: Optional[Dict[str, Any]] = None) -> GoGenerator:
    """Create a Go generator with default configuration."""
    merged_config = {"client_import": CLIENT_IMPORT}
    if config:
        merged_config.update(config)
    return GoGenerator(merged_config)
