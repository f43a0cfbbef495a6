"""
Go type mapping for PocketBase fields.

Maps a field's declared type and cardinality options to the Go type used in
generated structs and to the record accessor that reads it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ...core.schema import FieldSchema

DATETIME_IMPORT = "github.com/pocketbase/pocketbase/tools/types"

# Field types whose cardinality defaults to "many" when maxSelect is absent.
MULTI_BY_DEFAULT_TYPES = frozenset({"relation", "file", "select"})

STRING_TYPES = frozenset({"text", "email", "url", "editor", "richtext", "password"})
DATETIME_TYPES = frozenset({"date", "autodate"})


class ShapeKind(Enum):
    """Broad shape of a mapped Go type."""

    SCALAR = "scalar"
    OPTIONAL = "optional"
    LIST = "list"
    RAW = "raw"
    DYNAMIC = "dynamic"

    @property
    def can_be_optional(self) -> bool:
        return self is ShapeKind.SCALAR


@dataclass(frozen=True)
class GoType:
    """
    Immutable representation of a Go type.

    ``name`` is what appears in a struct (``*string``), ``base_name`` is the
    type without the pointer (``string``).
    """

    name: str
    kind: ShapeKind = ShapeKind.SCALAR
    base_name: str = field(default="")
    imports_needed: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        """Set base_name if not provided."""
        if not self.base_name:
            object.__setattr__(self, "base_name", self.name.lstrip("*"))

    @property
    def is_pointer(self) -> bool:
        return self.kind is ShapeKind.OPTIONAL

    def as_pointer(self) -> "GoType":
        """Return the optional (pointer) form; only plain scalars change."""
        if not self.kind.can_be_optional:
            return self

        return GoType(
            name=f"*{self.name}",
            kind=ShapeKind.OPTIONAL,
            base_name=self.base_name,
            imports_needed=self.imports_needed,
        )


@dataclass(frozen=True)
class MappedType:
    """Result of mapping one field."""

    go_type: GoType
    getter_method: str
    is_multi: bool = False

    @property
    def is_pointer(self) -> bool:
        return self.go_type.is_pointer


def is_multi_valued(field: FieldSchema) -> bool:
    """
    Decide whether a field holds a list of values.

    An explicit maxSelect other than 1 means multi-valued. Without one,
    relation, file and select fields are treated as multi-valued.
    """
    max_select = field.options.max_select
    if max_select is not None:
        return max_select != 1
    return field.type in MULTI_BY_DEFAULT_TYPES


class GoTypeMapper:
    """
    Maps schema fields to Go types and accessor names.

    The mapper never rejects a field: unknown types fall back to ``any``
    with the generic ``Get`` accessor.
    """

    def __init__(self, use_generic: bool = False, json_library: str = "encoding/json"):
        """
        Args:
            use_generic: Emit ``Get[T]`` accessors and never wrap optional fields
            json_library: Import path providing ``json.RawMessage``
        """
        self.use_generic = use_generic
        self.json_library = json_library or "encoding/json"
        self._primitive_types = self._build_primitive_type_map()

    def _build_primitive_type_map(self) -> Dict[str, tuple]:
        """Field type -> (GoType, plain getter, optional getter)."""
        string = GoType(name="string")
        datetime = GoType(name="types.DateTime", imports_needed=frozenset({DATETIME_IMPORT}))

        primitives = {
            "number": (GoType(name="float64"), "GetFloat", "GetFloatPointer"),
            "bool": (GoType(name="bool"), "GetBool", "GetBoolPointer"),
        }
        for type_name in STRING_TYPES:
            primitives[type_name] = (string, "GetString", "GetStringPointer")
        for type_name in DATETIME_TYPES:
            primitives[type_name] = (datetime, "GetDateTime", "GetDateTimePointer")
        return primitives

    def map_field(self, field: FieldSchema, wants_optional: bool) -> MappedType:
        """
        Map a field to its Go type and accessor.

        Args:
            field: Field to map
            wants_optional: Caller wants an optional form (usually ``not required``)

        Returns:
            MappedType with the final Go type and accessor name
        """
        is_multi = is_multi_valued(field)
        go_type, plain_getter, optional_getter = self._map_base_type(field, is_multi)

        if self.use_generic:
            return MappedType(go_type, f"Get[{go_type.name}]", is_multi)

        if wants_optional and go_type.kind.can_be_optional:
            return MappedType(go_type.as_pointer(), optional_getter, is_multi)

        return MappedType(go_type, plain_getter, is_multi)

    def _map_base_type(self, field: FieldSchema, is_multi: bool) -> tuple:
        if field.type in self._primitive_types:
            return self._primitive_types[field.type]

        if field.type == "json":
            raw = GoType(
                name="json.RawMessage",
                kind=ShapeKind.RAW,
                imports_needed=frozenset({self.json_library}),
            )
            return raw, "GetRawMessage", "GetRawMessage"

        if field.type in MULTI_BY_DEFAULT_TYPES:
            if is_multi:
                return GoType(name="[]string", kind=ShapeKind.LIST), "GetStringSlice", "GetStringSlice"
            return GoType(name="string"), "GetString", "GetStringPointer"

        return GoType(name="any", kind=ShapeKind.DYNAMIC), "Get", "Get"

    def is_known_type(self, type_name: str) -> bool:
        return (
            type_name in self._primitive_types
            or type_name == "json"
            or type_name in MULTI_BY_DEFAULT_TYPES
        )


def map_field_type(field: FieldSchema, wants_optional: bool, mapper: Optional[GoTypeMapper] = None) -> MappedType:
    """Map a field with a default (non-generic) mapper."""
    return (mapper or GoTypeMapper()).map_field(field, wants_optional)
