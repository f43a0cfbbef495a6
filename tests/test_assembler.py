import itertools

import pytest

from pbc_gen.codegen.core.config import GeneratorConfig
from pbc_gen.codegen.core.schema import parse_collections
from pbc_gen.codegen.core.version import SchemaVersion
from pbc_gen.codegen.languages.go.assembler import (
    EnumGenerator,
    FileGenerator,
    RelationGenerator,
    build_emission_model,
    build_template_data,
    process_fields,
    struct_name,
    uses_timestamps,
)
from pbc_gen.codegen.languages.go.types import DATETIME_IMPORT, GoTypeMapper


@pytest.fixture
def base(latest_schemas):
    return build_template_data(
        latest_schemas, "models", SchemaVersion.LATEST, json_library="github.com/goccy/go-json"
    )


def fields_by_name(collection):
    return {f.json_name: f for f in collection.fields}


def test_superusers_collection_is_skipped(base):
    assert [c.collection_name for c in base.collections] == ["users", "devices"]
    assert [c.struct_name for c in base.collections] == ["Users", "Devices"]


def test_non_system_superusers_is_kept():
    schemas = parse_collections([{"name": "_superusers", "system": False, "fields": []}])
    data = build_template_data(schemas, "models")
    assert [c.collection_name for c in data.collections] == ["_superusers"]
    assert data.collections[0].struct_name == "Superusers"


def test_fields_skip_system_hidden_and_duplicates(base):
    devices = base.collections[1]
    assert [f.json_name for f in devices.fields] == [
        "name",
        "status",
        "owner",
        "members",
        "ghost",
        "photos",
        "config",
    ]
    assert fields_by_name(devices)["name"].go_type == "string"


def test_field_descriptors(base):
    users = fields_by_name(base.collections[0])
    assert users["email"].go_type == "string"
    assert not users["email"].omit_empty
    assert users["name"].go_type == "*string"
    assert users["name"].getter_method == "GetStringPointer"
    assert users["name"].base_type == "string"
    assert users["name"].omit_empty
    assert users["created"].go_type == "*types.DateTime"
    assert users["created"].imports == (DATETIME_IMPORT,)

    devices = fields_by_name(base.collections[1])
    assert devices["members"].go_type == "[]string"
    assert devices["members"].is_multi
    assert devices["members"].is_nilable
    assert devices["config"].go_type == "json.RawMessage"
    assert not devices["config"].is_pointer
    assert devices["status"].go_type == "*string"


def test_timestamps(latest_schemas, legacy_schemas, base):
    assert [c.use_timestamps for c in base.collections] == [True, False]
    assert uses_timestamps(legacy_schemas[0], SchemaVersion.LEGACY)

    only_created = parse_collections([{"name": "c", "fields": [{"name": "created", "type": "autodate"}]}])
    assert not uses_timestamps(only_created[0], SchemaVersion.LATEST)


def test_process_fields_keeps_declaration_order(legacy_schemas):
    fields = process_fields(legacy_schemas[0].fields, GoTypeMapper())
    assert [f.go_name for f in fields] == ["Title", "Category", "Author", "Views"]


def test_struct_name_is_sanitized():
    assert struct_name("user_profiles") == "UserProfiles"
    assert struct_name("2fa codes") == "Collection2faCodes"


def test_enum_descriptors(base, latest_schemas):
    enums = EnumGenerator().generate_enums(base.collections, latest_schemas)
    assert len(enums) == 1
    enum = enums[0]
    assert enum.enum_type_name == "DevicesStatusType"
    assert [(c.name, c.value) for c in enum.constants] == [
        ("DevicesStatusOnline", "online"),
        ("DevicesStatusOffline", "offline"),
    ]


def test_enum_constants_are_not_deduplicated():
    schemas = parse_collections(
        [{"name": "c", "fields": [{"name": "s", "type": "select", "values": ["a b", "a-b"]}]}]
    )
    data = build_template_data(schemas, "models")
    enums = EnumGenerator().generate_enums(data.collections, schemas)
    assert [c.name for c in enums[0].constants] == ["CSAB", "CSAB"]


def test_relation_descriptors_deduplicated_by_type(base, latest_schemas):
    relations = RelationGenerator().generate_relation_types(base.collections, latest_schemas)
    assert len(relations) == 1
    relation = relations[0]
    assert relation.type_name == "UsersRelation"
    assert relation.target_collection == "users"
    assert relation.target_type_name == "Users"
    # owner comes first and has maxSelect 1
    assert not relation.is_multi
    assert [m.name for m in relation.methods] == ["ID", "Load", "IsEmpty"]
    load = relation.methods[1]
    assert load.return_type == "(*Users, error)"
    assert "GetUsers(ctx, client, r.id, nil)" in load.body


def test_file_descriptors(base, latest_schemas):
    files = FileGenerator().generate_file_types(base.collections, latest_schemas)
    assert [(f.type_name, f.collection_name) for f in files] == [
        ("AvatarFile", "users"),
        ("PhotosFile", "devices"),
    ]
    avatar, photos = files
    assert avatar.has_thumbnails
    assert [m.name for m in avatar.methods] == ["Filename", "URL", "ThumbURL", "IsEmpty"]
    assert photos.is_multi
    assert [m.name for m in photos.methods] == ["Filename", "URL", "IsEmpty"]


def test_emission_model_flags_do_not_change_base(latest_schemas):
    models = []
    for enums, relations, files in itertools.product([False, True], repeat=3):
        config = GeneratorConfig(
            generate_enums=enums, generate_relations=relations, generate_files=files
        )
        model = build_emission_model(latest_schemas, config, SchemaVersion.LATEST)
        assert bool(model.enums) is enums
        assert bool(model.relation_types) is relations
        assert bool(model.file_types) is files
        models.append(model)

    assert all(model.base == models[0].base for model in models)


def test_emission_model_settings(latest_schemas):
    config = GeneratorConfig(package_name="pb", use_generic=True, json_library="encoding/json")
    model = build_emission_model(latest_schemas, config, SchemaVersion.LATEST)
    assert model.package_name == "pb"
    assert model.use_generic
    assert model.json_library == "encoding/json"
    assert model.schema_version is SchemaVersion.LATEST
    devices = fields_by_name(model.collections[1])
    assert devices["status"].getter_method == "Get[string]"


def test_legacy_model(legacy_schemas):
    model = build_emission_model(legacy_schemas, GeneratorConfig(), SchemaVersion.LEGACY)
    assert [c.use_timestamps for c in model.collections] == [True, True]
    assert [e.enum_type_name for e in model.enums] == ["PostsCategoryType"]
    assert [r.type_name for r in model.relation_types] == ["AuthorsRelation"]
    assert model.file_types == ()
