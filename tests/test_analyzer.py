from pbc_gen.codegen.core.analyzer import (
    analyze_enhanced_field,
    analyze_file_field,
    analyze_relation_field,
    analyze_select_field,
    resolve_collection_name,
)
from pbc_gen.codegen.core.schema import FieldSchema, collection_names_by_id

USERS_ID = "_pb_users_auth_"


def test_select_with_values_is_enum():
    field = FieldSchema.from_dict(
        {"name": "status", "type": "select", "values": ["online", "offline", "online"]}
    )
    info = analyze_select_field(field, "devices")
    assert info.is_enum
    assert info.enum_type_name == "DevicesStatusType"
    assert info.enum_values == ("online", "offline", "online")


def test_select_without_values_is_plain():
    info = analyze_select_field(FieldSchema.from_dict({"name": "s", "type": "select"}), "c")
    assert not info.is_enum
    assert info.enum_values == ()


def test_relation_resolves_target(latest_schemas):
    devices = latest_schemas[1]
    info = analyze_relation_field(devices.get_field("members"), latest_schemas)
    assert info.is_relation
    assert info.target_collection == "users"
    assert info.relation_type_name == "UsersRelation"
    assert info.is_multi_relation


def test_relation_multiplicity_requires_explicit_max_select(latest_schemas):
    field = FieldSchema.from_dict({"name": "r", "type": "relation", "collectionId": USERS_ID})
    info = analyze_relation_field(field, latest_schemas)
    assert info.is_relation
    assert not info.is_multi_relation


def test_unresolved_relation_has_no_descriptor(latest_schemas):
    ghost = latest_schemas[1].get_field("ghost")
    info = analyze_relation_field(ghost, latest_schemas)
    assert not info.is_relation
    assert info.target_collection == ""


def test_resolve_collection_name(latest_schemas):
    table = collection_names_by_id(latest_schemas)
    assert resolve_collection_name(USERS_ID, latest_schemas) == "users"
    assert resolve_collection_name(USERS_ID, table) == "users"
    assert resolve_collection_name("", table) is None
    assert resolve_collection_name("nope", latest_schemas) is None


def test_file_field(latest_schemas):
    avatar = latest_schemas[0].get_field("avatar")
    info = analyze_file_field(avatar)
    assert info.is_file
    assert info.file_type_name == "AvatarFile"
    assert info.has_thumbnails
    assert info.thumbnail_sizes == ("100x100", "0x300")
    assert not info.is_multi_file


def test_file_multiplicity():
    many = FieldSchema.from_dict({"name": "docs", "type": "file", "maxSelect": 2})
    unset = FieldSchema.from_dict({"name": "docs", "type": "file"})
    assert analyze_file_field(many).is_multi_file
    assert not analyze_file_field(unset).is_multi_file
    assert not analyze_file_field(unset).has_thumbnails


def test_digit_led_file_name():
    info = analyze_file_field(FieldSchema.from_dict({"name": "1st_scan", "type": "file"}))
    assert info.file_type_name == "File1stScanFile"


def test_dispatch_ignores_other_types(latest_schemas):
    field = FieldSchema.from_dict({"name": "title", "type": "text"})
    info = analyze_enhanced_field(field, "posts", latest_schemas)
    assert not (info.is_enum or info.is_relation or info.is_file)
    assert info.name == "title"
    assert info.type == "text"
