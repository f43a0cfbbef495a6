import json

import pytest

from pbc_gen.codegen.core.schema import parse_collections

USERS_ID = "_pb_users_auth_"

LATEST_DOCUMENT = [
    {
        "id": USERS_ID,
        "name": "users",
        "type": "auth",
        "system": False,
        "listRule": "id = @request.auth.id",
        "fields": [
            {"id": "u_id", "name": "id", "type": "text", "system": True, "required": True},
            {
                "id": "u_password",
                "name": "password",
                "type": "password",
                "system": True,
                "hidden": True,
                "required": True,
            },
            {"id": "u_email", "name": "email", "type": "email", "required": True},
            {"id": "u_name", "name": "name", "type": "text"},
            {
                "id": "u_avatar",
                "name": "avatar",
                "type": "file",
                "maxSelect": 1,
                "thumbs": ["100x100", "0x300"],
                "mimeTypes": ["image/png"],
            },
            {"id": "u_created", "name": "created", "type": "autodate"},
            {"id": "u_updated", "name": "updated", "type": "autodate"},
        ],
    },
    {
        "id": "pbc_devices",
        "name": "devices",
        "type": "base",
        "system": False,
        "fields": [
            {"id": "d_id", "name": "id", "type": "text", "system": True, "required": True},
            {"id": "d_name", "name": "name", "type": "text", "required": True},
            {
                "id": "d_status",
                "name": "status",
                "type": "select",
                "maxSelect": 1,
                "values": ["online", "offline"],
            },
            {
                "id": "d_owner",
                "name": "owner",
                "type": "relation",
                "collectionId": USERS_ID,
                "maxSelect": 1,
            },
            {
                "id": "d_members",
                "name": "members",
                "type": "relation",
                "collectionId": USERS_ID,
                "maxSelect": 5,
            },
            {"id": "d_ghost", "name": "ghost", "type": "relation", "collectionId": "pbc_missing"},
            {"id": "d_photos", "name": "photos", "type": "file", "maxSelect": 3},
            {"id": "d_config", "name": "config", "type": "json"},
            {"id": "d_secret", "name": "secret", "type": "text", "hidden": True},
            {"id": "d_dup", "name": "name", "type": "number"},
        ],
    },
    {
        "id": "pbc_3142635823",
        "name": "_superusers",
        "type": "auth",
        "system": True,
        "fields": [{"id": "s_email", "name": "email", "type": "email", "required": True}],
    },
]

LEGACY_DOCUMENT = [
    {
        "id": "legacy_posts",
        "name": "posts",
        "type": "base",
        "system": False,
        "schema": [
            {"id": "p_title", "name": "title", "type": "text", "required": True, "options": {}},
            {
                "id": "p_category",
                "name": "category",
                "type": "select",
                "options": {"maxSelect": 1, "values": ["news", "blog"]},
            },
            {
                "id": "p_author",
                "name": "author",
                "type": "relation",
                "options": {"collectionId": "legacy_authors", "maxSelect": 1},
            },
            {"id": "p_views", "name": "views", "type": "number", "options": {"min": 0}},
        ],
    },
    {
        "id": "legacy_authors",
        "name": "authors",
        "type": "base",
        "system": False,
        "schema": [{"id": "a_nick", "name": "nickname", "type": "text", "options": {}}],
    },
]


@pytest.fixture
def latest_document():
    return json.loads(json.dumps(LATEST_DOCUMENT))


@pytest.fixture
def legacy_document():
    return json.loads(json.dumps(LEGACY_DOCUMENT))


@pytest.fixture
def latest_bytes():
    return json.dumps(LATEST_DOCUMENT).encode("utf-8")


@pytest.fixture
def legacy_bytes():
    return json.dumps(LEGACY_DOCUMENT).encode("utf-8")


@pytest.fixture
def latest_schemas(latest_document):
    return parse_collections(latest_document)


@pytest.fixture
def legacy_schemas(legacy_document):
    return parse_collections(legacy_document)


@pytest.fixture
def schema_file(tmp_path, latest_bytes):
    path = tmp_path / "pb_schema.json"
    path.write_bytes(latest_bytes)
    return path


@pytest.fixture
def legacy_schema_file(tmp_path, legacy_bytes):
    path = tmp_path / "pb_legacy_schema.json"
    path.write_bytes(legacy_bytes)
    return path
