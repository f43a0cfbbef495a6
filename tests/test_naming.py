import pytest

from pbc_gen.codegen.core.naming import (
    ACRONYMS,
    IdentifierCategory,
    comment_text,
    quote_string,
    sanitize_identifier,
    split_words,
    to_constant_name,
    to_pascal_case,
)
from pbc_gen.codegen.languages.go.naming import validate_go_package_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("some_id_field", "SomeIDField"),
        ("HelloWorld", "HelloWorld"),
        ("user-profile name", "UserProfileName"),
        ("api_url", "ApiURL"),
        ("JSON_data", "JSONData"),
        ("html", "HTML"),
        ("iD", "ID"),
        ("Url", "URL"),
        ("hTmL", "HTML"),
        ("user_Id", "UserID"),
        ("jSoN_uRl", "JSONURL"),
        ("__leading__trailing__", "LeadingTrailing"),
        ("", ""),
    ],
)
def test_to_pascal_case(name, expected):
    assert to_pascal_case(name) == expected


@pytest.mark.parametrize("name", ["some_id_field", "camelCase", "a-b c", "userURL", "x", "iD", "hTmL_Url"])
def test_to_pascal_case_is_idempotent(name):
    once = to_pascal_case(name)
    assert to_pascal_case(once) == once


def test_split_words_drops_empty_parts():
    assert split_words("a__b--c  d") == ["a", "b", "c", "d"]


def test_to_constant_name():
    assert to_constant_name("devices", "status", "online") == "DevicesStatusOnline"
    assert to_constant_name("user_items", "item_id", "in-stock") == "UserItemsItemIDInStock"


@pytest.mark.parametrize(
    "name, category, expected",
    [
        ("123invalid", IdentifierCategory.ENUM, "Enum123invalid"),
        ("9Relation", IdentifierCategory.RELATION, "Relation9Relation"),
        ("", IdentifierCategory.RELATION, "RelationType"),
        ("!!!", IdentifierCategory.ENUM, "EnumValue"),
        ("Héllo-World!", IdentifierCategory.FILE, "HlloWorld"),
        ("42", IdentifierCategory.COLLECTION, "Collection42"),
        ("", IdentifierCategory.FIELD, "Field"),
    ],
)
def test_sanitize_identifier(name, category, expected):
    assert sanitize_identifier(name, category) == expected


def test_sanitize_identifier_never_starts_with_digit():
    for category in IdentifierCategory:
        result = sanitize_identifier(to_pascal_case("123invalid"), category)
        assert result
        assert result[0].isalpha()


def test_quote_string_escapes():
    assert quote_string('a"b\\c\n') == '"a\\"b\\\\c\\n"'
    assert quote_string("tab\there") == '"tab\\there"'


def test_quote_string_escapes_other_control_characters():
    assert quote_string("nul\x00vt\x0bdel\x7f") == '"nul\\x00vt\\x0bdel\\x7f"'
    assert quote_string("c1\x85 ls\u2028") == '"c1\\u0085 ls\\u2028"'
    assert quote_string("héllo") == '"héllo"'


def test_comment_text_flattens_control_characters():
    assert comment_text("posts\n// injected") == "posts // injected"
    assert comment_text("a\r\n\x00\x0bb") == "a b"
    assert comment_text("\tname\n") == "name"


def test_acronym_table_is_read_only():
    with pytest.raises(TypeError):
        ACRONYMS["api"] = "API"


def test_validate_go_package_name():
    assert validate_go_package_name("models") == []
    assert validate_go_package_name("") == ["Package name cannot be empty"]
    assert validate_go_package_name("func") == ["'func' is a Go reserved word"]
    assert "Package names should be lowercase" in validate_go_package_name("Models")
    assert "Package names should not contain underscores" in validate_go_package_name("my_models")
    assert validate_go_package_name("my-models") == ["'my-models' is not a valid Go identifier"]
