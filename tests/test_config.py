import json

import pytest

from pbc_gen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    Severity,
    ValidationReport,
    is_valid_package_name,
    load_config,
)


@pytest.fixture
def manager():
    return ConfigManager()


def test_defaults():
    config = load_config()
    assert config.schema_path == "./pb_schema.json"
    assert config.output_file == "./models.gen.go"
    assert config.package_name == "models"
    assert config.json_library == "github.com/goccy/go-json"
    assert config.generate_enums and config.generate_relations and config.generate_files
    assert not config.use_generic
    assert config.force_version is None
    assert config.any_enhanced


def test_overrides_skip_none(manager):
    config = manager.get_config({"package_name": "pb", "generate_files": False, "output_file": None})
    assert config.package_name == "pb"
    assert not config.generate_files
    assert config.output_file == "./models.gen.go"


def test_file_then_overrides(manager, tmp_path):
    path = tmp_path / "pbc.json"
    path.write_text(
        json.dumps({"package_name": "fromfile", "use_generic": True, "team": "core"}),
        encoding="utf-8",
    )
    config = manager.get_config({"package_name": "cli"}, path)
    assert config.package_name == "cli"
    assert config.use_generic
    assert config.custom == {"team": "core"}


@pytest.mark.parametrize(
    "name, content",
    [
        ("pbc.json", "{not json"),
        ("pbc.json", "[1, 2]"),
        ("pbc.yaml", "{}"),
    ],
)
def test_bad_config_files(manager, tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        manager.get_config(config_file=path)


def test_missing_config_file(manager, tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        manager.get_config(config_file=tmp_path / "nope.json")


def test_validate_ok(manager, schema_file, tmp_path):
    config = GeneratorConfig(schema_path=str(schema_file), output_file=str(tmp_path / "out.go"))
    report = manager.validate_config(config)
    assert report.issues == []
    assert str(report) == "no validation issues"


def test_validate_errors(manager, tmp_path):
    config = GeneratorConfig(
        schema_path=str(tmp_path / "missing.json"),
        package_name="my-models",
        force_version="v2",
        output_file="",
    )
    report = manager.validate_config(config)
    assert report.has_errors()
    assert {issue.field for issue in report.errors} == {
        "schema_path",
        "package_name",
        "force_version",
        "output_file",
    }


def test_validate_warnings(manager, schema_file, tmp_path):
    existing = tmp_path / "models.gen.go"
    existing.write_text("package models\n", encoding="utf-8")

    report = manager.validate_config(
        GeneratorConfig(schema_path=str(schema_file), output_file=str(existing))
    )
    assert not report.has_errors()
    assert [issue.field for issue in report.warnings] == ["output_file"]

    report = manager.validate_config(
        GeneratorConfig(schema_path=str(schema_file), output_file=str(tmp_path / "a" / "b.go"))
    )
    assert report.warnings[0].severity is Severity.WARNING
    assert "does not exist" in report.warnings[0].message


def test_validate_without_files(manager):
    config = GeneratorConfig(schema_path="/does/not/exist.json", force_version="LEGACY")
    assert not manager.validate_config(config, check_files=False).issues


def test_report_extend_and_str():
    report = ValidationReport()
    other = ValidationReport()
    other.add("package_name", "bad", value="x")
    report.extend(other)
    assert str(report) == "validation failed: [ERROR] package_name: bad"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("models", True),
        ("my_models", True),
        ("class", True),
        ("", False),
        ("_", False),
        ("1models", False),
        ("func", False),
        ("package", False),
        ("modèles", False),
    ],
)
def test_is_valid_package_name(name, expected):
    assert is_valid_package_name(name) is expected


def test_go_keyword_package_name_is_an_error(manager, schema_file, tmp_path):
    output = str(tmp_path / "models.go")

    report = manager.validate_config(
        GeneratorConfig(schema_path=str(schema_file), output_file=output, package_name="func")
    )
    assert [(issue.field, issue.value) for issue in report.errors] == [("package_name", "func")]

    report = manager.validate_config(
        GeneratorConfig(schema_path=str(schema_file), output_file=output, package_name="class")
    )
    assert not report.has_errors()
