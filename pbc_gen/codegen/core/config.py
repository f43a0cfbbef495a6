"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

VALID_SCHEMA_VERSIONS = ("latest", "legacy")


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Input/output
    schema_path: str = "./pb_schema.json"
    output_file: str = "./models.gen.go"

    # Go output
    package_name: str = "models"
    json_library: str = "github.com/goccy/go-json"

    # Optional artifact categories
    generate_enums: bool = True
    generate_relations: bool = True
    generate_files: bool = True

    # Accessor style: Get[T] helpers and no pointer wrapping
    use_generic: bool = False

    # "latest" or "legacy"; None keeps the detected version
    force_version: Optional[str] = None
    validate_schema: bool = False
    verbose: bool = False

    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def any_enhanced(self) -> bool:
        return self.generate_enums or self.generate_relations or self.generate_files


class Severity(Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found while validating configuration or schemas."""

    field: str
    message: str
    severity: Severity = Severity.ERROR
    value: Any = None

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.field}: {self.message}"


@dataclass
class ValidationReport:
    """Collected validation issues."""

    issues: List[ValidationIssue] = field(default_factory=list)

    def add(
        self, field_name: str, message: str, severity: Severity = Severity.ERROR, value: Any = None
    ) -> None:
        self.issues.append(ValidationIssue(field_name, message, severity, value))

    def extend(self, other: "ValidationReport") -> None:
        self.issues.extend(other.issues)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.WARNING]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def __str__(self) -> str:
        if not self.issues:
            return "no validation issues"
        return "validation failed: " + "; ".join(str(issue) for issue in self.issues)


def is_valid_package_name(name: str) -> bool:
    """Check that a name can be used as a Go package clause."""
    # languages.go imports this module at load time
    from ..languages.go.naming import is_valid_go_package_name

    return is_valid_go_package_name(name)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = asdict(GeneratorConfig())

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Build the effective configuration.

        Args:
            custom_config: Overrides, applied last
            config_file: Path to a JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = dict(self._defaults)
        base_config["custom"] = {}

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)
            logger.debug("Loaded %d settings from %s", len(file_config), config_file)

        if custom_config:
            base_config.update(
                {key: value for key, value in custom_config.items() if value is not None}
            )

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def validate_config(self, config: GeneratorConfig, check_files: bool = True) -> ValidationReport:
        """
        Validate a configuration before running generation.

        Args:
            config: Configuration to check
            check_files: Also check the schema file and output location

        Returns:
            ValidationReport with errors and warnings
        """
        report = ValidationReport()

        if not config.package_name:
            report.add("package_name", "package name cannot be empty")
        elif not is_valid_package_name(config.package_name):
            report.add(
                "package_name",
                "package name must be a Go identifier that is not a keyword",
                value=config.package_name,
            )

        if config.force_version and config.force_version.lower() not in VALID_SCHEMA_VERSIONS:
            report.add(
                "force_version",
                "must be 'latest' or 'legacy'",
                value=config.force_version,
            )

        if not config.output_file:
            report.add("output_file", "output path cannot be empty")

        if not check_files:
            return report

        if not config.schema_path:
            report.add("schema_path", "schema path cannot be empty")
        elif not Path(config.schema_path).exists():
            report.add("schema_path", "schema file does not exist", value=config.schema_path)

        if config.output_file:
            output = Path(config.output_file)
            if not output.parent.exists():
                report.add(
                    "output_file",
                    f"output directory does not exist: {output.parent}",
                    Severity.WARNING,
                    config.output_file,
                )
            elif output.exists():
                report.add(
                    "output_file",
                    "output file exists and will be overwritten",
                    Severity.WARNING,
                    config.output_file,
                )

        return report


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return ConfigManager().get_config(custom_config, config_file)
