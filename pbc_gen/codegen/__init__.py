"""
pbc-gen Code Generation Module

Generates Go models from PocketBase schema exports.
"""

from typing import Optional

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.version import SchemaLoadResult, SchemaVersion, load_schema
from .languages.go import build_emission_model
from .registry import get_generator, list_supported_languages


def generate_from_schema(
    data: bytes | str,
    config: Optional[GeneratorConfig] = None,
    language: str = "go",
) -> GenerationResult:
    """
    Run the whole pipeline on a raw schema document.

    Args:
        data: Raw ``pb_schema.json`` content
        config: Generation settings; defaults when omitted
        language: Registered generator name

    Returns:
        GenerationResult with generated code

    Raises:
        SchemaVersionError: Version detection failed or the forced version is invalid
        SchemaParseError: A collection or field entry is malformed
    """
    config = config or load_config()
    loaded = load_schema(data, config.force_version)
    model = build_emission_model(loaded.schemas, config, loaded.schema_version)
    return generate_code(get_generator(language), model)


__all__ = [
    "CodeGenerator",
    "ConfigManager",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "SchemaLoadResult",
    "SchemaVersion",
    "generate_code",
    "generate_from_schema",
    "get_generator",
    "list_supported_languages",
    "load_config",
    "load_schema",
]
