"""
Core code generation components.

Schema model, version reconciliation, naming, field analysis and the
generator base classes shared by language backends.
"""

from .analyzer import EnhancedFieldInfo, analyze_enhanced_field
from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .generator import (
    CodeGenerator,
    ErrorType,
    GenerationResult,
    GeneratorError,
    generate_code,
)
from .naming import IdentifierCategory, sanitize_identifier, to_constant_name, to_pascal_case
from .schema import CollectionSchema, FieldOptions, FieldSchema, SchemaParseError, parse_collections
from .templates import TemplateEngine, TemplateError, create_template_engine
from .version import (
    SchemaLoadResult,
    SchemaVersion,
    SchemaVersionDetector,
    SchemaVersionError,
    load_schema,
)

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "ErrorType",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Schema model
    "CollectionSchema",
    "FieldOptions",
    "FieldSchema",
    "SchemaParseError",
    "parse_collections",
    # Version reconciliation
    "SchemaLoadResult",
    "SchemaVersion",
    "SchemaVersionDetector",
    "SchemaVersionError",
    "load_schema",
    # Naming
    "IdentifierCategory",
    "sanitize_identifier",
    "to_constant_name",
    "to_pascal_case",
    # Field analysis
    "EnhancedFieldInfo",
    "analyze_enhanced_field",
    # Configuration
    "ConfigError",
    "ConfigManager",
    "GeneratorConfig",
    "load_config",
    # Templates
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
