"""
Base generator interface for all code generation targets.

Defines the contract that language generators implement, the error type
raised during generation, and the result container returned by
``generate_code``.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)


class ErrorType(Enum):
    """Category of a generation failure."""

    SCHEMA_VALIDATE = "schema_validate"
    TEMPLATE_PARSE = "template_parse"
    TEMPLATE_EXECUTE = "template_execute"
    FILE_CREATE = "file_create"
    FILE_WRITE = "file_write"
    CODE_GENERATION = "code_generation"


class GeneratorError(Exception):
    """
    Error raised while generating code.

    Carries a category, free-form details and the underlying cause::

        raise GeneratorError(ErrorType.FILE_WRITE, "failed to write output", e)
            .with_detail("path", path)
    """

    def __init__(
        self,
        error_type: ErrorType = ErrorType.CODE_GENERATION,
        message: str = "",
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_type = error_type
        self.message = message
        self.cause = cause
        self.details: Dict[str, Any] = dict(details or {})
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def with_detail(self, key: str, value: Any) -> "GeneratorError":
        self.details[key] = value
        return self

    def is_type(self, error_type: ErrorType) -> bool:
        return self.error_type == error_type

    def __str__(self) -> str:
        text = f"[{self.error_type.value.upper()}] {self.message}"
        if self.details:
            text += " (" + ", ".join(f"{k}={v}" for k, v in self.details.items()) + ")"
        return text


def wrap_template_error(cause: BaseException, template_name: str, phase: str) -> GeneratorError:
    """Wrap a template parse or execution failure."""
    error_type = ErrorType.TEMPLATE_PARSE if phase == "parse" else ErrorType.TEMPLATE_EXECUTE
    return GeneratorError(error_type, f"failed to {phase} template", cause).with_detail(
        "template", template_name
    )


def wrap_file_error(cause: BaseException, operation: str, path: str) -> GeneratorError:
    """Wrap a failure creating the output directory or writing the output file."""
    error_type = ErrorType.FILE_CREATE if operation == "create" else ErrorType.FILE_WRITE
    return GeneratorError(error_type, f"failed to {operation} file", cause).with_detail(
        "path", path
    )


class CodeGenerator(ABC):
    """Abstract base class for code generators."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize generator with optional configuration."""
        self.config = config or {}
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, model: Any) -> str:
        """
        Render source code for an emission model.

        Args:
            model: Assembled emission model

        Returns:
            Generated code as a string
        """
        pass

    def validate_model(self, model: Any) -> List[str]:
        """
        Check a model for problems worth reporting.

        Returns:
            List of warning messages (empty if no issues)
        """
        return []

    def describe(self, model: Any) -> Dict[str, Any]:
        """Metadata about a model, merged into the generation result."""
        return {}

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Trailing whitespace is stripped and runs of blank lines collapse to one.
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Raises:
            GeneratorError: With a template_parse or template_execute category
        """
        try:
            return self.template_engine.render_template(template_name, context)
        except TemplateError as e:
            raise wrap_template_error(e, template_name, e.phase) from e


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[BaseException] = None

    @classmethod
    def error(cls, message: str, exception: Optional[BaseException] = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, model: Any) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        model: Emission model to render

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        warnings = generator.validate_model(model)
        for warning in warnings:
            logger.warning("%s", warning)

        code = generator.format_code(generator.generate(model))

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            **generator.describe(model),
        }
        return GenerationResult(code, warnings, metadata)

    except GeneratorError as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
