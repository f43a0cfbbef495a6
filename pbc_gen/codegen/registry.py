"""
Language name to generator lookup.
"""

from typing import Any, Dict, List, Optional, Type

from .core.generator import CodeGenerator

ALIASES = {"golang": "go"}

_generators: Optional[Dict[str, Type[CodeGenerator]]] = None


class RegistryError(Exception):
    """Exception raised for an unknown language name."""

    pass


def _registered_generators() -> Dict[str, Type[CodeGenerator]]:
    global _generators
    if _generators is None:
        from .languages.go import GoGenerator

        _generators = {"go": GoGenerator}
    return _generators


def get_generator(language: str = "go", config: Optional[Dict[str, Any]] = None) -> CodeGenerator:
    """
    Instantiate the generator for a language name or alias.

    Raises:
        RegistryError: If no generator handles the language
    """
    key = language.lower()
    generators = _registered_generators()
    generator_class = generators.get(ALIASES.get(key, key))
    if generator_class is None:
        raise RegistryError(
            f"No generator registered for language: {language}. "
            f"Available: {', '.join(list_supported_languages())}"
        )
    return generator_class(config)


def list_supported_languages() -> List[str]:
    return sorted(_registered_generators())
