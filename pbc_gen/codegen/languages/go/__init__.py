"""
Go code generator module.

Generates PocketBase record wrappers, enum constants, relation handles and
file references in Go.
"""

from .assembler import build_emission_model, build_template_data
from .generator import GoGenerator, create_go_generator
from .model import EnhancedTemplateData, TemplateData
from .types import GoType, GoTypeMapper, MappedType, ShapeKind, map_field_type

__all__ = [
    "EnhancedTemplateData",
    "GoGenerator",
    "GoType",
    "GoTypeMapper",
    "MappedType",
    "ShapeKind",
    "TemplateData",
    "build_emission_model",
    "build_template_data",
    "create_go_generator",
    "map_field_type",
]
