"""
Dart code generator module.

Generates frozen/mutable Dart classes, sealed enum classes, method
descriptors and constants from resolved soia modules.
"""

from .generator import DartGenerator, DartSourceFileGenerator, create_dart_generator
from .types import DartTypeSpeller, InvalidFlavorError, TypeFlavor
from .naming import (
    enum_variant_to_dart_name,
    get_class_name,
    get_module_alias,
    struct_field_to_dart_name,
    to_top_level_constant_name,
)

__all__ = [
    "DartGenerator",
    "DartSourceFileGenerator",
    "DartTypeSpeller",
    "InvalidFlavorError",
    "TypeFlavor",
    "create_dart_generator",
    # Naming helpers
    "enum_variant_to_dart_name",
    "get_class_name",
    "get_module_alias",
    "struct_field_to_dart_name",
    "to_top_level_constant_name",
]
