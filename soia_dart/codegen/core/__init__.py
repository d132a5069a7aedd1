"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratorError,
    GenerationResult,
    OutputFile,
    generate_code,
)
from .schema import (
    ArrayType,
    Constant,
    Field,
    GeneratorInput,
    KeySpec,
    Method,
    Module,
    OptionalType,
    Primitive,
    PrimitiveType,
    Record,
    RecordKind,
    RecordLocation,
    RecordType,
    ResolvedType,
    SchemaError,
    convert_generator_input,
    iter_record_types,
)
from .naming import NameSanitizer, NamingCase, convert_case
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine
from .layout import CodeBuilder, ContextMarker, UnbalancedStructureError, layout

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "OutputFile",
    "generate_code",
    # Schema system - resolved input model
    "ArrayType",
    "Constant",
    "Field",
    "GeneratorInput",
    "KeySpec",
    "Method",
    "Module",
    "OptionalType",
    "Primitive",
    "PrimitiveType",
    "Record",
    "RecordKind",
    "RecordLocation",
    "RecordType",
    "ResolvedType",
    "SchemaError",
    "convert_generator_input",
    "iter_record_types",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "convert_case",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    # Layout pass - language-agnostic
    "CodeBuilder",
    "ContextMarker",
    "UnbalancedStructureError",
    "layout",
]
