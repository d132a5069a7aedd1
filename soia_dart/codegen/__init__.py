"""
soia Dart Code Generation Module

Generates Dart code from resolved soia schemas.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.schema import GeneratorInput, SchemaError, convert_generator_input
from .core.config import GeneratorConfig, ConfigManager, load_config
from .core.layout import UnbalancedStructureError, layout
from .languages.dart.types import InvalidFlavorError, TypeFlavor


def generate_from_document(document, language="dart", config=None):
    """
    Generate code from the front-end JSON document.

    Args:
        document: Parsed front-end document (dict)
        language: Target language name
        config: Generator configuration, dict or path

    Returns:
        GenerationResult with generated files
    """
    generator_input = convert_generator_input(document)
    generator = get_generator(language, config)
    return generate_code(generator, generator_input)


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "GeneratorInput",
    "SchemaError",
    "GeneratorConfig",
    "ConfigManager",
    "InvalidFlavorError",
    "TypeFlavor",
    "UnbalancedStructureError",
    "convert_generator_input",
    "generate_code",
    "generate_from_document",
    "get_generator",
    "get_language_info",
    "layout",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
]
