"""
Dart-specific naming utilities and sanitization.

Handles Dart reserved words, Object members, and the members
generated on soia classes.
"""

import re

from ...core.naming import NameSanitizer, NamingCase, convert_case
from ...core.schema import RecordLocation


DART_KEYWORDS = {
    "abstract",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "covariant",
    "default",
    "deferred",
    "do",
    "dynamic",
    "else",
    "enum",
    "export",
    "extends",
    "extension",
    "external",
    "factory",
    "false",
    "final",
    "finally",
    "for",
    "Function",
    "get",
    "hide",
    "if",
    "implements",
    "import",
    "in",
    "interface",
    "is",
    "late",
    "library",
    "mixin",
    "new",
    "null",
    "on",
    "operator",
    "part",
    "required",
    "rethrow",
    "return",
    "set",
    "show",
    "static",
    "super",
    "switch",
    "sync",
    "this",
    "throw",
    "true",
    "try",
    "typedef",
    "var",
    "void",
    "while",
    "with",
    "yield",
}

# Members every Dart object has
DART_OBJECT_SYMBOLS = {
    "hashCode",
    "noSuchMethod",
    "runtimeType",
    "toString",
}

# Members generated on struct classes
GENERATED_STRUCT_SYMBOLS = {
    "defaultInstance",
    "mutable",
    "serializer",
    "toFrozen",
    "toMutable",
}

# Members generated on enum classes
GENERATED_ENUM_SYMBOLS = {
    "isUnknown",
    "kind",
    "serializer",
}

_struct_field_sanitizer = NameSanitizer(
    DART_KEYWORDS, DART_OBJECT_SYMBOLS | GENERATED_STRUCT_SYMBOLS
)
_enum_variant_sanitizer = NameSanitizer(
    DART_KEYWORDS, DART_OBJECT_SYMBOLS | GENERATED_ENUM_SYMBOLS
)
_constant_sanitizer = NameSanitizer(DART_KEYWORDS)


def struct_field_to_dart_name(name: str) -> str:
    """Name of the Dart property for a struct field."""
    return _struct_field_sanitizer.sanitize_name(
        name, NamingCase.LOWER_CAMEL, reserved_prefixes=["mutable_"]
    )


def enum_variant_to_dart_name(name: str) -> str:
    """Name of the Dart member for an enum variant."""
    return _enum_variant_sanitizer.sanitize_name(
        name, NamingCase.LOWER_CAMEL, reserved_prefixes=["wrap_", "create_"]
    )


def to_top_level_constant_name(name: str) -> str:
    """Name of the top-level Dart variable for a constant."""
    return _constant_sanitizer.sanitize_name(
        name, NamingCase.LOWER_CAMEL, reserved_suffixes=["_METHOD"]
    )


def to_upper_camel(name: str) -> str:
    return convert_case(name, NamingCase.UPPER_CAMEL)


def get_module_alias(module_path: str) -> str:
    """Import alias of a generated module, e.g. _lib_foo_bar for foo/bar.soia."""
    path = re.sub(r"\.soia$", "", module_path)
    path = re.sub(r"^@", "external/", path)
    return "_lib_" + re.sub(r"[/-]", "_", path)


def get_class_name(record: RecordLocation, origin_module_path: str) -> str:
    """
    Name of the frozen Dart class for a record.

    Nested records join their ancestors' names with underscores. Records
    declared in another module are qualified with that module's alias.
    """
    name = "_".join(record.ancestors)
    if record.module_path == origin_module_path:
        return name
    return f"{get_module_alias(record.module_path)}.{name}"
