"""
Dart-specific type system for code generation.

Maps resolved soia types to Dart type spellings, serializer expressions,
default values and frozen-copy expressions.
"""

from enum import Enum
from typing import Dict, Optional, Tuple, Union, Mapping

from ...core.generator import GeneratorError
from ...core.schema import (
    ArrayType,
    OptionalType,
    Primitive,
    PrimitiveType,
    RecordKind,
    RecordLocation,
    RecordType,
    ResolvedType,
    SchemaError,
)
from .naming import get_class_name, struct_field_to_dart_name


class TypeFlavor(Enum):
    """
    Which variant of a type's spelling to produce.

    INITIALIZER: the value can be passed to the constructor of a frozen class.
    FROZEN: deeply immutable; all the fields of a frozen class are frozen.
    MAYBE_MUTABLE: union of the frozen and the mutable type; all the fields of
        a mutable class are maybe-mutable.
    MUTABLE: a mutable value. Not every type supports this, e.g. strings and
        numbers are always immutable.
    KIND: the discriminant of an enum.
    """

    INITIALIZER = "initializer"
    FROZEN = "frozen"
    MAYBE_MUTABLE = "maybe-mutable"
    MUTABLE = "mutable"
    KIND = "kind"


class InvalidFlavorError(GeneratorError, TypeError):
    """Raised when a type has no spelling for the requested flavor."""

    pass


PRIMITIVE_DART_TYPES: Dict[Primitive, str] = {
    Primitive.BOOL: "_core.bool",
    Primitive.INT32: "_core.int",
    Primitive.INT64: "_core.int",
    Primitive.UINT64: "_core.BigInt",
    Primitive.FLOAT32: "_core.double",
    Primitive.FLOAT64: "_core.double",
    Primitive.TIMESTAMP: "_core.DateTime",
    Primitive.STRING: "_core.String",
    Primitive.BYTES: "_soia.ByteString",
}

# (expression, is_const)
PRIMITIVE_DEFAULTS: Dict[Primitive, Tuple[str, bool]] = {
    Primitive.BOOL: ("false", True),
    Primitive.INT32: ("0", True),
    Primitive.INT64: ("0", True),
    Primitive.UINT64: ("0", True),
    Primitive.FLOAT32: ("0.0", True),
    Primitive.FLOAT64: ("0.0", True),
    Primitive.TIMESTAMP: ("_soia.unixEpoch", False),
    Primitive.STRING: ('""', True),
    Primitive.BYTES: ("_soia.ByteString.empty", False),
}


class DartTypeSpeller:
    """
    Central engine for mapping resolved soia types to Dart.

    One instance serves one generated file: class names of records declared
    in other modules are qualified relative to that file's module.
    """

    def __init__(self, record_map: Mapping[str, RecordLocation], origin_module_path: str):
        """
        Args:
            record_map: All records known to the compiler, by key
            origin_module_path: Path of the module being generated
        """
        self.record_map = record_map
        self.origin_module_path = origin_module_path
        self._cache: Dict[Tuple[ResolvedType, TypeFlavor, Optional[bool]], str] = {}

    def get_record(self, key: str) -> RecordLocation:
        try:
            return self.record_map[key]
        except KeyError:
            raise SchemaError(f"Unknown record key: {key}")

    def get_class_name(self, record_or_key: Union[str, RecordLocation]) -> str:
        """Name of the frozen Dart class of a record, qualified if imported."""
        if isinstance(record_or_key, str):
            record_or_key = self.get_record(record_or_key)
        return get_class_name(record_or_key, self.origin_module_path)

    def get_dart_type(
        self,
        resolved_type: ResolvedType,
        flavor: TypeFlavor,
        all_records_frozen: Optional[bool] = None,
    ) -> str:
        """
        Spell a type in Dart.

        Args:
            resolved_type: Type to spell
            flavor: Which variant of the type to produce
            all_records_frozen: Treat every nested struct as frozen, used for
                fields that recursively contain their own record

        Returns:
            Dart type expression

        Raises:
            InvalidFlavorError: If the flavor is KIND and the type is not an enum
        """
        cache_key = (resolved_type, flavor, all_records_frozen)
        if cache_key not in self._cache:
            self._cache[cache_key] = self._spell(resolved_type, flavor, all_records_frozen)
        return self._cache[cache_key]

    def _spell(
        self,
        resolved_type: ResolvedType,
        flavor: TypeFlavor,
        all_records_frozen: Optional[bool],
    ) -> str:
        if isinstance(resolved_type, RecordType):
            return self._spell_record(resolved_type, flavor, all_records_frozen)
        elif isinstance(resolved_type, ArrayType):
            return self._spell_array(resolved_type, flavor, all_records_frozen)
        elif isinstance(resolved_type, OptionalType):
            other = self.get_dart_type(resolved_type.other, flavor, all_records_frozen)
            return f"{other}?"
        elif isinstance(resolved_type, PrimitiveType):
            return PRIMITIVE_DART_TYPES[resolved_type.primitive]
        raise TypeError(f"Not a resolved type: {resolved_type!r}")

    def _spell_record(
        self,
        record_type: RecordType,
        flavor: TypeFlavor,
        all_records_frozen: Optional[bool],
    ) -> str:
        location = self.get_record(record_type.key)
        class_name = self.get_class_name(location)

        if location.record.record_type == RecordKind.STRUCT:
            if flavor == TypeFlavor.FROZEN or all_records_frozen:
                return class_name
            elif flavor in (TypeFlavor.MAYBE_MUTABLE, TypeFlavor.INITIALIZER):
                return f"{class_name}_orMutable"
            elif flavor == TypeFlavor.MUTABLE:
                return f"{class_name}_mutable"
            raise InvalidFlavorError(f"Struct {class_name} has no {flavor.value} type")

        # An enum
        if flavor == TypeFlavor.KIND:
            return f"{class_name}_kind"
        return class_name

    def _spell_array(
        self,
        array_type: ArrayType,
        flavor: TypeFlavor,
        all_records_frozen: Optional[bool],
    ) -> str:
        if flavor == TypeFlavor.FROZEN:
            item_type = self.get_dart_type(array_type.item, TypeFlavor.FROZEN, all_records_frozen)
            if array_type.key:
                key_type = array_type.key.key_type
                dart_key_type = self.get_dart_type(key_type, TypeFlavor.FROZEN)
                if isinstance(key_type, RecordType):
                    dart_key_type += "_kind"
                return f"_soia.KeyedIterable<{item_type}, {dart_key_type}>"
            return f"_core.Iterable<{item_type}>"
        elif flavor in (TypeFlavor.INITIALIZER, TypeFlavor.MAYBE_MUTABLE):
            item_type = self.get_dart_type(
                array_type.item, TypeFlavor.MAYBE_MUTABLE, all_records_frozen
            )
            return f"_core.Iterable<{item_type}>"
        elif flavor == TypeFlavor.MUTABLE:
            item_type = self.get_dart_type(
                array_type.item, TypeFlavor.MAYBE_MUTABLE, all_records_frozen
            )
            return f"_core.List<{item_type}>"
        raise InvalidFlavorError(f"Arrays have no {flavor.value} type")

    def get_serializer_expression(self, resolved_type: ResolvedType) -> str:
        """Dart expression evaluating to the serializer of a type."""
        if isinstance(resolved_type, PrimitiveType):
            return f"_soia.Serializers.{resolved_type.primitive.value}"
        elif isinstance(resolved_type, ArrayType):
            item_serializer = self.get_serializer_expression(resolved_type.item)
            if resolved_type.key:
                key_chain = ".".join(resolved_type.key.path)
                path = ".".join(struct_field_to_dart_name(p) for p in resolved_type.key.path)
                item_type = self.get_dart_type(resolved_type.item, TypeFlavor.FROZEN)
                return (
                    "_soia.Serializers.keyedIterable(\n"
                    f"{item_serializer},\n"
                    f"({item_type} it) => it.{path},\n"
                    f'internal__getKeySpec: "{key_chain}",\n)'
                )
            return f"_soia.Serializers.iterable(\n{item_serializer},\n)"
        elif isinstance(resolved_type, OptionalType):
            other_serializer = self.get_serializer_expression(resolved_type.other)
            return f"_soia.Serializers.optional(\n{other_serializer},\n)"
        elif isinstance(resolved_type, RecordType):
            return f"{self.get_class_name(resolved_type.key)}.serializer"
        raise TypeError(f"Not a resolved type: {resolved_type!r}")

    def get_default_expression(self, resolved_type: ResolvedType) -> Tuple[str, bool]:
        """
        Default value of a field of the given type.

        Returns:
            Tuple of (Dart expression, whether the expression is const)
        """
        if isinstance(resolved_type, PrimitiveType):
            return PRIMITIVE_DEFAULTS[resolved_type.primitive]
        elif isinstance(resolved_type, ArrayType):
            return "_soia.KeyedIterable.empty", True
        elif isinstance(resolved_type, OptionalType):
            return "null", True
        elif isinstance(resolved_type, RecordType):
            location = self.get_record(resolved_type.key)
            frozen_type = self.get_dart_type(resolved_type, TypeFlavor.FROZEN)
            if location.record.record_type == RecordKind.STRUCT:
                return f"{frozen_type}.defaultInstance", False
            return f"{frozen_type}.unknown", True
        raise TypeError(f"Not a resolved type: {resolved_type!r}")

    def to_frozen_expression(self, input_expr: str, resolved_type: ResolvedType) -> str:
        """Dart expression converting an initializer value to its frozen form."""
        if isinstance(resolved_type, PrimitiveType):
            if resolved_type.primitive == Primitive.TIMESTAMP:
                return f"{input_expr}.toUtc()"
            return input_expr
        elif isinstance(resolved_type, ArrayType):
            item_to_frozen = self.to_frozen_expression("it", resolved_type.item)
            if resolved_type.key:
                path = ".".join(struct_field_to_dart_name(p) for p in resolved_type.key.path)
                if item_to_frozen == "it":
                    return (
                        f'_soia.internal__keyedCopy({input_expr}, "{path}", '
                        f"(it) => it.{path})"
                    )
                return (
                    f'_soia.internal__keyedMappedCopy({input_expr}, "{path}", '
                    f"(it) => it.{path}, (it) => {item_to_frozen})"
                )
            if item_to_frozen == "it":
                return f"_soia.internal__frozenCopy({input_expr})"
            return f"_soia.internal__frozenMappedCopy({input_expr}, (it) => {item_to_frozen})"
        elif isinstance(resolved_type, OptionalType):
            other_expr = self.to_frozen_expression(input_expr, resolved_type.other)
            if other_expr == input_expr:
                return other_expr
            return f"({input_expr} != null) ? {other_expr} : null"
        elif isinstance(resolved_type, RecordType):
            if self.get_record(resolved_type.key).record.is_struct:
                return f"{input_expr}.toFrozen()"
            return input_expr
        raise TypeError(f"Not a resolved type: {resolved_type!r}")
