"""
Core schema representation for code generation.

Converts the resolved schema document emitted by the soia compiler
front-end into immutable dataclasses that generators can walk.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union, Any, Iterator
from enum import Enum


class SchemaError(Exception):
    """Exception raised when the front-end document is malformed."""

    pass


class Primitive(Enum):
    """Primitive types supported by soia schemas."""

    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    TIMESTAMP = "timestamp"
    STRING = "string"
    BYTES = "bytes"


class RecordKind(Enum):
    """Kinds of user-defined records."""

    STRUCT = "struct"
    ENUM = "enum"


@dataclass(frozen=True)
class PrimitiveType:
    primitive: Primitive

    @property
    def kind(self) -> str:
        return "primitive"


@dataclass(frozen=True)
class RecordType:
    key: str  # Key into GeneratorInput.record_map

    @property
    def kind(self) -> str:
        return "record"


@dataclass(frozen=True)
class KeySpec:
    """Describes how to extract a key from each item of a keyed array."""

    path: Tuple[str, ...]  # Field names from the item down to the key
    key_type: "ResolvedType"


@dataclass(frozen=True)
class ArrayType:
    item: "ResolvedType"
    key: Optional[KeySpec] = None

    @property
    def kind(self) -> str:
        return "array"


@dataclass(frozen=True)
class OptionalType:
    other: "ResolvedType"

    @property
    def kind(self) -> str:
        return "optional"


ResolvedType = Union[PrimitiveType, ArrayType, OptionalType, RecordType]


@dataclass(frozen=True)
class Field:
    """A struct field or an enum variant."""

    name: str  # lower_underscore for struct fields and value variants
    number: int
    type: Optional[ResolvedType] = None  # None for constant enum variants
    recursive: Optional[str] = None  # None, "soft" or "hard"

    @property
    def is_hard_recursive(self) -> bool:
        return self.recursive == "hard"


@dataclass(frozen=True)
class Record:
    name: str
    record_type: RecordKind
    fields: Tuple[Field, ...] = ()
    removed_numbers: Tuple[int, ...] = ()

    @property
    def is_struct(self) -> bool:
        return self.record_type == RecordKind.STRUCT


@dataclass(frozen=True)
class RecordLocation:
    """A record together with where it is declared."""

    key: str
    record: Record
    ancestors: Tuple[str, ...]  # Outermost record name first, this record last
    module_path: str

    @property
    def record_id(self) -> str:
        return f"{self.module_path}:{'.'.join(self.ancestors)}"


@dataclass(frozen=True)
class Method:
    name: str
    number: int
    request_type: ResolvedType
    response_type: ResolvedType


@dataclass(frozen=True)
class Constant:
    name: str
    type: ResolvedType
    value_as_dense_json: Any = None


@dataclass
class Module:
    """A single .soia file, the unit of generation."""

    path: str
    records: List[RecordLocation] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)
    constants: List[Constant] = field(default_factory=list)
    path_to_imported_names: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class GeneratorInput:
    """Everything the front-end hands over to a code generator."""

    modules: List[Module] = field(default_factory=list)
    record_map: Dict[str, RecordLocation] = field(default_factory=dict)

    def get_record(self, key: str) -> RecordLocation:
        """Get a record location by key."""
        try:
            return self.record_map[key]
        except KeyError:
            raise SchemaError(f"Unknown record key: {key}")


def iter_record_types(resolved_type: ResolvedType) -> Iterator[str]:
    """Yield the key of every record referenced by a type."""
    if isinstance(resolved_type, RecordType):
        yield resolved_type.key
    elif isinstance(resolved_type, ArrayType):
        yield from iter_record_types(resolved_type.item)
        if resolved_type.key:
            yield from iter_record_types(resolved_type.key.key_type)
    elif isinstance(resolved_type, OptionalType):
        yield from iter_record_types(resolved_type.other)


def convert_type(node: Dict[str, Any]) -> ResolvedType:
    """
    Convert a type node of the front-end document.

    Args:
        node: Dict with a "kind" entry and kind-specific entries

    Returns:
        The matching ResolvedType variant
    """
    if not isinstance(node, dict) or "kind" not in node:
        raise SchemaError(f"Expected a type node, got {node!r}")

    kind = node["kind"]
    if kind == "primitive":
        try:
            return PrimitiveType(Primitive(node["primitive"]))
        except (KeyError, ValueError) as e:
            raise SchemaError(f"Invalid primitive type: {node!r}") from e
    elif kind == "array":
        if "item" not in node:
            raise SchemaError(f"Array type without item: {node!r}")
        item = convert_type(node["item"])
        key_node = node.get("key")
        key = None
        if key_node:
            path = key_node.get("path")
            if not path:
                raise SchemaError(f"Array key without path: {node!r}")
            key = KeySpec(path=tuple(path), key_type=convert_type(key_node["key_type"]))
        return ArrayType(item=item, key=key)
    elif kind == "optional":
        if "other" not in node:
            raise SchemaError(f"Optional type without wrapped type: {node!r}")
        return OptionalType(convert_type(node["other"]))
    elif kind == "record":
        if "key" not in node:
            raise SchemaError(f"Record type without key: {node!r}")
        return RecordType(str(node["key"]))
    else:
        raise SchemaError(f"Unknown type kind: {kind}")


def _convert_field(node: Dict[str, Any]) -> Field:
    type_node = node.get("type")
    recursive = node.get("recursive")
    if recursive not in (None, False, "soft", "hard"):
        raise SchemaError(f"Invalid recursive flag on field {node.get('name')}")
    return Field(
        name=node["name"],
        number=int(node.get("number", 0)),
        type=convert_type(type_node) if type_node is not None else None,
        recursive=recursive or None,
    )


def _convert_record(key: str, node: Dict[str, Any]) -> RecordLocation:
    try:
        record_kind = RecordKind(node["record_type"])
        ancestors = tuple(node.get("ancestors") or [node["name"]])
        record = Record(
            name=node.get("name", ancestors[-1]),
            record_type=record_kind,
            fields=tuple(_convert_field(f) for f in node.get("fields", [])),
            removed_numbers=tuple(node.get("removed_numbers", [])),
        )
        return RecordLocation(
            key=key,
            record=record,
            ancestors=ancestors,
            module_path=node["module_path"],
        )
    except KeyError as e:
        raise SchemaError(f"Record {key} is missing entry {e}") from e
    except ValueError as e:
        raise SchemaError(f"Invalid record {key}: {e}") from e


def convert_generator_input(document: Dict[str, Any]) -> GeneratorInput:
    """
    Convert the front-end JSON document to a GeneratorInput.

    Args:
        document: Parsed JSON with "records" and "modules" entries

    Returns:
        GeneratorInput with all record references resolved
    """
    if not isinstance(document, dict):
        raise SchemaError("Generator input must be a JSON object")

    record_map = {
        key: _convert_record(key, node)
        for key, node in (document.get("records") or {}).items()
    }
    generator_input = GeneratorInput(record_map=record_map)

    for module_node in document.get("modules", []):
        if "path" not in module_node:
            raise SchemaError("Module without path")
        module = Module(
            path=module_node["path"],
            records=[generator_input.get_record(k) for k in module_node.get("records", [])],
            path_to_imported_names={
                path: list(names)
                for path, names in (module_node.get("imports") or {}).items()
            },
        )
        for method_node in module_node.get("methods", []):
            try:
                module.methods.append(
                    Method(
                        name=method_node["name"],
                        number=int(method_node["number"]),
                        request_type=convert_type(method_node["request_type"]),
                        response_type=convert_type(method_node["response_type"]),
                    )
                )
            except KeyError as e:
                raise SchemaError(f"Method is missing entry {e}") from e
        for constant_node in module_node.get("constants", []):
            try:
                module.constants.append(
                    Constant(
                        name=constant_node["name"],
                        type=convert_type(constant_node["type"]),
                        value_as_dense_json=constant_node.get("value"),
                    )
                )
            except KeyError as e:
                raise SchemaError(f"Constant is missing entry {e}") from e
        generator_input.modules.append(module)

    # Every record reference must resolve
    for module in generator_input.modules:
        types = [f.type for r in module.records for f in r.record.fields if f.type]
        types += [t for m in module.methods for t in (m.request_type, m.response_type)]
        types += [c.type for c in module.constants]
        for resolved_type in types:
            for key in iter_record_types(resolved_type):
                generator_input.get_record(key)

    return generator_input
