# FILE: tests/conftest.py
"""
Shared fixtures for the soia-dart test suite.

Provides a small front-end document with two modules and the matching
record map, so tests don't have to spell out schema JSON themselves.
"""

import copy

import pytest

from soia_dart.codegen.core.schema import (
    ArrayType,
    Field,
    KeySpec,
    Primitive,
    PrimitiveType,
    Record,
    RecordKind,
    RecordLocation,
    RecordType,
)


def prim(name):
    return {"kind": "primitive", "primitive": name}


def record_ref(key):
    return {"kind": "record", "key": key}


DOCUMENT = {
    "records": {
        "m/a.soia:StructA": {
            "name": "StructA",
            "record_type": "struct",
            "ancestors": ["StructA"],
            "module_path": "m/a.soia",
            "fields": [
                {"name": "id", "number": 0, "type": prim("int32")},
                {"name": "user_name", "number": 1, "type": prim("string")},
                {"name": "created_at", "number": 2, "type": prim("timestamp")},
            ],
        },
        "m/a.soia:Color": {
            "name": "Color",
            "record_type": "enum",
            "ancestors": ["Color"],
            "module_path": "m/a.soia",
            "fields": [
                {"name": "RED", "number": 1},
                {"name": "point", "number": 2, "type": record_ref("m/a.soia:StructA")},
            ],
        },
        "m/a.soia:Tree": {
            "name": "Tree",
            "record_type": "struct",
            "ancestors": ["Tree"],
            "module_path": "m/a.soia",
            "fields": [
                {
                    "name": "parent",
                    "number": 0,
                    "type": record_ref("m/a.soia:Tree"),
                    "recursive": "hard",
                },
                {
                    "name": "children",
                    "number": 1,
                    "type": {"kind": "array", "item": record_ref("m/a.soia:Tree")},
                    "recursive": "soft",
                },
            ],
        },
        "m/b.soia:Holder": {
            "name": "Holder",
            "record_type": "struct",
            "ancestors": ["Holder"],
            "module_path": "m/b.soia",
            "fields": [
                {
                    "name": "items",
                    "number": 0,
                    "type": {
                        "kind": "array",
                        "item": record_ref("m/a.soia:StructA"),
                        "key": {"path": ["id"], "key_type": prim("int32")},
                    },
                },
                {
                    "name": "color",
                    "number": 1,
                    "type": {"kind": "optional", "other": record_ref("m/a.soia:Color")},
                },
            ],
        },
    },
    "modules": [
        {
            "path": "m/a.soia",
            "records": ["m/a.soia:StructA", "m/a.soia:Color", "m/a.soia:Tree"],
            "methods": [
                {
                    "name": "GetA",
                    "number": 1001,
                    "request_type": record_ref("m/a.soia:StructA"),
                    "response_type": prim("string"),
                }
            ],
            "constants": [
                {"name": "MAX_COUNT", "type": prim("int32"), "value": 3},
            ],
        },
        {
            "path": "m/b.soia",
            "records": ["m/b.soia:Holder"],
            "imports": {"m/a.soia": ["StructA", "Color"]},
        },
    ],
}


@pytest.fixture
def document():
    """A front-end document with two modules, m/a.soia and m/b.soia."""
    return copy.deepcopy(DOCUMENT)


@pytest.fixture
def record_map():
    """Record map with a struct, an enum and a nested struct in m/a.soia."""
    struct_a = Record(
        name="StructA",
        record_type=RecordKind.STRUCT,
        fields=(
            Field("id", 0, PrimitiveType(Primitive.INT32)),
            Field("color", 1, RecordType("m/a.soia:Color")),
        ),
    )
    color = Record(
        name="Color",
        record_type=RecordKind.ENUM,
        fields=(Field("RED", 1), Field("point", 2, RecordType("m/a.soia:StructA"))),
    )
    inner = Record(
        name="Inner",
        record_type=RecordKind.STRUCT,
        fields=(Field("values", 0, ArrayType(PrimitiveType(Primitive.INT64))),),
    )
    return {
        "m/a.soia:StructA": RecordLocation(
            "m/a.soia:StructA", struct_a, ("StructA",), "m/a.soia"
        ),
        "m/a.soia:Color": RecordLocation("m/a.soia:Color", color, ("Color",), "m/a.soia"),
        "m/a.soia:StructA.Inner": RecordLocation(
            "m/a.soia:StructA.Inner", inner, ("StructA", "Inner"), "m/a.soia"
        ),
    }


@pytest.fixture
def struct_a():
    return RecordType("m/a.soia:StructA")


@pytest.fixture
def color():
    return RecordType("m/a.soia:Color")


@pytest.fixture
def keyed_array(struct_a):
    """Array of StructA keyed by its int32 'id' field."""
    return ArrayType(
        item=struct_a, key=KeySpec(path=("id",), key_type=PrimitiveType(Primitive.INT32))
    )
