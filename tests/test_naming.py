# FILE: tests/test_naming.py
"""Tests for case conversion and Dart name sanitization."""

import pytest

from soia_dart.codegen.core.naming import (
    NameSanitizer,
    NamingCase,
    convert_case,
    split_words,
)
from soia_dart.codegen.core.schema import Record, RecordKind, RecordLocation
from soia_dart.codegen.languages.dart.naming import (
    enum_variant_to_dart_name,
    get_class_name,
    get_module_alias,
    struct_field_to_dart_name,
    to_top_level_constant_name,
    to_upper_camel,
)


class TestConvertCase:
    def test_split_words(self):
        assert split_words("user_name") == ["user", "name"]
        assert split_words("userName") == ["user", "name"]
        assert split_words("USER_NAME") == ["user", "name"]

    @pytest.mark.parametrize(
        "target, expected",
        [
            (NamingCase.LOWER_UNDERSCORE, "user_id_list"),
            (NamingCase.LOWER_CAMEL, "userIdList"),
            (NamingCase.UPPER_CAMEL, "UserIdList"),
            (NamingCase.UPPER_UNDERSCORE, "USER_ID_LIST"),
        ],
    )
    def test_from_lower_underscore(self, target, expected):
        assert convert_case("user_id_list", target) == expected

    def test_empty_name(self):
        assert convert_case("", NamingCase.LOWER_CAMEL) == ""


class TestNameSanitizer:
    def test_conflict_gets_suffix(self):
        sanitizer = NameSanitizer({"class"}, {"String"})
        assert sanitizer.sanitize_name("class") == "class_"
        assert sanitizer.sanitize_name("string", NamingCase.UPPER_CAMEL) == "String_"
        assert sanitizer.sanitize_name("name") == "name"

    def test_custom_suffix(self):
        sanitizer = NameSanitizer({"for"})
        assert sanitizer.sanitize_name("for", suffix_on_conflict="Field") == "forField"

    def test_reserved_prefix_and_suffix(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("get_x", reserved_prefixes=["get_"]) == "getX_"
        assert sanitizer.sanitize_name("x_list", reserved_suffixes=["_list"]) == "xList_"

    def test_cached_result_is_stable(self):
        sanitizer = NameSanitizer({"is"})
        assert sanitizer.sanitize_name("is") == sanitizer.sanitize_name("is") == "is_"


class TestDartNames:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("user_name", "userName"),
            ("id", "id"),
            ("class", "class_"),
            ("hash_code", "hashCode_"),
            ("to_string", "toString_"),
            ("default_instance", "defaultInstance_"),
            ("serializer", "serializer_"),
            ("mutable_items", "mutableItems_"),
        ],
    )
    def test_struct_field(self, name, expected):
        assert struct_field_to_dart_name(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("RED", "red"),
            ("point", "point"),
            ("kind", "kind_"),
            ("is_unknown", "isUnknown_"),
            ("wrap_value", "wrapValue_"),
            ("create_point", "createPoint_"),
            ("switch", "switch_"),
        ],
    )
    def test_enum_variant(self, name, expected):
        assert enum_variant_to_dart_name(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("MAX_COUNT", "maxCount"),
            ("NULL", "null_"),
            ("GET_USER_METHOD", "getUserMethod_"),
        ],
    )
    def test_top_level_constant(self, name, expected):
        assert to_top_level_constant_name(name) == expected

    def test_upper_camel(self):
        assert to_upper_camel("RED") == "Red"
        assert to_upper_camel("some_value") == "SomeValue"


class TestModuleAndClassNames:
    def test_module_alias(self):
        assert get_module_alias("foo/bar.soia") == "_lib_foo_bar"
        assert get_module_alias("my-lib/x.soia") == "_lib_my_lib_x"
        assert get_module_alias("@org/pkg/x.soia") == "_lib_external_org_pkg_x"

    def test_class_name_same_module(self):
        record = Record(name="Inner", record_type=RecordKind.STRUCT)
        location = RecordLocation("k", record, ("Outer", "Inner"), "foo/bar.soia")
        assert get_class_name(location, "foo/bar.soia") == "Outer_Inner"

    def test_class_name_other_module(self):
        record = Record(name="Thing", record_type=RecordKind.ENUM)
        location = RecordLocation("k", record, ("Thing",), "foo/bar.soia")
        assert get_class_name(location, "foo/baz.soia") == "_lib_foo_bar.Thing"
