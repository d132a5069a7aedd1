# FILE: tests/test_generator.py
"""End-to-end tests for the Dart code generator."""

import pytest

from soia_dart.codegen import generate_from_document
from soia_dart.codegen.core.config import GeneratorConfig
from soia_dart.codegen.core.generator import OutputFile, generate_code
from soia_dart.codegen.core.layout import UnbalancedStructureError
from soia_dart.codegen.core.schema import (
    Field,
    GeneratorInput,
    Module,
    Record,
    RecordKind,
    RecordLocation,
    RecordType,
    SchemaError,
    convert_generator_input,
)
from soia_dart.codegen.languages.dart import DartGenerator, create_dart_generator


def generate_files(document, **config):
    generator = DartGenerator(GeneratorConfig(**config))
    result = generate_code(generator, convert_generator_input(document))
    assert result.success, result.error_message
    return {f.path: f.code for f in result.files}


@pytest.fixture
def files(document):
    return generate_files(document)


@pytest.fixture
def code_a(files):
    return files["m/a.dart"]


@pytest.fixture
def code_b(files):
    return files["m/b.dart"]


class TestOutputFiles:
    def test_one_file_per_module(self, files):
        assert sorted(files) == ["m/a.dart", "m/b.dart"]

    def test_output_path(self):
        generator = DartGenerator()
        assert generator.get_output_path("foo/bar.soia") == "foo/bar.dart"
        assert generator.get_output_path("x.soia.soia") == "x.soia.dart"

    def test_output_file_type(self, document):
        generator = create_dart_generator()
        output = generator.generate(convert_generator_input(document))
        assert all(isinstance(f, OutputFile) for f in output)

    def test_deterministic(self, document):
        assert generate_files(document) == generate_files(document)

    def test_no_trailing_blank_line(self, code_a, code_b):
        for code in (code_a, code_b):
            assert code.endswith(";\n") or code.endswith("}\n")
            assert not code.endswith("\n\n")


class TestPreamble:
    def test_banner(self, code_a):
        assert code_a.startswith("//  ______")
        assert "//   dart pub add soia\n" in code_a

    def test_no_banner(self, document):
        code = generate_files(document, add_banner=False)["m/a.dart"]
        assert code.startswith(
            'import "dart:core" as _core;\n'
            'import "package:soia/soia.dart" as _soia;\n'
        )

    def test_client_package(self, document):
        code = generate_files(document, client_package="soia_client")["m/a.dart"]
        assert 'import "package:soia_client/soia_client.dart" as _soia;\n' in code

    def test_module_imports(self, code_a, code_b):
        assert 'import "./a.dart" as _lib_m_a;\n' in code_b
        assert "_lib_" not in code_a

    def test_import_from_parent_directory(self):
        generator_input = GeneratorInput(
            modules=[
                Module(
                    path="x/y/z.soia",
                    path_to_imported_names={"x/w.soia": ["W"]},
                )
            ]
        )
        code = DartGenerator().generate(generator_input)[0].code
        assert 'import "../w.dart" as _lib_x_w;\n' in code


class TestStructs:
    def test_or_mutable_class(self, code_a):
        assert (
            "sealed class StructA_orMutable {\n"
            "  _core.int get id;\n"
            "  _core.String get userName;\n"
            "  _core.DateTime get createdAt;\n"
            "\n"
            "  StructA toFrozen();\n"
            "}\n"
        ) in code_a

    def test_frozen_fields(self, code_a):
        assert (
            "final class StructA implements StructA_orMutable {\n"
            "  final _core.int id;\n"
            "  final _core.String userName;\n"
            "  final _core.DateTime createdAt;\n"
            "  _soia.UnrecognizedFields<StructA>? _unrecognizedFields;\n"
        ) in code_a

    def test_public_constructor(self, code_a):
        assert (
            "  factory StructA({\n"
            "    required _core.int id,\n"
            "    required _core.String userName,\n"
            "    required _core.DateTime createdAt,\n"
            "  }) => StructA._(\n"
            "    id,\n"
            "    userName,\n"
            "    createdAt.toUtc(),\n"
            "  );\n"
        ) in code_a

    def test_default_instance(self, code_a):
        assert (
            "  static final defaultInstance = StructA._(\n"
            "    0,\n"
            '    "",\n'
            "    _soia.unixEpoch,\n"
            "  );\n"
        ) in code_a

    def test_mutable_class(self, code_a):
        assert (
            "final class StructA_mutable implements StructA_orMutable {\n"
            "  @_core.override\n"
            "  _core.int id;\n"
        ) in code_a
        assert (
            "  StructA toFrozen() => StructA(\n"
            "    id: this.id,\n"
            "    userName: this.userName,\n"
            "    createdAt: this.createdAt,\n"
            "  ).._unrecognizedFields = this._unrecognizedFields;\n"
        ) in code_a

    def test_to_mutable(self, code_a):
        assert "  StructA_mutable toMutable() => StructA_mutable._(\n    this.id,\n" in code_a
        assert "  static StructA_mutable mutable() => StructA_mutable._(\n" in code_a

    def test_hard_recursive_field(self, code_a):
        assert "  Tree get parent;\n" in code_a
        assert (
            "  final Tree? _rec_parent;\n"
            "  @_core.override\n"
            "  Tree get parent => _rec_parent ?? Tree.defaultInstance;\n"
        ) in code_a
        assert "  Tree._(\n    this._rec_parent,\n    this.children,\n  );\n" in code_a
        assert (
            "  static final defaultInstance = Tree._(\n"
            "    null,\n"
            "    _soia.KeyedIterable.empty,\n"
            "  );\n"
        ) in code_a

    def test_soft_recursive_field(self, code_a):
        assert "  _core.Iterable<Tree_orMutable> get children;\n" in code_a
        assert "  final _core.Iterable<Tree> children;\n" in code_a
        assert "    _soia.internal__frozenMappedCopy(children, (it) => it.toFrozen()),\n" in code_a

    def test_imported_types(self, code_b):
        assert "  final _soia.KeyedIterable<_lib_m_a.StructA, _core.int> items;\n" in code_b
        assert "  final _lib_m_a.Color? color;\n" in code_b
        assert "    required _core.Iterable<_lib_m_a.StructA_orMutable> items,\n" in code_b

    def test_empty_struct(self, document):
        document["records"]["m/a.soia:Empty"] = {
            "name": "Empty",
            "record_type": "struct",
            "ancestors": ["Empty"],
            "module_path": "m/a.soia",
            "fields": [],
        }
        document["modules"][0]["records"].append("m/a.soia:Empty")
        code = generate_files(document)["m/a.dart"]
        assert "sealed class Empty_orMutable {\n  Empty toFrozen();\n}\n" in code
        assert "  factory Empty() => Empty._();\n" in code
        assert "  Empty._();\n" in code


class TestEnums:
    def test_sealed_class(self, code_a):
        assert (
            "sealed class Color {\n"
            "  static const Color unknown = Color_unknown._();\n"
            "  static const Color red = Color_RedConst._();\n"
            "\n"
            "  static Color wrapPoint(StructA_orMutable value) => "
            "Color_PointWrapper._(value.toFrozen());\n"
        ) in code_a
        assert "  Color_kind get kind;\n}\n" in code_a

    def test_create_factory(self, code_a):
        assert (
            "  static Color createPoint({\n"
            "    required _core.int id,\n"
            "    required _core.String userName,\n"
            "    required _core.DateTime createdAt,\n"
            "  }) => Color_PointWrapper._(StructA(\n"
            "    id: id,\n"
            "    userName: userName,\n"
            "    createdAt: createdAt,\n"
            "  ));\n"
        ) in code_a

    def test_option_classes(self, code_a):
        assert (
            "final class Color_unknown implements Color {\n"
            "  const Color_unknown._();\n"
            "\n"
            "  @_core.override\n"
            "  Color_kind get kind => Color_kind.constUnknown;\n"
            "}\n"
        ) in code_a
        assert "  Color_kind get kind => Color_kind.redConst;\n" in code_a
        assert (
            "final class Color_PointWrapper implements Color {\n"
            "  final StructA value;\n"
            "\n"
            "  Color_PointWrapper._(this.value);\n"
        ) in code_a

    def test_kind_enum(self, code_a):
        assert (
            "enum Color_kind {\n"
            "  constUnknown,\n"
            "  redConst,\n"
            "  pointWrapper,\n"
            "}\n"
        ) in code_a


class TestMethodsAndConstants:
    def test_method(self, code_a):
        assert (
            "final _soia.Method<\n"
            "  StructA,\n"
            "  _core.String\n"
            "> GetA =\n"
            "  _soia.Method(\n"
            '    "GetA",\n'
            "    1001,\n"
            "    StructA.serializer,\n"
            "    _soia.Serializers.string,\n"
            "  );\n"
        ) in code_a

    def test_constant(self, code_a):
        assert code_a.endswith(
            "final _core.int maxCount =\n"
            '  _soia.Serializers.int32.fromJsonCode("3");\n'
        )

    def test_constant_with_structured_value(self, document):
        document["modules"][0]["constants"] = [
            {
                "name": "DEFAULT_A",
                "type": {"kind": "record", "key": "m/a.soia:StructA"},
                "value": [1, "a$b"],
            }
        ]
        code = generate_files(document)["m/a.dart"]
        assert (
            "final StructA defaultA =\n"
            '  StructA.serializer.fromJsonCode("[1,\\"a\\$b\\"]");\n'
        ) in code

    def test_constants_disabled(self, document):
        code = generate_files(document, emit_constants=False)["m/a.dart"]
        assert "maxCount" not in code
        assert "> GetA =\n" in code


class TestConfigOptions:
    def test_tabs(self, document):
        code = generate_files(document, use_tabs=True)["m/a.dart"]
        assert "\tfinal _core.int id;\n" in code
        assert "\t\trequired _core.int id,\n" in code

    def test_indent_size(self, document):
        code = generate_files(document, indent_size=4)["m/a.dart"]
        assert "\n    final _core.int id;\n" in code

    def test_line_ending(self, document):
        code = generate_files(document, line_ending="\r\n")["m/a.dart"]
        assert "\r\n" in code
        assert code.count("\n") == code.count("\r\n")


class TestValidation:
    def test_renamed_field_warning(self, document):
        document["records"]["m/a.soia:StructA"]["fields"].append(
            {"name": "mutable_items", "number": 3, "type": {"kind": "primitive", "primitive": "bool"}}
        )
        result = generate_code(DartGenerator(), convert_generator_input(document))
        assert result.success
        assert any("mutableItems_" in w for w in result.warnings)

    def test_module_warnings(self):
        generator_input = GeneratorInput(modules=[Module(path="empty.txt")])
        warnings = DartGenerator().validate_input(generator_input)
        assert "Module 'empty.txt' declares nothing" in warnings
        assert "Module path empty.txt does not end with .soia" in warnings

    def test_no_modules_warning(self):
        assert DartGenerator().validate_input(GeneratorInput()) == ["No modules to generate"]


class TestGenerateCode:
    def test_metadata(self, document):
        result = generate_code(DartGenerator(), convert_generator_input(document))
        assert result.metadata["language"] == "dart"
        assert result.metadata["module_count"] == 2
        assert result.metadata["record_count"] == 4
        assert result.metadata["method_count"] == 1
        assert result.metadata["constant_count"] == 1
        assert result.metadata["file_count"] == 2

    def test_unknown_record_fails_whole_generation(self):
        broken = RecordLocation(
            "m:Broken",
            Record(
                name="Broken",
                record_type=RecordKind.STRUCT,
                fields=(Field("other", 0, RecordType("m:Missing")),),
            ),
            ("Broken",),
            "m.soia",
        )
        generator_input = GeneratorInput(
            modules=[Module(path="ok.soia"), Module(path="m.soia", records=[broken])],
            record_map={"m:Broken": broken},
        )
        result = generate_code(DartGenerator(), generator_input)
        assert not result.success
        assert result.files == []
        assert isinstance(result.exception, SchemaError)
        assert result.error_message.startswith("Code generation failed:")

    def test_layout_failure_fails_generation(self, document):
        class BrokenMethodGenerator(DartGenerator):
            def render_template(self, template_name, context):
                if template_name == "method.dart.j2":
                    return ")\n"
                return super().render_template(template_name, context)

        result = generate_code(BrokenMethodGenerator(), convert_generator_input(document))
        assert not result.success
        assert isinstance(result.exception, UnbalancedStructureError)

    def test_generate_from_document(self, document):
        result = generate_from_document(document, language="flutter")
        assert result.success
        assert [f.path for f in result.files] == ["m/a.dart", "m/b.dart"]

    def test_generate_from_document_with_config_dict(self, document):
        result = generate_from_document(document, config={"add_banner": False})
        assert result.files[0].code.startswith('import "dart:core" as _core;\n')
