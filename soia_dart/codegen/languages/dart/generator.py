"""
Dart code generator implementation.

Generates frozen and mutable Dart classes for soia structs, sealed
classes for soia enums, method descriptors and constants.
"""

import json
import posixpath
import re
from typing import Dict, List, Optional, Any
from pathlib import Path

from ...core.config import GeneratorConfig, load_config
from ...core.generator import CodeGenerator, OutputFile
from ...core.layout import CodeBuilder
from ...core.schema import (
    Constant,
    Field,
    GeneratorInput,
    Method,
    Module,
    RecordKind,
    RecordLocation,
    RecordType,
)
from .naming import (
    enum_variant_to_dart_name,
    get_module_alias,
    struct_field_to_dart_name,
    to_top_level_constant_name,
    to_upper_camel,
)
from .types import DartTypeSpeller, TypeFlavor
from ....logging_config import get_logger

logger = get_logger(__name__)


class DartGenerator(CodeGenerator):
    """Code generator for Dart, one file per soia module."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Dart generator with configuration."""
        super().__init__(config)

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "dart"

    @property
    def file_extension(self) -> str:
        """Return Dart file extension."""
        return ".dart"

    def get_template_directory(self) -> Optional[Path]:
        """Return the Dart templates directory."""
        return Path(__file__).parent / "templates"

    def generate(self, generator_input: GeneratorInput) -> List[OutputFile]:
        """Generate one Dart file per module."""
        files = []
        for module in generator_input.modules:
            logger.debug("Generating Dart code for %s", module.path)
            code = DartSourceFileGenerator(self, module, generator_input.record_map).generate()
            files.append(OutputFile(path=self.get_output_path(module.path), code=code))
        return files

    def get_output_path(self, module_path: str) -> str:
        """Path of the generated file for a module, e.g. foo/bar.dart."""
        return re.sub(r"\.soia$", self.file_extension, module_path)

    def validate_input(self, generator_input: GeneratorInput) -> List[str]:
        """Validate input for Dart generation."""
        warnings = super().validate_input(generator_input)

        for module in generator_input.modules:
            if not module.path.endswith(".soia"):
                warnings.append(f"Module path {module.path} does not end with .soia")
            for location in module.records:
                for field in location.record.fields:
                    dart_name = (
                        struct_field_to_dart_name(field.name)
                        if location.record.is_struct
                        else enum_variant_to_dart_name(field.name)
                    )
                    if dart_name.endswith("_"):
                        warnings.append(
                            f"Field {'.'.join(location.ancestors)}.{field.name} "
                            f"renamed to {dart_name} to avoid Dart naming conflicts"
                        )

        return warnings


class DartSourceFileGenerator:
    """Generates the code for one Dart file."""

    def __init__(
        self,
        generator: DartGenerator,
        module: Module,
        record_map: Dict[str, RecordLocation],
    ):
        self.generator = generator
        self.config = generator.config
        self.module = module
        self.type_speller = DartTypeSpeller(record_map, module.path)
        self.code = CodeBuilder(generator.indent_unit)

    def generate(self) -> str:
        self._write_preamble()

        for location in self.module.records:
            self.code.push_eol()
            if location.record.record_type == RecordKind.STRUCT:
                self._write_classes_for_struct(location)
            else:
                self._write_classes_for_enum(location)

        for method in self.module.methods:
            self._write_method(method)

        if self.config.emit_constants:
            for constant in self.module.constants:
                self._write_constant(constant)

        code = self.code.build()
        if self.config.line_ending != "\n":
            code = code.replace("\n", self.config.line_ending)
        return code

    def _write_preamble(self):
        this_dir = posixpath.dirname(self.module.path) or "."
        imports = []
        for path in self.module.path_to_imported_names:
            dart_path = posixpath.relpath(path, this_dir).replace(".soia", ".dart", 1)
            if not dart_path.startswith("."):
                dart_path = f"./{dart_path}"
            imports.append({"path": dart_path, "alias": get_module_alias(path)})

        context = {
            "add_banner": self.config.add_banner,
            "client_package": self.config.client_package,
            "imports": imports,
        }
        self.code.push(self.generator.render_template("preamble.dart.j2", context))

    def _write_classes_for_struct(self, struct: RecordLocation):
        speller = self.type_speller
        push = self.code.push
        fields = struct.record.fields
        class_name = speller.get_class_name(struct)

        push(f"sealed class {class_name}_orMutable {{\n")
        for field in fields:
            field_type = speller.get_dart_type(
                field.type, TypeFlavor.MAYBE_MUTABLE, field.is_hard_recursive
            )
            push(f"{field_type} get {struct_field_to_dart_name(field.name)};\n")
        if fields:
            self.code.push_eol()
        push(
            f"{class_name} toFrozen();\n",
            "}\n\n",  # class _orMutable
            f"final class {class_name} implements {class_name}_orMutable {{\n",
        )

        for field in fields:
            field_name = struct_field_to_dart_name(field.name)
            field_type = speller.get_dart_type(field.type, TypeFlavor.FROZEN)
            if field.is_hard_recursive:
                default_expr, _ = speller.get_default_expression(field.type)
                push(
                    f"final {field_type}? _rec_{field_name};\n",
                    "@_core.override\n",
                    f"{field_type} get {field_name} => _rec_{field_name} ?? {default_expr};\n",
                )
            else:
                push(f"final {field_type} {field_name};\n")
        push(f"_soia.UnrecognizedFields<{class_name}>? _unrecognizedFields;\n\n")

        # Public constructor
        push(f"factory {class_name}(")
        push("{\n" if fields else "")
        for field in fields:
            field_type = speller.get_dart_type(field.type, TypeFlavor.INITIALIZER)
            push(f"required {field_type} {struct_field_to_dart_name(field.name)},\n")
        push("}" if fields else "")
        push(f") => {class_name}._(\n")
        for field in fields:
            field_name = struct_field_to_dart_name(field.name)
            push(f"{speller.to_frozen_expression(field_name, field.type)},\n")
        push(");\n\n")

        # Private constructor
        push(f"{class_name}._(\n")
        for field in fields:
            field_name = struct_field_to_dart_name(field.name)
            if field.is_hard_recursive:
                push(f"this._rec_{field_name},\n")
            else:
                push(f"this.{field_name},\n")
        push(");\n\n")

        push(f"static final defaultInstance = {class_name}._(\n")
        for field in fields:
            if field.is_hard_recursive:
                push("null,\n")
            else:
                push(f"{speller.get_default_expression(field.type)[0]},\n")
        push(
            ");\n\n",
            f"static {class_name}_mutable mutable() => {class_name}_mutable._(\n",
        )
        for field in fields:
            push(f"{speller.get_default_expression(field.type)[0]},\n")
        push(");\n\n")

        push(
            "@_core.deprecated\n",
            "@_core.override\n",
            f"{class_name} toFrozen() => this;\n\n",
            f"{class_name}_mutable toMutable() => {class_name}_mutable._(\n",
        )
        for field in fields:
            push(f"this.{struct_field_to_dart_name(field.name)},\n")
        push(");\n", "}\n\n")  # class frozen

        push(f"final class {class_name}_mutable implements {class_name}_orMutable {{\n\n")
        for field in fields:
            field_type = speller.get_dart_type(
                field.type, TypeFlavor.MAYBE_MUTABLE, field.is_hard_recursive
            )
            push(
                "@_core.override\n",
                f"{field_type} {struct_field_to_dart_name(field.name)};\n",
            )
        push(
            f"_soia.UnrecognizedFields<{class_name}>? _unrecognizedFields;\n\n",
            f"{class_name}_mutable._(\n",
        )
        for field in fields:
            push(f"this.{struct_field_to_dart_name(field.name)},\n")
        push(
            ");\n\n",
            "@_core.override\n",
            f"{class_name} toFrozen() => {class_name}(\n",
        )
        for field in fields:
            field_name = struct_field_to_dart_name(field.name)
            push(f"{field_name}: this.{field_name},\n")
        push(
            ").._unrecognizedFields = this._unrecognizedFields;\n",
            "}\n\n",  # class _mutable
        )

    def _write_classes_for_enum(self, enum: RecordLocation):
        speller = self.type_speller
        push = self.code.push
        class_name = speller.get_class_name(enum)
        constant_fields = [f for f in enum.record.fields if f.type is None]
        value_fields = [f for f in enum.record.fields if f.type is not None]

        push(
            f"sealed class {class_name} {{\n",
            f"static const {class_name} unknown = {class_name}_unknown._();\n",
        )
        for field in constant_fields:
            push(
                f"static const {class_name} {enum_variant_to_dart_name(field.name)} = "
                f"{self._enum_option_class(class_name, field)}._();\n"
            )
        if constant_fields:
            self.code.push_eol()
        for field in value_fields:
            self._write_enum_factories(class_name, field)
        push(f"{class_name}_kind get kind;\n", "}\n\n")  # class enum

        push(
            f"final class {class_name}_unknown implements {class_name} {{\n",
            f"const {class_name}_unknown._();\n\n",
            "@_core.override\n",
            f"{class_name}_kind get kind => {class_name}_kind.constUnknown;\n",
            "}\n\n",
        )
        for field in constant_fields:
            option_class = self._enum_option_class(class_name, field)
            push(
                f"final class {option_class} implements {class_name} {{\n",
                f"const {option_class}._();\n\n",
                "@_core.override\n",
                f"{class_name}_kind get kind => {class_name}_kind.{self._enum_kind_name(field)};\n",
                "}\n\n",
            )
        for field in value_fields:
            option_class = self._enum_option_class(class_name, field)
            value_type = speller.get_dart_type(field.type, TypeFlavor.FROZEN)
            push(
                f"final class {option_class} implements {class_name} {{\n",
                f"final {value_type} value;\n\n",
                f"{option_class}._(this.value);\n\n",
                "@_core.override\n",
                f"{class_name}_kind get kind => {class_name}_kind.{self._enum_kind_name(field)};\n",
                "}\n\n",
            )

        push(f"enum {class_name}_kind {{\n", "constUnknown,\n")
        for field in enum.record.fields:
            push(f"{self._enum_kind_name(field)},\n")
        push("}\n\n")

    def _write_enum_factories(self, class_name: str, field: Field):
        speller = self.type_speller
        push = self.code.push
        option_class = self._enum_option_class(class_name, field)
        upper_name = to_upper_camel(field.name)
        initializer_type = speller.get_dart_type(field.type, TypeFlavor.INITIALIZER)
        to_frozen = speller.to_frozen_expression("value", field.type)
        push(
            f"static {class_name} wrap{upper_name}({initializer_type} value) => "
            f"{option_class}._({to_frozen});\n\n"
        )

        if not isinstance(field.type, RecordType):
            return
        struct = speller.get_record(field.type.key)
        if not struct.record.is_struct:
            return
        struct_class = speller.get_class_name(struct)
        struct_fields = struct.record.fields
        push(f"static {class_name} create{upper_name}(")
        push("{\n" if struct_fields else "")
        for struct_field in struct_fields:
            field_type = speller.get_dart_type(struct_field.type, TypeFlavor.INITIALIZER)
            push(f"required {field_type} {struct_field_to_dart_name(struct_field.name)},\n")
        push("}" if struct_fields else "")
        push(f") => {option_class}._({struct_class}(\n")
        for struct_field in struct_fields:
            field_name = struct_field_to_dart_name(struct_field.name)
            push(f"{field_name}: {field_name},\n")
        push("));\n\n")

    @staticmethod
    def _enum_option_class(class_name: str, field: Field) -> str:
        base = to_upper_camel(field.name)
        if field.type is None:
            return f"{class_name}_{base}Const"
        return f"{class_name}_{base}Wrapper"

    @staticmethod
    def _enum_kind_name(field: Field) -> str:
        base = to_upper_camel(field.name)
        lower = base[:1].lower() + base[1:]
        return f"{lower}Const" if field.type is None else f"{lower}Wrapper"

    def _write_method(self, method: Method):
        speller = self.type_speller
        context = {
            "name": method.name,
            "method_name": method.name,
            "number": method.number,
            "request_type": speller.get_dart_type(method.request_type, TypeFlavor.FROZEN),
            "response_type": speller.get_dart_type(method.response_type, TypeFlavor.FROZEN),
            "request_serializer": speller.get_serializer_expression(method.request_type),
            "response_serializer": speller.get_serializer_expression(method.response_type),
        }
        self.code.push(self.generator.render_template("method.dart.j2", context))

    def _write_constant(self, constant: Constant):
        speller = self.type_speller
        context = {
            "name": to_top_level_constant_name(constant.name),
            "type": speller.get_dart_type(constant.type, TypeFlavor.FROZEN),
            "serializer": speller.get_serializer_expression(constant.type),
            "dense_json": json.dumps(
                constant.value_as_dense_json, separators=(",", ":"), ensure_ascii=False
            ),
        }
        self.code.push(self.generator.render_template("constant.dart.j2", context))


# Factory functions
def create_dart_generator(config: Optional[Dict[str, Any]] = None) -> DartGenerator:
    """Create a Dart generator with default configuration plus overrides."""
    return DartGenerator(load_config("dart", custom_config=config))
