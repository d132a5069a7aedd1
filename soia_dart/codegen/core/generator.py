"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional
from pathlib import Path

from .config import GeneratorConfig
from .schema import GeneratorInput, RecordKind
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass
class OutputFile:
    """A generated source file, path relative to the output root."""

    path: str
    code: str


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'dart')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.dart')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @property
    def indent_unit(self) -> str:
        """Indentation unit used by the layout pass."""
        if self.config.use_tabs:
            return "\t"
        return " " * self.config.indent_size

    @abstractmethod
    def generate(self, generator_input: GeneratorInput) -> List[OutputFile]:
        """
        Generate one output file per module.

        Args:
            generator_input: Resolved modules and record map

        Returns:
            Generated files
        """
        pass

    def validate_input(self, generator_input: GeneratorInput) -> List[str]:
        """
        Check the input for issues worth reporting.

        The front-end already validated the schema, so these are warnings only.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if not generator_input.modules:
            warnings.append("No modules to generate")

        for module in generator_input.modules:
            if not (module.records or module.methods or module.constants):
                warnings.append(f"Module '{module.path}' declares nothing")

            for location in module.records:
                record = location.record
                if record.record_type == RecordKind.ENUM and not record.fields:
                    warnings.append(
                        f"Enum {'.'.join(location.ancestors)} only has the unknown variant"
                    )

        return warnings

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: List[OutputFile],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated files
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files=[])
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: CodeGenerator, generator_input: GeneratorInput
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    A failure in any module discards every file: partial output is never
    returned.

    Args:
        generator: Code generator instance
        generator_input: Resolved schema to generate code for

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    try:
        warnings = generator.validate_input(generator_input)
        for warning in warnings:
            logger.warning(warning)

        files = generator.generate(generator_input)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "module_count": len(generator_input.modules),
            "record_count": sum(len(m.records) for m in generator_input.modules),
            "method_count": sum(len(m.methods) for m in generator_input.modules),
            "constant_count": sum(len(m.constants) for m in generator_input.modules),
            "file_count": len(files),
        }
        logger.info("Generated %d %s file(s)", len(files), generator.language_name)

        return GenerationResult(files, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e, exc_info=True)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
