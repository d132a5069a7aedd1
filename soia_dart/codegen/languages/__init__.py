"""
Language-specific code generators.

This module contains generators for different programming languages.
"""

from .dart import DartGenerator, create_dart_generator

__all__ = ["DartGenerator", "create_dart_generator"]
