"""soia Dart code generator plugin."""

__version__ = "1.0.0"
