"""
Layout pass for generated code.

Emitters push unindented fragments; this module re-flows them into
indented source text by tracking bracket nesting line by line.
"""

import re
from enum import Enum
from typing import List, Optional

from .generator import GeneratorError
from ...logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_INDENT_UNIT = "  "


class UnbalancedStructureError(GeneratorError):
    """Raised when a closing bracket has no open context to close."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"Unbalanced closing bracket at line {line_number}: {line!r}"
        )


class ContextMarker(Enum):
    """Entries of the layout context stack."""

    BRACE = "{"
    PAREN = "("
    BRACKET = "["
    ANGLE = "<"
    CONTINUATION = ":"  # Assignment or named-argument continuation
    CHAIN = "."  # Fluent member-access chain


OPENERS = {
    "{": ContextMarker.BRACE,
    "(": ContextMarker.PAREN,
    "[": ContextMarker.BRACKET,
    "<": ContextMarker.ANGLE,
}

CLOSERS = {
    "}": ContextMarker.BRACE,
    ")": ContextMarker.PAREN,
    "]": ContextMarker.BRACKET,
    ">": ContextMarker.ANGLE,
}

COMMENT_PREFIX = "//"

# Applied in order once all lines are indented
_CLEANUPS = [
    # Brackets enclosing only whitespace
    (re.compile(r"\{\s+\}"), "{}"),
    (re.compile(r"\(\s+\)"), "()"),
    (re.compile(r"\[\s+\]"), "[]"),
    # Empty line following an open curly bracket
    (re.compile(r"(\{\n[ \t]*)\n"), r"\1"),
    # Empty line preceding a closed curly bracket
    (re.compile(r"\n(\n[ \t]*\})"), r"\1"),
    # Consecutive empty lines
    (re.compile(r"\n\n\n+"), "\n\n"),
]

_TRAILING_BLANK_LINE = re.compile(r"\n\n\Z")


class _ContextStack:
    """Stack of context markers; its depth is the current indent level."""

    def __init__(self):
        self._markers: List[ContextMarker] = []

    def __len__(self) -> int:
        return len(self._markers)

    @property
    def top(self) -> Optional[ContextMarker]:
        return self._markers[-1] if self._markers else None

    def push(self, marker: ContextMarker):
        self._markers.append(marker)

    def pop(self) -> ContextMarker:
        return self._markers.pop()

    def close(self, opener: ContextMarker, line_number: int, line: str):
        """Pop markers until the given opener has been popped."""
        while True:
            if not self._markers:
                raise UnbalancedStructureError(line_number, line)
            if self._markers.pop() == opener:
                return


def layout(raw_text: str, indent_unit: str = DEFAULT_INDENT_UNIT) -> str:
    """
    Indent raw generated code.

    The pass only looks at the first and last character of each line, so it
    works for any C-like syntax. The input must not be hand-indented: leading
    whitespace is discarded.

    Args:
        raw_text: Newline-separated code fragments
        indent_unit: String repeated once per nesting level

    Returns:
        Indented code

    Raises:
        UnbalancedStructureError: If a closing bracket has no matching opener
    """
    stack = _ContextStack()
    result = []

    for line_number, raw_line in enumerate(raw_text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            # Don't indent empty lines
            result.append("\n")
            continue

        first_char = line[0]
        if first_char in CLOSERS:
            stack.close(CLOSERS[first_char], line_number, line)
        elif first_char == "." and stack.top != ContextMarker.CHAIN:
            stack.push(ContextMarker.CHAIN)

        result.append(f"{indent_unit * len(stack)}{line}\n")

        if line.startswith(COMMENT_PREFIX):
            continue

        last_char = line[-1]
        if last_char in OPENERS:
            # The next line will be indented
            stack.push(OPENERS[last_char])
        elif last_char in (":", "="):
            if stack.top != ContextMarker.CONTINUATION:
                stack.push(ContextMarker.CONTINUATION)
        elif last_char in (";", ","):
            if stack.top in (ContextMarker.CHAIN, ContextMarker.CONTINUATION):
                stack.pop()

    if len(stack):
        logger.debug("Layout finished with %d open context(s)", len(stack))

    text = "".join(result)
    for pattern, replacement in _CLEANUPS:
        text = pattern.sub(replacement, text)
    return _TRAILING_BLANK_LINE.sub("\n", text)


class CodeBuilder:
    """Accumulates the code fragments of one generated file."""

    def __init__(self, indent_unit: str = DEFAULT_INDENT_UNIT):
        self.indent_unit = indent_unit
        self._fragments: List[str] = []

    def push(self, *fragments: str) -> "CodeBuilder":
        self._fragments.extend(fragments)
        return self

    def push_eol(self) -> "CodeBuilder":
        self._fragments.append("\n")
        return self

    @property
    def text(self) -> str:
        """Raw, unindented text pushed so far."""
        return "".join(self._fragments)

    def build(self) -> str:
        """Lay out the accumulated fragments."""
        return layout(self.text, self.indent_unit)
