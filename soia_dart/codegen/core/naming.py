"""
Naming utilities for safe code generation.

Handles case conversions of schema names and conflicts with
reserved words of the target language.
"""

import re
from typing import Set, Dict, List, Optional
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    LOWER_UNDERSCORE = "lower_underscore"  # user_name
    LOWER_CAMEL = "lowerCamel"             # userName
    UPPER_CAMEL = "UpperCamel"             # UserName
    UPPER_UNDERSCORE = "UPPER_UNDERSCORE"  # USER_NAME


def split_words(name: str) -> List[str]:
    """Split a name in any supported case into lowercase words."""
    # Insert separator before uppercase letters following lowercase/digits
    spaced = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    return [word.lower() for word in re.split(r'[_\-\s]+', spaced) if word]


def convert_case(name: str, target_case: NamingCase) -> str:
    """
    Convert a name to the target case.

    Args:
        name: Name in lower_underscore, UPPER_UNDERSCORE or camel case
        target_case: Desired case style

    Returns:
        Converted name
    """
    words = split_words(name)
    if not words:
        return name

    if target_case == NamingCase.LOWER_UNDERSCORE:
        return '_'.join(words)
    elif target_case == NamingCase.UPPER_UNDERSCORE:
        return '_'.join(words).upper()
    elif target_case == NamingCase.LOWER_CAMEL:
        return words[0] + ''.join(word.capitalize() for word in words[1:])
    elif target_case == NamingCase.UPPER_CAMEL:
        return ''.join(word.capitalize() for word in words)
    else:
        return name


class NameSanitizer:
    """Handles case conversion and reserved word conflicts."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin or generated names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.LOWER_CAMEL,
                      suffix_on_conflict: str = "_",
                      reserved_prefixes: Optional[List[str]] = None,
                      reserved_suffixes: Optional[List[str]] = None) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original schema name
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for conflicts
            reserved_prefixes: Schema name prefixes that also force the suffix
            reserved_suffixes: Schema name suffixes that also force the suffix

        Returns:
            Sanitized name safe for use
        """
        cache_key = (
            f"{name}|{target_case.value}|{suffix_on_conflict}|"
            f"{reserved_prefixes}|{reserved_suffixes}"
        )
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = convert_case(name, target_case)

        conflict = self.is_reserved(converted)
        if reserved_prefixes and any(name.startswith(p) for p in reserved_prefixes):
            conflict = True
        if reserved_suffixes and any(name.endswith(s) for s in reserved_suffixes):
            conflict = True

        final_name = f"{converted}{suffix_on_conflict}" if conflict else converted
        self._name_cache[cache_key] = final_name
        return final_name

    def is_reserved(self, name: str) -> bool:
        """Check a converted name against reserved words and builtins."""
        return name in self.reserved_words or name in self.builtin_types
