"""
Utility functions for the JSON Schema model generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z]+(?![a-z])|[A-Z][a-z]*|[0-9]+")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries and separators."""
    return _WORD_PATTERN.findall(text.replace("-", " ").replace("_", " "))


def camel_to_snake_case(text: str) -> str:
    """Convert camelCase, PascalCase or kebab-case text to snake_case.

    Examples:
        "byteOffset" -> "byte_offset"
        "KHR_texture_transform" -> "khr_texture_transform"
        "URIType" -> "uri_type"
        "extras" -> "extras"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    return "_".join(word.lower() for word in _split_into_words(text))


def indent_lines(lines: list[str], level: int = 1, width: int = 4) -> list[str]:
    """Indent non-empty lines by the given number of levels."""
    prefix = " " * (level * width)
    return [prefix + line if line else line for line in lines]
