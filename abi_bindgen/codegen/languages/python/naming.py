"""
Identifier rules for generated Python modules.

Field names must not collide with keywords, builtins used in annotations,
or the attributes and methods every generated class defines.
"""

import builtins
import keyword

from ...core.naming import NameSanitizer

PYTHON_RESERVED_WORDS = frozenset(keyword.kwlist) | frozenset(keyword.softkwlist)

PYTHON_BUILTIN_NAMES = frozenset(
    name for name in dir(builtins) if not name.startswith("_")
)

# Defined on every generated call/event class
GENERATED_MEMBER_NAMES = frozenset(
    {
        "SIGNATURE",
        "SELECTOR",
        "TOPIC",
        "ANONYMOUS",
        "INPUT_TYPES",
        "OUTPUT_TYPES",
        "INDEXED_TYPES",
        "DATA_TYPES",
        "encode",
        "decode",
        "decode_output",
        "match_log",
        "decode_log",
        "self",
        "cls",
    }
)


def create_python_sanitizer() -> NameSanitizer:
    """Sanitizer for module-level class names."""
    return NameSanitizer(set(PYTHON_RESERVED_WORDS), set(PYTHON_BUILTIN_NAMES))


def create_member_sanitizer() -> NameSanitizer:
    return NameSanitizer(
        set(PYTHON_RESERVED_WORDS), set(PYTHON_BUILTIN_NAMES | GENERATED_MEMBER_NAMES)
    )
