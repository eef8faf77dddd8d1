"""
Python type mapping for ABI types.

Maps resolved ABI types onto the Python values ``eth_abi`` produces and
accepts, and renders them as type hints.
"""

from dataclasses import dataclass, field
from typing import Dict

from ...core.schema import AbiType, BaseKind

PYTHON_TYPE_MAP = {
    BaseKind.UINT: "int",
    BaseKind.INT: "int",
    BaseKind.ADDRESS: "str",
    BaseKind.BOOL: "bool",
    BaseKind.STRING: "str",
    BaseKind.BYTES: "bytes",
    BaseKind.FIXED_BYTES: "bytes",
    BaseKind.FUNCTION: "bytes",
    BaseKind.TUPLE: "tuple",
}


@dataclass
class PythonTypeConfig:
    """Overrides for the default ABI to Python type mapping."""

    type_overrides: Dict[str, str] = field(default_factory=dict)


class PythonTypeMapper:
    """Turns ABI types into Python type hints."""

    def __init__(self, config: PythonTypeConfig = None):
        self.config = config or PythonTypeConfig()

    def hint(self, abi_type: AbiType) -> str:
        """Type hint for a value of ``abi_type``."""
        canonical = abi_type.canonical()
        if canonical in self.config.type_overrides:
            return self.config.type_overrides[canonical]

        if abi_type.is_array:
            return f"tuple[{self.hint(abi_type.element())}, ...]"

        if abi_type.base == BaseKind.TUPLE and abi_type.components:
            inner = ", ".join(self.hint(c.abi_type) for c in abi_type.components)
            return f"tuple[{inner}]"

        return PYTHON_TYPE_MAP[abi_type.base]

    def topic_hint(self, abi_type: AbiType) -> str:
        """Type hint for an indexed event value."""
        # Reference types are stored as their hash in the topic
        if abi_type.is_reference:
            return "bytes"
        return self.hint(abi_type)
