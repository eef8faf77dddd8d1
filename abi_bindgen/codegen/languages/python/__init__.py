"""
Python binding generator module.

Generates Python dataclass bindings for contract calls and events.
"""

from .generator import PythonBindingGenerator, create_python_generator
from .naming import create_member_sanitizer, create_python_sanitizer
from .types import PythonTypeConfig, PythonTypeMapper

__all__ = [
    # Generator
    "PythonBindingGenerator",
    "create_python_generator",
    # Naming
    "create_python_sanitizer",
    "create_member_sanitizer",
    # Types
    "PythonTypeConfig",
    "PythonTypeMapper",
]
