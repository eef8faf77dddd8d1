"""
Language-specific binding generators.

This module contains generators for different target languages.
"""

from .python import PythonBindingGenerator, create_python_generator

__all__ = ["PythonBindingGenerator", "create_python_generator"]
