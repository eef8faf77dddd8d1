"""
Core code generation components.

Provides base classes and utilities used by the pipeline and by all
language generators.
"""

from .generator import BindingGenerator, GeneratedSource, GenerationError
from .schema import (
    AbiEntry,
    AbiParam,
    AbiSchemaError,
    AbiType,
    BaseKind,
    ContractAbi,
    EntryKind,
    parse_abi,
    parse_type,
)
from .naming import NameSanitizer, NamingCase, is_strict_identifier
from .normalizer import (
    DEFAULT_MARKER,
    PatternError,
    count_rewrites,
    read_interface_document,
    sanitize_abi_text,
    staged_document,
)
from .selectors import event_topic, function_selector, keccak256
from .config import (
    BuildConfig,
    ConfigError,
    ConfigManager,
    GenerationTarget,
    GeneratorConfig,
    discover_targets,
    load_build_config,
    load_config,
    parse_targets,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "BindingGenerator",
    "GeneratedSource",
    "GenerationError",
    # ABI model
    "AbiEntry",
    "AbiParam",
    "AbiSchemaError",
    "AbiType",
    "BaseKind",
    "ContractAbi",
    "EntryKind",
    "parse_abi",
    "parse_type",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    "is_strict_identifier",
    # Normalization
    "DEFAULT_MARKER",
    "PatternError",
    "count_rewrites",
    "read_interface_document",
    "sanitize_abi_text",
    "staged_document",
    # Selectors
    "event_topic",
    "function_selector",
    "keccak256",
    # Configuration system
    "BuildConfig",
    "ConfigError",
    "ConfigManager",
    "GenerationTarget",
    "GeneratorConfig",
    "discover_targets",
    "load_build_config",
    "load_config",
    "parse_targets",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
