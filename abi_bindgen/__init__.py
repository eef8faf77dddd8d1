"""
abi-bindgen: typed contract bindings from ABI documents.

Sanitizes ABI field names that are not valid identifiers, then runs a
binding generator over the sanitized copy and writes the result.
"""

__version__ = "0.1.0"

from .codegen import (
    BuildConfig,
    BuildError,
    BuildPipeline,
    GenerationError,
    GenerationTarget,
    GeneratorConfig,
    PatternError,
    generate_binding,
    load_build_config,
    run_build,
    sanitize_abi_text,
)

__all__ = [
    "BuildConfig",
    "BuildError",
    "BuildPipeline",
    "GenerationError",
    "GenerationTarget",
    "GeneratorConfig",
    "PatternError",
    "generate_binding",
    "load_build_config",
    "run_build",
    "sanitize_abi_text",
    "__version__",
]
