"""
ABI binding generation.

Normalizes ABI documents and generates typed bindings for them.
"""

from pathlib import Path
from typing import Union

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    list_all_language_info,
    list_supported_languages,
    register_generator,
)
from .core.generator import BindingGenerator, GeneratedSource, GenerationError
from .core.config import (
    BuildConfig,
    ConfigError,
    ConfigManager,
    GenerationTarget,
    GeneratorConfig,
    discover_targets,
    load_build_config,
    load_config,
)
from .core.normalizer import PatternError, sanitize_abi_text, staged_document
from .pipeline import BuildError, BuildPipeline, BuildReport, Stage, run_build


def generate_binding(
    abi_path: Union[str, Path],
    output_path: Union[str, Path],
    name: str = "Contract",
    language: str = "python",
    **options,
) -> BuildReport:
    """
    Generate bindings for a single ABI document.

    Args:
        abi_path: ABI document to read
        output_path: File to write the bindings to
        name: Binding name
        language: Target language
        **options: Generator configuration overrides

    Returns:
        BuildReport for the single target

    Raises:
        BuildError: If normalization, generation or writing fails
    """
    config = BuildConfig(
        generator=load_config(language, custom_config=options),
        targets=[
            GenerationTarget(
                abi_path=Path(abi_path), output_path=Path(output_path), name=name
            )
        ],
    )
    return run_build(config)


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "BindingGenerator",
    "GeneratedSource",
    "GenerationError",
    "BuildConfig",
    "ConfigError",
    "ConfigManager",
    "GenerationTarget",
    "GeneratorConfig",
    "PatternError",
    "BuildError",
    "BuildPipeline",
    "BuildReport",
    "Stage",
    "discover_targets",
    "generate_binding",
    "get_generator",
    "get_language_info",
    "get_registry",
    "list_all_language_info",
    "list_supported_languages",
    "load_build_config",
    "load_config",
    "register_generator",
    "run_build",
    "sanitize_abi_text",
    "staged_document",
]
