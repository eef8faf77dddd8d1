"""Tests for abi_bindgen.codegen.registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from abi_bindgen.codegen.core.config import GeneratorConfig
from abi_bindgen.codegen.languages.python import PythonBindingGenerator
from abi_bindgen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_language_info,
    get_registry,
    is_language_supported,
)


def test_python_is_registered_with_alias() -> None:
    registry = get_registry()

    assert "python" in registry.list_languages()
    assert registry.resolve("PY") == "python"
    assert registry.get_generator_class("py") is PythonBindingGenerator
    assert is_language_supported("python")
    assert not is_language_supported("cobol")


def test_unknown_language_is_an_error() -> None:
    with pytest.raises(RegistryError, match="Available: python"):
        get_registry().resolve("cobol")


def test_language_info() -> None:
    info = get_language_info("py")

    assert info["name"] == "python"
    assert info["file_extension"] == ".py"
    assert info["aliases"] == ["py"]
    assert info["class"] == "PythonBindingGenerator"


def test_create_generator_accepts_override_dict(tmp_path: Path) -> None:
    generator = get_registry().create_generator(
        "python", "Token", tmp_path / "token.abi.json", {"add_comments": False}
    )

    assert isinstance(generator, PythonBindingGenerator)
    assert generator.config.add_comments is False
    assert generator.config.custom["runtime_module"] == "eth_abi"


def test_create_generator_rejects_bad_config(tmp_path: Path) -> None:
    with pytest.raises(RegistryError, match="Invalid config type"):
        get_registry().create_generator("python", "Token", tmp_path / "t.json", "yes")


def test_register_requires_binding_generator() -> None:
    registry = GeneratorRegistry()

    with pytest.raises(RegistryError):
        registry.register("text", str)


def test_register_and_unregister() -> None:
    registry = GeneratorRegistry()
    registry.register("python", PythonBindingGenerator, aliases=["py", "python3"])

    assert registry.get_aliases_for_language("python") == ["py", "python3"]

    registry.unregister("python")

    assert registry.list_languages() == []
    assert not registry.is_supported("py")


def test_alias_conflict_is_rejected() -> None:
    registry = GeneratorRegistry()
    registry.register("python", PythonBindingGenerator, aliases=["py"])

    with pytest.raises(RegistryError, match="already points"):
        registry.register("pyi", PythonBindingGenerator, aliases=["py"])


def test_registered_generator_receives_config(tmp_path: Path) -> None:
    config = GeneratorConfig(marker_prefix="p")

    generator = get_registry().create_generator("py", "Token", tmp_path / "t.json", config)

    assert generator.config is config
    assert generator.name == "Token"
