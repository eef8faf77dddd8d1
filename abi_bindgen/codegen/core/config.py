"""
Configuration management for binding generation.

Handles loading and merging configuration from JSON files, providing
defaults and validation for generator settings and the list of
generation targets.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .naming import NameSanitizer, NamingCase
from .normalizer import PatternError, validate_marker

DEFAULT_CONFIG_FILE = "abigen.json"
DEFAULT_ABI_PATTERN = "*.abi.json"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for binding generators."""

    # Target
    language: str = "python"

    # Normalization
    marker_prefix: str = "u_"

    # Staging
    keep_staging: bool = False
    staging_dir: Optional[str] = None

    # Output
    add_comments: bool = True

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationTarget:
    """One ABI document and where its bindings go."""

    abi_path: Path
    output_path: Path
    name: str

    def describe(self) -> str:
        return f"{self.name} ({self.abi_path} -> {self.output_path})"


@dataclass
class BuildConfig:
    """Generator settings plus the ordered list of targets."""

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    targets: List[GenerationTarget] = field(default_factory=list)


# Expected JSON types of GeneratorConfig settings
_SETTING_TYPES = {
    "language": (str,),
    "marker_prefix": (str,),
    "keep_staging": (bool,),
    "staging_dir": (str, Path, type(None)),
    "add_comments": (bool,),
    "custom": (dict,),
}


def _check_setting(key: str, value: Any):
    """
    Reject settings whose JSON type is wrong, e.g. ``"keep_staging": "false"``.

    Raises:
        ConfigError: If ``value`` has the wrong type for ``key``
    """
    expected = _SETTING_TYPES.get(key)
    if expected and not isinstance(value, expected):
        names = " or ".join("null" if t is type(None) else t.__name__ for t in expected)
        raise ConfigError(f"Setting '{key}' must be {names}, got {value!r}")


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["python"] = {
            "language": "python",
            "marker_prefix": "u_",
            "add_comments": True,
            "custom": {
                "runtime_module": "eth_abi",
            },
        }

    def get_config(
        self,
        language: Optional[str] = None,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        file_config: Dict[str, Any] = {}
        if config_file:
            file_config = self._load_config_file(config_file)
            file_config.pop("targets", None)

        overrides = dict(custom_config or {})
        language = (
            language
            or overrides.get("language")
            or file_config.get("language")
            or "python"
        )

        base_config = json.loads(json.dumps(self._configs.get(language, {})))
        base_config["language"] = language
        self._merge(base_config, file_config)
        self._merge(base_config, overrides)

        return self._dict_to_config(base_config)

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]):
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base.setdefault("custom", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f for f in GeneratorConfig.__dataclass_fields__}
        ignored = {"targets", "abi_dir", "output_dir", "pattern"}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in ignored:
                continue
            if key in known_fields:
                _check_setting(key, value)
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def load_build_config(
        self,
        config_file: Union[str, Path] = DEFAULT_CONFIG_FILE,
        custom_config: Optional[Dict[str, Any]] = None,
        extension: str = ".py",
    ) -> BuildConfig:
        """
        Load generator settings and targets from a build configuration file.

        Targets come from an explicit ``targets`` list, or are discovered
        from ``abi_dir``/``output_dir``. Relative paths are resolved against
        the configuration file's directory.

        Raises:
            ConfigError: If the file or its targets are malformed
        """
        path = Path(config_file)
        raw = self._load_config_file(path)
        base_dir = path.resolve().parent

        generator = self.get_config(custom_config=custom_config, config_file=path)
        if generator.staging_dir:
            generator.staging_dir = str(_resolve(base_dir, generator.staging_dir))

        if "targets" in raw:
            targets = parse_targets(raw["targets"], base_dir)
        elif "abi_dir" in raw and "output_dir" in raw:
            targets = discover_targets(
                _resolve(base_dir, raw["abi_dir"]),
                _resolve(base_dir, raw["output_dir"]),
                pattern=raw.get("pattern", DEFAULT_ABI_PATTERN),
                extension=extension,
            )
        else:
            raise ConfigError(
                f"{path} must define 'targets' or both 'abi_dir' and 'output_dir'"
            )

        return BuildConfig(generator=generator, targets=targets)

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Check generator settings before a build starts.

        Returns:
            Human-readable problems; empty when the settings look usable
        """
        problems = []

        try:
            validate_marker(config.marker_prefix)
        except PatternError as e:
            problems.append(str(e))

        if config.staging_dir and not Path(config.staging_dir).is_dir():
            problems.append(f"Staging directory does not exist: {config.staging_dir}")

        return problems


def _resolve(base_dir: Path, value: Union[str, Path]) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def parse_targets(
    items: Any, base_dir: Union[str, Path] = "."
) -> List[GenerationTarget]:
    """
    Build targets from a list of ``{"name", "abi", "output"}`` objects.

    Raises:
        ConfigError: If an entry is missing a field or paths collide
    """
    if not isinstance(items, list):
        raise ConfigError("'targets' must be a list")

    base_dir = Path(base_dir)
    targets = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigError(f"Target #{index} must be an object")
        missing = [key for key in ("name", "abi", "output") if not item.get(key)]
        if missing:
            raise ConfigError(f"Target #{index} is missing: {', '.join(missing)}")
        targets.append(
            GenerationTarget(
                abi_path=_resolve(base_dir, item["abi"]),
                output_path=_resolve(base_dir, item["output"]),
                name=str(item["name"]),
            )
        )

    check_targets(targets)
    return targets


def check_targets(targets: List[GenerationTarget]):
    """
    Reject target lists where outputs collide with each other or with inputs.

    Raises:
        ConfigError: On a collision
    """
    inputs = {t.abi_path.resolve() for t in targets}
    seen_outputs = set()
    for target in targets:
        output = target.output_path.resolve()
        if output in inputs:
            raise ConfigError(f"Output path overwrites an ABI input: {output}")
        if output in seen_outputs:
            raise ConfigError(f"Output path used by more than one target: {output}")
        seen_outputs.add(output)


def discover_targets(
    abi_dir: Union[str, Path],
    output_dir: Union[str, Path],
    pattern: str = DEFAULT_ABI_PATTERN,
    extension: str = ".py",
) -> List[GenerationTarget]:
    """
    Find ABI documents in a directory and pair each with an output path.

    ``abi/erc20_token.abi.json`` becomes a target named ``Erc20Token``
    written to ``<output_dir>/erc20_token<extension>``.

    Raises:
        ConfigError: If the ABI directory does not exist
    """
    abi_dir = Path(abi_dir)
    output_dir = Path(output_dir)
    if not abi_dir.is_dir():
        raise ConfigError(f"ABI directory not found: {abi_dir}")

    sanitizer = NameSanitizer()
    targets = []
    for abi_path in sorted(abi_dir.glob(pattern)):
        if not abi_path.is_file():
            continue
        stem = abi_path.name
        for suffix in (".json", ".abi"):
            if stem.endswith(suffix):
                stem = stem[: -len(suffix)]
        name = sanitizer.sanitize_name(stem, NamingCase.PASCAL_CASE)
        module = sanitizer.sanitize_name(stem, NamingCase.SNAKE_CASE)
        targets.append(
            GenerationTarget(
                abi_path=abi_path,
                output_path=output_dir / f"{module}{extension}",
                name=name,
            )
        )

    check_targets(targets)
    return targets


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: Optional[str] = None,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load generator configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return get_config_manager().get_config(language, custom_config, config_file)


def load_build_config(
    config_file: Union[str, Path] = DEFAULT_CONFIG_FILE,
    custom_config: Optional[Dict[str, Any]] = None,
    extension: str = ".py",
) -> BuildConfig:
    """Convenience wrapper around :meth:`ConfigManager.load_build_config`."""
    return get_config_manager().load_build_config(config_file, custom_config, extension)
