"""
Registry of binding generators by target language.

The build pipeline looks generators up here by the ``language`` setting;
aliases such as ``py`` resolve to their primary language.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from ..logging_config import get_logger
from .core.config import GeneratorConfig, load_config
from .core.generator import BindingGenerator

logger = get_logger(__name__)

ConfigLike = Union[GeneratorConfig, Dict[str, Any], None]


class RegistryError(Exception):
    """Unknown language, bad alias or invalid generator class."""

    pass


class GeneratorRegistry:
    """Maps language names and aliases to generator classes."""

    def __init__(self):
        self._generators: Dict[str, Type[BindingGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[BindingGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register ``generator_class`` under ``language`` and its aliases.

        An existing registration is left alone unless ``replace`` is set.

        Raises:
            RegistryError: If the class is not a BindingGenerator or an alias
                is already taken
        """
        if not (
            isinstance(generator_class, type)
            and issubclass(generator_class, BindingGenerator)
        ):
            raise RegistryError(
                f"{generator_class!r} is not a BindingGenerator subclass"
            )

        key = language.lower()
        if key in self._generators and not replace:
            logger.debug("Generator for %s already registered", key)
            return

        new_aliases = [a.lower() for a in aliases or [] if a.lower() != key]
        if not replace:
            for alias in new_aliases:
                if alias in self._generators:
                    raise RegistryError(f"Alias '{alias}' is a registered language")
                owner = self._aliases.get(alias)
                if owner is not None and owner != key:
                    raise RegistryError(f"Alias '{alias}' already points to '{owner}'")

        self._generators[key] = generator_class
        self._aliases.update((alias, key) for alias in new_aliases)

    def unregister(self, language: str):
        key = language.lower()
        self._generators.pop(key, None)
        self._aliases = {a: t for a, t in self._aliases.items() if t != key}

    def resolve(self, language: str) -> str:
        """
        Return the primary name for a language or alias.

        Raises:
            RegistryError: If nothing is registered under that name
        """
        key = language.lower()
        if key in self._generators:
            return key
        if key in self._aliases:
            return self._aliases[key]
        raise RegistryError(
            f"No generator registered for language: {language}. "
            f"Available: {', '.join(self.list_languages()) or 'none'}"
        )

    def get_generator_class(self, language: str) -> Type[BindingGenerator]:
        return self._generators[self.resolve(language)]

    def create_generator(
        self,
        language: str,
        name: str,
        abi_path: Union[str, Path],
        config: ConfigLike = None,
    ) -> BindingGenerator:
        """
        Instantiate the generator for ``language``.

        ``config`` may be a ready GeneratorConfig, a dict of overrides merged
        over the language defaults, or None for the defaults.

        Raises:
            RegistryError: If the language is unknown or config has the wrong type
        """
        generator_class = self.get_generator_class(language)
        if isinstance(config, dict) or config is None:
            config = load_config(self.resolve(language), custom_config=config)
        elif not isinstance(config, GeneratorConfig):
            raise RegistryError(f"Invalid config type: {type(config)}")
        return generator_class(name, abi_path, config)

    def list_languages(self) -> List[str]:
        return sorted(self._generators)

    def get_aliases_for_language(self, language: str) -> List[str]:
        key = language.lower()
        return sorted(a for a, t in self._aliases.items() if t == key)

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._generators or key in self._aliases

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """
        Describe a registered generator for listings.

        Raises:
            RegistryError: If language not found
        """
        key = self.resolve(language)
        generator_class = self._generators[key]
        # Nothing is read from the path until generate() is called
        generator = generator_class("Info", "info.abi.json", load_config(key))
        return {
            "name": generator.language_name,
            "class": generator_class.__name__,
            "file_extension": generator.file_extension,
            "aliases": self.get_aliases_for_language(key),
            "module": generator_class.__module__,
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Return the process-wide registry with built-in generators loaded."""
    global _global_registry
    if _global_registry is None:
        from .languages.python import PythonBindingGenerator

        _global_registry = GeneratorRegistry()
        _global_registry.register("python", PythonBindingGenerator, aliases=["py"])
    return _global_registry


def register_generator(
    language: str,
    generator_class: Type[BindingGenerator],
    aliases: Optional[List[str]] = None,
):
    get_registry().register(language, generator_class, aliases)


def get_generator(
    language: str,
    name: str,
    abi_path: Union[str, Path],
    config: ConfigLike = None,
) -> BindingGenerator:
    return get_registry().create_generator(language, name, abi_path, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    """Describe every registered generator, keyed by language."""
    return {lang: get_language_info(lang) for lang in list_supported_languages()}
