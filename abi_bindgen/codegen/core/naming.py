"""
Identifier handling for generated code.

ABI names are camelCase Solidity identifiers; generated code needs them in
the target language's conventions without clashing with its keywords or
with each other.
"""

import re
from enum import Enum
from typing import Dict, Optional, Set

# Names a binding generator accepts as-is: no leading underscore
STRICT_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


class NamingCase(Enum):
    SNAKE_CASE = "snake"  # token_id
    CAMEL_CASE = "camel"  # tokenId
    PASCAL_CASE = "pascal"  # TokenId


def is_strict_identifier(name: str) -> bool:
    """Whether ``name`` is a valid identifier that does not start with ``_``."""
    return bool(STRICT_IDENTIFIER.match(name))


def to_snake_case(name: str) -> str:
    """``ERC20TokenId`` -> ``erc20_token_id``."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return re.sub(r"_+", "_", name.lower()).strip("_")


def to_pascal_case(name: str) -> str:
    return "".join(part.capitalize() for part in to_snake_case(name).split("_") if part)


def to_camel_case(name: str) -> str:
    head, *rest = to_snake_case(name).split("_")
    return head + "".join(part.capitalize() for part in rest)


_CONVERTERS = {
    NamingCase.SNAKE_CASE: to_snake_case,
    NamingCase.CAMEL_CASE: to_camel_case,
    NamingCase.PASCAL_CASE: to_pascal_case,
}


class NameSanitizer:
    """Turns arbitrary names into unique, non-reserved identifiers.

    One sanitizer tracks one namespace (a module's classes, or one class's
    fields). Asking again for a name already converted returns the same
    identifier; a different name converting to a taken identifier gets a
    numeric suffix.
    """

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
    ):
        self.reserved = set(reserved_words or ()) | set(builtin_types or ())
        self._name_cache: Dict[str, str] = {}
        self._used_names: Set[str] = set()

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
        fallback: str = "field",
    ) -> str:
        """
        Convert ``name`` into a usable identifier in ``target_case``.

        Args:
            name: Original name
            target_case: Desired case style
            suffix_on_conflict: Appended to reserved words; ``"_"`` also
                separates numeric suffixes on duplicates
            fallback: Used when nothing usable is left, and as a prefix for
                names starting with a digit
        """
        cache_key = (name, target_case, suffix_on_conflict)
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = re.sub(r"[^A-Za-z0-9_]", "_", name).strip("_")
        converted = _CONVERTERS[target_case](cleaned) if cleaned else ""
        if not converted:
            converted = fallback
        elif converted[0].isdigit():
            converted = f"{fallback}_{converted}"

        final_name = self.unique_name(converted, suffix_on_conflict)
        self._name_cache[cache_key] = final_name
        return final_name

    def unique_name(self, name: str, suffix: str = "_") -> str:
        """Claim ``name`` in this namespace, adjusting it if reserved or taken."""
        if name in self.reserved:
            name = f"{name}{suffix}"

        candidate = name
        counter = 1
        while candidate in self._used_names:
            if suffix == "_":
                candidate = f"{name.rstrip('_')}_{counter}"
            else:
                candidate = f"{name}{counter}"
            counter += 1

        self._used_names.add(candidate)
        return candidate

    def reserve(self, name: str):
        """Mark ``name`` as taken without converting it."""
        self._used_names.add(name)

    def reset_used_names(self):
        self._used_names.clear()
        self._name_cache.clear()
