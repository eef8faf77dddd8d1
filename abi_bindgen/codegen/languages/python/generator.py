"""
Python binding generator implementation.

Generates a module of dataclasses that encode contract calls and decode
event logs, using templates.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.generator import BindingGenerator, GenerationError
from ...core.naming import NamingCase, is_strict_identifier, to_pascal_case
from ...core.schema import AbiEntry, AbiParam, ContractAbi, EntryKind
from ...core.selectors import event_topic, function_selector
from .naming import create_member_sanitizer, create_python_sanitizer
from .types import PythonTypeConfig, PythonTypeMapper

logger = get_logger(__name__)

TEMPLATE_NAME = "bindings.py.j2"

# Module-level names the template defines
_MODULE_NAMES = {"BindingError", "dataclass", "decode", "encode", "Any", "ClassVar", "Sequence"}


class PythonBindingGenerator(BindingGenerator):
    """Binding generator producing Python dataclasses backed by eth_abi."""

    def __init__(
        self,
        name: str,
        abi_path: Union[str, Path],
        config: Optional[GeneratorConfig] = None,
    ):
        """Initialize Python generator with configuration."""
        super().__init__(name, abi_path, config)

        self.sanitizer = create_python_sanitizer()
        self.member_sanitizer = create_member_sanitizer()

        custom = self.config.custom
        self.runtime_module = custom.get("runtime_module", "eth_abi")
        self.type_mapper = PythonTypeMapper(
            PythonTypeConfig(type_overrides=custom.get("type_overrides", {}))
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def render(self, contract: ContractAbi) -> str:
        """Render the bindings module for a contract."""
        self.validate_identifiers(contract)

        self.sanitizer.reset_used_names()
        for name in _MODULE_NAMES:
            self.sanitizer.reserve(name)

        root_class = self.sanitizer.sanitize_name(
            contract.name, NamingCase.PASCAL_CASE, fallback="Contract"
        )

        functions = [self._function_data(entry) for entry in contract.functions]
        events = [self._event_data(entry) for entry in contract.events]

        for kind in (
            EntryKind.CONSTRUCTOR,
            EntryKind.FALLBACK,
            EntryKind.RECEIVE,
            EntryKind.ERROR,
        ):
            for entry in contract.entries_of(kind):
                label = f"{kind.value} {entry.name}".strip()
                self.warnings.append(f"Skipped {label}: no binding generated")

        logger.debug(
            "Rendering %s: %d function(s), %d event(s)",
            root_class,
            len(functions),
            len(events),
        )

        context = {
            "binding_name": contract.name,
            "root_class": root_class,
            "source_name": self.abi_path.name,
            "runtime_module": self.runtime_module,
            "add_comments": self.config.add_comments,
            "functions": functions,
            "events": events,
        }
        return self.render_template(TEMPLATE_NAME, context)

    def validate_identifiers(self, contract: ContractAbi):
        """
        Reject names that are not strict identifiers.

        Raises:
            GenerationError: Naming the first offending entry or param
        """
        for entry in contract.entries:
            if entry.name and not is_strict_identifier(entry.name):
                raise GenerationError(
                    f"Invalid identifier for {entry.kind.value}: {entry.name!r}"
                )
            for param in entry.inputs + entry.outputs:
                self._validate_param(entry, param)

    def _validate_param(self, entry: AbiEntry, param: AbiParam):
        if param.name and not is_strict_identifier(param.name):
            raise GenerationError(
                f"Invalid identifier in {entry.kind.value} "
                f"{entry.name or '<unnamed>'}: {param.name!r}"
            )
        for component in param.abi_type.components:
            self._validate_param(entry, component)

    def _class_name(self, entry: AbiEntry, suffix: str) -> str:
        base = to_pascal_case(entry.name) + suffix
        return self.sanitizer.unique_name(base, suffix="")

    def _member_names(self, entry: AbiEntry) -> List[str]:
        self.member_sanitizer.reset_used_names()
        names = []
        for index, param in enumerate(entry.inputs):
            # Unnamed params get positional names
            raw = param.name or f"arg{index}"
            name = self.member_sanitizer.sanitize_name(
                raw, NamingCase.SNAKE_CASE, fallback=f"arg{index}"
            )
            if param.name and name != param.name:
                self.warnings.append(
                    f"Field {entry.name}.{param.name} renamed to {name}"
                )
            names.append(name)
        return names

    def _function_data(self, entry: AbiEntry) -> Dict[str, Any]:
        """Generate template data for a function."""
        names = self._member_names(entry)
        inputs = [
            {
                "name": name,
                "abi_name": param.name,
                "type": param.abi_type.canonical(),
                "hint": self.type_mapper.hint(param.abi_type),
            }
            for name, param in zip(names, entry.inputs)
        ]

        return {
            "class_name": self._class_name(entry, "Call"),
            "abi_name": entry.name,
            "signature": entry.signature,
            "selector": function_selector(entry).hex(),
            "state_mutability": entry.state_mutability,
            "inputs": inputs,
            "input_types": tuple(p["type"] for p in inputs),
            "output_types": tuple(p.abi_type.canonical() for p in entry.outputs),
        }

    def _event_data(self, entry: AbiEntry) -> Dict[str, Any]:
        """Generate template data for an event."""
        names = self._member_names(entry)
        fields = []
        indexed_types = []
        data_types = []

        for name, param in zip(names, entry.inputs):
            canonical = param.abi_type.canonical()
            if param.indexed:
                position = len(indexed_types)
                indexed_types.append(canonical)
                hint = self.type_mapper.topic_hint(param.abi_type)
            else:
                position = len(data_types)
                data_types.append(canonical)
                hint = self.type_mapper.hint(param.abi_type)

            fields.append(
                {
                    "name": name,
                    "abi_name": param.name,
                    "type": canonical,
                    "hint": hint,
                    "indexed": param.indexed,
                    "reference": param.abi_type.is_reference,
                    "position": position,
                }
            )

        limit = 4 if entry.anonymous else 3
        if len(indexed_types) > limit:
            raise GenerationError(
                f"Event {entry.name} has {len(indexed_types)} indexed params "
                f"(at most {limit} allowed)"
            )

        return {
            "class_name": self._class_name(entry, "Event"),
            "abi_name": entry.name,
            "signature": entry.signature,
            "topic": event_topic(entry).hex(),
            "anonymous": entry.anonymous,
            "fields": fields,
            "indexed_count": len(indexed_types),
            "indexed_types": tuple(indexed_types),
            "data_types": tuple(data_types),
        }


def create_python_generator(
    name: str, abi_path: Union[str, Path], config: GeneratorConfig = None
) -> PythonBindingGenerator:
    """Create a Python binding generator."""
    return PythonBindingGenerator(name, abi_path, config)
