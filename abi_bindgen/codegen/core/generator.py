"""
Base generator interface for all binding targets.

Defines the contract every binding generator implements: construct it
with a binding name and an ABI document path, call ``generate()`` to get
the source, and ``write_to_file()`` to persist it.
"""

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger
from .config import GeneratorConfig
from .schema import AbiSchemaError, ContractAbi, parse_abi
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)

_EXTRA_BLANK_LINES = re.compile(r"\n{4,}")


class GenerationError(Exception):
    """Raised when a generator rejects an ABI document."""

    pass


class GeneratedSource:
    """Container for generated source and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generated source.

        Args:
            code: Generated source text
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}

    def write_to_file(self, path: Union[str, Path]) -> Path:
        """
        Write the source verbatim, replacing any existing file.

        Raises:
            OSError: If the destination cannot be written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.code, encoding="utf-8")
        logger.debug("Wrote %d bytes to %s", len(self.code), path)
        return path


class BindingGenerator(ABC):
    """Abstract base class for all binding generators."""

    def __init__(
        self,
        name: str,
        abi_path: Union[str, Path],
        config: Optional[GeneratorConfig] = None,
    ):
        """
        Initialize generator for one ABI document.

        Args:
            name: Root type/module name used in generated code
            abi_path: Path to the (sanitized) ABI document
            config: Generator configuration
        """
        self.name = name
        self.abi_path = Path(abi_path)
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._result: Optional[GeneratedSource] = None
        self.warnings: List[str] = []

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g. 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g. '.py')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine(
                self.get_template_directory()
            )
        return self._template_engine

    @abstractmethod
    def render(self, contract: ContractAbi) -> str:
        """
        Render source for a parsed contract.

        Raises:
            GenerationError: If the contract cannot be expressed
        """
        pass

    def load_contract(self) -> ContractAbi:
        """
        Read and parse the ABI document.

        Raises:
            OSError: If the document cannot be read
            GenerationError: If it is not valid JSON or not a valid ABI
        """
        text = self.abi_path.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GenerationError(f"Invalid JSON in {self.abi_path}: {e}") from e

        try:
            return parse_abi(data, self.name)
        except AbiSchemaError as e:
            raise GenerationError(f"Invalid ABI in {self.abi_path}: {e}") from e

    def generate(self) -> GeneratedSource:
        """Parse the document and produce source."""
        contract = self.load_contract()
        self.warnings = []

        try:
            code = self.render(contract)
        except TemplateError as e:
            raise GenerationError(str(e)) from e

        self._result = GeneratedSource(
            code=self.format_code(code),
            warnings=list(self.warnings),
            metadata={
                "language": self.language_name,
                "file_extension": self.file_extension,
                "binding_name": self.name,
                "function_count": len(contract.functions),
                "event_count": len(contract.events),
            },
        )
        return self._result

    def write_to_file(self, path: Union[str, Path]) -> Path:
        """Write generated source to ``path``, generating first if needed."""
        if self._result is None:
            self.generate()
        return self._result.write_to_file(path)

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Strips trailing whitespace, collapses runs of blank lines to two and
        ends the file with a single newline.
        """
        code = "\n".join(line.rstrip() for line in code.split("\n"))
        code = _EXTRA_BLANK_LINES.sub("\n\n\n", code)
        return code.strip("\n") + "\n"

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)
