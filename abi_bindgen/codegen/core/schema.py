"""
Core ABI representation for code generation.

Converts a decoded ABI document into a normalized internal format that
binding generators can work with consistently, and resolves ABI type
strings into a structured form.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class AbiSchemaError(ValueError):
    """Raised when an ABI document or type string is malformed."""

    pass


class EntryKind(Enum):
    """Kinds of ABI entries."""

    FUNCTION = "function"
    EVENT = "event"
    CONSTRUCTOR = "constructor"
    FALLBACK = "fallback"
    RECEIVE = "receive"
    ERROR = "error"


class BaseKind(Enum):
    """Elementary ABI type families."""

    UINT = "uint"
    INT = "int"
    ADDRESS = "address"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"  # dynamic bytes
    FIXED_BYTES = "fixed_bytes"  # bytes1..bytes32
    FUNCTION = "function"
    TUPLE = "tuple"


@dataclass
class AbiType:
    """A resolved ABI type, possibly an array of a base type."""

    base: BaseKind
    size: Optional[int] = None  # bits for ints, bytes for fixed bytes
    components: List["AbiParam"] = field(default_factory=list)
    # Outermost dimension last; None marks a dynamic dimension
    dimensions: List[Optional[int]] = field(default_factory=list)

    @property
    def is_array(self) -> bool:
        return bool(self.dimensions)

    @property
    def is_reference(self) -> bool:
        """Whether an indexed event param of this type is stored as a hash."""
        return self.is_array or self.base in (
            BaseKind.STRING,
            BaseKind.BYTES,
            BaseKind.TUPLE,
        )

    def canonical(self) -> str:
        """Canonical type string used in signatures."""
        if self.base == BaseKind.TUPLE:
            inner = ",".join(c.abi_type.canonical() for c in self.components)
            core = f"({inner})"
        elif self.base in (BaseKind.UINT, BaseKind.INT):
            core = f"{self.base.value}{self.size}"
        elif self.base == BaseKind.FIXED_BYTES:
            core = f"bytes{self.size}"
        else:
            core = self.base.value

        suffix = "".join(f"[{d}]" if d is not None else "[]" for d in self.dimensions)
        return core + suffix

    def element(self) -> "AbiType":
        """Type of one element of an array type."""
        if not self.dimensions:
            raise AbiSchemaError("Not an array type")
        return AbiType(
            base=self.base,
            size=self.size,
            components=self.components,
            dimensions=self.dimensions[:-1],
        )


@dataclass
class AbiParam:
    """A single named, typed input, output or component."""

    name: str
    type_string: str
    abi_type: AbiType
    indexed: bool = False
    internal_type: Optional[str] = None


@dataclass
class AbiEntry:
    """One function, event, constructor or other entry of an ABI."""

    kind: EntryKind
    name: str = ""
    inputs: List[AbiParam] = field(default_factory=list)
    outputs: List[AbiParam] = field(default_factory=list)
    state_mutability: Optional[str] = None
    anonymous: bool = False

    @property
    def signature(self) -> str:
        """Canonical signature, e.g. ``transfer(address,uint256)``."""
        types = ",".join(p.abi_type.canonical() for p in self.inputs)
        return f"{self.name}({types})"


@dataclass
class ContractAbi:
    """A parsed ABI document."""

    name: str
    entries: List[AbiEntry] = field(default_factory=list)

    @property
    def functions(self) -> List[AbiEntry]:
        return [e for e in self.entries if e.kind == EntryKind.FUNCTION]

    @property
    def events(self) -> List[AbiEntry]:
        return [e for e in self.entries if e.kind == EntryKind.EVENT]

    def entries_of(self, kind: EntryKind) -> List[AbiEntry]:
        return [e for e in self.entries if e.kind == kind]


_ELEMENTARY = re.compile(r"^(uint|int|bytes|address|bool|string|function|tuple)(\d*)$")
_ARRAY_SUFFIX = re.compile(r"\[(\d*)\]$")


def parse_type(type_string: str, components: Optional[List[Dict[str, Any]]] = None) -> AbiType:
    """
    Resolve an ABI type string into an :class:`AbiType`.

    Args:
        type_string: Type as written in the ABI (e.g. ``uint256[2][]``)
        components: Component definitions for tuple types

    Returns:
        Resolved type

    Raises:
        AbiSchemaError: If the type is unknown or malformed
    """
    if not isinstance(type_string, str) or not type_string:
        raise AbiSchemaError(f"Missing or invalid type: {type_string!r}")

    base_string, dimensions = _split_dimensions(type_string)

    match = _ELEMENTARY.match(base_string)
    if not match:
        raise AbiSchemaError(f"Unsupported type: {type_string}")

    family, digits = match.groups()
    size = int(digits) if digits else None

    if family in ("uint", "int"):
        bits = 256 if size is None else size
        if bits < 8 or bits > 256 or bits % 8:
            raise AbiSchemaError(f"Invalid integer size in type: {type_string}")
        return AbiType(BaseKind(family), size=bits, dimensions=dimensions)

    if family == "bytes":
        if size is None:
            return AbiType(BaseKind.BYTES, dimensions=dimensions)
        if size < 1 or size > 32:
            raise AbiSchemaError(f"Invalid fixed bytes size in type: {type_string}")
        return AbiType(BaseKind.FIXED_BYTES, size=size, dimensions=dimensions)

    if size is not None:
        raise AbiSchemaError(f"Unsupported type: {type_string}")

    if family == "tuple":
        if not isinstance(components, list):
            raise AbiSchemaError(f"Tuple type without a components list: {type_string}")
        params = [parse_param(c) for c in components]
        return AbiType(BaseKind.TUPLE, components=params, dimensions=dimensions)

    return AbiType(BaseKind(family), dimensions=dimensions)


def _split_dimensions(type_string: str) -> Tuple[str, List[Optional[int]]]:
    dimensions: List[Optional[int]] = []
    remaining = type_string
    while True:
        match = _ARRAY_SUFFIX.search(remaining)
        if not match:
            break
        digits = match.group(1)
        if digits:
            length = int(digits)
            if length == 0:
                raise AbiSchemaError(f"Zero-length array in type: {type_string}")
            dimensions.append(length)
        else:
            dimensions.append(None)
        remaining = remaining[: match.start()]
    if "[" in remaining or "]" in remaining:
        raise AbiSchemaError(f"Malformed array type: {type_string}")
    # Collected outermost first; store innermost first
    dimensions.reverse()
    return remaining, dimensions


def parse_param(data: Dict[str, Any]) -> AbiParam:
    """Parse one ABI parameter object."""
    if not isinstance(data, dict):
        raise AbiSchemaError(f"Parameter must be an object, got {type(data).__name__}")

    name = data.get("name") or ""
    if not isinstance(name, str):
        raise AbiSchemaError(f"Parameter name must be a string: {name!r}")

    type_string = data.get("type")
    abi_type = parse_type(type_string, data.get("components"))

    return AbiParam(
        name=name,
        type_string=type_string,
        abi_type=abi_type,
        indexed=bool(data.get("indexed", False)),
        internal_type=data.get("internalType"),
    )


def _param_list(data: Dict[str, Any], key: str, entry_name: str) -> List[Any]:
    params = data.get(key)
    if params is None:
        return []
    if not isinstance(params, list):
        raise AbiSchemaError(
            f"'{key}' of {entry_name or '<unnamed>'} must be a list, "
            f"got {type(params).__name__}"
        )
    return params


def parse_entry(data: Dict[str, Any]) -> AbiEntry:
    """Parse one ABI entry object."""
    if not isinstance(data, dict):
        raise AbiSchemaError(f"ABI entry must be an object, got {type(data).__name__}")

    # Entries without a type are functions
    kind_value = data.get("type", "function")
    try:
        kind = EntryKind(kind_value)
    except ValueError:
        raise AbiSchemaError(f"Unknown ABI entry type: {kind_value!r}")

    name = data.get("name") or ""
    if not isinstance(name, str):
        raise AbiSchemaError(f"ABI {kind.value} name must be a string: {name!r}")
    if kind in (EntryKind.FUNCTION, EntryKind.EVENT, EntryKind.ERROR) and not name:
        raise AbiSchemaError(f"ABI {kind.value} entry has no name")

    return AbiEntry(
        kind=kind,
        name=name,
        inputs=[parse_param(p) for p in _param_list(data, "inputs", name)],
        outputs=[parse_param(p) for p in _param_list(data, "outputs", name)],
        state_mutability=data.get("stateMutability"),
        anonymous=bool(data.get("anonymous", False)),
    )


def parse_abi(data: Any, name: str = "Contract") -> ContractAbi:
    """
    Convert a decoded ABI document into a :class:`ContractAbi`.

    Accepts either a bare ABI array or a compiler artifact object carrying
    the array under an ``abi`` key.

    Args:
        data: Decoded JSON document
        name: Contract name

    Returns:
        Parsed contract ABI

    Raises:
        AbiSchemaError: If the document is not a valid ABI
    """
    if isinstance(data, dict) and "abi" in data:
        data = data["abi"]

    if not isinstance(data, list):
        raise AbiSchemaError("ABI document must be a JSON array of entries")

    return ContractAbi(name=name, entries=[parse_entry(item) for item in data])
