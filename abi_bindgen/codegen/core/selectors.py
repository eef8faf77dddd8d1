"""Function selectors and event topics for ABI entries."""

from Crypto.Hash import keccak

from .schema import AbiEntry, EntryKind


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (the pre-standard SHA-3 used by the EVM)."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("keccak256 expects bytes-like input")
    h = keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


def function_selector(entry: AbiEntry) -> bytes:
    """First four bytes of the Keccak-256 of the canonical signature."""
    return keccak256(entry.signature.encode("ascii"))[:4]


def event_topic(entry: AbiEntry) -> bytes:
    """Keccak-256 of an event's canonical signature (topic 0)."""
    if entry.kind != EntryKind.EVENT:
        raise ValueError(f"{entry.name} is not an event")
    return keccak256(entry.signature.encode("ascii"))
