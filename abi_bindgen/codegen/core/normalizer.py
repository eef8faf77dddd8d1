"""
Input normalization for ABI documents.

Rewrites field and attribute names that start with an underscore so they
become valid identifiers for binding generators, and stages the sanitized
copy in a scoped temporary file. The original document is never modified.
"""

import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_MARKER = "u_"

# A quoted key, a colon, then a quoted value whose first character is "_".
SANITIZE_RULE = r'("\w+"\s?:\s?")_(\w+")'

_MARKER_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class PatternError(Exception):
    """Raised when the rewrite rule or marker prefix is unusable."""

    pass


def _compile_rule() -> re.Pattern:
    try:
        return re.compile(SANITIZE_RULE)
    except re.error as e:
        raise PatternError(f"Invalid sanitize rule {SANITIZE_RULE!r}: {e}") from e


_RULE = _compile_rule()


def validate_marker(marker: str) -> str:
    """
    Check that a marker prefix produces valid identifiers.

    Args:
        marker: Replacement for the leading underscore

    Returns:
        The marker unchanged

    Raises:
        PatternError: If the marker is empty, starts with an underscore
            or contains non-identifier characters
    """
    if not isinstance(marker, str) or not _MARKER_PATTERN.match(marker):
        raise PatternError(
            f"Invalid marker prefix {marker!r}: must be an identifier "
            "that does not start with an underscore"
        )
    return marker


def sanitize_abi_text(text: str, marker: str = DEFAULT_MARKER) -> str:
    """
    Replace the leading underscore of quoted values that follow a quoted key.

    ``{"name": "_reserved"}`` becomes ``{"name": "u_reserved"}``. Everything
    else, including underscores in the middle of values, is left untouched.

    Args:
        text: ABI document text
        marker: Replacement for the leading underscore

    Returns:
        Sanitized document text
    """
    validate_marker(marker)
    # Function replacement so a marker can never be read as a group reference
    return _RULE.sub(lambda m: f"{m.group(1)}{marker}{m.group(2)}", text)


def count_rewrites(text: str) -> int:
    """Return how many names :func:`sanitize_abi_text` would rewrite."""
    return sum(1 for _ in _RULE.finditer(text))


def read_interface_document(path: Union[str, Path]) -> str:
    """
    Read an ABI document as UTF-8 text.

    Raises:
        OSError: If the file is missing or unreadable
    """
    path = Path(path)
    logger.debug("Reading ABI document %s", path)
    # newline="" keeps the bytes on disk, so clean documents stage identically
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def _staging_prefix(name: str) -> str:
    # Binding names may contain separators; keep the file inside staging_dir
    return re.sub(r"[^A-Za-z0-9_]+", "_", name).strip("_") or "contract"


@contextmanager
def staged_document(
    abi_path: Union[str, Path],
    name: str = "contract",
    marker: str = DEFAULT_MARKER,
    staging_dir: Optional[Union[str, Path]] = None,
    keep: bool = False,
) -> Iterator[Path]:
    """
    Stage a sanitized copy of an ABI document for the duration of a block.

    Each call gets its own uniquely named file, so targets never share a
    staging path. The file is removed when the block exits, whether or not
    it raised, unless ``keep`` is set.

    Args:
        abi_path: Original ABI document
        name: Binding name, used in the staging file name
        marker: Replacement for leading underscores
        staging_dir: Directory for the staging file (system temp by default)
        keep: Leave the staging file on disk after use

    Yields:
        Path of the staged, sanitized document

    Raises:
        OSError: If the input cannot be read or the staging file written
        PatternError: If the marker is invalid
    """
    abi_path = Path(abi_path)
    validate_marker(marker)

    contents = read_interface_document(abi_path)
    sanitized = sanitize_abi_text(contents, marker)
    rewrites = count_rewrites(contents)

    fd, raw_path = tempfile.mkstemp(
        prefix=f"{_staging_prefix(name)}-",
        suffix=".abi.json",
        dir=str(staging_dir) if staging_dir else None,
    )
    # mkstemp creates the file exclusively, so it never names an existing input
    staging_path = Path(raw_path)

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(sanitized)
        logger.debug(
            "Staged %s -> %s (%d name(s) rewritten)", abi_path, staging_path, rewrites
        )
        yield staging_path
    finally:
        if keep:
            logger.info("Keeping staged document %s", staging_path)
        else:
            try:
                staging_path.unlink()
            except FileNotFoundError:
                pass
