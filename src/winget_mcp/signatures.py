"""
Known winget failure messages.

winget reports many failures ("no package found", source errors) as plain
text on stdout rather than as a table. Output containing one of these
substrings is rejected before structural parsing.

The list ships as a text file in the package data directory, one signature
per line. Lines starting with ``#`` and blank lines are ignored.
"""
import logging
from collections.abc import Iterable
from pathlib import Path

from .errors import ErrorSignatureDetected

logger = logging.getLogger(__name__)

BUNDLED_SIGNATURES_PATH = Path(__file__).parent / "data" / "error_signatures.txt"


def _parse_signature_lines(lines: Iterable[str]) -> frozenset[str]:
    signatures = set()
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        signatures.add(line)
    return frozenset(signatures)


def load_error_signatures(path: Path | str | None = None) -> frozenset[str]:
    """Load the error-signature set.

    Args:
        path: Text file with one signature per line. If None, uses the
              bundled list in the package data directory.

    Returns:
        Immutable set of signature substrings (never contains "").

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    sig_path = Path(path).expanduser() if path is not None else BUNDLED_SIGNATURES_PATH
    if not sig_path.exists():
        raise FileNotFoundError(f"Error signature file not found: {sig_path}")

    with open(sig_path, encoding="utf-8") as f:
        signatures = _parse_signature_lines(f)

    logger.debug(f"Loaded {len(signatures)} error signatures from {sig_path}")
    return signatures


def find_error_signature(
    lines: list[str],
    signatures: frozenset[str],
) -> tuple[int, str] | None:
    """Return ``(line_index, signature)`` of the first match, or None."""
    if not signatures:
        return None
    # Sorted so the reported signature does not depend on set iteration order
    ordered = sorted(signatures)
    for i, line in enumerate(lines):
        for sig in ordered:
            if sig in line:
                return i, sig
    return None


def check_error_signatures(lines: list[str], signatures: frozenset[str]) -> None:
    """Raise ErrorSignatureDetected if any line contains a known signature."""
    match = find_error_signature(lines, signatures)
    if match is not None:
        line_index, signature = match
        raise ErrorSignatureDetected(signature, line_index)
