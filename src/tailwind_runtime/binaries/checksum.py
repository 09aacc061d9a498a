"""Checksum computation and manifest verification."""
import hashlib
from pathlib import Path

from tailwind_runtime.errors import ChecksumReadError
from tailwind_runtime.logging import get_logger

logger = get_logger(__name__)

DIGEST_LENGTH = 64
READ_BLOCK = 65536


def compute_file_hash(path: Path) -> str:
    """Compute SHA-256 hash of a file."""
    sha256_hash = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for byte_block in iter(lambda: f.read(READ_BLOCK), b""):
                sha256_hash.update(byte_block)
    except OSError as e:
        logger.error("file_hash_failed", file=str(path), error=str(e))
        raise ChecksumReadError(path, str(e)) from e
    return sha256_hash.hexdigest()


def compare_checksum(manifest_path: Path, checksum: str) -> bool:
    """Check whether any manifest line starts with the given digest.

    Only the first 64 characters of the trimmed checksum are compared, so
    ``shasum``-style output ("<digest>  <file>") can be passed as-is. Lines
    are matched by prefix; the filename column is not inspected.
    """
    try:
        content = Path(manifest_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("manifest_read_failed", manifest=str(manifest_path), error=str(e))
        raise ChecksumReadError(manifest_path, str(e)) from e

    expected = checksum.strip()[:DIGEST_LENGTH]
    if not expected:
        return False

    for line in content.splitlines():
        if line.strip().startswith(expected):
            return True

    logger.debug("checksum_not_in_manifest", manifest=str(manifest_path), checksum=expected)
    return False
