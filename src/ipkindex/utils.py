import hashlib
from pathlib import Path

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def human_size(num_bytes: int) -> str:
    """Format a byte count for a directory listing.

    Base 1024 with one decimal place, capped at gigabytes.

    Examples:
        >>> human_size(512)
        '512.0 B'
        >>> human_size(1536)
        '1.5 KB'
    """
    size = float(num_bytes)
    for unit in _SIZE_UNITS[:-1]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {_SIZE_UNITS[-1]}"


def md5_file(path: Path, chunk_size: int = 1 << 16) -> str:
    """Hex MD5 digest of a file's full content."""
    digest = hashlib.md5()
    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()
