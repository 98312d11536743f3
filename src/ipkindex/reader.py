"""Reading generated indices back, and checking them against the archives on disk."""

import gzip
import logging
import zlib
from collections.abc import Iterator
from pathlib import Path

from debian import deb822

from ipkindex.constants import PACKAGES_FILENAME, PACKAGES_GZ_FILENAME
from ipkindex.utils import md5_file

logger = logging.getLogger(__name__)


def resolve_index_path(path: Path) -> Path:
    """Return `path`, or the Packages[.gz] file inside it if it is a directory."""
    if not path.is_dir():
        return path
    for name in (PACKAGES_FILENAME, PACKAGES_GZ_FILENAME):
        candidate = path / name
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"No {PACKAGES_FILENAME} index in {path}")


def iter_index_entries(local_path: Path) -> Iterator[dict]:
    """Stream package entries from a Packages or Packages.gz file."""

    def _open_text_stream():
        if local_path.suffix == ".gz":
            return gzip.open(local_path, "rt", encoding="utf-8", errors="ignore")
        return local_path.open("rt", encoding="utf-8", errors="ignore")

    with _open_text_stream() as handle:
        for paragraph in deb822.Packages.iter_paragraphs(handle):
            yield dict(paragraph)


def verify_directory(directory: Path) -> list[str]:
    """Check a directory's index against its archives.

    Returns a list of human-readable problems; empty means the index is consistent.
    """
    packages_path = directory / PACKAGES_FILENAME
    gz_path = directory / PACKAGES_GZ_FILENAME
    if not packages_path.is_file():
        return [f"{packages_path} is missing"]

    problems: list[str] = []
    if not gz_path.is_file():
        problems.append(f"{gz_path} is missing")
    else:
        try:
            if gzip.decompress(gz_path.read_bytes()) != packages_path.read_bytes():
                problems.append(f"{gz_path.name} does not match {packages_path.name}")
        except (OSError, EOFError, zlib.error) as e:
            problems.append(f"{gz_path.name} is not valid gzip data: {e}")

    seen: set[tuple[str | None, str | None]] = set()
    for entry in iter_index_entries(packages_path):
        name = entry.get("Package")
        key = (name, entry.get("Architecture"))
        if key in seen:
            problems.append(f"duplicate entry for {name} ({key[1]})")
        seen.add(key)

        filename = entry.get("Filename")
        if not filename:
            problems.append(f"{name}: no Filename")
            continue
        archive = directory / filename
        if not archive.is_file():
            problems.append(f"{name}: {filename} does not exist")
            continue

        size = entry.get("Size", "")
        if not size.isdigit() or int(size) != archive.stat().st_size:
            problems.append(f"{name}: Size {size!r} does not match {filename}")

        if (md5 := entry.get("MD5Sum")) and md5 != md5_file(archive):
            problems.append(f"{name}: MD5Sum does not match {filename}")

    logger.debug(f"Verified {packages_path}: {len(problems)} problem(s)")
    return problems
