"""Per-directory package index: candidate loading, latest selection and serialization."""

import gzip
import logging
from collections.abc import Callable, Iterable
from functools import reduce
from pathlib import Path
from typing import TypeAlias

from ipkindex.config import RepoConfig
from ipkindex.constants import (
    DEFAULT_MAINTAINER,
    DEFAULT_PRIORITY,
    DEFAULT_SECTION,
    GZIP_LEVEL,
    PACKAGES_FILENAME,
    PACKAGES_GZ_FILENAME,
    PACKAGES_HTML_FILENAME,
    REQUIRED_FIELDS,
)
from ipkindex.control import read_control_fields
from ipkindex.exceptions import MissingFieldError, PackageIndexError
from ipkindex.models import (
    ControlFields,
    DirectoryIndex,
    EntryKey,
    IndexArtifacts,
    PackageCandidate,
    PackageIndexEntry,
    SkippedArchive,
)
from ipkindex.render import render_packages_html
from ipkindex.utils import md5_file
from ipkindex.versions import is_newer

logger = logging.getLogger(__name__)

FieldsReader: TypeAlias = Callable[[Path], ControlFields]


def find_archives(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """Regular files directly inside `directory` with a package suffix, sorted by name."""
    suffixes = tuple(extensions)
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.name.endswith(suffixes)),
        key=lambda p: p.name,
    )


def load_candidate(path: Path, read_fields: FieldsReader = read_control_fields) -> PackageCandidate:
    """Turn one archive file into a candidate.

    Raises:
        PackageIndexError: the archive could not be parsed or lacks required fields
        OSError: the file could not be read
    """
    fields = read_fields(path)
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        raise MissingFieldError(missing)
    return PackageCandidate(path=path, size=path.stat().st_size, fields=fields)


def load_candidates(
    paths: Iterable[Path],
    read_fields: FieldsReader = read_control_fields,
) -> tuple[list[PackageCandidate], list[SkippedArchive]]:
    """Load every archive, setting aside the ones that fail."""
    candidates: list[PackageCandidate] = []
    skipped: list[SkippedArchive] = []
    for path in paths:
        try:
            candidates.append(load_candidate(path, read_fields))
        except MissingFieldError as e:
            logger.warning(f"Skipping {path.name}: {e}")
            skipped.append(SkippedArchive(filename=path.name, reason=str(e)))
        except (PackageIndexError, OSError) as e:
            logger.warning(f"Failed to parse .ipk {path}: {e}")
            skipped.append(SkippedArchive(filename=path.name, reason=str(e)))
    return candidates, skipped


def _keep_newest(
    latest: dict[EntryKey, PackageCandidate], candidate: PackageCandidate
) -> dict[EntryKey, PackageCandidate]:
    current = latest.get(candidate.key)
    if current is None or is_newer(candidate.version, current.version):
        return latest | {candidate.key: candidate}
    return latest


def select_latest(candidates: Iterable[PackageCandidate]) -> list[PackageCandidate]:
    """One candidate per (Package, Architecture): the one with the highest version.

    On equal versions the earlier candidate stays. Results are ordered by the
    first appearance of each key.
    """
    return list(reduce(_keep_newest, candidates, {}).values())


def to_index_entry(candidate: PackageCandidate, include_md5: bool = True) -> PackageIndexEntry:
    md5sum = md5_file(candidate.path) if include_md5 else None
    return PackageIndexEntry(**candidate.model_dump(), md5sum=md5sum)


def to_index_entries(
    winners: Iterable[PackageCandidate], include_md5: bool = True
) -> tuple[list[PackageIndexEntry], list[SkippedArchive]]:
    """Checksum each winner; an archive that can no longer be read is skipped."""
    entries: list[PackageIndexEntry] = []
    skipped: list[SkippedArchive] = []
    for candidate in winners:
        try:
            entries.append(to_index_entry(candidate, include_md5))
        except OSError as e:
            logger.warning(f"Failed to checksum .ipk {candidate.path}: {e}")
            skipped.append(SkippedArchive(filename=candidate.filename, reason=str(e)))
    return entries, skipped


def render_stanza(entry: PackageIndexEntry, default_maintainer: str = DEFAULT_MAINTAINER) -> str:
    """Serialize one entry as a control stanza, terminated by a blank line."""
    fields = entry.fields
    lines = [
        f"Package: {entry.name}",
        f"Version: {entry.version}",
        f"Architecture: {entry.architecture}",
        f"Maintainer: {fields.get('Maintainer') or default_maintainer}",
    ]
    if depends := fields.get("Depends"):
        lines.append(f"Depends: {depends}")
    lines += [
        f"Section: {fields.get('Section') or DEFAULT_SECTION}",
        f"Priority: {fields.get('Priority') or DEFAULT_PRIORITY}",
        f"Filename: {entry.filename}",
        f"Size: {entry.size}",
    ]
    if entry.md5sum is not None:
        lines.append(f"MD5Sum: {entry.md5sum}")
    lines.append(f"Description: {fields.get('Description', '')}")
    return "\n".join(lines) + "\n\n"


def render_packages(entries: Iterable[PackageIndexEntry], default_maintainer: str = DEFAULT_MAINTAINER) -> str:
    return "".join(render_stanza(entry, default_maintainer) for entry in entries)


def compress_packages(text: str) -> bytes:
    """Gzip the index text; mtime is zeroed so the output only depends on the text."""
    return gzip.compress(text.encode("utf-8"), compresslevel=GZIP_LEVEL, mtime=0)


def build_directory_index(
    directory: Path,
    config: RepoConfig,
    relpath: str = "",
    read_fields: FieldsReader = read_control_fields,
) -> DirectoryIndex:
    """Index the archives directly inside `directory`.

    Nothing is written here. `artifacts` is None when no archive produced an entry.
    """
    paths = find_archives(directory, config.extensions)
    index = DirectoryIndex(directory=directory, relpath=relpath)
    if not paths:
        return index

    candidates, index.skipped = load_candidates(paths, read_fields)
    index.entries, unreadable = to_index_entries(select_latest(candidates), config.include_md5)
    index.skipped += unreadable
    if not index.entries:
        return index

    text = render_packages(index.entries, config.default_maintainer)
    index.artifacts = IndexArtifacts(
        packages=text,
        packages_gz=compress_packages(text),
        packages_html=render_packages_html(index.entries, relpath) if config.write_html else None,
    )
    return index


def write_artifacts(index: DirectoryIndex) -> list[Path]:
    """Write Packages, Packages.gz and (if rendered) Packages.html next to the archives."""
    if index.artifacts is None:
        return []

    artifacts = index.artifacts
    outputs = {
        PACKAGES_FILENAME: artifacts.packages.encode("utf-8"),
        PACKAGES_GZ_FILENAME: artifacts.packages_gz,
    }
    if artifacts.packages_html is not None:
        outputs[PACKAGES_HTML_FILENAME] = artifacts.packages_html.encode("utf-8")

    written = []
    for name, content in outputs.items():
        path = index.directory / name
        path.write_bytes(content)
        written.append(path)
    return written
