"""Control metadata: pulling the control file out of control.tar.gz and parsing it."""

import gzip
import io
import logging
import tarfile
import zlib
from pathlib import Path

from ipkindex.archive import extract_member
from ipkindex.constants import CONTROL_MEMBER, CONTROL_PATHS
from ipkindex.exceptions import FormatError, MetadataNotFoundError
from ipkindex.models import ControlFields

logger = logging.getLogger(__name__)


def _normalize_tar_name(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return name


def extract_control_text(payload: bytes, paths: tuple[str, ...] = CONTROL_PATHS) -> str:
    """Decompress a control.tar.gz payload and return its control file as text.

    `paths` are tried in order; the first regular file that matches wins.
    Leading "./" components in archive names are ignored.
    """
    try:
        tar_bytes = gzip.decompress(payload)
    except (OSError, EOFError, zlib.error) as e:
        raise FormatError(f"{CONTROL_MEMBER} is not valid gzip data: {e}") from e

    try:
        with tarfile.open(fileobj=io.BytesIO(tar_bytes), mode="r:") as tar:
            files = {_normalize_tar_name(m.name): m for m in tar.getmembers() if m.isfile()}
            for path in paths:
                member = files.get(path)
                if member is None:
                    continue
                handle = tar.extractfile(member)
                if handle is None:
                    continue
                logger.debug(f"Found control file at {member.name}")
                return handle.read().decode("utf-8", errors="ignore")
    except tarfile.TarError as e:
        raise FormatError(f"{CONTROL_MEMBER} is not a valid tar archive: {e}") from e

    raise MetadataNotFoundError(paths)


def parse_control_fields(text: str) -> ControlFields:
    """Parse `Key: value` lines into an ordered mapping.

    Each line is split at its first colon only. Lines without a colon or with
    an empty key are ignored, and a repeated key overwrites the earlier value.
    """
    fields: ControlFields = {}
    for line in text.split("\n"):
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        fields[key] = value.strip()
    return fields


def read_control_fields(path: Path) -> ControlFields:
    """Parse the control fields of the .ipk archive at `path`."""
    payload = extract_member(path, CONTROL_MEMBER)
    return parse_control_fields(extract_control_text(payload))
