"""Reader for ar containers, the outer layer of an .ipk package.

An ar file is the 8-byte magic followed by records of a 60-byte header,
the payload, and one padding byte when the payload length is odd. Header
layout (offsets within the header):

    0-16   name, terminated by NUL or space, optionally suffixed with "/"
    16-48  mtime, uid, gid, mode (ignored)
    48-58  payload size, ASCII decimal
    58-60  end marker "`\\n"
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from ipkindex.constants import AR_HEADER_END, AR_HEADER_SIZE, AR_MAGIC, AR_NAME_SIZE, AR_SIZE_FIELD
from ipkindex.exceptions import FormatError, MemberNotFoundError
from ipkindex.models import ArchiveMember

logger = logging.getLogger(__name__)


def _parse_member_name(field: bytes) -> str:
    end = len(field)
    for terminator in (b"\0", b" "):
        pos = field.find(terminator)
        if pos != -1:
            end = min(end, pos)
    return field[:end].decode("ascii", errors="replace").rstrip("/")


def iter_members(data: bytes) -> Iterator[ArchiveMember]:
    """Yield the members of an ar container in file order.

    Raises FormatError if the magic is missing. A malformed header, a bad end
    marker or a payload running past the end of the buffer ends iteration
    quietly; everything before it is still yielded.
    """
    if not data.startswith(AR_MAGIC):
        raise FormatError("not an ar archive (bad magic)")

    offset = len(AR_MAGIC)
    while offset + AR_HEADER_SIZE <= len(data):
        header = data[offset : offset + AR_HEADER_SIZE]
        if header[-len(AR_HEADER_END) :] != AR_HEADER_END:
            logger.debug(f"Bad header end marker at offset {offset}, stopping")
            return

        size_text = header[AR_SIZE_FIELD].decode("ascii", errors="replace").strip()
        if not size_text.isdigit():
            logger.debug(f"Unparseable member size {size_text!r} at offset {offset}, stopping")
            return
        size = int(size_text)

        start = offset + AR_HEADER_SIZE
        if start + size > len(data):
            logger.debug(f"Member at offset {offset} runs past end of archive, stopping")
            return

        yield ArchiveMember(name=_parse_member_name(header[:AR_NAME_SIZE]), size=size, offset=start)
        offset = start + size + (size % 2)


def read_member(data: bytes, name: str) -> bytes | None:
    """Return the payload of the first member called `name`, or None."""
    for member in iter_members(data):
        if member.name == name:
            return data[member.offset : member.offset + member.size]
    return None


def list_members(data: bytes) -> list[str]:
    """Names of every readable member, for diagnostics."""
    return [member.name for member in iter_members(data)]


def extract_member(path: Path, name: str) -> bytes:
    """Read `path` and return the payload of member `name`.

    Raises:
        FormatError: the file is not an ar container
        MemberNotFoundError: no member called `name`
        OSError: the file could not be read
    """
    data = path.read_bytes()
    payload = read_member(data, name)
    if payload is None:
        raise MemberNotFoundError(name, list_members(data))
    return payload
