"""Errors raised while turning one archive file into an index candidate.

All of them are per-archive: the index builder catches them, logs a warning
and leaves the archive out of the directory's index.
"""


class PackageIndexError(Exception):
    """Base class for per-archive failures."""


class FormatError(PackageIndexError):
    """The container or one of its nested payloads is malformed."""


class MemberNotFoundError(FormatError):
    """The container does not hold the requested member."""

    def __init__(self, member: str, available: list[str]):
        self.member = member
        self.available = available
        listing = ", ".join(available) if available else "no members"
        super().__init__(f"member '{member}' not found (archive has: {listing})")


class MetadataNotFoundError(PackageIndexError):
    """The metadata archive has no control file at any known path."""

    def __init__(self, searched: tuple[str, ...] | list[str]):
        self.searched = tuple(searched)
        super().__init__(f"no control file found (looked for: {', '.join(self.searched)})")


class MissingFieldError(PackageIndexError):
    """Control metadata lacks a field the index requires."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"missing required control field(s): {', '.join(missing)}")
