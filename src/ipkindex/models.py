"""Data models for archive members, package candidates and directory indices."""

from pathlib import Path
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field
from pydantic.dataclasses import dataclass

ControlFields: TypeAlias = dict[str, str]
EntryKey: TypeAlias = tuple[str, str]


@dataclass(frozen=True)
class ArchiveMember:
    """One named record inside an ar container.

    `offset` points at the first payload byte in the container buffer.
    """

    name: str
    size: int
    offset: int


class PackageCandidate(BaseModel):
    """An archive file found in a directory, with its parsed control fields."""

    model_config = ConfigDict(frozen=True)

    path: Path
    size: int
    fields: ControlFields

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def name(self) -> str:
        return self.fields["Package"]

    @property
    def version(self) -> str:
        return self.fields["Version"]

    @property
    def architecture(self) -> str:
        return self.fields["Architecture"]

    @property
    def key(self) -> EntryKey:
        """Deduplication key: (Package, Architecture)."""
        return (self.name, self.architecture)


class PackageIndexEntry(PackageCandidate):
    """The newest candidate for its key, as written to the index."""

    md5sum: str | None = None


class SkippedArchive(BaseModel):
    """An archive left out of the index, and why."""

    filename: str
    reason: str


class IndexArtifacts(BaseModel):
    """Serialized outputs for one directory."""

    packages: str
    packages_gz: bytes = Field(repr=False)
    packages_html: str | None = Field(default=None, repr=False)


class DirectoryIndex(BaseModel):
    """Result of indexing a single directory."""

    directory: Path
    relpath: str = ""
    entries: list[PackageIndexEntry] = Field(default_factory=list)
    skipped: list[SkippedArchive] = Field(default_factory=list)
    artifacts: IndexArtifacts | None = None


class GenerationSummary(BaseModel):
    """Counters for a whole run over every configured root."""

    roots_scanned: list[str] = Field(default_factory=list)
    missing_roots: list[str] = Field(default_factory=list)
    directories_scanned: int = 0
    directories_indexed: int = 0
    packages_indexed: int = 0
    archives_skipped: int = 0
    failed_directories: list[str] = Field(default_factory=list)
