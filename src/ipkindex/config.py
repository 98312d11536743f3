"""Run configuration, resolved once from the environment and passed down explicitly."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ipkindex.constants import (
    DEFAULT_EXTENSIONS,
    DEFAULT_GITHUB_REPO,
    DEFAULT_GITHUB_USER,
    DEFAULT_MAINTAINER,
    DEFAULT_ROOT_DIRS,
)


class RepoConfig(BaseModel):
    """Settings for one generation run."""

    model_config = ConfigDict(frozen=True)

    repo_root: Path = Field(default_factory=Path.cwd)
    root_dirs: tuple[str, ...] = DEFAULT_ROOT_DIRS
    github_user: str = DEFAULT_GITHUB_USER
    github_repo: str = DEFAULT_GITHUB_REPO
    default_maintainer: str = DEFAULT_MAINTAINER
    include_md5: bool = True
    write_html: bool = True
    write_listing: bool = True
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS

    @field_validator("repo_root")
    @classmethod
    def _absolute_root(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @computed_field
    @property
    def base_url(self) -> str:
        """Public URL of the repository root, used for absolute listing links."""
        return f"https://{self.github_user.lower()}.github.io/{self.github_repo}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "RepoConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Explicit values (e.g. from CLI options); None values are ignored

        Recognised variables:
            GITHUB_REPOSITORY    "owner/repo", used for the public base URL
            GITHUB_ACTIONS       when "true", the repository root is the working directory
            IPKINDEX_REPO_ROOT   repository root outside of CI
            IPKINDEX_ROOT_DIRS   comma separated root directories to scan
            IPKINDEX_MAINTAINER  Maintainer written for packages that declare none
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if repository := env.get("GITHUB_REPOSITORY"):
            user, _, repo = repository.partition("/")
            if user:
                values["github_user"] = user
            if repo:
                values["github_repo"] = repo.split("/")[0]

        if env.get("GITHUB_ACTIONS") == "true":
            values["repo_root"] = Path.cwd()
        elif repo_root := env.get("IPKINDEX_REPO_ROOT"):
            values["repo_root"] = Path(repo_root)

        if root_dirs := env.get("IPKINDEX_ROOT_DIRS"):
            values["root_dirs"] = tuple(d.strip() for d in root_dirs.split(",") if d.strip())

        if maintainer := env.get("IPKINDEX_MAINTAINER"):
            values["default_maintainer"] = maintainer

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
