"""Depth-first walk over the configured roots, indexing one directory at a time."""

import logging
from pathlib import Path

from ipkindex.config import RepoConfig
from ipkindex.index import build_directory_index, write_artifacts
from ipkindex.models import GenerationSummary
from ipkindex.render import write_listing

logger = logging.getLogger(__name__)


def _subdirectories(directory: Path) -> list[Path]:
    # symlinked directories are not followed
    return sorted((p for p in directory.iterdir() if p.is_dir() and not p.is_symlink()), key=lambda p: p.name)


def process_directory(
    directory: Path,
    url_path: str,
    config: RepoConfig,
    summary: GenerationSummary,
    is_root: bool = False,
) -> None:
    """Index a single directory and write its artifacts and listing."""
    summary.directories_scanned += 1
    try:
        index = build_directory_index(directory, config, relpath=url_path)
        summary.archives_skipped += len(index.skipped)
        if index.artifacts is not None:
            write_artifacts(index)
            summary.directories_indexed += 1
            summary.packages_indexed += len(index.entries)
            logger.info(f"Generated Packages and Packages.gz for {url_path}")
        elif index.skipped:
            logger.warning(f"No valid packages in {url_path}, {len(index.skipped)} archive(s) skipped")

        if config.write_listing:
            write_listing(directory, config.base_url, url_path, parent=not is_root)
    except OSError:
        logger.exception(f"Failed to write index for {url_path}")
        summary.failed_directories.append(url_path)


def walk_and_generate(
    directory: Path,
    url_path: str,
    config: RepoConfig,
    summary: GenerationSummary,
    is_root: bool = False,
) -> None:
    """Process `directory`, then recurse into its subdirectories in name order."""
    process_directory(directory, url_path, config, summary, is_root=is_root)
    try:
        subdirs = _subdirectories(directory)
    except OSError as e:
        logger.warning(f"Cannot list {url_path}: {e}")
        return
    for sub in subdirs:
        walk_and_generate(sub, f"{url_path}/{sub.name}", config, summary)


def generate_repository(config: RepoConfig) -> GenerationSummary:
    """Walk every configured root. A missing root is reported and skipped."""
    summary = GenerationSummary()
    for root_rel in config.root_dirs:
        root = config.repo_root / root_rel
        if not root.is_dir():
            logger.warning(f"Directory not found: {root_rel}")
            summary.missing_roots.append(root_rel)
            continue
        summary.roots_scanned.append(root_rel)
        walk_and_generate(root, Path(root_rel).as_posix().strip("/"), config, summary, is_root=True)

    logger.info(
        f"All Packages files generated: {summary.packages_indexed} package(s) in "
        f"{summary.directories_indexed} of {summary.directories_scanned} director(ies), "
        f"{summary.archives_skipped} archive(s) skipped"
    )
    return summary
