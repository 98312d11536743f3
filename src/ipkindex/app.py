"""ipkindex: build opkg package indices for a tree of .ipk archives."""

import logging
from pathlib import Path

import typer

from ipkindex import setup_logging
from ipkindex.archive import list_members
from ipkindex.config import RepoConfig
from ipkindex.control import read_control_fields
from ipkindex.exceptions import PackageIndexError
from ipkindex.reader import iter_index_entries, resolve_index_path, verify_directory
from ipkindex.walker import generate_repository

cli = typer.Typer(no_args_is_help=True, help="Generate Packages indices for .ipk repositories.")


@cli.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    setup_logging(logging.DEBUG if verbose else logging.INFO)


@cli.command()
def generate(
    root_dirs: list[str] | None = typer.Argument(None, help="Root directories, relative to the repo root"),
    repo_root: Path | None = typer.Option(None, help="Repository root (default: $IPKINDEX_REPO_ROOT or cwd)"),
    md5: bool = typer.Option(True, "--md5/--no-md5", help="Include MD5Sum fields"),
    html: bool = typer.Option(True, "--html/--no-html", help="Write Packages.html"),
    listing: bool = typer.Option(True, "--listing/--no-listing", help="Write index.html listings"),
    maintainer: str | None = typer.Option(None, help="Maintainer for packages that declare none"),
):
    """Walk the root directories and write Packages, Packages.gz and HTML files."""
    config = RepoConfig.from_env(
        repo_root=repo_root,
        root_dirs=tuple(root_dirs) if root_dirs else None,
        include_md5=md5,
        write_html=html,
        write_listing=listing,
        default_maintainer=maintainer,
    )
    summary = generate_repository(config)
    if not summary.roots_scanned:
        raise typer.Exit(code=1)


@cli.command()
def inspect(
    archive: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="An .ipk file"),
):
    """Show the members and control fields of one archive."""
    try:
        members = list_members(archive.read_bytes())
        typer.echo(f"Members: {', '.join(members) or '(none)'}")
        fields = read_control_fields(archive)
    except PackageIndexError as e:
        typer.echo(f"{archive}: {e}", err=True)
        raise typer.Exit(code=1)

    for key, value in fields.items():
        typer.echo(f"{key}: {value}")


@cli.command()
def show(
    path: Path = typer.Argument(..., exists=True, help="A Packages[.gz] file or a directory holding one"),
):
    """List the entries of a generated index."""
    try:
        index_path = resolve_index_path(path)
    except FileNotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    for entry in iter_index_entries(index_path):
        typer.echo(f"{entry.get('Package', '?')} {entry.get('Version', '?')} {entry.get('Architecture', '?')}")


@cli.command()
def verify(
    directory: Path = typer.Argument(..., exists=True, file_okay=False, help="An indexed directory"),
):
    """Check a directory's index against the archives next to it."""
    problems = verify_directory(directory)
    for problem in problems:
        typer.echo(problem, err=True)
    if problems:
        raise typer.Exit(code=1)
    typer.echo(f"{directory}: OK")


def main() -> None:
    """Main entry point for the ipkindex CLI."""
    cli()


if __name__ == "__main__":
    main()
