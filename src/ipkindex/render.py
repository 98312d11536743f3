"""HTML renderings: the per-directory package table and the directory listing."""

import html
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import quote

from ipkindex.constants import LISTING_FILENAME
from ipkindex.models import PackageIndexEntry
from ipkindex.utils import human_size

CSS_CONTENT = """body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif; margin: 2em; color: #2d3748; }
h1 { font-size: 1.6em; border-bottom: 2px solid #4299e1; padding-bottom: 0.3em; }
table { border-collapse: collapse; width: 100%; }
th, td { text-align: left; padding: 0.4em 0.8em; border-bottom: 1px solid #e2e8f0; }
th { background: #f7fafc; }
td.size { text-align: right; font-family: monospace; }
a { color: #2b6cb0; text-decoration: none; }
a:hover { text-decoration: underline; }
"""

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
{css}</style>
</head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
"""


def _page(title: str, body: str) -> str:
    return _PAGE_TEMPLATE.format(title=html.escape(title), css=CSS_CONTENT, body=body)


def render_packages_html(entries: Iterable[PackageIndexEntry], relpath: str = "") -> str:
    """Table of package name, version, section and description, linking to each archive."""
    rows = []
    for entry in entries:
        fields = entry.fields
        rows.append(
            "<tr>"
            f'<td><a href="{html.escape(quote(entry.filename))}">{html.escape(entry.name)}</a></td>'
            f"<td>{html.escape(entry.version)}</td>"
            f"<td>{html.escape(fields.get('Section') or '')}</td>"
            f"<td>{html.escape(fields.get('Description') or '')}</td>"
            "</tr>"
        )
    body = "\n".join(
        [
            "<table>",
            "<thead><tr><th>Package</th><th>Version</th><th>Section</th><th>Description</th></tr></thead>",
            "<tbody>",
            *rows,
            "</tbody>",
            "</table>",
        ]
    )
    return _page(f"Packages in /{relpath}" if relpath else "Packages", body)


def render_listing(directory: Path, base_url: str, url_path: str, parent: bool = False) -> str:
    """List the immediate children of `directory`: directories first, then files.

    Args:
        directory: The directory to list
        base_url: Public URL of the repository root
        url_path: Path of `directory` below the repository root, "/"-separated
        parent: Whether to add a link to the parent directory
    """
    url_path = url_path.strip("/")
    dir_url = f"{base_url.rstrip('/')}/{quote(url_path)}" if url_path else base_url.rstrip("/")

    children = sorted(directory.iterdir(), key=lambda p: p.name)
    subdirs = [p for p in children if p.is_dir()]
    files = [p for p in children if p.is_file() and p.name != LISTING_FILENAME]

    rows = []
    if parent:
        rows.append('<tr><td><a href="../">../</a></td><td class="size">-</td></tr>')
    for sub in subdirs:
        href = html.escape(f"{dir_url}/{quote(sub.name)}/")
        rows.append(f'<tr><td><a href="{href}">{html.escape(sub.name)}/</a></td><td class="size">-</td></tr>')
    for file in files:
        href = html.escape(f"{dir_url}/{quote(file.name)}")
        size = human_size(file.stat().st_size)
        rows.append(
            f'<tr><td><a href="{href}">{html.escape(file.name)}</a></td><td class="size">{size}</td></tr>'
        )

    body = "\n".join(
        [
            "<table>",
            "<thead><tr><th>Name</th><th>Size</th></tr></thead>",
            "<tbody>",
            *rows,
            "</tbody>",
            "</table>",
        ]
    )
    return _page(f"Index of /{url_path}", body)


def write_listing(directory: Path, base_url: str, url_path: str, parent: bool = False) -> Path:
    path = directory / LISTING_FILENAME
    path.write_text(render_listing(directory, base_url, url_path, parent), encoding="utf-8")
    return path
