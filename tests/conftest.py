import gzip
import io
import tarfile
from pathlib import Path

import pytest

from ipkindex.config import RepoConfig


def ar_header(name: str, size: int) -> bytes:
    assert len(name) <= 16
    return (
        name.encode("ascii").ljust(16, b" ")
        + b"0".ljust(12)
        + b"0".ljust(6)
        + b"0".ljust(6)
        + b"100644".ljust(8)
        + str(size).encode("ascii").ljust(10)
        + b"`\n"
    )


def build_ar(members: list[tuple[str, bytes]]) -> bytes:
    out = bytearray(b"!<arch>\n")
    for name, payload in members:
        out += ar_header(name, len(payload))
        out += payload
        if len(payload) % 2:
            out += b"\n"
    return bytes(out)


def build_tar_gz(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return gzip.compress(buf.getvalue(), mtime=0)


def control_text(**fields: str) -> str:
    return "".join(f"{key}: {value}\n" for key, value in fields.items())


def build_ipk(control: str, control_path: str = "control", total_size: int | None = None) -> bytes:
    """An .ipk container; with `total_size` the data member is sized so the file is exactly that long."""
    control_tar_gz = build_tar_gz({control_path: control.encode("utf-8")})
    members = [("debian-binary", b"2.0\n"), ("control.tar.gz", control_tar_gz)]
    data = b"\0" * 32
    if total_size is not None:
        used = len(build_ar(members)) + 60
        assert total_size >= used and (total_size - used) % 2 == 0
        data = b"\0" * (total_size - used)
    members.append(("data.tar.gz", data))
    return build_ar(members)


@pytest.fixture
def make_ipk():
    def _make(directory: Path, filename: str, control: str, **kwargs) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_bytes(build_ipk(control, **kwargs))
        return path

    return _make


@pytest.fixture
def config(tmp_path: Path) -> RepoConfig:
    return RepoConfig(repo_root=tmp_path, root_dirs=("keenetic",), github_user="Owner", github_repo="repo")
