import gzip
import logging

from conftest import control_text
from ipkindex import walker
from ipkindex.models import GenerationSummary
from ipkindex.walker import generate_repository, walk_and_generate


def test_walks_every_directory_depth_first(tmp_path, config, make_ipk):
    root = tmp_path / "keenetic"
    make_ipk(root / "mipsel", "foo_1.0.ipk", control_text(Package="foo", Version="1.0", Architecture="mipsel"))
    make_ipk(root / "aarch64", "foo_1.0.ipk", control_text(Package="foo", Version="1.0", Architecture="aarch64"))
    (root / "docs").mkdir()
    (root / "docs" / "README.txt").write_text("hello")

    summary = generate_repository(config)

    assert summary.roots_scanned == ["keenetic"]
    assert summary.directories_scanned == 4
    assert summary.directories_indexed == 2
    assert summary.packages_indexed == 2
    for arch in ("mipsel", "aarch64"):
        packages = (root / arch / "Packages").read_bytes()
        assert f"Architecture: {arch}".encode() in packages
        assert gzip.decompress((root / arch / "Packages.gz").read_bytes()) == packages
    assert not (root / "Packages").exists()
    assert not (root / "docs" / "Packages").exists()
    assert not (root / "docs" / "Packages.gz").exists()


def test_directory_order_is_parent_before_children(tmp_path, config, make_ipk, caplog):
    root = tmp_path / "keenetic"
    make_ipk(root, "top.ipk", control_text(Package="top", Version="1", Architecture="all"))
    make_ipk(root / "b", "b.ipk", control_text(Package="b", Version="1", Architecture="all"))
    make_ipk(root / "a" / "deep", "d.ipk", control_text(Package="d", Version="1", Architecture="all"))

    with caplog.at_level(logging.INFO, logger="ipkindex.walker"):
        walk_and_generate(root, "keenetic", config, GenerationSummary(), is_root=True)

    generated = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Generated")]
    assert generated == [
        "Generated Packages and Packages.gz for keenetic",
        "Generated Packages and Packages.gz for keenetic/a/deep",
        "Generated Packages and Packages.gz for keenetic/b",
    ]


def test_missing_root_is_skipped(tmp_path, config, make_ipk, caplog):
    make_ipk(tmp_path / "present", "p.ipk", control_text(Package="p", Version="1", Architecture="all"))
    config = config.model_copy(update={"root_dirs": ("absent", "present")})

    with caplog.at_level(logging.WARNING, logger="ipkindex.walker"):
        summary = generate_repository(config)

    assert summary.missing_roots == ["absent"]
    assert summary.roots_scanned == ["present"]
    assert summary.packages_indexed == 1
    assert "Directory not found: absent" in caplog.text


def test_invalid_archives_are_counted(tmp_path, config, make_ipk):
    root = tmp_path / "keenetic"
    make_ipk(root, "ok.ipk", control_text(Package="ok", Version="1", Architecture="all"))
    (root / "bad.ipk").write_bytes(b"garbage")

    summary = generate_repository(config)

    assert summary.archives_skipped == 1
    assert summary.packages_indexed == 1


def test_listing_written_for_every_directory(tmp_path, config, make_ipk):
    root = tmp_path / "keenetic"
    make_ipk(root / "mipsel", "foo.ipk", control_text(Package="foo", Version="1", Architecture="mipsel"))

    generate_repository(config)

    top = (root / "index.html").read_text(encoding="utf-8")
    assert 'href="https://owner.github.io/repo/keenetic/mipsel/"' in top
    assert 'href="../"' not in top
    sub = (root / "mipsel" / "index.html").read_text(encoding="utf-8")
    assert 'href="../"' in sub
    assert 'href="https://owner.github.io/repo/keenetic/mipsel/Packages.gz"' in sub


def test_listing_can_be_disabled(tmp_path, config, make_ipk):
    root = tmp_path / "keenetic"
    make_ipk(root, "foo.ipk", control_text(Package="foo", Version="1", Architecture="all"))

    generate_repository(config.model_copy(update={"write_listing": False}))

    assert (root / "Packages").exists()
    assert not (root / "index.html").exists()


def test_write_failure_does_not_stop_siblings(tmp_path, config, make_ipk, monkeypatch):
    root = tmp_path / "keenetic"
    make_ipk(root / "a", "a.ipk", control_text(Package="a", Version="1", Architecture="all"))
    make_ipk(root / "b", "b.ipk", control_text(Package="b", Version="1", Architecture="all"))

    real_write = walker.write_artifacts

    def flaky_write(index):
        if index.directory.name == "a":
            raise PermissionError("read-only file system")
        return real_write(index)

    monkeypatch.setattr(walker, "write_artifacts", flaky_write)
    summary = generate_repository(config)

    assert summary.failed_directories == ["keenetic/a"]
    assert (root / "b" / "Packages").exists()
    assert summary.directories_indexed == 1
