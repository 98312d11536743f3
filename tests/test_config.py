from pathlib import Path

from ipkindex.config import RepoConfig


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = RepoConfig.from_env({})
    assert config.repo_root == tmp_path.resolve()
    assert config.root_dirs == ("keenetic",)
    assert config.base_url == "https://likdanil.github.io/release"
    assert config.default_maintainer == "Domain Server Team"
    assert config.include_md5 and config.write_html and config.write_listing


def test_github_repository_sets_base_url():
    config = RepoConfig.from_env({"GITHUB_REPOSITORY": "SomeOwner/packages"})
    assert config.github_user == "SomeOwner"
    assert config.base_url == "https://someowner.github.io/packages"


def test_partial_github_repository_keeps_defaults():
    config = RepoConfig.from_env({"GITHUB_REPOSITORY": "only-owner"})
    assert config.base_url == "https://only-owner.github.io/release"


def test_ci_uses_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = RepoConfig.from_env({"GITHUB_ACTIONS": "true", "IPKINDEX_REPO_ROOT": "/elsewhere"})
    assert config.repo_root == tmp_path.resolve()


def test_repo_root_and_root_dirs_from_env(tmp_path):
    config = RepoConfig.from_env(
        {"IPKINDEX_REPO_ROOT": str(tmp_path), "IPKINDEX_ROOT_DIRS": "keenetic, entware ,,", "IPKINDEX_MAINTAINER": "Ops"}
    )
    assert config.repo_root == tmp_path.resolve()
    assert config.root_dirs == ("keenetic", "entware")
    assert config.default_maintainer == "Ops"


def test_overrides_win_and_none_is_ignored(tmp_path):
    config = RepoConfig.from_env(
        {"IPKINDEX_ROOT_DIRS": "from-env"},
        root_dirs=("from-cli",),
        repo_root=Path(tmp_path),
        default_maintainer=None,
        include_md5=False,
    )
    assert config.root_dirs == ("from-cli",)
    assert config.default_maintainer == "Domain Server Team"
    assert config.include_md5 is False
