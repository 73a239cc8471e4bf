import pytest

from errors import RepoNotFound
from registry import RepoEntry, RepoRegistry, repo_name_from_path


@pytest.mark.parametrize("path, name", [
    ("/srv/app", "app"),
    ("/srv/app/", "app"),
    ("relative/dir/site", "site"),
    ("bare", "bare"),
])
def test_repo_name_from_path(path, name):
    assert repo_name_from_path(path) == name


def test_resolve_registered_name():
    registry = RepoRegistry.from_paths(["/srv/app", "/srv/other"])
    assert registry.resolve("app") == "/srv/app"
    assert registry.resolve("other") == "/srv/other"


def test_resolve_missing_name_raises_repo_not_found():
    registry = RepoRegistry.from_paths(["/srv/app", "/srv/other"])
    with pytest.raises(RepoNotFound) as excinfo:
        registry.resolve("missing")
    assert excinfo.value.name == "missing"
    assert excinfo.value.status_code == 500


def test_first_match_wins_for_duplicate_names():
    registry = RepoRegistry.from_paths(["/srv/a/app", "/srv/b/app"])
    assert registry.resolve("app") == "/srv/a/app"


def test_from_paths_skips_empty_paths_and_keeps_order():
    registry = RepoRegistry.from_paths(["/srv/one", "", "/srv/two"])
    assert list(registry) == [RepoEntry("one", "/srv/one"), RepoEntry("two", "/srv/two")]
    assert len(registry) == 2


def test_empty_path_entry_is_rejected():
    with pytest.raises(ValueError):
        RepoRegistry([RepoEntry("app", "")])


def test_registry_is_read_only():
    registry = RepoRegistry.from_paths(["/srv/app"])
    assert isinstance(registry.entries, tuple)
    with pytest.raises(AttributeError):
        registry.entries[0].path = "/tmp/elsewhere"


@pytest.mark.parametrize("path", ["/", "//"])
def test_paths_without_a_directory_name_are_skipped(path):
    registry = RepoRegistry.from_paths([path, "/srv/app"])
    assert list(registry) == [RepoEntry("app", "/srv/app")]
    with pytest.raises(RepoNotFound):
        registry.resolve("")


def test_unnamed_entry_is_rejected():
    with pytest.raises(ValueError):
        RepoRegistry([RepoEntry("", "/")])
