import errno
import os
from pathlib import Path

import pytest

from package_hash.targets import as_path_list, resolve_target

from conftest import MANIFEST, write_package


def test_directory_resolves_to_manifest_inside(tmp_path: Path) -> None:
    pkg = write_package(tmp_path / "pkg")
    target = resolve_target(pkg, "pyproject.toml")
    assert target.directory == pkg
    assert target.manifest_bytes == MANIFEST
    assert target.fragments() == [os.fsencode(str(pkg)), MANIFEST]


def test_file_resolves_to_its_parent(tmp_path: Path) -> None:
    pkg = write_package(tmp_path / "pkg")
    target = resolve_target(str(pkg / "pyproject.toml"), "pyproject.toml")
    assert target.directory == pkg
    assert target.manifest_bytes == MANIFEST


def test_any_file_can_be_the_manifest(tmp_path: Path) -> None:
    pkg = write_package(tmp_path / "pkg", manifest=b"{}", name="package.json")
    target = resolve_target(pkg / "package.json", "pyproject.toml")
    assert target.manifest_bytes == b"{}"


def test_relative_paths_are_made_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pkg = write_package(tmp_path / "pkg")
    monkeypatch.chdir(tmp_path)
    assert resolve_target("pkg", "pyproject.toml").directory == pkg


def test_missing_path_is_enoent(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError) as excinfo:
        resolve_target(tmp_path / "does-not-exist", "pyproject.toml")
    assert excinfo.value.errno == errno.ENOENT


def test_directory_without_manifest_is_enoent(tmp_path: Path) -> None:
    (tmp_path / "not-a-package").mkdir()
    with pytest.raises(FileNotFoundError) as excinfo:
        resolve_target(tmp_path / "not-a-package", "pyproject.toml")
    assert excinfo.value.errno == errno.ENOENT


def test_as_path_list_keeps_order_and_duplicates(tmp_path: Path) -> None:
    assert as_path_list("a") == ["a"]
    assert as_path_list(tmp_path) == [tmp_path]
    assert as_path_list(["b", "a", "b"]) == ["b", "a", "b"]
    assert as_path_list(("x",)) == ["x"]


def test_symlinked_manifest_keeps_callers_directory(tmp_path: Path) -> None:
    shared = write_package(tmp_path / "shared")
    consumer = tmp_path / "consumer"
    consumer.mkdir()
    (consumer / "pyproject.toml").symlink_to(Path("..") / "shared" / "pyproject.toml")

    by_file = resolve_target(consumer / "pyproject.toml", "pyproject.toml")
    by_dir = resolve_target(consumer, "pyproject.toml")
    assert by_file.directory == consumer
    assert by_dir.directory == consumer
    assert by_file.manifest_bytes == MANIFEST
    assert shared != consumer


def test_symlinked_directory_is_not_dereferenced(tmp_path: Path) -> None:
    write_package(tmp_path / "real")
    link = tmp_path / "link"
    link.symlink_to(tmp_path / "real", target_is_directory=True)

    target = resolve_target(link, "pyproject.toml")
    assert target.directory == link
    assert target.fragments()[0] == os.fsencode(str(link))


def test_dotdot_segments_are_normalized(tmp_path: Path) -> None:
    write_package(tmp_path / "pkg")
    target = resolve_target(tmp_path / "other" / ".." / "pkg", "pyproject.toml")
    assert target.directory == tmp_path / "pkg"
