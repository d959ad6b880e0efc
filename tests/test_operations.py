from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from dincheck.config import DincheckConfig
from dincheck.errors import ManifestAlreadyExists, ManifestNotFound, NotADirectory
from dincheck.manifest import load_manifest
from dincheck.operations import (
    EXIT_DIFFERENCES,
    EXIT_OK,
    create_manifest,
    update_manifest,
    verify_manifest,
)

CONFIG = DincheckConfig()


def _sha(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _tree(root: Path) -> Path:
    root.mkdir()
    (root / "a.txt").write_bytes(b"hello")
    (root / "b.txt").write_bytes(b"world")
    return root


def test_create_writes_manifest_of_current_tree(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")

    outcome = create_manifest(root, config=CONFIG)

    assert outcome.operation == "create"
    assert outcome.exit_code == EXIT_OK
    assert outcome.entries_count == 2
    assert outcome.result is None
    assert outcome.manifest_path == root / ".checksums.sha256"
    assert load_manifest(outcome.manifest_path) == {
        "a.txt": _sha(b"hello"),
        "b.txt": _sha(b"world"),
    }


def test_create_twice_fails_and_keeps_first_manifest(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    create_manifest(root, config=CONFIG)
    manifest = root / ".checksums.sha256"
    before = manifest.read_bytes()

    (root / "a.txt").write_bytes(b"changed")
    with pytest.raises(ManifestAlreadyExists):
        create_manifest(root, config=CONFIG)

    assert manifest.read_bytes() == before


def test_create_skips_scan_when_manifest_exists(monkeypatch, tmp_path: Path) -> None:
    from dincheck import operations

    root = _tree(tmp_path / "root")
    (root / ".checksums.sha256").write_text("", encoding="utf-8")

    def _should_not_scan(*_args, **_kwargs):  # noqa: ANN001
        raise AssertionError("compute_entries should not be called")

    monkeypatch.setattr(operations, "compute_entries", _should_not_scan)

    with pytest.raises(ManifestAlreadyExists):
        create_manifest(root, config=CONFIG)


@pytest.mark.parametrize("op", [create_manifest, verify_manifest, update_manifest])
def test_root_must_be_a_directory(op, tmp_path: Path) -> None:  # noqa: ANN001
    file_root = tmp_path / "plain.txt"
    file_root.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectory):
        op(file_root, config=CONFIG)
    with pytest.raises(NotADirectory):
        op(tmp_path / "absent", config=CONFIG)


def test_verify_requires_manifest(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    with pytest.raises(ManifestNotFound) as excinfo:
        verify_manifest(root, config=CONFIG)
    assert excinfo.value.exit_code == 1


def test_verify_clean_then_detects_changes_without_writing(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    create_manifest(root, config=CONFIG)
    manifest = root / ".checksums.sha256"
    snapshot = manifest.read_bytes()

    clean = verify_manifest(root, config=CONFIG)
    assert clean.exit_code == EXIT_OK
    assert clean.result is not None
    assert clean.result.ok == {"a.txt", "b.txt"}
    assert not clean.result.has_differences

    (root / "a.txt").write_bytes(b"HELLO")
    (root / "b.txt").unlink()
    (root / "c.txt").write_bytes(b"data")

    dirty = verify_manifest(root, config=CONFIG)
    assert dirty.exit_code == EXIT_DIFFERENCES
    assert dirty.result is not None
    assert dirty.result.changed == {"a.txt"}
    assert dirty.result.missing == {"b.txt"}
    assert dirty.result.new == {"c.txt"}
    assert manifest.read_bytes() == snapshot


def test_update_without_manifest_treats_everything_as_new(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")

    outcome = update_manifest(root, config=CONFIG)

    assert outcome.exit_code == EXIT_OK
    assert outcome.result is not None
    assert outcome.result.new == {"a.txt", "b.txt"}
    assert set(load_manifest(root / ".checksums.sha256")) == {"a.txt", "b.txt"}


def test_update_rewrites_manifest_and_next_verify_is_clean(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    create_manifest(root, config=CONFIG)

    (root / "a.txt").write_bytes(b"HELLO")
    (root / "b.txt").unlink()
    (root / "c.txt").write_bytes(b"data")

    outcome = update_manifest(root, config=CONFIG)
    assert outcome.exit_code == EXIT_OK
    assert outcome.result is not None
    assert outcome.result.changed == {"a.txt"}
    assert outcome.result.missing == {"b.txt"}
    assert outcome.result.new == {"c.txt"}

    assert load_manifest(root / ".checksums.sha256") == {
        "a.txt": _sha(b"HELLO"),
        "c.txt": _sha(b"data"),
    }
    assert verify_manifest(root, config=CONFIG).exit_code == EXIT_OK


def test_update_rewrites_even_when_clean(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    manifest = root / ".checksums.sha256"
    # Unsorted, extra-whitespace manifest that still parses to the current tree.
    manifest.write_text(
        f"{_sha(b'world')}   b.txt\n\n{_sha(b'hello')}  a.txt\n", encoding="utf-8"
    )

    outcome = update_manifest(root, config=CONFIG)

    assert outcome.result is not None
    assert not outcome.result.has_differences
    assert manifest.read_text(encoding="utf-8") == (
        f"{_sha(b'hello')}  a.txt\n{_sha(b'world')}  b.txt\n"
    )


def test_relative_root_is_made_absolute(monkeypatch, tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    monkeypatch.chdir(tmp_path)

    outcome = create_manifest("root", config=CONFIG)
    assert outcome.root == root
    assert outcome.manifest_path.exists()


def test_dangling_manifest_symlink_counts_as_existing(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    manifest = root / ".checksums.sha256"
    manifest.symlink_to(tmp_path / "nowhere")

    with pytest.raises(ManifestAlreadyExists):
        create_manifest(root, config=CONFIG)

    verified = verify_manifest(root, config=CONFIG)
    assert verified.exit_code == EXIT_DIFFERENCES
    assert verified.result is not None
    assert verified.result.new == {"a.txt", "b.txt"}

    updated = update_manifest(root, config=CONFIG)
    assert updated.exit_code == EXIT_OK
    assert not manifest.is_symlink()
    assert set(load_manifest(manifest)) == {"a.txt", "b.txt"}
