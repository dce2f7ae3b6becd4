"""Tests for the tarfile-backed archiver."""

import tarfile

import pytest

from docker_archive_fixture.exceptions import ArchiveCommandError
from docker_archive_fixture.tar.archiver import TarArchiver


def make_tree(root):
    """Create a small directory tree."""
    (root / "layer" / "bin").mkdir(parents=True)
    (root / "layer" / "bin" / "sh").write_text("#!/bin/sh\n")
    (root / "repositories").write_text("{}")
    return root


@pytest.mark.asyncio
async def test_archive_member_names_are_relative(tmp_path):
    """Test members are named relative to the source, without './'."""
    source = make_tree(tmp_path / "src")
    destination = tmp_path / "out.tar"

    await TarArchiver().archive(source, destination)

    with tarfile.open(destination, "r") as tar:
        names = tar.getnames()

    assert names == ["layer", "layer/bin", "layer/bin/sh", "repositories"]


@pytest.mark.asyncio
async def test_archive_normalizes_metadata(tmp_path):
    """Test ownership and mtime are normalized."""
    source = make_tree(tmp_path / "src")
    destination = tmp_path / "out.tar"

    await TarArchiver().archive(source, destination)

    with tarfile.open(destination, "r") as tar:
        for member in tar.getmembers():
            assert member.uid == 0
            assert member.gid == 0
            assert member.uname == "root"
            assert member.mtime == 0


@pytest.mark.asyncio
async def test_archive_is_deterministic(tmp_path):
    """Test identical trees produce identical archives."""
    first = make_tree(tmp_path / "first")
    second = make_tree(tmp_path / "second")

    archiver = TarArchiver()
    await archiver.archive(first, tmp_path / "first.tar")
    await archiver.archive(second, tmp_path / "second.tar")

    assert (tmp_path / "first.tar").read_bytes() == (
        tmp_path / "second.tar"
    ).read_bytes()


@pytest.mark.asyncio
async def test_archive_empty_directory(tmp_path):
    """Test an empty directory yields an empty archive."""
    source = tmp_path / "empty"
    source.mkdir()

    await TarArchiver().archive(source, tmp_path / "empty.tar")

    with tarfile.open(tmp_path / "empty.tar", "r") as tar:
        assert tar.getnames() == []


@pytest.mark.asyncio
async def test_archive_missing_source_fails(tmp_path):
    """Test a missing source directory raises ArchiveCommandError."""
    with pytest.raises(ArchiveCommandError, match="Failed to archive"):
        await TarArchiver().archive(tmp_path / "missing", tmp_path / "out.tar")
