"""Test configuration and fixtures."""

import sys

import pytest

from docker_archive_fixture import ImageArchiveBuilder
from tests.helpers import FakeRootfs, RecordingArchiver


@pytest.fixture
def output_dir(tmp_path):
    """Output directory for built images (not yet created)."""
    return tmp_path / "images"


@pytest.fixture
def archiver():
    """Recording tar archiver."""
    return RecordingArchiver()


@pytest.fixture
def rootfs():
    """Small fake rootfs populator."""
    return FakeRootfs()


@pytest.fixture
def builder(archiver, rootfs):
    """Image archive builder wired with test collaborators."""
    return ImageArchiveBuilder(archiver=archiver, rootfs=rootfs)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test copying host files"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip host-dependent integration tests off Linux."""
    skip_integration = pytest.mark.skip(reason="Requires a Linux host")

    for item in items:
        if "integration" in item.keywords and not sys.platform.startswith("linux"):
            item.add_marker(skip_integration)
