"""Example usage of the async docker test image builder."""

import asyncio
import logging
import sys
import tempfile
from pathlib import Path

from docker_archive_fixture import (
    LAYER_ID,
    ImageArchiveError,
    LinuxRootfs,
    create,
)
from docker_archive_fixture.tar.reader import list_layer_files, read_repositories

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main(directory: Path):
    """Build one image and show what ended up in it."""
    try:
        logger.info("Building docker test image...")
        tar_path = await create(
            directory,
            "alpine",
            entrypoint='["sh", "-c"]',
            cmd='["echo hello"]',
            rootfs=LinuxRootfs(files=["/bin/sh", "/etc/passwd"]),
        )
        logger.info(f"✓ Created {tar_path}")

        logger.info(f"Repositories: {read_repositories(tar_path)}")
        logger.info(f"Layer files: {list_layer_files(tar_path, LAYER_ID)}")

    except ImageArchiveError as e:
        logger.error(f"Build error: {e}")


async def concurrent_builds(directory: Path):
    """Example of concurrent builds into separate directories."""
    names = ["busybox", "ubuntu", "debian"]

    try:
        logger.info("Running concurrent builds...")

        tasks = [
            create(
                directory / name,
                name,
                rootfs=LinuxRootfs(files=["/bin/sh"], directories=["/tmp"]),
            )
            for name in names
        ]

        for tar_path in await asyncio.gather(*tasks):
            logger.info(f"  Built: {tar_path}")

    except ImageArchiveError as e:
        logger.error(f"Build error: {e}")


if __name__ == "__main__":
    if not sys.platform.startswith("linux"):
        sys.exit("LinuxRootfs copies host binaries and needs a Linux host")

    with tempfile.TemporaryDirectory() as tmp:
        print("=== Single Build ===")
        asyncio.run(main(Path(tmp) / "single"))

        print("\n=== Concurrent Builds ===")
        asyncio.run(concurrent_builds(Path(tmp) / "concurrent"))
