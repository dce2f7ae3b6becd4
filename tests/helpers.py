"""Test doubles for archive collaborators."""

import asyncio
import time
from pathlib import Path

from docker_archive_fixture import TarArchiver
from docker_archive_fixture.exceptions import ArchiveCommandError


class FakeRootfs:
    """Populates a rootfs with a couple of small files."""

    def __init__(self):
        self.populated: list[Path] = []

    def populate(self, root: Path) -> None:
        (root / "bin").mkdir()
        (root / "bin" / "sh").write_text("#!fake\n")
        (root / "etc").mkdir()
        (root / "etc" / "passwd").write_text("root:x:0:0:root:/root:/bin/sh\n")
        self.populated.append(root)


class SlowRootfs(FakeRootfs):
    """Fake rootfs whose population blocks the calling thread."""

    def __init__(self, delay: float = 0.5):
        super().__init__()
        self.delay = delay

    def populate(self, root: Path) -> None:
        time.sleep(self.delay)
        super().populate(root)


class FailingRootfs:
    """Rootfs populator that always fails."""

    def populate(self, root: Path) -> None:
        raise RuntimeError("no space left in fake rootfs")


class RecordingArchiver:
    """Real tar archiver that records every invocation."""

    def __init__(self):
        self.calls: list[tuple[Path, Path]] = []
        self._archiver = TarArchiver()

    async def archive(self, source: Path, destination: Path) -> None:
        self.calls.append((source, destination))
        await self._archiver.archive(source, destination)


class FailingArchiver(RecordingArchiver):
    """Fails on the given invocation (0-based)."""

    def __init__(self, fail_on: int = 0):
        super().__init__()
        self.fail_on = fail_on

    async def archive(self, source: Path, destination: Path) -> None:
        if len(self.calls) == self.fail_on:
            self.calls.append((source, destination))
            raise ArchiveCommandError("tar exited with status 2")
        await super().archive(source, destination)


class DiscardingArchiver(RecordingArchiver):
    """Ends the given invocation (0-based) cancelled, as a killed tar would."""

    def __init__(self, discard_on: int = 0):
        super().__init__()
        self.discard_on = discard_on

    async def archive(self, source: Path, destination: Path) -> None:
        if len(self.calls) == self.discard_on:
            self.calls.append((source, destination))
            raise asyncio.CancelledError()
        await super().archive(source, destination)


class BlockingArchiver(RecordingArchiver):
    """Waits until released; lets tests cancel a build mid-archive."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def archive(self, source: Path, destination: Path) -> None:
        self.calls.append((source, destination))
        self.started.set()
        await self.release.wait()
