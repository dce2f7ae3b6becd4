"""Directory-to-tar archiving."""

import asyncio
import logging
import tarfile
from pathlib import Path
from typing import Protocol

from ..exceptions import ArchiveCommandError

logger = logging.getLogger(__name__)


class ArchiveInvoker(Protocol):
    """Archives the contents of a directory into a tar file.

    Implementations raise on failure. Ending cancelled (raising
    ``asyncio.CancelledError`` from inside the archive task) means the
    archive was discarded.
    """

    async def archive(self, source: Path, destination: Path) -> None:
        ...


def _normalize(info: tarfile.TarInfo) -> tarfile.TarInfo:
    """Strip host ownership and timestamps from a tar member."""
    info.uid = 0
    info.gid = 0
    info.uname = "root"
    info.gname = "root"
    info.mtime = 0
    return info


class TarArchiver:
    """Uncompressed tar archiver backed by ``tarfile``.

    Members are named relative to ``source`` (``repositories``, not
    ``./repositories``), in sorted order with normalized ownership and
    mtimes, so identical trees produce identical archives.
    """

    async def archive(self, source: Path, destination: Path) -> None:
        """Tar the contents of ``source`` into ``destination``.

        Args:
            source: Directory whose contents become the archive root
            destination: Tar file to create or overwrite

        Raises:
            ArchiveCommandError: If the archive cannot be written
        """
        logger.debug(f"Archiving {source} -> {destination}")
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, self._write, Path(source), Path(destination))

    def _write(self, source: Path, destination: Path) -> None:
        """Write the archive (sync helper)."""
        try:
            with tarfile.open(destination, "w", format=tarfile.GNU_FORMAT) as tar:
                for child in sorted(source.iterdir()):
                    tar.add(child, arcname=child.name, filter=_normalize)
        except (tarfile.TarError, OSError) as e:
            raise ArchiveCommandError(
                f"Failed to archive '{source}' to '{destination}': {e}"
            ) from e
