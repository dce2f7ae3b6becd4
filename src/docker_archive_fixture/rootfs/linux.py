"""Minimal Linux root filesystem built from host files."""

import logging
import os
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ..exceptions import RootfsError

logger = logging.getLogger(__name__)

DEFAULT_FILES: tuple[str, ...] = (
    "/bin/echo",
    "/bin/ls",
    "/bin/ping",
    "/bin/sh",
    "/bin/sleep",
    "/usr/bin/sh",
    "/lib/x86_64-linux-gnu",
    "/lib64/ld-linux-x86-64.so.2",
    "/lib64/libc.so.6",
    "/lib64/libdl.so.2",
    "/lib64/libidn.so.11",
    "/lib64/libtinfo.so.5",
    "/lib64/libselinux.so.1",
    "/lib64/libpcre.so.1",
    "/lib64/liblzma.so.5",
    "/lib64/libpthread.so.0",
    "/lib64/libcap.so.2",
    "/lib64/libacl.so.1",
    "/lib64/libattr.so.1",
    "/lib64/librt.so.1",
    "/etc/passwd",
)

DEFAULT_DIRECTORIES: tuple[str, ...] = ("/proc", "/sys", "/dev", "/tmp")


class RootfsPopulator(Protocol):
    """Fills an empty layer directory with a root filesystem."""

    def populate(self, root: Path) -> None:
        """Populate ``root``; raise with a readable message on failure."""
        ...


class LinuxRootfs:
    """Copy a fixed set of host binaries and libraries into a rootfs.

    Each host path lands at the same location under the root, so
    ``/bin/sh`` becomes ``<root>/bin/sh``. Host paths that do not exist are
    skipped since distributions differ on ``/bin`` vs ``/usr/bin`` and
    ``/lib`` vs ``/lib64``. Symlinks are copied as symlinks together with
    every hop of their target chain, so ``/bin/sh -> dash`` still resolves
    inside the root.
    """

    def __init__(
        self,
        files: Sequence[str] = DEFAULT_FILES,
        directories: Sequence[str] = DEFAULT_DIRECTORIES,
    ) -> None:
        self.files = tuple(files)
        self.directories = tuple(directories)

    def populate(self, root: Path) -> None:
        """Copy host files into ``root`` and create the standard directories.

        Raises:
            RootfsError: If a file or directory cannot be created
        """
        root = Path(root)

        for file in self.files:
            if not os.path.lexists(file):
                logger.debug(f"Skipping missing host path: {file}")
                continue
            self._add(root, file)

        for directory in self.directories:
            target = self._target(root, directory)
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise RootfsError(
                    f"Failed to create '{target}' in rootfs: {e.strerror or e}"
                ) from e

    def _target(self, root: Path, host_path: str) -> Path:
        return root / Path(host_path).relative_to("/")

    def _add(self, root: Path, host_path: str) -> None:
        self._copy(root, host_path)

        seen = {host_path}
        hop = host_path
        while os.path.islink(hop):
            link = os.readlink(hop)
            hop = os.path.normpath(os.path.join(os.path.dirname(hop), link))
            if hop in seen or not os.path.lexists(hop):
                break
            seen.add(hop)
            self._copy(root, hop)

        real = os.path.realpath(host_path)
        if real not in seen and os.path.exists(real):
            self._copy(root, real)

    def _copy(self, root: Path, host_path: str) -> None:
        target = self._target(root, host_path)
        is_dir = os.path.isdir(host_path) and not os.path.islink(host_path)
        if not is_dir and os.path.lexists(target):
            return
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if is_dir:
                shutil.copytree(host_path, target, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(host_path, target, follow_symlinks=False)
        except OSError as e:
            raise RootfsError(f"Failed to copy '{host_path}' to rootfs: {e}") from e
