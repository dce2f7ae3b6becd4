"""Async staging directory creation, removal and file writes."""

import asyncio
import shutil
from pathlib import Path

import aiofiles
import aiofiles.os

from ..exceptions import StagingError


async def make_parent_dirs(path: Path) -> None:
    """Create a directory and any missing parents; existing is fine.

    Raises:
        StagingError: If the directory cannot be created
    """
    try:
        await aiofiles.os.makedirs(path, exist_ok=True)
    except OSError as e:
        reason = e.strerror or str(e)
        raise StagingError(f"Failed to create '{path}': {reason}", reason) from e


async def make_dir(path: Path) -> None:
    """Create a single directory, failing if it already exists.

    Raises:
        StagingError: If the path exists or its parent is missing
    """
    try:
        await aiofiles.os.mkdir(path)
    except OSError as e:
        reason = e.strerror or str(e)
        raise StagingError(f"Failed to create '{path}': {reason}", reason) from e


async def remove_tree(path: Path) -> None:
    """Recursively remove a directory.

    Raises:
        StagingError: If the path is missing or cannot be removed
    """
    loop = asyncio.get_event_loop()
    try:
        await loop.run_in_executor(None, shutil.rmtree, path)
    except OSError as e:
        reason = e.strerror or str(e)
        raise StagingError(f"Failed to remove '{path}': {reason}", reason) from e


async def write_file(path: Path, content: str) -> None:
    """Write text to a file, replacing any existing content.

    Raises:
        StagingError: If the file cannot be written
    """
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(content)
    except OSError as e:
        reason = e.strerror or str(e)
        raise StagingError(f"Failed to write '{path}': {reason}", reason) from e
