"""Tar archiving and inspection for docker test images."""

from .archiver import ArchiveInvoker, TarArchiver

__all__ = ["ArchiveInvoker", "TarArchiver"]
