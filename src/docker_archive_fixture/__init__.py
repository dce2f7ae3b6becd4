"""Docker Archive Fixture - Async builder for synthetic docker test image tarballs."""

__version__ = "0.1.0"

from .archive import ImageArchiveBuilder, create
from .core.types import (
    DEFAULT_ENVIRONMENT,
    LAYER_ID,
    ArchiveConfig,
    BuildState,
)
from .exceptions import (
    ArchiveCommandError,
    ImageArchiveError,
    ManifestError,
    RootfsError,
    StagingError,
    TarReadError,
    ValidationError,
)
from .rootfs.linux import LinuxRootfs, RootfsPopulator
from .tar.archiver import ArchiveInvoker, TarArchiver

__all__ = [
    "create",
    "ImageArchiveBuilder",
    "ArchiveConfig",
    "BuildState",
    "LAYER_ID",
    "DEFAULT_ENVIRONMENT",
    "ArchiveInvoker",
    "TarArchiver",
    "RootfsPopulator",
    "LinuxRootfs",
    "ImageArchiveError",
    "StagingError",
    "ManifestError",
    "RootfsError",
    "ArchiveCommandError",
    "TarReadError",
    "ValidationError",
]
