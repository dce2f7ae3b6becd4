"""Core types and constants for archive builds."""

from dataclasses import dataclass
from enum import Enum

# Fixed layer id shared by every fixture image; not a content hash.
LAYER_ID = "815b809d588c80fd6ddf4d6ac244ad1c01ae4cbe0f91cc7480e306671ee9c346"

DEFAULT_TAG = "latest"
LAYER_VERSION = "1.0"

# These must never reach a built-in executor's environment.
DEFAULT_ENVIRONMENT: tuple[str, ...] = (
    "LD_LIBRARY_PATH=invalid",
    "LIBPROCESS_IP=invalid",
    "LIBPROCESS_PORT=invalid",
)


@dataclass(frozen=True)
class ArchiveConfig:
    """Fixed metadata stamped into every fixture image."""

    layer_id: str = LAYER_ID
    tag: str = DEFAULT_TAG
    version: str = LAYER_VERSION
    created: str = "2016-03-02T17:16:00.167415955Z"
    container: str = (
        "eb53609036555d26c39bdccfa9850426934bdfde96111d099041689b2251a377"
    )
    docker_version: str = "1.9.1"
    architecture: str = "amd64"
    os: str = "linux"

    @property
    def hostname(self) -> str:
        """Short container id, as docker reports it for Hostname."""
        return self.container[:12]


class BuildState(Enum):
    """Steps of an archive build, in execution order."""

    INIT = "init"
    DIRS_CREATED = "dirs_created"
    MANIFESTS_WRITTEN = "manifests_written"
    ROOTFS_POPULATED = "rootfs_populated"
    LAYER_ARCHIVED = "layer_archived"
    ROOTFS_REMOVED = "rootfs_removed"
    VERSION_WRITTEN = "version_written"
    IMAGE_ARCHIVED = "image_archived"
    IMAGE_DIR_REMOVED = "image_dir_removed"
    DONE = "done"
    FAILED = "failed"
