"""Root filesystem population for image layers."""

from .linux import LinuxRootfs, RootfsPopulator

__all__ = ["LinuxRootfs", "RootfsPopulator"]
