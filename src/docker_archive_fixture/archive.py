"""Async builder for single-layer docker test image tarballs."""

import asyncio
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from .core.types import DEFAULT_ENVIRONMENT, ArchiveConfig, BuildState
from .exceptions import (
    ArchiveCommandError,
    ImageArchiveError,
    ManifestError,
    RootfsError,
    StagingError,
)
from .fs.directories import make_dir, make_parent_dirs, remove_tree, write_file
from .manifest.builder import build_layer_manifest, build_repositories, render
from .rootfs.linux import LinuxRootfs, RootfsPopulator
from .tar.archiver import ArchiveInvoker, TarArchiver

logger = logging.getLogger(__name__)


@contextmanager
def _stage(message: str, error: type[ImageArchiveError]) -> Iterator[None]:
    """Prefix any failure raised inside the block with ``message``."""
    try:
        yield
    except StagingError as e:
        raise StagingError(f"{message}: {e.reason or e}", e.reason) from e
    except ImageArchiveError as e:
        raise type(e)(f"{message}: {e}") from e
    except Exception as e:
        raise error(f"{message}: {e}") from e


class ImageArchiveBuilder:
    """Builds a tarball in the format produced by ``docker save``.

    The result is ``<directory>/<name>.tar`` containing::

        repositories            {"<name>": {"latest": "<layer id>"}}
        <layer id>/json         layer manifest
        <layer id>/layer.tar    archived root filesystem
        <layer id>/VERSION      "1.0"

    Steps run strictly in order and the first failure aborts the build.
    Staging directories created before a failure are left in place.
    Use one builder per concurrent build; ``state`` tracks the last step.
    """

    def __init__(
        self,
        archiver: ArchiveInvoker | None = None,
        rootfs: RootfsPopulator | None = None,
        config: ArchiveConfig | None = None,
    ) -> None:
        self.archiver = archiver or TarArchiver()
        self.rootfs = rootfs or LinuxRootfs()
        self.config = config or ArchiveConfig()
        self.state = BuildState.INIT

    def _advance(self, state: BuildState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    async def create(
        self,
        directory: str | Path,
        name: str,
        entrypoint: str = "null",
        cmd: str = "null",
        environment: Sequence[str] = DEFAULT_ENVIRONMENT,
    ) -> Path:
        """Create ``<directory>/<name>.tar``.

        Args:
            directory: Output directory, created with parents if missing
            name: Image name; ``<directory>/<name>`` is used for staging
            entrypoint: JSON literal for ``config.Entrypoint``
                (e.g. ``'["sh", "-c"]'``)
            cmd: JSON literal for ``config.Cmd``
            environment: ``KEY=VALUE`` entries for ``config.Env``. The
                default holds invalid ``LD_LIBRARY_PATH``/``LIBPROCESS_*``
                values on purpose: tests detect image environment leaking
                into built-in executors with them.

        Returns:
            Path of the created tar file

        Raises:
            ImageArchiveError: If any step fails; the subclass names the
                kind of failure and the message names the step
        """
        directory = Path(directory)
        image_dir = directory / name
        layer_dir = image_dir / self.config.layer_id
        rootfs_dir = layer_dir / "layer"
        archive_path = directory / f"{name}.tar"

        self.state = BuildState.INIT
        logger.info(f"Building docker test image {name} in {directory}")

        try:
            await self._create_dirs(directory, image_dir, layer_dir, rootfs_dir)
            self._advance(BuildState.DIRS_CREATED)

            await self._write_manifests(
                name, image_dir, layer_dir, entrypoint, cmd, environment
            )
            self._advance(BuildState.MANIFESTS_WRITTEN)

            with _stage("Failed to create docker test image rootfs", RootfsError):
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, self.rootfs.populate, rootfs_dir)
            self._advance(BuildState.ROOTFS_POPULATED)

            with _stage("Failed to tar root filesystem", ArchiveCommandError):
                await self._archive(rootfs_dir, layer_dir / "layer.tar")
            self._advance(BuildState.LAYER_ARCHIVED)

            with _stage("Failed to remove layer rootfs directory", StagingError):
                await remove_tree(rootfs_dir)
            self._advance(BuildState.ROOTFS_REMOVED)

            with _stage("Failed to save layer version", StagingError):
                await write_file(layer_dir / "VERSION", self.config.version)
            self._advance(BuildState.VERSION_WRITTEN)

            with _stage("Failed to tar docker test image", ArchiveCommandError):
                await self._archive(image_dir, archive_path)
            self._advance(BuildState.IMAGE_ARCHIVED)

            with _stage("Failed to remove image directory", StagingError):
                await remove_tree(image_dir)
            self._advance(BuildState.IMAGE_DIR_REMOVED)
        except ImageArchiveError as e:
            logger.error(f"Building {name} failed after {self.state.value}: {e}")
            self.state = BuildState.FAILED
            raise

        self._advance(BuildState.DONE)
        logger.info(f"Created docker test image {archive_path}")
        return archive_path

    async def _create_dirs(
        self, directory: Path, image_dir: Path, layer_dir: Path, rootfs_dir: Path
    ) -> None:
        with _stage(f"Failed to create '{directory}'", StagingError):
            await make_parent_dirs(directory)

        with _stage(
            f"Failed to create docker test image directory '{image_dir}'",
            StagingError,
        ):
            await make_dir(image_dir)

        with _stage(
            f"Failed to create docker test image layer '{self.config.layer_id}'",
            StagingError,
        ):
            await make_dir(layer_dir)

        with _stage(
            f"Failed to create layer rootfs directory '{rootfs_dir}'", StagingError
        ):
            await make_dir(rootfs_dir)

    async def _write_manifests(
        self,
        name: str,
        image_dir: Path,
        layer_dir: Path,
        entrypoint: str,
        cmd: str,
        environment: Sequence[str],
    ) -> None:
        layer_id = self.config.layer_id

        with _stage("Failed to build docker test image manifest", ManifestError):
            repositories = build_repositories(name, layer_id, self.config.tag)
            manifest = build_layer_manifest(
                layer_id, entrypoint, cmd, environment, self.config
            )

        with _stage("Failed to save docker test image 'repositories'", StagingError):
            await write_file(image_dir / "repositories", render(repositories))

        with _stage(
            f"Failed to save docker test image layer '{layer_id}'", StagingError
        ):
            await write_file(layer_dir / "json", render(manifest))

    async def _archive(self, source: Path, destination: Path) -> None:
        """Run one archive invocation and wait for it to finish.

        The invocation runs as its own task so that a cancellation coming
        from the archiver can be told apart from the caller cancelling
        this build. Only the former is reported as "discarded".
        """
        task = asyncio.ensure_future(self.archiver.archive(source, destination))
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if task.cancelled() and not (current and current.cancelling()):
                raise ArchiveCommandError("discarded") from None
            raise


async def create(
    directory: str | Path,
    name: str,
    entrypoint: str = "null",
    cmd: str = "null",
    environment: Sequence[str] = DEFAULT_ENVIRONMENT,
    *,
    archiver: ArchiveInvoker | None = None,
    rootfs: RootfsPopulator | None = None,
    config: ArchiveConfig | None = None,
) -> Path:
    """docker test image tarball을 생성합니다.

    ``docker save``와 같은 형식의 단일 레이어 이미지를
    ``<directory>/<name>.tar``로 만듭니다.

    Args:
        directory: 출력 디렉토리 (없으면 생성)
        name: 이미지 이름 (예: "alpine")
        entrypoint: ``config.Entrypoint``의 JSON 리터럴 (기본값: "null")
        cmd: ``config.Cmd``의 JSON 리터럴 (기본값: "null")
        environment: ``config.Env`` 항목 목록 (기본값: 잘못된 값 3개)
        archiver: tar 생성기 (기본값: TarArchiver)
        rootfs: rootfs 생성기 (기본값: LinuxRootfs)
        config: 이미지 메타데이터 (기본값: ArchiveConfig())

    Returns:
        Path: 생성된 tar 파일 경로

    Raises:
        ImageArchiveError: 생성 단계 중 하나라도 실패한 경우

    Examples:
        # 기본 이미지 생성
        tar_path = await create("/tmp/images", "alpine")

        # entrypoint/cmd 지정
        tar_path = await create(
            "/tmp/images", "alpine", entrypoint='["sh", "-c"]', cmd='["echo hi"]'
        )
    """
    builder = ImageArchiveBuilder(archiver=archiver, rootfs=rootfs, config=config)
    return await builder.create(directory, name, entrypoint, cmd, environment)
