"""Read back the contents of a produced docker test image tar."""

import io
import json
import tarfile
from pathlib import Path
from typing import Any

from ..exceptions import TarReadError, ValidationError


def _read_member(tar: tarfile.TarFile, name: str) -> bytes:
    """Read a regular file member from an open tar."""
    try:
        member = tar.extractfile(name)
    except KeyError as e:
        raise ValidationError(f"{name} not found in tar file") from e

    if member is None:
        raise ValidationError(f"{name} is not a regular file")

    with member:
        return member.read()


def _read_json_member(tar_path: str | Path, name: str) -> Any:
    try:
        with tarfile.open(tar_path, "r") as tar:
            content = _read_member(tar, name)
    except tarfile.TarError as e:
        raise TarReadError(f"Cannot read tar file: {e}") from e
    except OSError as e:
        raise TarReadError(f"Cannot open tar file '{tar_path}': {e}") from e

    try:
        return json.loads(content.decode("utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {name}: {e}") from e
    except UnicodeDecodeError as e:
        raise ValidationError(f"Cannot decode {name}: {e}") from e


def read_repositories(tar_path: str | Path) -> dict[str, dict[str, str]]:
    """Read the ``repositories`` index from an image tar.

    Args:
        tar_path: Path to the image tar

    Returns:
        Repositories mapping, e.g. ``{"alpine": {"latest": "<layer id>"}}``

    Raises:
        TarReadError: If the tar file cannot be read
        ValidationError: If ``repositories`` is missing or not a JSON object
    """
    repositories = _read_json_member(tar_path, "repositories")
    if not isinstance(repositories, dict):
        raise ValidationError("repositories must be a JSON object")
    return repositories


def read_layer_manifest(tar_path: str | Path, layer_id: str) -> dict[str, Any]:
    """Read the ``<layer_id>/json`` manifest from an image tar.

    Raises:
        TarReadError: If the tar file cannot be read
        ValidationError: If the manifest is missing or not a JSON object
    """
    manifest = _read_json_member(tar_path, f"{layer_id}/json")
    if not isinstance(manifest, dict):
        raise ValidationError(f"{layer_id}/json must be a JSON object")
    return manifest


def read_layer_version(tar_path: str | Path, layer_id: str) -> str:
    """Read the ``<layer_id>/VERSION`` marker from an image tar."""
    try:
        with tarfile.open(tar_path, "r") as tar:
            content = _read_member(tar, f"{layer_id}/VERSION")
    except tarfile.TarError as e:
        raise TarReadError(f"Cannot read tar file: {e}") from e
    except OSError as e:
        raise TarReadError(f"Cannot open tar file '{tar_path}': {e}") from e

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError(f"Cannot decode {layer_id}/VERSION: {e}") from e


def list_layer_files(tar_path: str | Path, layer_id: str) -> list[str]:
    """List member names of the nested ``<layer_id>/layer.tar``.

    Raises:
        TarReadError: If either tar cannot be read
        ValidationError: If the layer tar is missing
    """
    try:
        with tarfile.open(tar_path, "r") as tar:
            layer_content = _read_member(tar, f"{layer_id}/layer.tar")

        with tarfile.open(fileobj=io.BytesIO(layer_content), mode="r") as layer:
            return layer.getnames()
    except tarfile.TarError as e:
        raise TarReadError(f"Cannot read tar file: {e}") from e
    except OSError as e:
        raise TarReadError(f"Cannot open tar file '{tar_path}': {e}") from e
