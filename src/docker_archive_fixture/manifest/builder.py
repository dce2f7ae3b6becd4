"""Repositories index and layer manifest construction."""

import json
from collections.abc import Sequence
from typing import Any

from ..core.types import DEFAULT_ENVIRONMENT, DEFAULT_TAG, LAYER_ID, ArchiveConfig
from ..exceptions import ManifestError

# Recorded by docker for the layer's originating ADD instruction.
_ADD_COMMAND = [
    "/bin/sh",
    "-c",
    "#(nop) ADD file:81ba6f20bdb99e6c13c434a577069860b6656908031162083b1ac9c02c71dd9f in /",
]


def parse_json_literal(text: str, field: str) -> Any:
    """Parse a raw JSON literal supplied for a manifest field.

    Args:
        text: JSON text, e.g. ``'["sh", "-c"]'`` or ``"null"``
        field: Manifest field name, used in the error message

    Returns:
        The parsed JSON value

    Raises:
        ManifestError: If the literal is not well-formed JSON
    """
    try:
        return json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise ManifestError(f"Failed to parse {field} '{text}': {e}") from e


def build_repositories(
    name: str, layer_id: str = LAYER_ID, tag: str = DEFAULT_TAG
) -> dict[str, dict[str, str]]:
    """Build the ``repositories`` index: ``{name: {tag: layer_id}}``."""
    return {name: {tag: layer_id}}


def _container_config(
    hostname: str, env: Any, cmd: Any, entrypoint: Any
) -> dict[str, Any]:
    return {
        "Hostname": hostname,
        "Domainname": "",
        "User": "",
        "AttachStdin": False,
        "AttachStdout": False,
        "AttachStderr": False,
        "Tty": False,
        "OpenStdin": False,
        "StdinOnce": False,
        "Env": env,
        "Cmd": cmd,
        "Image": "",
        "Volumes": None,
        "WorkingDir": "",
        "Entrypoint": entrypoint,
        "OnBuild": None,
        "Labels": None,
    }


def build_layer_manifest(
    layer_id: str,
    entrypoint: str = "null",
    cmd: str = "null",
    environment: Sequence[str] = DEFAULT_ENVIRONMENT,
    config: ArchiveConfig | None = None,
) -> dict[str, Any]:
    """Build the ``json`` manifest stored alongside a layer.

    ``entrypoint`` and ``cmd`` are raw JSON literals and are embedded as
    parsed, so callers can express any JSON shape (``'["sh", "-c"]'``,
    ``'"echo"'``, ``"null"``). ``environment`` keeps its order.

    Args:
        layer_id: Layer id; must match the layer directory name
        entrypoint: JSON literal for ``config.Entrypoint``
        cmd: JSON literal for ``config.Cmd``
        environment: ``KEY=VALUE`` entries for ``config.Env``
        config: Image metadata, defaults to ``ArchiveConfig()``

    Returns:
        Layer manifest dictionary

    Raises:
        ManifestError: If ``entrypoint`` or ``cmd`` is malformed
    """
    config = config or ArchiveConfig()

    parsed_entrypoint = parse_json_literal(entrypoint, "entrypoint")
    parsed_cmd = parse_json_literal(cmd, "cmd")

    return {
        "id": layer_id,
        "created": config.created,
        "container": config.container,
        "container_config": _container_config(
            config.hostname, None, list(_ADD_COMMAND), None
        ),
        "docker_version": config.docker_version,
        "config": _container_config(
            config.hostname, list(environment), parsed_cmd, parsed_entrypoint
        ),
        "architecture": config.architecture,
        "os": config.os,
    }


def render(document: Any) -> str:
    """Render a manifest document as compact JSON text."""
    return json.dumps(document, separators=(",", ":"))
