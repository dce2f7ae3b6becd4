"""Manifest rendering for docker test images."""

from .builder import (
    build_layer_manifest,
    build_repositories,
    parse_json_literal,
    render,
)

__all__ = [
    "build_layer_manifest",
    "build_repositories",
    "parse_json_literal",
    "render",
]
