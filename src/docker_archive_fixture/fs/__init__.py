"""Staging directory helpers."""

from .directories import make_dir, make_parent_dirs, remove_tree, write_file

__all__ = ["make_dir", "make_parent_dirs", "remove_tree", "write_file"]
