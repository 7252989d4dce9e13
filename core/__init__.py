"""Shared core utilities for configuration loading and placeholder detection."""

from .template import has_unresolved_placeholder, parse_bool, resolved_text_or_none
from .config_loader import (
    ConfigLoader,
    FILE_LOADERS,
    collect_config_files,
    load_config_file,
    merge_mappings,
    normalize_string_list,
    resolve_config_paths,
)

__all__ = [
    "has_unresolved_placeholder",
    "parse_bool",
    "resolved_text_or_none",
    "ConfigLoader",
    "FILE_LOADERS",
    "collect_config_files",
    "load_config_file",
    "merge_mappings",
    "normalize_string_list",
    "resolve_config_paths",
]
