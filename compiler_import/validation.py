"""Workspace consistency checks reported by ``compiler-import validate``."""
from __future__ import annotations

from typing import Dict, List

from core.template import has_unresolved_placeholder

from .extensions import ExtensionRegistry
from .extractor import COMPILER_PLUGIN_ARTIFACT, COMPILER_PLUGIN_GROUP, compiler_id
from .target_level import language_feature
from .workspace import Workspace


_LEVEL_KEYS = ("release", "target", "testRelease", "testTarget")
_LEVEL_PROPERTIES = tuple(f"maven.compiler.{key}" for key in _LEVEL_KEYS)


def _check_level(value: str | None, *, origin: str, errors: List[str]) -> None:
    if value is None or not value.strip() or has_unresolved_placeholder(value):
        return
    if language_feature(value) is None:
        errors.append(f"{origin}: '{value}' is not a valid language level")


def validate_workspace(workspace: Workspace, registry: ExtensionRegistry) -> List[str]:
    """Return human readable problems found in *workspace*; empty when consistent."""

    errors: List[str] = []
    owners: Dict[str, str] = {}

    for group in workspace:
        project = group.project
        config = project.plugin_configuration(COMPILER_PLUGIN_GROUP, COMPILER_PLUGIN_ARTIFACT)
        if config is not None:
            declared = compiler_id(config)
            if registry.find(declared) is None:
                available = ", ".join(registry.available()) or "<none>"
                errors.append(
                    f"[{project.name}] compilerId '{declared}' has no compiler extension. Available: {available}"
                )
            for key in _LEVEL_KEYS:
                _check_level(config.child_text_trim(key), origin=f"[{project.name}] <{key}>", errors=errors)
        for key in _LEVEL_PROPERTIES:
            _check_level(project.properties.get(key), origin=f"[{project.name}] {key}", errors=errors)

        for module in group.modules:
            owner = owners.get(module.name)
            if owner is not None and owner != project.name:
                errors.append(f"[{project.name}] module '{module.name}' is also produced by '{owner}'")
            else:
                owners[module.name] = project.name
    return errors


__all__ = ["validate_workspace"]
