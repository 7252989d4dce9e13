"""Normalization of a project's compiler-plugin configuration."""
from __future__ import annotations

from dataclasses import dataclass

from core.template import has_unresolved_placeholder

from .config_tree import ConfigNode
from .extensions import CANONICAL_COMPILER_ID
from .settings import ImportSettings
from .workspace import DEFAULT_PLUGIN_GROUP, ProjectDescriptor


COMPILER_PLUGIN_GROUP = DEFAULT_PLUGIN_GROUP
COMPILER_PLUGIN_ARTIFACT = "maven-compiler-plugin"
COMPILER_PARAMETERS_PROPERTY = "maven.compiler.parameters"


@dataclass(slots=True)
class NormalizedModuleConfig:
    declared_compiler_id: str | None = None
    parameters_property: str | None = None
    plugin_config: ConfigNode | None = None

    def is_empty(self) -> bool:
        return self.parameters_property is None and self.plugin_config is None


def compiler_id(config: ConfigNode) -> str:
    """Read ``compilerId``, falling back to the canonical id when unusable."""

    value = config.child_text_trim("compilerId")
    if not value or value == CANONICAL_COMPILER_ID or has_unresolved_placeholder(value):
        return CANONICAL_COMPILER_ID
    return value


class ConfigExtractor:
    def __init__(self, settings: ImportSettings) -> None:
        self.settings = settings

    def is_enabled(self) -> bool:
        return self.settings.import_compiler_arguments and self.settings.auto_detect_compiler

    def plugin_configuration(self, project: ProjectDescriptor) -> ConfigNode | None:
        if not self.is_enabled():
            return None
        return project.plugin_configuration(COMPILER_PLUGIN_GROUP, COMPILER_PLUGIN_ARTIFACT)

    def declared_compiler_id(self, project: ProjectDescriptor) -> str | None:
        config = self.plugin_configuration(project)
        return compiler_id(config) if config is not None else None

    def extract(self, project: ProjectDescriptor) -> NormalizedModuleConfig:
        config = self.plugin_configuration(project)
        override_id: str | None = None
        if config is not None and not project.is_aggregator:
            override_id = compiler_id(config)
        return NormalizedModuleConfig(
            declared_compiler_id=override_id,
            parameters_property=project.properties.get(COMPILER_PARAMETERS_PROPERTY),
            plugin_config=config,
        )


__all__ = [
    "COMPILER_PARAMETERS_PROPERTY",
    "COMPILER_PLUGIN_ARTIFACT",
    "COMPILER_PLUGIN_GROUP",
    "ConfigExtractor",
    "NormalizedModuleConfig",
    "compiler_id",
]
