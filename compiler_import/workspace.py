"""Workspace model: build projects paired with the IDE modules they produce."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence

from core.config_loader import (
    collect_config_files,
    load_config_file,
    merge_mappings,
    resolve_config_paths,
)

from .config_tree import ConfigNode
from .settings import CompilerSection, ImportSettings


AGGREGATOR_PACKAGING = "pom"
DEFAULT_PLUGIN_GROUP = "org.apache.maven.plugins"
TEST_MODULE_SUFFIX = ".test"


class ModuleKind(str, Enum):
    MAIN = "main"
    TEST = "test"

    @classmethod
    def from_name(cls, module_name: str) -> "ModuleKind":
        return cls.TEST if module_name.endswith(TEST_MODULE_SUFFIX) else cls.MAIN


@dataclass(frozen=True, slots=True)
class Module:
    name: str
    kind: ModuleKind = ModuleKind.MAIN

    @property
    def is_test(self) -> bool:
        return self.kind is ModuleKind.TEST

    @classmethod
    def from_value(cls, value: Any) -> "Module":
        if isinstance(value, str):
            name = value.strip()
            if not name:
                raise ValueError("Module entries cannot be empty strings")
            return cls(name=name, kind=ModuleKind.from_name(name))
        if isinstance(value, Mapping):
            raw_name = value.get("name")
            if not raw_name or not str(raw_name).strip():
                raise ValueError("Module entries must include a non-empty 'name'")
            name = str(raw_name).strip()
            raw_kind = value.get("kind")
            if raw_kind is None:
                return cls(name=name, kind=ModuleKind.from_name(name))
            try:
                kind = ModuleKind(str(raw_kind).strip().lower())
            except ValueError as exc:
                raise ValueError(f"Module '{name}' has unknown kind '{raw_kind}'") from exc
            return cls(name=name, kind=kind)
        raise TypeError("Modules must be specified as strings or mappings")


@dataclass(slots=True)
class PluginDescriptor:
    group_id: str
    artifact_id: str
    version: str | None = None
    configuration: ConfigNode | None = None

    @property
    def key(self) -> tuple[str, str]:
        return self.group_id, self.artifact_id

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PluginDescriptor":
        if not isinstance(data, Mapping):
            raise TypeError("Plugin entries must be mappings")
        artifact_id = data.get("artifact_id")
        if not artifact_id or not str(artifact_id).strip():
            raise ValueError("Plugin entries must include a non-empty 'artifact_id'")
        group_id = str(data.get("group_id") or DEFAULT_PLUGIN_GROUP).strip()
        version = data.get("version")

        configuration_section = data.get("configuration")
        configuration_xml = data.get("configuration_xml")
        if configuration_section is not None and configuration_xml is not None:
            raise ValueError(
                f"Plugin '{group_id}:{artifact_id}' defines both 'configuration' and 'configuration_xml'"
            )
        configuration: ConfigNode | None = None
        if configuration_xml is not None:
            configuration = ConfigNode.from_xml(str(configuration_xml))
        elif configuration_section is not None:
            if not isinstance(configuration_section, Mapping):
                raise TypeError(f"Plugin '{group_id}:{artifact_id}' configuration must be a mapping")
            configuration = ConfigNode.from_mapping("configuration", configuration_section)

        return cls(
            group_id=group_id,
            artifact_id=str(artifact_id).strip(),
            version=str(version).strip() if version else None,
            configuration=configuration,
        )


@dataclass(slots=True)
class ProjectDescriptor:
    """Build-description view of one project: packaging, properties and plugins."""

    name: str
    packaging: str = "jar"
    directory: Path | None = None
    properties: Dict[str, str] = field(default_factory=dict)
    plugins: List[PluginDescriptor] = field(default_factory=list)

    @property
    def is_aggregator(self) -> bool:
        return self.packaging == AGGREGATOR_PACKAGING

    def find_plugin(self, group_id: str, artifact_id: str) -> PluginDescriptor | None:
        for plugin in self.plugins:
            if plugin.key == (group_id, artifact_id):
                return plugin
        return None

    def plugin_configuration(self, group_id: str, artifact_id: str) -> ConfigNode | None:
        plugin = self.find_plugin(group_id, artifact_id)
        return plugin.configuration if plugin is not None else None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, root: Path | None = None) -> "ProjectDescriptor":
        project_section = data.get("project")
        if not isinstance(project_section, Mapping):
            raise ValueError("Project configuration requires a [project] section")
        name = project_section.get("name")
        if not name or not str(name).strip():
            raise ValueError("project.name is required in project configuration")
        name = str(name).strip()

        packaging = str(project_section.get("packaging") or "jar").strip().lower()
        directory: Path | None = None
        raw_directory = project_section.get("directory")
        if raw_directory:
            directory = Path(str(raw_directory))
            if root is not None and not directory.is_absolute():
                directory = root / directory

        properties: Dict[str, str] = {}
        properties_section = data.get("properties")
        if isinstance(properties_section, Mapping):
            for key, value in properties_section.items():
                if value is None:
                    continue
                if isinstance(value, bool):
                    value = "true" if value else "false"
                properties[str(key)] = str(value)
        elif properties_section is not None:
            raise TypeError(f"Project '{name}' properties must be a mapping")

        plugins_section = data.get("plugins") or []
        if not isinstance(plugins_section, Sequence) or isinstance(plugins_section, (str, bytes)):
            raise TypeError(f"Project '{name}' plugins must be a list")
        plugins = [PluginDescriptor.from_mapping(item) for item in plugins_section]

        return cls(
            name=name,
            packaging=packaging,
            directory=directory,
            properties=properties,
            plugins=plugins,
        )


@dataclass(slots=True)
class ModuleGroup:
    project: ProjectDescriptor
    modules: List[Module] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, root: Path | None = None) -> "ModuleGroup":
        project = ProjectDescriptor.from_mapping(data, root=root)
        raw_modules = data.get("modules")
        if raw_modules is None:
            return cls(project=project, modules=[Module(name=project.name)])
        if not isinstance(raw_modules, Sequence) or isinstance(raw_modules, (str, bytes)):
            raise TypeError(f"Project '{project.name}' modules must be a list")
        return cls(project=project, modules=[Module.from_value(item) for item in raw_modules])


@dataclass(slots=True)
class Workspace:
    groups: List[ModuleGroup] = field(default_factory=list)

    def __iter__(self) -> Iterator[ModuleGroup]:
        return iter(self.groups)

    def projects(self) -> List[ProjectDescriptor]:
        return [group.project for group in self.groups]

    def module_names(self) -> List[str]:
        return [module.name for group in self.groups for module in group.modules]

    def find_group(self, project_name: str) -> ModuleGroup:
        for group in self.groups:
            if group.project.name == project_name:
                return group
        available = ", ".join(sorted(group.project.name for group in self.groups)) or "<none>"
        raise KeyError(f"Project '{project_name}' not found. Available projects: {available}")


@dataclass(slots=True)
class WorkspaceStore:
    """Everything loaded from the configuration directories of one workspace."""

    root: Path
    settings: ImportSettings
    compiler: CompilerSection
    workspace: Workspace
    config_dirs: tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def from_directory(cls, root: Path) -> "WorkspaceStore":
        return cls.from_directories(root, [root / "config"])

    @classmethod
    def from_directories(cls, root: Path, directories: Iterable[Path]) -> "WorkspaceStore":
        resolved_dirs, missing_dirs = resolve_config_paths(root, directories)
        if not resolved_dirs:
            missing_display = ", ".join(str(path) for path in missing_dirs) or "<none>"
            raise FileNotFoundError(f"No configuration directories found. Missing: {missing_display}")

        global_data: Mapping[str, Any] = {}
        groups: Dict[str, ModuleGroup] = {}

        for config_dir in resolved_dirs:
            top_level_files = collect_config_files(config_dir)
            global_path = top_level_files.get("config")
            if global_path is not None:
                global_data = merge_mappings(global_data, load_config_file(global_path))

            projects_dir = config_dir / "projects"
            if not projects_dir.is_dir():
                continue
            for _, path in sorted(collect_config_files(projects_dir).items()):
                group = ModuleGroup.from_mapping(load_config_file(path), root=root)
                groups.pop(group.project.name, None)
                groups[group.project.name] = group

        if not groups:
            raise FileNotFoundError("No project configurations found in the provided directories")

        return cls(
            root=root,
            settings=ImportSettings.from_mapping(global_data),
            compiler=CompilerSection.from_mapping(global_data),
            workspace=Workspace(groups=list(groups.values())),
            config_dirs=resolved_dirs,
        )


__all__ = [
    "AGGREGATOR_PACKAGING",
    "DEFAULT_PLUGIN_GROUP",
    "Module",
    "ModuleGroup",
    "ModuleKind",
    "PluginDescriptor",
    "ProjectDescriptor",
    "Workspace",
    "WorkspaceStore",
]
