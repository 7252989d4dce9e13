"""Two-phase import of compiler settings for a whole workspace.

Phase one (:meth:`CompilerConfigurator.before_model_applied`) picks the
workspace default compiler extension, or reuses one cached by the caller.
Phase two (:meth:`CompilerConfigurator.after_model_applied`) makes it the IDE
default, writes per-module options and target levels, excludes archetype
resources and finally drops settings of modules that no longer exist.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List
import logging

from .arguments import collect_compiler_args
from .compiler_configuration import CompilerConfiguration, ExcludeEntry
from .extensions import CompilerExtension, ExtensionRegistry
from .extractor import ConfigExtractor
from .selection import apply_default_compiler, select_default_extension
from .settings import ImportSettings
from .target_level import LevelAdjuster, Notifier, TargetLevelResolver
from .workspace import Module, ProjectDescriptor, Workspace


LOG = logging.getLogger(__name__)

ARCHETYPE_RESOURCES = ("src", "main", "resources", "archetype-resources")
EXCLUDE_LIFECYCLE = "workspace-import"


@dataclass(slots=True)
class ImportReport:
    default_compiler_id: str | None = None
    default_changed: bool = False
    configured_modules: List[str] = field(default_factory=list)
    removed_modules: List[str] = field(default_factory=list)
    errors: List[tuple[str, str]] = field(default_factory=list)


class CompilerConfigurator:
    def __init__(
        self,
        settings: ImportSettings,
        registry: ExtensionRegistry,
        configuration: CompilerConfiguration,
        notifier: Notifier | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.configuration = configuration
        self.notifier = notifier or Notifier()
        self.extractor = ConfigExtractor(settings)
        self.target_levels = TargetLevelResolver(LevelAdjuster(settings.minimum_language_level, self.notifier))

    def run(self, workspace: Workspace, cached_default: CompilerExtension | None = None) -> ImportReport:
        default_extension = self.before_model_applied(workspace, cached_default)
        return self.after_model_applied(workspace, default_extension)

    def before_model_applied(
        self,
        workspace: Workspace,
        cached_default: CompilerExtension | None = None,
    ) -> CompilerExtension | None:
        if cached_default is not None:
            return cached_default
        declared_ids = set()
        for project in workspace.projects():
            compiler_id = self.extractor.declared_compiler_id(project)
            if compiler_id is not None:
                declared_ids.add(compiler_id)
        return select_default_extension(declared_ids, self.registry)

    def after_model_applied(
        self,
        workspace: Workspace,
        default_extension: CompilerExtension | None,
    ) -> ImportReport:
        report = ImportReport(default_compiler_id=default_extension.compiler_id if default_extension else None)
        report.default_changed = apply_default_compiler(default_extension, self.configuration, self.settings)

        for group in workspace:
            for module in group.modules:
                try:
                    self.configure_module(group.project, module, default_extension)
                except Exception as exc:
                    LOG.warning("Could not configure compiler for module '%s': %s", module.name, exc)
                    report.errors.append((module.name, str(exc)))
                    self.reset_module(module)
                    continue
                report.configured_modules.append(module.name)
            self.exclude_archetype_resources(group.project)

        report.removed_modules = self.configuration.remove_outdated_settings(workspace.module_names())
        return report

    def configure_module(
        self,
        project: ProjectDescriptor,
        module: Module,
        default_extension: CompilerExtension | None,
    ) -> None:
        config = self.extractor.extract(project)
        arguments = collect_compiler_args(config)
        declared_id = config.declared_compiler_id

        for extension in self.registry:
            if declared_id is not None:
                applies = extension.compiler_id == declared_id
            else:
                applies = extension is default_extension
            if applies and arguments:
                extension.configure_options(self.configuration, module, project, arguments)
            else:
                extension.clear_options(self.configuration, module)

        target_level = self.target_levels.resolve(project, module, default_extension)
        LOG.debug("Setting bytecode target level %s in module %s", target_level, module.name)
        self.configuration.set_bytecode_target_level(module.name, target_level)

    def reset_module(self, module: Module) -> None:
        """Drop every option list and the target level stored for ``module``."""
        for extension in self.registry:
            try:
                extension.clear_options(self.configuration, module)
            except Exception as exc:
                LOG.warning("Could not clear %s options of module '%s': %s", extension.compiler_id, module.name, exc)
        self.configuration.set_bytecode_target_level(module.name, None)

    def exclude_archetype_resources(self, project: ProjectDescriptor) -> None:
        if project.directory is None:
            return
        try:
            directory = Path(project.directory, *ARCHETYPE_RESOURCES)
            if not directory.is_dir():
                return
            directory = directory.resolve()
        except OSError as exc:
            LOG.debug("Skipping archetype resources of '%s': %s", project.name, exc)
            return
        if not self.configuration.is_excluded(directory):
            self.configuration.add_exclude_entry(
                ExcludeEntry(directory, include_subdirectories=True, lifecycle=EXCLUDE_LIFECYCLE)
            )


__all__ = ["ARCHETYPE_RESOURCES", "CompilerConfigurator", "ImportReport"]
