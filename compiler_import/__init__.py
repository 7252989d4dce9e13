"""Import build-tool compiler settings into an IDE compiler configuration model."""

from .arguments import collect_compiler_args
from .compiler_configuration import BackendCompiler, CompilerConfiguration, ExcludeEntry
from .config_tree import ConfigNode
from .configurator import CompilerConfigurator, ImportReport
from .extensions import (
    CANONICAL_COMPILER_ID,
    CompilerExtension,
    EclipseCompilerExtension,
    ExtensionRegistry,
    JavacCompilerExtension,
)
from .extractor import ConfigExtractor, NormalizedModuleConfig
from .selection import apply_default_compiler, select_default_extension
from .settings import ImportSettings
from .target_level import LevelAdjuster, Notifier, TargetLevelResolver
from .workspace import Module, ModuleGroup, ModuleKind, PluginDescriptor, ProjectDescriptor, Workspace, WorkspaceStore

__all__ = [
    "BackendCompiler",
    "CANONICAL_COMPILER_ID",
    "CompilerConfiguration",
    "CompilerConfigurator",
    "CompilerExtension",
    "ConfigExtractor",
    "ConfigNode",
    "EclipseCompilerExtension",
    "ExcludeEntry",
    "ExtensionRegistry",
    "ImportReport",
    "ImportSettings",
    "JavacCompilerExtension",
    "LevelAdjuster",
    "Module",
    "ModuleGroup",
    "ModuleKind",
    "NormalizedModuleConfig",
    "Notifier",
    "PluginDescriptor",
    "ProjectDescriptor",
    "TargetLevelResolver",
    "Workspace",
    "WorkspaceStore",
    "apply_default_compiler",
    "collect_compiler_args",
    "select_default_extension",
]
