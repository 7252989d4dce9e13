"""Bytecode target level resolution for imported modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Sequence
import logging
import re

from core.template import resolved_text_or_none

from .extensions import CompilerExtension
from .extractor import COMPILER_PLUGIN_ARTIFACT, COMPILER_PLUGIN_GROUP
from .settings import DEFAULT_MINIMUM_LANGUAGE_LEVEL
from .workspace import Module, ProjectDescriptor


LOG = logging.getLogger(__name__)

_LEVEL_PATTERN = re.compile(r"^(?:1\.)?(\d+)$")
_VERSION_PART = re.compile(r"\d+")

# (minimum plugin version, default level) in descending order
_PLUGIN_DEFAULT_LEVELS: tuple[tuple[tuple[int, ...], str], ...] = (
    ((3, 13, 0), "1.8"),
    ((3, 9, 0), "1.7"),
    ((3, 8, 0), "1.6"),
)
BASELINE_LANGUAGE_LEVEL = "1.5"

_MAIN_LEVEL_SOURCES = (
    ("config", "release"),
    ("property", "maven.compiler.release"),
    ("config", "target"),
    ("property", "maven.compiler.target"),
)
_TEST_LEVEL_SOURCES = (
    ("config", "testRelease"),
    ("property", "maven.compiler.testRelease"),
    ("config", "testTarget"),
    ("property", "maven.compiler.testTarget"),
)

LEVEL_ADJUSTED_NOTIFICATION = "language-level-adjusted"


def language_feature(level: str | None) -> int | None:
    """Return the feature release number of *level* (``"1.8"`` -> 8, ``"17"`` -> 17)."""

    text = resolved_text_or_none(level)
    if text is None:
        return None
    match = _LEVEL_PATTERN.match(text)
    if not match:
        return None
    feature = int(match.group(1))
    return feature if feature > 0 else None


def format_language_level(feature: int) -> str:
    return f"1.{feature}" if feature <= 8 else str(feature)


def parse_language_level(text: str | None) -> str | None:
    feature = language_feature(text)
    return format_language_level(feature) if feature is not None else None


def _version_tuple(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in _VERSION_PART.findall(version))


def _first_level(project: ProjectDescriptor, sources: Sequence[tuple[str, str]]) -> str | None:
    config = project.plugin_configuration(COMPILER_PLUGIN_GROUP, COMPILER_PLUGIN_ARTIFACT)
    for kind, name in sources:
        if kind == "config":
            raw = config.child_text_trim(name) if config is not None else None
        else:
            raw = project.properties.get(name)
        level = parse_language_level(raw)
        if level is not None:
            return level
    return None


def target_language_level(project: ProjectDescriptor) -> str | None:
    return _first_level(project, _MAIN_LEVEL_SOURCES)


def target_test_language_level(project: ProjectDescriptor) -> str | None:
    return _first_level(project, _TEST_LEVEL_SOURCES)


def default_language_level(project: ProjectDescriptor) -> str:
    """Level the compiler plugin falls back to when nothing is configured."""

    plugin = project.find_plugin(COMPILER_PLUGIN_GROUP, COMPILER_PLUGIN_ARTIFACT)
    if plugin is None or not plugin.version:
        return BASELINE_LANGUAGE_LEVEL
    version = _version_tuple(plugin.version)
    for minimum, level in _PLUGIN_DEFAULT_LEVELS:
        if version >= minimum:
            return level
    return BASELINE_LANGUAGE_LEVEL


@dataclass(slots=True)
class Notifier:
    """Collects user-visible notifications, each key delivered at most once."""

    sink: Callable[[str], None] | None = None
    messages: List[str] = field(default_factory=list)
    _delivered: set[str] = field(default_factory=set, init=False, repr=False)

    def notify_once(self, key: str, message: str) -> bool:
        if key in self._delivered:
            return False
        self._delivered.add(key)
        self.messages.append(message)
        LOG.warning(message)
        if self.sink is not None:
            self.sink(message)
        return True


class LevelAdjuster:
    def __init__(self, minimum: str = DEFAULT_MINIMUM_LANGUAGE_LEVEL, notifier: Notifier | None = None) -> None:
        feature = language_feature(minimum)
        if feature is None:
            raise ValueError(f"Invalid minimum language level: {minimum!r}")
        self.minimum_feature = feature
        self.notifier = notifier or Notifier()

    def adjust(self, level: str) -> str:
        feature = language_feature(level)
        if feature is not None and feature >= self.minimum_feature:
            return format_language_level(feature)
        adjusted = format_language_level(self.minimum_feature)
        self.notifier.notify_once(
            LEVEL_ADJUSTED_NOTIFICATION,
            f"Language level {level} is not supported, using {adjusted} instead",
        )
        return adjusted


class TargetLevelResolver:
    def __init__(self, adjuster: LevelAdjuster) -> None:
        self.adjuster = adjuster

    def resolve(
        self,
        project: ProjectDescriptor,
        module: Module,
        default_extension: CompilerExtension | None,
    ) -> str:
        target_level = default_extension.default_target_level(project, module) if default_extension else None
        LOG.debug(
            "Bytecode target level %s in module %s, compiler extension = %s",
            target_level,
            module.name,
            default_extension.compiler_id if default_extension else None,
        )
        if target_level is not None:
            return target_level

        level = target_test_language_level(project) if module.is_test else None
        if level is None:
            level = target_language_level(project)
        if level is None:
            level = default_language_level(project)
        return self.adjuster.adjust(level)


__all__ = [
    "BASELINE_LANGUAGE_LEVEL",
    "LevelAdjuster",
    "Notifier",
    "TargetLevelResolver",
    "default_language_level",
    "format_language_level",
    "language_feature",
    "parse_language_level",
    "target_language_level",
    "target_test_language_level",
]
