"""In-memory model of the IDE's compiler configuration.

Holds the project-wide default backend compiler, per-module additional
compiler options, per-module bytecode target levels and the list of paths
excluded from compilation. The importer only ever replaces or clears values
here, so repeated passes over unchanged input leave the model unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping


@dataclass(frozen=True, slots=True)
class BackendCompiler:
    id: str
    presentable_name: str = ""

    def __str__(self) -> str:
        return self.presentable_name or self.id


@dataclass(frozen=True, slots=True)
class ExcludeEntry:
    path: Path
    include_subdirectories: bool = True
    lifecycle: str = "workspace-import"

    def covers(self, candidate: Path) -> bool:
        if candidate == self.path:
            return True
        return self.include_subdirectories and self.path in candidate.parents


@dataclass(slots=True)
class CompilerConfiguration:
    default_compiler: BackendCompiler | None = None
    registered_compilers: List[BackendCompiler] = field(default_factory=list)
    _additional_options: Dict[str, Dict[str, List[str]]] = field(default_factory=dict, init=False, repr=False)
    _target_levels: Dict[str, str] = field(default_factory=dict, init=False, repr=False)
    _excluded: List[ExcludeEntry] = field(default_factory=list, init=False, repr=False)

    def is_registered(self, compiler: BackendCompiler) -> bool:
        return any(candidate.id == compiler.id for candidate in self.registered_compilers)

    def register_compiler(self, compiler: BackendCompiler) -> None:
        if not self.is_registered(compiler):
            self.registered_compilers.append(compiler)

    def find_registered(self, compiler_id: str) -> BackendCompiler | None:
        for compiler in self.registered_compilers:
            if compiler.id == compiler_id:
                return compiler
        return None

    def set_additional_options(self, compiler_id: str, module_name: str, options: Iterable[str]) -> None:
        values = list(options)
        per_module = self._additional_options.setdefault(compiler_id, {})
        if values:
            per_module[module_name] = values
        else:
            per_module.pop(module_name, None)
            if not per_module:
                del self._additional_options[compiler_id]

    def additional_options(self, compiler_id: str, module_name: str) -> List[str]:
        return list(self._additional_options.get(compiler_id, {}).get(module_name, []))

    def modules_with_options(self, compiler_id: str) -> List[str]:
        return sorted(self._additional_options.get(compiler_id, {}))

    def set_bytecode_target_level(self, module_name: str, level: str | None) -> None:
        if level:
            self._target_levels[module_name] = level
        else:
            self._target_levels.pop(module_name, None)

    def bytecode_target_level(self, module_name: str) -> str | None:
        return self._target_levels.get(module_name)

    @property
    def excluded_entries(self) -> List[ExcludeEntry]:
        return list(self._excluded)

    def is_excluded(self, path: Path) -> bool:
        return any(entry.covers(path) for entry in self._excluded)

    def add_exclude_entry(self, entry: ExcludeEntry) -> None:
        if entry not in self._excluded:
            self._excluded.append(entry)

    def remove_outdated_settings(self, module_names: Iterable[str]) -> List[str]:
        """Drop options and target levels of modules that are no longer present."""

        alive = set(module_names)
        removed: set[str] = set()
        for compiler_id in list(self._additional_options):
            per_module = self._additional_options[compiler_id]
            for module_name in [name for name in per_module if name not in alive]:
                del per_module[module_name]
                removed.add(module_name)
            if not per_module:
                del self._additional_options[compiler_id]
        for module_name in [name for name in self._target_levels if name not in alive]:
            del self._target_levels[module_name]
            removed.add(module_name)
        return sorted(removed)

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "default_compiler": self.default_compiler.id if self.default_compiler else None,
            "registered_compilers": [
                {"id": compiler.id, "name": compiler.presentable_name} for compiler in self.registered_compilers
            ],
            "additional_options": {
                compiler_id: {name: list(options) for name, options in sorted(per_module.items())}
                for compiler_id, per_module in sorted(self._additional_options.items())
            },
            "target_levels": dict(sorted(self._target_levels.items())),
            "excluded": [
                {
                    "path": str(entry.path),
                    "include_subdirectories": entry.include_subdirectories,
                    "lifecycle": entry.lifecycle,
                }
                for entry in self._excluded
            ],
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CompilerConfiguration":
        configuration = cls()
        for raw in data.get("registered_compilers") or []:
            if isinstance(raw, Mapping):
                configuration.register_compiler(BackendCompiler(str(raw["id"]), str(raw.get("name") or "")))
            else:
                configuration.register_compiler(BackendCompiler(str(raw)))
        default_id = data.get("default_compiler")
        if default_id:
            configuration.default_compiler = configuration.find_registered(str(default_id)) or BackendCompiler(
                str(default_id)
            )
        options_section = data.get("additional_options") or {}
        if not isinstance(options_section, Mapping):
            raise TypeError("additional_options must be a mapping")
        for compiler_id, per_module in options_section.items():
            for module_name, options in per_module.items():
                configuration.set_additional_options(str(compiler_id), str(module_name), [str(o) for o in options])
        levels_section = data.get("target_levels") or {}
        if not isinstance(levels_section, Mapping):
            raise TypeError("target_levels must be a mapping")
        for module_name, level in levels_section.items():
            configuration.set_bytecode_target_level(str(module_name), str(level))
        for raw in data.get("excluded") or []:
            configuration.add_exclude_entry(
                ExcludeEntry(
                    path=Path(raw["path"]),
                    include_subdirectories=bool(raw.get("include_subdirectories", True)),
                    lifecycle=str(raw.get("lifecycle") or "workspace-import"),
                )
            )
        return configuration


__all__ = ["BackendCompiler", "CompilerConfiguration", "ExcludeEntry"]
