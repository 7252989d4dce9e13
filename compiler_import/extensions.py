"""Compiler extensions mapping build-tool compiler ids onto IDE backend compilers."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, List, Sequence

from .compiler_configuration import BackendCompiler, CompilerConfiguration
from .workspace import Module, ProjectDescriptor


CANONICAL_COMPILER_ID = "javac"

JAVAC_BACKEND = BackendCompiler("Javac", "Javac")
ECLIPSE_BACKEND = BackendCompiler("Eclipse", "Eclipse")


class CompilerExtension(ABC):
    """Capability tying one build-tool ``compilerId`` to an IDE backend compiler.

    Subclasses must declare ``compiler_id`` and usually ``backend``; they may override
    :meth:`get_compiler` when the backend is only sometimes available and
    :meth:`default_target_level` when the compiler dictates its own bytecode
    target.
    """

    backend: BackendCompiler | None = None

    @property
    @abstractmethod
    def compiler_id(self) -> str:
        """Build-tool ``compilerId`` this extension answers to."""

    def get_compiler(self, configuration: CompilerConfiguration) -> BackendCompiler | None:
        return self.backend

    def configure_options(
        self,
        configuration: CompilerConfiguration,
        module: Module,
        project: ProjectDescriptor,
        arguments: Sequence[str],
    ) -> None:
        compiler = self.get_compiler(configuration)
        if compiler is not None:
            configuration.set_additional_options(compiler.id, module.name, arguments)

    def clear_options(self, configuration: CompilerConfiguration, module: Module) -> None:
        compiler = self.get_compiler(configuration)
        if compiler is not None:
            configuration.set_additional_options(compiler.id, module.name, [])

    def default_target_level(self, project: ProjectDescriptor, module: Module) -> str | None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.compiler_id!r})"


class JavacCompilerExtension(CompilerExtension):
    compiler_id = CANONICAL_COMPILER_ID
    backend = JAVAC_BACKEND


class EclipseCompilerExtension(CompilerExtension):
    compiler_id = "eclipse"
    backend = ECLIPSE_BACKEND


class ExtensionRegistry:
    """Ordered set of compiler extensions, keyed by compiler id."""

    def __init__(self, extensions: Iterable[CompilerExtension] | None = None) -> None:
        self._extensions: Dict[str, CompilerExtension] = {}
        for extension in extensions or ():
            self.register(extension)

    @classmethod
    def with_builtins(cls) -> "ExtensionRegistry":
        return cls([JavacCompilerExtension(), EclipseCompilerExtension()])

    def register(self, extension: CompilerExtension) -> None:
        compiler_id = extension.compiler_id.strip()
        if not compiler_id:
            raise ValueError(f"{type(extension).__name__} does not declare a compiler id")
        if compiler_id in self._extensions:
            raise ValueError(f"Compiler extension '{compiler_id}' is already registered")
        self._extensions[compiler_id] = extension

    def find(self, compiler_id: str | None) -> CompilerExtension | None:
        if compiler_id is None:
            return None
        return self._extensions.get(compiler_id)

    def canonical(self) -> CompilerExtension | None:
        return self._extensions.get(CANONICAL_COMPILER_ID)

    def available(self) -> List[str]:
        return list(self._extensions)

    def backends(self) -> List[BackendCompiler]:
        return [extension.backend for extension in self._extensions.values() if extension.backend is not None]

    def __iter__(self) -> Iterator[CompilerExtension]:
        return iter(list(self._extensions.values()))

    def __len__(self) -> int:
        return len(self._extensions)


__all__ = [
    "CANONICAL_COMPILER_ID",
    "CompilerExtension",
    "ECLIPSE_BACKEND",
    "EclipseCompilerExtension",
    "ExtensionRegistry",
    "JAVAC_BACKEND",
    "JavacCompilerExtension",
]
