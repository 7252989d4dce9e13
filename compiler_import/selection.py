"""Workspace-wide choice of the default compiler extension."""
from __future__ import annotations

from typing import Iterable
import logging

from .compiler_configuration import CompilerConfiguration
from .extensions import CANONICAL_COMPILER_ID, CompilerExtension, ExtensionRegistry
from .settings import ImportSettings


LOG = logging.getLogger(__name__)


def select_default_extension(declared_ids: Iterable[str], registry: ExtensionRegistry) -> CompilerExtension | None:
    """Pick the extension every project agrees on, or the canonical one."""

    distinct = set(declared_ids)
    selected_id = next(iter(distinct)) if len(distinct) == 1 else CANONICAL_COMPILER_ID
    extension = registry.find(selected_id)
    if extension is None:
        LOG.debug("No compiler extension registered for '%s', using '%s'", selected_id, CANONICAL_COMPILER_ID)
        extension = registry.canonical()
    return extension


def apply_default_compiler(
    extension: CompilerExtension | None,
    configuration: CompilerConfiguration,
    settings: ImportSettings,
) -> bool:
    """Make *extension*'s backend the IDE default when auto-detection allows it.

    Returns ``True`` when the configuration's default compiler changed.
    """

    if extension is None:
        return False
    backend = extension.get_compiler(configuration)
    if backend is None:
        return False

    LOG.debug("compiler autodetect = %s", settings.auto_detect_compiler)
    current = configuration.default_compiler
    if not settings.auto_detect_compiler or (current is not None and current.id == backend.id):
        return False
    if not configuration.is_registered(backend):
        LOG.error("%s is not registered.", backend)
        return False
    configuration.default_compiler = configuration.find_registered(backend.id) or backend
    return True


__all__ = ["apply_default_compiler", "select_default_extension"]
