"""Collection of extra compiler arguments from a compiler-plugin configuration."""
from __future__ import annotations

from typing import Dict, List

from core.template import has_unresolved_placeholder, parse_bool, resolved_text_or_none

from .config_tree import ConfigNode
from .extractor import NormalizedModuleConfig


PARAMETERS_FLAG = "-parameters"
ANNOTATION_PROCESSOR_PREFIX = "-A"


def _parameters_requested(config: NormalizedModuleConfig) -> bool:
    plugin_config = config.plugin_config
    node = plugin_config.child("parameters") if plugin_config is not None else None
    if node is not None:
        return parse_bool(node.text_trim)
    return parse_bool(config.parameters_property)


def _compiler_arguments(node: ConfigNode) -> List[str]:
    effective: Dict[str, str | None] = {}
    unresolved: set[str] = set()
    for child in node.children:
        key = child.name if child.name.startswith("-") else f"-{child.name}"
        value = resolved_text_or_none(child.text_trim)
        if value is None and has_unresolved_placeholder(child.text_trim):
            unresolved.add(key)
        effective[key] = value

    options: List[str] = []
    for key, value in effective.items():
        if key.startswith(ANNOTATION_PROCESSOR_PREFIX) and value is not None:
            options.append(f"{key}={value}")
        elif key not in unresolved:
            options.append(key)
            if value is not None:
                options.append(value)
    return options


def collect_compiler_args(config: NormalizedModuleConfig) -> List[str]:
    """Turn a project's compiler configuration into an ordered argument list.

    Sources are read in a fixed order: the ``parameters`` flag, the
    ``compilerArguments`` map, the single ``compilerArgument`` value, then
    ``compilerArgs/arg`` and ``compilerArgs/compilerArg`` entries. Values that
    still hold a ``${...}`` build variable are dropped. Equal tokens from
    different sources are all kept.
    """

    options: List[str] = []
    if _parameters_requested(config):
        options.append(PARAMETERS_FLAG)

    plugin_config = config.plugin_config
    if plugin_config is None:
        return options

    compiler_arguments = plugin_config.child("compilerArguments")
    if compiler_arguments is not None:
        options.extend(_compiler_arguments(compiler_arguments))

    single = resolved_text_or_none(plugin_config.child_text_trim("compilerArgument"))
    if single is not None:
        options.append(single)

    compiler_args = plugin_config.child("compilerArgs")
    if compiler_args is not None:
        for tag in ("arg", "compilerArg"):
            for node in compiler_args.children_named(tag):
                value = resolved_text_or_none(node.text_trim)
                if value is not None:
                    options.append(value)
    return options


__all__ = ["ANNOTATION_PROCESSOR_PREFIX", "PARAMETERS_FLAG", "collect_compiler_args"]
