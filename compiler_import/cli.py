"""Command line interface for the compiler settings importer."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping
import json
import logging
import os
import sys

from .arguments import collect_compiler_args
from .compiler_configuration import CompilerConfiguration
from .configurator import CompilerConfigurator, ImportReport
from .extensions import CompilerExtension, ExtensionRegistry
from .extractor import ConfigExtractor
from .validation import validate_workspace
from .workspace import WorkspaceStore


CONFIG_DIR_ENV = "COMPILER_IMPORT_CONFIG_DIR"


def _split_config_values(values: Iterable[str]) -> List[str]:
    parts: List[str] = []
    for value in values:
        if not value:
            continue
        for segment in value.split(os.pathsep):
            trimmed = segment.strip()
            if trimmed:
                parts.append(trimmed)
    return parts


def _resolve_config_directories(workspace: Path, cli_values: Iterable[str]) -> List[Path]:
    config_dirs: List[Path] = [workspace / "config"]
    env_value = os.environ.get(CONFIG_DIR_ENV, "")
    for entry in _split_config_values([env_value, *cli_values]):
        path = Path(entry)
        if not path.is_absolute():
            path = workspace / path
        config_dirs.append(path)
    return config_dirs


def _load_store(args: Namespace, workspace: Path) -> WorkspaceStore:
    directories = _resolve_config_directories(workspace, getattr(args, "config_dirs", []))
    return WorkspaceStore.from_directories(workspace, directories)


def _initial_configuration(store: WorkspaceStore, registry: ExtensionRegistry) -> CompilerConfiguration:
    configuration = CompilerConfiguration()
    registered_ids = store.compiler.registered or registry.available()
    for compiler_id in registered_ids:
        extension = registry.find(compiler_id)
        if extension is None or extension.backend is None:
            raise ValueError(f"compiler.registered references unknown compiler '{compiler_id}'")
        configuration.register_compiler(extension.backend)
    if store.compiler.default:
        extension = registry.find(store.compiler.default)
        if extension is None or extension.backend is None:
            raise ValueError(f"compiler.default references unknown compiler '{store.compiler.default}'")
        configuration.default_compiler = extension.backend
    return configuration


def _load_state(
    path: Path | None,
    store: WorkspaceStore,
    registry: ExtensionRegistry,
) -> tuple[CompilerConfiguration, CompilerExtension | None]:
    if path is None or not path.exists():
        return _initial_configuration(store, registry), None
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, Mapping):
        raise TypeError(f"State file '{path}' must contain a mapping at the root")
    configuration = CompilerConfiguration.from_mapping(data.get("configuration") or {})
    cached = registry.find(data.get("default_extension"))
    return configuration, cached


def _save_state(path: Path, configuration: CompilerConfiguration, report: ImportReport) -> None:
    payload = {
        "configuration": configuration.to_mapping(),
        "default_extension": report.default_compiler_id,
    }
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _print_table(headers: List[str], rows: List[Dict[str, str]]) -> None:
    widths = {header: len(header) for header in headers}
    for row in rows:
        for header in headers:
            widths[header] = max(widths[header], len(row.get(header, "")))

    def _format(row: Mapping[str, str]) -> str:
        return "  ".join(row.get(header, "").ljust(widths[header]) for header in headers).rstrip()

    print(_format({header: header for header in headers}))
    print("  ".join("-" * widths[header] for header in headers))
    for row in rows:
        print(_format(row))


def _handle_apply(args: Namespace, workspace: Path) -> int:
    registry = ExtensionRegistry.with_builtins()
    store = _load_store(args, workspace)
    state_path = Path(args.state) if args.state else None
    configuration, cached_default = _load_state(state_path, store, registry)
    if args.reselect:
        cached_default = None

    configurator = CompilerConfigurator(store.settings, registry, configuration)
    report = configurator.run(store.workspace, cached_default)

    if state_path is not None:
        _save_state(state_path, configuration, report)

    if args.json:
        payload: Dict[str, Any] = {
            "default_extension": report.default_compiler_id,
            "default_changed": report.default_changed,
            "configuration": configuration.to_mapping(),
            "notifications": list(configurator.notifier.messages),
            "errors": [{"module": name, "message": message} for name, message in report.errors],
        }
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 1 if report.errors else 0

    default_display = configuration.default_compiler.id if configuration.default_compiler else "-"
    print(f"Default compiler: {default_display} (extension: {report.default_compiler_id or '-'})")
    rows: List[Dict[str, str]] = []
    for group in store.workspace:
        for module in group.modules:
            compiler_display = "-"
            options: List[str] = []
            for backend in registry.backends():
                options = configuration.additional_options(backend.id, module.name)
                if options:
                    compiler_display = backend.id
                    break
            rows.append(
                {
                    "Project": group.project.name,
                    "Module": module.name,
                    "Target": configuration.bytecode_target_level(module.name) or "-",
                    "Compiler": compiler_display,
                    "Options": " ".join(options),
                }
            )
    _print_table(["Project", "Module", "Target", "Compiler", "Options"], rows)
    for name, message in report.errors:
        print(f"Warning: [{name}] {message}")
    return 1 if report.errors else 0


def _handle_list(args: Namespace, workspace: Path) -> int:
    store = _load_store(args, workspace)
    extractor = ConfigExtractor(store.settings)
    rows: List[Dict[str, str]] = []
    for group in store.workspace:
        declared = extractor.declared_compiler_id(group.project) or "-"
        for module in group.modules:
            rows.append(
                {
                    "Project": group.project.name,
                    "Packaging": group.project.packaging,
                    "Module": module.name,
                    "Kind": module.kind.value,
                    "Compiler Id": declared,
                }
            )
    _print_table(["Project", "Packaging", "Module", "Kind", "Compiler Id"], rows)
    return 0


def _handle_args(args: Namespace, workspace: Path) -> int:
    store = _load_store(args, workspace)
    try:
        group = store.workspace.find_group(args.project)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}")
        return 2
    arguments = collect_compiler_args(ConfigExtractor(store.settings).extract(group.project))
    for token in arguments:
        print(token)
    return 0


def _handle_validate(args: Namespace, workspace: Path) -> int:
    store = _load_store(args, workspace)
    errors = validate_workspace(store.workspace, ExtensionRegistry.with_builtins())
    if errors:
        print("Validation failed:")
        for message in errors:
            print(f"  {message}")
        return 1
    print("Validation successful")
    return 0


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="compiler-import", description="Import build compiler settings into the IDE model")
    parser.add_argument(
        "-C",
        "--config-dir",
        dest="config_dirs",
        action="append",
        default=[],
        metavar="PATH",
        help="Additional configuration directory (repeat or separate with PATH separator)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    apply_parser = subparsers.add_parser("apply", help="Run a full import pass")
    apply_parser.add_argument("--state", metavar="FILE", help="JSON file holding the compiler configuration between runs")
    apply_parser.add_argument("--reselect", action="store_true", help="Ignore the cached default compiler")
    apply_parser.add_argument("--json", action="store_true", help="Print the resulting configuration as JSON")

    subparsers.add_parser("list", help="List projects, modules and declared compiler ids")

    args_parser = subparsers.add_parser("args", help="Show the compiler arguments collected for a project")
    args_parser.add_argument("project", help="Project name")

    subparsers.add_parser("validate", help="Check the workspace configuration")
    return parser.parse_args(list(argv))


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    workspace = Path.cwd()

    handlers = {
        "apply": _handle_apply,
        "list": _handle_list,
        "args": _handle_args,
        "validate": _handle_validate,
    }
    handler = handlers.get(args.command)
    if handler is None:
        raise ValueError(f"Unknown command: {args.command}")
    try:
        return handler(args, workspace)
    except (FileNotFoundError, TypeError, ValueError) as exc:
        print(f"Error: {exc}")
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
