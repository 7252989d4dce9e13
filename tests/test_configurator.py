from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from compiler_import.compiler_configuration import CompilerConfiguration, ExcludeEntry
from compiler_import.config_tree import ConfigNode
from compiler_import.configurator import CompilerConfigurator
from compiler_import.extensions import (
    ECLIPSE_BACKEND,
    JAVAC_BACKEND,
    CompilerExtension,
    EclipseCompilerExtension,
    ExtensionRegistry,
    JavacCompilerExtension,
)
from compiler_import.settings import ImportSettings
from compiler_import.workspace import Module, ModuleGroup, ModuleKind, PluginDescriptor, ProjectDescriptor, Workspace


def _group(
    name: str,
    xml: str | None = None,
    *,
    packaging: str = "jar",
    directory: Path | None = None,
    properties: dict[str, str] | None = None,
    modules: list[Module] | None = None,
) -> ModuleGroup:
    plugins = []
    if xml is not None:
        plugins.append(
            PluginDescriptor(
                group_id="org.apache.maven.plugins",
                artifact_id="maven-compiler-plugin",
                version="3.11.0",
                configuration=ConfigNode.from_xml(xml),
            )
        )
    project = ProjectDescriptor(
        name=name,
        packaging=packaging,
        directory=directory,
        properties=properties or {},
        plugins=plugins,
    )
    if modules is None:
        modules = [Module(f"{name}.main", ModuleKind.MAIN), Module(f"{name}.test", ModuleKind.TEST)]
    return ModuleGroup(project=project, modules=modules)


class CompilerConfiguratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.registry = ExtensionRegistry.with_builtins()
        self.configuration = CompilerConfiguration(
            default_compiler=JAVAC_BACKEND,
            registered_compilers=[JAVAC_BACKEND, ECLIPSE_BACKEND],
        )
        self.configurator = CompilerConfigurator(ImportSettings(), self.registry, self.configuration)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _workspace(self) -> Workspace:
        (self.root / "app" / "src" / "main" / "resources" / "archetype-resources").mkdir(parents=True)
        return Workspace(
            groups=[
                _group(
                    "parent",
                    "<configuration><compilerId>eclipse</compilerId></configuration>",
                    packaging="pom",
                    modules=[Module("parent")],
                ),
                _group(
                    "app",
                    """
                    <configuration>
                      <compilerId>eclipse</compilerId>
                      <release>17</release>
                      <compilerArgs><arg>-Xlint:all</arg></compilerArgs>
                    </configuration>
                    """,
                    directory=self.root / "app",
                    properties={"maven.compiler.parameters": "true"},
                ),
            ]
        )

    def test_full_pass_configures_modules(self) -> None:
        workspace = self._workspace()
        report = self.configurator.run(workspace)

        self.assertEqual(report.default_compiler_id, "eclipse")
        self.assertTrue(report.default_changed)
        self.assertEqual(self.configuration.default_compiler, ECLIPSE_BACKEND)
        self.assertEqual(report.configured_modules, ["parent", "app.main", "app.test"])
        self.assertEqual(report.errors, [])

        self.assertEqual(self.configuration.additional_options("Eclipse", "app.main"), ["-parameters", "-Xlint:all"])
        self.assertEqual(self.configuration.additional_options("Eclipse", "app.test"), ["-parameters", "-Xlint:all"])
        self.assertEqual(self.configuration.additional_options("Javac", "app.main"), [])
        self.assertEqual(self.configuration.bytecode_target_level("app.main"), "17")
        self.assertEqual(self.configuration.bytecode_target_level("app.test"), "17")
        self.assertEqual(self.configuration.bytecode_target_level("parent"), "1.7")

        archetype = (self.root / "app" / "src" / "main" / "resources" / "archetype-resources").resolve()
        self.assertTrue(self.configuration.is_excluded(archetype))
        self.assertTrue(self.configuration.is_excluded(archetype / "pom.xml"))

    def test_repeated_pass_is_idempotent(self) -> None:
        workspace = self._workspace()
        self.configurator.run(workspace)
        first = self.configuration.to_mapping()
        self.configurator.run(workspace)
        self.assertEqual(self.configuration.to_mapping(), first)
        self.assertEqual(len(self.configuration.excluded_entries), 1)

    def test_module_override_and_stale_option_cleanup(self) -> None:
        self.configuration.set_additional_options("Eclipse", "lib.main", ["-old"])
        workspace = Workspace(
            groups=[
                _group("app", "<configuration><compilerArgument>-g</compilerArgument></configuration>"),
                _group(
                    "lib",
                    "<configuration><compilerId>javac</compilerId><compilerArgument>-Xlint</compilerArgument></configuration>",
                ),
            ]
        )
        default_extension = self.registry.find("eclipse")
        self.configurator.after_model_applied(workspace, default_extension)

        # A project whose compiler plugin omits compilerId is normalized to javac.
        self.assertEqual(self.configuration.additional_options("Javac", "app.main"), ["-g"])
        self.assertEqual(self.configuration.additional_options("Javac", "lib.main"), ["-Xlint"])
        self.assertEqual(self.configuration.additional_options("Eclipse", "lib.main"), [])

    def test_default_extension_applies_without_plugin_configuration(self) -> None:
        workspace = Workspace(groups=[_group("app", properties={"maven.compiler.parameters": "true"})])
        self.configurator.after_model_applied(workspace, self.registry.find("eclipse"))
        self.assertEqual(self.configuration.additional_options("Eclipse", "app.main"), ["-parameters"])
        self.assertEqual(self.configuration.additional_options("Javac", "app.main"), [])

    def test_empty_argument_list_clears_previous_options(self) -> None:
        self.configuration.set_additional_options("Javac", "app.main", ["-stale"])
        workspace = Workspace(groups=[_group("app", "<configuration/>")])
        self.configurator.run(workspace)
        self.assertEqual(self.configuration.additional_options("Javac", "app.main"), [])

    def test_cached_default_is_reused(self) -> None:
        workspace = Workspace(groups=[_group("app", "<configuration><compilerId>eclipse</compilerId></configuration>")])
        cached = self.registry.find("javac")
        self.assertIs(self.configurator.before_model_applied(workspace, cached), cached)
        self.assertEqual(self.configurator.before_model_applied(workspace).compiler_id, "eclipse")

    def test_toggles_disable_argument_import(self) -> None:
        configurator = CompilerConfigurator(
            ImportSettings(import_compiler_arguments=False),
            self.registry,
            self.configuration,
        )
        workspace = Workspace(
            groups=[_group("app", "<configuration><compilerId>eclipse</compilerId><compilerArgument>-g</compilerArgument></configuration>")]
        )
        report = configurator.run(workspace)
        self.assertEqual(report.default_compiler_id, "javac")
        self.assertEqual(self.configuration.additional_options("Javac", "app.main"), [])
        self.assertEqual(self.configuration.additional_options("Eclipse", "app.main"), [])

    def test_removed_modules_are_reconciled(self) -> None:
        self.configuration.set_additional_options("Javac", "gone.main", ["-g"])
        self.configuration.set_bytecode_target_level("gone.main", "11")
        report = self.configurator.run(Workspace(groups=[_group("app")]))
        self.assertEqual(report.removed_modules, ["gone.main"])
        self.assertIsNone(self.configuration.bytecode_target_level("gone.main"))
        self.assertEqual(self.configuration.additional_options("Javac", "gone.main"), [])
        self.assertEqual(self.configuration.bytecode_target_level("app.main"), "1.5")

    def test_failure_in_one_module_does_not_stop_the_pass(self) -> None:
        class FailingExtension(CompilerExtension):
            compiler_id = "javac"
            backend = JAVAC_BACKEND

            def configure_options(self, configuration, module, project, arguments):
                if module.name == "broken.main":
                    raise ValueError("cannot write options")
                super().configure_options(configuration, module, project, arguments)

        registry = ExtensionRegistry([FailingExtension(), EclipseCompilerExtension()])
        configurator = CompilerConfigurator(ImportSettings(), registry, self.configuration)
        workspace = Workspace(
            groups=[
                _group("broken", "<configuration><compilerArgument>-g</compilerArgument></configuration>"),
                _group("ok", "<configuration><compilerArgument>-g</compilerArgument></configuration>"),
            ]
        )
        with self.assertLogs("compiler_import.configurator", level="WARNING"):
            report = configurator.run(workspace)
        self.assertEqual(report.errors, [("broken.main", "cannot write options")])
        self.assertIn("ok.main", report.configured_modules)
        self.assertEqual(self.configuration.additional_options("Javac", "ok.main"), ["-g"])

    def test_failed_module_keeps_no_settings_from_previous_pass(self) -> None:
        class BrokenTargetExtension(JavacCompilerExtension):
            def default_target_level(self, project, module):
                raise RuntimeError("boom")

        registry = ExtensionRegistry([BrokenTargetExtension(), EclipseCompilerExtension()])
        configurator = CompilerConfigurator(ImportSettings(), registry, self.configuration)
        self.configuration.set_bytecode_target_level("app.main", "1.4")
        self.configuration.set_additional_options("Javac", "app.main", ["-stale"])
        self.configuration.set_additional_options("Eclipse", "app.main", ["-stale"])
        workspace = Workspace(
            groups=[
                _group(
                    "app",
                    "<configuration><compilerArgument>-g</compilerArgument></configuration>",
                    modules=[Module("app.main")],
                )
            ]
        )

        with self.assertLogs("compiler_import.configurator", level="WARNING"):
            report = configurator.run(workspace)

        self.assertEqual(report.errors, [("app.main", "boom")])
        self.assertEqual(report.configured_modules, [])
        self.assertIsNone(self.configuration.bytecode_target_level("app.main"))
        self.assertEqual(self.configuration.additional_options("Javac", "app.main"), [])
        self.assertEqual(self.configuration.additional_options("Eclipse", "app.main"), [])

    def test_existing_exclusion_is_not_duplicated(self) -> None:
        archetype_parent = (self.root / "app" / "src" / "main" / "resources").resolve()
        (archetype_parent / "archetype-resources").mkdir(parents=True)
        self.configuration.add_exclude_entry(ExcludeEntry(archetype_parent, include_subdirectories=True))
        self.configurator.run(Workspace(groups=[_group("app", directory=self.root / "app")]))
        self.assertEqual(len(self.configuration.excluded_entries), 1)

    def test_missing_archetype_directory_is_skipped(self) -> None:
        self.configurator.run(Workspace(groups=[_group("app", directory=self.root / "missing")]))
        self.assertEqual(self.configuration.excluded_entries, [])

    def test_extension_target_level_override(self) -> None:
        class ToolchainTargetExtension(JavacCompilerExtension):
            def default_target_level(self, project, module):
                return "21"

        registry = ExtensionRegistry([ToolchainTargetExtension()])
        configurator = CompilerConfigurator(ImportSettings(), registry, self.configuration)
        configurator.run(Workspace(groups=[_group("app", properties={"maven.compiler.release": "11"})]))
        self.assertEqual(self.configuration.bytecode_target_level("app.main"), "21")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
