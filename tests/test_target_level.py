from __future__ import annotations

import unittest

from compiler_import.config_tree import ConfigNode
from compiler_import.extensions import CompilerExtension, JavacCompilerExtension
from compiler_import.target_level import (
    LevelAdjuster,
    Notifier,
    TargetLevelResolver,
    default_language_level,
    parse_language_level,
    target_language_level,
    target_test_language_level,
)
from compiler_import.workspace import Module, ModuleKind, PluginDescriptor, ProjectDescriptor


def _project(
    *,
    xml: str | None = None,
    version: str | None = None,
    properties: dict[str, str] | None = None,
) -> ProjectDescriptor:
    plugins = []
    if xml is not None or version is not None:
        plugins.append(
            PluginDescriptor(
                group_id="org.apache.maven.plugins",
                artifact_id="maven-compiler-plugin",
                version=version,
                configuration=ConfigNode.from_xml(xml) if xml else None,
            )
        )
    return ProjectDescriptor(name="demo", properties=properties or {}, plugins=plugins)


class LanguageLevelParsingTests(unittest.TestCase):
    def test_canonical_forms(self) -> None:
        cases = {
            "8": "1.8",
            "1.8": "1.8",
            "1.5": "1.5",
            " 11 ": "11",
            "1.9": "9",
            "17": "17",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(parse_language_level(raw), expected)

    def test_invalid_values(self) -> None:
        for raw in (None, "", "  ", "${java.version}", "latest", "1.8.0_292", "0"):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_language_level(raw))


class ProjectLevelTests(unittest.TestCase):
    def test_release_wins_over_target(self) -> None:
        project = _project(
            xml="<configuration><target>1.8</target><release>11</release></configuration>",
            properties={"maven.compiler.release": "17"},
        )
        self.assertEqual(target_language_level(project), "11")

    def test_properties_are_used_without_configuration(self) -> None:
        project = _project(properties={"maven.compiler.target": "1.7"})
        self.assertEqual(target_language_level(project), "1.7")

    def test_unresolved_values_are_skipped(self) -> None:
        project = _project(
            xml="<configuration><release>${java.release}</release></configuration>",
            properties={"maven.compiler.target": "21"},
        )
        self.assertEqual(target_language_level(project), "21")

    def test_test_level_sources(self) -> None:
        project = _project(
            xml="<configuration><testTarget>17</testTarget></configuration>",
            properties={"maven.compiler.testRelease": "21"},
        )
        self.assertEqual(target_test_language_level(project), "21")
        self.assertIsNone(target_test_language_level(_project()))

    def test_default_level_follows_plugin_version(self) -> None:
        cases = {
            None: "1.5",
            "3.1": "1.5",
            "3.8.1": "1.6",
            "3.10.1": "1.7",
            "3.13.0": "1.8",
            "4.0.0-beta-1": "1.8",
        }
        for version, expected in cases.items():
            with self.subTest(version=version):
                self.assertEqual(default_language_level(_project(version=version)), expected)
        self.assertEqual(default_language_level(_project()), "1.5")


class LevelAdjusterTests(unittest.TestCase):
    def test_raises_low_levels_and_notifies_once(self) -> None:
        notifier = Notifier()
        adjuster = LevelAdjuster("1.8", notifier)
        with self.assertLogs("compiler_import.target_level", level="WARNING"):
            self.assertEqual(adjuster.adjust("1.5"), "1.8")
        self.assertEqual(adjuster.adjust("1.6"), "1.8")
        self.assertEqual(len(notifier.messages), 1)
        self.assertIn("1.5", notifier.messages[0])

    def test_supported_levels_pass_through(self) -> None:
        notifier = Notifier()
        adjuster = LevelAdjuster("1.5", notifier)
        self.assertEqual(adjuster.adjust("8"), "1.8")
        self.assertEqual(adjuster.adjust("17"), "17")
        self.assertEqual(notifier.messages, [])

    def test_notification_sink_receives_message(self) -> None:
        received: list[str] = []
        adjuster = LevelAdjuster("11", Notifier(sink=received.append))
        with self.assertLogs("compiler_import.target_level", level="WARNING"):
            adjuster.adjust("1.8")
        self.assertEqual(len(received), 1)

    def test_invalid_minimum_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LevelAdjuster("not-a-level")


class TargetLevelResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = TargetLevelResolver(LevelAdjuster("1.5", Notifier()))
        self.main = Module("demo.main", ModuleKind.MAIN)
        self.test = Module("demo.test", ModuleKind.TEST)
        self.javac = JavacCompilerExtension()

    def test_test_module_falls_back_to_main_level(self) -> None:
        project = _project(properties={"maven.compiler.release": "17"})
        self.assertEqual(self.resolver.resolve(project, self.test, self.javac), "17")

    def test_test_module_prefers_test_level(self) -> None:
        project = _project(properties={"maven.compiler.release": "17", "maven.compiler.testRelease": "21"})
        self.assertEqual(self.resolver.resolve(project, self.test, self.javac), "21")
        self.assertEqual(self.resolver.resolve(project, self.main, self.javac), "17")

    def test_main_module_ignores_test_level(self) -> None:
        project = _project(properties={"maven.compiler.testRelease": "21"})
        self.assertEqual(self.resolver.resolve(project, self.main, self.javac), "1.5")

    def test_falls_back_to_project_default(self) -> None:
        self.assertEqual(self.resolver.resolve(_project(version="3.11.0"), self.main, self.javac), "1.7")

    def test_baseline_when_nothing_configured(self) -> None:
        self.assertEqual(self.resolver.resolve(_project(), self.test, None), "1.5")

    def test_extension_level_is_used_verbatim(self) -> None:
        class FixedTargetExtension(CompilerExtension):
            compiler_id = "fixed"

            def default_target_level(self, project, module):
                return "1.4"

        project = _project(properties={"maven.compiler.release": "17"})
        self.assertEqual(self.resolver.resolve(project, self.main, FixedTargetExtension()), "1.4")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
