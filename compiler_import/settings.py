"""Import settings and feature toggles read from the top-level configuration file."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping

from core.config_loader import normalize_string_list


DEFAULT_MINIMUM_LANGUAGE_LEVEL = "1.5"


def _as_bool(value: Any, *, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise TypeError(f"import.{field_name} must be a boolean")


@dataclass(slots=True)
class ImportSettings:
    import_compiler_arguments: bool = True
    auto_detect_compiler: bool = True
    minimum_language_level: str = DEFAULT_MINIMUM_LANGUAGE_LEVEL

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ImportSettings":
        section = data.get("import", {}) if isinstance(data, Mapping) else {}
        if not isinstance(section, Mapping):
            raise TypeError("The [import] section must be a mapping")
        allowed_keys = {"import_compiler_arguments", "auto_detect_compiler", "minimum_language_level"}
        unknown = {str(key) for key in section.keys() if str(key) not in allowed_keys}
        if unknown:
            raise ValueError(f"Import settings contain unknown keys: {', '.join(sorted(unknown))}")
        minimum = section.get("minimum_language_level", DEFAULT_MINIMUM_LANGUAGE_LEVEL)
        return cls(
            import_compiler_arguments=_as_bool(
                section.get("import_compiler_arguments"), field_name="import_compiler_arguments", default=True
            ),
            auto_detect_compiler=_as_bool(
                section.get("auto_detect_compiler"), field_name="auto_detect_compiler", default=True
            ),
            minimum_language_level=str(minimum).strip() or DEFAULT_MINIMUM_LANGUAGE_LEVEL,
        )


@dataclass(slots=True)
class CompilerSection:
    """Initial state of the IDE compiler model when no state file is given."""

    default: str | None = None
    registered: List[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CompilerSection":
        section = data.get("compiler", {}) if isinstance(data, Mapping) else {}
        if not isinstance(section, Mapping):
            raise TypeError("The [compiler] section must be a mapping")
        default = section.get("default")
        return cls(
            default=str(default).strip() if default else None,
            registered=normalize_string_list(section.get("registered"), field_name="compiler.registered"),
        )


__all__ = ["CompilerSection", "DEFAULT_MINIMUM_LANGUAGE_LEVEL", "ImportSettings"]
