"""Read-only element tree holding a build plugin's configuration block."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, Sequence
import xml.etree.ElementTree as ElementTree


def _scalar_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(slots=True)
class ConfigNode:
    """A named node with optional text and ordered children."""

    name: str
    text: str | None = None
    children: List["ConfigNode"] = field(default_factory=list)

    @property
    def text_trim(self) -> str:
        return self.text.strip() if self.text else ""

    def child(self, name: str) -> "ConfigNode | None":
        for node in self.children:
            if node.name == name:
                return node
        return None

    def children_named(self, name: str) -> List["ConfigNode"]:
        return [node for node in self.children if node.name == name]

    def child_text_trim(self, name: str) -> str | None:
        node = self.child(name)
        return node.text_trim if node is not None else None

    def __iter__(self) -> Iterator["ConfigNode"]:
        return iter(self.children)

    @classmethod
    def from_mapping(cls, name: str, value: Any) -> "ConfigNode":
        """Build a tree from decoded TOML/JSON/YAML data.

        Mappings keep their key order, sequences become repeated sibling
        nodes sharing the key, and scalars become node text.
        """

        node = cls(name=name)
        if isinstance(value, Mapping):
            for key, item in value.items():
                node.children.extend(cls._nodes_for(str(key), item))
            return node
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            raise TypeError(f"Configuration node '{name}' cannot be a bare list")
        node.text = _scalar_text(value)
        return node

    @classmethod
    def _nodes_for(cls, key: str, value: Any) -> List["ConfigNode"]:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return [cls.from_mapping(key, item) for item in value]
        return [cls.from_mapping(key, value)]

    @classmethod
    def from_xml(cls, text: str) -> "ConfigNode":
        """Build a tree from an XML fragment such as ``<configuration>...</configuration>``."""

        try:
            root = ElementTree.fromstring(text)
        except ElementTree.ParseError as exc:
            raise ValueError(f"Invalid configuration XML: {exc}") from exc
        return cls._from_element(root)

    @classmethod
    def _from_element(cls, element: ElementTree.Element) -> "ConfigNode":
        tag = element.tag
        if tag.startswith("{"):
            tag = tag.split("}", 1)[1]
        return cls(
            name=tag,
            text=element.text,
            children=[cls._from_element(child) for child in element],
        )


__all__ = ["ConfigNode"]
