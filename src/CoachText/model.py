from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, List


@dataclass
class Block:
    """Base class for block-level nodes."""


@dataclass
class Document:
    blocks: List[Block]
    metadata: dict[str, Any] | None = None


@dataclass
class Paragraph(Block):
    inline: str


@dataclass
class Heading(Block):
    level: int
    text: str
    ordinal: int | None = None


@dataclass
class CodeBlock(Block):
    language: str | None
    lines: List[str] = field(default_factory=list)

    @property
    def code(self) -> str:
        return "\n".join(self.lines)


@dataclass
class Divider(Block):
    """Labelled section break."""

    label: ClassVar[str] = "Section Break"


@dataclass
class Callout(Block):
    label: str
    text: str


@dataclass
class ListItem:
    marker: str
    text: str


@dataclass
class ListBlock(Block):
    ordered: bool
    items: List[ListItem] = field(default_factory=list)
    level: int = 0
