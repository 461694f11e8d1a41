from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "DefinitionBlock",
]


@dataclass(frozen=True)
class DefinitionBlock:
    """One named list in list-definition text, as an ordered line sequence."""
    name: str
    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
