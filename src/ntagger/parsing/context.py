"""Per-run parsing context shared by every parse call."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class IdentCache:
    """Interns identifier text so equal names share one string object."""

    _idents: dict[str, str] = field(default_factory=dict)

    def get_ident(self, name: str) -> str:
        return self._idents.setdefault(name, name)

    def __len__(self) -> int:
        return len(self._idents)

    def __contains__(self, name: object) -> bool:
        return name in self._idents


@dataclass
class ParseContext:
    """Created once per run and passed explicitly into every parse call."""

    project_path: Path
    idents: IdentCache = field(default_factory=IdentCache)
    files_parsed: int = 0
