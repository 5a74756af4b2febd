from __future__ import annotations
import re
import uuid
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import structlog

from .config import LayoutConfig
from .utils import normalize_branch

logger = structlog.get_logger()

RE_MATRICULA = re.compile(r"[0-9]{6}")

@dataclass(frozen=True)
class Draft:
    """Employee being read; scalar fields only."""
    id: str
    matricula: str
    name: str = ""
    funcao: str = ""
    secao: str = ""
    filial: str = ""
    admissao: Optional[str] = None
    demissao: Optional[str] = None

    @property
    def eligible(self) -> bool:
        return bool(self.name) and bool(self.matricula)

    def with_fields(self, **values) -> "Draft":
        values = {k: v for k, v in values.items() if v}
        return replace(self, **values) if values else self


def is_boundary(line: str) -> bool:
    return bool(RE_MATRICULA.fullmatch((line or "").strip()))


def _line(lines: Sequence[str], i: int) -> str:
    if 0 <= i < len(lines):
        return lines[i].strip()
    return ""


def resolve_filial(lines: Sequence[str], index: int, config: LayoutConfig) -> str:
    rx = config.filial_pattern
    if rx is not None:
        stop = min(len(lines), index + 1 + config.filial_forward_window)
        for j in range(index + 1, stop):
            m = rx.search(lines[j].strip())
            if m and m.group(1).strip():
                return m.group(1).strip()

    known = config.filiais_normalizadas
    for j in range(index - 1, max(-1, index - 1 - config.filial_backward_window), -1):
        original = lines[j].strip()
        if normalize_branch(original) in known:
            return original
    return ""


def open_draft(lines: Sequence[str], index: int, config: LayoutConfig) -> Draft:
    matricula = lines[index].strip()
    draft = Draft(
        id=uuid.uuid4().hex[:9],
        matricula=matricula,
        name=_line(lines, index - 1),
        funcao=_line(lines, index + 1),
        filial=resolve_filial(lines, index, config),
    )
    logger.debug("employee_boundary", matricula=matricula, name=draft.name, filial=draft.filial)
    return draft
