from __future__ import annotations
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Pattern

from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from .exceptions import ConfigurationError
from .utils import normalize_branch, normalize_header

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_LAYOUT = TEMPLATES_DIR / "layout.json"

REQUIRED_TOTALS = (
    "salario_base", "bruto", "liquido", "base_inss",
    "base_irrf", "irrf_descontado", "base_fgts", "fgts_acumulado",
)

class LayoutConfig(BaseModel):
    """
    Labels, headers and branch names of the known folha analítica templates.
    Regexes are matched case-insensitively.
    """
    filiais: List[str] = Field(default_factory=list)
    field_labels: Dict[str, str] = Field(default_factory=dict)
    total_labels: Dict[str, str] = Field(default_factory=dict)
    header_multilinha: List[str]
    header_linha_unica: str
    filial_forward_window: int = Field(10, ge=0)
    filial_backward_window: int = Field(5, ge=0)
    deduplicate_events: bool = False

    _field_patterns: Dict[str, Pattern[str]] = PrivateAttr(default_factory=dict)
    _total_patterns: Dict[str, Pattern[str]] = PrivateAttr(default_factory=dict)
    _filiais_norm: frozenset = PrivateAttr(default_factory=frozenset)

    @field_validator("header_multilinha")
    @classmethod
    def _five_lines(cls, v: List[str]) -> List[str]:
        if len(v) != 5:
            raise ValueError("header_multilinha precisa de exatamente 5 linhas")
        return v

    @field_validator("total_labels")
    @classmethod
    def _required_totals(cls, v: Dict[str, str]) -> Dict[str, str]:
        missing = [k for k in REQUIRED_TOTALS if k not in v]
        if missing:
            raise ValueError(f"rótulos de totais ausentes: {', '.join(missing)}")
        return v

    def model_post_init(self, __context) -> None:
        try:
            self._field_patterns = {
                k: re.compile(p, re.IGNORECASE) for k, p in self.field_labels.items()
            }
            # totals are recognized by line prefix only
            self._total_patterns = {
                k: re.compile(r"^\s*(?:" + p + r")", re.IGNORECASE)
                for k, p in self.total_labels.items()
            }
        except re.error as e:
            raise ConfigurationError(f"regex inválida no layout: {e}") from e
        self._filiais_norm = frozenset(normalize_branch(f) for f in self.filiais)

    @property
    def field_patterns(self) -> Dict[str, Pattern[str]]:
        return self._field_patterns

    @property
    def total_patterns(self) -> Dict[str, Pattern[str]]:
        return self._total_patterns

    @property
    def filial_pattern(self) -> Optional[Pattern[str]]:
        return self._field_patterns.get("filial")

    @property
    def filiais_normalizadas(self) -> frozenset:
        return self._filiais_norm

    @property
    def header_multilinha_norm(self) -> List[str]:
        return [normalize_header(h) for h in self.header_multilinha]

    @property
    def header_linha_unica_norm(self) -> str:
        return normalize_header(self.header_linha_unica)


def load_layout_file(path: Path) -> LayoutConfig:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"não foi possível ler o layout {path}: {e}", config_key=str(path)) from e
    try:
        return LayoutConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"layout inválido {path}: {e}", config_key=str(path)) from e

@lru_cache(maxsize=1)
def _default_layout() -> LayoutConfig:
    return load_layout_file(DEFAULT_LAYOUT)

def load_layout(path: Optional[Path] = None) -> LayoutConfig:
    if path is None:
        return _default_layout()
    return load_layout_file(path)
