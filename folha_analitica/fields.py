from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Dict, Pattern, Sequence

from .config import LayoutConfig
from .utils import is_numeric_like, parse_value

RE_CURRENCY = re.compile(r"^R\$\s*", re.IGNORECASE)

@dataclass(frozen=True)
class TotalsHit:
    matched: bool = False
    values: Dict[str, float] = field(default_factory=dict)


def extract_fields(line: str, config: LayoutConfig) -> Dict[str, str]:
    """
    "FUNÇÃO: PROFESSOR SEÇÃO: ENSINO FILIAL: ANIL" ->
    {"funcao": "PROFESSOR", "secao": "ENSINO", "filial": "ANIL"}
    Labels whose captured value is empty are left out.
    """
    out: Dict[str, str] = {}
    for name, rx in config.field_patterns.items():
        m = rx.search(line)
        if not m:
            continue
        value = (m.group(1) or "").strip()
        if value:
            out[name] = value
    return out


def lookup_numeric(lines: Sequence[str], index: int, label: Pattern[str]) -> str:
    """
    Value of a "LABEL: 1.234,56" line, or of the line right after it when the
    label stands alone. Returns "" when neither looks numeric.
    """
    line = lines[index].strip()
    m = label.match(line)
    if not m:
        return ""
    rest = RE_CURRENCY.sub("", line[m.end():].strip())
    if is_numeric_like(rest):
        return rest
    if index + 1 < len(lines):
        nxt = RE_CURRENCY.sub("", lines[index + 1].strip())
        if is_numeric_like(nxt):
            return nxt
    return ""


def is_totals_line(line: str, config: LayoutConfig) -> bool:
    return any(rx.match(line) for rx in config.total_patterns.values())


def collect_totals(lines: Sequence[str], index: int, config: LayoutConfig) -> TotalsHit:
    line = lines[index].strip()
    matched = False
    values: Dict[str, float] = {}
    for name, rx in config.total_patterns.items():
        if not rx.match(line):
            continue
        matched = True
        raw = lookup_numeric(lines, index, rx)
        if raw:
            values[name] = parse_value(raw)
    return TotalsHit(matched=matched, values=values)
