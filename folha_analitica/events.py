from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

import structlog

from .boundary import is_boundary
from .config import LayoutConfig
from .models import Desconto, Evento, Provento
from .utils import normalize_header, parse_value

logger = structlog.get_logger()

RE_CODIGO = re.compile(r"[0-9]{4}")
RE_VALOR = re.compile(r"-?[0-9.,]+")

_AMOUNT = r"-?[0-9][0-9.,]*"
# codigo, descricao, ref, provento|-, desconto|-
RE_LINHA_TABELA = re.compile(
    r"^([0-9]{4})\s+(.+?)\s+(\S+)\s+(" + _AMOUNT + r"|-)\s+(" + _AMOUNT + r"|-)$"
)
# same row with the dash column elided
RE_LINHA_CURTA = re.compile(r"^([0-9]{4})\s+(.+?)\s+(\S+)\s+(" + _AMOUNT + r")$")


class ScanMode(str, Enum):
    SCANNING = "scanning"
    INSIDE_TABLE = "inside_table"
    AFTER_TOTALS_SCAN = "after_totals_scan"


@dataclass(frozen=True)
class CapturedEvent:
    evento: Evento
    linha: int
    bruto: str
    item: Union[Provento, Desconto, None] = None

    @property
    def key(self) -> Tuple[str, str, str, float, int]:
        kind = type(self.item).__name__ if self.item is not None else ""
        return (kind, self.evento.codigo, self.evento.ref, self.evento.valor, self.linha)


@dataclass(frozen=True)
class Recognition:
    """Events produced at one position; next_index moves the scan cursor."""
    capturas: Tuple[CapturedEvent, ...] = ()
    next_index: Optional[int] = None


def is_single_line_header(line: str, config: LayoutConfig) -> bool:
    return normalize_header(line) == config.header_linha_unica_norm


def _provento(codigo: str, tipo: str, ref: str, raw: str, linha: int, tag: str) -> CapturedEvent:
    valor = parse_value(raw)
    return CapturedEvent(
        evento=Evento(codigo=codigo, tipo=tipo, valor=valor, ref=ref),
        linha=linha,
        bruto=f"{tag}: {codigo} {tipo} {ref} {raw}",
        item=Provento(tipo=tipo, valor=valor, codigo=codigo, ref=ref),
    )


def _desconto(codigo: str, tipo: str, ref: str, raw: str, linha: int, tag: str) -> CapturedEvent:
    valor = parse_value(raw)
    return CapturedEvent(
        evento=Evento(codigo=codigo, tipo=tipo, valor=valor, ref=ref),
        linha=linha,
        bruto=f"{tag}: {codigo} {tipo} {ref} {raw}",
        item=Desconto(tipo=tipo, valor=abs(valor), codigo=codigo, ref=ref),
    )


def _table_row(m: re.Match, linha: int, tag: str) -> List[CapturedEvent]:
    codigo, tipo, ref, prov, desc = (g.strip() for g in m.groups())
    out = []
    if prov != "-":
        out.append(_provento(codigo, tipo, ref, prov, linha, tag))
    if desc != "-":
        out.append(_desconto(codigo, tipo, ref, desc, linha, tag))
    return out


class MultilineHeaderRecognizer:
    """
    Header split into five lines ("descontos", "proventos", "ref.",
    "descrição", "evento"), then groups of
        valor / ref / descrição (one or more lines) / código
    read until the first group that does not fit.
    """
    tag = "A"

    def recognize(self, lines: Sequence[str], index: int, mode: ScanMode,
                  config: LayoutConfig) -> Optional[Recognition]:
        header = config.header_multilinha_norm
        if index + len(header) > len(lines):
            return None
        if any(normalize_header(lines[index + k]) != h for k, h in enumerate(header)):
            return None

        j = index + len(header)
        capturas: List[CapturedEvent] = []
        while True:
            group = self._read_group(lines, j)
            if group is None:
                break
            captura, j = group
            capturas.append(captura)
        logger.debug("multiline_table", start=index, events=len(capturas), stop=j)
        return Recognition(capturas=tuple(capturas), next_index=j)

    def _read_group(self, lines: Sequence[str], j: int) -> Optional[Tuple[CapturedEvent, int]]:
        if j + 3 >= len(lines):
            return None
        # never read past the next employee
        if any(is_boundary(lines[i]) for i in range(j, j + 3)):
            return None
        valor = lines[j].strip()
        if not RE_VALOR.fullmatch(valor):
            return None
        ref = lines[j + 1].strip()
        descricao = [lines[j + 2].strip()]
        k = j + 3
        while k < len(lines) and not RE_CODIGO.fullmatch(lines[k].strip()):
            if is_boundary(lines[k]):
                return None
            descricao.append(lines[k].strip())
            k += 1
        if k >= len(lines):
            return None
        codigo = lines[k].strip()
        tipo = " ".join(d for d in descricao if d)
        captura = CapturedEvent(
            evento=Evento(codigo=codigo, tipo=tipo, valor=parse_value(valor), ref=ref),
            linha=k,
            bruto=f"{self.tag}: {codigo} {tipo} {ref} {valor}",
        )
        return captura, k + 1


class SingleLineTableRecognizer:
    """Rows of an "Evento Descrição Ref. Proventos Descontos" table."""
    tag = "B"

    def recognize(self, lines: Sequence[str], index: int, mode: ScanMode,
                  config: LayoutConfig) -> Optional[Recognition]:
        if mode is not ScanMode.INSIDE_TABLE:
            return None
        m = RE_LINHA_TABELA.match(lines[index].strip())
        if not m:
            return None
        return Recognition(capturas=tuple(_table_row(m, index, self.tag)))


class FallbackRowRecognizer:
    """Any line shaped like a table row, wherever it appears."""
    tag = "C"

    def recognize(self, lines: Sequence[str], index: int, mode: ScanMode,
                  config: LayoutConfig) -> Optional[Recognition]:
        line = lines[index].strip()
        tag = "C/totais" if mode is ScanMode.AFTER_TOTALS_SCAN else self.tag
        m = RE_LINHA_TABELA.match(line)
        if m:
            return Recognition(capturas=tuple(_table_row(m, index, tag)))
        m = RE_LINHA_CURTA.match(line)
        if not m:
            return None
        codigo, tipo, ref, raw = (g.strip() for g in m.groups())
        if raw.startswith("-"):
            captura = _desconto(codigo, tipo, ref, raw, index, tag)
        else:
            captura = _provento(codigo, tipo, ref, raw, index, tag)
        return Recognition(capturas=(captura,))


def is_event_row(line: str) -> bool:
    line = (line or "").strip()
    return bool(RE_LINHA_TABELA.match(line) or RE_LINHA_CURTA.match(line))


RECOGNIZERS = (
    MultilineHeaderRecognizer(),
    SingleLineTableRecognizer(),
    FallbackRowRecognizer(),
)
