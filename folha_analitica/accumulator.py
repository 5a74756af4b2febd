from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Optional, Tuple

import structlog

from .boundary import Draft
from .events import CapturedEvent, Recognition
from .models import BasesCalculo, Desconto, Employee, Evento, Provento, ValoresCalculados

logger = structlog.get_logger()


@dataclass(frozen=True)
class Accumulator:
    """Events, bases and totals gathered for the current draft."""
    eventos: Tuple[Evento, ...] = ()
    proventos: Tuple[Provento, ...] = ()
    descontos: Tuple[Desconto, ...] = ()
    brutos: Tuple[str, ...] = ()
    totais: Tuple[Tuple[str, float], ...] = ()
    vistos: FrozenSet[tuple] = field(default_factory=frozenset)

    def merge(self, recognition: Recognition, deduplicate: bool = False) -> "Accumulator":
        acc = self
        for captura in recognition.capturas:
            acc = acc.add(captura, deduplicate)
        return acc

    def add(self, captura: CapturedEvent, deduplicate: bool = False) -> "Accumulator":
        if deduplicate and captura.key in self.vistos:
            return self
        proventos, descontos = self.proventos, self.descontos
        if isinstance(captura.item, Provento):
            proventos = proventos + (captura.item,)
        elif isinstance(captura.item, Desconto):
            descontos = descontos + (captura.item,)
        return replace(
            self,
            eventos=self.eventos + (captura.evento,),
            proventos=proventos,
            descontos=descontos,
            brutos=self.brutos + (captura.bruto,),
            vistos=self.vistos | {captura.key},
        )

    def with_totals(self, values: Dict[str, float]) -> "Accumulator":
        if not values:
            return self
        merged = dict(self.totais)
        merged.update(values)
        return replace(self, totais=tuple(merged.items()))

    @property
    def totals(self) -> Dict[str, float]:
        return dict(self.totais)


def finalize(draft: Optional[Draft], acc: Accumulator) -> Optional[Employee]:
    """
    Snapshot of the draft plus its accumulators, or None when the draft has
    no name or matricula.
    Missing totals are derived: bruto = sum(proventos),
    total_descontos = sum(descontos), liquido = bruto - total_descontos.
    """
    if draft is None:
        return None
    if not draft.eligible:
        logger.debug("draft_discarded", matricula=draft.matricula, events=len(acc.eventos))
        return None

    t = acc.totals
    bruto = t.get("bruto")
    if bruto is None and acc.proventos:
        bruto = sum(p.valor for p in acc.proventos)
    total_descontos = t.get("total_descontos")
    if total_descontos is None:
        total_descontos = sum(d.valor for d in acc.descontos)
    if bruto is None:
        bruto = 0.0
    liquido = t.get("liquido")
    if liquido is None:
        liquido = bruto - total_descontos

    return Employee(
        id=draft.id,
        name=draft.name,
        matricula=draft.matricula,
        funcao=draft.funcao,
        secao=draft.secao,
        filial=draft.filial,
        admissao=draft.admissao,
        demissao=draft.demissao,
        salario_base=t.get("salario_base", 0.0),
        eventos=list(acc.eventos),
        proventos=list(acc.proventos),
        descontos=list(acc.descontos),
        bases=BasesCalculo(
            inss=t.get("base_inss"),
            irrf=t.get("base_irrf"),
            fgts=t.get("base_fgts"),
        ),
        valores=ValoresCalculados(
            bruto=bruto,
            total_descontos=float(total_descontos),
            liquido=liquido,
            fgts_acumulado=t.get("fgts_acumulado"),
            irrf_descontado=t.get("irrf_descontado"),
        ),
        eventos_brutos=list(acc.brutos),
    )
