from __future__ import annotations
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .models import Employee

EVENT_COLUMNS = ["Filial", "Código", "Evento", "Colaborador", "Matrícula", "Valor"]

def employees_to_frame(employees: Iterable[Employee]) -> pd.DataFrame:
    rows = []
    for e in employees:
        rows.append({
            "Nome": e.name,
            "Matrícula": e.matricula,
            "Função": e.funcao,
            "Seção": e.secao,
            "Filial": e.filial,
            "Admissão": e.admissao or "",
            "Salário Base": e.salario_base,
            "Bruto": e.valores.bruto,
            "Descontos": e.valores.total_descontos,
            "Líquido": e.valores.liquido,
            "Base INSS": e.bases.inss,
            "Base IRRF": e.bases.irrf,
            "Base FGTS": e.bases.fgts,
        })
    return pd.DataFrame(rows)

def event_details(
    employees: Iterable[Employee],
    filiais: Optional[Sequence[str]] = None,
    codigos: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """One row per evento, optionally restricted to some branches/codes."""
    rows: List[dict] = []
    for e in employees:
        if filiais is not None and e.filial not in filiais:
            continue
        for ev in e.eventos:
            if codigos is not None and ev.codigo not in codigos:
                continue
            rows.append({
                "Filial": e.filial,
                "Código": ev.codigo,
                "Evento": ev.tipo,
                "Colaborador": e.name,
                "Matrícula": e.matricula,
                "Valor": ev.valor,
            })
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)

def branch_event_totals(
    employees: Iterable[Employee],
    filiais: Optional[Sequence[str]] = None,
    codigos: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Sum of evento values per (filial, código)."""
    df = event_details(employees, filiais, codigos)
    if df.empty:
        return pd.DataFrame(columns=["Filial", "Código", "Evento", "Total"])
    # description of a code may vary between layouts; keep the first seen
    out = (
        df.groupby(["Filial", "Código"], sort=True)
        .agg(Evento=("Evento", "first"), Total=("Valor", "sum"))
        .reset_index()
    )
    return out
